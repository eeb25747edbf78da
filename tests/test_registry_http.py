"""Tests for the HTTP signing-service client."""

from __future__ import annotations

from typing import Any

import pytest
import requests

from imgsign.app.adapters import HTTPRegistryClient
from imgsign.app.ports import RegistryAuth, SignOptions
from imgsign.errors import ResolutionError, SubmissionError
from imgsign.utils.crypto import decode_bytes

DIGEST = "sha256:" + "ab" * 32


class FakeResponse:
    def __init__(self, status_code: int, body: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._body = body
        self.text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body


class FakeSession:
    def __init__(self, response: FakeResponse | Exception) -> None:
        self.response = response
        self.requests: list[dict[str, Any]] = []

    def post(self, url: str, *, json: Any, timeout: float) -> FakeResponse:
        self.requests.append({"url": url, "json": json, "timeout": timeout})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def _client(session: FakeSession) -> HTTPRegistryClient:
    return HTTPRegistryClient("http://signing.test/", timeout=5.0, session=session)  # type: ignore[arg-type]


def test_resolve_parses_details_and_quotes_reference() -> None:
    session = FakeSession(
        FakeResponse(200, {"digest": DIGEST, "id": "sha256:" + "cd" * 32, "local": True})
    )
    auth = RegistryAuth(username="robot", password="token")

    details = _client(session).resolve_image_digest("ghcr.io/acme/app:1.0", auth)

    assert details.digest == DIGEST
    assert details.resolved_identity == "sha256:" + "cd" * 32
    assert details.is_local is True
    (request,) = session.requests
    assert request["url"] == "http://signing.test/v1/images/ghcr.io%2Facme%2Fapp%3A1.0/details"
    assert request["json"] == {"auth": {"username": "robot", "password": "token"}}
    assert request["timeout"] == 5.0


def test_resolve_defaults_identity_to_digest() -> None:
    session = FakeSession(FakeResponse(200, {"digest": DIGEST}))

    details = _client(session).resolve_image_digest("nginx", None)

    assert details.resolved_identity == DIGEST
    assert details.is_local is False
    assert session.requests[0]["json"] == {"auth": None}


def test_resolve_not_found() -> None:
    session = FakeSession(FakeResponse(404, text="missing"))

    with pytest.raises(ResolutionError, match="image not found: nginx"):
        _client(session).resolve_image_digest("nginx", None)


def test_resolve_server_error_includes_status() -> None:
    session = FakeSession(FakeResponse(401, text="unauthorized\n"))

    with pytest.raises(ResolutionError, match="HTTP 401: unauthorized"):
        _client(session).resolve_image_digest("nginx", None)


def test_resolve_transport_error_is_chained() -> None:
    error = requests.ConnectionError("connection refused")
    session = FakeSession(error)

    with pytest.raises(ResolutionError, match="connection refused") as excinfo:
        _client(session).resolve_image_digest("nginx", None)

    assert excinfo.value.__cause__ is error


def test_resolve_malformed_body() -> None:
    session = FakeSession(FakeResponse(200, {"id": "no digest"}))

    with pytest.raises(ResolutionError, match="malformed image details"):
        _client(session).resolve_image_digest("nginx", None)


def test_submit_posts_payload_signature_and_public_key() -> None:
    session = FakeSession(FakeResponse(201, {"signatureDigest": "sha256:" + "9" * 64}))
    options = SignOptions(public_key_pem="-----BEGIN PUBLIC KEY-----\n...")

    confirmation = _client(session).submit_signature(
        "ghcr.io/acme/app:1.0", b'{"critical":{}}', "c2ln", options
    )

    assert confirmation.signature_digest == "sha256:" + "9" * 64
    (request,) = session.requests
    assert request["url"].endswith("/signature")
    assert decode_bytes(request["json"]["payload"]) == b'{"critical":{}}'
    assert request["json"]["signatureB64"] == "c2ln"
    assert request["json"]["publicKey"] == "-----BEGIN PUBLIC KEY-----\n..."
    assert request["json"]["auth"] is None


def test_submit_rejection_is_a_submission_error() -> None:
    session = FakeSession(FakeResponse(403, text="signature policy violation"))

    with pytest.raises(SubmissionError, match="HTTP 403: signature policy violation"):
        _client(session).submit_signature("nginx", b"{}", "c2ln", SignOptions())


def test_submit_transport_error_is_chained() -> None:
    error = requests.Timeout("read timed out")
    session = FakeSession(error)

    with pytest.raises(SubmissionError) as excinfo:
        _client(session).submit_signature("nginx", b"{}", "c2ln", SignOptions())

    assert excinfo.value.__cause__ is error


def test_submit_malformed_confirmation() -> None:
    session = FakeSession(FakeResponse(200))

    with pytest.raises(SubmissionError, match="malformed confirmation"):
        _client(session).submit_signature("nginx", b"{}", "c2ln", SignOptions())
