"""HTTP client for the registry-adjacent signing service."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests

from imgsign.app.ports import (
    ImageDetails,
    RegistryAuth,
    RegistryPort,
    SignatureConfirmation,
    SignOptions,
)
from imgsign.errors import ResolutionError, SubmissionError
from imgsign.utils.crypto import encode_bytes

logger = logging.getLogger(__name__)


class HTTPRegistryClient(RegistryPort):
    """Talks to the signing service's image endpoints.

    No retries are attempted; each request is bounded by ``timeout``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def _image_url(self, reference: str, subresource: str) -> str:
        return f"{self.base_url}/v1/images/{quote(reference, safe='')}/{subresource}"

    def _post(self, url: str, body: dict[str, Any]) -> requests.Response:
        logger.debug("POST %s", url)
        return self._session.post(url, json=body, timeout=self.timeout)

    def resolve_image_digest(self, reference: str, auth: RegistryAuth | None) -> ImageDetails:
        url = self._image_url(reference, "details")
        try:
            response = self._post(url, {"auth": auth.to_wire() if auth else None})
        except requests.RequestException as exc:
            raise ResolutionError(f"failed to resolve image {reference}: {exc}") from exc

        if response.status_code == 404:
            raise ResolutionError(f"image not found: {reference}")
        if not response.ok:
            raise ResolutionError(
                f"failed to resolve image {reference}: "
                f"HTTP {response.status_code}: {response.text.strip()}"
            )

        try:
            body = response.json()
            return ImageDetails(
                digest=body["digest"],
                resolved_identity=body.get("id") or body["digest"],
                is_local=bool(body.get("local", False)),
            )
        except (ValueError, KeyError, TypeError) as exc:
            raise ResolutionError(f"malformed image details for {reference}: {exc}") from exc

    def submit_signature(
        self,
        reference: str,
        payload: bytes,
        signature_b64: str,
        options: SignOptions,
    ) -> SignatureConfirmation:
        url = self._image_url(reference, "signature")
        body = {
            "payload": encode_bytes(payload),
            "signatureB64": signature_b64,
            "publicKey": options.public_key_pem or "",
            "auth": options.auth.to_wire() if options.auth else None,
        }
        try:
            response = self._post(url, body)
        except requests.RequestException as exc:
            raise SubmissionError(f"failed to submit signature for {reference}: {exc}") from exc

        if not response.ok:
            raise SubmissionError(
                f"signing service rejected signature for {reference}: "
                f"HTTP {response.status_code}: {response.text.strip()}"
            )

        try:
            return SignatureConfirmation(signature_digest=response.json()["signatureDigest"])
        except (ValueError, KeyError, TypeError) as exc:
            raise SubmissionError(
                f"malformed confirmation from signing service for {reference}: {exc}"
            ) from exc
