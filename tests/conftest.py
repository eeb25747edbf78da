"""Pytest configuration and fixtures."""

from __future__ import annotations

import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

from imgsign.app import AnnotationAssembler, ImageSignService, KeyResolver, PassphraseProvider
from imgsign.app.adapters import PemKeyLoader
from imgsign.app.ports import (
    ImageDetails,
    RegistryAuth,
    SignatureConfirmation,
    SignOptions,
)
from imgsign.config import Settings

PASSPHRASE = b"s3cret"
REMOTE_DIGEST = "sha256:" + "ab" * 32
SIGNATURE_DIGEST = "sha256:" + "5f" * 32


class FakeRegistry:
    """In-memory registry collaborator recording every call."""

    def __init__(self, details: ImageDetails | None = None) -> None:
        self.details = details or ImageDetails(
            digest=REMOTE_DIGEST, resolved_identity=REMOTE_DIGEST
        )
        self.resolve_error: Exception | None = None
        self.submit_error: Exception | None = None
        self.resolved: list[tuple[str, RegistryAuth | None]] = []
        self.submissions: list[dict[str, Any]] = []

    def resolve_image_digest(self, reference: str, auth: RegistryAuth | None) -> ImageDetails:
        self.resolved.append((reference, auth))
        if self.resolve_error is not None:
            raise self.resolve_error
        return self.details

    def submit_signature(
        self,
        reference: str,
        payload: bytes,
        signature_b64: str,
        options: SignOptions,
    ) -> SignatureConfirmation:
        if self.submit_error is not None:
            raise self.submit_error
        self.submissions.append(
            {
                "reference": reference,
                "payload": payload,
                "signature_b64": signature_b64,
                "options": options,
            }
        )
        return SignatureConfirmation(signature_digest=SIGNATURE_DIGEST)


def make_passphrase_provider(
    environ: dict[str, str] | None = None, stdin: bytes = b""
) -> PassphraseProvider:
    """Build a non-interactive provider reading ``stdin`` bytes."""

    return PassphraseProvider(
        environ=environ if environ is not None else {},
        isatty=lambda: False,
        read_stdin=lambda: stdin,
    )


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir)
    finally:
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def override_settings() -> Generator[Settings, None, None]:
    """Provide isolated imgsign settings scoped to tests."""

    import imgsign.config as config_module

    original_settings = getattr(config_module, "_settings", None)

    settings = config_module.Settings(
        _env_file=None,
        api_url="http://signing.test",
        signing_key=None,
        registry_username=None,
        registry_password=None,
    )
    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings


@pytest.fixture
def ec_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def ec_pem(ec_key: ec.EllipticCurvePrivateKey) -> str:
    """Unencrypted PKCS#8 EC key."""
    return ec_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture
def encrypted_ec_pem(ec_key: ec.EllipticCurvePrivateKey) -> str:
    """PKCS#8 EC key encrypted with :data:`PASSPHRASE`."""
    return ec_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.BestAvailableEncryption(PASSPHRASE),
    ).decode("ascii")


@pytest.fixture
def sec1_ec_pem(ec_key: ec.EllipticCurvePrivateKey) -> str:
    """Foreign-format (``EC PRIVATE KEY``) key."""
    return ec_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture
def rsa_pkcs1_pem() -> str:
    """Foreign-format (``RSA PRIVATE KEY``) key."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture
def openssh_ed25519_pem() -> str:
    """Foreign-format (``OPENSSH PRIVATE KEY``) key."""
    key = ed25519.Ed25519PrivateKey.generate()
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.OpenSSH,
        serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture
def fake_registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def sign_service(fake_registry: FakeRegistry) -> ImageSignService:
    """Signing service with a fake registry and an empty, non-interactive stdin."""

    resolver = KeyResolver(key_loader=PemKeyLoader(), passphrase=make_passphrase_provider())
    return ImageSignService(
        registry_port=fake_registry,
        key_resolver=resolver,
        annotation_assembler=AnnotationAssembler(),
    )


@pytest.fixture
def passphrase_factory():
    """Factory for non-interactive passphrase providers."""
    return make_passphrase_provider
