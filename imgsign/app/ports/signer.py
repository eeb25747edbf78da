"""Signer and key-loader port interfaces for the signature primitive."""

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Protocol

from cryptography.hazmat.primitives.asymmetric.types import PublicKeyTypes
from pydantic import BaseModel, ConfigDict, Field

PassphraseCallback = Callable[[bool], bytes | None]
"""Callback returning the key passphrase; the flag asks for confirmation."""


class ImportedKey(BaseModel):
    """Private key converted from a foreign encoding into the native one."""

    model_config = ConfigDict(frozen=True)

    private_bytes: bytes = Field(..., description="Native-encoding private key (PEM)")
    password: bytes | None = Field(
        default=None, description="Passphrase protecting private_bytes, None when unencrypted"
    )


class SignerPort(Protocol):
    """Port interface for an entity holding private key material.

    One signer is constructed per signing invocation and discarded afterwards.

    Side effects: None (pure computation).
    """

    def sign(self, digest_reference: str, annotations: Mapping[str, str]) -> tuple[bytes, bytes]:
        """Sign an image digest together with its annotations.

        Args:
            digest_reference: Content-addressed image reference (``repo@sha256:...``)
            annotations: Metadata embedded in the signed payload

        Returns:
            Tuple of the signed payload bytes and the raw signature bytes
        """
        ...

    def public_key(self) -> PublicKeyTypes | None:
        """Return the public key that verifies this signer's signatures, if known."""
        ...


class KeyLoaderPort(Protocol):
    """Port interface for turning key material into a :class:`SignerPort`.

    Implementations raise :class:`~imgsign.errors.UnsupportedKeyFormatError`
    when the key uses an encoding they cannot read directly, and
    :class:`~imgsign.errors.KeyLoadError` for any other failure.

    Side effects: Reads key files.
    """

    def load_from_file(self, path: Path, passphrase: PassphraseCallback) -> SignerPort:
        """Load a signer from a key file.

        Args:
            path: Location of the private key
            passphrase: Invoked only when the key is encrypted
        """
        ...

    def load_from_bytes(self, data: bytes, passphrase: PassphraseCallback) -> SignerPort:
        """Load a signer from raw (native-encoding) key bytes.

        Args:
            data: Private key bytes
            passphrase: Invoked only when the key is encrypted
        """
        ...

    def import_foreign_key(self, source: str, passphrase: PassphraseCallback) -> ImportedKey:
        """Convert a foreign-format key into the native encoding.

        The converted key is protected by the same passphrase as the source,
        or left unencrypted when the source was.

        Args:
            source: Key file path or inline key text
            passphrase: Invoked only when the foreign key is encrypted
        """
        ...
