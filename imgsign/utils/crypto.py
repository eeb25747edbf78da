"""Encoding helpers for signatures and public keys."""

from __future__ import annotations

import base64
import hashlib

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.types import PublicKeyTypes


def encode_bytes(data: bytes) -> str:
    """Encode binary data (signatures, payloads) for JSON transport."""
    return base64.b64encode(data).decode("utf-8")


def decode_bytes(encoded: str) -> bytes:
    """Decode data produced by :func:`encode_bytes`."""
    return base64.b64decode(encoded.encode("utf-8"))


def pem_encode_public_key(public_key: PublicKeyTypes) -> tuple[bytes, str]:
    """Encode ``public_key`` as SubjectPublicKeyInfo PEM.

    Returns:
        Tuple of PEM bytes and the ``sha256:`` fingerprint of the DER encoding.
    """
    pem = public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    der = public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return pem, f"sha256:{hashlib.sha256(der).hexdigest()}"
