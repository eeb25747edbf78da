"""Port interfaces for the imgsign application layer.

These protocol interfaces define contracts for adapters.
Signing logic depends on these ports, never on concrete implementations.
"""

__all__ = [
    "ImageDetails",
    "ImportedKey",
    "KeyLoaderPort",
    "PassphraseCallback",
    "RegistryAuth",
    "RegistryPort",
    "SignatureConfirmation",
    "SignerPort",
    "SignOptions",
]

from imgsign.app.ports.registry import (
    ImageDetails,
    RegistryAuth,
    RegistryPort,
    SignatureConfirmation,
    SignOptions,
)
from imgsign.app.ports.signer import ImportedKey, KeyLoaderPort, PassphraseCallback, SignerPort
