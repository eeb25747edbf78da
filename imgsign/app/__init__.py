"""Application layer for imgsign.

This layer orchestrates signing logic without direct network I/O.
All side effects are delegated to adapters via port interfaces.
"""

__all__ = [
    "AnnotationAssembler",
    "ImageSignService",
    "KeyClassification",
    "KeyResolver",
    "PassphraseProvider",
    "SigningResult",
    "SigningTarget",
]

from imgsign.app.annotations import AnnotationAssembler
from imgsign.app.key_resolver import KeyClassification, KeyResolver
from imgsign.app.passphrase import PassphraseProvider
from imgsign.app.sign_service import ImageSignService, SigningResult, SigningTarget
