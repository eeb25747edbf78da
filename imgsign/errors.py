"""Error taxonomy for image signing.

Every failure aborts the signing operation. Callers catch :class:`ImageSignError`
to report a failure; the subclasses tell where in the sequence it happened.
"""

from __future__ import annotations


class ImageSignError(RuntimeError):
    """Base class for all signing failures."""


class ConfigurationError(ImageSignError):
    """Raised for missing or malformed caller input, before any I/O happens."""


class ResolutionError(ImageSignError):
    """Raised when an image reference cannot be resolved to a content digest."""


class KeyLoadError(ImageSignError):
    """Raised when no usable signer can be built from the supplied key."""


class UnsupportedKeyFormatError(KeyLoadError):
    """Raised by the key loader when the key uses an encoding it cannot read.

    The key resolver treats this as a cue to import the key into the native
    encoding and retry once.
    """


class PassphraseError(KeyLoadError):
    """Raised when the private key passphrase cannot be obtained."""


class SubmissionError(ImageSignError):
    """Raised when the signing service rejects the signature or is unreachable."""


class InvalidReferenceError(ValueError):
    """Raised when an image reference cannot be parsed."""
