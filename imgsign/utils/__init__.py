"""Utility modules for common operations."""

from imgsign.utils.crypto import decode_bytes, encode_bytes, pem_encode_public_key
from imgsign.utils.references import (
    ImageReference,
    is_local_reference,
    parse_reference,
)
from imgsign.utils.selectors import (
    FieldError,
    SelectorErrorKind,
    filter_errors,
    validate_label_key,
    validate_label_value,
    validate_match_labels,
)

__all__ = [
    "decode_bytes",
    "encode_bytes",
    "pem_encode_public_key",
    "ImageReference",
    "is_local_reference",
    "parse_reference",
    "FieldError",
    "SelectorErrorKind",
    "filter_errors",
    "validate_label_key",
    "validate_label_value",
    "validate_match_labels",
]
