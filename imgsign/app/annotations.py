"""Signature annotation assembly and validation."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from imgsign.config import DEFAULT_ANNOTATION_PREFIX
from imgsign.errors import ConfigurationError
from imgsign.utils.selectors import SelectorErrorKind, filter_errors, validate_match_labels

# Values are free-form metadata; only keys must stay selector-addressable.
IGNORED_VALUE_ERRORS: tuple[SelectorErrorKind, ...] = (
    SelectorErrorKind.VALUE_TOO_LONG,
    SelectorErrorKind.VALUE_PATTERN,
)


def parse_annotation_args(entries: list[str] | None) -> dict[str, str]:
    """Parse ``KEY=VALUE`` command-line entries into a mapping.

    Raises:
        ConfigurationError: If an entry has no ``=`` separator
    """
    annotations: dict[str, str] = {}
    for entry in entries or []:
        key, sep, value = entry.partition("=")
        if not sep:
            raise ConfigurationError(f"invalid annotation {entry!r}: expected KEY=VALUE")
        annotations[key] = value
    return annotations


class AnnotationAssembler:
    """Merges system-default annotations with caller overrides."""

    def __init__(self, *, prefix: str = DEFAULT_ANNOTATION_PREFIX) -> None:
        self.prefix = prefix

    @property
    def signed_name_key(self) -> str:
        return f"{self.prefix}/signed-name"

    def default_annotations(self, signed_identity: str) -> dict[str, str]:
        """Return the system-default annotations for ``signed_identity``."""
        return {self.signed_name_key: signed_identity}

    def validate_overrides(self, overrides: Mapping[str, str] | None) -> None:
        """Reject overrides whose keys are not valid label-selector keys.

        Value syntax complaints are ignored.

        Raises:
            ConfigurationError: Listing every remaining complaint
        """
        if not overrides:
            return
        errors = filter_errors(validate_match_labels(overrides), ignore=IGNORED_VALUE_ERRORS)
        if errors:
            details = "; ".join(str(err) for err in errors)
            raise ConfigurationError(f"failed to parse provided annotations: {details}")

    def assemble(
        self,
        signed_identity: str,
        overrides: Mapping[str, str] | None = None,
    ) -> Mapping[str, str]:
        """Validate ``overrides`` and layer them over the defaults.

        Args:
            signed_identity: Identity the signature is bound to
            overrides: Caller-supplied annotations; these win on key collision

        Returns:
            Read-only mapping of the final annotations

        Raises:
            ConfigurationError: If an override key is structurally invalid
        """
        self.validate_overrides(overrides)
        annotations = self.default_annotations(signed_identity)
        annotations.update(overrides or {})
        return MappingProxyType(annotations)
