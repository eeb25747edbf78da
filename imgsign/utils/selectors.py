"""Label-selector syntax validation for signature annotations.

Annotations are matched by label selectors when signatures are verified, so
their keys must follow label key syntax: an optional DNS subdomain prefix and
a name segment, separated by ``/``. Values follow label value syntax.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

LABEL_NAME_MAX_LENGTH = 63
LABEL_VALUE_MAX_LENGTH = 63
DNS1123_SUBDOMAIN_MAX_LENGTH = 253

_QUALIFIED_NAME_RE = re.compile(r"([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9]")
_LABEL_VALUE_RE = re.compile(r"(([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9])?")
_DNS1123_SUBDOMAIN_RE = re.compile(r"[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*")

_NAME_PATTERN_MSG = (
    "name part must consist of alphanumeric characters, '-', '_' or '.', "
    "and must start and end with an alphanumeric character"
)
_VALUE_PATTERN_MSG = (
    "a valid label must be an empty string or consist of alphanumeric characters, "
    "'-', '_' or '.', and must start and end with an alphanumeric character"
)
_PREFIX_PATTERN_MSG = (
    "prefix part must be a lowercase RFC 1123 subdomain: lowercase alphanumeric "
    "characters, '-' or '.', starting and ending with an alphanumeric character"
)


class SelectorErrorKind(str, Enum):
    """Categories of label-selector syntax complaints."""

    KEY_FORMAT = "key_format"
    KEY_PREFIX = "key_prefix"
    KEY_NAME_TOO_LONG = "key_name_too_long"
    KEY_NAME_PATTERN = "key_name_pattern"
    VALUE_TOO_LONG = "value_too_long"
    VALUE_PATTERN = "value_pattern"


@dataclass(frozen=True, slots=True)
class FieldError:
    """A single syntax complaint about one selector entry."""

    kind: SelectorErrorKind
    field: str
    value: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: Invalid value: {self.value!r}: {self.message}"


def validate_label_key(key: str) -> list[FieldError]:
    """Return syntax complaints for a label key."""

    def error(kind: SelectorErrorKind, message: str) -> FieldError:
        return FieldError(kind=kind, field="key", value=key, message=message)

    parts = key.split("/")
    if len(parts) == 1:
        prefix, name = "", parts[0]
    elif len(parts) == 2:
        prefix, name = parts
        if not prefix:
            return [error(SelectorErrorKind.KEY_PREFIX, "prefix part must be non-empty")]
    else:
        return [
            error(
                SelectorErrorKind.KEY_FORMAT,
                "a qualified name must consist of an optional DNS subdomain prefix "
                "and a name, separated by a single '/'",
            )
        ]

    errors: list[FieldError] = []
    if prefix:
        if len(prefix) > DNS1123_SUBDOMAIN_MAX_LENGTH:
            errors.append(
                error(
                    SelectorErrorKind.KEY_PREFIX,
                    f"prefix part must be no more than {DNS1123_SUBDOMAIN_MAX_LENGTH} characters",
                )
            )
        if not _DNS1123_SUBDOMAIN_RE.fullmatch(prefix):
            errors.append(error(SelectorErrorKind.KEY_PREFIX, _PREFIX_PATTERN_MSG))

    if not name:
        errors.append(error(SelectorErrorKind.KEY_NAME_PATTERN, "name part must be non-empty"))
        return errors
    if len(name) > LABEL_NAME_MAX_LENGTH:
        errors.append(
            error(
                SelectorErrorKind.KEY_NAME_TOO_LONG,
                f"name part must be no more than {LABEL_NAME_MAX_LENGTH} characters",
            )
        )
    if not _QUALIFIED_NAME_RE.fullmatch(name):
        errors.append(error(SelectorErrorKind.KEY_NAME_PATTERN, _NAME_PATTERN_MSG))
    return errors


def validate_label_value(key: str, value: str) -> list[FieldError]:
    """Return syntax complaints for the value of ``key``."""

    errors: list[FieldError] = []
    field = f"values[{key}]"
    if len(value) > LABEL_VALUE_MAX_LENGTH:
        errors.append(
            FieldError(
                kind=SelectorErrorKind.VALUE_TOO_LONG,
                field=field,
                value=value,
                message=f"must be no more than {LABEL_VALUE_MAX_LENGTH} characters",
            )
        )
    if not _LABEL_VALUE_RE.fullmatch(value):
        errors.append(
            FieldError(
                kind=SelectorErrorKind.VALUE_PATTERN,
                field=field,
                value=value,
                message=_VALUE_PATTERN_MSG,
            )
        )
    return errors


def validate_match_labels(match: Mapping[str, str]) -> list[FieldError]:
    """Validate every ``key in (value)`` requirement implied by ``match``.

    Entries are checked in sorted key order so error output is stable.
    """

    errors: list[FieldError] = []
    for key in sorted(match):
        errors.extend(validate_label_key(key))
        errors.extend(validate_label_value(key, match[key]))
    return errors


def filter_errors(
    errors: Iterable[FieldError],
    ignore: Iterable[SelectorErrorKind],
) -> list[FieldError]:
    """Drop errors whose kind is listed in ``ignore``."""

    ignored = frozenset(ignore)
    return [err for err in errors if err.kind not in ignored]
