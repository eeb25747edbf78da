"""Container image reference parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass

from imgsign.errors import InvalidReferenceError

DEFAULT_REGISTRY = "index.docker.io"
DEFAULT_TAG = "latest"

_COMPONENT_RE = re.compile(r"[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*")
_REGISTRY_RE = re.compile(r"[A-Za-z0-9.-]+(?::[0-9]+)?")
_TAG_RE = re.compile(r"[\w][\w.-]{0,127}")
_DIGEST_RE = re.compile(r"[a-z0-9]+(?:[.+_-][a-z0-9]+)*:[a-fA-F0-9]{32,}")
_LOCAL_PREFIX_RE = re.compile(r"[a-f0-9]{3,64}")


@dataclass(frozen=True, slots=True)
class ImageReference:
    """Parsed, fully-qualified image reference."""

    registry: str
    repository: str
    tag: str | None = None
    digest: str | None = None

    @property
    def context(self) -> str:
        """Return ``registry/repository`` without tag or digest."""
        return f"{self.registry}/{self.repository}"

    def digest_reference(self, digest: str) -> str:
        """Return the content-addressed form of this reference for ``digest``."""
        return f"{self.context}@{digest}"

    def __str__(self) -> str:
        name = self.context
        if self.tag:
            name = f"{name}:{self.tag}"
        if self.digest:
            name = f"{name}@{self.digest}"
        return name


def parse_reference(image: str) -> ImageReference:
    """Parse ``image`` into an :class:`ImageReference`.

    Missing registries default to Docker Hub and missing tags to ``latest``
    (unless a digest pins the reference).

    Raises:
        InvalidReferenceError: If any part of the reference is malformed.
    """
    if not image or image != image.strip():
        raise InvalidReferenceError(f"invalid image reference: {image!r}")

    name, _, digest = image.partition("@")
    if digest and not _DIGEST_RE.fullmatch(digest):
        raise InvalidReferenceError(f"invalid digest in image reference: {image!r}")

    tag: str | None = None
    last_slash = name.rfind("/")
    colon = name.rfind(":")
    if colon > last_slash:
        name, tag = name[:colon], name[colon + 1 :]
        if not _TAG_RE.fullmatch(tag):
            raise InvalidReferenceError(f"invalid tag in image reference: {image!r}")

    parts = name.split("/")
    registry = DEFAULT_REGISTRY
    if len(parts) > 1 and ("." in parts[0] or ":" in parts[0] or parts[0] == "localhost"):
        registry = parts.pop(0)
        if not _REGISTRY_RE.fullmatch(registry):
            raise InvalidReferenceError(f"invalid registry in image reference: {image!r}")

    if not parts or not all(_COMPONENT_RE.fullmatch(part) for part in parts):
        raise InvalidReferenceError(f"invalid repository in image reference: {image!r}")

    if registry == DEFAULT_REGISTRY and len(parts) == 1:
        parts.insert(0, "library")

    if tag is None and not digest:
        tag = DEFAULT_TAG

    return ImageReference(
        registry=registry,
        repository="/".join(parts),
        tag=tag,
        digest=digest or None,
    )


def is_local_reference(image: str) -> bool:
    """Return True when ``image`` is a content-address (prefix) alias of a local image."""
    return image.startswith("sha256:") or bool(_LOCAL_PREFIX_RE.fullmatch(image))

