"""Image signing orchestration.

Sequences digest resolution, signer construction, annotation assembly,
signing and submission. Any failure aborts the whole operation; nothing is
retried and nothing is submitted unless every earlier step succeeded.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator

from imgsign.app.annotations import AnnotationAssembler
from imgsign.app.key_resolver import KeyResolver
from imgsign.app.ports import ImageDetails, RegistryAuth, RegistryPort, SignOptions
from imgsign.errors import ConfigurationError, InvalidReferenceError, ResolutionError
from imgsign.utils.crypto import encode_bytes, pem_encode_public_key
from imgsign.utils.references import (
    ImageReference,
    is_local_reference,
    parse_reference,
)

logger = logging.getLogger(__name__)


class SigningTarget(BaseModel):
    """Resolved image that a signature will be bound to."""

    model_config = ConfigDict(frozen=True)

    image: str = Field(..., description="Image reference as supplied by the caller")
    digest_reference: str = Field(..., description="Content-addressed reference that is signed")
    signed_identity: str = Field(..., description="Identity the default annotations key off")
    details: ImageDetails


class SigningResult(BaseModel):
    """Outcome of a signing operation. Immutable once constructed."""

    model_config = ConfigDict(frozen=True)

    image: str
    digest_reference: str
    signed_identity: str
    payload: bytes
    signature_b64: str
    annotations: Mapping[str, str]
    public_key_pem: str | None = None
    signature_digest: str | None = Field(
        default=None, description="Confirmation returned by the signing service"
    )

    @field_validator("annotations", mode="after")
    @classmethod
    def freeze_annotations(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))


class ImageSignService:
    """Signs one image per call.

    All I/O is delegated to the registry port and the key resolver's loader.
    """

    def __init__(
        self,
        *,
        registry_port: RegistryPort,
        key_resolver: KeyResolver,
        annotation_assembler: AnnotationAssembler | None = None,
        auth: RegistryAuth | None = None,
    ) -> None:
        """Initialize the signing service.

        Args:
            registry_port: Digest resolution and signature submission
            key_resolver: Builds the signer from a key source
            annotation_assembler: Builds the annotation set (defaults to stock prefix)
            auth: Registry credentials forwarded to the signing service
        """
        self.registry = registry_port
        self.key_resolver = key_resolver
        self.annotations = annotation_assembler or AnnotationAssembler()
        self.auth = auth

    def validate_request(self, key_source: str | None, overrides: Mapping[str, str] | None) -> None:
        """Reject caller input that can never succeed, before any I/O.

        Raises:
            ConfigurationError: If the key is missing or an annotation key is invalid
        """
        if not key_source:
            raise ConfigurationError("key is required")
        self.annotations.validate_overrides(overrides)

    def resolve_target(self, image: str) -> SigningTarget:
        """Resolve ``image`` to the digest reference and identity to sign.

        Raises:
            ResolutionError: If the digest cannot be resolved and no local
                fallback applies
        """
        local = is_local_reference(image)
        reference: ImageReference | None
        try:
            reference = parse_reference(image)
        except InvalidReferenceError as exc:
            # may still be a local image ID
            if not local:
                raise ResolutionError(str(exc)) from exc
            reference = None

        try:
            details = self.registry.resolve_image_digest(image, self.auth)
        except ResolutionError as exc:
            if not local:
                raise
            logger.debug("Digest lookup for local image %s failed (%s); using its ID", image, exc)
            image_id = image if image.startswith("sha256:") else f"sha256:{image}"
            details = ImageDetails(digest=image_id, resolved_identity=image_id, is_local=True)

        if local or reference is None:
            digest_reference = details.digest
            signed_identity = details.resolved_identity
        else:
            digest_reference = reference.digest_reference(details.digest)
            signed_identity = str(reference)

        return SigningTarget(
            image=image,
            digest_reference=digest_reference,
            signed_identity=signed_identity,
            details=details,
        )

    def sign(
        self,
        image: str,
        key_source: str | None,
        overrides: Mapping[str, str] | None = None,
        *,
        target: SigningTarget | None = None,
    ) -> SigningResult:
        """Sign ``image`` with the key in ``key_source`` and submit the signature.

        Args:
            image: Image reference (tagged, digest-pinned or local ID prefix)
            key_source: Key file path or inline key material
            overrides: Caller annotations layered over the defaults
            target: Previously resolved target, skips digest resolution

        Returns:
            The signing result including the service's confirmation

        Raises:
            ImageSignError: Any failure; the operation is aborted
        """
        self.validate_request(key_source, overrides)

        if target is None:
            target = self.resolve_target(image)

        signer = self.key_resolver.resolve(key_source)
        annotations = self.annotations.assemble(target.signed_identity, overrides)

        payload, signature = signer.sign(target.digest_reference, annotations)
        logger.debug("Payload annotations: %r", dict(annotations))
        signature_b64 = encode_bytes(signature)

        public_key_pem: str | None = None
        public_key = signer.public_key()
        if public_key is not None:
            pem, fingerprint = pem_encode_public_key(public_key)
            public_key_pem = pem.decode("ascii")
            logger.debug("Signing with public key %s", fingerprint)

        result = SigningResult(
            image=image,
            digest_reference=target.digest_reference,
            signed_identity=target.signed_identity,
            payload=payload,
            signature_b64=signature_b64,
            annotations=annotations,
            public_key_pem=public_key_pem,
        )

        confirmation = self.registry.submit_signature(
            image,
            result.payload,
            result.signature_b64,
            SignOptions(auth=self.auth, public_key_pem=result.public_key_pem),
        )
        return result.model_copy(update={"signature_digest": confirmation.signature_digest})
