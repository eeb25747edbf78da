"""Registry port interface for digest resolution and signature submission."""

from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class RegistryAuth(BaseModel):
    """Credentials for the registry holding the image."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(..., description="Registry username")
    password: SecretStr | None = Field(default=None, description="Registry password or token")

    def to_wire(self) -> dict[str, str]:
        """Return the plaintext form sent to the signing service."""
        return {
            "username": self.username,
            "password": self.password.get_secret_value() if self.password else "",
        }


class ImageDetails(BaseModel):
    """Result of resolving an image reference to its content digest."""

    model_config = ConfigDict(frozen=True)

    digest: str = Field(..., description="Content digest, e.g. sha256:...")
    resolved_identity: str = Field(..., description="Fully resolved image ID")
    is_local: bool = Field(default=False, description="True if the image only exists locally")


class SignOptions(BaseModel):
    """Options forwarded with a signature submission."""

    model_config = ConfigDict(frozen=True)

    auth: RegistryAuth | None = None
    public_key_pem: str | None = Field(
        default=None, description="PEM public key verifying the signature"
    )


class SignatureConfirmation(BaseModel):
    """Acknowledgement returned by the signing service."""

    model_config = ConfigDict(frozen=True)

    signature_digest: str = Field(..., description="Digest of the stored signature artifact")


class RegistryPort(Protocol):
    """Port interface for the registry-adjacent signing service.

    Adapters own transport concerns (timeouts, authentication headers). They
    do not retry.

    Side effects: Network calls.
    """

    def resolve_image_digest(self, reference: str, auth: RegistryAuth | None) -> ImageDetails:
        """Resolve ``reference`` to its content digest.

        Raises:
            ResolutionError: If the image cannot be resolved
        """
        ...

    def submit_signature(
        self,
        reference: str,
        payload: bytes,
        signature_b64: str,
        options: SignOptions,
    ) -> SignatureConfirmation:
        """Store a signature for ``reference``.

        Raises:
            SubmissionError: If the service rejects the signature or is unreachable
        """
        ...
