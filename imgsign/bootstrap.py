"""Application bootstrap wiring ports, adapters, and services."""

from __future__ import annotations

from dataclasses import dataclass

from imgsign.app import (
    AnnotationAssembler,
    ImageSignService,
    KeyResolver,
    PassphraseProvider,
)
from imgsign.app.adapters import HTTPRegistryClient, PemKeyLoader
from imgsign.app.ports import KeyLoaderPort, RegistryAuth, RegistryPort
from imgsign.config import Settings, get_settings


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI layer."""

    settings: Settings
    registry_port: RegistryPort
    key_loader: KeyLoaderPort
    passphrase_provider: PassphraseProvider
    key_resolver: KeyResolver
    annotation_assembler: AnnotationAssembler
    sign_service: ImageSignService


def registry_auth_from_settings(settings: Settings) -> RegistryAuth | None:
    """Build registry credentials from settings, None when unconfigured."""

    if not settings.has_registry_credentials():
        return None
    return RegistryAuth(
        username=settings.registry_username or "",
        password=settings.registry_password,
    )


def bootstrap_application(
    settings: Settings | None = None,
    *,
    registry_port: RegistryPort | None = None,
    key_loader: KeyLoaderPort | None = None,
    passphrase_provider: PassphraseProvider | None = None,
) -> ApplicationContainer:
    """Wire a fresh container for one signing invocation.

    Explicit ports override the defaults built from ``settings``.
    """

    active_settings = settings or get_settings()

    registry = registry_port or HTTPRegistryClient(
        active_settings.api_url,
        timeout=active_settings.api_timeout_seconds,
    )
    loader = key_loader or PemKeyLoader()
    passphrase = passphrase_provider or PassphraseProvider(env_var=active_settings.passphrase_env)
    resolver = KeyResolver(key_loader=loader, passphrase=passphrase)
    assembler = AnnotationAssembler(prefix=active_settings.annotation_prefix)

    sign_service = ImageSignService(
        registry_port=registry,
        key_resolver=resolver,
        annotation_assembler=assembler,
        auth=registry_auth_from_settings(active_settings),
    )

    return ApplicationContainer(
        settings=active_settings,
        registry_port=registry,
        key_loader=loader,
        passphrase_provider=passphrase,
        key_resolver=resolver,
        annotation_assembler=assembler,
        sign_service=sign_service,
    )
