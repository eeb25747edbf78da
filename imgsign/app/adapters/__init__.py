"""Concrete adapters wiring application ports to built-in implementations."""

from __future__ import annotations

from .pem_keys import PemKeyLoader, PemSigner
from .registry_http import HTTPRegistryClient

__all__ = [
    "HTTPRegistryClient",
    "PemKeyLoader",
    "PemSigner",
]
