"""Key source classification and signer construction.

A key source is a single string that may be inline key material (e.g. PEM
text) or a path to a key file. It is classified by an ordered set of guards:

1. Longer than 255 characters, or an embedded newline: raw key material.
2. Otherwise the path is stat'ed. Not found: raw key material. A directory
   or any other stat failure is an error.
3. An existing non-directory path: key file.

If the signature primitive reports an unsupported key encoding, the key is
imported into the native encoding and construction is retried once.
"""

from __future__ import annotations

import logging
import os
import stat as stat_module
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from imgsign.app.passphrase import PassphraseProvider
from imgsign.app.ports import KeyLoaderPort, SignerPort
from imgsign.errors import KeyLoadError, UnsupportedKeyFormatError

logger = logging.getLogger(__name__)

MAX_KEY_PATH_LENGTH = 255


class KeyClassification(str, Enum):
    """What kind of key material a key source holds."""

    RAW_KEY_MATERIAL = "raw_key_material"
    FILE_PATH = "file_path"
    UNSUPPORTED = "unsupported"


def looks_like_key_material(key_source: str) -> bool:
    """Return True when ``key_source`` cannot be a file path."""
    return len(key_source) > MAX_KEY_PATH_LENGTH or "\n" in key_source.strip("\n")


class KeyResolver:
    """Turns a key source into exactly one :class:`SignerPort`."""

    def __init__(
        self,
        *,
        key_loader: KeyLoaderPort,
        passphrase: PassphraseProvider,
        stat: Callable[[str], os.stat_result] = os.stat,
    ) -> None:
        self.loader = key_loader
        self.passphrase = passphrase
        self._stat = stat

    def classify(self, key_source: str) -> KeyClassification:
        """Classify ``key_source`` without loading it.

        Raises:
            KeyLoadError: If the path is a directory or cannot be stat'ed
        """
        if looks_like_key_material(key_source):
            return KeyClassification.RAW_KEY_MATERIAL

        try:
            info = self._stat(key_source)
        except (FileNotFoundError, NotADirectoryError):
            return KeyClassification.RAW_KEY_MATERIAL
        except (OSError, ValueError) as exc:
            raise KeyLoadError(f"failed to stat key file: {exc}") from exc

        if stat_module.S_ISDIR(info.st_mode):
            raise KeyLoadError("invalid key file: is directory")
        return KeyClassification.FILE_PATH

    def resolve(self, key_source: str) -> SignerPort:
        """Build a signer from ``key_source``.

        Raises:
            KeyLoadError: If no signer can be constructed
        """
        classification = self.classify(key_source)
        logger.debug("Key source classified as %s", classification.value)

        try:
            return self._construct(classification, key_source)
        except UnsupportedKeyFormatError as exc:
            logger.debug(
                "Key source reclassified as %s (%s), importing...",
                KeyClassification.UNSUPPORTED.value,
                exc,
            )
            return self._construct_imported(key_source)
        except KeyLoadError as exc:
            raise KeyLoadError(f"failed to create signer from private key: {exc}") from exc

    def _construct(self, classification: KeyClassification, key_source: str) -> SignerPort:
        if classification is KeyClassification.FILE_PATH:
            return self.loader.load_from_file(Path(key_source), self.passphrase.callback)
        return self.loader.load_from_bytes(key_source.encode("utf-8"), self.passphrase.callback)

    def _construct_imported(self, key_source: str) -> SignerPort:
        try:
            imported = self.loader.import_foreign_key(key_source, self.passphrase.callback)
        except KeyLoadError as exc:
            raise KeyLoadError(f"failed to import private key: {exc}") from exc

        try:
            return self.loader.load_from_bytes(
                imported.private_bytes, lambda confirm: imported.password
            )
        except KeyLoadError as exc:
            raise KeyLoadError(
                f"failed to create signer from imported private key: {exc}"
            ) from exc
