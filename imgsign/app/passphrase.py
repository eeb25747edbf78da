"""Private key passphrase acquisition.

Sources are tried in priority order:

1. The passphrase environment variable, used verbatim even when empty.
2. An interactive prompt with echo suppressed, when stdin is a terminal.
3. Everything readable from stdin until EOF (piped input), untrimmed.

An empty result is normalized to ``None`` ("no passphrase"), which key loaders
treat differently from an empty passphrase.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable, Mapping

import typer

from imgsign.config import DEFAULT_PASSPHRASE_ENV
from imgsign.errors import PassphraseError

logger = logging.getLogger(__name__)

PROMPT_TEXT = "Enter password for private key"


def _stdin_isatty() -> bool:
    try:
        return sys.stdin.isatty()
    except (AttributeError, ValueError):
        return False


def _read_stdin() -> bytes:
    return sys.stdin.buffer.read()


def _prompt_hidden(text: str) -> str:
    return typer.prompt(text, hide_input=True, default="", show_default=False)


class PassphraseProvider:
    """Lazily resolves the key passphrase, at most once per invocation."""

    def __init__(
        self,
        *,
        env_var: str = DEFAULT_PASSPHRASE_ENV,
        environ: Mapping[str, str] | None = None,
        isatty: Callable[[], bool] = _stdin_isatty,
        prompt: Callable[[str], str] = _prompt_hidden,
        read_stdin: Callable[[], bytes] = _read_stdin,
    ) -> None:
        self.env_var = env_var
        self._environ = environ if environ is not None else os.environ
        self._isatty = isatty
        self._prompt = prompt
        self._read_stdin = read_stdin
        self._resolved = False
        self._value: bytes | None = None

    def get(self) -> bytes | None:
        """Return the passphrase, or None when no passphrase was supplied.

        Raises:
            PassphraseError: If the selected source cannot be read
        """
        if not self._resolved:
            raw = self._read_source()
            self._value = raw if raw else None
            self._resolved = True
        return self._value

    def callback(self, confirm: bool = False) -> bytes | None:
        """Adapter matching :data:`~imgsign.app.ports.PassphraseCallback`."""
        return self.get()

    def _read_source(self) -> bytes:
        value = self._environ.get(self.env_var)
        if value is not None:
            logger.debug("Using key passphrase from $%s", self.env_var)
            return value.encode("utf-8")

        if self._isatty():
            try:
                return self._prompt(PROMPT_TEXT).encode("utf-8")
            except (typer.Abort, EOFError) as exc:
                raise PassphraseError("passphrase prompt aborted") from exc

        logger.debug("Reading key passphrase from stdin")
        try:
            return self._read_stdin()
        except OSError as exc:
            raise PassphraseError(f"failed to read passphrase from stdin: {exc}") from exc
