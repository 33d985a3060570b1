"""Plain string codecs and file-backed text (PAC scripts, team JSON configs)."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from nmprops.codecs.base import BaseCodec
from nmprops.core.errors import FileReadError, InvalidSyntaxError, Utf8Error
from nmprops.parsers.tokens import resolve_choice

LOGGER = logging.getLogger(__name__)

FILE_PREFIX = "file://"


class StringCodec(BaseCodec):
    """String with an optional legal-value set (unique prefixes accepted) and normalizer."""

    def __init__(
        self,
        *,
        values: tuple[str, ...] = (),
        normalizer: Callable[[str], str] | None = None,
        default: str | None = None,
    ) -> None:
        self._values = values
        self.normalizer = normalizer
        self._default = default

    def default(self) -> str | None:
        return self._default

    def parse(self, text: str) -> str:
        if self.normalizer is not None:
            text = self.normalizer(text)
        if self._values:
            return resolve_choice(text, self._values)
        return text

    def values(self) -> tuple[str, ...] | None:
        return self._values or None


class FileTextCodec(BaseCodec):
    """Text given inline or read from a file.

    `file://PATH` forces a file read and `inline_prefix` (e.g. `js://`) forces
    inline text. Without a prefix the value is read as a file when that succeeds
    and used inline otherwise.
    """

    def __init__(
        self,
        *,
        what: str,
        inline_prefix: str,
        check: Callable[[str], bool],
        invalid: str,
        invalid_inline: str,
    ) -> None:
        self.what = what
        self.inline_prefix = inline_prefix
        self.check = check
        self.invalid = invalid
        self.invalid_inline = invalid_inline

    def _read(self, path: str) -> str | None:
        try:
            raw = Path(path).read_bytes()
        except (OSError, ValueError):
            return None
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            raise Utf8Error(f"file '{path}' contains non-valid utf-8") from None
        if "\0" in text:
            raise Utf8Error(f"file '{path}' contains non-valid utf-8")
        return text

    def parse(self, text: str) -> str:
        forced_file = text.startswith(FILE_PREFIX)
        forced_inline = text.startswith(self.inline_prefix)
        if forced_file:
            text = text[len(FILE_PREFIX):]
        elif forced_inline:
            text = text[len(self.inline_prefix):]

        filename: str | None = None
        if not forced_inline:
            contents = self._read(text)
            if contents is None and forced_file:
                raise FileReadError(f"cannot read {self.what} from file '{text}'")
            if contents is not None:
                LOGGER.debug("Read %s from %s", self.what, text)
                filename, text = text, contents

        if not self.check(text):
            if filename:
                raise InvalidSyntaxError(f"'{filename}' does not contain a valid {self.invalid}")
            raise InvalidSyntaxError(self.invalid_inline)
        return text
