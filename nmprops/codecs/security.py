"""WEP key handling and 802.1x certificate/private-key values."""

from __future__ import annotations

import logging
import re
import string
from pathlib import Path

from nmprops.codecs.base import BaseCodec
from nmprops.core.errors import FileReadError, InvalidSyntaxError
from nmprops.core.model import PropertyDescriptor, RenderMode
from nmprops.core.setting import SettingGroup

LOGGER = logging.getLogger(__name__)

WEP_KEY_TYPE_UNKNOWN = 0
WEP_KEY_TYPE_KEY = 1
WEP_KEY_TYPE_PASSPHRASE = 2
WEP_KEY_TYPE_NAMES = {
    WEP_KEY_TYPE_UNKNOWN: "unknown",
    WEP_KEY_TYPE_KEY: "key",
    WEP_KEY_TYPE_PASSPHRASE: "passphrase",
}
WEP_KEY_TYPE = "wep-key-type"
WEP_TX_KEYIDX = "wep-tx-keyidx"
WEP_KEY_NAMES = ("wep-key0", "wep-key1", "wep-key2", "wep-key3")
_WEP_PASSPHRASE_MAX = 64

PKCS11_PREFIX = "pkcs11:"
PATH_PREFIX = "file://"
_PEM_CERT_RE = re.compile(rb"-----BEGIN (?:TRUSTED )?CERTIFICATE-----")
_PEM_KEY_RE = re.compile(rb"-----BEGIN (?:[A-Z]+ )*PRIVATE KEY-----")
# DER certificates, keys and PKCS#12 bundles all start with an ASN.1 SEQUENCE.
_DER_SEQUENCE = 0x30


def wep_key_valid(key: str, key_type: int) -> bool:
    """Whether `key` is usable as a WEP key of `key_type`; unknown accepts either."""
    if key_type == WEP_KEY_TYPE_UNKNOWN:
        return wep_key_valid(key, WEP_KEY_TYPE_KEY) or wep_key_valid(key, WEP_KEY_TYPE_PASSPHRASE)
    if key_type == WEP_KEY_TYPE_KEY:
        if len(key) in (10, 26):
            return all(ch in string.hexdigits for ch in key)
        if len(key) in (5, 13):
            return all(ch.isascii() and ch.isprintable() for ch in key)
        return False
    if key_type == WEP_KEY_TYPE_PASSPHRASE:
        return 0 < len(key) <= _WEP_PASSPHRASE_MAX
    return False


def normalize_wep_key(text: str) -> str:
    if not wep_key_valid(text, WEP_KEY_TYPE_UNKNOWN):
        raise InvalidSyntaxError(f"'{text}' is not valid")
    return text


def assign_wep_key(descriptor: PropertyDescriptor, group: SettingGroup, text: str) -> None:
    """Store a WEP key, settling `wep-key-type` and moving `wep-tx-keyidx` to this key.

    A key that fits the configured type keeps that type. Otherwise the type is
    guessed: a 5/13 character or 10/26 hex digit key is a key, anything else up
    to 64 characters a passphrase.
    """
    key = descriptor.codec.parse(text)
    current = group.get(WEP_KEY_TYPE)
    guessed = WEP_KEY_TYPE_KEY if wep_key_valid(key, WEP_KEY_TYPE_KEY) else WEP_KEY_TYPE_PASSPHRASE

    if current != WEP_KEY_TYPE_UNKNOWN and current != guessed:
        if not wep_key_valid(key, current):
            raise InvalidSyntaxError(
                f"'{key}' not compatible with {WEP_KEY_TYPE} '{WEP_KEY_TYPE_NAMES[current]}', "
                f"please change the key or set the right {WEP_KEY_TYPE} first."
            )
        guessed = current

    index = int(descriptor.name[-1])
    LOGGER.info("WEP key is guessed to be of '%s'", WEP_KEY_TYPE_NAMES[guessed])
    group.set(descriptor.name, key)
    group.set(WEP_KEY_TYPE, guessed)
    if group.get(WEP_TX_KEYIDX) != index:
        LOGGER.info("WEP key index set to '%d'", index)
        group.set(WEP_TX_KEYIDX, index)


def assign_wep_key_type(descriptor: PropertyDescriptor, group: SettingGroup, text: str) -> None:
    key_type = descriptor.codec.parse(text)
    if key_type in WEP_KEY_TYPE_NAMES:
        for name in WEP_KEY_NAMES:
            key = group.get(name)
            if key and not wep_key_valid(key, key_type):
                LOGGER.warning(
                    "'%s' is not compatible with '%s' type, please change or delete the key.",
                    name,
                    WEP_KEY_TYPE_NAMES[key_type],
                )
    group.set(descriptor.name, key_type)


def split_private_key(text: str) -> tuple[str, str | None]:
    """Split `PATH [PASSWORD]` on the first run of blanks."""
    parts = re.split(r"[ \t]+", text.strip(), maxsplit=1)
    password = parts[1] if len(parts) > 1 else None
    return parts[0], password or None


class CertificateCodec(BaseCodec):
    """A certificate or private key given as a file path or a PKCS#11 URI.

    Paths are stored as absolute `file://` URIs after the file is read and
    recognized as PEM or DER. PKCS#11 URIs are stored as given. A private key may
    be followed by its password, which this codec ignores; `assign_private_key`
    stores it in the sibling `<name>-password` property.
    """

    def __init__(self, *, private_key: bool = False) -> None:
        self.private_key = private_key
        self.what = "private key" if private_key else "certificate"

    def parse(self, text: str) -> str:
        value = text.strip()
        if self.private_key:
            value, _ = split_private_key(value)
        if value.startswith(PKCS11_PREFIX):
            return value
        if value.startswith(PATH_PREFIX):
            value = value[len(PATH_PREFIX):]
        if not value:
            raise InvalidSyntaxError(f"'{text.strip()}' is not a valid {self.what} path")

        path = Path(value).absolute()
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise FileReadError(f"failed to read {self.what} file '{value}': {exc.strerror}") from None
        if not self._recognized(data):
            raise InvalidSyntaxError(f"'{value}' does not contain a valid {self.what}")
        LOGGER.debug("Read %s from %s", self.what, path)
        return f"{PATH_PREFIX}{path}"

    def _recognized(self, data: bytes) -> bool:
        if data[:1] == bytes([_DER_SEQUENCE]):
            return True
        pattern = _PEM_KEY_RE if self.private_key else _PEM_CERT_RE
        return pattern.search(data) is not None

    def render(self, value: str | None, mode: RenderMode) -> str:
        if not value:
            return ""
        if value.startswith(PATH_PREFIX):
            return value[len(PATH_PREFIX):]
        return value


def assign_private_key(descriptor: PropertyDescriptor, group: SettingGroup, text: str) -> None:
    path, password = split_private_key(text)
    value = descriptor.codec.parse(path)
    group.set(descriptor.name, value)
    if password is not None:
        group.set(f"{descriptor.name}-password", password)
