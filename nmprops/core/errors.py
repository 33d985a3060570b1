"""Domain-specific errors for nmprops."""

from __future__ import annotations

from nmprops.core.model import ErrorKind


class NmpropsError(Exception):
    """Base error for nmprops."""


class TableValidationError(NmpropsError):
    """Raised when a descriptor table does not conform to schema or semantics."""


class TableLoadError(NmpropsError):
    """Raised when loading descriptor table sources fails."""


class PropertyNotFoundError(NmpropsError):
    """Raised when a setting or property is not present in the registry."""


class UnsupportedOperationError(NmpropsError):
    """Raised when an operation does not apply to a property (e.g. remove on a scalar)."""


class PropertyError(NmpropsError):
    """Base error for rejected property text. Carries an `ErrorKind`."""

    kind = ErrorKind.INVALID_SYNTAX


class InvalidSyntaxError(PropertyError):
    """Raised when a token does not match the grammar."""

    kind = ErrorKind.INVALID_SYNTAX


class OutOfRangeError(PropertyError):
    """Raised when a numeric value is outside its declared bounds."""

    kind = ErrorKind.OUT_OF_RANGE


class UnknownKeyError(PropertyError):
    """Raised when a key is not in the declared legal set."""

    kind = ErrorKind.UNKNOWN_KEY


class UnknownOptionError(UnknownKeyError):
    """Raised when an option/value name is not in the declared legal set."""

    kind = ErrorKind.UNKNOWN_OPTION


class OrderingViolationError(PropertyError):
    """Raised when a positional rule is broken (e.g. next hop after attributes)."""

    kind = ErrorKind.ORDERING_VIOLATION


class SumInvariantViolationError(PropertyError):
    """Raised when a percentage array does not total 100."""

    kind = ErrorKind.SUM_INVARIANT_VIOLATION


class FileReadError(PropertyError):
    """Raised when a referenced file is missing or unreadable."""

    kind = ErrorKind.FILE_READ


class Utf8Error(PropertyError):
    """Raised when file contents are not valid UTF-8."""

    kind = ErrorKind.UTF8
