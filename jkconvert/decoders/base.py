"""Decoder errors, decoded records and non-fatal notices."""
from dataclasses import dataclass
from typing import Any, Optional
import logging

logger = logging.getLogger(__name__)


class DecodeError(Exception):
    """Raised when a buffer or document cannot be decoded."""
    pass


class TruncatedInput(DecodeError):
    """Buffer is shorter than a field or array demands."""

    def __init__(self, field: str, needed: int, available: int, offset: int):
        self.field = field
        self.needed = needed
        self.available = available
        self.offset = offset
        super().__init__(
            f"Truncated input in field '{field}' at offset {offset}: "
            f"need {needed} bytes, {available} available"
        )


class InvalidLength(DecodeError):
    """Computed dynamic length is negative or out of range."""

    def __init__(self, field: str, length: Any, available: Optional[int] = None):
        self.field = field
        self.length = length
        self.available = available
        message = f"Invalid length {length!r} for field '{field}'"
        if available is not None:
            message += f" ({available} bytes remaining)"
        super().__init__(message)


class ValidationFailed(DecodeError):
    """A magic, version or sentinel value did not match."""

    def __init__(self, field: str, expected: Any, actual: Any):
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Validation failed for field '{field}': "
            f"expected {_show(expected)}, got {_show(actual)}"
        )


class SubDecodeFailed(DecodeError):
    """A captured group could not be decoded by its sub-decoder."""

    def __init__(self, group: Any, text: str):
        self.group = group
        self.text = text
        super().__init__(f"Sub-decoder for group {group!r} failed on {text!r}")


class SectionNotFound(DecodeError):
    """An expected text section is absent."""

    def __init__(self, section: str):
        self.section = section
        super().__init__(f"Section '{section}' not found")


class DanglingReference(DecodeError):
    """A surface refers to a vertex or normal that was never decoded."""

    def __init__(self, kind: str, index: int, table_size: int):
        self.kind = kind
        self.index = index
        self.table_size = table_size
        super().__init__(
            f"{kind} index {index} out of range (table has {table_size} entries)"
        )


def _show(value: Any) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        return f"{value:#x}"
    return repr(value)


class DecodedRecord(dict):
    """Ordered field-name -> value mapping produced by the decoders.

    Values can be looked up by name or, for integer keys that are not
    themselves stored, by position in declaration order.
    """

    def __getitem__(self, key):
        if isinstance(key, int) and not isinstance(key, bool) and not dict.__contains__(self, key):
            return self.at(key)
        return dict.__getitem__(self, key)

    def __getattr__(self, name):
        # Lets length callables read sibling fields as attributes
        try:
            return dict.__getitem__(self, name)
        except KeyError:
            raise AttributeError(name) from None

    def at(self, position: int) -> Any:
        """Return the value stored at a declaration-order position."""
        values = list(self.values())
        try:
            return values[position]
        except IndexError:
            raise KeyError(position) from None


@dataclass(frozen=True)
class VertexCountMismatch:
    """A surface lists a different number of vertex refs than it declares."""
    surface_index: int
    declared: int
    parsed: int

    def __str__(self) -> str:
        return (
            f"Surface {self.surface_index} declares {self.declared} vertices "
            f"but lists {self.parsed}"
        )


@dataclass(frozen=True)
class UnknownSubsection:
    """A georesource block whose kind has no extractor."""
    kind: str

    def __str__(self) -> str:
        return f"No parser for subsection '{self.kind}'"
