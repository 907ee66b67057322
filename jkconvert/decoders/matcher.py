"""Structured text matcher.

Applies one regular expression repeatedly over a document and turns every
match into a :class:`DecodedRecord`. Capture groups can be bound to a name
and to a sub-decoder (another matcher, anything with a ``parse(text)``
method, or a plain callable such as ``float``).
"""
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Pattern, Union
import logging
import re

from .base import DecodedRecord, SubDecodeFailed

logger = logging.getLogger(__name__)

FULL_MATCH = "_"

SubDecoder = Union["TextMatcher", Callable[[str], Any]]


@dataclass(frozen=True)
class GroupBinding:
    """Name and optional sub-decoder attached to one capture group."""
    name: Optional[str]
    decoder: Optional[SubDecoder] = None

    def decode(self, text: str) -> Any:
        decoder = self.decoder
        if decoder is None:
            return text
        if hasattr(decoder, "parse"):
            return decoder.parse(text)
        return decoder(text)


class TextMatcherBuilder:
    """Fluent builder for :class:`TextMatcher`."""

    def __init__(self):
        self._groups: List[GroupBinding] = []
        self._regex: Optional[Pattern] = None

    def with_regex(self, regex: Union[str, Pattern], flags: int = 0) -> "TextMatcherBuilder":
        self._regex = re.compile(regex, flags) if isinstance(regex, str) else regex
        return self

    def with_group(self, name: Optional[str], decoder: Optional[SubDecoder] = None) -> "TextMatcherBuilder":
        self._groups.append(GroupBinding(name, decoder))
        return self

    def bake(self) -> "TextMatcher":
        if self._regex is None:
            raise ValueError("Invalid matcher configuration: no regex")
        if len(self._groups) > self._regex.groups:
            raise ValueError(
                f"Invalid matcher configuration: {len(self._groups)} bindings "
                f"for {self._regex.groups} capture groups"
            )
        return TextMatcher(self._regex, self._groups)


class TextMatcher:
    """Repeated regex matcher producing one record per match."""

    def __init__(self, regex: Union[str, Pattern], groups: Optional[List[GroupBinding]] = None):
        self.regex = re.compile(regex) if isinstance(regex, str) else regex
        self.groups = list(groups or [])
        # Regex-level (?P<name>...) groups, keyed by zero-based position
        self._regex_names = {index - 1: name for name, index in self.regex.groupindex.items()}

    @staticmethod
    def builder() -> TextMatcherBuilder:
        return TextMatcherBuilder()

    def __repr__(self) -> str:
        return f"TextMatcher({self.regex.pattern!r})"

    def parse(self, text: str) -> List[DecodedRecord]:
        """Return a record for every non-overlapping match, left to right."""
        records = []
        pos = 0
        end = len(text)
        while pos <= end:
            match = self.regex.search(text, pos)
            if match is None:
                break
            records.append(self._record(match))
            if match.end() > match.start():
                pos = match.end()
            else:
                pos = match.end() + 1
        logger.debug(f"{self!r}: {len(records)} matches")
        return records

    def first(self, text: str) -> Optional[DecodedRecord]:
        """Record for the first match only, or None."""
        match = self.regex.search(text)
        return self._record(match) if match else None

    def _record(self, match) -> DecodedRecord:
        record = DecodedRecord()
        record[FULL_MATCH] = match.group(0)
        for position, raw in enumerate(match.groups()):
            binding = self.groups[position] if position < len(self.groups) else None
            value = raw
            if raw is not None and binding is not None:
                try:
                    value = binding.decode(raw)
                except Exception as e:
                    raise SubDecodeFailed(binding.name or position, raw) from e
            name = binding.name if binding is not None and binding.name else self._regex_names.get(position)
            if name is not None:
                record[name] = value
            record[position] = value
        return record
