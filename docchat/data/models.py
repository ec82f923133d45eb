"""Data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List


class Placeholder:
    """A named field found in a template."""

    def __init__(
        self,
        name: str,
        original_text: str,
        filled: bool = False,
        value: str = "",
    ) -> None:
        """Create a placeholder.

        Args:
            name: trimmed placeholder name, unique within the document
            original_text: the token as matched, e.g. "{ CompanyName }"
            filled: whether a value has been supplied
            value: the supplied value, verbatim
        """
        self.name = name
        self.original_text = original_text
        self.filled = filled
        self.value = value

    def fill(self, value: str) -> None:
        self.value = value
        self.filled = True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Placeholder):
            return NotImplemented
        return (
            self.name == other.name
            and self.original_text == other.original_text
            and self.filled == other.filled
            and self.value == other.value
        )

    def __repr__(self) -> str:
        return (
            f"Placeholder(name='{self.name}', "
            f"original_text='{self.original_text}', "
            f"filled={self.filled}, "
            f"value='{self.value}')"
        )


@dataclass
class Session:
    """Server-side state of one fill conversation."""

    session_id: str
    package: bytes  # normalized package bytes
    placeholders: List[Placeholder]
    filename: str = ""
    filled_count: int = 0
    confirmed: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    last_accessed: datetime = field(default_factory=datetime.now)

    @property
    def all_filled(self) -> bool:
        return all(p.filled for p in self.placeholders)

    def values(self) -> Dict[str, str]:
        """Mapping of filled placeholder names to their values."""
        return {p.name: p.value for p in self.placeholders if p.filled}
