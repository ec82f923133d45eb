"""Regex token detectors for the three placeholder syntaxes."""

import re
from typing import List, Pattern

from loguru import logger

from docchat.data.models import Placeholder
from docchat.data.placeholder_detector.base_detector import PlaceholderDetector

# leftovers of markup that a sloppy tag strip can leak into a token
_MARKUP_FRAGMENTS = ("<", ">", "w:")


def is_valid_name(name: str) -> bool:
    """Whether a trimmed token body can be a placeholder name."""
    return bool(name) and not any(fragment in name for fragment in _MARKUP_FRAGMENTS)


class TokenDetector(PlaceholderDetector):
    """Detects placeholders written as a delimited token.

    The first capture group of ``pattern`` is the placeholder name. Tokens
    never span a line, i.e. a paragraph break in the flattened text.
    """

    pattern: Pattern

    def detect(self, text: str) -> List[Placeholder]:
        placeholders = []
        seen = set()

        for match in self.pattern.finditer(text):
            name = match.group(1).strip()
            if not is_valid_name(name):
                logger.debug(f"Skipping token that looks like markup: {match.group(0)!r}")
                continue
            if name in seen:
                continue
            seen.add(name)
            placeholders.append(Placeholder(name=name, original_text=match.group(0)))

        logger.debug(f"{self.__class__.__name__} found {len(placeholders)} placeholders")
        return placeholders


class CurlyBraceDetector(TokenDetector):
    """``{name}``, the only syntax the renderer substitutes."""

    strategy = "curly"
    pattern = re.compile(r"\{([^}\n]+)\}")


class DollarBracketDetector(TokenDetector):
    """``$[name]``."""

    strategy = "dollar_bracket"
    pattern = re.compile(r"\$\[([^\]\n]+)\]")


class BracketDetector(TokenDetector):
    """``[name]``."""

    strategy = "bracket"
    pattern = re.compile(r"\[([^\]\n]+)\]")
