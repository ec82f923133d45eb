"""Placeholder detector base class."""

from abc import ABC, abstractmethod
from typing import List

from docchat.data.models import Placeholder


class PlaceholderDetector(ABC):
    """Placeholder detector base class."""

    # short strategy name used in logs
    strategy: str = "base"

    @abstractmethod
    def detect(self, text: str) -> List[Placeholder]:
        """Find placeholders in flattened document text.

        Args:
            text: tag-stripped document text

        Returns:
            unique placeholders in encounter order
        """
        pass
