"""Template parsing service."""

from typing import List, Tuple

from loguru import logger

from docchat.data.document_handler import DocumentHandler
from docchat.data.errors import NoPlaceholdersError
from docchat.data.models import Placeholder


class PlaceholderExtractor:
    """Normalizes a template and lists its placeholders."""

    def __init__(self) -> None:
        self.document_handler = DocumentHandler()

    def normalize(self, package: bytes) -> Tuple[bytes, List[Placeholder]]:
        """Normalize placeholder syntax and extract placeholders.

        Args:
            package: raw .docx bytes

        Returns:
            tuple of the normalized package bytes and the unique placeholders
            in document order

        Raises:
            MalformedPackageError: the bytes are not a readable Word package
            NoPlaceholdersError: no placeholder survived filtering
        """
        # fails fast on anything that is not a Word package
        self.document_handler.open_package(package)

        normalized = self.document_handler.convert_placeholder_format(package)
        doc = self.document_handler.open_package(normalized)

        placeholders = self.document_handler.find_placeholders(doc)
        if not placeholders:
            raise NoPlaceholdersError(
                "No placeholders found in document. Please ensure your document "
                "contains placeholders in {curly} or [bracket] format."
            )

        logger.info(f"Template parsed, {len(placeholders)} placeholders")
        return normalized, placeholders
