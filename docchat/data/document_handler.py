"""Word template handling."""

import re
from pathlib import Path
from typing import Dict, List, Union

from docx.document import Document as DocumentObject
from loguru import logger
from lxml import etree

from docchat.data.document_filler import DocumentFiller
from docchat.data.document_io import DOCUMENT_PART, DocumentIO
from docchat.data.models import Placeholder
from docchat.data.placeholder_detector import (
    BracketDetector,
    CurlyBraceDetector,
    DollarBracketDetector,
)

# [name] and $[name], matched over raw XML so a token may straddle run tags
BRACKET_SYNTAX = re.compile(r"\$?\[([^\]]+)\]")


class DocumentHandler:
    """Word template handler."""

    def __init__(self) -> None:
        self.document_io = DocumentIO()
        # precedence order, the first detector with results wins
        self.detectors = [
            CurlyBraceDetector(),
            DollarBracketDetector(),
            BracketDetector(),
        ]
        self.filler = DocumentFiller()

    def load_document(self, file_path: Union[str, Path]) -> bytes:
        return self.document_io.load_document(file_path)

    def save_document(self, package: bytes, output_path: Union[str, Path]) -> None:
        self.document_io.save_document(package, output_path)

    def open_package(self, package: bytes) -> DocumentObject:
        return self.document_io.open_package(package)

    def extract_document_text(self, doc: DocumentObject) -> str:
        return self.document_io.extract_document_text(doc)

    def convert_placeholder_format(self, package: bytes) -> bytes:
        """Rewrite ``[name]`` and ``$[name]`` to ``{name}`` in the document XML.

        A textual substitution over the raw XML. If the result would not
        parse, the package is returned unchanged.

        Args:
            package: package bytes, already known to open

        Returns:
            package bytes with only the curly syntax left
        """
        raw = self.document_io.read_part(package, DOCUMENT_PART)
        xml = self.document_io.as_utf8(raw).decode("utf-8")

        converted, count = BRACKET_SYNTAX.subn(r"{\1}", xml)
        if not count:
            return package

        converted_bytes = converted.encode("utf-8")
        try:
            etree.fromstring(converted_bytes)
        except etree.XMLSyntaxError as e:
            logger.warning(f"Converting placeholder format broke the XML, keeping original: {e}")
            return package

        logger.info(f"Converted {count} bracket placeholders to curly syntax")
        return self.document_io.replace_part(package, DOCUMENT_PART, converted_bytes)

    def find_placeholders(self, doc: DocumentObject) -> List[Placeholder]:
        """Find the placeholders of a document.

        Detectors run in precedence order and only the first non-empty
        result is used, results are never merged.

        Args:
            doc: Document object

        Returns:
            placeholders in document order
        """
        text = self.extract_document_text(doc)
        logger.debug(f"Document text length: {len(text)} characters")

        for detector in self.detectors:
            placeholders = detector.detect(text)
            if placeholders:
                logger.info(
                    f"{detector.strategy} syntax: {len(placeholders)} placeholders "
                    f"{[p.name for p in placeholders]}"
                )
                return placeholders

        logger.info("No placeholders found")
        return []

    def fill_document(self, doc: DocumentObject, values: Dict[str, str]) -> int:
        return self.filler.fill_document(doc, values)
