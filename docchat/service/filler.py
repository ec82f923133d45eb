"""Document rendering service."""

import time
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from loguru import logger

from docchat.config.settings import settings
from docchat.data.document_handler import DocumentHandler
from docchat.data.document_io import DOCUMENT_PART
from docchat.data.errors import MalformedPackageError, RenderError

DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class DocumentRenderer:
    """Fills a normalized template with values."""

    def __init__(self, output_dir: Optional[Union[str, Path]] = None):
        self.document_handler = DocumentHandler()
        self.output_dir = Path(output_dir) if output_dir else settings.document.upload_dir

    def render(self, package: bytes, values: Dict[str, str]) -> bytes:
        """Substitute every placeholder and return the completed package.

        Args:
            package: normalized package bytes
            values: placeholder name to value

        Returns:
            completed package bytes; parts other than the document XML are
            copied unchanged

        Raises:
            RenderError: corrupt package, a placeholder without a value or still
                in bracket syntax, or a value that cannot be stored in XML
        """
        try:
            doc = self.document_handler.open_package(package)
        except MalformedPackageError as e:
            raise RenderError(f"Document generation failed: {e}") from e

        missing = [
            name for name in self.document_handler.filler.referenced_names(doc)
            if name not in values
        ]
        if missing:
            logger.error(f"Missing values for placeholders: {missing}")
            raise RenderError(
                f"Document generation failed: no value for placeholder(s) {', '.join(missing)}"
            )

        unconverted = self.document_handler.filler.unconverted_names(doc, values)
        if unconverted:
            logger.error(f"Placeholders left in bracket syntax: {unconverted}")
            raise RenderError(
                f"Document generation failed: placeholder(s) {', '.join(unconverted)} "
                f"could not be converted to {{name}} syntax"
            )

        try:
            self.document_handler.fill_document(doc, values)
            document_xml = self.document_handler.document_io.serialize_document(doc)
        except ValueError as e:
            # lxml rejects control characters and NUL bytes
            logger.error(f"Filling document failed: {e}")
            raise RenderError(f"Document generation failed: {e}") from e

        return self.document_handler.document_io.replace_part(package, DOCUMENT_PART, document_xml)

    def output_filename(self) -> str:
        """Timestamped name for a completed document."""
        return f"{settings.document.output_filename_prefix}-{int(time.time() * 1000)}.docx"

    def render_to_file(self, package: bytes, values: Dict[str, str]) -> Tuple[str, bytes]:
        """Render and keep a copy in the output directory.

        Returns:
            tuple of the generated filename and the completed package bytes
        """
        completed = self.render(package, values)
        filename = self.output_filename()
        self.document_handler.save_document(completed, self.output_dir / filename)
        return filename, completed
