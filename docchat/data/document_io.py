"""Word package reading and writing."""

import io
import zipfile
from pathlib import Path
from typing import List, Union

from docx import Document
from docx.document import Document as DocumentObject
from docx.oxml.ns import qn
from loguru import logger
from lxml import etree

from docchat.data.errors import MalformedPackageError

DOCUMENT_PART = "word/document.xml"

W_P = qn("w:p")
W_T = qn("w:t")


class DocumentIO:
    """Word package reading and writing."""

    @staticmethod
    def load_document(file_path: Union[str, Path]) -> bytes:
        """Read a .docx file from disk.

        Args:
            file_path: path to the document

        Returns:
            the raw package bytes

        Raises:
            FileNotFoundError: the file does not exist
            ValueError: unsupported file type
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if file_path.suffix.lower() not in ['.docx']:
            raise ValueError(f"Unsupported file type: {file_path.suffix}")

        package = file_path.read_bytes()
        logger.info(f"Loaded document: {file_path} ({len(package)} bytes)")
        return package

    @staticmethod
    def save_document(package: bytes, output_path: Union[str, Path]) -> None:
        """Write package bytes to disk.

        Args:
            package: package bytes
            output_path: destination file

        Raises:
            ValueError: the write failed
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            output_path.write_bytes(package)
            logger.info(f"Saved document: {output_path}")
        except OSError as e:
            logger.error(f"Saving document failed: {e}")
            raise ValueError(f"Saving document failed: {e}")

    @staticmethod
    def open_package(package: bytes) -> DocumentObject:
        """Open package bytes as a python-docx Document.

        Raises:
            MalformedPackageError: not a zip, no document part, or unreadable XML
        """
        try:
            with zipfile.ZipFile(io.BytesIO(package)) as archive:
                names = archive.namelist()
        except zipfile.BadZipFile as e:
            raise MalformedPackageError(f"Invalid .docx file, not a zip archive: {e}") from e

        if DOCUMENT_PART not in names:
            raise MalformedPackageError(f"Invalid .docx file, {DOCUMENT_PART} is missing")

        try:
            return Document(io.BytesIO(package))
        except Exception as e:
            logger.error(f"Opening package failed: {e}")
            raise MalformedPackageError(f"Invalid .docx file: {e}") from e

    @staticmethod
    def read_part(package: bytes, part_name: str = DOCUMENT_PART) -> bytes:
        """Raw bytes of one archive entry."""
        try:
            with zipfile.ZipFile(io.BytesIO(package)) as archive:
                return archive.read(part_name)
        except (zipfile.BadZipFile, KeyError) as e:
            raise MalformedPackageError(f"Cannot read {part_name}: {e}") from e

    @staticmethod
    def replace_part(package: bytes, part_name: str, data: bytes) -> bytes:
        """Return a copy of the package with one entry replaced.

        Every other entry keeps its content and compression settings; the
        central directory is rebuilt.
        """
        output = io.BytesIO()
        with zipfile.ZipFile(io.BytesIO(package)) as source, \
                zipfile.ZipFile(output, "w") as target:
            for info in source.infolist():
                content = data if info.filename == part_name else source.read(info.filename)
                target.writestr(info, content)
        return output.getvalue()

    @staticmethod
    def serialize_document(doc: DocumentObject) -> bytes:
        """Serialize the main document part of an opened Document."""
        return etree.tostring(doc.element, encoding="UTF-8", xml_declaration=True, standalone=True)

    @staticmethod
    def as_utf8(xml: bytes) -> bytes:
        """Return an XML part encoded as UTF-8.

        Parts already in UTF-8 are returned as is, others (OOXML allows UTF-16)
        are re-serialized.

        Raises:
            MalformedPackageError: the part is not well-formed XML
        """
        try:
            root = etree.fromstring(xml)
        except etree.XMLSyntaxError as e:
            raise MalformedPackageError(f"Invalid .docx file, unreadable XML: {e}") from e
        encoding = (root.getroottree().docinfo.encoding or "UTF-8").upper()
        if encoding in ("UTF-8", "UTF8"):
            return xml
        logger.info(f"Re-encoding {encoding} document XML as UTF-8")
        return etree.tostring(root.getroottree(), encoding="UTF-8", xml_declaration=True, standalone=True)

    @staticmethod
    def paragraph_text_nodes(doc: DocumentObject) -> List[List[etree._Element]]:
        """Group the ``w:t`` nodes of the body by the paragraph that owns them.

        Covers body paragraphs, table cells and text boxes. A node belongs to
        its nearest ``w:p`` ancestor only, so text box content is not counted
        twice. Paragraphs without text are skipped.
        """
        groups = []
        for para in doc.element.body.iter(W_P):
            nodes = [
                node for node in para.iter(W_T)
                if next(node.iterancestors(W_P), None) is para
            ]
            if nodes:
                groups.append(nodes)
        return groups

    @classmethod
    def extract_document_text(cls, doc: DocumentObject) -> str:
        """Flattened, tag-stripped document text, one line per paragraph."""
        return "\n".join(
            "".join(node.text or "" for node in nodes)
            for nodes in cls.paragraph_text_nodes(doc)
        )
