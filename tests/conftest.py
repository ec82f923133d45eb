"""Shared fixtures: .docx templates built in memory with python-docx."""

import io
import zipfile
from typing import List, Optional, Sequence, Union

import pytest
from docx import Document
from lxml import etree

from docchat.data.document_io import DOCUMENT_PART, DocumentIO

Paragraph = Union[str, Sequence[str]]


def build_docx(*paragraphs: Paragraph, table: Optional[List[List[str]]] = None) -> bytes:
    """Build a .docx package.

    A string becomes a single-run paragraph, a list of strings becomes one
    paragraph with one run per item (to split tokens across runs).
    """
    doc = Document()
    for paragraph in paragraphs:
        if isinstance(paragraph, str):
            doc.add_paragraph(paragraph)
        else:
            para = doc.add_paragraph()
            for run_text in paragraph:
                para.add_run(run_text)
    if table:
        docx_table = doc.add_table(rows=len(table), cols=len(table[0]))
        for row, values in zip(docx_table.rows, table):
            for cell, value in zip(row.cells, values):
                cell.text = value
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def document_text(package: bytes) -> str:
    """Visible text of a package: paragraphs, then table cells."""
    doc = Document(io.BytesIO(package))
    lines = [para.text for para in doc.paragraphs]
    for table in doc.tables:
        for row in table.rows:
            for cell in row.cells:
                lines.append(cell.text)
    return "\n".join(lines)


def zip_entries(package: bytes) -> dict:
    with zipfile.ZipFile(io.BytesIO(package)) as archive:
        return {name: archive.read(name) for name in archive.namelist()}


@pytest.fixture
def sample_template() -> bytes:
    """Template with {CompanyName} and {Date}."""
    return build_docx(
        "SERVICE AGREEMENT",
        "This agreement is made by {CompanyName} on {Date}.",
        "Signed for {CompanyName}.",
    )


def with_document_xml(package: bytes, transform) -> bytes:
    """Copy of ``package`` whose document XML went through ``transform(bytes) -> bytes``."""
    xml = DocumentIO.read_part(package, DOCUMENT_PART)
    return DocumentIO.replace_part(package, DOCUMENT_PART, transform(xml))


def utf16_document(package: bytes) -> bytes:
    """Copy of ``package`` with its document XML stored as UTF-16."""
    def recode(xml):
        tree = etree.fromstring(xml).getroottree()
        return etree.tostring(tree, encoding="UTF-16", xml_declaration=True, standalone=True)
    return with_document_xml(package, recode)
