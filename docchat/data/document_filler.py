"""Document filler."""

from typing import Dict, List, Set, Tuple

from docx.document import Document as DocumentObject
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from loguru import logger
from lxml import etree

from docchat.data.document_io import DocumentIO
from docchat.data.placeholder_detector import BracketDetector, CurlyBraceDetector, is_valid_name

XML_SPACE = qn("xml:space")


class DocumentFiller:
    """Substitutes ``{name}`` tokens in the text nodes of a document."""

    def __init__(self):
        self.pattern = CurlyBraceDetector.pattern

    def referenced_names(self, doc: DocumentObject) -> List[str]:
        """Names of every curly token in the document, in order, without duplicates."""
        names = []
        for nodes in DocumentIO.paragraph_text_nodes(doc):
            text = "".join(node.text or "" for node in nodes)
            for match in self.pattern.finditer(text):
                name = match.group(1).strip()
                if is_valid_name(name) and name not in names:
                    names.append(name)
        return names

    def unconverted_names(self, doc: DocumentObject, values: Dict[str, str]) -> List[str]:
        """Names in ``values`` still written as ``[name]`` or ``$[name]``.

        Only curly tokens are substituted, so these would stay in the output.
        """
        text = DocumentIO.extract_document_text(doc)
        return [p.name for p in BracketDetector().detect(text) if p.name in values]

    def fill_document(self, doc: DocumentObject, values: Dict[str, str]) -> int:
        """Replace every token whose name is in ``values``.

        Tokens whose name is missing from ``values`` are left untouched;
        callers that need full coverage check ``referenced_names`` first.

        Args:
            doc: opened Document, modified in place
            values: placeholder name to value

        Returns:
            number of replaced occurrences
        """
        replaced = 0
        for nodes in DocumentIO.paragraph_text_nodes(doc):
            replaced += self._fill_paragraph(nodes, values)
        logger.info(f"Replaced {replaced} placeholder occurrences")
        return replaced

    def _fill_paragraph(self, nodes: List[etree._Element], values: Dict[str, str]) -> int:
        """Fill all tokens of one paragraph, tokens may span several runs."""
        ranges = []
        full_text = ""
        for node in nodes:
            start = len(full_text)
            full_text += node.text or ""
            ranges.append((start, len(full_text)))

        matches = [
            m for m in self.pattern.finditer(full_text)
            if m.group(1).strip() in values
        ]
        if not matches:
            return 0

        touched: Set[int] = set()
        # right to left keeps the offsets of earlier matches valid
        for match in reversed(matches):
            value = str(values[match.group(1).strip()])
            value = value.replace("\r\n", "\n").replace("\r", "\n")
            touched.update(self._replace_span(nodes, ranges, match.start(), match.end(), value))

        for index in sorted(touched, reverse=True):
            node = nodes[index]
            node.set(XML_SPACE, "preserve")
            if node.text and "\n" in node.text:
                self._expand_line_breaks(node)
        return len(matches)

    @staticmethod
    def _replace_span(
        nodes: List[etree._Element],
        ranges: List[Tuple[int, int]],
        start: int,
        end: int,
        replacement: str,
    ) -> List[int]:
        """Replace paragraph text ``[start, end)`` across text nodes.

        The head node receives the replacement, nodes fully inside the span
        are emptied, the tail node keeps what follows the span.

        Returns:
            indexes of the modified nodes
        """
        touched = []
        for i, (node_start, node_end) in enumerate(ranges):
            if node_end <= start or node_start >= end:
                continue
            node = nodes[i]
            text = node.text or ""
            if node_start <= start:
                # head
                rest = text[end - node_start:] if end <= node_end else ""
                node.text = text[:start - node_start] + replacement + rest
            elif end <= node_end:
                # tail
                node.text = text[end - node_start:]
            else:
                node.text = ""
            touched.append(i)
        return touched

    @staticmethod
    def _expand_line_breaks(node: etree._Element) -> None:
        """Split a text node on newlines into text nodes separated by ``w:br``."""
        parts = node.text.split("\n")
        node.text = parts[0]
        anchor = node
        for part in parts[1:]:
            br = OxmlElement("w:br")
            anchor.addnext(br)
            text_node = OxmlElement("w:t")
            text_node.text = part
            text_node.set(XML_SPACE, "preserve")
            br.addnext(text_node)
            anchor = text_node
