"""Document rendering tests."""

import re

import pytest

from docchat.data.document_io import DOCUMENT_PART, DocumentIO
from docchat.data.errors import RenderError
from docchat.service.filler import DocumentRenderer
from docchat.service.parser import PlaceholderExtractor
from tests.conftest import build_docx, document_text, utf16_document, with_document_xml, zip_entries


@pytest.fixture
def renderer(tmp_path):
    return DocumentRenderer(output_dir=tmp_path)


def normalized(package: bytes) -> bytes:
    return PlaceholderExtractor().normalize(package)[0]


def test_round_trip(renderer, sample_template):
    completed = renderer.render(
        normalized(sample_template),
        {"CompanyName": "Acme Inc", "Date": "01/15/2024"},
    )

    text = document_text(completed)
    assert "This agreement is made by Acme Inc on 01/15/2024." in text
    assert "Signed for Acme Inc." in text
    assert "{CompanyName}" not in text
    assert "{Date}" not in text


def test_every_occurrence_gets_the_same_value(renderer):
    package = normalized(build_docx("{Name} met {Name}.", "Bye {Name}"))

    text = document_text(renderer.render(package, {"Name": "Bob"}))

    assert text.count("Bob") == 3
    assert "{Name}" not in text


def test_bracket_tokens_are_rendered_after_normalization(renderer):
    package = normalized(build_docx("Investor: [Investor]", "Fee: $[Fee]"))

    text = document_text(renderer.render(package, {"Investor": "Jane Roe", "Fee": "$500"}))

    assert "Investor: Jane Roe" in text
    assert "Fee: $500" in text


def test_token_split_across_runs(renderer):
    package = normalized(build_docx(["Hello {Na", "me}", "!"]))

    text = document_text(renderer.render(package, {"Name": "World"}))

    assert "Hello World!" in text


def test_trimmed_token_is_replaced(renderer):
    package = normalized(build_docx("Party: { Company Name }."))

    text = document_text(renderer.render(package, {"Company Name": "Acme"}))

    assert "Party: Acme." in text


def test_table_cells_are_filled(renderer):
    package = normalized(build_docx("Terms", table=[["Amount", "{Amount}"]]))

    text = document_text(renderer.render(package, {"Amount": "100000"}))

    assert "100000" in text
    assert "{Amount}" not in text


def test_values_are_not_substituted_twice(renderer):
    package = normalized(build_docx("{A} / {B}"))

    text = document_text(renderer.render(package, {"A": "{B}", "B": "x"}))

    assert "{B} / x" in text


def test_xml_special_characters(renderer):
    package = normalized(build_docx("Client: {Client}"))

    completed = renderer.render(package, {"Client": "AT&T <Corp> \"quoted\""})

    assert "Client: AT&T <Corp> \"quoted\"" in document_text(completed)


def test_newlines_become_line_breaks(renderer):
    package = normalized(build_docx("Address: {Address}"))

    completed = renderer.render(package, {"Address": "1 Main St\nSpringfield"})

    xml = DocumentIO.read_part(completed, DOCUMENT_PART).decode("utf-8")
    assert "<w:br/>" in xml
    assert "Address: 1 Main St\nSpringfield" in document_text(completed)


def test_leading_and_trailing_spaces_are_preserved(renderer):
    package = normalized(build_docx(["{Name}", " end"]))

    completed = renderer.render(package, {"Name": "  padded  "})

    assert "  padded   end" in document_text(completed)


def test_auxiliary_parts_are_unchanged(renderer, sample_template):
    package = normalized(sample_template)

    completed = renderer.render(package, {"CompanyName": "Acme Inc", "Date": "today"})

    before, after = zip_entries(package), zip_entries(completed)
    assert list(after) == list(before)
    for name, content in before.items():
        if name != DOCUMENT_PART:
            assert after[name] == content


def test_missing_value_is_a_render_error(renderer, sample_template):
    with pytest.raises(RenderError, match="Date"):
        renderer.render(normalized(sample_template), {"CompanyName": "Acme Inc"})


def test_corrupt_archive_is_a_render_error(renderer):
    with pytest.raises(RenderError):
        renderer.render(b"not a zip", {"Name": "x"})


def test_unstorable_value_is_a_render_error(renderer):
    package = normalized(build_docx("{Name}"))

    with pytest.raises(RenderError):
        renderer.render(package, {"Name": "bad\x00value"})


def test_extra_values_are_ignored(renderer):
    package = normalized(build_docx("Hi {Name}"))

    text = document_text(renderer.render(package, {"Name": "Ann", "Unused": "x"}))

    assert "Hi Ann" in text


def test_render_to_file_keeps_a_copy(renderer, tmp_path, sample_template):
    filename, completed = renderer.render_to_file(
        normalized(sample_template), {"CompanyName": "Acme Inc", "Date": "01/15/2024"}
    )

    assert re.fullmatch(r"completed-document-\d+\.docx", filename)
    assert (tmp_path / filename).read_bytes() == completed


def test_utf16_template_is_filled(renderer):
    package = normalized(utf16_document(build_docx("Hello [Name] there")))

    text = document_text(renderer.render(package, {"Name": "Ann"}))

    assert "Hello Ann there" in text
    assert "[Name]" not in text


def test_bracket_token_left_unconverted_is_a_render_error(renderer):
    package = normalized(with_document_xml(
        build_docx("Hello [Name]"),
        lambda xml: xml.replace(b"<w:t>Hello [Name]</w:t>", b"<w:t><![CDATA[Dear]]> [Name]</w:t>"),
    ))

    with pytest.raises(RenderError, match="Name"):
        renderer.render(package, {"Name": "Ann"})
