"""Document processor and command line tests."""

from unittest.mock import patch

import pytest
import typer
from typer.testing import CliRunner

from docchat.app.processor import DocumentProcessor, ProcessResult, app, parse_assignments
from docchat.data.errors import NoPlaceholdersError
from docchat.data.models import Placeholder
from tests.conftest import build_docx, document_text

runner = CliRunner()


@pytest.fixture
def mock_placeholders():
    """Placeholder list."""
    return [
        Placeholder(name="CompanyName", original_text="{CompanyName}"),
        Placeholder(name="Date", original_text="[Date]"),
    ]


@pytest.fixture
def processor():
    """Processor instance."""
    return DocumentProcessor()


@pytest.fixture
def template_path(tmp_path, sample_template):
    path = tmp_path / "agreement.docx"
    path.write_bytes(sample_template)
    return path


@patch("docchat.data.document_io.DocumentIO.load_document")
@patch("docchat.service.parser.PlaceholderExtractor.normalize")
@patch("docchat.service.filler.DocumentRenderer.render")
@patch("docchat.data.document_io.DocumentIO.save_document")
def test_process_success(mock_save, mock_render, mock_normalize, mock_load, processor, mock_placeholders):
    """Collaborators are called in order and the result is reported."""
    mock_load.return_value = b"raw"
    mock_normalize.return_value = (b"normalized", mock_placeholders)
    mock_render.return_value = b"completed"
    values = {"CompanyName": "Acme Inc", "Date": "01/15/2024"}

    result = processor.process("test_input.docx", "test_output.docx", values)

    assert result.success is True
    assert result.placeholder_count == 2
    assert result.output_path == "test_output.docx"
    assert result.report_path == ""

    mock_load.assert_called_once_with("test_input.docx")
    mock_normalize.assert_called_once_with(b"raw")
    mock_render.assert_called_once_with(b"normalized", values)
    mock_save.assert_called_once_with(b"completed", "test_output.docx")
    assert all(p.filled for p in mock_placeholders)


@patch("docchat.data.document_io.DocumentIO.load_document")
@patch("docchat.service.parser.PlaceholderExtractor.normalize")
def test_process_error(mock_normalize, mock_load, processor):
    """Failures end up in the result instead of raising."""
    mock_load.return_value = b"raw"
    mock_normalize.side_effect = NoPlaceholdersError("no placeholders")

    result = processor.process("test_input.docx", "test_output.docx", {})

    assert result.success is False
    assert result.error_message == "no placeholders"
    assert result.placeholder_count == 0
    assert "Processing failed" in result.report


def test_process_writes_document_and_report(processor, template_path, tmp_path):
    output = tmp_path / "out" / "filled.docx"

    result = processor.process(
        str(template_path), str(output), {"CompanyName": "Acme Inc", "Date": "01/15/2024"}, write_report=True
    )

    assert result.success is True
    assert "Acme Inc" in document_text(output.read_bytes())
    report = (tmp_path / "out" / "filled.md").read_text(encoding="utf-8")
    assert "2 of 2 placeholders filled" in report
    assert "- Value: Acme Inc" in report


def test_process_missing_value(processor, template_path, tmp_path):
    result = processor.process(str(template_path), str(tmp_path / "filled.docx"), {"CompanyName": "Acme Inc"})

    assert result.success is False
    assert "Date" in result.error_message


def test_process_missing_file(processor, tmp_path):
    result = processor.process(str(tmp_path / "nope.docx"), str(tmp_path / "out.docx"), {})

    assert result.success is False


def test_report_text():
    result = ProcessResult(output_path="o.docx", report_path="o.md", placeholder_count=3, success=True)

    assert "Filled 3 placeholders" in result.report
    assert "Report file: o.md" in result.report


def test_parse_assignments():
    assert parse_assignments(["Name=Ann", "Note=a=b", " Date =01/15/2024"]) == {
        "Name": "Ann",
        "Note": "a=b",
        "Date": "01/15/2024",
    }
    with pytest.raises(typer.BadParameter):
        parse_assignments(["novalue"])


def test_cli_inspect(template_path):
    result = runner.invoke(app, ["inspect", str(template_path)])

    assert result.exit_code == 0
    assert "1. CompanyName" in result.output
    assert "2. Date" in result.output


def test_cli_inspect_rejects_template_without_placeholders(tmp_path):
    path = tmp_path / "empty.docx"
    path.write_bytes(build_docx("Nothing here"))

    result = runner.invoke(app, ["inspect", str(path)])

    assert result.exit_code == 1


def test_cli_fill(template_path, tmp_path):
    output = tmp_path / "filled.docx"

    result = runner.invoke(app, [
        "fill", str(template_path),
        "--set", "CompanyName=Acme Inc",
        "--set", "Date=01/15/2024",
        "--output-path", str(output),
    ])

    assert result.exit_code == 0
    assert "01/15/2024" in document_text(output.read_bytes())


def test_cli_chat(template_path, tmp_path):
    output = tmp_path / "chatted.docx"

    result = runner.invoke(
        app,
        ["chat", str(template_path), "--output-path", str(output)],
        input="Acme Inc\n01/15/2024\nmaybe later\nyes\n",
    )

    assert result.exit_code == 0
    text = document_text(output.read_bytes())
    assert "Acme Inc" in text
    assert "{Date}" not in text
