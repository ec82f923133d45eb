"""Command line template filling."""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import typer
from loguru import logger

from docchat.config.settings import settings
from docchat.data.document_io import DocumentIO
from docchat.data.models import Session
from docchat.data.report_generator import ReportGenerator
from docchat.service.conversation import ConversationService, contextual_question
from docchat.service.filler import DocumentRenderer
from docchat.service.parser import PlaceholderExtractor


@dataclass
class ProcessResult:
    """Processing result."""

    output_path: str
    report_path: str
    placeholder_count: int
    success: bool
    error_message: Optional[str] = None

    @property
    def report(self) -> str:
        """Human readable summary.

        Returns:
            summary string
        """
        if not self.success:
            return f"Processing failed: {self.error_message}"

        lines = [
            "Processing succeeded!",
            f"- Filled {self.placeholder_count} placeholders",
            f"- Output file: {self.output_path}",
        ]
        if self.report_path:
            lines.append(f"- Report file: {self.report_path}")
        return "\n".join(lines)


class DocumentProcessor:
    """Fills a template file from a value mapping."""

    def __init__(self) -> None:
        self.document_io = DocumentIO()
        self.extractor = PlaceholderExtractor()
        self.renderer = DocumentRenderer()
        self.report_generator = ReportGenerator()
        logger.info("Document processor initialised")

    def process(
        self,
        input_path: str,
        output_path: str,
        values: Dict[str, str],
        write_report: bool = False,
    ) -> ProcessResult:
        """Fill a template.

        Args:
            input_path: template path
            output_path: completed document path
            values: placeholder name to value
            write_report: also write a markdown report beside the output

        Returns:
            processing result, failures included
        """
        try:
            logger.info(f"Processing template: {input_path}")

            package = self.document_io.load_document(input_path)
            normalized, placeholders = self.extractor.normalize(package)
            for placeholder in placeholders:
                if placeholder.name in values:
                    placeholder.fill(values[placeholder.name])

            completed = self.renderer.render(normalized, values)
            self.document_io.save_document(completed, output_path)

            report_path = ""
            if write_report:
                report_path = str(Path(output_path).with_suffix(".md"))
                self.report_generator.generate_report(placeholders, report_path)

            logger.info("Template processed")
            return ProcessResult(
                output_path=output_path,
                report_path=report_path,
                placeholder_count=len(placeholders),
                success=True,
            )

        except (ValueError, OSError) as e:
            logger.error(f"Processing template failed: {e}")
            return ProcessResult(
                output_path=output_path,
                report_path="",
                placeholder_count=0,
                success=False,
                error_message=str(e),
            )


def parse_assignments(assignments: List[str]) -> Dict[str, str]:
    """Turn ``NAME=VALUE`` strings into a mapping."""
    values = {}
    for assignment in assignments:
        name, sep, value = assignment.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Expected NAME=VALUE, got '{assignment}'")
        values[name.strip()] = value
    return values


def default_output_path(input_path: str) -> str:
    input_file = Path(input_path)
    return str(input_file.parent / f"{input_file.stem}_filled{input_file.suffix}")


# command line interface
app = typer.Typer(help="Fill .docx templates through a guided conversation.")


@app.command()
def inspect(
    input_path: str = typer.Argument(..., help="Template .docx path"),
) -> None:
    """List the placeholders of a template and the question each gets."""
    try:
        package = DocumentIO.load_document(input_path)
        _, placeholders = PlaceholderExtractor().normalize(package)
    except (ValueError, OSError) as e:
        typer.echo(typer.style(str(e), fg=typer.colors.RED))
        raise typer.Exit(code=1)

    for i, placeholder in enumerate(placeholders, 1):
        typer.echo(f"{i}. {placeholder.name}  ({placeholder.original_text})")
        typer.echo(f"   {contextual_question(placeholder.name)}")


@app.command()
def fill(
    input_path: str = typer.Argument(..., help="Template .docx path"),
    assignments: Optional[List[str]] = typer.Option(None, "--set", "-s", help="Placeholder value as NAME=VALUE, repeatable"),
    output_path: str = typer.Option(None, help="Output path, defaults to 'input_filled.docx'"),
    report: bool = typer.Option(False, help="Also write a markdown fill report"),
) -> None:
    """Fill a template non-interactively."""
    if not output_path:
        output_path = default_output_path(input_path)

    processor = DocumentProcessor()
    result = processor.process(input_path, output_path, parse_assignments(assignments or []), report)

    if result.success:
        typer.echo(typer.style(result.report, fg=typer.colors.GREEN))
    else:
        typer.echo(typer.style(result.report, fg=typer.colors.RED))
        raise typer.Exit(code=1)


@app.command()
def chat(
    input_path: str = typer.Argument(..., help="Template .docx path"),
    output_path: str = typer.Option(None, help="Output path, defaults to 'input_filled.docx'"),
) -> None:
    """Fill a template by answering one question per placeholder."""
    if not output_path:
        output_path = default_output_path(input_path)

    try:
        package = DocumentIO.load_document(input_path)
        normalized, placeholders = PlaceholderExtractor().normalize(package)
    except (ValueError, OSError) as e:
        typer.echo(typer.style(str(e), fg=typer.colors.RED))
        raise typer.Exit(code=1)

    session = Session(session_id="cli", package=normalized, placeholders=placeholders, filename=input_path)
    conversation = ConversationService()
    reply = conversation.start(session)
    while not reply.ready_to_generate:
        answer = typer.prompt(reply.message)
        reply = conversation.handle_message(session, answer)

    try:
        completed = DocumentRenderer().render(session.package, session.values())
        DocumentIO.save_document(completed, output_path)
    except ValueError as e:
        typer.echo(typer.style(str(e), fg=typer.colors.RED))
        raise typer.Exit(code=1)
    typer.echo(typer.style(f"Document saved: {output_path}", fg=typer.colors.GREEN))


@app.command()
def serve(
    host: str = typer.Option(settings.server.host, help="Bind address"),
    port: int = typer.Option(settings.server.port, help="Port"),
) -> None:
    """Run the HTTP service."""
    import uvicorn

    uvicorn.run("docchat.app.api:app", host=host, port=port, log_level=settings.log.level.lower())


if __name__ == "__main__":
    app()
