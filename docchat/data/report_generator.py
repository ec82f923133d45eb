"""Fill report generator."""

from pathlib import Path
from typing import List, Union

from loguru import logger

from docchat.data.models import Placeholder


class ReportGenerator:
    """Writes a markdown summary of a filled template."""

    def generate_report(self, placeholders: List[Placeholder], output_path: Union[str, Path]) -> None:
        """Write the fill report.

        Args:
            placeholders: placeholders with their values
            output_path: report file path
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        filled = sum(1 for ph in placeholders if ph.filled)
        try:
            with open(output_path, "w", encoding="utf-8") as f:
                f.write("# Template fill report\n\n")
                f.write(f"{filled} of {len(placeholders)} placeholders filled\n\n")

                for i, ph in enumerate(placeholders, 1):
                    f.write(f"## Placeholder {i}: {ph.name}\n\n")
                    f.write(f"- Token: `{ph.original_text}`\n")
                    if ph.filled:
                        f.write(f"- Value: {ph.value}\n\n")
                    else:
                        f.write("- Value: (not filled)\n\n")
                    f.write("---\n\n")

            logger.info(f"Report written: {output_path}")
        except OSError as e:
            logger.error(f"Writing report failed: {e}")
            raise ValueError(f"Writing report failed: {e}")
