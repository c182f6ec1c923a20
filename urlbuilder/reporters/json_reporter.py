"""JSON reporter for structured output.

Writes the generated URL and its metadata to a file so scripts can pick
it up without scraping console output.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from urlbuilder.models import GeneratedUrl
from urlbuilder.reporters.base import Reporter


class JsonReporter(Reporter):
    """JSON reporter for structured output.

    Args:
        output_path: Optional file path to write JSON output
    """

    def __init__(self, output_path: Optional[str] = None):
        self.output_path = output_path

    def on_url_generated(self, result: GeneratedUrl) -> dict:
        """Generate and write the JSON document.

        Returns:
            The generated JSON data as a dictionary
        """
        output = {"timestamp": self._timestamp()}
        output.update(result.to_dict())

        if self.output_path:
            self._write_to_file(output)

        return output

    def on_error(self, message: str) -> dict:
        """Write an error document in place of the URL."""
        output = {"timestamp": self._timestamp(), "error": message}

        if self.output_path:
            self._write_to_file(output)

        return output

    def _timestamp(self) -> str:
        return datetime.now(timezone.utc).isoformat()

    def _write_to_file(self, output: dict) -> None:
        """Write JSON output to file.

        Args:
            output: The data to write
        """
        path = Path(self.output_path)

        # Create parent directories if needed
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(output, f, indent=2)
