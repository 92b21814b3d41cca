"""Shared helpers for exporters."""

from __future__ import annotations

from pathlib import Path


class ExportError(Exception):
    """Error writing a spreadsheet or report file."""

    def __init__(self, kind: str, message: str):
        self.kind = kind
        super().__init__(f"{kind} export failed: {message}")


def resolve_output_path(output: Path | str | None, output_dir: str, filename: str) -> Path:
    """Pick the destination file, creating its parent directory.

    An explicit ``output`` wins; a directory gets ``filename`` appended.
    """
    if output is None:
        path = Path(output_dir) / filename
    else:
        path = Path(output)
        if path.is_dir():
            path = path / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    return path
