"""
JSON Renderer - Stable machine-readable output for CLI commands.

Every command run with --json prints exactly one JSON document:

    {"meta": {"command": ..., "status": "success", ...}, "data": {...}}
    {"meta": {"command": ..., "status": "error", ...}, "error": {...}}

Anything the command would otherwise print is captured so it cannot
corrupt the document.
"""

import io
import json
from contextlib import contextmanager, redirect_stdout
from typing import Any, Iterator

import click
from pydantic import BaseModel

from .. import __version__
from ..core.exceptions import InvalidDocumentError


class JsonRenderer:
    def __init__(self, command: str):
        self.command = command
        self.captured = ""

    @contextmanager
    def capture(self) -> Iterator[None]:
        """Swallow stray stdout while the command body runs."""
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            yield
        self.captured = buffer.getvalue()

    def _meta(self, status: str) -> dict:
        return {"command": self.command, "status": status, "version": __version__}

    def render_success(self, data: Any) -> None:
        if isinstance(data, BaseModel):
            payload = data.model_dump(mode="json")
        else:
            payload = data
        click.echo(json.dumps({"meta": self._meta("success"), "data": payload}, default=str))

    def render_error(self, error: Exception) -> None:
        error_type = "invalid_input" if isinstance(error, InvalidDocumentError) else type(error).__name__
        click.echo(json.dumps({
            "meta": self._meta("error"),
            "error": {"type": error_type, "message": str(error)},
        }))
