"""Autoload diagnostics.

Failures inside the autoloader never raise. They are described by a
``Diagnostic`` record and handed to a sink:

- DIRECTORY_NOT_FOUND: namespace mapping or modules root pointed at a missing directory
- NAME_NOT_FOUND: no explicit entry and no probed file exists for a name
- DECLARED_NAME_MISMATCH: a file was loaded but did not declare the expected name
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from pydantic import BaseModel
from pydantic import Field

logger = logging.getLogger(__name__)


class DiagnosticKind(str, Enum):
    """Kind of autoload failure."""

    DIRECTORY_NOT_FOUND = "directory_not_found"
    NAME_NOT_FOUND = "name_not_found"
    DECLARED_NAME_MISMATCH = "declared_name_mismatch"


class Diagnostic(BaseModel):
    """A single non-fatal autoload failure report."""

    kind: DiagnosticKind = Field(description="Failure kind")
    name: str | None = Field(default=None, description="Symbolic name or namespace prefix involved")
    message: str = Field(description="Human-readable summary")
    path: str | None = Field(default=None, description="File or directory involved")
    trace: str | None = Field(default=None, description="Formatted call trace")

    @property
    def event(self) -> str:
        return f"autoload:{self.kind.value}"

    def render(self) -> str:
        """Render the full message, trace included."""
        text = self.message
        if self.trace:
            text += f"\nTrace:\n{self.trace}"
        return text


class DiagnosticSink(Protocol):
    def emit(self, diagnostic: Diagnostic) -> None: ...


class DirectoryNotFoundError(Exception):
    """Raised when a directory cannot be resolved to an existing real path."""

    def __init__(self, path: str, message: str | None = None):
        self.path = path
        super().__init__(message or f"Directory not found: {path}")


class LoggingDiagnosticSink:
    """Report diagnostics through a logger at WARNING level.

    The structured fields are attached as record extras so the JSONL log
    handler stores them next to the message.
    """

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def emit(self, diagnostic: Diagnostic) -> None:
        self.log.warning(
            diagnostic.render(),
            extra={
                "event": diagnostic.event,
                "autoload_name": diagnostic.name,
                "autoload_path": diagnostic.path,
            },
        )


class CollectingDiagnosticSink:
    """Keep diagnostics in memory, optionally forwarding them to another sink."""

    def __init__(self, forward: DiagnosticSink | None = None):
        self.diagnostics: list[Diagnostic] = []
        self.forward = forward

    def emit(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        if self.forward is not None:
            self.forward.emit(diagnostic)

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.kind == kind]

    def clear(self) -> None:
        self.diagnostics.clear()

    def __len__(self) -> int:
        return len(self.diagnostics)
