"""Error taxonomy and the per-file result type threaded through a run."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from style.model import StyleFragment


class StartupError(RuntimeError):
    """A whole-run precondition failed; nothing is written."""


class ConfigError(StartupError):
    """Raised when the environment configuration cannot be read."""


class NoInputFilesError(StartupError):
    """Raised when the scan roots contain no stylesheet files."""


class StorageError(StartupError):
    """Raised when the storage backend cannot be opened or written."""


class IssueKind(str, Enum):
    """Non-fatal problems recorded against a single file."""

    UNRESOLVED_IMPORT = "unresolved-import"
    CYCLIC_IMPORT = "cyclic-import"
    EXTRACTION_FAILURE = "extraction-failure"
    READ_FAILURE = "read-failure"


@dataclass(frozen=True)
class Issue:
    """A reported problem with enough context to locate it."""

    kind: IssueKind
    file: str
    detail: str
    token: Optional[str] = None
    line: Optional[int] = None

    def __str__(self) -> str:
        location = f"{self.file}:{self.line}" if self.line else self.file
        return f"{location}: {self.kind.value}: {self.detail}"


@dataclass(frozen=True)
class Ok:
    """Extraction succeeded for one file."""

    path: Path
    fragment: StyleFragment


@dataclass(frozen=True)
class Err:
    """
    Extraction failed for one file.

    `fragment` holds whatever was extracted before the failure, possibly
    nothing.
    """

    path: Path
    kind: IssueKind
    detail: str
    fragment: StyleFragment = field(default_factory=StyleFragment)


FileResult = Union[Ok, Err]
