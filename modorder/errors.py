from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .models import InvalidEntry


class ModOrderError(Exception):
    """Base class for load order errors."""


class ManifestParseError(ModOrderError, ValueError):
    def __init__(self, message: str, source: Path | str | None = None) -> None:
        self.source = source
        if source is not None:
            message = f"{source}: {message}"
        super().__init__(message)


class ArchiveExtractionError(ModOrderError):
    def __init__(self, archive: Path, reason: str) -> None:
        self.archive = archive
        super().__init__(f"Could not extract {archive.name}: {reason}")


class UnexpectedIoError(ModOrderError, OSError):
    pass


class DuplicateIdentityError(ModOrderError):
    """Raised when a load order with repeated identities is about to be saved."""

    def __init__(self, invalid: Sequence["InvalidEntry"]) -> None:
        self.invalid = list(invalid)
        reasons = "; ".join(item.reason for item in self.invalid)
        super().__init__(f"Load order has duplicate identities: {reasons}")
