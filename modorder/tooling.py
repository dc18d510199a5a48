from __future__ import annotations

import subprocess
import zipfile
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from .errors import ArchiveExtractionError
from .file_utils import run_command

Extractor = Callable[[Path, Path], None]


def extract_zip(archive: Path, destination: Path) -> None:
	"""Extract ``archive`` into ``destination`` with the standard library."""

	root = destination.resolve()
	try:
		with zipfile.ZipFile(archive) as bundle:
			for member in bundle.namelist():
				target = (destination / member).resolve()
				if target != root and root not in target.parents:
					raise ArchiveExtractionError(archive, f"member '{member}' escapes the extraction folder")
			bundle.extractall(destination)
	except ArchiveExtractionError:
		raise
	except (
		zipfile.BadZipFile,
		zipfile.LargeZipFile,
		zlib.error,
		EOFError,
		NotImplementedError,
		ValueError,
		OSError,
		RuntimeError,
	) as exc:
		raise ArchiveExtractionError(archive, str(exc)) from exc


@dataclass(slots=True)
class ExternalTool:
	executable: Path
	args: Sequence[str] = ()

	def extractor(self) -> Extractor:
		"""Adapt this tool to the extractor signature.

		``{archive}`` and ``{destination}`` in ``args`` are substituted. When
		neither appears, both paths are appended: ``<exe> <args> <archive> <destination>``.
		"""

		templated = any("{archive}" in arg or "{destination}" in arg for arg in self.args)

		def _extract(archive: Path, destination: Path) -> None:
			if templated:
				command = [str(self.executable)] + [
					arg.replace("{archive}", str(archive)).replace("{destination}", str(destination))
					for arg in self.args
				]
			else:
				command = [str(self.executable), *self.args, str(archive), str(destination)]
			try:
				run_command(command)
			except subprocess.CalledProcessError as exc:
				detail = (exc.stderr or "").strip() or f"exit code {exc.returncode}"
				raise ArchiveExtractionError(archive, detail) from exc
			except OSError as exc:
				raise ArchiveExtractionError(archive, str(exc)) from exc

		return _extract


@dataclass(slots=True)
class ToolConfig:
	unpack_tool: ExternalTool | None = None

	def extractor(self) -> Extractor:
		if self.unpack_tool is None:
			return extract_zip
		return self.unpack_tool.extractor()
