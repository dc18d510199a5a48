from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .errors import ArchiveExtractionError, ManifestParseError, UnexpectedIoError
from .file_utils import remove_tree, scratch_directory
from .logging_utils import log_debug, log_error, log_info, log_warn
from .manifest import read_manifest
from .models import Diagnostic, Manifest, Package, PackageKind, ScanResult
from .text_utils import is_archive_name, normalize_name
from .tooling import Extractor, extract_zip

DEFAULT_SCRATCH_DIR = "temp"

# (package, diagnostic); exactly one side is set, or neither when the package is skipped.
_ScanOutcome = Tuple[Optional[Package], Optional[Diagnostic]]


def classify_entry(path: Path) -> PackageKind | None:
	if path.is_dir() and not path.suffix:
		return PackageKind.FOLDER
	if path.is_file() and is_archive_name(path.name):
		return PackageKind.ARCHIVE
	return None


def discover_packages(
	mods_root: Path,
	scratch_dir_name: str = DEFAULT_SCRATCH_DIR,
	ignore: Iterable[str] = (),
) -> List[tuple[PackageKind, Path]]:
	"""Return every candidate package under the mods directory, in discovery order."""

	excluded = {normalize_name(scratch_dir_name)}
	excluded.update(normalize_name(name) for name in ignore)

	candidates: List[tuple[PackageKind, Path]] = []
	for path in sorted(mods_root.iterdir(), key=lambda p: p.name.lower()):
		if normalize_name(path.name) in excluded:
			continue
		kind = classify_entry(path)
		if kind is None:
			continue
		candidates.append((kind, path))
	return candidates


def _read_extracted_manifest(extract_dir: Path) -> Manifest | None:
	manifest = read_manifest(extract_dir)
	if manifest is not None:
		return manifest
	children = list(extract_dir.iterdir())
	if len(children) == 1 and children[0].is_dir():
		return read_manifest(children[0])
	return None


def _scan_folder(path: Path) -> _ScanOutcome:
	try:
		manifest = read_manifest(path)
	except ManifestParseError as exc:
		log_warn(f"Skipped folder '{path.name}': {exc}", indent=2)
		return None, Diagnostic.from_error(path.name, exc)
	except OSError as exc:
		error = UnexpectedIoError(f"Could not read manifest of {path.name}: {exc}")
		log_error(str(error), indent=2)
		return None, Diagnostic.from_error(path.name, error)
	return _accept(path, PackageKind.FOLDER, manifest), None


def _scan_archive(path: Path, extract_dir: Path, extractor: Extractor) -> _ScanOutcome:
	try:
		with scratch_directory(extract_dir):
			extractor(path, extract_dir)
			manifest = _read_extracted_manifest(extract_dir)
	except ArchiveExtractionError as exc:
		log_warn(f"Skipped archive '{path.name}': {exc}", indent=2)
		return None, Diagnostic.from_error(path.name, exc)
	except ManifestParseError as exc:
		log_warn(f"Skipped archive '{path.name}': {exc}", indent=2)
		return None, Diagnostic.from_error(path.name, exc)
	except OSError as exc:
		error = UnexpectedIoError(f"Could not read archive {path.name}: {exc}")
		log_error(str(error), indent=2)
		return None, Diagnostic.from_error(path.name, error)
	except Exception as exc:
		error = ArchiveExtractionError(path, f"{type(exc).__name__}: {exc}")
		log_error(str(error), indent=2)
		return None, Diagnostic.from_error(path.name, error)
	return _accept(path, PackageKind.ARCHIVE, manifest), None


def _accept(path: Path, kind: PackageKind, manifest: Manifest | None) -> Package | None:
	if manifest is None:
		log_debug(f"No manifest in {kind.value} '{path.name}', skipped.", indent=2)
		return None
	if not manifest.has_identity:
		log_debug(f"Manifest of {kind.value} '{path.name}' has no ID, skipped.", indent=2)
		return None
	return Package(path=path, kind=kind, manifest=manifest)


def scan_packages(
	mods_root: Path,
	extractor: Extractor | None = None,
	*,
	scratch_dir_name: str = DEFAULT_SCRATCH_DIR,
	ignore: Iterable[str] = (),
	max_workers: int = 1,
) -> ScanResult:
	"""Read the manifest of every package under ``mods_root``.

	A package that cannot be read is logged and reported as a diagnostic,
	the remaining packages are still scanned.
	"""

	result = ScanResult()
	extract = extractor or extract_zip

	try:
		candidates = discover_packages(mods_root, scratch_dir_name, ignore)
	except OSError as exc:
		error = UnexpectedIoError(f"Could not list mods directory {mods_root}: {exc}")
		log_error(str(error))
		result.diagnostics.append(Diagnostic.from_error(str(mods_root), error))
		return result

	scratch_root = mods_root / scratch_dir_name
	owns_scratch_root = not scratch_root.exists()

	jobs = []
	for position, (kind, path) in enumerate(candidates):
		if kind is PackageKind.FOLDER:
			jobs.append((_scan_folder, (path,)))
		else:
			extract_dir = scratch_root / f"{path.stem}-{position}"
			jobs.append((_scan_archive, (path, extract_dir, extract)))

	try:
		if max_workers > 1 and len(jobs) > 1:
			with ThreadPoolExecutor(max_workers=max_workers) as pool:
				outcomes = list(pool.map(lambda job: job[0](*job[1]), jobs))
		else:
			outcomes = [func(*args) for func, args in jobs]
	finally:
		if owns_scratch_root:
			remove_tree(scratch_root)

	for package, diagnostic in outcomes:
		if package is not None:
			result.packages.append(package)
		if diagnostic is not None:
			result.diagnostics.append(diagnostic)

	log_info(
		f"Scanned {len(candidates)} package(s) in {mods_root}: "
		f"{len(result.packages)} usable, {len(result.diagnostics)} skipped with errors."
	)
	return result


__all__ = [
	"DEFAULT_SCRATCH_DIR",
	"classify_entry",
	"discover_packages",
	"scan_packages",
]
