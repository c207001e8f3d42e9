#!/usr/bin/env python3
"""
Safe rename and move utilities.
"""

from __future__ import annotations

# Standard Library
from dataclasses import dataclass
from pathlib import Path
import logging
import os
import shutil

# local repo modules
from .errors import AutonameError, FilesystemConflictError, SourceMissingError
from .history import HistoryStore

logger = logging.getLogger(__name__)

MAX_COLLISION_INDEX = 999

CATEGORY_FOLDERS: dict[str, set[str]] = {
	"Images": {"jpg", "jpeg", "png", "gif", "heic", "webp", "tiff", "bmp", "svg"},
	"Documents": {
		"doc", "docx", "txt", "md", "rtf", "odt", "pages",
		"ppt", "pptx", "xls", "xlsx", "csv",
	},
	"PDFs": {"pdf"},
	"Archives": {"zip", "rar", "7z", "tar", "gz"},
}

#============================================


@dataclass(slots=True)
class RenameTask:
	path: Path
	new_name: str


@dataclass(slots=True)
class RenameResult:
	"""
	Outcome of one task: exactly one of `new_name` or `error` is set.
	"""
	path: Path
	new_name: str | None = None
	error: str | None = None

	@property
	def ok(self) -> bool:
		return self.error is None

	def to_dict(self) -> dict:
		return {"path": str(self.path), "newName": self.new_name, "error": self.error}


#============================================


def resolve_conflict(parent: Path, name: str) -> Path:
	"""
	Find a free path for `name` inside `parent`.

	Tries the name itself, then stem-1, stem-2, ... up to stem-999,
	then stem-dup as a last resort.

	Args:
		parent: Destination folder.
		name: Desired file name with extension.

	Returns:
		Candidate path (not reserved; concurrent callers may race).
	"""
	target = parent / name
	if not target.exists():
		return target
	stem = Path(name).stem
	ext = Path(name).suffix
	for index in range(1, MAX_COLLISION_INDEX + 1):
		candidate = parent / f"{stem}-{index}{ext}"
		if not candidate.exists():
			return candidate
	return parent / f"{stem}-dup{ext}"


def category_for(name: str) -> str | None:
	"""
	Category sub-folder for a file name, or None.
	"""
	ext = Path(name).suffix.lower().lstrip(".")
	for folder, extensions in CATEGORY_FOLDERS.items():
		if ext in extensions:
			return folder
	return None


def safe_move(source: Path, target: Path) -> None:
	"""
	Move a file, falling back to copy + delete across filesystems.

	When the copy succeeds but the source cannot be deleted, the source
	is left in place and a warning is logged.

	Args:
		source: Existing file.
		target: Free destination path.
	"""
	try:
		os.rename(source, target)
		return
	except OSError as exc:
		logger.info("rename %s -> %s failed (%s); copying", source, target, exc)
	shutil.copy2(source, target)
	try:
		os.remove(source)
	except OSError as exc:
		logger.warning("copied %s to %s but could not remove the source: %s", source, target, exc)


#============================================


def _record(history: HistoryStore | None, source: Path, target: Path) -> None:
	# the move already happened; history write failures only warn
	if history is None:
		return
	try:
		history.record(source, target)
	except OSError as exc:
		logger.warning("renamed %s -> %s but could not write history: %s", source, target.name, exc)


def _rename_one(task: RenameTask, history: HistoryStore | None) -> str:
	source = Path(task.path)
	if not source.exists():
		raise SourceMissingError(f"Source file does not exist: {source}")
	target = resolve_conflict(source.parent, task.new_name)
	if target.exists():
		raise FilesystemConflictError(f"Destination is occupied: {target}")
	os.rename(source, target)
	_record(history, source, target)
	return target.name


def rename_batch(tasks: list[RenameTask], history: HistoryStore | None = None) -> list[RenameResult]:
	"""
	Rename files in place, one result per task in task order.

	A failing task never stops the others.

	Args:
		tasks: Source paths and desired names.
		history: Optional store that records each success.

	Returns:
		List of RenameResult.
	"""
	results: list[RenameResult] = []
	for task in tasks:
		try:
			final_name = _rename_one(task, history)
		except (AutonameError, OSError) as exc:
			logger.warning("rename failed for %s: %s", task.path, exc)
			results.append(RenameResult(path=Path(task.path), error=str(exc)))
			continue
		results.append(RenameResult(path=Path(task.path), new_name=final_name))
	return results


def move_and_rename(
	source: Path,
	dest_folder: Path,
	new_name: str,
	auto_categorize: bool = False,
	history: HistoryStore | None = None,
) -> str:
	"""
	Move a file into `dest_folder` under `new_name`.

	Args:
		source: Existing file.
		dest_folder: Destination folder (created when missing).
		new_name: Desired file name with extension.
		auto_categorize: Put the file in a category sub-folder.
		history: Optional store that records the move.

	Returns:
		Final file name after collision resolution.
	"""
	source = Path(source)
	if not source.exists():
		raise SourceMissingError(f"Source file does not exist: {source}")
	folder = Path(dest_folder)
	if auto_categorize:
		category = category_for(new_name)
		if category:
			folder = folder / category
	folder.mkdir(parents=True, exist_ok=True)
	target = resolve_conflict(folder, new_name)
	if target.exists():
		raise FilesystemConflictError(f"Destination is occupied: {target}")
	safe_move(source, target)
	_record(history, source, target)
	return target.name
