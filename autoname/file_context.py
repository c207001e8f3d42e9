#!/usr/bin/env python3
"""
Read-only snapshot of a file's surroundings for prompt context.
"""

from __future__ import annotations

# Standard Library
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

SIBLING_LIMIT = 20

#============================================


@dataclass(frozen=True, slots=True)
class FileContext:
	original_name: str
	parent_dir: str
	sibling_names: tuple[str, ...] = ()
	modified_at: str = ""
	file_size: str = ""

	@property
	def extension(self) -> str:
		"""
		Original extension with leading dot, or "".
		"""
		return Path(self.original_name).suffix


#============================================


def format_file_size(size_bytes: int) -> str:
	"""
	Human-readable size: 512B, 14KB, 2.5MB.
	"""
	if size_bytes < 1024:
		return f"{size_bytes}B"
	if size_bytes < 1024 * 1024:
		return f"{size_bytes / 1024:.0f}KB"
	return f"{size_bytes / (1024 * 1024):.1f}MB"


def sibling_names(path: Path, limit: int = SIBLING_LIMIT) -> tuple[str, ...]:
	"""
	Sample of visible regular files next to `path`, excluding itself.
	"""
	parent = path.parent
	names: list[str] = []
	try:
		entries = sorted(parent.iterdir())
	except OSError:
		return ()
	for entry in entries:
		if len(names) >= limit:
			break
		if entry.name == path.name or entry.name.startswith("."):
			continue
		if not entry.is_file():
			continue
		names.append(entry.name)
	return tuple(names)


def collect_file_context(path: Path, limit: int = SIBLING_LIMIT) -> FileContext:
	"""
	Build the context snapshot for one target file.

	Args:
		path: Target file.
		limit: Maximum sibling names.

	Returns:
		FileContext; size and date are blank when the file cannot be stat'ed.
	"""
	path = Path(path)
	try:
		stat = path.stat()
		file_size = format_file_size(stat.st_size)
		modified_at = datetime.fromtimestamp(stat.st_mtime).strftime("%Y-%m-%d")
	except OSError:
		file_size = ""
		modified_at = ""
	return FileContext(
		original_name=path.name,
		parent_dir=path.parent.name,
		sibling_names=sibling_names(path, limit),
		modified_at=modified_at,
		file_size=file_size,
	)
