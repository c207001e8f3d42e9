#!/usr/bin/env python3
"""
Folder listing for batch intake.
"""

# Standard Library
from pathlib import Path

#============================================


def scan_folder(folder: Path, extensions: set[str] | None = None) -> list[Path]:
	"""
	List regular files directly inside a folder.

	Args:
		folder: Folder to list (not recursive).
		extensions: Lowercase extensions without dots; empty keeps all.

	Returns:
		Matching file paths sorted by name.
	"""
	folder = Path(folder)
	if not folder.is_dir():
		return []
	paths: list[Path] = []
	for path in folder.iterdir():
		if not path.is_file():
			continue
		if extensions:
			ext = path.suffix.lower().lstrip(".")
			if ext not in extensions:
				continue
		paths.append(path)
	return sorted(paths, key=lambda p: p.name)


def expand_paths(paths: list[Path], extensions: set[str] | None = None) -> list[Path]:
	"""
	Expand a mix of files and folders into a flat file list.

	Folders are scanned with `scan_folder`; files are kept as given.
	"""
	files: list[Path] = []
	for path in paths:
		path = Path(path).expanduser()
		if path.is_dir():
			files.extend(scan_folder(path, extensions))
		else:
			files.append(path)
	return files
