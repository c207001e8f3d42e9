#!/usr/bin/env python3
"""
Append-capped rename history with undo.
"""

from __future__ import annotations

# Standard Library
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
import json
import logging
import threading
import time

# local repo modules
from .errors import FilesystemConflictError, HistoryEntryNotFoundError, SourceMissingError

logger = logging.getLogger(__name__)

MAX_HISTORY = 200

# one lock for every store in the process; stores may share a file
_HISTORY_LOCK = threading.RLock()

#============================================


@dataclass(slots=True)
class HistoryEntry:
	id: int
	original_path: str
	original_name: str
	new_path: str
	new_name: str
	timestamp: str = ""

	@classmethod
	def from_dict(cls, data: dict) -> HistoryEntry:
		"""
		Build an entry, tolerating missing optional fields.

		Names default to the final component of their path and the
		timestamp defaults to "". camelCase keys are accepted.
		"""
		def _get(key: str, camel: str, default: object = "") -> object:
			if key in data:
				return data[key]
			return data.get(camel, default)

		original_path = str(_get("original_path", "originalPath"))
		new_path = str(_get("new_path", "newPath"))
		return cls(
			id=int(data["id"]),
			original_path=original_path,
			original_name=str(_get("original_name", "originalName") or Path(original_path).name),
			new_path=new_path,
			new_name=str(_get("new_name", "newName") or Path(new_path).name),
			timestamp=str(_get("timestamp", "timestamp")),
		)

	def to_dict(self) -> dict:
		return asdict(self)


#============================================


def default_history_path() -> Path:
	return Path.home() / ".local" / "share" / "autoname" / "history.json"


class HistoryStore:
	"""
	File-backed history, newest first, capped at `max_entries`.

	Every read-modify-write runs under a process-wide lock.
	"""

	#============================================
	def __init__(self, path: Path | None = None, max_entries: int = MAX_HISTORY) -> None:
		self.path = Path(path) if path else default_history_path()
		self.max_entries = max_entries

	#============================================
	def _load(self) -> list[HistoryEntry]:
		if not self.path.exists():
			return []
		try:
			raw = json.loads(self.path.read_text(encoding="utf-8"))
		except (OSError, ValueError) as exc:
			logger.warning("history file %s unreadable (%s); starting empty", self.path, exc)
			return []
		entries: list[HistoryEntry] = []
		for item in raw if isinstance(raw, list) else []:
			try:
				entries.append(HistoryEntry.from_dict(item))
			except (KeyError, TypeError, ValueError):
				logger.warning("skipping malformed history entry: %r", item)
		return entries

	#============================================
	def _save(self, entries: list[HistoryEntry]) -> None:
		self.path.parent.mkdir(parents=True, exist_ok=True)
		payload = json.dumps([entry.to_dict() for entry in entries], indent=2, ensure_ascii=False)
		tmp_path = self.path.with_name(self.path.name + ".tmp")
		tmp_path.write_text(payload, encoding="utf-8")
		tmp_path.replace(self.path)

	#============================================
	def entries(self) -> list[HistoryEntry]:
		"""
		Snapshot of all entries, newest first.
		"""
		with _HISTORY_LOCK:
			return self._load()

	#============================================
	def append(self, entry: HistoryEntry) -> None:
		"""
		Prepend an entry and persist, dropping the oldest past the cap.
		"""
		with _HISTORY_LOCK:
			entries = self._load()
			entries.insert(0, entry)
			del entries[self.max_entries:]
			self._save(entries)

	#============================================
	def record(self, original: Path, new: Path) -> HistoryEntry:
		"""
		Create and append an entry for a completed rename.

		Args:
			original: Path before the rename.
			new: Path after the rename.

		Returns:
			The stored entry, with the next id.
		"""
		with _HISTORY_LOCK:
			entry = HistoryEntry(
				id=self._next_id(),
				original_path=str(original),
				original_name=Path(original).name,
				new_path=str(new),
				new_name=Path(new).name,
				timestamp=datetime.now().astimezone().isoformat(timespec="seconds"),
			)
			self.append(entry)
		return entry

	#============================================
	def _next_id(self) -> int:
		# microsecond clock so an undone id is never handed out again
		last = max((entry.id for entry in self._load()), default=0)
		return max(time.time_ns() // 1000, last + 1)

	#============================================
	def undo(self, entry_id: int) -> HistoryEntry:
		"""
		Move a renamed file back and drop its entry.

		Args:
			entry_id: Entry id.

		Returns:
			The removed entry.

		Raises:
			HistoryEntryNotFoundError: No entry has that id.
			SourceMissingError: The renamed file is gone.
			FilesystemConflictError: The original path is occupied.
		"""
		# imported here: renamer records into this store
		from .renamer import safe_move

		with _HISTORY_LOCK:
			entries = self._load()
			index = next((i for i, entry in enumerate(entries) if entry.id == entry_id), None)
			if index is None:
				raise HistoryEntryNotFoundError(f"No history entry with id {entry_id}")
			entry = entries.pop(index)
			current = Path(entry.new_path)
			original = Path(entry.original_path)
			if not current.exists():
				raise SourceMissingError(f"File no longer exists: {entry.new_path}")
			if original.exists():
				raise FilesystemConflictError(f"Original path is occupied: {entry.original_path}")
			original.parent.mkdir(parents=True, exist_ok=True)
			safe_move(current, original)
			self._save(entries)
		logger.info("undid rename %s -> %s", entry.new_name, entry.original_name)
		return entry
