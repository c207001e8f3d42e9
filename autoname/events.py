#!/usr/bin/env python3
"""
Events surfaced to a presentation layer.
"""

from __future__ import annotations

# Standard Library
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

#============================================


class StreamEventKind(str, Enum):
	THINKING = "thinking"
	PARTIAL = "partial"
	DONE = "done"
	ERROR = "error"


@dataclass(frozen=True, slots=True)
class StreamEvent:
	"""
	Progress of one file through streaming naming.

	Per file: one THINKING, zero or more PARTIAL, then exactly one
	DONE or ERROR.

	Attributes:
		kind: Event tag.
		file_name: File the event belongs to.
		text: Accumulated partial text, final name, or error message.
	"""
	kind: StreamEventKind
	file_name: str
	text: str = ""

	@classmethod
	def thinking(cls, file_name: str) -> StreamEvent:
		return cls(StreamEventKind.THINKING, file_name)

	@classmethod
	def partial(cls, file_name: str, text: str) -> StreamEvent:
		return cls(StreamEventKind.PARTIAL, file_name, text)

	@classmethod
	def done(cls, file_name: str, suggested: str) -> StreamEvent:
		return cls(StreamEventKind.DONE, file_name, suggested)

	@classmethod
	def error(cls, file_name: str, message: str) -> StreamEvent:
		return cls(StreamEventKind.ERROR, file_name, message)

	def to_dict(self) -> dict:
		data: dict[str, str] = {"fileName": self.file_name}
		if self.kind is StreamEventKind.PARTIAL:
			data["partial"] = self.text
		elif self.kind is StreamEventKind.DONE:
			data["suggested"] = self.text
		elif self.kind is StreamEventKind.ERROR:
			data["message"] = self.text
		return {"event": self.kind.value, "data": data}


StreamObserver = Callable[[StreamEvent], None]


#============================================


@dataclass(frozen=True, slots=True)
class FileDetected:
	"""
	A new, fully written file seen by the folder watcher.
	"""
	path: Path
	name: str

	def to_dict(self) -> dict:
		return {"path": str(self.path), "name": self.name}
