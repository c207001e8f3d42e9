#!/usr/bin/env python3
"""
Content extraction: file -> bounded plain text.
"""

from __future__ import annotations

# Standard Library
from dataclasses import dataclass
from pathlib import Path
import logging

# local repo modules
from .errors import ExtractionFailedError, UnsupportedFormatError
from .ocr import OcrEngine
from .plugins import PluginRegistry, build_registry

logger = logging.getLogger(__name__)

MAX_TEXT_CHARS = 2000
ELISION_MARKER = "\n\n[... middle content omitted ...]\n\n"

#============================================


@dataclass(slots=True)
class ExtractionResult:
	"""
	Text handed to prompt construction.

	Attributes:
		text: Bounded, non-empty text.
		plugin_name: Plugin that produced it.
		truncated: True when the middle was elided.
	"""
	text: str
	plugin_name: str
	truncated: bool = False


#============================================


def smart_truncate(text: str, max_chars: int = MAX_TEXT_CHARS) -> str:
	"""
	Keep the head and tail of long text.

	The first 75% of the budget comes from the start and the last 25%
	from the end, so titles and signatures both survive.

	Args:
		text: Input text.
		max_chars: Character budget.

	Returns:
		Text unchanged when within budget, else head + marker + tail.
	"""
	if len(text) <= max_chars:
		return text
	head_size = max_chars * 3 // 4
	tail_size = max_chars - head_size
	if tail_size <= 0:
		return text[:head_size]
	return f"{text[:head_size]}{ELISION_MARKER}{text[-tail_size:]}"


#============================================


class ContentExtractor:
	"""
	Picks a plugin by extension and bounds its output.
	"""

	#============================================
	def __init__(
		self,
		ocr: OcrEngine | None = None,
		registry: PluginRegistry | None = None,
		max_chars: int = MAX_TEXT_CHARS,
	) -> None:
		self.ocr = ocr
		self.registry = registry or build_registry()
		self.max_chars = max_chars

	#============================================
	def supports(self, path: Path) -> bool:
		ext = path.suffix.lower().lstrip(".")
		return ext in self.registry.supported_extensions()

	#============================================
	def extract(self, path: Path) -> ExtractionResult:
		"""
		Extract bounded text from a file.

		Args:
			path: File path.

		Returns:
			ExtractionResult with non-empty text.

		Raises:
			UnsupportedFormatError: No plugin handles the extension.
			ExtractionFailedError: The file yields no text.
		"""
		path = Path(path)
		plugin = self.registry.for_path(path)
		try:
			text = plugin.extract_text(path, self.ocr)
		except (ExtractionFailedError, UnsupportedFormatError):
			raise
		except Exception as exc:
			raise ExtractionFailedError(
				f"{path.name}: could not read {plugin.name} content ({exc})"
			) from exc
		if not text or not text.strip():
			raise ExtractionFailedError(f"{path.name}: no readable text")
		bounded = smart_truncate(text, self.max_chars)
		logger.debug("%s: extracted %d chars via %s", path.name, len(text), plugin.name)
		return ExtractionResult(
			text=bounded,
			plugin_name=plugin.name,
			truncated=bounded != text,
		)
