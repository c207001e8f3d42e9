#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from pathlib import Path

# local repo modules
from ..errors import UnsupportedFormatError
from ..ocr import OcrEngine

#============================================


def clean_text(text: str | None) -> str:
	"""
	Trim each line and drop blank lines.

	Args:
		text: Raw extracted text.

	Returns:
		Cleaned multi-line text.
	"""
	if not text:
		return ""
	lines = [line.strip() for line in text.splitlines()]
	return "\n".join(line for line in lines if line)


def collapse_whitespace(text: str | None) -> str:
	if not text:
		return ""
	return " ".join(text.split())


#============================================


class ExtractorPlugin:
	"""
	Base interface for per-format text extractors.
	"""

	name: str = "base"
	supported_suffixes: set[str] = set()

	#============================================
	def supports(self, path: Path) -> bool:
		"""
		Determine if this plugin can handle the file.

		Args:
			path: File path.

		Returns:
			True if supported.
		"""
		return path.suffix.lower().lstrip(".") in self.supported_suffixes

	#============================================
	def extract_text(self, path: Path, ocr: OcrEngine | None = None) -> str:
		"""
		Extract plain text for the file.

		Args:
			path: File path.
			ocr: Optional recognizer for scanned content.

		Returns:
			Extracted text, possibly empty.
		"""
		return ""


class PluginRegistry:
	"""
	Registry for extractor plugins.
	"""

	#============================================
	def __init__(self) -> None:
		self._plugins: list[ExtractorPlugin] = []

	#============================================
	def register(self, plugin: ExtractorPlugin) -> None:
		"""
		Register a plugin.

		Args:
			plugin: Plugin instance.
		"""
		self._plugins.append(plugin)

	#============================================
	def for_path(self, path: Path) -> ExtractorPlugin:
		"""
		Find the first plugin that supports the path.

		Args:
			path: File path.

		Returns:
			Plugin instance.
		"""
		for plugin in self._plugins:
			if plugin.supports(path):
				return plugin
		raise UnsupportedFormatError(path.suffix or "unknown")

	#============================================
	def supported_extensions(self) -> set[str]:
		supported: set[str] = set()
		for plugin in self._plugins:
			supported.update(ext.lower() for ext in plugin.supported_suffixes)
		return supported
