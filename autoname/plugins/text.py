#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from pathlib import Path

# local repo modules
from ..ocr import OcrEngine
from .base import ExtractorPlugin, clean_text

#============================================


class TextDocumentPlugin(ExtractorPlugin):
	"""
	Plugin for plain text and markdown files.
	"""

	name = "text"
	supported_suffixes: set[str] = {"txt", "md", "markdown"}

	#============================================
	def extract_text(self, path: Path, ocr: OcrEngine | None = None) -> str:
		"""
		Read the file as UTF-8, replacing undecodable bytes.

		Args:
			path: File path.
			ocr: Unused.

		Returns:
			Text with blank lines dropped.
		"""
		return clean_text(path.read_text(encoding="utf-8", errors="replace"))
