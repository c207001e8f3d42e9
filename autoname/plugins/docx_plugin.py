#!/usr/bin/env python3
# Standard Library
from pathlib import Path

# PIP3 modules
import docx

# local repo modules
from ..ocr import OcrEngine
from .base import ExtractorPlugin, collapse_whitespace

#============================================


class DocxPlugin(ExtractorPlugin):
	"""
	Plugin for .docx documents.
	"""

	name = "docx"
	supported_suffixes: set[str] = {"docx"}

	#============================================
	def extract_text(self, path: Path, ocr: OcrEngine | None = None) -> str:
		"""
		Join paragraph and table text.

		Args:
			path: File path.
			ocr: Unused.

		Returns:
			Whitespace-collapsed document text.
		"""
		document = docx.Document(str(path))
		all_text: list[str] = []
		if document.core_properties.title:
			all_text.append(document.core_properties.title.strip())
		for paragraph in document.paragraphs:
			if paragraph.text:
				all_text.append(paragraph.text.strip())
		for table in document.tables:
			for row in table.rows:
				for cell in row.cells:
					if cell.text:
						all_text.append(cell.text.strip())
		return collapse_whitespace(" ".join(all_text))
