#!/usr/bin/env python3
# Standard Library
from pathlib import Path

# PIP3 modules
from odf import teletype
from odf import text
from odf.opendocument import load

# local repo modules
from ..ocr import OcrEngine
from .base import ExtractorPlugin, collapse_whitespace

#============================================


class OdtPlugin(ExtractorPlugin):
	"""
	Plugin for .odt documents.
	"""

	name = "odt"
	supported_suffixes: set[str] = {"odt"}

	#============================================
	def extract_text(self, path: Path, ocr: OcrEngine | None = None) -> str:
		document = load(str(path))
		snippets: list[str] = []
		for para in document.getElementsByType(text.P):
			para_text = teletype.extractText(para).strip()
			if para_text:
				snippets.append(para_text)
		return collapse_whitespace(" ".join(snippets))
