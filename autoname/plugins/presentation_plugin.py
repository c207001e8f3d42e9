#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from pathlib import Path

# PIP3 modules
from pptx import Presentation

# local repo modules
from ..ocr import OcrEngine
from .base import ExtractorPlugin, collapse_whitespace

#============================================


class PresentationPlugin(ExtractorPlugin):
	"""
	Plugin for .pptx presentations.
	"""

	name = "presentation"
	supported_suffixes: set[str] = {"pptx"}

	#============================================
	def extract_text(self, path: Path, ocr: OcrEngine | None = None) -> str:
		presentation = Presentation(str(path))
		lines: list[str] = []
		for number, slide in enumerate(presentation.slides, start=1):
			bits: list[str] = []
			for shape in slide.shapes:
				if not getattr(shape, "has_text_frame", False):
					continue
				text = collapse_whitespace(shape.text_frame.text)
				if text:
					bits.append(text)
			if bits:
				lines.append(f"[Slide {number}] {' '.join(bits)}")
		return "\n".join(lines)
