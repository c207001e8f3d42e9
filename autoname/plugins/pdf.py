#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from pathlib import Path
import logging

# PIP3 modules
from pypdf import PdfReader

# local repo modules
from ..errors import ExtractionFailedError
from ..ocr import OcrEngine, safe_recognize
from .base import ExtractorPlugin, clean_text

logger = logging.getLogger(__name__)

# below this many characters a PDF is treated as scanned
MIN_PDF_TEXT_CHARS = 50

#============================================


class PDFPlugin(ExtractorPlugin):
	"""
	PDF text extractor with OCR fallback for scanned documents.
	"""

	name = "pdf"
	supported_suffixes: set[str] = {"pdf"}

	#============================================
	def extract_text(self, path: Path, ocr: OcrEngine | None = None) -> str:
		"""
		Extract the text layer, falling back to OCR of page one.

		Args:
			path: File path.
			ocr: Optional recognizer.

		Returns:
			Text layer, or OCR text when the text layer is too short.
		"""
		text = self._read_text_layer(path)
		if len(text.strip()) >= MIN_PDF_TEXT_CHARS:
			return text
		logger.info("%s: text layer has %d chars, trying OCR", path.name, len(text.strip()))
		ocr_text = safe_recognize(ocr, path, pdf=True)
		if ocr_text.strip():
			return ocr_text
		if not text.strip():
			raise ExtractionFailedError(
				f"{path.name}: unreadable, possibly scanned or encrypted PDF"
			)
		return text

	#============================================
	def _read_text_layer(self, path: Path) -> str:
		try:
			with path.open("rb") as handle:
				reader = PdfReader(handle)
				bits: list[str] = []
				for page in reader.pages:
					extracted = page.extract_text()
					if extracted:
						bits.append(extracted)
		except Exception as exc:
			logger.info("%s: text layer unreadable (%s)", path.name, exc.__class__.__name__)
			return ""
		return clean_text("\n".join(bits))
