#!/usr/bin/env python3
"""
OCR capability behind a two-operation interface.
"""

from __future__ import annotations

# Standard Library
from pathlib import Path
from typing import Protocol
import logging

# PIP3 modules
from PIL import Image
from pdf2image import convert_from_path
import pytesseract

# local repo modules
from .errors import OcrUnavailableError

logger = logging.getLogger(__name__)

#============================================


class OcrEngine(Protocol):
	def recognize_image(self, path: Path) -> str:
		"""
		Return recognized text for an image file, "" when none.
		"""

	def recognize_pdf_first_page(self, path: Path) -> str:
		"""
		Return recognized text for the first page of a PDF, "" when none.
		"""


#============================================


class TesseractOcr:
	"""
	Tesseract-backed recognizer; PDFs are rendered with poppler first.
	"""

	name = "tesseract"

	def __init__(self, lang: str = "eng", dpi: int = 200) -> None:
		self.lang = lang
		self.dpi = dpi

	#============================================
	def recognize_image(self, path: Path) -> str:
		try:
			with Image.open(path) as image:
				text = pytesseract.image_to_string(image, lang=self.lang)
		except Exception as exc:
			raise OcrUnavailableError(f"OCR failed for {path.name}: {exc}") from exc
		return _normalize(text)

	#============================================
	def recognize_pdf_first_page(self, path: Path) -> str:
		try:
			pages = convert_from_path(str(path), first_page=1, last_page=1, dpi=self.dpi)
		except Exception as exc:
			raise OcrUnavailableError(f"PDF render failed for {path.name}: {exc}") from exc
		if not pages:
			return ""
		try:
			text = pytesseract.image_to_string(pages[0], lang=self.lang)
		except Exception as exc:
			raise OcrUnavailableError(f"OCR failed for {path.name}: {exc}") from exc
		return _normalize(text)


#============================================


def _normalize(text: str | None) -> str:
	if not text:
		return ""
	lines = [line.strip() for line in text.splitlines()]
	return "\n".join(line for line in lines if line)


def safe_recognize(ocr: OcrEngine | None, path: Path, *, pdf: bool = False) -> str:
	"""
	Run OCR, treating any recognizer failure as "no text".

	Args:
		ocr: Recognizer or None when OCR is disabled.
		path: File to recognize.
		pdf: Use the PDF first-page operation.

	Returns:
		Recognized text or "".
	"""
	if ocr is None:
		return ""
	try:
		if pdf:
			text = ocr.recognize_pdf_first_page(path)
		else:
			text = ocr.recognize_image(path)
	except OcrUnavailableError as exc:
		logger.warning("OCR unavailable: %s", exc)
		return ""
	return text or ""
