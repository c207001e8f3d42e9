#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from datetime import datetime
from pathlib import Path
import logging

# PIP3 modules
import pillow_heif
from PIL import Image

# local repo modules
from ..ocr import OcrEngine, safe_recognize
from .base import ExtractorPlugin

pillow_heif.register_heif_opener()

logger = logging.getLogger(__name__)

IMAGE_MIME_TYPES: dict[str, str] = {
	"jpg": "image/jpeg",
	"jpeg": "image/jpeg",
	"png": "image/png",
	"heic": "image/heic",
	"webp": "image/webp",
	"tiff": "image/tiff",
}

# EXIF tag ids
_TAG_MODEL = 0x0110
_TAG_DATETIME_ORIGINAL = 0x9003
_EXIF_IFD = 0x8769

#============================================


def mime_for(path: Path) -> str:
	ext = path.suffix.lower().lstrip(".")
	return IMAGE_MIME_TYPES.get(ext, "image/jpeg")


class ImagePlugin(ExtractorPlugin):
	"""
	Plugin for bitmap images.

	Images have no text layer, so the extracted text is a short block
	describing the file, its capture metadata, and any OCR text.
	"""

	name = "image"
	supported_suffixes: set[str] = set(IMAGE_MIME_TYPES)

	#============================================
	def extract_text(self, path: Path, ocr: OcrEngine | None = None) -> str:
		stat = path.stat()
		modified = datetime.fromtimestamp(stat.st_mtime).strftime("%Y-%m-%d")
		lines = [
			f"File name: {path.name}",
			f"File type: {path.suffix.lower().lstrip('.')}",
			f"File size: {stat.st_size // 1024}KB",
			f"Modified: {modified}",
		]
		captured, camera = self._read_exif(path)
		if captured:
			lines.append(f"Captured: {captured}")
		if camera:
			lines.append(f"Camera: {camera}")
		ocr_text = safe_recognize(ocr, path)
		if ocr_text.strip():
			lines.append("")
			lines.append("OCR text:")
			lines.append(ocr_text.strip())
		return "\n".join(lines)

	#============================================
	def _read_exif(self, path: Path) -> tuple[str | None, str | None]:
		"""
		Read capture time and camera model, tolerating files without EXIF.
		"""
		try:
			with Image.open(path) as image:
				exif = image.getexif()
		except Exception as exc:
			logger.info("%s: no readable EXIF (%s)", path.name, exc.__class__.__name__)
			return None, None
		if not exif:
			return None, None
		camera = exif.get(_TAG_MODEL)
		captured = exif.get_ifd(_EXIF_IFD).get(_TAG_DATETIME_ORIGINAL)
		camera_text = str(camera).strip().strip("\x00") if camera else None
		captured_text = str(captured).strip().strip("\x00") if captured else None
		return captured_text or None, camera_text or None
