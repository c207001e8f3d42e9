#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from pathlib import Path

# PIP3 modules
import openpyxl
import xlrd

# local repo modules
from ..errors import ExtractionFailedError
from ..ocr import OcrEngine
from .base import ExtractorPlugin

MAX_ROWS = 30

#============================================


class SpreadsheetPlugin(ExtractorPlugin):
	"""
	Plugin for xlsx and xls workbooks; reads the first sheet only.
	"""

	name = "spreadsheet"
	supported_suffixes: set[str] = {"xlsx", "xls"}

	#============================================
	def extract_text(self, path: Path, ocr: OcrEngine | None = None) -> str:
		ext = path.suffix.lower().lstrip(".")
		if ext == "xls":
			rows = self._xls_rows(path)
		else:
			rows = self._xlsx_rows(path)
		lines: list[str] = []
		for row in rows:
			cells = [str(value).strip() for value in row if value not in (None, "")]
			cells = [cell for cell in cells if cell]
			if cells:
				lines.append("\t".join(cells))
		return "\n".join(lines)

	#============================================
	def _xlsx_rows(self, path: Path) -> list[tuple]:
		workbook = openpyxl.load_workbook(path, read_only=True, data_only=True)
		try:
			if not workbook.sheetnames:
				raise ExtractionFailedError(f"{path.name}: workbook has no sheets")
			sheet = workbook[workbook.sheetnames[0]]
			return list(sheet.iter_rows(max_row=MAX_ROWS, values_only=True))
		finally:
			workbook.close()

	#============================================
	def _xls_rows(self, path: Path) -> list[list]:
		book = xlrd.open_workbook(str(path))
		if book.nsheets == 0:
			raise ExtractionFailedError(f"{path.name}: workbook has no sheets")
		sheet = book.sheet_by_index(0)
		return [sheet.row_values(idx) for idx in range(min(sheet.nrows, MAX_ROWS))]
