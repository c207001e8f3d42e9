#!/usr/bin/env python3
from __future__ import annotations

from .base import ExtractorPlugin, PluginRegistry
from .docx_plugin import DocxPlugin
from .image_plugin import IMAGE_MIME_TYPES, ImagePlugin, mime_for
from .odt_plugin import OdtPlugin
from .pdf import PDFPlugin
from .presentation_plugin import PresentationPlugin
from .spreadsheet_plugin import SpreadsheetPlugin
from .text import TextDocumentPlugin

__all__ = [
	"ExtractorPlugin",
	"IMAGE_MIME_TYPES",
	"PluginRegistry",
	"build_registry",
	"mime_for",
]


def build_registry() -> PluginRegistry:
	"""
	Build default plugin registry.

	Returns:
		PluginRegistry with registered plugins.
	"""
	registry = PluginRegistry()
	registry.register(PDFPlugin())
	registry.register(DocxPlugin())
	registry.register(PresentationPlugin())
	registry.register(SpreadsheetPlugin())
	registry.register(OdtPlugin())
	registry.register(TextDocumentPlugin())
	registry.register(ImagePlugin())
	return registry
