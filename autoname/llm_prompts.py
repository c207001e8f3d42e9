#!/usr/bin/env python3
"""
Prompt builders shared by every provider.
"""

from __future__ import annotations

# local repo modules
from .config import NamingConfig, NamingStyle
from .file_context import FileContext

#============================================


STYLE_DESCRIPTIONS: dict[NamingStyle, str] = {
	NamingStyle.KEBAB: (
		"kebab-case: all lowercase, words separated by hyphens. "
		"Example: invoice-acme-corp-20240815"
	),
	NamingStyle.CAMEL: (
		"camelCase: first word lowercase, following words capitalized, no separators. "
		"Example: invoiceAcmeCorp20240815"
	),
	NamingStyle.PASCAL: (
		"PascalCase: every word capitalized, no separators. "
		"Example: InvoiceAcmeCorp20240815"
	),
	NamingStyle.SNAKE: (
		"snake_case: all lowercase, words separated by underscores. "
		"Example: invoice_acme_corp_20240815"
	),
	NamingStyle.TRAIN: (
		"Train-Case: every word capitalized with the rest lowercase, separated by hyphens. "
		"Example: Invoice-Acme-Corp-20240815"
	),
	NamingStyle.CHINESE: (
		"Chinese naming: use Simplified Chinese, separate type and title with a hyphen. "
		"Example: 发票-Acme公司合作协议20240815"
	),
}

TYPE_VOCABULARY = (
	"Invoice, Receipt, Contract, Report, Paper, Resume, Letter, "
	"Manual, Form, Certificate, Presentation, Spreadsheet, Photo, Document"
)
TYPE_VOCABULARY_CHINESE = (
	"发票、收据、合同、报告、论文、简历、信函、手册、表单、证书、演示文稿、电子表格、照片、文档"
)
ILLEGAL_CHARS_TEXT = '/ \\ : * ? " < > |'

#============================================


def style_description(style: NamingStyle) -> str:
	return STYLE_DESCRIPTIONS[style]


def _date_directive(include_date: bool, subject: str) -> str:
	if include_date:
		return (
			f"If the {subject} contains a date, append it to the end of the name "
			"in YYYYMMDD format."
		)
	return "Do not include a date in the filename."


def _abbreviation_directive(style: NamingStyle) -> str:
	if style is NamingStyle.CHINESE:
		return "Keep abbreviations in their original uppercase (for example PDF, NASA)."
	return (
		"Abbreviations follow the same casing rule "
		"(for example FINCH -> Finch, NASA -> Nasa, PDF -> Pdf)."
	)


def template_section(config: NamingConfig) -> str:
	"""
	Describe the filename template and its placeholders.

	Args:
		config: Naming configuration.

	Returns:
		Prompt section text.
	"""
	if config.naming_style is NamingStyle.CHINESE:
		vocabulary = TYPE_VOCABULARY_CHINESE
	else:
		vocabulary = TYPE_VOCABULARY
	lines = [
		"",
		"## Name template",
		f"Output the name in the form \"{config.effective_template()}\". Placeholders:",
		f"- {{type}}: the single best match from: {vocabulary}",
		"- {title}: keywords for the document title or subject (2-5 words)",
		"- {date}: the document date (YYYYMMDD)",
		"- {author}: the author or sender",
		"- {number}: the document number",
		"- Omit any field you cannot find; never leave a placeholder in the output",
	]
	return "\n".join(lines)


def context_section(context: FileContext | None) -> str:
	if context is None:
		return ""
	if context.sibling_names:
		siblings = ", ".join(context.sibling_names)
	else:
		siblings = "(none)"
	lines = [
		"",
		"## File information",
		f"- Original name: {context.original_name}",
		f"- Folder: {context.parent_dir}",
		f"- Modified: {context.modified_at}",
		f"- Size: {context.file_size}",
		"",
		"## Files already in the folder (naming style reference)",
		siblings,
	]
	return "\n".join(lines)


def _rules_block(config: NamingConfig, subject: str) -> str:
	lines = [
		"## Format rules (follow strictly, these are the only format rules)",
		f"- Naming style: {style_description(config.naming_style)}",
		f"- {_date_directive(config.include_date, subject)}",
		f"- {_abbreviation_directive(config.naming_style)}",
		"- Output only the bare filename: no explanation, no quotes, no extension",
		f"- No spaces and no filesystem-illegal characters ({ILLEGAL_CHARS_TEXT})",
	]
	block = "\n".join(lines)
	if config.custom_rules.strip():
		block += f"\n\n## User rules\n{config.custom_rules.strip()}"
	block += "\n" + template_section(config)
	return block


#============================================


def build_prompt(text: str, config: NamingConfig, context: FileContext | None = None) -> str:
	"""
	Build the text-naming prompt.

	Args:
		text: Extracted file content.
		config: Naming configuration.
		context: Optional file context.

	Returns:
		Prompt string; identical inputs give identical output.
	"""
	parts = [
		"You are a file naming assistant. Generate a filename (without extension) "
		"for the file content below.",
		"",
		_rules_block(config, "document"),
	]
	ctx = context_section(context)
	if ctx:
		parts.append(ctx)
	parts.append("")
	parts.append("## File content")
	parts.append(text)
	return "\n".join(parts)


def build_vision_prompt(config: NamingConfig, context: FileContext | None = None) -> str:
	"""
	Build the image-naming prompt; the image travels separately.
	"""
	parts = [
		"You are a file naming assistant. Generate a filename (without extension) "
		"for the content of this image.",
		"",
		_rules_block(config, "image"),
	]
	ctx = context_section(context)
	if ctx:
		parts.append(ctx)
	return "\n".join(parts)
