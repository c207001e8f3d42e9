#!/usr/bin/env python3
"""
Shared LLM helpers (backend-agnostic).
"""

from __future__ import annotations

# Standard Library
from collections.abc import AsyncIterator, Callable
import json
import logging
import sys

# local repo modules
from .errors import ProviderBadResponseError

logger = logging.getLogger(__name__)

ILLEGAL_FILENAME_CHARS = ("/", "\\", ":", "*", "?", '"', "<", ">", "|")
SSE_DATA_PREFIX = "data:"
SSE_DONE = "[DONE]"

PartialCallback = Callable[[str], None]

#============================================


def _color(text: str, code: str) -> str:
	if sys.stdout.isatty():
		return f"\033[{code}m{text}\033[0m"
	return text


def print_tag(tag: str, message: str, code: str = "36") -> None:
	print(f"{_color(f'[{tag}]', code)} {message}")


#============================================


def clean_filename(raw: str, extension: str | None = None) -> str:
	"""
	Turn raw model output into a filesystem-legal stem.

	Args:
		raw: Model output.
		extension: Original extension ("pdf" or ".pdf"); a trailing copy
			of it in the output is removed.

	Returns:
		Cleaned name, possibly "" (callers treat "" as a failure).
	"""
	name = raw.strip().strip('"').strip("'")
	for ch in ILLEGAL_FILENAME_CHARS:
		name = name.replace(ch, "-")
	name = name.strip()
	if extension:
		ext = "." + extension.lstrip(".")
		ext_lower = ext.lower()
		while name.lower().endswith(ext_lower):
			name = name[: -len(ext)]
			name = name.rstrip(".-")
	return name


#============================================


async def accumulate_ndjson(
	lines: AsyncIterator[str],
	on_partial: PartialCallback | None = None,
) -> str:
	"""
	Accumulate a local chat stream: one JSON object per line.

	Args:
		lines: Decoded lines of the response body.
		on_partial: Called with the text so far after each token.

	Returns:
		Full accumulated text.
	"""
	accumulated = ""
	async for raw_line in lines:
		line = raw_line.strip()
		if not line:
			continue
		try:
			payload = json.loads(line)
		except ValueError:
			logger.debug("Skipping undecodable stream line: %.80s", line)
			continue
		if not isinstance(payload, dict):
			continue
		if payload.get("error"):
			raise ProviderBadResponseError(f"Stream error from server: {payload['error']}")
		message = payload.get("message")
		token = message.get("content") if isinstance(message, dict) else None
		if not isinstance(token, str) or not token:
			continue
		accumulated += token
		if on_partial:
			on_partial(accumulated)
	return accumulated


async def accumulate_sse(
	lines: AsyncIterator[str],
	on_partial: PartialCallback | None = None,
) -> str:
	"""
	Accumulate a hosted server-sent-event stream until `data: [DONE]`.

	Args:
		lines: Decoded lines of the response body.
		on_partial: Called with the text so far after each token.

	Returns:
		Full accumulated text.
	"""
	accumulated = ""
	async for raw_line in lines:
		line = raw_line.strip()
		if not line.startswith(SSE_DATA_PREFIX):
			continue
		data = line[len(SSE_DATA_PREFIX):].strip()
		if data == SSE_DONE:
			break
		try:
			payload = json.loads(data)
		except ValueError:
			logger.debug("Skipping undecodable event: %.80s", data)
			continue
		try:
			token = payload["choices"][0]["delta"].get("content")
		except (KeyError, IndexError, TypeError, AttributeError):
			continue
		if not isinstance(token, str) or not token:
			continue
		accumulated += token
		if on_partial:
			on_partial(accumulated)
	return accumulated
