"""
Pytest config to ensure local package imports work without installation.
"""

from __future__ import annotations

import sys
from pathlib import Path


def _add_repo_root_to_path() -> None:
	"""
	Insert the repo root into sys.path for local imports.
	"""
	repo_root = Path(__file__).resolve().parent.parent
	repo_root_str = str(repo_root)
	if repo_root_str not in sys.path:
		sys.path.insert(0, repo_root_str)


_add_repo_root_to_path()


class StubTransport:
	"""
	Test-only LLM transport that replays queued replies or errors.
	"""

	name = "Stub"

	def __init__(self, responses=None, error: Exception | None = None) -> None:
		self.responses = list(responses or [])
		self.error = error
		self.calls: list[tuple[str, str]] = []

	def _next(self) -> str:
		if self.error:
			raise self.error
		if not self.responses:
			raise RuntimeError("No response queued")
		reply = self.responses.pop(0)
		if isinstance(reply, Exception):
			raise reply
		return reply

	async def generate(self, prompt: str, *, max_tokens: int = 80) -> str:
		self.calls.append(("generate", prompt))
		return self._next()

	async def stream(self, prompt: str, on_partial=None, *, max_tokens: int = 80) -> str:
		self.calls.append(("stream", prompt))
		text = self._next()
		accumulated = ""
		for char in text:
			accumulated += char
			if on_partial:
				on_partial(accumulated)
		return accumulated

	async def generate_vision(self, prompt: str, image_base64: str, mime: str) -> str:
		self.calls.append(("vision", mime))
		return self._next()

	async def probe(self) -> str:
		return "stub ok"


class StubOcr:
	"""
	Test-only OCR engine with canned output.
	"""

	def __init__(self, text: str = "", error: Exception | None = None) -> None:
		self.text = text
		self.error = error
		self.calls: list[str] = []

	def recognize_image(self, path: Path) -> str:
		self.calls.append(f"image:{path.name}")
		if self.error:
			raise self.error
		return self.text

	def recognize_pdf_first_page(self, path: Path) -> str:
		self.calls.append(f"pdf:{path.name}")
		if self.error:
			raise self.error
		return self.text
