#!/usr/bin/env python3
"""
Local chat transport (Ollama /api/chat).
"""

from __future__ import annotations

# PIP3 modules
import httpx

# local repo modules
from ..errors import ModelNotFoundError, ProviderBadResponseError, ProviderUnreachableError
from ..llm_utils import PartialCallback, accumulate_ndjson
from .base import (
	DEFAULT_MAX_TOKENS,
	PROBE_TIMEOUT,
	check_status,
	check_stream_status,
	json_body,
	request_error,
)


class OllamaTransport:
	name = "Ollama"

	def __init__(
		self,
		model: str,
		base_url: str = "http://localhost:11434",
		timeout: float = 60.0,
		http_transport: httpx.AsyncBaseTransport | None = None,
	) -> None:
		self.model = model
		self.base_url = base_url.rstrip("/")
		self.timeout = timeout
		self.http_transport = http_transport

	def _client(self, timeout: float | None = None) -> httpx.AsyncClient:
		return httpx.AsyncClient(
			timeout=timeout or self.timeout,
			transport=self.http_transport,
		)

	def _chat_body(self, message: dict, *, stream: bool, max_tokens: int | None) -> dict:
		body: dict[str, object] = {
			"model": self.model,
			"messages": [message],
			"stream": stream,
		}
		if max_tokens:
			body["options"] = {"num_predict": max_tokens}
		return body

	async def _chat(self, body: dict) -> str:
		url = f"{self.base_url}/api/chat"
		async with self._client() as client:
			try:
				response = await client.post(url, json=body)
			except httpx.HTTPError as exc:
				raise request_error(exc, self.name, self.base_url) from exc
		check_status(response, self.name)
		data = json_body(response, self.name)
		message = data.get("message")
		content = message.get("content") if isinstance(message, dict) else None
		if not isinstance(content, str):
			raise ProviderBadResponseError("Ollama response is missing message.content")
		return content

	async def generate(self, prompt: str, *, max_tokens: int = DEFAULT_MAX_TOKENS) -> str:
		message = {"role": "user", "content": prompt}
		return await self._chat(self._chat_body(message, stream=False, max_tokens=max_tokens))

	async def stream(
		self,
		prompt: str,
		on_partial: PartialCallback | None = None,
		*,
		max_tokens: int = DEFAULT_MAX_TOKENS,
	) -> str:
		url = f"{self.base_url}/api/chat"
		message = {"role": "user", "content": prompt}
		body = self._chat_body(message, stream=True, max_tokens=max_tokens)
		async with self._client() as client:
			try:
				async with client.stream("POST", url, json=body) as response:
					await check_stream_status(response, self.name)
					return await accumulate_ndjson(response.aiter_lines(), on_partial)
			except httpx.HTTPError as exc:
				raise request_error(exc, self.name, self.base_url) from exc

	async def generate_vision(self, prompt: str, image_base64: str, mime: str) -> str:
		# the local server sniffs the format itself; mime is not sent
		message = {"role": "user", "content": prompt, "images": [image_base64]}
		return await self._chat(self._chat_body(message, stream=False, max_tokens=None))

	async def probe(self) -> str:
		"""
		Confirm the server answers and the configured model is installed.
		"""
		url = f"{self.base_url}/api/tags"
		async with self._client(PROBE_TIMEOUT) as client:
			try:
				response = await client.get(url)
			except httpx.ConnectError as exc:
				raise ProviderUnreachableError(
					f"Cannot connect to Ollama at {self.base_url}; is it running?"
				) from exc
			except httpx.HTTPError as exc:
				raise request_error(exc, self.name, self.base_url) from exc
		check_status(response, self.name)
		data = json_body(response, self.name)
		models = [
			str(item.get("name"))
			for item in data.get("models") or []
			if isinstance(item, dict) and item.get("name")
		]
		if any(name.startswith(self.model) for name in models):
			return f"Ollama connected, model {self.model} is available"
		available = ", ".join(models) or "none"
		raise ModelNotFoundError(
			f"Ollama connected, but model {self.model} was not found. Available: {available}"
		)
