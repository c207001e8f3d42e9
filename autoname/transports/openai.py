#!/usr/bin/env python3
"""
Hosted chat-completions transport (OpenAI-compatible).
"""

from __future__ import annotations

# Standard Library
import json

# PIP3 modules
import httpx

# local repo modules
from ..errors import ProviderAuthError, ProviderBadResponseError
from ..llm_utils import PartialCallback, accumulate_sse
from .base import (
	DEFAULT_MAX_TOKENS,
	PROBE_TIMEOUT,
	check_status,
	check_stream_status,
	json_body,
	request_error,
	status_error,
)

FILENAME_SCHEMA: dict = {
	"type": "json_schema",
	"json_schema": {
		"name": "filename_result",
		"strict": True,
		"schema": {
			"type": "object",
			"properties": {
				"filename": {"type": "string"},
			},
			"required": ["filename"],
			"additionalProperties": False,
		},
	},
}


def parse_filename_content(content: str) -> str:
	"""
	Pull `filename` out of a schema-constrained reply, else use it verbatim.
	"""
	try:
		parsed = json.loads(content)
	except ValueError:
		return content
	if isinstance(parsed, dict) and isinstance(parsed.get("filename"), str):
		return parsed["filename"]
	return content


class OpenAITransport:
	name = "OpenAI"

	def __init__(
		self,
		model: str,
		api_key: str,
		base_url: str = "https://api.openai.com/v1",
		timeout: float = 60.0,
		http_transport: httpx.AsyncBaseTransport | None = None,
	) -> None:
		self.model = model
		self.api_key = api_key
		self.base_url = base_url.rstrip("/")
		self.timeout = timeout
		self.http_transport = http_transport

	def _client(self, timeout: float | None = None) -> httpx.AsyncClient:
		return httpx.AsyncClient(
			timeout=timeout or self.timeout,
			transport=self.http_transport,
			headers={"Authorization": f"Bearer {self.api_key}"},
		)

	async def _complete(self, body: dict) -> str:
		url = f"{self.base_url}/chat/completions"
		async with self._client() as client:
			try:
				response = await client.post(url, json=body)
			except httpx.HTTPError as exc:
				raise request_error(exc, self.name, self.base_url) from exc
		check_status(response, self.name)
		data = json_body(response, self.name)
		try:
			content = data["choices"][0]["message"]["content"]
		except (KeyError, IndexError, TypeError) as exc:
			raise ProviderBadResponseError("API response is missing choices[0].message.content") from exc
		if not isinstance(content, str):
			raise ProviderBadResponseError("API response content is not text")
		return content

	async def generate(self, prompt: str, *, max_tokens: int = DEFAULT_MAX_TOKENS) -> str:
		body = {
			"model": self.model,
			"messages": [{"role": "user", "content": prompt}],
			"response_format": FILENAME_SCHEMA,
		}
		content = await self._complete(body)
		return parse_filename_content(content)

	async def stream(
		self,
		prompt: str,
		on_partial: PartialCallback | None = None,
		*,
		max_tokens: int = DEFAULT_MAX_TOKENS,
	) -> str:
		url = f"{self.base_url}/chat/completions"
		body = {
			"model": self.model,
			"messages": [{"role": "user", "content": prompt}],
			"stream": True,
		}
		async with self._client() as client:
			try:
				async with client.stream("POST", url, json=body) as response:
					await check_stream_status(response, self.name)
					return await accumulate_sse(response.aiter_lines(), on_partial)
			except httpx.HTTPError as exc:
				raise request_error(exc, self.name, self.base_url) from exc

	async def generate_vision(self, prompt: str, image_base64: str, mime: str) -> str:
		data_url = f"data:{mime};base64,{image_base64}"
		body = {
			"model": self.model,
			"messages": [
				{
					"role": "user",
					"content": [
						{"type": "text", "text": prompt},
						{"type": "image_url", "image_url": {"url": data_url, "detail": "low"}},
					],
				}
			],
		}
		return await self._complete(body)

	async def probe(self) -> str:
		url = f"{self.base_url}/models"
		async with self._client(PROBE_TIMEOUT) as client:
			try:
				response = await client.get(url)
			except httpx.HTTPError as exc:
				raise request_error(exc, self.name, self.base_url) from exc
		if response.is_success:
			return f"Connected to {self.base_url}"
		if response.status_code == 401:
			raise ProviderAuthError("API key is invalid (HTTP 401)")
		raise status_error(response.status_code, response.text, self.name)
