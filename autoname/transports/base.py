#!/usr/bin/env python3
"""
Transport interface for LLM backends, plus shared HTTP error mapping.
"""

from __future__ import annotations

# Standard Library
from typing import Protocol

# PIP3 modules
import httpx

# local repo modules
from ..errors import (
	AutonameError,
	ProviderAuthError,
	ProviderBadResponseError,
	ProviderUnreachableError,
)
from ..llm_utils import PartialCallback

DEFAULT_MAX_TOKENS = 80
PROBE_TIMEOUT = 10.0


class LLMTransport(Protocol):
	name: str

	async def generate(self, prompt: str, *, max_tokens: int = DEFAULT_MAX_TOKENS) -> str:
		"""
		Send a prompt and return raw model text.
		"""

	async def stream(
		self,
		prompt: str,
		on_partial: PartialCallback | None = None,
		*,
		max_tokens: int = DEFAULT_MAX_TOKENS,
	) -> str:
		"""
		Stream a prompt, reporting accumulated text, and return the full text.
		"""

	async def generate_vision(self, prompt: str, image_base64: str, mime: str) -> str:
		"""
		Send a prompt with one inline image and return raw model text.
		"""

	async def probe(self) -> str:
		"""
		Check reachability and return a human-readable status.
		"""


#============================================


def request_error(exc: httpx.HTTPError, service: str, base_url: str) -> AutonameError:
	"""
	Map an httpx failure to a provider error kind.
	"""
	if isinstance(exc, httpx.TimeoutException):
		return ProviderUnreachableError(f"{service} request timed out ({base_url})")
	if isinstance(exc, httpx.ConnectError):
		return ProviderUnreachableError(f"Cannot connect to {service} at {base_url}")
	return ProviderUnreachableError(f"{service} network error: {exc}")


def status_error(status_code: int, body: str, service: str) -> AutonameError:
	if status_code == 401:
		return ProviderAuthError(f"{service} rejected the API key (HTTP 401)")
	snippet = " ".join(body.split())[:200]
	return ProviderBadResponseError(f"{service} request failed with HTTP {status_code}: {snippet}")


def check_status(response: httpx.Response, service: str) -> None:
	if response.is_success:
		return
	raise status_error(response.status_code, response.text, service)


async def check_stream_status(response: httpx.Response, service: str) -> None:
	if response.is_success:
		return
	await response.aread()
	raise status_error(response.status_code, response.text, service)


def json_body(response: httpx.Response, service: str) -> dict:
	try:
		data = response.json()
	except ValueError as exc:
		raise ProviderBadResponseError(f"{service} returned non-JSON body") from exc
	if not isinstance(data, dict):
		raise ProviderBadResponseError(f"{service} returned unexpected JSON")
	return data
