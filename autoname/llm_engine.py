#!/usr/bin/env python3
"""
Naming engine: prompt -> provider -> cleaned filename, with retries.
"""

from __future__ import annotations

# Standard Library
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
import asyncio
import base64
import logging

# PIP3 modules
import httpx

# local repo modules
from .config import NamingConfig, Provider
from .errors import AutonameError, EmptyGeneratedNameError, with_attempts
from .events import StreamEvent, StreamObserver
from .file_context import FileContext
from .llm_prompts import build_prompt, build_vision_prompt
from .llm_utils import clean_filename
from .transports import LLMTransport, OllamaTransport, OpenAITransport

logger = logging.getLogger(__name__)

MAX_RETRIES = 2
RETRY_DELAY_SECONDS = 1.0

#============================================


@dataclass(slots=True)
class NamingEngine:
	"""
	Generates filenames through one active provider.

	Attributes:
		config: Naming configuration used for prompts.
		transport: Text backend.
		vision_transport: Separate image backend; None reuses `transport`.
		max_retries: Extra attempts after the first.
		retry_delay: Seconds between attempts.
	"""
	config: NamingConfig
	transport: LLMTransport
	vision_transport: LLMTransport | None = None
	max_retries: int = MAX_RETRIES
	retry_delay: float = RETRY_DELAY_SECONDS

	#============================================
	async def name_from_text(self, text: str, context: FileContext | None = None) -> str:
		"""
		Name a file from its extracted text.

		Args:
			text: Extracted content.
			context: Optional file context.

		Returns:
			Cleaned, non-empty filename stem.
		"""
		prompt = build_prompt(text, self.config, context)
		transport = self.transport
		return await self._generate_with_retry(
			lambda: transport.generate(prompt),
			context,
			purpose=f"filename from text via {transport.name}",
		)

	#============================================
	async def name_from_image(
		self,
		image_bytes: bytes,
		mime: str,
		context: FileContext | None = None,
	) -> str:
		"""
		Name an image from its pixels with the vision backend.
		"""
		prompt = build_vision_prompt(self.config, context)
		image_base64 = base64.b64encode(image_bytes).decode("ascii")
		transport = self.vision_transport or self.transport
		return await self._generate_with_retry(
			lambda: transport.generate_vision(prompt, image_base64, mime),
			context,
			purpose=f"filename from image via {transport.name}",
		)

	#============================================
	async def stream_name(
		self,
		text: str,
		file_name: str,
		on_event: StreamObserver | None = None,
		context: FileContext | None = None,
	) -> str:
		"""
		Stream a name, reporting PARTIAL events as tokens arrive.

		A started stream is never restarted; its failure propagates as-is.

		Args:
			text: Extracted content.
			file_name: Key used on emitted events.
			on_event: Progress observer.
			context: Optional file context.

		Returns:
			Cleaned, non-empty filename stem.
		"""
		prompt = build_prompt(text, self.config, context)

		def _on_partial(accumulated: str) -> None:
			if on_event:
				on_event(StreamEvent.partial(file_name, accumulated))

		raw = await self.transport.stream(prompt, _on_partial)
		cleaned = clean_filename(raw, _extension(context))
		if not cleaned:
			raise EmptyGeneratedNameError("The model returned an empty filename")
		return cleaned

	#============================================
	async def probe(self) -> str:
		return await self.transport.probe()

	#============================================
	async def _generate_with_retry(
		self,
		call: Callable[[], Awaitable[str]],
		context: FileContext | None,
		*,
		purpose: str,
	) -> str:
		attempts = self.max_retries + 1
		last_exc: AutonameError | None = None
		for attempt in range(1, attempts + 1):
			logger.info("asking for %s (attempt %d/%d)", purpose, attempt, attempts)
			try:
				raw = await call()
			except AutonameError as exc:
				last_exc = exc
			else:
				cleaned = clean_filename(raw, _extension(context))
				if cleaned:
					return cleaned
				last_exc = EmptyGeneratedNameError("The model returned an empty filename")
			if attempt < attempts:
				logger.warning("%s failed: %s; retrying", purpose, last_exc)
				await asyncio.sleep(self.retry_delay)
		raise with_attempts(last_exc, attempts) from last_exc


#============================================


def _extension(context: FileContext | None) -> str | None:
	if context is None:
		return None
	return context.extension or None


def build_engine(
	config: NamingConfig,
	http_transport: httpx.AsyncBaseTransport | None = None,
) -> NamingEngine:
	"""
	Instantiate the engine for the configured provider.

	Args:
		config: Naming configuration.
		http_transport: Optional httpx transport (tests use MockTransport).

	Returns:
		NamingEngine instance.
	"""
	transport: LLMTransport
	if config.provider is Provider.OPENAI:
		transport = OpenAITransport(
			model=config.openai_model,
			api_key=config.openai_key,
			base_url=config.openai_base_url,
			timeout=config.request_timeout,
			http_transport=http_transport,
		)
	else:
		transport = OllamaTransport(
			model=config.ollama_model,
			base_url=config.ollama_url,
			timeout=config.request_timeout,
			http_transport=http_transport,
		)
	vision_transport: LLMTransport | None = None
	if not config.vision_same_as_llm:
		vision_transport = OpenAITransport(
			model=config.vision_model,
			api_key=config.vision_key,
			base_url=config.vision_base_url,
			timeout=config.request_timeout,
			http_transport=http_transport,
		)
	return NamingEngine(config=config, transport=transport, vision_transport=vision_transport)
