#!/usr/bin/env python3
"""
Tests for NamingEngine retry, vision routing, and streaming.
"""

import asyncio

import pytest

from autoname.config import NamingConfig, Provider
from autoname.errors import EmptyGeneratedNameError, ProviderAuthError, ProviderUnreachableError
from autoname.events import StreamEventKind
from autoname.file_context import FileContext
from autoname.llm_engine import NamingEngine, build_engine
from autoname.transports import OllamaTransport, OpenAITransport

from conftest import StubTransport


def _context(name: str = "scan.pdf") -> FileContext:
	return FileContext(
		original_name=name,
		parent_dir="/tmp",
		sibling_names=(),
		modified_at="2024-08-15",
		file_size="12KB",
	)


def _engine(transport, **kwargs) -> NamingEngine:
	return NamingEngine(config=NamingConfig(), transport=transport, retry_delay=0, **kwargs)


def test_name_is_cleaned():
	transport = StubTransport(responses=['"invoice-acme.pdf"'])
	name = asyncio.run(_engine(transport).name_from_text("text", _context()))
	assert name == "invoice-acme"


def test_retry_after_transient_error():
	transport = StubTransport(responses=[ProviderUnreachableError("down"), "report-q3"])
	name = asyncio.run(_engine(transport).name_from_text("text"))
	assert name == "report-q3"
	assert len(transport.calls) == 2


def test_empty_reply_is_retried():
	transport = StubTransport(responses=["  ", "letter-bank"])
	name = asyncio.run(_engine(transport).name_from_text("text"))
	assert name == "letter-bank"


def test_exhausted_retries_report_attempts():
	transport = StubTransport(error=ProviderAuthError("bad key"))
	with pytest.raises(ProviderAuthError) as info:
		asyncio.run(_engine(transport).name_from_text("text"))
	assert info.value.attempts == 3
	assert "3 attempts" in str(info.value)
	assert len(transport.calls) == 3


def test_empty_after_all_attempts():
	transport = StubTransport(responses=["", "", ".pdf"])
	with pytest.raises(EmptyGeneratedNameError):
		asyncio.run(_engine(transport).name_from_text("text", _context()))


def test_vision_uses_separate_transport():
	text = StubTransport(responses=["unused"])
	vision = StubTransport(responses=["photo-beach"])
	engine = _engine(text, vision_transport=vision)
	name = asyncio.run(engine.name_from_image(b"\x89PNG", "image/png", _context("a.png")))
	assert name == "photo-beach"
	assert vision.calls == [("vision", "image/png")]
	assert text.calls == []


def test_stream_emits_partials():
	transport = StubTransport(responses=["AB"])
	events = []
	name = asyncio.run(_engine(transport).stream_name("text", "a.pdf", events.append))
	assert name == "AB"
	assert [e.kind for e in events] == [StreamEventKind.PARTIAL, StreamEventKind.PARTIAL]
	assert [e.text for e in events] == ["A", "AB"]


def test_stream_is_not_retried():
	transport = StubTransport(responses=[ProviderUnreachableError("down"), "late"])
	with pytest.raises(ProviderUnreachableError):
		asyncio.run(_engine(transport).stream_name("text", "a.pdf"))
	assert len(transport.calls) == 1


def test_build_engine_picks_provider():
	engine = build_engine(NamingConfig(provider=Provider.OPENAI, openai_key="k"))
	assert isinstance(engine.transport, OpenAITransport)
	assert engine.vision_transport is None
	engine = build_engine(NamingConfig(vision_same_as_llm=False, vision_model="v"))
	assert isinstance(engine.transport, OllamaTransport)
	assert isinstance(engine.vision_transport, OpenAITransport)
