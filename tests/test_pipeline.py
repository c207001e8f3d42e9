#!/usr/bin/env python3
"""
Tests for the extract -> name -> rename pipeline.
"""

import asyncio
from pathlib import Path

from autoname.config import NamingConfig
from autoname.errors import ProviderUnreachableError
from autoname.events import StreamEventKind
from autoname.history import HistoryStore
from autoname.llm_engine import NamingEngine
from autoname.pipeline import Pipeline

from conftest import StubTransport


def _pipeline(tmp_path: Path, transport, vision=None, dry_run=False, **config_values) -> Pipeline:
	config = NamingConfig(**config_values)
	engine = NamingEngine(
		config=config,
		transport=transport,
		vision_transport=vision,
		retry_delay=0,
	)
	return Pipeline(
		config,
		engine=engine,
		history=HistoryStore(tmp_path / "history.json"),
		dry_run=dry_run,
	)


def test_process_file_renames_in_place(tmp_path: Path):
	source = tmp_path / "scan.txt"
	source.write_text("Invoice from ACME")
	pipeline = _pipeline(tmp_path, StubTransport(responses=["invoice-acme.txt"]))
	outcome = asyncio.run(pipeline.process_file(source))
	assert outcome.ok
	assert outcome.suggested == "invoice-acme"
	assert outcome.new_name == "invoice-acme.txt"
	assert (tmp_path / "invoice-acme.txt").read_text() == "Invoice from ACME"
	assert pipeline.history.entries()[0].original_name == "scan.txt"


def test_dry_run_leaves_file(tmp_path: Path):
	source = tmp_path / "scan.txt"
	source.write_text("Invoice from ACME")
	pipeline = _pipeline(tmp_path, StubTransport(responses=["invoice-acme"]), dry_run=True)
	outcome = asyncio.run(pipeline.process_file(source))
	assert outcome.suggested == "invoice-acme"
	assert not outcome.applied
	assert source.exists()
	assert pipeline.history.entries() == []


def test_move_into_destination(tmp_path: Path):
	source = tmp_path / "scan.txt"
	source.write_text("notes")
	dest = tmp_path / "sorted"
	pipeline = _pipeline(
		tmp_path,
		StubTransport(responses=["meeting-notes"]),
		default_dest_folder=str(dest),
		auto_categorize=True,
	)
	outcome = asyncio.run(pipeline.process_file(source))
	assert outcome.new_name == "meeting-notes.txt"
	assert (dest / "Documents" / "meeting-notes.txt").exists()


def test_batch_isolates_failures(tmp_path: Path):
	good = tmp_path / "a.txt"
	good.write_text("alpha")
	empty = tmp_path / "b.txt"
	empty.write_text("   ")
	other = tmp_path / "c.txt"
	other.write_text("gamma")
	pipeline = _pipeline(tmp_path, StubTransport(responses=["first", "third"]))
	outcomes = asyncio.run(pipeline.process_batch([good, empty, other]))
	assert [o.ok for o in outcomes] == [True, False, True]
	assert "no readable text" in outcomes[1].error
	assert (tmp_path / "third.txt").exists()


def test_naming_error_is_reported(tmp_path: Path):
	source = tmp_path / "a.txt"
	source.write_text("alpha")
	transport = StubTransport(error=ProviderUnreachableError("server down"))
	outcome = asyncio.run(_pipeline(tmp_path, transport).process_file(source))
	assert not outcome.ok
	assert "3 attempts" in outcome.error
	assert "start the local server" in outcome.error
	assert source.exists()


def test_naming_timeout(tmp_path: Path):
	class SlowTransport(StubTransport):
		async def generate(self, prompt, *, max_tokens=80):
			await asyncio.sleep(5)
			return "late"

	source = tmp_path / "a.txt"
	source.write_text("alpha")
	pipeline = _pipeline(tmp_path, SlowTransport(), naming_timeout=0.05)
	outcome = asyncio.run(pipeline.process_file(source))
	assert "timed out" in outcome.error


def test_vision_first_then_text_fallback(tmp_path: Path):
	from PIL import Image

	photo = tmp_path / "IMG_0001.png"
	Image.new("RGB", (4, 4), "red").save(photo)
	vision = StubTransport(error=ProviderUnreachableError("vision down"))
	text = StubTransport(responses=["photo-red-square"])
	pipeline = _pipeline(tmp_path, text, vision=vision, dry_run=True, vision_enabled=True)
	suggested = asyncio.run(pipeline.suggest_name(photo))
	assert suggested == "photo-red-square"
	assert vision.calls[0] == ("vision", "image/png")
	assert "File name: IMG_0001.png" in text.calls[0][1]


def test_vision_success_skips_text(tmp_path: Path):
	photo = tmp_path / "IMG_0002.jpg"
	photo.write_bytes(b"\xff\xd8\xff")
	vision = StubTransport(responses=["beach-sunset"])
	text = StubTransport()
	pipeline = _pipeline(tmp_path, text, vision=vision, dry_run=True, vision_enabled=True)
	assert asyncio.run(pipeline.suggest_name(photo)) == "beach-sunset"
	assert text.calls == []


def test_stream_names_event_sequence(tmp_path: Path):
	good = tmp_path / "a.txt"
	good.write_text("alpha")
	bad = tmp_path / "b.exe"
	bad.write_bytes(b"MZ")
	events = []
	pipeline = _pipeline(tmp_path, StubTransport(responses=["AB"]), dry_run=True)
	result = asyncio.run(pipeline.stream_names([good, bad], events.append))
	assert result == {"a.txt": "AB"}
	kinds = [(e.file_name, e.kind) for e in events]
	assert kinds == [
		("a.txt", StreamEventKind.THINKING),
		("a.txt", StreamEventKind.PARTIAL),
		("a.txt", StreamEventKind.PARTIAL),
		("a.txt", StreamEventKind.DONE),
		("b.exe", StreamEventKind.THINKING),
		("b.exe", StreamEventKind.ERROR),
	]
	assert good.exists()


def test_watch_processes_new_file(tmp_path: Path):
	from autoname.watcher import FolderWatcher

	inbox = tmp_path / "inbox"
	inbox.mkdir()
	config = NamingConfig()
	engine = NamingEngine(config=config, transport=StubTransport(responses=["watched-note"]), retry_delay=0)
	pipeline = Pipeline(
		config,
		engine=engine,
		history=HistoryStore(tmp_path / "history.json"),
		watcher=FolderWatcher(debounce=0.1, poll_interval=0.05, max_polls=40),
		dry_run=False,
	)

	async def _run():
		stop = asyncio.Event()
		task = asyncio.create_task(pipeline.watch(inbox, "txt", stop))
		await asyncio.sleep(0.2)
		(inbox / "new.txt").write_text("a watched note")
		for _ in range(100):
			if (inbox / "watched-note.txt").exists():
				break
			await asyncio.sleep(0.05)
		stop.set()
		await task

	asyncio.run(_run())
	assert (inbox / "watched-note.txt").exists()
