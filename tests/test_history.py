#!/usr/bin/env python3
"""
Tests for the rename history and undo.
"""

import json
import threading
from pathlib import Path

import pytest

from autoname.errors import FilesystemConflictError, HistoryEntryNotFoundError, SourceMissingError
from autoname.history import HistoryEntry, HistoryStore
from autoname.renamer import RenameTask, rename_batch


def test_undo_round_trip(tmp_path: Path):
	source = tmp_path / "a.txt"
	source.write_text("payload")
	store = HistoryStore(tmp_path / "history.json")
	rename_batch([RenameTask(source, "b.txt")], history=store)
	entry = store.entries()[0]
	store.undo(entry.id)
	assert source.read_text() == "payload"
	assert not (tmp_path / "b.txt").exists()
	assert store.entries() == []


def test_undo_unknown_id_leaves_history(tmp_path: Path):
	store = HistoryStore(tmp_path / "history.json")
	store.record(tmp_path / "a.txt", tmp_path / "b.txt")
	before = store.entries()
	with pytest.raises(HistoryEntryNotFoundError):
		store.undo(99)
	assert store.entries() == before


def test_undo_missing_file(tmp_path: Path):
	store = HistoryStore(tmp_path / "history.json")
	entry = store.record(tmp_path / "a.txt", tmp_path / "b.txt")
	with pytest.raises(SourceMissingError):
		store.undo(entry.id)
	assert len(store.entries()) == 1


def test_undo_original_occupied(tmp_path: Path):
	(tmp_path / "a.txt").write_text("new occupant")
	(tmp_path / "b.txt").write_text("renamed")
	store = HistoryStore(tmp_path / "history.json")
	entry = store.record(tmp_path / "a.txt", tmp_path / "b.txt")
	with pytest.raises(FilesystemConflictError):
		store.undo(entry.id)
	assert (tmp_path / "b.txt").exists()


def test_ids_increase_and_newest_first(tmp_path: Path):
	store = HistoryStore(tmp_path / "history.json")
	first = store.record(tmp_path / "a", tmp_path / "b")
	second = store.record(tmp_path / "c", tmp_path / "d")
	assert second.id > first.id
	assert [entry.id for entry in store.entries()] == [second.id, first.id]


def test_history_is_capped(tmp_path: Path):
	store = HistoryStore(tmp_path / "history.json", max_entries=5)
	for index in range(8):
		store.record(tmp_path / f"{index}.txt", tmp_path / f"n{index}.txt")
	entries = store.entries()
	assert len(entries) == 5
	assert entries[0].new_name == "n7.txt"
	assert entries[-1].new_name == "n3.txt"


def test_entry_defaults_for_missing_fields(tmp_path: Path):
	path = tmp_path / "history.json"
	path.write_text(json.dumps([
		{"id": 4, "originalPath": "/x/old.pdf", "newPath": "/x/new.pdf"},
	]))
	entry = HistoryStore(path).entries()[0]
	assert entry == HistoryEntry(
		id=4,
		original_path="/x/old.pdf",
		original_name="old.pdf",
		new_path="/x/new.pdf",
		new_name="new.pdf",
		timestamp="",
	)


def test_undone_id_is_not_reused(tmp_path: Path):
	store = HistoryStore(tmp_path / "history.json")
	(tmp_path / "a.txt").write_text("a")
	rename_batch([RenameTask(tmp_path / "a.txt", "b.txt")], history=store)
	first = store.entries()[0]
	store.undo(first.id)
	(tmp_path / "c.txt").write_text("c")
	rename_batch([RenameTask(tmp_path / "c.txt", "d.txt")], history=store)
	second = store.entries()[0]
	assert second.id > first.id


def test_concurrent_record_and_undo(tmp_path: Path):
	history_path = tmp_path / "history.json"
	errors = []

	def _worker(worker: int):
		store = HistoryStore(history_path)
		folder = tmp_path / f"w{worker}"
		folder.mkdir()
		try:
			recorded = []
			for index in range(5):
				renamed = folder / f"new{index}.txt"
				renamed.write_text(str(index))
				recorded.append(store.record(folder / f"old{index}.txt", renamed))
			for entry in recorded[:2]:
				store.undo(entry.id)
		except Exception as exc:
			errors.append(exc)

	threads = [threading.Thread(target=_worker, args=(worker,)) for worker in range(8)]
	for thread in threads:
		thread.start()
	for thread in threads:
		thread.join()
	assert errors == []
	entries = HistoryStore(history_path).entries()
	assert len(entries) == 8 * 3
	assert len({entry.id for entry in entries}) == len(entries)
	for worker in range(8):
		folder = tmp_path / f"w{worker}"
		assert (folder / "old0.txt").exists()
		assert (folder / "old1.txt").exists()
		assert not (folder / "old2.txt").exists()
