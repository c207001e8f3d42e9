#!/usr/bin/env python3
"""
Tests for collision handling, batch renames, and moves.
"""

from pathlib import Path

import pytest

from autoname import renamer
from autoname.history import HistoryStore
from autoname.renamer import (
	RenameTask,
	category_for,
	move_and_rename,
	rename_batch,
	resolve_conflict,
	safe_move,
)


def test_resolve_conflict_free_name(tmp_path: Path):
	assert resolve_conflict(tmp_path, "foo.txt") == tmp_path / "foo.txt"


def test_resolve_conflict_counts_up(tmp_path: Path):
	(tmp_path / "foo.txt").write_text("a")
	first = resolve_conflict(tmp_path, "foo.txt")
	assert first == tmp_path / "foo-1.txt"
	first.write_text("b")
	assert resolve_conflict(tmp_path, "foo.txt") == tmp_path / "foo-2.txt"


def test_resolve_conflict_falls_back_to_dup(tmp_path: Path, monkeypatch):
	monkeypatch.setattr(renamer, "MAX_COLLISION_INDEX", 3)
	for name in ("foo.txt", "foo-1.txt", "foo-2.txt", "foo-3.txt"):
		(tmp_path / name).write_text("x")
	assert resolve_conflict(tmp_path, "foo.txt") == tmp_path / "foo-dup.txt"


def test_batch_isolates_missing_source(tmp_path: Path):
	first = tmp_path / "a.txt"
	first.write_text("a")
	third = tmp_path / "c.txt"
	third.write_text("c")
	tasks = [
		RenameTask(first, "alpha.txt"),
		RenameTask(tmp_path / "missing.txt", "beta.txt"),
		RenameTask(third, "gamma.txt"),
	]
	results = rename_batch(tasks)
	assert [r.ok for r in results] == [True, False, True]
	assert results[0].new_name == "alpha.txt"
	assert results[2].new_name == "gamma.txt"
	assert "does not exist" in results[1].error
	assert (tmp_path / "alpha.txt").read_text() == "a"


def test_batch_records_history(tmp_path: Path):
	source = tmp_path / "a.txt"
	source.write_text("a")
	store = HistoryStore(tmp_path / "history.json")
	rename_batch([RenameTask(source, "b.txt")], history=store)
	entries = store.entries()
	assert len(entries) == 1
	assert entries[0].original_name == "a.txt"
	assert entries[0].new_name == "b.txt"


def test_category_for_known_and_unknown():
	assert category_for("photo.JPG") == "Images"
	assert category_for("report.pdf") == "PDFs"
	assert category_for("notes.md") == "Documents"
	assert category_for("backup.7z") == "Archives"
	assert category_for("program.exe") is None


def test_move_and_rename_into_category(tmp_path: Path):
	source = tmp_path / "inbox" / "scan.pdf"
	source.parent.mkdir()
	source.write_text("pdf")
	dest = tmp_path / "sorted"
	final = move_and_rename(source, dest, "invoice-acme.pdf", auto_categorize=True)
	assert final == "invoice-acme.pdf"
	assert (dest / "PDFs" / "invoice-acme.pdf").read_text() == "pdf"
	assert not source.exists()


def test_move_and_rename_resolves_collision(tmp_path: Path):
	dest = tmp_path / "dest"
	dest.mkdir()
	(dest / "name.txt").write_text("old")
	source = tmp_path / "new.txt"
	source.write_text("new")
	assert move_and_rename(source, dest, "name.txt") == "name-1.txt"


def test_safe_move_copies_when_rename_fails(tmp_path: Path, monkeypatch):
	source = tmp_path / "a.txt"
	source.write_text("content")
	target = tmp_path / "b.txt"

	def _cross_device(src, dst):
		raise OSError(18, "Invalid cross-device link")

	monkeypatch.setattr(renamer.os, "rename", _cross_device)
	safe_move(source, target)
	assert target.read_text() == "content"
	assert not source.exists()


def test_safe_move_keeps_source_when_delete_fails(tmp_path: Path, monkeypatch):
	source = tmp_path / "a.txt"
	source.write_text("content")
	target = tmp_path / "b.txt"

	def _cross_device(src, dst):
		raise OSError(18, "Invalid cross-device link")

	def _locked(path):
		raise PermissionError("locked")

	monkeypatch.setattr(renamer.os, "rename", _cross_device)
	monkeypatch.setattr(renamer.os, "remove", _locked)
	safe_move(source, target)
	assert target.read_text() == "content"
	assert source.exists()


def test_move_missing_source_raises(tmp_path: Path):
	from autoname.errors import SourceMissingError

	with pytest.raises(SourceMissingError):
		move_and_rename(tmp_path / "nope.txt", tmp_path, "x.txt")


def _failing_save(self, entries):
	raise OSError("disk full")


def test_history_failure_still_reports_rename(tmp_path: Path, monkeypatch):
	source = tmp_path / "a.txt"
	source.write_text("a")
	monkeypatch.setattr(HistoryStore, "_save", _failing_save)
	results = rename_batch([RenameTask(source, "b.txt")], history=HistoryStore(tmp_path / "history.json"))
	assert results[0].ok
	assert results[0].new_name == "b.txt"
	assert (tmp_path / "b.txt").read_text() == "a"
	assert not source.exists()


def test_move_survives_history_failure(tmp_path: Path, monkeypatch):
	source = tmp_path / "scan.pdf"
	source.write_text("pdf")
	monkeypatch.setattr(HistoryStore, "_save", _failing_save)
	store = HistoryStore(tmp_path / "history.json")
	final = move_and_rename(source, tmp_path / "dest", "invoice.pdf", history=store)
	assert final == "invoice.pdf"
	assert (tmp_path / "dest" / "invoice.pdf").exists()
