#!/usr/bin/env python3
"""
Tests for the command line front end.
"""

from pathlib import Path

import pytest

from autoname import cli
from autoname.config import Provider
from autoname.history import HistoryStore


def _args(*argv):
	return cli.parse_args(list(argv))


def test_paths_or_action_required():
	with pytest.raises(SystemExit):
		cli.parse_args([])


def test_dry_run_is_default():
	args = _args("--paths", "a.pdf")
	assert args.apply is False
	assert args.dry_run is True


def test_build_config_overrides(tmp_path: Path):
	config_path = tmp_path / "config.yaml"
	config_path.write_text("provider: openai\nopenaiModel: gpt-4o\n")
	args = _args(
		"--paths", "x",
		"--config", str(config_path),
		"--model", "gpt-4.1-mini",
		"--target", str(tmp_path / "out"),
		"--categorize",
	)
	config = cli.build_config(args)
	assert config.provider is Provider.OPENAI
	assert config.openai_model == "gpt-4.1-mini"
	assert config.default_dest_folder == str(tmp_path / "out")
	assert config.auto_categorize is True


def test_undo_unknown_id_exits_nonzero(tmp_path: Path, monkeypatch, capsys):
	monkeypatch.setattr(cli, "HistoryStore", lambda: HistoryStore(tmp_path / "history.json"))
	code = cli.main(["--undo", "7", "--config", str(tmp_path / "none.yaml")])
	assert code == 1
	assert "No history entry with id 7" in capsys.readouterr().out


def test_history_listing(tmp_path: Path, monkeypatch, capsys):
	store = HistoryStore(tmp_path / "history.json")
	store.record(tmp_path / "scan.pdf", tmp_path / "invoice-acme.pdf")
	monkeypatch.setattr(cli, "HistoryStore", lambda: store)
	code = cli.main(["--history", "--config", str(tmp_path / "none.yaml")])
	assert code == 0
	assert "scan.pdf -> invoice-acme.pdf" in capsys.readouterr().out
