#!/usr/bin/env python3
"""
Command line interface for autoname.
"""

from __future__ import annotations

# Standard Library
from collections import Counter
from pathlib import Path
import argparse
import asyncio
import logging

# local repo modules
from .config import NamingConfig, Provider, default_config_path, load_config, parse_exts
from .errors import AutonameError, describe
from .events import StreamEvent, StreamEventKind
from .history import HistoryStore
from .llm_utils import print_tag
from .ocr import TesseractOcr
from .pipeline import Pipeline
from .scanner import expand_paths

#============================================


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse CLI arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Rename files from their content using a local or hosted LLM."
	)
	parser.add_argument(
		"-p",
		"--paths",
		dest="paths",
		nargs="+",
		help="Files or folders to name.",
	)
	mode_group = parser.add_mutually_exclusive_group()
	mode_group.add_argument(
		"-a",
		"--apply",
		dest="apply",
		action="store_true",
		help="Perform renames and moves.",
	)
	mode_group.add_argument(
		"-d",
		"--dry-run",
		dest="dry_run",
		action="store_true",
		help="Only print suggested names (default).",
	)
	parser.add_argument(
		"-e",
		"--ext",
		dest="extensions",
		action="append",
		help="Include only files with these extensions (repeatable).",
	)
	parser.add_argument(
		"-t",
		"--target",
		dest="target",
		help="Move renamed files into this folder instead of renaming in place.",
	)
	parser.add_argument(
		"--categorize",
		dest="categorize",
		action="store_true",
		help="With --target, sort files into Images/Documents/PDFs/Archives.",
	)
	parser.add_argument(
		"--stream",
		dest="stream",
		action="store_true",
		help="Stream suggestions token by token (never renames).",
	)
	parser.add_argument(
		"-w",
		"--watch",
		dest="watch",
		help="Watch a folder and process new files as they appear.",
	)
	parser.add_argument(
		"--undo",
		dest="undo",
		type=int,
		help="Undo the rename with this history id.",
	)
	parser.add_argument(
		"--history",
		dest="history",
		action="store_true",
		help="List recent renames.",
	)
	parser.add_argument(
		"--probe",
		dest="probe",
		action="store_true",
		help="Check that the configured provider is reachable.",
	)
	parser.add_argument(
		"--provider",
		dest="provider",
		choices=[provider.value for provider in Provider],
		help="Override the configured provider.",
	)
	parser.add_argument(
		"-o",
		"--model",
		dest="model",
		help="Override the model name for the active provider.",
	)
	parser.add_argument(
		"-c",
		"--config",
		dest="config",
		help="Config file (yaml or json, default ~/.config/autoname/config.yaml).",
	)
	parser.add_argument(
		"-v",
		"--verbose",
		dest="verbose",
		action="store_true",
		help="Verbose logging.",
	)
	parser.set_defaults(apply=False, dry_run=True)
	args = parser.parse_args(argv)
	if not (args.paths or args.watch or args.history or args.probe or args.undo is not None):
		parser.error("one of --paths, --watch, --undo, --history or --probe is required")
	return args


#============================================


def build_config(args: argparse.Namespace) -> NamingConfig:
	"""
	Build runtime config from the config file and CLI overrides.
	"""
	config_path = Path(args.config).expanduser() if args.config else default_config_path()
	config = load_config(config_path)
	if args.provider:
		config.provider = Provider.coerce(args.provider)
	if args.model:
		if config.provider is Provider.OPENAI:
			config.openai_model = args.model
		else:
			config.ollama_model = args.model
	if args.target:
		config.default_dest_folder = args.target
	if args.categorize:
		config.auto_categorize = True
	return config


#============================================


def _print_history(history: HistoryStore) -> int:
	entries = history.entries()
	if not entries:
		print_tag("HISTORY", "no renames recorded", "34")
		return 0
	for entry in entries:
		print_tag("HISTORY", f"#{entry.id} {entry.timestamp} {entry.original_name} -> {entry.new_name}", "34")
	return 0


def _print_stream_event(event: StreamEvent) -> None:
	if event.kind is StreamEventKind.THINKING:
		print_tag("FILE", event.file_name, "34")
	elif event.kind is StreamEventKind.PARTIAL:
		logging.getLogger(__name__).debug("%s: %s", event.file_name, event.text)
	elif event.kind is StreamEventKind.DONE:
		print_tag("LLM", f"{event.file_name} -> {event.text}")
	else:
		print_tag("WHY", f"{event.file_name}: {event.text}", "35")


#============================================


def run(args: argparse.Namespace) -> int:
	"""
	Dispatch one CLI invocation; returns the exit status.
	"""
	config = build_config(args)
	history = HistoryStore()
	if args.history:
		return _print_history(history)
	if args.undo is not None:
		entry = history.undo(args.undo)
		print_tag("UNDO", f"{entry.new_name} -> {entry.original_name}", "32")
		return 0
	pipeline = Pipeline(config, history=history, ocr=TesseractOcr(), dry_run=not args.apply)
	if args.probe:
		status = asyncio.run(pipeline.engine.probe())
		print_tag("LLM", status)
		return 0
	exts = parse_exts(args.extensions)
	if args.watch:
		try:
			asyncio.run(pipeline.watch(args.watch, exts or config.watch_extensions))
		except KeyboardInterrupt:
			print_tag("WATCH", "stopped", "33")
		return 0
	files = expand_paths([Path(p) for p in args.paths], exts)
	print_tag("SCAN", f"Found {len(files)} files to consider.", "34")
	if files:
		ext_counter = Counter(p.suffix.lower().lstrip(".") for p in files)
		summary = ", ".join(f"{ext}:{count}" for ext, count in ext_counter.most_common(8) if ext)
		if summary:
			print_tag("SCAN", f"Top extensions: {summary}", "34")
	if args.stream:
		suggestions = asyncio.run(pipeline.stream_names(files, _print_stream_event))
		return 0 if len(suggestions) == len(files) else 1
	outcomes = asyncio.run(pipeline.process_batch(files))
	return 0 if all(outcome.ok for outcome in outcomes) else 1


def main(argv: list[str] | None = None) -> int:
	"""
	Entry point for the CLI.
	"""
	args = parse_args(argv)
	if args.verbose:
		logging.basicConfig(level=logging.INFO)
	else:
		logging.basicConfig(level=logging.WARNING)
	try:
		return run(args)
	except AutonameError as exc:
		print_tag("WHY", describe(exc), "35")
		return 1


#============================================


if __name__ == "__main__":
	raise SystemExit(main())
