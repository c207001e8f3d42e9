#!/usr/bin/env python3
"""
Repo-root runner for autoname.

Examples:
	python run_autoname.py --paths ~/Downloads/scan.pdf
	python run_autoname.py --paths ~/Downloads --ext pdf --apply
	python run_autoname.py --watch ~/Downloads --ext pdf --apply
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> int:
	"""
	Run the CLI entrypoint with repo-root import behavior.
	"""
	repo_root = Path(__file__).resolve().parent
	if str(repo_root) not in sys.path:
		sys.path.insert(0, str(repo_root))

	from autoname.cli import main as cli_main

	return cli_main()


if __name__ == "__main__":
	raise SystemExit(main())
