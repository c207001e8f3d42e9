"""
autoname
========

Content-aware file renaming: extract text, ask an LLM for a name,
rename safely, and optionally watch a folder for new files.
"""

__version__ = "0.4.0"

__all__ = [
	"cli",
	"config",
	"errors",
	"events",
	"extractor",
	"file_context",
	"history",
	"llm_engine",
	"llm_prompts",
	"llm_utils",
	"ocr",
	"pipeline",
	"plugins",
	"renamer",
	"scanner",
	"transports",
	"watcher",
]
