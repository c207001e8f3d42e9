#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from dataclasses import asdict, dataclass, fields
from enum import Enum
from pathlib import Path
import json
import logging
import re

# PIP3 modules
import yaml

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "{type}-{title}"

#============================================


class Provider(str, Enum):
	"""
	Naming backend selector.
	"""

	OLLAMA = "ollama"
	OPENAI = "openai"

	@classmethod
	def coerce(cls, value: object) -> Provider:
		if isinstance(value, cls):
			return value
		try:
			return cls(str(value).strip().lower())
		except ValueError:
			logger.warning("Unknown provider %r; using ollama", value)
			return cls.OLLAMA


class NamingStyle(str, Enum):
	"""
	Casing and separator convention for generated names.
	"""

	KEBAB = "kebab-case"
	CAMEL = "camelCase"
	PASCAL = "PascalCase"
	SNAKE = "snake_case"
	TRAIN = "Train-Case"
	CHINESE = "chinese"

	@classmethod
	def coerce(cls, value: object) -> NamingStyle:
		if isinstance(value, cls):
			return value
		try:
			return cls(str(value).strip())
		except ValueError:
			logger.warning("Unknown naming style %r; using kebab-case", value)
			return cls.KEBAB


#============================================


@dataclass(slots=True)
class NamingConfig:
	"""
	Runtime configuration settings.

	Attributes:
		provider: Active naming backend.
		ollama_url: Local chat server base URL.
		ollama_model: Local model name.
		openai_key: Bearer token for the hosted endpoint.
		openai_model: Hosted model name.
		openai_base_url: Hosted endpoint base URL.
		custom_rules: Free-form extra naming rules.
		naming_style: Casing convention.
		include_date: Ask for a YYYYMMDD date suffix.
		name_template: Placeholder template; blank means {type}-{title}.
		watch_folder: Folder observed in watch mode.
		watch_extensions: Comma-separated extension filter for watch mode.
		default_dest_folder: Destination for move-and-rename (blank renames in place).
		auto_categorize: Sort moved files into category sub-folders.
		vision_enabled: Name images from pixels instead of extracted text.
		vision_same_as_llm: Reuse the text backend for vision.
		vision_base_url: Hosted vision endpoint when not shared.
		vision_key: Hosted vision key when not shared.
		vision_model: Hosted vision model when not shared.
		request_timeout: Seconds allowed for one HTTP request.
		naming_timeout: Seconds allowed for one naming call, retries included.
	"""
	provider: Provider = Provider.OLLAMA
	ollama_url: str = "http://localhost:11434"
	ollama_model: str = "llama3.2"
	openai_key: str = ""
	openai_model: str = "gpt-4o-mini"
	openai_base_url: str = "https://api.openai.com/v1"
	custom_rules: str = ""
	naming_style: NamingStyle = NamingStyle.KEBAB
	include_date: bool = False
	name_template: str = ""
	watch_folder: str = ""
	watch_extensions: str = "pdf"
	default_dest_folder: str = ""
	auto_categorize: bool = False
	vision_enabled: bool = False
	vision_same_as_llm: bool = True
	vision_base_url: str = ""
	vision_key: str = ""
	vision_model: str = ""
	request_timeout: float = 60.0
	naming_timeout: float = 200.0

	def __post_init__(self) -> None:
		self.provider = Provider.coerce(self.provider)
		self.naming_style = NamingStyle.coerce(self.naming_style)

	#============================================
	def effective_template(self) -> str:
		"""
		Return the filename template, defaulting when blank.
		"""
		template = self.name_template.strip()
		return template or DEFAULT_TEMPLATE

	#============================================
	def to_dict(self) -> dict:
		data = asdict(self)
		data["provider"] = self.provider.value
		data["naming_style"] = self.naming_style.value
		return data


#============================================


def parse_exts(exts: list[str] | str | None) -> set[str] | None:
	"""
	Normalize extension filters.

	Args:
		exts: Extensions from CLI or a comma-separated config string.

	Returns:
		Set of lowercase extensions or None.
	"""
	if not exts:
		return None
	if isinstance(exts, str):
		exts = exts.split(",")
	cleaned: set[str] = set()
	for ext in exts:
		if ext and ext.strip():
			cleaned.add(ext.strip().lower().lstrip("."))
	if not cleaned:
		return None
	return cleaned


#============================================


def _snake_key(key: str) -> str:
	snake = re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()
	# older front ends stored the vision block under a "vlm" prefix
	if snake.startswith("vlm_"):
		snake = "vision_" + snake[len("vlm_"):]
	return snake


def config_from_dict(data: dict) -> NamingConfig:
	"""
	Build a config from loaded values, ignoring unknown keys.

	Args:
		data: Loaded mapping, snake_case or camelCase keys.

	Returns:
		NamingConfig instance.
	"""
	known = {f.name for f in fields(NamingConfig)}
	values: dict = {}
	for key, value in (data or {}).items():
		name = _snake_key(str(key))
		if name not in known:
			logger.warning("Ignoring unknown config key %r", key)
			continue
		if value is None:
			continue
		values[name] = value
	return NamingConfig(**values)


def default_config_path() -> Path:
	return Path.home() / ".config" / "autoname" / "config.yaml"


def load_config(config_path: Path | None) -> NamingConfig:
	"""
	Load user configuration from yaml or json.

	Args:
		config_path: Path to config file.

	Returns:
		NamingConfig, defaults when the file is missing.
	"""
	if not config_path or not config_path.exists():
		return NamingConfig()
	with config_path.open("r", encoding="utf-8") as handle:
		if config_path.suffix.lower() in {".yml", ".yaml"}:
			loaded = yaml.safe_load(handle)
		else:
			loaded = json.load(handle)
	return config_from_dict(loaded or {})


def save_config(config: NamingConfig, config_path: Path) -> None:
	"""
	Persist config as yaml or json, creating parent folders.
	"""
	config_path.parent.mkdir(parents=True, exist_ok=True)
	data = config.to_dict()
	with config_path.open("w", encoding="utf-8") as handle:
		if config_path.suffix.lower() in {".yml", ".yaml"}:
			yaml.safe_dump(data, handle, sort_keys=False, allow_unicode=True)
		else:
			json.dump(data, handle, indent=2, ensure_ascii=False)
