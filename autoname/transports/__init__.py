#!/usr/bin/env python3
from __future__ import annotations

from .base import LLMTransport
from .ollama import OllamaTransport
from .openai import OpenAITransport

__all__ = ["LLMTransport", "OllamaTransport", "OpenAITransport"]
