#!/usr/bin/env python3
"""
Pipeline glue: extract -> name -> rename -> history.
"""

from __future__ import annotations

# Standard Library
from collections.abc import Awaitable
from concurrent.futures import Future
from dataclasses import dataclass
from pathlib import Path
import asyncio
import logging

# local repo modules
from .config import NamingConfig
from .errors import AutonameError, ProviderUnreachableError, describe
from .events import FileDetected, StreamEvent, StreamObserver
from .extractor import ContentExtractor
from .file_context import FileContext, collect_file_context
from .history import HistoryStore
from .llm_engine import NamingEngine, build_engine
from .llm_utils import print_tag
from .ocr import OcrEngine
from .plugins import IMAGE_MIME_TYPES, mime_for
from .renamer import RenameTask, move_and_rename, rename_batch
from .watcher import FolderWatcher, WatchHandle

logger = logging.getLogger(__name__)

#============================================


@dataclass(slots=True)
class NamingOutcome:
	"""
	Result of running one file through the pipeline.

	Attributes:
		path: Source file.
		suggested: Generated stem, None when naming failed.
		new_name: Final file name on disk, set only when applied.
		error: Readable failure message with its remedy hint.
	"""
	path: Path
	suggested: str | None = None
	new_name: str | None = None
	error: str | None = None

	@property
	def ok(self) -> bool:
		return self.error is None

	@property
	def applied(self) -> bool:
		return self.new_name is not None


#============================================


class Pipeline:
	"""
	Runs files through extraction, naming, and renaming.
	"""

	#============================================
	def __init__(
		self,
		config: NamingConfig,
		engine: NamingEngine | None = None,
		extractor: ContentExtractor | None = None,
		history: HistoryStore | None = None,
		watcher: FolderWatcher | None = None,
		ocr: OcrEngine | None = None,
		dry_run: bool = True,
	) -> None:
		self.config = config
		self.engine = engine or build_engine(config)
		self.extractor = extractor or ContentExtractor(ocr=ocr)
		self.history = history or HistoryStore()
		self.watcher = watcher or FolderWatcher()
		self.dry_run = dry_run
		# files this pipeline renamed while watching; touched on the loop thread only
		self._produced: set[Path] = set()

	#============================================
	async def _bounded(self, call: Awaitable[str]) -> str:
		timeout = self.config.naming_timeout
		try:
			return await asyncio.wait_for(call, timeout)
		except asyncio.TimeoutError as exc:
			raise ProviderUnreachableError(f"Naming timed out after {timeout:g}s") from exc

	#============================================
	async def _name_from_image(self, path: Path, context: FileContext) -> str | None:
		try:
			image_bytes = await asyncio.to_thread(path.read_bytes)
			return await self._bounded(
				self.engine.name_from_image(image_bytes, mime_for(path), context)
			)
		except (AutonameError, OSError) as exc:
			logger.warning("vision naming failed for %s (%s); falling back to text", path.name, exc)
			return None

	#============================================
	async def suggest_name(self, path: Path) -> str:
		"""
		Generate a filename stem for one file.

		Images go to the vision backend first when enabled; any vision
		failure falls back to naming from extracted text.

		Args:
			path: File to name.

		Returns:
			Cleaned filename stem without extension.
		"""
		path = Path(path)
		context = await asyncio.to_thread(collect_file_context, path)
		is_image = path.suffix.lower().lstrip(".") in IMAGE_MIME_TYPES
		if self.config.vision_enabled and is_image:
			name = await self._name_from_image(path, context)
			if name:
				return name
		result = await asyncio.to_thread(self.extractor.extract, path)
		return await self._bounded(self.engine.name_from_text(result.text, context))

	#============================================
	def _apply(self, path: Path, stem: str) -> str:
		new_name = f"{stem}{path.suffix}"
		dest = self.config.default_dest_folder.strip()
		if dest:
			return move_and_rename(
				path,
				Path(dest).expanduser(),
				new_name,
				auto_categorize=self.config.auto_categorize,
				history=self.history,
			)
		result = rename_batch([RenameTask(path, new_name)], history=self.history)[0]
		if result.error:
			raise OSError(result.error)
		return result.new_name

	#============================================
	async def process_file(self, path: Path) -> NamingOutcome:
		"""
		Name one file and, unless dry-run, rename or move it.

		Failures are captured on the outcome and never raised.
		"""
		path = Path(path)
		outcome = NamingOutcome(path=path)
		print_tag("FILE", path.name, "34")
		try:
			outcome.suggested = await self.suggest_name(path)
		except AutonameError as exc:
			outcome.error = describe(exc)
			print_tag("WHY", outcome.error, "35")
			return outcome
		target = f"{outcome.suggested}{path.suffix}"
		if self.dry_run:
			print_tag("PLAN", f"{path.name} -> {target}")
			return outcome
		try:
			outcome.new_name = await asyncio.to_thread(self._apply, path, outcome.suggested)
		except (AutonameError, OSError) as exc:
			outcome.error = describe(exc)
			print_tag("WHY", outcome.error, "35")
			return outcome
		print_tag("RENAME", f"{path.name} -> {outcome.new_name}", "32")
		return outcome

	#============================================
	async def process_batch(self, paths: list[Path]) -> list[NamingOutcome]:
		"""
		Process files one after another, one outcome per path.
		"""
		outcomes: list[NamingOutcome] = []
		for path in paths:
			outcomes.append(await self.process_file(path))
		ok_count = sum(1 for outcome in outcomes if outcome.ok)
		logger.info("batch done: %d ok, %d failed", ok_count, len(outcomes) - ok_count)
		return outcomes

	#============================================
	async def stream_names(
		self,
		paths: list[Path],
		on_event: StreamObserver,
	) -> dict[str, str]:
		"""
		Stream suggested names for files, reporting progress events.

		Each file gets THINKING, any number of PARTIAL, then DONE or
		ERROR. Nothing is renamed.

		Args:
			paths: Files to name, handled in order.
			on_event: Progress observer.

		Returns:
			Mapping of file name to suggested stem for the successes.
		"""
		suggestions: dict[str, str] = {}
		for path in paths:
			path = Path(path)
			file_name = path.name
			on_event(StreamEvent.thinking(file_name))
			try:
				result = await asyncio.to_thread(self.extractor.extract, path)
				context = await asyncio.to_thread(collect_file_context, path)
				suggested = await self._bounded(
					self.engine.stream_name(result.text, file_name, on_event, context)
				)
			except AutonameError as exc:
				on_event(StreamEvent.error(file_name, describe(exc)))
				continue
			suggestions[file_name] = suggested
			on_event(StreamEvent.done(file_name, suggested))
		return suggestions

	#============================================
	def start_watch(
		self,
		loop: asyncio.AbstractEventLoop,
		folder: Path | str | None = None,
		extensions: set[str] | str | None = None,
	) -> WatchHandle:
		"""
		Start the folder watcher and process detected files on `loop`.

		Args:
			loop: Running event loop that executes `process_file`.
			folder: Folder to watch; defaults to `config.watch_folder`.
			extensions: Filter; defaults to `config.watch_extensions`.

		Returns:
			The running WatchHandle.
		"""
		folder = folder or self.config.watch_folder
		if extensions is None:
			extensions = self.config.watch_extensions

		def _on_detected(event: FileDetected) -> None:
			future = asyncio.run_coroutine_threadsafe(self._process_detected(event), loop)
			future.add_done_callback(_log_failure)

		return self.watcher.start(folder, extensions, _on_detected)

	#============================================
	async def _process_detected(self, event: FileDetected) -> NamingOutcome | None:
		# an in-place rename shows up as a moved-in file; skip our own output
		if event.path in self._produced:
			self._produced.discard(event.path)
			return None
		print_tag("WATCH", f"new file {event.name}", "33")
		outcome = await self.process_file(event.path)
		if outcome.applied:
			dest = self.config.default_dest_folder.strip()
			folder = Path(dest).expanduser() if dest else event.path.parent
			self._produced.add(folder / outcome.new_name)
		return outcome

	#============================================
	async def watch(
		self,
		folder: Path | str | None = None,
		extensions: set[str] | str | None = None,
		stop: asyncio.Event | None = None,
	) -> None:
		"""
		Watch a folder until `stop` is set (or forever).
		"""
		handle = self.start_watch(asyncio.get_running_loop(), folder, extensions)
		print_tag("WATCH", f"watching {handle.folder}", "33")
		try:
			if stop is None:
				stop = asyncio.Event()
			await stop.wait()
		finally:
			await asyncio.to_thread(self.watcher.stop)


#============================================


def _log_failure(future: Future) -> None:
	if future.cancelled():
		return
	exc = future.exception()
	if exc is not None:
		logger.error("watch processing failed: %s", exc)
