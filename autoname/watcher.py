#!/usr/bin/env python3
"""
Folder watcher: debounced create events and write-completion detection.

Threads per watch:
- the watchdog observer, feeding raw paths into a queue
- one debounce thread collapsing bursts into batches
- one drain thread filtering batches by extension
- one short-lived thread per candidate file polling its size
"""

from __future__ import annotations

# Standard Library
from collections.abc import Callable
from pathlib import Path
import logging
import os
import queue
import threading
import time

# PIP3 modules
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

# local repo modules
from .config import parse_exts
from .errors import WatchFolderError
from .events import FileDetected

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 1.0
POLL_INTERVAL_SECONDS = 1.0
MAX_STABILITY_POLLS = 30
QUEUE_TIMEOUT_SECONDS = 0.1

FileCallback = Callable[[FileDetected], None]

#============================================


def _file_size(path: Path) -> int | None:
	try:
		return os.stat(path).st_size
	except OSError:
		return None


def wait_for_stable(
	path: Path,
	*,
	interval: float = POLL_INTERVAL_SECONDS,
	max_polls: int = MAX_STABILITY_POLLS,
	cancelled: Callable[[], bool] | None = None,
	size_of: Callable[[Path], int | None] = _file_size,
	sleep: Callable[[float], object] = time.sleep,
) -> bool:
	"""
	Poll a file's size until two consecutive readings agree.

	Readings of zero or of a missing file never count as stable.

	Args:
		path: File to poll.
		interval: Seconds between readings.
		max_polls: Readings taken before giving up.
		cancelled: Returns True once the caller no longer wants a result.
		size_of: Size reader, None when the file is gone.
		sleep: Delay function between readings.

	Returns:
		True when the file stopped growing, False on give-up or cancel.
	"""
	previous: int | None = None
	for _ in range(max_polls):
		if cancelled and cancelled():
			return False
		size = size_of(path)
		if size and size == previous:
			return True
		previous = size
		sleep(interval)
	logger.info("gave up waiting for %s to finish writing", path)
	return False


#============================================


class _CreateEventHandler(FileSystemEventHandler):
	"""
	Pushes created and moved-in file paths onto a queue.
	"""

	def __init__(self, raw_events: queue.Queue) -> None:
		super().__init__()
		self.raw_events = raw_events

	def on_created(self, event: FileSystemEvent) -> None:
		if event.is_directory:
			return
		self.raw_events.put(os.fsdecode(event.src_path))

	def on_moved(self, event: FileSystemEvent) -> None:
		# editors often save via temp file then rename into place
		if event.is_directory:
			return
		self.raw_events.put(os.fsdecode(event.dest_path))


#============================================


class WatchHandle:
	"""
	One running watch; `stop()` tears it down for good.

	After `stop()` returns, no stability thread of this handle emits.
	"""

	#============================================
	def __init__(
		self,
		folder: Path,
		extensions: set[str] | None,
		callback: FileCallback,
		*,
		debounce: float = DEBOUNCE_SECONDS,
		poll_interval: float = POLL_INTERVAL_SECONDS,
		max_polls: int = MAX_STABILITY_POLLS,
	) -> None:
		self.folder = folder
		self.extensions = extensions
		self.callback = callback
		self.debounce = debounce
		self.poll_interval = poll_interval
		self.max_polls = max_polls
		self._stop = threading.Event()
		self._raw_events: queue.Queue = queue.Queue()
		self._batches: queue.Queue = queue.Queue()
		# held across the callback so stop() waits out an emit in progress
		self._emit_lock = threading.RLock()
		self._observer = Observer()
		self._observer.schedule(_CreateEventHandler(self._raw_events), str(folder), recursive=False)
		self._debounce_thread = threading.Thread(
			target=self._debounce_loop, name="autoname-debounce", daemon=True
		)
		self._drain_thread = threading.Thread(
			target=self._drain_loop, name="autoname-drain", daemon=True
		)

	#============================================
	@property
	def active(self) -> bool:
		return not self._stop.is_set()

	#============================================
	def start(self) -> None:
		self._observer.start()
		self._debounce_thread.start()
		self._drain_thread.start()
		logger.info("watching %s for %s", self.folder, sorted(self.extensions or ["*"]))

	#============================================
	def stop(self) -> None:
		"""
		Stop observing and silence in-flight stability checks.
		"""
		with self._emit_lock:
			self._stop.set()
		self._observer.stop()
		self._observer.join()
		for thread in (self._debounce_thread, self._drain_thread):
			if thread.is_alive() and thread is not threading.current_thread():
				thread.join()
		logger.info("stopped watching %s", self.folder)

	#============================================
	def matches(self, path: Path) -> bool:
		if not self.extensions:
			return True
		return path.suffix.lower().lstrip(".") in self.extensions

	#============================================
	def _debounce_loop(self) -> None:
		while not self._stop.is_set():
			try:
				first = self._raw_events.get(timeout=QUEUE_TIMEOUT_SECONDS)
			except queue.Empty:
				continue
			batch = [first]
			deadline = time.monotonic() + self.debounce
			while not self._stop.is_set():
				remaining = deadline - time.monotonic()
				if remaining <= 0:
					break
				try:
					batch.append(self._raw_events.get(timeout=remaining))
				except queue.Empty:
					break
			# keep first-seen order, drop repeats within the window
			self._batches.put(list(dict.fromkeys(batch)))

	#============================================
	def _drain_loop(self) -> None:
		while not self._stop.is_set():
			try:
				batch = self._batches.get(timeout=QUEUE_TIMEOUT_SECONDS)
			except queue.Empty:
				continue
			for raw_path in batch:
				path = Path(raw_path)
				if path.name.startswith(".") or not self.matches(path):
					continue
				threading.Thread(
					target=self._check_and_emit,
					args=(path,),
					name=f"autoname-stable-{path.name}",
					daemon=True,
				).start()

	#============================================
	def _check_and_emit(self, path: Path) -> None:
		stable = wait_for_stable(
			path,
			interval=self.poll_interval,
			max_polls=self.max_polls,
			cancelled=self._stop.is_set,
			sleep=self._stop.wait,
		)
		if not stable:
			return
		with self._emit_lock:
			if self._stop.is_set():
				return
			logger.info("detected %s", path.name)
			try:
				self.callback(FileDetected(path=path, name=path.name))
			except Exception:
				logger.exception("watch callback failed for %s", path)


#============================================


class FolderWatcher:
	"""
	Owns the single active watch; starting again replaces it.
	"""

	#============================================
	def __init__(
		self,
		*,
		debounce: float = DEBOUNCE_SECONDS,
		poll_interval: float = POLL_INTERVAL_SECONDS,
		max_polls: int = MAX_STABILITY_POLLS,
	) -> None:
		self.debounce = debounce
		self.poll_interval = poll_interval
		self.max_polls = max_polls
		self._lock = threading.Lock()
		self._handle: WatchHandle | None = None

	#============================================
	@property
	def handle(self) -> WatchHandle | None:
		with self._lock:
			return self._handle

	#============================================
	def start(
		self,
		folder: Path | str,
		extensions: set[str] | list[str] | str | None,
		callback: FileCallback,
	) -> WatchHandle:
		"""
		Watch `folder` for new files, replacing any current watch.

		Args:
			folder: Existing directory to observe (not recursive).
			extensions: Extension filter; empty means every file.
			callback: Receives FileDetected from a worker thread.

		Returns:
			The running WatchHandle.

		Raises:
			WatchFolderError: `folder` is not an existing directory.
		"""
		folder = Path(folder).expanduser()
		if not folder.is_dir():
			raise WatchFolderError(f"Watch folder does not exist: {folder}")
		if isinstance(extensions, set):
			ext_filter = {ext.lower().lstrip(".") for ext in extensions} or None
		else:
			ext_filter = parse_exts(extensions)
		handle = WatchHandle(
			folder,
			ext_filter,
			callback,
			debounce=self.debounce,
			poll_interval=self.poll_interval,
			max_polls=self.max_polls,
		)
		with self._lock:
			previous = self._handle
			if previous is not None:
				previous.stop()
			handle.start()
			self._handle = handle
		return handle

	#============================================
	def stop(self) -> None:
		"""
		Stop the current watch, if any.
		"""
		with self._lock:
			handle = self._handle
			self._handle = None
			if handle is not None:
				handle.stop()
