#!/usr/bin/env python3
"""
Error kinds shared by extraction, naming, renaming, and watching.

Every error carries a short `hint` so a front end can offer a targeted
remedy instead of a raw traceback.
"""

from __future__ import annotations

#============================================


class AutonameError(RuntimeError):
	"""
	Base class for all pipeline errors.
	"""

	hint: str = ""

	def __init__(self, message: str = "") -> None:
		super().__init__(message)
		self.attempts = 1


class UnsupportedFormatError(AutonameError):
	hint = "convert the file to a supported format"

	def __init__(self, extension: str) -> None:
		self.extension = extension.lower().lstrip(".")
		super().__init__(f"Unsupported file format: .{self.extension}")


class ExtractionFailedError(AutonameError):
	hint = "the file may be scanned, encrypted, or empty"


class OcrUnavailableError(AutonameError):
	hint = "install Tesseract and poppler to enable OCR"


class ProviderUnreachableError(AutonameError):
	hint = "start the local server or check the endpoint URL"


class ProviderAuthError(AutonameError):
	hint = "check the API key"


class ProviderBadResponseError(AutonameError):
	hint = "the provider returned an unexpected payload; check the model name"


class ModelNotFoundError(AutonameError):
	hint = "pull the model or pick one that is installed"


class EmptyGeneratedNameError(AutonameError):
	hint = "the model returned no usable name; try a larger model"


class FilesystemConflictError(AutonameError):
	hint = "move or rename the file occupying the destination"


class SourceMissingError(AutonameError):
	hint = "the file was moved or deleted outside the app"


class HistoryEntryNotFoundError(AutonameError):
	hint = "refresh the history list"


class WatchFolderError(AutonameError):
	hint = "pick an existing folder to watch"


#============================================


def with_attempts(exc: AutonameError, attempts: int) -> AutonameError:
	"""
	Copy an error with its message annotated by the attempt count.

	Args:
		exc: Last error raised.
		attempts: Number of attempts made.

	Returns:
		New error of the same kind.
	"""
	annotated = AutonameError.__new__(type(exc))
	AutonameError.__init__(annotated, f"failed after {attempts} attempts: {exc}")
	annotated.attempts = attempts
	for key, value in vars(exc).items():
		if key != "attempts":
			setattr(annotated, key, value)
	return annotated


def describe(exc: BaseException) -> str:
	"""
	Render an error with its remedy hint for display.
	"""
	hint = getattr(exc, "hint", "")
	if hint:
		return f"{exc} ({hint})"
	return str(exc)
