"""Exception hierarchy shared by the extraction path, the quiz session and the controller."""

from __future__ import annotations


PROCESSING_FAILED_MESSAGE = (
	"Failed to process the documents. Please try again with a clearer PDF or fewer files."
)


class FlashQuizError(Exception):
	"""Base class for every error raised by this package."""


class ConfigurationError(FlashQuizError):
	"""A required setting (the Gemini API key) is missing."""


class EncodingError(FlashQuizError):
	"""A selected file could not be read into an inline document part."""


class ExtractionError(FlashQuizError):
	"""The extraction service did not produce a usable quiz."""


class EmptyResponseError(ExtractionError):
	pass


class MalformedResponseError(ExtractionError):
	pass


class EmptyResultError(ExtractionError):
	pass


class InvalidTransitionError(FlashQuizError):
	"""An operation was attempted from a state that forbids it."""

	def __init__(self, operation: str, state: str) -> None:
		super().__init__(f"{operation} is not allowed in state {state}")
		self.operation = operation
		self.state = state
