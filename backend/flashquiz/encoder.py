from __future__ import annotations
import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict

from .errors import EncodingError

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"


@dataclass(frozen=True)
class DocumentFile:
	"""A user-selected file held in memory until the batch is submitted."""

	filename: str
	mime_type: str
	data: bytes

	@property
	def size(self) -> int:
		return len(self.data)


def is_pdf(mime_type: str | None) -> bool:
	# The browser's declared type decides, as in the file picker's accept filter
	return (mime_type or "").split(";")[0].strip().lower() == PDF_MIME_TYPE


def encode_document(file: DocumentFile) -> Dict[str, Any]:
	"""Return a Gemini inline-data part for ``file``.

	The encoder does not care about the media type; callers only hand it PDFs.
	"""
	data = getattr(file, "data", None)
	if not isinstance(data, (bytes, bytearray, memoryview)):
		raise EncodingError(f"Could not read {getattr(file, 'filename', '<unknown>')!r}")
	try:
		encoded = base64.b64encode(bytes(data)).decode("ascii")
	except (TypeError, ValueError) as err:
		raise EncodingError(f"Could not encode {file.filename!r}") from err
	logger.debug("Encoded %s (%d bytes, %s)", file.filename, len(data), file.mime_type)
	return {"inline_data": {"mime_type": file.mime_type, "data": encoded}}
