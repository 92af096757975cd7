"""
Content-Length message framing.

Each message on the wire is a header block terminated by a blank line,
carrying ``Content-Length: <n>``, followed by exactly ``n`` bytes of
UTF-8 JSON.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Union

CONTENT_LENGTH_RE = re.compile(rb"content-length\s*:\s*(\d+)", re.IGNORECASE)
_TERMINATORS = (b"\r\n\r\n", b"\n\n")


@dataclass(frozen=True)
class Frame:
	"""One complete message body."""

	body: bytes


@dataclass(frozen=True)
class FrameError:
	"""A header block that could not be framed."""

	message: str
	header: bytes = b""


DecodedItem = Union[Frame, FrameError]


def encode_message(obj: Any) -> bytes:
	"""Serialize ``obj`` as JSON and prefix it with its header block."""
	payload = json.dumps(obj, ensure_ascii=False,
	                     separators=(",", ":")).encode("utf-8")
	header = f"Content-Length: {len(payload)}\r\n\r\n".encode("ascii")
	return header + payload


def _find_header_end(buffer: bytearray) -> tuple[int, int] | None:
	"""Return (index, terminator length) of the earliest header terminator."""
	best: tuple[int, int] | None = None
	for terminator in _TERMINATORS:
		idx = buffer.find(terminator)
		if idx != -1 and (best is None or idx < best[0]):
			best = (idx, len(terminator))
	return best


class FrameDecoder:
	"""Incremental decoder for a framed byte stream.

	Bytes are buffered across ``feed`` calls; every call returns all the
	messages that became complete, in wire order. A header block without
	a usable Content-Length is reported as a FrameError and dropped so
	that decoding resumes with the next block.
	"""

	def __init__(self) -> None:
		self._buffer = bytearray()

	@property
	def pending(self) -> int:
		"""Number of buffered bytes not yet consumed."""
		return len(self._buffer)

	def feed(self, chunk: bytes) -> list[DecodedItem]:
		self._buffer.extend(chunk)
		items: list[DecodedItem] = []
		while True:
			found = _find_header_end(self._buffer)
			if found is None:
				break
			end, term_len = found
			header = bytes(self._buffer[:end])
			if not header.strip():
				# stray blank lines between messages
				del self._buffer[:end + term_len]
				continue
			match = CONTENT_LENGTH_RE.search(header)
			if not match:
				del self._buffer[:end + term_len]
				items.append(
				    FrameError("Missing Content-Length header", header=header))
				continue
			length = int(match.group(1))
			start = end + term_len
			if len(self._buffer) < start + length:
				break
			items.append(Frame(bytes(self._buffer[start:start + length])))
			del self._buffer[:start + length]
		return items


__all__ = [
    "Frame",
    "FrameError",
    "FrameDecoder",
    "encode_message",
    "CONTENT_LENGTH_RE",
]
