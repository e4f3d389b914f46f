"""Incremental decoding of a JSON event stream.

`runc events` writes one JSON object per record to a pipe that stays open
for the lifetime of the container. Values are framed by a structural scan
rather than by line, so pretty-printed or concatenated objects decode too.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from typing import IO, Any, NoReturn

from pydantic import ValidationError

from magneto.core.errors import DecodeError
from magneto.core.schemas import Event, describe_validation_error

logger = logging.getLogger(__name__)

_WHITESPACE = " \t\r\n"


def find_value_end(buffer: str, start: int) -> int | None:
    """Find the end of the JSON object or array starting at `start`.

    Args:
        buffer: Text holding the value (and possibly more after it)
        start: Index of the opening brace or bracket

    Returns:
        Index one past the closing brace/bracket, or None if the value is incomplete
    """
    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(buffer)):
        ch = buffer[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
            if depth == 0:
                return i + 1

    return None


class RawEventDecoder:
    """Lazily decodes events from an open stream.

    Iterating yields one `Event` per complete top-level JSON object. A clean
    end of input ends the iteration; malformed or truncated input raises a
    terminal `DecodeError`, after which the decoder yields nothing more. An
    event whose envelope fails validation raises a non-terminal `DecodeError`
    and decoding continues with the next record.
    The stream is consumed irreversibly and the decoder cannot be restarted.

    Example:
        ```python
        for event in RawEventDecoder(sys.stdin):
            if event.is_stats:
                print(event.stats().pids.current)
        ```
    """

    def __init__(self, stream: IO[Any]) -> None:
        self._stream = stream
        self._buffer = ""
        self._done = False
        self._offset = 0  # characters consumed, for error messages

    def __iter__(self) -> Iterator[Event]:
        return self

    def __next__(self) -> Event:
        if self._done:
            raise StopIteration
        text = self._next_value()
        if text is None:
            self._done = True
            raise StopIteration
        return self._parse(text)

    @property
    def exhausted(self) -> bool:
        return self._done

    def _read_more(self) -> bool:
        # Text streams decode inside readline(), binary ones here
        try:
            line = self._stream.readline()
            if isinstance(line, bytes):
                line = line.decode("utf-8")
        except UnicodeDecodeError as e:
            self._fail(f"invalid UTF-8 in input: {e}")
        if not line:
            return False
        self._buffer += line
        return True

    def _next_value(self) -> str | None:
        while True:
            stripped = self._buffer.lstrip(_WHITESPACE)
            self._offset += len(self._buffer) - len(stripped)
            self._buffer = stripped

            if not self._buffer:
                if not self._read_more():
                    return None
                continue

            if self._buffer[0] not in "{[":
                self._fail(
                    f"invalid character {self._buffer[0]!r} looking for beginning of value "
                    f"at offset {self._offset}"
                )

            end = find_value_end(self._buffer, 0)
            if end is not None:
                text, self._buffer = self._buffer[:end], self._buffer[end:]
                self._offset += end
                return text

            if not self._read_more():
                self._fail(f"unexpected end of input at offset {self._offset + len(self._buffer)}")

    def _parse(self, text: str) -> Event:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            self._fail(f"malformed event: {e}")

        if not isinstance(data, dict):
            self._fail(f"expected a JSON object, got {type(data).__name__}")

        try:
            return Event.model_validate(data)
        except ValidationError as e:
            # Framing is intact, so only this record is lost
            raise DecodeError(f"invalid event envelope: {describe_validation_error(e)}") from e

    def _fail(self, message: str) -> NoReturn:
        self._done = True
        self._buffer = ""
        raise DecodeError(message, terminal=True)
