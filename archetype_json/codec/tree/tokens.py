"""
Forward-only JSON token source.

Wraps the ijson push parser and tags every event with the input position
reached when the event was produced. The input is fed to ijson in small
pieces that end on JSON punctuation, so positions track the tokens closely
without a second pass over the text.
"""

from __future__ import annotations

import codecs
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import IO, Any

import ijson

from ..location import Location

# Pieces end right after a structural character
_PIECE_PATTERN = re.compile(r"[^{}\[\],:]*[{}\[\],:]|[^{}\[\],:]+")

_READ_SIZE = 8192

SCALAR_EVENTS = frozenset({"null", "boolean", "number", "integer", "double", "string"})

Source = str | bytes | IO[str] | IO[bytes]


@dataclass(frozen=True)
class TokenEvent:
    """A single ijson event with its position."""

    event: str  # start_map, end_map, start_array, end_array, map_key or a scalar event
    value: Any
    location: Location


def _read_chunks(source: Source) -> Iterator[str]:
    """Yield the input as text chunks."""
    if isinstance(source, str):
        yield source
        return
    if isinstance(source, (bytes, bytearray)):
        yield bytes(source).decode("utf-8")
        return
    decoder = codecs.getincrementaldecoder("utf-8")()
    while True:
        chunk = source.read(_READ_SIZE)
        if not chunk:
            break
        if isinstance(chunk, bytes):
            chunk = decoder.decode(chunk)
        yield chunk
    tail = decoder.decode(b"", final=True)
    if tail:
        yield tail


def _pieces(chunks: Iterable[str]) -> Iterator[str]:
    for chunk in chunks:
        yield from _PIECE_PATTERN.findall(chunk)


def iter_events(source: Source) -> Iterator[TokenEvent]:
    """Iterate over the JSON events of ``source``.

    Args:
        source: JSON text, UTF-8 bytes, or a text/binary file object

    Yields:
        TokenEvent for every ijson basic event, in document order

    Raises:
        ijson.JSONError: If the input is not valid JSON
    """
    events = ijson.sendable_list()
    coro = ijson.basic_parse_coro(events)
    line = 1
    column = 0
    for piece in _pieces(_read_chunks(source)):
        coro.send(piece.encode("utf-8"))
        newlines = piece.count("\n")
        if newlines:
            line += newlines
            column = len(piece) - piece.rfind("\n") - 1
        else:
            column += len(piece)
        location = Location(line, column)
        for event, value in events:
            yield TokenEvent(event, value, location)
        del events[:]
    coro.close()
    location = Location(line, column)
    for event, value in events:
        yield TokenEvent(event, value, location)
