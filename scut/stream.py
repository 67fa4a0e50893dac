from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import BinaryIO

from .config import ScutSettings
from .extractor import scanner_for
from .models import ColumnSet, DelimiterMode

LOGGER = logging.getLogger(__name__)

LINE_TERMINATOR = b"\n"
_CARRIAGE_RETURN = b"\r"


@dataclass
class StreamStats:
    lines_read: int = 0
    lines_truncated: int = 0


def _strip_terminator(chunk: bytes) -> bytes:
    """Remove one ``\\n`` or ``\\r\\n``; a ``\\r`` not followed by ``\\n`` is content."""
    if not chunk.endswith(LINE_TERMINATOR):
        return chunk
    chunk = chunk[:-1]
    if chunk.endswith(_CARRIAGE_RETURN):
        chunk = chunk[:-1]
    return chunk


def _drain_line(stream: BinaryIO, chunk_size: int) -> None:
    while True:
        chunk = stream.readline(chunk_size)
        if not chunk or chunk.endswith(LINE_TERMINATOR):
            return


def iter_bounded_lines(stream: BinaryIO, max_line_length: int) -> Iterator[tuple[bytes, bool]]:
    """Yield ``(line, truncated)`` pairs with terminators stripped.

    At most ``max_line_length`` bytes of a line are kept. The remainder of an
    over-long line is read and dropped, it never becomes a line of its own.
    """
    if max_line_length < 1:
        raise ValueError(f"max_line_length must be >= 1, got {max_line_length}.")

    limit = max_line_length + 1
    while True:
        chunk = stream.readline(limit)
        if not chunk:
            return

        if chunk.endswith(LINE_TERMINATOR) or len(chunk) < limit:
            yield _strip_terminator(chunk), False
            continue

        # One byte past the bound and no newline yet: either the \r of a
        # \r\n ending exactly at the bound, or real overflow.
        head, tail = chunk[:max_line_length], chunk[max_line_length:]
        following = stream.readline(limit)
        if tail == _CARRIAGE_RETURN and following == LINE_TERMINATOR:
            yield head, False
            continue
        if following and not following.endswith(LINE_TERMINATOR):
            _drain_line(stream, limit)
        yield head, True


def process_stream(
    input_stream: BinaryIO,
    output_stream: BinaryIO,
    mode: DelimiterMode,
    columns: ColumnSet,
    settings: ScutSettings,
) -> StreamStats:
    scanner = scanner_for(mode)
    encoding = settings.input_encoding
    stats = StreamStats()

    for raw_line, truncated in iter_bounded_lines(input_stream, settings.max_line_length):
        stats.lines_read += 1
        if truncated:
            stats.lines_truncated += 1
            LOGGER.debug(
                "Line %s longer than %s bytes, truncated.",
                stats.lines_read,
                settings.max_line_length,
            )

        line = raw_line.decode(encoding, errors="replace")
        output_stream.write(scanner.extract(line, columns).encode(encoding, errors="replace"))
        output_stream.write(LINE_TERMINATOR)
        if settings.flush_each_line:
            output_stream.flush()

    output_stream.flush()

    LOGGER.debug("Processed %s line(s) in %s mode.", stats.lines_read, mode.value)
    if stats.lines_truncated:
        LOGGER.warning(
            "%s line(s) exceeded %s bytes and were truncated.",
            stats.lines_truncated,
            settings.max_line_length,
        )
    return stats
