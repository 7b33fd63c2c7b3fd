"""Line-oriented splitting of oversized content into numbered chunks.

Chunks are built greedily: whole lines accumulate until the next one would
overflow the character budget, at which point the current chunk is sealed.
Concatenating every chunk's content in index order reproduces the input
exactly (plus the header for file chunks).

Example:
    >>> chunks = create_chunks("a\\nb\\nc", max_chunk_size=4)
    >>> [c.content for c in chunks]
    ['a\\nb\\n', 'c']
    >>> chunks[0].total
    2
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, Field

from toolframe.errors import ChunkIndexOutOfRangeError
from toolframe.foundation.config import DEFAULT_MAX_CHUNK_SIZE


class ChunkCategory(StrEnum):
    """Independent key spaces of the chunk cache."""
    FILE = "file"
    DIRECTORY = "directory"
    WEB = "web"


class ContentChunk(BaseModel):
    """One bounded, numbered slice of larger content.

    Attributes:
        content: Slice text
        index: 1-based position
        total: Number of chunks in the set
        metadata: ``timestamp`` plus provenance (``file_path``, ``dir_path``, ``url``)
    """

    model_config = ConfigDict(frozen=True)

    content: str
    index: int = Field(ge=1)
    total: int = Field(ge=1)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def timestamp(self) -> datetime | None:
        return self.metadata.get("timestamp")


ChunkSet = tuple[ContentChunk, ...]


# ─────────────────────────────────────────────────────────────────────────────
# Splitting
# ─────────────────────────────────────────────────────────────────────────────


def _split_lines(content: str) -> list[str]:
    """Split on "\\n" keeping terminators; a final unterminated line stays bare."""
    pieces = content.split("\n")
    lines = [p + "\n" for p in pieces[:-1]]
    if pieces[-1]:
        lines.append(pieces[-1])
    return lines


def _pack(lines: Sequence[str], budget: int, header: str = "") -> list[str]:
    bodies: list[str] = []
    current: list[str] = []
    size = len(header)
    for line in lines:
        if current and size + len(line) > budget:
            bodies.append("".join(current))
            current, size = [], 0
        current.append(line)
        size += len(line)
    bodies.append("".join(current))
    # header never sits alone in a chunk
    bodies[0] = header + bodies[0]
    return bodies


def _build(bodies: list[str], metadata: Mapping[str, Any]) -> ChunkSet:
    total = len(bodies)
    stamp = datetime.now(UTC)
    return tuple(
        ContentChunk(content=body, index=i, total=total, metadata={**metadata, "timestamp": stamp})
        for i, body in enumerate(bodies, 1)
    )


def create_chunks(
    content: str,
    metadata: Mapping[str, Any] | None = None,
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE,
) -> ChunkSet:
    """Split content into chunks of at most ``max_chunk_size`` characters.

    A single line longer than the budget becomes its own chunk. Empty input
    yields one empty chunk.
    """
    return _build(_pack(_split_lines(content), max_chunk_size), metadata or {})


def file_header(file_path: str, note: str = "") -> str:
    """``File: <path><note>`` followed by an ``=`` underline sized to the path."""
    return f"File: {file_path}{note}\n{'=' * (len(file_path) + 6)}\n"


def create_file_chunks(
    content: str,
    file_path: str,
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE,
    *,
    note: str = "",
) -> ChunkSet:
    """Chunk file content; the first chunk starts with a ``File:`` header.

    The header counts against the first chunk's budget only. ``note`` is
    appended to the header line (e.g. a line-range description).
    """
    bodies = _pack(_split_lines(content), max_chunk_size, header=file_header(file_path, note))
    return _build(bodies, {"file_path": file_path})


def create_directory_chunks(tree: str, dir_path: str, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE) -> ChunkSet:
    return create_chunks(tree, {"dir_path": dir_path, "type": "directory"}, max_chunk_size)


def create_web_chunks(content: str, url: str, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE) -> ChunkSet:
    return create_chunks(content, {"url": url, "type": "web"}, max_chunk_size)


# ─────────────────────────────────────────────────────────────────────────────
# Lookup & Presentation
# ─────────────────────────────────────────────────────────────────────────────


def get_chunk(chunks: Sequence[ContentChunk], index: int) -> ContentChunk:
    """1-based bounds-checked lookup."""
    if index < 1 or index > len(chunks):
        raise ChunkIndexOutOfRangeError(index, len(chunks))
    return chunks[index - 1]


def create_chunk_summary(chunks: Sequence[ContentChunk]) -> str:
    """Describe a chunk set and how to request an individual chunk."""
    meta = chunks[0].metadata if chunks else {}
    stamp = meta.get("timestamp")
    lines = [
        f"Content has been split into {len(chunks)} chunks:",
        f"URL: {meta['url']}" if meta.get("url") else "",
        f"File: {meta['file_path']}" if meta.get("file_path") else "",
        f"Directory: {meta['dir_path']}" if meta.get("dir_path") else "",
        f"Timestamp: {stamp.isoformat()}" if isinstance(stamp, datetime) else "",
        "",
        "To retrieve specific chunks, use the chunk_index option:",
        f"Total Chunks: {len(chunks)}",
        "Example usage:",
        "```",
        '{ "chunk_index": 1 }',
        "```",
    ]
    return "\n".join(line for line in lines if line)


def format_chunk_output(chunk: ContentChunk, label: str = "Content") -> str:
    return f"{label} (Chunk {chunk.index}/{chunk.total}):\n\n{chunk.content}"


_WS = re.compile(r"\s+")


def extract_main_content(html: str) -> str:
    """Visible text of an HTML document with whitespace collapsed."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    return _WS.sub(" ", soup.get_text(separator=" ")).strip()
