"""Chunking of oversized tool output.

- create_chunks / create_file_chunks / create_directory_chunks: Greedy line packing
- ChunkManager: Per-category memoization of chunk sets
- get_chunk / create_chunk_summary / format_chunk_output: Presentation helpers
"""

from .chunks import (
    ChunkCategory,
    ChunkSet,
    ContentChunk,
    create_chunk_summary,
    create_chunks,
    create_directory_chunks,
    create_file_chunks,
    create_web_chunks,
    extract_main_content,
    file_header,
    format_chunk_output,
    get_chunk,
)
from .manager import ChunkManager, ChunkProducer

__all__ = [
    "ChunkCategory",
    "ChunkManager",
    "ChunkProducer",
    "ChunkSet",
    "ContentChunk",
    "create_chunk_summary",
    "create_chunks",
    "create_directory_chunks",
    "create_file_chunks",
    "create_web_chunks",
    "extract_main_content",
    "file_header",
    "format_chunk_output",
    "get_chunk",
]
