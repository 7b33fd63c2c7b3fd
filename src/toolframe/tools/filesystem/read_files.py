"""Read one or many text files with line windows and chunking.

A single file comes back with a ``File: <path>`` header. When the content
overflows the chunk budget, a summary is returned instead and individual
chunks are fetched with ``options.chunk_index``.

Example:
    >>> await tool.execute({"type": "readFiles", "paths": ["notes.txt"],
    ...                     "options": {"lines": {"from": 2, "to": 3}}})
    'File: notes.txt (lines 2 to 3)\\n===============\\nsecond\\nthird'
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from ...chunking import (
    ChunkCategory,
    ChunkSet,
    create_chunks,
    create_file_chunks,
    format_chunk_output,
)
from ...core import BaseTool, ToolCategory, ToolMetadata, ToolParams
from ...errors import ExecutionError
from ...text import LineRange, describe_line_range, filter_by_line_range, validate_line_range


class ReadFileOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    encoding: str = Field(default="utf-8", description="Text encoding")
    chunk_index: PositiveInt | None = Field(default=None, description="1-based chunk to return")
    chunk_size: PositiveInt | None = Field(default=None, description="Characters per chunk")
    lines: LineRange | None = Field(default=None, description="Inclusive 1-based line window")


class ReadFilesParams(ToolParams):
    type: Literal["readFiles"] = "readFiles"
    paths: list[str] = Field(..., min_length=1, description="Files to read")
    options: ReadFileOptions = Field(default_factory=ReadFileOptions)


class ReadFilesTool(BaseTool[ReadFilesParams]):
    """Read file contents, optionally windowed by line range or split into chunks."""

    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="readFiles",
        description="Read contents of specified files with optional line range and chunking support",
        category=ToolCategory.FILESYSTEM,
    )
    params_schema: ClassVar[type[ReadFilesParams]] = ReadFilesParams

    def check(self, params: ReadFilesParams) -> list[str]:
        errors = [f"Path at index {i} must not be empty" for i, p in enumerate(params.paths) if not p.strip()]
        return errors + validate_line_range(params.options.lines)

    async def run(self, params: ReadFilesParams) -> str:
        opts = params.options
        self.logger.debug(
            "Reading files",
            tool=self.name,
            file_count=len(params.paths),
            chunk_index=opts.chunk_index,
            chunk_size=opts.chunk_size,
        )
        if len(params.paths) == 1:
            return await self._read_single(params.paths[0], opts)
        return await self._read_many(params.paths, opts)

    # ─────────────────────────────────────────────────────────────────
    # Single file
    # ─────────────────────────────────────────────────────────────────

    async def _read_single(self, file_path: str, opts: ReadFileOptions) -> str:
        try:
            raw = await asyncio.to_thread(Path(file_path).read_text, encoding=opts.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise ExecutionError(f"Error reading file {file_path}: {e}", self.name, e, path=file_path) from e

        content = filter_by_line_range(raw, opts.lines)
        note = describe_line_range(len(raw.split("\n")), opts.lines)
        size = opts.chunk_size or self.deps.chunks.max_chunk_size

        def produce() -> ChunkSet:
            return create_file_chunks(content, file_path, size, note=note)

        if opts.chunk_index is not None:
            chunks = await self.deps.chunks.get_or_create(ChunkCategory.FILE, f"{file_path}{note}@{size}", produce)
            chunk = self.deps.chunks.get_chunk(chunks, opts.chunk_index)
            self.logger.info(f"Returning file chunk {chunk.index}/{chunk.total} for {file_path}", tool=self.name)
            return format_chunk_output(chunk, "File Content")

        chunks = produce()
        if len(chunks) == 1:
            self.logger.info(f"Returning complete file content for {file_path}", tool=self.name)
            return chunks[0].content

        total_lines = len(content.split("\n"))
        self.logger.info(
            f"Returning file summary with {len(chunks)} chunks",
            tool=self.name,
            file_path=file_path,
            total_lines=total_lines,
        )
        return "\n".join([
            "File content has been split into multiple chunks:",
            f"File: {file_path}",
            f"Total Chunks: {len(chunks)}",
            f"Total Lines: {total_lines}",
            "",
            "To retrieve specific chunks, use the readFiles tool with the chunk_index option:",
            "Example usage:",
            "```",
            f'{{"type": "readFiles", "paths": ["{file_path}"], "options": {{"chunk_index": 1}}}}',
            "```",
        ])

    # ─────────────────────────────────────────────────────────────────
    # Multiple files
    # ─────────────────────────────────────────────────────────────────

    async def _read_many(self, paths: list[str], opts: ReadFileOptions) -> str:
        sections: list[str] = []
        for file_path in paths:
            try:
                raw = await asyncio.to_thread(Path(file_path).read_text, encoding=opts.encoding)
            except (OSError, UnicodeDecodeError) as e:
                self.logger.error(f"Error reading file: {file_path}", tool=self.name, error=str(e))
                sections.append(f"## Error reading file: {file_path}\nError: {e}")
                continue
            note = describe_line_range(len(raw.split("\n")), opts.lines)
            body = filter_by_line_range(raw, opts.lines)
            sections.append(f"## File: {file_path}{note}\n{'=' * (len(file_path) + 6)}\n{body}")
            self.logger.verbose(f"File read successfully: {file_path}", tool=self.name, content_length=len(raw))

        combined = "\n\n".join(sections)
        size = opts.chunk_size or self.deps.chunks.max_chunk_size

        def produce() -> ChunkSet:
            return create_chunks(combined, {"files": list(paths)}, size)

        if opts.chunk_index is not None:
            key = "||".join(paths)
            if opts.lines is not None:
                key += f"#{opts.lines.from_ or 1}-{opts.lines.to or 'end'}"
            key += f"@{size}"
            chunks = await self.deps.chunks.get_or_create(ChunkCategory.FILE, key, produce)
            chunk = self.deps.chunks.get_chunk(chunks, opts.chunk_index)
            self.logger.info(f"Returning multiple files chunk {chunk.index}/{chunk.total}", tool=self.name)
            return format_chunk_output(chunk, "Files Content")

        chunks = produce()
        if len(chunks) == 1:
            self.logger.info(f"Returning complete content for {len(paths)} files", tool=self.name)
            return chunks[0].content

        self.logger.info(f"Returning multiple files summary with {len(chunks)} chunks", tool=self.name)
        listed = ", ".join(f'"{p}"' for p in paths)
        return "\n".join([
            "Files content has been split into multiple chunks:",
            f"Files: {len(paths)} files",
            f"Total Chunks: {len(chunks)}",
            "",
            "To retrieve specific chunks, use the readFiles tool with the chunk_index option:",
            "Example usage:",
            "```",
            f'{{"type": "readFiles", "paths": [{listed}], "options": {{"chunk_index": 1}}}}',
            "```",
        ])
