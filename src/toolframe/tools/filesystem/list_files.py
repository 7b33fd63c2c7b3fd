"""Directory tree listing with ignore patterns, depth limit and chunking."""

from __future__ import annotations

import asyncio
import fnmatch
import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from ...chunking import ChunkCategory, ChunkSet, create_directory_chunks, format_chunk_output
from ...core import BaseTool, ToolCategory, ToolMetadata, ToolParams
from ...errors import ExecutionError

UNLIMITED_DEPTH = -1


class ListDirectoryOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    max_depth: int = Field(default=UNLIMITED_DEPTH, ge=-1, description="-1 for unlimited")
    ignore_files: list[str] | None = Field(default=None, description="Glob patterns to skip")
    chunk_index: PositiveInt | None = None
    chunk_size: PositiveInt | None = None


class ListFilesParams(ToolParams):
    type: Literal["listFiles"] = "listFiles"
    path: str = Field(..., min_length=1, description="Directory to list")
    options: ListDirectoryOptions = Field(default_factory=ListDirectoryOptions)


@dataclass(slots=True)
class FileTree:
    content: str
    has_more: bool = False


class IgnoreMatcher:
    """Gitignore-flavored fnmatch patterns.

    Patterns without a slash match any entry name; patterns with a slash match
    the path relative to the listing root. A trailing slash restricts a
    pattern to directories.
    """

    __slots__ = ("_patterns",)

    def __init__(self, patterns: list[str]) -> None:
        self._patterns = [p.strip() for p in patterns if p.strip() and not p.startswith("#")]

    def is_ignored(self, rel_path: str, is_dir: bool) -> bool:
        name = rel_path.rsplit("/", 1)[-1]
        for pattern in self._patterns:
            dir_only = pattern.endswith("/")
            pat = pattern.rstrip("/")
            if dir_only and not is_dir:
                continue
            target = rel_path if "/" in pat else name
            if fnmatch.fnmatch(target, pat.lstrip("/")):
                return True
        return False


def build_file_tree(
    root: Path,
    matcher: IgnoreMatcher,
    max_depth: int = UNLIMITED_DEPTH,
    prefix: str = "",
    depth: int = 0,
    rel: str = "",
) -> FileTree:
    """Render a directory as a box-drawing tree."""
    if max_depth != UNLIMITED_DEPTH and depth > max_depth:
        return FileTree(f"{prefix}...\n", has_more=True)

    entries = sorted(os.scandir(root), key=lambda e: (not e.is_dir(), e.name.lower()))
    visible = [
        e for e in entries
        if not matcher.is_ignored(f"{rel}{e.name}", e.is_dir())
    ]
    parts: list[str] = []
    has_more = False
    for i, entry in enumerate(visible):
        last = i == len(visible) - 1
        branch = prefix + ("└── " if last else "├── ")
        if entry.is_dir():
            parts.append(f"{branch}📁 {entry.name}\n")
            sub = build_file_tree(
                Path(entry.path), matcher, max_depth,
                prefix + ("    " if last else "│   "), depth + 1, f"{rel}{entry.name}/",
            )
            parts.append(sub.content)
            has_more = has_more or sub.has_more
        else:
            parts.append(f"{branch}📄 {entry.name}\n")
    return FileTree("".join(parts), has_more)


class ListFilesTool(BaseTool[ListFilesParams]):
    """List a directory tree, honoring ignore patterns from options or config."""

    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="listFiles",
        description="List files and directories with optional filtering and chunking",
        category=ToolCategory.FILESYSTEM,
    )
    params_schema: ClassVar[type[ListFilesParams]] = ListFilesParams

    async def run(self, params: ListFilesParams) -> str:
        opts = params.options
        ignore = opts.ignore_files
        if ignore is None:
            ignore = self.get_config("agent_chat_config.ignore_files", [])
        dir_path = params.path
        self.logger.debug(
            f"Listing files in directory: {dir_path}",
            tool=self.name,
            max_depth=opts.max_depth,
            ignore_files_count=len(ignore),
            chunk_index=opts.chunk_index,
        )

        try:
            tree = await asyncio.to_thread(build_file_tree, Path(dir_path), IgnoreMatcher(list(ignore)), opts.max_depth)
        except OSError as e:
            raise ExecutionError(f"Error listing directory structure: {e}", self.name, e, path=dir_path) from e

        size = opts.chunk_size or self.deps.chunks.max_chunk_size

        def produce() -> ChunkSet:
            return create_directory_chunks(tree.content, dir_path, size)

        if opts.chunk_index is not None:
            chunks = await self.deps.chunks.get_or_create(
                ChunkCategory.DIRECTORY, f"{dir_path}-{opts.max_depth}@{size}|{','.join(sorted(ignore))}", produce,
            )
            chunk = self.deps.chunks.get_chunk(chunks, opts.chunk_index)
            self.logger.info(
                f"Returning directory structure chunk {chunk.index} of {chunk.total}",
                tool=self.name,
                dir_path=dir_path,
            )
            return format_chunk_output(chunk, "Directory Structure")

        chunks = produce()
        if len(chunks) == 1:
            self.logger.info("Returning complete directory structure", tool=self.name, dir_path=dir_path)
            return f"Directory Structure:\n\n{chunks[0].content}"

        self.logger.info(
            f"Returning directory structure summary with {len(chunks)} chunks",
            tool=self.name,
            has_more=tree.has_more,
        )
        depth = "unlimited" if opts.max_depth == UNLIMITED_DEPTH else str(opts.max_depth)
        lines = [
            "Directory structure has been split into multiple chunks:",
            f"Total Chunks: {len(chunks)}",
            f"Max Depth: {depth}",
        ]
        if tree.has_more:
            lines += ["", "Note: Some directories are truncated due to depth limit."]
        lines += [
            "",
            "To retrieve specific chunks, use the listFiles tool with the chunk_index option:",
            "Example usage:",
            "```",
            f'{{"type": "listFiles", "path": "{dir_path}", "options": {{"chunk_index": 1, "max_depth": {opts.max_depth}}}}}',
            "```",
        ]
        return "\n".join(lines)
