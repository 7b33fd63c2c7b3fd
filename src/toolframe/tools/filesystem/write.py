"""File mutation tools: write, create folder, move, copy."""

from __future__ import annotations

import asyncio
import shutil
from collections.abc import Mapping
from pathlib import Path
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, Field

from ...core import BaseTool, ToolCategory, ToolMetadata, ToolParams
from ...errors import ExecutionError


class WriteToFileParams(ToolParams):
    type: Literal["writeToFile"] = "writeToFile"
    path: str = Field(..., min_length=1, description="Destination file path")
    content: str = Field(..., description="Text to write")


class CreateFolderParams(ToolParams):
    type: Literal["createFolder"] = "createFolder"
    path: str = Field(..., min_length=1, description="Directory to create")


class MoveFileParams(ToolParams):
    type: Literal["moveFile"] = "moveFile"
    source: str = Field(..., min_length=1, description="The current path of the file")
    destination: str = Field(..., min_length=1, description="The new path for the file")


class CopyFileParams(ToolParams):
    type: Literal["copyFile"] = "copyFile"
    source: str = Field(..., min_length=1, description="The path of the file to copy")
    destination: str = Field(..., min_length=1, description="The path for the copy")


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _move(source: Path, destination: Path) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(source, destination)


def _copy(source: Path, destination: Path) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, destination)


class WriteToFileTool(BaseTool[WriteToFileParams]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="writeToFile",
        description="Write content to a file at the specified path, creating parent directories",
        category=ToolCategory.FILESYSTEM,
    )
    params_schema: ClassVar[type[WriteToFileParams]] = WriteToFileParams

    async def run(self, params: WriteToFileParams) -> str:
        self.logger.debug(f"Writing to file: {params.path}", tool=self.name, content_length=len(params.content))
        try:
            await asyncio.to_thread(_write_text, Path(params.path), params.content)
        except OSError as e:
            raise ExecutionError(f"Error writing to file: {e}", self.name, e, path=params.path) from e
        self.logger.info(f"Content written to file: {params.path}", tool=self.name)
        return f"Content written to file: {params.path}\n\n{params.content}"

    def sanitize_input_for_logging(self, request: BaseModel | Mapping[str, Any]) -> str:
        return self.truncated_projection(request, content=200)


class CreateFolderTool(BaseTool[CreateFolderParams]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="createFolder",
        description="Create a directory, including any missing parent directories",
        category=ToolCategory.FILESYSTEM,
    )
    params_schema: ClassVar[type[CreateFolderParams]] = CreateFolderParams

    async def run(self, params: CreateFolderParams) -> str:
        try:
            await asyncio.to_thread(Path(params.path).mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise ExecutionError(f"Error creating folder: {e}", self.name, e, path=params.path) from e
        self.logger.info(f"Folder created: {params.path}", tool=self.name)
        return f"Folder created: {params.path}"


class MoveFileTool(BaseTool[MoveFileParams]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="moveFile",
        description="Move a file from one location to another, creating destination directories",
        category=ToolCategory.FILESYSTEM,
    )
    params_schema: ClassVar[type[MoveFileParams]] = MoveFileParams

    async def run(self, params: MoveFileParams) -> str:
        self.logger.debug(f"Moving file from {params.source} to {params.destination}", tool=self.name)
        try:
            await asyncio.to_thread(_move, Path(params.source), Path(params.destination))
        except OSError as e:
            raise ExecutionError(
                f"Error moving file: {e}", self.name, e,
                source=params.source, destination=params.destination,
            ) from e
        self.logger.info("File moved successfully", tool=self.name, source=params.source, destination=params.destination)
        return f"File moved: {params.source} to {params.destination}"


class CopyFileTool(BaseTool[CopyFileParams]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="copyFile",
        description="Copy a file to another location, creating destination directories",
        category=ToolCategory.FILESYSTEM,
    )
    params_schema: ClassVar[type[CopyFileParams]] = CopyFileParams

    async def run(self, params: CopyFileParams) -> str:
        self.logger.debug(f"Copying file from {params.source} to {params.destination}", tool=self.name)
        try:
            await asyncio.to_thread(_copy, Path(params.source), Path(params.destination))
        except OSError as e:
            raise ExecutionError(
                f"Error copying file: {e}", self.name, e,
                source=params.source, destination=params.destination,
            ) from e
        self.logger.info("File copied successfully", tool=self.name, source=params.source, destination=params.destination)
        return f"File copied: {params.source} to {params.destination}"
