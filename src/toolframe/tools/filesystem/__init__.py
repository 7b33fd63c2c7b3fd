"""Filesystem tools: read, list, write, create, move, copy, and edit."""

from .apply_diff import ApplyDiffEditParams, ApplyDiffEditTool
from .list_files import IgnoreMatcher, ListDirectoryOptions, ListFilesParams, ListFilesTool, build_file_tree
from .read_files import ReadFileOptions, ReadFilesParams, ReadFilesTool
from .write import (
    CopyFileParams,
    CopyFileTool,
    CreateFolderParams,
    CreateFolderTool,
    MoveFileParams,
    MoveFileTool,
    WriteToFileParams,
    WriteToFileTool,
)

__all__ = [
    "ApplyDiffEditParams", "ApplyDiffEditTool",
    "CopyFileParams", "CopyFileTool",
    "CreateFolderParams", "CreateFolderTool",
    "IgnoreMatcher", "ListDirectoryOptions", "ListFilesParams", "ListFilesTool", "build_file_tree",
    "MoveFileParams", "MoveFileTool",
    "ReadFileOptions", "ReadFilesParams", "ReadFilesTool",
    "WriteToFileParams", "WriteToFileTool",
]
