"""Tests for the filesystem tools over a temporary directory."""

from __future__ import annotations

from pathlib import Path

import orjson
import pytest

from toolframe.core import ToolDependencies
from toolframe.errors import ToolResponseError
from toolframe.observability import MemoryRenderer
from toolframe.tools.filesystem import (
    ApplyDiffEditTool,
    CopyFileTool,
    CreateFolderTool,
    IgnoreMatcher,
    ListFilesTool,
    MoveFileTool,
    ReadFilesTool,
    WriteToFileTool,
)

FIVE_LINES = "line1\nline2\nline3\nline4\nline5"


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "a.txt").write_text(FIVE_LINES, encoding="utf-8")
    (tmp_path / "b.txt").write_text("bee\n", encoding="utf-8")
    return tmp_path


def _envelope(exc: pytest.ExceptionInfo[ToolResponseError]) -> dict:
    return orjson.loads(str(exc.value))


# ─────────────────────────────────────────────────────────────────────────────
# readFiles
# ─────────────────────────────────────────────────────────────────────────────


class TestReadFiles:
    @pytest.mark.asyncio
    async def test_line_range_end_to_end(self, workdir: Path, deps: ToolDependencies) -> None:
        out = await ReadFilesTool(deps).execute(
            {"type": "readFiles", "paths": ["a.txt"], "options": {"lines": {"from": 2, "to": 3}}},
        )
        header, underline, *body = out.split("\n")
        assert header == "File: a.txt (lines 2 to 3)"
        assert underline == "=" * len("a.txt" + "      ")
        assert "\n".join(body) == "line2\nline3"

    @pytest.mark.asyncio
    async def test_whole_file(self, workdir: Path, deps: ToolDependencies) -> None:
        out = await ReadFilesTool(deps).execute({"type": "readFiles", "paths": ["a.txt"]})
        assert out.startswith("File: a.txt\n")
        assert out.endswith(FIVE_LINES)

    @pytest.mark.asyncio
    async def test_multiple_files(self, workdir: Path, deps: ToolDependencies) -> None:
        out = await ReadFilesTool(deps).execute({"type": "readFiles", "paths": ["a.txt", "b.txt", "missing.txt"]})
        assert "## File: a.txt" in out
        assert "## File: b.txt" in out
        assert "## Error reading file: missing.txt" in out

    @pytest.mark.asyncio
    async def test_invalid_range_never_reads(self, workdir: Path, deps: ToolDependencies) -> None:
        with pytest.raises(ToolResponseError) as exc:
            await ReadFilesTool(deps).execute(
                {"type": "readFiles", "paths": ["a.txt"], "options": {"lines": {"from": 5, "to": 2}}},
            )
        body = _envelope(exc)
        assert body["type"] == "VALIDATION"
        assert 'must be less than or equal to "to"' in body["error"]

    @pytest.mark.asyncio
    async def test_chunked_read(self, workdir: Path, deps: ToolDependencies) -> None:
        (workdir / "big.txt").write_text("".join(f"entry {i}\n" for i in range(100)), encoding="utf-8")
        tool = ReadFilesTool(deps)
        summary = await tool.execute({"type": "readFiles", "paths": ["big.txt"], "options": {"chunk_size": 100}})
        assert summary.startswith("File content has been split into multiple chunks:")
        assert "File: big.txt" in summary

        first = await tool.execute(
            {"type": "readFiles", "paths": ["big.txt"], "options": {"chunk_size": 100, "chunk_index": 1}},
        )
        assert first.startswith("File Content (Chunk 1/")
        assert "File: big.txt" in first

    @pytest.mark.asyncio
    async def test_chunk_size_change_rebuilds_chunks(self, workdir: Path, deps: ToolDependencies) -> None:
        (workdir / "big.txt").write_text("".join(f"entry {i}\n" for i in range(100)), encoding="utf-8")
        tool = ReadFilesTool(deps)

        async def header(chunk_size: int) -> str:
            out = await tool.execute(
                {"type": "readFiles", "paths": ["big.txt"], "options": {"chunk_size": chunk_size, "chunk_index": 1}},
            )
            return out.split("\n", 1)[0]

        small, large = await header(100), await header(400)
        assert small != large
        assert deps.chunks.store_size("file") == 2

    @pytest.mark.asyncio
    async def test_chunk_index_out_of_range(self, workdir: Path, deps: ToolDependencies) -> None:
        with pytest.raises(ToolResponseError) as exc:
            await ReadFilesTool(deps).execute({"type": "readFiles", "paths": ["a.txt"], "options": {"chunk_index": 7}})
        body = _envelope(exc)
        assert body["type"] == "VALIDATION"
        assert body["requested_index"] == 7
        assert body["total_chunks"] == 1

    @pytest.mark.asyncio
    async def test_missing_single_file_is_execution_error(self, workdir: Path, deps: ToolDependencies) -> None:
        with pytest.raises(ToolResponseError) as exc:
            await ReadFilesTool(deps).execute({"type": "readFiles", "paths": ["nope.txt"]})
        body = _envelope(exc)
        assert body["type"] == "EXECUTION"
        assert body["path"] == "nope.txt"


# ─────────────────────────────────────────────────────────────────────────────
# listFiles
# ─────────────────────────────────────────────────────────────────────────────


class TestListFiles:
    @pytest.fixture
    def tree(self, workdir: Path) -> Path:
        (workdir / "src" / "pkg").mkdir(parents=True)
        (workdir / "src" / "pkg" / "mod.py").write_text("")
        (workdir / "node_modules").mkdir()
        (workdir / "node_modules" / "dep.js").write_text("")
        (workdir / "notes.log").write_text("")
        return workdir

    @pytest.mark.asyncio
    async def test_tree_uses_config_ignores(self, tree: Path, deps: ToolDependencies) -> None:
        out = await ListFilesTool(deps).execute({"type": "listFiles", "path": str(tree)})
        assert out.startswith("Directory Structure:\n\n")
        assert "📁 src" in out
        assert "📄 mod.py" in out
        assert "node_modules" not in out

    @pytest.mark.asyncio
    async def test_explicit_ignores_and_depth(self, tree: Path, deps: ToolDependencies) -> None:
        out = await ListFilesTool(deps).execute(
            {"type": "listFiles", "path": str(tree), "options": {"ignore_files": ["*.log"], "max_depth": 0}},
        )
        assert "notes.log" not in out
        assert "📁 node_modules" in out
        assert "mod.py" not in out
        assert "..." in out

    @pytest.mark.asyncio
    async def test_missing_directory(self, workdir: Path, deps: ToolDependencies) -> None:
        with pytest.raises(ToolResponseError) as exc:
            await ListFilesTool(deps).execute({"type": "listFiles", "path": str(workdir / "absent")})
        assert _envelope(exc)["type"] == "EXECUTION"


def test_ignore_matcher() -> None:
    matcher = IgnoreMatcher(["*.pyc", "build/", "docs/private", "# comment", ""])
    assert matcher.is_ignored("pkg/mod.pyc", is_dir=False)
    assert matcher.is_ignored("build", is_dir=True)
    assert not matcher.is_ignored("build", is_dir=False)
    assert matcher.is_ignored("docs/private", is_dir=True)
    assert not matcher.is_ignored("private", is_dir=True)


# ─────────────────────────────────────────────────────────────────────────────
# Mutations
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_write_creates_parents(workdir: Path, deps: ToolDependencies, logs: MemoryRenderer) -> None:
    out = await WriteToFileTool(deps).execute({"type": "writeToFile", "path": "out/deep/x.txt", "content": "hi"})
    assert (workdir / "out" / "deep" / "x.txt").read_text() == "hi"
    assert out == "Content written to file: out/deep/x.txt\n\nhi"


@pytest.mark.asyncio
async def test_write_logs_truncated_content(workdir: Path, deps: ToolDependencies, logs: MemoryRenderer) -> None:
    await WriteToFileTool(deps).execute({"type": "writeToFile", "path": "long.txt", "content": "z" * 500})
    logged = logs.find("Executing writeToFile")[0].context["input"]
    assert "z" * 200 + "..." in logged
    assert "z" * 201 not in logged


@pytest.mark.asyncio
async def test_create_move_copy(workdir: Path, deps: ToolDependencies) -> None:
    await CreateFolderTool(deps).execute({"type": "createFolder", "path": "made/here"})
    assert (workdir / "made" / "here").is_dir()

    await CopyFileTool(deps).execute({"type": "copyFile", "source": "a.txt", "destination": "copies/a.txt"})
    assert (workdir / "copies" / "a.txt").read_text() == FIVE_LINES
    assert (workdir / "a.txt").exists()

    await MoveFileTool(deps).execute({"type": "moveFile", "source": "b.txt", "destination": "moved/b.txt"})
    assert (workdir / "moved" / "b.txt").exists()
    assert not (workdir / "b.txt").exists()


@pytest.mark.asyncio
async def test_move_missing_source(workdir: Path, deps: ToolDependencies) -> None:
    with pytest.raises(ToolResponseError) as exc:
        await MoveFileTool(deps).execute({"type": "moveFile", "source": "ghost", "destination": "x"})
    body = _envelope(exc)
    assert body["type"] == "EXECUTION"
    assert body["source"] == "ghost"


class TestApplyDiffEdit:
    @pytest.mark.asyncio
    async def test_replaces_first_occurrence(self, workdir: Path, deps: ToolDependencies) -> None:
        (workdir / "c.txt").write_text("foo bar foo")
        result = await ApplyDiffEditTool(deps).execute(
            {"type": "applyDiffEdit", "path": "c.txt", "original_text": "foo", "updated_text": "baz"},
        )
        assert (workdir / "c.txt").read_text() == "baz bar foo"
        assert result.success and result.message == "Successfully applied diff edit"

    @pytest.mark.asyncio
    async def test_missing_text(self, workdir: Path, deps: ToolDependencies, logs: MemoryRenderer) -> None:
        with pytest.raises(ToolResponseError) as exc:
            await ApplyDiffEditTool(deps).execute(
                {"type": "applyDiffEdit", "path": "a.txt", "original_text": "absent", "updated_text": "x"},
            )
        body = _envelope(exc)
        assert body["error"] == "Original text not found in file"
        assert body["path"] == "a.txt"
        assert logs.events("warning") == ["Original text not found in file: a.txt"]
        assert (workdir / "a.txt").read_text() == FIVE_LINES
