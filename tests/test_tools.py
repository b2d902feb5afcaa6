"""Tests for tool implementations."""

from typing import Any
from unittest.mock import patch

import pytest

from agent_orchestrator.tools import get_default_tools
from agent_orchestrator.tools.base import BaseTool
from agent_orchestrator.tools.filesystem import WriteFileTool, is_valid_filename


class SlowTool(BaseTool):
    @property
    def name(self) -> str:
        return "slow"

    @property
    def description(self) -> str:
        return "Takes a number"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {"n": {"type": "number"}},
            "required": ["n"],
        }

    async def run(self, n: int) -> int:
        return n * 2


class TestBaseTool:
    """Tests for the execute wrapper."""

    @pytest.mark.asyncio
    async def test_success_result(self):
        result = await SlowTool().execute({"n": 21})
        assert result.success is True
        assert result.data == 42
        assert result.error is None
        assert result.execution_time_ms >= 0

    @pytest.mark.asyncio
    async def test_exception_becomes_failure(self, failing_tool):
        result = await failing_tool.execute({})
        assert result.success is False
        assert result.error == "boom"
        assert result.data is None
        assert result.execution_time_ms >= 0

    @pytest.mark.asyncio
    async def test_missing_required_parameter(self):
        result = await SlowTool().execute({})
        assert result.success is False
        assert "missing required parameter 'n'" in result.error

    @pytest.mark.asyncio
    async def test_unexpected_parameter(self):
        result = await SlowTool().execute({"n": 1, "extra": True})
        assert result.success is False
        assert "extra" in result.error

    @pytest.mark.asyncio
    async def test_non_mapping_input(self):
        result = await SlowTool().execute(["n"])
        assert result.success is False
        assert "expected an object" in result.error

    def test_result_is_immutable(self):
        from dataclasses import FrozenInstanceError

        from agent_orchestrator.types import ToolResult

        result = ToolResult.ok({"a": 1}, 1.0)
        with pytest.raises(FrozenInstanceError):
            result.success = False


class TestWriteFileTool:
    """Tests for WriteFileTool."""

    @pytest.mark.asyncio
    async def test_write_file(self, tmp_path):
        tool = WriteFileTool(allowed_dir=str(tmp_path / "data"))

        result = await tool.execute({"filename": "summary.txt", "content": "héllo"})

        assert result.success is True
        written = tmp_path / "data" / "summary.txt"
        assert written.read_text(encoding="utf-8") == "héllo"
        assert result.data == {"filepath": str(written), "bytes_written": len("héllo".encode("utf-8"))}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("filename", ["notes.txt\n", "../../../etc/passwd", "sub/file.txt", "a\\b.txt", "bad name.txt", ""])
    async def test_rejects_unsafe_filenames(self, tmp_path, filename):
        tool = WriteFileTool(allowed_dir=str(tmp_path))

        result = await tool.execute({"filename": filename, "content": "x"})

        assert result.success is False
        assert "path traversal" in result.error
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_missing_content(self, tmp_path):
        tool = WriteFileTool(allowed_dir=str(tmp_path))
        result = await tool.execute({"filename": "a.txt"})
        assert result.success is False
        assert "content" in result.error

    def test_is_valid_filename(self):
        assert is_valid_filename("notes-1.md")
        assert not is_valid_filename("..")
        assert not is_valid_filename("notes.txt\n")
        assert not is_valid_filename(None)

    def test_definition(self, tmp_path):
        definition = WriteFileTool(allowed_dir=str(tmp_path)).definition
        assert definition.name == "write_file"
        assert definition.required == ["filename", "content"]


@patch("agent_orchestrator.tools.search.get_settings")
@patch("agent_orchestrator.tools.filesystem.get_settings")
def test_default_tools(mock_fs_settings, mock_search_settings):
    mock_fs_settings.return_value.data_dir = "./data"
    mock_search_settings.return_value.tavily_api_key = None

    names = [tool.name for tool in get_default_tools()]

    assert names == ["web_search", "write_file"]
