from __future__ import annotations

from pathlib import Path

import pytest
from openclaw_bridge.app.memory_store import MemoryDocument
from openclaw_bridge.app.tools.memory_search import MemorySearchTool


def _tool(path: Path, max_results: int = 10) -> MemorySearchTool:
    return MemorySearchTool(memory=MemoryDocument(path, max_results=max_results), bot_name="Test Bot")


@pytest.mark.asyncio
async def test_memory_search_missing_file_is_not_an_error(tmp_path: Path) -> None:
    result = await _tool(tmp_path / "MEMORY.md").execute({"query": "deploy"})
    assert result.ok is True
    assert result.output == "MEMORY.md not found in workspace"


@pytest.mark.asyncio
async def test_memory_search_empty_file_reports_not_found(tmp_path: Path) -> None:
    memory_path = tmp_path / "MEMORY.md"
    memory_path.write_text("", encoding="utf-8")
    result = await _tool(memory_path).execute({"query": "deploy"})
    assert result.ok is True
    assert result.output == "MEMORY.md not found in workspace"


@pytest.mark.asyncio
async def test_memory_search_is_case_insensitive_and_keeps_file_order(tmp_path: Path) -> None:
    memory_path = tmp_path / "MEMORY.md"
    memory_path.write_text(
        "# Notes\n- Deploy happens on Fridays\n- unrelated line\n- rollback after a bad DEPLOY\n",
        encoding="utf-8",
    )
    result = await _tool(memory_path).execute({"query": "deploy"})
    assert result.ok is True
    assert result.output == (
        "Found 2 results:\n\n- Deploy happens on Fridays\n- rollback after a bad DEPLOY"
    )


@pytest.mark.asyncio
async def test_memory_search_caps_lines_but_reports_full_count(tmp_path: Path) -> None:
    memory_path = tmp_path / "MEMORY.md"
    memory_path.write_text("\n".join(f"todo item {index}" for index in range(25)), encoding="utf-8")
    result = await _tool(memory_path).execute({"query": "TODO"})
    assert result.output.startswith("Found 25 results:")
    lines = result.output.split("\n\n", 1)[1].split("\n")
    assert lines == [f"todo item {index}" for index in range(10)]


@pytest.mark.asyncio
async def test_memory_search_no_matches_names_the_query(tmp_path: Path) -> None:
    memory_path = tmp_path / "MEMORY.md"
    memory_path.write_text("alpha\nbeta\n", encoding="utf-8")
    result = await _tool(memory_path).execute({"query": "gamma"})
    assert result.ok is True
    assert result.output == 'No results found for "gamma" in memory.'


@pytest.mark.asyncio
async def test_memory_search_requires_query(tmp_path: Path) -> None:
    tool = _tool(tmp_path / "MEMORY.md")
    for arguments in ({}, {"query": ""}, {"query": 42}):
        result = await tool.execute(arguments)
        assert result.ok is False
        assert result.error == "Missing 'query' argument"
