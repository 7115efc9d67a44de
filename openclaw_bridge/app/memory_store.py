from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class MemorySearchResult:
    query: str
    matches: list[str]
    total: int

    def render(self) -> str:
        if self.total == 0:
            return f'No results found for "{self.query}" in memory.'
        return f"Found {self.total} results:\n\n" + "\n".join(self.matches)


class MemoryDocument:
    """워크스페이스의 MEMORY.md를 줄 단위로 검색해요."""

    def __init__(self, path: Path, *, max_results: int = 10) -> None:
        self._path = path
        self._max_results = max_results

    @property
    def path(self) -> Path:
        return self._path

    @property
    def not_found_message(self) -> str:
        return f"{self._path.name} not found in workspace"

    def exists(self) -> bool:
        return self._path.is_file() and self._path.stat().st_size > 0

    def search(self, query: str) -> MemorySearchResult:
        needle = query.lower()
        content = self._path.read_text(encoding="utf-8", errors="replace")
        matches = [line for line in content.split("\n") if needle in line.lower()]
        return MemorySearchResult(
            query=query,
            matches=matches[: self._max_results],
            total=len(matches),
        )
