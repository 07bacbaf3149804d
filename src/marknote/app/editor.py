"""In-memory edit buffer for one note — text plus a cursor offset."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class EditBuffer:
    """Unsaved editor text. The cursor is a character offset into ``text``."""

    text: str
    cursor: int = 0

    def __post_init__(self) -> None:
        self.cursor = max(0, min(self.cursor, len(self.text)))

    def insert(self, chars: str) -> None:
        self.text = self.text[: self.cursor] + chars + self.text[self.cursor :]
        self.cursor += len(chars)

    def backspace(self) -> None:
        if self.cursor == 0:
            return
        self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
        self.cursor -= 1

    def move_left(self) -> None:
        self.cursor = max(0, self.cursor - 1)

    def move_right(self) -> None:
        self.cursor = min(len(self.text), self.cursor + 1)

    def move_end(self) -> None:
        self.cursor = len(self.text)

    def move_up(self) -> None:
        starts = self._line_starts()
        line = self._line_of(starts)
        if line == 0:
            return
        col = self.cursor - starts[line]
        prev_len = starts[line] - 1 - starts[line - 1]
        self.cursor = starts[line - 1] + min(col, prev_len)

    def move_down(self) -> None:
        starts = self._line_starts()
        line = self._line_of(starts)
        if line >= len(starts) - 1:
            return
        col = self.cursor - starts[line]
        nxt = line + 1
        end = starts[nxt + 1] - 1 if nxt + 1 < len(starts) else len(self.text)
        self.cursor = starts[nxt] + min(col, end - starts[nxt])

    def position(self) -> tuple[int, int]:
        """Cursor as (row, column)."""
        starts = self._line_starts()
        line = self._line_of(starts)
        return line, self.cursor - starts[line]

    def _line_starts(self) -> list[int]:
        return [0] + [i + 1 for i, c in enumerate(self.text) if c == "\n"]

    def _line_of(self, starts: list[int]) -> int:
        line = 0
        for idx, start in enumerate(starts):
            if start <= self.cursor:
                line = idx
            else:
                break
        return line
