"""Text-level change computation between two revisions of a document.

Changes are computed over tokens (word runs, whitespace runs, single
punctuation characters) rather than characters, so a rename of ``x`` to
``y`` yields one change covering exactly the identifier.  Offsets always
refer to the *old* text.
"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import List, Sequence, Tuple

from editrecon.workspace.models import SourceText

_TOKEN_RE = re.compile(r"\w+|\r\n|[^\S\r\n]+|[\r\n]|[^\w\s]", re.UNICODE)
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True, slots=True)
class TextSpan:
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class TextChange:
    """Replace ``span`` of the old text with ``new_text``."""

    span: TextSpan
    new_text: str


@dataclass(frozen=True, slots=True)
class LinePositionSpanTextChange:
    """A text change anchored to 0-based line/column positions."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int
    new_text: str


def tokenize(text: str) -> List[Tuple[int, str]]:
    """Split *text* into ``(offset, token)`` pairs that cover it exactly."""
    return [(m.start(), m.group(0)) for m in _TOKEN_RE.finditer(text)]


def get_text_changes(old: SourceText, new: SourceText) -> List[TextChange]:
    """Return the ordered, non-overlapping changes turning *old* into *new*."""
    if old.version == new.version or old.text == new.text:
        return []

    old_tokens = tokenize(old.text)
    new_tokens = tokenize(new.text)
    matcher = SequenceMatcher(
        None,
        [t for _, t in old_tokens],
        [t for _, t in new_tokens],
        autojunk=False,
    )

    changes: List[TextChange] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        start = _token_offset(old_tokens, i1, len(old.text))
        end = _token_offset(old_tokens, i2, len(old.text))
        new_start = _token_offset(new_tokens, j1, len(new.text))
        new_end = _token_offset(new_tokens, j2, len(new.text))
        changes.append(
            TextChange(span=TextSpan(start, end), new_text=new.text[new_start:new_end])
        )
    return changes


def _token_offset(tokens: Sequence[Tuple[int, str]], index: int, text_len: int) -> int:
    if index >= len(tokens):
        return text_len
    return tokens[index][0]


class LineIndex:
    """Offset → (line, column) mapping for one text."""

    def __init__(self, text: str) -> None:
        self._line_starts = [0]
        for m in _LINE_BREAK_RE.finditer(text):
            self._line_starts.append(m.end())
        self._length = len(text)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def position(self, offset: int) -> Tuple[int, int]:
        if offset < 0 or offset > self._length:
            raise ValueError(f"Offset {offset} outside text of length {self._length}")
        line = bisect.bisect_right(self._line_starts, offset) - 1
        return line, offset - self._line_starts[line]

    def offset(self, line: int, column: int) -> int:
        if line < 0 or line >= len(self._line_starts):
            raise ValueError(f"Line {line} outside text with {len(self._line_starts)} lines")
        return min(self._line_starts[line] + column, self._length)


def to_line_position_changes(
    old_text: str, changes: Sequence[TextChange]
) -> List[LinePositionSpanTextChange]:
    """Anchor offset-based *changes* to line/column positions in *old_text*."""
    index = LineIndex(old_text)
    result: List[LinePositionSpanTextChange] = []
    for change in changes:
        start_line, start_col = index.position(change.span.start)
        end_line, end_col = index.position(change.span.end)
        result.append(
            LinePositionSpanTextChange(
                start_line=start_line,
                start_column=start_col,
                end_line=end_line,
                end_column=end_col,
                new_text=change.new_text,
            )
        )
    return result


def apply_line_position_changes(
    text: str, changes: Sequence[LinePositionSpanTextChange]
) -> str:
    """Apply *changes* (all anchored to *text*) and return the result.

    Changes are applied back to front so earlier positions stay valid.
    """
    index = LineIndex(text)
    spans = sorted(
        (
            (index.offset(c.start_line, c.start_column), index.offset(c.end_line, c.end_column), c.new_text)
            for c in changes
        ),
        key=lambda s: (s[0], s[1]),
        reverse=True,
    )
    for start, end, new_text in spans:
        text = text[:start] + new_text + text[end:]
    return text


def read_source_file(path) -> str:
    """Read *path* as UTF-8 with its line endings untouched."""
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()
