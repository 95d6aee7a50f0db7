"""
Span edits with offset tracking.

EditBuffer collects replacements over an immutable original text and
produces the rewritten text plus a PositionMap that maps every offset of
the rewritten text back to the original. The map can be serialized as an
intermediate v3 source map for later composition with the compiler's map.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

_BASE64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"


def encode_vlq(value: int) -> str:
    """Base64 VLQ encoding of one signed integer."""
    v = ((-value) << 1) | 1 if value < 0 else value << 1
    out = []
    while True:
        digit = v & 0x1F
        v >>= 5
        if v:
            digit |= 0x20
        out.append(_BASE64[digit])
        if not v:
            return "".join(out)


class _LineIndex:
    """Offset → (line, column), both zero-based."""

    def __init__(self, text: str):
        self._starts = [0]
        for i, ch in enumerate(text):
            if ch == "\n":
                self._starts.append(i + 1)

    def locate(self, offset: int) -> Tuple[int, int]:
        line = bisect.bisect_right(self._starts, offset) - 1
        return line, offset - self._starts[line]


@dataclass(frozen=True)
class Chunk:
    generated_start: int
    original_start: int
    length: int          # length in the generated text
    edited: bool


class PositionMap:
    """Mapping from rewritten-text offsets to original-text offsets."""

    def __init__(self, chunks: List[Chunk], original: str, generated: str):
        self.chunks = chunks
        self.original = original
        self.generated = generated
        self._starts = [c.generated_start for c in chunks]

    def original_offset(self, generated_offset: int) -> int:
        """
        Original offset for an offset of the rewritten text.

        Offsets inside a replacement map to the start of the replaced span.
        """
        if not 0 <= generated_offset <= len(self.generated):
            raise IndexError(f"Offset {generated_offset} outside rewritten text")
        if generated_offset == len(self.generated):
            return len(self.original)
        idx = bisect.bisect_right(self._starts, generated_offset) - 1
        chunk = self.chunks[idx]
        if chunk.edited:
            return chunk.original_start
        return chunk.original_start + (generated_offset - chunk.generated_start)

    def to_source_map(self, source: str) -> Dict[str, Any]:
        """
        Intermediate v3 source map (high resolution) for the rewrite.

        Unchanged regions get one segment per character, each replacement
        a single segment pointing at the start of the replaced span.
        """
        orig_index = _LineIndex(self.original)
        lines: List[List[Tuple[int, int, int]]] = [[]]
        gen_col = 0

        for chunk in self.chunks:
            text = self.generated[chunk.generated_start:chunk.generated_start + chunk.length]
            for i, ch in enumerate(text):
                if not chunk.edited or i == 0:
                    offset = chunk.original_start if chunk.edited else chunk.original_start + i
                    line, col = orig_index.locate(offset)
                    lines[-1].append((gen_col, line, col))
                if ch == "\n":
                    lines.append([])
                    gen_col = 0
                else:
                    gen_col += 1

        encoded_lines = []
        prev_line = prev_col = 0
        for segments in lines:
            prev_gen_col = 0
            encoded = []
            for gen_col, line, col in segments:
                encoded.append(
                    encode_vlq(gen_col - prev_gen_col)
                    + encode_vlq(0)
                    + encode_vlq(line - prev_line)
                    + encode_vlq(col - prev_col)
                )
                prev_gen_col, prev_line, prev_col = gen_col, line, col
            encoded_lines.append(",".join(encoded))

        return {
            "version": 3,
            "sources": [source],
            "sourcesContent": [self.original],
            "names": [],
            "mappings": ";".join(encoded_lines),
        }

    def __repr__(self) -> str:
        edits = sum(1 for c in self.chunks if c.edited)
        return f"PositionMap(chunks={len(self.chunks)}, edits={edits})"


class EditBuffer:
    """
    Replacements over an original text, addressed by original offsets.

    Edits may be added in any order but must not overlap.
    """

    def __init__(self, original: str):
        self.original = original
        self._edits: List[Tuple[int, int, str]] = []

    @property
    def has_changes(self) -> bool:
        return bool(self._edits)

    def update(self, start: int, end: int, replacement: str) -> None:
        if not 0 <= start <= end <= len(self.original):
            raise ValueError(f"Invalid span [{start}, {end}) for text of length {len(self.original)}")
        for s, e, _ in self._edits:
            if (start < e and s < end) or (start == s and end == e):
                raise ValueError(f"Span [{start}, {end}) overlaps an earlier edit [{s}, {e})")
        self._edits.append((start, end, replacement))

    def _sorted(self) -> List[Tuple[int, int, str]]:
        return sorted(self._edits, key=lambda e: (e[0], e[1]))

    def to_string(self) -> str:
        parts: List[str] = []
        cursor = 0
        for start, end, replacement in self._sorted():
            parts.append(self.original[cursor:start])
            parts.append(replacement)
            cursor = end
        parts.append(self.original[cursor:])
        return "".join(parts)

    def position_map(self) -> PositionMap:
        chunks: List[Chunk] = []
        orig = gen = 0
        for start, end, replacement in self._sorted():
            if start > orig:
                chunks.append(Chunk(gen, orig, start - orig, False))
                gen += start - orig
            if replacement:
                chunks.append(Chunk(gen, start, len(replacement), True))
                gen += len(replacement)
            orig = end
        if orig < len(self.original):
            chunks.append(Chunk(gen, orig, len(self.original) - orig, False))
        return PositionMap(chunks, self.original, self.to_string())

    def __str__(self) -> str:
        return self.to_string()


__all__ = ["EditBuffer", "PositionMap", "Chunk", "encode_vlq"]
