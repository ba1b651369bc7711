"""
Writer that indents everything written after a newline.
"""

from __future__ import annotations

from typing import TextIO


class IndentingWriter:
    """Wraps a text stream, writing `indent` after every newline."""

    def __init__(self, output: TextIO, indent: str):
        self.output = output
        self.indent = indent

    def write(self, text: str) -> int:
        start = 0
        for pos, ch in enumerate(text):
            if ch == "\n":
                self.output.write(text[start : pos + 1])
                self.output.write(self.indent)
                start = pos + 1
        self.output.write(text[start:])
        return len(text)

    def flush(self) -> None:
        self.output.flush()
