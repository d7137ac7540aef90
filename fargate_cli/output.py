"""Messages to the user on a text stream: info, warnings, key/value pairs and tables."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Iterable, Sequence, TextIO

DEBUG_PREFIX = " \U0001F527  "
INFO_PREFIX = " \u2139\ufe0f  "
WARNING_PREFIX = " \u26a0\ufe0f  "

BLUE = "\x1b[1;94m"
ORANGE = "\x1b[1;38;5;214m"
RED = "\x1b[1;91m"
RESET = "\x1b[0m"
WHITE = "\x1b[1;97m"

_TAB_WIDTH = 8
_PADDING = 1


def _format(msg: str, args: tuple) -> str:
    return msg % args if args else msg


def _tab_padding(text_width: int, cell_width: int) -> str:
    cell_width = -(-cell_width // _TAB_WIDTH) * _TAB_WIDTH
    gap = cell_width - text_width
    return "\t" * -(-gap // _TAB_WIDTH)


def _align_columns(rows: Iterable[Sequence[str]]) -> str:
    """Align tab-separated cells into columns, padding with tabs."""
    lines = ["\t".join(row).split("\t") for row in rows]
    widths: list[int] = []
    out: list[str] = []

    def write_lines(start: int, end: int) -> None:
        for line in lines[start:end]:
            parts = []
            for column, cell in enumerate(line):
                parts.append(cell)
                if column < len(widths):
                    parts.append(_tab_padding(len(cell), widths[column]))
            out.append("".join(parts) + "\n")

    def format_block(line0: int, line1: int) -> None:
        column = len(widths)
        this = line0
        while this < line1:
            if column >= len(lines[this]) - 1:
                this += 1
                continue
            write_lines(line0, this)
            line0 = this
            width = 0
            while this < line1 and column < len(lines[this]) - 1:
                width = max(width, len(lines[this][column]) + _PADDING)
                this += 1
            widths.append(width)
            format_block(line0, this)
            widths.pop()
            line0 = this
        write_lines(line0, line1)

    format_block(0, len(lines))
    return "".join(out)


@dataclass
class ConsoleOutput:
    """Sends messages to a user over a text stream (standard output by default)."""

    color: bool = False
    emoji: bool = False
    verbose: bool = False
    test: bool = False
    stream: TextIO | None = None

    def _write(self, text: str) -> None:
        (self.stream if self.stream is not None else sys.stdout).write(text)

    def _prefixed(
        self, msg: str, args: tuple, emoji_prefix: str, marker: str,
        marker_color: str, text_color: str,
    ) -> None:
        text = _format(msg, args)
        if self.emoji and self.color:
            line = f"{emoji_prefix}{text_color}{text}{RESET}"
        elif self.emoji:
            line = f"{emoji_prefix}{text}"
        elif self.color:
            line = f"[{marker_color}{marker}{RESET}] {text_color}{text}{RESET}"
        else:
            line = f"[{marker}] {text}"
        self._write(line + "\n")

    def debug(self, msg: str, *args) -> None:
        """Print a debugging message, but only when verbose."""
        if self.verbose:
            self._prefixed(msg, args, DEBUG_PREFIX, "d", ORANGE, ORANGE)

    def say(self, msg: str, indent: int, *args) -> None:
        """Print a message indented by ``indent`` steps of four spaces."""
        self._write("    " * max(indent, 0) + _format(msg, args) + "\n")

    def info(self, msg: str, *args) -> None:
        self._prefixed(msg, args, INFO_PREFIX, "i", BLUE, WHITE)

    def warn(self, msg: str, *args) -> None:
        self._prefixed(msg, args, WARNING_PREFIX, "!", RED, RED)

    def fatal(self, err: BaseException, msg: str, *args) -> None:
        self.fatals([err], msg, *args)

    def fatals(self, errs: Iterable[BaseException], msg: str, *args) -> None:
        """Print a warning and each error, then exit with status 1 unless testing."""
        self.warn(msg, *args)
        for err in errs:
            self.say("- " + str(err), 1)
        if not self.test:
            raise SystemExit(1)

    def key_value(self, key: str, value: str, indent: int, *args) -> None:
        if self.color:
            self.say(f"{WHITE}{key}{RESET}: {value}", indent, *args)
        else:
            self.say(f"{key}: {value}", indent, *args)

    def table(self, header: str, rows: Iterable[Sequence[str]]) -> None:
        """Print rows aligned into columns, preceded by an optional header."""
        if header:
            if self.color:
                self.say(f"{WHITE}{header}{RESET}", 0)
            else:
                self.say(header, 0)
            self.line_break()
        self._write(_align_columns(rows))

    def line_break(self) -> None:
        self._write("\n")