"""Small text helpers and an interactive yes/no prompt."""

from __future__ import annotations

import sys
from typing import Callable, Iterable, TextIO

OKAY_RESPONSES = frozenset({"y", "Y", "yes", "Yes", "YES"})
NOKAY_RESPONSES = frozenset({"n", "N", "no", "No", "NO"})


def humanize(s: str) -> str:
    """Turn a machine-oriented string such as ``HELLO_COMPUTER`` into ``hello computer``."""
    return s.replace("_", " ").lower()


def _is_separator(ch: str) -> bool:
    if ch.isascii():
        return not (ch.isalnum() or ch == "_")
    return ch.isspace()


def titleize(s: str) -> str:
    """Humanize a string and capitalise the first letter of each word."""
    s = humanize(s)
    result = []
    previous = " "
    for ch in s:
        result.append(ch.upper() if _is_separator(previous) else ch)
        previous = ch
    return "".join(result)


def map_strings(values: Iterable[str], func: Callable[[str], str]) -> list[str]:
    """Apply ``func`` to each string and return the results as a new list."""
    return [func(value) for value in values]


def ask_for_confirmation(stdin: TextIO | None = None, stdout: TextIO | None = None) -> bool:
    """Read yes/no answers until one is recognised and return True for yes.

    Raises EOFError when input ends and ValueError when a line does not hold
    exactly one word.
    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    while True:
        line = stdin.readline()
        if not line:
            raise EOFError("no response given")
        words = line.split()
        if not words:
            raise ValueError("unexpected newline")
        if len(words) > 1:
            raise ValueError("expected newline")
        response = words[0]
        if response in OKAY_RESPONSES:
            return True
        if response in NOKAY_RESPONSES:
            return False
        stdout.write("Please type yes or no and then press enter:\n")