"""Text helpers for inserting printed output above the viewport."""

from rich.text import Text


def split_lines(content: str) -> list[str]:
    """
    Split text into display lines.

    Lines end at "\\n" (a trailing "\\r" is dropped), and a final line
    terminator does not start a new empty line, so "a\\nb\\n" is two lines
    and "" is none.
    """
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def paragraph(lines: list[str]) -> Text:
    """A non-wrapping block of text, one row per line."""
    return Text("\n".join(lines), no_wrap=True, overflow="crop", end="")
