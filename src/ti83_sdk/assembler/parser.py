"""
Z80 Assembly Line Parser
========================

This module splits one line of TI-83 Plus assembly source into its parts:
an optional label, an optional mnemonic, and the raw operand text.

Source Line Structure
---------------------
    [label:] [mnemonic [operands]] [; comment]

Examples:
    start:                      ; label only
    loop:   djnz loop           ; label + instruction
            ld a,42             ; instruction
            bcall(_PutS)        ; system call in function-call notation
    msg:    .db "Hi; there",0   ; ';' inside a string is not a comment

Parsing Rules
-------------
- ``;`` starts a comment unless it appears inside a double-quoted string
  or a character literal such as ``';'``.
- The text before the first ``:`` (outside strings) is the label.
- ``bcall(...)`` is recognised case-insensitively; everything between the
  first ``(`` and the last ``)`` becomes the operand text.
- Otherwise the mnemonic is the first whitespace-delimited token, lower
  cased. Operand text is kept verbatim (symbol names are case-sensitive).

Operand Splitting
-----------------
``split_operands`` splits on top-level commas only; commas nested inside
parentheses never split. ``split_data_items`` also keeps string and
character literals intact, which is what ``.db`` needs.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from ti83_sdk.errors import AssemblySyntaxError


# =============================================================================
# Parsed Line
# =============================================================================

@dataclass(frozen=True)
class ParsedLine:
    """
    The structural parts of one source line.

    Attributes:
        label: Label defined on this line (without the colon)
        mnemonic: Lower-case instruction or directive name
        operands: Raw operand text, trimmed, or None if absent
    """
    label: Optional[str] = None
    mnemonic: Optional[str] = None
    operands: Optional[str] = None


# Mnemonics written in function-call notation: bcall(_PutS)
SYSTEM_CALL_MNEMONICS = ("bcall", "b_call")


# =============================================================================
# Quote-Aware Scanning
# =============================================================================

def _scan(text: str) -> Iterator[tuple[int, str]]:
    """
    Yield (index, char) for every character outside string and character
    literals.

    A single quote only opens a character literal when it closes two
    characters later ('x'), so the apostrophe in ``af'`` is ordinary text.

    Raises:
        AssemblySyntaxError: If the scan reaches an unterminated string
    """
    i = 0
    length = len(text)
    while i < length:
        ch = text[i]
        if ch == '"':
            i += 1
            while i < length and text[i] != '"':
                if text[i] == "\\":
                    i += 1
                i += 1
            if i >= length:
                raise AssemblySyntaxError(f"unterminated string in '{text.strip()}'")
            i += 1
            continue
        if ch == "'" and i + 2 < length and text[i + 2] == "'":
            i += 3
            continue
        yield i, ch
        i += 1


def _find_unquoted(text: str, target: str) -> int:
    """Index of the first ``target`` outside literals, or -1."""
    for i, ch in _scan(text):
        if ch == target:
            return i
    return -1


def strip_comment(line: str) -> str:
    """Remove a trailing ``;`` comment and surrounding whitespace."""
    index = _find_unquoted(line, ";")
    if index >= 0:
        line = line[:index]
    return line.strip()


# =============================================================================
# Line Parsing
# =============================================================================

def parse_line(raw_line: str) -> Optional[ParsedLine]:
    """
    Parse one source line.

    Args:
        raw_line: A single line of source text (no newline required)

    Returns:
        ParsedLine, or None for blank and comment-only lines

    Raises:
        AssemblySyntaxError: If a system call is missing its parentheses

    Example:
        >>> parse_line("loop: djnz loop ; again")
        ParsedLine(label='loop', mnemonic='djnz', operands='loop')
    """
    text = strip_comment(raw_line)
    if not text:
        return None

    label = None
    colon = _find_unquoted(text, ":")
    if colon >= 0:
        label = text[:colon].strip() or None
        text = text[colon + 1:].strip()
        if not text:
            return ParsedLine(label=label)

    lowered = text.lower()
    for name in SYSTEM_CALL_MNEMONICS:
        if lowered.startswith(name) and lowered[len(name):].lstrip().startswith("("):
            open_paren = text.index("(")
            close_paren = text.rfind(")")
            if close_paren < open_paren:
                raise AssemblySyntaxError(
                    f"missing ')' in system call '{text}'",
                    hint="write system calls as bcall(_Name)",
                )
            operands = text[open_paren + 1:close_paren].strip()
            return ParsedLine(label=label, mnemonic="bcall", operands=operands or None)

    parts = text.split(None, 1)
    mnemonic = parts[0].lower()
    operands = parts[1].strip() if len(parts) > 1 else None
    return ParsedLine(label=label, mnemonic=mnemonic, operands=operands or None)


# =============================================================================
# Operand Splitting
# =============================================================================

def split_operands(text: Optional[str]) -> list[str]:
    """
    Split operand text on top-level commas.

    Commas inside parentheses or literals are not split points. Each piece
    is trimmed.

    Raises:
        AssemblySyntaxError: If a double-quoted string is not terminated

    Example:
        >>> split_operands("a, (ix+5)")
        ['a', '(ix+5)']
    """
    if text is None or not text.strip():
        return []

    pieces = []
    depth = 0
    start = 0
    for i, ch in _scan(text):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "," and depth == 0:
            pieces.append(text[start:i].strip())
            start = i + 1
    pieces.append(text[start:].strip())
    return pieces


def split_data_items(text: Optional[str]) -> list[str]:
    """
    Split a ``.db``/``.dw`` item list on commas outside literals.

    Raises:
        AssemblySyntaxError: If a double-quoted string is not terminated

    Example:
        >>> split_data_items('"a,b", 0')
        ['"a,b"', '0']
    """
    return split_operands(text)
