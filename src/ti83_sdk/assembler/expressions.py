"""
Immediate Value Evaluator
=========================

This module converts operand text into a 16-bit value. It is deliberately
small: TI-83 Plus assembly sources use literals, named constants, labels
and simple offsets such as ``buffer+2``, not full arithmetic.

Evaluation Order
----------------
1. Exact match in the constants table (takes precedence over everything)
2. Character literal: ``'A'`` evaluates to 65
3. Flat binary ``+``/``-`` chain, evaluated left to right: ``a+2-b``
4. Hexadecimal: ``$FF``, ``0xFF``, ``0FFh``
5. Binary: ``%1010``, ``0b1010``
6. Decimal: ``255``; negative values wrap to 16 bits (``-1`` is $FFFF)
7. Label address
8. Anything else that looks like a name is an undefined symbol

There is no operator precedence, no parentheses and no multiplication.
All arithmetic wraps modulo 65536.

Example Usage
-------------
>>> from ti83_sdk.assembler.expressions import evaluate
>>> evaluate("$9D93")
40339
>>> evaluate("WIDTH-1", {"WIDTH": 96})
95
>>> evaluate("'A'")
65
"""

import re
from typing import Mapping, Optional

from ti83_sdk.errors import InvalidLiteralError, UndefinedSymbolError


# Identifiers may contain dots and underscores: _PutS, msg.end
_IDENTIFIER = re.compile(r"^[A-Za-z_.][A-Za-z0-9_.]*$")
_HEX_SUFFIX = re.compile(r"^[0-9][0-9A-Fa-f]*[hH]$")
_DECIMAL = re.compile(r"^-?[0-9]+$")
_DIGITS = {16: frozenset("0123456789abcdefABCDEF"), 2: frozenset("01")}


# =============================================================================
# Public API
# =============================================================================

def evaluate(
    text: str,
    constants: Optional[Mapping[str, int]] = None,
    labels: Optional[Mapping[str, int]] = None,
    allow_undefined: bool = False,
) -> int:
    """
    Evaluate operand text to an unsigned 16-bit value.

    Args:
        text: Operand text, e.g. "$FF", "'A'", "msg+1"
        constants: Names defined with .equ (or on the command line)
        labels: Label addresses
        allow_undefined: Evaluate unknown names as 0 instead of failing.
            Used while sizing instructions in pass 1, where forward
            references are not yet known.

    Returns:
        Value in the range 0..65535

    Raises:
        UndefinedSymbolError: If a name is neither a constant nor a label
        InvalidLiteralError: If the text is not a valid literal
    """
    constants = constants or {}
    labels = labels or {}
    return _evaluate(text.strip(), constants, labels, allow_undefined)


def is_identifier(text: str) -> bool:
    """True if text can name a label or constant."""
    return bool(_IDENTIFIER.match(text))


def find_similar_names(name: str, candidates, max_distance: int = 2) -> list[str]:
    """
    Find names similar to the given one (for typo suggestions).

    Uses case-insensitive edit distance; an exact match ignoring case is
    always reported first.
    """
    lowered = name.lower()
    scored = []
    for candidate in candidates:
        distance = _edit_distance(lowered, candidate.lower())
        if distance <= max_distance:
            scored.append((distance, candidate))
    scored.sort()
    return [candidate for _, candidate in scored]


# =============================================================================
# Evaluation
# =============================================================================

def _evaluate(
    text: str,
    constants: Mapping[str, int],
    labels: Mapping[str, int],
    allow_undefined: bool,
) -> int:
    if not text:
        raise InvalidLiteralError("empty operand")

    if text in constants:
        return constants[text] & 0xFFFF

    if len(text) == 3 and text[0] == "'" and text[2] == "'":
        code = ord(text[1])
        if code > 0xFF:
            raise InvalidLiteralError(f"character {text} is not an 8-bit character")
        return code

    split = _find_operator(text)
    if split > 0:
        left = _evaluate(text[:split].strip(), constants, labels, allow_undefined)
        right = _evaluate(text[split + 1:].strip(), constants, labels, allow_undefined)
        if text[split] == "+":
            return (left + right) & 0xFFFF
        return (left - right) & 0xFFFF

    lowered = text.lower()
    if lowered.startswith("$"):
        return _parse_number(text, text[1:], 16)
    if lowered.startswith("0x"):
        return _parse_number(text, text[2:], 16)
    if _HEX_SUFFIX.match(text):
        return _parse_number(text, text[:-1], 16)
    if lowered.startswith("%"):
        return _parse_number(text, text[1:], 2)
    if lowered.startswith("0b"):
        return _parse_number(text, text[2:], 2)

    if _DECIMAL.match(text):
        value = int(text)
        if 0 <= value <= 0xFFFF:
            return value
        if -0x8000 <= value < 0:
            return value & 0xFFFF
        raise InvalidLiteralError(
            f"value {text} does not fit in 16 bits",
            hint="values range from -32768 to 65535",
        )

    if text in labels:
        return labels[text] & 0xFFFF

    if _IDENTIFIER.match(text):
        if allow_undefined:
            return 0
        similar = find_similar_names(text, [*constants, *labels])
        raise UndefinedSymbolError(text, similar_symbols=similar)

    raise InvalidLiteralError(f"invalid literal '{text}'")


def _parse_number(text: str, digits: str, base: int) -> int:
    """Parse digits in the given base, rejecting anything over 16 bits."""
    # int() would also take signs, underscores and spaces
    if not digits or not _DIGITS[base].issuperset(digits):
        raise InvalidLiteralError(f"invalid number '{text}'")
    value = int(digits, base)
    if value > 0xFFFF:
        raise InvalidLiteralError(
            f"value {text} does not fit in 16 bits",
            hint="values range from -32768 to 65535",
        )
    return value


def _find_operator(text: str) -> int:
    """
    Index of the last top-level binary + or -, or -1.

    Splitting at the last operator gives left-to-right evaluation:
    ``a-b+c`` is ``(a-b)+c``. A sign at the start of the text or directly
    after another operator is unary, not a split point. Operators inside
    a character literal ('+') are ignored.
    """
    result = -1
    previous = ""
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "'" and i + 2 < len(text) and text[i + 2] == "'":
            previous = "'"
            i += 3
            continue
        if ch in "+-" and previous not in ("", "+", "-"):
            result = i
        if not ch.isspace():
            previous = ch
        i += 1
    return result


def _edit_distance(s1: str, s2: str) -> int:
    """Levenshtein distance between two strings."""
    if len(s1) < len(s2):
        return _edit_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]
