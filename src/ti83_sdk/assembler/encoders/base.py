"""
Encoder Base Class and Operand Helpers
======================================

Every instruction family is an Encoder. Encoders are stateless: all they
see is the mnemonic, the raw operand text and an AssemblyContext holding
the read-only symbol view and the address of the instruction.

``try_encode`` returns bytes when the instruction belongs to the family,
None to let the next encoder try, and raises an EncodingError when the
instruction is recognised but malformed.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ti83_sdk.assembler.opcodes import INDEX_PREFIXES, REGISTER_NAMES
from ti83_sdk.assembler.symbols import SymbolResolver
from ti83_sdk.errors import RangeError
from ti83_sdk.ti83plus.sysvars import get_variable


# =============================================================================
# Assembly Context
# =============================================================================

@dataclass(frozen=True)
class AssemblyContext:
    """
    What an encoder may know about its surroundings.

    Attributes:
        symbols: Read-only labels and constants
        address: Address of the first byte of the instruction
    """
    symbols: SymbolResolver
    address: int

    @property
    def sizing(self) -> bool:
        """True during pass 1, when only the encoded length matters."""
        return self.symbols.allow_undefined


# =============================================================================
# Encoder Interface
# =============================================================================

class Encoder(ABC):
    """Base class for an instruction family encoder."""

    @abstractmethod
    def try_encode(
        self,
        mnemonic: str,
        operands: Optional[str],
        ctx: AssemblyContext,
    ) -> Optional[bytes]:
        """
        Encode an instruction if it belongs to this family.

        Args:
            mnemonic: Lower-case mnemonic
            operands: Raw operand text, or None
            ctx: Symbols and current address

        Returns:
            Encoded bytes, or None if this family does not handle the line

        Raises:
            EncodingError: If the instruction is recognised but malformed
        """


# =============================================================================
# Operand Helpers
# =============================================================================

def word(value: int) -> bytes:
    """Little-endian 16-bit word."""
    value &= 0xFFFF
    return bytes([value & 0xFF, value >> 8])


def compact(operand: str) -> str:
    """Lower-case operand with all whitespace removed, for comparisons."""
    return "".join(operand.split()).lower()


def is_register(operand: str) -> bool:
    return compact(operand) in REGISTER_NAMES


def is_memory(operand: str) -> bool:
    """True for a parenthesised operand such as (hl), (nn) or (ix+2)."""
    text = operand.strip()
    return len(text) >= 2 and text[0] == "(" and text[-1] == ")"


def inner(operand: str) -> str:
    """Text inside the outer parentheses of a memory operand."""
    return operand.strip()[1:-1].strip()


def is_register_indirect(operand: str) -> bool:
    """True for (bc), (de), (hl), (sp), (c) and indexed forms."""
    if not is_memory(operand):
        return False
    text = compact(inner(operand))
    return text in {"bc", "de", "hl", "sp", "c"} or parse_index(operand) is not None


def is_direct_address(operand: str) -> bool:
    """True for (nn): parenthesised, but not a register indirection."""
    return is_memory(operand) and not is_register_indirect(operand)


def parse_index(operand: str) -> Optional[tuple[int, str, str]]:
    """
    Split an indexed memory operand.

    Returns:
        (prefix, sign, displacement text) for (ix+d), (iy-d) or (ix);
        None if the operand is not indexed. The displacement text keeps
        its case since it may name a constant.

    Example:
        >>> parse_index("(ix+OFFSET)")
        (221, '+', 'OFFSET')
    """
    if not is_memory(operand):
        return None
    text = "".join(inner(operand).split())
    register = text[:2].lower()
    if register not in INDEX_PREFIXES:
        return None
    rest = text[2:]
    if not rest:
        return INDEX_PREFIXES[register], "+", "0"
    if rest[0] not in "+-" or len(rest) == 1:
        return None
    return INDEX_PREFIXES[register], rest[0], rest[1:]


def signed(value: int) -> int:
    """Interpret a 16-bit value as signed."""
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def displacement(operand: str, ctx: AssemblyContext) -> tuple[int, int]:
    """
    Evaluate an indexed operand.

    Returns:
        (prefix, displacement byte)

    Raises:
        RangeError: If the displacement is outside -128..+127
    """
    prefix, sign, text = parse_index(operand)
    value = signed(ctx.symbols.evaluate(text))
    if sign == "-":
        value = -value
    if not -128 <= value <= 127:
        raise RangeError(
            f"index displacement {value} is out of range in '{operand.strip()}'",
            hint="displacements range from -128 to +127",
        )
    return prefix, value & 0xFF


def direct_address(operand: str, ctx: AssemblyContext) -> int:
    """
    Address of a (nn) operand.

    System variable names (curRow, penCol, OP1, ...) are recognised before
    the text is evaluated as a number, unless the program defines the same
    name as a label or constant. Names must be spelled as in the table.
    """
    text = inner(operand)
    if ctx.symbols.lookup(text) is None:
        var = get_variable(text, exact=True)
        if var is not None:
            return var.address
    return ctx.symbols.evaluate(text)


def bit_number(mnemonic: str, text: str, ctx: AssemblyContext) -> int:
    """
    Evaluate the bit index of bit/res/set.

    Raises:
        RangeError: If the index is not 0-7
    """
    value = ctx.symbols.evaluate(text)
    if value > 7:
        raise RangeError(
            f"bit number {signed(value)} is out of range for '{mnemonic}'",
            hint="bits are numbered 0 to 7",
        )
    return value
