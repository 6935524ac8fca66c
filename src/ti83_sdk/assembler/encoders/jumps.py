"""
Jump encoder: jp, jr and djnz.

``jp`` takes an absolute 16-bit target. ``jr`` and ``djnz`` take a signed
8-bit displacement relative to the address after the instruction:

    displacement = target - (address + 2)

A displacement outside -128..+127 is an error; the assembler never
rewrites a relative jump into a longer absolute one.
"""

from typing import Optional

from ti83_sdk.assembler.encoders.base import AssemblyContext, Encoder, compact, signed, word
from ti83_sdk.assembler.opcodes import CONDITION_CODES, RELATIVE_CONDITIONS
from ti83_sdk.assembler.parser import split_operands
from ti83_sdk.errors import InvalidOperandCountError, RangeError


class JumpEncoder(Encoder):
    """Encodes absolute and relative jumps."""

    def try_encode(
        self,
        mnemonic: str,
        operands: Optional[str],
        ctx: AssemblyContext,
    ) -> Optional[bytes]:
        if mnemonic == "jp":
            return self._encode_absolute(operands, ctx)
        if mnemonic == "jr":
            return self._encode_relative(operands, ctx)
        if mnemonic == "djnz":
            ops = split_operands(operands)
            if len(ops) != 1:
                raise InvalidOperandCountError("djnz", "one operand", len(ops))
            return bytes([0x10, relative_offset(ops[0], ctx)])
        return None

    def _encode_absolute(self, operands: Optional[str], ctx: AssemblyContext) -> Optional[bytes]:
        ops = split_operands(operands)
        if len(ops) == 1:
            if compact(ops[0]) == "(hl)":
                return None
            return bytes([0xC3]) + word(ctx.symbols.evaluate(ops[0]))
        if len(ops) == 2:
            condition = compact(ops[0])
            if condition not in CONDITION_CODES:
                return None
            opcode = 0xC2 + CONDITION_CODES[condition] * 8
            return bytes([opcode]) + word(ctx.symbols.evaluate(ops[1]))
        raise InvalidOperandCountError("jp", "one or two operands", len(ops))

    def _encode_relative(self, operands: Optional[str], ctx: AssemblyContext) -> Optional[bytes]:
        ops = split_operands(operands)
        if len(ops) == 1:
            return bytes([0x18, relative_offset(ops[0], ctx)])
        if len(ops) == 2:
            condition = compact(ops[0])
            if condition not in RELATIVE_CONDITIONS:
                return None
            opcode = 0x20 + CONDITION_CODES[condition] * 8
            return bytes([opcode, relative_offset(ops[1], ctx)])
        raise InvalidOperandCountError("jr", "one or two operands", len(ops))


def relative_offset(target_text: str, ctx: AssemblyContext) -> int:
    """
    Displacement byte for a two-byte relative jump at ctx.address.

    Raises:
        RangeError: If the target is out of reach (not checked while sizing)
    """
    target = ctx.symbols.evaluate(target_text)
    offset = signed(target - (ctx.address + 2))
    if not ctx.sizing and not -128 <= offset <= 127:
        raise RangeError(
            f"relative jump target '{target_text.strip()}' is out of range (offset: {offset})",
            hint="the range is -128 to +127 bytes; use jp for longer jumps",
        )
    return offset & 0xFF
