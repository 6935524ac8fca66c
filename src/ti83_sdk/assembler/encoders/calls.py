"""
Call encoder: call, conditional ret and rst.

    call print      ->  CD lo hi
    call nz,print   ->  C4 lo hi
    ret z           ->  C8
    rst 28h         ->  EF

Unconditional ``ret`` is a fixed form in the opcode table.
"""

from typing import Optional

from ti83_sdk.assembler.encoders.base import AssemblyContext, Encoder, compact, word
from ti83_sdk.assembler.opcodes import CONDITION_CODES
from ti83_sdk.assembler.parser import split_operands
from ti83_sdk.errors import InvalidOperandCountError, RangeError

# rst can only call the eight page-zero vectors 00h, 08h, ... 38h
RESTART_VECTORS = range(0, 0x40, 8)


class CallEncoder(Encoder):
    """Encodes subroutine calls, conditional returns and restarts."""

    def try_encode(
        self,
        mnemonic: str,
        operands: Optional[str],
        ctx: AssemblyContext,
    ) -> Optional[bytes]:
        ops = split_operands(operands)

        if mnemonic == "call":
            if len(ops) == 1:
                return bytes([0xCD]) + word(ctx.symbols.evaluate(ops[0]))
            if len(ops) == 2:
                condition = compact(ops[0])
                if condition not in CONDITION_CODES:
                    return None
                opcode = 0xC4 + CONDITION_CODES[condition] * 8
                return bytes([opcode]) + word(ctx.symbols.evaluate(ops[1]))
            raise InvalidOperandCountError("call", "one or two operands", len(ops))

        if mnemonic == "ret" and len(ops) == 1:
            condition = compact(ops[0])
            if condition not in CONDITION_CODES:
                return None
            return bytes([0xC0 + CONDITION_CODES[condition] * 8])

        if mnemonic == "rst":
            if len(ops) != 1:
                raise InvalidOperandCountError("rst", "one operand", len(ops))
            vector = ctx.symbols.evaluate(ops[0])
            if vector not in RESTART_VECTORS:
                raise RangeError(
                    f"invalid restart vector '{ops[0]}'",
                    hint="rst takes 00h, 08h, 10h, 18h, 20h, 28h, 30h or 38h",
                )
            return bytes([0xC7 + vector])

        return None
