"""
Arithmetic encoder: ALU operations with an immediate operand.

    add a,5         ->  C6 05
    sub 1           ->  D6 01
    cp 'A'          ->  FE 41

Register and memory operands (``add a,b``, ``cp (hl)``) and 16-bit forms
(``add hl,de``) are fixed forms in the opcode table.
"""

from typing import Optional

from ti83_sdk.assembler.encoders.base import AssemblyContext, Encoder, compact, is_memory, is_register
from ti83_sdk.assembler.opcodes import ALU_OPERATIONS
from ti83_sdk.assembler.parser import split_operands


class ArithmeticEncoder(Encoder):
    """Encodes add/adc/sub/sbc/and/xor/or/cp with an 8-bit immediate."""

    def try_encode(
        self,
        mnemonic: str,
        operands: Optional[str],
        ctx: AssemblyContext,
    ) -> Optional[bytes]:
        if mnemonic not in ALU_OPERATIONS:
            return None

        ops = split_operands(operands)
        if len(ops) == 2 and compact(ops[0]) == "a":
            operand = ops[1]
        elif len(ops) == 1:
            operand = ops[0]
        else:
            return None

        if is_register(operand) or is_memory(operand):
            return None

        value = ctx.symbols.evaluate(operand)
        return bytes([0xC6 + ALU_OPERATIONS[mnemonic] * 8, value & 0xFF])
