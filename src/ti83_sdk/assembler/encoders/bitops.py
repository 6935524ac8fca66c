"""
Bit manipulation encoder: CB-prefixed bit tests, sets, resets, rotates
and shifts.

    bit 3,a         ->  CB 5F      (40 + 3<<3 + a)
    set 7,b         ->  CB F8      (C0 + 7<<3 + b)
    res 0,c         ->  CB 81      (80 + 0<<3 + c)
    rlc a           ->  CB 07
    srl (hl)        ->  CB 3E

Indexed forms such as ``bit 0,(ix+1)`` are handled by the index encoder.
"""

from typing import Optional

from ti83_sdk.assembler.encoders.base import AssemblyContext, Encoder, bit_number, compact
from ti83_sdk.assembler.opcodes import BIT_OPCODES, CB_PREFIX, REGISTER_CODES, ROTATE_OPCODES
from ti83_sdk.assembler.parser import split_operands
from ti83_sdk.errors import InvalidOperandCountError, InvalidRegisterError


class BitEncoder(Encoder):
    """Encodes bit/res/set and the rotate/shift group."""

    def try_encode(
        self,
        mnemonic: str,
        operands: Optional[str],
        ctx: AssemblyContext,
    ) -> Optional[bytes]:
        if mnemonic in BIT_OPCODES:
            ops = split_operands(operands)
            if len(ops) != 2:
                raise InvalidOperandCountError(mnemonic, "a bit number and an operand", len(ops))
            bit = bit_number(mnemonic, ops[0], ctx)
            code = self._register_code(mnemonic, ops[1])
            return bytes([CB_PREFIX, BIT_OPCODES[mnemonic] + (bit << 3) + code])

        if mnemonic in ROTATE_OPCODES:
            ops = split_operands(operands)
            if len(ops) != 1:
                raise InvalidOperandCountError(mnemonic, "one operand", len(ops))
            code = self._register_code(mnemonic, ops[0])
            return bytes([CB_PREFIX, ROTATE_OPCODES[mnemonic] + code])

        return None

    @staticmethod
    def _register_code(mnemonic: str, operand: str) -> int:
        code = REGISTER_CODES.get(compact(operand))
        if code is None:
            raise InvalidRegisterError(mnemonic, operand.strip(), valid_registers=list(REGISTER_CODES))
        return code
