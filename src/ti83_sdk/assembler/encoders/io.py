"""
Input/output encoder: in, out and the block I/O instructions.

    in a,($10)      ->  DB 10
    in b,(c)        ->  ED 40
    out ($11),a     ->  D3 11
    out (c),e       ->  ED 59
    otir            ->  ED B3

The TI-83 Plus talks to its LCD, keypad and link port through these
ports (port 1 is the keypad, ports $10/$11 the LCD driver).
"""

from typing import Optional

from ti83_sdk.assembler.encoders.base import AssemblyContext, Encoder, compact, inner, is_memory
from ti83_sdk.assembler.opcodes import BLOCK_IO_OPCODES, ED_PREFIX, REGISTER_CODES, REGISTERS_8BIT
from ti83_sdk.assembler.parser import split_operands
from ti83_sdk.errors import InvalidOperandCountError, InvalidRegisterError


class IOEncoder(Encoder):
    """Encodes port input/output."""

    def try_encode(
        self,
        mnemonic: str,
        operands: Optional[str],
        ctx: AssemblyContext,
    ) -> Optional[bytes]:
        if mnemonic in BLOCK_IO_OPCODES:
            ops = split_operands(operands)
            if ops:
                raise InvalidOperandCountError(mnemonic, "no operands", len(ops))
            return BLOCK_IO_OPCODES[mnemonic]

        if mnemonic == "in":
            ops = split_operands(operands)
            if len(ops) != 2:
                raise InvalidOperandCountError("in", "two operands", len(ops))
            register, port = ops
            if compact(port) == "(c)":
                return bytes([ED_PREFIX, 0x40 + self._register_code("in", register) * 8])
            if is_memory(port):
                if compact(register) != "a":
                    raise InvalidRegisterError("in", register.strip(), valid_registers=["a"])
                return bytes([0xDB, ctx.symbols.evaluate(inner(port)) & 0xFF])
            return None

        if mnemonic == "out":
            ops = split_operands(operands)
            if len(ops) != 2:
                raise InvalidOperandCountError("out", "two operands", len(ops))
            port, register = ops
            if compact(port) == "(c)":
                return bytes([ED_PREFIX, 0x41 + self._register_code("out", register) * 8])
            if is_memory(port):
                if compact(register) != "a":
                    raise InvalidRegisterError("out", register.strip(), valid_registers=["a"])
                return bytes([0xD3, ctx.symbols.evaluate(inner(port)) & 0xFF])
            return None

        return None

    @staticmethod
    def _register_code(mnemonic: str, register: str) -> int:
        key = compact(register)
        if key not in REGISTERS_8BIT:
            raise InvalidRegisterError(mnemonic, register.strip(), valid_registers=list(REGISTERS_8BIT))
        return REGISTER_CODES[key]
