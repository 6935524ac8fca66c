"""
Load encoder: the ``ld`` forms that carry a value or an address.

    ld a,42         ->  3E 2A
    ld (hl),0       ->  36 00
    ld hl,msg       ->  21 lo hi
    ld hl,(nn)      ->  2A lo hi
    ld de,(nn)      ->  ED 5B lo hi
    ld (nn),hl      ->  22 lo hi
    ld (curRow),a   ->  32 4B 84
    ld a,(penCol)   ->  3A D7 86

Register-to-register loads and register indirections such as ``ld a,(hl)``
are fixed forms and are left to the opcode table.
"""

from typing import Optional

from ti83_sdk.assembler.encoders.base import (
    AssemblyContext,
    Encoder,
    compact,
    direct_address,
    is_direct_address,
    is_memory,
    is_register,
    word,
)
from ti83_sdk.assembler.opcodes import (
    ED_PREFIX,
    LOAD_IMMEDIATE_OPCODES,
    LOAD_PAIR_FROM_MEMORY_ED,
    LOAD_PAIR_IMMEDIATE_OPCODES,
    STORE_PAIR_TO_MEMORY_ED,
)
from ti83_sdk.assembler.parser import split_operands
from ti83_sdk.errors import InvalidOperandCountError


class LoadEncoder(Encoder):
    """Encodes immediate and direct-address loads."""

    def try_encode(
        self,
        mnemonic: str,
        operands: Optional[str],
        ctx: AssemblyContext,
    ) -> Optional[bytes]:
        if mnemonic != "ld":
            return None

        ops = split_operands(operands)
        if len(ops) != 2:
            raise InvalidOperandCountError("ld", "two operands", len(ops))
        dst, src = ops
        dst_key = compact(dst)
        src_key = compact(src)

        # ld (nn),r
        if is_direct_address(dst):
            if src_key == "hl":
                return bytes([0x22]) + word(direct_address(dst, ctx))
            if src_key == "a":
                return bytes([0x32]) + word(direct_address(dst, ctx))
            if src_key in STORE_PAIR_TO_MEMORY_ED:
                return bytes([ED_PREFIX, STORE_PAIR_TO_MEMORY_ED[src_key]]) + word(direct_address(dst, ctx))
            return None

        if is_register(src):
            return None

        if dst_key in LOAD_PAIR_IMMEDIATE_OPCODES:
            if is_direct_address(src):
                address = direct_address(src, ctx)
                if dst_key == "hl":
                    return bytes([0x2A]) + word(address)
                return bytes([ED_PREFIX, LOAD_PAIR_FROM_MEMORY_ED[dst_key]]) + word(address)
            if is_memory(src):
                return None
            return bytes([LOAD_PAIR_IMMEDIATE_OPCODES[dst_key]]) + word(ctx.symbols.evaluate(src))

        if dst_key in LOAD_IMMEDIATE_OPCODES:
            if is_memory(src):
                if dst_key == "a" and is_direct_address(src):
                    return bytes([0x3A]) + word(direct_address(src, ctx))
                return None
            value = ctx.symbols.evaluate(src)
            return bytes([LOAD_IMMEDIATE_OPCODES[dst_key], value & 0xFF])

        return None
