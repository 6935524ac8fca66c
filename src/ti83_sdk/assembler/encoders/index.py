"""
Indexed Addressing Encoder
==========================

Encodes every instruction that names IX or IY, either as a register or
as a displaced memory operand ``(ix+d)``. Each form is the HL-based
instruction with a DD (IX) or FD (IY) prefix; memory forms insert the
signed displacement byte after the opcode:

    ld a,(ix+5)     ->  DD 7E 05
    ld (iy-1),b     ->  FD 70 FF
    ld (ix+2),42    ->  DD 36 02 2A
    add a,(iy+3)    ->  FD 86 03
    inc (ix+0)      ->  DD 34 00

CB-prefixed bit operations put the displacement before the opcode:

    bit 3,(ix+4)    ->  DD CB 04 5E
    rlc (iy+1)      ->  FD CB 01 06

Register forms:

    push ix         ->  DD E5
    ld ix,$1234     ->  DD 21 34 12
    ld ix,(nn)      ->  DD 2A nn
    ld (nn),iy      ->  FD 22 nn
    ld sp,ix        ->  DD F9
    inc ix          ->  DD 23
    add ix,de       ->  DD 19
    ex (sp),ix      ->  DD E3
    jp (ix)         ->  DD E9

Shapes that do not exist on the Z80 (``ld ix,hl``, ``jp (ix+2)``) are
declined and end up as unknown instructions.
"""

from typing import Optional

from ti83_sdk.assembler.encoders.base import (
    AssemblyContext,
    Encoder,
    bit_number,
    compact,
    direct_address,
    displacement,
    is_direct_address,
    is_memory,
    is_register,
    parse_index,
    word,
)
from ti83_sdk.assembler.opcodes import (
    ALU_OPERATIONS,
    BIT_OPCODES,
    CB_PREFIX,
    INDEX_PREFIXES,
    REGISTER_CODES,
    REGISTERS_8BIT,
    ROTATE_OPCODES,
)
from ti83_sdk.assembler.parser import split_operands
from ti83_sdk.errors import (
    InvalidOperandCountError,
    InvalidRegisterError,
)

# 16-bit operand codes for add ix,rr; "self" is ix for ix and iy for iy
_ADD_PAIR_OPCODES = {"bc": 0x09, "de": 0x19, "self": 0x29, "sp": 0x39}


def _is_index_register(operand: str) -> bool:
    return compact(operand) in INDEX_PREFIXES


def _mentions_index(operand: str) -> bool:
    return _is_index_register(operand) or parse_index(operand) is not None


class IndexEncoder(Encoder):
    """Encodes IX/IY instructions."""

    def try_encode(
        self,
        mnemonic: str,
        operands: Optional[str],
        ctx: AssemblyContext,
    ) -> Optional[bytes]:
        ops = split_operands(operands)
        if not any(_mentions_index(op) for op in ops):
            return None

        if mnemonic in ("push", "pop"):
            return self._encode_stack(mnemonic, ops)
        if mnemonic == "ld":
            return self._encode_load(ops, ctx)
        if mnemonic in ("inc", "dec"):
            return self._encode_inc_dec(mnemonic, ops, ctx)
        if mnemonic == "add" and ops and _is_index_register(ops[0]):
            return self._encode_add_pair(ops)
        if mnemonic in ALU_OPERATIONS:
            return self._encode_alu(mnemonic, ops, ctx)
        if mnemonic == "ex":
            if len(ops) == 2 and compact(ops[0]) == "(sp)" and _is_index_register(ops[1]):
                return bytes([INDEX_PREFIXES[compact(ops[1])], 0xE3])
            return None
        if mnemonic == "jp":
            if len(ops) == 1 and compact(ops[0]) in ("(ix)", "(iy)"):
                return bytes([INDEX_PREFIXES[compact(ops[0])[1:-1]], 0xE9])
            return None
        if mnemonic in BIT_OPCODES or mnemonic in ROTATE_OPCODES:
            return self._encode_cb(mnemonic, ops, ctx)
        return None

    # -------------------------------------------------------------------------
    # Register forms
    # -------------------------------------------------------------------------

    def _encode_stack(self, mnemonic: str, ops: list[str]) -> Optional[bytes]:
        if len(ops) != 1 or not _is_index_register(ops[0]):
            return None
        opcode = 0xE5 if mnemonic == "push" else 0xE1
        return bytes([INDEX_PREFIXES[compact(ops[0])], opcode])

    def _encode_add_pair(self, ops: list[str]) -> bytes:
        if len(ops) != 2:
            raise InvalidOperandCountError("add", "two operands", len(ops))
        dst = compact(ops[0])
        src = compact(ops[1])
        key = "self" if src == dst else src
        if key not in _ADD_PAIR_OPCODES:
            raise InvalidRegisterError(
                "add", ops[1].strip(), valid_registers=["bc", "de", dst, "sp"]
            )
        return bytes([INDEX_PREFIXES[dst], _ADD_PAIR_OPCODES[key]])

    # -------------------------------------------------------------------------
    # Loads
    # -------------------------------------------------------------------------

    def _encode_load(self, ops: list[str], ctx: AssemblyContext) -> Optional[bytes]:
        if len(ops) != 2:
            raise InvalidOperandCountError("ld", "two operands", len(ops))
        dst, src = ops
        dst_key = compact(dst)
        src_key = compact(src)

        if _is_index_register(dst):
            prefix = INDEX_PREFIXES[dst_key]
            if is_register(src):
                return None
            if is_direct_address(src):
                return bytes([prefix, 0x2A]) + word(direct_address(src, ctx))
            if is_memory(src):
                return None
            return bytes([prefix, 0x21]) + word(ctx.symbols.evaluate(src))

        if _is_index_register(src):
            prefix = INDEX_PREFIXES[src_key]
            if dst_key == "sp":
                return bytes([prefix, 0xF9])
            if is_direct_address(dst):
                return bytes([prefix, 0x22]) + word(direct_address(dst, ctx))
            return None

        if parse_index(dst) is not None:
            prefix, offset = displacement(dst, ctx)
            if src_key in REGISTERS_8BIT:
                return bytes([prefix, 0x70 + REGISTER_CODES[src_key], offset])
            if is_register(src) or is_memory(src):
                raise InvalidRegisterError("ld", src.strip(), valid_registers=list(REGISTERS_8BIT))
            value = ctx.symbols.evaluate(src)
            return bytes([prefix, 0x36, offset, value & 0xFF])

        if dst_key not in REGISTERS_8BIT:
            raise InvalidRegisterError("ld", dst.strip(), valid_registers=list(REGISTERS_8BIT))
        prefix, offset = displacement(src, ctx)
        return bytes([prefix, 0x46 + REGISTER_CODES[dst_key] * 8, offset])

    # -------------------------------------------------------------------------
    # Arithmetic on (ix+d)
    # -------------------------------------------------------------------------

    def _encode_inc_dec(self, mnemonic: str, ops: list[str], ctx: AssemblyContext) -> Optional[bytes]:
        if len(ops) != 1:
            raise InvalidOperandCountError(mnemonic, "one operand", len(ops))
        operand = ops[0]
        if _is_index_register(operand):
            opcode = 0x23 if mnemonic == "inc" else 0x2B
            return bytes([INDEX_PREFIXES[compact(operand)], opcode])
        prefix, offset = displacement(operand, ctx)
        opcode = 0x34 if mnemonic == "inc" else 0x35
        return bytes([prefix, opcode, offset])

    def _encode_alu(self, mnemonic: str, ops: list[str], ctx: AssemblyContext) -> Optional[bytes]:
        if len(ops) == 2 and compact(ops[0]) == "a":
            operand = ops[1]
        elif len(ops) == 1:
            operand = ops[0]
        else:
            return None
        if parse_index(operand) is None:
            return None
        prefix, offset = displacement(operand, ctx)
        return bytes([prefix, 0x86 + ALU_OPERATIONS[mnemonic] * 8, offset])

    # -------------------------------------------------------------------------
    # CB-prefixed operations on (ix+d)
    # -------------------------------------------------------------------------

    def _encode_cb(self, mnemonic: str, ops: list[str], ctx: AssemblyContext) -> Optional[bytes]:
        if mnemonic in BIT_OPCODES:
            if len(ops) != 2:
                raise InvalidOperandCountError(mnemonic, "a bit number and an operand", len(ops))
            operand = ops[1]
            if parse_index(operand) is None:
                return None
            bit = bit_number(mnemonic, ops[0], ctx)
            opcode = BIT_OPCODES[mnemonic] + (bit << 3) + REGISTER_CODES["(hl)"]
        else:
            if len(ops) != 1:
                raise InvalidOperandCountError(mnemonic, "one operand", len(ops))
            operand = ops[0]
            if parse_index(operand) is None:
                return None
            opcode = ROTATE_OPCODES[mnemonic] + REGISTER_CODES["(hl)"]
        prefix, offset = displacement(operand, ctx)
        return bytes([prefix, CB_PREFIX, offset, opcode])
