"""
Z80 Opcode Tables
=================

Static encoding data for the Z80 as used on the TI-83 Plus.

Register Codes
--------------
Most 8-bit operations encode their operand in a 3-bit field:

    b=0  c=1  d=2  e=3  h=4  l=5  (hl)=6  a=7

Register pairs use a 2-bit field: bc=0, de=1, hl=2, sp=3 (af=3 for
push/pop). Condition codes use a 3-bit field: nz z nc c po pe p m.

Prefixes
--------
- ``CB``: bit, rotate and shift operations
- ``ED``: extended instructions (block transfer, 16-bit adc/sbc, im ...)
- ``DD``/``FD``: use IX/IY in place of HL

Fixed-Form Table
----------------
FIXED_OPCODES maps a normalised instruction string to its bytes. Keys
are lower case with operands joined by a single comma and no spaces:

    "nop"          -> 00
    "ld a,b"       -> 78
    "ex af,af'"    -> 08
    "add hl,de"    -> 19

These are the instructions whose encoding never depends on a value, so
the table is the catch-all at the end of instruction dispatch.
"""

from types import MappingProxyType
from typing import Optional


# =============================================================================
# Register, Pair and Condition Codes
# =============================================================================

REGISTER_CODES = MappingProxyType({
    "b": 0, "c": 1, "d": 2, "e": 3, "h": 4, "l": 5, "(hl)": 6, "a": 7,
})

# 8-bit registers that can be written by ld r,n / in r,(c) / out (c),r
REGISTERS_8BIT = ("a", "b", "c", "d", "e", "h", "l")

REGISTER_PAIR_CODES = MappingProxyType({"bc": 0, "de": 1, "hl": 2, "sp": 3})

CONDITION_CODES = MappingProxyType({
    "nz": 0, "z": 1, "nc": 2, "c": 3, "po": 4, "pe": 5, "p": 6, "m": 7,
})

# jr only supports the first four conditions
RELATIVE_CONDITIONS = ("nz", "z", "nc", "c")

# Every name the encoders treat as a register rather than a symbol
REGISTER_NAMES = frozenset({
    "a", "b", "c", "d", "e", "h", "l", "i", "r", "f",
    "af", "af'", "bc", "de", "hl", "sp", "ix", "iy",
    "ixh", "ixl", "iyh", "iyl",
})

INDEX_PREFIXES = MappingProxyType({"ix": 0xDD, "iy": 0xFD})

CB_PREFIX = 0xCB
ED_PREFIX = 0xED


# =============================================================================
# Family Base Opcodes
# =============================================================================

# ALU operation index: register form 80+i*8+r, immediate form C6+i*8
ALU_OPERATIONS = MappingProxyType({
    "add": 0, "adc": 1, "sub": 2, "sbc": 3,
    "and": 4, "xor": 5, "or": 6, "cp": 7,
})

# CB-prefixed rotate and shift base opcodes (add the register code)
ROTATE_OPCODES = MappingProxyType({
    "rlc": 0x00, "rrc": 0x08, "rl": 0x10, "rr": 0x18,
    "sla": 0x20, "sra": 0x28, "sll": 0x30, "srl": 0x38,
})

# CB-prefixed bit operation base opcodes (add bit<<3 and register code)
BIT_OPCODES = MappingProxyType({"bit": 0x40, "res": 0x80, "set": 0xC0})

LOAD_IMMEDIATE_OPCODES = MappingProxyType({
    "b": 0x06, "c": 0x0E, "d": 0x16, "e": 0x1E,
    "h": 0x26, "l": 0x2E, "(hl)": 0x36, "a": 0x3E,
})

LOAD_PAIR_IMMEDIATE_OPCODES = MappingProxyType({
    "bc": 0x01, "de": 0x11, "hl": 0x21, "sp": 0x31,
})

# ED-prefixed ld rr,(nn) / ld (nn),rr; hl uses the shorter unprefixed form
LOAD_PAIR_FROM_MEMORY_ED = MappingProxyType({"bc": 0x4B, "de": 0x5B, "sp": 0x7B})
STORE_PAIR_TO_MEMORY_ED = MappingProxyType({"bc": 0x43, "de": 0x53, "sp": 0x73})

BLOCK_IO_OPCODES = MappingProxyType({
    "ini": bytes([0xED, 0xA2]), "inir": bytes([0xED, 0xB2]),
    "ind": bytes([0xED, 0xAA]), "indr": bytes([0xED, 0xBA]),
    "outi": bytes([0xED, 0xA3]), "otir": bytes([0xED, 0xB3]),
    "outd": bytes([0xED, 0xAB]), "otdr": bytes([0xED, 0xBB]),
})

INTERRUPT_RETURN_OPCODES = MappingProxyType({
    "reti": bytes([0xED, 0x4D]),
    "retn": bytes([0xED, 0x45]),
})


# =============================================================================
# Fixed-Form Instruction Table
# =============================================================================

_SIMPLE = {
    "nop": [0x00], "halt": [0x76], "di": [0xF3], "ei": [0xFB],
    "exx": [0xD9], "ret": [0xC9],
    "rlca": [0x07], "rrca": [0x0F], "rla": [0x17], "rra": [0x1F],
    "daa": [0x27], "cpl": [0x2F], "scf": [0x37], "ccf": [0x3F],
    "neg": [0xED, 0x44],
    "ldi": [0xED, 0xA0], "ldir": [0xED, 0xB0],
    "ldd": [0xED, 0xA8], "lddr": [0xED, 0xB8],
    "cpi": [0xED, 0xA1], "cpir": [0xED, 0xB1],
    "cpd": [0xED, 0xA9], "cpdr": [0xED, 0xB9],
    "rld": [0xED, 0x6F], "rrd": [0xED, 0x67],
    "ex de,hl": [0xEB],
    "ex af,af'": [0x08],
    "ex af,af": [0x08],
    "ex (sp),hl": [0xE3],
    "jp (hl)": [0xE9],
    "ld sp,hl": [0xF9],
    "ld a,(bc)": [0x0A], "ld a,(de)": [0x1A],
    "ld (bc),a": [0x02], "ld (de),a": [0x12],
    "ld a,i": [0xED, 0x57], "ld a,r": [0xED, 0x5F],
    "ld i,a": [0xED, 0x47], "ld r,a": [0xED, 0x4F],
    "im 0": [0xED, 0x46], "im 1": [0xED, 0x56], "im 2": [0xED, 0x5E],
}


def _build_fixed_opcodes() -> MappingProxyType:
    """Generate the fixed-form table from the register grids."""
    table: dict[str, bytes] = {key: bytes(value) for key, value in _SIMPLE.items()}

    for dst, dst_code in REGISTER_CODES.items():
        # ld r,r' (ld (hl),(hl) is halt)
        for src, src_code in REGISTER_CODES.items():
            if dst_code == 6 and src_code == 6:
                continue
            table[f"ld {dst},{src}"] = bytes([0x40 + dst_code * 8 + src_code])

        table[f"inc {dst}"] = bytes([0x04 + dst_code * 8])
        table[f"dec {dst}"] = bytes([0x05 + dst_code * 8])

    for op, index in ALU_OPERATIONS.items():
        for reg, code in REGISTER_CODES.items():
            opcode = bytes([0x80 + index * 8 + code])
            table[f"{op} a,{reg}"] = opcode
            table[f"{op} {reg}"] = opcode

    for pair, code in REGISTER_PAIR_CODES.items():
        table[f"inc {pair}"] = bytes([0x03 + code * 16])
        table[f"dec {pair}"] = bytes([0x0B + code * 16])
        table[f"add hl,{pair}"] = bytes([0x09 + code * 16])
        table[f"adc hl,{pair}"] = bytes([ED_PREFIX, 0x4A + code * 16])
        table[f"sbc hl,{pair}"] = bytes([ED_PREFIX, 0x42 + code * 16])

    for pair, code in (("bc", 0), ("de", 1), ("hl", 2), ("af", 3)):
        table[f"push {pair}"] = bytes([0xC5 + code * 16])
        table[f"pop {pair}"] = bytes([0xC1 + code * 16])

    return MappingProxyType(table)


FIXED_OPCODES = _build_fixed_opcodes()


def lookup_fixed(key: str) -> Optional[bytes]:
    """
    Look up a normalised instruction string in the fixed-form table.

    Args:
        key: Instruction text, e.g. "ld a,b" or "nop"

    Returns:
        Encoded bytes, or None if the instruction is not a fixed form
    """
    return FIXED_OPCODES.get(key)


def normalize_key(mnemonic: str, operands: list[str]) -> str:
    """
    Build a FIXED_OPCODES key from a mnemonic and split operands.

    Example:
        >>> normalize_key("ld", ["A", "( HL )"])
        'ld a,(hl)'
    """
    if not operands:
        return mnemonic
    parts = ["".join(op.split()).lower() for op in operands]
    return f"{mnemonic} {','.join(parts)}"
