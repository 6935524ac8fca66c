"""
TI-83 Plus System Variable Definitions
======================================

Fixed RAM locations used by the operating system. The assembler lets
direct-address loads name them, so ``ld (curRow),a`` works without an
include file:

    ld (curRow),a   ->  32 4B 84

Usage
-----
    >>> from ti83_sdk.ti83plus.sysvars import get_variable
    >>> hex(get_variable("penCol").address)
    '0x86d7'
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SystemVariable:
    """
    A named RAM location.

    Attributes:
        name: Name as written in ti83plus.inc (e.g. "curRow")
        address: RAM address
        size: Size in bytes
        description: Brief description
    """
    name: str
    address: int
    size: int
    description: str


SYSTEM_VARIABLES: tuple[SystemVariable, ...] = (
    # Floating-point registers (11 bytes each)
    SystemVariable("OP1", 0x8478, 11, "Floating-point register 1"),
    SystemVariable("OP2", 0x8483, 11, "Floating-point register 2"),
    SystemVariable("OP3", 0x848E, 11, "Floating-point register 3"),
    SystemVariable("OP4", 0x8499, 11, "Floating-point register 4"),
    SystemVariable("OP5", 0x84A4, 11, "Floating-point register 5"),
    SystemVariable("OP6", 0x84AF, 11, "Floating-point register 6"),

    # Home screen cursor
    SystemVariable("curRow", 0x844B, 1, "Home screen cursor row (0-7)"),
    SystemVariable("curCol", 0x844C, 1, "Home screen cursor column (0-15)"),

    # Small-font pen
    SystemVariable("penCol", 0x86D7, 1, "Small-font pen column (0-95)"),
    SystemVariable("penRow", 0x86D8, 1, "Small-font pen row (0-63)"),

    # Keyboard
    SystemVariable("kbdScanCode", 0x843F, 1, "Scan code of the last key pressed"),

    # Buffers
    SystemVariable("textShadow", 0x8508, 128, "Home screen text shadow"),
    SystemVariable("saveSScreen", 0x86EC, 768, "Screen save buffer"),
    SystemVariable("plotSScreen", 0x9340, 768, "Graph buffer"),
    SystemVariable("appBackUpScreen", 0x9872, 768, "Free 768-byte buffer"),

    # System flags base (used with IY)
    SystemVariable("flags", 0x89F0, 1, "Base of the OS flag area, normally held in IY"),
)

_BY_NAME: dict[str, SystemVariable] = {var.name: var for var in SYSTEM_VARIABLES}
_BY_LOWER_NAME: dict[str, SystemVariable] = {var.name.lower(): var for var in SYSTEM_VARIABLES}


def get_variable(name: str, exact: bool = False) -> Optional[SystemVariable]:
    """
    Look up a system variable by name (exact match first, then any case).

    Args:
        name: Variable name
        exact: Only accept the name as spelled in the table

    Returns:
        SystemVariable or None if unknown
    """
    var = _BY_NAME.get(name)
    if var is None and not exact:
        var = _BY_LOWER_NAME.get(name.lower())
    return var


def get_variables_at_address(address: int) -> list[SystemVariable]:
    return [var for var in SYSTEM_VARIABLES if var.address == address]
