"""
TI-83 Plus Platform Definitions
===============================

Constants describing how assembly programs run on the TI-83 Plus, plus
the ROM call and system variable tables.

Program Layout
--------------
Assembly programs are stored as program variables whose data begins
with the two-byte AsmPrgm token (BB 6D). The OS copies the program to
$9D93 and starts execution right after the token, at $9D95.

    .org $9D93
    .db $BB,$6D         ; AsmPrgm
    ...                 ; code starts at $9D95

Usage
-----
    >>> from ti83_sdk.ti83plus import generate_include_file
    >>> content = generate_include_file()
    >>> print(content.splitlines()[1])
    ; TI83PLUS.INC - TI-83 Plus ROM Calls and System Variables
"""

from ti83_sdk.ti83plus.romcalls import (
    BCALL_OPCODE,
    ROM_CALLS,
    RomCall,
    RomCallCategory,
    get_rom_call,
    get_rom_calls_by_category,
)
from ti83_sdk.ti83plus.sysvars import (
    SYSTEM_VARIABLES,
    SystemVariable,
    get_variable,
)


# Load address of assembly programs
TI83_PLUS_ORIGIN = 0x9D93

# AsmPrgm token that marks a program as assembly
ASM_PRGM_TOKEN = bytes([0xBB, 0x6D])

# On-calculator program names are at most 8 characters
MAX_PROGRAM_NAME_LENGTH = 8


_CATEGORY_TITLES = {
    RomCallCategory.DISPLAY: "Display",
    RomCallCategory.GRAPHICS: "Graphics",
    RomCallCategory.KEYBOARD: "Keyboard",
    RomCallCategory.MATH: "Floating Point Math",
    RomCallCategory.VARIABLES: "Variables",
    RomCallCategory.SYSTEM: "System",
}


def _equ_line(name: str, address: int, description: str) -> str:
    text = f".equ {name},${address:04X}"
    return f"{text:28s}; {description}"


def generate_include_file(
    include_rom_calls: bool = True,
    include_sysvars: bool = True,
) -> str:
    """
    Generate an include file with ROM call and system variable addresses.

    Every entry is written as a ``.equ`` directive this assembler accepts.

    Args:
        include_rom_calls: Emit the ROM call section
        include_sysvars: Emit the system variable section

    Returns:
        Include file content as a string
    """
    lines = [
        "; =============================================================================",
        "; TI83PLUS.INC - TI-83 Plus ROM Calls and System Variables",
        "; =============================================================================",
        "; Generated by ti83plus-sdk",
        "; =============================================================================",
        "",
    ]

    if include_rom_calls:
        for category in RomCallCategory:
            calls = get_rom_calls_by_category(category)
            if not calls:
                continue
            lines.extend([
                "; -----------------------------------------------------------------------------",
                f"; ROM Calls: {_CATEGORY_TITLES[category]}",
                "; -----------------------------------------------------------------------------",
            ])
            for call in calls:
                lines.append(_equ_line(call.name, call.address, call.description))
            lines.append("")

    if include_sysvars:
        lines.extend([
            "; -----------------------------------------------------------------------------",
            "; System Variables",
            "; -----------------------------------------------------------------------------",
        ])
        for var in SYSTEM_VARIABLES:
            lines.append(_equ_line(var.name, var.address, var.description))
        lines.append("")

    return "\n".join(lines)


__all__ = [
    "TI83_PLUS_ORIGIN",
    "ASM_PRGM_TOKEN",
    "MAX_PROGRAM_NAME_LENGTH",
    "BCALL_OPCODE",
    "ROM_CALLS",
    "RomCall",
    "RomCallCategory",
    "get_rom_call",
    "SYSTEM_VARIABLES",
    "SystemVariable",
    "get_variable",
    "generate_include_file",
]
