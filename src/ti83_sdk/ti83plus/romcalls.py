"""
TI-83 Plus ROM Call Definitions
===============================

Programs call into the operating system with ``bcall(_Name)``, which the
assembler encodes as ``RST 28h`` followed by the 16-bit entry point:

    bcall(_PutS)    ->  EF 0A 45

This module holds the entry points of the commonly used routines, as
published in the TI-83 Plus include file (ti83plus.inc).

Usage
-----
    >>> from ti83_sdk.ti83plus.romcalls import get_rom_call
    >>> hex(get_rom_call("_ClrLCDFull").address)
    '0x4540'

Reference
---------
- TI-83 Plus System Routines SDK documentation
- ti83plus.inc from the TI-83 Plus SDK
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


# RST 28h: the OS dispatcher for ROM calls
BCALL_OPCODE = 0xEF


class RomCallCategory(Enum):
    """Functional area of a ROM call."""
    DISPLAY = auto()       # Home screen text and LCD
    GRAPHICS = auto()      # Graph buffer and pixels
    KEYBOARD = auto()      # Key input
    MATH = auto()          # Floating-point operations on OP registers
    VARIABLES = auto()     # Symbol table and variable storage
    SYSTEM = auto()        # Run indicator, memory, misc


@dataclass(frozen=True)
class RomCall:
    """
    A TI-83 Plus OS routine.

    Attributes:
        name: Routine name including the leading underscore (e.g. "_PutS")
        address: Entry point passed to RST 28h
        description: Brief description of what the routine does
        category: Functional category
    """
    name: str
    address: int
    description: str
    category: RomCallCategory


# =============================================================================
# ROM Call Table
# =============================================================================

ROM_CALLS: tuple[RomCall, ...] = (
    # Display
    RomCall("_PutMap", 0x4501, "Display character in A at cursor, no advance", RomCallCategory.DISPLAY),
    RomCall("_PutC", 0x4504, "Display character in A and advance cursor", RomCallCategory.DISPLAY),
    RomCall("_DispHL", 0x4507, "Display HL as a decimal number", RomCallCategory.DISPLAY),
    RomCall("_PutS", 0x450A, "Display zero-terminated string at HL", RomCallCategory.DISPLAY),
    RomCall("_NewLine", 0x452E, "Move cursor to start of next line", RomCallCategory.DISPLAY),
    RomCall("_ClrLCDFull", 0x4540, "Clear the whole LCD", RomCallCategory.DISPLAY),
    RomCall("_ClrLCD", 0x4543, "Clear the LCD, respecting split screen", RomCallCategory.DISPLAY),
    RomCall("_ClrScrnFull", 0x4546, "Clear LCD and text shadow", RomCallCategory.DISPLAY),
    RomCall("_ClrScrn", 0x4549, "Clear LCD and text shadow, respecting split screen", RomCallCategory.DISPLAY),
    RomCall("_ClrTxtShd", 0x454C, "Clear the text shadow buffer", RomCallCategory.DISPLAY),
    RomCall("_EraseEOL", 0x4552, "Erase from cursor to end of line", RomCallCategory.DISPLAY),
    RomCall("_HomeUp", 0x4558, "Move cursor to the top-left corner", RomCallCategory.DISPLAY),
    RomCall("_VPutMap", 0x455E, "Display small-font character in A at pen position", RomCallCategory.DISPLAY),
    RomCall("_VPutS", 0x4561, "Display small-font string at HL at pen position", RomCallCategory.DISPLAY),
    RomCall("_DispOP1A", 0x4BF7, "Display the number in OP1", RomCallCategory.DISPLAY),

    # Keyboard
    RomCall("_GetCSC", 0x4018, "Read key scan code without waiting", RomCallCategory.KEYBOARD),
    RomCall("_GetKey", 0x4972, "Wait for a key press and return its key code", RomCallCategory.KEYBOARD),

    # Floating-point math
    RomCall("_FPSub", 0x406F, "OP1 = OP1 - OP2", RomCallCategory.MATH),
    RomCall("_FPAdd", 0x4072, "OP1 = OP1 + OP2", RomCallCategory.MATH),
    RomCall("_FPMult", 0x4084, "OP1 = OP1 * OP2", RomCallCategory.MATH),
    RomCall("_FPDiv", 0x4099, "OP1 = OP1 / OP2", RomCallCategory.MATH),
    RomCall("_SqRoot", 0x409C, "OP1 = square root of OP1", RomCallCategory.MATH),
    RomCall("_OP1ToOP2", 0x412F, "Copy OP1 to OP2", RomCallCategory.MATH),
    RomCall("_OP2ToOP1", 0x4156, "Copy OP2 to OP1", RomCallCategory.MATH),
    RomCall("_OP1Set0", 0x41BF, "Set OP1 to floating-point zero", RomCallCategory.MATH),
    RomCall("_Random", 0x4B79, "OP1 = random number between 0 and 1", RomCallCategory.MATH),

    # Variables
    RomCall("_MemChk", 0x42E5, "Return free RAM in HL", RomCallCategory.VARIABLES),
    RomCall("_ChkFindSym", 0x42F1, "Find a variable named in OP1 (any type)", RomCallCategory.VARIABLES),
    RomCall("_FindSym", 0x42F4, "Find a real/list variable named in OP1", RomCallCategory.VARIABLES),
    RomCall("_CreateProg", 0x4339, "Create a program variable named in OP1", RomCallCategory.VARIABLES),
    RomCall("_DelVar", 0x4351, "Delete the variable found by ChkFindSym", RomCallCategory.VARIABLES),

    # Graphics
    RomCall("_ILine", 0x4798, "Draw a line between two pixel coordinates", RomCallCategory.GRAPHICS),
    RomCall("_IPoint", 0x47A4, "Draw or test a single pixel", RomCallCategory.GRAPHICS),
    RomCall("_GrBufCpy", 0x486A, "Copy the graph buffer to the LCD", RomCallCategory.GRAPHICS),
    RomCall("_GrBufClr", 0x4BD0, "Clear the graph buffer", RomCallCategory.GRAPHICS),

    # System
    RomCall("_RunIndicOn", 0x456D, "Turn on the busy indicator", RomCallCategory.SYSTEM),
    RomCall("_RunIndicOff", 0x4570, "Turn off the busy indicator", RomCallCategory.SYSTEM),
)

_BY_NAME: dict[str, RomCall] = {call.name: call for call in ROM_CALLS}
_BY_LOWER_NAME: dict[str, RomCall] = {call.name.lower(): call for call in ROM_CALLS}


# =============================================================================
# Lookup Functions
# =============================================================================

def get_rom_call(name: str) -> Optional[RomCall]:
    """
    Look up a ROM call by name.

    An exact match is preferred; otherwise the lookup ignores case, so
    ``_puts`` finds ``_PutS``.

    Args:
        name: Routine name, e.g. "_PutS"

    Returns:
        RomCall or None if unknown
    """
    call = _BY_NAME.get(name)
    if call is None:
        call = _BY_LOWER_NAME.get(name.lower())
    return call


def get_rom_calls_by_category(category: RomCallCategory) -> list[RomCall]:
    return [call for call in ROM_CALLS if call.category == category]


def get_all_rom_call_names() -> list[str]:
    """All ROM call names in table order."""
    return [call.name for call in ROM_CALLS]
