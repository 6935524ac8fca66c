"""
TI-83 Plus SDK - Z80 Assembler and Program Builder
==================================================

This package provides a toolchain for writing assembly programs for the
TI-83 Plus graphing calculator.

The TI-83 Plus runs a Zilog Z80 at 6 MHz. Assembly programs are stored
as program variables that start with the AsmPrgm token, are loaded at
$9D93 and call into the operating system through ``bcall``.

Main Components
---------------
- **assembler**: Two-pass Z80 assembler
    Converts assembly source (.asm) to raw machine code

- **prgm**: .8xp file handling
    Wraps machine code into program files for transfer to the calculator

- **ti83plus**: Platform definitions
    ROM calls, system variables, load address and include generation

Quick Start
-----------
Assemble a program:
    >>> from ti83_sdk.assembler import Assembler
    >>> asm = Assembler()
    >>> code = asm.assemble_file("hello.asm")
    >>> asm.write_8xp("HELLO.8xp", "HELLO")

Or use the command-line tool:
    $ tiasm hello.asm -o HELLO.8xp

Version History
---------------
1.0.0 - Initial release with assembler and .8xp builder
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from ti83_sdk.assembler import Assembler, assemble, assemble_file
from ti83_sdk.errors import (
    TI83Error,
    AssemblerError,
    AssemblySyntaxError,
    UnknownInstructionError,
    DuplicateSymbolError,
    EncodingError,
    InvalidOperandCountError,
    InvalidLiteralError,
    UndefinedSymbolError,
    UnknownRomCallError,
    InvalidRegisterError,
    RangeError,
    PrgmError,
    PrgmFormatError,
    ProgramNameError,
    ProgramSizeError,
    SourceLocation,
)
from ti83_sdk.prgm import ProgramFile, create_8xp, read_8xp, write_8xp

__all__ = [
    "__version__",
    "Assembler",
    "assemble",
    "assemble_file",
    "TI83Error",
    "AssemblerError",
    "AssemblySyntaxError",
    "UnknownInstructionError",
    "DuplicateSymbolError",
    "EncodingError",
    "InvalidOperandCountError",
    "InvalidLiteralError",
    "UndefinedSymbolError",
    "UnknownRomCallError",
    "InvalidRegisterError",
    "RangeError",
    "PrgmError",
    "PrgmFormatError",
    "ProgramNameError",
    "ProgramSizeError",
    "SourceLocation",
    "ProgramFile",
    "create_8xp",
    "read_8xp",
    "write_8xp",
]
