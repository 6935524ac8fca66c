"""
TI-83 Plus SDK Error Hierarchy
==============================

This module defines the exception hierarchy for the entire SDK.
All exceptions inherit from TI83Error, allowing callers to catch all
SDK-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
TI83Error (base)
├── AssemblerError (assembler-related)
│   ├── AssemblySyntaxError - malformed line structure
│   ├── UnknownInstructionError - no encoder or table entry matched
│   ├── DuplicateSymbolError - name defined more than once
│   └── EncodingError - recognised instruction with malformed operands
│       ├── InvalidOperandCountError - wrong number of operands
│       ├── InvalidLiteralError - operand cannot be evaluated
│       │   ├── UndefinedSymbolError - unknown label/constant
│       │   └── UnknownRomCallError - unknown bcall() name
│       ├── InvalidRegisterError - register not valid for the instruction
│       └── RangeError - displacement or bit index out of range
└── PrgmError (.8xp container handling)
    ├── PrgmFormatError - invalid .8xp file contents
    ├── ProgramNameError - invalid on-calculator program name
    └── ProgramSizeError - program does not fit the container

Assembly is all-or-nothing: the first error aborts the whole run. The
driver attaches the source location of the offending line before the
error reaches the caller, so messages read like:

    hello.asm:12: error: relative jump target 'loop' is out of range (offset: 140)
        jr loop
    hint: the range is -128 to +127 bytes; use jp for longer jumps
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class TI83Error(Exception):
    """
    Base exception for all SDK errors.

        try:
            Assembler().assemble_file("program.asm")
        except TI83Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A line in a source file, used for error reporting and listings.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
    """
    filename: str
    line: int

    def __str__(self) -> str:
        """Format as 'filename:line' for error messages."""
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(TI83Error):
    """
    Base exception for all assembler-related errors.

    Encoders raise these without a location; the assembly driver calls
    attach_location() with the line being assembled before re-raising.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def attach_location(self, location: SourceLocation, source_line: Optional[str] = None) -> None:
        """
        Record where the error happened, if not already known.

        Args:
            location: File and line of the offending statement
            source_line: Raw text of the offending line
        """
        if self.location is None:
            self.location = location
        if self.source_line is None:
            self.source_line = source_line
        self.args = (self._format_message(),)

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            hello.asm:15: error: undefined symbol 'prnt'
                call prnt
            hint: did you mean 'print'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line.strip()}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class AssemblySyntaxError(AssemblerError):
    """
    Malformed line structure.

    Examples:
        - Unterminated string literal in .db
        - Unbalanced parentheses in an operand list
    """
    pass


class UnknownInstructionError(AssemblerError):
    """
    No encoder and no opcode table entry matched the line.

    The message names the mnemonic and the operand text so the offending
    line can be found by content.
    """

    def __init__(
        self,
        mnemonic: str,
        operands: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        self.operands = operands

        text = f"{mnemonic} {operands}" if operands else mnemonic
        super().__init__(
            f"unknown instruction '{text}'",
            location=location,
            source_line=source_line,
        )


class DuplicateSymbolError(AssemblerError):
    """
    Symbol defined multiple times.

    Raised when a label is defined twice, a constant is redefined with
    .equ, or the same name is used for both a label and a constant.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{symbol}' was first defined at {original_location}"

        super().__init__(
            f"duplicate symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class EncodingError(AssemblerError):
    """
    An encoder recognised the instruction but could not encode its operands.
    """
    pass


class InvalidOperandCountError(EncodingError):
    """
    Wrong number of comma-separated operands.

    Example:
        .equ WIDTH        ; Error: .equ requires a name and a value
    """

    def __init__(
        self,
        mnemonic: str,
        expected: str,
        got: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        self.expected = expected
        self.got = got

        super().__init__(
            f"'{mnemonic}' requires {expected}, got {got} operand{'s' if got != 1 else ''}",
            location=location,
            source_line=source_line,
        )


class InvalidLiteralError(EncodingError):
    """
    An operand could not be evaluated as a constant, label, or literal.
    """
    pass


class UndefinedSymbolError(InvalidLiteralError):
    """
    Reference to a name that is neither a label nor a constant.

    The assembler suggests similarly-named symbols when this error
    occurs, helping to catch typos.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        if not hint and self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnknownRomCallError(InvalidLiteralError):
    """
    bcall() names a routine that is not in the ROM call table and is not
    a defined constant or label.
    """

    def __init__(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_names: Optional[list[str]] = None,
    ):
        self.name = name
        self.similar_names = similar_names or []

        hint = None
        if self.similar_names:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_names[:3])
            hint = f"did you mean {suggestions}?"
        else:
            hint = "define the entry point with .equ if it is not a standard ROM call"

        super().__init__(
            f"unknown ROM call '{name}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class InvalidRegisterError(EncodingError):
    """
    An operand names something that is not a valid register or memory
    operand for the instruction.

    Example:
        bit 3,ix      ; Error: ix is not a bit-operation operand
    """

    def __init__(
        self,
        mnemonic: str,
        register: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        valid_registers: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.register = register
        self.valid_registers = valid_registers or []

        hint = None
        if self.valid_registers:
            hint = f"{mnemonic} accepts: {', '.join(self.valid_registers)}"

        super().__init__(
            f"invalid register '{register}' for '{mnemonic}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class RangeError(EncodingError):
    """
    A value does not fit the field it is encoded into.

    Relative jumps (jr, djnz) and indexed displacements are signed 8-bit
    values, limiting them to -128 .. +127. This is a hard assembly-time
    error; the assembler never silently picks a longer encoding.
    """
    pass


# =============================================================================
# Container (.8xp) Exceptions
# =============================================================================

class PrgmError(TI83Error):
    """Base exception for .8xp program container errors."""
    pass


class PrgmFormatError(PrgmError):
    """
    Invalid .8xp file contents.

    Raised when reading a file whose signature, length fields, or
    checksum do not match the container format.
    """
    pass


class ProgramNameError(PrgmError):
    """
    Invalid on-calculator program name.

    Program names are 1-8 characters, start with a letter, and contain
    only letters and digits.
    """
    pass


class ProgramSizeError(PrgmError):
    """
    Program too large for the container's 16-bit length fields.
    """
    pass
