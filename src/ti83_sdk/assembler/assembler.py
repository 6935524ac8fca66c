"""
Z80 Assembler Driver
====================

The Assembler ties the parser, symbol table, size estimator and encoder
chain together into a classic two-pass assembler.

Pass 1
------
Walk the source with an address cursor starting at the origin:

- a label records the current address
- ``.org expr`` moves the cursor
- ``.equ name,expr`` records a constant (no bytes)
- anything else advances the cursor by its encoded size

Pass 2
------
Reset the cursor to the origin and walk the source again. Every
instruction is dispatched with the now complete symbol table and its
bytes are appended to the output. ``.org`` moves the cursor exactly as in
pass 1; ``.equ`` is skipped.

The output is the raw machine code, starting at the origin address.
Any error aborts the whole assembly; the error carries the file name,
line number and source text of the offending line.

Example Usage
-------------
>>> from ti83_sdk.assembler import Assembler
>>> asm = Assembler()
>>> code = asm.assemble('''
...     jp end
...     nop
... end:
...     ret
... ''')
>>> code.hex()
'c3979d00c9'
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ti83_sdk.assembler.dispatch import InstructionDispatcher
from ti83_sdk.assembler.encoders import AssemblyContext
from ti83_sdk.assembler.expressions import is_identifier
from ti83_sdk.assembler.parser import ParsedLine, parse_line, split_operands
from ti83_sdk.assembler.sizing import SizeEstimator
from ti83_sdk.assembler.symbols import SymbolTable
from ti83_sdk.errors import (
    AssemblerError,
    AssemblySyntaxError,
    InvalidOperandCountError,
    SourceLocation,
)
from ti83_sdk.prgm import write_8xp
from ti83_sdk.ti83plus import TI83_PLUS_ORIGIN

logger = logging.getLogger(__name__)


# =============================================================================
# Listing
# =============================================================================

@dataclass(frozen=True)
class ListingEntry:
    """
    One line of the assembly listing.

    Attributes:
        line: Source line number (0 for the program header)
        address: Address of the first byte (None when the line emits nothing)
        data: Bytes emitted by the line
        source: Source text, without the trailing newline
    """
    line: int
    address: Optional[int]
    data: bytes
    source: str


@dataclass(frozen=True)
class _SourceLine:
    location: SourceLocation
    text: str
    parsed: ParsedLine


# =============================================================================
# Assembler
# =============================================================================

class Assembler:
    """
    Two-pass Z80 assembler for TI-83 Plus programs.

    Attributes:
        origin: Default load address for the program
        header: Bytes emitted at the origin before the program (e.g. the
            AsmPrgm token); labels are shifted by its length
    """

    def __init__(
        self,
        origin: int = TI83_PLUS_ORIGIN,
        defines: Optional[dict[str, int]] = None,
        header: bytes = b"",
        dispatcher: Optional[InstructionDispatcher] = None,
    ):
        """
        Create an assembler.

        Args:
            origin: Load address used until the first .org
            defines: Constants available to every assembly (like -D)
            header: Bytes to emit ahead of the program
            dispatcher: Encoder chain (default: all instruction families)
        """
        self.origin = origin & 0xFFFF
        self.header = bytes(header)
        self._defines: dict[str, int] = dict(defines or {})
        self._dispatcher = dispatcher or InstructionDispatcher()
        self._estimator = SizeEstimator(self._dispatcher)

        self._symbols = SymbolTable()
        self._code = b""
        self._start = self.origin
        self._listing: list[ListingEntry] = []

    # =========================================================================
    # Configuration
    # =========================================================================

    def define_symbol(self, name: str, value: int) -> None:
        """
        Predefine a constant for every subsequent assembly.

        Equivalent to ``.equ name,value`` at the top of the source.
        """
        self._defines[name] = value & 0xFFFF

    # =========================================================================
    # Assembly
    # =========================================================================

    def assemble(self, source: str, filename: str = "<input>") -> bytes:
        """
        Assemble source text.

        Args:
            source: Assembly source
            filename: Name used in error messages

        Returns:
            Machine code, starting at the origin address

        Raises:
            AssemblerError: On the first error in the source
        """
        lines = self._parse(source, filename)

        self._symbols = SymbolTable()
        for name, value in self._defines.items():
            self._symbols.define_constant(name, value)

        end = self._pass1(lines)
        logger.debug(
            f"Pass 1 complete: {len(self._symbols.labels)} labels, "
            f"{len(self._symbols.constants)} constants, end ${end:04X}"
        )

        self._code = self._pass2(lines)
        logger.debug(f"Pass 2 complete: {len(self._code)} bytes at ${self._start:04X}")
        return self._code

    def assemble_file(self, filepath: str | Path) -> bytes:
        """
        Assemble a source file.

        Args:
            filepath: Path to the .asm file

        Returns:
            Machine code, starting at the origin address
        """
        path = Path(filepath)
        source = path.read_text(encoding="latin-1")
        return self.assemble(source, filename=path.name)

    def _parse(self, source: str, filename: str) -> list[_SourceLine]:
        lines = []
        for number, text in enumerate(source.splitlines(), start=1):
            location = SourceLocation(filename, number)
            try:
                parsed = parse_line(text)
            except AssemblerError as e:
                e.attach_location(location, text)
                raise
            if parsed is not None:
                lines.append(_SourceLine(location, text, parsed))
        return lines

    def _pass1(self, lines: list[_SourceLine]) -> int:
        """Assign label addresses and constants. Returns the final address."""
        logger.debug("Pass 1: collecting symbols")
        address = (self.origin + len(self.header)) & 0xFFFF

        for line in lines:
            parsed = line.parsed
            try:
                if parsed.label:
                    self._symbols.define_label(parsed.label, address, line.location)

                if parsed.mnemonic == ".org":
                    address = self._evaluate_origin(parsed)
                elif parsed.mnemonic == ".equ":
                    name, value = self._evaluate_constant(parsed)
                    self._symbols.define_constant(name, value, line.location)
                elif parsed.mnemonic:
                    size = self._estimator.size_of(parsed, self._symbols, address)
                    address = (address + size) & 0xFFFF
            except AssemblerError as e:
                e.attach_location(line.location, line.text)
                raise

        return address

    def _pass2(self, lines: list[_SourceLine]) -> bytes:
        """Encode every line with the complete symbol table."""
        logger.debug("Pass 2: generating code")
        resolver = self._symbols.resolver()
        output = bytearray(self.header)
        address = (self.origin + len(self.header)) & 0xFFFF
        self._start = self.origin
        self._listing = []
        if self.header:
            self._listing.append(ListingEntry(0, self.origin, self.header, "; program header"))

        for line in lines:
            parsed = line.parsed
            try:
                if parsed.label and self._symbols.labels[parsed.label] != address:
                    raise AssemblerError(
                        f"phase error: label '{parsed.label}' was at "
                        f"${self._symbols.labels[parsed.label]:04X} in pass 1, "
                        f"${address:04X} in pass 2"
                    )

                if parsed.mnemonic == ".org":
                    address = self._evaluate_origin(parsed)
                    if not output:
                        self._start = address
                    self._listing.append(ListingEntry(line.location.line, None, b"", line.text))
                    continue
                if parsed.mnemonic in (None, ".equ"):
                    self._listing.append(ListingEntry(line.location.line, None, b"", line.text))
                    continue

                ctx = AssemblyContext(resolver, address)
                data = self._dispatcher.encode(parsed.mnemonic, parsed.operands, ctx)
            except AssemblerError as e:
                e.attach_location(line.location, line.text)
                raise

            self._listing.append(ListingEntry(line.location.line, address, data, line.text))
            output.extend(data)
            address = (address + len(data)) & 0xFFFF

        return bytes(output)

    def _evaluate_origin(self, parsed: ParsedLine) -> int:
        ops = split_operands(parsed.operands)
        if len(ops) != 1:
            raise InvalidOperandCountError(".org", "one address", len(ops))
        return self._symbols.resolver().evaluate(ops[0])

    def _evaluate_constant(self, parsed: ParsedLine) -> tuple[str, int]:
        ops = split_operands(parsed.operands)
        if len(ops) != 2:
            raise InvalidOperandCountError(".equ", "a name and a value", len(ops))
        name, expr = ops
        if not is_identifier(name):
            raise AssemblySyntaxError(
                f"invalid constant name '{name}'",
                hint="names start with a letter, '_' or '.'",
            )
        return name, self._symbols.resolver().evaluate(expr)

    # =========================================================================
    # Results
    # =========================================================================

    def get_code(self) -> bytes:
        """Machine code from the last assembly."""
        return self._code

    def get_origin(self) -> int:
        """Address of the first emitted byte."""
        return self._start

    def get_symbols(self) -> dict[str, int]:
        """Label addresses from the last assembly."""
        return dict(self._symbols.labels)

    def get_constants(self) -> dict[str, int]:
        """Constant values from the last assembly (including predefined ones)."""
        return dict(self._symbols.constants)

    def get_listing_entries(self) -> list[ListingEntry]:
        return list(self._listing)

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            The listing showing addresses, generated bytes, and source lines,
            followed by the symbol table.
        """
        lines = [
            "TI-83 Plus Assembler Listing",
            "=" * 60,
            "",
            "Addr   Code          Line  Source",
            "-" * 60,
        ]
        for entry in self._listing:
            address = f"${entry.address:04X}" if entry.address is not None else "     "
            # long .db lines continue on following rows, four bytes each
            chunks = [entry.data[i:i + 4] for i in range(0, len(entry.data), 4)] or [b""]
            first = " ".join(f"{b:02X}" for b in chunks[0])
            lines.append(f"{address}  {first:12s}  {entry.line:4d}  {entry.source.rstrip()}")
            for chunk in chunks[1:]:
                lines.append(f"       {' '.join(f'{b:02X}' for b in chunk):12s}")

        lines.extend(["", "Symbol Table", "-" * 30])
        for name, value in sorted(self._symbols.labels.items()):
            lines.append(f"{name:20s} = ${value:04X}")
        for name, value in sorted(self._symbols.constants.items()):
            lines.append(f"{name:20s} = ${value:04X}  (equ)")
        return "\n".join(lines)

    # =========================================================================
    # Output Files
    # =========================================================================

    def write_binary(self, filepath: str | Path) -> None:
        """Write the raw machine code."""
        Path(filepath).write_bytes(self._code)

    def write_listing(self, filepath: str | Path) -> None:
        """Write the assembly listing."""
        Path(filepath).write_text(self.get_listing() + "\n")

    def write_8xp(self, filepath: str | Path, name: str) -> None:
        """
        Write the machine code as a TI-83 Plus program file.

        Args:
            filepath: Output .8xp path
            name: On-calculator program name
        """
        write_8xp(filepath, self._code, name)


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(
    source: str,
    origin: int = TI83_PLUS_ORIGIN,
    defines: Optional[dict[str, int]] = None,
) -> bytes:
    """
    Assemble source text with a fresh Assembler.

    Example:
        >>> assemble("ld a,42").hex()
        '3e2a'
    """
    return Assembler(origin=origin, defines=defines).assemble(source)


def assemble_file(
    filepath: str | Path,
    origin: int = TI83_PLUS_ORIGIN,
    defines: Optional[dict[str, int]] = None,
) -> bytes:
    """Assemble a source file with a fresh Assembler."""
    return Assembler(origin=origin, defines=defines).assemble_file(filepath)
