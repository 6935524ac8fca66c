"""
Instruction Size Estimation
===========================

Pass 1 needs the length of every line to assign label addresses, before
forward references can be resolved. Z80 instruction lengths depend only
on the instruction form, never on operand values, so the estimator runs
the same dispatch chain as pass 2 against a tolerant symbol view:

- unknown names evaluate to 0
- relative jump range checks are skipped

and takes the length of the result. Sizes therefore always agree with
the bytes pass 2 emits for the same line.
"""

from typing import Optional

from ti83_sdk.assembler.dispatch import InstructionDispatcher
from ti83_sdk.assembler.encoders import AssemblyContext
from ti83_sdk.assembler.parser import ParsedLine
from ti83_sdk.assembler.symbols import SymbolTable

# Directives that occupy no space and are handled by the driver itself
DRIVER_DIRECTIVES = (".org", ".equ")


class SizeEstimator:
    """Computes the pass-1 length of source lines."""

    def __init__(self, dispatcher: Optional[InstructionDispatcher] = None):
        self.dispatcher = dispatcher or InstructionDispatcher()

    def size_of(self, line: ParsedLine, symbols: SymbolTable, address: int) -> int:
        """
        Number of bytes a line will occupy.

        Args:
            line: Parsed source line
            symbols: Labels and constants recorded so far
            address: Address the line will be assembled at

        Raises:
            EncodingError: If the line is malformed regardless of symbol values
            UnknownInstructionError: If the instruction does not exist
        """
        if line.mnemonic is None or line.mnemonic in DRIVER_DIRECTIVES:
            return 0
        ctx = AssemblyContext(symbols.resolver(allow_undefined=True), address)
        return len(self.dispatcher.encode(line.mnemonic, line.operands, ctx))
