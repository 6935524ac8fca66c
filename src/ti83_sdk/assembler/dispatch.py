"""
Instruction Dispatch
====================

Routes a mnemonic and its operands to the first encoder that accepts
them. Several mnemonics belong to more than one family depending on the
operands (``ld a,42`` is a load, ``ld a,(ix+1)`` is indexed, ``ld a,b`` is
a fixed form), so the order is significant:

1. Data directives (.db, .dw, .end)
2. System calls (bcall)
3. Indexed addressing (any IX/IY operand)
4. Loads (ld only)
5. Jumps
6. Calls and conditional returns
7. Arithmetic with immediates
8. Bit operations
9. Input/output
10. reti/retn
11. Fixed-form table, keyed by "mnemonic operands", or by the bare
    mnemonic when the line has no operands

If nothing matches, UnknownInstructionError names the line's content.
"""

from typing import Optional

from ti83_sdk.assembler.encoders import AssemblyContext, Encoder, default_encoders
from ti83_sdk.assembler.opcodes import INTERRUPT_RETURN_OPCODES, lookup_fixed, normalize_key
from ti83_sdk.assembler.parser import split_operands
from ti83_sdk.errors import UnknownInstructionError


class InstructionDispatcher:
    """
    Prioritised encoder chain with the opcode table as the fallback.

    Attributes:
        encoders: Encoders tried in order before the table lookups
    """

    def __init__(self, encoders: Optional[list[Encoder]] = None):
        self.encoders = encoders if encoders is not None else default_encoders()

    def encode(self, mnemonic: str, operands: Optional[str], ctx: AssemblyContext) -> bytes:
        """
        Encode one instruction or data directive.

        Raises:
            UnknownInstructionError: If no encoder or table entry matches
            EncodingError: If an encoder recognises but cannot encode the line
        """
        for encoder in self.encoders:
            result = encoder.try_encode(mnemonic, operands, ctx)
            if result is not None:
                return result

        if mnemonic in INTERRUPT_RETURN_OPCODES and not operands:
            return INTERRUPT_RETURN_OPCODES[mnemonic]

        ops = split_operands(operands)
        result = lookup_fixed(normalize_key(mnemonic, ops))
        if result is not None:
            return result

        raise UnknownInstructionError(mnemonic, operands)
