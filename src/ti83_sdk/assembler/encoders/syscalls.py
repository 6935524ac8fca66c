"""
System call encoder: bcall(_Name) -> EF lo hi (RST 28h + entry point).
"""

from typing import Optional

from ti83_sdk.assembler.encoders.base import AssemblyContext, Encoder, inner, is_memory, word
from ti83_sdk.assembler.expressions import find_similar_names
from ti83_sdk.errors import InvalidOperandCountError, UndefinedSymbolError, UnknownRomCallError
from ti83_sdk.ti83plus.romcalls import BCALL_OPCODE, get_all_rom_call_names, get_rom_call


class SystemCallEncoder(Encoder):
    """
    Encodes ROM calls.

    The name is looked up in the ROM call table first. A name that is not
    a known routine may still be a constant or label (for routines defined
    with .equ), or a plain address such as ``bcall($4540)``.
    """

    def try_encode(
        self,
        mnemonic: str,
        operands: Optional[str],
        ctx: AssemblyContext,
    ) -> Optional[bytes]:
        if mnemonic != "bcall":
            return None
        if not operands:
            raise InvalidOperandCountError("bcall", "a routine name", 0)

        name = inner(operands) if is_memory(operands) else operands.strip()

        call = get_rom_call(name)
        if call is not None:
            return bytes([BCALL_OPCODE]) + word(call.address)

        try:
            address = ctx.symbols.evaluate(name)
        except UndefinedSymbolError:
            similar = find_similar_names(name, get_all_rom_call_names())
            raise UnknownRomCallError(name, similar_names=similar) from None
        return bytes([BCALL_OPCODE]) + word(address)
