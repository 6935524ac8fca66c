"""
Instruction Family Encoders
===========================

One encoder per instruction family. Each implements
``try_encode(mnemonic, operands, ctx)`` and either returns the encoded
bytes or None to let the next family try.

Families
--------
- **DataDirectiveEncoder**: .db, .dw, .end
- **SystemCallEncoder**: bcall(_Name)
- **IndexEncoder**: everything involving IX/IY
- **LoadEncoder**: ld with an immediate or direct address
- **JumpEncoder**: jp, jr, djnz
- **CallEncoder**: call, conditional ret
- **ArithmeticEncoder**: ALU operations with an immediate
- **BitEncoder**: bit/res/set, rotates and shifts
- **IOEncoder**: in, out, block I/O
"""

from ti83_sdk.assembler.encoders.base import AssemblyContext, Encoder
from ti83_sdk.assembler.encoders.data import DataDirectiveEncoder
from ti83_sdk.assembler.encoders.syscalls import SystemCallEncoder
from ti83_sdk.assembler.encoders.index import IndexEncoder
from ti83_sdk.assembler.encoders.loads import LoadEncoder
from ti83_sdk.assembler.encoders.jumps import JumpEncoder
from ti83_sdk.assembler.encoders.calls import CallEncoder
from ti83_sdk.assembler.encoders.arithmetic import ArithmeticEncoder
from ti83_sdk.assembler.encoders.bitops import BitEncoder
from ti83_sdk.assembler.encoders.io import IOEncoder


def default_encoders() -> list[Encoder]:
    """All encoders in dispatch priority order."""
    return [
        DataDirectiveEncoder(),
        SystemCallEncoder(),
        IndexEncoder(),
        LoadEncoder(),
        JumpEncoder(),
        CallEncoder(),
        ArithmeticEncoder(),
        BitEncoder(),
        IOEncoder(),
    ]


__all__ = [
    "AssemblyContext",
    "Encoder",
    "DataDirectiveEncoder",
    "SystemCallEncoder",
    "IndexEncoder",
    "LoadEncoder",
    "JumpEncoder",
    "CallEncoder",
    "ArithmeticEncoder",
    "BitEncoder",
    "IOEncoder",
    "default_encoders",
]
