"""
Z80 Assembler for the TI-83 Plus
================================

This package provides a two-pass assembler for the Z80 as programmed on
the TI-83 Plus calculator. It turns assembly source into raw machine
code, which ``ti83_sdk.prgm`` wraps into a .8xp program file.

Main Components
---------------
- **Assembler**: Two-pass driver (pass 1 assigns addresses, pass 2 encodes)
- **parse_line**: Splits a source line into label, mnemonic and operands
- **evaluate**: Evaluates literals, constants, labels and +/- offsets
- **SymbolTable**: Labels and .equ constants
- **InstructionDispatcher**: Routes instructions to the family encoders
- **SizeEstimator**: Pass-1 instruction lengths

Example Usage
-------------
>>> from ti83_sdk.assembler import Assembler
>>> asm = Assembler()
>>> code = asm.assemble('''
...     bcall(_ClrLCDFull)
...     ld hl,msg
...     bcall(_PutS)
...     ret
... msg:
...     .db "Hello",0
... ''')

Supported Syntax
----------------
- Labels end with ``:``; comments start with ``;``
- Directives: .org, .equ, .db, .dw, .end
- System calls: ``bcall(_Name)``
- Numbers: ``42``, ``$2A``, ``0x2A``, ``2Ah``, ``%101010``, ``0b101010``, ``'*'``
- Simple expressions: ``label+1``, ``WIDTH-1``
"""

from ti83_sdk.assembler.assembler import Assembler, ListingEntry, assemble, assemble_file
from ti83_sdk.assembler.dispatch import InstructionDispatcher
from ti83_sdk.assembler.expressions import evaluate, is_identifier
from ti83_sdk.assembler.parser import ParsedLine, parse_line, split_data_items, split_operands
from ti83_sdk.assembler.sizing import SizeEstimator
from ti83_sdk.assembler.symbols import SymbolResolver, SymbolTable

__all__ = [
    "Assembler",
    "ListingEntry",
    "assemble",
    "assemble_file",
    "InstructionDispatcher",
    "evaluate",
    "is_identifier",
    "ParsedLine",
    "parse_line",
    "split_operands",
    "split_data_items",
    "SizeEstimator",
    "SymbolResolver",
    "SymbolTable",
]
