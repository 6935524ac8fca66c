"""
TI-83 Plus Program Files (.8xp)
===============================

Create and read .8xp program files, the format used by TI Connect and
emulators to transfer programs to the calculator.

Quick Start
-----------
    >>> from ti83_sdk.prgm import create_8xp, read_8xp
    >>> data = create_8xp(code, "HELLO")
    >>> program = read_8xp("HELLO.8xp")
    >>> program.name, len(program.data)
"""

from ti83_sdk.prgm.builder import (
    DEFAULT_PROGRAM_NAME,
    create_8xp,
    derive_program_name,
    read_8xp,
    validate_program_name,
    write_8xp,
)
from ti83_sdk.prgm.checksum import calculate_checksum, verify_checksum
from ti83_sdk.prgm.records import (
    DEFAULT_COMMENT,
    MAX_PROGRAM_SIZE,
    ProgramFile,
    VariableType,
)

__all__ = [
    "DEFAULT_PROGRAM_NAME",
    "DEFAULT_COMMENT",
    "MAX_PROGRAM_SIZE",
    "ProgramFile",
    "VariableType",
    "calculate_checksum",
    "verify_checksum",
    "create_8xp",
    "derive_program_name",
    "read_8xp",
    "validate_program_name",
    "write_8xp",
]
