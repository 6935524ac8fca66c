"""
.8xp Program Builder
====================

Wraps assembled machine code into a TI-83 Plus program file.

Usage
-----
    >>> from ti83_sdk.prgm import create_8xp
    >>> data = create_8xp(bytes([0xBB, 0x6D, 0xC9]), "HELLO")
    >>> data[:8]
    b'**TI83F*'

Program Names
-------------
Names are 1-8 characters, start with a letter and contain only letters
and digits. They are stored in upper case. When no name is given, the
command-line tool derives one from the source file name with
derive_program_name().
"""

import logging
import re
from pathlib import Path
from typing import Optional

from ti83_sdk.errors import ProgramNameError
from ti83_sdk.prgm.records import DEFAULT_COMMENT, ProgramFile
from ti83_sdk.ti83plus import MAX_PROGRAM_NAME_LENGTH

# Logger for this module
logger = logging.getLogger(__name__)

# Valid program name: 1-8 alphanumeric, starts with letter
NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9]{0,7}$")

# Name used when nothing usable can be derived
DEFAULT_PROGRAM_NAME = "PROGRAM"


def validate_program_name(name: str) -> str:
    """
    Validate a program name and return its stored (upper-case) form.

    Raises:
        ProgramNameError: If the name is not valid on the calculator

    Example:
        >>> validate_program_name("hello")
        'HELLO'
    """
    if not NAME_PATTERN.match(name):
        raise ProgramNameError(
            f"invalid program name '{name}': use 1-{MAX_PROGRAM_NAME_LENGTH} letters "
            f"and digits, starting with a letter"
        )
    return name.upper()


def derive_program_name(source: str | Path) -> str:
    """
    Derive a program name from a file name.

    Keeps the letters and digits of the file stem, upper-cased, truncated
    to 8 characters. Leading digits are dropped since names must start
    with a letter.

    Example:
        >>> derive_program_name("my-game_v2.asm")
        'MYGAMEV2'
    """
    stem = Path(source).stem
    name = "".join(ch for ch in stem.upper() if ch.isascii() and ch.isalnum())
    name = name.lstrip("0123456789")
    return name[:MAX_PROGRAM_NAME_LENGTH] or DEFAULT_PROGRAM_NAME


def create_8xp(
    code: bytes,
    name: str,
    comment: Optional[str] = None,
    protected: bool = False,
) -> bytes:
    """
    Build the contents of a .8xp file.

    Args:
        code: Program bytes
        name: On-calculator program name
        comment: File comment (default: "Created by TI-83 Plus SDK")
        protected: Store as a protected (uneditable) program

    Returns:
        Complete .8xp file contents

    Raises:
        ProgramNameError: If the name is invalid
        ProgramSizeError: If the program is too large
    """
    program = ProgramFile(
        name=validate_program_name(name),
        data=bytes(code),
        comment=comment if comment is not None else DEFAULT_COMMENT,
        protected=protected,
    )
    data = program.to_bytes()
    logger.debug(f"Created program {program.name}: {len(code)} bytes of code, {len(data)} byte file")
    return data


def write_8xp(
    filepath: str | Path,
    code: bytes,
    name: str,
    comment: Optional[str] = None,
    protected: bool = False,
) -> int:
    """
    Write a .8xp file.

    Returns:
        Number of bytes written
    """
    data = create_8xp(code, name, comment=comment, protected=protected)
    Path(filepath).write_bytes(data)
    logger.debug(f"Wrote {filepath}")
    return len(data)


def read_8xp(filepath: str | Path) -> ProgramFile:
    """
    Read and validate a .8xp file.

    Raises:
        PrgmFormatError: If the file is not a valid program file
    """
    return ProgramFile.from_bytes(Path(filepath).read_bytes())
