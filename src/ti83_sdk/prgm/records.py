"""
.8xp Program File Structure
===========================

A .8xp file holds one TI-83 Plus program variable:

    Offset  Size  Description
    ------  ----  -----------
    0       8     Signature "**TI83F*"
    8       3     1A 0A 00
    11      42    Comment, NUL padded
    53      2     Length of the data section (len(code) + 19)
    55      2     Variable header length (0D 00)
    57      2     Variable data length (len(code) + 2)
    59      1     Variable type (05 program, 06 protected program)
    60      8     Name, upper case, NUL padded
    68      1     Version (00)
    69      1     Flags (00 = stored in RAM)
    70      2     Variable data length (repeated)
    72      2     Program length (len(code))
    74      n     Program bytes
    74+n    2     Checksum of bytes 55 .. 73+n

All multi-byte fields are little-endian. Files written by some older
tools use an 11-byte variable header without the version and flags
bytes; the reader accepts both.
"""

import struct
from dataclasses import dataclass
from enum import IntEnum

from ti83_sdk.errors import PrgmFormatError, ProgramNameError, ProgramSizeError
from ti83_sdk.prgm.checksum import DATA_SECTION_OFFSET, calculate_checksum
from ti83_sdk.ti83plus import MAX_PROGRAM_NAME_LENGTH


SIGNATURE = b"**TI83F*"
SIGNATURE_TAIL = bytes([0x1A, 0x0A, 0x00])
COMMENT_LENGTH = 42
DEFAULT_COMMENT = "Created by TI-83 Plus SDK"

# Variable header length field values
VAR_HEADER_LENGTH = 0x0D
VAR_HEADER_LENGTH_SHORT = 0x0B

# Everything in the data section besides the program bytes
DATA_SECTION_OVERHEAD = 19

# The data section length is a 16-bit field
MAX_PROGRAM_SIZE = 0xFFFF - DATA_SECTION_OVERHEAD


class VariableType(IntEnum):
    """TI-83 Plus variable type IDs used for programs."""
    PROGRAM = 0x05
    PROTECTED_PROGRAM = 0x06


@dataclass
class ProgramFile:
    """
    A program variable, as stored in a .8xp file.

    Attributes:
        name: On-calculator name (up to 8 characters)
        data: Program bytes (including the AsmPrgm token for assembly)
        comment: File comment (up to 42 characters)
        protected: True to mark the program as uneditable on the calculator
    """
    name: str
    data: bytes
    comment: str = DEFAULT_COMMENT
    protected: bool = False

    @property
    def variable_type(self) -> VariableType:
        return VariableType.PROTECTED_PROGRAM if self.protected else VariableType.PROGRAM

    def _encode_name(self) -> bytes:
        try:
            encoded = self.name.upper().encode("ascii")
        except UnicodeEncodeError:
            raise ProgramNameError(f"program name '{self.name}' is not ASCII") from None
        if not 1 <= len(encoded) <= MAX_PROGRAM_NAME_LENGTH:
            raise ProgramNameError(
                f"program name '{self.name}' must be 1-{MAX_PROGRAM_NAME_LENGTH} characters"
            )
        return encoded.ljust(MAX_PROGRAM_NAME_LENGTH, b"\x00")

    def to_bytes(self) -> bytes:
        """
        Serialize to the .8xp file format.

        Raises:
            ProgramNameError: If the name cannot be stored
            ProgramSizeError: If the program exceeds the 16-bit length fields
        """
        if len(self.data) > MAX_PROGRAM_SIZE:
            raise ProgramSizeError(
                f"program is {len(self.data)} bytes; the maximum is {MAX_PROGRAM_SIZE}"
            )

        variable_length = len(self.data) + 2
        section = struct.pack(
            "<HHB8sBBHH",
            VAR_HEADER_LENGTH,
            variable_length,
            self.variable_type,
            self._encode_name(),
            0x00,
            0x00,
            variable_length,
            len(self.data),
        ) + self.data

        comment = self.comment.encode("latin-1", errors="replace")[:COMMENT_LENGTH]
        header = struct.pack(
            "<8s3s42sH",
            SIGNATURE,
            SIGNATURE_TAIL,
            comment,
            len(section),
        )
        return header + section + struct.pack("<H", calculate_checksum(section))

    @classmethod
    def from_bytes(cls, file_data: bytes) -> "ProgramFile":
        """
        Parse and validate a .8xp file.

        Raises:
            PrgmFormatError: If the signature, lengths or checksum are wrong
        """
        if len(file_data) < DATA_SECTION_OFFSET + 4:
            raise PrgmFormatError(f"file too short: {len(file_data)} bytes")

        signature, tail, comment, section_length = struct.unpack_from("<8s3s42sH", file_data, 0)
        if signature != SIGNATURE or tail != SIGNATURE_TAIL:
            raise PrgmFormatError(f"invalid signature {signature!r}")

        section = file_data[DATA_SECTION_OFFSET:-2]
        if section_length != len(section):
            raise PrgmFormatError(
                f"data section length is {section_length}, file holds {len(section)} bytes"
            )

        stored_checksum = struct.unpack_from("<H", file_data, len(file_data) - 2)[0]
        if calculate_checksum(section) != stored_checksum:
            raise PrgmFormatError(
                f"checksum mismatch: stored ${stored_checksum:04X}, "
                f"calculated ${calculate_checksum(section):04X}"
            )

        header_length = struct.unpack_from("<H", section, 0)[0]
        if len(section) < header_length + 4:
            raise PrgmFormatError(f"truncated variable header ({len(section)} bytes)")
        if header_length == VAR_HEADER_LENGTH:
            _, variable_length, var_type, raw_name, _, _, repeated = struct.unpack_from("<HHB8sBBH", section, 0)
            body = section[17:]
        elif header_length == VAR_HEADER_LENGTH_SHORT:
            _, variable_length, var_type, raw_name, repeated = struct.unpack_from("<HHB8sH", section, 0)
            body = section[15:]
        else:
            raise PrgmFormatError(f"unsupported variable header length {header_length}")

        if var_type not in (VariableType.PROGRAM, VariableType.PROTECTED_PROGRAM):
            raise PrgmFormatError(f"variable type ${var_type:02X} is not a program")
        if variable_length != repeated or variable_length != len(body):
            raise PrgmFormatError(
                f"variable length ${variable_length:04X} does not match data ({len(body)} bytes)"
            )
        if len(body) < 2:
            raise PrgmFormatError("missing program length field")

        program_length = struct.unpack_from("<H", body, 0)[0]
        if program_length != len(body) - 2:
            raise PrgmFormatError(
                f"program length {program_length} does not match data ({len(body) - 2} bytes)"
            )

        return cls(
            name=raw_name.rstrip(b"\x00").decode("ascii", errors="replace"),
            data=bytes(body[2:]),
            comment=comment.rstrip(b"\x00").decode("latin-1"),
            protected=var_type == VariableType.PROTECTED_PROGRAM,
        )
