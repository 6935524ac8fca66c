"""
.8xp Checksum
=============

The last two bytes of a TI-83 Plus variable file hold a checksum:

- Algorithm: sum of every byte of the data section (from the variable
  header at offset 55 up to, not including, the checksum)
- Width: lower 16 bits of the sum, stored little-endian

Reference
---------
- TI-83 Plus link protocol guide, "Variable file format"
"""

# Offset of the data section (variable header) in a .8xp file
DATA_SECTION_OFFSET = 55


def calculate_checksum(data: bytes) -> int:
    """
    Checksum of a .8xp data section.

    Args:
        data: Bytes from the variable header to the end of the variable data

    Returns:
        16-bit checksum

    Example:
        >>> calculate_checksum(bytes([0xFF, 0xFF, 0x02]))
        512
    """
    return sum(data) & 0xFFFF


def verify_checksum(file_data: bytes) -> bool:
    """
    Check the trailing checksum of a complete .8xp file.

    Returns:
        True if the stored checksum matches the data section
    """
    if len(file_data) < DATA_SECTION_OFFSET + 2:
        return False
    stored = file_data[-2] | (file_data[-1] << 8)
    return calculate_checksum(file_data[DATA_SECTION_OFFSET:-2]) == stored
