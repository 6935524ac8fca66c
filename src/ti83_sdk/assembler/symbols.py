"""
Symbol and Constant Table
=========================

Two-pass assembly records names in pass 1 and reads them in pass 2:

- **Labels** map a name to the address of the instruction that follows it.
- **Constants** map a name to a value given by ``.equ`` (or ``-D``).

Names are case-sensitive and each name may be defined once, in exactly
one of the two tables. Redefining a label, redefining a constant, or
using one name for both raises DuplicateSymbolError.

The table itself is mutable and is only written by the assembly driver
during pass 1. Encoders receive a SymbolResolver, a read-only view that
also knows whether unknown names are tolerated (pass-1 sizing) or fatal
(pass-2 encoding).
"""

import logging
from types import MappingProxyType
from typing import Mapping, Optional

from ti83_sdk.assembler.expressions import evaluate
from ti83_sdk.errors import DuplicateSymbolError, SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Symbol Table
# =============================================================================

class SymbolTable:
    """
    Mutable label and constant storage for one assembly run.

    Attributes:
        labels: Label name to 16-bit address
        constants: Constant name to 16-bit value
    """

    def __init__(self):
        self.labels: dict[str, int] = {}
        self.constants: dict[str, int] = {}
        self._locations: dict[str, Optional[SourceLocation]] = {}

    def define_label(
        self,
        name: str,
        address: int,
        location: Optional[SourceLocation] = None,
    ) -> None:
        """
        Bind a label to an address.

        Raises:
            DuplicateSymbolError: If the name is already a label or constant
        """
        self._check_unique(name, location)
        self.labels[name] = address & 0xFFFF
        self._locations[name] = location

    def define_constant(
        self,
        name: str,
        value: int,
        location: Optional[SourceLocation] = None,
    ) -> None:
        """
        Bind a constant to a value.

        Raises:
            DuplicateSymbolError: If the name is already a label or constant
        """
        self._check_unique(name, location)
        self.constants[name] = value & 0xFFFF
        self._locations[name] = location
        logger.debug(f"Constant {name} = ${value & 0xFFFF:04X}")

    def is_defined(self, name: str) -> bool:
        return name in self.labels or name in self.constants

    def location_of(self, name: str) -> Optional[SourceLocation]:
        """Where a name was defined (None for predefined constants)."""
        return self._locations.get(name)

    def resolver(self, allow_undefined: bool = False) -> "SymbolResolver":
        """Create a read-only view of this table."""
        return SymbolResolver(self.labels, self.constants, allow_undefined)

    def _check_unique(self, name: str, location: Optional[SourceLocation]) -> None:
        if self.is_defined(name):
            raise DuplicateSymbolError(
                name,
                location=location,
                original_location=self._locations.get(name),
            )

    def __len__(self) -> int:
        return len(self.labels) + len(self.constants)


# =============================================================================
# Read-Only Resolver
# =============================================================================

class SymbolResolver:
    """
    Read-only access to labels and constants, as seen by the encoders.

    Attributes:
        labels: Read-only label mapping
        constants: Read-only constant mapping
        allow_undefined: True while sizing in pass 1; unknown names
            evaluate to 0 and relative-jump range checks are skipped
    """

    def __init__(
        self,
        labels: Mapping[str, int],
        constants: Mapping[str, int],
        allow_undefined: bool = False,
    ):
        # live views: a pass-1 resolver sees labels as they are recorded
        self.labels = MappingProxyType(labels)
        self.constants = MappingProxyType(constants)
        self.allow_undefined = allow_undefined

    def evaluate(self, text: str) -> int:
        """Evaluate operand text against this table. See expressions.evaluate."""
        return evaluate(text, self.constants, self.labels, self.allow_undefined)

    def lookup(self, name: str) -> Optional[int]:
        """Value of a constant or label, or None if the name is unknown."""
        if name in self.constants:
            return self.constants[name]
        return self.labels.get(name)

    def names(self) -> list[str]:
        return [*self.constants, *self.labels]
