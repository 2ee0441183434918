from enum import Enum


class Operation(str, Enum):
    """Trace record kinds, keyed by their letter in a valgrind trace."""

    # Instruction fetch, not simulated
    IGNORE = "I"

    # Data accesses
    LOAD = "L"
    STORE = "S"
    MODIFY = "M"  # load followed by a store to the same address

    def __str__(self) -> str:
        return self.value
