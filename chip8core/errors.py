"""Faults raised by the CHIP-8 core.

Every fault derives from :class:`Chip8Error`, so a driver can stop, skip or
report with a single ``except`` clause. The core raises at the first failed
precondition and never returns a partially updated state.
"""


class Chip8Error(Exception):
    """Base class for all CHIP-8 core faults."""


class AddressOutOfRange(Chip8Error):
    """Memory access outside 0x000-0xFFF."""

    def __init__(self, address: int, length: int = 1, message: str = None):
        self.address = address
        self.length = length
        if message is None:
            if length == 1:
                message = f"Address 0x{address:X} is outside memory (0x000-0xFFF)"
            else:
                message = (
                    f"Access of {length} bytes at 0x{address:X} "
                    f"runs outside memory (0x000-0xFFF)"
                )
        super().__init__(message)


class ProgramTooLarge(AddressOutOfRange):
    """Program image does not fit between 0x200 and the end of memory."""

    def __init__(self, size: int, available: int, start: int):
        self.size = size
        self.available = available
        super().__init__(
            start,
            size,
            f"Program of {size} bytes does not fit at 0x{start:03X} "
            f"({available} bytes available)",
        )


class StackOverflow(Chip8Error):
    """Subroutine call with all stack frames in use."""

    def __init__(self, pc: int, depth: int):
        self.pc = pc
        self.depth = depth
        super().__init__(f"Stack overflow at 0x{pc:03X} (depth {depth})")


class StackUnderflow(Chip8Error):
    """Return executed with an empty stack."""

    def __init__(self, pc: int):
        self.pc = pc
        super().__init__(f"Stack underflow at 0x{pc:03X}: return with empty stack")


class UnknownOpcode(Chip8Error):
    """Instruction word that matches no entry in the opcode table."""

    def __init__(self, opcode: int, pc: int):
        self.opcode = opcode
        self.pc = pc
        super().__init__(f"Unknown opcode 0x{opcode:04X} at 0x{pc:03X}")
