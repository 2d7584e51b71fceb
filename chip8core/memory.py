"""CHIP-8 address space with the built-in hexadecimal font."""

from typing import Sequence

import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from chip8core.constants import (
    MEMORY_SIZE, PROGRAM_START, FONT_START, FONT_DATA, FONT_SPRITE_SIZE
)
from chip8core.errors import AddressOutOfRange, ProgramTooLarge

ByteData = bytes | bytearray | Sequence[int] | jnp.ndarray


def as_byte_array(data: ByteData) -> jnp.ndarray:
    """Convert raw bytes or a sequence of ints to a uint8 array."""
    if isinstance(data, (bytes, bytearray)):
        data = list(data)
    values = jnp.asarray(data, dtype=jnp.int32).reshape(-1)
    if values.size and bool(jnp.any((values < 0) | (values > 0xFF))):
        raise ValueError("Byte data must contain values in range 0-255")
    return values.astype(jnp.uint8)


def _check_range(address: int, length: int = 1):
    """Raise AddressOutOfRange unless [address, address + length) is in memory."""
    if address < 0 or address + length > MEMORY_SIZE:
        raise AddressOutOfRange(address, length)


class Memory(PyTreeNode):
    """4 KiB of byte-addressable memory.

    Every accessor is bounds checked and raises :class:`AddressOutOfRange`
    instead of wrapping. Writers return a new ``Memory``.
    """
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))

    def read(self, address: int) -> int:
        """Return the byte stored at ``address``."""
        address = int(address)
        _check_range(address)
        return int(self.data[address])

    def write(self, address: int, value: int) -> "Memory":
        """Store one byte at ``address``."""
        address, value = int(address), int(value)
        _check_range(address)
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Value {value} does not fit in a byte")
        return self.replace(data=self.data.at[address].set(value))

    def read_block(self, address: int, length: int) -> jnp.ndarray:
        """Return ``length`` consecutive bytes starting at ``address``."""
        address, length = int(address), int(length)
        if length < 0:
            raise ValueError(f"Negative block length {length}")
        _check_range(address, length)
        return self.data[address:address + length]

    def write_block(self, address: int, data: ByteData) -> "Memory":
        """Store ``data`` starting at ``address``.

        The whole range is checked before any byte is written.
        """
        address = int(address)
        values = as_byte_array(data)
        _check_range(address, int(values.size))
        if values.size == 0:
            return self
        return self.replace(data=self.data.at[address:address + values.size].set(values))

    def load_program(self, program: ByteData) -> "Memory":
        """Copy a program image to 0x200.

        Raises :class:`ProgramTooLarge` when the image would run past 0xFFF.
        """
        values = as_byte_array(program)
        available = MEMORY_SIZE - PROGRAM_START
        if values.size > available:
            raise ProgramTooLarge(int(values.size), available, PROGRAM_START)
        return self.write_block(PROGRAM_START, values)


def font_address(digit: int) -> int:
    """Address of the font glyph for hex digit ``digit`` (low nibble used)."""
    return FONT_START + (int(digit) & 0xF) * FONT_SPRITE_SIZE


def create_memory() -> Memory:
    """Create zero-filled memory with the font loaded at 0x000."""
    memory = Memory()
    return memory.replace(
        data=memory.data.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA)
    )
