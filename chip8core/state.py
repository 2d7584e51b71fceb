"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from chip8core.constants import (
    INSTRUCTION_SIZE, PROGRAM_START, NUM_REGISTERS, NUM_KEYS
)
from chip8core.display import Display, create_display
from chip8core.memory import Memory, create_memory
from chip8core.stack import StackState


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The state owns exactly one :class:`Memory` and one :class:`Display`.
    ``awaiting_key`` is -1 while running normally and holds the target
    register of a pending FX0A otherwise.
    """
    rng: jax.random.PRNGKey
    memory: Memory = field(default_factory=create_memory)
    display: Display = field(default_factory=create_display)
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    awaiting_key: jnp.ndarray = field(default_factory=lambda: jnp.asarray(-1, dtype=jnp.int8))


def create_state(rng: jax.random.PRNGKey = None) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    return EmulatorState(rng)


def set_register(state: EmulatorState, index: int, value: int) -> EmulatorState:
    """Write an 8-bit value into register V[index]."""
    return state.replace(V=state.V.at[index].set(int(value) & 0xFF))


def advance_pc(state: EmulatorState, instructions: int = 1) -> EmulatorState:
    """Move pc forward by whole instructions (one by default, two to skip)."""
    new_pc = (int(state.pc) + INSTRUCTION_SIZE * instructions) & 0xFFFF
    return state.replace(pc=jnp.asarray(new_pc, dtype=jnp.uint16))


def jump_to(state: EmulatorState, address: int) -> EmulatorState:
    """Set pc to an explicit target.

    Targets past 0xFFF are kept as-is so the next fetch raises
    AddressOutOfRange.
    """
    return state.replace(pc=jnp.asarray(int(address) & 0xFFFF, dtype=jnp.uint16))
