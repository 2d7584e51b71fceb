"""CHIP-8 register load instructions (6xxx, 7xxx, Axxx, Cxxx)."""

import jax
import jax.numpy as jnp

from chip8core.state import EmulatorState, advance_pc, set_register
from chip8core.decode import DecodedInstruction


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XNN - Set VX = NN."""
    return advance_pc(set_register(state, instruction.x, instruction.nn))


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XNN - Add NN to VX. Wraps at 8 bits, VF untouched."""
    result = int(state.V[instruction.x]) + instruction.nn
    return advance_pc(set_register(state, instruction.x, result))


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return advance_pc(state.replace(I=jnp.asarray(instruction.nnn, dtype=jnp.uint16)))


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """CXNN - Set VX = random & NN."""
    key, subkey = jax.random.split(state.rng)
    random_value = int(jax.random.randint(subkey, shape=(), minval=0, maxval=256))
    state = set_register(state, instruction.x, random_value & instruction.nn)
    return advance_pc(state.replace(rng=key))
