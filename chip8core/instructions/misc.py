"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp

from chip8core.state import EmulatorState, advance_pc, set_register
from chip8core.decode import DecodedInstruction
from chip8core.errors import UnknownOpcode
from chip8core.memory import font_address


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return advance_pc(set_register(state, instruction.x, int(state.delay_timer)))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return advance_pc(state.replace(delay_timer=state.V[instruction.x]))


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return advance_pc(state.replace(sound_timer=state.V[instruction.x]))


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, wrapping at 16 bits."""
    new_i = (int(state.I) + int(state.V[instruction.x])) & 0xFFFF
    return advance_pc(state.replace(I=jnp.asarray(new_i, dtype=jnp.uint16)))


def first_pressed_key(state: EmulatorState) -> int:
    """Lowest-numbered key currently held, or -1."""
    if not bool(jnp.any(state.keypad)):
        return -1
    return int(jnp.argmax(state.keypad))


def complete_key_wait(state: EmulatorState, register: int, key: int) -> EmulatorState:
    """Store the pressed key and move past the FX0A instruction."""
    state = set_register(state, register, key)
    state = state.replace(awaiting_key=jnp.asarray(-1, dtype=jnp.int8))
    return advance_pc(state)


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    With no key held the CPU parks on this instruction and ``step`` polls
    the keypad until one is pressed.
    """
    key = first_pressed_key(state)
    if key >= 0:
        return complete_key_wait(state, instruction.x, key)
    return state.replace(awaiting_key=jnp.asarray(instruction.x, dtype=jnp.int8))


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    address = font_address(int(state.V[instruction.x]))
    return advance_pc(state.replace(I=jnp.asarray(address, dtype=jnp.uint16)))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    digits = [value // 100, (value // 10) % 10, value % 10]
    return advance_pc(state.replace(memory=state.memory.write_block(state.I, digits)))


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    registers = state.V[:instruction.x + 1]
    return advance_pc(state.replace(memory=state.memory.write_block(state.I, registers)))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    values = state.memory.read_block(state.I, instruction.x + 1)
    return advance_pc(state.replace(V=state.V.at[:instruction.x + 1].set(values)))


MISC_INSTRUCTIONS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch misc instructions on the low byte."""
    handler = MISC_INSTRUCTIONS.get(instruction.nn)
    if handler is None:
        raise UnknownOpcode(instruction.raw, int(state.pc))
    return handler(state, instruction)
