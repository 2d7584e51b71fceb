"""CHIP-8 control flow instructions."""

from chip8core.state import EmulatorState, advance_pc, jump_to
from chip8core.decode import DecodedInstruction
from chip8core.errors import UnknownOpcode
from chip8core.stack import push


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return jump_to(state, instruction.nnn)


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    return_address = int(state.pc) + 2
    state = state.replace(stack=push(state.stack, return_address, state.pc))
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        if condition_fn(state, instruction):
            return advance_pc(state, 2)
        return advance_pc(state)
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != inst.nn
)

_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == int(state.V[inst.y])
)

_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != int(state.V[inst.y])
)

_skip_if_key_pressed = make_skip_instruction(
    lambda state, inst: bool(state.keypad[int(state.V[inst.x]) & 0xF])
)

_skip_if_key_not_pressed = make_skip_instruction(
    lambda state, inst: not bool(state.keypad[int(state.V[inst.x]) & 0xF])
)


def execute_skip_if_equal_register(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """5XY0 - Skip next instruction if VX == VY."""
    if instruction.n != 0:
        raise UnknownOpcode(instruction.raw, int(state.pc))
    return _skip_if_equal_register(state, instruction)


def execute_skip_if_not_equal_register(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """9XY0 - Skip next instruction if VX != VY."""
    if instruction.n != 0:
        raise UnknownOpcode(instruction.raw, int(state.pc))
    return _skip_if_not_equal_register(state, instruction)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    return jump_to(state, instruction.nnn + int(state.V[0]))


def execute_skip_if_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EX9E/EXA1 - Skip if key VX pressed/not pressed."""
    if instruction.nn == 0x9E:
        return _skip_if_key_pressed(state, instruction)
    if instruction.nn == 0xA1:
        return _skip_if_key_not_pressed(state, instruction)
    raise UnknownOpcode(instruction.raw, int(state.pc))
