"""CHIP-8 system instructions (0x0xxx)."""

from chip8core.state import EmulatorState, advance_pc, jump_to
from chip8core.decode import DecodedInstruction
from chip8core.errors import UnknownOpcode
from chip8core.stack import pop


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return advance_pc(state.replace(display=state.display.clear()))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack, state.pc)
    return jump_to(state.replace(stack=stack), address)


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions. 0NNN machine calls are not supported."""
    if instruction.raw == 0x00E0:
        return execute_clear_screen(state, instruction)
    if instruction.raw == 0x00EE:
        return execute_return(state, instruction)
    raise UnknownOpcode(instruction.raw, int(state.pc))
