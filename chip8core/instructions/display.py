"""CHIP-8 display operations."""

from chip8core.constants import FLAG_REGISTER
from chip8core.state import EmulatorState, advance_pc, set_register
from chip8core.decode import DecodedInstruction


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw N-row sprite from memory[I] at (VX, VY), VF = collision."""
    sprite = state.memory.read_block(state.I, instruction.n)
    display, collision = state.display.draw_sprite(
        int(state.V[instruction.x]), int(state.V[instruction.y]), sprite
    )
    state = set_register(state.replace(display=display), FLAG_REGISTER, int(collision))
    return advance_pc(state)
