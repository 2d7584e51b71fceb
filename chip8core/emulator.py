"""Main CHIP-8 emulator execution engine."""

import jax
import jax.numpy as jnp

from chip8core.config import Chip8Config
from chip8core.constants import NUM_KEYS
from chip8core.decode import decode
from chip8core.errors import Chip8Error
from chip8core.logging import TraceLogger, build_progress_bar
from chip8core.memory import ByteData
from chip8core.state import EmulatorState, create_state
from chip8core.instructions.system import execute_system_instruction
from chip8core.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key
)
from chip8core.instructions.alu import execute_alu_operation
from chip8core.instructions.registers import execute_set, execute_add, execute_set_index, execute_random
from chip8core.instructions.display import execute_display
from chip8core.instructions.misc import (
    execute_misc_instruction, first_pressed_key, complete_key_wait
)

# Indexed by the first nibble of the instruction
INSTRUCTION_FAMILIES = [
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_misc_instruction,
]


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    The handler moves pc itself: +2 for ordinary instructions, an explicit
    target for jumps, calls, returns and skips.
    """
    decoded_instruction = decode(instruction)
    return INSTRUCTION_FAMILIES[decoded_instruction.opcode](state, decoded_instruction)


def _pack_u16(high: int, low: int) -> int:
    """Pack two bytes into uint16."""
    return (high << 8) | low


def fetch(state: EmulatorState) -> int:
    """Fetch the instruction word at pc. pc is left unchanged."""
    pc = int(state.pc)
    return _pack_u16(state.memory.read(pc), state.memory.read(pc + 1))


def step(state: EmulatorState, tracer: TraceLogger | None = None) -> EmulatorState:
    """Advance the machine by one instruction.

    While an FX0A is pending this only polls the keypad: pc stays on the
    FX0A word until a key is held, then the key is stored and pc moves on.

    Raises:
        Chip8Error: on any fault; the input state is left untouched.
    """
    register = int(state.awaiting_key)
    if register >= 0:
        key = first_pressed_key(state)
        if key < 0:
            return state
        return complete_key_wait(state, register, key)

    instruction = fetch(state)
    if tracer is not None:
        tracer.log_instruction(int(state.pc), instruction)
    state = execute(state, instruction)
    if tracer is not None and is_awaiting_key(state):
        tracer.log_key_wait(int(state.awaiting_key))
    return state


def tick(state: EmulatorState) -> EmulatorState:
    """Decrement delay and sound timers once (60 Hz cadence), floored at 0."""
    return state.replace(
        delay_timer=jnp.asarray(max(int(state.delay_timer) - 1, 0), dtype=jnp.uint8),
        sound_timer=jnp.asarray(max(int(state.sound_timer) - 1, 0), dtype=jnp.uint8),
    )


def load_program(state: EmulatorState, program: ByteData) -> EmulatorState:
    """Load a program image into memory starting at 0x200."""
    return state.replace(memory=state.memory.load_program(program))


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM file into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)


def _check_key(key: int) -> int:
    """Validate a keypad index (0x0-0xF)."""
    key = int(key)
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key 0x{key:X} is outside the keypad (0x0-0xF)")
    return key


def set_keypad(state: EmulatorState, bitmap: int) -> EmulatorState:
    """Replace the whole keypad from a 16-bit bitmap (bit K = key K held)."""
    if not isinstance(bitmap, int) or not 0 <= bitmap <= 0xFFFF:
        raise ValueError(f"Keypad bitmap must be a 16-bit integer, got {bitmap!r}")
    keys = jnp.array([(bitmap >> key) & 1 for key in range(NUM_KEYS)], dtype=jnp.bool_)
    return state.replace(keypad=keys)


def press_key(state: EmulatorState, key: int) -> EmulatorState:
    """Mark ``key`` as held."""
    return state.replace(keypad=state.keypad.at[_check_key(key)].set(True))


def release_key(state: EmulatorState, key: int) -> EmulatorState:
    """Mark ``key`` as released."""
    return state.replace(keypad=state.keypad.at[_check_key(key)].set(False))


def keypad_bitmap(state: EmulatorState) -> int:
    """Current keypad as a 16-bit bitmap."""
    return sum(1 << key for key in range(NUM_KEYS) if bool(state.keypad[key]))


def framebuffer(state: EmulatorState) -> jnp.ndarray:
    """The 64x32 boolean pixel grid, indexed ``[x, y]``."""
    return state.display.pixels


def sound_active(state: EmulatorState) -> bool:
    """True while the sound timer is nonzero."""
    return int(state.sound_timer) > 0


def is_awaiting_key(state: EmulatorState) -> bool:
    """True while an FX0A is waiting for a key press."""
    return int(state.awaiting_key) >= 0


def run_n_instructions(
    state: EmulatorState,
    n: int,
    tracer: TraceLogger | None = None,
    progress: bool = False,
) -> EmulatorState:
    """Call :func:`step` ``n`` times.

    Faults are reported through ``tracer`` (with the state they occurred in)
    and re-raised.
    """
    progress_bar = build_progress_bar(n) if progress else None
    try:
        for _ in range(n):
            try:
                state = step(state, tracer)
            except Chip8Error as error:
                if tracer is not None:
                    tracer.log_fault(error, state)
                raise
            if progress_bar is not None:
                progress_bar.update(1)
    finally:
        if progress_bar is not None:
            progress_bar.close()
    return state


def run_frame(
    state: EmulatorState,
    config: Chip8Config,
    tracer: TraceLogger | None = None,
) -> EmulatorState:
    """Run one timer period: ``config.instructions_per_tick`` steps, then a tick."""
    state = run_n_instructions(state, config.instructions_per_tick, tracer)
    return tick(state)


def create_emulator(config: Chip8Config, program: ByteData | None = None) -> EmulatorState:
    """Fresh state seeded from ``config``, optionally with a program loaded."""
    state = create_state(jax.random.PRNGKey(config.seed))
    if program is not None:
        state = load_program(state, program)
    return state
