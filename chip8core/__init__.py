"""CHIP-8 interpreter core package."""

from chip8core.state import EmulatorState, create_state
from chip8core.memory import Memory, create_memory, font_address
from chip8core.display import Display, create_display
from chip8core.emulator import (
    execute, fetch, step, tick, load_program, load_rom,
    set_keypad, press_key, release_key, keypad_bitmap,
    framebuffer, sound_active, is_awaiting_key,
    run_n_instructions, run_frame, create_emulator
)
from chip8core.decode import DecodedInstruction, decode, mnemonic, disassemble
from chip8core.errors import (
    Chip8Error, AddressOutOfRange, ProgramTooLarge,
    StackOverflow, StackUnderflow, UnknownOpcode
)
from chip8core.config import Chip8Config, load_config
from chip8core.logging import ConsoleLogger, TraceLogger, create_tracer
from chip8core.constants import *

__all__ = [
    "EmulatorState",
    "create_state",
    "Memory",
    "create_memory",
    "font_address",
    "Display",
    "create_display",
    "fetch",
    "execute",
    "step",
    "tick",
    "load_program",
    "load_rom",
    "set_keypad",
    "press_key",
    "release_key",
    "keypad_bitmap",
    "framebuffer",
    "sound_active",
    "is_awaiting_key",
    "run_n_instructions",
    "run_frame",
    "create_emulator",
    "DecodedInstruction",
    "decode",
    "mnemonic",
    "disassemble",
    "Chip8Error",
    "AddressOutOfRange",
    "ProgramTooLarge",
    "StackOverflow",
    "StackUnderflow",
    "UnknownOpcode",
    "Chip8Config",
    "load_config",
    "ConsoleLogger",
    "TraceLogger",
    "create_tracer",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "MEMORY_SIZE",
    "STACK_SIZE",
]
