"""Test configuration and fixtures for CHIP-8 core tests."""

import pytest
from chip8core import create_state


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(memory=state.memory.write_block(address, sprite_bytes))


def set_registers(state, **registers):
    """Helper to set registers by name, e.g. ``set_registers(state, V1=0x10)``."""
    for name, value in registers.items():
        state = state.replace(V=state.V.at[int(name[1:], 16)].set(value))
    return state
