"""Tests for the fetch/step/tick engine and the driver-facing hooks."""

import pytest
import jax.numpy as jnp

from chip8core import (
    create_state, step, tick, fetch, load_program, load_rom,
    set_keypad, press_key, release_key, keypad_bitmap,
    framebuffer, sound_active, is_awaiting_key,
    run_n_instructions, run_frame, create_emulator,
    Chip8Config, TraceLogger, AddressOutOfRange, UnknownOpcode, ProgramTooLarge, StackUnderflow,
    PROGRAM_START, SCREEN_WIDTH, SCREEN_HEIGHT
)


def with_pc(state, pc):
    return state.replace(pc=jnp.asarray(pc, dtype=jnp.uint16))


class TestFetchAndStep:
    """Test instruction fetch and single stepping."""

    def test_initial_pc(self, fresh_state):
        assert fresh_state.pc == PROGRAM_START

    def test_fetch_big_endian(self, fresh_state):
        state = load_program(fresh_state, [0x12, 0x34])
        assert fetch(state) == 0x1234
        assert state.pc == PROGRAM_START

    def test_fetch_past_end_of_memory(self, fresh_state):
        state = with_pc(fresh_state, 0xFFF)
        with pytest.raises(AddressOutOfRange) as excinfo:
            step(state)
        assert excinfo.value.address == 0x1000

    def test_load_add_program(self, fresh_state):
        """LD V0, 5; ADD V0, 3 leaves V0 = 8 and pc four bytes on."""
        state = load_program(fresh_state, bytes([0x60, 0x05, 0x70, 0x03, 0x00, 0x00]))
        state = step(state)
        state = step(state)
        assert state.V[0] == 8
        assert state.pc == PROGRAM_START + 4

    def test_zero_word_stops_with_unknown_opcode(self, fresh_state):
        state = load_program(fresh_state, bytes([0x60, 0x05, 0x00, 0x00]))
        state = step(state)
        with pytest.raises(UnknownOpcode) as excinfo:
            step(state)
        assert excinfo.value.pc == PROGRAM_START + 2
        assert excinfo.value.opcode == 0x0000

    def test_subroutine_program(self, fresh_state):
        program = [
            0x22, 0x06,  # 0x200 CALL 0x206
            0x61, 0x02,  # 0x202 LD V1, 2
            0x12, 0x04,  # 0x204 JP 0x204
            0x60, 0x07,  # 0x206 LD V0, 7
            0x00, 0xEE,  # 0x208 RET
        ]
        state = run_n_instructions(load_program(fresh_state, program), 5)
        assert state.V[0] == 7
        assert state.V[1] == 2
        assert state.pc == 0x204

    def test_failed_step_keeps_state(self, fresh_state):
        state = load_program(fresh_state, [0x00, 0xEE])
        with pytest.raises(StackUnderflow):
            step(state)
        assert state.pc == PROGRAM_START
        assert state.stack.pointer == 0


class TestTimers:
    """Test the 60 Hz tick."""

    def test_tick_decrements_both(self, fresh_state):
        state = fresh_state.replace(
            delay_timer=jnp.asarray(3, dtype=jnp.uint8),
            sound_timer=jnp.asarray(1, dtype=jnp.uint8),
        )
        state = tick(state)
        assert state.delay_timer == 2
        assert state.sound_timer == 0

    def test_tick_floors_at_zero(self, fresh_state):
        state = tick(tick(fresh_state))
        assert state.delay_timer == 0
        assert state.sound_timer == 0

    def test_sound_active_level(self, fresh_state):
        state = fresh_state.replace(sound_timer=jnp.asarray(2, dtype=jnp.uint8))
        assert sound_active(state)
        state = tick(state)
        assert sound_active(state)
        state = tick(state)
        assert not sound_active(state)

    def test_delay_timer_program(self, fresh_state):
        """FX15 then FX07 after two ticks reads the decremented value."""
        state = load_program(fresh_state, [0x60, 0x0A, 0xF0, 0x15, 0xF1, 0x07])
        state = run_n_instructions(state, 2)
        state = tick(tick(state))
        state = step(state)
        assert state.V[1] == 8


class TestKeypad:
    """Test keypad hooks and FX0A."""

    def test_press_and_release(self, fresh_state):
        state = press_key(fresh_state, 0xF)
        assert keypad_bitmap(state) == 0x8000
        state = release_key(state, 0xF)
        assert keypad_bitmap(state) == 0

    def test_set_keypad_bitmap(self, fresh_state):
        state = set_keypad(fresh_state, 0b1000_0000_0010_0001)
        assert bool(state.keypad[0]) and bool(state.keypad[5]) and bool(state.keypad[15])
        assert keypad_bitmap(state) == 0x8021

    @pytest.mark.parametrize("bitmap", [-1, 0x10000, "1"])
    def test_set_keypad_rejects_bad_bitmap(self, fresh_state, bitmap):
        with pytest.raises(ValueError):
            set_keypad(fresh_state, bitmap)

    @pytest.mark.parametrize("key", [-1, 16])
    def test_bad_key_index(self, fresh_state, key):
        with pytest.raises(ValueError):
            press_key(fresh_state, key)

    def test_wait_for_key_parks_pc(self, fresh_state):
        """FX0A with no key held keeps pc on the instruction."""
        state = load_program(fresh_state, [0xF3, 0x0A, 0x60, 0x01])
        for _ in range(5):
            state = step(state)
            assert state.pc == PROGRAM_START
            assert is_awaiting_key(state)

        state = press_key(state, 0x7)
        state = step(state)
        assert state.pc == PROGRAM_START + 2
        assert state.V[3] == 0x7
        assert not is_awaiting_key(state)

        state = step(state)
        assert state.V[0] == 1

    def test_wait_for_key_already_pressed(self, fresh_state):
        state = load_program(press_key(fresh_state, 0x4), [0xF2, 0x0A])
        state = step(state)
        assert state.pc == PROGRAM_START + 2
        assert state.V[2] == 0x4
        assert not is_awaiting_key(state)

    def test_wait_for_key_lowest_key_wins(self, fresh_state):
        state = load_program(fresh_state, [0xF0, 0x0A])
        state = step(state)
        state = set_keypad(state, (1 << 0xC) | (1 << 0x3))
        state = step(state)
        assert state.V[0] == 0x3


class TestAccessorsAndRuns:
    """Test framebuffer access, program loading and run helpers."""

    def test_framebuffer(self, fresh_state):
        state = load_program(fresh_state, [0xA0, 0x00, 0xD0, 0x05])
        state = run_n_instructions(state, 2)
        pixels = framebuffer(state)
        assert pixels.shape == (SCREEN_WIDTH, SCREEN_HEIGHT)
        assert bool(pixels[0, 0])

    def test_load_rom(self, fresh_state, tmp_path):
        rom = tmp_path / "test.ch8"
        rom.write_bytes(bytes([0x60, 0x2A]))
        state = step(load_rom(fresh_state, str(rom)))
        assert state.V[0] == 0x2A

    def test_load_program_too_large(self, fresh_state):
        with pytest.raises(ProgramTooLarge):
            load_program(fresh_state, bytes(0xE01))

    def test_run_frame_ticks_once(self):
        config = Chip8Config(instruction_frequency=120, timer_frequency=60)
        # LD V0, 5; LD DT, V0; JP 0x204
        state = create_emulator(config, [0x60, 0x05, 0xF0, 0x15, 0x12, 0x04])
        state = run_frame(state, config)
        assert state.pc == PROGRAM_START + 4
        assert state.delay_timer == 4
        state = run_frame(state, config)
        assert state.pc == PROGRAM_START + 4
        assert state.delay_timer == 3

    def test_create_emulator_seeds_rng(self):
        a = create_emulator(Chip8Config(seed=1))
        b = create_emulator(Chip8Config(seed=2))
        assert not jnp.array_equal(a.rng, b.rng)

    def test_instances_are_independent(self):
        a = step(load_program(create_state(), [0x60, 0x01]))
        b = create_state()
        assert a.V[0] == 1
        assert b.V[0] == 0

    def test_run_logs_fault_and_reraises(self, fresh_state, capsys):
        tracer = TraceLogger(trace=True, log_level="DEBUG", use_colors=False)
        state = load_program(fresh_state, [0x60, 0x05, 0x00, 0xEE])
        with pytest.raises(StackUnderflow):
            run_n_instructions(state, 3, tracer=tracer)
        output = capsys.readouterr().out
        assert "0x200: 6005  LD V0, 0x05" in output
        assert "StackUnderflow" in output
        assert "pc=0x202" in output
        assert tracer.instruction_count == 2

    def test_run_with_progress_bar(self, fresh_state):
        state = load_program(fresh_state, [0x12, 0x00])
        state = run_n_instructions(state, 10, progress=True)
        assert state.pc == PROGRAM_START
