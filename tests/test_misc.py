"""Tests for miscellaneous instructions (Fxxx)."""

import pytest
import jax.numpy as jnp
from chipcore import Status, execute
from conftest import run, set_registers, setup_memory


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        state = run(fresh_state, 0x6030, 0xF015)  # DT = V0 = 48
        assert state.dt == 48

        state = run(state, 0x6120, 0xF118)  # ST = V1 = 32
        assert state.st == 32

        state = run(state, 0xF207)  # V2 = DT
        assert state.registers[2] == 48

    def test_timer_dtypes_preserved(self, fresh_state):
        state = run(fresh_state, 0x60FF, 0xF015, 0xF018)
        assert state.dt.dtype == jnp.uint8
        assert state.st.dtype == jnp.uint8


class TestWaitForKey:
    """FX0A suspends until a key is held."""

    def test_waits_without_input(self, fresh_state):
        state = set_registers(fresh_state, V3=0x99)

        new_state, status = execute(state, 0xF30A)

        assert status is Status.WAITING
        assert new_state.pc == 0x200
        assert new_state.registers[3] == 0x99

    def test_resumes_with_input(self, fresh_state):
        state = fresh_state.replace(input=jnp.asarray(1 << 3, dtype=jnp.uint16))

        state, status = execute(state, 0xF50A)

        assert status is Status.RUNNING
        assert state.registers[5] == 3
        assert state.pc == 0x202

    def test_lowest_key_wins(self, fresh_state):
        state = fresh_state.replace(input=jnp.asarray(0b1010_0100_0000, dtype=jnp.uint16))

        state, _ = execute(state, 0xF50A)

        assert state.registers[5] == 6

    def test_key_f(self, fresh_state):
        state = fresh_state.replace(input=jnp.asarray(0x8000, dtype=jnp.uint16))
        state, _ = execute(state, 0xF00A)
        assert state.registers[0] == 0xF


class TestIndexArithmetic:

    def test_add_to_index(self, fresh_state):
        """FX1E - I += VX without touching VF."""
        state = run(fresh_state, 0xA300, 0x6110, 0xF11E)
        assert state.index == 0x310
        assert state.registers[15] == 0

    def test_add_to_index_past_address_space(self, fresh_state):
        state = run(fresh_state, 0xAFFF, 0x61FF, 0xF11E)
        assert state.index == 0xFFF + 0xFF
        assert state.registers[15] == 0


class TestBCD:
    """Test BCD conversion."""

    def test_misc_bcd_conversion(self, fresh_state):
        state = run(fresh_state, 0x609C, 0xA300, 0xF033)  # 156

        assert state.memory[0x300] == 1
        assert state.memory[0x301] == 5
        assert state.memory[0x302] == 6

    @pytest.mark.parametrize("value,digits", [(0, [0, 0, 0]), (202, [2, 0, 2]), (255, [2, 5, 5])])
    def test_bcd_edge_cases(self, fresh_state, value, digits):
        state = set_registers(fresh_state, V4=value)
        state = run(state, 0xA400, 0xF433)
        assert state.memory[0x400:0x403].tolist() == digits
        assert state.index == 0x400


class TestFont:
    """Test font character addressing."""

    def test_misc_font_character(self, fresh_state):
        state = run(fresh_state, 0x600A, 0xF029)
        assert state.index == 0xA * 5

    def test_font_all_characters(self, fresh_state):
        state = fresh_state
        for digit in range(16):
            state = run(state, 0x6000 | digit, 0xF029)
            assert state.index == digit * 5, f"Font address wrong for digit {digit:X}"


class TestMemoryOperations:
    """Test store/load register operations."""

    def test_store_registers(self, fresh_state):
        """FX55 - Store V0..VX, I += X + 1."""
        state = run(fresh_state, 0x6001, 0x6102, 0x6203, 0x6304, 0xA300, 0xF255)

        assert state.memory[0x300:0x304].tolist() == [1, 2, 3, 0]
        assert state.index == 0x303

    def test_load_registers(self, fresh_state):
        """FX65 - Load V0..VX, I += X + 1."""
        state = setup_memory(fresh_state, 0x300, [9, 8, 7, 6])
        state = run(state, 0xA300, 0xF265)

        assert state.registers[:4].tolist() == [9, 8, 7, 0]
        assert state.index == 0x303

    def test_store_load_round_trip(self, fresh_state):
        state = run(fresh_state, 0x6001, 0x6102, 0x6203, 0xA300, 0xF255)
        state = run(state, 0x6000, 0x6100, 0x6200, 0xA300, 0xF265)

        assert state.registers[:3].tolist() == [1, 2, 3]

    def test_all_registers(self, fresh_state):
        state = fresh_state.replace(registers=jnp.arange(16, dtype=jnp.uint8) + 0x10)
        state = run(state, 0xA500, 0xFF55)

        assert state.memory[0x500:0x510].tolist() == list(range(0x10, 0x20))
        assert state.index == 0x510
