"""Test configuration and fixtures for CHIP-8 core tests."""

import pytest
import jax.numpy as jnp
from chipcore import create_state, execute


@pytest.fixture
def fresh_state():
    """Provide a fresh machine state for each test."""
    return create_state()


def setup_memory(state, address, data):
    """Helper to put bytes in memory."""
    return state.replace(
        memory=state.memory.at[address:address + len(data)].set(
            jnp.array(data, dtype=jnp.uint8)
        )
    )


def set_registers(state, **values):
    """Helper to set registers by name, e.g. set_registers(state, V1=0x10)."""
    registers = state.registers
    for name, value in values.items():
        registers = registers.at[int(name[1:], 16)].set(value)
    return state.replace(registers=registers)


def run(state, *instructions):
    """Execute instructions in order, returning the final state."""
    for instruction in instructions:
        state, _ = execute(state, instruction)
    return state
