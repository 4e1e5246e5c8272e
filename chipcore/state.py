"""CHIP-8 machine state and the low-level primitives operating on it.

Every primitive is written in jax.numpy only, so instruction handlers built
from them can be traced and compiled with ``jax.jit``.
"""

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from chipcore.constants import (
    ADDRESS_MASK, FRAMEBUFFER_SIZE, MEMORY_SIZE, NUM_REGISTERS, PROGRAM_START, STACK_SIZE,
)
from chipcore.sprites import store_default_sprites


class MachineState(PyTreeNode):
    """Complete CHIP-8 machine state.

    The framebuffer is packed, 8 pixels per byte, row-major with 8 bytes per
    row. Bit ``k`` of ``input`` is set while key ``k`` is held.
    """
    rng: jax.Array
    registers: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    index: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    stack: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint8))
    sp: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    dt: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    st: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    framebuffer: jnp.ndarray = field(default_factory=lambda: jnp.zeros(FRAMEBUFFER_SIZE, dtype=jnp.uint8))
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    input: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))


def init_state(state: MachineState) -> MachineState:
    """Install the font sprites and point pc at the program area."""
    state = store_default_sprites(state)
    return jump_to(state, PROGRAM_START)


def create_state(rng: jax.Array = jax.random.PRNGKey(0)) -> MachineState:
    """Create a machine in its power-on state."""
    return init_state(MachineState(rng))


def reset_state(state: MachineState) -> MachineState:
    """Discard everything but the random key and return a power-on machine."""
    return create_state(state.rng)


def fetch_instruction(state: MachineState, address) -> jnp.ndarray:
    """Read the big-endian instruction word at ``address``."""
    address = jnp.asarray(address, dtype=jnp.int32)
    high = state.memory[address % MEMORY_SIZE].astype(jnp.uint16)
    low = state.memory[(address + 1) % MEMORY_SIZE].astype(jnp.uint16)
    return (high << 8) | low


def jump_to(state: MachineState, address) -> MachineState:
    """Set pc, wrapping the target into the 12-bit address space."""
    return state.replace(pc=(jnp.asarray(address, dtype=jnp.int32) & ADDRESS_MASK).astype(jnp.uint16))


def advance_pc(state: MachineState, amount: int) -> MachineState:
    return jump_to(state, state.pc.astype(jnp.int32) + amount)


def decrement_timers(state: MachineState, ticks=1) -> MachineState:
    """Count both timers down by ``ticks``, stopping at zero."""
    return state.replace(
        dt=jnp.maximum(state.dt.astype(jnp.int32) - ticks, 0).astype(jnp.uint8),
        st=jnp.maximum(state.st.astype(jnp.int32) - ticks, 0).astype(jnp.uint8),
    )


def _as_byte(value) -> jnp.ndarray:
    return (jnp.asarray(value, dtype=jnp.int32) & 0xFF).astype(jnp.uint8)


def store_byte(state: MachineState, value, address) -> MachineState:
    """Write one byte, wrapping the address into the 12-bit address space."""
    address = jnp.asarray(address, dtype=jnp.int32) & ADDRESS_MASK
    return state.replace(memory=state.memory.at[address].set(_as_byte(value)))


def load_byte(state: MachineState, address) -> jnp.ndarray:
    return state.memory[jnp.asarray(address, dtype=jnp.int32) & ADDRESS_MASK].astype(jnp.int32)


def set_register(state: MachineState, register: int, value) -> MachineState:
    return state.replace(registers=state.registers.at[register].set(_as_byte(value)))


def get_register(state: MachineState, register: int) -> jnp.ndarray:
    """Register value widened to int32 so arithmetic on it cannot wrap early."""
    return state.registers[register].astype(jnp.int32)
