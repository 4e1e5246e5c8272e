"""CHIP-8 memory and register operations."""

import jax
import jax.numpy as jnp

from chipcore.decode import AddByte, LoadByte, LoadIndex, Random
from chipcore.state import MachineState, get_register, set_register


def execute_set(state: MachineState, instruction: LoadByte) -> MachineState:
    """6XKK - Set VX = KK."""
    return set_register(state, instruction.x, instruction.byte)


def execute_add(state: MachineState, instruction: AddByte) -> MachineState:
    """7XKK - Add KK to VX, wrapping, VF untouched."""
    return set_register(state, instruction.x, get_register(state, instruction.x) + instruction.byte)


def execute_set_index(state: MachineState, instruction: LoadIndex) -> MachineState:
    """ANNN - Set I = NNN."""
    return state.replace(index=jnp.asarray(instruction.address, dtype=jnp.uint16))


def execute_random(state: MachineState, instruction: Random) -> MachineState:
    """CXKK - Set VX = random & KK."""
    key, subkey = jax.random.split(state.rng)
    random_value = jax.random.randint(subkey, shape=(), minval=0, maxval=256)
    state = set_register(state, instruction.x, random_value & instruction.byte)
    return state.replace(rng=key)
