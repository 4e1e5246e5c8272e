"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp

from chipcore.bits import to_bcd
from chipcore.constants import NUM_KEYS
from chipcore.decode import (
    AddIndex, LoadDelayTimer, LoadRegisters, LoadSprite, SetDelayTimer, SetSoundTimer, StoreBCD,
    StoreRegisters, WaitForKey,
)
from chipcore.sprites import sprite_address
from chipcore.state import MachineState, get_register, load_byte, set_register, store_byte


def _set_index(state: MachineState, value: int) -> MachineState:
    return state.replace(index=(jnp.asarray(value, dtype=jnp.int32) & 0xFFFF).astype(jnp.uint16))


def execute_get_delay_timer(state: MachineState, instruction: LoadDelayTimer) -> MachineState:
    """FX07 - Set VX to delay timer value."""
    return set_register(state, instruction.x, state.dt)


def execute_set_delay_timer(state: MachineState, instruction: SetDelayTimer) -> MachineState:
    """FX15 - Set delay timer to VX."""
    return state.replace(dt=state.registers[instruction.x])


def execute_set_sound_timer(state: MachineState, instruction: SetSoundTimer) -> MachineState:
    """FX18 - Set sound timer to VX."""
    return state.replace(st=state.registers[instruction.x])


def execute_add_to_index(state: MachineState, instruction: AddIndex) -> MachineState:
    """FX1E - Add VX to I register, no flag."""
    return _set_index(state, state.index.astype(jnp.int32) + get_register(state, instruction.x))


def execute_wait_for_key(state: MachineState, instruction: WaitForKey) -> MachineState:
    """FX0A - Store the lowest held key in VX.

    The engine does not run this while no key is held; it reports the
    machine as waiting and re-issues the instruction on the next cycle.
    """
    held = (state.input.astype(jnp.int32) >> jnp.arange(NUM_KEYS)) & 1
    key = jnp.where(held.any(), jnp.argmax(held), get_register(state, instruction.x))
    return set_register(state, instruction.x, key)


def execute_font_character(state: MachineState, instruction: LoadSprite) -> MachineState:
    """FX29 - Set I to location of sprite for digit VX."""
    return _set_index(state, sprite_address(get_register(state, instruction.x)))


def execute_bcd_conversion(state: MachineState, instruction: StoreBCD) -> MachineState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    index = state.index.astype(jnp.int32)
    for offset, digit in enumerate(to_bcd(get_register(state, instruction.x)).digits()):
        state = store_byte(state, digit, index + offset)
    return state


def execute_store_registers(state: MachineState, instruction: StoreRegisters) -> MachineState:
    """FX55 - Store V0 through VX in memory starting at I."""
    index = state.index.astype(jnp.int32)
    for register in range(instruction.x + 1):
        state = store_byte(state, get_register(state, register), index + register)
    return _set_index(state, index + instruction.x + 1)


def execute_load_registers(state: MachineState, instruction: LoadRegisters) -> MachineState:
    """FX65 - Load V0 through VX from memory starting at I."""
    index = state.index.astype(jnp.int32)
    for register in range(instruction.x + 1):
        state = set_register(state, register, load_byte(state, index + register))
    return _set_index(state, index + instruction.x + 1)
