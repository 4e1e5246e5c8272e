"""CHIP-8 control flow instructions."""

import jax.numpy as jnp

from chipcore.constants import ADDRESS_MASK, INSTRUCTION_SIZE, NUM_KEYS
from chipcore.decode import Call, Jump, JumpOffset
from chipcore.stack import stack_push
from chipcore.state import MachineState, get_register, jump_to


def execute_jump(state: MachineState, instruction: Jump) -> MachineState:
    """1NNN - Jump to address NNN."""
    return jump_to(state, instruction.address)


def execute_call(state: MachineState, instruction: Call) -> MachineState:
    """2NNN - Call subroutine at NNN."""
    state = stack_push(state, state.pc.astype(jnp.int32) + INSTRUCTION_SIZE)
    return jump_to(state, instruction.address)


def execute_jump_with_offset(state: MachineState, instruction: JumpOffset) -> MachineState:
    """BNNN - Jump to address NNN + V0."""
    return jump_to(state, (instruction.address & ADDRESS_MASK) + get_register(state, 0))


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: MachineState, instruction) -> MachineState:
        condition = condition_fn(state, instruction)
        new_pc = jnp.where(condition, state.pc + INSTRUCTION_SIZE, state.pc)
        return state.replace(pc=new_pc.astype(jnp.uint16))
    return skip_instruction


def _key_held(state: MachineState, key) -> jnp.ndarray:
    """Keys past 0xF are never held."""
    held = (state.input.astype(jnp.int32) >> jnp.minimum(key, NUM_KEYS - 1)) & 1
    return (key < NUM_KEYS) & (held == 1)


execute_skip_if_equal_byte = make_skip_instruction(
    lambda state, inst: state.registers[inst.x] == inst.byte
)

execute_skip_if_not_equal_byte = make_skip_instruction(
    lambda state, inst: state.registers[inst.x] != inst.byte
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.registers[inst.x] == state.registers[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.registers[inst.x] != state.registers[inst.y]
)

execute_skip_if_key = make_skip_instruction(
    lambda state, inst: _key_held(state, get_register(state, inst.x))
)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, inst: ~_key_held(state, get_register(state, inst.x))
)
