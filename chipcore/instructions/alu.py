"""CHIP-8 ALU operations (8xxx)."""

import jax.numpy as jnp

from chipcore.constants import FLAG_REGISTER
from chipcore.decode import (
    AddRegister, And, LoadRegister, Or, ShiftLeft, ShiftRight, Subtract, SubtractReversed, Xor,
)
from chipcore.state import MachineState, get_register, set_register


def alu_set(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple:
    """8XY4 - Add: VX += VY, VF = carry."""
    result = (vx + vy) & 0xFF
    return result, jnp.where(result < vx, 1, 0)


def alu_sub_xy(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple:
    """8XY5 - Subtract: VX -= VY, VF = no borrow."""
    return (vx - vy) & 0xFF, jnp.where(vx > vy, 1, 0)


def alu_shift_right(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple:
    """8XY6 - Shift right: VX >>= 1, VF = shifted-out bit."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple:
    """8XY7 - Subtract: VX = VY - VX, VF = no borrow."""
    return (vy - vx) & 0xFF, jnp.where(vy > vx, 1, 0)


def alu_shift_left(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple:
    """8XYE - Shift left: VX <<= 1, VF = shifted-out bit."""
    return (vx << 1) & 0xFF, (vx & 0x80) >> 7


ALU_OPERATIONS = {
    LoadRegister: alu_set,
    Or: alu_or,
    And: alu_and,
    Xor: alu_xor,
    AddRegister: alu_add,
    Subtract: alu_sub_xy,
    ShiftRight: alu_shift_right,
    SubtractReversed: alu_sub_yx,
    ShiftLeft: alu_shift_left,
}


def execute_alu_operation(state: MachineState, instruction) -> MachineState:
    """8XYN - ALU operations dispatcher.

    The result is computed from the operands as they were, VF is written next
    and the target register last, so ``8FY4`` leaves the sum rather than the
    carry in VF.
    """
    vx = get_register(state, instruction.x)
    vy = get_register(state, getattr(instruction, "y", 0))

    result, flag = ALU_OPERATIONS[type(instruction)](vx, vy)

    if flag is not None:
        state = set_register(state, FLAG_REGISTER, flag)
    return set_register(state, instruction.x, result)
