"""CHIP-8 call stack operations.

``stack_push``/``stack_pop`` are traceable and used by the CALL and RET
handlers. Bounds cannot be checked inside a trace, so ``check_stack`` runs on
the host before those instructions execute. ``push``/``pop`` combine both for
direct use.
"""

import jax.numpy as jnp

from chipcore.constants import STACK_SIZE
from chipcore.state import MachineState


class StackFault(RuntimeError):
    """Raised on a push to a full stack or a pop from an empty one."""


def check_stack(state: MachineState, change: int):
    """Raise StackFault if moving sp by ``change`` bytes leaves the stack."""
    sp = int(state.sp)
    if sp + change > STACK_SIZE:
        raise StackFault(f"stack overflow: push with sp=0x{sp:02X}")
    if sp + change < 0:
        raise StackFault(f"stack underflow: pop with sp=0x{sp:02X}")


def stack_push(state: MachineState, value) -> MachineState:
    """Push a 16-bit value, high byte first."""
    sp = state.sp.astype(jnp.int32)
    value = jnp.asarray(value, dtype=jnp.int32) & 0xFFFF
    new_stack = (
        state.stack
        .at[sp].set((value >> 8).astype(jnp.uint8))
        .at[sp + 1].set((value & 0xFF).astype(jnp.uint8))
    )
    return state.replace(stack=new_stack, sp=(sp + 2).astype(jnp.uint8))


def stack_pop(state: MachineState) -> tuple[MachineState, jnp.ndarray]:
    """Pop a 16-bit value."""
    sp = state.sp.astype(jnp.int32) - 2
    value = (state.stack[sp].astype(jnp.int32) << 8) | state.stack[sp + 1].astype(jnp.int32)
    return state.replace(sp=sp.astype(jnp.uint8)), value


def push(state: MachineState, value) -> MachineState:
    check_stack(state, 2)
    return stack_push(state, value)


def pop(state: MachineState) -> tuple[MachineState, int]:
    check_stack(state, -2)
    state, value = stack_pop(state)
    return state, int(value)


def peek_return_addresses(state: MachineState) -> list[int]:
    """Return addresses currently on the stack, oldest first."""
    return [
        (int(state.stack[offset]) << 8) | int(state.stack[offset + 1])
        for offset in range(0, int(state.sp) - 1, 2)
    ]
