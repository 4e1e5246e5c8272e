"""CHIP-8 system instructions (0x0xxx)."""

from chipcore.decode import Opcode, ClearScreen, Return
from chipcore.framebuffer import clear_framebuffer
from chipcore.stack import stack_pop
from chipcore.state import MachineState, jump_to


def no_op(state: MachineState, instruction: Opcode) -> MachineState:
    """No operation."""
    return state


def execute_clear_screen(state: MachineState, instruction: ClearScreen) -> MachineState:
    """00E0 - Clear display."""
    return clear_framebuffer(state)


def execute_return(state: MachineState, instruction: Return) -> MachineState:
    """00EE - Return from subroutine."""
    state, address = stack_pop(state)
    return jump_to(state, address)
