"""Main CHIP-8 execution engine."""

import enum
import functools

import jax
import jax.numpy as jnp

from chipcore import decode as ops
from chipcore.constants import INSTRUCTION_SIZE, MAX_PROGRAM_SIZE, PROGRAM_START
from chipcore.decode import Opcode, decode
from chipcore.instructions.alu import execute_alu_operation
from chipcore.instructions.control_flow import (
    execute_call, execute_jump, execute_jump_with_offset, execute_skip_if_equal_byte,
    execute_skip_if_equal_register, execute_skip_if_key, execute_skip_if_not_equal_byte,
    execute_skip_if_not_equal_register, execute_skip_if_not_key,
)
from chipcore.instructions.display import execute_display
from chipcore.instructions.memory import execute_add, execute_random, execute_set, execute_set_index
from chipcore.instructions.misc import (
    execute_add_to_index, execute_bcd_conversion, execute_font_character, execute_get_delay_timer,
    execute_load_registers, execute_set_delay_timer, execute_set_sound_timer,
    execute_store_registers, execute_wait_for_key,
)
from chipcore.instructions.system import execute_clear_screen, execute_return, no_op
from chipcore.stack import check_stack
from chipcore.state import MachineState, advance_pc, decrement_timers, fetch_instruction


class Status(enum.Enum):
    """Outcome of one instruction cycle."""
    RUNNING = "running"
    WAITING = "waiting"


HANDLERS = {
    ops.ClearScreen: execute_clear_screen,
    ops.Return: execute_return,
    ops.NoOperation: no_op,
    ops.Jump: execute_jump,
    ops.Call: execute_call,
    ops.JumpOffset: execute_jump_with_offset,
    ops.SkipEqualByte: execute_skip_if_equal_byte,
    ops.SkipNotEqualByte: execute_skip_if_not_equal_byte,
    ops.SkipEqualRegister: execute_skip_if_equal_register,
    ops.SkipNotEqualRegister: execute_skip_if_not_equal_register,
    ops.SkipKeyPressed: execute_skip_if_key,
    ops.SkipKeyNotPressed: execute_skip_if_not_key,
    ops.LoadByte: execute_set,
    ops.AddByte: execute_add,
    ops.LoadIndex: execute_set_index,
    ops.Random: execute_random,
    ops.LoadRegister: execute_alu_operation,
    ops.Or: execute_alu_operation,
    ops.And: execute_alu_operation,
    ops.Xor: execute_alu_operation,
    ops.AddRegister: execute_alu_operation,
    ops.Subtract: execute_alu_operation,
    ops.ShiftRight: execute_alu_operation,
    ops.SubtractReversed: execute_alu_operation,
    ops.ShiftLeft: execute_alu_operation,
    ops.Draw: execute_display,
    ops.LoadDelayTimer: execute_get_delay_timer,
    ops.WaitForKey: execute_wait_for_key,
    ops.SetDelayTimer: execute_set_delay_timer,
    ops.SetSoundTimer: execute_set_sound_timer,
    ops.AddIndex: execute_add_to_index,
    ops.LoadSprite: execute_font_character,
    ops.StoreBCD: execute_bcd_conversion,
    ops.StoreRegisters: execute_store_registers,
    ops.LoadRegisters: execute_load_registers,
}


@functools.partial(jax.jit, static_argnums=1)
def _step(state: MachineState, instruction: Opcode) -> MachineState:
    state = HANDLERS[type(instruction)](state, instruction)
    if not instruction.transfers_control:
        state = advance_pc(state, INSTRUCTION_SIZE)
    return state


def execute(state: MachineState, instruction: int | Opcode) -> tuple[MachineState, Status]:
    """Execute a single CHIP-8 instruction located at pc.

    Accepts a raw instruction word or an already decoded ``Opcode``. Unless
    the instruction sets pc itself, pc moves past it afterwards. A blocking
    instruction with no key held leaves the state untouched and reports
    ``Status.WAITING``.

    Each distinct decoded instruction is compiled once, its operands baked in
    as constants. Stack bounds are checked here, before the compiled step,
    and raise ``StackFault``.
    """
    if not isinstance(instruction, Opcode):
        instruction = decode(instruction)

    if instruction.blocking and int(state.input) == 0:
        return state, Status.WAITING
    if instruction.stack_change:
        check_stack(state, instruction.stack_change)

    return _step(state, instruction), Status.RUNNING


@jax.jit
def _fetch_word(state: MachineState) -> jnp.ndarray:
    return fetch_instruction(state, state.pc)


def fetch(state: MachineState) -> Opcode:
    """Decode the instruction at pc."""
    return decode(_fetch_word(state))


def tick(state: MachineState) -> tuple[MachineState, Status]:
    """Run one fetch-decode-execute cycle."""
    return execute(state, fetch(state))


@jax.jit
def tick_timers(state: MachineState, ticks=1) -> MachineState:
    """Advance the delay and sound timers by ``ticks`` timer periods."""
    return decrement_timers(state, ticks)


def load_program(state: MachineState, program: bytes) -> MachineState:
    """Copy program bytes into memory starting at 0x200."""
    if len(program) > MAX_PROGRAM_SIZE:
        raise ValueError(
            f"Program is {len(program)} bytes, at most {MAX_PROGRAM_SIZE} fit above 0x{PROGRAM_START:03X}"
        )
    if not program:
        return state
    program_array = jnp.array(list(program), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(program_array)
    return state.replace(memory=new_memory)


def load_rom(state: MachineState, filename: str) -> MachineState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)


def disassemble(state: MachineState, start: int = PROGRAM_START, count: int = 16) -> list[tuple[int, int, str]]:
    """Decode ``count`` consecutive instruction words from ``start``.

    Returns (address, word, text) rows.
    """
    rows = []
    for i in range(count):
        address = start + i * INSTRUCTION_SIZE
        word = int(fetch_instruction(state, address))
        rows.append((address, word, str(decode(word))))
    return rows
