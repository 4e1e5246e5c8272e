"""CHIP-8 virtual machine core."""

from chipcore.state import MachineState, create_state, init_state, reset_state, fetch_instruction
from chipcore.emulator import Status, execute, tick, tick_timers, fetch, load_program, load_rom, disassemble
from chipcore.decode import Opcode, Register, decode
from chipcore.stack import StackFault
from chipcore.constants import *
from chipcore.rendering import framebuffer_to_rgb, create_color_scheme, render_text
from chipcore.session import Chip8Session, Failure

__all__ = [
    "MachineState",
    "create_state",
    "init_state",
    "reset_state",
    "fetch_instruction",
    "Status",
    "execute",
    "tick",
    "tick_timers",
    "fetch",
    "load_program",
    "load_rom",
    "disassemble",
    "Opcode",
    "Register",
    "decode",
    "StackFault",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "framebuffer_to_rgb",
    "create_color_scheme",
    "render_text",
    "Chip8Session",
    "Failure",
]
