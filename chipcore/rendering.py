"""Turning the packed framebuffer into images, text and register dumps."""

from typing import Tuple

import jax.numpy as jnp
import numpy as np

from chipcore.decode import Register
from chipcore.framebuffer import unpack_framebuffer
from chipcore.state import MachineState

Color = Tuple[int, int, int]

# name -> (lit pixel, unlit pixel)
COLOR_SCHEMES = {
    "classic": ((0, 255, 0), (0, 0, 0)),
    "amber": ((255, 176, 0), (0, 0, 0)),
    "white": ((255, 255, 255), (0, 0, 0)),
    "blue": ((0, 255, 255), (0, 0, 64)),
    "retro": ((255, 255, 0), (64, 0, 64)),
}


def _screen(framebuffer: jnp.ndarray) -> np.ndarray:
    """Lit mask indexed [y, x]."""
    return np.asarray(unpack_framebuffer(framebuffer), dtype=bool).T


def framebuffer_to_rgb(
    framebuffer: jnp.ndarray,
    scale: int = 8,
    on_color: Color = COLOR_SCHEMES["classic"][0],
    off_color: Color = COLOR_SCHEMES["classic"][1],
) -> np.ndarray:
    """Convert the packed framebuffer to a uint8 RGB image.

    Args:
        framebuffer: Packed 256-byte framebuffer, 8 pixels per byte
        scale: Each CHIP-8 pixel becomes a scale x scale block
        on_color: RGB of lit pixels
        off_color: RGB of unlit pixels

    Returns:
        Array of shape (32*scale, 64*scale, 3)
    """
    lit = _screen(framebuffer)
    if scale > 1:
        lit = lit.repeat(scale, axis=0).repeat(scale, axis=1)
    palette = np.array([off_color, on_color], dtype=np.uint8)
    return palette[lit.astype(np.intp)]


def create_color_scheme(scheme: str = "classic") -> Tuple[Color, Color]:
    """Look up an (on_color, off_color) pair by name, see COLOR_SCHEMES."""
    try:
        return COLOR_SCHEMES[scheme]
    except KeyError:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {sorted(COLOR_SCHEMES)}"
        ) from None


def render_text(framebuffer: jnp.ndarray, on: str = "█", off: str = " ") -> list[str]:
    """Render the framebuffer as 32 lines of 64 characters."""
    return ["".join(on if lit else off for lit in row) for row in _screen(framebuffer)]


def format_registers(state: MachineState) -> str:
    """One-line dump of registers, index, pc, sp and timers."""
    registers = " ".join(
        f"{register.name}:{int(state.registers[register.value]):02X}" for register in Register
    )
    return (
        f"{registers} I:{int(state.index):04X} PC:{int(state.pc):03X} "
        f"SP:{int(state.sp):02X} DT:{int(state.dt):02X} ST:{int(state.st):02X}"
    )
