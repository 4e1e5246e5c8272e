"""Packed monochrome framebuffer operations."""

import jax.numpy as jnp

from chipcore.bits import shl_no_overflow
from chipcore.constants import BYTES_PER_ROW, SCREEN_HEIGHT, SCREEN_WIDTH
from chipcore.state import MachineState


def write_pixel_row(state: MachineState, pixels, x, y) -> tuple[MachineState, jnp.ndarray]:
    """XOR an 8-pixel row into the framebuffer with its left edge at (x, y).

    The row lands in the byte-column holding ``x`` and, unless ``x`` is
    byte-aligned, spills into the next byte-column of the same row (wrapping
    to the left edge). Returns whether any lit pixel was switched off.
    """
    pixels = jnp.asarray(pixels, dtype=jnp.int32) & 0xFF
    x = jnp.asarray(x, dtype=jnp.int32) % SCREEN_WIDTH
    y = jnp.asarray(y, dtype=jnp.int32) % SCREEN_HEIGHT
    column, offset = x // 8, x % 8
    row_start = y * BYTES_PER_ROW

    parts = (
        (row_start + column, pixels >> offset),
        (row_start + (column + 1) % BYTES_PER_ROW, shl_no_overflow(pixels, 8 - offset)),
    )

    framebuffer = state.framebuffer
    collision = jnp.zeros((), dtype=jnp.bool_)
    for position, part in parts:
        old = framebuffer[position].astype(jnp.int32)
        collision = collision | ((old & part) != 0)
        framebuffer = framebuffer.at[position].set((old ^ part).astype(jnp.uint8))

    return state.replace(framebuffer=framebuffer), collision


def clear_framebuffer(state: MachineState) -> MachineState:
    return state.replace(framebuffer=jnp.zeros_like(state.framebuffer))


def get_pixel(state: MachineState, x: int, y: int) -> bool:
    """Whether pixel (x, y) is lit."""
    byte = int(state.framebuffer[BYTES_PER_ROW * y + x // 8])
    return bool(byte & (0x80 >> (x % 8)))


def unpack_framebuffer(framebuffer: jnp.ndarray) -> jnp.ndarray:
    """Expand the packed framebuffer to a boolean (64, 32) array indexed [x, y]."""
    rows = jnp.asarray(framebuffer, dtype=jnp.uint8).reshape(SCREEN_HEIGHT, BYTES_PER_ROW)
    return jnp.unpackbits(rows, axis=1).astype(jnp.bool_).T
