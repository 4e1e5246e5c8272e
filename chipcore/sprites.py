"""Built-in hexadecimal digit sprites (0-F)."""

from typing import TYPE_CHECKING

import jax.numpy as jnp

from chipcore.constants import FONT_START, NUM_SPRITES, SPRITE_HEIGHT

if TYPE_CHECKING:
    from chipcore.state import MachineState


DEFAULT_SPRITES = jnp.array([
    [0b11110000, 0b10010000, 0b10010000, 0b10010000, 0b11110000],  # 0
    [0b00100000, 0b01100000, 0b00100000, 0b00100000, 0b01110000],  # 1
    [0b11110000, 0b00010000, 0b11110000, 0b10000000, 0b11110000],  # 2
    [0b11110000, 0b00010000, 0b11110000, 0b00010000, 0b11110000],  # 3
    [0b10010000, 0b10010000, 0b11110000, 0b00010000, 0b00010000],  # 4
    [0b11110000, 0b10000000, 0b11110000, 0b00010000, 0b11110000],  # 5
    [0b11110000, 0b10000000, 0b11110000, 0b10010000, 0b11110000],  # 6
    [0b11110000, 0b00010000, 0b00100000, 0b01000000, 0b01000000],  # 7
    [0b11110000, 0b10010000, 0b11110000, 0b10010000, 0b11110000],  # 8
    [0b11110000, 0b10010000, 0b11110000, 0b00010000, 0b11110000],  # 9
    [0b11110000, 0b10010000, 0b11110000, 0b10010000, 0b10010000],  # A
    [0b11100000, 0b10010000, 0b11100000, 0b10010000, 0b11100000],  # B
    [0b11110000, 0b10000000, 0b10000000, 0b10000000, 0b11110000],  # C
    [0b11100000, 0b10010000, 0b10010000, 0b10010000, 0b11100000],  # D
    [0b11110000, 0b10000000, 0b11110000, 0b10000000, 0b11110000],  # E
    [0b11110000, 0b10000000, 0b11110000, 0b10000000, 0b10000000],  # F
], dtype=jnp.uint8)

FONT_END = FONT_START + NUM_SPRITES * SPRITE_HEIGHT


def sprite_address(digit: int) -> int:
    """Memory address of the sprite for a hex digit."""
    return FONT_START + digit * SPRITE_HEIGHT


def store_default_sprites(state: "MachineState") -> "MachineState":
    """Write the 16 digit sprites into low memory."""
    return state.replace(memory=state.memory.at[FONT_START:FONT_END].set(DEFAULT_SPRITES.reshape(-1)))
