"""CHIP-8 display operations."""

import jax.numpy as jnp

from chipcore.constants import FLAG_REGISTER
from chipcore.decode import Draw
from chipcore.framebuffer import write_pixel_row
from chipcore.state import MachineState, get_register, load_byte, set_register


def execute_display(state: MachineState, instruction: Draw) -> MachineState:
    """DXYN - Draw sprite at (VX, VY) with height N."""
    sprite_x = get_register(state, instruction.x)
    sprite_y = get_register(state, instruction.y)
    index = state.index.astype(jnp.int32)

    collision = jnp.zeros((), dtype=jnp.bool_)
    for row in range(instruction.height):
        pixels = load_byte(state, index + row)
        state, row_collision = write_pixel_row(state, pixels, sprite_x, sprite_y + row)
        collision = collision | row_collision

    return set_register(state, FLAG_REGISTER, collision.astype(jnp.int32))
