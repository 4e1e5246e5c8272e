"""Bit-level helpers shared by the instruction set.

Both helpers accept Python ints as well as traced jax.numpy integers.
"""

import jax.numpy as jnp
from chex import dataclass


def shl_no_overflow(value, shift):
    """Shift an 8-bit value left, yielding 0 once every bit has been shifted out."""
    value = jnp.asarray(value, dtype=jnp.int32)
    shift = jnp.asarray(shift, dtype=jnp.int32)
    return jnp.where(shift & ~7, 0, (value << (shift & 7)) & 0xFF)


@dataclass(frozen=True, mappable_dataclass=False)
class BCD:
    """Three-digit decimal decomposition of a byte."""
    hundreds: int
    tens: int
    ones: int

    def digits(self) -> tuple:
        return self.hundreds, self.tens, self.ones


def to_bcd(value) -> BCD:
    """Split a byte (0-255) into hundreds, tens and ones."""
    value = value & 0xFF
    return BCD(hundreds=value // 100, tens=(value // 10) % 10, ones=value % 10)
