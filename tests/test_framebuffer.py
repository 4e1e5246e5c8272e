"""Tests for the packed framebuffer blitter."""

import jax.numpy as jnp
from chipcore.framebuffer import clear_framebuffer, get_pixel, unpack_framebuffer, write_pixel_row


class TestAlignedRows:

    def test_draw_on_blank(self, fresh_state):
        state, collision = write_pixel_row(fresh_state, 0xFF, 0, 0)
        assert state.framebuffer[0] == 0xFF
        assert not collision

    def test_draw_twice_erases_and_collides(self, fresh_state):
        state, _ = write_pixel_row(fresh_state, 0xFF, 0, 0)
        state, collision = write_pixel_row(state, 0xFF, 0, 0)
        assert state.framebuffer[0] == 0x00
        assert collision

    def test_aligned_write_is_xor_of_target_byte(self, fresh_state):
        state = fresh_state.replace(framebuffer=fresh_state.framebuffer.at[8 * 3 + 2].set(0b10100000))
        state, collision = write_pixel_row(state, 0b01100000, 16, 3)
        assert state.framebuffer[8 * 3 + 2] == 0b11000000
        assert collision  # bit 0x20 was lit in both
        assert jnp.sum(state.framebuffer != 0) == 1

    def test_no_collision_when_disjoint(self, fresh_state):
        state = fresh_state.replace(framebuffer=fresh_state.framebuffer.at[0].set(0xF0))
        state, collision = write_pixel_row(state, 0x0F, 0, 0)
        assert state.framebuffer[0] == 0xFF
        assert not collision


class TestUnalignedRows:

    def test_row_splits_across_two_bytes(self, fresh_state):
        state, collision = write_pixel_row(fresh_state, 0xFF, 4, 0)
        assert state.framebuffer[0] == 0x0F
        assert state.framebuffer[1] == 0xF0
        assert not collision

    def test_collision_in_spill_byte(self, fresh_state):
        state = fresh_state.replace(framebuffer=fresh_state.framebuffer.at[1].set(0x80))
        state, collision = write_pixel_row(state, 0x01, 1, 0)
        assert state.framebuffer[1] == 0x00
        assert collision

    def test_spill_wraps_within_row(self, fresh_state):
        state, _ = write_pixel_row(fresh_state, 0xFF, 60, 5)
        assert state.framebuffer[8 * 5 + 7] == 0x0F
        assert state.framebuffer[8 * 5 + 0] == 0xF0
        assert state.framebuffer[8 * 6 + 0] == 0x00

    def test_coordinates_wrap(self, fresh_state):
        state, _ = write_pixel_row(fresh_state, 0x80, 64 + 3, 32 + 2)
        assert get_pixel(state, 3, 2)


class TestHelpers:

    def test_get_pixel_bit_order(self, fresh_state):
        state, _ = write_pixel_row(fresh_state, 0x80, 9, 1)
        assert state.framebuffer[8 + 1] == 0x40
        assert get_pixel(state, 9, 1)
        assert not get_pixel(state, 8, 1)

    def test_clear(self, fresh_state):
        state, _ = write_pixel_row(fresh_state, 0xFF, 0, 0)
        state = clear_framebuffer(state)
        assert jnp.all(state.framebuffer == 0)

    def test_unpack(self, fresh_state):
        state, _ = write_pixel_row(fresh_state, 0x81, 8, 31)
        pixels = unpack_framebuffer(state.framebuffer)
        assert pixels.shape == (64, 32)
        assert pixels[8, 31]
        assert pixels[15, 31]
        assert int(pixels.sum()) == 2
