"""Tests for framebuffer rendering helpers."""

import numpy as np
import pytest
from chipcore import create_color_scheme, framebuffer_to_rgb, render_text
from chipcore.rendering import format_registers
from conftest import run


def test_blank_frame_is_off_color(fresh_state):
    frame = framebuffer_to_rgb(fresh_state.framebuffer, scale=1)
    assert frame.shape == (32, 64, 3)
    assert frame.dtype == np.uint8
    assert not frame.any()


def test_lit_pixel_and_scaling(fresh_state):
    state = fresh_state.replace(framebuffer=fresh_state.framebuffer.at[8].set(0x80))  # x=0, y=1

    frame = framebuffer_to_rgb(state.framebuffer, scale=4, on_color=(1, 2, 3), off_color=(9, 9, 9))

    assert frame.shape == (128, 256, 3)
    assert frame[4:8, 0:4].tolist() == [[[1, 2, 3]] * 4] * 4
    assert frame[0, 0].tolist() == [9, 9, 9]
    assert frame[4, 4].tolist() == [9, 9, 9]


@pytest.mark.parametrize("scheme", ["classic", "amber", "white", "blue", "retro"])
def test_color_schemes(scheme):
    on_color, off_color = create_color_scheme(scheme)
    assert len(on_color) == len(off_color) == 3
    assert on_color != off_color


def test_unknown_color_scheme():
    with pytest.raises(ValueError, match="Unknown color scheme"):
        create_color_scheme("sepia")


def test_render_text_font_zero(fresh_state):
    state = run(fresh_state, 0xA000, 0xD005)  # draw '0' at (0, 0)

    lines = render_text(state.framebuffer, on="#", off=".")

    assert len(lines) == 32
    assert all(len(line) == 64 for line in lines)
    assert [line[:4] for line in lines[:5]] == ["####", "#..#", "#..#", "#..#", "####"]
    assert lines[5] == "." * 64


def test_format_registers(fresh_state):
    state = run(fresh_state, 0x6A3C, 0xA123)

    text = format_registers(state)

    assert text.startswith("V0:00 V1:00")
    assert "VA:3C" in text
    assert text.endswith("I:0123 PC:204 SP:00 DT:00 ST:00")
