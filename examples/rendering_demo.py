"""
Demonstration of chipcore rendering.

Runs a tiny hand-assembled program that draws the hex digits 0-F and shows
the resulting screen with every color scheme.
"""

import matplotlib.pyplot as plt

from chipcore import Chip8Session, create_color_scheme, framebuffer_to_rgb, render_text
from chipcore.rendering import format_registers

# Draws digits 0-F on two rows of eight.
HEX_DIGITS = bytes([
    0x60, 0x00,  # 200: LD V0, 0x00   digit
    0x61, 0x01,  # 202: LD V1, 0x01   x
    0x62, 0x02,  # 204: LD V2, 0x02   y
    0xF0, 0x29,  # 206: LD F, V0
    0xD1, 0x25,  # 208: DRW V1, V2, 5
    0x70, 0x01,  # 20A: ADD V0, 0x01
    0x71, 0x08,  # 20C: ADD V1, 0x08
    0x30, 0x08,  # 20E: SE V0, 0x08
    0x12, 0x16,  # 210: JP 0x216
    0x61, 0x01,  # 212: LD V1, 0x01
    0x72, 0x08,  # 214: ADD V2, 0x08
    0x30, 0x10,  # 216: SE V0, 0x10
    0x12, 0x06,  # 218: JP 0x206
    0x12, 0x1A,  # 21A: JP 0x21A
])


def text_demo(session: Chip8Session):
    """Print the screen to the terminal."""
    print("🎮 Text Rendering Demo")
    print("=" * 64)
    for line in render_text(session.state.framebuffer):
        print(line)
    print("=" * 64)
    print(format_registers(session.state))


def color_scheme_demo(session: Chip8Session):
    """Show the same frame in every color scheme."""
    schemes = ["classic", "amber", "white", "blue", "retro"]

    fig, axes = plt.subplots(len(schemes), 1, figsize=(8, 2.2 * len(schemes)))
    for ax, scheme in zip(axes, schemes):
        on_color, off_color = create_color_scheme(scheme)
        frame = framebuffer_to_rgb(
            session.state.framebuffer, scale=4, on_color=on_color, off_color=off_color
        )
        ax.imshow(frame)
        ax.set_title(scheme)
        ax.axis("off")

    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    session = Chip8Session()
    session.load_program(HEX_DIGITS)
    session.run(200)

    text_demo(session)
    color_scheme_demo(session)
