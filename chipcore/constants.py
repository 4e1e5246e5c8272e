"""CHIP-8 machine constants."""

MEMORY_SIZE = 4096
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START

FONT_START = 0x000
SPRITE_HEIGHT = 5
NUM_SPRITES = 16

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32
BYTES_PER_ROW = SCREEN_WIDTH // 8
FRAMEBUFFER_SIZE = BYTES_PER_ROW * SCREEN_HEIGHT

NUM_REGISTERS = 16
FLAG_REGISTER = 0xF
NUM_KEYS = 16

STACK_SIZE = 64  # bytes, 32 return addresses
ADDRESS_MASK = 0x0FFF
INSTRUCTION_SIZE = 2

INSTRUCTION_FREQUENCY = 700  # Hz
TIMER_FREQUENCY = 60  # Hz
