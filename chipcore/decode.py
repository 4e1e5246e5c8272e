"""CHIP-8 instruction decoding.

Every instruction word decodes to exactly one ``Opcode`` variant carrying the
operands it needs. Words that match no known form decode to ``NoOperation``.
"""

import dataclasses
import enum
import functools
from typing import ClassVar

import chex

opcode = functools.partial(chex.dataclass, frozen=True, mappable_dataclass=False)


class Register(enum.IntEnum):
    V0 = 0x0
    V1 = 0x1
    V2 = 0x2
    V3 = 0x3
    V4 = 0x4
    V5 = 0x5
    V6 = 0x6
    V7 = 0x7
    V8 = 0x8
    V9 = 0x9
    VA = 0xA
    VB = 0xB
    VC = 0xC
    VD = 0xD
    VE = 0xE
    VF = 0xF


class Opcode:
    """Base class of all decoded instructions."""
    mnemonic: ClassVar[str] = ""
    syntax: ClassVar[str] = ""
    # Instructions that set pc themselves; all others advance by one instruction.
    transfers_control: ClassVar[bool] = False
    # Instructions that cannot complete until a key is held.
    blocking: ClassVar[bool] = False
    # Bytes the instruction moves the stack pointer by.
    stack_change: ClassVar[int] = 0

    def __str__(self) -> str:
        operands = {field.name: getattr(self, field.name) for field in dataclasses.fields(self)}
        for name in ("x", "y"):
            if name in operands:
                operands[name] = Register(operands[name]).name
        return f"{self.mnemonic} {self.syntax.format(**operands)}".rstrip()


# 0x0___

@opcode
class ClearScreen(Opcode):
    """00E0 - Clear the display."""
    mnemonic = "CLS"


@opcode
class Return(Opcode):
    """00EE - Return from subroutine."""
    mnemonic = "RET"
    transfers_control = True
    stack_change = -2


@opcode
class NoOperation(Opcode):
    """Any unrecognized word."""
    mnemonic = "NOP"


# Jumps and subroutines

@opcode
class Jump(Opcode):
    """1NNN - Jump to NNN."""
    address: int
    mnemonic = "JP"
    syntax = "0x{address:03X}"
    transfers_control = True


@opcode
class Call(Opcode):
    """2NNN - Call subroutine at NNN."""
    address: int
    mnemonic = "CALL"
    syntax = "0x{address:03X}"
    transfers_control = True
    stack_change = 2


@opcode
class JumpOffset(Opcode):
    """BNNN - Jump to NNN + V0."""
    address: int
    mnemonic = "JP"
    syntax = "V0, 0x{address:03X}"
    transfers_control = True


# Conditional skips

@opcode
class SkipEqualByte(Opcode):
    """3XKK - Skip next instruction if VX == KK."""
    x: int
    byte: int
    mnemonic = "SE"
    syntax = "{x}, 0x{byte:02X}"


@opcode
class SkipNotEqualByte(Opcode):
    """4XKK - Skip next instruction if VX != KK."""
    x: int
    byte: int
    mnemonic = "SNE"
    syntax = "{x}, 0x{byte:02X}"


@opcode
class SkipEqualRegister(Opcode):
    """5XY0 - Skip next instruction if VX == VY."""
    x: int
    y: int
    mnemonic = "SE"
    syntax = "{x}, {y}"


@opcode
class SkipNotEqualRegister(Opcode):
    """9XY0 - Skip next instruction if VX != VY."""
    x: int
    y: int
    mnemonic = "SNE"
    syntax = "{x}, {y}"


@opcode
class SkipKeyPressed(Opcode):
    """EX9E - Skip next instruction if key VX is held."""
    x: int
    mnemonic = "SKP"
    syntax = "{x}"


@opcode
class SkipKeyNotPressed(Opcode):
    """EXA1 - Skip next instruction if key VX is not held."""
    x: int
    mnemonic = "SKNP"
    syntax = "{x}"


# Register loads and byte arithmetic

@opcode
class LoadByte(Opcode):
    """6XKK - VX = KK."""
    x: int
    byte: int
    mnemonic = "LD"
    syntax = "{x}, 0x{byte:02X}"


@opcode
class AddByte(Opcode):
    """7XKK - VX += KK, no carry."""
    x: int
    byte: int
    mnemonic = "ADD"
    syntax = "{x}, 0x{byte:02X}"


@opcode
class LoadIndex(Opcode):
    """ANNN - I = NNN."""
    address: int
    mnemonic = "LD"
    syntax = "I, 0x{address:03X}"


@opcode
class Random(Opcode):
    """CXKK - VX = random byte & KK."""
    x: int
    byte: int
    mnemonic = "RND"
    syntax = "{x}, 0x{byte:02X}"


# 0x8XY_ register arithmetic

@opcode
class LoadRegister(Opcode):
    """8XY0 - VX = VY."""
    x: int
    y: int
    mnemonic = "LD"
    syntax = "{x}, {y}"


@opcode
class Or(Opcode):
    """8XY1 - VX |= VY."""
    x: int
    y: int
    mnemonic = "OR"
    syntax = "{x}, {y}"


@opcode
class And(Opcode):
    """8XY2 - VX &= VY."""
    x: int
    y: int
    mnemonic = "AND"
    syntax = "{x}, {y}"


@opcode
class Xor(Opcode):
    """8XY3 - VX ^= VY."""
    x: int
    y: int
    mnemonic = "XOR"
    syntax = "{x}, {y}"


@opcode
class AddRegister(Opcode):
    """8XY4 - VX += VY, VF = carry."""
    x: int
    y: int
    mnemonic = "ADD"
    syntax = "{x}, {y}"


@opcode
class Subtract(Opcode):
    """8XY5 - VF = VX > VY, VX -= VY."""
    x: int
    y: int
    mnemonic = "SUB"
    syntax = "{x}, {y}"


@opcode
class ShiftRight(Opcode):
    """8XY6 - VF = lsb VX, VX >>= 1."""
    x: int
    mnemonic = "SHR"
    syntax = "{x}"


@opcode
class SubtractReversed(Opcode):
    """8XY7 - VF = VY > VX, VX = VY - VX."""
    x: int
    y: int
    mnemonic = "SUBN"
    syntax = "{x}, {y}"


@opcode
class ShiftLeft(Opcode):
    """8XYE - VF = msb VX, VX <<= 1."""
    x: int
    mnemonic = "SHL"
    syntax = "{x}"


# Display

@opcode
class Draw(Opcode):
    """DXYN - Draw an N-row sprite from I at (VX, VY), VF = collision."""
    x: int
    y: int
    height: int
    mnemonic = "DRW"
    syntax = "{x}, {y}, {height}"


# 0xFX__ timers, keyboard and memory

@opcode
class LoadDelayTimer(Opcode):
    """FX07 - VX = DT."""
    x: int
    mnemonic = "LD"
    syntax = "{x}, DT"


@opcode
class WaitForKey(Opcode):
    """FX0A - Wait for a key press, VX = key."""
    x: int
    mnemonic = "LD"
    syntax = "{x}, K"
    blocking = True


@opcode
class SetDelayTimer(Opcode):
    """FX15 - DT = VX."""
    x: int
    mnemonic = "LD"
    syntax = "DT, {x}"


@opcode
class SetSoundTimer(Opcode):
    """FX18 - ST = VX."""
    x: int
    mnemonic = "LD"
    syntax = "ST, {x}"


@opcode
class AddIndex(Opcode):
    """FX1E - I += VX."""
    x: int
    mnemonic = "ADD"
    syntax = "I, {x}"


@opcode
class LoadSprite(Opcode):
    """FX29 - I = address of the digit sprite for VX."""
    x: int
    mnemonic = "LD"
    syntax = "F, {x}"


@opcode
class StoreBCD(Opcode):
    """FX33 - Store the BCD digits of VX at I, I+1, I+2."""
    x: int
    mnemonic = "LD"
    syntax = "B, {x}"


@opcode
class StoreRegisters(Opcode):
    """FX55 - Store V0..VX from I, then I += X + 1."""
    x: int
    mnemonic = "LD"
    syntax = "[I], {x}"


@opcode
class LoadRegisters(Opcode):
    """FX65 - Load V0..VX from I, then I += X + 1."""
    x: int
    mnemonic = "LD"
    syntax = "{x}, [I]"


_ALU_OPCODES = {
    0x0: LoadRegister,
    0x1: Or,
    0x2: And,
    0x3: Xor,
    0x4: AddRegister,
    0x5: Subtract,
    0x7: SubtractReversed,
}

_KEY_OPCODES = {
    0x9E: SkipKeyPressed,
    0xA1: SkipKeyNotPressed,
}

_MISC_OPCODES = {
    0x07: LoadDelayTimer,
    0x0A: WaitForKey,
    0x15: SetDelayTimer,
    0x18: SetSoundTimer,
    0x1E: AddIndex,
    0x29: LoadSprite,
    0x33: StoreBCD,
    0x55: StoreRegisters,
    0x65: LoadRegisters,
}


def _decode_system(instruction, x, y, n, kk, nnn):
    if instruction == 0x00E0:
        return ClearScreen()
    if instruction == 0x00EE:
        return Return()
    return NoOperation()


def _decode_alu(instruction, x, y, n, kk, nnn):
    if n == 0x6:
        return ShiftRight(x=x)
    if n == 0xE:
        return ShiftLeft(x=x)
    if n in _ALU_OPCODES:
        return _ALU_OPCODES[n](x=x, y=y)
    return NoOperation()


def _decode_key(instruction, x, y, n, kk, nnn):
    if kk in _KEY_OPCODES:
        return _KEY_OPCODES[kk](x=x)
    return NoOperation()


def _decode_misc(instruction, x, y, n, kk, nnn):
    if kk in _MISC_OPCODES:
        return _MISC_OPCODES[kk](x=x)
    return NoOperation()


_DECODERS = [
    _decode_system,
    lambda instruction, x, y, n, kk, nnn: Jump(address=nnn),
    lambda instruction, x, y, n, kk, nnn: Call(address=nnn),
    lambda instruction, x, y, n, kk, nnn: SkipEqualByte(x=x, byte=kk),
    lambda instruction, x, y, n, kk, nnn: SkipNotEqualByte(x=x, byte=kk),
    lambda instruction, x, y, n, kk, nnn: SkipEqualRegister(x=x, y=y),
    lambda instruction, x, y, n, kk, nnn: LoadByte(x=x, byte=kk),
    lambda instruction, x, y, n, kk, nnn: AddByte(x=x, byte=kk),
    _decode_alu,
    lambda instruction, x, y, n, kk, nnn: SkipNotEqualRegister(x=x, y=y),
    lambda instruction, x, y, n, kk, nnn: LoadIndex(address=nnn),
    lambda instruction, x, y, n, kk, nnn: JumpOffset(address=nnn),
    lambda instruction, x, y, n, kk, nnn: Random(x=x, byte=kk),
    lambda instruction, x, y, n, kk, nnn: Draw(x=x, y=y, height=n),
    _decode_key,
    _decode_misc,
]


def decode(instruction: int) -> Opcode:
    """Decode a 16-bit instruction word."""
    return _decode_word(int(instruction) & 0xFFFF)


@functools.lru_cache(maxsize=None)
def _decode_word(instruction: int) -> Opcode:
    return _DECODERS[instruction >> 12](
        instruction,
        (instruction & 0x0F00) >> 8,  # x: register
        (instruction & 0x00F0) >> 4,  # y: register
        instruction & 0x000F,         # n: 4-bit immediate
        instruction & 0x00FF,         # kk: 8-bit immediate
        instruction & 0x0FFF,         # nnn: 12-bit address
    )


def opcode_types() -> list[type]:
    """Every concrete instruction variant."""
    return Opcode.__subclasses__()
