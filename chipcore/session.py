"""Host-side owner of a running CHIP-8 machine.

``Chip8Session`` is what a front end (debugger, renderer, test harness) drives:
it keeps the machine state, loads programs, paces instruction and timer cycles
against wall-clock time, feeds key input and recovers from core failures by
resetting the machine.
"""

import dataclasses
import math
import time
from typing import Optional

import jax
import jax.numpy as jnp

from chipcore.constants import INSTRUCTION_FREQUENCY, NUM_KEYS, TIMER_FREQUENCY
from chipcore.emulator import Status, load_program, tick, tick_timers
from chipcore.logging import ConsoleLogger
from chipcore.state import MachineState, create_state, reset_state

MIN_FREQUENCY = 1
MAX_FREQUENCY = 1_000_000


@dataclasses.dataclass(frozen=True)
class Failure:
    """An error raised by the core, and how far the run had got."""
    message: str
    instruction_count: int


def timer_ticks_between(last: float, now: float, frequency: float = TIMER_FREQUENCY) -> int:
    """Count timer period boundaries crossed between two timestamps in seconds."""
    return max(0, math.floor(now * frequency) - math.floor(last * frequency))


class Chip8Session:
    """A single machine plus the bookkeeping needed to run it interactively.

    Args:
        rom_path: Optional ROM file loaded at start and after every reset
        instruction_frequency: Instruction cycles per second (typically 700)
        timer_frequency: Delay/sound timer ticks per second (typically 60)
        seed: Seed for the machine's random number generator
        logger: Logger for session events, a default ConsoleLogger if None
    """

    def __init__(
        self,
        rom_path: Optional[str] = None,
        instruction_frequency: int = INSTRUCTION_FREQUENCY,
        timer_frequency: int = TIMER_FREQUENCY,
        seed: int = 0,
        logger: Optional[ConsoleLogger] = None,
    ):
        if not MIN_FREQUENCY <= instruction_frequency <= MAX_FREQUENCY:
            raise ValueError(
                f"instruction_frequency must be within {MIN_FREQUENCY}..{MAX_FREQUENCY} Hz, "
                f"got {instruction_frequency}"
            )
        if timer_frequency <= 0:
            raise ValueError(f"timer_frequency must be positive, got {timer_frequency}")

        self.instruction_frequency = instruction_frequency
        self.timer_frequency = timer_frequency
        self.logger = logger or ConsoleLogger()

        self.state: MachineState = create_state(jax.random.PRNGKey(seed))
        self.status = Status.RUNNING
        self.instruction_count = 0
        self.paused = False
        self.last_failure: Optional[Failure] = None
        self.rom_path: Optional[str] = None
        self._program = b""
        self._timer_debt = 0.0
        self._clock = 0.0
        self._last_sync: Optional[float] = None

        if rom_path is not None:
            self.load_rom(rom_path)

    # Program loading

    def load_program(self, program: bytes):
        """Load raw program bytes at 0x200; they are reloaded on every reset."""
        self.state = load_program(self.state, program)
        self._program = bytes(program)

    def load_rom(self, rom_path: str):
        with open(rom_path, "rb") as f:
            program = f.read()
        self.load_program(program)
        self.rom_path = rom_path
        self.logger.info(f"Loaded {rom_path} ({len(program)} bytes)")

    def reset(self):
        """Return the machine to power-on state and reload the current program."""
        self.state = load_program(reset_state(self.state), self._program)
        self.status = Status.RUNNING
        self.instruction_count = 0
        self.last_failure = None
        self._timer_debt = 0.0
        self.logger.debug("Machine reset")

    # Execution

    def step(self) -> Status:
        """Run one instruction cycle.

        An exception escaping the core ends the current run only: it is
        logged and recorded in ``last_failure`` and the machine is reset.
        """
        try:
            self.state, self.status = tick(self.state)
        except Exception as e:
            failure = Failure(message=f"{type(e).__name__}: {e}", instruction_count=self.instruction_count)
            self.logger.error(
                f"Emulator crashed after {failure.instruction_count} instructions: {failure.message}"
            )
            self.reset()
            self.last_failure = failure
            return self.status

        if self.status is Status.RUNNING:
            self.instruction_count += 1
        return self.status

    def tick_timers(self, ticks: int = 1):
        if ticks:
            self.state = tick_timers(self.state, ticks)

    def run(self, cycles: int, progress=None) -> int:
        """Run ``cycles`` instruction cycles, interleaving timer ticks.

        For fixed-length headless runs: timers advance ``timer_frequency /
        instruction_frequency`` ticks per cycle, as if every cycle took its
        nominal time. Returns the number of cycles run, 0 while paused.
        """
        if self.paused:
            return 0
        ticks_per_cycle = self.timer_frequency / self.instruction_frequency
        for _ in range(cycles):
            self.step()
            self._timer_debt += ticks_per_cycle
            due = int(self._timer_debt)
            if due:
                self._timer_debt -= due
                self.tick_timers(due)
            if progress is not None:
                progress.update(1)
        return cycles

    def run_for(self, seconds: float) -> int:
        """Advance the machine by ``seconds`` of wall-clock time.

        Instruction cycles and timer ticks are each counted from the period
        boundaries crossed on the session clock, so the timers follow elapsed
        time even when no instruction is due. Returns the cycles run.
        """
        if self.paused:
            return 0
        last = self._clock
        now = self._clock = last + seconds
        cycles = timer_ticks_between(last, now, self.instruction_frequency)
        for _ in range(cycles):
            self.step()
        self.tick_timers(timer_ticks_between(last, now, self.timer_frequency))
        return cycles

    def sync(self, now: Optional[float] = None) -> int:
        """Catch up with the real clock, ``time.monotonic()`` unless ``now`` is given.

        The first call only starts the clock. Time spent paused is skipped.
        """
        now = time.monotonic() if now is None else now
        last, self._last_sync = self._last_sync, now
        if last is None:
            return 0
        return self.run_for(max(0.0, now - last))

    # Pacing

    def increase_frequency(self) -> int:
        self._set_frequency(min(MAX_FREQUENCY, self.instruction_frequency * 2))
        return self.instruction_frequency

    def decrease_frequency(self) -> int:
        self._set_frequency(max(MIN_FREQUENCY, self.instruction_frequency // 2))
        return self.instruction_frequency

    def _set_frequency(self, frequency: int):
        if frequency != self.instruction_frequency:
            self.instruction_frequency = frequency
            self.logger.info(f"Instruction frequency set to {frequency} Hz")

    def toggle_pause(self) -> bool:
        self.paused = not self.paused
        self.logger.info("Paused" if self.paused else "Resumed")
        return self.paused

    # Keypad

    def press_key(self, key: int):
        self._set_input(int(self.state.input) | self._key_bit(key))

    def release_key(self, key: int):
        self._set_input(int(self.state.input) & ~self._key_bit(key))

    def toggle_key(self, key: int):
        self._set_input(int(self.state.input) ^ self._key_bit(key))

    @staticmethod
    def _key_bit(key: int) -> int:
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"CHIP-8 keys are 0x0..0xF, got {key!r}")
        return 1 << key

    def _set_input(self, value: int):
        self.state = self.state.replace(input=jnp.asarray(value & 0xFFFF, dtype=jnp.uint16))
