"""Headless command line runner: ``python -m chipcore ROM``."""

import argparse
from typing import Optional, Sequence

from chipcore.constants import INSTRUCTION_FREQUENCY, PROGRAM_START
from chipcore.emulator import disassemble
from chipcore.logging import LEVELS, ConsoleLogger, progress_bar
from chipcore.rendering import format_registers, render_text
from chipcore.session import Chip8Session


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chipcore",
        description="Run a CHIP-8 ROM headless and print the final screen",
    )
    parser.add_argument("rom", type=str, help="Path to the CHIP-8 ROM file")
    parser.add_argument(
        "--cycles",
        type=int,
        default=INSTRUCTION_FREQUENCY,
        help=f"Number of instruction cycles to run (default: {INSTRUCTION_FREQUENCY})",
    )
    parser.add_argument(
        "--frequency",
        type=int,
        default=INSTRUCTION_FREQUENCY,
        help=f"Instruction cycles per second, sets the timer ratio (default: {INSTRUCTION_FREQUENCY})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for the RND instruction (default: 0)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default="INFO",
        choices=LEVELS,
        help="Console log level (default: INFO)",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar",
    )
    parser.add_argument(
        "--disassemble",
        type=int,
        metavar="N",
        default=0,
        help="Print N instructions from 0x200 instead of running",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = ConsoleLogger(log_level=args.log_level)

    try:
        session = Chip8Session(
            rom_path=args.rom,
            instruction_frequency=args.frequency,
            seed=args.seed,
            logger=logger,
        )
    except (OSError, ValueError) as e:
        logger.error(f"Cannot start: {e}")
        return 2

    if args.disassemble:
        for address, word, text in disassemble(session.state, PROGRAM_START, args.disassemble):
            print(f"{address:03X}: {word:04X}  {text}")
        return 0

    with progress_bar(args.cycles, disable=args.no_progress) as bar:
        session.run(args.cycles, progress=bar)

    print("\n".join(render_text(session.state.framebuffer)))
    print(format_registers(session.state))
    logger.info(f"Executed {session.instruction_count} instructions ({session.status.value})")

    if session.last_failure is not None:
        logger.warning(
            f"Run was reset after a failure at instruction {session.last_failure.instruction_count}: "
            f"{session.last_failure.message}"
        )
        return 1
    return 0
