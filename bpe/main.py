import argparse
import logging
import pathlib
import sys

from bpe.config import BACKENDS, EXHAUSTION_POLICIES, TrainingConfig
from bpe.errors import InputReadError, NoPairsAvailable, VocabularyOverflow
from bpe.renderer import render_tokens
from bpe.trainer import BPETrainer

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

EPILOG = """examples:
  bpe -n 1000 input.txt
"""


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid vocabulary size '{value}'")
    if number < 0:
        raise argparse.ArgumentTypeError(f"Invalid vocabulary size '{value}'")
    return number


def build_parser() -> argparse.ArgumentParser:
    # fmt: off
    parser = argparse.ArgumentParser(
        prog="bpe",
        description="Performs Byte Pair Encoding (BPE) tokenization on a text file.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # I/O
    parser.add_argument("filepath", type=pathlib.Path, help="Path to the text file to tokenize")

    # Training
    parser.add_argument("-n", "--vocabulary-size", type=non_negative_int, required=True, metavar="VOCABULARY_SIZE", help="Number of token pairs to learn")
    parser.add_argument("--backend", type=str, default="python", choices=BACKENDS, help="Pair counting backend: python|torch")
    parser.add_argument("--on-exhausted", type=str, default="stop", choices=EXHAUSTION_POLICIES, help="What to do when no pairs are left: stop|error")
    parser.add_argument("--id-bits", type=int, default=32, help="Width of a symbol id in bits")

    # System
    parser.add_argument("--log-level", type=str.upper, default="WARNING", choices=LOG_LEVELS, help="Logging level: DEBUG|INFO|WARNING|ERROR")
    # fmt: on
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)  # Exits with status 2 on argument errors

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for arg_name, arg_value in vars(args).items():
        logging.info(f"{arg_name}: {arg_value}")

    config = TrainingConfig(
        num_merges=args.vocabulary_size,
        id_bits=args.id_bits,
        backend=args.backend,
        on_exhausted=args.on_exhausted,
    )
    try:
        config.validate()
    except ValueError as e:
        parser.error(str(e))

    try:
        trainer = BPETrainer(config)
        # Check the id width before touching the file so an oversized request fails fast
        trainer.check_capacity()
        data = read_input(args.filepath)
        result = trainer.train(data)
    except (VocabularyOverflow, InputReadError, NoPairsAvailable) as e:
        logging.error(f"Error: {e}")
        return 1

    logging.info(
        f"Learned {result.rounds_completed} merges | "
        f"Vocabulary size: {len(result.vocabulary)} | "
        f"Tokens: {len(result.tokens)} (from {len(data)} bytes)"
    )
    sys.stdout.buffer.write(render_tokens(result.vocabulary, result.tokens))
    sys.stdout.buffer.flush()
    return 0


def read_input(filepath: pathlib.Path) -> bytes:
    """Read the whole file as raw bytes; it need not be valid text."""
    try:
        return filepath.read_bytes()
    except OSError as e:
        raise InputReadError(f"Cannot read {filepath}: {e.strerror or e}") from e


if __name__ == "__main__":
    sys.exit(main())
