#!/usr/bin/env python3
"""
Build a chain file from text corpora.
One sequence per non-blank line; optionally extends an existing chain file.
"""

import argparse
import sys
from pathlib import Path

from markov_service.services.errors import ChainLoadError
from markov_service.services.markov import MarkovChain
from markov_service.services.persistence import read_chain, write_chain
from markov_service.utils.logger import setup_logger

logger = setup_logger("build_chain")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Build a Markov chain JSON file from text files")

    parser.add_argument("inputs", nargs="+", type=Path, help="UTF-8 text files, one sequence per line")
    parser.add_argument("--output", "-o", type=Path, required=True, help="Chain file to write")
    parser.add_argument("--base", type=Path, default=None,
                       help="Existing chain file to extend (may be the same as --output)")
    parser.add_argument("--lowercase", action="store_true", help="Lowercase tokens before adding")

    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    if args.base is not None:
        try:
            chain = read_chain(args.base)
        except ChainLoadError as e:
            logger.error(f"[Build] {e}")
            return 1
    else:
        chain = MarkovChain()

    for path in args.inputs:
        try:
            with path.open("r", encoding="utf-8") as f:
                lines = [line for line in f if line.strip()]
        except OSError as e:
            logger.error(f"[Build] Cannot read {path}: {e}")
            return 1
        chain.train(lines, lowercase=args.lowercase)
        logger.info(f"[Build] {path}: {len(lines)} sequences")

    write_chain(chain, args.output)
    logger.info(f"[Build] Wrote {len(chain)} tokens to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
