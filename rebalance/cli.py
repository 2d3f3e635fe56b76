'Command-line entry point for the balancing pipeline.'

import argparse
import logging
from typing import Optional

from rebalance.config import STRATEGY_ALIASES, BalancerConfig
from rebalance.pipeline import BalancingPipeline
from rebalance.utils import BalancingError, setup_logging

EXIT_INVALID_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='rebalance',
        description='Split a skewed binary dataset into balanced training/validation '
                    'sets and an untouched test set.'
    )
    parser.add_argument('input', help='CSV without header, features then a 0/1 label column')
    parser.add_argument('--strategy', default='oversample',
                        help=f'balancing method, one of {sorted(STRATEGY_ALIASES)}')
    parser.add_argument('-k', '--k-neighbors', type=int, default=5,
                        help='neighbours per minority row for smote')
    parser.add_argument('--seed', type=int, default=42, help='random seed')
    parser.add_argument('--output-dir', default=None,
                        help='directory for the output files (default: next to input)')
    parser.add_argument('--train-ratio', type=float, default=0.5)
    parser.add_argument('--valid-ratio', type=float, default=0.25)
    parser.add_argument('--delimiter', default=',')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logging(level=getattr(logging, args.log_level))

    try:
        config = BalancerConfig(
            strategy=args.strategy,
            k_neighbors=args.k_neighbors,
            train_ratio=args.train_ratio,
            valid_ratio=args.valid_ratio,
            random_seed=args.seed,
            output_dir=args.output_dir,
            delimiter=args.delimiter,
        )
        BalancingPipeline(config).run(args.input)
    except BalancingError as e:
        logger.error(f'{type(e).__name__}: {e}')
        return EXIT_INVALID_INPUT

    return 0
