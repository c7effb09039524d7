"""Common CLI helper utilities."""

from __future__ import annotations

import argparse
import logging

from common.config import Config, load_config


def setup_logging(verbose: bool = False) -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add --config/--store/--verbose arguments shared by every CLI."""
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML config file (default: configs/$CONFIG_ENV.yaml).",
    )
    parser.add_argument(
        "--store",
        default=None,
        help="Path to the JSON state file (overrides store.path in config).",
    )
    parser.add_argument("--verbose", action="store_true")


def config_from_args(args: argparse.Namespace) -> Config:
    """Load config honouring --config and --store."""
    config = load_config(config_path=args.config) if args.config else load_config()
    if args.store:
        config.store.backend = "json"
        config.store.path = args.store
    return config
