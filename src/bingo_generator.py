#!/usr/bin/env python3
# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Bingo Board Generator

Generates bingo cards whose rows, columns and diagonals have balanced
difficulty:
1. Tiered, tagged objective catalog loaded from YAML/JSON
2. Backtracking search with interval-based pruning for board filling
3. Validation of every line of the finished board
4. SVG image, BingoSync JSON and YAML output

Usage:
    # With YAML configuration:
    python bingo_generator.py --config board.yaml

    # With command-line arguments:
    python bingo_generator.py --size 5 --objective-range 10-14 --line-range 50-70

    # Repeatable board:
    python bingo_generator.py --catalog objectives.yaml --seed 42 --attempts 5
"""

import logging
import os
import random
import sys
import time
from typing import Dict, Optional

# Add src to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from board_exporter import BoardExporter
from board_solver import BingoBoardSolver
from catalog import CatalogError, load_catalog
from config import (
    BingoConfig, ConfigValidationError, create_argument_parser, load_config
)
from logging_config import setup_logging
from models import Board, Catalog, TagPolicy
from svg_renderer import SVGBoardRenderer
from validator import validate_board


class BingoGenerator:
    """
    Complete bingo board generator.

    Workflow:
    1. Load the objective catalog
    2. Fill the board with the backtracking solver (retrying with fresh state)
    3. Validate every line
    4. Render SVG and export JSON/YAML
    """

    def __init__(self, config: BingoConfig, catalog: Optional[Catalog] = None):
        """
        Initialize the bingo generator.

        Args:
            config: BingoConfig instance with all settings
            catalog: Pre-loaded catalog; loaded from config.catalog if omitted

        Raises:
            CatalogError: If the catalog cannot be loaded
            ValueError: If the tag policy is unknown
        """
        self.config = config
        self.start_time = time.time()

        # Initialize logging
        self.log_file_path = setup_logging(
            output_dir=config.output.directory,
            log_level=config.output.log_level,
            log_file_prefix=config.output.log_file_prefix,
            enable_console=config.output.enable_console_logging,
        )
        self.logger = logging.getLogger(__name__)

        self.tag_policy = TagPolicy.from_value(config.tag_policy)
        self.catalog = catalog if catalog is not None else load_catalog(config.catalog)
        self.rng = random.Random(config.search.seed)

        self.logger.info(f"Initialized BingoGenerator with {len(self.catalog)} objectives")
        self.logger.info(f"Board size: {config.size}x{config.size}, Tag policy: {self.tag_policy.value}")
        self.logger.debug(f"Log file: {self.log_file_path}")

        self.board: Optional[Board] = None
        self.stats: Dict = {}

    def generate(self) -> Optional[Dict[str, str]]:
        """
        Generate a board and write all configured outputs.

        Returns:
            Dict of output file paths, or None if no board was found
        """
        cfg = self.config

        self.logger.info("=" * 60)
        self.logger.info("BINGO GENERATOR")
        self.logger.info("=" * 60)
        self.logger.info(f"   Size: {cfg.size}x{cfg.size}")
        self.logger.info(f"   Objective tiers: {cfg.objective_difficulty or 'any'}")
        self.logger.info(f"   Line tier sum: {cfg.bingo_difficulty}")
        self.logger.info(f"   Tag policy: {self.tag_policy.value}")
        self.logger.info(f"   Catalog tiers: {self.catalog.min_tier}..{self.catalog.max_tier}")

        # Step 1: Search
        self.logger.info("Step 1: Filling board...")
        board = self.fill_board()
        if board is None:
            self.logger.error(
                "   X Board not found. A board may be possible "
                "but simply not found by the generator."
            )
            return None
        self.board = board
        self.logger.info("   - Board filled successfully!")

        # Step 2: Validate
        self.logger.info("Step 2: Validating board...")
        validation = validate_board(
            board, cfg.objective_difficulty, cfg.bingo_difficulty, self.tag_policy
        )
        if not validation.valid:
            self.logger.error("   X Board failed validation:")
            for error in validation.errors:
                self.logger.error(f"      - {error}")
            return None
        self.logger.info(
            f"   - Line sums {validation.stats['min_line_sum']}"
            f"..{validation.stats['max_line_sum']}"
        )
        for line in str(board).splitlines():
            self.logger.info(f"   {line}")

        # Step 3: Output
        self.logger.info("Step 3: Writing output...")
        output_files = self._write_outputs(board)

        elapsed = time.time() - self.start_time
        self.stats["generation_time_seconds"] = round(elapsed, 3)

        self.logger.info("=" * 60)
        self.logger.info("GENERATION COMPLETE!")
        self.logger.info("=" * 60)
        self.logger.info("Output files:")
        for name, path in output_files.items():
            self.logger.info(f"   {name}: {path}")
        self.logger.info("Search Stats:")
        self.logger.info(f"   Attempts: {self.stats.get('attempts', 0)}")
        self.logger.info(f"   Backtracks: {self.stats.get('backtracks', 0)}")
        self.logger.info(f"   Abandoned branches: {self.stats.get('abandoned_branches', 0)}")
        self.logger.info(f"Generation time: {elapsed:.2f} seconds")

        return output_files

    def fill_board(self) -> Optional[Board]:
        """
        Run the solver up to max_attempts times.

        Each attempt gets its own solver state; the random source carries
        on between attempts so each explores a different order.
        """
        cfg = self.config
        attempts = cfg.search.max_attempts

        for attempt in range(1, attempts + 1):
            solver = BingoBoardSolver(
                self.catalog,
                cfg.objective_difficulty,
                cfg.bingo_difficulty,
                self.tag_policy,
                rng=self.rng,
                backtrack_limit=cfg.search.backtrack_limit,
                free_depth=cfg.search.free_depth,
            )
            board = solver.solve(cfg.size)

            self.stats = dict(solver.stats)
            self.stats["attempts"] = attempt
            self.logger.info(
                f"   - Attempt {attempt}/{attempts}: "
                f"{'found' if board else 'no board'} "
                f"(backtracks: {solver.stats['backtracks']}, "
                f"deepest cell: {solver.stats['depth_record']})"
            )
            if board is not None:
                return board

        return None

    def _write_outputs(self, board: Board) -> Dict[str, str]:
        """Write every configured output format."""
        out = self.config.output
        files = {}
        base = os.path.join(out.directory, out.basename)

        if "svg" in out.formats:
            renderer = SVGBoardRenderer()
            svg = renderer.render(
                board, max_tier=self.catalog.max_tier, title=self.config.title
            )
            files["svg"] = renderer.save(svg, f"{base}.svg")

        exporter = BoardExporter()
        if "json" in out.formats:
            files["json"] = exporter.save_json(
                board, f"{base}.json", order=out.json_order
            )
        if "yaml" in out.formats:
            settings = self.config.to_dict()['board']
            files["yaml"] = exporter.save_yaml(
                board, f"{base}.yaml", settings=settings, stats=self.stats
            )

        return files


def main():
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args()

    try:
        # Load configuration
        config = load_config(args)

        # Handle dry-run
        if getattr(args, 'dry_run', False):
            print("Configuration valid:")
            print(f"  Catalog: {config.catalog}")
            print(f"  Size: {config.size}")
            print(f"  Objective tiers: {config.objective_difficulty or 'any'}")
            print(f"  Line tier sum: {config.bingo_difficulty}")
            print(f"  Tag policy: {config.tag_policy}")
            print(f"  Attempts: {config.search.max_attempts}")
            print(f"  Output Directory: {config.output.directory}")
            return

        # Generate board
        generator = BingoGenerator(config)
        if generator.generate() is None:
            sys.exit(1)

    except (ConfigValidationError, CatalogError) as e:
        print(f"Configuration error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nGeneration cancelled.")
        sys.exit(0)


if __name__ == "__main__":
    main()
