# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Functional tests for bingo generator."""

import json
import logging
import os
import sys
import shutil
import tempfile
import unittest

import yaml

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bingo_generator import BingoGenerator
from board_exporter import BoardExporter, BoardExportError
from config import BingoConfig
from interval import Interval
from models import Board, Catalog, Item, TagPolicy, TraversalOrder
from svg_renderer import SVGBoardRenderer, tier_color, wrap_text
from validator import validate_board


def small_catalog() -> Catalog:
    """Three items in each of tiers 1-3, every tag distinct."""
    items = []
    letters = iter("abcdefghi")
    for tier in (1, 2, 3):
        for _ in range(3):
            tag = next(letters)
            items.append(Item(tier=tier, name=tag.upper(), tags={tag}))
    return Catalog(items)


def two_by_two() -> Board:
    board = Board(size=2)
    board.set(0, 0, Item(1, "A", {"a"}))
    board.set(0, 1, Item(2, "B", {"b"}))
    board.set(1, 0, Item(2, "C", {"c"}))
    board.set(1, 1, Item(1, "D", {"d"}))
    return board


def close_log_handlers():
    root = logging.getLogger()
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)


class TestBingoGenerator(unittest.TestCase):
    """End-to-end generation into a temporary directory."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config = BingoConfig(
            size=3,
            objective_difficulty=[1, 3],
            bingo_difficulty=[5, 7],
            tag_policy="strict",
            search={'seed': 3},
            output={
                'directory': self.temp_dir,
                'formats': ["svg", "json", "yaml"],
                'enable_console_logging': False,
            },
        )

    def tearDown(self):
        close_log_handlers()
        shutil.rmtree(self.temp_dir)

    def test_generate_writes_all_formats(self):
        generator = BingoGenerator(self.config, catalog=small_catalog())
        files = generator.generate()

        self.assertIsNotNone(files)
        self.assertEqual(set(files), {"svg", "json", "yaml"})
        for path in files.values():
            self.assertTrue(os.path.exists(path), path)

        self.assertIsNotNone(generator.log_file_path)
        self.assertTrue(os.path.exists(generator.log_file_path))
        self.assertEqual(generator.stats["attempts"], 1)

    def test_json_output_is_column_major(self):
        generator = BingoGenerator(self.config, catalog=small_catalog())
        files = generator.generate()

        with open(files["json"], encoding='utf-8') as f:
            records = json.load(f)

        expected = [
            {"name": item.name}
            for item in generator.board.ordered_cells(TraversalOrder.COLUMN_MAJOR)
        ]
        self.assertEqual(records, expected)
        self.assertEqual(len(records), 9)

    def test_yaml_output_round_trips_board(self):
        generator = BingoGenerator(self.config, catalog=small_catalog())
        files = generator.generate()

        with open(files["yaml"], encoding='utf-8') as f:
            data = yaml.safe_load(f)

        self.assertEqual(data['metadata']['size'], 3)
        self.assertEqual(data['settings']['tag_policy'], "strict")
        self.assertEqual(
            [[cell['name'] for cell in row] for row in data['board']],
            generator.board.name_grid()
        )
        for label, total in data['line_sums'].items():
            self.assertTrue(5 <= total <= 7, label)

    def test_same_seed_same_board(self):
        first = BingoGenerator(self.config, catalog=small_catalog())
        first.generate()
        second = BingoGenerator(self.config, catalog=small_catalog())
        second.generate()

        self.assertEqual(first.board.name_grid(), second.board.name_grid())

    def test_failure_returns_none(self):
        """An unreachable line target writes nothing and returns None."""
        self.config.bingo_difficulty = Interval(100, 200)
        self.config.search.max_attempts = 3
        self.config.output.formats = ["json"]

        generator = BingoGenerator(self.config, catalog=small_catalog())

        self.assertIsNone(generator.generate())
        self.assertIsNone(generator.board)
        self.assertEqual(generator.stats["attempts"], 3)
        self.assertFalse(
            os.path.exists(os.path.join(self.temp_dir, "bingo.json"))
        )

    def test_example_catalog_loads_by_default(self):
        self.config.output.formats = []
        generator = BingoGenerator(self.config)
        self.assertEqual(len(generator.catalog), 26)

    def test_default_settings_fill_example_catalog(self):
        """The shipped defaults produce a board from the bundled catalog."""
        config = BingoConfig(
            search={'seed': 0, 'max_attempts': 3},
            output={
                'directory': self.temp_dir,
                'formats': ["json"],
                'enable_console_logging': False,
            },
        )
        generator = BingoGenerator(config)
        files = generator.generate()

        self.assertIsNotNone(files)
        result = validate_board(
            generator.board, config.objective_difficulty,
            config.bingo_difficulty, TagPolicy.STRICT
        )
        self.assertTrue(result.valid, str(result))


class TestBoardExporter(unittest.TestCase):
    """Tests for JSON and YAML export."""

    def setUp(self):
        self.exporter = BoardExporter()
        self.board = two_by_two()

    def test_column_major_by_default(self):
        names = [r["name"] for r in self.exporter.to_records(self.board)]
        self.assertEqual(names, ["A", "C", "B", "D"])

    def test_row_major(self):
        names = [r["name"] for r in self.exporter.to_records(self.board, "row")]
        self.assertEqual(names, ["A", "B", "C", "D"])

    def test_json_format(self):
        text = self.exporter.to_json(self.board, "row")
        self.assertTrue(text.endswith("\n"))
        self.assertEqual(json.loads(text)[1], {"name": "B"})

    def test_unfilled_board_rejected(self):
        board = Board(size=2)
        board.set(0, 0, Item(1, "A"))
        with self.assertRaises(BoardExportError):
            self.exporter.to_records(board)
        with self.assertRaises(BoardExportError):
            self.exporter.to_yaml(board)

    def test_yaml_content(self):
        text = self.exporter.to_yaml(self.board, stats={'backtracks': 4})
        self.assertTrue(text.startswith("# Bingo Board"))

        data = yaml.safe_load(text)
        self.assertEqual(data['stats']['backtracks'], 4)
        self.assertEqual(data['board'][0][1], {'name': 'B', 'tier': 2, 'tags': ['b']})
        self.assertEqual(data['line_sums']['row 1'], 3)
        self.assertEqual(data['line_sums']['diagonal /'], 4)


class TestSVGRenderer(unittest.TestCase):
    """Tests for the SVG board image."""

    def test_render_contains_every_objective(self):
        svg = SVGBoardRenderer().render(two_by_two(), max_tier=2, title="Test")

        self.assertTrue(svg.startswith("<svg"))
        self.assertTrue(svg.endswith("</svg>"))
        self.assertIn("<title>Test</title>", svg)
        for name in "ABCD":
            self.assertIn(f'class="name">{name}</text>', svg)
        self.assertIn("hsl(0, 100%, 50%)", svg)
        self.assertIn("hsl(60, 100%, 50%)", svg)

    def test_text_is_escaped(self):
        board = Board(size=1)
        board.set(0, 0, Item(1, "Salt & Tea", {"<food>"}))
        svg = SVGBoardRenderer().render(board)

        self.assertIn('class="name">Salt &amp; Tea</text>', svg)
        self.assertIn("&lt;food&gt;", svg)

    def test_long_name_wraps_into_lines(self):
        """A 1x1 cell fits 11 name characters per line."""
        board = Board(size=1)
        board.set(0, 0, Item(1, "Fish & Chips", {"food"}))
        svg = SVGBoardRenderer().render(board)

        self.assertIn('class="name">Fish &amp;</text>', svg)
        self.assertIn('class="name">Chips</text>', svg)

    def test_tag_footer_keeps_catalog_order(self):
        board = Board(size=1)
        board.set(0, 0, Item(1, "Swim", ["water", "cold"]))
        svg = SVGBoardRenderer().render(board)

        self.assertIn('class="tags">water + cold</text>', svg)

    def test_save_creates_directories(self):
        temp_dir = tempfile.mkdtemp()
        try:
            path = os.path.join(temp_dir, "nested", "board.svg")
            SVGBoardRenderer().save("<svg></svg>", path)
            self.assertTrue(os.path.exists(path))
        finally:
            shutil.rmtree(temp_dir)

    def test_tier_color(self):
        self.assertEqual(tier_color(0, 7), "hsl(120, 100%, 50%)")
        self.assertEqual(tier_color(7, 7), "hsl(0, 100%, 50%)")
        self.assertEqual(tier_color(1, 2), "hsl(60, 100%, 50%)")
        self.assertEqual(tier_color(3, 0), "hsl(120, 100%, 50%)")

    def test_wrap_text(self):
        self.assertEqual(
            wrap_text("Collect all the gems", 100, 20),
            ["Collect", "all the", "gems"]
        )
        self.assertEqual(wrap_text("Supercalifragilistic", 50, 20), ["Supercalifragilistic"])
        self.assertEqual(wrap_text("Two\nlines", 1000, 20), ["Two", "lines"])


class TestValidator(unittest.TestCase):
    """Tests for board validation."""

    def test_valid_board(self):
        result = validate_board(
            two_by_two(), Interval(1, 2), Interval(2, 4), TagPolicy.STRICT
        )
        self.assertTrue(result.valid, str(result))
        self.assertEqual(result.stats["min_line_sum"], 2)
        self.assertEqual(result.stats["max_line_sum"], 4)

    def test_line_sum_violation(self):
        result = validate_board(
            two_by_two(), None, Interval(3, 3), TagPolicy.NONE
        )
        self.assertFalse(result.valid)
        # Both diagonals sum to 2 and 4
        self.assertEqual(len(result.errors), 2)

    def test_tier_violation(self):
        result = validate_board(
            two_by_two(), Interval(1, 1), Interval(2, 4), TagPolicy.NONE
        )
        self.assertEqual(len(result.errors), 2)

    def test_shared_tags_and_duplicates(self):
        board = Board(size=2)
        board.set(0, 0, Item(1, "A", {"a", "b"}))
        board.set(0, 1, Item(1, "B", {"a"}))
        board.set(1, 0, Item(1, "C", {"c"}))
        board.set(1, 1, Item(1, "C", {"c"}))

        strict = validate_board(board, None, Interval(2, 2), "strict")
        self.assertTrue(any("appears more than once" in e for e in strict.errors))
        self.assertTrue(any("share tags [a]" in e for e in strict.errors))

        # B's tags are a subset of A's, so B does not cover A
        partial = validate_board(board, None, Interval(2, 2), "partial")
        self.assertFalse(any("'B' covers" in e for e in partial.errors))
        self.assertTrue(any("'C' covers every tag of 'C'" in e for e in partial.errors))

    def test_empty_cells(self):
        result = validate_board(Board(size=2), None, Interval(0, 0), TagPolicy.NONE)
        self.assertIn("Board has empty cells", result.errors)


if __name__ == '__main__':
    unittest.main()
