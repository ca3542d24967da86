# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Unit tests for catalog loading."""

import json
import os
import sys
import tempfile
import unittest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from catalog import DEFAULT_CATALOG_PATH, CatalogError, catalog_from_data, load_catalog
from models import Catalog, Item


class TestExampleCatalog(unittest.TestCase):
    """Tests for the bundled example catalog."""

    def test_default_path_inside_data_package(self):
        """The example ships as package data, not beside the modules."""
        self.assertEqual(DEFAULT_CATALOG_PATH.parent.name, "bingo_data")
        self.assertTrue(DEFAULT_CATALOG_PATH.is_file())

    def test_load_default(self):
        catalog = load_catalog()

        self.assertEqual(len(catalog), 26)
        self.assertEqual(catalog.min_tier, 1)
        self.assertEqual(catalog.max_tier, 7)

    def test_tier_from_list_index(self):
        catalog = load_catalog()

        self.assertEqual(catalog.get("A").tier, 1)
        self.assertEqual(catalog.get("D").tier, 2)
        self.assertEqual(catalog.get("Z").tier, 7)
        self.assertEqual(catalog.get("B").tags, frozenset({"a", "b"}))

    def test_order_preserved(self):
        catalog = load_catalog()
        self.assertEqual([i.name for i in catalog][:4], ["A", "B", "C", "D"])


class TestCatalogFromData(unittest.TestCase):
    """Tests for catalog validation."""

    def test_objectives_layout(self):
        catalog = catalog_from_data({
            'objectives': [
                {'name': 'Swim', 'tier': 2, 'tags': ['water']},
                {'name': 'Climb', 'tier': 0, 'tags': []},
            ]
        })
        self.assertEqual(len(catalog), 2)
        self.assertEqual(catalog.get("Swim").tier, 2)
        self.assertEqual(catalog.min_tier, 0)

    def test_tag_order_kept_for_display(self):
        catalog = catalog_from_data({
            'objectives': [{'name': 'Swim', 'tier': 1, 'tags': ['water', 'cold']}]
        })
        self.assertEqual(catalog.get("Swim").display_tags(), ["water", "cold"])

    def test_bare_list_is_tiers(self):
        catalog = catalog_from_data([[], [{'name': 'A', 'types': ['a']}]])
        self.assertEqual(catalog.get("A").tier, 1)

    def test_missing_name(self):
        with self.assertRaises(CatalogError):
            catalog_from_data({'tiers': [[{'types': ['a']}]]})

    def test_missing_tags(self):
        with self.assertRaises(CatalogError):
            catalog_from_data({'tiers': [[{'name': 'A'}]]})

    def test_tags_must_be_list_of_strings(self):
        with self.assertRaises(CatalogError):
            catalog_from_data({'tiers': [[{'name': 'A', 'types': 'a'}]]})
        with self.assertRaises(CatalogError):
            catalog_from_data({'tiers': [[{'name': 'A', 'types': [1]}]]})

    def test_missing_tier(self):
        with self.assertRaises(CatalogError):
            catalog_from_data({'objectives': [{'name': 'A', 'tags': []}]})

    def test_negative_tier(self):
        with self.assertRaises(CatalogError):
            catalog_from_data({'objectives': [{'name': 'A', 'tier': -1, 'tags': []}]})

    def test_duplicate_names(self):
        with self.assertRaises(CatalogError):
            catalog_from_data({'tiers': [
                [{'name': 'A', 'types': ['a']}],
                [{'name': 'A', 'types': ['b']}],
            ]})

    def test_empty_catalog(self):
        with self.assertRaises(CatalogError):
            catalog_from_data({'tiers': [[], []]})

    def test_unknown_layout(self):
        with self.assertRaises(CatalogError):
            catalog_from_data({'items': []})
        with self.assertRaises(CatalogError):
            catalog_from_data("A, B, C")

    def test_catalog_rejects_duplicates_directly(self):
        with self.assertRaises(ValueError):
            Catalog([Item(1, "A"), Item(2, "A")])


class TestCatalogFiles(unittest.TestCase):
    """Tests for reading catalog files."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        for name in os.listdir(self.temp_dir):
            os.unlink(os.path.join(self.temp_dir, name))
        os.rmdir(self.temp_dir)

    def _write(self, name, content):
        path = os.path.join(self.temp_dir, name)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path

    def test_load_json(self):
        path = self._write('catalog.json', json.dumps([
            [],
            [{"name": "A", "types": ["a"]}, {"name": "B", "types": ["a", "b"]}],
        ]))
        catalog = load_catalog(path)
        self.assertEqual(len(catalog), 2)

    def test_nonexistent_file(self):
        with self.assertRaises(CatalogError):
            load_catalog(os.path.join(self.temp_dir, 'missing.yaml'))

    def test_invalid_yaml(self):
        path = self._write('broken.yaml', "tiers: [[{name: A\n")
        with self.assertRaises(CatalogError):
            load_catalog(path)


if __name__ == '__main__':
    unittest.main()
