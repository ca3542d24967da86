# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Catalog loader for bingo objectives.

Reads the tiered objective catalog from YAML (JSON files load too, since
JSON is a subset of YAML). Two layouts are accepted:

    tiers:                 # list index is the tier
      - []                 # tier 0 may be left empty
      - - {name: "A", types: [a]}
        - {name: "B", types: [a, b]}

    objectives:            # explicit tier per entry
      - {name: "A", tier: 1, tags: [a]}

A bare top-level list is read as the `tiers` layout.
"""

import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from models import Catalog, Item

logger = logging.getLogger(__name__)

# Shipped as package data of bingo_data so any install finds it
DEFAULT_CATALOG_PATH = Path(
    str(resources.files("bingo_data").joinpath("example_catalog.yaml"))
)


class CatalogError(Exception):
    """Raised when the catalog source is missing or malformed."""
    pass


def load_catalog(path: Union[str, Path] = DEFAULT_CATALOG_PATH) -> Catalog:
    """
    Load a catalog from a YAML or JSON file.

    Args:
        path: Path to the catalog file

    Returns:
        Catalog instance

    Raises:
        CatalogError: If the file doesn't exist or any entry is malformed
    """
    path = Path(path)
    if not path.exists():
        raise CatalogError(f"Catalog file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in {path}: {e}")

    catalog = catalog_from_data(data)
    logger.info(f"Loaded {len(catalog)} objectives from {path}")
    logger.debug(f"Tier range: {catalog.min_tier}..{catalog.max_tier}")
    return catalog


def catalog_from_data(data: Any) -> Catalog:
    """Build a Catalog from already parsed YAML/JSON data."""
    if isinstance(data, list):
        data = {'tiers': data}
    if not isinstance(data, dict):
        raise CatalogError(
            f"Catalog must be a mapping or a list of tiers, got {type(data).__name__}"
        )

    items: List[Item] = []
    if 'tiers' in data:
        tiers = data['tiers']
        if not isinstance(tiers, list):
            raise CatalogError("'tiers' must be a list of lists")
        for tier, pool in enumerate(tiers):
            if pool is None:
                continue
            if not isinstance(pool, list):
                raise CatalogError(f"Tier {tier} must be a list of objectives")
            for entry in pool:
                items.append(_parse_entry(entry, tier=tier))
    elif 'objectives' in data:
        entries = data['objectives']
        if not isinstance(entries, list):
            raise CatalogError("'objectives' must be a list")
        for entry in entries:
            items.append(_parse_entry(entry))
    else:
        raise CatalogError("Catalog needs a 'tiers' or 'objectives' section")

    if not items:
        raise CatalogError("Catalog contains no objectives")

    try:
        return Catalog(items)
    except ValueError as e:
        raise CatalogError(str(e))


def _parse_entry(entry: Dict[str, Any], tier: int = None) -> Item:
    """Validate a single raw objective entry."""
    if not isinstance(entry, dict):
        raise CatalogError(f"Objective must be a mapping, got {entry!r}")

    name = entry.get('name')
    if name is None or not str(name).strip():
        raise CatalogError(f"Objective is missing a name: {entry!r}")

    if tier is None:
        tier = entry.get('tier')
        if tier is None:
            raise CatalogError(f"Objective '{name}' is missing a tier")
    if isinstance(tier, bool) or not isinstance(tier, int) or tier < 0:
        raise CatalogError(f"Objective '{name}' has invalid tier {tier!r}")

    tags = entry.get('tags', entry.get('types'))
    if tags is None:
        raise CatalogError(f"Objective '{name}' is missing tags")
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise CatalogError(f"Objective '{name}' tags must be a list of strings")

    return Item(tier=tier, name=str(name), tags=tuple(tags))
