# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Per-cell constraint calculation and candidate filtering.

For a target cell, every bingo line passing through it (its row, its
column, and each diagonal it sits on) narrows the tier the cell may take:
the line's target sum minus what the other cells contribute. Filled cells
contribute their exact tier; empty cells contribute the whole per-cell
interval, since a later fill could take any admissible tier. The result
never rejects a tier that could still complete the line, but may reject
some that a full look-ahead would accept.
"""

from dataclasses import dataclass, field
from typing import AbstractSet, FrozenSet, Iterable, List, Tuple

from interval import Interval
from models import Board, Item, TagPolicy


@dataclass
class LineConstraints:
    """What the lines through one cell allow."""
    tier_interval: Interval
    exclude_tags: List[FrozenSet[str]] = field(default_factory=list)


def lines_through(size: int, row: int, col: int) -> List[List[Tuple[int, int]]]:
    """Cells of each line passing through (row, col), the cell itself included."""
    lines = [
        [(row, i) for i in range(size)],
        [(i, col) for i in range(size)],
    ]
    if row == col:
        lines.append([(i, i) for i in range(size)])
    if row + col == size - 1:
        lines.append([(i, size - 1 - i) for i in range(size)])
    return lines


def count_line_constraints(
    board: Board,
    row: int,
    col: int,
    objective_difficulty: Interval,
    bingo_difficulty: Interval
) -> LineConstraints:
    """
    Derive the admissible tier interval and forbidden tag-sets for a cell.

    Args:
        board: The partially filled board
        row: Target row
        col: Target column
        objective_difficulty: Admissible tier of any single cell
        bingo_difficulty: Admissible tier sum of any line

    Returns:
        LineConstraints; the interval may be empty
    """
    tier_interval = objective_difficulty
    exclude_tags: List[FrozenSet[str]] = []

    for line in lines_through(board.size, row, col):
        remaining = bingo_difficulty
        for r, c in line:
            if (r, c) == (row, col):
                continue
            cell = board.get(r, c)
            if cell is None:
                remaining = remaining.minus(objective_difficulty)
            else:
                remaining = remaining.minus(Interval.of(cell.tier))
                exclude_tags.append(cell.tags)
        tier_interval = Interval.intersect(tier_interval, remaining)

    return LineConstraints(tier_interval=tier_interval, exclude_tags=exclude_tags)


def narrow_pool(
    items: Iterable[Item],
    tag_policy: TagPolicy,
    tier_interval: Interval,
    exclude_tags: List[FrozenSet[str]],
    exclude_names: AbstractSet[str]
) -> List[Item]:
    """
    Items that may go into a cell.

    Every returned item has a tier inside tier_interval and a name not in
    exclude_names. The tag policy then applies against each forbidden set:
    `none` ignores tags, `partial` drops items whose tags cover a whole
    forbidden set, `strict` drops items sharing any tag with one.

    Raises:
        ValueError: If tag_policy is not a known policy
    """
    tag_policy = TagPolicy.from_value(tag_policy)
    base = [
        item for item in items
        if tier_interval.contains(item.tier) and item.name not in exclude_names
    ]

    if tag_policy == TagPolicy.NONE:
        return base
    if tag_policy == TagPolicy.PARTIAL:
        return [
            item for item in base
            if not any(item.has_all(tags) for tags in exclude_tags)
        ]
    if tag_policy == TagPolicy.STRICT:
        return [
            item for item in base
            if all(item.has_none(tags) for tags in exclude_tags)
        ]
    raise ValueError(f"Unhandled tag policy: {tag_policy}")
