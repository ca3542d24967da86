"""
Bingo Board Validator

Re-checks a finished board against the hard rules:
1. Every cell is filled and no objective appears twice
2. Every tier lies in the per-cell range
3. Every line's tier sum lies in the per-line range
4. Items sharing a line respect the tag policy
"""

from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, List, Optional

from interval import Interval
from models import Board, TagPolicy


@dataclass
class ValidationResult:
    """Result of board validation."""
    valid: bool
    errors: List[str] = field(default_factory=list)
    stats: Dict = field(default_factory=dict)

    def __str__(self):
        status = "✅ VALID" if self.valid else "❌ INVALID"
        lines = [f"Board: {status}"]

        if self.errors:
            lines.append("\nErrors:")
            for e in self.errors:
                lines.append(f"  ❌ {e}")

        if self.stats:
            lines.append("\nStats:")
            for k, v in self.stats.items():
                lines.append(f"  {k}: {v}")

        return "\n".join(lines)


def validate_board(
    board: Board,
    objective_difficulty: Optional[Interval],
    bingo_difficulty: Interval,
    tag_policy: TagPolicy
) -> ValidationResult:
    """
    Validate a generated board.

    Args:
        board: The board to check
        objective_difficulty: Per-cell tier range (None means unrestricted)
        bingo_difficulty: Per-line tier-sum range
        tag_policy: Tag policy the board was generated under

    Returns:
        ValidationResult with one error string per violation
    """
    tag_policy = TagPolicy.from_value(tag_policy)
    result = ValidationResult(valid=True)
    result.stats["size"] = f"{board.size}x{board.size}"

    # Completeness and uniqueness
    if not board.is_full():
        result.errors.append("Board has empty cells")

    names = [item.name for item in board.items()]
    seen = set()
    for name in names:
        if name in seen:
            result.errors.append(f"Objective '{name}' appears more than once")
        seen.add(name)

    # Per-cell tiers
    if objective_difficulty is not None:
        for item in board.items():
            if not objective_difficulty.contains(item.tier):
                result.errors.append(
                    f"Objective '{item.name}' tier {item.tier} outside {objective_difficulty}"
                )

    # Lines
    line_sums = {}
    for label, cells in board.lines().items():
        items = [board.get(r, c) for r, c in cells]
        items = [i for i in items if i is not None]
        total = sum(i.tier for i in items)
        line_sums[label] = total

        if not bingo_difficulty.contains(total):
            result.errors.append(
                f"{label} tier sum {total} outside {bingo_difficulty}"
            )

        # Line cells are listed in fill order, so `b` was placed after `a`
        for a, b in combinations(items, 2):
            if tag_policy == TagPolicy.STRICT and a.tags & b.tags:
                shared = ", ".join(sorted(a.tags & b.tags))
                result.errors.append(
                    f"{label}: '{a.name}' and '{b.name}' share tags [{shared}]"
                )
            elif tag_policy == TagPolicy.PARTIAL and b.tags >= a.tags:
                result.errors.append(
                    f"{label}: '{b.name}' covers every tag of '{a.name}'"
                )

    if line_sums:
        result.stats["min_line_sum"] = min(line_sums.values())
        result.stats["max_line_sum"] = max(line_sums.values())
    result.stats["objectives"] = len(names)

    result.valid = not result.errors
    return result
