"""
Data models for the bingo board generator.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Set, Tuple


class TagPolicy(Enum):
    """How much tag overlap is tolerated between items sharing a line."""
    NONE = "none"
    PARTIAL = "partial"
    STRICT = "strict"

    @classmethod
    def from_value(cls, value) -> 'TagPolicy':
        """
        Resolve a policy from its string form.

        Raises:
            ValueError: If the value names no known policy
        """
        if isinstance(value, cls):
            return value
        valid = ", ".join(p.value for p in cls)
        if not isinstance(value, str):
            raise ValueError(
                f"Unhandled tag policy {value!r}. Must be one of: {valid}"
            )
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(
                f"Unhandled tag policy '{value}'. Must be one of: {valid}"
            ) from None


class TraversalOrder(Enum):
    ROW_MAJOR = "row"
    COLUMN_MAJOR = "column"


@dataclass(frozen=True)
class Item:
    """A placeable catalog entry (an objective on the bingo card)."""
    tier: int
    name: str
    tags: FrozenSet[str] = field(default_factory=frozenset)
    # Tags as listed in the catalog, for display only
    tag_order: Tuple[str, ...] = field(default=(), compare=False, repr=False)

    def __post_init__(self):
        if not self.tag_order:
            if isinstance(self.tags, (set, frozenset)):
                order = tuple(sorted(self.tags))
            else:
                order = tuple(dict.fromkeys(self.tags))
            object.__setattr__(self, 'tag_order', order)
        # Accept any iterable of tags but store them frozen
        if not isinstance(self.tags, frozenset):
            object.__setattr__(self, 'tags', frozenset(self.tags))

    def has_all(self, tags: Iterable[str]) -> bool:
        """True if every given tag is on this item."""
        return all(t in self.tags for t in tags)

    def has_none(self, tags: Iterable[str]) -> bool:
        """True if none of the given tags is on this item."""
        return all(t not in self.tags for t in tags)

    def display_tags(self) -> List[str]:
        """Tags in catalog order (sorted when the order is unknown)."""
        return list(self.tag_order)


class Catalog:
    """Immutable ordered pool of items with unique names."""

    def __init__(self, items: Iterable[Item]):
        self._items: Tuple[Item, ...] = tuple(items)
        self._by_name: Dict[str, Item] = {}
        for item in self._items:
            if item.name in self._by_name:
                raise ValueError(f"Duplicate item name in catalog: {item.name}")
            self._by_name[item.name] = item

    @property
    def items(self) -> Tuple[Item, ...]:
        return self._items

    @property
    def min_tier(self) -> Optional[int]:
        return min((item.tier for item in self._items), default=None)

    @property
    def max_tier(self) -> Optional[int]:
        return max((item.tier for item in self._items), default=None)

    def get(self, name: str) -> Optional[Item]:
        return self._by_name.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


@dataclass
class Board:
    """A size x size grid of optional items, filled in row-major order."""
    size: int
    cells: List[List[Optional[Item]]] = field(default_factory=list)

    def __post_init__(self):
        if not self.cells:
            self.cells = [[None] * self.size for _ in range(self.size)]

    def get(self, row: int, col: int) -> Optional[Item]:
        return self.cells[row][col]

    def set(self, row: int, col: int, item: Optional[Item]):
        self.cells[row][col] = item

    def is_full(self) -> bool:
        return all(cell is not None for row in self.cells for cell in row)

    def items(self) -> List[Item]:
        """All placed items in row-major order."""
        return [cell for row in self.cells for cell in row if cell is not None]

    def lines(self) -> Dict[str, List[Tuple[int, int]]]:
        """Every bingo line keyed by a readable label."""
        n = self.size
        result = {}
        for r in range(n):
            result[f"row {r + 1}"] = [(r, c) for c in range(n)]
        for c in range(n):
            result[f"column {c + 1}"] = [(r, c) for r in range(n)]
        result["diagonal \\"] = [(i, i) for i in range(n)]
        result["diagonal /"] = [(i, n - 1 - i) for i in range(n)]
        return result

    def ordered_cells(
        self,
        order: TraversalOrder = TraversalOrder.ROW_MAJOR
    ) -> List[Optional[Item]]:
        """Flatten the grid in row-major or column-major order."""
        n = self.size
        if order == TraversalOrder.COLUMN_MAJOR:
            return [self.cells[r][c] for c in range(n) for r in range(n)]
        return [self.cells[r][c] for r in range(n) for c in range(n)]

    def name_grid(self) -> List[List[str]]:
        return [
            [cell.name if cell else "." for cell in row]
            for row in self.cells
        ]

    def __str__(self) -> str:
        width = max((len(i.name) for i in self.items()), default=1)
        return "\n".join(
            " ".join(name.ljust(width) for name in row)
            for row in self.name_grid()
        )


@dataclass
class SearchState:
    """
    Mutable bookkeeping for one generation attempt.

    used_names always equals the set of names currently on the board;
    place() and remove() are the only mutators that keep it so.
    """
    board: Board
    depth: int = 0
    depth_record: int = 0
    backtracks: int = 0
    total_backtracks: int = 0
    used_names: Set[str] = field(default_factory=set)

    def place(self, row: int, col: int, item: Item):
        self.board.set(row, col, item)
        self.used_names.add(item.name)
        self.depth += 1

    def remove(self, row: int, col: int):
        item = self.board.get(row, col)
        if item is not None:
            self.used_names.discard(item.name)
        self.board.set(row, col, None)
        self.depth -= 1
