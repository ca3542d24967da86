"""
Backtracking board filler for bingo cards.
Depth-first over cells in row-major order with randomized candidate order.
"""

import logging
import random
from typing import List, Optional, Union

from constraints import count_line_constraints, narrow_pool
from interval import Interval
from models import Board, Catalog, Item, SearchState, TagPolicy

logger = logging.getLogger(__name__)

# Dead ends tolerated past FREE_DEPTH before a branch is abandoned
BACKTRACK_LIMIT = 100
# The first FREE_DEPTH cells are always fully permuted
FREE_DEPTH = 5


class BingoBoardSolver:
    """
    Fills a bingo board so every line meets the tier-sum and tag rules.

    Variables: board cells, taken in row-major order
    Domains: catalog items narrowed by the lines through each cell
    Constraints:
        - Each line's tier sum lies in bingo_difficulty
        - Each tier lies in objective_difficulty
        - No item appears twice
        - Items on a line respect the tag policy

    The search is not complete: past FREE_DEPTH filled cells, a branch
    that has accumulated BACKTRACK_LIMIT dead ends is abandoned.
    """

    def __init__(
        self,
        catalog: Catalog,
        objective_difficulty: Optional[Interval],
        bingo_difficulty: Interval,
        tag_policy: Union[TagPolicy, str],
        rng: Optional[random.Random] = None,
        backtrack_limit: int = BACKTRACK_LIMIT,
        free_depth: int = FREE_DEPTH
    ):
        """
        Initialize the solver.

        Args:
            catalog: Items available for placement
            objective_difficulty: Tier range for each cell, or None for any tier
            bingo_difficulty: Tier-sum range for each line
            tag_policy: 'none', 'partial' or 'strict'
            rng: Random source for candidate shuffling (seed it for repeatability)
            backtrack_limit: Dead ends allowed in a deep branch
            free_depth: Number of leading cells exempt from the limit

        Raises:
            ValueError: If tag_policy is unknown
        """
        self.catalog = catalog
        self.objective_difficulty = objective_difficulty or Interval.unbounded()
        self.bingo_difficulty = bingo_difficulty
        self.tag_policy = TagPolicy.from_value(tag_policy)
        self.rng = rng or random.Random()
        self.backtrack_limit = backtrack_limit
        self.free_depth = free_depth

        self.state: Optional[SearchState] = None
        self.stats = {
            "backtracks": 0,
            "depth_record": 0,
            "nodes": 0,
            "abandoned_branches": 0,
        }

    def solve(self, size: int) -> Optional[Board]:
        """
        Generate a size x size board.

        Returns:
            The filled Board, or None if this run found no board. None does
            not mean no board exists.
        """
        self.state = SearchState(board=Board(size=size))
        for key in self.stats:
            self.stats[key] = 0

        found = self._fill(self.state)

        self.stats["backtracks"] = self.state.total_backtracks
        self.stats["depth_record"] = self.state.depth_record
        if not found:
            return None
        return self.state.board

    def candidates(self, state: SearchState, row: int, col: int) -> List[Item]:
        """Catalog items admissible at (row, col) in the current state."""
        constraints = count_line_constraints(
            state.board, row, col,
            self.objective_difficulty, self.bingo_difficulty
        )
        return narrow_pool(
            self.catalog.items,
            self.tag_policy,
            constraints.tier_interval,
            constraints.exclude_tags,
            state.used_names,
        )

    def should_abandon(self, state: SearchState) -> bool:
        """
        Apply the bounded-retry rule after a dead end.

        While within the first free_depth cells the counter is reset, so
        the top of the tree is always explored in full. Deeper, the
        branch is abandoned once the counter reaches backtrack_limit.
        """
        if state.depth > self.free_depth:
            if state.backtracks >= self.backtrack_limit:
                if state.backtracks == self.backtrack_limit:
                    logger.warning(
                        f"Too much backtracking at cell {state.depth}; "
                        "abandoning this branch"
                    )
                return True
            return False
        state.backtracks = 0
        return False

    def _fill(self, state: SearchState) -> bool:
        """Recursive step. Leaves the state as it found it on failure."""
        size = state.board.size
        self.stats["nodes"] += 1

        if state.depth > state.depth_record:
            state.depth_record = state.depth
            logger.debug(f"Cell {state.depth} / {size * size}")

        if state.depth >= size * size:
            return True

        row, col = divmod(state.depth, size)

        pool = self.candidates(state, row, col)
        if not pool:
            return False
        self.rng.shuffle(pool)

        for item in pool:
            state.place(row, col, item)
            if self._fill(state):
                return True

            state.backtracks += 1
            state.total_backtracks += 1
            abandon = self.should_abandon(state)
            state.remove(row, col)
            if abandon:
                self.stats["abandoned_branches"] += 1
                break

        return False


def generate(
    size: int,
    objective_difficulty: Optional[Interval],
    bingo_difficulty: Interval,
    tag_policy: Union[TagPolicy, str],
    catalog: Catalog,
    rng: Optional[random.Random] = None
) -> Optional[Board]:
    """
    Generate one bingo board.

    Args:
        size: Board side length
        objective_difficulty: Tier range per cell; None includes all tiers
        bingo_difficulty: Tier-sum range per line
        tag_policy: 'none', 'partial' or 'strict'
        catalog: Items to draw from
        rng: Optional seeded random source

    Returns:
        A filled Board, or None if none was found by this run
    """
    solver = BingoBoardSolver(
        catalog, objective_difficulty, bingo_difficulty, tag_policy, rng=rng
    )
    return solver.solve(size)
