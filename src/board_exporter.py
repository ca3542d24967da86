# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Exporters for generated bingo boards.

Writes the BingoSync-style JSON list (one {"name": ...} record per cell)
and a YAML record carrying the board, its settings and generation stats.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from models import Board, TraversalOrder


class BoardExportError(Exception):
    """Raised when a board cannot be exported."""
    pass


class BoardExporter:
    """
    Exports bingo boards to JSON and YAML.

    Usage:
        exporter = BoardExporter()
        exporter.save_json(board, 'out/bingo.json')
        exporter.save_yaml(board, 'out/bingo.yaml', stats=solver.stats)
    """

    def to_records(
        self,
        board: Board,
        order: Union[TraversalOrder, str] = TraversalOrder.COLUMN_MAJOR
    ) -> List[Dict[str, str]]:
        """
        One record per cell in the requested traversal order.

        BingoSync reads cards column by column, hence the default.

        Raises:
            BoardExportError: If the board has empty cells
        """
        order = TraversalOrder(order)
        if not board.is_full():
            raise BoardExportError("Cannot export a board with empty cells")
        return [{"name": item.name} for item in board.ordered_cells(order)]

    def to_json(
        self,
        board: Board,
        order: Union[TraversalOrder, str] = TraversalOrder.COLUMN_MAJOR
    ) -> str:
        """Export board to a JSON string."""
        return json.dumps(
            self.to_records(board, order), indent=4, ensure_ascii=False
        ) + "\n"

    def to_yaml(
        self,
        board: Board,
        settings: Optional[Dict[str, Any]] = None,
        stats: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Export board to a YAML string.

        Args:
            board: The filled board
            settings: Generation settings (size, ranges, tag policy...)
            stats: Solver statistics

        Returns:
            YAML string representation of the board
        """
        if not board.is_full():
            raise BoardExportError("Cannot export a board with empty cells")

        data = {
            'metadata': {
                'date': datetime.now().strftime("%Y-%m-%d"),
                'size': board.size,
            },
            'settings': settings or {},
            'stats': stats or {},
            'board': [
                [
                    {
                        'name': item.name,
                        'tier': item.tier,
                        'tags': item.display_tags(),
                    }
                    for item in row
                ]
                for row in board.cells
            ],
            'line_sums': {
                label: sum(board.get(r, c).tier for r, c in cells)
                for label, cells in board.lines().items()
            },
        }

        header = "# Bingo Board\n"
        header += "# Generated board with settings and search statistics\n\n"

        yaml_content = yaml.dump(
            data,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            indent=2,
            width=80,
        )
        return header + yaml_content

    def save_json(
        self,
        board: Board,
        path: str,
        order: Union[TraversalOrder, str] = TraversalOrder.COLUMN_MAJOR
    ) -> str:
        """Save board as JSON. Returns the path written."""
        return self._write(path, self.to_json(board, order))

    def save_yaml(
        self,
        board: Board,
        path: str,
        settings: Optional[Dict[str, Any]] = None,
        stats: Optional[Dict[str, Any]] = None
    ) -> str:
        """Save board as YAML. Returns the path written."""
        return self._write(path, self.to_yaml(board, settings, stats))

    def _write(self, path: str, content: str) -> str:
        # Ensure directory exists
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)

        return str(path)
