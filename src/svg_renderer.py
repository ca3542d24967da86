"""
SVG Renderer for bingo boards.
Draws each objective's name, its tags and a tier badge coloured from
green (easy) to red (hard).
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from xml.sax.saxutils import escape

from models import Board


@dataclass
class SVGConfig:
    """Configuration for SVG rendering."""
    cell_size: int = 256
    stroke_weight: int = 15

    # Colors
    background_color: str = "rgb(51,51,51)"
    grid_color: str = "rgb(0,0,0)"
    name_color: str = "rgb(255,255,255)"
    tag_color: str = "rgb(128,128,128)"

    # Fonts
    font_family: str = "sans-serif"
    name_font_size: int = 36
    tag_font_size: int = 18

    # Padding
    text_padding: int = 5
    tag_line_height: int = 22
    badge_width: int = 35


class SVGBoardRenderer:
    """Renders bingo boards as SVG."""

    def __init__(self, config: Optional[SVGConfig] = None):
        self.config = config or SVGConfig()

    def render(
        self,
        board: Board,
        max_tier: Optional[int] = None,
        title: str = "Bingo"
    ) -> str:
        """
        Render SVG from a filled board.

        Args:
            board: The board to draw
            max_tier: Tier drawn fully red; defaults to the board's highest tier
            title: Accessible title of the image

        Returns:
            SVG string
        """
        cfg = self.config
        size = board.size
        stroke = cfg.stroke_weight
        width = size * cfg.cell_size + stroke
        height = size * cfg.cell_size + stroke

        if max_tier is None:
            max_tier = max((item.tier for item in board.items()), default=0)

        svg_parts = []

        # SVG header
        svg_parts.append(
            f'<svg xmlns="http://www.w3.org/2000/svg" '
            f'viewBox="0 0 {width} {height}" '
            f'width="{width}" height="{height}">'
        )
        svg_parts.append(f'  <title>{escape(title)}</title>')

        # Styles
        svg_parts.append('  <style>')
        svg_parts.append(f'    .cell {{ fill: none; stroke: {cfg.grid_color}; stroke-width: {stroke}; }}')
        svg_parts.append(f'    .name {{ font: bold {cfg.name_font_size}px {cfg.font_family}; fill: {cfg.name_color}; text-anchor: middle; dominant-baseline: middle; }}')
        svg_parts.append(f'    .tags {{ font: bold {cfg.tag_font_size}px {cfg.font_family}; fill: {cfg.tag_color}; }}')
        svg_parts.append(f'    .tier {{ font: bold {cfg.tag_font_size}px {cfg.font_family}; text-anchor: end; }}')
        svg_parts.append('  </style>')

        # Background
        svg_parts.append(
            f'  <rect x="0" y="0" width="{width}" height="{height}" '
            f'fill="{cfg.background_color}" />'
        )

        for row in range(size):
            for col in range(size):
                item = board.get(row, col)
                x = col * cfg.cell_size + stroke
                y = row * cfg.cell_size + stroke
                w = cfg.cell_size - stroke
                h = cfg.cell_size - stroke

                svg_parts.append(
                    f'  <rect x="{x - stroke / 2}" y="{y - stroke / 2}" '
                    f'width="{w + stroke}" height="{h + stroke}" class="cell" />'
                )
                if item is None:
                    continue

                # Objective name, centred and wrapped
                name_lines = wrap_text(item.name, w, cfg.name_font_size)
                for idx, line in enumerate(name_lines):
                    offset = (0.6 * (1 - len(name_lines)) + idx) * h * 0.2
                    svg_parts.append(
                        f'  <text x="{x + 0.5 * w}" y="{y + h / 2 + offset}" '
                        f'class="name">{escape(line)}</text>'
                    )

                # Tags along the bottom edge
                tag_width = w - 2 * cfg.text_padding - cfg.badge_width
                tag_lines = wrap_text(
                    " + ".join(item.display_tags()), tag_width, cfg.tag_font_size
                )
                for idx, line in enumerate(tag_lines):
                    ty = y + h - cfg.text_padding + (idx + 1 - len(tag_lines)) * cfg.tag_line_height
                    svg_parts.append(
                        f'  <text x="{x + cfg.text_padding}" y="{ty}" '
                        f'class="tags">{escape(line)}</text>'
                    )

                # Tier badge
                right = x + w - cfg.text_padding
                bottom = y + h - cfg.text_padding
                svg_parts.append(
                    f'  <text x="{right}" y="{bottom}" class="tier" '
                    f'fill="{cfg.tag_color}">diff</text>'
                )
                svg_parts.append(
                    f'  <text x="{right}" y="{bottom - cfg.tag_line_height}" '
                    f'class="tier" fill="{tier_color(item.tier, max_tier)}">{item.tier}</text>'
                )

        svg_parts.append('</svg>')

        return '\n'.join(svg_parts)

    def save(self, svg_content: str, filepath: str) -> str:
        """Save SVG to file."""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(svg_content)
        return str(path)


def tier_color(tier: int, max_tier: int) -> str:
    """Hue from 120 (green) at tier 0 down to 0 (red) at max_tier."""
    if not max_tier:
        return "hsl(120, 100%, 50%)"
    hue = 120 * (1 - tier / max_tier)
    return f"hsl({hue:g}, 100%, 50%)"


def wrap_text(text: str, line_width: float, font_size: int) -> List[str]:
    """
    Greedy word wrap using an average glyph width estimate.

    Newlines in the text always break. A single word longer than the
    line is kept whole.
    """
    char_width = font_size * 0.6
    max_chars = max(1, int(line_width // char_width))

    lines = []
    for paragraph in text.split('\n'):
        line = ''
        for word in paragraph.split(' '):
            candidate = f"{line} {word}".strip()
            if len(candidate) > max_chars and line:
                lines.append(line)
                line = word
            else:
                line = candidate
        lines.append(line)
    return lines
