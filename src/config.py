# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Configuration module for the bingo board generator.

Handles loading configuration from YAML files and command-line arguments,
with proper merging and validation.
"""

import argparse
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from board_solver import BACKTRACK_LIMIT, FREE_DEPTH
from catalog import DEFAULT_CATALOG_PATH
from interval import Interval
from models import TagPolicy, TraversalOrder

# Valid configuration values
VALID_TAG_POLICIES = [p.value for p in TagPolicy]
VALID_OUTPUT_FORMATS = ["svg", "json", "yaml"]
VALID_JSON_ORDERS = [o.value for o in TraversalOrder]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# --objective-range values meaning "no per-cell limit"
ANY_RANGE = ("any", "all", "none")


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


@dataclass
class SearchConfig:
    """Configuration for the backtracking search."""
    max_attempts: int = 1
    seed: Optional[int] = None
    backtrack_limit: int = BACKTRACK_LIMIT
    free_depth: int = FREE_DEPTH


@dataclass
class OutputConfig:
    """Configuration for output."""
    directory: str = "./out"
    basename: str = "bingo"
    formats: List[str] = field(default_factory=lambda: ["svg", "json"])
    json_order: str = "column"
    log_level: str = "INFO"
    log_file_prefix: str = "bingo_generator"
    enable_console_logging: bool = True


@dataclass
class BingoConfig:
    """Complete configuration for board generation."""
    # Board settings
    size: int = 5
    # Sized for the bundled example catalog (tiers 1-7)
    objective_difficulty: Optional[Interval] = None
    bingo_difficulty: Interval = field(default_factory=lambda: Interval(15, 25))
    tag_policy: str = "strict"
    catalog: str = str(DEFAULT_CATALOG_PATH)
    title: str = "Bingo"

    # Sub-configurations
    search: SearchConfig = field(default_factory=SearchConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def __post_init__(self):
        """Convert raw values to intervals and dataclass instances if needed."""
        if self.objective_difficulty is not None:
            self.objective_difficulty = _parse_interval(
                self.objective_difficulty, 'objective_difficulty'
            )
        self.bingo_difficulty = _parse_interval(
            self.bingo_difficulty, 'bingo_difficulty'
        )
        if isinstance(self.search, dict):
            self.search = _build_section(SearchConfig, self.search, 'search')
        if isinstance(self.output, dict):
            self.output = _build_section(OutputConfig, self.output, 'output')

    @classmethod
    def from_yaml(cls, path: str) -> 'BingoConfig':
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            BingoConfig instance

        Raises:
            ConfigValidationError: If file doesn't exist or is invalid
        """
        path = Path(path)
        if not path.exists():
            raise ConfigValidationError(f"Configuration file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML in {path}: {e}")

        if not isinstance(data, dict):
            raise ConfigValidationError(
                f"Configuration file must contain a YAML mapping, got {type(data)}"
            )

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'BingoConfig':
        """Create BingoConfig from dictionary."""
        # Handle nested 'board' key
        board_data = _section(data, 'board')
        default = cls()

        config = cls(
            size=board_data.get('size', default.size),
            objective_difficulty=board_data.get(
                'objective_difficulty', default.objective_difficulty
            ),
            bingo_difficulty=board_data.get(
                'bingo_difficulty', default.bingo_difficulty
            ),
            tag_policy=board_data.get('tag_policy', default.tag_policy),
            catalog=board_data.get('catalog', default.catalog),
            title=board_data.get('title', default.title),
        )

        # Load sub-configurations
        if data.get('search') is not None:
            search_data = _section(data, 'search')
            config.search = SearchConfig(
                max_attempts=search_data.get(
                    'max_attempts', config.search.max_attempts
                ),
                seed=search_data.get('seed', config.search.seed),
                backtrack_limit=search_data.get(
                    'backtrack_limit', config.search.backtrack_limit
                ),
                free_depth=search_data.get(
                    'free_depth', config.search.free_depth
                ),
            )

        if data.get('output') is not None:
            out_data = _section(data, 'output')
            config.output = OutputConfig(
                directory=out_data.get('directory', config.output.directory),
                basename=out_data.get('basename', config.output.basename),
                formats=out_data.get('formats', config.output.formats),
                json_order=out_data.get('json_order', config.output.json_order),
                log_level=out_data.get('log_level', config.output.log_level),
                log_file_prefix=out_data.get(
                    'log_file_prefix', config.output.log_file_prefix
                ),
                enable_console_logging=out_data.get(
                    'enable_console_logging',
                    config.output.enable_console_logging
                ),
            )

        return config

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> 'BingoConfig':
        """
        Create configuration from command-line arguments.

        Args:
            args: Parsed command-line arguments

        Returns:
            BingoConfig instance
        """
        config = cls()

        # Map CLI arguments to config
        if getattr(args, 'size', None):
            config.size = args.size
        if getattr(args, 'objective_range', None):
            if args.objective_range.lower() in ANY_RANGE:
                config.objective_difficulty = None
            else:
                config.objective_difficulty = _parse_interval(
                    args.objective_range, '--objective-range'
                )
        if getattr(args, 'line_range', None):
            config.bingo_difficulty = _parse_interval(
                args.line_range, '--line-range'
            )
        if getattr(args, 'tag_policy', None):
            config.tag_policy = args.tag_policy
        if getattr(args, 'catalog', None):
            config.catalog = args.catalog
        if getattr(args, 'title', None):
            config.title = args.title
        if getattr(args, 'attempts', None):
            config.search.max_attempts = args.attempts
        if getattr(args, 'seed', None) is not None:
            config.search.seed = args.seed
        if getattr(args, 'output', None):
            config.output.directory = args.output
        if getattr(args, 'format', None):
            config.output.formats = args.format.split(',')
        if getattr(args, 'verbose', False):
            config.output.log_level = "DEBUG"

        return config

    @classmethod
    def merge(
        cls,
        yaml_config: 'BingoConfig',
        cli_config: 'BingoConfig'
    ) -> 'BingoConfig':
        """
        Merge configurations with CLI taking precedence over YAML.

        Args:
            yaml_config: Configuration loaded from YAML file
            cli_config: Configuration from command-line arguments

        Returns:
            Merged BingoConfig instance
        """
        # Start with YAML config as base
        merged = BingoConfig(
            size=yaml_config.size,
            objective_difficulty=yaml_config.objective_difficulty,
            bingo_difficulty=yaml_config.bingo_difficulty,
            tag_policy=yaml_config.tag_policy,
            catalog=yaml_config.catalog,
            title=yaml_config.title,
            search=yaml_config.search,
            output=yaml_config.output,
        )

        # Override with CLI values (non-default values)
        default = cls()

        if cli_config.size != default.size:
            merged.size = cli_config.size
        if cli_config.objective_difficulty != default.objective_difficulty:
            merged.objective_difficulty = cli_config.objective_difficulty
        if cli_config.bingo_difficulty != default.bingo_difficulty:
            merged.bingo_difficulty = cli_config.bingo_difficulty
        if cli_config.tag_policy != default.tag_policy:
            merged.tag_policy = cli_config.tag_policy
        if cli_config.catalog != default.catalog:
            merged.catalog = cli_config.catalog
        if cli_config.title != default.title:
            merged.title = cli_config.title
        if cli_config.search.max_attempts != default.search.max_attempts:
            merged.search.max_attempts = cli_config.search.max_attempts
        if cli_config.search.seed is not None:
            merged.search.seed = cli_config.search.seed
        if cli_config.output.directory != default.output.directory:
            merged.output.directory = cli_config.output.directory
        if cli_config.output.formats != default.output.formats:
            merged.output.formats = cli_config.output.formats
        if cli_config.output.log_level != default.output.log_level:
            merged.output.log_level = cli_config.output.log_level

        return merged

    def validate(self) -> List[str]:
        """
        Validate configuration values.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        # Validate size
        if not isinstance(self.size, int) or self.size < 1:
            errors.append(f"Invalid size {self.size}. Must be a positive integer")

        # Validate intervals
        if self.objective_difficulty is not None and self.objective_difficulty.is_empty:
            errors.append(
                f"objective_difficulty {self.objective_difficulty} is empty"
            )
        if self.bingo_difficulty.is_empty:
            errors.append(f"bingo_difficulty {self.bingo_difficulty} is empty")

        # Validate tag policy
        try:
            TagPolicy.from_value(self.tag_policy)
        except ValueError:
            errors.append(
                f"Invalid tag policy {self.tag_policy!r}. "
                f"Must be one of: {VALID_TAG_POLICIES}"
            )

        # Validate search settings
        if self.search.max_attempts < 1:
            errors.append("max_attempts must be at least 1")
        if self.search.backtrack_limit < 1:
            errors.append("backtrack_limit must be at least 1")
        if self.search.free_depth < 0:
            errors.append("free_depth must be non-negative")

        # Validate output formats
        for fmt in self.output.formats:
            if fmt not in VALID_OUTPUT_FORMATS:
                errors.append(
                    f"Invalid output format '{fmt}'. "
                    f"Must be one of: {VALID_OUTPUT_FORMATS}"
                )
        if self.output.json_order not in VALID_JSON_ORDERS:
            errors.append(
                f"Invalid json_order '{self.output.json_order}'. "
                f"Must be one of: {VALID_JSON_ORDERS}"
            )
        if self.output.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"Invalid log level '{self.output.log_level}'")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'board': {
                'size': self.size,
                'objective_difficulty': (
                    self.objective_difficulty.to_list()
                    if self.objective_difficulty is not None else None
                ),
                'bingo_difficulty': self.bingo_difficulty.to_list(),
                'tag_policy': self.tag_policy,
                'catalog': self.catalog,
                'title': self.title,
            },
            'search': asdict(self.search),
            'output': asdict(self.output),
        }


def _parse_interval(value: Any, label: str) -> Interval:
    try:
        return Interval.parse(value)
    except ValueError as e:
        raise ConfigValidationError(f"Invalid {label}: {e}")


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    """A YAML section as a mapping; an empty section reads as {}."""
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigValidationError(
            f"Section '{name}' must be a mapping, got {type(section).__name__}"
        )
    return section


def _build_section(cls, values: Dict[str, Any], name: str):
    try:
        return cls(**values)
    except TypeError as e:
        raise ConfigValidationError(f"Invalid '{name}' settings: {e}")


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Generate bingo boards from a tiered, tagged objective catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Using command-line arguments
  bingo-generator --size 5 --objective-range 10-14 --line-range 50-70

  # Using YAML configuration
  bingo-generator --config board.yaml

  # CLI arguments override YAML
  bingo-generator --config board.yaml --tag-policy partial --seed 7
"""
    )

    # Configuration file
    parser.add_argument(
        "--config", "-c",
        metavar="PATH",
        help="YAML configuration file"
    )

    # Board settings
    parser.add_argument(
        "--catalog",
        metavar="PATH",
        help="Objective catalog (YAML or JSON)"
    )
    parser.add_argument(
        "--size", "-s",
        type=int,
        help="Board side length (default: 5)"
    )
    parser.add_argument(
        "--objective-range",
        metavar="LO-HI",
        help="Tier range for each cell, or 'any' (default: any)"
    )
    parser.add_argument(
        "--line-range",
        metavar="LO-HI",
        help="Tier-sum range for each line (default: 15-25)"
    )
    parser.add_argument(
        "--tag-policy", "-p",
        choices=VALID_TAG_POLICIES,
        help="Tag exclusivity on a line"
    )
    parser.add_argument(
        "--title",
        metavar="TEXT",
        help="Board title"
    )

    # Search settings
    parser.add_argument(
        "--attempts",
        type=int,
        metavar="INT",
        help="Independent search attempts before giving up (default: 1)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        metavar="INT",
        help="Random seed for repeatable boards"
    )

    # Output settings
    parser.add_argument(
        "--output", "-o",
        metavar="PATH",
        help="Output directory"
    )
    parser.add_argument(
        "--format",
        metavar="FORMATS",
        help="Comma-separated output formats (svg,json,yaml)"
    )

    # Other options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate config without generating"
    )

    return parser


def load_config(args: Optional[argparse.Namespace] = None) -> BingoConfig:
    """
    Load configuration from command-line and/or YAML file.

    Args:
        args: Parsed command-line arguments (if None, parses sys.argv)

    Returns:
        Fully resolved BingoConfig

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if args is None:
        parser = create_argument_parser()
        args = parser.parse_args()

    # Load from YAML if specified
    yaml_config = None
    if getattr(args, 'config', None):
        yaml_config = BingoConfig.from_yaml(args.config)

    # Load from CLI
    cli_config = BingoConfig.from_args(args)

    # Merge configurations
    if yaml_config:
        config = BingoConfig.merge(yaml_config, cli_config)
        # "any" equals the default, so merge() keeps the YAML range
        objective_range = getattr(args, 'objective_range', None)
        if objective_range and objective_range.lower() in ANY_RANGE:
            config.objective_difficulty = None
    else:
        config = cli_config

    # Validate
    errors = config.validate()
    if errors:
        raise ConfigValidationError(
            "Configuration validation failed:\n" +
            "\n".join(f"  - {e}" for e in errors)
        )

    return config
