from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Optional
import yaml
from pathlib import Path

from .errors import ConfigurationError
from .utils.logging import get_logger

logger = get_logger(__name__)

ADDRESS_BITS = 64

# Largest cache (in lines) allocated unless a caller raises the ceiling
DEFAULT_MAX_CACHE_LINES = 1 << 24


@dataclass(frozen=True)
class Geometry:
    """Shape of a set-associative cache: S = 2^s sets of E lines, B = 2^b byte blocks."""
    set_index_bits: int
    lines_per_set: int
    block_offset_bits: int

    # Derived properties
    num_sets: int = field(init=False)
    block_size: int = field(init=False)

    def __post_init__(self):
        for name in ("set_index_bits", "lines_per_set", "block_offset_bits"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}.")

        if not 0 <= self.set_index_bits < ADDRESS_BITS:
            raise ConfigurationError(
                f"The number of set index bits should be 0 <= s < {ADDRESS_BITS}, got {self.set_index_bits}.")
        if not 0 <= self.block_offset_bits < ADDRESS_BITS:
            raise ConfigurationError(
                f"The number of block bits should be 0 <= b < {ADDRESS_BITS}, got {self.block_offset_bits}.")
        if self.set_index_bits + self.block_offset_bits >= ADDRESS_BITS:
            raise ConfigurationError(
                f"s + b must leave room for a tag in a {ADDRESS_BITS}-bit address "
                f"(s={self.set_index_bits}, b={self.block_offset_bits}).")
        if self.lines_per_set < 1:
            raise ConfigurationError(
                f"The number of lines per set should be greater than zero, got {self.lines_per_set}.")

        # frozen dataclass: derived fields go through object.__setattr__
        object.__setattr__(self, "num_sets", 1 << self.set_index_bits)
        object.__setattr__(self, "block_size", 1 << self.block_offset_bits)

    @property
    def tag_bits(self) -> int:
        return ADDRESS_BITS - self.set_index_bits - self.block_offset_bits

    @property
    def total_lines(self) -> int:
        return self.num_sets * self.lines_per_set

    def to_dict(self) -> dict:
        return {
            "set_index_bits": self.set_index_bits,
            "lines_per_set": self.lines_per_set,
            "block_offset_bits": self.block_offset_bits,
            "num_sets": self.num_sets,
            "block_size": self.block_size,
        }


@dataclass
class SimConfig:
    """csim run configuration (geometry plus trace, output and reporting settings)."""
    # Geometry (-s, -E, -b). None until set from YAML or CLI.
    set_index_bits: Optional[int] = None
    lines_per_set: Optional[int] = None
    block_offset_bits: Optional[int] = None

    # Input
    trace_file: str = ""

    # Output
    verbose: bool = False
    report_dir: str = ""  # empty: no report artifacts
    ascii_chart: bool = False

    # Config file
    config_file: str = ""

    # Refuse to allocate caches larger than this many lines
    max_cache_lines: int = DEFAULT_MAX_CACHE_LINES

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Checks field types so bad YAML or CLI values surface as ConfigurationError."""
        expected = {
            "set_index_bits": (int, True),
            "lines_per_set": (int, True),
            "block_offset_bits": (int, True),
            "trace_file": (str, False),
            "verbose": (bool, False),
            "report_dir": (str, False),
            "ascii_chart": (bool, False),
            "config_file": (str, False),
            "max_cache_lines": (int, False),
        }
        for name, (kind, nullable) in expected.items():
            value = getattr(self, name)
            if value is None and nullable:
                continue
            # bool is an int subclass; only accept it where a flag is expected
            if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
                raise ConfigurationError(
                    f"Config value '{name}' must be of type {kind.__name__}, got {value!r}.")
        if self.max_cache_lines < 1:
            raise ConfigurationError(f"max_cache_lines must be positive, got {self.max_cache_lines}.")

    def geometry(self) -> Geometry:
        """Builds the validated, immutable geometry for this run."""
        self.validate()
        missing = [name for name in ("set_index_bits", "lines_per_set", "block_offset_bits")
                   if getattr(self, name) is None]
        if missing:
            raise ConfigurationError(f"Missing required cache parameters: {', '.join(missing)}.")
        return Geometry(self.set_index_bits, self.lines_per_set, self.block_offset_bits)

    def update_from_yaml(self, yaml_path: str):
        """Updates config fields from a YAML file."""
        with open(yaml_path, 'r') as f:
            yaml_config = yaml.safe_load(f) or {}
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(f"Config file {yaml_path} must contain a mapping.")
        known = {f.name for f in fields(self)}
        for key, value in yaml_config.items():
            if key in known:
                setattr(self, key, value)
            else:
                logger.warning(f"Ignoring unknown config key '{key}' in {yaml_path}")
        self.validate()

    @classmethod
    def from_args(cls, args) -> SimConfig:
        """Factory method to create a SimConfig from parsed argparse arguments."""
        config = cls()

        # 1. Load from YAML config file if provided
        if getattr(args, 'config', None):
            config.config_file = args.config
            if Path(config.config_file).exists():
                config.update_from_yaml(config.config_file)
            else:
                logger.warning(f"Config file {config.config_file} not found.")

        # 2. Override with command-line arguments
        arg_dict = vars(args)
        for key, value in arg_dict.items():
            if value is not None and hasattr(config, key):
                setattr(config, key, value)

        config.validate()
        return config
