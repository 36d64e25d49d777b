#!/usr/bin/env python3

"""
Configuration management for the operon finder.

Centralized configuration with support for file-based configuration
and environment variable overrides.
"""

import os
import json
import math
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any

import yaml

from .exceptions import ConfigurationError


BASELINE_METHODS = ('unit', 'median', 'mean')


@dataclass
class OperonConfig:
    """Centralized configuration for operon detection."""

    # Thresholds
    coverage_threshold: float = 1.0
    min_overlap: float = 0.5
    bp_overlap: int = 50
    baseline_method: str = 'unit'

    # Performance settings
    memory_limit_mb: int = 4096
    batch_size: int = 10000
    enable_memory_monitoring: bool = True
    parallel_workers: int = 1

    # Output settings
    write_gtf_subsets: bool = True
    generate_reports: bool = True

    debug_mode: bool = False

    @staticmethod
    def read_file(config_path: str) -> Dict[str, Any]:
        """Read the raw settings mapping from a JSON or YAML file."""
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r') as f:
                if config_path.lower().endswith(('.yaml', '.yml')):
                    config_data = yaml.safe_load(f)
                else:
                    config_data = json.load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML configuration file format: {e}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid configuration file format: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error loading configuration: {e}")

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {config_path}")

        return config_data

    @classmethod
    def from_file(cls, config_path: str) -> 'OperonConfig':
        """Load configuration from file (JSON or YAML)."""
        return cls.from_dict(cls.read_file(config_path))

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'OperonConfig':
        """Create configuration from dictionary."""
        # Filter out unknown keys
        known_keys = set(cls.__dataclass_fields__.keys())
        filtered_dict = {k: v for k, v in config_dict.items() if k in known_keys}

        try:
            return cls(**filtered_dict)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration parameters: {e}")

    @classmethod
    def from_env(cls) -> 'OperonConfig':
        """Load configuration from environment variables."""
        config = cls()

        env_mappings = {
            'OPERON_COVERAGE_THRESHOLD': ('coverage_threshold', float),
            'OPERON_MIN_OVERLAP': ('min_overlap', float),
            'OPERON_BP_OVERLAP': ('bp_overlap', int),
            'OPERON_BASELINE_METHOD': ('baseline_method', str),
            'OPERON_MEMORY_LIMIT_MB': ('memory_limit_mb', int),
            'OPERON_BATCH_SIZE': ('batch_size', int),
            'OPERON_PARALLEL_WORKERS': ('parallel_workers', int),
            'OPERON_DEBUG_MODE': ('debug_mode', lambda x: x.lower() in ('true', '1', 'yes')),
        }

        for env_var, (field_name, converter) in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value:
                try:
                    setattr(config, field_name, converter(env_value))
                except (ValueError, TypeError) as e:
                    raise ConfigurationError(f"Invalid environment variable {env_var}: {e}")

        config.validate()
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def save_to_file(self, config_path: str) -> None:
        """Save configuration to file."""
        config_dict = self.to_dict()

        try:
            with open(config_path, 'w') as f:
                if config_path.lower().endswith(('.yaml', '.yml')):
                    yaml.safe_dump(config_dict, f, default_flow_style=False)
                else:
                    json.dump(config_dict, f, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Error saving configuration: {e}")

    def validate(self) -> None:
        """Validate configuration parameters. Out-of-range values are never clamped."""
        for name in ('coverage_threshold', 'min_overlap'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"{name} must be a number, got {value!r}")
            if math.isnan(value) or math.isinf(value):
                raise ConfigurationError(f"{name} must be finite")

        if self.coverage_threshold < 0:
            raise ConfigurationError("coverage_threshold must be >= 0")

        if not 0 <= self.min_overlap <= 1:
            raise ConfigurationError("min_overlap must be between 0 and 1 (inclusive)")

        if isinstance(self.bp_overlap, bool) or not isinstance(self.bp_overlap, int):
            raise ConfigurationError(f"bp_overlap must be an integer, got {self.bp_overlap!r}")

        if self.bp_overlap < 0:
            raise ConfigurationError("bp_overlap must be >= 0")

        if self.baseline_method not in BASELINE_METHODS:
            raise ConfigurationError(
                f"baseline_method must be one of {', '.join(BASELINE_METHODS)}, got {self.baseline_method!r}"
            )

        if self.memory_limit_mb < 100:
            raise ConfigurationError("memory_limit_mb must be >= 100")

        if self.batch_size < 1:
            raise ConfigurationError("batch_size must be >= 1")

        if self.parallel_workers < 1:
            raise ConfigurationError("parallel_workers must be >= 1")

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.validate()


def load_config(config_path: Optional[str] = None,
                use_env: bool = True) -> OperonConfig:
    """
    Load configuration with priority: file > environment > defaults.

    Args:
        config_path: Path to configuration file (optional)
        use_env: Whether to load environment variables

    Returns:
        OperonConfig: Loaded configuration
    """
    config = OperonConfig()

    if use_env:
        env_config = OperonConfig.from_env()
        for field_name in OperonConfig.__dataclass_fields__:
            env_value = getattr(env_config, field_name)
            if env_value != getattr(config, field_name):
                setattr(config, field_name, env_value)

    if config_path:
        # Only keys present in the file override environment values
        file_data = OperonConfig.read_file(config_path)
        for field_name, value in file_data.items():
            if field_name in OperonConfig.__dataclass_fields__:
                setattr(config, field_name, value)

    config.validate()
    return config
