"""
Configuration classes for the LaTeX Structure Analyzer
"""

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import List, Union

import yaml


logger = logging.getLogger(__name__)


@dataclass
class AnalysisConfig:
    """Analysis session configuration."""
    # General settings
    verbose: bool = False
    debug: bool = False

    # Diagnostic passes
    check_math_mode: bool = True
    check_environments: bool = True
    check_commands: bool = True

    # Outputs
    build_tree: bool = True
    tokenize: bool = True

    # Performance
    parallel_passes: bool = False
    max_workers: int = 4

    # Math-mode pass
    math_context_window: int = 20  # characters searched for \label, \ref, ...

    # Command pass
    extra_commands: List[str] = field(default_factory=list)
    recognize_document_macros: bool = False

    def __post_init__(self):
        """Normalize command names."""
        self.extra_commands = [name.lstrip('\\') for name in self.extra_commands]

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'AnalysisConfig':
        """Load configuration from a YAML or JSON file.

        Unknown keys are ignored. An unreadable file gives the default
        configuration.
        """
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                if path.suffix in ['.yaml', '.yml']:
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except Exception as e:
            logger.warning(f"Failed to load configuration from {path}: {e}")
            return cls()

        if data is None:
            return cls()
        if not isinstance(data, dict):
            logger.warning(f"Configuration in {path} is not a mapping, using defaults")
            return cls()
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'AnalysisConfig':
        """Build a configuration from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")
        return cls(**{key: value for key, value in data.items() if key in known})
