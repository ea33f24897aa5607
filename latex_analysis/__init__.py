"""
LaTeX Structure Analyzer

Tokenizes LaTeX-like documents for highlighting, builds a syntax tree of
commands, environments, math and comments, and reports structural problems
with explanations and suggested fixes.
"""

__version__ = "0.1.0"
__author__ = "LaTeX Structure Analyzer Team"

# Import models
from .models import (
    Token,
    TokenCategory,
    TokenizerState,
    Diagnostic,
    DiagnosticKind,
    EnvironmentRecord,
    DocumentStatistics,
    AnalysisResult
)

# Import configuration
from .config import AnalysisConfig

# Import core components
from .command_classifier import classify, is_recognized, RECOGNIZED_COMMANDS
from .tokenizer import LaTeXTokenizer, tokenize
from .tree_builder import ASTNode, NodeType, TreeBuilder, build_tree, visualize
from .checkers import (
    MathModeChecker,
    EnvironmentChecker,
    CommandChecker,
    check_math_mode,
    check_environments,
    check_commands
)

# Import session
from .session import AnalysisSession, analyze

# Public API
__all__ = [
    # Version
    "__version__",

    # Models
    "Token",
    "TokenCategory",
    "TokenizerState",
    "Diagnostic",
    "DiagnosticKind",
    "EnvironmentRecord",
    "DocumentStatistics",
    "AnalysisResult",

    # Configuration
    "AnalysisConfig",

    # Core components
    "classify",
    "is_recognized",
    "RECOGNIZED_COMMANDS",
    "LaTeXTokenizer",
    "tokenize",
    "ASTNode",
    "NodeType",
    "TreeBuilder",
    "build_tree",
    "visualize",
    "MathModeChecker",
    "EnvironmentChecker",
    "CommandChecker",
    "check_math_mode",
    "check_environments",
    "check_commands",

    # Session
    "AnalysisSession",
    "analyze"
]


# Convenience function
def create_session(**kwargs):
    """Create a configured analysis session instance."""
    config = AnalysisConfig(**kwargs)
    return AnalysisSession(config)
