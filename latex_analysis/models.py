"""
Data models for the LaTeX Structure Analyzer
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Tuple
from enum import Enum
from datetime import datetime
from collections import Counter, defaultdict


class TokenCategory(Enum):
    """Lexical categories assigned by the tokenizer."""
    COMMENT = "comment"
    MATH_DELIMITER = "math-delimiter"
    MATH_COMMAND = "math-command"
    OPERATOR = "operator"
    NUMBER = "number"
    MATH_LITERAL = "math"
    ENVIRONMENT_BEGIN = "environment-begin"
    ENVIRONMENT_END = "environment-end"
    ENVIRONMENT_ERROR = "environment-error"
    STRUCTURE_COMMAND = "structure-command"
    FORMATTING_COMMAND = "formatting-command"
    REFERENCE_COMMAND = "reference-command"
    ENVIRONMENT_COMMAND = "environment-command"
    KEYWORD = "keyword"
    BRACE = "brace"
    VARIABLE_NAME = "variable-name"
    TEXT = "text"  # not highlighted


class DiagnosticKind(Enum):
    """Kinds of structural problems reported by the checkers."""
    MATH_MODE = "math-mode"
    ENVIRONMENT = "environment"
    COMMAND = "command"
    UNKNOWN_COMMAND = "unknown-command"


@dataclass
class Token:
    """A classified lexical unit."""
    category: TokenCategory
    value: str
    position: int
    length: int
    line: int = 1
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def end(self) -> int:
        return self.position + self.length

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {
            'category': self.category.value,
            'value': self.value,
            'position': self.position,
            'length': self.length,
            'line': self.line
        }
        if self.metadata:
            data['metadata'] = self.metadata
        return data


@dataclass
class TokenizerState:
    """Mode state carried by the tokenizer between tokens."""
    math_delimiter: Optional[str] = None  # None, "$", "$$" or "\\["
    environment_stack: List[str] = field(default_factory=list)

    @property
    def in_math(self) -> bool:
        return self.math_delimiter is not None


@dataclass
class Diagnostic:
    """A non-fatal finding about the document structure."""
    kind: DiagnosticKind
    line: int
    message: str
    explanation: Optional[str] = None
    suggestion: Optional[str] = None
    range: Optional[Tuple[int, int]] = None  # (start, end) offsets

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'type': self.kind.value,
            'line': self.line,
            'message': self.message,
            'explanation': self.explanation,
            'suggestion': self.suggestion,
            'range': list(self.range) if self.range else None
        }


@dataclass
class EnvironmentRecord:
    """A \\begin or \\end occurrence seen by the environment checker."""
    name: str
    line: int
    position: int
    kind: str  # "begin" or "end"
    offset: int = 0
    length: int = 0


@dataclass
class DocumentStatistics:
    """Counts collected from the syntax tree."""
    total_lines: int = 0
    total_commands: int = 0
    total_math_expressions: int = 0
    total_environments: int = 0
    total_comments: int = 0
    max_nesting_depth: int = 0

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary."""
        return {
            'total_lines': self.total_lines,
            'total_commands': self.total_commands,
            'total_math_expressions': self.total_math_expressions,
            'total_environments': self.total_environments,
            'total_comments': self.total_comments,
            'max_nesting_depth': self.max_nesting_depth
        }


@dataclass
class AnalysisResult:
    """Everything one analysis call produces for a document."""
    diagnostics: List[Diagnostic] = field(default_factory=list)
    tree: Optional[Any] = None  # ASTNode root
    statistics: DocumentStatistics = field(default_factory=DocumentStatistics)
    tokens: List[Token] = field(default_factory=list)
    source_file: Optional[str] = None
    errors: List[Dict[str, Any]] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)

    def diagnostics_for_line(self, line: int) -> List[Diagnostic]:
        """Diagnostics reported at a 1-based line, in pass order."""
        return [d for d in self.diagnostics if d.line == line]

    def diagnostics_by_line(self) -> Dict[int, List[Diagnostic]]:
        """Group diagnostics by line number."""
        grouped = defaultdict(list)
        for diagnostic in self.diagnostics:
            grouped[diagnostic.line].append(diagnostic)
        return dict(grouped)

    def count_by_kind(self) -> Dict[str, int]:
        """Count diagnostics by kind."""
        return dict(Counter(d.kind.value for d in self.diagnostics))

    @property
    def has_errors(self) -> bool:
        """Check whether any diagnostic or processing error was reported."""
        return bool(self.diagnostics or self.errors)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'diagnostics': [d.to_dict() for d in self.diagnostics],
            'tree': self.tree.to_dict() if self.tree is not None else None,
            'statistics': self.statistics.to_dict(),
            'tokens': [t.to_dict() for t in self.tokens],
            'source_file': self.source_file,
            'errors': self.errors,
            'timestamp': self.timestamp.isoformat(),
            'success': len(self.errors) == 0
        }
