"""
Detection of math expressions written outside math mode
"""

import regex
import logging
from typing import List, Tuple

from ..models import Diagnostic, DiagnosticKind
from .base import BaseChecker, line_at


logger = logging.getLogger(__name__)


MATH_ENVIRONMENTS = (
    'equation', 'align', 'gather', 'multline', 'eqnarray',
    'flalign', 'alignat', 'math', 'displaymath'
)

REFERENCE_CONTEXT_COMMANDS = (
    'label', 'ref', 'cite', 'href', 'pageref', 'url', 'input', 'include'
)


class MathModeChecker(BaseChecker):
    """Finds ``x_1``/``a^n`` style expressions outside every math region."""

    name = "math-mode"

    MESSAGE = 'Math expression should be enclosed in $...$'
    EXPLANATION = 'Subscripts (_) and superscripts (^) are only allowed in math mode.'

    def __init__(self, context_window: int = 20):
        self.context_window = context_window
        self._compile_patterns()

    def _compile_patterns(self):
        """Compile math region and candidate patterns."""
        environments = '|'.join(MATH_ENVIRONMENTS)
        self.range_patterns = [
            regex.compile(r'\$(?!\$)[^$]*\$'),              # $...$
            regex.compile(r'\$\$.*?\$\$', regex.DOTALL),      # $$...$$
            regex.compile(r'\\\[.*?\\\]', regex.DOTALL),      # \[...\]
            regex.compile(
                r'\\begin\{((?:' + environments + r')\*?)\}.*?\\end\{\1\}',
                regex.DOTALL
            ),
        ]
        self.candidate_pattern = regex.compile(
            r'\b([a-zA-Z][a-zA-Z0-9]*_[a-zA-Z0-9]+|[a-zA-Z][a-zA-Z0-9]*\^[a-zA-Z0-9]+)\b',
            regex.ASCII  # word boundaries ignore non-ASCII letters
        )
        self.reference_context_pattern = regex.compile(
            r'(' + '|'.join(REFERENCE_CONTEXT_COMMANDS) + r')\s*\{?$',
            regex.IGNORECASE
        )
        self.plain_name_pattern = regex.compile(r'^[a-zA-Z_]+$')
        # page_size, var_2a: the subscript part contains a letter
        self.identifier_pattern = regex.compile(
            r'^[a-zA-Z][a-zA-Z0-9]*_[a-zA-Z0-9]*[a-zA-Z][a-zA-Z0-9]*$'
        )

    def find_math_ranges(self, text: str) -> List[Tuple[int, int]]:
        """Collect the ``(start, end)`` spans already in math mode."""
        ranges = []
        for pattern in self.range_patterns:
            ranges.extend(match.span() for match in pattern.finditer(text))
        return ranges

    def check(self, text: str) -> List[Diagnostic]:
        diagnostics = []
        math_ranges = self.find_math_ranges(text)

        for match in self.candidate_pattern.finditer(text):
            start, end = match.span()
            if any(range_start <= start < range_end for range_start, range_end in math_ranges):
                continue

            expression = match.group()
            before = text[max(0, start - self.context_window):start]
            if self.reference_context_pattern.search(before):
                continue
            if self.plain_name_pattern.match(expression):
                continue
            if self.identifier_pattern.match(expression):
                continue

            diagnostics.append(Diagnostic(
                kind=DiagnosticKind.MATH_MODE,
                line=line_at(text, end),
                message=self.MESSAGE,
                explanation=self.EXPLANATION,
                suggestion=f"% CORRECT:\n${expression}$",
                range=(start, end)
            ))

        logger.debug(f"Math-mode pass: {len(math_ranges)} math regions, {len(diagnostics)} findings")
        return diagnostics


def check_math_mode(text: str, context_window: int = 20) -> List[Diagnostic]:
    """Convenience function for the math-mode pass."""
    return MathModeChecker(context_window).check(text)


__all__ = ['MathModeChecker', 'check_math_mode', 'MATH_ENVIRONMENTS']
