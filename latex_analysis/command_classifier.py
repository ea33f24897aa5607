"""
Command classification and the recognized command vocabulary
"""

from functools import lru_cache
from typing import FrozenSet, Iterable, Optional

from .models import TokenCategory


STRUCTURE_COMMANDS = frozenset({
    'section', 'subsection', 'chapter', 'paragraph', 'subparagraph'
})

FORMATTING_COMMANDS = frozenset({
    'textbf', 'textit', 'underline', 'emph', 'textsc', 'texttt'
})

MATH_COMMANDS = frozenset({
    'frac', 'sum', 'int', 'prod', 'lim', 'infty', 'partial'
})

# 'herf' (not 'href') is the reference bucket name; \href itself classifies
# as a generic keyword.
REFERENCE_COMMANDS = frozenset({
    'cite', 'ref', 'pageref', 'footnote', 'herf'
})

ENVIRONMENT_COMMANDS = frozenset({'begin', 'end'})

# Checked in order, first match wins.
_CATEGORY_BUCKETS = (
    (STRUCTURE_COMMANDS, TokenCategory.STRUCTURE_COMMAND),
    (FORMATTING_COMMANDS, TokenCategory.FORMATTING_COMMAND),
    (MATH_COMMANDS, TokenCategory.MATH_COMMAND),
    (REFERENCE_COMMANDS, TokenCategory.REFERENCE_COMMAND),
    (ENVIRONMENT_COMMANDS, TokenCategory.ENVIRONMENT_COMMAND),
)


GREEK_LETTERS = frozenset({
    'alpha', 'beta', 'gamma', 'delta', 'epsilon', 'zeta', 'eta', 'theta',
    'iota', 'kappa', 'lambda', 'mu', 'nu', 'xi', 'pi', 'rho', 'sigma',
    'tau', 'upsilon', 'phi', 'chi', 'psi', 'omega'
})

MATH_SYMBOLS = frozenset({
    'frac', 'sum', 'int', 'sqrt', 'leq', 'geq', 'neq', 'le', 'ge', 'cdot',
    'ldots', 'cdots', 'dots', 'to', 'left', 'right', 'pm', 'times', 'div',
    'approx', 'equiv', 'partial', 'infty', 'forall', 'exists', 'nabla', 'in',
    'mathcal', 'mathbb'
})

MATH_FUNCTIONS = frozenset({
    'sin', 'cos', 'tan', 'log', 'ln', 'exp', 'lim', 'max', 'min', 'sup', 'inf'
})

DOCUMENT_COMMANDS = frozenset({
    'section', 'subsection', 'textbf', 'textit', 'underline', 'emph',
    'begin', 'end', 'item', 'label', 'ref', 'cite', 'usepackage',
    'documentclass', 'title', 'author', 'date', 'maketitle',
    'includegraphics', 'footnote', 'caption', 'centering', 'hline', 'href',
    'LaTeX', 'verb', 'bibliographystyle', 'bibliography', 'url', 'text',
    'textcolor', 'addplot'
})

LENGTH_COMMANDS = frozenset({
    'textwidth', 'linewidth', 'columnwidth', 'paperwidth', 'height', 'width',
    'textheight', 'columnheight', 'paperheight', 'baselineskip'
})

RECOGNIZED_COMMANDS: FrozenSet[str] = (
    GREEK_LETTERS | MATH_SYMBOLS | MATH_FUNCTIONS |
    DOCUMENT_COMMANDS | LENGTH_COMMANDS
)


def _strip_backslash(command_name: str) -> str:
    return command_name[1:] if command_name.startswith('\\') else command_name


@lru_cache(maxsize=512)
def classify(command_name: str) -> TokenCategory:
    """Map a command name to its highlighting category.

    Args:
        command_name: Command name, with or without the leading backslash

    Returns:
        The category of the first bucket containing the name, or
        ``TokenCategory.KEYWORD`` for anything else
    """
    name = _strip_backslash(command_name)
    for bucket, category in _CATEGORY_BUCKETS:
        if name in bucket:
            return category
    return TokenCategory.KEYWORD


def is_recognized(command_name: str, extra_commands: Optional[Iterable[str]] = None) -> bool:
    """Check a command name against the recognized vocabulary."""
    name = _strip_backslash(command_name)
    if name in RECOGNIZED_COMMANDS:
        return True
    if extra_commands:
        return name in extra_commands
    return False


__all__ = [
    'classify',
    'is_recognized',
    'RECOGNIZED_COMMANDS',
    'STRUCTURE_COMMANDS',
    'FORMATTING_COMMANDS',
    'MATH_COMMANDS',
    'REFERENCE_COMMANDS',
    'ENVIRONMENT_COMMANDS'
]
