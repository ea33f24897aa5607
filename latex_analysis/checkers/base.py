"""
Base classes for the diagnostic checkers
"""

from abc import ABC, abstractmethod
from typing import Iterator, List, Tuple

from ..models import Diagnostic


class BaseChecker(ABC):
    """Base class for all diagnostic passes.

    A checker is a pure function of the document text: it keeps no state
    between calls and reports findings in document order.
    """

    name = "base"

    @abstractmethod
    def check(self, text: str) -> List[Diagnostic]:
        """Scan the document and return its diagnostics."""
        pass

    def __call__(self, text: str) -> List[Diagnostic]:
        return self.check(text)


def line_at(text: str, offset: int) -> int:
    """1-based line number of a character offset."""
    return text.count('\n', 0, offset) + 1


def iter_lines(text: str) -> Iterator[Tuple[int, str, int]]:
    """Yield ``(line_number, line, offset_of_line_start)`` for each line."""
    offset = 0
    for line_number, line in enumerate(text.split('\n'), 1):
        yield line_number, line, offset
        offset += len(line) + 1
