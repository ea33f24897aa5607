"""
Environment balance checking
"""

import regex
import logging
from typing import List, Optional

from ..models import Diagnostic, DiagnosticKind, EnvironmentRecord
from .base import BaseChecker, iter_lines


logger = logging.getLogger(__name__)


class EnvironmentChecker(BaseChecker):
    """Matches ``\\begin{X}``/``\\end{X}`` pairs by name.

    An ``\\end{X}`` closes the most recent pending ``\\begin{X}`` anywhere in
    the pending list, not only the innermost one, so interleaved unrelated
    environments do not cascade into extra errors. All begins of a line are
    recorded before the ends of that line are matched.
    """

    name = "environment"

    def __init__(self):
        self.begin_pattern = regex.compile(r'\\begin\{([^}]+)\}')
        self.end_pattern = regex.compile(r'\\end\{([^}]+)\}')

    @staticmethod
    def _record(match, kind: str, line_number: int, offset: int) -> EnvironmentRecord:
        return EnvironmentRecord(
            name=match.group(1),
            line=line_number,
            position=match.start(),
            kind=kind,
            offset=offset + match.start(),
            length=len(match.group())
        )

    def check(self, text: str) -> List[Diagnostic]:
        diagnostics = []
        pending: List[EnvironmentRecord] = []

        for line_number, line, offset in iter_lines(text):
            for match in self.begin_pattern.finditer(line):
                pending.append(self._record(match, 'begin', line_number, offset))

            for match in self.end_pattern.finditer(line):
                record = self._record(match, 'end', line_number, offset)
                index = self._find_pending(pending, record.name)
                if index is None:
                    diagnostics.append(self._unmatched_end(record))
                else:
                    del pending[index]

        for record in pending:
            diagnostics.append(self._unmatched_begin(record))

        logger.debug(f"Environment pass: {len(diagnostics)} findings")
        return diagnostics

    @staticmethod
    def _find_pending(pending: List[EnvironmentRecord], name: str) -> Optional[int]:
        for index in range(len(pending) - 1, -1, -1):
            if pending[index].name == name:
                return index
        return None

    @staticmethod
    def _suggestion(name: str) -> str:
        return f"% CORRECT:\n\\begin{{{name}}}\n  Content goes here\n\\end{{{name}}}"

    def _unmatched_end(self, record: EnvironmentRecord) -> Diagnostic:
        return Diagnostic(
            kind=DiagnosticKind.ENVIRONMENT,
            line=record.line,
            message=f"Unmatched \\end{{{record.name}}} without a corresponding \\begin{{{record.name}}}",
            explanation='Every \\end{} command must have a matching \\begin{} command '
                        'with the same environment name.',
            suggestion=self._suggestion(record.name),
            range=(record.offset, record.offset + record.length)
        )

    def _unmatched_begin(self, record: EnvironmentRecord) -> Diagnostic:
        return Diagnostic(
            kind=DiagnosticKind.ENVIRONMENT,
            line=record.line,
            message=f"Unmatched \\begin{{{record.name}}} without a corresponding \\end{{{record.name}}}",
            explanation='Every \\begin{} command must have a matching \\end{} command '
                        'with the same environment name.',
            suggestion=self._suggestion(record.name),
            range=(record.offset, record.offset + record.length)
        )


def check_environments(text: str) -> List[Diagnostic]:
    """Convenience function for the environment pass."""
    return EnvironmentChecker().check(text)


__all__ = ['EnvironmentChecker', 'check_environments']
