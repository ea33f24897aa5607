"""
Command argument and vocabulary checking
"""

import regex
import logging
from typing import FrozenSet, Iterable, List, Optional

from ..models import Diagnostic, DiagnosticKind
from ..command_classifier import is_recognized
from .base import BaseChecker, iter_lines


logger = logging.getLogger(__name__)


DEFINITION_COMMANDS = frozenset({'newcommand', 'renewcommand', 'providecommand', 'def'})


class CommandChecker(BaseChecker):
    """Reports unclosed brace arguments and commands outside the vocabulary."""

    name = "command"

    UNKNOWN_COMMAND_SUGGESTION = (
        "% SOLUTION 1: Check spelling\n"
        "% SOLUTION 2: Include required package\n"
        "\\usepackage{package-name}  % Replace with the appropriate package"
    )

    def __init__(self, extra_commands: Optional[Iterable[str]] = None,
                 recognize_document_macros: bool = False):
        self.extra_commands: FrozenSet[str] = frozenset(extra_commands or ())
        self.recognize_document_macros = recognize_document_macros
        self._compile_patterns()

    def _compile_patterns(self):
        """Compile argument, command and macro definition patterns."""
        # One level of nested braces; group 3 is an opened, unclosed brace.
        self.argument_pattern = regex.compile(
            r'\\[a-zA-Z@]+\{([^{}]*(\{[^{}]*\}[^{}]*)*)?([^{}]*\{)?'
        )
        self.command_pattern = regex.compile(r'\\([a-zA-Z@]+)')
        self.newcommand_pattern = regex.compile(
            r'\\(?:re)?newcommand\*?\s*\{?\\([a-zA-Z@]+)\}?'
        )
        self.def_pattern = regex.compile(r'\\def\\([a-zA-Z@]+)')

    def extract_macros(self, text: str) -> FrozenSet[str]:
        """Names defined in the document with \\newcommand or \\def."""
        names = {match.group(1) for match in self.newcommand_pattern.finditer(text)}
        names.update(match.group(1) for match in self.def_pattern.finditer(text))
        return frozenset(names)

    def check(self, text: str) -> List[Diagnostic]:
        diagnostics = []
        known = self.extra_commands
        if self.recognize_document_macros:
            known = known | DEFINITION_COMMANDS | self.extract_macros(text)

        for line_number, line, offset in iter_lines(text):
            for match in self.argument_pattern.finditer(line):
                if match.group(3) is not None:
                    diagnostics.append(Diagnostic(
                        kind=DiagnosticKind.COMMAND,
                        line=line_number,
                        message='Unclosed brace in command argument',
                        explanation='Commands with braced arguments must have properly closed braces.',
                        suggestion=f"% CORRECT:\n{match.group()}}}  % Close the brace",
                        range=(offset + match.start(), offset + match.end())
                    ))

            for match in self.command_pattern.finditer(line):
                command = match.group(1)
                if is_recognized(command, known):
                    continue
                diagnostics.append(Diagnostic(
                    kind=DiagnosticKind.UNKNOWN_COMMAND,
                    line=line_number,
                    message=f"Potentially undefined command: \\{command}",
                    explanation='This command may not be defined in standard LaTeX or may need a package.',
                    suggestion=self.UNKNOWN_COMMAND_SUGGESTION,
                    range=(offset + match.start(), offset + match.end())
                ))

        logger.debug(f"Command pass: {len(diagnostics)} findings")
        return diagnostics


def check_commands(text: str, extra_commands: Optional[Iterable[str]] = None,
                   recognize_document_macros: bool = False) -> List[Diagnostic]:
    """Convenience function for the command pass."""
    return CommandChecker(extra_commands, recognize_document_macros).check(text)


__all__ = ['CommandChecker', 'check_commands', 'DEFINITION_COMMANDS']
