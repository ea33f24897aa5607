from typing import List
from .base import BaseChecker, line_at, iter_lines
from .math_mode import MathModeChecker, check_math_mode
from .environments import EnvironmentChecker, check_environments
from .commands import CommandChecker, check_commands
from ..models import Diagnostic


def run_all_checks(text: str) -> List[Diagnostic]:
    """Run the three passes with default settings.

    Results are grouped by pass (math-mode, environment, command), each
    group in document order. They are not sorted by position overall.
    """
    diagnostics = []
    for checker in (MathModeChecker(), EnvironmentChecker(), CommandChecker()):
        diagnostics.extend(checker.check(text))
    return diagnostics


__all__ = [
    'BaseChecker',
    'MathModeChecker',
    'EnvironmentChecker',
    'CommandChecker',
    'check_math_mode',
    'check_environments',
    'check_commands',
    'run_all_checks',
    'line_at',
    'iter_lines'
]
