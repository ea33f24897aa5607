import pytest
import tempfile
from pathlib import Path
from latex_analysis.config import AnalysisConfig
from latex_analysis.session import AnalysisSession
from latex_analysis.tree_builder import TreeBuilder
from latex_analysis.checkers import MathModeChecker, EnvironmentChecker, CommandChecker


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_documents():
    """Sample LaTeX documents for testing."""
    return {
        'bold': r'\textbf{bold}',
        'section': '\\section{Introduction}\nThis is a section.',
        'itemize': '\\begin{itemize}\n    \\item First item\n    \\item Second item\n\\end{itemize}',
        'mismatched': '\\begin{itemize}\n    \\item First\n\\end{enumerate}',
        'inline_math': 'Here is inline math: $x^2 + y^2 = z^2$',
        'equation': '\\begin{equation}\n    \\int_{0}^{\\infty} e^{-x^2} dx = \\frac{\\sqrt{\\pi}}{2}\n\\end{equation}',
        'bare_math': 'x_1 is a variable',
        'unclosed_brace': '\\textbf{Bold {text',
        'comment': '100% complete',
        'clean': (
            '\\documentclass{article}\n'
            '\\begin{document}\n'
            '\\section{Results}\n'
            'The value $x_1 + y^2$ is shown in \\ref{tab:main}.\n'
            '\\end{document}'
        ),
    }


@pytest.fixture
def session():
    """Analysis session with default configuration."""
    return AnalysisSession()


@pytest.fixture
def tree_builder():
    """Tree builder instance."""
    return TreeBuilder()


@pytest.fixture
def math_checker():
    """Math-mode checker instance."""
    return MathModeChecker()


@pytest.fixture
def environment_checker():
    """Environment checker instance."""
    return EnvironmentChecker()


@pytest.fixture
def command_checker():
    """Command checker instance."""
    return CommandChecker()


@pytest.fixture
def parallel_config():
    """Configuration running passes on worker threads."""
    return AnalysisConfig(parallel_passes=True, max_workers=4)
