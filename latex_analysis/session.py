"""
Analysis session orchestrating tokenizer, tree builder and checkers
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Union

from .config import AnalysisConfig
from .models import AnalysisResult, Diagnostic
from .tokenizer import tokenize
from .tree_builder import TreeBuilder, collect_statistics
from .checkers import BaseChecker, MathModeChecker, EnvironmentChecker, CommandChecker


logger = logging.getLogger(__name__)


class AnalysisSession:
    """Runs the full analysis of a document per call."""

    SUPPORTED_SUFFIXES = ('.tex', '.ltx', '.txt')

    def __init__(self, config: Optional[AnalysisConfig] = None):
        """Initialize session with configuration."""
        self.config = config or AnalysisConfig()

        # Initialize components
        self.tree_builder = TreeBuilder()
        self.checkers = self._create_checkers()

        # Setup logging
        if self.config.verbose:
            logging.basicConfig(level=logging.INFO)
        if self.config.debug:
            logging.basicConfig(level=logging.DEBUG)

    def _create_checkers(self) -> List[BaseChecker]:
        """Create the enabled passes in reporting order."""
        checkers = []
        if self.config.check_math_mode:
            checkers.append(MathModeChecker(self.config.math_context_window))
        if self.config.check_environments:
            checkers.append(EnvironmentChecker())
        if self.config.check_commands:
            checkers.append(CommandChecker(
                extra_commands=self.config.extra_commands,
                recognize_document_macros=self.config.recognize_document_macros
            ))
        return checkers

    def run_checks(self, text: str) -> List[Diagnostic]:
        """Run the enabled passes and concatenate their diagnostics.

        The result is grouped by pass (math-mode, environment, command),
        each group in document order.
        """
        if self.config.parallel_passes and len(self.checkers) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                results = list(executor.map(lambda checker: checker.check(text), self.checkers))
        else:
            results = [checker.check(text) for checker in self.checkers]

        diagnostics = []
        for checker, found in zip(self.checkers, results):
            logger.debug(f"{checker.name} pass reported {len(found)} diagnostic(s)")
            diagnostics.extend(found)
        return diagnostics

    def analyze(self, text: str, source_file: Optional[str] = None) -> AnalysisResult:
        """Analyze a document.

        Args:
            text: Full document text
            source_file: Optional name recorded on the result

        Returns:
            AnalysisResult with diagnostics, tree, statistics and tokens
        """
        if self.config.parallel_passes and self.config.build_tree:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                tree_future = executor.submit(self.tree_builder.build, text)
                diagnostics = self.run_checks(text)
                tree = tree_future.result()
        else:
            diagnostics = self.run_checks(text)
            tree = self.tree_builder.build(text) if self.config.build_tree else None

        statistics = collect_statistics(tree, text)
        tokens = tokenize(text) if self.config.tokenize else []

        logger.info(
            f"Analyzed {statistics.total_lines} line(s): "
            f"{len(diagnostics)} diagnostic(s), {statistics.total_commands} command(s)"
        )

        return AnalysisResult(
            diagnostics=diagnostics,
            tree=tree,
            statistics=statistics,
            tokens=tokens,
            source_file=source_file
        )

    def analyze_file(self, file_path: Union[str, Path]) -> AnalysisResult:
        """Analyze a document stored in a file."""
        file_path = Path(file_path)

        if not file_path.exists():
            return AnalysisResult(
                source_file=str(file_path),
                errors=[{'type': 'file_not_found', 'error': f"File not found: {file_path}"}]
            )

        suffix = file_path.suffix.lower()
        if suffix not in self.SUPPORTED_SUFFIXES:
            return AnalysisResult(
                source_file=str(file_path),
                errors=[{'type': 'unsupported_format', 'error': f"Unsupported file format: {suffix}"}]
            )

        try:
            text = file_path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {file_path}: {e}")
            return AnalysisResult(
                source_file=str(file_path),
                errors=[{'type': 'read_error', 'error': str(e)}]
            )

        return self.analyze(text, str(file_path))

    def analyze_batch(self, files: List[Union[str, Path]]) -> List[AnalysisResult]:
        """Analyze multiple files in order."""
        return [self.analyze_file(file_path) for file_path in files]

    def export_results(self, result: AnalysisResult,
                       output_path: Union[str, Path],
                       format: str = "json") -> bool:
        """Export an analysis result to a file."""
        output_path = Path(output_path)

        try:
            if format == "json":
                with open(output_path, 'w', encoding='utf-8') as f:
                    json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
            elif format == "xml":
                if result.tree is None:
                    logger.error("Cannot export XML: the result has no syntax tree")
                    return False
                output_path.write_text(result.tree.to_xml(), encoding='utf-8')
            elif format == "markdown":
                output_path.write_text(self._generate_markdown_output(result), encoding='utf-8')
            else:
                logger.error(f"Unsupported export format: {format}")
                return False

            logger.info(f"Exported {format} results to {output_path}")
            return True

        except Exception as e:
            logger.error(f"Export failed: {e}")
            return False

    def _generate_markdown_output(self, result: AnalysisResult) -> str:
        """Generate a Markdown report from results."""
        lines = [
            "# LaTeX Analysis Report",
            "",
            f"Source: {result.source_file or 'Unknown'}",
            "",
            "## Diagnostics",
            ""
        ]

        if not result.diagnostics:
            lines.extend(["No problems found.", ""])

        for line_number, diagnostics in sorted(result.diagnostics_by_line().items()):
            lines.append(f"### Line {line_number}")
            lines.append("")
            for diagnostic in diagnostics:
                lines.append(f"- **{diagnostic.kind.value}**: {diagnostic.message}")
                if diagnostic.explanation:
                    lines.append(f"  - {diagnostic.explanation}")
                if diagnostic.suggestion:
                    lines.extend(["", "```latex", diagnostic.suggestion, "```"])
            lines.append("")

        stats = result.statistics
        lines.extend([
            "## Statistics",
            "",
            f"- Total lines: {stats.total_lines}",
            f"- Commands: {stats.total_commands}",
            f"- Math expressions: {stats.total_math_expressions}",
            f"- Environments: {stats.total_environments}",
            f"- Comments: {stats.total_comments}",
            f"- Max nesting depth: {stats.max_nesting_depth}",
            ""
        ])

        return "\n".join(lines)


def analyze(text: str, **kwargs) -> AnalysisResult:
    """Convenience function to analyze a document with a one-off session."""
    return AnalysisSession(AnalysisConfig(**kwargs)).analyze(text)


__all__ = ['AnalysisSession', 'analyze']
