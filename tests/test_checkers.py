import pytest
from latex_analysis.checkers import (
    MathModeChecker, EnvironmentChecker, CommandChecker,
    check_math_mode, check_environments, check_commands,
    run_all_checks, line_at, iter_lines
)
from latex_analysis.models import DiagnosticKind


class TestMathModeChecker:

    def test_bare_subscript(self, math_checker, sample_documents):
        """Test x_1 outside math is reported once."""
        diagnostics = math_checker.check(sample_documents['bare_math'])

        assert len(diagnostics) == 1
        diagnostic = diagnostics[0]
        assert diagnostic.kind == DiagnosticKind.MATH_MODE
        assert diagnostic.line == 1
        assert "$x_1$" in diagnostic.suggestion
        assert diagnostic.range == (0, 3)
        assert diagnostic.message == 'Math expression should be enclosed in $...$'

    def test_bare_superscript(self, math_checker):
        """Test a^n outside math is reported."""
        diagnostics = math_checker.check("so a^n grows")
        assert len(diagnostics) == 1
        assert "$a^n$" in diagnostics[0].suggestion

    @pytest.mark.parametrize("text", [
        "$x_1$",
        "$$a^2$$",
        r"\[a^2\]",
        r"\begin{equation}a^2\end{equation}",
        r"\begin{align*}x_1 &= 2\end{align*}",
        r"\begin{displaymath}x_1\end{displaymath}",
        "before $y_2 + z^3$ after",
    ])
    def test_inside_math_regions(self, math_checker, text):
        """Test expressions in recognized math are accepted."""
        assert math_checker.check(text) == []

    @pytest.mark.parametrize("text", [
        r"\label{x_1}",
        r"see \ref{eq_2}",
        r"\cite{smith_2020}",
        r"\input{chapter_1}",
        r"\URL {a_1}",
    ])
    def test_reference_context(self, math_checker, text):
        """Test arguments of reference-like commands are skipped."""
        assert math_checker.check(text) == []

    @pytest.mark.parametrize("text", [
        "page_size",
        "International_language",
        "document_class",
        "var_2a",
    ])
    def test_identifiers(self, math_checker, text):
        """Test snake_case names are not treated as math."""
        assert math_checker.check(text) == []

    def test_non_math_environment(self, math_checker):
        """Test environments outside the math family do not protect."""
        diagnostics = math_checker.check("\\begin{itemize}\n x^2\n\\end{itemize}")
        assert len(diagnostics) == 1
        assert diagnostics[0].line == 2

    def test_line_numbers(self, math_checker):
        """Test line numbers count newlines up to the match end."""
        diagnostics = math_checker.check("first line\nsecond x_2\nthird a^b")
        assert [d.line for d in diagnostics] == [2, 3]

    def test_adjacent_non_ascii_letters(self, math_checker):
        """Test word boundaries next to non-ASCII text."""
        diagnostics = math_checker.check("значениеx_1 дано")
        assert len(diagnostics) == 1
        assert diagnostics[0].range == (8, 11)
        assert "$x_1$" in diagnostics[0].suggestion

    def test_context_window(self):
        """Test the reference lookbehind is bounded."""
        text = r"\label" + " " * 30 + "{x_1"
        assert MathModeChecker(context_window=20).check(text) != []
        assert MathModeChecker(context_window=40).check(text) == []

    def test_convenience_function(self, sample_documents):
        """Test module-level function."""
        assert len(check_math_mode(sample_documents['bare_math'])) == 1


class TestEnvironmentChecker:

    def test_balanced(self, environment_checker):
        """Test matched pair reports nothing."""
        assert environment_checker.check(r"\begin{itemize}\end{itemize}") == []

    def test_mismatched(self, environment_checker):
        """Test mismatched names report the end and the begin."""
        diagnostics = environment_checker.check(r"\begin{itemize}\end{enumerate}")

        assert len(diagnostics) == 2
        assert all(d.kind == DiagnosticKind.ENVIRONMENT for d in diagnostics)
        assert diagnostics[0].message.startswith("Unmatched \\end{enumerate}")
        assert diagnostics[1].message.startswith("Unmatched \\begin{itemize}")
        assert all(d.line == 1 for d in diagnostics)
        assert diagnostics[0].explanation
        assert "\\begin{enumerate}" in diagnostics[0].suggestion

    def test_multiline_document(self, environment_checker, sample_documents):
        """Test line numbers across lines."""
        diagnostics = environment_checker.check(sample_documents['mismatched'])
        assert [d.line for d in diagnostics] == [3, 1]

    def test_interleaved_environments(self, environment_checker):
        """Test \\end closes the nearest same-named begin, not the top."""
        text = "\\begin{a}\n\\begin{b}\n\\end{a}\n\\end{b}"
        assert environment_checker.check(text) == []

    def test_same_name_nesting(self, environment_checker):
        """Test the outer begin is reported when one end is missing."""
        diagnostics = environment_checker.check(r"\begin{a}\begin{a}\end{a}")
        assert len(diagnostics) == 1
        assert diagnostics[0].range == (0, 9)

    def test_begins_recorded_before_ends_on_a_line(self, environment_checker):
        """Test an end written before its begin on the same line still pairs."""
        assert environment_checker.check(r"\end{a}\begin{a}") == []

    def test_same_line_different_names(self, environment_checker):
        """Test unrelated end and begin on one line are both reported."""
        diagnostics = environment_checker.check(r"\end{b}\begin{a}")
        assert len(diagnostics) == 2
        assert "\\end{b}" in diagnostics[0].message
        assert diagnostics[0].range == (0, 7)
        assert "\\begin{a}" in diagnostics[1].message
        assert diagnostics[1].range == (7, 16)

    def test_keeps_scanning_after_error(self, environment_checker):
        """Test later lines are still checked after an unmatched end."""
        text = "\\end{x}\n\\begin{y}\n\\end{y}\n\\end{z}"
        diagnostics = environment_checker.check(text)
        assert [d.line for d in diagnostics] == [1, 4]

    def test_ranges(self, environment_checker):
        """Test ranges are document offsets."""
        text = "abc\n\\end{x}"
        diagnostics = environment_checker.check(text)
        start, end = diagnostics[0].range
        assert text[start:end] == "\\end{x}"

    def test_convenience_function(self):
        """Test module-level function."""
        assert len(check_environments(r"\begin{document}")) == 1


class TestCommandChecker:

    def test_known_command(self, command_checker, sample_documents):
        """Test a closed, known command reports nothing."""
        assert command_checker.check(sample_documents['bold']) == []

    def test_unclosed_brace(self, command_checker, sample_documents):
        """Test an opened nested brace without close."""
        diagnostics = command_checker.check(sample_documents['unclosed_brace'])

        assert len(diagnostics) == 1
        assert diagnostics[0].kind == DiagnosticKind.COMMAND
        assert diagnostics[0].message == 'Unclosed brace in command argument'
        assert "\\textbf{Bold {}  % Close the brace" in diagnostics[0].suggestion
        assert diagnostics[0].range == (0, 14)

    @pytest.mark.parametrize("text", [
        "\\footnote{A long note\nthat continues}",
        "\\caption{First line\nsecond line}",
        r"\textbf{Bold text",
    ])
    def test_argument_continuing_past_line(self, command_checker, text):
        """Test arguments that go on past the end of the line are not flagged."""
        assert command_checker.check(text) == []

    def test_one_level_nesting(self, command_checker):
        """Test one nested group inside the argument is fine."""
        assert command_checker.check(r"\textbf{\textit{italic} bold}") == []

    def test_unknown_command(self, command_checker):
        """Test commands outside the vocabulary."""
        diagnostics = command_checker.check(r"\frobnicate{x}")

        assert len(diagnostics) == 1
        assert diagnostics[0].kind == DiagnosticKind.UNKNOWN_COMMAND
        assert diagnostics[0].message == "Potentially undefined command: \\frobnicate"
        assert "usepackage" in diagnostics[0].suggestion
        assert diagnostics[0].range == (0, 11)

    def test_brace_before_unknown_on_a_line(self, command_checker):
        """Test per-line ordering of the two checks."""
        diagnostics = command_checker.check(r"\foo{a {b")
        assert [d.kind for d in diagnostics] == [
            DiagnosticKind.COMMAND,
            DiagnosticKind.UNKNOWN_COMMAND,
        ]

    def test_line_numbers(self, command_checker):
        """Test diagnostics carry their line."""
        diagnostics = command_checker.check("ok\n\\frobnicate\n\\alpha\n\\zap")
        assert [d.line for d in diagnostics] == [2, 4]

    def test_extra_commands(self):
        """Test caller-supplied vocabulary."""
        checker = CommandChecker(extra_commands={'frobnicate'})
        assert checker.check(r"\frobnicate{x}") == []

    def test_document_macros(self):
        """Test \\newcommand definitions can be recognized."""
        text = "\\newcommand{\\vect}[1]{\\textbf{#1}}\n\\vect{x}"

        plain = CommandChecker().check(text)
        assert [d.kind for d in plain] == [DiagnosticKind.UNKNOWN_COMMAND] * 3

        with_macros = CommandChecker(recognize_document_macros=True).check(text)
        assert with_macros == []

    def test_extract_macros(self, command_checker):
        """Test macro name extraction."""
        text = r"\newcommand{\foo}{x} \renewcommand\bar{y} \def\baz{z}"
        assert command_checker.extract_macros(text) == {'foo', 'bar', 'baz'}

    def test_convenience_function(self):
        """Test module-level function."""
        assert check_commands(r"\zap", extra_commands=['zap']) == []


class TestPassProperties:

    @pytest.mark.parametrize("checker_class", [MathModeChecker, EnvironmentChecker, CommandChecker])
    def test_idempotent(self, checker_class, sample_documents):
        """Test running a pass twice gives identical results."""
        checker = checker_class()
        for text in sample_documents.values():
            assert checker.check(text) == checker.check(text)

    def test_clean_document(self, sample_documents):
        """Test a well-formed document passes every check."""
        assert run_all_checks(sample_documents['clean']) == []

    def test_pass_grouped_order(self):
        """Test run_all_checks concatenates math, environment, command."""
        text = "\\frobnicate\n\\begin{a}\nx_1"
        kinds = [d.kind for d in run_all_checks(text)]
        assert kinds == [
            DiagnosticKind.MATH_MODE,
            DiagnosticKind.ENVIRONMENT,
            DiagnosticKind.UNKNOWN_COMMAND,
        ]

    def test_never_raises_on_malformed_input(self):
        """Test garbage input completes."""
        text = "}}}{{{\\begin{\\end{$$$\\[\\]%%%_^_^\\\\"
        run_all_checks(text)

    def test_line_helpers(self):
        """Test line helpers."""
        assert line_at("a\nb\nc", 4) == 3
        assert list(iter_lines("ab\ncd")) == [(1, "ab", 0), (2, "cd", 3)]
