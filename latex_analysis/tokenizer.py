import regex
import logging
from typing import Iterator, List, Optional

from .models import Token, TokenCategory, TokenizerState
from .command_classifier import classify


logger = logging.getLogger(__name__)


# Longest opener first so "$$" is not read as two "$".
MATH_OPENERS = ('$$', '$', '\\[')
MATH_CLOSERS = {'$$': '$$', '$': '$', '\\[': '\\]'}
ENVIRONMENT_NAME_PREFIXES = ('\\begin{', '\\end{')


class LaTeXTokenizer:
    """Mode-aware tokenizer producing one classified token per call.

    The tokenizer tracks whether the cursor is inside math mode (and which
    delimiter opened it) plus a best-effort stack of open environments. The
    stack only drives highlighting; ``EnvironmentChecker`` does the real
    balance check.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.state = TokenizerState()
        self._compile_patterns()

    def _compile_patterns(self):
        """Compile the patterns used by the tokenizing rules."""
        self.command_pattern = regex.compile(r'\\[a-zA-Z@]+')
        self.math_operator_pattern = regex.compile(r'[+\-*/=<>^_{}()]')
        self.number_pattern = regex.compile(r'[0-9]+')
        self.begin_pattern = regex.compile(r'\\begin\{([a-zA-Z*]+)\}')
        self.end_pattern = regex.compile(r'\\end\{([a-zA-Z*]+)\}')
        self.text_operator_pattern = regex.compile(r'[&_^#]')
        self.brace_pattern = regex.compile(r'\{[^{}\n]*\}')
        self.env_name_pattern = regex.compile(r'[a-zA-Z*@]+(?=\})')

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def next_token(self) -> Optional[Token]:
        """Consume and classify the next token.

        Returns:
            The next Token, or None once the input is exhausted
        """
        if self.at_end:
            return None

        text = self.text
        pos = self.pos
        state = self.state

        if text[pos] == '%':
            end = text.find('\n', pos)
            return self._emit(TokenCategory.COMMENT, end if end != -1 else len(text))

        if not state.in_math:
            for delimiter in MATH_OPENERS:
                if text.startswith(delimiter, pos):
                    state.math_delimiter = delimiter
                    return self._emit(TokenCategory.MATH_DELIMITER, pos + len(delimiter))
        else:
            closer = MATH_CLOSERS[state.math_delimiter]
            if text.startswith(closer, pos):
                state.math_delimiter = None
                return self._emit(TokenCategory.MATH_DELIMITER, pos + len(closer))
            return self._math_token()

        match = self.begin_pattern.match(text, pos)
        if match:
            env_name = match.group(1)
            state.environment_stack.append(env_name)
            return self._emit(TokenCategory.ENVIRONMENT_BEGIN, match.end(), env_name=env_name)

        match = self.end_pattern.match(text, pos)
        if match:
            env_name = match.group(1)
            expected = state.environment_stack.pop() if state.environment_stack else None
            if expected != env_name:
                return self._emit(TokenCategory.ENVIRONMENT_ERROR, match.end(),
                                  env_name=env_name, expected=expected)
            return self._emit(TokenCategory.ENVIRONMENT_END, match.end(), env_name=env_name)

        match = self.command_pattern.match(text, pos)
        if match:
            return self._emit(classify(match.group()), match.end())

        match = self.text_operator_pattern.match(text, pos)
        if match:
            return self._emit(TokenCategory.OPERATOR, match.end())

        match = self.brace_pattern.match(text, pos)
        if match:
            return self._emit(TokenCategory.BRACE, match.end())

        match = self.env_name_pattern.match(text, pos)
        if match and text.endswith(ENVIRONMENT_NAME_PREFIXES, 0, pos):
            return self._emit(TokenCategory.VARIABLE_NAME, match.end())

        return self._emit(TokenCategory.TEXT, pos + 1)

    def _math_token(self) -> Token:
        """Classify a token inside math mode (closing delimiter excluded)."""
        for pattern, category in (
            (self.command_pattern, TokenCategory.MATH_COMMAND),
            (self.math_operator_pattern, TokenCategory.OPERATOR),
            (self.number_pattern, TokenCategory.NUMBER),
        ):
            match = pattern.match(self.text, self.pos)
            if match:
                return self._emit(category, match.end())
        return self._emit(TokenCategory.MATH_LITERAL, self.pos + 1)

    def _emit(self, category: TokenCategory, end: int, **metadata) -> Token:
        value = self.text[self.pos:end]
        token = Token(
            category=category,
            value=value,
            position=self.pos,
            length=end - self.pos,
            line=self.line,
            metadata=metadata
        )
        self.line += value.count('\n')
        self.pos = end
        return token


def tokenize(text: str) -> List[Token]:
    """Tokenize a whole document with a fresh tokenizer state."""
    tokens = list(LaTeXTokenizer(text))
    logger.debug(f"Tokenized {len(text)} characters into {len(tokens)} tokens")
    return tokens


__all__ = ['LaTeXTokenizer', 'tokenize', 'MATH_OPENERS', 'MATH_CLOSERS']
