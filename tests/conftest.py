# =============================================================================
# conftest.py - Shared Test Helpers
# =============================================================================
# Token builders for tests that feed the pipeline stages directly, without
# going through the lexer.
# =============================================================================

import pytest

from vm16_asm.assembler.lexer import Token, TokenType


class TokenFactory:
    """Builds tokens with an auto-advancing line number."""

    def __init__(self) -> None:
        self.line = 1

    def _make(self, token_type: TokenType, value=None) -> Token:
        return Token(token_type, value, self.line)

    def section(self, name: str) -> Token:
        return self._make(TokenType.SECTION, name)

    def ident(self, name: str) -> Token:
        return self._make(TokenType.IDENTIFIER, name)

    def type(self, name: str) -> Token:
        return self._make(TokenType.TYPE, name)

    def num(self, value: int) -> Token:
        return self._make(TokenType.NUMBER, value)

    def char(self, value: str) -> Token:
        return self._make(TokenType.CHAR, value)

    def reg(self, letter: str) -> Token:
        return self._make(TokenType.REGISTER, letter)

    def label(self, name: str) -> Token:
        return self._make(TokenType.LABEL, name)

    def op(self, mnemonic: str) -> Token:
        return self._make(TokenType.OPCODE, mnemonic)

    def comma(self) -> Token:
        return self._make(TokenType.COMMA)

    def nl(self) -> Token:
        token = self._make(TokenType.NEWLINE)
        self.line += 1
        return token


@pytest.fixture
def t() -> TokenFactory:
    """Fresh token factory starting at line 1."""
    return TokenFactory()
