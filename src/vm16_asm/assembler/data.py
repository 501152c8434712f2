"""
Data-Section Compiler
=====================

Compiles the body of the "data" section into a constant table.

Each constant declaration is exactly four tokens:

    IDENTIFIER  TYPE  LITERAL  NEWLINE

| Type | Literal   | Stored value                      |
|------|-----------|-----------------------------------|
| NUM  | NUMBER    | literal normalized into 0-32767   |
| CHR  | CHAR      | code point of the character       |

Example
-------
    .data
    limit NUM 100
    minus NUM -1      ; stored as 32767
    star  CHR '*'     ; stored as 42
"""

import logging
from dataclasses import dataclass
from typing import Optional

from vm16_asm.assembler.lexer import Token, TokenType
from vm16_asm.cpu.isa import VALUE_SPACE, normalize_number
from vm16_asm.errors import (
    DuplicateConstantError,
    MalformedConstantError,
    SourceLocation,
)

logger = logging.getLogger(__name__)

# Literal token type required by each constant type keyword
LITERAL_TYPES = {
    "NUM": TokenType.NUMBER,
    "CHR": TokenType.CHAR,
}


@dataclass(frozen=True)
class Constant:
    """
    A named immutable value declared in the data section.

    Attributes:
        name: Constant name (unique)
        value: Resolved numeric value
        line: Source line of the declaration
        filename: Source file of the declaration
    """
    name: str
    value: int
    line: int = 0
    filename: str = "<input>"

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line)


class _DataParser:
    """Walks the data section four tokens at a time."""

    def __init__(self, tokens: tuple[Token, ...] | list[Token]):
        self._tokens = list(tokens)
        self._pos = 0

    def _next(self, expected: str) -> Token:
        if self._pos >= len(self._tokens):
            last = self._tokens[-1]
            raise MalformedConstantError(
                f"unexpected end of data section, expected {expected}",
                location=last.location,
            )
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def _malformed(self, token: Token, expected: str) -> MalformedConstantError:
        return MalformedConstantError(
            f"expected {expected}, got {token.describe()}",
            location=token.location,
            hint="constants are declared as: NAME NUM 123 or NAME CHR 'c'",
        )

    def parse(self) -> list[Constant]:
        constants: list[Constant] = []
        while self._pos < len(self._tokens):
            constants.append(self._parse_declaration())
        return constants

    def _parse_declaration(self) -> Constant:
        name_token = self._next("constant name")
        if name_token.type is not TokenType.IDENTIFIER:
            raise self._malformed(name_token, "constant name")

        type_token = self._next("constant type")
        if type_token.type is not TokenType.TYPE or type_token.value not in LITERAL_TYPES:
            raise self._malformed(type_token, "constant type (NUM or CHR)")

        literal_token = self._next("literal")
        expected_type = LITERAL_TYPES[type_token.value]
        if literal_token.type is not expected_type:
            if literal_token.type in LITERAL_TYPES.values():
                raise MalformedConstantError(
                    f"{type_token.value} constant '{name_token.value}' "
                    f"cannot hold {literal_token.describe()}",
                    location=literal_token.location,
                    hint="NUM takes a number, CHR takes a character literal",
                )
            raise self._malformed(literal_token, f"{expected_type.name.lower()} literal")

        newline_token = self._next("end of line")
        if newline_token.type is not TokenType.NEWLINE:
            raise self._malformed(newline_token, "end of line")

        if expected_type is TokenType.NUMBER:
            value = normalize_number(literal_token.value)
        else:
            value = ord(literal_token.value)
            if value >= VALUE_SPACE:
                raise MalformedConstantError(
                    f"CHR constant '{name_token.value}' has code point {value}, "
                    f"outside the value range 0-{VALUE_SPACE - 1}",
                    location=literal_token.location,
                )

        return Constant(
            name=name_token.value,
            value=value,
            line=name_token.line,
            filename=name_token.filename,
        )


def compile_data_section(tokens: tuple[Token, ...] | list[Token]) -> list[Constant]:
    """
    Compile data section tokens into an ordered constant table.

    Args:
        tokens: Body of the data section

    Returns:
        Constants in declaration order

    Raises:
        MalformedConstantError: If a declaration breaks the 4-token grammar
        DuplicateConstantError: If a name is declared twice
    """
    constants = _DataParser(tokens).parse()

    seen: dict[str, Constant] = {}
    for constant in constants:
        original: Optional[Constant] = seen.get(constant.name)
        if original is not None:
            raise DuplicateConstantError(
                constant.name,
                location=constant.location,
                original_location=original.location,
            )
        seen[constant.name] = constant

    logger.debug("compiled %d constant(s)", len(constants))
    return constants
