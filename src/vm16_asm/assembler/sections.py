"""
Section Splitter
================

Partitions the token stream into named sections. A VM16 program has
exactly two sections:

- **data**: constant declarations
- **code**: labels and instructions

The order of the two sections in the source does not matter.

Splitting Rules
---------------
- Every SECTION token starts a new section.
- The marker itself and the newline that ends the marker line are not part
  of the section body.
- Tokens before the first marker are an error.
"""

import logging
from dataclasses import dataclass

from vm16_asm.assembler.lexer import Token, TokenType
from vm16_asm.errors import (
    InvalidTokenError,
    MissingSectionError,
    UnsupportedSectionCountError,
)

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = ("data", "code")


@dataclass(frozen=True)
class Section:
    """
    A named, contiguous run of tokens.

    Attributes:
        name: Section name (without the leading '.')
        line: Source line of the section marker
        tokens: Body tokens, marker and its newline excluded
    """
    name: str
    line: int
    tokens: tuple[Token, ...]


def _split(tokens: list[Token]) -> list[Section]:
    sections: list[Section] = []
    marker: Token | None = None
    body: list[Token] = []

    def close() -> None:
        if marker is not None:
            if body and body[0].type is TokenType.NEWLINE:
                del body[0]
            sections.append(Section(str(marker.value), marker.line, tuple(body)))

    for token in tokens:
        if token.type is TokenType.SECTION:
            close()
            marker = token
            body = []
        elif marker is None:
            raise InvalidTokenError(
                f"{token.describe()} outside of any section",
                location=token.location,
                hint="start the program with '.data' or '.code'",
            )
        else:
            body.append(token)
    close()

    return sections


def split_sections(tokens: list[Token]) -> dict[str, Section]:
    """
    Split a token stream into its sections.

    Args:
        tokens: Complete token sequence of the program

    Returns:
        Mapping from section name to Section

    Raises:
        InvalidTokenError: If tokens appear before the first section marker
        MissingSectionError: If "data" or "code" is absent
        UnsupportedSectionCountError: If there are not exactly two sections
    """
    sections = _split(list(tokens))
    names = [s.name for s in sections]

    for required in REQUIRED_SECTIONS:
        if required not in names:
            raise MissingSectionError(required)

    if len(sections) != len(REQUIRED_SECTIONS):
        raise UnsupportedSectionCountError(len(sections), names)

    for section in sections:
        logger.debug("section '%s' at line %d: %d tokens",
                     section.name, section.line, len(section.tokens))

    return {s.name: s for s in sections}
