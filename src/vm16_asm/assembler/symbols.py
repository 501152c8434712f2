"""
Symbol Validator
================

Collects the labels declared in the code section and validates the
program's symbol namespace before any token is rewritten:

1. No label is declared twice.
2. No label shares its name with a constant.
3. The entry point label ("main" by default) exists.

Labels exist in two phases. This module records which names are
declared; their word addresses are bound later by the address calculator
(see codegen.calculate_addresses) and kept in a separate mapping.
"""

import difflib
import logging
from dataclasses import dataclass, field

from vm16_asm.assembler.data import Constant
from vm16_asm.assembler.lexer import Token, TokenType
from vm16_asm.errors import (
    AmbiguousSymbolError,
    DuplicateLabelError,
    MissingEntryPointError,
)

logger = logging.getLogger(__name__)

ENTRY_POINT = "main"


@dataclass(frozen=True)
class SymbolTable:
    """
    Validated program symbols.

    Attributes:
        labels: Declared label names, in declaration order
        constants: Constant name -> Constant
    """
    labels: tuple[str, ...]
    constants: dict[str, Constant] = field(default_factory=dict)

    def is_label(self, name: str) -> bool:
        return name in self.labels

    def is_constant(self, name: str) -> bool:
        return name in self.constants

    def similar(self, name: str) -> list[str]:
        """Names close to `name`, for 'did you mean' hints."""
        candidates = list(self.constants) + list(self.labels)
        return difflib.get_close_matches(name, candidates, n=3)


def validate_symbols(
    code_tokens: tuple[Token, ...] | list[Token],
    constants: list[Constant],
    entry_point: str = ENTRY_POINT,
) -> SymbolTable:
    """
    Collect and validate code section labels against the constant table.

    Args:
        code_tokens: Body of the code section
        constants: Constant table from the data section compiler
        entry_point: Name of the label where execution starts

    Returns:
        SymbolTable with the declared labels and the constants

    Raises:
        DuplicateLabelError: If a label is declared twice
        AmbiguousSymbolError: If a label has the same name as a constant
        MissingEntryPointError: If the entry point label is absent
    """
    declarations: dict[str, Token] = {}
    for token in code_tokens:
        if token.type is not TokenType.LABEL:
            continue
        original = declarations.get(token.value)
        if original is not None:
            raise DuplicateLabelError(
                token.value,
                location=token.location,
                original_location=original.location,
            )
        declarations[token.value] = token

    constant_table = {c.name: c for c in constants}
    for name, token in declarations.items():
        if name in constant_table:
            raise AmbiguousSymbolError(
                name,
                location=token.location,
                constant_location=constant_table[name].location,
            )

    if entry_point not in declarations:
        raise MissingEntryPointError(entry_point)

    logger.debug("validated %d label(s), entry point '%s'",
                 len(declarations), entry_point)
    return SymbolTable(labels=tuple(declarations), constants=constant_table)
