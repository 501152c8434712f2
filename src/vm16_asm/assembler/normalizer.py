"""
Code Normalizer
===============

Rewrites every token of the code section, one token at a time, into the
form the encoder consumes. The mapping is order-preserving and looks at
no neighbouring tokens:

| Input             | Output                                        |
|-------------------|-----------------------------------------------|
| NUMBER n          | NUMBER n mod 32768 (negatives wrap)           |
| CHAR c            | NUMBER ord(c), which must be below 32768      |
| REGISTER r        | NUMBER 32768 + index of r in a-h (any case)   |
| IDENTIFIER name   | NUMBER value if name is a constant            |
|                   | IDENTIFIER name if name is a label            |
| anything else     | unchanged                                     |

Label references stay symbolic until the address calculator has bound
every label. Operand counts and kinds are checked by the encoder, not here.
"""

from dataclasses import replace

from vm16_asm.assembler.lexer import Token, TokenType
from vm16_asm.assembler.symbols import SymbolTable
from vm16_asm.cpu.isa import VALUE_SPACE, normalize_number, register_address
from vm16_asm.errors import InvalidTokenError, UndeclaredSymbolError


def normalize_token(token: Token, symbols: SymbolTable) -> Token:
    """
    Normalize a single code token.

    Args:
        token: Token from the code section
        symbols: Validated symbol table

    Returns:
        The rewritten token (or the same token when nothing changes)

    Raises:
        UndeclaredSymbolError: If an identifier is neither constant nor label
        InvalidTokenError: If a character literal is outside the value range
    """
    if token.type is TokenType.NUMBER:
        return replace(token, value=normalize_number(token.value))

    if token.type is TokenType.CHAR:
        code_point = ord(token.value)
        if code_point >= VALUE_SPACE:
            raise InvalidTokenError(
                f"character literal has code point {code_point}, "
                f"outside the value range 0-{VALUE_SPACE - 1}",
                location=token.location,
            )
        return replace(token, type=TokenType.NUMBER, value=code_point)

    if token.type is TokenType.REGISTER:
        return replace(token, type=TokenType.NUMBER, value=register_address(token.value))

    if token.type is TokenType.IDENTIFIER:
        # Validated tables never hold a name as both constant and label
        if symbols.is_constant(token.value):
            return replace(token, type=TokenType.NUMBER,
                           value=symbols.constants[token.value].value)
        if symbols.is_label(token.value):
            return token
        raise UndeclaredSymbolError(
            token.value,
            location=token.location,
            similar_symbols=symbols.similar(token.value),
        )

    return token


def normalize_code(
    code_tokens: tuple[Token, ...] | list[Token],
    symbols: SymbolTable,
) -> list[Token]:
    """
    Normalize all code section tokens.

    Args:
        code_tokens: Body of the code section
        symbols: Validated symbol table

    Returns:
        New token list of the same length and order
    """
    return [normalize_token(token, symbols) for token in code_tokens]
