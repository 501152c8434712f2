"""
VM16 Code Generator
===================

This module turns the normalized code section into VM16 words. It
implements a two-pass process over the token list:

Pass 1 (Address Calculation)
----------------------------
- Walk the tokens with a running word counter starting at 0
- A LABEL binds its name to the current counter and takes no space
- COMMA and NEWLINE take no space
- Every other token (opcode or operand) takes exactly one word

Pass 2 (Encoding)
-----------------
- Walk the tokens again with a small per-instruction state machine:

      EXPECT_OPCODE -> EXPECT_ARG -> EXPECT_SEPARATOR -> EXPECT_OPCODE
                           ^                |
                           +---- COMMA -----+

- Emit the opcode word, then one word per operand
- Resolve label references through the pass 1 address map
- Check REG operands against the register range

The trailing two-word terminator is not part of the encoded stream; the
Assembler appends it before output.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
import difflib

from vm16_asm.assembler.lexer import Token, TokenType
from vm16_asm.cpu.isa import (
    MNEMONICS,
    InstructionInfo,
    OperandKind,
    get_instruction_info,
    is_register_address,
)
from vm16_asm.errors import (
    InvalidTokenError,
    NotARegisterError,
    TooFewArgumentsError,
    UndeclaredSymbolError,
    UnknownOpcodeError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Pass 1: Address Calculation
# =============================================================================

# Tokens that occupy no space in program memory
_ZERO_WIDTH = frozenset({TokenType.LABEL, TokenType.COMMA, TokenType.NEWLINE})


def calculate_addresses(tokens: list[Token]) -> dict[str, int]:
    """
    Bind every label to its word offset.

    Args:
        tokens: Normalized code section tokens

    Returns:
        Mapping from label name to word address
    """
    addresses: dict[str, int] = {}
    offset = 0
    for token in tokens:
        if token.type is TokenType.LABEL:
            addresses[token.value] = offset
            logger.debug("label '%s' = $%04X (line %d)", token.value, offset, token.line)
        if token.type not in _ZERO_WIDTH:
            offset += 1
    return addresses


# =============================================================================
# Pass 2: Encoding
# =============================================================================

class EncoderState(Enum):
    """States of the per-instruction encoder."""
    EXPECT_OPCODE = auto()      # Between instructions
    EXPECT_ARG = auto()         # Next token must be an operand
    EXPECT_SEPARATOR = auto()   # Next token must be ',' or end of line


@dataclass
class ListingEntry:
    """
    One encoded instruction, for listings.

    Attributes:
        address: Word address of the opcode
        line: Source line of the opcode
        mnemonic: Instruction mnemonic
        words: Opcode word followed by operand words
    """
    address: int
    line: int
    mnemonic: str
    words: list[int] = field(default_factory=list)


class _Encoder:
    """Runs the pass 2 state machine over one token list."""

    def __init__(self, addresses: dict[str, int]):
        self._addresses = addresses
        self._state = EncoderState.EXPECT_OPCODE
        self._info: InstructionInfo | None = None
        self._entry: ListingEntry | None = None
        self._address = 0
        self.entries: list[ListingEntry] = []

    @property
    def _remaining(self) -> int:
        return len(self._info.operands) - (len(self._entry.words) - 1)

    def run(self, tokens: list[Token]) -> list[ListingEntry]:
        for token in tokens:
            if self._state is EncoderState.EXPECT_OPCODE:
                self._on_opcode(token)
            elif self._state is EncoderState.EXPECT_ARG:
                self._on_argument(token)
            else:
                self._on_separator(token)

        if self._state is not EncoderState.EXPECT_OPCODE:
            if self._state is EncoderState.EXPECT_ARG or self._remaining:
                raise self._too_few(tokens[-1])
            self._finish()

        return self.entries

    def _on_opcode(self, token: Token) -> None:
        if token.type in (TokenType.LABEL, TokenType.NEWLINE):
            return

        if token.type is not TokenType.OPCODE:
            raise InvalidTokenError(
                f"expected an instruction, got {token.describe()}",
                location=token.location,
            )

        info = get_instruction_info(token.value)
        if info is None:
            raise UnknownOpcodeError(
                token.value,
                location=token.location,
                similar_mnemonics=difflib.get_close_matches(
                    token.value.upper(), sorted(MNEMONICS), n=3),
            )

        self._info = info
        self._entry = ListingEntry(self._address, token.line, info.mnemonic, [info.opcode])
        self._state = (EncoderState.EXPECT_ARG if info.operands
                       else EncoderState.EXPECT_SEPARATOR)

    def _on_argument(self, token: Token) -> None:
        if token.type is TokenType.NEWLINE:
            raise self._too_few(token)

        if token.type is TokenType.NUMBER:
            value = token.value
        elif token.type is TokenType.IDENTIFIER:
            if token.value not in self._addresses:
                raise UndeclaredSymbolError(
                    token.value,
                    location=token.location,
                    similar_symbols=difflib.get_close_matches(
                        token.value, list(self._addresses), n=3),
                )
            value = self._addresses[token.value]
        else:
            raise InvalidTokenError(
                f"expected an operand for '{self._info.mnemonic}', got {token.describe()}",
                location=token.location,
            )

        kind = self._info.operands[len(self._entry.words) - 1]
        if kind is OperandKind.REG and not is_register_address(value):
            raise NotARegisterError(self._info.mnemonic, value, location=token.location)

        self._entry.words.append(value)
        self._state = EncoderState.EXPECT_SEPARATOR

    def _on_separator(self, token: Token) -> None:
        if token.type is TokenType.COMMA:
            if not self._remaining:
                raise InvalidTokenError(
                    f"too many operands for '{self._info.mnemonic}' "
                    f"(expects {len(self._info.operands)})",
                    location=token.location,
                )
            self._state = EncoderState.EXPECT_ARG
        elif token.type is TokenType.NEWLINE:
            if self._remaining:
                raise self._too_few(token)
            self._finish()
        else:
            expected = "',' or end of line" if self._remaining else "end of line"
            raise InvalidTokenError(
                f"expected {expected} in '{self._info.mnemonic}' instruction, "
                f"got {token.describe()}",
                location=token.location,
            )

    def _finish(self) -> None:
        self.entries.append(self._entry)
        self._address += len(self._entry.words)
        self._info = None
        self._entry = None
        self._state = EncoderState.EXPECT_OPCODE

    def _too_few(self, token: Token) -> TooFewArgumentsError:
        return TooFewArgumentsError(
            self._info.mnemonic,
            expected=len(self._info.operands),
            given=len(self._entry.words) - 1,
            location=token.location,
        )


def encode(tokens: list[Token], addresses: dict[str, int]) -> list[int]:
    """
    Encode normalized code tokens into words.

    Args:
        tokens: Normalized code section tokens
        addresses: Label addresses from calculate_addresses()

    Returns:
        Opcode and operand words in program order (no terminator)

    Raises:
        UnknownOpcodeError: If a mnemonic is not in the opcode table
        NotARegisterError: If a REG operand is not a register address
        TooFewArgumentsError: If a line ends before all operands are given
        InvalidTokenError: If a token is out of place
    """
    entries = _Encoder(addresses).run(tokens)
    return [word for entry in entries for word in entry.words]


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Runs both passes and keeps the results for output.

    Usage:
        gen = CodeGenerator()
        words = gen.generate(normalized_tokens)
        gen.get_labels()     # {'main': 0, ...}
        gen.get_entries()    # per-instruction listing entries
    """

    def __init__(self) -> None:
        self._labels: dict[str, int] = {}
        self._entries: list[ListingEntry] = []
        self._words: list[int] = []

    def generate(self, tokens: list[Token]) -> list[int]:
        """
        Generate words from normalized code tokens.

        Args:
            tokens: Normalized code section tokens

        Returns:
            Encoded words (no terminator)
        """
        labels = calculate_addresses(tokens)
        entries = _Encoder(labels).run(tokens)

        self._labels = labels
        self._entries = entries
        self._words = [word for entry in entries for word in entry.words]

        logger.debug("encoded %d instruction(s), %d word(s)",
                     len(entries), len(self._words))
        return list(self._words)

    def get_words(self) -> list[int]:
        return list(self._words)

    def get_labels(self) -> dict[str, int]:
        return dict(self._labels)

    def get_entries(self) -> list[ListingEntry]:
        return list(self._entries)
