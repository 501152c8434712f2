"""
VM16 Assembly Language Lexer
============================

This module implements a lexer (tokenizer) for VM16 assembly language.
It converts source text into the flat token sequence consumed by the
assembler pipeline.

Token Types
-----------
- SECTION: Section marker (.data, .code)
- LABEL: Label declaration (name:)
- OPCODE: Instruction mnemonic (first word of a code line)
- TYPE: Constant type keyword (NUM, CHR)
- REGISTER: Register letter (a-h, either case)
- IDENTIFIER: Constant or label reference
- NUMBER: Decimal (optionally negative), hex (0xFF), binary (0b1010), octal (0o17)
- CHAR: Single-quoted character ('A')
- COMMA: Operand separator
- NEWLINE: End of a non-empty line

Comments
--------
A semicolon starts a comment that runs to the end of the line. Blank and
comment-only lines produce no tokens at all, so every NEWLINE token closes
a line that had content.

Example
-------
>>> from vm16_asm.assembler.lexer import Lexer
>>> lexer = Lexer("main: OUT 'A'  ; print A", "example.asm")
>>> for token in lexer.tokenize():
...     print(token)
Token(LABEL, 'main', 1:1)
Token(OPCODE, 'OUT', 1:7)
Token(CHAR, 'A', 1:11)
Token(NEWLINE, 1:25)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import string

from vm16_asm.cpu.isa import is_register_name
from vm16_asm.errors import AssemblySyntaxError, SourceLocation


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for the VM16 assembly language.

    Each token type represents a category of lexical element that can
    appear in assembly source code.
    """

    # Structure
    SECTION = auto()     # .name
    LABEL = auto()       # name:
    NEWLINE = auto()     # End of a non-empty line
    COMMA = auto()       # ,

    # Words
    OPCODE = auto()      # Instruction mnemonic
    TYPE = auto()        # NUM / CHR
    REGISTER = auto()    # a-h
    IDENTIFIER = auto()  # Constant or label reference

    # Literals
    NUMBER = auto()      # Integer literal
    CHAR = auto()        # Single-quoted character


# Constant type keywords recognized in data sections
TYPE_KEYWORDS = frozenset({"NUM", "CHR"})

# Section whose lines are constant declarations rather than instructions
DATA_SECTION = "data"


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    Represents a single token from the source code.

    Tokens are immutable; passes that rewrite a token create a new one
    with dataclasses.replace().

    Attributes:
        type: The TokenType classification
        value: Name for words, int for numbers, one-char str for CHAR,
               None for COMMA and NEWLINE
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed, 0 when unknown)
        filename: Name of the source file
    """
    type: TokenType
    value: str | int | None
    line: int
    column: int = 0
    filename: str = "<input>"

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def describe(self) -> str:
        """Human-readable description for error messages."""
        if self.type is TokenType.NEWLINE:
            return "end of line"
        if self.type is TokenType.COMMA:
            return "','"
        if self.type is TokenType.SECTION:
            return f"section marker '.{self.value}'"
        if self.type is TokenType.LABEL:
            return f"label '{self.value}:'"
        return f"{self.type.name.lower()} {self.value!r}"


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes VM16 assembly source code.

    Word classification depends on position: outside the data section the
    first word of a line that is not a label declaration is an OPCODE.
    Everywhere else a word is a TYPE keyword, a REGISTER letter, or an
    IDENTIFIER, in that order of precedence.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters + "_"

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    # Escape sequences in character literals
    ESCAPE_SEQUENCES = {
        "n": "\n",      # Newline
        "r": "\r",      # Carriage return
        "t": "\t",      # Tab
        "\\": "\\",     # Backslash
        '"': '"',       # Double quote
        "'": "'",       # Single quote
        "0": "\0",      # Null
    }

    def __init__(self, source: str, filename: str = "<input>", line_number: int = 1):
        """
        Initialize the lexer with source code.

        Args:
            source: The assembly source code to tokenize
            filename: Name of the source file (for error messages)
            line_number: Starting line number (default 1)
        """
        self.source = source
        self.filename = filename

        # Current position in source
        self._pos = 0
        self._line = line_number
        self._column = 1
        self._line_start_pos = 0

        # Line state: whether anything was emitted, and whether the next
        # word is in instruction position
        self._line_has_tokens = False
        self._at_instruction_start = True

        # Name of the section being tokenized (None before the first marker)
        self._section: Optional[str] = None

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects representing each lexical element

        Raises:
            AssemblySyntaxError: If invalid syntax is encountered
        """
        while not self._at_end():
            if self._skip_whitespace():
                continue

            if self._skip_comment():
                continue

            token = self._scan_token()
            if token is not None:
                yield token

        # Close a final line that has no trailing newline
        if self._line_has_tokens:
            self._line_has_tokens = False
            yield self._make_token(TokenType.NEWLINE, None)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of source."""
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """
        Look at character at current position + offset without advancing.

        Returns empty string if past end of source.
        """
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """
        Consume and return the current character, advancing position.

        Updates line and column tracking.
        """
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(
        self,
        token_type: TokenType,
        value: str | int | None,
        start_line: Optional[int] = None,
        start_column: Optional[int] = None,
    ) -> Token:
        """
        Create a token with current or specified position.

        Any token other than NEWLINE marks the current line as non-empty.
        """
        if token_type is not TokenType.NEWLINE:
            self._line_has_tokens = True
        return Token(
            type=token_type,
            value=value,
            line=start_line or self._line,
            column=start_column or self._column,
            filename=self.filename,
        )

    def _error(self, message: str) -> AssemblySyntaxError:
        """
        Create a syntax error with current location and source line.
        """
        location = SourceLocation(self.filename, self._line, self._column)
        return AssemblySyntaxError(message, location, source_line=self.get_current_line())

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace(self) -> bool:
        """
        Skip whitespace characters (space, tab, carriage return) but not newlines.

        Returns:
            True if any whitespace was skipped
        """
        skipped = False
        while self._peek() and self._peek() in " \t\r":
            self._advance()
            skipped = True
        return skipped

    def _skip_comment(self) -> bool:
        """
        Skip a semicolon comment to end of line.

        Returns:
            True if a comment was skipped
        """
        if self._peek() == ";":
            while not self._at_end() and self._peek() != "\n":
                self._advance()
            return True
        return False

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Optional[Token]:
        """
        Scan the next token from source.

        Returns:
            The next Token, or None for a newline that closes an empty line
        """
        start_line = self._line
        start_column = self._column

        char = self._peek()

        if char == "\n":
            self._advance()
            self._at_instruction_start = True
            if not self._line_has_tokens:
                return None
            self._line_has_tokens = False
            return self._make_token(TokenType.NEWLINE, None, start_line, start_column)

        if char in self.IDENT_START:
            return self._scan_word(start_line, start_column)

        if char.isdigit():
            return self._scan_number(start_line, start_column)

        if char == "-":
            self._advance()
            if not self._peek().isdigit():
                raise self._error("expected digits after '-'")
            token = self._scan_number(start_line, start_column)
            return self._make_token(TokenType.NUMBER, -token.value, start_line, start_column)

        if char == ".":
            return self._scan_section(start_line, start_column)

        if char == "'":
            return self._scan_char(start_line, start_column)

        if char == ",":
            self._advance()
            self._at_instruction_start = False
            return self._make_token(TokenType.COMMA, None, start_line, start_column)

        self._advance()
        raise self._error(f"unexpected character '{char}'")

    def _read_name(self) -> str:
        chars = []
        while self._peek() and self._peek() in self.IDENT_CHARS:
            chars.append(self._advance())
        return "".join(chars)

    def _scan_word(self, start_line: int, start_column: int) -> Token:
        """
        Scan a word and classify it as LABEL, OPCODE, TYPE, REGISTER or
        IDENTIFIER.
        """
        name = self._read_name()

        if self._peek() == ":":
            self._advance()  # consume :
            if is_register_name(name):
                # References to the name would lex as the register
                raise AssemblySyntaxError(
                    f"label '{name}' has the name of a register",
                    SourceLocation(self.filename, start_line, start_column),
                    hint="registers a-h cannot be used as label names",
                    source_line=self.get_current_line(),
                )
            return self._make_token(TokenType.LABEL, name, start_line, start_column)

        in_instruction_position = self._at_instruction_start
        self._at_instruction_start = False

        if in_instruction_position and self._section != DATA_SECTION:
            return self._make_token(TokenType.OPCODE, name.upper(), start_line, start_column)

        if name.upper() in TYPE_KEYWORDS:
            return self._make_token(TokenType.TYPE, name.upper(), start_line, start_column)

        if is_register_name(name):
            return self._make_token(TokenType.REGISTER, name, start_line, start_column)

        return self._make_token(TokenType.IDENTIFIER, name, start_line, start_column)

    def _scan_section(self, start_line: int, start_column: int) -> Token:
        """Scan a section marker (.name)."""
        self._advance()  # consume .
        if not (self._peek() and self._peek() in self.IDENT_START):
            raise self._error("expected section name after '.'")
        name = self._read_name()
        self._section = name
        self._at_instruction_start = False
        return self._make_token(TokenType.SECTION, name, start_line, start_column)

    def _scan_number(self, start_line: int, start_column: int) -> Token:
        """
        Scan an unsigned number.

        Handles decimal plus 0x (hex), 0b (binary) and 0o (octal) prefixes.
        """
        self._at_instruction_start = False

        digits = "0123456789"
        base = 10
        if self._peek() == "0" and self._peek(1).lower() in ("x", "b", "o"):
            prefix = self._peek(1).lower()
            self._advance()  # consume 0
            self._advance()  # consume prefix
            base, digits = {
                "x": (16, string.hexdigits),
                "b": (2, "01"),
                "o": (8, "01234567"),
            }[prefix]

        chars = []
        while self._peek() and self._peek() in digits:
            chars.append(self._advance())

        if not chars:
            raise self._error("expected digits after number prefix")

        if self._peek() and self._peek() in self.IDENT_CHARS:
            raise self._error(f"invalid digit '{self._peek()}' in number")

        value = int("".join(chars), base)
        return self._make_token(TokenType.NUMBER, value, start_line, start_column)

    def _scan_char(self, start_line: int, start_column: int) -> Token:
        """Scan a single-quoted character literal."""
        self._advance()  # consume opening '
        self._at_instruction_start = False

        if self._at_end() or self._peek() == "\n":
            raise self._error("unterminated character literal")

        if self._peek() == "\\":
            self._advance()  # consume backslash
            char = self._scan_escape_sequence()
        else:
            char = self._advance()

        if self._peek() != "'":
            raise self._error("expected closing quote for character literal")
        self._advance()  # consume closing '

        return self._make_token(TokenType.CHAR, char, start_line, start_column)

    def _scan_escape_sequence(self) -> str:
        """
        Scan an escape sequence after backslash.

        Returns:
            The character represented by the escape sequence
        """
        if self._at_end():
            raise self._error("unexpected end of input in escape sequence")

        char = self._advance()

        if char in self.ESCAPE_SEQUENCES:
            return self.ESCAPE_SEQUENCES[char]

        # Hex escape: \xNN
        if char == "x":
            hex_chars = []
            for _ in range(2):
                if self._peek() and self._peek() in string.hexdigits:
                    hex_chars.append(self._advance())
                else:
                    break

            if not hex_chars:
                raise self._error("expected hexadecimal digits after \\x")

            return chr(int("".join(hex_chars), 16))

        # Unknown escape - treat as literal
        return char

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def get_current_line(self) -> str:
        """Get the current line of source text."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]


def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """
    Convenience function to tokenize a whole source string.

    Args:
        source: Assembly source code
        filename: Name used in token locations

    Returns:
        List of tokens
    """
    return list(Lexer(source, filename).tokenize())
