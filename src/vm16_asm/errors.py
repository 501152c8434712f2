"""
VM16 Assembler Error Hierarchy
==============================

This module defines the exception hierarchy for the VM16 assembler.
All exceptions inherit from VM16Error, allowing callers to catch every
assembler failure with a single except clause if desired.

Exception Hierarchy
-------------------
VM16Error (base)
└── AssemblerError (assembler-related)
    ├── AssemblySyntaxError - source text cannot be tokenized
    ├── SectionError - section layout problems
    │   ├── MissingSectionError - "data" or "code" section absent
    │   └── UnsupportedSectionCountError - not exactly two sections
    ├── MalformedConstantError - data entry breaks the 4-token grammar
    ├── DuplicateSymbolError - name declared more than once
    │   ├── DuplicateConstantError
    │   └── DuplicateLabelError
    ├── AmbiguousSymbolError - label and constant share a name
    ├── MissingEntryPointError - no "main" label
    ├── UndeclaredSymbolError - reference to an unknown name
    ├── UnknownOpcodeError - mnemonic not in the opcode table
    ├── OperandError - instruction operands are wrong
    │   ├── NotARegisterError
    │   ├── TooFewArgumentsError
    │   └── InvalidTokenError
    └── OutputRangeError - word does not fit in 16 bits

Every error is fatal: the pipeline stops at the first one. Errors carry an
optional SourceLocation; whole-program structural errors (missing sections,
missing entry point) have none.

Error messages follow this format:
    filename:line:column: error: description
    source_line_text
        ^ (pointer to error location, when the column is known)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class VM16Error(Exception):
    """
    Base exception for all VM16 assembler errors.

        try:
            assembler.assemble_file("program.asm")
        except VM16Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed, 0 when unknown)
    """
    filename: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        """Format as 'filename:line:column' (or 'filename:line')."""
        if self.column > 0:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(VM16Error):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def line(self) -> Optional[int]:
        """Source line of the error, or None for whole-program errors."""
        return self.location.line if self.location else None

    @property
    def kind(self) -> str:
        """Short error kind name, e.g. 'DuplicateLabel'."""
        name = type(self).__name__
        return name[:-len("Error")] if name.endswith("Error") else name

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            hello.asm:7:9: error: undeclared symbol 'lop'
                JMP lop
                    ^
            hint: did you mean 'loop'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in assembly source text.

    Raised by the lexer for input that cannot be tokenized, e.g. an
    unexpected character or an unterminated character literal.
    """
    pass


# =============================================================================
# Section Errors
# =============================================================================

class SectionError(AssemblerError):
    """Base class for problems with the section layout of a program."""
    pass


class MissingSectionError(SectionError):
    """A required section ("data" or "code") is not present."""

    def __init__(self, section: str):
        self.section = section
        super().__init__(
            f"missing '{section}' section",
            hint=f"add a '.{section}' line to the source",
        )


class UnsupportedSectionCountError(SectionError):
    """
    The program does not have exactly two sections.

    Only "data" and "code" are supported; any additional section (or a
    repeated one) is rejected.
    """

    def __init__(self, count: int, names: Optional[list[str]] = None):
        self.count = count
        self.names = names or []
        hint = None
        if self.names:
            hint = "found sections: " + ", ".join(f"'{n}'" for n in self.names)
        super().__init__(
            f"expected exactly 2 sections ('data' and 'code'), found {count}",
            hint=hint,
        )


# =============================================================================
# Symbol Errors
# =============================================================================

class MalformedConstantError(AssemblerError):
    """
    A data section entry does not follow the constant grammar.

    Each entry must be exactly: NAME TYPE LITERAL <newline>, where TYPE is
    NUM (numeric literal) or CHR (character literal).
    """
    pass


class DuplicateSymbolError(AssemblerError):
    """
    Symbol declared multiple times.

    Includes the line of the original declaration when available.
    """

    symbol_kind = "symbol"

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
    ):
        self.symbol = symbol
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{symbol}' was first declared at {original_location}"

        super().__init__(
            f"duplicate {self.symbol_kind} '{symbol}'",
            location=location,
            hint=hint,
        )


class DuplicateConstantError(DuplicateSymbolError):
    """The same constant name appears twice in the data section."""
    symbol_kind = "constant"


class DuplicateLabelError(DuplicateSymbolError):
    """The same label is declared twice in the code section."""
    symbol_kind = "label"


class AmbiguousSymbolError(AssemblerError):
    """A label in the code section has the same name as a constant."""

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        constant_location: Optional[SourceLocation] = None,
    ):
        self.symbol = symbol
        self.constant_location = constant_location

        hint = None
        if constant_location:
            hint = f"constant '{symbol}' is declared at {constant_location}"

        super().__init__(
            f"ambiguous symbol '{symbol}' is both a label and a constant",
            location=location,
            hint=hint,
        )


class MissingEntryPointError(AssemblerError):
    """The code section does not declare the entry point label."""

    def __init__(self, entry_point: str = "main"):
        self.entry_point = entry_point
        super().__init__(
            f"entry point '{entry_point}' is not defined",
            hint=f"declare '{entry_point}:' in the code section",
        )


class UndeclaredSymbolError(AssemblerError):
    """
    Reference to a name that is neither a constant nor a label.

    Similarly-named symbols are suggested to help catch typos.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        hint = None
        if self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undeclared symbol '{symbol}'",
            location=location,
            hint=hint,
        )


class UnknownOpcodeError(AssemblerError):
    """Mnemonic is not part of the VM16 instruction set."""

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        similar_mnemonics: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.similar_mnemonics = similar_mnemonics or []

        hint = None
        if self.similar_mnemonics:
            suggestions = ", ".join(self.similar_mnemonics[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"unknown opcode '{mnemonic}'",
            location=location,
            hint=hint,
        )


# =============================================================================
# Operand Errors
# =============================================================================

class OperandError(AssemblerError):
    """Base class for malformed instruction operands."""
    pass


class NotARegisterError(OperandError):
    """
    A REG operand does not resolve to a register address.

    Registers are addressed as 32768-32775 (a-h).
    """

    def __init__(
        self,
        mnemonic: str,
        value: int,
        location: Optional[SourceLocation] = None,
    ):
        self.mnemonic = mnemonic
        self.value = value
        super().__init__(
            f"'{mnemonic}' expects a register, got {value}",
            location=location,
            hint="registers are a-h (32768-32775)",
        )


class TooFewArgumentsError(OperandError):
    """An instruction line ended before all operands were given."""

    def __init__(
        self,
        mnemonic: str,
        expected: int,
        given: int,
        location: Optional[SourceLocation] = None,
    ):
        self.mnemonic = mnemonic
        self.expected = expected
        self.given = given
        super().__init__(
            f"'{mnemonic}' expects {expected} operand(s), got {given}",
            location=location,
        )


class InvalidTokenError(OperandError):
    """A token appears where the instruction grammar does not allow it."""
    pass


# =============================================================================
# Output Errors
# =============================================================================

class OutputRangeError(AssemblerError):
    """An emitted word does not fit in an unsigned 16-bit value."""

    def __init__(self, index: int, value: int):
        self.index = index
        self.value = value
        super().__init__(
            f"word {index} has value {value}, outside 0-65535",
            hint="the program is too large for a 16-bit address space",
        )
