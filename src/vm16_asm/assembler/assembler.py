"""
VM16 Assembler - Main Interface
===============================

This module provides the main Assembler class, which is the primary interface
for assembling VM16 source code. It runs the lexer and the five pipeline
stages in order, each stage consuming the complete output of the previous:

1. Section splitting (sections.split_sections)
2. Data section compilation (data.compile_data_section)
3. Symbol validation (symbols.validate_symbols)
4. Code normalization (normalizer.normalize_code)
5. Address calculation and encoding (codegen.CodeGenerator)

The first error raised by any stage aborts the run; no partial output is
kept.

Example Usage
-------------
>>> from vm16_asm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> asm.assemble_string('''
... .data
... .code
... main:
...     OUT 42
...     HALT
... ''')
>>> asm.get_words()
[19, 42, 0, 0, 0]
>>> asm.write_binary("hello.bin")

Command-Line Usage
------------------
    $ vm16asm hello.asm -o hello.bin -s hello.sym -l hello.lst
"""

import logging
from pathlib import Path
from typing import Optional

from vm16_asm.assembler.codegen import CodeGenerator
from vm16_asm.assembler.data import Constant, compile_data_section
from vm16_asm.assembler.lexer import Lexer, Token
from vm16_asm.assembler.normalizer import normalize_code
from vm16_asm.assembler.output import format_listing, format_symbols, words_to_bytes
from vm16_asm.assembler.sections import split_sections
from vm16_asm.assembler.symbols import ENTRY_POINT, validate_symbols

logger = logging.getLogger(__name__)

# Number of zero words appended after the last instruction
TERMINATOR_WORDS = 2


class Assembler:
    """
    Main VM16 assembler class.

    Each assemble_* call replaces the results of the previous one. If a call
    raises, the results of the previous successful run are discarded.

    Attributes:
        entry_point: Name of the label that must exist in the code section
        terminator_words: Number of zero words appended to the program
    """

    def __init__(self, entry_point: str = ENTRY_POINT,
                 terminator_words: int = TERMINATOR_WORDS):
        """
        Initialize the assembler.

        Args:
            entry_point: Required entry label (default "main")
            terminator_words: Zero words appended to the output (default 2)
        """
        self.entry_point = entry_point
        self.terminator_words = terminator_words
        self._reset()

    def _reset(self) -> None:
        self._codegen = CodeGenerator()
        self._words: list[int] = []
        self._constants: list[Constant] = []
        self._labels: dict[str, int] = {}
        self._source_lines: Optional[list[str]] = None

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_tokens(self, tokens: list[Token]) -> list[int]:
        """
        Assemble an already-lexed token sequence.

        Args:
            tokens: Complete token sequence of the program

        Returns:
            Program words, including the zero terminator

        Raises:
            AssemblerError: If any stage fails
        """
        self._reset()

        sections = split_sections(tokens)
        data = sections["data"]
        code = sections["code"]

        constants = compile_data_section(data.tokens)
        symbols = validate_symbols(code.tokens, constants, self.entry_point)
        normalized = normalize_code(code.tokens, symbols)
        words = self._codegen.generate(normalized)
        words.extend([0] * self.terminator_words)

        self._constants = constants
        self._labels = self._codegen.get_labels()
        self._words = words

        logger.info("assembled %d word(s): %d constant(s), %d label(s)",
                    len(words), len(constants), len(self._labels))
        return list(words)

    def assemble_string(self, source: str, filename: str = "<input>") -> list[int]:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            Program words, including the zero terminator

        Raises:
            AssemblerError: If assembly fails
        """
        logger.debug("tokenizing %s", filename)
        tokens = list(Lexer(source, filename).tokenize())
        logger.debug("%d token(s)", len(tokens))

        words = self.assemble_tokens(tokens)
        self._source_lines = source.splitlines()
        return words

    def assemble_file(self, filepath: str | Path) -> list[int]:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to assembly source file

        Returns:
            Program words, including the zero terminator

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        logger.info("assembling %s", filepath)
        return self.assemble_string(filepath.read_text(), str(filepath))

    # =========================================================================
    # Results
    # =========================================================================

    def get_words(self) -> list[int]:
        """Get the assembled words, including the terminator."""
        return list(self._words)

    def get_code(self) -> bytes:
        """Get the assembled program as little-endian bytes."""
        return words_to_bytes(self._words)

    def get_constants(self) -> dict[str, int]:
        """Get constant values by name."""
        return {c.name: c.value for c in self._constants}

    def get_labels(self) -> dict[str, int]:
        """Get label addresses by name."""
        return dict(self._labels)

    def get_symbols(self) -> dict[str, int]:
        """Get constants and labels in one mapping."""
        symbols = self.get_constants()
        symbols.update(self._labels)
        return symbols

    def get_listing(self) -> str:
        """Get the assembly listing as a string."""
        return format_listing(self._codegen.get_entries(), self._labels, self._source_lines)

    # =========================================================================
    # Output Methods
    # =========================================================================

    def write_binary(self, filepath: str | Path) -> None:
        """
        Write the program as raw little-endian words.

        Args:
            filepath: Output file path
        """
        code = self.get_code()
        Path(filepath).write_bytes(code)
        logger.info("wrote %d bytes to %s", len(code), filepath)

    def write_symbols(self, filepath: str | Path) -> None:
        """Write symbol table file."""
        Path(filepath).write_text(format_symbols(self._constants, self._labels))
        logger.info("wrote symbols to %s", filepath)

    def write_listing(self, filepath: str | Path) -> None:
        """Write assembly listing file."""
        Path(filepath).write_text(self.get_listing())
        logger.info("wrote listing to %s", filepath)


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> bytes:
    """
    Convenience function to assemble source code.

    Args:
        source: Assembly source code
        filename: Virtual filename for errors

    Returns:
        Program bytes (little-endian words)

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler()
    asm.assemble_string(source, filename)
    return asm.get_code()


def assemble_file(filepath: str | Path) -> bytes:
    """
    Convenience function to assemble a file.

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler()
    asm.assemble_file(filepath)
    return asm.get_code()
