"""
VM16 Assembler
==============

This package assembles VM16 source programs into a stream of 16-bit
little-endian words for the VM16 virtual machine.

Main Components
---------------
- **Assembler**: Main assembler class that orchestrates the pipeline
- **Lexer**: Tokenizes source text into tokens
- **split_sections**: Splits the token stream into "data" and "code"
- **compile_data_section**: Builds the constant table
- **validate_symbols**: Checks labels against constants and the entry point
- **normalize_code**: Resolves literals, registers and constants
- **CodeGenerator**: Computes label addresses and encodes instructions

Assembly Process
----------------
Every stage consumes the complete output of the previous one:

1. Lexing: source text -> tokens
2. Section splitting: tokens -> {"data": ..., "code": ...}
3. Data compilation: data tokens -> constants
4. Symbol validation: code labels + constants -> symbol table
5. Normalization: code tokens -> numbers and label references
6. Code generation (two-pass):
   - Pass 1: label address calculation
   - Pass 2: opcode/operand encoding with operand-kind checks

Example Usage
-------------
>>> from vm16_asm.assembler import Assembler
>>> asm = Assembler()
>>> asm.assemble_string('''
... .data
... star CHR '*'
... .code
... main: OUT star
...       HALT
... ''')
[19, 42, 0, 0, 0]
"""

from vm16_asm.assembler.assembler import Assembler, assemble, assemble_file, TERMINATOR_WORDS
from vm16_asm.assembler.lexer import Lexer, Token, TokenType, tokenize
from vm16_asm.assembler.sections import Section, split_sections
from vm16_asm.assembler.data import Constant, compile_data_section
from vm16_asm.assembler.symbols import ENTRY_POINT, SymbolTable, validate_symbols
from vm16_asm.assembler.normalizer import normalize_code, normalize_token
from vm16_asm.assembler.codegen import (
    CodeGenerator,
    EncoderState,
    ListingEntry,
    calculate_addresses,
    encode,
)
from vm16_asm.assembler.output import format_listing, format_symbols, words_to_bytes

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    "TERMINATOR_WORDS",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    # Pipeline stages
    "Section",
    "split_sections",
    "Constant",
    "compile_data_section",
    "ENTRY_POINT",
    "SymbolTable",
    "validate_symbols",
    "normalize_code",
    "normalize_token",
    # Code generator
    "CodeGenerator",
    "EncoderState",
    "ListingEntry",
    "calculate_addresses",
    "encode",
    # Output
    "format_listing",
    "format_symbols",
    "words_to_bytes",
]
