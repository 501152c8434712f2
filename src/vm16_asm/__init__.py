"""
VM16 Assembler - Toolchain for the VM16 Virtual Machine
=======================================================

This package assembles programs for VM16, a 16-bit virtual machine with
eight registers, a 15-bit value space and 22 instructions.

Main Components
---------------
- **assembler**: Source -> word stream (vm16asm)
- **cpu**: Instruction set definitions shared by all tools
- **errors**: Exception hierarchy

Quick Start
-----------
Assemble a program:
    >>> from vm16_asm import Assembler
    >>> asm = Assembler()
    >>> asm.assemble_file("hello.asm")
    >>> asm.write_binary("hello.bin")

Or use the command-line tool:
    $ vm16asm hello.asm -o hello.bin
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from vm16_asm.assembler import Assembler, assemble, assemble_file
from vm16_asm.cpu import OPCODE_TABLE, InstructionInfo, OperandKind
from vm16_asm.errors import (
    VM16Error,
    AssemblerError,
    AssemblySyntaxError,
    SourceLocation,
    SectionError,
    MissingSectionError,
    UnsupportedSectionCountError,
    MalformedConstantError,
    DuplicateSymbolError,
    DuplicateConstantError,
    DuplicateLabelError,
    AmbiguousSymbolError,
    MissingEntryPointError,
    UndeclaredSymbolError,
    UnknownOpcodeError,
    OperandError,
    NotARegisterError,
    TooFewArgumentsError,
    InvalidTokenError,
    OutputRangeError,
)

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "assemble",
    "assemble_file",
    # Instruction set
    "OPCODE_TABLE",
    "InstructionInfo",
    "OperandKind",
    # Exception hierarchy
    "VM16Error",
    "AssemblerError",
    "AssemblySyntaxError",
    "SourceLocation",
    "SectionError",
    "MissingSectionError",
    "UnsupportedSectionCountError",
    "MalformedConstantError",
    "DuplicateSymbolError",
    "DuplicateConstantError",
    "DuplicateLabelError",
    "AmbiguousSymbolError",
    "MissingEntryPointError",
    "UndeclaredSymbolError",
    "UnknownOpcodeError",
    "OperandError",
    "NotARegisterError",
    "TooFewArgumentsError",
    "InvalidTokenError",
    "OutputRangeError",
]
