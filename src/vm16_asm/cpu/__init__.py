"""
VM16 CPU Package
================

Architecture definitions for the VM16 virtual machine, shared by the
assembler stages (lexer, normalizer, encoder).

Modules:
    isa: Opcode table, operand kinds, register file and value space.

Usage:
    from vm16_asm.cpu import (
        OperandKind,
        InstructionInfo,
        OPCODE_TABLE,
        get_instruction_info,
    )
"""

from vm16_asm.cpu.isa import (
    # Machine constants
    VALUE_SPACE,
    REGISTER_BASE,
    REGISTER_COUNT,
    REGISTER_NAMES,
    MAX_WORD,
    # Core types
    OperandKind,
    InstructionInfo,
    # Master instruction database
    OPCODE_TABLE,
    MNEMONICS,
    # Lookup functions
    get_instruction_info,
    is_valid_instruction,
    normalize_number,
    register_address,
    is_register_address,
    is_register_name,
)

__all__ = [
    "VALUE_SPACE",
    "REGISTER_BASE",
    "REGISTER_COUNT",
    "REGISTER_NAMES",
    "MAX_WORD",
    "OperandKind",
    "InstructionInfo",
    "OPCODE_TABLE",
    "MNEMONICS",
    "get_instruction_info",
    "is_valid_instruction",
    "normalize_number",
    "register_address",
    "is_register_address",
    "is_register_name",
]
