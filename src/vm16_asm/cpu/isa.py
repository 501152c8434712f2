"""
VM16 Instruction Set Definition
===============================

This module defines the instruction set of the VM16 virtual machine: its
value space, its register file and the opcode table used by the assembler.

Machine Model
-------------
- Words are unsigned 16-bit values, stored little-endian.
- Literal values live in 0-32767 (VALUE_SPACE = 32768).
- The eight registers a-h are addressed as 32768-32775.

Operand Kinds
-------------
Every operand of an instruction has a declared kind:

1. **REG**: must resolve to a register address (32768-32775)
   - Example: POP a -> $03 $8000

2. **VAL**: a literal value or a register reference
   - Example: OUT 42 -> $13 $002A

3. **TAG**: a code address, normally a label reference
   - Example: JMP loop -> $06 <address of loop>

Each opcode and each operand occupies exactly one word.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


# =============================================================================
# Machine Constants
# =============================================================================

VALUE_SPACE = 32768          # Literal values are reduced into [0, VALUE_SPACE)
REGISTER_BASE = 32768        # Address of register a
REGISTER_COUNT = 8           # Registers a-h
REGISTER_NAMES = "abcdefgh"
MAX_WORD = 0xFFFF


# =============================================================================
# Operand Kind Enumeration
# =============================================================================

class OperandKind(Enum):
    """Expected semantic category of an instruction operand."""
    REG = auto()    # Register address
    VAL = auto()    # Literal or register
    TAG = auto()    # Code address (label)

    def __str__(self) -> str:
        return self.name


REG = OperandKind.REG
VAL = OperandKind.VAL
TAG = OperandKind.TAG


# =============================================================================
# Instruction Information
# =============================================================================

@dataclass(frozen=True)
class InstructionInfo:
    """
    Signature of a single VM16 instruction.

    Frozen so the opcode table cannot be modified at runtime.

    Attributes:
        mnemonic: Upper-case instruction name
        opcode: Numeric opcode word
        operands: Ordered operand kinds
    """
    mnemonic: str
    opcode: int
    operands: tuple[OperandKind, ...]

    @property
    def size(self) -> int:
        """Instruction size in words (opcode plus operands)."""
        return 1 + len(self.operands)

    def __repr__(self) -> str:
        kinds = ",".join(str(k) for k in self.operands)
        return f"InstructionInfo({self.mnemonic}, opcode=${self.opcode:02X}, [{kinds}])"


def _instr(mnemonic: str, opcode: int, *operands: OperandKind) -> tuple[str, InstructionInfo]:
    return mnemonic, InstructionInfo(mnemonic, opcode, tuple(operands))


# =============================================================================
# Opcode Table
# =============================================================================
# Master table of all VM16 instructions.
# Key: mnemonic
# Value: InstructionInfo(mnemonic, opcode, operand kinds)
# =============================================================================

OPCODE_TABLE: dict[str, InstructionInfo] = dict([
    # Control
    _instr("HALT", 0x00),                   # Stop execution
    _instr("SET", 0x01, REG, VAL),          # a = b

    # Stack
    _instr("PUSH", 0x02, VAL),              # Push a
    _instr("POP", 0x03, REG),               # Pop into a

    # Comparison
    _instr("EQ", 0x04, REG, VAL, VAL),      # a = (b == c)
    _instr("GT", 0x05, REG, VAL, VAL),      # a = (b > c)

    # Jumps
    _instr("JMP", 0x06, TAG),               # Jump to a
    _instr("JT", 0x07, VAL, TAG),           # Jump to b if a != 0
    _instr("JF", 0x08, VAL, TAG),           # Jump to b if a == 0

    # Arithmetic (modulo 32768)
    _instr("ADD", 0x09, REG, VAL, VAL),     # a = b + c
    _instr("MULT", 0x0A, REG, VAL, VAL),    # a = b * c
    _instr("MOD", 0x0B, REG, VAL, VAL),     # a = b % c

    # Bitwise
    _instr("AND", 0x0C, REG, VAL, VAL),     # a = b & c
    _instr("OR", 0x0D, REG, VAL, VAL),      # a = b | c
    _instr("NOT", 0x0E, REG, VAL),          # a = ~b (15-bit)

    # Memory
    _instr("RMEM", 0x0F, REG, VAL),         # a = mem[b]
    _instr("WMEM", 0x10, VAL, REG),         # mem[a] = b

    # Subroutines
    _instr("CALL", 0x11, TAG),              # Push next address, jump to a
    _instr("RET", 0x12),                    # Pop address and jump

    # I/O
    _instr("OUT", 0x13, VAL),               # Write character a
    _instr("IN", 0x14, REG),                # Read character into a

    _instr("NOOP", 0x15),                   # No operation
])

MNEMONICS = frozenset(OPCODE_TABLE)


# =============================================================================
# Lookup Functions
# =============================================================================

def get_instruction_info(mnemonic: str) -> Optional[InstructionInfo]:
    """
    Look up instruction information by mnemonic.

    Args:
        mnemonic: The instruction mnemonic (case-insensitive)

    Returns:
        InstructionInfo if found, None if the mnemonic is unknown
    """
    return OPCODE_TABLE.get(mnemonic.upper())


def is_valid_instruction(mnemonic: str) -> bool:
    """Check if a mnemonic is a VM16 instruction."""
    return mnemonic.upper() in MNEMONICS


def normalize_number(value: int) -> int:
    """
    Reduce a numeric literal into the value space [0, 32768).

    Negative literals wrap around, so -1 becomes 32767. Only literals are
    normalized; register and label addresses must not pass through here.

    Args:
        value: Any integer literal

    Returns:
        The literal modulo VALUE_SPACE
    """
    return value % VALUE_SPACE


def register_address(name: str) -> int:
    """
    Get the address of a register by letter.

    Args:
        name: Register letter a-h (case-insensitive)

    Returns:
        Register address in 32768-32775

    Raises:
        ValueError: If name is not a register letter
    """
    letter = name.lower()
    if len(letter) != 1 or letter not in REGISTER_NAMES:
        raise ValueError(f"not a register: {name!r}")
    return REGISTER_BASE + REGISTER_NAMES.index(letter)


def is_register_address(value: int) -> bool:
    """Check if a value addresses one of the eight registers."""
    return REGISTER_BASE <= value < REGISTER_BASE + REGISTER_COUNT


def is_register_name(name: str) -> bool:
    """Check if an identifier is a register letter (a-h, any case)."""
    return len(name) == 1 and name.lower() in REGISTER_NAMES
