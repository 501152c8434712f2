# =============================================================================
# test_codegen.py - Address Calculator and Encoder Tests
# =============================================================================
# Tests for pass 1 (label addresses) and pass 2 (encoding) over normalized
# code tokens.
#
# Test coverage includes:
#   - Label address calculation, forward and backward
#   - Opcode and operand encoding
#   - REG operand range checks
#   - Operand count errors (too few, too many)
#   - Misplaced tokens and unknown opcodes
# =============================================================================

import pytest

from vm16_asm.assembler.codegen import CodeGenerator, calculate_addresses, encode
from vm16_asm.errors import (
    InvalidTokenError,
    NotARegisterError,
    TooFewArgumentsError,
    UndeclaredSymbolError,
    UnknownOpcodeError,
)

REG_A = 32768


# =============================================================================
# Pass 1: Address Calculation
# =============================================================================

class TestAddresses:
    """Test label address calculation."""

    def test_first_label_at_zero(self, t):
        """A label before any instruction is at address 0."""
        assert calculate_addresses([t.label("main"), t.nl(), t.op("HALT"), t.nl()]) == {"main": 0}

    def test_labels_take_no_space(self, t):
        """Consecutive labels share an address."""
        tokens = [t.label("main"), t.label("start"), t.op("HALT"), t.nl()]
        assert calculate_addresses(tokens) == {"main": 0, "start": 0}

    def test_operands_counted(self, t):
        """Each opcode and operand is one word; commas and newlines are none."""
        tokens = [
            t.label("main"), t.nl(),
            t.op("ADD"), t.num(REG_A), t.comma(), t.num(1), t.comma(), t.num(2), t.nl(),
            t.label("next"), t.nl(),
            t.op("HALT"), t.nl(),
        ]
        assert calculate_addresses(tokens)["next"] == 4

    def test_label_reference_counted(self, t):
        """A symbolic reference occupies one word like any operand."""
        tokens = [t.op("JMP"), t.ident("end"), t.nl(), t.label("end"), t.op("HALT"), t.nl()]
        assert calculate_addresses(tokens) == {"end": 2}


# =============================================================================
# Pass 2: Encoding
# =============================================================================

class TestEncoding:
    """Test instruction encoding."""

    def test_zero_operand(self, t):
        """Zero-operand instructions emit only their opcode."""
        assert encode([t.op("HALT"), t.nl(), t.op("RET"), t.nl(), t.op("NOOP"), t.nl()], {}) == [0x00, 0x12, 0x15]

    def test_out_literal(self, t):
        """OUT 42 encodes as opcode then operand."""
        assert encode([t.op("OUT"), t.num(42), t.nl()], {}) == [0x13, 42]

    def test_three_operands(self, t):
        """Operands follow the opcode in source order."""
        tokens = [t.op("ADD"), t.num(REG_A + 1), t.comma(), t.num(REG_A), t.comma(), t.num(7), t.nl()]
        assert encode(tokens, {}) == [0x09, REG_A + 1, REG_A, 7]

    def test_label_resolution(self, t):
        """Label references resolve through the address map."""
        tokens = [t.op("JT"), t.num(REG_A), t.comma(), t.ident("loop"), t.nl()]
        assert encode(tokens, {"loop": 17}) == [0x07, REG_A, 17]

    def test_val_accepts_register(self, t):
        """VAL operands accept register addresses."""
        assert encode([t.op("PUSH"), t.num(REG_A + 7), t.nl()], {}) == [0x02, REG_A + 7]

    def test_tag_accepts_any_value(self, t):
        """TAG operands are not required to be label references."""
        assert encode([t.op("JMP"), t.num(100), t.nl()], {}) == [0x06, 100]

    def test_labels_and_blank_lines_skipped(self, t):
        """Labels and empty lines between instructions produce nothing."""
        tokens = [t.label("main"), t.nl(), t.nl(), t.label("x"), t.op("HALT"), t.nl()]
        assert encode(tokens, {}) == [0x00]

    def test_missing_final_newline(self, t):
        """A complete instruction at the end of input needs no newline."""
        assert encode([t.op("OUT"), t.num(1)], {}) == [0x13, 1]

    def test_empty(self):
        """No tokens encode to no words."""
        assert encode([], {}) == []

    @pytest.mark.parametrize("value", [32768, 32771, 32775])
    def test_reg_in_range(self, t, value):
        """REG operands accept 32768-32775."""
        assert encode([t.op("POP"), t.num(value), t.nl()], {}) == [0x03, value]


class TestEncodingErrors:
    """Test encoder errors."""

    @pytest.mark.parametrize("value", [0, 32767, 32776])
    def test_not_a_register(self, t, value):
        """REG operands outside 32768-32775 are rejected."""
        with pytest.raises(NotARegisterError) as exc_info:
            encode([t.op("SET"), t.num(value), t.comma(), t.num(1), t.nl()], {})
        assert exc_info.value.value == value

    def test_label_address_not_a_register(self, t):
        """A label address is not a register."""
        with pytest.raises(NotARegisterError):
            encode([t.op("IN"), t.ident("main"), t.nl()], {"main": 0})

    def test_too_few_arguments(self, t):
        """A line ending before all operands are given is rejected."""
        t.line = 5
        with pytest.raises(TooFewArgumentsError) as exc_info:
            encode([t.op("SET"), t.num(REG_A), t.nl()], {})
        assert exc_info.value.expected == 2
        assert exc_info.value.given == 1
        assert exc_info.value.line == 5

    def test_no_arguments(self, t):
        """An operand-taking instruction with no operands is rejected."""
        with pytest.raises(TooFewArgumentsError):
            encode([t.op("OUT"), t.nl()], {})

    def test_trailing_comma(self, t):
        """A comma followed by end of line is too few arguments."""
        with pytest.raises(TooFewArgumentsError):
            encode([t.op("SET"), t.num(REG_A), t.comma(), t.nl()], {})

    def test_truncated_at_end(self, t):
        """Input ending mid-instruction is too few arguments."""
        with pytest.raises(TooFewArgumentsError):
            encode([t.op("JT"), t.num(1)], {})

    def test_too_many_arguments(self, t):
        """An extra comma-separated operand is rejected."""
        with pytest.raises(InvalidTokenError, match="too many operands"):
            encode([t.op("OUT"), t.num(1), t.comma(), t.num(2), t.nl()], {})

    def test_operand_on_zero_operand_instruction(self, t):
        """Zero-operand instructions must be followed by end of line."""
        with pytest.raises(InvalidTokenError):
            encode([t.op("HALT"), t.num(5), t.nl()], {})

    def test_missing_comma(self, t):
        """Operands must be separated by commas."""
        with pytest.raises(InvalidTokenError, match="','"):
            encode([t.op("SET"), t.num(REG_A), t.num(1), t.nl()], {})

    def test_operand_without_opcode(self, t):
        """A line must start with an instruction."""
        with pytest.raises(InvalidTokenError, match="expected an instruction"):
            encode([t.num(5), t.nl()], {})

    def test_label_in_operand_position(self, t):
        """Label declarations cannot be operands."""
        with pytest.raises(InvalidTokenError):
            encode([t.op("JMP"), t.label("x"), t.nl()], {})

    def test_unknown_opcode(self, t):
        """Mnemonics outside the table are rejected with a suggestion."""
        with pytest.raises(UnknownOpcodeError, match="did you mean") as exc_info:
            encode([t.op("HLT"), t.nl()], {})
        assert exc_info.value.mnemonic == "HLT"

    def test_unresolved_reference(self, t):
        """A symbolic reference missing from the address map is undeclared."""
        with pytest.raises(UndeclaredSymbolError):
            encode([t.op("JMP"), t.ident("nowhere"), t.nl()], {})


class TestCodeGenerator:
    """Test the CodeGenerator wrapper."""

    def test_generate_records_results(self, t):
        """Labels and listing entries are kept after generation."""
        tokens = [
            t.label("main"), t.nl(),
            t.op("OUT"), t.num(42), t.nl(),
            t.label("end"), t.op("HALT"), t.nl(),
        ]
        gen = CodeGenerator()
        assert gen.generate(tokens) == [0x13, 42, 0x00]
        assert gen.get_labels() == {"main": 0, "end": 2}
        entries = gen.get_entries()
        assert [(e.address, e.mnemonic, e.words) for e in entries] == [
            (0, "OUT", [0x13, 42]),
            (2, "HALT", [0x00]),
        ]
        assert entries[0].line == 2
