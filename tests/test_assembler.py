# =============================================================================
# test_assembler.py - Full Assembler Integration Tests
# =============================================================================
# End-to-end integration tests for the complete VM16 assembler.
# These tests verify the full pipeline from source text to binary output.
#
# Test coverage includes:
#   - Complete program assembly
#   - Forward and backward label references
#   - Constants, registers and literals working together
#   - Error reporting with line numbers through the whole pipeline
#   - Binary, symbol and listing output
# =============================================================================

import pytest

from vm16_asm import Assembler, assemble, assemble_file
from vm16_asm.assembler.lexer import Token, TokenType
from vm16_asm.errors import (
    AmbiguousSymbolError,
    AssemblySyntaxError,
    DuplicateConstantError,
    DuplicateLabelError,
    MalformedConstantError,
    MissingEntryPointError,
    MissingSectionError,
    NotARegisterError,
    OutputRangeError,
    TooFewArgumentsError,
    UndeclaredSymbolError,
    UnknownOpcodeError,
    UnsupportedSectionCountError,
    VM16Error,
)

MINIMAL = """\
.data
.code
main:
OUT 42
HALT
"""

COUNTDOWN = """\
; print three stars
.data
star  CHR '*'
count NUM 3
.code
main:
    SET a, count
loop:
    OUT star
    ADD a, a, -1
    JT a, loop
    HALT
"""


def words(source: str) -> list[int]:
    """Assemble source text and return the words."""
    return Assembler().assemble_string(source)


# =============================================================================
# Full Assembly Pipeline Tests
# =============================================================================

class TestFullPipeline:
    """Test the complete assembly pipeline from source to words."""

    def test_minimal_program(self):
        """OUT 42 / HALT assembles to opcode, literal, opcode and terminator."""
        assert words(MINIMAL) == [0x13, 42, 0x00, 0, 0]

    def test_minimal_program_bytes(self):
        """Words are written little-endian."""
        assert assemble(MINIMAL) == bytes([0x13, 0, 42, 0, 0, 0, 0, 0, 0, 0])

    def test_forward_reference(self):
        """A forward jump resolves to the address of the label."""
        source = ".data\n.code\nmain:\nJMP skip\nOUT 1\nskip:\nHALT\n"
        asm = Assembler()
        assert asm.assemble_string(source) == [0x06, 4, 0x13, 1, 0x00, 0, 0]
        assert asm.get_labels() == {"main": 0, "skip": 4}

    def test_backward_reference(self):
        """A backward jump resolves to an earlier address."""
        source = ".data\n.code\nmain:\nNOOP\nloop:\nJMP loop\n"
        assert words(source) == [0x15, 0x06, 1, 0, 0]

    def test_countdown_program(self):
        """Constants, registers, negative literals and labels together."""
        assert words(COUNTDOWN) == [
            0x01, 32768, 3,             # SET a, count
            0x13, 42,                   # loop: OUT star
            0x09, 32768, 32768, 32767,  # ADD a, a, -1
            0x07, 32768, 3,             # JT a, loop
            0x00,                       # HALT
            0, 0,
        ]

    def test_code_before_data(self):
        """Section order does not matter."""
        source = ".code\nmain: OUT x\nHALT\n.data\nx NUM 7\n"
        assert words(source) == [0x13, 7, 0x00, 0, 0]

    def test_registers_case_insensitive(self):
        """Upper- and lower-case register letters are the same register."""
        source = ".data\n.code\nmain:\nSET A, 1\nSET a, 1\nPOP H\n"
        assert words(source) == [0x01, 32768, 1, 0x01, 32768, 1, 0x03, 32775, 0, 0]

    def test_lower_case_mnemonics(self):
        """Mnemonics are case-insensitive."""
        assert words(".data\n.code\nmain:\nout 'A'\nhalt\n") == [0x13, 65, 0x00, 0, 0]

    def test_label_on_instruction_line(self):
        """A label may share a line with its instruction."""
        assert words(".data\n.code\nmain: HALT\n") == [0x00, 0, 0]

    def test_literal_wraparound(self):
        """Code literals are reduced into the value space."""
        assert words(".data\n.code\nmain:\nOUT 32810\nOUT -32768\n") == [
            0x13, 42, 0x13, 0, 0, 0,
        ]

    def test_assemble_tokens(self):
        """Pre-lexed tokens can be assembled without source text."""
        tokens = [
            Token(TokenType.SECTION, "data", 1), Token(TokenType.NEWLINE, None, 1),
            Token(TokenType.SECTION, "code", 2), Token(TokenType.NEWLINE, None, 2),
            Token(TokenType.LABEL, "main", 3), Token(TokenType.NEWLINE, None, 3),
            Token(TokenType.OPCODE, "IN", 4), Token(TokenType.REGISTER, "b", 4),
            Token(TokenType.NEWLINE, None, 4),
        ]
        assert Assembler().assemble_tokens(tokens) == [0x14, 32769, 0, 0]

    def test_custom_terminator(self):
        """The terminator length is configurable."""
        asm = Assembler(terminator_words=0)
        assert asm.assemble_string(MINIMAL) == [0x13, 42, 0x00]

    def test_custom_entry_point(self):
        """The entry point label name is configurable."""
        source = ".data\n.code\nstart:\nHALT\n"
        assert Assembler(entry_point="start").assemble_string(source) == [0, 0, 0]


# =============================================================================
# Symbol Table Tests
# =============================================================================

class TestSymbols:
    """Test symbol table access after assembly."""

    def test_constants_and_labels(self):
        """Constants and labels are available after assembly."""
        asm = Assembler()
        asm.assemble_string(COUNTDOWN)
        assert asm.get_constants() == {"star": 42, "count": 3}
        assert asm.get_labels() == {"main": 0, "loop": 3}
        assert asm.get_symbols() == {"star": 42, "count": 3, "main": 0, "loop": 3}

    def test_failed_run_clears_results(self):
        """A failed assembly leaves no results from the previous run."""
        asm = Assembler()
        asm.assemble_string(MINIMAL)
        with pytest.raises(VM16Error):
            asm.assemble_string(".data\n.code\nHALT\n")
        assert asm.get_words() == []
        assert asm.get_labels() == {}


# =============================================================================
# Error Reporting Tests
# =============================================================================

class TestErrors:
    """Test errors raised through the whole pipeline."""

    def test_missing_code_section(self):
        with pytest.raises(MissingSectionError):
            words(".data\nx NUM 1\n")

    def test_extra_section(self):
        with pytest.raises(UnsupportedSectionCountError):
            words(".data\n.code\nmain: HALT\n.text\n")

    def test_malformed_constant(self):
        with pytest.raises(MalformedConstantError) as exc_info:
            words(".data\nx NUM 'a'\n.code\nmain: HALT\n")
        assert exc_info.value.line == 2

    def test_duplicate_constant(self):
        with pytest.raises(DuplicateConstantError):
            words(".data\nx NUM 1\nx NUM 2\n.code\nmain: HALT\n")

    def test_duplicate_label(self):
        with pytest.raises(DuplicateLabelError) as exc_info:
            words(".data\n.code\nmain: NOOP\nmain: HALT\n")
        assert exc_info.value.line == 4

    def test_ambiguous_symbol(self):
        with pytest.raises(AmbiguousSymbolError):
            words(".data\nx NUM 1\n.code\nmain:\nx: HALT\n")

    def test_missing_entry_point(self):
        with pytest.raises(MissingEntryPointError):
            words(".data\n.code\nstart: NOOP\nloop: NOOP\nend: HALT\n")

    def test_undeclared_symbol(self):
        with pytest.raises(UndeclaredSymbolError) as exc_info:
            words(".data\nx NUM 5\n.code\nmain:\nSET A, y\n")
        assert exc_info.value.line == 5

    def test_unknown_opcode(self):
        with pytest.raises(UnknownOpcodeError) as exc_info:
            words(".data\n.code\nmain:\nPRINT 1\n")
        assert exc_info.value.line == 4

    def test_not_a_register(self):
        with pytest.raises(NotARegisterError):
            words(".data\n.code\nmain:\nSET 5, 1\n")

    def test_too_few_arguments(self):
        with pytest.raises(TooFewArgumentsError) as exc_info:
            words(".data\n.code\nmain:\nEQ a, 1\n")
        assert exc_info.value.line == 4

    def test_label_named_like_register(self):
        """A register letter cannot become a jump target."""
        with pytest.raises(AssemblySyntaxError, match="label 'b'"):
            words(".data\n.code\nmain:\nJMP b\nOUT 1\nb:\nHALT\n")

    def test_wide_character_constant(self):
        """A CHR constant above the value range cannot pass as a register."""
        with pytest.raises(MalformedConstantError) as exc_info:
            words(".data\nstar CHR '\u8000'\n.code\nmain:\nPOP star\n")
        assert exc_info.value.line == 2

    def test_data_errors_come_first(self):
        """The first failing stage reports; later stages never run."""
        with pytest.raises(MalformedConstantError):
            words(".data\nx NUM\n.code\nHALT\n")

    def test_error_message_format(self):
        """Messages carry file, line and error text."""
        with pytest.raises(UndeclaredSymbolError) as exc_info:
            Assembler().assemble_string(".data\n.code\nmain:\nJMP lop\nloop: HALT\n", "prog.asm")
        message = str(exc_info.value)
        assert message.startswith("prog.asm:4:5: error: undeclared symbol 'lop'")
        assert "did you mean 'loop'?" in message
        assert exc_info.value.kind == "UndeclaredSymbol"

    def test_word_out_of_range(self):
        """Words that do not fit in 16 bits cannot be written."""
        from vm16_asm.assembler.output import words_to_bytes
        with pytest.raises(OutputRangeError):
            words_to_bytes([1, 70000])


# =============================================================================
# Output File Tests
# =============================================================================

class TestOutput:
    """Test output files."""

    def test_write_binary(self, tmp_path):
        asm = Assembler()
        asm.assemble_string(MINIMAL)
        out = tmp_path / "prog.bin"
        asm.write_binary(out)
        assert out.read_bytes() == bytes([0x13, 0, 42, 0, 0, 0, 0, 0, 0, 0])

    def test_assemble_file(self, tmp_path):
        src = tmp_path / "prog.asm"
        src.write_text(COUNTDOWN)
        assert assemble_file(src)[:6] == bytes([0x01, 0x00, 0x00, 0x80, 0x03, 0x00])

    def test_write_symbols(self, tmp_path):
        asm = Assembler()
        asm.assemble_string(COUNTDOWN)
        out = tmp_path / "prog.sym"
        asm.write_symbols(out)
        lines = out.read_text().splitlines()
        assert "star const $002A" in lines
        assert "count const $0003" in lines
        assert lines[-2:] == ["main label $0000", "loop label $0003"]

    def test_listing(self):
        asm = Assembler()
        asm.assemble_string(COUNTDOWN)
        listing = asm.get_listing()
        assert "0003  0013 002A" in listing
        assert "OUT star" in listing
        assert "loop                 = $0003" in listing
