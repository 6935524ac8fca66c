# =============================================================================
# test_assembler.py - Full Assembler Integration Tests
# =============================================================================
# End-to-end tests for the two-pass assembly driver: source text in,
# machine code out.
#
# Test coverage includes:
#   - Single-instruction programs
#   - Forward and backward label references
#   - .org, .equ, .db, .dw and .end directives
#   - Relative jump range limits in full programs
#   - Duplicate symbols and error locations
#   - Predefined constants and the program header
#   - Listing output
# =============================================================================

import pytest

from ti83_sdk.assembler import Assembler, assemble, assemble_file
from ti83_sdk.errors import (
    AssemblerError,
    AssemblySyntaxError,
    DuplicateSymbolError,
    InvalidOperandCountError,
    RangeError,
    SourceLocation,
    UndefinedSymbolError,
    UnknownInstructionError,
)
from ti83_sdk.ti83plus import ASM_PRGM_TOKEN, TI83_PLUS_ORIGIN


@pytest.fixture
def asm():
    """A fresh assembler at the default origin."""
    return Assembler()


HELLO_WORLD = """\
; Hello World for the TI-83 Plus
    .org $9D93
    bcall(_ClrLCDFull)
    ld hl,0
    ld (curRow),hl
    ld hl,msg
    bcall(_PutS)
    bcall(_NewLine)
    ret
msg:
    .db "Hello World!",0
.end
"""


# =============================================================================
# Single Instructions
# =============================================================================

class TestSingleInstructions:
    """Test one-line programs."""

    def test_nop(self):
        assert assemble("nop") == bytes([0x00])

    def test_load_immediate(self):
        assert assemble("ld a,42") == bytes([0x3E, 42])

    def test_load_pair(self):
        assert assemble("ld hl,$1234") == bytes([0x21, 0x34, 0x12])

    def test_string(self):
        assert assemble('.db "Hello",0') == b"Hello\x00"

    def test_word(self):
        assert assemble(".dw $1234") == bytes([0x34, 0x12])

    @pytest.mark.parametrize("source,expected", [
        ("bit 3,a", [0xCB, 0x5F]),
        ("set 7,b", [0xCB, 0xF8]),
        ("res 0,c", [0xCB, 0x81]),
    ])
    def test_bit_operations(self, source, expected):
        assert assemble(source) == bytes(expected)

    def test_empty_source(self):
        assert assemble("") == b""

    def test_comments_only(self):
        assert assemble("; nothing\n\n   ; here\n") == b""


# =============================================================================
# Labels
# =============================================================================

class TestLabels:
    """Test label resolution across both passes."""

    def test_forward_reference(self):
        source = """
            .org $9D93
            jp end
            nop
            nop
        end:
            ret
        """
        assert assemble(source) == bytes([0xC3, 0x98, 0x9D, 0x00, 0x00, 0xC9])

    def test_backward_reference(self):
        source = """
        start:
            nop
            jp start
        """
        assert assemble(source) == bytes([0x00, 0xC3, 0x93, 0x9D])

    def test_label_on_own_line(self, asm):
        asm.assemble("first:\nsecond: nop\nthird:")
        assert asm.get_symbols() == {
            "first": 0x9D93,
            "second": 0x9D93,
            "third": 0x9D94,
        }

    def test_forward_data_reference(self):
        """A forward label inside .dw resolves in pass 2."""
        source = """
            .dw table
            nop
        table:
            .db 1
        """
        assert assemble(source) == bytes([0x96, 0x9D, 0x00, 0x01])

    def test_forward_bcall_to_label(self):
        source = """
            bcall(handler)
        handler:
            ret
        """
        assert assemble(source) == bytes([0xEF, 0x96, 0x9D, 0xC9])

    def test_label_offset(self):
        source = """
            ld hl,msg+1
        msg:
            .db "xHi",0
        """
        assert assemble(source)[:3] == bytes([0x21, 0x97, 0x9D])

    def test_forward_label_named_like_system_variable(self):
        """A later label op1 is used instead of the OS variable OP1."""
        assert assemble("ld a,(op1)\nret\nop1: .db 0") == bytes([0x3A, 0x97, 0x9D, 0xC9, 0x00])

    def test_forward_label_shadows_system_variable(self):
        assert assemble("ld a,(OP1)\nret\nOP1: .db 0") == bytes([0x3A, 0x97, 0x9D, 0xC9, 0x00])

    def test_labels_case_sensitive(self):
        with pytest.raises(UndefinedSymbolError):
            assemble("Loop: nop\n jp loop")

    def test_undefined_label(self):
        with pytest.raises(UndefinedSymbolError) as exc_info:
            assemble("start: nop\n jp strat")
        assert "did you mean 'start'?" in str(exc_info.value)


# =============================================================================
# Relative Jumps
# =============================================================================

class TestRelativeJumps:
    """Test jr/djnz displacement limits in full programs."""

    def test_backward_loop(self):
        source = """
            ld b,10
        loop:
            djnz loop
        """
        assert assemble(source) == bytes([0x06, 0x0A, 0x10, 0xFE])

    def test_forward_jump(self):
        source = """
            jr z,skip
            nop
        skip:
            ret
        """
        assert assemble(source) == bytes([0x28, 0x01, 0x00, 0xC9])

    def test_forward_limit(self):
        """127 bytes of padding is the furthest forward jr."""
        source = "jr target\n" + "nop\n" * 127 + "target: ret\n"
        code = assemble(source)
        assert code[:2] == bytes([0x18, 0x7F])

    def test_forward_out_of_range(self):
        source = "jr target\n" + "nop\n" * 128 + "target: ret\n"
        with pytest.raises(RangeError) as exc_info:
            assemble(source)
        assert "<input>:1:" in str(exc_info.value)

    def test_backward_limit(self):
        source = "target:\n" + "nop\n" * 126 + "jr target\n"
        code = assemble(source)
        assert code[-2:] == bytes([0x18, 0x80])

    def test_backward_out_of_range(self):
        source = "target:\n" + "nop\n" * 127 + "jr target\n"
        with pytest.raises(RangeError):
            assemble(source)


# =============================================================================
# Directives
# =============================================================================

class TestDirectives:
    """Test .org, .equ and .end."""

    def test_org_moves_labels(self, asm):
        asm.assemble(".org $C000\nstart: nop")
        assert asm.get_symbols()["start"] == 0xC000
        assert asm.get_origin() == 0xC000

    def test_second_org(self, asm):
        """Output across an .org gap is concatenated."""
        code = asm.assemble("""
            .org $9D93
            nop
            .org $A000
        far:
            jp far
        """)
        assert code == bytes([0x00, 0xC3, 0x00, 0xA0])
        assert asm.get_origin() == 0x9D93

    def test_org_operand_count(self):
        with pytest.raises(InvalidOperandCountError):
            assemble(".org")

    def test_org_forward_reference(self):
        """.org values must be known when the directive is reached."""
        with pytest.raises(UndefinedSymbolError):
            assemble(".org later\nlater: nop")

    def test_equ(self, asm):
        code = asm.assemble("""
            .equ WIDTH,96
            .equ LAST,WIDTH-1
            ld a,LAST
        """)
        assert code == bytes([0x3E, 95])
        assert asm.get_constants() == {"WIDTH": 96, "LAST": 95}

    def test_equ_emits_nothing(self):
        assert assemble(".equ X,5") == b""

    def test_equ_operand_count(self):
        with pytest.raises(InvalidOperandCountError):
            assemble(".equ X")

    @pytest.mark.parametrize("name", ["5", "$10", "2fast", "a+b", "'x'"])
    def test_equ_invalid_name(self, name):
        """A number or expression cannot be redefined as a constant."""
        with pytest.raises(AssemblySyntaxError) as exc_info:
            assemble(f"ld a,5\n.equ {name},3")
        assert exc_info.value.location.line == 2

    def test_equ_dotted_name(self):
        assert assemble(".equ _max.len,3\nld a,_max.len") == bytes([0x3E, 0x03])

    def test_equ_forward_use(self):
        """A constant defined after its first use resolves in pass 2."""
        assert assemble(" ld a,VALUE\n.equ VALUE,$10") == bytes([0x3E, 0x10])

    def test_end_emits_nothing(self):
        assert assemble("nop\n.end") == bytes([0x00])

    def test_uppercase_directives(self):
        assert assemble(".DB 1\n.DW 2") == bytes([1, 2, 0])


# =============================================================================
# Complete Programs
# =============================================================================

class TestPrograms:
    """Test realistic programs."""

    def test_hello_world(self, asm):
        code = asm.assemble(HELLO_WORLD)
        expected = bytes([
            0xEF, 0x40, 0x45,           # bcall(_ClrLCDFull)
            0x21, 0x00, 0x00,           # ld hl,0
            0x22, 0x4B, 0x84,           # ld (curRow),hl
            0x21, 0xA6, 0x9D,           # ld hl,msg
            0xEF, 0x0A, 0x45,           # bcall(_PutS)
            0xEF, 0x2E, 0x45,           # bcall(_NewLine)
            0xC9,                       # ret
        ]) + b"Hello World!\x00"
        assert code == expected
        assert asm.get_symbols() == {"msg": 0x9DA6}

    def test_indexed_program(self):
        source = """
            ld ix,data
            ld a,(ix+1)
            add a,(ix+2)
            ld (ix+0),a
            ret
        data:
            .db 0,1,2
        """
        code = assemble(source)
        assert code[:4] == bytes([0xDD, 0x21, 0xA1, 0x9D])
        assert code[4:7] == bytes([0xDD, 0x7E, 0x01])
        assert code[7:10] == bytes([0xDD, 0x86, 0x02])
        assert code[10:13] == bytes([0xDD, 0x77, 0x00])

    def test_idempotent(self, asm):
        """Assembling twice gives identical output."""
        first = asm.assemble(HELLO_WORLD)
        second = asm.assemble(HELLO_WORLD)
        assert first == second

    def test_fresh_symbols_per_run(self, asm):
        asm.assemble("a_label: nop")
        asm.assemble("other: nop")
        assert asm.get_symbols() == {"other": 0x9D93}

    def test_assemble_file(self, tmp_path):
        path = tmp_path / "hello.asm"
        path.write_text(HELLO_WORLD)
        assert assemble_file(path) == assemble(HELLO_WORLD)


# =============================================================================
# Configuration
# =============================================================================

class TestConfiguration:
    """Test origin, defines and header options."""

    def test_custom_origin(self):
        assert assemble("here: jp here", origin=0x8000) == bytes([0xC3, 0x00, 0x80])

    def test_defines(self):
        assert assemble("ld a,LIVES", defines={"LIVES": 3}) == bytes([0x3E, 3])

    def test_define_symbol(self, asm):
        asm.define_symbol("DEBUG", 1)
        assert asm.assemble("ld a,DEBUG") == bytes([0x3E, 1])

    def test_define_collides_with_equ(self):
        with pytest.raises(DuplicateSymbolError):
            assemble(".equ LIVES,5", defines={"LIVES": 3})

    def test_header_prefix(self):
        asm = Assembler(header=ASM_PRGM_TOKEN)
        code = asm.assemble("start: jp start")
        assert code == bytes([0xBB, 0x6D, 0xC3, 0x95, 0x9D])
        assert asm.get_symbols()["start"] == TI83_PLUS_ORIGIN + 2
        assert asm.get_origin() == TI83_PLUS_ORIGIN


# =============================================================================
# Errors
# =============================================================================

class TestErrors:
    """Test error reporting."""

    def test_duplicate_label(self):
        with pytest.raises(DuplicateSymbolError) as exc_info:
            assemble("start: nop\nstart: nop")
        error = exc_info.value
        assert error.location == SourceLocation("<input>", 2)
        assert error.original_location == SourceLocation("<input>", 1)
        assert "first defined at <input>:1" in str(error)

    def test_duplicate_constant(self):
        with pytest.raises(DuplicateSymbolError):
            assemble(".equ X,1\n.equ X,2")

    def test_label_and_constant_collision(self):
        with pytest.raises(DuplicateSymbolError):
            assemble(".equ X,1\nX: nop")

    def test_error_location(self, asm):
        with pytest.raises(UnknownInstructionError) as exc_info:
            asm.assemble("nop\nnop\n  foo bar\n", filename="game.asm")
        message = str(exc_info.value)
        assert message.startswith("game.asm:3: error: unknown instruction 'foo bar'")
        assert "    foo bar" in message

    def test_parse_error_location(self):
        with pytest.raises(AssemblySyntaxError) as exc_info:
            assemble('nop\n.db "open')
        assert exc_info.value.location == SourceLocation("<input>", 2)

    def test_first_error_aborts(self):
        with pytest.raises(AssemblerError) as exc_info:
            assemble("foo\nbar\n")
        assert exc_info.value.location.line == 1

    def test_pass2_error_location(self):
        """Undefined symbols are found in pass 2 and still carry their line."""
        with pytest.raises(UndefinedSymbolError) as exc_info:
            assemble("nop\nnop\nld hl,nowhere")
        assert exc_info.value.location == SourceLocation("<input>", 3)
        assert exc_info.value.source_line == "ld hl,nowhere"

    def test_file_errors_use_file_name(self, tmp_path):
        path = tmp_path / "broken.asm"
        path.write_text("ld a\n")
        with pytest.raises(InvalidOperandCountError) as exc_info:
            assemble_file(path)
        assert str(exc_info.value).startswith("broken.asm:1: error:")


# =============================================================================
# Listing
# =============================================================================

class TestListing:
    """Test listing generation."""

    def test_listing_rows(self, asm):
        asm.assemble("start: ld a,42\n  ret ; done")
        listing = asm.get_listing()
        assert "TI-83 Plus Assembler Listing" in listing
        assert "$9D93  3E 2A" in listing
        assert "$9D95  C9" in listing
        assert "ret ; done" in listing

    def test_listing_symbols(self, asm):
        asm.assemble(".equ SIZE,4\nstart: nop")
        listing = asm.get_listing()
        assert "Symbol Table" in listing
        assert f"{'start':20s} = $9D93" in listing
        assert f"{'SIZE':20s} = $0004  (equ)" in listing

    def test_long_data_continues(self, asm):
        asm.assemble(".db 1,2,3,4,5,6")
        lines = asm.get_listing().splitlines()
        row = lines.index(next(line for line in lines if line.startswith("$9D93")))
        assert lines[row].startswith("$9D93  01 02 03 04")
        assert lines[row + 1].strip() == "05 06"

    def test_listing_entries(self, asm):
        asm.assemble("; comment\nnop\n.equ X,1\nret")
        entries = asm.get_listing_entries()
        assert [(e.line, e.address, e.data) for e in entries] == [
            (2, 0x9D93, b"\x00"),
            (3, None, b""),
            (4, 0x9D94, b"\xc9"),
        ]

    def test_header_entry(self):
        asm = Assembler(header=ASM_PRGM_TOKEN)
        asm.assemble("ret")
        entries = asm.get_listing_entries()
        assert entries[0].line == 0
        assert entries[0].data == ASM_PRGM_TOKEN
        assert entries[1].address == TI83_PLUS_ORIGIN + 2

    def test_write_listing(self, asm, tmp_path):
        asm.assemble("nop")
        path = tmp_path / "out.lst"
        asm.write_listing(path)
        assert "$9D93  00" in path.read_text()

    def test_write_binary(self, asm, tmp_path):
        asm.assemble("ld a,1\nret")
        path = tmp_path / "out.bin"
        asm.write_binary(path)
        assert path.read_bytes() == bytes([0x3E, 0x01, 0xC9])
