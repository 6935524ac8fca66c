# =============================================================================
# test_cli.py - tiasm Command-Line Tests
# =============================================================================
# Tests for the tiasm command-line assembler.
#
# Test coverage includes:
#   - Default .8xp output and program naming
#   - Raw binary and listing output
#   - -D constant definitions and --org
#   - Automatic and forced AsmPrgm header
#   - Exit codes for assembly errors and bad arguments
# =============================================================================

from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from ti83_sdk import __version__
from ti83_sdk.cli.tiasm import has_origin_directive, main, parse_defines
from ti83_sdk.prgm import read_8xp


HELLO = """\
    bcall(_ClrLCDFull)
    ld hl,msg
    bcall(_PutS)
    ret
msg:
    .db "Hi",0
"""


@pytest.fixture
def runner():
    return CliRunner()


# =============================================================================
# Output Files
# =============================================================================

class TestOutput:
    """Test generated files."""

    def test_default_output(self, runner):
        """hello.asm produces hello.8xp holding program HELLO."""
        with runner.isolated_filesystem():
            Path("hello.asm").write_text(HELLO)
            result = runner.invoke(main, ["hello.asm"])
            assert result.exit_code == 0, f"Assembly failed: {result.output}"

            program = read_8xp("hello.8xp")
            assert program.name == "HELLO"
            # AsmPrgm token, then code assembled at $9D95
            assert program.data[:2] == bytes([0xBB, 0x6D])
            assert program.data[2:5] == bytes([0xEF, 0x40, 0x45])
            assert program.data[5:8] == bytes([0x21, 0x9F, 0x9D])
            assert program.data[-3:] == b"Hi\x00"

    def test_output_and_name(self, runner):
        with runner.isolated_filesystem():
            Path("hello.asm").write_text(HELLO)
            result = runner.invoke(main, ["hello.asm", "-o", "out.8xp", "-n", "greet"])
            assert result.exit_code == 0, f"Assembly failed: {result.output}"
            assert read_8xp("out.8xp").name == "GREET"

    def test_derived_name(self, runner):
        with runner.isolated_filesystem():
            Path("my-game.asm").write_text("ret\n")
            result = runner.invoke(main, ["my-game.asm"])
            assert result.exit_code == 0, f"Assembly failed: {result.output}"
            assert read_8xp("my-game.8xp").name == "MYGAME"

    def test_binary(self, runner):
        with runner.isolated_filesystem():
            Path("test.asm").write_text("ld a,42\nret\n")
            result = runner.invoke(main, ["test.asm", "-b", "test.bin"])
            assert result.exit_code == 0, f"Assembly failed: {result.output}"
            assert Path("test.bin").read_bytes() == bytes([0xBB, 0x6D, 0x3E, 0x2A, 0xC9])
            assert not Path("test.8xp").exists()

    def test_listing(self, runner):
        with runner.isolated_filesystem():
            Path("test.asm").write_text("start: nop\n")
            result = runner.invoke(main, ["test.asm", "-l", "test.lst"])
            assert result.exit_code == 0, f"Assembly failed: {result.output}"
            listing = Path("test.lst").read_text()
            assert "$9D95  00" in listing
            assert "start" in listing
            assert Path("test.8xp").exists()

    def test_verbose(self, runner):
        with runner.isolated_filesystem():
            Path("test.asm").write_text("nop\n")
            result = runner.invoke(main, ["test.asm", "-v"])
            assert result.exit_code == 0, f"Assembly failed: {result.output}"
            assert "Assembly complete" in result.output


# =============================================================================
# Assembly Options
# =============================================================================

class TestOptions:
    """Test -D, --org and header options."""

    def test_define_value(self, runner):
        with runner.isolated_filesystem():
            Path("test.asm").write_text("ld a,LIVES\n")
            result = runner.invoke(main, ["test.asm", "-D", "LIVES=$10", "-b", "out.bin"])
            assert result.exit_code == 0, f"Assembly failed: {result.output}"
            assert Path("out.bin").read_bytes()[2:] == bytes([0x3E, 0x10])

    def test_define_flag(self, runner):
        with runner.isolated_filesystem():
            Path("test.asm").write_text("ld a,DEBUG\n")
            result = runner.invoke(main, ["test.asm", "-D", "DEBUG", "-b", "out.bin"])
            assert result.exit_code == 0, f"Assembly failed: {result.output}"
            assert Path("out.bin").read_bytes()[2:] == bytes([0x3E, 0x01])

    def test_org_directive_disables_header(self, runner):
        with runner.isolated_filesystem():
            Path("test.asm").write_text(".org $9D93\n.db $BB,$6D\nstart: jp start\n")
            result = runner.invoke(main, ["test.asm", "-b", "out.bin"])
            assert result.exit_code == 0, f"Assembly failed: {result.output}"
            assert Path("out.bin").read_bytes() == bytes([0xBB, 0x6D, 0xC3, 0x95, 0x9D])

    def test_no_header(self, runner):
        with runner.isolated_filesystem():
            Path("test.asm").write_text("start: jp start\n")
            result = runner.invoke(main, ["test.asm", "--no-header", "-b", "out.bin"])
            assert result.exit_code == 0, f"Assembly failed: {result.output}"
            assert Path("out.bin").read_bytes() == bytes([0xC3, 0x93, 0x9D])

    def test_forced_header(self, runner):
        with runner.isolated_filesystem():
            Path("test.asm").write_text(".org $9D93\nnop\n")
            result = runner.invoke(main, ["test.asm", "--header", "-b", "out.bin"])
            assert result.exit_code == 0, f"Assembly failed: {result.output}"
            assert Path("out.bin").read_bytes()[:2] == bytes([0xBB, 0x6D])

    def test_custom_origin(self, runner):
        with runner.isolated_filesystem():
            Path("test.asm").write_text("start: jp start\n")
            result = runner.invoke(main, ["test.asm", "--org", "$8000", "--no-header", "-b", "out.bin"])
            assert result.exit_code == 0, f"Assembly failed: {result.output}"
            assert Path("out.bin").read_bytes() == bytes([0xC3, 0x00, 0x80])


# =============================================================================
# Errors
# =============================================================================

class TestErrors:
    """Test exit codes and messages."""

    def test_assembly_error(self, runner):
        with runner.isolated_filesystem():
            Path("bad.asm").write_text("nop\nfoo a\n")
            result = runner.invoke(main, ["bad.asm"])
            assert result.exit_code == 1
            assert "bad.asm:2: error: unknown instruction 'foo a'" in result.output
            assert not Path("bad.8xp").exists()

    def test_range_error(self, runner):
        with runner.isolated_filesystem():
            Path("far.asm").write_text("jr far\n.db " + ",".join(["0"] * 200) + "\nfar: ret\n")
            result = runner.invoke(main, ["far.asm"])
            assert result.exit_code == 1
            assert "out of range" in result.output

    def test_missing_input(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["missing.asm"])
            assert result.exit_code == 2

    def test_invalid_name(self, runner):
        with runner.isolated_filesystem():
            Path("test.asm").write_text("ret\n")
            result = runner.invoke(main, ["test.asm", "-n", "TOOLONGNAME"])
            assert result.exit_code == 2

    def test_invalid_org(self, runner):
        with runner.isolated_filesystem():
            Path("test.asm").write_text("ret\n")
            result = runner.invoke(main, ["test.asm", "--org", "$GG"])
            assert result.exit_code == 2

    def test_output_and_binary_conflict(self, runner):
        with runner.isolated_filesystem():
            Path("test.asm").write_text("ret\n")
            result = runner.invoke(main, ["test.asm", "-o", "a.8xp", "-b", "a.bin"])
            assert result.exit_code == 2

    def test_bad_define(self, runner):
        with runner.isolated_filesystem():
            Path("test.asm").write_text("ret\n")
            result = runner.invoke(main, ["test.asm", "-D", "X=$ZZ"])
            assert result.exit_code == 2

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


# =============================================================================
# Helpers
# =============================================================================

class TestHelpers:
    """Test CLI helper functions."""

    def test_parse_defines(self):
        assert parse_defines(("A=1", "B=$FF", "C", "D='x'")) == {"A": 1, "B": 255, "C": 1, "D": 120}

    def test_parse_defines_missing_name(self):
        with pytest.raises(click.BadParameter):
            parse_defines(("=5",))

    @pytest.mark.parametrize("definition", ["5=1", "A-B=2", "$10"])
    def test_parse_defines_invalid_name(self, definition):
        with pytest.raises(click.BadParameter):
            parse_defines((definition,))

    @pytest.mark.parametrize("source,expected", [
        (".org $9D93\nnop", True),
        ("  .ORG $8000 ; relocate", True),
        ("nop\nret", False),
        ("; .org $9D93", False),
        ('.db ".org"', False),
    ])
    def test_has_origin_directive(self, source, expected):
        assert has_origin_directive(source) is expected
