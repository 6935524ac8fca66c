"""
tiasm - TI-83 Plus Z80 Assembler Command-Line Interface
=======================================================

This module implements the command-line interface for the Z80 assembler.
It assembles a source file and writes a .8xp program ready to send to
the calculator.

Usage Examples
--------------
Basic assembly (writes hello.8xp, program name HELLO):
    $ tiasm hello.asm

Choose the output file and program name:
    $ tiasm hello.asm -o build/HELLO.8xp -n HELLO

Raw machine code and a listing:
    $ tiasm hello.asm -b hello.bin -l hello.lst

Predefined constants:
    $ tiasm -D DEBUG -D LIVES=3 game.asm

AsmPrgm Header
--------------
Sources without an ``.org`` directive get the standard program preamble
automatically: the code is assembled at $9D93 behind the AsmPrgm token
(BB 6D). Sources that set their own origin are assembled as written.
Use --header/--no-header to force either behaviour.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from ti83_sdk import __version__
from ti83_sdk.assembler import Assembler, evaluate, is_identifier, parse_line
from ti83_sdk.cli.errors import handle_cli_exception
from ti83_sdk.errors import AssemblerError, InvalidLiteralError, ProgramNameError
from ti83_sdk.prgm import derive_program_name, validate_program_name
from ti83_sdk.ti83plus import ASM_PRGM_TOKEN, TI83_PLUS_ORIGIN


# =============================================================================
# Helpers
# =============================================================================

def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def _validate_origin(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return evaluate(value)
    except InvalidLiteralError as e:
        raise click.BadParameter(e.message) from e


def _validate_name(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return validate_program_name(value)
    except ProgramNameError as e:
        raise click.BadParameter(str(e)) from e


def parse_defines(defines: tuple[str, ...]) -> dict[str, int]:
    """
    Parse -D options.

    ``NAME=VALUE`` takes any literal the assembler accepts ($FF, 0x10,
    %101, 'A'); a bare ``NAME`` defines it as 1.
    """
    result = {}
    for definition in defines:
        if "=" in definition:
            name, value_text = definition.split("=", 1)
            try:
                value = evaluate(value_text)
            except InvalidLiteralError as e:
                raise click.BadParameter(f"invalid value in -D {definition}: {e.message}") from e
        else:
            name, value = definition, 1
        name = name.strip()
        if not name:
            raise click.BadParameter(f"missing name in -D {definition}")
        if not is_identifier(name):
            raise click.BadParameter(f"invalid name in -D {definition}")
        result[name] = value
    return result


def has_origin_directive(source: str) -> bool:
    """True if any line of the source is an .org directive."""
    for text in source.splitlines():
        try:
            parsed = parse_line(text)
        except AssemblerError:
            # reported with its location when the file is assembled
            continue
        if parsed is not None and parsed.mnemonic == ".org":
            return True
    return False


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output .8xp file (default: input.8xp)",
)
@click.option(
    "-n", "--name",
    callback=_validate_name,
    help="Program name on the calculator (default: derived from the input file name)",
)
@click.option(
    "-b", "--binary",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write raw machine code instead of a .8xp file",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-D", "--define",
    multiple=True,
    help="Define constant (format: NAME=VALUE, or NAME for 1)",
)
@click.option(
    "--org",
    callback=_validate_origin,
    help="Load address used until the first .org (default: $9D93)",
)
@click.option(
    "--header/--no-header",
    default=None,
    help="Emit the AsmPrgm token before the program (default: only if the source has no .org)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="tiasm")
def main(
    input_file: Path,
    output: Optional[Path],
    name: Optional[str],
    binary: Optional[Path],
    listing: Optional[Path],
    define: tuple[str, ...],
    org: Optional[int],
    header: Optional[bool],
    verbose: bool,
) -> None:
    """
    Assemble Z80 source code for the TI-83 Plus.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    \b
    Examples:
        tiasm hello.asm                  # Outputs hello.8xp (prgmHELLO)
        tiasm hello.asm -n GREET         # Program name GREET
        tiasm hello.asm -b hello.bin     # Raw machine code
        tiasm -D LEVELS=4 game.asm       # Define constant
    """
    setup_logging(verbose)

    if output is not None and binary is not None:
        handle_cli_exception(click.BadParameter("-o/--output and -b/--binary are mutually exclusive"))

    try:
        defines = parse_defines(define)
        source = input_file.read_text(encoding="latin-1")

        if header is None:
            header = not has_origin_directive(source)

        asm = Assembler(
            origin=org if org is not None else TI83_PLUS_ORIGIN,
            defines=defines,
            header=ASM_PRGM_TOKEN if header else b"",
        )

        if verbose:
            click.echo(f"Assembling {input_file}...")
        code = asm.assemble(source, filename=input_file.name)

        if binary is not None:
            asm.write_binary(binary)
            if verbose:
                click.echo(f"Wrote {len(code)} bytes raw binary to {binary}")
        else:
            output_file = output if output is not None else input_file.with_suffix(".8xp")
            program_name = name or derive_program_name(input_file)
            asm.write_8xp(output_file, program_name)
            if verbose:
                click.echo(f"Wrote program {program_name} ({len(code)} bytes) to {output_file}")

        if listing is not None:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if verbose:
            click.echo(f"Assembly complete: {len(code)} bytes at ${asm.get_origin():04X}")
            click.echo(f"Defined {len(asm.get_symbols())} labels")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
