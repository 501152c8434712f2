"""
vm16asm - VM16 Assembler Command-Line Interface
===============================================

Command-line front end for the VM16 assembler.

Usage Examples
--------------
Basic assembly (writes hello.bin):
    $ vm16asm hello.asm

With output file:
    $ vm16asm hello.asm -o out.bin

Generate all output files:
    $ vm16asm hello.asm -o hello.bin -l hello.lst -s hello.sym

Verbose mode (logs every pipeline stage):
    $ vm16asm -v hello.asm
"""

from pathlib import Path
from typing import Optional

import click

from vm16_asm import __version__
from vm16_asm.assembler import Assembler, ENTRY_POINT
from vm16_asm.cli.errors import handle_cli_exception, setup_logging


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
    help="Output binary file (default: input.bin)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "--entry",
    default=ENTRY_POINT,
    show_default=True,
    help="Name of the required entry point label",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="vm16asm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    entry: str,
    verbose: bool,
) -> None:
    """
    Assemble VM16 source code.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    The output is a stream of little-endian 16-bit words with no header,
    ready to be loaded at address 0 by the VM16 virtual machine.

    \b
    Examples:
        vm16asm hello.asm              # Outputs hello.bin
        vm16asm hello.asm -o out.bin   # Specify output file
        vm16asm -s hello.sym hello.asm # Also write the symbol table
    """
    setup_logging(verbose)

    output_file = output if output is not None else input_file.with_suffix(".bin")
    asm = Assembler(entry_point=entry)

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...")

        asm.assemble_file(input_file)

        # Nothing is written unless the whole pipeline succeeded
        asm.write_binary(output_file)

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if verbose:
            words = asm.get_words()
            click.echo(f"Wrote {len(words)} words ({len(words) * 2} bytes) to {output_file}")
            click.echo(f"Defined {len(asm.get_constants())} constants, "
                       f"{len(asm.get_labels())} labels")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
