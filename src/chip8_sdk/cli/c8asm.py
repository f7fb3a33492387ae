"""
c8asm - CHIP-8 Assembler Command-Line Interface
===============================================

This module implements the command-line interface for the CHIP-8 assembler.

Usage Examples
--------------
Basic assembly:
    $ c8asm game.c8a

With output file:
    $ c8asm game.c8a -o game.c8

Generate all output files:
    $ c8asm game.c8a -o game.c8 -l game.lst -s game.sym

Verbose mode:
    $ c8asm -v game.c8a
"""

import logging
from pathlib import Path
from typing import Optional

import click

from chip8_sdk import __version__
from chip8_sdk.assembler import Assembler
from chip8_sdk.cli.errors import handle_cli_exception


def setup_logging(verbose: bool) -> None:
    """Send library debug logging to stderr in verbose mode."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")


def default_output_path(source: Path) -> Path:
    """game.c8a -> game.c8"""
    return source.with_suffix(".c8")


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
    help="Output binary file (default: input.c8)",
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
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="c8asm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    verbose: bool,
) -> None:
    """
    Assemble CHIP-8 source code.

    INPUT_FILE is the assembly source file (.c8a) to assemble.

    The assembler produces a raw program image to be loaded at $200.

    \b
    Examples:
        c8asm game.c8a              # Outputs game.c8
        c8asm game.c8a -o out.c8    # Specify output file
    """
    setup_logging(verbose)
    output_file = output if output is not None else default_output_path(input_file)

    asm = Assembler(verbose=verbose)

    try:
        asm.assemble_file(input_file)

        asm.write_binary(output_file)

        # Write optional auxiliary files
        if listing:
            asm.write_listing(listing)
        if symbols:
            asm.write_symbols(symbols)

        if verbose:
            code = asm.get_code()
            click.echo(f"Assembly complete: {len(code)} bytes at ${asm.get_origin():04X}")
            click.echo(f"Defined {len(asm.get_symbols())} labels")

        click.echo(f"Successfully assembled {input_file} into {output_file}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
