"""
vgm - VALGOL I Machine Command-Line Interface
=============================================

Loads a VALGOL I machine program and runs it, echoing every line the
program prints. Source files (.vg) are translated first.

Usage Examples
--------------
Run assembly:
    $ vgm loop.asm

Run source directly:
    $ vgm loop.vg

Guard against runaway loops:
    $ vgm --max-steps 100000 loop.asm

Defaults for the machine settings come from the environment
(VALGOL_PRINT_AREA_SIZE, VALGOL_EPSILON, VALGOL_MAX_STEPS).
"""

from pathlib import Path
from typing import Optional

import click

from valgol import __version__
from valgol.cli.errors import handle_cli_exception, setup_logging
from valgol.compiler import ValgolCompiler
from valgol.config import MachineConfig
from valgol.machine import Machine, load_file, load_program


SOURCE_SUFFIXES = (".vg", ".valgol")


def is_source_file(path: Path) -> bool:
    """True if the path names VALGOL I source rather than assembly."""
    return path.suffix.lower() in SOURCE_SUFFIXES


@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-s", "--source",
    is_flag=True,
    help="Treat INPUT_FILE as VALGOL I source (implied for .vg files)",
)
@click.option(
    "--max-steps",
    type=click.IntRange(min=1),
    default=None,
    help="Stop with an error after this many instructions",
)
@click.option(
    "--print-area-size",
    type=click.IntRange(min=1),
    default=None,
    help="Width of the print area (default: 100)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="vgm")
def main(
    input_file: Path,
    source: bool,
    max_steps: Optional[int],
    print_area_size: Optional[int],
    verbose: bool,
) -> None:
    """
    Run a program on the VALGOL I machine.

    INPUT_FILE is an assembly file produced by vgc, or a VALGOL I
    source file (.vg) which is translated before running.

    \b
    Examples:
        vgm loop.asm                 # Run assembly
        vgm loop.vg                  # Translate and run
        vgm --max-steps 1000 x.asm   # Bound execution
    """
    setup_logging(verbose)

    config = MachineConfig.from_env()
    if max_steps is not None:
        config.max_steps = max_steps
    if print_area_size is not None:
        config.print_area_size = print_area_size

    try:
        if source or is_source_file(input_file):
            result = ValgolCompiler().compile_file(input_file)
            program = load_program(result.assembly, str(input_file))
        else:
            program = load_file(input_file)

        if verbose:
            click.echo(
                f"Loaded {len(program)} instructions, {program.size} words",
                err=True,
            )

        machine = Machine(config, on_print=click.echo)
        machine.run(program)

        if verbose:
            click.echo(f"Halted after {machine.steps} steps", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose, error_type="Run-time")


if __name__ == "__main__":
    main()
