"""
vgc - VALGOL I Compiler Command-Line Interface
==============================================

Translates a VALGOL I source file into VALGOL I machine assembly.

Usage Examples
--------------
Basic translation:
    $ vgc loop.vg

With output file:
    $ vgc loop.vg -o loop.asm

To standard output:
    $ vgc loop.vg -o -

Full pipeline:
    $ vgc loop.vg && vgm loop.asm
"""

from pathlib import Path
from typing import Optional

import click

from valgol import __version__
from valgol.cli.errors import handle_cli_exception, setup_logging
from valgol.compiler import ValgolCompiler, CompilerOptions


@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, allow_dash=True, path_type=Path),
    help="Output assembly file (default: input.asm, '-' for stdout)",
)
@click.option(
    "--label-start",
    type=click.IntRange(min=0),
    default=1,
    show_default=True,
    help="Number of the first generated label",
)
@click.option(
    "--header/--no-header",
    default=False,
    help="Put a '# source: FILE' comment at the top of the output",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="vgc")
def main(
    input_file: Path,
    output: Optional[Path],
    label_start: int,
    header: bool,
    verbose: bool,
) -> None:
    """
    Translate VALGOL I source code to VALGOL I machine assembly.

    INPUT_FILE is the VALGOL I source file (.vg) to translate.

    \b
    Examples:
        vgc loop.vg                  # Outputs loop.asm
        vgc loop.vg -o out.asm       # Specify output file
        vgc loop.vg -o -             # Write to stdout
    """
    setup_logging(verbose)

    if output is None:
        output = input_file.with_suffix(".asm")

    options = CompilerOptions(label_start=label_start, header_comment=header)

    try:
        if verbose:
            click.echo(f"Translating {input_file}...", err=True)

        result = ValgolCompiler(options).compile_file(input_file)

        if str(output) == "-":
            click.echo(result.assembly, nl=False)
            return

        output.write_text(result.assembly)

        if verbose:
            click.echo(f"Tokenized: {result.token_count} tokens")
            click.echo(
                f"Emitted: {len(result.instructions)} lines, "
                f"{result.label_count} labels"
            )

        click.echo(f"Compiled {input_file} -> {output}")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
