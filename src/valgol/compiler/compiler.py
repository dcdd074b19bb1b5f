"""
VALGOL I Compiler Main Module
=============================

This module provides the main compiler interface. It runs the two
stages of translation and renders the result as assembly text:

    Source → Lexer → Translator (emits code while parsing) → Assembly

Usage
-----
Command line:
    $ vgc hello.vg -o hello.asm

Programmatic:
    >>> from valgol.compiler import compile_valgol
    >>> asm = compile_valgol(".BEGIN PRINT .END")

Error Handling
--------------
Translation is all-or-nothing. The first LexicalError or SyntaxMismatch
propagates to the caller and no partial instruction sequence is kept.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from valgol.compiler.emitter import Instruction, render_assembly
from valgol.compiler.lexer import VLexer
from valgol.compiler.translator import Translator

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        label_start: Number given to the first generated label
        header_comment: Put a '# source: <file>' line at the top of the
                        rendered assembly
    """
    label_start: int = 1
    header_comment: bool = False

    def __post_init__(self):
        if self.label_start < 0:
            raise ValueError(f"label_start must be non-negative, got {self.label_start}")


@dataclass
class CompilerResult:
    """
    Result of a successful compilation.

    Attributes:
        filename: Source filename
        instructions: Emitted instruction sequence
        assembly: Rendered assembly text
        token_count: Number of tokens read (EOF included)
    """
    filename: str
    instructions: tuple[Instruction, ...] = field(default_factory=tuple)
    assembly: str = ""
    token_count: int = 0

    @property
    def label_count(self) -> int:
        """Number of label definitions, generated and declared."""
        return sum(1 for instr in self.instructions if instr.is_label)


class ValgolCompiler:
    """
    VALGOL I compiler.

    Example:
        compiler = ValgolCompiler()
        result = compiler.compile_file("loop.vg")
        print(result.assembly)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str, filename: str = "<input>") -> CompilerResult:
        """
        Compile VALGOL I source code to assembly.

        Args:
            source: VALGOL I source text
            filename: Source filename for error messages

        Returns:
            CompilerResult with instructions and assembly text

        Raises:
            TranslationError: If tokenizing or translating fails
        """
        tokens = list(VLexer(source, filename).tokenize())
        translator = Translator(
            tokens,
            filename,
            source_lines=source.splitlines(),
            label_start=self.options.label_start,
        )
        instructions = translator.translate()

        header = f"source: {filename}" if self.options.header_comment else None
        result = CompilerResult(
            filename=filename,
            instructions=instructions,
            assembly=render_assembly(instructions, header=header),
            token_count=len(tokens),
        )
        logger.debug(f"compiled {filename}: {len(instructions)} instructions")
        return result

    def compile_file(self, filepath: str | Path) -> CompilerResult:
        """
        Compile a VALGOL I source file.

        Raises:
            TranslationError: If tokenizing or translating fails
            FileNotFoundError: If the source file does not exist
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.compile_source(source, str(path))


def compile_valgol(
    source: str,
    filename: str = "<input>",
    options: Optional[CompilerOptions] = None,
) -> str:
    """
    Compile VALGOL I source and return the assembly text.

    Args:
        source: VALGOL I source text
        filename: Source filename for error messages
        options: Compiler options (defaults if None)

    Returns:
        Assembly text, one instruction or label per line
    """
    return ValgolCompiler(options).compile_source(source, filename).assembly
