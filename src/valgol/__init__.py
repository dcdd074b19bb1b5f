"""
VALGOL - Translator and Machine for the VALGOL I Language
=========================================================

This package provides a small toolchain around VALGOL I, the example
language of Schorre's META II paper: a single-pass syntax-directed
translator that emits code for the VALGOL I stack machine, a loader for
that code, and the machine itself.

Main Components
---------------
- **compiler**: VALGOL I translator (vgc)
    Parses source and emits machine instructions while parsing

- **machine**: VALGOL I machine (vgm)
    Loads assembly text, resolves labels and runs the program

Quick Start
-----------
Translate a program:
    >>> from valgol import compile_valgol
    >>> asm = compile_valgol(".BEGIN .REAL x; 5 = x; PRINT .END")

Run it:
    >>> from valgol import Machine, load_program
    >>> Machine().run(load_program(asm))

Or use the command-line tools:
    $ vgc hello.vg -o hello.asm
    $ vgm hello.asm

Reference
---------
- D. V. Schorre, "META II: A Syntax-Oriented Compiler Writing Language",
  Proceedings of the 1964 ACM National Conference
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from valgol.compiler import (
    ValgolCompiler,
    CompilerOptions,
    CompilerResult,
    compile_valgol,
    translate,
    Instruction,
    Opcode,
)
from valgol.config import MachineConfig
from valgol.errors import (
    ValgolError,
    SourceLocation,
    TranslationError,
    LexicalError,
    UnterminatedStringError,
    SyntaxMismatch,
    AssemblyError,
    UndefinedLabelError,
    DuplicateLabelError,
    MachineError,
)
from valgol.machine import Machine, MachineProgram, load_file, load_program

__all__ = [
    "__version__",
    # Compiler
    "ValgolCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_valgol",
    "translate",
    "Instruction",
    "Opcode",
    # Machine
    "Machine",
    "MachineConfig",
    "MachineProgram",
    "load_file",
    "load_program",
    # Exception hierarchy
    "ValgolError",
    "SourceLocation",
    "TranslationError",
    "LexicalError",
    "UnterminatedStringError",
    "SyntaxMismatch",
    "AssemblyError",
    "UndefinedLabelError",
    "DuplicateLabelError",
    "MachineError",
]
