"""
VALGOL I Translator
===================

This package translates VALGOL I source into code for the VALGOL I
machine in a single pass. Parsing and code emission are fused: every
grammar rule emits its instructions while it recognises its construct,
so there is neither a syntax tree nor an optimizer.

- A lexer producing classified tokens
- A label allocator handing out unique branch labels
- An append-only emitter collecting instruction records
- A recursive descent translator, one method per grammar rule

Pipeline
--------
    VALGOL I Source → Lexer → Translator → Assembly

Usage
-----
>>> from valgol.compiler import compile_valgol
>>> print(compile_valgol('''
... .BEGIN .REAL x;
...     5 = x;
...     EDIT(x, 'HELLO'); PRINT
... .END
... '''))
"""

from valgol.compiler.compiler import (
    ValgolCompiler,
    CompilerOptions,
    CompilerResult,
    compile_valgol,
)
from valgol.compiler.emitter import (
    CodeEmitter,
    Instruction,
    Opcode,
    render_assembly,
)
from valgol.compiler.labels import Label, LabelAllocator
from valgol.compiler.lexer import VLexer, VToken, VTokenType, tokenize
from valgol.compiler.translator import Translator, translate

__all__ = [
    # Main API
    "ValgolCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_valgol",
    # Lexer
    "VLexer",
    "VToken",
    "VTokenType",
    "tokenize",
    # Translator
    "Translator",
    "translate",
    # Code emission
    "CodeEmitter",
    "Instruction",
    "Opcode",
    "render_assembly",
    "Label",
    "LabelAllocator",
]
