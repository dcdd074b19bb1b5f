"""
VALGOL I Machine
================

Loader and interpreter for the code the translator emits.

- **loader**: reads assembly text, lays out memory, resolves labels
- **machine**: executes a loaded program on a value stack

Usage
-----
>>> from valgol.compiler import compile_valgol
>>> from valgol.machine import Machine, load_program
>>> program = load_program(compile_valgol(source))
>>> Machine().run(program)
"""

from valgol.machine.loader import (
    AssemblyLoader,
    LabelInfo,
    MachineInstruction,
    MachineProgram,
    load_file,
    load_program,
)
from valgol.machine.machine import Machine, round_half_away

__all__ = [
    "AssemblyLoader",
    "LabelInfo",
    "MachineInstruction",
    "MachineProgram",
    "load_file",
    "load_program",
    "Machine",
    "round_half_away",
]
