"""
VALGOL I Machine Code Emitter
=============================

This module holds the instruction records the translator produces and
the append-only emitter that collects them.

Instruction Set
---------------
| Mnemonic | Operand        | Meaning                                   |
|----------|----------------|-------------------------------------------|
| LD       | variable       | push the variable's value                 |
| LDL      | literal        | push a literal value                      |
| ST       | variable       | pop into the variable                     |
| ADD      | -              | replace the top two values with their sum |
| SUB      | -              | ... with their difference (left - right)  |
| MLT      | -              | ... with their product                    |
| EQU      | -              | ... with 1 if equal, else 0               |
| B        | label          | unconditional branch                      |
| BTP      | label          | pop, branch if true (non-zero)            |
| BFP      | label          | pop, branch if false (zero)               |
| EDT      | string         | pop a column, place the string there      |
| PNT      | -              | print and clear the print area            |
| BLK      | size           | reserve storage words                     |
| HLT      | -              | halt                                      |
| END      | -              | end of instruction stream                 |

Label definitions are pseudo-instructions (``Opcode.LABEL``) interleaved
with real ones. A bare label means "this address equals this symbol"; it
is not an executable operation.

Assembly Text Format
--------------------
Label definitions start in column 1, instructions are indented eight
spaces with the mnemonic padded to eight columns:

    _skip1
            LDL     5
            ST      x
            BFP     _else2
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional, Union

from valgol.compiler.labels import Label


# =============================================================================
# Opcodes
# =============================================================================

class Opcode(Enum):
    """Mnemonics of the VALGOL I machine, plus the label pseudo-op."""

    LD = "LD"
    LDL = "LDL"
    ST = "ST"
    ADD = "ADD"
    SUB = "SUB"
    MLT = "MLT"
    EQU = "EQU"
    B = "B"
    BTP = "BTP"
    BFP = "BFP"
    EDT = "EDT"
    PNT = "PNT"
    BLK = "BLK"
    HLT = "HLT"
    END = "END"
    LABEL = "LABEL"

    @property
    def is_branch(self) -> bool:
        return self in (Opcode.B, Opcode.BTP, Opcode.BFP)


# Operand kind each opcode takes; None means no operand
OPERAND_KINDS: dict[Opcode, Optional[str]] = {
    Opcode.LD: "variable",
    Opcode.LDL: "literal",
    Opcode.ST: "variable",
    Opcode.ADD: None,
    Opcode.SUB: None,
    Opcode.MLT: None,
    Opcode.EQU: None,
    Opcode.B: "label",
    Opcode.BTP: "label",
    Opcode.BFP: "label",
    Opcode.EDT: "string",
    Opcode.PNT: None,
    Opcode.BLK: "size",
    Opcode.HLT: None,
    Opcode.END: None,
    Opcode.LABEL: "label",
}

Operand = Union[str, float, int, Label, None]


def format_literal(value: float) -> str:
    """
    Render an LDL operand: ``5`` for integral values, ``0.5`` otherwise.

    Always positional, never exponent form (``0.00001``, not ``1e-05``),
    since the loader reads literals as digits with an optional fraction.
    """
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


# =============================================================================
# Instruction Record
# =============================================================================

@dataclass(frozen=True)
class Instruction:
    """
    One emitted instruction or label definition.

    Attributes:
        opcode: The mnemonic (or Opcode.LABEL for a definition point)
        operand: Variable name, literal, label, string contents, block
                 size, or None
    """
    opcode: Opcode
    operand: Operand = None

    @property
    def is_label(self) -> bool:
        return self.opcode is Opcode.LABEL

    @property
    def label_name(self) -> Optional[str]:
        """Name defined by a label pseudo-instruction, else None."""
        if not self.is_label:
            return None
        return str(self.operand)

    def operand_text(self) -> str:
        """Operand as it appears in assembly text."""
        if self.operand is None:
            return ""
        if self.opcode is Opcode.LDL:
            return format_literal(float(self.operand))
        if self.opcode is Opcode.EDT:
            return f"'{self.operand}'"
        return str(self.operand)

    def render(self) -> str:
        """Format as one line of assembly text."""
        if self.is_label:
            return self.operand_text()
        operand = self.operand_text()
        if operand:
            return f"        {self.opcode.value:<8}{operand}"
        return f"        {self.opcode.value}"

    def __str__(self) -> str:
        if self.is_label:
            return self.operand_text()
        operand = self.operand_text()
        return f"{self.opcode.value} {operand}" if operand else self.opcode.value


# =============================================================================
# Emitter
# =============================================================================

class CodeEmitter:
    """
    Append-only instruction sink.

    Nothing already emitted is ever rewritten: forward branches name a
    label that is defined later by ``define``.

    Example:
        >>> out = CodeEmitter()
        >>> out.emit(Opcode.LDL, 5.0)
        >>> out.emit(Opcode.ST, "x")
        >>> print(out.render())
                LDL     5
                ST      x
    """

    def __init__(self):
        self._instructions: list[Instruction] = []

    def emit(self, opcode: Opcode, operand: Operand = None) -> None:
        """Append one instruction."""
        self._instructions.append(Instruction(opcode, operand))

    def define(self, label: Union[Label, str]) -> None:
        """Append a label definition point."""
        self._instructions.append(Instruction(Opcode.LABEL, label))

    @property
    def instructions(self) -> tuple[Instruction, ...]:
        return tuple(self._instructions)

    def __len__(self) -> int:
        return len(self._instructions)

    def render(self) -> str:
        return render_assembly(self._instructions)


def render_assembly(instructions: Iterable[Instruction], header: Optional[str] = None) -> str:
    """
    Render instructions as assembly text, one per line.

    Args:
        instructions: Instruction records in emission order
        header: Optional comment placed on a leading '#' line
    """
    lines = []
    if header:
        lines.append(f"# {header}")
    lines.extend(instr.render() for instr in instructions)
    return "\n".join(lines) + "\n"
