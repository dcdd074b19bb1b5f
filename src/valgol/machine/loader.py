"""
VALGOL I Assembly Loader
========================

This module reads the assembly text produced by the translator (or
written by hand) and turns it into a loaded program for the machine.

Line Format
-----------
- Blank lines are ignored; '#' starts a comment outside string operands
- A line starting in column 1 defines a label: ``_L1`` or ``x``
- An indented line holds one instruction: ``        LDL     5``
- ``END`` stops reading; anything after it is ignored

Memory Layout
-------------
The loader assigns every line a word address in the VALGOL I machine
layout. An instruction with an operand takes two words, one without takes
one, and ``BLK n`` reserves ``n`` words without producing an executable
instruction. A label binds to the current word address (for LD/ST) and
to the index of the next executable instruction (for branches).

Resolution
----------
After reading, LD/ST operands resolve to memory addresses and B/BTP/BFP
operands to instruction indices. Unknown labels, duplicate labels and
branches to a label with no instruction after it are errors.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from valgol.compiler.emitter import Opcode, OPERAND_KINDS
from valgol.errors import (
    SourceLocation,
    AssemblyError,
    UndefinedLabelError,
    DuplicateLabelError,
)

logger = logging.getLogger(__name__)


LABEL_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
NUMBER_PATTERN = re.compile(r"\d+(\.\d+)?")
STRING_PATTERN = re.compile(r"'([^']*)'")
INSTRUCTION_PATTERN = re.compile(r"([A-Za-z]+)\s*(.*)")

# Mnemonics accepted by the loader (LABEL is an emitter-only pseudo-op)
MNEMONICS: dict[str, Opcode] = {
    op.value: op for op in Opcode if op is not Opcode.LABEL
}


# =============================================================================
# Loaded Program
# =============================================================================

@dataclass(frozen=True)
class MachineInstruction:
    """
    One executable instruction after loading.

    Attributes:
        opcode: The mnemonic
        operand: Label name (LD/ST/B/BTP/BFP), literal (LDL), string
                 contents (EDT) or None
        target: Resolved memory address (LD/ST) or instruction index
                (branches); None for other opcodes
        line: Line number in the assembly text
    """
    opcode: Opcode
    operand: Union[str, float, None] = None
    target: Optional[int] = None
    line: int = 0


@dataclass(frozen=True)
class LabelInfo:
    """Where a label points: its word address and next instruction index."""
    name: str
    address: int
    ic: int
    location: SourceLocation


@dataclass
class MachineProgram:
    """
    A program ready to run.

    Attributes:
        instructions: Executable instructions in order
        labels: Label definitions by name
        size: Words of memory the program occupies, storage included
    """
    instructions: list[MachineInstruction] = field(default_factory=list)
    labels: dict[str, LabelInfo] = field(default_factory=dict)
    size: int = 0

    def address_of(self, label: str) -> int:
        """Word address bound to a label (KeyError if undefined)."""
        return self.labels[label].address

    def __len__(self) -> int:
        return len(self.instructions)


# =============================================================================
# Loader
# =============================================================================

class AssemblyLoader:
    """
    Reads assembly text into a MachineProgram.

    Usage:
        program = AssemblyLoader(text, "loop.asm").load()
    """

    def __init__(self, text: str, filename: str = "<input>"):
        self.text = text
        self.filename = filename

        self._program = MachineProgram()
        self._address = 0
        # Operand lines waiting for resolution: index -> location
        self._unresolved: dict[int, SourceLocation] = {}
        self._lines: list[str] = []

    def load(self) -> MachineProgram:
        """
        Read and resolve the whole text.

        Raises:
            AssemblyError: On malformed lines or unresolvable labels
        """
        self._lines = self.text.splitlines()
        for number, raw in enumerate(self._lines, start=1):
            line = _strip_comment(raw).rstrip()
            if not line.strip():
                continue
            if not line[0].isspace():
                self._add_label(line, number)
            elif self._add_instruction(line, number):
                break

        self._program.size = self._address
        self._resolve()
        logger.debug(
            f"loaded {self.filename}: {len(self._program)} instructions, "
            f"{len(self._program.labels)} labels, {self._program.size} words"
        )
        return self._program

    def _location(self, line: int, column: int = 1) -> SourceLocation:
        return SourceLocation(self.filename, line, column)

    def _error(self, message: str, line: int, column: int = 1) -> AssemblyError:
        return AssemblyError(
            message,
            self._location(line, column),
            source_line=self._lines[line - 1],
        )

    def _add_label(self, line: str, number: int) -> None:
        name = line.strip()
        if not LABEL_PATTERN.fullmatch(name):
            raise self._error(f"invalid label {name!r}", number)

        location = self._location(number)
        if name in self._program.labels:
            raise DuplicateLabelError(
                name,
                location,
                original_location=self._program.labels[name].location,
                source_line=self._lines[number - 1],
            )

        self._program.labels[name] = LabelInfo(
            name, self._address, len(self._program.instructions), location
        )

    def _add_instruction(self, line: str, number: int) -> bool:
        """Add one instruction line; returns True at END."""
        body = line.strip()
        column = len(line) - len(line.lstrip()) + 1
        match = INSTRUCTION_PATTERN.fullmatch(body)
        if not match:
            raise self._error(f"invalid instruction {body!r}", number, column)

        mnemonic, operand_text = match.group(1), match.group(2).strip()
        opcode = MNEMONICS.get(mnemonic)
        if opcode is None:
            raise self._error(f"unknown mnemonic '{mnemonic}'", number, column)

        kind = OPERAND_KINDS[opcode]
        if kind is None:
            if operand_text:
                raise self._error(f"'{mnemonic}' takes no operand", number, column)
            if opcode is Opcode.END:
                return True
            self._append(MachineInstruction(opcode, line=number), words=1)
            return False

        if not operand_text:
            raise self._error(f"'{mnemonic}' needs a {kind} operand", number, column)
        operand = self._parse_operand(opcode, kind, operand_text, number, column)

        if opcode is Opcode.BLK:
            self._address += operand
            return False

        if kind in ("variable", "label"):
            self._unresolved[len(self._program.instructions)] = self._location(number, column)
        self._append(MachineInstruction(opcode, operand, line=number), words=2)
        return False

    def _parse_operand(
        self, opcode: Opcode, kind: str, text: str, number: int, column: int
    ) -> Union[str, float, int]:
        if kind in ("variable", "label"):
            if LABEL_PATTERN.fullmatch(text):
                return text
        elif kind == "literal":
            if NUMBER_PATTERN.fullmatch(text):
                return float(text)
        elif kind == "string":
            match = STRING_PATTERN.fullmatch(text)
            if match:
                return match.group(1)
        elif kind == "size":
            if NUMBER_PATTERN.fullmatch(text) and float(text).is_integer():
                return int(float(text))
        raise self._error(
            f"invalid {kind} operand {text!r} for '{opcode.value}'", number, column
        )

    def _append(self, instruction: MachineInstruction, words: int) -> None:
        self._program.instructions.append(instruction)
        self._address += words

    def _resolve(self) -> None:
        instructions = self._program.instructions
        count = len(instructions)

        for index, location in self._unresolved.items():
            instr = instructions[index]
            info = self._program.labels.get(instr.operand)
            if info is None:
                raise UndefinedLabelError(
                    instr.operand, location, source_line=self._lines[location.line - 1]
                )

            if instr.opcode.is_branch:
                if info.ic >= count:
                    raise AssemblyError(
                        f"branch target '{info.name}' has no instruction after it",
                        location,
                        source_line=self._lines[location.line - 1],
                    )
                target = info.ic
            else:
                target = info.address

            instructions[index] = MachineInstruction(
                instr.opcode, instr.operand, target, instr.line
            )


def _strip_comment(line: str) -> str:
    """Drop a '#' comment, leaving '#' inside quoted operands alone."""
    quoted = False
    for index, char in enumerate(line):
        if char == "'":
            quoted = not quoted
        elif char == "#" and not quoted:
            return line[:index]
    return line


# =============================================================================
# Convenience Functions
# =============================================================================

def load_program(text: str, filename: str = "<input>") -> MachineProgram:
    """Load assembly text into a MachineProgram."""
    return AssemblyLoader(text, filename).load()


def load_file(filepath: str | Path) -> MachineProgram:
    """
    Load an assembly file.

    Raises:
        AssemblyError: On malformed lines or unresolvable labels
        FileNotFoundError: If the file does not exist
    """
    path = Path(filepath)
    return load_program(path.read_text(encoding="utf-8"), str(path))
