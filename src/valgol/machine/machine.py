"""
VALGOL I Machine
================

Interpreter for loaded VALGOL I programs.

The machine has a value stack whose top plays the role of the
accumulator, a word-addressed memory holding reals, and a print area:
a line buffer that EDT writes into at a given column and PNT flushes.

Instruction Semantics
---------------------
| Op   | Behaviour                                                 |
|------|-----------------------------------------------------------|
| LD   | push memory[a] (0.0 if never stored)                      |
| LDL  | push literal                                              |
| ST   | pop into memory[a]                                        |
| ADD  | pop right, pop left, push left + right                    |
| SUB  | pop right, pop left, push left - right                    |
|      | left is the value pushed first, unlike the 1964 machine   |
| MLT  | pop right, pop left, push left * right                    |
| EQU  | pop two, push 1.0 if they differ by less than epsilon     |
| B    | jump                                                      |
| BTP  | pop, jump if non-zero                                     |
| BFP  | pop, jump if zero                                         |
| EDT  | pop column (rounded half away from zero); if the string   |
|      | fits the print area at that column, write it there        |
| PNT  | emit the print area without trailing blanks, then clear   |
| HLT  | stop                                                      |

Example:
    >>> from valgol.machine import Machine, load_program
    >>> machine = Machine()
    >>> machine.run(load_program(assembly_text))
    >>> print("\\n".join(machine.output))
"""

import logging
import math
from typing import Callable, Optional

from valgol.compiler.emitter import Opcode
from valgol.config import MachineConfig
from valgol.errors import MachineError
from valgol.machine.loader import MachineProgram

logger = logging.getLogger(__name__)


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class Machine:
    """
    VALGOL I machine state and interpreter.

    Attributes:
        config: Run-time configuration
        on_print: Optional callback receiving each printed line
        memory: Word address -> stored value
        stack: Value stack, top last
        output: Lines printed so far
        steps: Instructions executed by the last run
    """

    def __init__(
        self,
        config: Optional[MachineConfig] = None,
        on_print: Optional[Callable[[str], None]] = None,
    ):
        self.config = config or MachineConfig()
        self.on_print = on_print
        self.reset()

    def reset(self) -> None:
        """Clear memory, stack, print area and output."""
        self.memory: dict[int, float] = {}
        self.stack: list[float] = []
        self.output: list[str] = []
        self.steps = 0
        self._print_area = ""
        self._ic = 0

    @property
    def print_area(self) -> str:
        return self._print_area

    # =========================================================================
    # Primitive Operations
    # =========================================================================

    def push(self, value: float) -> None:
        self.stack.append(value)

    def pop(self) -> float:
        if not self.stack:
            raise MachineError("machine stack underflow", self._ic)
        return self.stack.pop()

    def load(self, address: int) -> None:
        self.push(self.memory.get(address, 0.0))

    def store(self, address: int) -> None:
        self.memory[address] = self.pop()

    def _binary(self, operation: Callable[[float, float], float]) -> None:
        right = self.pop()
        left = self.pop()
        self.push(operation(left, right))

    def add(self) -> None:
        self._binary(lambda left, right: left + right)

    def subtract(self) -> None:
        self._binary(lambda left, right: left - right)

    def multiply(self) -> None:
        self._binary(lambda left, right: left * right)

    def equals(self) -> None:
        epsilon = self.config.epsilon
        self._binary(lambda left, right: 1.0 if abs(left - right) < epsilon else 0.0)

    def edit(self, text: str) -> None:
        """Place text in the print area at the column popped off the stack."""
        column = self.pop()
        if not math.isfinite(column):
            raise MachineError(f"EDT column {column} is not a finite number", self._ic)
        start = round_half_away(column)
        size = self.config.print_area_size
        if start < 0 or start + len(text) > size:
            logger.debug(f"EDT {text!r} at column {start} does not fit, ignored")
            return
        if not self._print_area:
            self._print_area = " " * size
        self._print_area = (
            self._print_area[:start] + text + self._print_area[start + len(text):]
        )

    def print_line(self) -> None:
        """Flush the print area as one output line."""
        line = self._print_area.rstrip()
        self.output.append(line)
        if self.on_print:
            self.on_print(line)
        self._print_area = ""

    # =========================================================================
    # Execution
    # =========================================================================

    def run(self, program: MachineProgram) -> list[str]:
        """
        Execute a program from its first instruction until HLT.

        Memory, stack and print area persist between runs unless
        ``reset()`` is called; ``output`` accumulates.

        Returns:
            All lines printed so far

        Raises:
            MachineError: On stack underflow, running off the end of the
                          program, or exceeding max_steps
        """
        instructions = program.instructions
        max_steps = self.config.max_steps
        self._ic = 0
        self.steps = 0

        while True:
            if self._ic >= len(instructions):
                raise MachineError("ran past the last instruction without HLT", self._ic)
            if max_steps is not None and self.steps >= max_steps:
                raise MachineError(f"step limit of {max_steps} exceeded", self._ic)

            instr = instructions[self._ic]
            self.steps += 1
            op = instr.opcode

            if op is Opcode.HLT:
                logger.debug(f"halted after {self.steps} steps")
                return self.output
            if op is Opcode.B:
                self._ic = instr.target
                continue
            if op is Opcode.BTP:
                if self.pop() != 0.0:
                    self._ic = instr.target
                    continue
            elif op is Opcode.BFP:
                if self.pop() == 0.0:
                    self._ic = instr.target
                    continue
            elif op is Opcode.LDL:
                self.push(instr.operand)
            elif op is Opcode.LD:
                self.load(instr.target)
            elif op is Opcode.ST:
                self.store(instr.target)
            elif op is Opcode.ADD:
                self.add()
            elif op is Opcode.SUB:
                self.subtract()
            elif op is Opcode.MLT:
                self.multiply()
            elif op is Opcode.EQU:
                self.equals()
            elif op is Opcode.EDT:
                self.edit(instr.operand)
            elif op is Opcode.PNT:
                self.print_line()
            else:
                raise MachineError(f"'{op.value}' is not executable", self._ic)

            self._ic += 1
