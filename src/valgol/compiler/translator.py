"""
VALGOL I Syntax-Directed Translator
===================================

This module implements a single-pass recursive descent translator for
VALGOL I. There is no syntax tree: each grammar rule is one method that
consumes tokens and, as a side effect of recognising its construct,
emits VALGOL I machine instructions.

Grammar
-------
PROGRAM       ::= BLOCK                                   HLT END
BLOCK         ::= '.BEGIN' (DEC ';')? ST (';' ST)* '.END'
DEC           ::= '.REAL' ID (',' ID)*                    B *1 / ID: BLK 1 / *1:
ST            ::= IOST | ASSIGNST | UNTILST | CONDITIONALST | BLOCK
IOST          ::= 'EDIT' '(' EXP ',' STRING ')'           EDT
                | 'PRINT'                                 PNT
ASSIGNST      ::= EXP '=' ID                              ST
UNTILST       ::= '.UNTIL' EXP '.DO' ST                   *1: ... BTP *2 ... B *1 / *2:
CONDITIONALST ::= '.IF' EXP '.THEN' ST '.ELSE' ST         BFP *1 ... B *2 / *1: ... *2:
EXP           ::= EXP1 ('.=' EXP1)?                       EQU
EXP1          ::= TERM ('+' TERM | '-' TERM)*             ADD / SUB
TERM          ::= PRIMARY ('*' PRIMARY)*                  MLT
PRIMARY       ::= ID | NUMBER | '(' EXP ')'               LD / LDL

Recognition Protocol
--------------------
Every rule method returns True when it recognised its construct and
False when the current token cannot start it. A rule only returns False
before consuming anything; once its leading token matched it is
committed, and any later mismatch raises SyntaxMismatch, which aborts
the whole translation. Alternatives are tried in the order written and
the first match wins.

Because a rule never emits code or allocates labels before committing,
a failed alternative leaves no trace and nothing emitted has to be
taken back.

Example Usage
-------------
>>> from valgol.compiler.translator import translate
>>> for instr in translate(".BEGIN 5 = x .END"):
...     print(instr)
LDL 5
ST x
HLT
END
"""

import logging
from typing import Callable, Optional

from valgol.compiler.emitter import CodeEmitter, Instruction, Opcode
from valgol.compiler.labels import LabelAllocator
from valgol.compiler.lexer import VLexer, VToken, VTokenType, DOTTED_KEYWORDS, WORD_KEYWORDS
from valgol.errors import SyntaxMismatch

logger = logging.getLogger(__name__)


# Descriptions of token types used in "expected ..." messages
_EXPECTED_NAMES: dict[VTokenType, str] = {
    VTokenType.EOF: "end of input",
    VTokenType.IDENTIFIER: "identifier",
    VTokenType.NUMBER: "number",
    VTokenType.STRING: "string",
    VTokenType.PLUS: "'+'",
    VTokenType.MINUS: "'-'",
    VTokenType.STAR: "'*'",
    VTokenType.ASSIGN: "'='",
    VTokenType.EQUALS: "'.='",
    VTokenType.LPAREN: "'('",
    VTokenType.RPAREN: "')'",
    VTokenType.COMMA: "','",
    VTokenType.SEMICOLON: "';'",
}
_EXPECTED_NAMES.update({t: f"'{text}'" for text, t in DOTTED_KEYWORDS.items()})
_EXPECTED_NAMES.update({t: f"'{text}'" for text, t in WORD_KEYWORDS.items()})


class Translator:
    """
    Recursive descent translator from VALGOL I tokens to machine code.

    The label counter and the instruction list are the only mutable
    state. ``translate()`` starts both afresh, so translating the same
    tokens twice yields identical output, label numbers included.

    Attributes:
        tokens: Token list ending with EOF
        filename: Source filename for error messages
        source_lines: Original source lines for error context
        label_start: Number given to the first allocated label
    """

    def __init__(
        self,
        tokens: list[VToken],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
        label_start: int = 1,
    ):
        if not tokens or tokens[-1].type != VTokenType.EOF:
            raise ValueError("token list must end with an EOF token")
        self.tokens = tokens
        self.filename = filename
        self.source_lines = source_lines or []
        self.label_start = label_start

        self._pos = 0
        self._out = CodeEmitter()
        self._labels = LabelAllocator(label_start)

    def translate(self) -> tuple[Instruction, ...]:
        """
        Translate the whole token stream as one PROGRAM.

        Returns:
            The emitted instructions, ending with HLT and END

        Raises:
            SyntaxMismatch: If the tokens do not form a program; nothing
                            emitted before the failure is returned
        """
        self._pos = 0
        self._out = CodeEmitter()
        self._labels = LabelAllocator(self.label_start)

        logger.debug(f"translating {self.filename} ({len(self.tokens)} tokens)")
        self._program()
        if not self._check(VTokenType.EOF):
            raise self._mismatch("PROGRAM", "end of input")

        logger.debug(
            f"translated {self.filename}: {len(self._out)} instructions, "
            f"{len(self._labels)} labels"
        )
        return self._out.instructions

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _peek(self) -> VToken:
        return self.tokens[self._pos]

    def _advance(self) -> VToken:
        token = self.tokens[self._pos]
        if token.type != VTokenType.EOF:
            self._pos += 1
        return token

    def _check(self, token_type: VTokenType) -> bool:
        return self._peek().type == token_type

    def _match(self, token_type: VTokenType) -> Optional[VToken]:
        """Consume the current token if it has the given type."""
        if self._check(token_type):
            return self._advance()
        return None

    def _expect(self, token_type: VTokenType, rule: str) -> VToken:
        """Consume a mandatory token or raise SyntaxMismatch."""
        if self._check(token_type):
            return self._advance()
        raise self._mismatch(rule, _EXPECTED_NAMES[token_type])

    def _require(self, recognise: Callable[[], bool], rule: str, expected: str) -> None:
        """Run a mandatory sub-rule; no match is a SyntaxMismatch."""
        if not recognise():
            raise self._mismatch(rule, expected)

    def _attempt(self, recognise: Callable[[], bool]) -> bool:
        """Try one alternative, restoring the cursor if it does not match."""
        saved = self._pos
        if recognise():
            return True
        self._pos = saved
        return False

    def _mismatch(self, rule: str, expected: str) -> SyntaxMismatch:
        token = self._peek()
        source_line = None
        if 0 < token.line <= len(self.source_lines):
            source_line = self.source_lines[token.line - 1]
        hint = None
        if expected == _EXPECTED_NAMES[VTokenType.IDENTIFIER] and token.is_keyword:
            hint = f"'{token.text}' is a reserved word and cannot name a variable"
        logger.debug(f"{rule}: expected {expected}, found {token.describe()} at {token.location}")
        return SyntaxMismatch(
            rule,
            expected,
            token.describe(),
            location=token.location,
            source_line=source_line,
            hint=hint,
        )

    # =========================================================================
    # Expressions
    # =========================================================================

    def _primary(self) -> bool:
        token = self._match(VTokenType.IDENTIFIER)
        if token:
            self._out.emit(Opcode.LD, token.value)
            return True

        token = self._match(VTokenType.NUMBER)
        if token:
            self._out.emit(Opcode.LDL, token.value)
            return True

        if self._match(VTokenType.LPAREN):
            self._require(self._exp, "PRIMARY", "expression")
            self._expect(VTokenType.RPAREN, "PRIMARY")
            return True

        return False

    def _term(self) -> bool:
        if not self._primary():
            return False
        while self._match(VTokenType.STAR):
            self._require(self._primary, "TERM", "operand")
            self._out.emit(Opcode.MLT)
        return True

    def _exp1(self) -> bool:
        if not self._term():
            return False
        while True:
            if self._match(VTokenType.PLUS):
                self._require(self._term, "EXP1", "operand")
                self._out.emit(Opcode.ADD)
            elif self._match(VTokenType.MINUS):
                self._require(self._term, "EXP1", "operand")
                self._out.emit(Opcode.SUB)
            else:
                return True

    def _exp(self) -> bool:
        if not self._exp1():
            return False
        # At most one equality; '.=' does not chain
        if self._match(VTokenType.EQUALS):
            self._require(self._exp1, "EXP", "expression")
            self._out.emit(Opcode.EQU)
        return True

    # =========================================================================
    # Statements
    # =========================================================================

    def _assignst(self) -> bool:
        if not self._exp():
            return False
        self._expect(VTokenType.ASSIGN, "ASSIGNST")
        target = self._expect(VTokenType.IDENTIFIER, "ASSIGNST")
        self._out.emit(Opcode.ST, target.value)
        return True

    def _iost(self) -> bool:
        if self._match(VTokenType.EDIT):
            self._expect(VTokenType.LPAREN, "IOST")
            self._require(self._exp, "IOST", "expression")
            self._expect(VTokenType.COMMA, "IOST")
            text = self._expect(VTokenType.STRING, "IOST")
            self._expect(VTokenType.RPAREN, "IOST")
            self._out.emit(Opcode.EDT, text.value)
            return True

        if self._match(VTokenType.PRINT):
            self._out.emit(Opcode.PNT)
            return True

        return False

    def _untilst(self) -> bool:
        if not self._match(VTokenType.UNTIL):
            return False

        top = self._labels.new("loop")
        self._out.define(top)
        self._require(self._exp, "UNTILST", "expression")
        self._expect(VTokenType.DO, "UNTILST")

        # Condition already true: skip the body entirely
        exit_label = self._labels.new("exit")
        self._out.emit(Opcode.BTP, exit_label)
        self._require(self._st, "UNTILST", "statement")
        self._out.emit(Opcode.B, top)
        self._out.define(exit_label)
        return True

    def _conditionalst(self) -> bool:
        if not self._match(VTokenType.IF):
            return False

        self._require(self._exp, "CONDITIONALST", "expression")
        self._expect(VTokenType.THEN, "CONDITIONALST")

        else_label = self._labels.new("else")
        self._out.emit(Opcode.BFP, else_label)
        self._require(self._st, "CONDITIONALST", "statement")

        join_label = self._labels.new("join")
        self._out.emit(Opcode.B, join_label)
        self._out.define(else_label)
        self._expect(VTokenType.ELSE, "CONDITIONALST")
        self._require(self._st, "CONDITIONALST", "statement")
        self._out.define(join_label)
        return True

    def _dec(self) -> bool:
        if not self._match(VTokenType.REAL):
            return False

        # Storage lives inline in the code; control flow jumps over it
        skip = self._labels.new("skip")
        self._out.emit(Opcode.B, skip)
        self._reserve(self._expect(VTokenType.IDENTIFIER, "DEC"))
        while self._match(VTokenType.COMMA):
            self._reserve(self._expect(VTokenType.IDENTIFIER, "DEC"))
        self._out.define(skip)
        return True

    def _reserve(self, name: VToken) -> None:
        self._out.define(name.value)
        self._out.emit(Opcode.BLK, 1)

    def _block(self) -> bool:
        if not self._match(VTokenType.BEGIN):
            return False

        if self._dec():
            self._expect(VTokenType.SEMICOLON, "BLOCK")

        self._require(self._st, "BLOCK", "statement")
        while self._match(VTokenType.SEMICOLON):
            self._require(self._st, "BLOCK", "statement")
        self._expect(VTokenType.END, "BLOCK")
        return True

    def _st(self) -> bool:
        for alternative in (
            self._iost,
            self._assignst,
            self._untilst,
            self._conditionalst,
            self._block,
        ):
            if self._attempt(alternative):
                return True
        return False

    def _program(self) -> None:
        self._require(self._block, "PROGRAM", "'.BEGIN'")
        self._out.emit(Opcode.HLT)
        self._out.emit(Opcode.END)


# =============================================================================
# Convenience Functions
# =============================================================================

def translate(
    source: str,
    filename: str = "<input>",
    label_start: int = 1,
) -> tuple[Instruction, ...]:
    """
    Tokenize and translate VALGOL I source in one call.

    Args:
        source: VALGOL I program text
        filename: Source filename for error messages
        label_start: Number given to the first allocated label

    Returns:
        The emitted instruction sequence

    Raises:
        LexicalError: If the source cannot be tokenized
        SyntaxMismatch: If the tokens do not form a program
    """
    tokens = list(VLexer(source, filename).tokenize())
    translator = Translator(tokens, filename, source.splitlines(), label_start)
    return translator.translate()
