"""
VALGOL I Lexer (Tokenizer)
==========================

This module converts VALGOL I source text into a stream of tokens for
the translator.

Token Categories
----------------
- Keywords: .BEGIN .END .REAL .IF .THEN .ELSE .UNTIL .DO EDIT PRINT
- Identifiers: a letter followed by letters and digits
- Numbers: 12, 0.5, 00.120 (digits, optionally '.' and more digits)
- Strings: 'single quoted', no escapes, confined to one line
- Operators: + - * = .=
- Delimiters: ( ) , ;

A '.' is only ever the start of a dotted keyword or of '.='. A trailing
'.' never belongs to a number, so ``5.=x`` lexes as ``5`` ``.=`` ``x``.

Example Usage
-------------
>>> from valgol.compiler.lexer import VLexer
>>> for token in VLexer("5 = x", "test.vg").tokenize():
...     print(token)
Token(NUMBER, 5.0, 1:1)
Token(ASSIGN, '=', 1:3)
Token(IDENTIFIER, 'x', 1:5)
Token(EOF, 1:6)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import math
import string

from valgol.errors import SourceLocation, LexicalError, UnterminatedStringError


# =============================================================================
# Token Type Enumeration
# =============================================================================

class VTokenType(Enum):
    """Token types for the VALGOL I language."""

    # === Structural Tokens ===
    EOF = auto()            # End of input

    # === Identifiers and Literals ===
    IDENTIFIER = auto()     # Variable names
    NUMBER = auto()         # Real literals
    STRING = auto()         # 'string' literals

    # === Dotted Keywords ===
    BEGIN = auto()          # .BEGIN
    END = auto()            # .END
    REAL = auto()           # .REAL
    IF = auto()             # .IF
    THEN = auto()           # .THEN
    ELSE = auto()           # .ELSE
    UNTIL = auto()          # .UNTIL
    DO = auto()             # .DO

    # === Word Keywords ===
    EDIT = auto()           # EDIT
    PRINT = auto()          # PRINT

    # === Operators ===
    PLUS = auto()           # +
    MINUS = auto()          # -
    STAR = auto()           # *
    ASSIGN = auto()         # =
    EQUALS = auto()         # .=

    # === Delimiters ===
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    COMMA = auto()          # ,
    SEMICOLON = auto()      # ;


# =============================================================================
# Keyword and Symbol Mapping
# =============================================================================

DOTTED_KEYWORDS: dict[str, VTokenType] = {
    ".BEGIN": VTokenType.BEGIN,
    ".END": VTokenType.END,
    ".REAL": VTokenType.REAL,
    ".IF": VTokenType.IF,
    ".THEN": VTokenType.THEN,
    ".ELSE": VTokenType.ELSE,
    ".UNTIL": VTokenType.UNTIL,
    ".DO": VTokenType.DO,
}

WORD_KEYWORDS: dict[str, VTokenType] = {
    "EDIT": VTokenType.EDIT,
    "PRINT": VTokenType.PRINT,
}

SINGLE_CHAR_TOKENS: dict[str, VTokenType] = {
    "+": VTokenType.PLUS,
    "-": VTokenType.MINUS,
    "*": VTokenType.STAR,
    "=": VTokenType.ASSIGN,
    "(": VTokenType.LPAREN,
    ")": VTokenType.RPAREN,
    ",": VTokenType.COMMA,
    ";": VTokenType.SEMICOLON,
}

KEYWORD_TYPES = frozenset(DOTTED_KEYWORDS.values()) | frozenset(WORD_KEYWORDS.values())


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class VToken:
    """
    A single token from VALGOL I source.

    Attributes:
        type: The VTokenType classification
        text: The exact source text of the token
        value: Parsed value (float for numbers, contents for strings,
               text for everything else, None for EOF)
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: VTokenType
    text: str
    value: str | float | None
    line: int
    column: int
    filename: str

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.type.name}, {self.line}:{self.column})"
        if isinstance(self.value, float):
            return f"Token({self.type.name}, {self.value}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def is_keyword(self) -> bool:
        return self.type in KEYWORD_TYPES

    def describe(self) -> str:
        """Short human description used in syntax error messages."""
        if self.type == VTokenType.EOF:
            return "end of input"
        return f"'{self.text}'"


# =============================================================================
# Lexer Implementation
# =============================================================================

class VLexer:
    """
    Tokenizes VALGOL I source code.

    Usage:
        lexer = VLexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    IDENT_START = string.ascii_letters
    IDENT_CHARS = string.ascii_letters + string.digits
    DIGITS = string.digits
    WHITESPACE = " \t\r\n"

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = 1
        self._column = 1
        self._line_start_pos = 0

    def tokenize(self) -> Iterator[VToken]:
        """
        Generate tokens from the source code.

        Yields:
            VToken objects, always ending with an EOF token

        Raises:
            LexicalError: If a character cannot start a token
        """
        while True:
            self._skip_whitespace()
            if self._at_end():
                break
            yield self._scan_token()

        yield self._make_token(VTokenType.EOF, "", None, self._line, self._column)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Character at current position + offset, or '' past the end."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume one character, keeping line and column up to date."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    def _skip_whitespace(self) -> None:
        while not self._at_end() and self._peek() in self.WHITESPACE:
            self._advance()

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(
        self,
        token_type: VTokenType,
        text: str,
        value: str | float | None,
        line: int,
        column: int,
    ) -> VToken:
        return VToken(
            type=token_type,
            text=text,
            value=value,
            line=line,
            column=column,
            filename=self.filename,
        )

    def _current_line_text(self) -> str:
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]

    def _error(
        self,
        message: str,
        line: int,
        column: int,
        hint: Optional[str] = None,
    ) -> LexicalError:
        location = SourceLocation(self.filename, line, column)
        return LexicalError(
            message, location, hint=hint, source_line=self._current_line_text()
        )

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> VToken:
        line, column = self._line, self._column
        char = self._peek()

        if char in self.IDENT_START:
            return self._scan_word(line, column)
        if char in self.DIGITS:
            return self._scan_number(line, column)
        if char == "'":
            return self._scan_string(line, column)
        if char == ".":
            return self._scan_dotted(line, column)
        if char in SINGLE_CHAR_TOKENS:
            self._advance()
            return self._make_token(SINGLE_CHAR_TOKENS[char], char, char, line, column)

        raise self._error(f"invalid character {char!r}", line, column)

    def _scan_word(self, line: int, column: int) -> VToken:
        start = self._pos
        while not self._at_end() and self._peek() in self.IDENT_CHARS:
            self._advance()
        text = self.source[start:self._pos]

        token_type = WORD_KEYWORDS.get(text, VTokenType.IDENTIFIER)
        return self._make_token(token_type, text, text, line, column)

    def _scan_number(self, line: int, column: int) -> VToken:
        start = self._pos
        self._skip_digits()

        # Fraction only when a digit follows the point
        if self._peek() == "." and self._is_digit(self._peek(1)):
            self._advance()
            self._skip_digits()

        text = self.source[start:self._pos]
        value = float(text)
        if math.isinf(value):
            raise self._error("number literal is too large", line, column)
        return self._make_token(VTokenType.NUMBER, text, value, line, column)

    def _is_digit(self, char: str) -> bool:
        # '' (past the end) is a substring of DIGITS
        return char != "" and char in self.DIGITS

    def _skip_digits(self) -> None:
        while self._is_digit(self._peek()):
            self._advance()

    def _scan_string(self, line: int, column: int) -> VToken:
        start = self._pos
        self._advance()  # opening quote

        while self._peek() != "'":
            if self._at_end() or self._peek() == "\n":
                raise UnterminatedStringError(
                    SourceLocation(self.filename, line, column),
                    source_line=self._current_line_text(),
                )
            self._advance()

        self._advance()  # closing quote
        text = self.source[start:self._pos]
        return self._make_token(VTokenType.STRING, text, text[1:-1], line, column)

    def _scan_dotted(self, line: int, column: int) -> VToken:
        if self._peek(1) == "=":
            self._advance()
            self._advance()
            return self._make_token(VTokenType.EQUALS, ".=", ".=", line, column)

        start = self._pos
        self._advance()
        while not self._at_end() and self._peek() in self.IDENT_CHARS:
            self._advance()
        text = self.source[start:self._pos]

        token_type = DOTTED_KEYWORDS.get(text)
        if token_type is None:
            raise self._error(
                f"unknown keyword {text!r}" if len(text) > 1 else "stray '.'",
                line,
                column,
                hint="keywords are " + " ".join(DOTTED_KEYWORDS),
            )
        return self._make_token(token_type, text, text, line, column)


def tokenize(source: str, filename: str = "<input>") -> list[VToken]:
    """Tokenize a whole source string into a list ending with EOF."""
    return list(VLexer(source, filename).tokenize())
