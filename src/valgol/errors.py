"""
VALGOL Toolchain Error Hierarchy
================================

This module defines the exception hierarchy for the whole toolchain.
All exceptions inherit from ValgolError, allowing callers to catch every
toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
ValgolError (base)
├── TranslationError (source translation)
│   ├── LexicalError - character that cannot start a token
│   │   └── UnterminatedStringError - missing closing quote
│   └── SyntaxMismatch - no grammar alternative accepts the current token
├── AssemblyError - malformed or unresolvable assembly text
│   ├── UndefinedLabelError - operand names a label that is never defined
│   └── DuplicateLabelError - label defined more than once
└── MachineError - run-time failure of the VALGOL I machine

Error Message Format
--------------------
Errors that know where they happened follow this format:

    filename:line:column: error: description
        source_line_text
            ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class ValgolError(Exception):
    """
    Base exception for all toolchain errors.

        try:
            compile_valgol(source)
        except ValgolError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in a source or assembly file.

    Attributes:
        filename: Name of the file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


class LocatedError(ValgolError):
    """
    Error carrying an optional location, source line and hint.

    Attributes:
        message: The error description
        location: Where the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The text of the offending line (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            loop.vg:3:9: error: expected '.DO' in UNTILST, found 'PRINT'
                .UNTIL i .= 10 PRINT
                               ^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Translation Errors
# =============================================================================

class TranslationError(LocatedError):
    """Base exception for errors raised while translating VALGOL I source."""
    pass


class LexicalError(TranslationError):
    """
    The tokenizer met a character that cannot start any token.

    Examples:
        - '/' or '<' anywhere in the source
        - a lone '.' that starts neither a keyword nor '.='
        - an unknown dotted word such as '.WHILE'
    """
    pass


class UnterminatedStringError(LexicalError):
    """String literal not closed before the end of its line."""

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "unterminated string literal",
            location=location,
            hint="add a closing \"'\" on the same line",
            source_line=source_line,
        )


class SyntaxMismatch(TranslationError):
    """
    No alternative of a grammar rule accepts the current token.

    Raised when a rule has already committed to a construct (its leading
    token matched) and a later mandatory element is missing, when a
    statement is required but none starts at the current token, or when
    input remains after the program.

    Attributes:
        rule: Name of the grammar rule that was expecting a match
        expected: Human-readable description of what was expected
        found: Text of the token actually found
    """

    def __init__(
        self,
        rule: str,
        expected: str,
        found: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.rule = rule
        self.expected = expected
        self.found = found
        super().__init__(
            f"expected {expected} in {rule}, found {found}",
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Assembly (Loader) Errors
# =============================================================================

class AssemblyError(LocatedError):
    """
    Malformed assembly text.

    Raised by the loader when a line cannot be read as a label or an
    instruction, when a mnemonic is unknown or takes a different operand,
    or when a branch target has no instruction after it.
    """
    pass


class UndefinedLabelError(AssemblyError):
    """Operand refers to a label that no line defines."""

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.label = label
        super().__init__(
            f"undefined label '{label}'",
            location=location,
            source_line=source_line,
        )


class DuplicateLabelError(AssemblyError):
    """
    Label defined more than once.

    The translator treats declared variables as flat, program-wide labels,
    so declaring the same name in two blocks ends up here.
    """

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.label = label
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{label}' was first defined at {original_location}"

        super().__init__(
            f"duplicate label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Machine Errors
# =============================================================================

class MachineError(ValgolError):
    """
    Run-time failure of the VALGOL I machine.

    Raised on stack underflow, on a jump outside the program, or when
    the configured step limit is exceeded.

    Attributes:
        ic: Instruction counter at the time of failure (None if unknown)
    """

    def __init__(self, message: str, ic: Optional[int] = None):
        self.ic = ic
        if ic is not None:
            message = f"{message} (at instruction {ic})"
        super().__init__(message)
