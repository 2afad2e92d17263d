# json_errors.py
# Error taxonomy shared by the JSON lexer and parser.
#
# Every failure raised while reading JSON text is a ParseError. Lexer failures
# are ParseError subclasses too, so they propagate out of parse() unchanged
# and a caller needs exactly one except clause.
#
#   ParseError
#     LexError
#       UnexpectedCharacter, InvalidNumber, InvalidEscape, UnterminatedString
#     UnexpectedToken, TrailingInput, EmptyInput, NestingTooDeep, DuplicateKey

from typing import Optional, Tuple


def line_col(text: str, position: int) -> Tuple[int, int]:
    """Translate an absolute offset into a 1-based (line, column) pair."""
    position = max(0, min(position, len(text)))
    line = text.count("\n", 0, position) + 1
    column = position - (text.rfind("\n", 0, position) + 1) + 1
    return line, column


class ParseError(SyntaxError):
    """
    Base class for every JSON syntax failure.

    `position` is the absolute character offset of the problem. `line` and
    `column` are filled in when the source text is known.
    """

    def __init__(self, message: str, position: int = 0, text: Optional[str] = None):
        self.position = position
        if text is not None:
            self.line, self.column = line_col(text, position)
            where = f"line {self.line} column {self.column} (offset {position})"
        else:
            self.line = self.column = None
            where = f"offset {position}"
        self.reason = message
        super().__init__(f"{message} at {where}")
        # Standard SyntaxError fields, for tooling that formats them.
        self.lineno = self.line
        self.offset = self.column

    def __str__(self):
        return self.msg


# ---------------------------------------------------------------------------
# LEXER FAILURES
# ---------------------------------------------------------------------------
class LexError(ParseError):
    pass


class UnexpectedCharacter(LexError):
    pass


class InvalidNumber(LexError):
    pass


class InvalidEscape(LexError):
    pass


class UnterminatedString(LexError):
    pass


# ---------------------------------------------------------------------------
# GRAMMAR FAILURES
# ---------------------------------------------------------------------------
class UnexpectedToken(ParseError):
    pass


class TrailingInput(ParseError):
    pass


class EmptyInput(ParseError):
    pass


class NestingTooDeep(ParseError):
    pass


class DuplicateKey(ParseError):
    pass
