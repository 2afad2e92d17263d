# json_lexer.py
# Character-level JSON lexer with a one-token lookahead cursor.
#
# =============================================================================
#  CURSOR MODEL
# =============================================================================
#
# Walking the text '[true,false]' one advance() at a time:
#
#   | [ true , false ]      token=None      peek=LBRACKET  done=False
#   [ | true , false ]      token=LBRACKET  peek=TRUE      done=False
#   [ true | , false ]      token=TRUE      peek=COMMA     done=False
#   [ true , | false ]      token=COMMA     peek=FALSE     done=False
#   [ true , false | ]      token=FALSE     peek=RBRACKET  done=False
#   [ true , false ] |      token=RBRACKET  peek=END       done=False
#   [ true , false ] |      token=None      peek=END       done=True
#
# peek() and advance() run the same scan routine; only advance() commits the
# new read position. String and number payloads are not part of the token:
# the parser calls read_string() / read_number() when peek() reports QUOTE or
# NUMBER, and those calls move the cursor past the whole literal.
#
# Whitespace is never skipped implicitly. The parser calls skip_whitespace()
# wherever the grammar allows it.
# =============================================================================

import enum
import re
from typing import Iterator, List, NamedTuple, Tuple, Union

from json_errors import (
    InvalidEscape,
    InvalidNumber,
    UnexpectedCharacter,
    UnterminatedString,
)

# ---------------------------------------------------------------------------
# REGEX BLUEPRINT
# ---------------------------------------------------------------------------
# [0-9] rather than \d: \d also matches non-ASCII digits.
_WHITESPACE_RE   = re.compile(r"[ \t\r\n]*")
_NUMBER          = r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?"
_NUMBER_RE       = re.compile(_NUMBER)
_NUMBER_RUN_RE   = re.compile(r"[-+0-9.eE]+")
_STRING_CHUNK_RE = re.compile(r'[^"\\\x00-\x1f]+')
_HEX4_RE         = re.compile(r"[0-9a-fA-F]{4}")

_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


# ---------------------------------------------------------------------------
# TOKENS
# ---------------------------------------------------------------------------
class Token(enum.Enum):
    LCURLY   = "{"
    RCURLY   = "}"
    LBRACKET = "["
    RBRACKET = "]"
    COLON    = ":"
    COMMA    = ","
    QUOTE    = '"'
    STRING   = "string"
    NUMBER   = "number"
    TRUE     = "true"
    FALSE    = "false"
    NULL     = "null"
    END      = "end"

    def __repr__(self):
        return f"<Token.{self.name}>"


# Fixed-text tokens in match priority order: keywords, punctuation, quote.
_FIXED_TOKENS = (
    Token.TRUE, Token.FALSE, Token.NULL,
    Token.LCURLY, Token.RCURLY, Token.LBRACKET, Token.RBRACKET,
    Token.COLON, Token.COMMA,
    Token.QUOTE,
)

_LITERAL_VALUES = {Token.TRUE: True, Token.FALSE: False, Token.NULL: None}


# ---------------------------------------------------------------------------
# LEXER
# ---------------------------------------------------------------------------
class Lexer:
    """
    Lookahead-1 cursor over a complete JSON text.

    The text is never copied or sliced during scanning; all matching runs
    against the original string at the current offset.
    """

    def __init__(self, text: str):
        self._text = text
        self._len = len(text)
        self._pos = 0
        self._token = None

    @property
    def token(self):
        """The token consumed by the last advance, or None."""
        return self._token

    @property
    def position(self) -> int:
        return self._pos

    @property
    def text(self) -> str:
        return self._text

    @property
    def exhausted(self) -> bool:
        return self._pos >= self._len

    def is_done(self) -> bool:
        return self._pos >= self._len and self._token is None

    done = property(is_done)

    def advance(self) -> Token:
        return self._scan(commit=True)

    def peek(self) -> Token:
        return self._scan(commit=False)

    def skip_whitespace(self) -> None:
        self._pos = _WHITESPACE_RE.match(self._text, self._pos).end()

    def _scan(self, commit: bool) -> Token:
        if self._pos >= self._len:
            token, end = Token.END, self._pos
        else:
            token, end = self._match(self._pos)
        if commit:
            self._pos = end
            self._token = None if token is Token.END else token
        return token

    def _match(self, pos: int) -> Tuple[Token, int]:
        for token in _FIXED_TOKENS:
            if self._text.startswith(token.value, pos):
                return token, pos + len(token.value)
        m = _NUMBER_RE.match(self._text, pos)
        if m:
            return Token.NUMBER, m.end()
        raise UnexpectedCharacter(
            f"unexpected character {self._text[pos]!r}", pos, self._text
        )

    # -----------------------------------------------------------------------
    # STRINGS
    # -----------------------------------------------------------------------
    def read_string(self) -> str:
        """
        Decode the string literal starting at the read position.

        Handles three classes of errors with precise offsets:
        1) Structure - no opening quote, or no closing quote before the end.
        2) Escapes - anything outside \\" \\\\ \\/ \\b \\f \\n \\r \\t \\uXXXX.
        3) Raw control characters (U+0000..U+001F) inside the literal.
        """
        text, start = self._text, self._pos
        if not text.startswith('"', start):
            found = repr(text[start]) if start < self._len else "end of input"
            raise UnexpectedCharacter(f"expected string, found {found}", start, text)

        chunks: List[str] = []
        pos = start + 1
        while True:
            m = _STRING_CHUNK_RE.match(text, pos)
            if m:
                chunks.append(m.group())
                pos = m.end()
            if pos >= self._len:
                raise UnterminatedString("unterminated string", start, text)
            ch = text[pos]
            if ch == '"':
                pos += 1
                break
            if ch == "\\":
                decoded, pos = self._read_escape(pos, start)
                chunks.append(decoded)
                continue
            raise UnexpectedCharacter(
                f"invalid control character {ch!r} in string", pos, text
            )

        self._pos = pos
        self._token = Token.STRING
        return "".join(chunks)

    def _read_escape(self, pos: int, start: int) -> Tuple[str, int]:
        text = self._text
        if pos + 1 >= self._len:
            raise UnterminatedString("unterminated string", start, text)
        esc = text[pos + 1]
        if esc in _ESCAPES:
            return _ESCAPES[esc], pos + 2
        if esc != "u":
            raise InvalidEscape(f"invalid escape \\{esc}", pos, text)

        code = self._read_hex4(pos)
        pos += 6
        # A high surrogate directly followed by a low one is a single code point.
        if 0xD800 <= code <= 0xDBFF and text.startswith("\\u", pos):
            m = _HEX4_RE.match(text, pos + 2)
            if m:
                low = int(m.group(), 16)
                if 0xDC00 <= low <= 0xDFFF:
                    code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
                    pos += 6
        return chr(code), pos

    def _read_hex4(self, pos: int) -> int:
        m = _HEX4_RE.match(self._text, pos + 2)
        if m is None:
            seq = self._text[pos:pos + 6]
            raise InvalidEscape(f"invalid unicode escape {seq}", pos, self._text)
        return int(m.group(), 16)

    # -----------------------------------------------------------------------
    # NUMBERS
    # -----------------------------------------------------------------------
    def read_number(self) -> Union[int, float]:
        """
        Consume the longest run of number characters and decode it.

        The run must match the JSON number grammar in full, so '07', '1.'
        and '2e' fail here instead of stopping early and leaving debris for
        the parser.
        """
        text, start = self._text, self._pos
        m = _NUMBER_RUN_RE.match(text, start)
        if m is None:
            found = repr(text[start]) if start < self._len else "end of input"
            raise InvalidNumber(f"expected number, found {found}", start, text)
        raw = m.group()
        if _NUMBER_RE.fullmatch(raw) is None:
            raise InvalidNumber(f"invalid number {raw!r}", start, text)

        if any(c in raw for c in ".eE"):
            value = float(raw)
        else:
            try:
                value = int(raw)
            except ValueError:
                # int() refuses digit strings beyond sys.get_int_max_str_digits()
                raise InvalidNumber(f"integer too long ({len(raw)} digits)", start, text) from None

        self._pos = m.end()
        self._token = Token.NUMBER
        return value


# ---------------------------------------------------------------------------
# LEXEME STREAM
# ---------------------------------------------------------------------------
class Lexeme(NamedTuple):
    token: Token
    value: object
    offset: int


def lex(text: str) -> Iterator[Lexeme]:
    """
    Single-pass generator over every lexeme in `text` with decoded values.

    Structure is not checked; this is the flat view the CLI --debug dump
    prints.
    """
    lexer = Lexer(text)
    while True:
        lexer.skip_whitespace()
        start = lexer.position
        token = lexer.peek()
        if token is Token.END:
            return
        if token is Token.QUOTE:
            value = lexer.read_string()
            token = Token.STRING
        elif token is Token.NUMBER:
            value = lexer.read_number()
        else:
            lexer.advance()
            value = _LITERAL_VALUES.get(token, token.value)
        yield Lexeme(token, value, start)
