# json_parser.py
# Strict recursive-descent JSON parser and command-line validator.
#
# =============================================================================
#  PARSER IMPLEMENTATION: RECURSIVE DESCENT OVER A LOOKAHEAD-1 LEXER
# =============================================================================
#
#   json     := element                       (then the lexer must be done)
#   element  := ws value ws
#   value    := object | array | string | number | true | false | null
#   object   := '{' ws '}' | '{' members '}'
#   members  := member (',' member)*
#   member   := ws string ws ':' element
#   array    := '[' ws ']' | '[' elements ']'
#   elements := element (',' element)*
#
# Each production is one method. Dispatch is on Lexer.peek(); string and
# number leaves are decoded by the lexer itself. The only state is the lexer
# cursor plus the call stack, so recursion depth equals nesting depth.
#
# Depth guard: every object/array counts one level, and a document nested
# deeper than max_depth is rejected with NestingTooDeep instead of running
# into the interpreter's recursion limit. Each level costs two Python frames.
#
# Duplicate keys: last write wins unless allow_dup_keys=False, in which case
# the second occurrence raises DuplicateKey.
# =============================================================================

import argparse
import logging
import sys
from typing import Dict, List, Optional, Union

from json_errors import (
    DuplicateKey,
    EmptyInput,
    NestingTooDeep,
    ParseError,
    TrailingInput,
    UnexpectedToken,
)
from json_lexer import Lexer, Token, lex

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
DEPTH_LIMIT_DEFAULT = 256

JSONValue = Union[
    None, bool, int, float, str, List["JSONValue"], Dict[str, "JSONValue"]
]

_SCALARS = {Token.TRUE: True, Token.FALSE: False, Token.NULL: None}


def _describe(token: Token) -> str:
    if token is Token.END:
        return "end of input"
    if token is Token.QUOTE:
        return "string"
    if token is Token.NUMBER:
        return "number"
    return repr(token.value)


# ---------------------------------------------------------------------------
# PARSER
# ---------------------------------------------------------------------------
class Parser:
    """
    Parses exactly one JSON document.

    A Parser owns a private Lexer and is good for a single parse_json() call.
    """

    def __init__(self, text: str, *, max_depth: int = DEPTH_LIMIT_DEFAULT,
                 allow_dup_keys: bool = True):
        self._lexer = Lexer(text)
        self._max_depth = max_depth
        self._allow_dup = allow_dup_keys

    def parse_json(self) -> JSONValue:
        lexer = self._lexer
        lexer.skip_whitespace()
        if lexer.peek() is Token.END:
            raise EmptyInput("no JSON value found", lexer.position, lexer.text)

        try:
            value = self._parse_element(0)
        except RecursionError:
            # max_depth above what the interpreter stack can hold
            raise NestingTooDeep(
                "nesting depth exceeds the interpreter recursion limit",
                lexer.position, lexer.text,
            ) from None

        if not lexer.exhausted:
            raise TrailingInput("extra data after root value", lexer.position, lexer.text)
        lexer.advance()
        return value

    # -----------------------------------------------------------------------
    # PRODUCTIONS
    # -----------------------------------------------------------------------
    def _parse_element(self, depth: int) -> JSONValue:
        lexer = self._lexer
        lexer.skip_whitespace()
        token = lexer.peek()
        if token is Token.LCURLY:
            value = self._parse_object(depth + 1)
        elif token is Token.LBRACKET:
            value = self._parse_array(depth + 1)
        elif token is Token.QUOTE:
            value = lexer.read_string()
        elif token is Token.NUMBER:
            value = lexer.read_number()
        elif token in _SCALARS:
            lexer.advance()
            value = _SCALARS[token]
        else:
            raise UnexpectedToken(
                f"expected value, found {_describe(token)}", lexer.position, lexer.text
            )
        lexer.skip_whitespace()
        return value

    def _parse_object(self, depth: int) -> Dict[str, JSONValue]:
        lexer = self._lexer
        self._check_depth(depth)
        self._expect(Token.LCURLY)
        lexer.skip_whitespace()

        obj: Dict[str, JSONValue] = {}
        if lexer.peek() is Token.RCURLY:
            lexer.advance()
            return obj

        while True:
            self._parse_member(obj, depth)
            if lexer.peek() is Token.COMMA:
                lexer.advance()
                continue
            self._expect(Token.RCURLY)
            return obj

    def _parse_member(self, obj: Dict[str, JSONValue], depth: int) -> None:
        lexer = self._lexer
        lexer.skip_whitespace()
        start = lexer.position
        token = lexer.peek()
        if token is not Token.QUOTE:
            raise UnexpectedToken(
                f"expected object key, found {_describe(token)}", start, lexer.text
            )
        key = lexer.read_string()
        if not self._allow_dup and key in obj:
            raise DuplicateKey(f"duplicate key {key!r}", start, lexer.text)
        lexer.skip_whitespace()
        self._expect(Token.COLON)
        obj[key] = self._parse_element(depth)

    def _parse_array(self, depth: int) -> List[JSONValue]:
        lexer = self._lexer
        self._check_depth(depth)
        self._expect(Token.LBRACKET)
        lexer.skip_whitespace()

        items: List[JSONValue] = []
        if lexer.peek() is Token.RBRACKET:
            lexer.advance()
            return items

        while True:
            items.append(self._parse_element(depth))
            if lexer.peek() is Token.COMMA:
                lexer.advance()
                continue
            self._expect(Token.RBRACKET)
            return items

    # -----------------------------------------------------------------------
    # UTILITIES
    # -----------------------------------------------------------------------
    def _expect(self, expected: Token) -> None:
        """Consume the next token, which must be `expected`."""
        lexer = self._lexer
        found = lexer.peek()
        if found is not expected:
            raise UnexpectedToken(
                f"expected {expected.value!r}, found {_describe(found)}",
                lexer.position, lexer.text,
            )
        lexer.advance()

    def _check_depth(self, depth: int) -> None:
        if depth > self._max_depth:
            lexer = self._lexer
            raise NestingTooDeep(
                f"nesting depth exceeds limit of {self._max_depth}",
                lexer.position, lexer.text,
            )


# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def parse(text: str, *, max_depth: int = DEPTH_LIMIT_DEFAULT,
          allow_dup_keys: bool = True) -> JSONValue:
    """
    Parse JSON text into Python structures.

    Any scalar or structure is accepted at the root. The whole input must be
    consumed by that one value. Raises a ParseError subclass on any syntax
    violation; nothing is ever partially returned.
    """
    if not isinstance(text, str):
        raise TypeError(f"JSON text must be str, not {type(text).__name__}")
    log.debug("parsing %d characters (max_depth=%d)", len(text), max_depth)
    try:
        return Parser(text, max_depth=max_depth, allow_dup_keys=allow_dup_keys).parse_json()
    except ParseError as exc:
        log.debug("rejected: %s: %s", type(exc).__name__, exc)
        raise


# ---------------------------------------------------------------------------
# CLI ENTRYPOINT
# ---------------------------------------------------------------------------
def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as fh:
        return fh.read()


def _cli(argv: List[str]) -> int:
    """
    Command-line interface for validation runs.

    Exit code 0 when the file is valid JSON, 1 otherwise.
    """
    ap = argparse.ArgumentParser(description="Strict JSON validator")
    ap.add_argument("file", help="JSON file to verify, or - for stdin")
    ap.add_argument("--debug", action="store_true", help="dump lexeme stream and exit")
    ap.add_argument("--max-depth", type=int, default=DEPTH_LIMIT_DEFAULT)
    ap.add_argument("--reject-dup-keys", action="store_true",
                    help="fail on repeated object keys instead of keeping the last")
    ap.add_argument("-v", "--verbose", action="store_true", help="log parser activity to stderr")
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        data = _read_source(args.file)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"{args.file}: {exc}", file=sys.stderr)
        return 1
    log.debug("read %d characters from %s", len(data), args.file)

    try:
        if args.debug:
            for lexeme in lex(data):
                print(f"{lexeme.offset:>8}  {lexeme.token.name:<8}  {lexeme.value!r}")
            return 0
        parse(data, max_depth=args.max_depth, allow_dup_keys=not args.reject_dup_keys)
    except ParseError as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1
    print("OK")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    return _cli(sys.argv[1:] if argv is None else argv)


# ---------------------------------------------------------------------------
# MAIN GUARD
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    sys.exit(main())
