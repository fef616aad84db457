"""
Parser for Cedar entity identifier literals.

Accepts ``Type::"id"`` with an optional namespace path
(``PhotoApp::User::"alice"``), Cedar string escapes, whitespace and line
comments between tokens. Messages follow the wording of Cedar's own parser
so callers can match on them.
"""

import re
from typing import Iterator, NamedTuple, Optional

from shared.errors import EngineRejection
from .types import EntityUid

RESERVED_IDENTIFIERS = frozenset({
    "true", "false", "if", "then", "else", "in", "is", "like", "has", "__cedar",
})

_TOKEN_RE = re.compile(
    r"""
      (?P<space>\s+)
    | (?P<comment>//[^\n]*)
    | (?P<ident>[_a-zA-Z][_a-zA-Z0-9]*)
    | (?P<separator>::)
    | (?P<string>"(?:[^"\\]|\\.)*")
    | (?P<other>.)
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPE_RE = re.compile(r"\\(u\{([0-9a-fA-F]{1,6})\}|.)", re.DOTALL)

_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    "0": "\0",
    "'": "'",
    '"': '"',
}


class Token(NamedTuple):
    kind: str
    text: str


def _tokenize(text: str) -> Iterator[Token]:
    for match in _TOKEN_RE.finditer(text):
        kind = match.lastgroup
        if kind in ("space", "comment"):
            continue
        if kind == "other" and match.group() == '"':
            # A quote that does not start a complete string literal
            raise EngineRejection("invalid token")
        yield Token(kind, match.group())


def _unexpected(token: Optional[Token]) -> EngineRejection:
    if token is None:
        return EngineRejection("unexpected end of input")
    return EngineRejection(f"unexpected token `{token.text}`")


def _unescape_char(match: "re.Match[str]") -> str:
    if match.group(2) is not None:
        code_point = int(match.group(2), 16)
        if code_point > 0x10FFFF or 0xD800 <= code_point <= 0xDFFF:
            raise EngineRejection(f"the input `{match.group()}` is not a valid escape")
        return chr(code_point)

    char = match.group(1)
    if char not in _ESCAPES:
        raise EngineRejection(f"the input `{match.group()}` is not a valid escape")
    return _ESCAPES[char]


def unescape_cedar_string(literal: str) -> str:
    """Decode a quoted Cedar string literal into its value."""
    return _ESCAPE_RE.sub(_unescape_char, literal[1:-1])


def _identifier(token: Token) -> str:
    if token.text in RESERVED_IDENTIFIERS:
        raise EngineRejection(f"this identifier is reserved and cannot be used: `{token.text}`")
    return token.text


def parse_entity_uid(text: str) -> EntityUid:
    """Parse an entity identifier literal."""
    tokens = _tokenize(text)

    token = next(tokens, None)
    if token is None or token.kind != "ident":
        raise _unexpected(token)
    path = [_identifier(token)]

    while True:
        token = next(tokens, None)
        if token is None or token.kind != "separator":
            raise _unexpected(token)

        token = next(tokens, None)
        if token is not None and token.kind == "ident":
            path.append(_identifier(token))
            continue
        if token is not None and token.kind == "string":
            entity_id = unescape_cedar_string(token.text)
            break
        raise _unexpected(token)

    trailing = next(tokens, None)
    if trailing is not None:
        raise _unexpected(trailing)

    return EntityUid(entity_type="::".join(path), entity_id=entity_id)
