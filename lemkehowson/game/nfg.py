"""
Reader for two-player games in the Gambit normal form (.nfg) payoff format,
as exported by GAMUT:

    NFG 1 R "title" { "Player 1" "Player 2" } { 3 2 }
    a11 b11 a21 b21 a31 b31 a12 b12 ...

Payoffs are listed per outcome with the first player's strategy varying
fastest. Strategy counts may also be given as name lists
({ { "U" "D" } { "L" "R" } }). Outcome-format files are rejected.
"""
import logging
import re
from fractions import Fraction
from typing import List, Tuple

import numpy as np

from lemkehowson.exceptions import NFGFormatError

logger = logging.getLogger(__name__)

SUPPORTED_HEADERS = {("NFG", "1", "D"), ("NFG", "1", "R")}

_TOKEN = re.compile(r'"(?:[^"\\]|\\.)*"|[{}]|[^\s{}"]+')


def _tokenize(text: str) -> List[str]:
    return _TOKEN.findall(text)


def _is_string(token: str) -> bool:
    return len(token) >= 2 and token[0] == '"' and token[-1] == '"'


def _unquote(token: str) -> str:
    return token[1:-1].replace('\\"', '"')


class _Tokens:
    def __init__(self, tokens: List[str]):
        self.tokens = tokens
        self.pos = 0

    def peek(self):
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def next(self, what: str) -> str:
        if self.pos >= len(self.tokens):
            raise NFGFormatError(f"unexpected end of file, expected {what}")
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def expect(self, value: str):
        token = self.next(repr(value))
        if token != value:
            raise NFGFormatError(f"expected {value!r}, got {token!r}")

    def string(self, what: str) -> str:
        token = self.next(what)
        if not _is_string(token):
            raise NFGFormatError(f"expected {what} as a quoted string, got {token!r}")
        return _unquote(token)

    def remaining(self) -> List[str]:
        return self.tokens[self.pos:]


def _parse_strategies(tokens: _Tokens) -> Tuple[List[int], List[List[str]]]:
    tokens.expect("{")
    counts = []
    names = []
    while tokens.peek() != "}":
        if tokens.peek() is None:
            raise NFGFormatError("unterminated strategy block")
        if tokens.peek() == "{":
            tokens.next("{")
            player_names = []
            while tokens.peek() != "}":
                player_names.append(tokens.string("strategy name"))
            tokens.expect("}")
            counts.append(len(player_names))
            names.append(player_names)
        else:
            token = tokens.next("strategy count")
            try:
                count = int(token)
            except ValueError:
                raise NFGFormatError(f"strategy count must be an integer, got {token!r}") from None
            counts.append(count)
            names.append([str(k + 1) for k in range(count)])
    tokens.expect("}")
    return counts, names


def _parse_number(token: str) -> float:
    try:
        return float(Fraction(token))
    except (ValueError, ZeroDivisionError):
        raise NFGFormatError(f"invalid payoff value {token!r}") from None


def parse_nfg(text: str) -> Tuple[np.ndarray, np.ndarray, List[List[str]]]:
    """
    Parse the text of a two-player .nfg payoff-format game.

    Returns:
        (payoff_a, payoff_b, strategy_names) with payoffs of shape (dim1, dim2)

    Raises:
        NFGFormatError: on any malformed or unsupported input
    """
    tokens = _Tokens(_tokenize(text))
    header = tuple(tokens.next("NFG header") for _ in range(3))
    if header not in SUPPORTED_HEADERS:
        raise NFGFormatError(f"NFG file corrupted: unsupported header {' '.join(header)!r}")

    title = tokens.string("game title")

    tokens.expect("{")
    players = []
    while tokens.peek() != "}":
        players.append(tokens.string("player name"))
    tokens.expect("}")
    if len(players) != 2:
        raise NFGFormatError(f"only two-player games are supported, got {len(players)} players")

    counts, names = _parse_strategies(tokens)
    if len(counts) != 2:
        raise NFGFormatError(f"expected strategy counts for 2 players, got {len(counts)}")
    dim1, dim2 = counts
    if dim1 < 1 or dim2 < 1:
        raise NFGFormatError(f"strategy counts must be >= 1, got {dim1} {dim2}")

    # optional comment
    if tokens.peek() is not None and _is_string(tokens.peek()):
        tokens.next("comment")
    if tokens.peek() == "{":
        raise NFGFormatError("outcome-format .nfg files are not supported, only the payoff format")

    values = [_parse_number(token) for token in tokens.remaining()]
    expected = 2 * dim1 * dim2
    if len(values) != expected:
        raise NFGFormatError(f"expected {expected} payoff values for a {dim1}x{dim2} game, got {len(values)}")

    payoff_a = np.empty((dim1, dim2))
    payoff_b = np.empty((dim1, dim2))
    k = 0
    for j in range(dim2):
        for i in range(dim1):
            payoff_a[i, j] = values[k]
            payoff_b[i, j] = values[k + 1]
            k += 2

    logger.debug("Read %dx%d game %r (players %s)", dim1, dim2, title, players)
    return payoff_a, payoff_b, names


def read_nfg(source) -> Tuple[np.ndarray, np.ndarray, List[List[str]]]:
    """
    Parse an .nfg game from a path, an open text file, or the file contents.

    A string is taken as file contents only when it spans several lines;
    anything else is opened as a path. Use parse_nfg for one-line text.
    """
    if hasattr(source, "read"):
        return parse_nfg(source.read())
    if isinstance(source, str) and "\n" in source:
        return parse_nfg(source)
    with open(source, "r") as f:
        return parse_nfg(f.read())
