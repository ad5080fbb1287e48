"""Minimal parser combinators for the temporal expression grammar.

Parsers are deterministic: each one either succeeds once (value + end
offset) or fails. Alternatives are combined with :func:`longest`, which runs
every branch and keeps the one that consumed the most input, so grammar
ambiguity never depends on declaration order unless two branches tie.

Terminals are regular expressions. Keyword sets compile into a single
case-insensitive alternation ordered longest-string-first, which makes
multi-word keywords ("tot en met") win over their prefixes ("tot").

Recursive rules are wired through :class:`Reference`, a lazily bound cell
that is populated once its dependents exist.

Every failure records its offset in the per-call parse state; the furthest
offset and the labels expected there end up in
:class:`~daysie.exceptions.ExpressionSyntaxError`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Pattern, Tuple, Union

from daysie.exceptions import ExpressionSyntaxError, GrammarError, InvalidRangeError


@dataclass(frozen=True)
class Success:
    value: Any
    end: int


@dataclass(frozen=True)
class Failure:
    position: int


Result = Union[Success, Failure]


class _State:
    """Bookkeeping for a single parse call."""

    __slots__ = ("text", "furthest", "expected")

    def __init__(self, text: str):
        self.text = text
        self.furthest = 0
        self.expected: List[str] = []

    def fail(self, position: int, label: str) -> Failure:
        if position > self.furthest:
            self.furthest = position
            self.expected = [label]
        elif position == self.furthest and label not in self.expected:
            self.expected.append(label)
        return Failure(position)


class Parser:
    """A parsing function ``(state, pos) -> Success | Failure`` with combinators."""

    def __init__(self, fn: Callable[[_State, int], Result], label: str = "expression"):
        self._fn = fn
        self.label = label

    def run(self, state: _State, pos: int) -> Result:
        return self._fn(state, pos)

    # -- combinators -------------------------------------------------------

    def map(self, fn: Callable[[Any], Any]) -> "Parser":
        """Transform the value. ``ValueError`` or ``OverflowError`` from ``fn`` fails."""

        def run(state: _State, pos: int) -> Result:
            result = self.run(state, pos)
            if isinstance(result, Failure):
                return result
            try:
                return Success(fn(result.value), result.end)
            except (ValueError, OverflowError):
                return state.fail(pos, self.label)

        return Parser(run, self.label)

    def optional(self, default: Any = None) -> "Parser":
        def run(state: _State, pos: int) -> Result:
            result = self.run(state, pos)
            if isinstance(result, Failure):
                return Success(default, pos)
            return result

        return Parser(run, self.label)

    def not_followed_by(self, other: "Parser") -> "Parser":
        """Succeed only if ``other`` does not match right after this parser."""

        def run(state: _State, pos: int) -> Result:
            result = self.run(state, pos)
            if isinstance(result, Failure):
                return result
            furthest, expected = state.furthest, list(state.expected)
            lookahead = other.run(state, result.end)
            state.furthest, state.expected = furthest, expected
            if isinstance(lookahead, Success):
                return state.fail(result.end, f"no {other.label}")
            return result

        return Parser(run, self.label)

    def excluding(self, other: "Parser") -> "Parser":
        """Fail where ``other`` matches exactly the span this parser matched."""

        def run(state: _State, pos: int) -> Result:
            result = self.run(state, pos)
            if isinstance(result, Failure):
                return result
            furthest, expected = state.furthest, list(state.expected)
            rival = other.run(state, pos)
            state.furthest, state.expected = furthest, expected
            if isinstance(rival, Success) and rival.end == result.end:
                return state.fail(pos, f"not {other.label}")
            return result

        return Parser(run, self.label)

    def followed_by_end(self) -> "Parser":
        return sequence(self, END, combine=lambda value, _: value)

    # -- entry points ------------------------------------------------------

    def parse_prefix(self, text: str) -> Tuple[Any, int]:
        """Parse a prefix of ``text``; return the value and the consumed length."""
        state = _State(text)
        result = self.run(state, 0)
        if isinstance(result, Failure):
            raise ExpressionSyntaxError(text, state.furthest, state.expected)
        return result.value, result.end

    def parse(self, text: str) -> Any:
        value, _ = self.followed_by_end().parse_prefix(text)
        return value


# ---------------------------------------------------------------------------
# Terminals
# ---------------------------------------------------------------------------


def regex(pattern: Union[str, Pattern[str]], label: str, flags: int = re.IGNORECASE) -> Parser:
    """Match ``pattern`` at the current offset; the value is the ``re.Match``."""
    compiled = re.compile(pattern, flags) if isinstance(pattern, str) else pattern

    def run(state: _State, pos: int) -> Result:
        match = compiled.match(state.text, pos)
        if match is None:
            return state.fail(pos, label)
        return Success(match, match.end())

    return Parser(run, label)


def token(pattern: str, label: str) -> Parser:
    """Like :func:`regex` but yields the matched text."""
    return regex(pattern, label).map(lambda match: match.group(0))


def keyword(words: Iterable[str], label: str) -> Parser:
    """Case-insensitive alternation over ``words``, longest first.

    Internal whitespace matches any run of whitespace, and a keyword ending
    in a word character must not run into another word character. The value
    is the matched keyword, lower-cased with whitespace collapsed.
    """
    ordered = sorted({" ".join(w.split()).lower() for w in words if w.strip()}, key=lambda w: (-len(w), w))
    if not ordered:
        return fail(label)
    alternatives = []
    for word in ordered:
        pattern = r"\s+".join(re.escape(part) for part in word.split(" "))
        if word[-1].isalnum():
            pattern += r"(?!\w)"
        alternatives.append(pattern)
    compiled = re.compile("|".join(alternatives), re.IGNORECASE)
    return regex(compiled, label).map(lambda match: " ".join(match.group(0).split()).lower())


def fail(label: str) -> Parser:
    return Parser(lambda state, pos: state.fail(pos, label), label)


def _end(state: _State, pos: int) -> Result:
    if pos == len(state.text):
        return Success(None, pos)
    return state.fail(pos, "end of input")


END = Parser(_end, "end of input")
WHITESPACE = regex(r"\s*", "whitespace")
WHITESPACE1 = regex(r"\s+", "whitespace")


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


def sequence(*parsers: Parser, combine: Optional[Callable[..., Any]] = None) -> Parser:
    """Run ``parsers`` one after another; ``combine`` receives every value."""

    label = parsers[0].label if parsers else "sequence"

    def run(state: _State, pos: int) -> Result:
        start = pos
        values = []
        for parser in parsers:
            result = parser.run(state, pos)
            if isinstance(result, Failure):
                return result
            values.append(result.value)
            pos = result.end
        if combine is None:
            return Success(tuple(values), pos)
        try:
            return Success(combine(*values), pos)
        except InvalidRangeError:
            return state.fail(pos, "range in chronological order")
        except (ValueError, OverflowError):
            return state.fail(start, label)

    return Parser(run, label)


def longest(*parsers: Parser, label: Optional[str] = None) -> Parser:
    """Try every alternative; keep the success that consumed the most input.

    Ties go to the alternative declared first. When every branch fails, the
    failure that got furthest is reported.
    """

    def run(state: _State, pos: int) -> Result:
        best: Optional[Success] = None
        furthest: Optional[Failure] = None
        for parser in parsers:
            result = parser.run(state, pos)
            if isinstance(result, Success):
                if best is None or result.end > best.end:
                    best = result
            elif furthest is None or result.position > furthest.position:
                furthest = result
        if best is not None:
            return best
        if furthest is not None:
            return furthest
        return state.fail(pos, label or "expression")

    return Parser(run, label or (parsers[0].label if parsers else "expression"))


class Reference:
    """Forward-declared parser, bound once the rules it depends on exist."""

    def __init__(self, label: str = "expression"):
        self.label = label
        self._parser: Optional[Parser] = None

    def set(self, parser: Parser) -> None:
        if self._parser is not None:
            raise GrammarError(f"Reference '{self.label}' is already bound")
        self._parser = parser

    def lazy(self) -> Parser:
        def run(state: _State, pos: int) -> Result:
            if self._parser is None:
                raise GrammarError(f"Reference '{self.label}' used before it was bound")
            return self._parser.run(state, pos)

        return Parser(run, self.label)
