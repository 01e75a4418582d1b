"""
Pattern Matcher - Boolean acceptance of queries by plugin match policies.

Plugin pattern commands are not ranked. They fire when the query satisfies
a structural predicate:

    regex:  len(query) >= min_length and the pattern is found in the query
    over:   min_length <= len(query) <= max_length and the optional exclude
            pattern is not found in the query

Patterns may be stored JavaScript-style ("/^\\d{6,}$/i"). The slashes are
stripped and the i/m/s flags carried over; g/u/y/d/v have no re equivalent
and are ignored. Patterns compile with re.ASCII so \\d, \\w and \\s keep their
JavaScript meaning, and named groups are rewritten to the (?P<name>...) form.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

from loguru import logger

from launchindex.errors import PatternCompileFailure
from launchindex.index.entries import FreeTextPolicy, IndexEntry, RegexPolicy

_LITERAL_RE = re.compile(r"/(.*)/([a-z]*)", re.DOTALL)

_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}

# (?<name>  but not the lookbehinds (?<= and (?<!
_NAMED_GROUP_RE = re.compile(r"\(\?<(?=[A-Za-z_$])")
_NAMED_BACKREF_RE = re.compile(r"\\k<([A-Za-z_$][\w$]*)>")


def _translate(body: str) -> str:
    body = _NAMED_GROUP_RE.sub("(?P<", body)
    return _NAMED_BACKREF_RE.sub(r"(?P=\1)", body)


def compile_pattern(raw: str) -> re.Pattern:
    """
    Compile a stored pattern string.

    Args:
        raw: Either a bare pattern ("\\d+") or a slash-delimited literal
             with trailing flags ("/\\d+/i")

    Returns:
        Compiled pattern

    Raises:
        PatternCompileFailure: If the pattern is not valid
    """
    body, flags = raw, re.ASCII
    literal = _LITERAL_RE.fullmatch(raw)
    if literal:
        body = literal.group(1)
        for flag in literal.group(2):
            flags |= _FLAGS.get(flag, 0)

    try:
        return re.compile(_translate(body), flags)
    except (re.error, OverflowError, RecursionError) as e:
        # huge repeat counts raise OverflowError, not re.error
        raise PatternCompileFailure(raw, str(e)) from e


Predicate = Callable[[str], bool]


def _regex_predicate(policy: RegexPolicy) -> Predicate:
    pattern = compile_pattern(policy.pattern)
    min_length = policy.min_length

    def accept(query: str) -> bool:
        return len(query) >= min_length and pattern.search(query) is not None

    return accept


def _free_text_predicate(policy: FreeTextPolicy) -> Predicate:
    exclude = compile_pattern(policy.exclude) if policy.exclude else None
    lo, hi = policy.min_length, policy.max_length

    def accept(query: str) -> bool:
        if not lo <= len(query) <= hi:
            return False
        return exclude is None or exclude.search(query) is None

    return accept


def build_predicate(policy) -> Predicate:
    """Turn a match policy into a query predicate (may raise PatternCompileFailure)."""
    if isinstance(policy, RegexPolicy):
        return _regex_predicate(policy)
    if isinstance(policy, FreeTextPolicy):
        return _free_text_predicate(policy)
    raise TypeError(f"Unsupported match policy: {policy!r}")


@dataclass(frozen=True)
class _Rule:
    entry: IndexEntry
    accept: Optional[Predicate]


class PatternMatcher:
    """
    Evaluates one generation of pattern commands.

    Patterns are compiled once here. An entry whose pattern fails to compile
    is logged and then never matches; the rest are unaffected.
    """

    def __init__(self, entries):
        rules = []
        for entry in entries:
            try:
                accept = build_predicate(entry.match_policy)
            except (PatternCompileFailure, TypeError) as e:
                logger.warning(
                    f"Disabling pattern command '{entry.display_name}' "
                    f"({entry.plugin_name}/{entry.feature_code}): {e}"
                )
                accept = None
            rules.append(_Rule(entry=entry, accept=accept))
        self._rules = tuple(rules)

    def __len__(self) -> int:
        return len(self._rules)

    def query(self, query: str) -> list[IndexEntry]:
        """Return every entry whose policy accepts the query, in index order."""
        matched = []
        for rule in self._rules:
            if rule.accept is None:
                continue
            try:
                if rule.accept(query):
                    matched.append(rule.entry)
            except Exception:
                logger.exception(f"Pattern command '{rule.entry.display_name}' failed on query")
        return matched
