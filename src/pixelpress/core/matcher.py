"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/matcher.py
Exclusion rules for directory traversal.

A rule is a single glob pattern, optionally using brace alternation
("{.git,*.jpg}"), compiled once into a regular expression. Wildcards follow
fnmatch: '*' matches any run of characters including '/', '?' matches one
character, '[...]' is a character class. Matching is case-sensitive and
always covers the whole path.

Outside character classes a backslash escapes the next character, so
'\\*' matches a literal '*' and '\\{' a literal '{'. Inside '[...]' a
backslash is an ordinary character.
"""

import fnmatch
import os
import re
import logging
from typing import List, Optional, Pattern

from pixelpress.core.interfaces import PathMatcher

logger = logging.getLogger(__name__)

ESCAPE = "\\"
FNMATCH_SPECIALS = "*?["


def normalize_path(path: str) -> str:
    """Replace OS-specific separators with '/'."""
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    if os.altsep and os.altsep != "/":
        path = path.replace(os.altsep, "/")
    return path


def _find_unescaped(pattern: str, char: str, start: int = 0) -> int:
    i = start
    while i < len(pattern):
        if pattern[i] == ESCAPE:
            i += 2
            continue
        if pattern[i] == char:
            return i
        i += 1
    return -1


def _find_closing_brace(pattern: str, start: int) -> int:
    depth = 0
    i = start
    while i < len(pattern):
        ch = pattern[i]
        if ch == ESCAPE:
            i += 2
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    raise ValueError(f"Unbalanced '{{' in pattern: {pattern!r}")


def _split_alternatives(body: str) -> List[str]:
    """Split brace contents on commas that are neither escaped nor nested inside another brace."""
    parts, depth, current = [], 0, []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == ESCAPE:
            current.append(body[i:i + 2])
            i += 2
            continue
        if ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
            i += 1
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        current.append(ch)
        i += 1
    parts.append("".join(current))
    return parts


def expand_braces(pattern: str) -> List[str]:
    """
    Expand brace alternation into plain glob patterns.
    Escaped braces and commas are left in place for the glob translation.

    "{a,b}/*.{jpg,png}" -> ["a/*.jpg", "a/*.png", "b/*.jpg", "b/*.png"]

    Raises:
        ValueError: If braces are not balanced
    """
    open_at = _find_unescaped(pattern, "{")
    if open_at == -1:
        if _find_unescaped(pattern, "}") != -1:
            raise ValueError(f"Unbalanced '}}' in pattern: {pattern!r}")
        return [pattern]

    close_at = _find_closing_brace(pattern, open_at)
    prefix = pattern[:open_at]
    if _find_unescaped(prefix, "}") != -1:
        raise ValueError(f"Unbalanced '}}' in pattern: {pattern!r}")
    suffix = pattern[close_at + 1:]

    expanded = []
    for alternative in _split_alternatives(pattern[open_at + 1:close_at]):
        expanded.extend(expand_braces(prefix + alternative + suffix))
    return expanded


def _class_end(pattern: str, start: int) -> int:
    """Index of the ']' closing the class opened at `start`, or -1 (fnmatch rules)."""
    j = start + 1
    if j < len(pattern) and pattern[j] == "!":
        j += 1
    if j < len(pattern) and pattern[j] == "]":
        j += 1
    while j < len(pattern) and pattern[j] != "]":
        j += 1
    return j if j < len(pattern) else -1


def escapes_to_fnmatch(pattern: str) -> str:
    """
    Rewrite backslash escapes into a form fnmatch understands.
    An escaped wildcard becomes a one-character class ('\\*' -> '[*]');
    any other escaped character stands for itself.
    """
    out = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == ESCAPE and i + 1 < len(pattern):
            escaped = pattern[i + 1]
            out.append(f"[{escaped}]" if escaped in FNMATCH_SPECIALS else escaped)
            i += 2
            continue
        if ch == "[":
            end = _class_end(pattern, i)
            if end != -1:
                out.append(pattern[i:end + 1])
                i = end + 1
                continue
            # Unclosed: keep it literal even if an escaped ']' follows
            out.append("[[]")
            i += 1
            continue
        out.append(ch)
        i += 1
    return "".join(out)


class GlobMatcher(PathMatcher):
    """
    A compiled exclusion rule.

    Attributes:
        pattern: Original pattern string ("" means nothing is ever excluded)
    """

    def __init__(self, pattern: Optional[str] = None):
        self.pattern = pattern or ""
        self._regex: Optional[Pattern[str]] = self._compile(self.pattern)

    @staticmethod
    def _compile(pattern: str) -> Optional[Pattern[str]]:
        if not pattern:
            return None
        alternatives = expand_braces(pattern)
        logger.debug(f"Compiled exclude pattern {pattern!r} into {len(alternatives)} alternative(s)")
        translated = [fnmatch.translate(escapes_to_fnmatch(alt)) for alt in dict.fromkeys(alternatives)]
        return re.compile("|".join(translated))

    def matches(self, normalized_path: str) -> bool:
        if self._regex is None:
            return False
        return self._regex.match(normalized_path) is not None

    def __bool__(self) -> bool:
        return self._regex is not None

    def __repr__(self):
        return f"<GlobMatcher pattern={self.pattern!r}>"
