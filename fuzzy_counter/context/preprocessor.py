# fuzzy_counter/context/preprocessor.py
# masking (ordered removal) and rejection rules applied before anything reaches the tree

from __future__ import annotations

import re
from typing import Iterable, Optional, Tuple, Union

from fuzzy_counter.errors import ConfigurationError

PatternLike = Union[str, re.Pattern]


def compile_patterns(patterns: Optional[Iterable[PatternLike]]) -> Tuple[re.Pattern, ...]:
    """Compile strings into regexes, pass through already compiled ones. Order is kept."""
    if not patterns:
        return ()
    out = []
    for p in patterns:
        if isinstance(p, re.Pattern):
            out.append(p)
            continue
        try:
            out.append(re.compile(p))
        except re.error as e:
            raise ConfigurationError(f"invalid pattern {p!r}: {e}") from e
    return tuple(out)


class Preprocessor:
    """
    Two ordered rule lists:
     - ignore: every match is removed, left to right (later rules see earlier output)
     - reject: if any rule matches the masked text, the input is dropped
    Both empty -> identity / never reject.
    """

    __slots__ = ("ignore", "reject_rules")

    def __init__(
        self,
        ignore: Optional[Iterable[PatternLike]] = None,
        reject: Optional[Iterable[PatternLike]] = None,
    ) -> None:
        self.ignore = compile_patterns(ignore)
        self.reject_rules = compile_patterns(reject)

    def mask(self, text: str) -> str:
        for rx in self.ignore:
            text = rx.sub("", text)
        return text

    def reject(self, masked: str) -> bool:
        return any(rx.search(masked) for rx in self.reject_rules)

    def process(self, text: str) -> Tuple[str, bool]:
        """Mask first, then evaluate rejection on the masked form."""
        masked = self.mask(text)
        return masked, self.reject(masked)

    # builders ------------------------------------------------------------
    def with_ignore(self, *patterns: PatternLike) -> "Preprocessor":
        return Preprocessor(self.ignore + compile_patterns(patterns), self.reject_rules)

    def with_reject(self, *patterns: PatternLike) -> "Preprocessor":
        return Preprocessor(self.ignore, self.reject_rules + compile_patterns(patterns))

    def __repr__(self) -> str:
        ign = [rx.pattern for rx in self.ignore]
        rej = [rx.pattern for rx in self.reject_rules]
        return f"Preprocessor(ignore={ign!r}, reject={rej!r})"
