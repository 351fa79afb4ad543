from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .catalog import Catalog, CommandDescriptor, DEFAULT_CATALOG
from .models import CommandInfo, ResolveResult

logger = logging.getLogger("adb_api.resolver")

# Fraction of a phrase's words that must be covered by the input in the
# token-overlap pass.
TOKEN_COVERAGE_THRESHOLD = 0.5

# Shorter tokens only cover a word they equal; otherwise "a" would cover
# "back", "apps", "play", ...
MIN_PARTIAL_TOKEN_LENGTH = 2

CONTAINMENT = "containment"
TOKEN_OVERLAP = "token_overlap"


def normalize(text: str) -> str:
    return (text or "").lower().strip()


def _contains_either(a: str, b: str) -> bool:
    return a in b or b in a


def _token_covers(key_token: str, token: str) -> bool:
    if min(len(key_token), len(token)) < MIN_PARTIAL_TOKEN_LENGTH:
        return key_token == token
    return _contains_either(key_token, token)


def token_coverage(phrase: str, tokens: list[str]) -> float:
    """Share of ``phrase`` words matched (either way round) by some input token."""
    key_tokens = phrase.split()
    if not key_tokens:
        return 0.0
    covered = sum(
        1 for kt in key_tokens
        if any(_token_covers(kt, t) for t in tokens)
    )
    return covered / len(key_tokens)


@dataclass(frozen=True)
class CommandResolver:
    """Map free text onto a catalog entry.

    Two passes over the catalog, each in insertion order, first hit wins:

    1. containment: the phrase occurs in the input, or the input in the phrase
       ("please go home now" -> "go home", "back" -> "go back").
    2. token overlap: enough phrase words are covered by input words
       ("up volume" -> "volume up").

    Empty input never matches. The resolver holds no mutable state and is
    safe to share between requests.
    """

    catalog: Catalog = field(default=DEFAULT_CATALOG)
    threshold: float = TOKEN_COVERAGE_THRESHOLD

    def match(self, text: str) -> Optional[tuple[str, str]]:
        """Return ``(phrase, strategy)`` for the winning entry, or None."""
        q = normalize(text)
        if not q:
            return None

        for phrase, _ in self.catalog.items():
            if _contains_either(phrase, q):
                return phrase, CONTAINMENT

        tokens = q.split()
        for phrase, _ in self.catalog.items():
            if token_coverage(phrase, tokens) >= self.threshold:
                return phrase, TOKEN_OVERLAP

        return None

    def resolve(self, text: str) -> Optional[CommandDescriptor]:
        hit = self.match(text)
        if hit is None:
            logger.debug(f"No catalog match for {text!r}")
            return None
        phrase, strategy = hit
        logger.debug(f"Resolved {text!r} -> {phrase!r} ({strategy})")
        return self.catalog.get(phrase)

    def explain(self, text: str) -> ResolveResult:
        """Same decision as ``resolve`` with the phrase and pass that produced it."""
        hit = self.match(text)
        if hit is None:
            return ResolveResult(
                found=False,
                query=text,
                reason="no match",
                available=self.catalog.phrases(),
            )
        phrase, strategy = hit
        descriptor = self.catalog.get(phrase)
        return ResolveResult(
            found=True,
            query=text,
            phrase=phrase,
            strategy=strategy,
            command=CommandInfo(
                phrase=phrase,
                name=descriptor.name,
                description=descriptor.description,
                command=descriptor.command,
            ),
        )


def find_best_match(text: str, catalog: Catalog = DEFAULT_CATALOG) -> Optional[CommandDescriptor]:
    return CommandResolver(catalog=catalog).resolve(text)
