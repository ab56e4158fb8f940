"""URI Matcher — classifies content URIs into collection / item routes with an extracted key.

Invariants:
    - Routing table is immutable after construction (tuple of Route)
    - match() performs no IO and holds no mutable state: safe for concurrent callers
    - '#' matches a run of ASCII digits only; '*' matches any single segment
    - A non-integer segment where '#' is expected never matches (no truncation)
    - classify() raises UnsupportedResourceError on NO_MATCH — never silently ignored
    - Empty path segments are ignored ("pets/" == "pets")

Design Decisions:
    - Explicit routing table passed by reference to the provider instead of a
      module-level mutable matcher (ADR: no hidden global state)
    - Scheme is optional: "content://authority/pets" and "authority/pets" route
      identically, the scheme is preserved when deriving new URIs
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from pet_provider.core.domain_types import MatchCode, ResourceKind
from pet_provider.core.errors import UnsupportedResourceError
from pet_provider.core.pet_contract import CONTENT_AUTHORITY, PATH_PETS

_DIGITS = re.compile(r"[0-9]+")
_SCHEME_SEPARATOR = "://"


@dataclass(frozen=True)
class ContentUri:
    """Parsed identifier: optional scheme, authority, path segments."""
    scheme: str | None
    authority: str
    segments: tuple[str, ...]

    @property
    def path(self) -> str:
        return "/".join(self.segments)

    @property
    def node_path(self) -> tuple[str, ...]:
        """Scheme-free hierarchical key: (authority, *segments)."""
        return (self.authority, *self.segments)

    @property
    def last_segment(self) -> str | None:
        return self.segments[-1] if self.segments else None

    def is_ancestor_of(self, other: "ContentUri") -> bool:
        """True if other lies strictly below this URI (segment-wise prefix)."""
        mine, theirs = self.node_path, other.node_path
        return len(theirs) > len(mine) and theirs[:len(mine)] == mine

    def with_appended_id(self, id: int) -> "ContentUri":
        return ContentUri(self.scheme, self.authority, (*self.segments, str(id)))

    def __str__(self) -> str:
        base = self.authority
        if self.segments:
            base = f"{base}/{self.path}"
        if self.scheme:
            return f"{self.scheme}{_SCHEME_SEPARATOR}{base}"
        return base


def parse_content_uri(uri: str, operation: str = "parse") -> ContentUri:
    """Parse '[scheme://]authority[/segment...]'. Raises on a missing authority."""
    if not isinstance(uri, str) or not uri.strip():
        raise UnsupportedResourceError(str(uri), operation)
    scheme = None
    rest = uri.strip()
    if _SCHEME_SEPARATOR in rest:
        scheme, rest = rest.split(_SCHEME_SEPARATOR, 1)
        if not scheme:
            raise UnsupportedResourceError(uri, operation)
    parts = [p for p in rest.split("/") if p]
    if not parts:
        raise UnsupportedResourceError(uri, operation)
    return ContentUri(scheme, parts[0], tuple(parts[1:]))


def with_appended_id(uri: str, id: int) -> str:
    """Append an id segment to a collection URI string."""
    return str(parse_content_uri(uri).with_appended_id(id))


def parse_id(uri: str) -> int:
    """Return the trailing numeric id of an item URI."""
    last = parse_content_uri(uri).last_segment
    if last is None or not _DIGITS.fullmatch(last):
        raise UnsupportedResourceError(uri, "parse")
    return int(last)


@dataclass(frozen=True)
class Route:
    """One routing table entry: authority + path pattern → code."""
    authority: str
    path: str
    code: int
    kind: ResourceKind

    @property
    def pattern(self) -> tuple[str, ...]:
        return tuple(p for p in self.path.split("/") if p)


@dataclass(frozen=True)
class RouteMatch:
    """Result of a successful classification."""
    code: int
    kind: ResourceKind
    uri: ContentUri
    key: int | None = None

    @property
    def is_item(self) -> bool:
        return self.kind == ResourceKind.ITEM


def _match_segments(pattern: tuple[str, ...], segments: tuple[str, ...]) -> bool:
    if len(pattern) != len(segments):
        return False
    for expected, actual in zip(pattern, segments):
        if expected == "#":
            if not _DIGITS.fullmatch(actual):
                return False
        elif expected != "*" and expected != actual:
            return False
    return True


def _extract_key(pattern: tuple[str, ...], segments: tuple[str, ...]) -> int | None:
    for expected, actual in zip(pattern, segments):
        if expected == "#":
            return int(actual)
    return None


class UriMatcher:
    """Immutable routing table. First registered route that matches wins."""

    def __init__(self, routes: Iterable[Route]):
        self._routes = tuple(routes)
        codes = [r.code for r in self._routes]
        if len(codes) != len(set(codes)):
            raise ValueError("Route codes must be unique")

    @property
    def routes(self) -> tuple[Route, ...]:
        return self._routes

    def _find(self, uri: ContentUri) -> RouteMatch | None:
        for route in self._routes:
            if route.authority != uri.authority:
                continue
            if _match_segments(route.pattern, uri.segments):
                return RouteMatch(
                    code=route.code, kind=route.kind, uri=uri,
                    key=_extract_key(route.pattern, uri.segments),
                )
        return None

    def match(self, uri: str) -> int:
        """Return the route code for uri, or MatchCode.NO_MATCH."""
        try:
            parsed = parse_content_uri(uri)
        except UnsupportedResourceError:
            return MatchCode.NO_MATCH
        found = self._find(parsed)
        return found.code if found else MatchCode.NO_MATCH

    def classify(self, uri: str, operation: str = "match") -> RouteMatch:
        """Return the RouteMatch for uri. Raises UnsupportedResourceError on no match."""
        found = self._find(parse_content_uri(uri, operation))
        if found is None:
            raise UnsupportedResourceError(uri, operation)
        return found


def build_pet_matcher(authority: str = CONTENT_AUTHORITY) -> UriMatcher:
    """Routing table for the pets provider: collection and single-item URIs."""
    return UriMatcher((
        Route(authority, PATH_PETS, MatchCode.PETS, ResourceKind.COLLECTION),
        Route(authority, f"{PATH_PETS}/#", MatchCode.PET_ID, ResourceKind.ITEM),
    ))
