from __future__ import annotations

import typing as t
from dataclasses import dataclass

from etagserve._core.models import ResourceKind

__all__ = ("CachePolicy", "CACHE_POLICIES", "policy_for", "directive")


@dataclass(frozen=True)
class CachePolicy:
    """
    A Cache-Control value advertised to browsers and intermediaries.

    Examples:
        >>> str(CachePolicy("public", max_age=604800))
        'public, max-age=604800'
        >>> str(CachePolicy("private", no_cache=True))
        'private, no-cache'
    """

    visibility: t.Literal["public", "private"]
    max_age: t.Optional[int] = None
    no_cache: bool = False

    def __str__(self) -> str:
        directives = [self.visibility]
        if self.max_age is not None:
            directives.append(f"max-age={self.max_age}")
        if self.no_cache:
            directives.append("no-cache")
        return ", ".join(directives)


PolicyKey = t.Tuple[bool, ResourceKind]

CACHE_POLICIES: t.Mapping[PolicyKey, CachePolicy] = {
    # Static files rarely change, shared caches and CDNs may keep them for a week.
    (True, "file"): CachePolicy("public", max_age=604800),
    (False, "file"): CachePolicy("private", max_age=300),
    (True, "content"): CachePolicy("public", max_age=300),
    # Generated content may depend on who is asking, always revalidate.
    (False, "content"): CachePolicy("private", no_cache=True),
}


def policy_for(
    is_public: bool,
    kind: ResourceKind,
    policies: t.Mapping[PolicyKey, CachePolicy] = CACHE_POLICIES,
) -> CachePolicy:
    return policies[(is_public, kind)]


def directive(is_public: bool, kind: ResourceKind) -> str:
    """
    Cache-Control value for a resource kind.

    ``is_public`` is decided upstream: it is true when the response may be
    stored by shared caches, false for responses tied to an authenticated user.
    """
    return str(policy_for(is_public, kind))
