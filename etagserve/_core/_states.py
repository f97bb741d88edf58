from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import (
    Any,
    Mapping,
    Optional,
    Union,
)

from etagserve._core._etag import EntityTag
from etagserve._core._headers import CacheCheckResult, Headers, check_if_none_match
from etagserve._core._ranges import Range, parse_range
from etagserve._core.models import ByteRange, FileResource, Request, Resource
from etagserve._exceptions import ValidationError
from etagserve._policies import CACHE_POLICIES, CachePolicy, PolicyKey, policy_for
from etagserve._utils import DEFAULT_BUFFER_SIZE

logger = logging.getLogger("etagserve.core.states")


@dataclass
class ServeOptions:
    """
    Configuration for how responses are composed.

    Attributes:
    ----------
    strict_ranges : bool
        What to do with a well-formed single range that starts at or past the
        end of the representation.

        - False (default): ignore the Range header and send the full
          representation with 200, the same way malformed ranges are handled.
        - True: answer with 416 Range Not Satisfiable and
          ``Content-Range: bytes */<length>``.

        Examples:
        --------
        >>> options = ServeOptions(strict_ranges=True)

    buffer_size : int
        Number of bytes read from the resource and handed to the output per
        chunk. Peak memory per response is bounded by this value.

        Default: 8192

    policies : Mapping[(bool, kind), CachePolicy]
        Cache-Control policy for every ``(is_public, resource kind)`` pair.

        Entries override ``CACHE_POLICIES``; pairs left out keep the default.

        Default: ``CACHE_POLICIES``
    """

    strict_ranges: bool = False
    """When True, unsatisfiable ranges produce 416 instead of the full representation."""

    buffer_size: int = DEFAULT_BUFFER_SIZE
    """Chunk size used while streaming bodies."""

    policies: Mapping[PolicyKey, CachePolicy] = field(default_factory=lambda: dict(CACHE_POLICIES))
    """Cache-Control policy lookup table."""

    def __post_init__(self) -> None:
        if self.buffer_size <= 0:
            raise ValidationError("buffer_size must be positive")
        self.policies = {**CACHE_POLICIES, **self.policies}


@dataclass
class State(ABC):
    options: ServeOptions

    @abstractmethod
    def next(self, *args: Any, **kwargs: Any) -> Union["State", None]:
        raise NotImplementedError("Subclasses must implement this method")


@dataclass
class IdleRequest(State):
    """
    Starting point for a single request.

    ``next`` inspects the request headers and the resource identity and
    moves to exactly one terminal state. It never touches the resource bytes.
    """

    def next(
        self,
        request: Request,
        resource: Optional[Resource],
        *,
        is_public: bool = True,
        content_type: Optional[str] = None,
    ) -> "TerminalState":
        if resource is None:
            logger.debug("Resource not found: url=%s", request.url)
            return NotFound(options=self.options)

        etag = resource.etag()
        if check_if_none_match(request.headers.get("If-None-Match"), etag) is CacheCheckResult.NOT_MODIFIED:
            logger.debug("Client copy is still valid: url=%s etag=%s", request.url, etag)
            return NotModified(options=self.options, etag=etag)

        policy = policy_for(is_public, resource.kind, self.options.policies)
        range_header = request.headers.get("Range")
        byte_range = parse_range(range_header, resource.size)

        if byte_range is None and range_header is not None and self.options.strict_ranges:
            parsed = Range.try_from_str(range_header)
            if parsed is not None and parsed.is_unsatisfiable(resource.size):
                logger.debug("Range not satisfiable: url=%s range=%s", request.url, range_header)
                return RangeNotSatisfiable(
                    options=self.options,
                    etag=etag,
                    policy=policy,
                    total_length=resource.size,
                )

        if byte_range is not None:
            logger.debug("Serving partial content: url=%s range=%s", request.url, byte_range.content_range)
            return PartialContent(
                options=self.options,
                etag=etag,
                policy=policy,
                resource=resource,
                content_type=content_type,
                byte_range=byte_range,
            )

        logger.debug("Serving full content: url=%s size=%d", request.url, resource.size)
        return FullContent(
            options=self.options,
            etag=etag,
            policy=policy,
            resource=resource,
            content_type=content_type,
        )


@dataclass
class NotFound(State):
    status_code = 404

    def headers(self) -> Headers:
        return Headers({})

    def next(self) -> None:
        return None


@dataclass
class NotModified(State):
    """The body must stay empty; only the validator is repeated."""

    status_code = 304

    etag: EntityTag

    def headers(self) -> Headers:
        return Headers({"ETag": str(self.etag)})

    def next(self) -> None:
        return None


@dataclass
class RangeNotSatisfiable(State):
    status_code = 416

    etag: EntityTag
    policy: CachePolicy
    total_length: int

    def headers(self) -> Headers:
        return Headers(
            {
                "ETag": str(self.etag),
                "Cache-Control": str(self.policy),
                "Content-Range": f"bytes */{self.total_length}",
            }
        )

    def next(self) -> None:
        return None


@dataclass
class FullContent(State):
    status_code = 200

    etag: EntityTag
    policy: CachePolicy
    resource: Resource
    content_type: Optional[str]

    @property
    def offset(self) -> int:
        return 0

    @property
    def length(self) -> int:
        return self.resource.size

    def headers(self) -> Headers:
        headers = Headers(
            {
                "ETag": str(self.etag),
                "Accept-Ranges": "bytes",
                "Cache-Control": str(self.policy),
            }
        )
        if isinstance(self.resource, FileResource):
            headers["Last-Modified"] = self.resource.last_modified
        if self.content_type is not None:
            headers["Content-Type"] = self.content_type
        headers["Content-Length"] = str(self.length)
        return headers

    def next(self) -> None:
        return None


@dataclass
class PartialContent(FullContent):
    status_code = 206

    byte_range: ByteRange

    @property
    def offset(self) -> int:
        return self.byte_range.start

    @property
    def length(self) -> int:
        return self.byte_range.length

    def headers(self) -> Headers:
        headers = super().headers()
        headers["Content-Range"] = self.byte_range.content_range
        return headers


TerminalState = Union[
    "NotFound",
    "NotModified",
    "RangeNotSatisfiable",
    "FullContent",
    "PartialContent",
]
AnyState = Union["IdleRequest", TerminalState]
BodyState = Union["FullContent", "PartialContent"]


def create_idle_state(options: Optional[ServeOptions] = None) -> IdleRequest:
    return IdleRequest(options=options or ServeOptions())
