from etagserve._core._etag import EntityTag as EntityTag, tag_for_content as tag_for_content, tag_for_file as tag_for_file
from etagserve._core._headers import (
    CacheCheckResult as CacheCheckResult,
    Headers as Headers,
    check_if_none_match as check_if_none_match,
)
from etagserve._core.models import (
    ByteRange as ByteRange,
    ContentResource as ContentResource,
    FileResource as FileResource,
    Request as Request,
    Resource as Resource,
    Response as Response,
)
from etagserve._core._ranges import Range as Range, parse_range as parse_range
from etagserve._core._states import (
    AnyState as AnyState,
    FullContent as FullContent,
    IdleRequest as IdleRequest,
    NotFound as NotFound,
    NotModified as NotModified,
    PartialContent as PartialContent,
    RangeNotSatisfiable as RangeNotSatisfiable,
    ServeOptions as ServeOptions,
    State as State,
    TerminalState as TerminalState,
    create_idle_state as create_idle_state,
)
from etagserve._policies import (
    CACHE_POLICIES as CACHE_POLICIES,
    CachePolicy as CachePolicy,
    directive as directive,
    policy_for as policy_for,
)
from etagserve._exceptions import EtagServeError as EtagServeError, ParseError as ParseError, ValidationError as ValidationError
from etagserve._render_cache import RenderCache as RenderCache
from etagserve._async._composer import AsyncResponseComposer as AsyncResponseComposer
from etagserve._sync._composer import ResponseComposer as ResponseComposer

__all__ = (
    ## States
    "AnyState",
    "TerminalState",
    "IdleRequest",
    "NotFound",
    "NotModified",
    "RangeNotSatisfiable",
    "FullContent",
    "PartialContent",
    "State",
    "ServeOptions",
    "create_idle_state",
    ## Models
    "ByteRange",
    "ContentResource",
    "FileResource",
    "Request",
    "Resource",
    "Response",
    ## Validators
    "EntityTag",
    "CacheCheckResult",
    "check_if_none_match",
    "tag_for_content",
    "tag_for_file",
    "Range",
    "parse_range",
    ## Headers
    "Headers",
    # Policies
    "CACHE_POLICIES",
    "CachePolicy",
    "directive",
    "policy_for",
    # Errors
    "EtagServeError",
    "ParseError",
    "ValidationError",
    # Composers
    "RenderCache",
    "AsyncResponseComposer",
    "ResponseComposer",
)
