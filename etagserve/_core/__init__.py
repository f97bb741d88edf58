from etagserve._core._etag import (
    EntityTag as EntityTag,
    tag_for_content as tag_for_content,
    tag_for_file as tag_for_file,
)
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
    TerminalState as TerminalState,
    BodyState as BodyState,
    FullContent as FullContent,
    IdleRequest as IdleRequest,
    NotFound as NotFound,
    NotModified as NotModified,
    PartialContent as PartialContent,
    RangeNotSatisfiable as RangeNotSatisfiable,
    ServeOptions as ServeOptions,
    State as State,
    create_idle_state as create_idle_state,
)

__all__ = (
    ## States
    "AnyState",
    "TerminalState",
    "BodyState",
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
)
