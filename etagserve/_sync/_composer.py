from __future__ import annotations

import logging
from typing import Iterator, Callable, Optional



from etagserve._sync._streams import iter_file_range
from etagserve._core._states import BodyState, FullContent, IdleRequest, ServeOptions
from etagserve._core.models import ContentResource, FileResource, Request, Resource, Response
from etagserve._render_cache import RenderCache
from etagserve._utils import iter_chunks, make_sync_iterator

logger = logging.getLogger("etagserve.composer")

__all__ = ("ResponseComposer",)


class ResponseComposer:
    """
    Turns a request and a resource snapshot into a response with a streamed body.

    Args:
        options: Range strictness, buffer size and cache policies. Defaults to ServeOptions().
        render_cache: Cache for ``serve_rendered``. When omitted every call renders again.
    """

    def __init__(
        self,
        options: Optional[ServeOptions] = None,
        render_cache: Optional[RenderCache] = None,
    ) -> None:
        self.options = options or ServeOptions()
        self.render_cache = render_cache

    def serve(
        self,
        request: Request,
        resource: Optional[Resource],
        *,
        content_type: Optional[str] = None,
        is_public: bool = True,
    ) -> Response:
        state = IdleRequest(options=self.options).next(
            request,
            resource,
            is_public=is_public,
            content_type=content_type,
        )
        logger.debug(
            "Composed response: method=%s url=%s status=%d",
            request.method,
            request.url,
            state.status_code,
        )

        if not isinstance(state, FullContent) or request.method == "HEAD":
            return Response(
                status_code=state.status_code,
                headers=state.headers(),
                stream=make_sync_iterator([]),
            )

        return Response(
            status_code=state.status_code,
            headers=state.headers(),
            stream=self._open_stream(state),
        )

    def serve_rendered(
        self,
        request: Request,
        source: Optional[FileResource],
        render: Callable[[FileResource], bytes],
        *,
        content_type: Optional[str] = None,
        is_public: bool = True,
    ) -> Response:
        """
        Serve bytes generated from ``source``, such as a transformed document.

        The tag is computed from the rendered bytes, not from the source file.
        ``render`` is blocking and runs in a worker thread.
        """
        if source is None:
            return self.serve(request, None)

        content = self._render(source, render)

        return self.serve(
            request,
            ContentResource(content),
            content_type=content_type,
            is_public=is_public,
        )

    def _render(self, source: FileResource, render: Callable[[FileResource], bytes]) -> bytes:
        if self.render_cache is None:
            return render(source)
        return self.render_cache.get_or_render(source.key, lambda: render(source))

    def _open_stream(self, state: BodyState) -> Iterator[bytes]:
        resource = state.resource
        if isinstance(resource, FileResource):
            return iter_file_range(resource.path, state.offset, state.length, self.options.buffer_size)
        return make_sync_iterator(iter_chunks(resource.content, state.offset, state.length, self.options.buffer_size))
