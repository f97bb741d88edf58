from __future__ import annotations

import inspect
import logging
import os
import typing as t

import anyio.to_thread

from etagserve._async._composer import AsyncResponseComposer
from etagserve._core._headers import Headers
from etagserve._core._states import ServeOptions
from etagserve._core.models import ContentResource, FileResource, Request, Response
from etagserve._utils import HEADERS_ENCODING, header_pairs

logger = logging.getLogger(__name__)


class _ASGIScope(t.TypedDict, total=False):
    """ASGI HTTP scope type."""

    type: str
    asgi: dict[str, str]
    http_version: str
    method: str
    scheme: str
    path: str
    query_string: bytes
    root_path: str
    headers: list[tuple[bytes, bytes]]
    server: tuple[str, int | None] | None
    client: tuple[str, int] | None
    state: dict[str, t.Any]
    extensions: dict[str, t.Any]


_Scope = _ASGIScope
_Receive = t.Callable[[], t.Awaitable[dict[str, t.Any]]]
_Send = t.Callable[[dict[str, t.Any]], t.Awaitable[None]]


def _scope_to_request(scope: _Scope) -> Request:
    path = scope.get("path", "/")
    query_string = scope.get("query_string", b"")
    if query_string:
        path = f"{path}?{query_string.decode(HEADERS_ENCODING)}"

    headers: dict[str, list[str]] = {}
    for key, value in scope.get("headers", []):
        headers.setdefault(key.decode(HEADERS_ENCODING), []).append(value.decode(HEADERS_ENCODING))

    return Request(method=scope.get("method", "GET"), url=path, headers=Headers(headers))


async def _send_response(response: Response, send: _Send) -> None:
    await send(
        {
            "type": "http.response.start",
            "status": response.status_code,
            "headers": header_pairs(response.headers),
        }
    )

    stream = response.stream
    if not isinstance(stream, t.AsyncIterator):
        raise TypeError("Response stream is not an AsyncIterator")

    bytes_sent = 0
    try:
        async for chunk in stream:
            await send({"type": "http.response.body", "body": chunk, "more_body": True})
            bytes_sent += len(chunk)
    except Exception as e:
        logger.error(
            "Error sending response body: status=%d bytes_sent=%d error=%s",
            response.status_code,
            bytes_sent,
            str(e),
            exc_info=True,
        )
        raise
    finally:
        # Release the file handle even if the client went away mid-stream
        if inspect.isasyncgen(stream):
            await stream.aclose()

    await send({"type": "http.response.body", "body": b"", "more_body": False})
    logger.info("Response sent: status=%d total_bytes=%d", response.status_code, bytes_sent)


class _BaseResponse:
    def __init__(
        self,
        media_type: str | None,
        is_public: bool,
        options: ServeOptions | None,
    ) -> None:
        self.media_type = media_type
        self.is_public = is_public
        self.composer = AsyncResponseComposer(options=options)

    async def _compose(self, request: Request) -> Response:
        raise NotImplementedError()

    async def __call__(self, scope: _Scope, receive: _Receive, send: _Send) -> None:
        if scope["type"] != "http":
            raise RuntimeError(f"{type(self).__name__} only handles HTTP scopes, got {scope['type']!r}")

        request = _scope_to_request(scope)
        logger.debug("Incoming HTTP request: method=%s path=%s", request.method, request.url)
        response = await self._compose(request)
        await _send_response(response, send)


class FileResponse(_BaseResponse):
    """
    ASGI response serving a file with validators and byte-range support.

    The file identity is snapshotted once in a worker thread; a missing file
    or a path that is not a regular file gives 404.

    Args:
        path: The file to serve.
        media_type: Passed through as Content-Type.
        is_public: Whether shared caches may store the response.
        options: Composer options. Defaults to ServeOptions().

    Example:
        ```python
        from etagserve.asgi import FileResponse

        async def app(scope, receive, send):
            response = FileResponse("static/app.js", media_type="text/javascript")
            await response(scope, receive, send)
        ```
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        media_type: str | None = None,
        is_public: bool = True,
        options: ServeOptions | None = None,
    ) -> None:
        super().__init__(media_type, is_public, options)
        self.path = path

    async def _compose(self, request: Request) -> Response:
        resource = await anyio.to_thread.run_sync(FileResource.from_path, self.path)
        return await self.composer.serve(
            request,
            resource,
            content_type=self.media_type,
            is_public=self.is_public,
        )


class ContentResponse(_BaseResponse):
    """
    ASGI response serving generated content with a strong entity tag.

    Args:
        content: The exact bytes to send; text is encoded as UTF-8.
        media_type: Passed through as Content-Type.
        is_public: Whether shared caches may store the response.
        options: Composer options. Defaults to ServeOptions().
    """

    def __init__(
        self,
        content: bytes | str,
        media_type: str | None = None,
        is_public: bool = True,
        options: ServeOptions | None = None,
    ) -> None:
        super().__init__(media_type, is_public, options)
        self.resource = ContentResource.from_text(content) if isinstance(content, str) else ContentResource(content)

    async def _compose(self, request: Request) -> Response:
        return await self.composer.serve(
            request,
            self.resource,
            content_type=self.media_type,
            is_public=self.is_public,
        )
