"""Catch-all Falcon sink delivering every request to the dispatcher.

The receiver exposes a single endpoint: every path and every method is
handled by :class:`HookSink`. ``GET`` requests are answered with an empty
body; every other request receives the JSON envelope produced by the
dispatcher with HTTP 200, whatever the dispatch outcome.

Usage
-----
Register the sink on the Falcon app::

    app.add_sink(HookSink(dispatcher), prefix="/")

"""

from __future__ import annotations

import typing as typ

import falcon

from mergehook.dispatch import IGNORED_METHODS, DispatchEventLogger
from mergehook.webhook import encode_response

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from mergehook.dispatch import Dispatcher

__all__ = ["HookSink"]


def _received_uri(req: Request) -> str:
    """Return the path and query string without percent-decoding.

    Falcon decodes ``req.path``, so the ASGI ``raw_path`` is used when the
    server provides it. It excludes the query string, which is appended
    as received.
    """
    raw_path = req.scope.get("raw_path")
    if not raw_path:
        return req.relative_uri
    uri = raw_path.decode("latin-1")
    if req.query_string:
        uri = f"{uri}?{req.query_string}"
    return uri


class HookSink:
    """Sink routing all requests to a :class:`~mergehook.dispatch.Dispatcher`."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        *,
        event_logger: DispatchEventLogger | None = None,
    ) -> None:
        """Configure the sink with the dispatcher it delegates to.

        Parameters
        ----------
        dispatcher
            Dispatcher deciding which script, if any, to run.
        event_logger
            Structured logger used for body read failures.

        """
        self._dispatcher = dispatcher
        self._event_logger = event_logger or DispatchEventLogger()

    async def __call__(self, req: Request, resp: Response, **_kwargs: str) -> None:
        """Handle any request reaching the receiver.

        Parameters
        ----------
        req
            Falcon request object.
        resp
            Falcon response object.
        **_kwargs
            Sink pattern groups (unused).

        """
        body = b""
        if req.method not in IGNORED_METHODS:
            body = await self._read_body(req)

        result = self._dispatcher.handle(req.method, _received_uri(req), body)
        resp.status = falcon.HTTP_200
        if result is None:
            return

        resp.content_type = falcon.MEDIA_JSON
        resp.data = encode_response(result)

    async def _read_body(self, req: Request) -> bytes:
        """Read the whole body, logging and returning nothing on failure."""
        try:
            return await req.stream.read()
        except OSError as exc:
            self._event_logger.log_body_read_failed(error=exc)
            return b""
