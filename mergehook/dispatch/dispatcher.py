"""Request-to-script dispatch for merge-request webhooks.

The dispatcher turns one inbound request into at most one detached script
run. The decision is made in a fixed order:

1. ``GET`` requests are ignored and produce no response body.
2. The body must decode as a :class:`~mergehook.webhook.HookEvent`;
   otherwise processing stops and the generic response is returned.
3. The hook must be a merge-request hook whose pull request is merged.
4. The request URI must contain ``/hooks`` somewhere, query string
   included. This is a substring check, not a route match.
5. The key is everything after the last ``/`` of the URI. A key without a
   non-blank script path leaves the generic response untouched.

The response envelope is created before the body is decoded and is only
replaced on the rejection branches, so decode failures and unconfigured
keys both answer with the generic success message.
"""

from __future__ import annotations

import typing as typ

import msgspec

from mergehook.webhook import HookResponse, decode_event

from .messages import RESPONSE_CODE, DispatchMessage
from .observability import DispatchEventLogger

if typ.TYPE_CHECKING:
    from mergehook.registry import ScriptRegistry

    from .executor import ScriptExecutor

__all__ = ["HOOKS_MARKER", "IGNORED_METHODS", "Dispatcher", "registry_key"]

HOOKS_MARKER = "/hooks"
IGNORED_METHODS = frozenset({"GET"})


def registry_key(uri: str) -> str:
    """Return everything after the last ``/`` in *uri*."""
    return uri.rpartition("/")[2]


def _response(message: DispatchMessage) -> HookResponse:
    return HookResponse(code=RESPONSE_CODE, msg=str(message), data=None)


class Dispatcher:
    """Map inbound hook requests to configured scripts.

    Parameters
    ----------
    registry
        Read-only key to script path lookup built at startup.
    executor
        Executor that runs scripts detached from the request.
    event_logger
        Structured logger for dispatch events.

    """

    def __init__(
        self,
        registry: ScriptRegistry,
        executor: ScriptExecutor,
        *,
        event_logger: DispatchEventLogger | None = None,
    ) -> None:
        """Configure the dispatcher with its collaborators."""
        self.registry = registry
        self.executor = executor
        self._event_logger = event_logger or DispatchEventLogger()

    def handle(self, method: str, uri: str, body: bytes) -> HookResponse | None:
        """Process one request and return the envelope to send.

        Parameters
        ----------
        method
            HTTP method of the request.
        uri
            Request path plus query string, as received.
        body
            Raw request body.

        Returns
        -------
        HookResponse | None
            ``None`` for ignored methods, otherwise the response envelope.
            A qualifying hook schedules its script before this returns but
            the script itself runs after the response is sent.

        """
        self._event_logger.log_request_received(method=method, uri=uri)

        if method.upper() in IGNORED_METHODS:
            self._event_logger.log_request_ignored(method=method, uri=uri)
            return None

        response = _response(DispatchMessage.SUCCESS)

        try:
            event = decode_event(body)
        except msgspec.DecodeError as exc:
            self._event_logger.log_decode_failed(error=exc)
            return response

        if not event.is_pull_request_hook:
            self._event_logger.log_unsupported_hook(hook_name=event.hook_name)
            return _response(DispatchMessage.UNSUPPORTED_HOOK)

        if not event.is_merged:
            self._event_logger.log_not_merged(project=event.project_name)
            return _response(DispatchMessage.NOT_MERGED)

        if HOOKS_MARKER not in uri:
            self._event_logger.log_no_script(uri=uri)
            return _response(DispatchMessage.NO_SCRIPT)

        key = registry_key(uri)
        script_path = self.registry.script_for(key)
        self._event_logger.log_hook_accepted(
            project=event.project_name, key=key, script_path=script_path
        )

        if script_path.strip():
            self.executor.submit(script_path)

        return response
