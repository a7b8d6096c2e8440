"""Response messages returned to the webhook sender."""

from __future__ import annotations

import enum

RESPONSE_CODE = 200


class DispatchMessage(enum.StrEnum):
    """Human-readable ``msg`` values of the response envelope.

    ``SUCCESS`` is also returned when nothing ran because the payload could
    not be decoded or the key has no script configured.
    """

    SUCCESS = "request succeeded"
    NO_SCRIPT = "hook execution failed, script not configured"
    NOT_MERGED = "hook execution failed, pull request not merged"
    UNSUPPORTED_HOOK = "hook execution failed, unsupported hook type"
