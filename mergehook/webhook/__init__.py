"""Merge-request webhook payload models and codecs."""

from __future__ import annotations

from .models import (
    PULL_REQUEST_HOOK_NAME,
    HookEvent,
    HookResponse,
    PullRequest,
    decode_event,
    encode_response,
)

__all__ = [
    "PULL_REQUEST_HOOK_NAME",
    "HookEvent",
    "HookResponse",
    "PullRequest",
    "decode_event",
    "encode_response",
]
