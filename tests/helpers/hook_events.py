"""Merge-request hook payload builders for tests.

Examples
--------
>>> from tests.helpers.hook_events import HookPayloadSpec
>>> body = HookPayloadSpec(merged=True).body()
>>> b'"merged":true' in body
True

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import msgspec

from mergehook.webhook import PULL_REQUEST_HOOK_NAME


@dc.dataclass(frozen=True, slots=True, kw_only=True)
class HookPayloadSpec:
    """Builder for a Gitee-style pull-request hook payload.

    Parameters
    ----------
    hook_name
        Hook type identifier; merge-request hooks by default.
    merged
        Whether the pull request has been merged.
    full_name
        Base repository ``owner/name``.
    extra
        Additional top-level fields merged into the payload.

    """

    hook_name: str = PULL_REQUEST_HOOK_NAME
    merged: bool = True
    full_name: str = "acme/widgets"
    number: int = 42
    extra: dict[str, typ.Any] = dc.field(default_factory=dict)

    def payload(self) -> dict[str, typ.Any]:
        """Return the payload as a JSON-compatible dict."""
        owner, _, name = self.full_name.partition("/")
        user = {"id": 7, "login": "octo", "name": "Octo Cat", "username": "octo"}
        repo = {
            "id": 99,
            "name": name,
            "path": name,
            "full_name": self.full_name,
            "owner": {"id": 1, "login": owner},
            "private": False,
            "created_at": "2024-07-01T10:00:00+08:00",
            "default_branch": "master",
        }
        return {
            "hook_name": self.hook_name,
            "password": "",
            "hook_id": 1,
            "hook_url": "https://gitee.example/hooks/1",
            "timestamp": "1720000000000",
            "sign": "",
            "pull_request": {
                "id": 1000,
                "number": self.number,
                "state": "merged" if self.merged else "open",
                "title": "Add feature",
                "body": None,
                "merged_at": "2024-07-02T10:00:00+08:00" if self.merged else None,
                "user": user,
                "assignee": user,
                "tester": None,
                "milestone": None,
                "head": {"label": "feature", "ref": "feature", "sha": "abc", "repo": repo},
                "base": {"label": "master", "ref": "master", "sha": "def", "repo": repo},
                "merged": self.merged,
                "mergeable": True,
                "comments": 0,
                "commits": 1,
                "additions": 3,
                "deletions": 1,
                "changed_files": 1,
            },
            "author": user,
            "sender": user,
            "enterprise": {"name": "Acme", "url": "https://gitee.example/acme"},
            **self.extra,
        }

    def body(self) -> bytes:
        """Return the payload encoded as JSON bytes."""
        return msgspec.json.encode(self.payload())
