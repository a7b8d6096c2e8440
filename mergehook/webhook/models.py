"""Typed payload models for merge-request webhooks.

The structures mirror the pull-request hook payload sent by Gitee-style
code-hosting platforms. Only ``hook_name``, ``pull_request.merged`` and
``pull_request.base.repo.full_name`` drive dispatch; the remaining fields
are decoded so the full payload round-trips but are otherwise unused.
Every field has a default and accepts ``null`` so partial payloads decode.
Unknown fields are ignored.
"""

from __future__ import annotations

import typing as typ

import msgspec

PULL_REQUEST_HOOK_NAME = "merge_request_hooks"


class User(msgspec.Struct, kw_only=True):
    """Account reference used for authors, senders, owners and assignees."""

    id: int | None = None
    login: str | None = None
    avatar_url: str | None = None
    html_url: str | None = None
    type: str | None = None
    site_admin: bool | None = None
    name: str | None = None
    email: str | None = None
    username: str | None = None
    user_name: str | None = None
    url: str | None = None


class Milestone(msgspec.Struct, kw_only=True):
    """Milestone attached to a pull request."""

    html_url: str | None = None
    id: int | None = None
    number: int | None = None
    title: str | None = None
    description: typ.Any = None
    open_issues: int | None = None
    started_issues: int | None = None
    closed_issues: int | None = None
    approved_issues: int | None = None
    state: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    due_on: typ.Any = None


class Repo(msgspec.Struct, kw_only=True):
    """Repository on either side of a pull request."""

    id: int | None = None
    name: str | None = None
    path: str | None = None
    full_name: str | None = None
    owner: User | None = None
    private: bool | None = None
    html_url: str | None = None
    url: str | None = None
    description: str | None = None
    fork: bool | None = None
    created_at: str | None = None
    updated_at: str | None = None
    pushed_at: str | None = None
    git_url: str | None = None
    ssh_url: str | None = None
    clone_url: str | None = None
    svn_url: str | None = None
    git_http_url: str | None = None
    git_ssh_url: str | None = None
    git_svn_url: str | None = None
    homepage: typ.Any = None
    stargazers_count: int | None = None
    watchers_count: int | None = None
    forks_count: int | None = None
    language: str | None = None
    has_issues: bool | None = None
    has_wiki: bool | None = None
    has_pages: bool | None = None
    license: typ.Any = None
    open_issues_count: int | None = None
    default_branch: str | None = None
    namespace: str | None = None
    name_with_namespace: str | None = None
    path_with_namespace: str | None = None


class Branch(msgspec.Struct, kw_only=True):
    """Head or base reference of a pull request."""

    label: str | None = None
    ref: str | None = None
    sha: str | None = None
    user: User | None = None
    repo: Repo | None = None


class PullRequest(msgspec.Struct, kw_only=True):
    """Pull request carried by a merge-request hook."""

    id: int | None = None
    number: int | None = None
    state: str | None = None
    html_url: str | None = None
    diff_url: str | None = None
    patch_url: str | None = None
    title: str | None = None
    body: typ.Any = None
    created_at: str | None = None
    updated_at: str | None = None
    closed_at: typ.Any = None
    merged_at: typ.Any = None
    merge_commit_sha: str | None = None
    user: User | None = None
    assignee: User | None = None
    tester: typ.Any = None
    milestone: Milestone | None = None
    head: Branch | None = None
    base: Branch | None = None
    merged: bool | None = None
    mergeable: typ.Any = None
    comments: int | None = None
    commits: int | None = None
    additions: int | None = None
    deletions: int | None = None
    changed_files: int | None = None


class Enterprise(msgspec.Struct, kw_only=True):
    """Enterprise the hook originates from."""

    name: str | None = None
    url: str | None = None


class HookEvent(msgspec.Struct, kw_only=True):
    """Decoded webhook payload.

    ``password`` and ``sign`` are decoded but never verified.
    """

    hook_name: str | None = None
    password: str | None = None
    hook_id: int | None = None
    hook_url: str | None = None
    timestamp: str | None = None
    sign: str | None = None
    pull_request: PullRequest | None = None
    author: User | None = None
    sender: User | None = None
    enterprise: Enterprise | None = None

    @property
    def is_pull_request_hook(self) -> bool:
        """Return True when the hook reports a merge-request event."""
        return self.hook_name == PULL_REQUEST_HOOK_NAME

    @property
    def is_merged(self) -> bool:
        """Return True when the carried pull request has been merged."""
        return self.pull_request is not None and bool(self.pull_request.merged)

    @property
    def project_name(self) -> str:
        """Return the base repository's ``full_name`` or an empty string."""
        pr = self.pull_request
        if pr is None or pr.base is None or pr.base.repo is None:
            return ""
        return pr.base.repo.full_name or ""


class HookResponse(msgspec.Struct, kw_only=True):
    """Envelope returned for every non-GET request."""

    code: int
    msg: str
    data: typ.Any = None


_decoder = msgspec.json.Decoder(HookEvent | None)
_encoder = msgspec.json.Encoder()


def decode_event(body: bytes) -> HookEvent:
    """Decode a JSON request body into a :class:`HookEvent`.

    A top-level JSON ``null`` decodes to an empty event.

    Raises
    ------
    msgspec.DecodeError
        If *body* is not valid JSON or does not match the payload shape.

    """
    event = _decoder.decode(body)
    return event if event is not None else HookEvent()


def encode_response(response: HookResponse) -> bytes:
    """Encode a :class:`HookResponse` as JSON bytes."""
    return _encoder.encode(response)


__all__ = [
    "PULL_REQUEST_HOOK_NAME",
    "Branch",
    "Enterprise",
    "HookEvent",
    "HookResponse",
    "Milestone",
    "PullRequest",
    "Repo",
    "User",
    "decode_event",
    "encode_response",
]
