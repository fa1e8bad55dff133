from __future__ import annotations

import re
from urllib.parse import quote

from cutrelease.core.config import AnnounceConfig
from cutrelease.core.result import Ok, Result
from cutrelease.release.context import ReleaseContext
from cutrelease.release.errors import ReleaseError
from cutrelease.release.model import ReleaseRequest
from cutrelease.release.notes import strip_comments

# git@github.com:owner/repo.git, https://github.com/owner/repo(.git), ssh://git@github.com/owner/repo
_GITHUB_RE = re.compile(r"github\.com[:/]+([^/\s]+)/([^/\s]+?)(?:\.git)?/?$")


def repo_slug_from_url(url: str) -> str | None:
    m = _GITHUB_RE.search(url.strip())
    if m is None:
        return None
    return f"{m.group(1)}/{m.group(2)}"


def announce_url(config: AnnounceConfig, slug: str, tag: str, body: str) -> str:
    return config.url_template.format(
        slug=slug,
        tag=quote(tag, safe=""),
        title=quote(tag, safe=""),
        body=quote(body, safe=""),
    )


def finalize(
    request: ReleaseRequest, notes_text: str | None, ctx: ReleaseContext
) -> Result[None, ReleaseError]:
    console = ctx.console
    console.step("Follow-up")
    console.success(f"released {request.tag}")

    slug = ctx.config.announce.repo_slug
    if slug is None:
        url = ctx.vcs.remote_url(ctx.remote)
        if isinstance(url, Ok):
            slug = repo_slug_from_url(url.value)

    if slug is None:
        console.detail("draft the release announcement on your hosting service")
        console.detail("set [announce] repo_slug in release.toml to open it automatically")
        return Ok(None)

    body = strip_comments(notes_text or "")
    url = announce_url(ctx.config.announce, slug, request.tag, body)
    console.detail("draft the release announcement:")
    if not ctx.opener.open(url):
        console.print(url)
    return Ok(None)
