"""Git-style requirement parsing.

npm accepts several spellings for a dependency hosted in a git repository::

    user/repo                      GitHub shorthand
    github:user/repo#v1.2.3        hosted shorthand with a ref
    bitbucket:user/repo
    gitlab:user/repo
    git+ssh://git@host:user/repo.git
    https://github.com/user/repo#semver:^1.0.0

All of them reduce to ``username/repo`` followed by an optional
``#semver:<range>`` or ``#<ref>`` fragment. :class:`GitReferenceParser`
recognizes the prefix, then splits the remaining body into those parts.
Matching is case-insensitive.

A bare ``user/repo`` is only told apart from a registry URL by the absence
of a ``://`` separator, which is why the prefix may be empty.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Optional

from lockkeeper.constants import DEFAULT_GIT_REF, GITHUB_URL_TEMPLATE

_USERNAME_RE = re.compile(r"[a-z0-9-]+", re.IGNORECASE)
_REPO_RE = re.compile(r"[a-z0-9_.-]+", re.IGNORECASE)

_GIT_PREFIX = "git"
_HOSTED_PREFIXES = ("github:", "bitbucket:", "gitlab:")
_GITHUB_HOST = "github.com/"
_SEMVER_MARKER = "semver:"


@dataclass(frozen=True)
class GitReference:
    """
    Captures of a git-style requirement.

    Attributes:
        username: Repository owner.
        repo: Repository name (may keep a ``.git`` suffix).
        semver: Range from a ``#semver:<range>`` fragment.
        ref: Ref from a ``#<ref>`` fragment.
    """

    username: str
    repo: str
    semver: Optional[str] = None
    ref: Optional[str] = None

    @property
    def url(self) -> str:
        """Repository URL on GitHub."""
        return GITHUB_URL_TEMPLATE.format(username=self.username, repo=self.repo)

    @property
    def effective_ref(self) -> str:
        """Pinned ref, or the default branch name when none is given."""
        return self.ref or DEFAULT_GIT_REF


class GitReferenceParser:
    """Recognizes and decomposes git-style requirements.

    Example::

        >>> parser = GitReferenceParser()
        >>> parser.parse("github:octo/widgets#semver:^2.0.0")
        GitReference(username='octo', repo='widgets', semver='^2.0.0', ref=None)
        >>> parser.parse("^1.2.3") is None
        True
    """

    def parse(self, requirement: str) -> Optional[GitReference]:
        """Return the git captures of ``requirement``, or ``None``.

        ``None`` is the normal answer for anything that is not a git
        requirement; it is never an error.
        """
        for body in self._candidate_bodies(requirement):
            reference = self._parse_body(body)
            if reference is not None:
                return reference
        return None

    def matches(self, requirement: str) -> bool:
        """True if ``requirement`` is a git requirement."""
        return self.parse(requirement) is not None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _candidate_bodies(requirement: str) -> Iterator[str]:
        """Yield the text following each recognized prefix, in priority order."""
        lowered = requirement.lower()

        # No prefix: bare shorthand
        yield requirement

        # ``git`` followed by anything (git://, git+ssh://, git@host:, ...)
        if lowered.startswith(_GIT_PREFIX):
            for start in range(len(_GIT_PREFIX), len(requirement)):
                yield requirement[start:]

        for prefix in _HOSTED_PREFIXES:
            if lowered.startswith(prefix):
                yield requirement[len(prefix) :]

        # github.com/ anywhere, leftmost first
        start = lowered.find(_GITHUB_HOST)
        while start != -1:
            yield requirement[start + len(_GITHUB_HOST) :]
            start = lowered.find(_GITHUB_HOST, start + 1)

    @staticmethod
    def _parse_body(body: str) -> Optional[GitReference]:
        """Split ``username/repo[#fragment]`` or return ``None``."""
        path, has_fragment, fragment = body.partition("#")
        username, has_slash, repo = path.partition("/")

        if not has_slash:
            return None
        if not _USERNAME_RE.fullmatch(username) or not _REPO_RE.fullmatch(repo):
            return None
        if not has_fragment:
            return GitReference(username=username, repo=repo)
        if not fragment:
            return None

        if fragment[: len(_SEMVER_MARKER)].lower() == _SEMVER_MARKER:
            semver = fragment[len(_SEMVER_MARKER) :]
            if semver:
                return GitReference(username=username, repo=repo, semver=semver)

        return GitReference(username=username, repo=repo, ref=fragment)
