"""Value objects — self-validating domain primitives."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote, unquote, urlsplit

from github_fs.domain.exceptions import InvalidLocatorError

SCHEME = "github"
DEFAULT_REF = "main"

_GITHUB_HOST = "github.com"
_RAW_HOST = "raw.githubusercontent.com"
_REF_KEYWORDS = ("tree", "blob")


def normalize_base_path(base_path: str) -> str:
    """Return *base_path* with a leading ``/`` and no trailing ``/``.

    ``""`` and ``"/"`` both normalize to ``"/"``.
    """
    stripped = base_path.strip("/")
    return f"/{stripped}" if stripped else "/"


@dataclass(frozen=True, slots=True)
class RepoLocator:
    """Identifies a repository subtree: ``owner/repo`` at ``ref`` under ``base_path``.

    Parses from ``github://`` identity URIs and from ``https://github.com`` /
    ``https://raw.githubusercontent.com`` URLs.  ``base_path`` is normalized on
    construction, so two locators naming the same subtree compare equal.
    """

    owner: str
    repo: str
    ref: str = DEFAULT_REF
    base_path: str = "/"

    def __post_init__(self) -> None:
        if not self.owner or not self.repo:
            raise InvalidLocatorError("Owner and repository name are required.")
        if not self.ref:
            raise InvalidLocatorError("Ref must not be empty.")
        object.__setattr__(self, "base_path", normalize_base_path(self.base_path))

    # ── Parsing ─────────────────────────────────────────────────────────

    @classmethod
    def parse(cls, text: str) -> RepoLocator:
        """Parse either a ``github://`` URI or an ``https://`` URL."""
        text = text.strip()
        scheme = urlsplit(text).scheme
        if scheme == SCHEME:
            return cls.from_uri(text)
        if scheme == "https":
            return cls.from_url(text)
        raise InvalidLocatorError(f"Invalid scheme: '{scheme}' in '{text}'.")

    @classmethod
    def from_uri(cls, uri: str) -> RepoLocator:
        """Parse ``github://github.com/{owner}/{repo}[/tree|/blob]/{ref}{path}``.

        Without a ``tree`` / ``blob`` keyword the first segment after
        owner/repo is taken as the ref.
        """
        parts = urlsplit(uri.strip())
        if parts.scheme != SCHEME:
            raise InvalidLocatorError(f"Invalid scheme: '{parts.scheme}' in '{uri}'.")
        if parts.netloc != _GITHUB_HOST:
            raise InvalidLocatorError(
                f"Invalid GitHub URI: '{uri}'. "
                "Expected format: github://github.com/<owner>/<repo>/tree/<ref>/<path>"
            )

        owner, repo, remainder = _split_owner_repo(parts.path, uri)
        ref, base_path = DEFAULT_REF, ""
        if remainder:
            head, _, tail = remainder.partition("/")
            if head in _REF_KEYWORDS:
                keyword_ref, _, keyword_path = tail.partition("/")
                if keyword_ref:
                    ref, base_path = keyword_ref, keyword_path
            elif head:
                ref, base_path = head, tail
        return cls._decoded(owner, repo, ref, base_path)

    @classmethod
    def from_url(cls, url: str) -> RepoLocator:
        """Parse a ``github.com`` tree/blob URL or a ``raw.githubusercontent.com`` URL."""
        parts = urlsplit(url.strip())
        if parts.scheme != "https":
            raise InvalidLocatorError(f"Invalid scheme: '{parts.scheme}' in '{url}'.")

        if parts.netloc == _RAW_HOST:
            owner, repo, remainder = _split_owner_repo(parts.path, url)
            ref, _, base_path = remainder.partition("/")
            return cls._decoded(owner, repo, ref or DEFAULT_REF, base_path)

        if parts.netloc == _GITHUB_HOST:
            owner, repo, remainder = _split_owner_repo(parts.path, url)
            if repo.endswith(".git"):
                repo = repo[: -len(".git")]
            ref, base_path = DEFAULT_REF, ""
            head, _, tail = remainder.partition("/")
            if head in _REF_KEYWORDS:
                keyword_ref, _, keyword_path = tail.partition("/")
                if keyword_ref:
                    ref, base_path = keyword_ref, keyword_path
            return cls._decoded(owner, repo, ref, base_path)

        raise InvalidLocatorError(
            f"Invalid GitHub URL: '{url}'. "
            "Expected https://github.com/<owner>/<repo>/tree/<ref>/<path> "
            "or https://raw.githubusercontent.com/<owner>/<repo>/<ref>/<path>"
        )

    @classmethod
    def _decoded(cls, owner: str, repo: str, ref: str, base_path: str) -> RepoLocator:
        """Build a locator from percent-encoded URL components."""
        return cls(
            owner=unquote(owner),
            repo=unquote(repo),
            ref=unquote(ref),
            base_path=unquote(base_path),
        )

    # ── Serialization / matching ────────────────────────────────────────

    def to_uri(self) -> str:
        """Return the ``github://`` identity URI (always the ``tree`` form).

        Components are percent-encoded, so :meth:`from_uri` reads back the
        same locator even for names containing ``#``, ``%`` or spaces.
        """
        base = "" if self.base_path == "/" else quote(self.base_path, safe="/")
        owner, repo, ref = (quote(part, safe="") for part in (self.owner, self.repo, self.ref))
        return f"{SCHEME}://{_GITHUB_HOST}/{owner}/{repo}/tree/{ref}{base}"

    def contains(self, other: RepoLocator) -> bool:
        """True when *other* names this subtree or something below it."""
        if (other.owner, other.repo, other.ref) != (self.owner, self.repo, self.ref):
            return False
        if self.base_path == "/" or other.base_path == self.base_path:
            return True
        return other.base_path.startswith(self.base_path + "/")

    def matches(self, uri: str) -> bool:
        """True when *uri* parses to a location inside this locator's subtree."""
        try:
            other = RepoLocator.parse(uri)
        except InvalidLocatorError:
            return False
        return self.contains(other)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def __str__(self) -> str:
        return self.to_uri()


def _split_owner_repo(path: str, text: str) -> tuple[str, str, str]:
    segments = path.lstrip("/").split("/", 2)
    if len(segments) < 2 or not segments[0] or not segments[1]:
        raise InvalidLocatorError(
            f"Invalid GitHub locator: '{text}'. Owner and repository are required."
        )
    remainder = segments[2] if len(segments) == 3 else ""
    return segments[0], segments[1], remainder
