#------------------------------------------------------------
#                          models.py
#     Defines dataclasses used by the generator pipeline
#                   and the rendered portfolio.

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar
from .config import DEFAULT_BRANCH, UNNAMED_REPO_NAME
from .errors import EnrichmentUnavailable

T = TypeVar("T")


def as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def as_count(value: Any) -> int:
    try:
        number = int(value or 0)
    except (TypeError, ValueError):
        return 0
    return max(0, number)


def _first(data: dict, *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


# This function does pick a non-empty display name for a record.
# It falls back to the last path segment of the repository URL or
# full name, then to a fixed placeholder.
def record_name(name: Any, location: Any = None) -> str:
    text = as_text(name).strip()
    if text:
        return text
    tail = as_text(location).strip().rstrip("/").rsplit("/", 1)[-1]
    return tail or UNNAMED_REPO_NAME


@dataclass(frozen=True)
class Contributor:
    login: str
    avatar_url: str = ""
    profile_url: str = ""
    contribution_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "login": self.login,
            "avatarUrl": self.avatar_url,
            "profileUrl": self.profile_url,
            "contributionCount": self.contribution_count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Contributor":
        return cls(
            login=as_text(data.get("login")),
            avatar_url=as_text(_first(data, "avatarUrl", "avatar_url", "avatar")),
            profile_url=as_text(_first(data, "profileUrl", "html_url", "url")),
            contribution_count=as_count(_first(data, "contributionCount", "contributions")),
        )


@dataclass(frozen=True)
class Screenshot:
    src: str
    alt: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"src": self.src, "alt": self.alt}


@dataclass(frozen=True)
class ProjectRecord:
    """One normalized repository, with every field present.

    Records are frozen; the ranker hands back copies with ``featured`` set.
    Sequences are tuples so a record can not be partially mutated after it
    leaves the pipeline.
    """

    name: str
    repo_url: str = ""
    description: str = ""
    tags: Tuple[str, ...] = ()
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    size: int = 0
    featured: bool = False
    updated_at: str = ""
    created_at: str = ""
    language: str = ""
    license: str = ""
    thumbnail_url: str = ""
    screenshots: Tuple[Screenshot, ...] = ()
    default_branch: str = DEFAULT_BRANCH
    readme_excerpt: str = ""
    contributors: Tuple[Contributor, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "repoUrl": self.repo_url,
            "description": self.description,
            "tags": list(self.tags),
            "stars": self.stars,
            "forks": self.forks,
            "openIssues": self.open_issues,
            "size": self.size,
            "featured": self.featured,
            "updatedAt": self.updated_at,
            "createdAt": self.created_at,
            "language": self.language,
            "license": self.license,
            "thumbnailUrl": self.thumbnail_url,
            "screenshots": [shot.to_dict() for shot in self.screenshots],
            "defaultBranch": self.default_branch,
            "readmeExcerpt": self.readme_excerpt,
            "contributors": [contributor.to_dict() for contributor in self.contributors],
        }

    # This function does rebuild a record from a stored document entry.
    # It accepts the legacy key names written by older generators.
    @classmethod
    def from_dict(cls, data: dict) -> "ProjectRecord":
        tags = _first(data, "tags") or []
        screenshots = _first(data, "screenshots") or []
        contributors = _first(data, "contributors") or []
        return cls(
            name=record_name(data.get("name"), _first(data, "repoUrl", "repo", "html_url")),
            repo_url=as_text(_first(data, "repoUrl", "repo", "html_url")),
            description=as_text(_first(data, "description", "desc")),
            tags=tuple(as_text(tag) for tag in tags if tag) if isinstance(tags, list) else (),
            stars=as_count(data.get("stars")),
            forks=as_count(data.get("forks")),
            open_issues=as_count(_first(data, "openIssues", "open_issues_count")),
            size=as_count(data.get("size")),
            featured=data.get("featured") is True,
            updated_at=as_text(_first(data, "updatedAt", "updated_at")),
            created_at=as_text(_first(data, "createdAt", "created_at")),
            language=as_text(data.get("language")),
            license=as_text(data.get("license")),
            thumbnail_url=as_text(_first(data, "thumbnailUrl", "thumbnail")),
            screenshots=tuple(
                Screenshot(src=as_text(item.get("src")), alt=as_text(item.get("alt")))
                for item in screenshots
                if isinstance(item, dict) and item.get("src")
            ) if isinstance(screenshots, list) else (),
            default_branch=as_text(_first(data, "defaultBranch", "default_branch")) or DEFAULT_BRANCH,
            readme_excerpt=as_text(_first(data, "readmeExcerpt", "readme_excerpt")),
            contributors=tuple(
                Contributor.from_dict(item) for item in contributors if isinstance(item, dict)
            ) if isinstance(contributors, list) else (),
        )


@dataclass(frozen=True)
class EnrichmentResult(Generic[T]):
    """Outcome of one enrichment lookup: a value or the reason it is missing."""

    value: Optional[T] = None
    error: Optional[EnrichmentUnavailable] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or(self, default: T) -> T:
        if self.error is not None or self.value is None:
            return default
        return self.value

    @classmethod
    def available(cls, value: T) -> "EnrichmentResult[T]":
        return cls(value=value)

    @classmethod
    def unavailable(cls, reason: str) -> "EnrichmentResult[T]":
        return cls(error=EnrichmentUnavailable(reason))


@dataclass
class PortfolioStats:
    total_repos: int = 0
    total_stars: int = 0
    total_forks: int = 0
    languages: int = 0


@dataclass
class LanguageShare:
    language: str
    count: int
    percent: float


@dataclass
class TimelineEntry:
    year: str
    name: str
    language: str


@dataclass
class GeneratorConfig:
    github_username: str
    github_token: str = ""


class LoadStatus(Enum):
    LOCAL_DATA_LOADED = "local-data-loaded"
    FALLBACK_IN_PROGRESS = "fallback-fetch-in-progress"
    FALLBACK_SUCCEEDED = "fallback-succeeded"
    FULLY_FAILED = "fully-failed"


@dataclass
class Notice:
    message: str
    kind: str = "info"


@dataclass
class AppState:
    """Presentation state, owned by whoever renders the page.

    ``projects`` is only ever replaced as a whole through ``replace_projects``.
    """

    projects: List[ProjectRecord] = field(default_factory=list)
    status: Optional[LoadStatus] = None
    notice: Optional[Notice] = None
    history: List[LoadStatus] = field(default_factory=list)

    def transition(self, status: LoadStatus, message: str, kind: str = "info") -> None:
        self.status = status
        self.notice = Notice(message=message, kind=kind)
        self.history.append(status)

    def replace_projects(self, projects: List[ProjectRecord]) -> None:
        self.projects = list(projects)
