#------------------------------------------------------------
#                    normalizer_service.py
#        Maps raw GitHub repository summaries into
#                fully-defaulted project records.

from typing import Any, Iterable, Optional, Tuple
from ..config import DEFAULT_BRANCH, README_EXCERPT_MAX_LENGTH, THUMBNAIL_URL_TEMPLATE
from ..models import Contributor, EnrichmentResult, ProjectRecord, as_count, as_text, record_name
from .excerpt_service import excerpt_markdown


def thumbnail_url(full_name: str) -> str:
    return THUMBNAIL_URL_TEMPLATE.format(full_name=full_name)


# This function does deduplicate topic labels.
# First occurrence wins, so upstream ordering is preserved.
def _unique_tags(topics: Optional[Iterable[Any]]) -> Tuple[str, ...]:
    if not isinstance(topics, (list, tuple)):
        return ()
    seen = {}
    for topic in topics:
        label = as_text(topic).strip()
        if label and label not in seen:
            seen[label] = None
    return tuple(seen)


def _license_label(license_info: Any) -> str:
    if not isinstance(license_info, dict):
        return ""
    return as_text(license_info.get("spdx_id") or license_info.get("name"))


# This function does build a project record from one repository summary.
# Missing upstream fields and unavailable enrichment both fall back to
# empty defaults, so the record never lacks a field.
def normalize_repo(
    repo: dict,
    readme: Optional[EnrichmentResult[str]] = None,
    contributors: Optional[EnrichmentResult[Tuple[Contributor, ...]]] = None,
    excerpt_max_length: int = README_EXCERPT_MAX_LENGTH,
) -> ProjectRecord:
    full_name = as_text(repo.get("full_name"))
    name = record_name(repo.get("name"), full_name)

    readme_text = readme.unwrap_or("") if readme is not None else ""
    contributor_list = contributors.unwrap_or(()) if contributors is not None else ()

    return ProjectRecord(
        name=name,
        repo_url=as_text(repo.get("html_url")),
        description=as_text(repo.get("description")),
        tags=_unique_tags(repo.get("topics")),
        stars=as_count(repo.get("stargazers_count")),
        forks=as_count(repo.get("forks_count")),
        open_issues=as_count(repo.get("open_issues_count")),
        size=as_count(repo.get("size")),
        featured=False,
        updated_at=as_text(repo.get("updated_at")),
        created_at=as_text(repo.get("created_at")),
        language=as_text(repo.get("language")),
        license=_license_label(repo.get("license")),
        thumbnail_url=thumbnail_url(full_name or name),
        screenshots=(),
        default_branch=as_text(repo.get("default_branch")) or DEFAULT_BRANCH,
        readme_excerpt=excerpt_markdown(readme_text, excerpt_max_length),
        contributors=tuple(contributor_list),
    )
