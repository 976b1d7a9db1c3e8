#------------------------------------------------------------
#                     catalog_service.py
#        Search, filter, sort, and summary helpers for
#               the rendered project catalog.

import json
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional
from dateutil import parser as date_parser
from dateutil import relativedelta
from ..config import ALL_TAGS_FILTER, DOCUMENT_INDENT, SORT_RECENT, SORT_STARS
from ..models import LanguageShare, PortfolioStats, ProjectRecord, TimelineEntry

OLDEST_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)
JUST_NOW_LABEL = "just now"


# This function does parse an ISO-8601 timestamp string.
# It returns None for empty or malformed values.
def parse_timestamp(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = date_parser.isoparse(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _sort_timestamp(record: ProjectRecord) -> datetime:
    return parse_timestamp(record.updated_at) or OLDEST_TIMESTAMP


def relative_time(value: str, now: Optional[datetime] = None) -> str:
    """Return a human-friendly relative time string."""
    moment = parse_timestamp(value)
    if moment is None:
        return ""
    delta = relativedelta.relativedelta(now or datetime.now(timezone.utc), moment)
    if delta.years > 0:
        return f"{delta.years} year{'s' if delta.years != 1 else ''} ago"
    if delta.months > 0:
        return f"{delta.months} month{'s' if delta.months != 1 else ''} ago"
    if delta.days > 0:
        return f"{delta.days} day{'s' if delta.days != 1 else ''} ago"
    if delta.hours > 0:
        return f"{delta.hours} hour{'s' if delta.hours != 1 else ''} ago"
    return JUST_NOW_LABEL


# This function does collect every filterable label.
# Topics and primary languages are merged and sorted alphabetically.
def collect_tags(records: Iterable[ProjectRecord]) -> List[str]:
    labels = set()
    for record in records:
        labels.update(record.tags)
        if record.language:
            labels.add(record.language)
    return sorted(labels)


def _matches_tag(record: ProjectRecord, tag: str) -> bool:
    return tag in record.tags or record.language == tag


def _matches_query(record: ProjectRecord, query: str) -> bool:
    haystack = " ".join([record.name, record.description, " ".join(record.tags)])
    return query in haystack.lower()


# This function does apply the search box, tag filter, and sort order.
# The input list is left untouched; a new list is returned.
def apply_filters(
    records: Iterable[ProjectRecord],
    query: str = "",
    tag: str = ALL_TAGS_FILTER,
    sort: str = "",
) -> List[ProjectRecord]:
    selected = list(records)
    if tag and tag != ALL_TAGS_FILTER:
        selected = [record for record in selected if _matches_tag(record, tag)]

    needle = (query or "").strip().lower()
    if needle:
        selected = [record for record in selected if _matches_query(record, needle)]

    if sort == SORT_RECENT:
        selected.sort(key=_sort_timestamp, reverse=True)
    elif sort == SORT_STARS:
        selected.sort(key=lambda record: record.stars, reverse=True)
    else:
        selected.sort(key=lambda record: record.featured, reverse=True)
    return selected


def compute_stats(records: Iterable[ProjectRecord]) -> PortfolioStats:
    records = list(records)
    return PortfolioStats(
        total_repos=len(records),
        total_stars=sum(record.stars for record in records),
        total_forks=sum(record.forks for record in records),
        languages=len({record.language for record in records if record.language}),
    )


# This function does count projects per primary language.
# Languages keep the order in which they first appear.
def language_distribution(records: Iterable[ProjectRecord]) -> List[LanguageShare]:
    counts: Dict[str, int] = {}
    for record in records:
        if record.language:
            counts[record.language] = counts.get(record.language, 0) + 1

    total = sum(counts.values())
    return [
        LanguageShare(language=language, count=count, percent=(count / total) * 100)
        for language, count in counts.items()
    ]


def build_timeline(records: Iterable[ProjectRecord]) -> List[TimelineEntry]:
    entries = []
    for record in sorted(records, key=_sort_timestamp, reverse=True):
        moment = parse_timestamp(record.updated_at)
        entries.append(
            TimelineEntry(
                year=str(moment.year) if moment else "",
                name=record.name,
                language=record.language,
            )
        )
    return entries


# This function does serialize the current catalog for download.
def export_projects(records: Iterable[ProjectRecord]) -> str:
    return json.dumps(
        {"projects": [record.to_dict() for record in records]},
        indent=DOCUMENT_INDENT,
        ensure_ascii=False,
    )
