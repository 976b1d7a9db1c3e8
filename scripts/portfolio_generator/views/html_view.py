#------------------------------------------------------------
#                        html_view.py
#           Renders HTML blocks for project cards,
#             filters, stats, and the full page.

from html import escape
from urllib.parse import quote
from typing import List, Optional, Sequence
from ..config import (
    ALL_TAGS_FILTER,
    CARD_SNIPPET_MAX_LENGTH,
    CARD_TAG_LIMIT,
    EMPTY_PROJECTS_MESSAGE,
    EXCERPT_ELLIPSIS,
    PROJECTS_DOCUMENT_FILENAME,
    SORT_FEATURED,
)
from ..models import AppState, LanguageShare, Notice, PortfolioStats, ProjectRecord, TimelineEntry
from ..services.catalog_service import (
    apply_filters,
    build_timeline,
    collect_tags,
    compute_stats,
    language_distribution,
    relative_time,
)

NOTICE_COLORS = {"info": "#f59e0b", "success": "#10b981", "error": "#ef4444"}
CHART_COLORS = ("#7c3aed", "#06b6d4", "#f97316", "#ef4444", "#22c55e", "#eab308")

CARD_TEMPLATE = (
    '<div class="card project-card{featured_class}" tabindex="0" data-repo="{repo_url}">\n'
    '  <img class="thumb" src="{thumbnail}" alt="{name} screenshot" onerror="this.style.display=\'none\'" />\n'
    "  <h3>{name}</h3>\n"
    "  <p>{snippet}</p>\n"
    '  <div class="meta"><div>{language}</div><div>⭐ {stars} • {forks}</div><div class="muted">{updated}</div></div>\n'
    "{badges}\n"
    '  <div><a class="btn" href="{repo_url}" target="_blank" rel="noopener">Code</a> '
    '<a class="btn open" href="#{modal_id}">Details</a></div>\n'
    "</div>"
)
BADGES_TEMPLATE = '  <div class="badges">{badges}</div>'
BADGE_TEMPLATE = '<span class="badge">{tag}</span>'
MODAL_TEMPLATE = (
    '<div class="modal" id="{modal_id}" role="dialog" aria-label="{name}">\n'
    '  <div class="modal-body">\n'
    '    <a class="modal-close" href="#">×</a>\n'
    '    <h2>{name}<div class="muted"> · {language}</div></h2>\n'
    '    <div class="muted">⭐ {stars} • {forks} forks • {license}</div>\n'
    "{details}\n"
    "  </div>\n"
    "</div>"
)
DESCRIPTION_TEMPLATE = "    <p>{description}</p>"
EXCERPT_TEMPLATE = '    <div class="card"><pre style="white-space:pre-wrap;max-height:360px;overflow:auto">{excerpt}</pre></div>'
CONTRIBUTOR_TEMPLATE = (
    '<a href="{profile_url}" title="{login} ({count} contributions)">'
    '<img class="avatar" src="{avatar_url}" alt="{login}" /></a>'
)
CONTRIBUTORS_TEMPLATE = '    <div class="contributors">{contributors}</div>'
THUMBS_TEMPLATE = '    <div class="thumbs">{thumbs}</div>'
THUMB_LINK_TEMPLATE = '<a href="#{lightbox_id}"><img src="{src}" alt="{alt}" tabindex="0" /></a>'
LIGHTBOX_TEMPLATE = (
    '<div class="lightbox" id="{lightbox_id}" aria-hidden="true">\n'
    '  <a class="lightbox-close" href="#">×</a>\n'
    '  <img src="{src}" alt="{caption}" />\n'
    '  <p class="caption">{caption}</p>\n'
    "</div>"
)
FILTER_TEMPLATE = '<span class="filter{active}" data-tag="{tag}">{label}</span>'
STAT_TEMPLATE = '<div class="stat"><span class="stat-num" id="{element_id}" data-target="{value}">{value}</span> {label}</div>'
CHART_BAR_TEMPLATE = (
    '<div class="lang-bar"><span class="lang-label">{language}</span>'
    '<span class="lang-fill" style="width:{percent:.1f}%;background:{color}"></span>'
    '<span class="lang-value">{count} ({percent:.1f}%)</span></div>'
)
TIMELINE_ENTRY_TEMPLATE = (
    '<div><div><strong>{year}</strong><div>{name}</div></div>'
    '<div style="color:var(--muted)">{language}</div></div>'
)
NOTICE_TEMPLATE = '<div id="__notice" class="card" data-status="{status}" style="margin:12px 0;padding:10px;border-left:4px solid {color}">{message}</div>'
EMPTY_STATE_TEMPLATE = '<p class="muted">{message}</p>'
VIEW_SUMMARY_TEMPLATE = '<p class="controls muted">Showing {shown} of {total} projects, sorted by {sort}{query}{tag}.</p>'
VIEW_QUERY_TEMPLATE = ', matching &quot;{query}&quot;'
VIEW_TAG_TEMPLATE = ', tagged {tag}'
EXPORT_LINK_TEMPLATE = '<a class="btn" id="exportJSON" href="{href}" download>Export JSON</a>'

PAGE_TEMPLATE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{title}</title>
  <link rel="stylesheet" href="styles.css" />
</head>
<body>
  <header class="top"><h1>{title}</h1></header>
{notice}
  <section class="stats">
{stats}
  </section>
{view}
{export}
  <nav id="filters">{filters}</nav>
  <main id="projects">
{projects}
  </main>
  <section id="langChart">
{chart}
  </section>
  <section id="timeline">
{timeline}
  </section>
{modals}
</body>
</html>
"""


def _modal_id(index: int) -> str:
    return f"project-{index}"


# This function does choose the short text shown on a card.
# The README excerpt wins over the description when present.
def card_snippet(record: ProjectRecord) -> str:
    if record.readme_excerpt:
        snippet = record.readme_excerpt[:CARD_SNIPPET_MAX_LENGTH]
        if len(record.readme_excerpt) > CARD_SNIPPET_MAX_LENGTH:
            snippet += EXCERPT_ELLIPSIS
        return snippet
    return record.description


def render_badges(tags: Sequence[str]) -> str:
    return BADGES_TEMPLATE.format(
        badges="".join(BADGE_TEMPLATE.format(tag=escape(tag)) for tag in list(tags)[:CARD_TAG_LIMIT])
    )


# This function does render one project card.
# Featured records get the extra "featured" class.
def render_project_card(record: ProjectRecord, index: int) -> str:
    updated = relative_time(record.updated_at)
    return CARD_TEMPLATE.format(
        featured_class=" featured" if record.featured else "",
        repo_url=escape(record.repo_url),
        thumbnail=escape(record.thumbnail_url),
        name=escape(record.name),
        snippet=escape(card_snippet(record)),
        language=escape(record.language),
        stars=record.stars,
        forks=record.forks,
        updated=f"Updated {updated}" if updated else "",
        badges=render_badges(record.tags),
        modal_id=_modal_id(index),
    )


def render_lightbox(lightbox_id: str, src: str, caption: str) -> str:
    return LIGHTBOX_TEMPLATE.format(lightbox_id=lightbox_id, src=escape(src), caption=escape(caption))


# This function does render the details modal of one project.
# Screenshots are shown when curated, else the thumbnail, each
# linked to its own lightbox.
def render_project_modal(record: ProjectRecord, index: int) -> str:
    modal_id = _modal_id(index)
    details: List[str] = []
    lightboxes: List[str] = []

    if record.description:
        details.append(DESCRIPTION_TEMPLATE.format(description=escape(record.description)))
    if record.readme_excerpt:
        details.append(EXCERPT_TEMPLATE.format(excerpt=escape(record.readme_excerpt)))
    if record.contributors:
        details.append(
            CONTRIBUTORS_TEMPLATE.format(
                contributors="".join(
                    CONTRIBUTOR_TEMPLATE.format(
                        profile_url=escape(contributor.profile_url),
                        login=escape(contributor.login),
                        count=contributor.contribution_count,
                        avatar_url=escape(contributor.avatar_url),
                    )
                    for contributor in record.contributors
                )
            )
        )

    images = [(shot.src, shot.alt or record.name) for shot in record.screenshots]
    if not images and record.thumbnail_url:
        images = [(record.thumbnail_url, record.name)]

    thumbs = []
    for image_index, (src, caption) in enumerate(images):
        lightbox_id = f"{modal_id}-image-{image_index}"
        thumbs.append(THUMB_LINK_TEMPLATE.format(lightbox_id=lightbox_id, src=escape(src), alt=escape(caption)))
        lightboxes.append(render_lightbox(lightbox_id, src, caption))
    if thumbs:
        details.append(THUMBS_TEMPLATE.format(thumbs="".join(thumbs)))

    modal = MODAL_TEMPLATE.format(
        modal_id=modal_id,
        name=escape(record.name),
        language=escape(record.language),
        stars=record.stars,
        forks=record.forks,
        license=escape(record.license),
        details="\n".join(details),
    )
    return "\n".join([modal] + lightboxes)


# This function does render the project grid.
# An empty list renders an explanatory message instead of cards.
def render_projects(records: Sequence[ProjectRecord]) -> str:
    if not records:
        return EMPTY_STATE_TEMPLATE.format(message=escape(EMPTY_PROJECTS_MESSAGE.format(filename=PROJECTS_DOCUMENT_FILENAME)))
    return "\n".join(render_project_card(record, index) for index, record in enumerate(records))


def render_modals(records: Sequence[ProjectRecord]) -> str:
    return "\n".join(render_project_modal(record, index) for index, record in enumerate(records))


# This function does render the tag overview.
# The tag the page was rendered for is marked active.
def render_filters(tags: Sequence[str], active: str = ALL_TAGS_FILTER) -> str:
    labels = [FILTER_TEMPLATE.format(active=" active" if active == ALL_TAGS_FILTER else "", tag=ALL_TAGS_FILTER, label="All")]
    for tag in tags:
        labels.append(
            FILTER_TEMPLATE.format(active=" active" if tag == active else "", tag=escape(tag), label=escape(tag))
        )
    return "".join(labels)


def render_view_summary(shown: int, total: int, query: str, tag: str, sort: str) -> str:
    return VIEW_SUMMARY_TEMPLATE.format(
        shown=shown,
        total=total,
        sort=escape(sort or SORT_FEATURED),
        query=VIEW_QUERY_TEMPLATE.format(query=escape(query)) if query else "",
        tag=VIEW_TAG_TEMPLATE.format(tag=escape(tag)) if tag and tag != ALL_TAGS_FILTER else "",
    )


# This function does render the download link for the exported catalog.
# The path is percent-encoded so names with "#" or "+" survive as URLs.
def render_export_link(export_href: Optional[str]) -> str:
    if not export_href:
        return ""
    return EXPORT_LINK_TEMPLATE.format(href=escape(quote(export_href.replace("\\", "/"))))


def render_stats(stats: PortfolioStats) -> str:
    rows = [
        ("statRepos", stats.total_repos, "repositories"),
        ("statStars", stats.total_stars, "stars"),
        ("statForks", stats.total_forks, "forks"),
        ("statLangs", stats.languages, "languages"),
    ]
    return "\n".join(
        STAT_TEMPLATE.format(element_id=element_id, value=value, label=label)
        for element_id, value, label in rows
    )


def render_language_chart(shares: Sequence[LanguageShare]) -> str:
    return "\n".join(
        CHART_BAR_TEMPLATE.format(
            language=escape(share.language),
            percent=share.percent,
            count=share.count,
            color=CHART_COLORS[index % len(CHART_COLORS)],
        )
        for index, share in enumerate(shares)
    )


def render_timeline(entries: Sequence[TimelineEntry]) -> str:
    return "\n".join(
        TIMELINE_ENTRY_TEMPLATE.format(year=entry.year, name=escape(entry.name), language=escape(entry.language))
        for entry in entries
    )


def render_notice(notice: Optional[Notice], status: str = "") -> str:
    if notice is None:
        return ""
    return NOTICE_TEMPLATE.format(
        status=status,
        color=NOTICE_COLORS.get(notice.kind, NOTICE_COLORS["info"]),
        message=escape(notice.message),
    )


# This function does render the full portfolio page from app state.
# Filters and sorting apply to the cards, chart, and timeline alike;
# stats and the tag bar always describe the whole collection.
def render_page(
    state: AppState,
    title: str = "Projects",
    query: str = "",
    tag: str = ALL_TAGS_FILTER,
    sort: str = SORT_FEATURED,
    export_href: Optional[str] = None,
) -> str:
    visible = apply_filters(state.projects, query=query, tag=tag, sort=sort)
    return PAGE_TEMPLATE.format(
        title=escape(title),
        notice=render_notice(state.notice, state.status.value if state.status else ""),
        stats=render_stats(compute_stats(state.projects)),
        view=render_view_summary(len(visible), len(state.projects), query, tag, sort),
        export=render_export_link(export_href),
        filters=render_filters(collect_tags(state.projects), tag or ALL_TAGS_FILTER),
        projects=render_projects(visible),
        chart=render_language_chart(language_distribution(visible)),
        timeline=render_timeline(build_timeline(visible)),
        modals=render_modals(visible),
    )
