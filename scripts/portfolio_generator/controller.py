#------------------------------------------------------------
#                        controller.py
#        Coordinates repository collection, enrichment,
#             ranking, and delivery to each sink.

import argparse
import os
import sys
from typing import List, Optional
from .config import (
    ALL_TAGS_FILTER,
    FALLBACK_IN_PROGRESS_MESSAGE,
    FALLBACK_SUCCEEDED_MESSAGE,
    FULLY_FAILED_MESSAGE,
    GITHUB_CLIENT_ACCEPT_HEADER,
    LOCAL_DATA_LOADED_MESSAGE,
    MISSING_USERNAME_MESSAGE,
    NO_GITHUB_TOKEN_MESSAGE,
    PORTFOLIO_PAGE_FILENAME,
    PROJECTS_DOCUMENT_FILENAME,
    SORT_FEATURED,
    SORT_MODES,
    default_token,
    default_username,
    resolve_output_path,
)
from .errors import LocalDataUnavailable, PortfolioError, UpstreamError
from .models import AppState, GeneratorConfig, LoadStatus, ProjectRecord
from .services.document_service import DirectSink, DocumentSink, load_local_projects, save_text
from .services.catalog_service import export_projects
from .services.github_service import GitHubService
from .services.normalizer_service import normalize_repo
from .services.ranking_service import rank_projects
from .views.html_view import render_page

LISTING_MESSAGE = "Listing repos for {username}"
FOUND_REPOS_MESSAGE = "Found {count} repos. Fetching details (this may take a few seconds)..."
WRITTEN_MESSAGE = "\nWritten {path} with {count} projects."
PAGE_WRITTEN_MESSAGE = "Written {path} ({status})."
EXPORT_WRITTEN_MESSAGE = "Written {path} with {count} projects."
FALLBACK_FAILED_MESSAGE = "Failed to load {filename} and failed GitHub fetch: {error}"
NO_PUBLIC_REPOS_MESSAGE = "No public repos returned for user: {username}"
ERROR_MESSAGE = "Error: {error}"


# This function does run the offline pipeline up to ranking.
# Repositories are enriched strictly one after another.
def collect_projects(github_service: GitHubService, progress: bool = True) -> List[ProjectRecord]:
    repos = github_service.fetch_repos()
    if progress:
        print(FOUND_REPOS_MESSAGE.format(count=len(repos)))

    records = []
    for repo in repos:
        full_name = repo.get("full_name") or ""
        readme = github_service.fetch_readme(full_name)
        contributors = github_service.fetch_contributors(full_name)
        records.append(normalize_repo(repo, readme=readme, contributors=contributors))
        if progress:
            sys.stdout.write(".")
            sys.stdout.flush()

    return rank_projects(records)


# This function does execute the generator end-to-end.
# It lists, enriches, ranks, and writes the projects document.
def run_generate(config: GeneratorConfig, output_path: str, github_service: Optional[GitHubService] = None) -> List[ProjectRecord]:
    github_service = github_service or GitHubService(config)
    print(LISTING_MESSAGE.format(username=config.github_username))
    if not config.github_token:
        print(NO_GITHUB_TOKEN_MESSAGE)

    with github_service:
        records = collect_projects(github_service)
    DocumentSink(output_path).deliver(records)
    print(WRITTEN_MESSAGE.format(path=output_path, count=len(records)))
    return records


# This function does fetch repositories for the client-side fallback.
# README and contributor lookups are skipped to save requests.
def fetch_fallback_projects(github_service: GitHubService) -> List[ProjectRecord]:
    repos = github_service.fetch_repos()
    return rank_projects(normalize_repo(repo) for repo in repos)


# This function does build the presentation state.
# The local document is preferred; otherwise the public API is queried
# and a failure there leaves an explained, empty catalog.
def load_portfolio(
    config: GeneratorConfig,
    document_path: str,
    github_service: Optional[GitHubService] = None,
) -> AppState:
    state = AppState()
    try:
        local = load_local_projects(document_path)
    except LocalDataUnavailable:
        local = []

    if local:
        if not any(record.featured for record in local):
            local = rank_projects(local)
        state.replace_projects(local)
        state.transition(
            LoadStatus.LOCAL_DATA_LOADED,
            LOCAL_DATA_LOADED_MESSAGE.format(filename=PROJECTS_DOCUMENT_FILENAME),
            "success",
        )
        return state

    state.transition(
        LoadStatus.FALLBACK_IN_PROGRESS,
        FALLBACK_IN_PROGRESS_MESSAGE.format(filename=PROJECTS_DOCUMENT_FILENAME, username=config.github_username),
    )
    try:
        if not config.github_username:
            raise UpstreamError(MISSING_USERNAME_MESSAGE)
        github_service = github_service or GitHubService(config, accept_header=GITHUB_CLIENT_ACCEPT_HEADER, verbose=False)
        with github_service:
            fetched = fetch_fallback_projects(github_service)
        if not fetched:
            raise UpstreamError(NO_PUBLIC_REPOS_MESSAGE.format(username=config.github_username))
    except UpstreamError as exc:
        print(FALLBACK_FAILED_MESSAGE.format(filename=PROJECTS_DOCUMENT_FILENAME, error=exc), file=sys.stderr)
        state.replace_projects([])
        state.transition(
            LoadStatus.FULLY_FAILED,
            FULLY_FAILED_MESSAGE.format(filename=PROJECTS_DOCUMENT_FILENAME),
            "error",
        )
        return state

    return DirectSink(state).deliver(
        fetched,
        LoadStatus.FALLBACK_SUCCEEDED,
        FALLBACK_SUCCEEDED_MESSAGE.format(username=config.github_username),
    )


def _add_credential_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--username", "-u", default=default_username(), help="GitHub account to list")
    parser.add_argument("--token", "-t", default=default_token(), help="GitHub token (optional)")


def build_generate_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="generate-projects",
        description=f"Write {PROJECTS_DOCUMENT_FILENAME} for a GitHub account's repositories.",
    )
    _add_credential_arguments(parser)
    return parser


def build_render_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="render-portfolio",
        description="Render the portfolio page from the projects document, or from GitHub when it is missing.",
    )
    _add_credential_arguments(parser)
    parser.add_argument("--document", default=PROJECTS_DOCUMENT_FILENAME, help="projects document to load")
    parser.add_argument("--output", default=PORTFOLIO_PAGE_FILENAME, help="HTML file to write")
    parser.add_argument("--title", default="Projects")
    parser.add_argument("--query", default="", help="only show projects matching this text")
    parser.add_argument("--tag", default=ALL_TAGS_FILTER, help="only show projects with this topic or language")
    parser.add_argument("--sort", default=SORT_FEATURED, choices=SORT_MODES)
    parser.add_argument("--export", default="", help="also write the loaded projects as JSON here and link it from the page")
    return parser


def generate_main(argv: Optional[List[str]] = None) -> int:
    args = build_generate_parser().parse_args(argv)
    config = GeneratorConfig(github_username=(args.username or "").strip(), github_token=(args.token or "").strip())
    try:
        if not config.github_username:
            raise PortfolioError(MISSING_USERNAME_MESSAGE)
        run_generate(config, resolve_output_path(PROJECTS_DOCUMENT_FILENAME))
    except PortfolioError as exc:
        print(ERROR_MESSAGE.format(error=exc), file=sys.stderr)
        return 1
    return 0


def render_main(argv: Optional[List[str]] = None) -> int:
    args = build_render_parser().parse_args(argv)
    config = GeneratorConfig(github_username=(args.username or "").strip(), github_token=(args.token or "").strip())
    state = load_portfolio(config, resolve_output_path(args.document))
    output_path = resolve_output_path(args.output)
    export_href = None
    try:
        if args.export:
            export_path = resolve_output_path(args.export)
            save_text(export_path, export_projects(state.projects))
            print(EXPORT_WRITTEN_MESSAGE.format(path=export_path, count=len(state.projects)))
            export_href = os.path.relpath(export_path, os.path.dirname(output_path))
        page = render_page(state, title=args.title, query=args.query, tag=args.tag, sort=args.sort, export_href=export_href)
        save_text(output_path, page)
    except PortfolioError as exc:
        print(ERROR_MESSAGE.format(error=exc), file=sys.stderr)
        return 1
    print(PAGE_WRITTEN_MESSAGE.format(path=output_path, status=state.status.value))
    return 0
