#------------------------------------------------------------
#                          config.py
#     Centralizes API constants, file names, and messages
#             shared by the generator and renderer.

import os

# Environment variable names for configuration
ENV_GITHUB_USERNAME = "GITHUB_USERNAME"
ENV_GITHUB_TOKEN = "GITHUB_TOKEN"

# Constants for GitHub API interaction
GITHUB_API_BASE_URL = "https://api.github.com"
GITHUB_API_ACCEPT_HEADER = "application/vnd.github.v3+json"
GITHUB_CLIENT_ACCEPT_HEADER = "application/vnd.github+json"
GITHUB_RAW_ACCEPT_HEADER = "application/vnd.github.v3.raw"
GITHUB_USER_AGENT = "portfolio-generator"
GITHUB_REPOS_PER_PAGE = 100
GITHUB_REPOS_SORT = "updated"
GITHUB_CONTRIBUTOR_PER_PAGE = 10
GITHUB_REQUEST_TIMEOUT_SECONDS = 30

# Project record defaults and derivation settings
THUMBNAIL_URL_TEMPLATE = "https://opengraph.githubassets.com/1/{full_name}"
DEFAULT_BRANCH = "main"
UNNAMED_REPO_NAME = "unnamed-repository"
FEATURED_COUNT = 3
README_EXCERPT_MAX_LENGTH = 1400
CARD_SNIPPET_MAX_LENGTH = 240
CARD_TAG_LIMIT = 4
EXCERPT_ELLIPSIS = "..."

# Sort modes understood by the presentation layer
SORT_FEATURED = "featured"
SORT_STARS = "stars"
SORT_RECENT = "recent"
SORT_MODES = (SORT_FEATURED, SORT_STARS, SORT_RECENT)
ALL_TAGS_FILTER = "__all__"

# Output files, written relative to the working directory
PROJECTS_DOCUMENT_FILENAME = "projects.json"
PORTFOLIO_PAGE_FILENAME = "index.html"
DOCUMENT_INDENT = 2

# Messages shown in the status notice of the rendered page.
LOCAL_DATA_LOADED_MESSAGE = "Loaded {filename} locally."
FALLBACK_IN_PROGRESS_MESSAGE = "{filename} not found locally. Attempting to fetch your public GitHub repos ({username})…"
FALLBACK_SUCCEEDED_MESSAGE = "Loaded public GitHub repos for {username}."
FULLY_FAILED_MESSAGE = (
    "No projects found. To populate the site: (1) run generate-projects locally to create {filename}, "
    "or (2) check your network connection and that the GitHub account exists, then reload."
)
EMPTY_PROJECTS_MESSAGE = 'No projects found. Run the generator script to populate {filename}, or check the status notice above.'
NO_GITHUB_TOKEN_MESSAGE = "No GITHUB_TOKEN found - anonymous requests are limited to 60 per hour"
MISSING_USERNAME_MESSAGE = "a GitHub username is required (use --username or set GITHUB_USERNAME)"


def default_username() -> str:
    return os.environ.get(ENV_GITHUB_USERNAME, "").strip()


def default_token() -> str:
    return os.environ.get(ENV_GITHUB_TOKEN, "").strip()


# This function does resolve an output file in the working directory.
# Absolute paths are returned unchanged.
def resolve_output_path(filename: str) -> str:
    if os.path.isabs(filename):
        return filename
    return os.path.join(os.getcwd(), filename)
