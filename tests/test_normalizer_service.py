from portfolio_generator.models import Contributor, EnrichmentResult, ProjectRecord, as_count, record_name
from portfolio_generator.services import normalizer_service
from portfolio_generator.services.normalizer_service import normalize_repo, thumbnail_url


def test_maps_upstream_fields(make_repo):
    record = normalize_repo(make_repo(name="demo", stargazers_count=7, forks_count=2))

    assert record.name == "demo"
    assert record.repo_url == "https://github.com/octocat/demo"
    assert record.description == "demo description"
    assert record.tags == ("python", "cli")
    assert record.stars == 7
    assert record.forks == 2
    assert record.open_issues == 2
    assert record.size == 120
    assert record.language == "Python"
    assert record.license == "MIT"
    assert record.updated_at == "2024-03-01T10:00:00Z"
    assert record.created_at == "2023-01-01T10:00:00Z"
    assert record.default_branch == "main"
    assert record.featured is False
    assert record.screenshots == ()


def test_thumbnail_is_derived_from_full_name(make_repo):
    record = normalize_repo(make_repo(name="demo", owner="someone"))
    assert record.thumbnail_url == "https://opengraph.githubassets.com/1/someone/demo"
    assert thumbnail_url("a/b") == "https://opengraph.githubassets.com/1/a/b"


def test_minimal_summary_gets_every_default():
    record = normalize_repo({"name": "bare", "full_name": "octocat/bare", "html_url": "https://github.com/octocat/bare"})
    data = record.to_dict()

    assert set(data) == {
        "name", "repoUrl", "description", "tags", "stars", "forks", "openIssues", "size",
        "featured", "updatedAt", "createdAt", "language", "license", "thumbnailUrl",
        "screenshots", "defaultBranch", "readmeExcerpt", "contributors",
    }
    assert data["description"] == ""
    assert data["tags"] == []
    assert data["stars"] == data["forks"] == data["openIssues"] == data["size"] == 0
    assert data["language"] == ""
    assert data["license"] == ""
    assert data["defaultBranch"] == "main"
    assert data["readmeExcerpt"] == ""
    assert data["contributors"] == []
    assert data["updatedAt"] == ""


def test_explicit_nulls_become_defaults(make_repo):
    record = normalize_repo(
        make_repo(language=None, license=None, topics=None, description=None, default_branch=None, stargazers_count=None)
    )

    assert record.language == ""
    assert record.license == ""
    assert record.tags == ()
    assert record.description == ""
    assert record.default_branch == "main"
    assert record.stars == 0


def test_license_falls_back_to_name(make_repo):
    record = normalize_repo(make_repo(license={"spdx_id": None, "name": "Custom License"}))
    assert record.license == "Custom License"


def test_duplicate_topics_keep_first_occurrence_order(make_repo):
    record = normalize_repo(make_repo(topics=["web", "python", "web", "api"]))
    assert record.tags == ("web", "python", "api")


def test_name_falls_back_to_full_name_tail():
    record = normalize_repo({"full_name": "octocat/hidden"})
    assert record.name == "hidden"


def test_available_enrichment_is_applied(make_repo):
    contributors = (Contributor(login="alice", contribution_count=3),)
    record = normalize_repo(
        make_repo(),
        readme=EnrichmentResult.available("# Title\nUseful [docs](https://x) here"),
        contributors=EnrichmentResult.available(contributors),
    )

    assert record.readme_excerpt == "Useful docs here"
    assert record.contributors == contributors


def test_unavailable_enrichment_uses_empty_defaults(make_repo):
    record = normalize_repo(
        make_repo(),
        readme=EnrichmentResult.unavailable("HTTP 404"),
        contributors=EnrichmentResult.unavailable("HTTP 500"),
    )

    assert record.readme_excerpt == ""
    assert record.contributors == ()


def test_record_round_trips_through_document_keys(make_repo):
    record = normalize_repo(make_repo(), contributors=EnrichmentResult.available((Contributor("bob", "a", "p", 2),)))
    assert ProjectRecord.from_dict(record.to_dict()) == record


def test_record_name_fallbacks():
    assert record_name(" demo ") == "demo"
    assert record_name("", "https://github.com/octocat/tools/") == "tools"
    assert record_name(None, None) == "unnamed-repository"


def test_normalizer_shares_model_coercions(make_repo):
    assert normalizer_service.as_count is as_count
    record = normalize_repo(make_repo(stargazers_count="7", forks_count=-2, description=None))
    assert (record.stars, record.forks, record.description) == (7, 0, "")
