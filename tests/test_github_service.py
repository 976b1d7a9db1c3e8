import pytest

from portfolio_generator.errors import EnrichmentUnavailable, UpstreamError


def _listing(make_repo, sizes):
    def handler(url, headers, get_page):
        page = get_page(url)
        count = sizes[page - 1] if page <= len(sizes) else 0
        return [make_repo(name=f"repo-{page}-{index}") for index in range(count)]

    return handler


def test_fetch_repos_stops_after_short_page(make_repo, make_service, fake_response, get_page_number):
    listing = _listing(make_repo, [100, 100, 37])
    service, session = make_service(lambda url, headers: fake_response(200, listing(url, headers, get_page_number)))

    repos = service.fetch_repos()

    assert len(repos) == 237
    assert len(session.calls) == 3
    assert [get_page_number(call["url"]) for call in session.calls] == [1, 2, 3]


def test_fetch_repos_requests_updated_sort_and_page_size(make_service, fake_response):
    service, session = make_service(lambda url, headers: fake_response(200, []))

    assert service.fetch_repos() == []

    url = session.calls[0]["url"]
    assert url.startswith("https://api.github.com/users/octocat/repos?")
    assert "per_page=100" in url
    assert "sort=updated" in url
    assert "page=1" in url


def test_fetch_repos_exactly_full_page_requests_next(make_repo, make_service, fake_response, get_page_number):
    listing = _listing(make_repo, [100])
    service, session = make_service(lambda url, headers: fake_response(200, listing(url, headers, get_page_number)))

    assert len(service.fetch_repos()) == 100
    assert len(session.calls) == 2


def test_fetch_repos_failed_page_aborts_without_partial_results(make_repo, make_service, fake_response, get_page_number):
    def handler(url, headers):
        if get_page_number(url) == 2:
            return fake_response(500, {"message": "boom"})
        return fake_response(200, [make_repo(name=f"r{index}") for index in range(100)])

    service, _ = make_service(handler)

    with pytest.raises(UpstreamError) as excinfo:
        service.fetch_repos()
    assert excinfo.value.status == 500


def test_fetch_repos_not_found_names_the_account(make_service, fake_response):
    service, _ = make_service(lambda url, headers: fake_response(404, {"message": "Not Found"}), username="ghost")

    with pytest.raises(UpstreamError, match="ghost"):
        service.fetch_repos()


def test_fetch_repos_rate_limit_message(make_service, fake_response):
    service, _ = make_service(lambda url, headers: fake_response(403, {"message": "rate limited"}))

    with pytest.raises(UpstreamError, match="rate limit"):
        service.fetch_repos()


def test_fetch_repos_transport_failure(make_service, connection_error):
    service, _ = make_service(lambda url, headers: connection_error)

    with pytest.raises(UpstreamError):
        service.fetch_repos()


def test_fetch_repos_rejects_non_list_body(make_service, fake_response):
    service, _ = make_service(lambda url, headers: fake_response(200, {"message": "odd"}))

    with pytest.raises(UpstreamError):
        service.fetch_repos()


def test_headers_carry_bearer_token_only_when_configured(make_service, fake_response):
    service, session = make_service(lambda url, headers: fake_response(200, []), token="secret")
    service.fetch_repos()
    assert session.calls[0]["headers"]["Authorization"] == "Bearer secret"
    assert session.calls[0]["headers"]["User-Agent"] == "portfolio-generator"

    anonymous, anonymous_session = make_service(lambda url, headers: fake_response(200, []))
    anonymous.fetch_repos()
    assert "Authorization" not in anonymous_session.calls[0]["headers"]


def test_fetch_readme_returns_raw_text(make_service, fake_response):
    service, session = make_service(lambda url, headers: fake_response(200, text="# Demo\nHello"))

    result = service.fetch_readme("octocat/demo")

    assert result.ok
    assert result.value == "# Demo\nHello"
    assert session.calls[0]["url"] == "https://api.github.com/repos/octocat/demo/readme"
    assert session.calls[0]["headers"]["Accept"] == "application/vnd.github.v3.raw"


@pytest.mark.parametrize("status", [404, 403, 500])
def test_fetch_readme_failure_is_unavailable(make_service, fake_response, status):
    service, _ = make_service(lambda url, headers: fake_response(status, {"message": "nope"}))

    result = service.fetch_readme("octocat/demo")

    assert not result.ok
    assert isinstance(result.error, EnrichmentUnavailable)
    assert result.unwrap_or("") == ""


def test_fetch_readme_network_failure_is_unavailable(make_service, connection_error):
    service, _ = make_service(lambda url, headers: connection_error)

    assert not service.fetch_readme("octocat/demo").ok


def test_fetch_readme_blank_body_is_unavailable(make_service, fake_response):
    service, _ = make_service(lambda url, headers: fake_response(200, text="   \n"))

    assert not service.fetch_readme("octocat/demo").ok


def test_fetch_contributors_maps_fields_in_upstream_order(make_service, fake_response):
    payload = [
        {"login": "alice", "avatar_url": "https://a/alice.png", "html_url": "https://github.com/alice", "contributions": 40},
        {"login": "bob", "avatar_url": "https://a/bob.png", "html_url": "https://github.com/bob", "contributions": 3},
    ]
    service, session = make_service(lambda url, headers: fake_response(200, payload))

    result = service.fetch_contributors("octocat/demo")

    assert result.ok
    assert [c.login for c in result.value] == ["alice", "bob"]
    assert result.value[0].avatar_url == "https://a/alice.png"
    assert result.value[0].profile_url == "https://github.com/alice"
    assert result.value[0].contribution_count == 40
    assert session.calls[0]["url"].endswith("/repos/octocat/demo/contributors?per_page=10")


@pytest.mark.parametrize(
    "response_args",
    [(404, {"message": "nope"}), (200, {"message": "not a list"}), (200, []), (204, None)],
)
def test_fetch_contributors_failures_are_unavailable(make_service, fake_response, response_args):
    service, _ = make_service(lambda url, headers: fake_response(*response_args))

    result = service.fetch_contributors("octocat/demo")

    assert not result.ok
    assert result.unwrap_or(()) == ()


def test_own_session_is_closed_on_exit(monkeypatch):
    from portfolio_generator.models import GeneratorConfig
    from portfolio_generator.services.github_service import GitHubService

    service = GitHubService(GeneratorConfig("octocat"), verbose=False)
    closed = []
    monkeypatch.setattr(service.session, "close", lambda: closed.append(True))

    with service:
        pass

    assert closed == [True]


def test_injected_session_is_left_open(make_service, fake_response):
    service, session = make_service(lambda url, headers: fake_response(200, []))

    with service:
        service.fetch_repos()

    assert session.closed is False
