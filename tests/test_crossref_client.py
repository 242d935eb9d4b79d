from urllib.parse import parse_qs, urlparse

import pytest
import responses

from citation_resolver.providers.clients.base import UpstreamError
from citation_resolver.providers.clients.crossref import CrossrefClient

WORK_PAYLOAD = {
    "DOI": "10.1038/nature14539",
    "title": ["Deep learning"],
    "author": [
        {"given": "Yann", "family": "LeCun"},
        {"given": "Yoshua", "family": "Bengio"},
        {"given": "Geoffrey", "family": "Hinton"},
    ],
    "container-title": ["Nature"],
    "published": {"date-parts": [[2015, 5, 27]]},
}


@responses.activate
def test_works_by_doi_normalizes_response():
    responses.add(
        responses.GET,
        "https://api.crossref.org/works/10.1038/nature14539",
        json={"status": "ok", "message": WORK_PAYLOAD},
        status=200,
    )

    work = CrossrefClient().works_by_doi("10.1038/nature14539")

    assert work is not None
    assert work.doi == "10.1038/nature14539"
    assert work.title == "Deep learning"
    assert work.year == 2015
    assert work.container_title == "Nature"
    assert work.authors == [("LeCun", "Yann"), ("Bengio", "Yoshua"), ("Hinton", "Geoffrey")]


@responses.activate
def test_works_by_doi_returns_none_on_404():
    responses.add(responses.GET, "https://api.crossref.org/works/10.9999/missing", status=404)

    assert CrossrefClient().works_by_doi("10.9999/missing") is None


@responses.activate
def test_works_by_doi_raises_upstream_error_on_server_failure():
    responses.add(responses.GET, "https://api.crossref.org/works/10.9999/broken", status=502)

    with pytest.raises(UpstreamError):
        CrossrefClient().works_by_doi("10.9999/broken")


@responses.activate
def test_search_by_title_sends_query_and_reads_event_venue():
    responses.add(
        responses.GET,
        "https://api.crossref.org/works",
        json={
            "message": {
                "items": [
                    {
                        "DOI": "10.1109/cvpr.2016.90",
                        "title": ["Deep Residual Learning for Image Recognition"],
                        "author": [{"given": "Kaiming", "family": "He"}],
                        "event": {"name": "2016 IEEE Conference on Computer Vision and Pattern Recognition (CVPR)"},
                        "published": {"date-parts": [[2016, 6]]},
                    },
                    "not-a-record",
                ]
            }
        },
        status=200,
    )

    works = CrossrefClient().search_by_title("Deep Residual Learning", rows=10)

    assert len(works) == 1
    assert works[0].container_title is None
    assert works[0].event_name.endswith("(CVPR)")
    assert works[0].year == 2016

    params = parse_qs(urlparse(responses.calls[0].request.url).query)
    assert params["query"] == ["Deep Residual Learning"]
    assert params["rows"] == ["10"]
    assert params["select"] == ["DOI,title,author,container-title,published,event"]


@responses.activate
def test_search_by_title_falls_back_to_issued_date_and_tolerates_missing_fields():
    responses.add(
        responses.GET,
        "https://api.crossref.org/works",
        json={"message": {"items": [{"title": ["Untitled draft"], "issued": {"date-parts": [[1999]]}}]}},
        status=200,
    )

    works = CrossrefClient().search_by_title("Untitled")

    assert works[0].year == 1999
    assert works[0].doi is None
    assert works[0].authors == []


def test_search_by_title_skips_empty_query():
    assert CrossrefClient().search_by_title("") == []


@responses.activate
def test_search_by_title_ignores_non_string_container_title():
    responses.add(
        responses.GET,
        "https://api.crossref.org/works",
        json={
            "message": {
                "items": [
                    {
                        "title": ["Deep learning"],
                        "container-title": [{"name": "Nature"}],
                        "event": {"name": "NeurIPS"},
                    }
                ]
            }
        },
        status=200,
    )

    works = CrossrefClient().search_by_title("Deep learning")

    assert works[0].container_title is None
    assert works[0].event_name == "NeurIPS"
