import requests

from citation_resolver.core.models import Author, Paper
from citation_resolver.providers.adapters import (
    ProviderAdapter,
    crossref_adapter,
    crossref_work_to_paper,
    semanticscholar_adapter,
    semanticscholar_paper_to_paper,
    split_display_name,
)
from citation_resolver.providers.clients.base import RateLimitedError, UpstreamError
from citation_resolver.providers.clients.crossref import CrossrefWork
from citation_resolver.providers.clients.semanticscholar import SemanticScholarPaper


class StubCrossrefClient:
    def __init__(self, *, search_results=None, doi_result=None, error=None):
        self._search_results = search_results or []
        self._doi_result = doi_result
        self._error = error
        self.search_calls = []

    def search_by_title(self, title, *, rows=10):
        self.search_calls.append((title, rows))
        if self._error:
            raise self._error
        return self._search_results[:rows]

    def works_by_doi(self, doi):
        if self._error:
            raise self._error
        return self._doi_result


class StubSemanticScholarClient:
    def __init__(self, papers=None, error=None):
        self._papers = papers or []
        self._error = error

    def search_papers(self, query, *, limit=10):
        if self._error:
            raise self._error
        return list(self._papers)


def test_crossref_work_to_paper_applies_sentinels_and_venue_preference():
    work = CrossrefWork(
        doi=None,
        title=None,
        year=None,
        container_title=None,
        event_name="ICML 2019",
        authors=[("Doe", "Jane")],
    )

    paper = crossref_work_to_paper(work)

    assert paper.title == "Unknown title"
    assert paper.venue == "ICML 2019"
    assert paper.year == "Unknown year"
    assert paper.doi == ""
    assert paper.authors == (Author(family="Doe", given="Jane"),)


def test_crossref_work_to_paper_prefers_container_title():
    work = CrossrefWork(
        doi="10.1000/X", title="T", year=2020, container_title="Journal", event_name="Event"
    )

    paper = crossref_work_to_paper(work)

    assert paper.venue == "Journal"
    assert paper.doi == "10.1000/x"
    assert paper.year == 2020


def test_crossref_work_to_paper_falls_back_to_unknown_journal():
    work = CrossrefWork(doi=None, title="T", year=None, container_title=None, event_name=None)

    assert crossref_work_to_paper(work, fallback_doi="10.1/abc").venue == "Unknown journal"
    assert crossref_work_to_paper(work, fallback_doi="10.1/abc").doi == "10.1/abc"


def test_split_display_name_uses_last_token_as_family():
    assert split_display_name("Ashish Vaswani") == Author(family="Vaswani", given="Ashish")
    assert split_display_name("Jean  Claude Van-Damme") == Author(family="Van-Damme", given="Jean Claude")
    assert split_display_name("Plato") == Author(family="Plato", given="")
    assert split_display_name("   ") == Author()


def test_semanticscholar_paper_to_paper_maps_fields():
    record = SemanticScholarPaper(
        title="Attention Is All You Need",
        venue=None,
        year=2017,
        doi=None,
        authors=["Ashish Vaswani", "Noam Shazeer"],
    )

    paper = semanticscholar_paper_to_paper(record)

    assert paper.venue == "Unknown journal"
    assert paper.year == 2017
    assert paper.authors[1] == Author(family="Shazeer", given="Noam")
    assert paper.source == "semanticScholar"


def test_search_filters_to_titles_containing_query(metrics):
    client = StubCrossrefClient(
        search_results=[
            CrossrefWork(doi="10.1/a", title="Deep learning", year=2015, container_title="Nature", event_name=None),
            CrossrefWork(doi="10.1/b", title="Shallow networks", year=2010, container_title=None, event_name=None),
        ]
    )
    adapter = crossref_adapter(client, metrics, rows=7)

    papers = adapter.search_by_title("  DEEP Learning ")

    assert [paper.title for paper in papers] == ["Deep learning"]
    assert client.search_calls == [("  DEEP Learning ", 7)]
    assert metrics.get("crossref").count == 1
    assert metrics.get("crossref").errors == 0


def test_search_without_filter_returns_all_candidates(metrics):
    client = StubSemanticScholarClient(
        [SemanticScholarPaper(title="Other", venue=None, year=None, doi=None)]
    )
    adapter = semanticscholar_adapter(client, metrics, filter_by_title=False)

    assert len(adapter.search_by_title("query")) == 1


def test_search_failure_returns_empty_list_and_records_error(metrics):
    adapter = crossref_adapter(StubCrossrefClient(error=UpstreamError("boom")), metrics)

    assert adapter.search_by_title("Deep learning") == []
    assert metrics.get("crossref").errors == 1


def test_rate_limit_and_transport_errors_are_swallowed(metrics):
    rate_limited = semanticscholar_adapter(
        StubSemanticScholarClient(error=RateLimitedError("slow down")), metrics
    )
    timed_out = semanticscholar_adapter(
        StubSemanticScholarClient(error=requests.ConnectionError("offline")), metrics
    )

    assert rate_limited.search_by_title("x") == []
    assert timed_out.search_by_title("x") == []
    assert metrics.get("semanticScholar").errors == 2


def test_malformed_payload_is_treated_as_no_data(metrics):
    adapter = crossref_adapter(StubCrossrefClient(error=KeyError("message")), metrics)

    assert adapter.fetch_by_doi("10.1000/abc") is None
    assert metrics.get("crossref").errors == 1


def test_fetch_by_doi_maps_work(metrics):
    work = CrossrefWork(
        doi=None, title="Deep learning", year=2015, container_title="Nature", event_name=None
    )
    adapter = crossref_adapter(StubCrossrefClient(doi_result=work), metrics)

    paper = adapter.fetch_by_doi("10.1038/nature14539")

    assert paper is not None
    assert paper.doi == "10.1038/nature14539"
    assert metrics.get("crossref").count == 1


def test_adapter_without_doi_lookup_returns_none(metrics):
    adapter = ProviderAdapter(name="semanticScholar", metrics=metrics, search=lambda title: [])

    assert adapter.fetch_by_doi("10.1000/abc") is None
    assert metrics.get("semanticScholar").count == 0


def test_non_string_titles_are_compared_without_raising(metrics):
    papers = [Paper(title=42), Paper(title="Deep learning basics")]
    adapter = ProviderAdapter(name="semanticScholar", metrics=metrics, search=lambda title: papers)

    assert adapter.search_by_title("Deep learning") == [papers[1]]
    assert metrics.get("semanticScholar").errors == 0


def test_filter_failure_stays_inside_adapter(metrics):
    adapter = ProviderAdapter(name="semanticScholar", metrics=metrics, search=lambda title: [None])

    assert adapter.search_by_title("Deep learning") == []
    assert metrics.get("semanticScholar").count == 1
    assert metrics.get("semanticScholar").errors == 1
