import threading

from citation_resolver.core.identifiers import ReferenceKind
from citation_resolver.core.models import Ambiguous, NotFound, Paper, Resolved
from citation_resolver.providers.adapters import ProviderAdapter
from citation_resolver.services.resolution_service import ResolutionDispatcher


class StubAdapter:
    def __init__(self, name, *, search_results=None, doi_result=None, error=None):
        self.name = name
        self._search_results = search_results or []
        self._doi_result = doi_result
        self._error = error
        self.search_queries = []
        self.doi_queries = []

    def search_by_title(self, title):
        self.search_queries.append(title)
        if self._error:
            raise self._error
        return list(self._search_results)

    def fetch_by_doi(self, doi):
        self.doi_queries.append(doi)
        if self._error:
            raise self._error
        return self._doi_result


def _dispatcher(primary, secondary, **kwargs):
    return ResolutionDispatcher(primary=primary, secondary=secondary, **kwargs)


def test_classify_uses_doi_pattern():
    dispatcher = _dispatcher(StubAdapter("crossref"), StubAdapter("semanticScholar"))

    assert dispatcher.classify("10.1038/s41586-020-2649-2") is ReferenceKind.DOI
    assert dispatcher.classify("Attention is all you need") is ReferenceKind.TITLE


def test_doi_path_uses_primary_lookup_only_when_found():
    paper = Paper(title="Array programming with NumPy", year=2020)
    primary = StubAdapter("crossref", doi_result=paper)
    secondary = StubAdapter("semanticScholar")

    outcome = _dispatcher(primary, secondary).resolve("doi: 10.1038/s41586-020-2649-2", limit=5)

    assert outcome == Resolved(paper)
    assert primary.doi_queries == ["10.1038/s41586-020-2649-2"]
    assert primary.search_queries == []
    assert secondary.search_queries == []


def test_doi_path_falls_back_to_secondary_search_with_doi_text():
    first = Paper(title="Fallback hit 10.1000/xyz")
    second = Paper(title="Another hit 10.1000/xyz")
    primary = StubAdapter("crossref")
    secondary = StubAdapter("semanticScholar", search_results=[first, second])

    outcome = _dispatcher(primary, secondary).resolve("10.1000/xyz", limit=5)

    assert outcome == Resolved(first)
    assert secondary.search_queries == ["10.1000/xyz"]


def test_doi_fallback_can_be_disabled():
    primary = StubAdapter("crossref")
    secondary = StubAdapter("semanticScholar", search_results=[Paper(title="hit")])

    dispatcher = _dispatcher(primary, secondary, enable_doi_title_fallback=False)

    assert dispatcher.resolve("10.1000/xyz", limit=5) == NotFound()
    assert secondary.search_queries == []


def test_title_path_combines_both_providers_secondary_first():
    from_secondary = Paper(title="Deep learning", year=2015, source="semanticScholar")
    from_primary = Paper(title="Deep learning revisited", year=2020, source="crossref")
    primary = StubAdapter("crossref", search_results=[from_primary])
    secondary = StubAdapter("semanticScholar", search_results=[from_secondary])

    candidates = _dispatcher(primary, secondary).gather_candidates("Deep learning")

    assert candidates == [from_secondary, from_primary]
    assert primary.doi_queries == []


def test_title_path_ranks_and_dedupes_across_providers():
    exact_secondary = Paper(title="Deep Learning", year=2015, source="semanticScholar")
    exact_primary = Paper(title="deep learning", year=2016, source="crossref")
    later = Paper(title="Applied deep learning", year=2022, source="crossref")
    primary = StubAdapter("crossref", search_results=[later, exact_primary])
    secondary = StubAdapter("semanticScholar", search_results=[exact_secondary])

    outcome = _dispatcher(primary, secondary).resolve("Deep learning", limit=5)

    assert outcome == Ambiguous((exact_secondary, later))


def test_failing_provider_does_not_abort_the_other():
    paper = Paper(title="Deep learning")
    primary = StubAdapter("crossref", search_results=[paper])
    secondary = StubAdapter("semanticScholar", error=RuntimeError("exploded"))

    assert _dispatcher(primary, secondary).resolve("Deep learning", limit=5) == Resolved(paper)


def test_failing_primary_doi_lookup_still_tries_fallback():
    paper = Paper(title="hit")
    primary = StubAdapter("crossref", error=RuntimeError("exploded"))
    secondary = StubAdapter("semanticScholar", search_results=[paper])

    assert _dispatcher(primary, secondary).lookup_doi("10.1000/xyz") == paper


def test_title_searches_are_issued_concurrently(metrics):
    barrier = threading.Barrier(2, timeout=5)

    def search(title):
        barrier.wait()
        return [Paper(title=title)]

    primary = ProviderAdapter(name="crossref", metrics=metrics, search=search)
    secondary = ProviderAdapter(name="semanticScholar", metrics=metrics, search=search)

    papers = _dispatcher(primary, secondary).gather_candidates("Deep learning")

    assert len(papers) == 2


def test_search_title_caps_ranked_results():
    papers = [Paper(title=f"Deep learning volume {index}", year=2000 + index) for index in range(8)]
    primary = StubAdapter("crossref", search_results=papers[:4])
    secondary = StubAdapter("semanticScholar", search_results=papers[4:])

    results = _dispatcher(primary, secondary).search_title("deep learning", limit=3)

    assert [paper.year for paper in results] == [2007, 2006, 2005]
