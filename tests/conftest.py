import sys
from pathlib import Path

import pytest

# Ensure repository root is on the import path for local package imports during tests.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from citation_resolver.core.metrics import ApiCallMetrics  # noqa: E402
from citation_resolver.core.settings import CitationSettings  # noqa: E402


@pytest.fixture()
def metrics() -> ApiCallMetrics:
    return ApiCallMetrics(providers=("crossref", "semanticScholar"))


@pytest.fixture()
def settings(monkeypatch) -> CitationSettings:
    for name in ("CITATION_TIMEOUT", "CITATION_BATCH_WORKERS", "CITATION_MAX_ATTEMPTS"):
        monkeypatch.delenv(name, raising=False)
    return CitationSettings(_env_file=None, mailto="tests@example.org")
