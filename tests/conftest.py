"""Shared test fixtures and configuration."""

import os
from pathlib import Path
import sys

from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


# Pin every setting so a developer's .env cannot leak into the tests
TEST_ENV = {
    "OWL_FTS_LOG_LEVEL": "debug",
    "OWL_FTS_LOG_JSON": "true",
    "OWL_FTS_UNKNOWN_PAGE_ID": "[unknown]",
    "OWL_FTS_SERVICE_NAME": "owl-fts-test",
    "OWL_FTS_TRACING_ENABLED": "true",
}

for key, value in TEST_ENV.items():
    os.environ[key] = value
os.environ.pop("OWL_FTS_DEFAULT_SEARCH_LIMIT", None)

from owl_fts.config import Settings
from owl_fts.observability import tracing as tracing_module
from tests.fixtures.envelopes import encode_cluster, encode_index


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset OWL_FTS_* variables to the test defaults for every test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("OWL_FTS_DEFAULT_SEARCH_LIMIT", raising=False)


@pytest.fixture
def settings() -> Settings:
    return Settings()  # type: ignore[call-arg]


@pytest.fixture
def cat_dog_encoded() -> str:
    """Two pages; "cat" on page 0, "dog" on pages 0 and 1."""
    return encode_index(
        ["page-a", "page-b"],
        encode_cluster({"cat": [(0, 2)], "dog": [(0, 1), (1, 3)]}),
    )


@pytest.fixture
def span_exporter():
    """Capture spans emitted through the library tracer."""
    provider = tracing_module.init_tracing("owl-fts-test")
    exporter = InMemorySpanExporter()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    yield exporter
    exporter.clear()
    tracing_module._tracer_holder["tracer"] = None
    tracing_module._tracer_holder["provider"] = None
