#!/usr/bin/env python3
"""Shared pytest fixtures for jsonl-lite test suite."""

import pytest
import io
import pathlib
import sys
from typing import Any, Dict, List
from unittest.mock import MagicMock

# Add parent directory to path for imports
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from tests.fixtures.generate_test_data import (
    generate_flat_jsonl,
    generate_annotated_jsonl,
    generate_corrupted_jsonl,
    generate_unicode_jsonl,
    generate_mixed_jsonl,
    sample_records,
)


# ============================================================================
# File Fixtures
# ============================================================================

@pytest.fixture
def flat_jsonl_file(tmp_path) -> pathlib.Path:
    """Create a JSONL file with 100 flat records."""
    jsonl_file = tmp_path / "flat.jsonl"
    generate_flat_jsonl(100, str(jsonl_file))
    return jsonl_file


@pytest.fixture
def annotated_jsonl_file(tmp_path) -> pathlib.Path:
    """Create a JSONL file with 30 records mixed with comments and blank lines."""
    jsonl_file = tmp_path / "annotated.jsonl"
    generate_annotated_jsonl(30, str(jsonl_file))
    return jsonl_file


@pytest.fixture
def corrupted_jsonl_file(tmp_path) -> pathlib.Path:
    """Create a JSONL file whose 11th line is malformed."""
    jsonl_file = tmp_path / "corrupted.jsonl"
    generate_corrupted_jsonl(10, str(jsonl_file))
    return jsonl_file


@pytest.fixture
def unicode_jsonl_file(tmp_path) -> pathlib.Path:
    """Create a JSONL file with Unicode characters."""
    jsonl_file = tmp_path / "unicode.jsonl"
    generate_unicode_jsonl(12, str(jsonl_file))
    return jsonl_file


@pytest.fixture
def mixed_jsonl_file(tmp_path) -> pathlib.Path:
    """Create a JSONL file holding one top-level value of each JSON kind."""
    jsonl_file = tmp_path / "mixed.jsonl"
    generate_mixed_jsonl(str(jsonl_file))
    return jsonl_file


# ============================================================================
# Source / Sink Fixtures
# ============================================================================

@pytest.fixture
def make_source():
    """Build an in-memory byte source from text."""
    def _make(text: str) -> io.BytesIO:
        return io.BytesIO(text.encode("utf-8"))
    return _make


@pytest.fixture
def failing_source():
    """A source that yields some bytes and then raises an I/O error."""
    def _make(first: bytes, error: Exception = None) -> MagicMock:
        source = MagicMock()
        source.read.side_effect = [first, error or OSError("connection reset")]
        return source
    return _make


@pytest.fixture
def sink() -> io.BytesIO:
    """An in-memory byte sink."""
    return io.BytesIO()


@pytest.fixture
def failing_sink():
    """A sink that accepts ``accept`` writes and then raises on every write."""
    def _make(accept: int, error: Exception = None) -> MagicMock:
        buffer = io.BytesIO()
        calls = {"n": 0}

        def write(data):
            calls["n"] += 1
            if calls["n"] > accept:
                raise error or OSError("disk full")
            return buffer.write(data)

        mock = MagicMock()
        mock.write.side_effect = write
        mock.buffer = buffer
        return mock
    return _make


# ============================================================================
# FastAPI Test Client
# ============================================================================

@pytest.fixture
def fastapi_client():
    """Create a FastAPI test client for OP2."""
    from fastapi.testclient import TestClient
    from op2_lite.app.simple_main import app

    return TestClient(app)


# ============================================================================
# Test Data Fixtures
# ============================================================================

@pytest.fixture
def sample_json_records() -> List[Dict[str, Any]]:
    """Generate sample JSON records for testing."""
    return sample_records(100)


@pytest.fixture(params=[0, 1, 2, 10, 1000])
def record_counts(request):
    """Parametrized fixture for different record counts."""
    return request.param


# ============================================================================
# Environment Fixtures
# ============================================================================

@pytest.fixture
def clean_environment(monkeypatch):
    """Ensure a clean environment for tests."""
    for var in ['JSONL_CHUNK_SIZE', 'PORT']:
        monkeypatch.delenv(var, raising=False)
    yield


# ============================================================================
# Test Markers
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")
