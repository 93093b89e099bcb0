"""
Pytest configuration and shared fixtures for all script host tests.

Scripts are written into a temporary project whose scripts live under a
'scripts/' folder, the default root marker.
"""

import io
import sys
from pathlib import Path
from typing import Callable

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from scripthost.compiler.driver import EvaluationDriver
from scripthost.frontend.parser import clear_parse_cache
from scripthost.utils.config import DEFAULT_ROOT_MARKER


# =============================================================================
# Filesystem fixtures
# =============================================================================

@pytest.fixture
def project_root(tmp_path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def scripts_root(project_root) -> Path:
    """The 'scripts/' folder every resolvable script lives under."""
    root = project_root / DEFAULT_ROOT_MARKER
    root.mkdir()
    return root


@pytest.fixture
def write_script(scripts_root) -> Callable[[str, str], Path]:
    """
    Factory writing a script below scripts_root.

    Usage: write_script("lib/util.custom.kts", 'val x = 1')
    """
    def _write(relative_path: str, text: str = "") -> Path:
        path = scripts_root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# =============================================================================
# Driver fixtures
# =============================================================================

@pytest.fixture
def report_stream() -> io.StringIO:
    """Captures failure reports written by the driver."""
    return io.StringIO()


@pytest.fixture
def driver(report_stream) -> EvaluationDriver:
    return EvaluationDriver(stream=report_stream)


# =============================================================================
# Test execution hooks
# =============================================================================

@pytest.fixture(autouse=True)
def reset_parse_cache():
    """Parse results are cached per (source, file); drop them between tests."""
    yield
    clear_parse_cache()


def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
