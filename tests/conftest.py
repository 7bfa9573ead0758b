"""Shared test fixtures for SourceScope tests."""

from pathlib import Path

import pytest

from sourcescope.config import AnalysisConfig
from sourcescope.scanning import ParserAdapter, SyntaxTree


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def make_project(tmp_path):
    """Build a project tree from ``{relative_path: content}``.

    Paths ending in ``/`` create empty directories.
    """

    def _make(files: dict, root_name: str = "project") -> Path:
        root = tmp_path / root_name
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            if rel.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture(scope="session")
def parser_adapter():
    return ParserAdapter()


@pytest.fixture
def parse(parser_adapter):
    """Parse a snippet and return the SyntaxTree (fails the test on ParseFailure)."""

    def _parse(code: str, filename: str = "snippet.ts") -> SyntaxTree:
        outcome = parser_adapter.parse(code, filename)
        assert isinstance(outcome, SyntaxTree), outcome
        return outcome

    return _parse


@pytest.fixture
def detect(parse):
    """Run one detector over a snippet and return its issues."""

    def _detect(detector, code: str, filename: str = "snippet.ts"):
        tree = parse(code, filename)
        return detector.detect(tree.root_node, tree.source, filename)

    return _detect


@pytest.fixture
def offline_config():
    """Sequential config with the ESLint pass disabled."""
    return AnalysisConfig(lint_enabled=False)
