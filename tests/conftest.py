"""Pytest configuration and fixtures for txgen tests.

This conftest addresses Python 3.13 compatibility issues with pytest's capture fixtures.
Python 3.13 changed how stdout/stderr are handled, causing "I/O operation on closed file"
errors during test teardown. This is a known issue: https://github.com/pytest-dev/pytest/issues/11439
"""

import io
import sys
import warnings
from pathlib import Path

import pytest

from txgen import output
from txgen.config import GeneratorConfig

# Suppress ResourceWarnings from file cleanup in Python 3.13
if sys.version_info >= (3, 13):
    warnings.filterwarnings("ignore", category=ResourceWarning)


STYLES = {
    "property": {"bg": "background", "text": "color", "p": "padding", "m": "margin", "mx": ["margin-left", "margin-right"]},
    "values": {"primary": "#ccf654", "red": "#ff0000", "4": "1rem"},
    "classes": {"flex": {"display": "flex"}, "hidden": {"display": "none"}},
}


@pytest.fixture(autouse=True)
def _restore_stdio():  # noqa: PT004
    """Ensure stdout/stderr are always restored after each test.

    This prevents "I/O operation on closed file" errors in Python 3.13
    when tests raise exceptions that close stdout/stderr.
    """
    yield

    # Restore if they were closed during the test
    if sys.stdout.closed:
        sys.stdout = sys.__stdout__
    if sys.stderr.closed:
        sys.stderr = sys.__stderr__


@pytest.fixture(autouse=True)
def output_stream():
    """Route txgen.output into a buffer and reset verbose mode for every test."""
    stream = io.StringIO()
    output.init_timer(stream)
    output.set_verbose(False)
    yield stream
    output.init_timer(sys.__stdout__)
    output.set_verbose(False)


@pytest.fixture
def styles():
    """Style resolver configuration shared by build tests."""
    return {key: dict(value) for key, value in STYLES.items()}


@pytest.fixture
def project_dir(tmp_path) -> Path:
    """Small project with one HTML page and one JSX component under src/."""
    src = tmp_path / "src"
    (src / "components").mkdir(parents=True)
    (src / "index.html").write_text(
        '<!doctype html>\n<html>\n<body>\n  <div class="flex p-4">\n    <p class="text-red">Hi</p>\n  </div>\n</body>\n</html>\n',
        encoding="utf-8",
    )
    (src / "components" / "Button.jsx").write_text(
        "export function Button({ active }) {\n"
        '  return <button className={active ? "bg-primary" : "bg-red"}>Go</button>;\n'
        "}\n",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def make_config(project_dir, styles):
    """Factory for GeneratorConfig rooted at project_dir."""

    def _make(**overrides) -> GeneratorConfig:
        data = {"input": ["src/**/*.{html,jsx}"], "output": "dist/styles.css", "styles": styles}
        data.update(overrides)
        return GeneratorConfig.from_dict({**data, "root": str(project_dir)})

    return _make


@pytest.hookimpl(hookwrapper=True, tryfirst=True)
def pytest_runtest_call(item):  # noqa: ARG001
    """Wrap test execution to handle stdout/stderr closure gracefully."""
    yield

    # After test execution, ensure streams aren't closed
    if hasattr(sys.stdout, "closed") and sys.stdout.closed:
        sys.stdout = sys.__stdout__
    if hasattr(sys.stderr, "closed") and sys.stderr.closed:
        sys.stderr = sys.__stderr__
