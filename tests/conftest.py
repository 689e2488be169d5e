import textwrap
from pathlib import Path

import pytest

from actionflow.config import get_settings

SIMPLE_WORKFLOW = """\
# ---
# name: Simple Test Workflow
# description: A simple test workflow for unit testing
# type: set
# secrets:
#   - name: TEST_SECRET
#     description: A test secret
# triggers:
#   - push
#   - pull_request
# ---
name: Simple
on: [push, pull_request]
jobs:
  test:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
"""

SIMPLE_WORKFLOW_NIX = """\
name: Simple (Nix)
on: [push]
jobs:
  test:
    runs-on: ubuntu-latest
    steps:
      - uses: cachix/install-nix-action@v27
"""

LEGACY_SIMPLE_WORKFLOW = """\
# name: Legacy Simple Workflow
# description: Shadowed by the new layout
name: Legacy
on: [push]
"""

ANOTHER_WORKFLOW = """\
# name: Another Workflow
# description: Uses inline metadata
# triggers: [push]
# secrets:
#   - name: API_KEY
#     description: Key for the API
#   - name: TOKEN
#     description: Access token
#
name: Another
on: [push]
"""

CONFIGURABLE_TEMPLATE = """\
# name: Configurable Template
# description: Needs edits before use
name: Configurable
on: [workflow_dispatch]
"""

SOME_WORKFLOW = """\
# name: Some Workflow
# description: Lives in the second category
name: Some
on: [push]
"""

OVERRIDDEN_TYPE = """\
# ---
# name: Second Category Pipeline
# type: set
# ---
name: Second
on: [push]
"""


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


@pytest.fixture
def write_file():
    """Write a (dedented) file, creating parent directories."""
    return _write


@pytest.fixture
def catalog_root(tmp_path: Path) -> Path:
    """
    A catalog exercising both layouts:

      test-category/
        simple-workflow/simple-workflow.yml, simple-workflow-nix.yml   (new)
        sets/test-category-simple-workflow.yml                         (shadowed)
        sets/test-category-another-workflow.yml                        (legacy set)
        templates/test-category-configurable.yml                       (legacy template)
      second-category/
        sets/some-workflow.yml
        templates/second-category.yml                                  (type overridden to set)
      .hidden/ , notes.txt                                             (ignored)
    """
    root = tmp_path / "workflows"
    test_cat = root / "test-category"
    _write(test_cat / "simple-workflow" / "simple-workflow.yml", SIMPLE_WORKFLOW)
    _write(test_cat / "simple-workflow" / "simple-workflow-nix.yml", SIMPLE_WORKFLOW_NIX)
    _write(test_cat / "sets" / "test-category-simple-workflow.yml", LEGACY_SIMPLE_WORKFLOW)
    _write(test_cat / "sets" / "test-category-another-workflow.yml", ANOTHER_WORKFLOW)
    _write(test_cat / "templates" / "test-category-configurable.yml", CONFIGURABLE_TEMPLATE)

    second = root / "second-category"
    _write(second / "sets" / "some-workflow.yml", SOME_WORKFLOW)
    _write(second / "templates" / "second-category.yml", OVERRIDDEN_TYPE)

    _write(root / ".hidden" / "sets" / "secret.yml", SOME_WORKFLOW)
    _write(root / "notes.txt", "not a category\n")
    return root


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; tests that set env vars need a fresh read."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
