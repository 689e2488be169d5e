"""
Tests for actionflow.installer — copy semantics, overwrite rules, dry runs.

All tests use tmp_path source and target directories.
"""

from pathlib import Path

import pytest

from actionflow.installer import install_batch, install_workflow, target_file_for
from actionflow.models import (
    Category,
    InstallOptions,
    VariantRow,
    Workflow,
    WorkflowMetadata,
    WorkflowType,
    WorkflowVariant,
)

SOURCE_CONTENT = """\
name: Test Workflow
on: [push]
jobs:
  test:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
"""


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    d = tmp_path / "source"
    d.mkdir()
    (d / "test-workflow.yml").write_text(SOURCE_CONTENT, encoding="utf-8")
    return d


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    d = tmp_path / "repo"
    d.mkdir()
    return d


@pytest.fixture
def variant(source_dir: Path) -> WorkflowVariant:
    return WorkflowVariant(
        name="standard",
        filename="test-workflow.yml",
        filepath=str(source_dir / "test-workflow.yml"),
        description="Test variant",
    )


@pytest.fixture
def workflow(variant: WorkflowVariant) -> Workflow:
    return Workflow(
        id="test/test-workflow",
        category=Category(id="test", name="Test", path="/test"),
        workflow_type="test-workflow",
        type=WorkflowType.SET,
        variants=[variant],
        metadata=WorkflowMetadata(name="Test Workflow", description="A test workflow"),
    )


def _expected_target(target_dir: Path) -> Path:
    return target_dir / ".github" / "workflows" / "test-workflow.yml"


# ── Basic installation ───────────────────────────────────────────────


class TestInstall:
    def test_installs_into_default_location(self, workflow, variant, target_dir):
        result = install_workflow(workflow, variant, InstallOptions(target_path=str(target_dir)))

        assert result.success is True
        assert "Successfully installed" in result.message
        assert result.details.created is True
        assert result.details.overwritten is False

        target = _expected_target(target_dir)
        assert target.read_bytes() == Path(variant.filepath).read_bytes()

    def test_result_details_paths(self, workflow, variant, target_dir):
        result = install_workflow(workflow, variant, InstallOptions(target_path=str(target_dir)))

        assert result.details.source_file == variant.filepath
        assert result.details.target_file == str(_expected_target(target_dir).resolve())

    def test_declared_relative_path(self, workflow, variant, target_dir):
        custom = variant.model_copy(update={"install_relative_path": "ci/pipelines/main.yml"})
        result = install_workflow(workflow, custom, InstallOptions(target_path=str(target_dir)))

        assert result.success is True
        assert (target_dir / "ci" / "pipelines" / "main.yml").read_text() == SOURCE_CONTENT

    def test_defaults_to_current_directory(self, workflow, variant, target_dir, monkeypatch):
        monkeypatch.chdir(target_dir)
        result = install_workflow(workflow, variant)

        assert result.success is True
        assert _expected_target(target_dir).exists()

    def test_target_file_for(self, variant, tmp_path):
        assert target_file_for(variant, tmp_path) == (
            tmp_path / ".github" / "workflows" / "test-workflow.yml"
        ).resolve()


# ── Overwrite behavior ───────────────────────────────────────────────


class TestOverwrite:
    def test_existing_file_without_force_fails(self, workflow, variant, target_dir):
        options = InstallOptions(target_path=str(target_dir))
        install_workflow(workflow, variant, options)
        target = _expected_target(target_dir)
        target.write_text("locally edited\n")

        result = install_workflow(workflow, variant, options)

        assert result.success is False
        assert "already exists" in result.message
        assert "--force" in result.message
        assert str(target.resolve()) in result.message
        assert result.details is None
        assert target.read_text() == "locally edited\n"

    def test_force_overwrites_with_current_source(self, workflow, variant, target_dir):
        install_workflow(workflow, variant, InstallOptions(target_path=str(target_dir)))
        Path(variant.filepath).write_text("name: Modified Workflow\n")

        result = install_workflow(
            workflow, variant, InstallOptions(target_path=str(target_dir), force=True)
        )

        assert result.success is True
        assert result.details.overwritten is True
        assert result.details.created is False
        assert _expected_target(target_dir).read_text() == "name: Modified Workflow\n"


# ── Dry run ──────────────────────────────────────────────────────────


class TestDryRun:
    def test_dry_run_writes_nothing(self, workflow, variant, target_dir):
        result = install_workflow(
            workflow, variant, InstallOptions(target_path=str(target_dir), dry_run=True)
        )

        assert result.success is True
        assert "Would install" in result.message
        assert result.details.created is True
        assert not _expected_target(target_dir).exists()
        assert not (target_dir / ".github").exists()

    def test_dry_run_reports_overwrite(self, workflow, variant, target_dir):
        install_workflow(workflow, variant, InstallOptions(target_path=str(target_dir)))

        result = install_workflow(
            workflow,
            variant,
            InstallOptions(target_path=str(target_dir), dry_run=True, force=True),
        )

        assert result.success is True
        assert result.details.overwritten is True
        assert result.details.created is False

    def test_dry_run_on_existing_file_without_force(self, workflow, variant, target_dir):
        install_workflow(workflow, variant, InstallOptions(target_path=str(target_dir)))

        result = install_workflow(
            workflow, variant, InstallOptions(target_path=str(target_dir), dry_run=True)
        )

        assert result.success is True
        assert result.details.created is False
        assert result.details.overwritten is False


# ── Error handling ───────────────────────────────────────────────────


class TestErrors:
    def test_missing_source_file(self, workflow, variant, target_dir):
        missing = variant.model_copy(update={"filepath": str(target_dir / "nope.yml")})
        result = install_workflow(workflow, missing, InstallOptions(target_path=str(target_dir)))

        assert result.success is False
        assert result.message.startswith("Failed to install workflow:")
        assert not _expected_target(target_dir).exists()

    def test_missing_source_fails_dry_run_too(self, workflow, variant, target_dir):
        missing = variant.model_copy(update={"filepath": str(target_dir / "nope.yml")})
        result = install_workflow(
            workflow, missing, InstallOptions(target_path=str(target_dir), dry_run=True)
        )
        assert result.success is False

    def test_unwritable_target_is_reported(self, workflow, variant, target_dir):
        # A regular file where the .github directory should be.
        (target_dir / ".github").write_text("not a directory")

        result = install_workflow(workflow, variant, InstallOptions(target_path=str(target_dir)))

        assert result.success is False
        assert result.message


# ── Batch ────────────────────────────────────────────────────────────


class TestBatch:
    def test_failure_does_not_stop_or_undo(self, workflow, variant, target_dir, source_dir):
        (source_dir / "second.yml").write_text("name: Second\n")
        second = variant.model_copy(update={"filename": "second.yml", "filepath": str(source_dir / "second.yml")})
        broken = variant.model_copy(update={"filename": "broken.yml", "filepath": str(source_dir / "missing.yml")})

        rows = [
            VariantRow.from_pair(workflow, variant),
            VariantRow.from_pair(workflow, broken),
            VariantRow.from_pair(workflow, second),
        ]
        batch = install_batch(rows, InstallOptions(target_path=str(target_dir)))

        assert [r.success for r in batch.results] == [True, False, True]
        assert batch.succeeded == 2
        assert batch.total == 3
        assert batch.summary == "Batch install complete: 2/3 succeeded"
        workflows_dir = target_dir / ".github" / "workflows"
        assert (workflows_dir / "test-workflow.yml").exists()
        assert (workflows_dir / "second.yml").exists()
        assert not (workflows_dir / "broken.yml").exists()

    def test_dry_run_summary(self, workflow, variant, target_dir):
        batch = install_batch(
            [VariantRow.from_pair(workflow, variant)],
            InstallOptions(target_path=str(target_dir), dry_run=True),
        )
        assert batch.summary == "Dry-run complete: 1/1 ready"
        assert not (target_dir / ".github").exists()
