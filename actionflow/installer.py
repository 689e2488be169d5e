"""
Installer — Copies a workflow variant into a target repository.

Rules:
  - Target file is ``<target_path>/<install_relative_path>`` when the variant
    declares one, else ``<target_path>/.github/workflows/<filename>``
  - An existing target is only replaced with ``force``
  - ``dry_run`` reports what would happen and touches nothing
  - Every failure comes back as ``InstallResult(success=False)``

Batch installs run strictly one item at a time with no rollback: a failed
item neither undoes earlier ones nor stops later ones.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Iterable

import structlog

from actionflow.models import (
    BatchInstallResult,
    InstallDetails,
    InstallOptions,
    InstallResult,
    VariantRow,
    Workflow,
    WorkflowVariant,
)

logger = structlog.get_logger(__name__)

DEFAULT_INSTALL_DIR = Path(".github") / "workflows"


def target_file_for(variant: WorkflowVariant, target_path: str | Path = ".") -> Path:
    """Absolute path the variant would be installed to."""
    relative = variant.install_relative_path or DEFAULT_INSTALL_DIR / variant.filename
    return (Path(target_path) / relative).resolve()


def install_workflow(
    workflow: Workflow,
    variant: WorkflowVariant,
    options: InstallOptions | None = None,
) -> InstallResult:
    """
    Install one variant.

    Returns:
        InstallResult with ``details`` on success (including dry runs).
        Never raises for filesystem problems.
    """
    options = options or InstallOptions()
    label = f"{workflow.metadata.name} ({variant.name})"

    try:
        target_file = target_file_for(variant, options.target_path)
        exists = target_file.exists()

        if exists and not options.force and not options.dry_run:
            logger.info("install_conflict", workflow_id=workflow.id, target=str(target_file))
            return InstallResult(
                success=False,
                message=f"File already exists: {target_file}. Use --force to overwrite.",
            )

        source_file = Path(variant.filepath)
        # Read up front so a missing source fails dry runs too.
        source_file.read_bytes()

        details = InstallDetails(
            source_file=variant.filepath,
            target_file=str(target_file),
            created=not exists,
            overwritten=exists and options.force,
        )

        if options.dry_run:
            return InstallResult(
                success=True,
                message=f"Would install {label} to {target_file}",
                details=details,
            )

        target_file.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source_file, target_file)
    except OSError as e:
        logger.warning(
            "install_failed",
            workflow_id=workflow.id,
            variant=variant.name,
            error=str(e),
        )
        return InstallResult(success=False, message=f"Failed to install workflow: {e}")

    logger.info(
        "workflow_installed",
        workflow_id=workflow.id,
        variant=variant.name,
        target=details.target_file,
        overwritten=details.overwritten,
    )
    return InstallResult(
        success=True,
        message=f"Successfully installed {label}",
        details=details,
    )


def install_batch(
    rows: Iterable[VariantRow],
    options: InstallOptions | None = None,
) -> BatchInstallResult:
    """Install several variants sequentially, attempting every one."""
    options = options or InstallOptions()
    batch = BatchInstallResult(dry_run=options.dry_run)

    for row in rows:
        batch.results.append(install_workflow(row.workflow, row.variant, options))

    logger.info(
        "batch_install_complete",
        succeeded=batch.succeeded,
        total=batch.total,
        dry_run=batch.dry_run,
    )
    return batch
