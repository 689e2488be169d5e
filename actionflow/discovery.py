"""
Hierarchy Discoverer — Walks the catalog tree and builds Workflow records.

Discovery convention:
  workflows/
    ci/                          # Category "ci" (name "Ci")
      build/                     # New layout: workflow type "build"
        build.yml                #   variant "standard"
        build-nix.yml            #   variant "nix"
      sets/                      # Legacy layout: ready-to-run workflows
        ci-lint.yml              #   workflow type "lint"
      templates/                 # Legacy layout: workflows requiring edits
        ci-deploy.yml            #   workflow type "deploy"

Both layouts may coexist in one category. The new layout is scanned first
and wins when both produce the same workflow id. Missing or unreadable
directories contribute nothing; they are never an error.
"""

from __future__ import annotations

import os
from pathlib import Path

import structlog

from actionflow.grouping import VariantFile, group_by_base_name, sort_variants
from actionflow.metadata import YAML_SUFFIX_RE, extract_metadata
from actionflow.models import (
    DEFAULT_SETUP_TIME,
    NIX_VARIANT,
    STANDARD_VARIANT,
    Category,
    Toolchain,
    Workflow,
    WorkflowMetadata,
    WorkflowType,
    WorkflowVariant,
)

logger = structlog.get_logger(__name__)

# Legacy subdirectories and the workflow type they imply, in scan order.
LEGACY_DIRS: tuple[tuple[str, WorkflowType], ...] = (
    ("sets", WorkflowType.SET),
    ("templates", WorkflowType.TEMPLATE),
)
RESERVED_DIRS = frozenset(name for name, _ in LEGACY_DIRS)

NIX_DESCRIPTION = "Uses Nix for reproducible environment"
STANDARD_DESCRIPTION = "Uses standard GitHub Actions"


# ── Naming helpers ───────────────────────────────────────────────────


def format_category_name(identifier: str) -> str:
    """``code-quality`` → ``Code Quality``."""
    return " ".join(word[:1].upper() + word[1:] for word in identifier.split("-"))


def derive_workflow_type(base_name: str, category_id: str) -> str:
    """Strip a redundant ``<category>-`` prefix from a legacy file's base name."""
    if base_name == category_id:
        return category_id
    prefix = f"{category_id}-"
    if base_name.startswith(prefix):
        return base_name[len(prefix) :]
    return base_name


# ── Categories ───────────────────────────────────────────────────────


def discover_categories(root: str | Path) -> list[Category]:
    """
    One Category per subdirectory of the catalog root.

    Hidden directories (.git, .github) are not categories.
    """
    entries = _list_dir(Path(root))
    if entries is None:
        logger.warning("workflows_root_not_found", path=str(root))
        return []

    categories = []
    for entry in entries:
        if not entry.is_dir():
            continue
        if entry.name.startswith("."):
            continue
        categories.append(
            Category(
                id=entry.name,
                name=format_category_name(entry.name),
                description="",
                path=str(entry),
            )
        )
    return categories


# ── Workflows ────────────────────────────────────────────────────────


def discover_workflows(category: Category) -> list[Workflow]:
    """
    Discover every workflow of a category, ordered by workflow type.

    New layout first, then legacy; the legacy pass skips ids already taken.
    """
    workflows: dict[str, Workflow] = {}
    _discover_new_hierarchy(category, workflows)
    _discover_legacy_hierarchy(category, workflows)

    discovered = sorted(workflows.values(), key=lambda w: w.workflow_type)
    logger.debug(
        "category_workflows_discovered",
        category=category.id,
        count=len(discovered),
    )
    return discovered


def _discover_new_hierarchy(category: Category, workflows: dict[str, Workflow]) -> None:
    """Every non-reserved subdirectory of the category is a workflow type."""
    entries = _list_dir(Path(category.path))
    if entries is None:
        return

    for entry in entries:
        if not entry.is_dir() or entry.name in RESERVED_DIRS:
            continue

        yaml_files = _yaml_files(entry)
        if not yaml_files:
            continue

        for files in group_by_base_name(yaml_files).values():
            workflow = assemble_workflow(
                category=category,
                workflow_type=entry.name,
                default_type=WorkflowType.SET,
                files=files,
                root_path=entry,
            )
            if workflow is None:
                continue
            if workflow.id in workflows:
                # Several base names in one type directory share an id.
                logger.warning(
                    "workflow_id_replaced",
                    workflow_id=workflow.id,
                    file=workflow.variants[0].filename,
                )
            workflows[workflow.id] = workflow


def _discover_legacy_hierarchy(category: Category, workflows: dict[str, Workflow]) -> None:
    """Flat ``sets/`` and ``templates/`` directories."""
    for dirname, implied_type in LEGACY_DIRS:
        type_path = Path(category.path) / dirname
        yaml_files = _yaml_files(type_path)
        if not yaml_files:
            continue

        for base_name, files in group_by_base_name(yaml_files).items():
            workflow_type = derive_workflow_type(base_name, category.id)
            workflow_id = f"{category.id}/{workflow_type}"
            if workflow_id in workflows:
                logger.debug(
                    "legacy_workflow_shadowed",
                    workflow_id=workflow_id,
                    path=str(type_path),
                )
                continue

            workflow = assemble_workflow(
                category=category,
                workflow_type=workflow_type,
                default_type=implied_type,
                files=files,
                root_path=type_path,
            )
            if workflow is not None:
                workflows[workflow.id] = workflow


# ── Assembly ─────────────────────────────────────────────────────────


def assemble_workflow(
    *,
    category: Category,
    workflow_type: str,
    default_type: WorkflowType,
    files: list[VariantFile],
    root_path: Path,
) -> Workflow | None:
    """
    Build one Workflow from a group of variant files.

    Metadata comes from the representative file: the ``standard`` variant
    if present, else the first file of the group. Returns None when the
    group is empty or the representative file cannot be read.
    """
    representative = next((f for f in files if f.variant_name == STANDARD_VARIANT), None)
    if representative is None:
        representative = files[0] if files else None
    if representative is None:
        return None

    source = root_path / representative.file
    try:
        content = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("workflow_file_unreadable", path=str(source), error=str(e))
        return None

    metadata = extract_metadata(content, representative.file)
    resolved_type = metadata.type if metadata.declares_type else default_type

    variants = []
    for entry in files:
        is_nix = entry.variant_name == NIX_VARIANT
        description = metadata.variant_description(entry.variant_name)
        if description is None:
            description = NIX_DESCRIPTION if is_nix else STANDARD_DESCRIPTION
        variants.append(
            WorkflowVariant(
                name=entry.variant_name,
                filename=entry.file,
                filepath=str(root_path / entry.file),
                install_relative_path=metadata.target_path,
                toolchain=Toolchain.NIX if is_nix else Toolchain.STANDARD,
                description=description,
            )
        )

    return Workflow(
        id=f"{category.id}/{workflow_type}",
        category=category,
        workflow_type=workflow_type,
        type=resolved_type,
        variants=sort_variants(variants),
        metadata=WorkflowMetadata(
            name=metadata.name,
            description=metadata.description or "",
            secrets=metadata.secrets,
            inputs=metadata.inputs,
            triggers=metadata.triggers,
            estimated_setup_time=metadata.estimated_setup_time or DEFAULT_SETUP_TIME,
        ),
    )


# ── Filesystem helpers ───────────────────────────────────────────────


def _list_dir(path: Path) -> list[Path] | None:
    """Sorted directory entries, or None if the directory can't be read."""
    try:
        with os.scandir(path) as it:
            names = sorted(entry.name for entry in it)
    except OSError:
        return None
    return [path / name for name in names]


def _yaml_files(path: Path) -> list[str] | None:
    entries = _list_dir(path)
    if entries is None:
        return None
    return [e.name for e in entries if YAML_SUFFIX_RE.search(e.name) and e.is_file()]
