"""
WorkflowRegistry — Loads and queries the workflow catalog.

The registry:
  1. Resolves the catalog root (explicit path, ACTIONFLOW_WORKFLOWS_ROOT,
     or the first existing candidate from ``config.candidate_roots()``)
  2. Discovers categories and their workflows in one pass (see discovery.py)
  3. Provides read-only lookup and filtering over the loaded catalog

The catalog is rebuilt wholesale on every ``load()``; there is no
incremental mutation. ``load()`` clears and repopulates the same mappings,
so concurrent reloads of one instance must be serialized by the caller.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from actionflow.config import get_settings, resolve_workflows_root
from actionflow.discovery import discover_categories, discover_workflows
from actionflow.errors import VariantNotFoundError, WorkflowNotFoundError
from actionflow.models import (
    STANDARD_VARIANT,
    Category,
    VariantRow,
    Workflow,
    WorkflowType,
    WorkflowVariant,
)

logger = structlog.get_logger(__name__)


class WorkflowRegistry:
    """
    Owns the in-memory catalog: categories and workflows keyed by id.

    Usage:
        registry = WorkflowRegistry("path/to/workflows")
        registry.load()

        workflow = registry.get_workflow("ci/build")
        nix_sets = registry.filter_workflows(type="set", variant="nix")
    """

    def __init__(self, workflows_root: str | Path | None = None):
        self._workflows: dict[str, Workflow] = {}
        self._categories: dict[str, Category] = {}
        if workflows_root is None:
            workflows_root = resolve_workflows_root(get_settings().workflows_root)
        self._workflows_root = Path(workflows_root)

    @property
    def workflows_root(self) -> Path:
        return self._workflows_root

    # ── Loading ───────────────────────────────────────────────────────

    def load(self) -> list[str]:
        """
        Rebuild the catalog from disk.

        Returns the list of loaded workflow ids. A missing or empty root
        yields an empty catalog.
        """
        self._workflows.clear()
        self._categories.clear()

        for category in discover_categories(self._workflows_root):
            self._categories[category.id] = category
            for workflow in discover_workflows(category):
                self._workflows[workflow.id] = workflow

        logger.info(
            "workflows_loaded",
            root=str(self._workflows_root),
            categories=len(self._categories),
            count=len(self._workflows),
        )
        return list(self._workflows.keys())

    # ── Lookup ────────────────────────────────────────────────────────

    def get_workflows(self) -> list[Workflow]:
        return list(self._workflows.values())

    def get_workflow(self, workflow_id: str) -> Workflow | None:
        """Get a workflow by its id, or None."""
        return self._workflows.get(workflow_id)

    def get_or_raise(self, workflow_id: str) -> Workflow:
        """Get a workflow by id or raise WorkflowNotFoundError."""
        workflow = self._workflows.get(workflow_id)
        if workflow is None:
            raise WorkflowNotFoundError(
                f"Workflow '{workflow_id}' not found.",
                workflow_id=workflow_id,
                available=list(self._workflows.keys()),
            )
        return workflow

    def get_variant(self, workflow: Workflow, name: str | None = None) -> WorkflowVariant:
        """
        Pick a variant of a workflow.

        With no name, the ``standard`` variant is preferred and the first
        variant is the fallback. A given name must match exactly.
        """
        if name is None:
            variant = workflow.find_variant(STANDARD_VARIANT)
            if variant is None and workflow.variants:
                variant = workflow.variants[0]
        else:
            variant = workflow.find_variant(name)

        if variant is None:
            requested = name or STANDARD_VARIANT
            raise VariantNotFoundError(
                f"Variant '{requested}' not found for workflow '{workflow.id}'.",
                workflow_id=workflow.id,
                variant=requested,
                available=workflow.variant_names(),
            )
        return variant

    def get_categories(self) -> list[Category]:
        return list(self._categories.values())

    # ── Queries ───────────────────────────────────────────────────────

    def filter_workflows(
        self,
        *,
        category: str | None = None,
        type: WorkflowType | str | None = None,
        variant: str | None = None,
    ) -> list[Workflow]:
        """
        Workflows matching every given predicate.

        category: exact category id
        type: exact workflow type ("set" or "template")
        variant: the workflow has at least one variant with this name
        """
        wanted_type = None
        if type:
            try:
                wanted_type = WorkflowType(type)
            except ValueError:
                # No workflow can carry an unknown type.
                return []

        results = []
        for workflow in self._workflows.values():
            if category and workflow.category.id != category:
                continue
            if wanted_type and workflow.type != wanted_type:
                continue
            if variant and workflow.find_variant(variant) is None:
                continue
            results.append(workflow)
        return results

    def get_variant_rows(self, category: str | None = None) -> list[VariantRow]:
        """One row per (workflow, variant), optionally limited to a category."""
        return [
            VariantRow.from_pair(workflow, variant)
            for workflow in self.filter_workflows(category=category)
            for variant in workflow.variants
        ]

    @property
    def count(self) -> int:
        return len(self._workflows)
