"""
Catalog Models — Shared Pydantic models for the workflow catalog.

Defines the core data structures produced by discovery and consumed by
the CLI and the installer:
  - Category: One top-level catalog directory
  - Workflow: A logical installable unit (category + workflow type)
  - WorkflowVariant: One source file implementing a workflow
  - WorkflowMetadata: Display metadata taken from the representative file
  - ParsedMetadata: Normalized result of reading a file's comment header
  - VariantRow: Flattened (workflow, variant) pair for batch selection
  - InstallOptions / InstallResult / BatchInstallResult: Installer contract
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field


# ── Enumerations ─────────────────────────────────────────────────────


class WorkflowType(str, enum.Enum):
    """How much work a workflow needs before it runs."""

    SET = "set"  # Ready to run
    TEMPLATE = "template"  # Requires edits


class Toolchain(str, enum.Enum):
    """Execution environment a variant assumes."""

    STANDARD = "standard"
    NIX = "nix"


STANDARD_VARIANT = "standard"
NIX_VARIANT = "nix"
DEFAULT_SETUP_TIME = "0 minutes"


# ── Metadata Records ─────────────────────────────────────────────────


class SecretRequirement(BaseModel):
    """A repository secret the workflow expects."""

    name: str
    description: str = ""
    required: bool = True
    documentation_url: str | None = None


class InputParameter(BaseModel):
    """A configuration input the workflow accepts."""

    name: str
    description: str = ""
    default: str | None = None
    required: bool = False


class Trigger(BaseModel):
    """An event that starts the workflow (e.g. push, pull_request)."""

    event: str
    types: list[str] | None = None


class VariantMeta(BaseModel):
    """Per-variant description override declared in a file header."""

    name: str
    description: str = ""


class ParsedMetadata(BaseModel):
    """
    Normalized metadata extracted from a single file.

    Only fields actually found in the file end up in ``model_fields_set``;
    assembly relies on that to tell an explicit ``type`` from the default.
    """

    id: str | None = None
    category: str | None = None
    type: WorkflowType = WorkflowType.SET
    name: str
    description: str | None = None
    secrets: list[SecretRequirement] = Field(default_factory=list)
    triggers: list[Trigger] = Field(default_factory=list)
    variants: list[VariantMeta] = Field(default_factory=list)
    target_path: str | None = None
    inputs: list[InputParameter] = Field(default_factory=list)
    estimated_setup_time: str | None = None

    @property
    def declares_type(self) -> bool:
        return "type" in self.model_fields_set

    def variant_description(self, variant_name: str) -> str | None:
        for variant in self.variants:
            if variant.name == variant_name:
                return variant.description
        return None


class WorkflowMetadata(BaseModel):
    """Display metadata for a workflow."""

    name: str
    description: str = ""
    secrets: list[SecretRequirement] = Field(default_factory=list)
    inputs: list[InputParameter] = Field(default_factory=list)
    triggers: list[Trigger] = Field(default_factory=list)
    estimated_setup_time: str = DEFAULT_SETUP_TIME


# ── Catalog Records ──────────────────────────────────────────────────


class Category(BaseModel):
    """A top-level catalog directory. Immutable once discovered."""

    model_config = ConfigDict(frozen=True)

    id: str  # Directory name (e.g. "code-quality")
    name: str  # Human-readable title (e.g. "Code Quality")
    description: str = ""
    path: str


class WorkflowVariant(BaseModel):
    """One source file implementing a workflow."""

    name: str
    filename: str
    filepath: str
    install_relative_path: str | None = None
    toolchain: Toolchain = Toolchain.STANDARD
    description: str = ""


class Workflow(BaseModel):
    """
    A logical installable unit.

    ``id`` is ``"<category.id>/<workflow_type>"`` and is unique within one
    registry load. Variants are ordered standard first, nix last.
    """

    id: str
    category: Category
    workflow_type: str
    type: WorkflowType
    variants: list[WorkflowVariant] = Field(default_factory=list)
    metadata: WorkflowMetadata

    def variant_names(self) -> list[str]:
        return [v.name for v in self.variants]

    def find_variant(self, name: str) -> WorkflowVariant | None:
        for variant in self.variants:
            if variant.name == name:
                return variant
        return None


class VariantRow(BaseModel):
    """A (workflow, variant) pair, the unit of batch selection."""

    id: str  # "<workflow.id>:<variant.name>"
    category_id: str
    workflow_type: str
    workflow: Workflow
    variant: WorkflowVariant

    @classmethod
    def from_pair(cls, workflow: Workflow, variant: WorkflowVariant) -> VariantRow:
        return cls(
            id=f"{workflow.id}:{variant.name}",
            category_id=workflow.category.id,
            workflow_type=workflow.workflow_type,
            workflow=workflow,
            variant=variant,
        )


# ── Installation ─────────────────────────────────────────────────────


class InstallOptions(BaseModel):
    """Where and how to install a variant."""

    target_path: str = "."
    force: bool = False
    dry_run: bool = False


class InstallDetails(BaseModel):
    source_file: str
    target_file: str
    created: bool
    overwritten: bool


class InstallResult(BaseModel):
    """Outcome of a single install. Failures are data, never exceptions."""

    success: bool
    message: str
    details: InstallDetails | None = None


class BatchInstallResult(BaseModel):
    """Outcome of a sequential multi-variant install (no rollback)."""

    results: list[InstallResult] = Field(default_factory=list)
    dry_run: bool = False

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def summary(self) -> str:
        if self.dry_run:
            return f"Dry-run complete: {self.succeeded}/{self.total} ready"
        return f"Batch install complete: {self.succeeded}/{self.total} succeeded"
