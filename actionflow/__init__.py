"""
ActionFlow — Local catalog and installer for CI workflow files.

Discovers workflow files organized by category, type and variant, reads
the metadata embedded in their leading comments, and installs a chosen
variant into a target repository.
"""

from actionflow.errors import ActionFlowError, VariantNotFoundError, WorkflowNotFoundError
from actionflow.installer import install_batch, install_workflow
from actionflow.metadata import ExtractionSource, extract_metadata, parse_header
from actionflow.models import (
    BatchInstallResult,
    Category,
    InstallOptions,
    InstallResult,
    ParsedMetadata,
    VariantRow,
    Workflow,
    WorkflowMetadata,
    WorkflowType,
    WorkflowVariant,
)
from actionflow.registry import WorkflowRegistry

__all__ = [
    # Catalog
    "WorkflowRegistry",
    "Category",
    "Workflow",
    "WorkflowMetadata",
    "WorkflowType",
    "WorkflowVariant",
    "VariantRow",
    # Metadata extraction
    "ParsedMetadata",
    "ExtractionSource",
    "extract_metadata",
    "parse_header",
    # Installation
    "InstallOptions",
    "InstallResult",
    "BatchInstallResult",
    "install_workflow",
    "install_batch",
    # Errors
    "ActionFlowError",
    "WorkflowNotFoundError",
    "VariantNotFoundError",
]
