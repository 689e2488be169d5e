"""
Variant Grouper — Groups sibling files into one logical workflow.

``build.yml`` and ``build-nix.yml`` in the same directory are two variants
(``standard`` and ``nix``) of the workflow ``build``. There is no fixed list
of suffixes: ``name-suffix`` is a variant of ``name`` whenever ``name`` itself
exists as a file in the same set.
"""

from __future__ import annotations

from typing import Iterable, NamedTuple

import structlog

from actionflow.metadata import strip_yaml_suffix
from actionflow.models import NIX_VARIANT, STANDARD_VARIANT, WorkflowVariant

logger = structlog.get_logger(__name__)


class VariantFile(NamedTuple):
    file: str
    variant_name: str


def group_by_base_name(filenames: Iterable[str]) -> dict[str, list[VariantFile]]:
    """
    Map each base name to its files, in the order given.

    Callers pass sorted filenames so that "first file in the group" is
    stable across platforms. When two files map to the same variant
    (``x.yml`` and ``x.yaml``) the first one wins and the other is dropped.
    """
    files = list(filenames)
    names = {strip_yaml_suffix(f) for f in files}
    groups: dict[str, list[VariantFile]] = {}

    for file in files:
        name = strip_yaml_suffix(file)
        base_name, variant_name = name, STANDARD_VARIANT

        dash = name.rfind("-")
        if dash > 0:
            candidate_base = name[:dash]
            candidate_variant = name[dash + 1 :]
            if candidate_base in names and candidate_variant:
                base_name, variant_name = candidate_base, candidate_variant

        group = groups.setdefault(base_name, [])
        taken = next((v for v in group if v.variant_name == variant_name), None)
        if taken is not None:
            logger.warning(
                "duplicate_variant_file",
                base_name=base_name,
                variant=variant_name,
                kept=taken.file,
                dropped=file,
            )
            continue
        group.append(VariantFile(file, variant_name))

    return groups


def variant_sort_weight(name: str) -> int:
    """standard first, named variants next, nix last."""
    if name == STANDARD_VARIANT:
        return 0
    if name == NIX_VARIANT:
        return 99
    return 10


def sort_variants(variants: Iterable[WorkflowVariant]) -> list[WorkflowVariant]:
    return sorted(variants, key=lambda v: (variant_sort_weight(v.name), v.name))
