#!/usr/bin/env python3
"""
ActionFlow CLI — Browse and install CI workflow files from the catalog.

Usage:
    actionflow list [--category ci] [--type set] [--variant nix] [--json]
    actionflow inspect ci/build [--variant nix] [--raw]
    actionflow install ci/build [--variant nix] [--force] [--dry-run] [--target PATH]
    actionflow install ci/build ci/lint --dry-run     # batch, one file at a time

Global options:
    --root PATH        Catalog root (overrides ACTIONFLOW_WORKFLOWS_ROOT)
    --log-level LEVEL  DEBUG, INFO, WARNING or ERROR
"""

import argparse
import json
import sys
from pathlib import Path

from actionflow.config import get_settings
from actionflow.errors import LookupFailedError
from actionflow.installer import install_batch, install_workflow
from actionflow.logging import LOG_LEVELS, setup_logging
from actionflow.models import InstallOptions, VariantRow, Workflow, WorkflowType
from actionflow.registry import WorkflowRegistry
from actionflow.version import APP_NAME, VERSION

SECRETS_HINT = "Configure at: Settings → Secrets and variables → Actions"


# ── list ──────────────────────────────────────────────────────────────


def cmd_list(registry: WorkflowRegistry, args: argparse.Namespace) -> int:
    workflows = registry.filter_workflows(
        category=args.category,
        type=args.type,
        variant=args.variant,
    )

    if not workflows:
        print("No workflows found matching the criteria.")
        return 0

    if args.json:
        print(json.dumps([w.model_dump(mode="json") for w in workflows], indent=2))
        return 0

    header = f"{'Category':<15} {'Type':<10} {'Workflow':<30} Variants"
    print(header)
    print("─" * len(header))
    for workflow in workflows:
        print(
            f"{workflow.category.id:<15} "
            f"{workflow.type.value:<10} "
            f"{workflow.metadata.name:<30} "
            f"{', '.join(workflow.variant_names())}"
        )
    print(f"\nTotal: {len(workflows)} workflow(s)")
    return 0


# ── inspect ───────────────────────────────────────────────────────────


def cmd_inspect(registry: WorkflowRegistry, args: argparse.Namespace) -> int:
    workflow = registry.get_or_raise(args.workflow_id)
    variant = registry.get_variant(workflow, args.variant)

    if args.raw:
        print(Path(variant.filepath).read_text(encoding="utf-8"), end="")
        return 0

    meta = workflow.metadata
    print(f"\n{meta.name}\n{'═' * max(len(meta.name), 20)}\n")
    print(f"ID: {workflow.id}")
    print(f"Category: {workflow.category.id}")
    print(f"Type: {_type_label(workflow.type)}")

    print("\nDescription:")
    print(f"  {meta.description or 'No description available'}")

    print("\nVariants:")
    for v in workflow.variants:
        prefix = "→ " if v.name == variant.name else "  "
        print(f"{prefix}{v.name}: {v.description}")

    print("\nTriggers:")
    if meta.triggers:
        for trigger in meta.triggers:
            types = f" ({', '.join(trigger.types)})" if trigger.types else ""
            print(f"  • {trigger.event}{types}")
    else:
        print("  No triggers specified")

    print("\nRequired Secrets:")
    if meta.secrets:
        for secret in meta.secrets:
            status = "(required)" if secret.required else "(optional)"
            print(f"  • {secret.name} {status}")
            print(f"    {secret.description}")
            if secret.documentation_url:
                print(f"    {secret.documentation_url}")
        print(f"\n  → {SECRETS_HINT}")
    else:
        print("  None required")

    if meta.inputs:
        print("\nConfiguration Inputs:")
        for item in meta.inputs:
            required = " (required)" if item.required else ""
            default = f" [default: {item.default}]" if item.default else ""
            print(f"  • {item.name}{required}{default}")
            print(f"    {item.description}")

    print(f"\nSetup Time: {meta.estimated_setup_time}\n")
    return 0


# ── install ───────────────────────────────────────────────────────────


def cmd_install(registry: WorkflowRegistry, args: argparse.Namespace) -> int:
    # Resolve everything first so a typo installs nothing.
    rows = []
    for workflow_id in args.workflow_ids:
        workflow = registry.get_or_raise(workflow_id)
        rows.append(VariantRow.from_pair(workflow, registry.get_variant(workflow, args.variant)))

    options = InstallOptions(target_path=args.target, force=args.force, dry_run=args.dry_run)

    if len(rows) > 1:
        batch = install_batch(rows, options)
        for row, result in zip(rows, batch.results):
            mark = "✓" if result.success else "✗"
            print(f"  {mark} {row.id}: {result.message}")
        print(f"\n{batch.summary}")
        return 0 if batch.succeeded == batch.total else 1

    row = rows[0]
    result = install_workflow(row.workflow, row.variant, options)
    if not result.success:
        print(f"✗ {result.message}", file=sys.stderr)
        return 1

    print(f"✓ {result.message}")
    _print_install_notes(row.workflow, result.details.target_file if result.details else "")
    if args.dry_run:
        print("\nNo changes were made.")
    return 0


def _print_install_notes(workflow: Workflow, target_file: str) -> None:
    print(f"Type: {_type_label(workflow.type)}")
    print(f"Location: {target_file}")

    if workflow.metadata.secrets:
        print("\n⚠️  Required secrets:")
        for secret in workflow.metadata.secrets:
            print(f"   • {secret.name} - {secret.description}")
        print(f"\n   {SECRETS_HINT}")

    if workflow.type == WorkflowType.TEMPLATE:
        print("\n⚠️  This is a template workflow.")
        print("   You must edit the file before it will run successfully.")


def _type_label(workflow_type: WorkflowType) -> str:
    if workflow_type == WorkflowType.SET:
        return "set (ready-to-run)"
    return "template (requires edits)"


# ── Entry point ───────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="actionflow",
        description="Install GitHub Actions workflows from a local catalog",
    )
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {VERSION}")
    parser.add_argument("--root", help="Catalog root directory")
    parser.add_argument("--log-level", choices=sorted(LOG_LEVELS), help="Log verbosity")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List available workflows")
    list_parser.add_argument("-c", "--category", help="Filter by category id")
    list_parser.add_argument(
        "-t",
        "--type",
        choices=[t.value for t in WorkflowType],
        help="Filter by type",
    )
    list_parser.add_argument("-v", "--variant", help="Filter by variant name")
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")
    list_parser.set_defaults(handler=cmd_list)

    inspect_parser = subparsers.add_parser("inspect", help="Show details about a workflow")
    inspect_parser.add_argument("workflow_id", help="Workflow id (e.g. ci/build)")
    inspect_parser.add_argument("-v", "--variant", help="Variant to show")
    inspect_parser.add_argument("-r", "--raw", action="store_true", help="Print the raw YAML")
    inspect_parser.set_defaults(handler=cmd_inspect)

    install_parser = subparsers.add_parser("install", help="Install workflows into a repository")
    install_parser.add_argument("workflow_ids", nargs="+", metavar="workflow_id")
    install_parser.add_argument("-v", "--variant", help="Variant to install (default: standard)")
    install_parser.add_argument("-f", "--force", action="store_true", help="Overwrite existing files")
    install_parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        help="Show what would be installed without making changes",
    )
    install_parser.add_argument("-t", "--target", default=".", help="Target repository path")
    install_parser.set_defaults(handler=cmd_install)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    setup_logging(level=args.log_level or settings.log_level, json_output=settings.log_json)

    registry = WorkflowRegistry(args.root)
    registry.load()

    try:
        return args.handler(registry, args)
    except LookupFailedError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.available:
            print("\nAvailable:", file=sys.stderr)
            for name in e.available:
                print(f"  • {name}", file=sys.stderr)
        return e.exit_code
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
