"""
Metadata Extractor — Reads the comment header of a workflow file.

Two encodings are supported, tried in order:

  1. Front-matter: a YAML document wrapped in comment lines, opened by
     ``# ---`` on the first line and closed by another ``# ---`` line::

         # ---
         # name: Build
         # type: set
         # secrets:
         #   - name: CACHIX_AUTH_TOKEN
         #     description: Push to the binary cache
         # ---

  2. Inline: individual ``# key: value`` lines in the leading comment header,
     a ``# triggers: [push, pull_request]`` list, and ``# secrets:`` /
     ``# variants:`` blocks made of ``#   - name: X`` / ``#     description: Y``
     sub-entries. A block ends at the next top-level key or a blank line.

Both paths are lenient: a file with no recognizable metadata still yields a
record built from filename defaults, and nothing here raises on bad input.

Public API::

    from actionflow.metadata import extract_metadata, parse_header

    meta = extract_metadata(text, "build.yml")        # → ParsedMetadata
    result = parse_header(text, "build.yml")          # → ExtractionResult
    result.source                                     # front_matter | inline | empty
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Any

import structlog
import yaml

from actionflow.models import (
    InputParameter,
    ParsedMetadata,
    SecretRequirement,
    Trigger,
    VariantMeta,
    WorkflowType,
)

logger = structlog.get_logger(__name__)

YAML_SUFFIX_RE = re.compile(r"\.ya?ml$")

_FRONT_MATTER_RE = re.compile(
    r"\A# ---[ \t]*\r?\n(.*?)\r?\n# ---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)
_COMMENT_PREFIX_RE = re.compile(r"^#[ \t]?", re.MULTILINE)

# "# key: value" at the top level of the header (one optional space after #).
_KEY_LINE_RE = re.compile(r"^#\s?([A-Za-z][\w-]*):[ \t]*(.*)$")
_BRACKET_LIST_RE = re.compile(r"\[([^\]]*)\]")
_BLOCK_ITEM_RE = re.compile(r"^#\s+-\s*name:\s*(\S+)")
_BLOCK_FIELD_RE = re.compile(r"^#\s+([A-Za-z][\w-]*):\s*(.*)$")

_INLINE_SCALARS = {
    "id": "id",
    "category": "category",
    "type": "type",
    "name": "name",
    "description": "description",
    "targetPath": "target_path",
}

_TRUE_WORDS = {"true", "yes", "y", "on", "1"}
_FALSE_WORDS = {"false", "no", "n", "off", "0"}


class ExtractionSource(str, enum.Enum):
    """Which encoding produced the metadata."""

    FRONT_MATTER = "front_matter"
    INLINE = "inline"
    EMPTY = "empty"


@dataclass(frozen=True)
class ExtractionResult:
    source: ExtractionSource
    metadata: ParsedMetadata


def strip_yaml_suffix(filename: str) -> str:
    """``build-nix.yml`` → ``build-nix``."""
    return YAML_SUFFIX_RE.sub("", filename)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Public API
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def parse_header(content: str, filename: str) -> ExtractionResult:
    """
    Extract metadata from a file's text, reporting which encoding matched.

    Front-matter is tried first. If there is none, or it is not valid YAML,
    or it does not hold a mapping, the inline scan runs instead.
    """
    metadata = _from_front_matter(content, filename)
    if metadata is not None:
        return ExtractionResult(ExtractionSource.FRONT_MATTER, metadata)

    metadata, found = _from_inline_comments(content, filename)
    source = ExtractionSource.INLINE if found else ExtractionSource.EMPTY
    return ExtractionResult(source, metadata)


def extract_metadata(content: str, filename: str) -> ParsedMetadata:
    """Extract the normalized metadata record for a file."""
    return parse_header(content, filename).metadata


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Front-matter
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def _from_front_matter(content: str, filename: str) -> ParsedMetadata | None:
    match = _FRONT_MATTER_RE.match(content)
    if not match:
        return None

    yaml_text = _COMMENT_PREFIX_RE.sub("", match.group(1))
    try:
        data = yaml.safe_load(yaml_text)
    except yaml.YAMLError as e:
        logger.debug("front_matter_parse_failed", filename=filename, error=str(e))
        return None

    if data is None:
        data = {}
    if not isinstance(data, dict):
        logger.debug(
            "front_matter_not_mapping",
            filename=filename,
            got=type(data).__name__,
        )
        return None

    return _normalize(data, filename)


def _normalize(data: dict[str, Any], filename: str) -> ParsedMetadata:
    """Build a ParsedMetadata from loosely-typed YAML, field by field."""
    fields: dict[str, Any] = {}

    for key in ("id", "category", "description"):
        value = _text(data.get(key))
        if value is not None:
            fields[key] = value

    target_path = _text(_pick(data, "targetPath", "target_path"))
    if target_path is not None:
        fields["target_path"] = target_path

    setup_time = _text(_pick(data, "estimatedSetupTime", "estimated_setup_time"))
    if setup_time is not None:
        fields["estimated_setup_time"] = setup_time

    workflow_type = _workflow_type(data.get("type"), filename)
    if workflow_type is not None:
        fields["type"] = workflow_type

    if "secrets" in data:
        fields["secrets"] = _secrets(data["secrets"])
    if "triggers" in data:
        fields["triggers"] = _triggers(data["triggers"])
    if "variants" in data:
        fields["variants"] = _variants(data["variants"])
    if "inputs" in data:
        fields["inputs"] = _inputs(data["inputs"])

    name = _text(data.get("name")) or strip_yaml_suffix(filename)
    return ParsedMetadata(name=name, **fields)


def _secrets(value: Any) -> list[SecretRequirement]:
    secrets = []
    for name, entry in _named_entries(value):
        secrets.append(
            SecretRequirement(
                name=name,
                description=_text(entry.get("description")) or "",
                required=_flag(entry.get("required"), default=True),
                documentation_url=_text(_pick(entry, "documentationUrl", "documentation_url")),
            )
        )
    return secrets


def _variants(value: Any) -> list[VariantMeta]:
    return [
        VariantMeta(name=name, description=_text(entry.get("description")) or "")
        for name, entry in _named_entries(value)
    ]


def _inputs(value: Any) -> list[InputParameter]:
    return [
        InputParameter(
            name=name,
            description=_text(entry.get("description")) or "",
            default=_text(entry.get("default")),
            required=_flag(entry.get("required"), default=False),
        )
        for name, entry in _named_entries(value)
    ]


def _triggers(value: Any) -> list[Trigger]:
    """Accept a list, a comma string, or a GitHub-style ``on:`` mapping."""
    if isinstance(value, str):
        return [Trigger(event=event) for event in _split_list(value)]

    if isinstance(value, dict):
        triggers = []
        for event, options in value.items():
            types = options.get("types") if isinstance(options, dict) else None
            triggers.append(Trigger(event=str(event), types=_string_list(types)))
        return triggers

    if not isinstance(value, list):
        return []

    triggers = []
    for item in value:
        if isinstance(item, dict):
            event = _text(item.get("event"))
            if event:
                triggers.append(Trigger(event=event, types=_string_list(item.get("types"))))
        else:
            event = _text(item)
            if event:
                triggers.append(Trigger(event=event))
    return triggers


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Inline comments
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def _from_inline_comments(content: str, filename: str) -> tuple[ParsedMetadata, bool]:
    """Scan the leading comment header. Returns (metadata, anything_found)."""
    header = _comment_header(content)
    fields: dict[str, Any] = {}
    found = False

    for index, line in enumerate(header):
        match = _KEY_LINE_RE.match(line)
        if not match:
            continue
        key, value = match.group(1), match.group(2).strip()

        if key in ("secrets", "variants"):
            if key in fields:
                continue
            entries = _block_entries(header, index + 1)
            found = True
            if key == "secrets":
                fields["secrets"] = [
                    SecretRequirement(
                        name=name,
                        description=entry.get("description", ""),
                        required=_flag(entry.get("required"), default=True),
                        documentation_url=entry.get("documentationUrl") or None,
                    )
                    for name, entry in entries
                ]
            else:
                fields["variants"] = [
                    VariantMeta(name=name, description=entry.get("description", ""))
                    for name, entry in entries
                ]
            continue

        if key == "triggers":
            bracket = _BRACKET_LIST_RE.match(value)
            if bracket and "triggers" not in fields:
                fields["triggers"] = [Trigger(event=e) for e in _split_list(bracket.group(1))]
                found = True
            continue

        field = _INLINE_SCALARS.get(key)
        if field is None or field in fields or not value:
            continue
        found = True
        if field == "type":
            workflow_type = _workflow_type(value, filename)
            if workflow_type is not None:
                fields["type"] = workflow_type
        else:
            fields[field] = value

    fields.setdefault("name", strip_yaml_suffix(filename))
    return ParsedMetadata(**fields), found


def _comment_header(content: str) -> list[str]:
    """Leading lines up to the first non-blank, non-comment line (stripped)."""
    header = []
    for raw in content.splitlines():
        line = raw.strip()
        if line and not line.startswith("#"):
            break
        header.append(line)
    return header


def _block_entries(header: list[str], start: int) -> list[tuple[str, dict[str, str]]]:
    """Collect ``- name:`` sub-entries until a blank line or top-level key."""
    entries: list[tuple[str, dict[str, str]]] = []
    for line in header[start:]:
        if not line or _KEY_LINE_RE.match(line):
            break

        item = _BLOCK_ITEM_RE.match(line)
        if item:
            entries.append((item.group(1), {}))
            continue

        field = _BLOCK_FIELD_RE.match(line)
        if field and entries:
            entries[-1][1].setdefault(field.group(1), field.group(2).strip())
    return entries


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Coercion helpers
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def _pick(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _text(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def _flag(value: Any, *, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return default


def _split_list(text: str) -> list[str]:
    items = (part.strip().strip("'\"").strip() for part in text.split(","))
    return [item for item in items if item]


def _string_list(value: Any) -> list[str] | None:
    if isinstance(value, str):
        return _split_list(value) or None
    if isinstance(value, list):
        items = [str(v).strip() for v in value if v is not None and str(v).strip()]
        return items or None
    return None


def _workflow_type(value: Any, filename: str) -> WorkflowType | None:
    text = _text(value)
    if text is None:
        return None
    try:
        return WorkflowType(text.lower())
    except ValueError:
        logger.debug("unknown_workflow_type", filename=filename, value=text)
        return None


def _named_entries(value: Any) -> list[tuple[str, dict[str, Any]]]:
    """
    Normalize a bare name, list-of-mappings, list-of-names, or name→detail mappings
    into ``(name, detail_dict)`` pairs. Entries without a name are dropped.
    """
    if isinstance(value, dict):
        pairs = []
        for key, detail in value.items():
            name = _text(key)
            if not name:
                continue
            pairs.append((name, detail if isinstance(detail, dict) else {"description": detail}))
        return pairs

    if isinstance(value, str):
        name = _text(value)
        return [(name, {})] if name else []

    if not isinstance(value, list):
        return []

    pairs = []
    for item in value:
        if isinstance(item, dict):
            name = _text(item.get("name"))
            if name:
                pairs.append((name, item))
        else:
            name = _text(item)
            if name:
                pairs.append((name, {}))
    return pairs
