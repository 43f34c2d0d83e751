"""Parsing of ``.gen`` score files.

A ``.gen`` file holds the notation first and a YAML metadata block at the
bottom, fenced by ``---`` lines::

    E E F G
    G F E D
    ---
    title: Ode to Joy
    composer: Ludwig van Beethoven
    time-signature: 4/4
    ---

The block is located by scanning backwards, so a ``---`` inside the notation
is never mistaken for metadata as long as the real block comes last.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

import yaml

from scorecatalog.utils.text import hyphen_to_camel

LOGGER = logging.getLogger(__name__)

MARKER = "---"

_YAML11_TAGS = frozenset(
    {
        "tag:yaml.org,2002:bool",
        "tag:yaml.org,2002:int",
        "tag:yaml.org,2002:float",
        "tag:yaml.org,2002:timestamp",
    }
)


class MetadataLoader(yaml.SafeLoader):
    """Safe loader resolving plain scalars with the YAML 1.2 core schema.

    ``No``, ``on`` and ``3:30`` stay strings, and dates are not converted.
    """


MetadataLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _YAML11_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
MetadataLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)
MetadataLoader.add_implicit_resolver(
    "tag:yaml.org,2002:int",
    re.compile(r"^(?:[-+]?[0-9]+|0o[0-7]+|0x[0-9a-fA-F]+)$"),
    list("-+0123456789"),
)
MetadataLoader.add_implicit_resolver(
    "tag:yaml.org,2002:float",
    re.compile(
        r"""^(?:[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?
        |[-+]?\.(?:inf|Inf|INF)
        |\.(?:nan|NaN|NAN))$""",
        re.X,
    ),
    list("-+0123456789."),
)


def _construct_core_int(loader: MetadataLoader, node: yaml.ScalarNode) -> int:
    value = loader.construct_scalar(node)
    if value.startswith(("0x", "0o")):
        return int(value, 0)
    # Leading zeros are decimal in YAML 1.2
    return int(value)


MetadataLoader.add_constructor("tag:yaml.org,2002:int", _construct_core_int)


@dataclass(slots=True)
class ParsedGenFile:
    notation: str
    metadata: Dict[str, str] = field(default_factory=dict)


def find_metadata_block(lines: list[str]) -> tuple[int, int] | None:
    """Return ``(start, end)`` line indexes of the trailing marker pair."""
    start = end = -1
    for index in range(len(lines) - 1, -1, -1):
        if lines[index].strip() != MARKER:
            continue
        if end == -1:
            end = index
        else:
            start = index
            break

    if start == -1 or end == -1 or start >= end:
        return None
    return start, end


def parse_gen_file(content: str) -> ParsedGenFile:
    """Split a score file into its notation body and metadata."""
    lines = content.split("\n")
    block = find_metadata_block(lines)
    if block is None:
        return ParsedGenFile(notation=content.strip())

    start, end = block
    notation = "\n".join(lines[:start]).strip()
    raw_metadata = "\n".join(lines[start + 1 : end])

    metadata: Dict[str, str] = {}
    try:
        parsed = yaml.load(raw_metadata, Loader=MetadataLoader)
    except (yaml.YAMLError, ValueError, RecursionError) as exc:
        LOGGER.warning("Failed to parse YAML metadata: %s", exc)
    else:
        if isinstance(parsed, Mapping):
            metadata = normalize_metadata_keys(parsed)

    return ParsedGenFile(notation=notation, metadata=metadata)


def normalize_metadata_keys(raw: Mapping[Any, Any]) -> Dict[str, str]:
    """Convert hyphen-case keys to camelCase and every value to a string."""
    return {hyphen_to_camel(str(key)): stringify_value(value) for key, value in raw.items()}


def stringify_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(stringify_value(item) for item in value)
    return str(value)
