"""
Template inheritance — extends / block / override, resolved as plain text.

Markers are Jinja2 comments, so a block-annotated base template still
renders unchanged when nobody extends it:

    base:   {# block "routes" #}default routes{# endblock #}
    child:  {# extends: src/main.rs.tmpl #}
            {# override "routes" #}custom routes{# endoverride #}

Inheritance is a text merge that happens before the renderer sees the
template; the renderer only ever gets flat text.

Rules:
    - The extends marker must be the first non-empty line.  A second
      extends marker anywhere in the file makes the directive ambiguous
      and it is ignored (the child then fully replaces the base).
    - Blocks do not nest: a block ends at the first endblock after it.
    - Block and override markers have no `{#-` / `-#}` trim form; a trim
      comment is left to Jinja as an ordinary comment.
    - Duplicate override names keep the last occurrence by default.
    - An override for a block the base doesn't define is dropped with
      a warning; the base decides which blocks are extension points.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Literal

from axum_app_create.core.errors import TemplateError
from axum_app_create.core.models.template import InheritanceDirective

logger = logging.getLogger(__name__)

DuplicatePolicy = Literal["last", "first", "error"]

_EXTENDS_LINE_RE = re.compile(r"^\{#-?\s*extends:\s*(?P<path>\S+?)\s*-?#\}$")
_EXTENDS_ANY_RE = re.compile(r"\{#-?\s*extends:")
_VALID_PATH_RE = re.compile(r"^[A-Za-z0-9_./-]+$")

_BLOCK_OPEN_RE = re.compile(r'\{#\s*block\s+"(?P<name>[^"\n]+)"\s*#\}')
_BLOCK_CLOSE_RE = re.compile(r"\{#\s*endblock\s*#\}")

_OVERRIDE_OPEN_RE = re.compile(r'\{#\s*override\s+"(?P<name>[^"\n]+)"\s*#\}')
_OVERRIDE_CLOSE_RE = re.compile(r"\{#\s*endoverride\s*#\}")


# ═══════════════════════════════════════════════════════════════════
#  Parsing
# ═══════════════════════════════════════════════════════════════════


def parse_extends(text: str) -> str | None:
    """Return the base template path named by the extends marker, or None."""
    first_line = next((line.strip() for line in text.splitlines() if line.strip()), None)
    if first_line is None:
        return None

    match = _EXTENDS_LINE_RE.match(first_line)
    if not match:
        return None

    path = match.group("path")
    if not _VALID_PATH_RE.match(path):
        logger.debug("Ignoring extends marker with invalid path %r", path)
        return None

    if len(_EXTENDS_ANY_RE.findall(text)) > 1:
        logger.debug("Ignoring ambiguous template: more than one extends marker")
        return None

    return path


def parse_overrides(text: str, duplicates: DuplicatePolicy = "last") -> dict[str, str]:
    """Extract every ``override`` region from a child template.

    Args:
        text: Child template text.
        duplicates: What to do when a block name is overridden twice:
            ``"last"`` keeps the last one, ``"first"`` the first one,
            ``"error"`` raises TemplateError.
    """
    overrides: dict[str, str] = {}
    pos = 0
    while True:
        opener = _OVERRIDE_OPEN_RE.search(text, pos)
        if opener is None:
            break
        closer = _OVERRIDE_CLOSE_RE.search(text, opener.end())
        if closer is None:
            logger.debug("Unterminated override %r ignored", opener.group("name"))
            break

        name = opener.group("name")
        body = text[opener.end():closer.start()]
        if name in overrides:
            if duplicates == "error":
                raise TemplateError(f"Block '{name}' is overridden more than once")
            logger.debug("Block %r overridden more than once (keeping %s)", name, duplicates)
            if duplicates == "last":
                overrides[name] = body
        else:
            overrides[name] = body
        pos = closer.end()

    return overrides


def parse_directive(text: str, duplicates: DuplicatePolicy = "last") -> InheritanceDirective:
    """Parse both halves of a child template.

    Without an extends marker the overrides are irrelevant: the raw
    text is the resolved content.
    """
    base = parse_extends(text)
    if base is None:
        return InheritanceDirective()
    return InheritanceDirective(base_path=base, overrides=parse_overrides(text, duplicates))


def block_names(text: str) -> list[str]:
    """Names of the well-formed blocks a base template defines, in order."""
    names: list[str] = []
    pos = 0
    while True:
        opener = _BLOCK_OPEN_RE.search(text, pos)
        if opener is None:
            return names
        closer = _BLOCK_CLOSE_RE.search(text, opener.end())
        if closer is None:
            return names
        names.append(opener.group("name"))
        pos = closer.end()


# ═══════════════════════════════════════════════════════════════════
#  Merging
# ═══════════════════════════════════════════════════════════════════


def apply_inheritance(
    base: str,
    overrides: Mapping[str, str],
    warnings: list[str] | None = None,
) -> str:
    """Substitute overrides into the base template's blocks.

    Each ``block`` region is replaced by the matching override, or by
    its own default content.  Everything outside blocks is copied
    verbatim.  A malformed block opener (no endblock) is copied as-is.

    Args:
        base: Base template text.
        overrides: Block name → replacement content.
        warnings: If given, receives one message per dropped override.

    Returns:
        The merged, marker-free text.
    """
    out: list[str] = []
    used: set[str] = set()
    pos = 0

    while True:
        opener = _BLOCK_OPEN_RE.search(base, pos)
        if opener is None:
            out.append(base[pos:])
            break

        closer = _BLOCK_CLOSE_RE.search(base, opener.end())
        if closer is None:
            # No endblock anywhere after this point: the rest is literal text
            out.append(base[pos:])
            break

        out.append(base[pos:opener.start()])
        name = opener.group("name")
        if name in overrides:
            out.append(overrides[name])
            used.add(name)
        else:
            out.append(base[opener.end():closer.start()])
        pos = closer.end()

    for name in sorted(set(overrides) - used):
        message = f"Override block '{name}' not found in base template, ignored"
        logger.warning(message)
        if warnings is not None:
            warnings.append(message)

    return "".join(out)

