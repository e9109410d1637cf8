"""
Template models — the resolved, ready-to-render template set.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, ConfigDict

# Every template file, built-in or custom, carries this suffix.
TEMPLATE_SUFFIX = ".tmpl"

TemplateSource = Literal["builtin", "custom", "inherited"]


def output_path(template_key: str) -> str:
    """Template key → path of the file it produces (``src/main.rs.tmpl`` → ``src/main.rs``)."""
    if template_key.endswith(TEMPLATE_SUFFIX):
        return template_key[: -len(TEMPLATE_SUFFIX)]
    return template_key


class ResolvedTemplate(BaseModel):
    """One output file's final template text.

    Attributes:
        path:       Relative output path in the generated project.
        content:    Template text after override/inheritance merge.
        executable: Whether the generated file gets the execute bit.
        source:     Where the content came from.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    content: str
    executable: bool = False
    source: TemplateSource = "builtin"


@dataclass(frozen=True)
class InheritanceDirective:
    """What a child template asks for: an optional base and its block overrides."""

    base_path: str | None = None
    overrides: dict[str, str] = field(default_factory=dict)

    @property
    def extends(self) -> bool:
        return self.base_path is not None


class TemplateSet(Mapping[str, ResolvedTemplate]):
    """Read-only mapping of template key → ResolvedTemplate, ordered by key.

    ``warnings`` carries non-fatal diagnostics gathered while resolving
    (e.g. an override that names a block the base doesn't define).
    """

    def __init__(
        self,
        templates: Mapping[str, ResolvedTemplate],
        warnings: list[str] | None = None,
    ) -> None:
        self._templates = {key: templates[key] for key in sorted(templates)}
        self.warnings: list[str] = list(warnings or [])

    def __getitem__(self, key: str) -> ResolvedTemplate:
        return self._templates[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def __repr__(self) -> str:
        return f"TemplateSet({len(self)} templates, {len(self.warnings)} warnings)"

    def to_dict(self) -> dict:
        return {
            "templates": [
                {
                    "key": key,
                    "path": t.path,
                    "source": t.source,
                    "executable": t.executable,
                }
                for key, t in self._templates.items()
            ],
            "warnings": self.warnings,
        }
