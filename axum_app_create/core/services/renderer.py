"""
Rendering engine — Jinja2 over flat template text.

Templates arrive already merged (see ``inheritance``); the renderer
only substitutes variables and evaluates conditionals.  Undefined
variables are errors, never silently empty.

Whitespace handling is Jinja2's default (no ``trim_blocks``), so the
inheritance markers, being comments, vanish without touching the text
around them.
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from typing import Any

import jinja2

from axum_app_create.core.errors import TemplateError
from axum_app_create.core.models.project import ProjectConfig
from axum_app_create.core.persistence.metadata_file import METADATA_FILE

logger = logging.getLogger(__name__)

_DATABASE_LABELS = {
    "postgresql": "PostgreSQL",
    "sqlite": "SQLite",
    "both": "PostgreSQL + SQLite",
}

DEFAULT_AUTHOR = "Anonymous"


def snake_case(value: str) -> str:
    """``my-app`` / ``MyApp`` → ``my_app``."""
    value = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", value)
    return re.sub(r"[-\s]+", "_", value).lower()


def pascal_case(value: str) -> str:
    """``my-app`` / ``my_app`` → ``MyApp``."""
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[-_\s]+", value) if part)


@dataclass(frozen=True)
class TemplateContext:
    """Variables visible to every template."""

    project_name: str
    project_name_snake: str
    project_name_pascal: str
    description: str
    author_name: str
    year: int
    mode: str
    ci: bool
    has_database: bool
    has_postgresql: bool
    has_sqlite: bool
    has_auth: bool
    has_logging: bool
    has_biz_error: bool
    database_label: str
    database: dict | None
    auth: dict | None
    logging: dict | None
    metadata_file: str = METADATA_FILE

    @classmethod
    def from_config(cls, config: ProjectConfig) -> TemplateContext:
        features = config.features
        return cls(
            project_name=config.project_name,
            project_name_snake=snake_case(config.project_name),
            project_name_pascal=pascal_case(config.project_name),
            description=config.description,
            author_name=config.author_name or DEFAULT_AUTHOR,
            year=config.year,
            mode=config.mode,
            ci=config.ci,
            has_database=features.has_database,
            has_postgresql=features.has_postgresql,
            has_sqlite=features.has_sqlite,
            has_auth=features.authentication,
            has_logging=features.logging,
            has_biz_error=features.biz_error,
            database_label=_DATABASE_LABELS.get(features.database, ""),
            database=config.database.model_dump() if config.database else None,
            auth=config.authentication.model_dump() if config.authentication else None,
            logging=config.logging.model_dump() if config.logging else None,
        )

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


class TemplateRenderer:
    """Render template text with a context."""

    def __init__(self) -> None:
        self.env = jinja2.Environment(
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )
        self.env.filters["snake_case"] = snake_case
        self.env.filters["pascal_case"] = pascal_case

    def render(self, name: str, content: str, context: dict[str, Any]) -> str:
        """Render ``content`` (identified as ``name`` in errors).

        Raises:
            TemplateError: Syntax error or undefined variable.
        """
        try:
            template = self.env.from_string(content)
            return template.render(context)
        except jinja2.TemplateSyntaxError as e:
            raise TemplateError(f"Syntax error in template '{name}' line {e.lineno}: {e.message}", child=name) from e
        except jinja2.TemplateError as e:
            raise TemplateError(f"Cannot render template '{name}': {e}", child=name) from e
