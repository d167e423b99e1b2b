"""HTML template loading and rendering.

Templates are plain HTML files under the configured template directory
with ``$name`` placeholders (``string.Template`` syntax, so CSS and
JavaScript braces need no escaping). Substituted values are HTML-escaped.
"""

from __future__ import annotations

import functools
import html
from pathlib import Path
from string import Template

from config import settings
from core.errors import TemplateNotFoundError, TemplateRenderError
from core.utils.logger import get_logger

log = get_logger(__name__)


@functools.lru_cache(maxsize=32)
def load_template(name: str, template_dir: Path | None = None) -> Template:
    """Load a template from disk with caching.

    Args:
        name: Template file name, including its extension.
        template_dir: Directory to load from; defaults to settings.

    Returns:
        The parsed template.

    Raises:
        TemplateNotFoundError: If the file is missing or unreadable.
    """
    directory = template_dir or settings.template_dir
    template_file = directory / name
    try:
        content = template_file.read_text(encoding="utf-8")
    except OSError as e:
        log.error(f"[Templates] Cannot read {template_file}: {e}")
        raise TemplateNotFoundError(
            "Failed to load HTML template.", original_error=e
        ) from e
    log.debug(f"[Templates] Loaded template: {name} ({len(content)} chars)")
    return Template(content)


def render_template(name: str, template_dir: Path | None = None, **kwargs: str) -> str:
    """Load a template and substitute HTML-escaped variables.

    Raises:
        TemplateNotFoundError: If the template cannot be loaded.
        TemplateRenderError: If a placeholder has no value.
    """
    template = load_template(name, template_dir)
    escaped = {key: html.escape(str(value)) for key, value in kwargs.items()}
    try:
        return template.substitute(escaped)
    except (KeyError, ValueError) as e:
        log.error(f"[Templates] Cannot render {name}: {e!r}")
        raise TemplateRenderError(
            "Failed to render HTML template.", original_error=e
        ) from e


def reload_templates() -> None:
    """Clear the template cache to reload from disk."""
    load_template.cache_clear()
    log.info("[Templates] Template cache cleared")
