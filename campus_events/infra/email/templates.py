"""Email template rendering with Jinja2.

Templates live in ``campus_events/templates/email`` as ``<name>.txt`` and
``<name>.html`` pairs. HTML templates are autoescaped; text templates are not.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from jinja2 import Environment, PackageLoader, TemplateNotFound, select_autoescape

logger = logging.getLogger(__name__)


class TemplateNotFoundError(Exception):
    """Raised when neither the HTML nor the text variant of a template exists."""


class EmailTemplateRenderer:
    """Jinja2-based email template renderer.

    Example:
        renderer = EmailTemplateRenderer()
        html, text = renderer.render("event_created", title="Hack Night", date="2024-05-01")
    """

    def __init__(self, package: str = "campus_events", template_dir: str = "templates/email") -> None:
        self.env = Environment(
            loader=PackageLoader(package, template_dir),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        logger.debug("Email template renderer initialized", extra={"template_dir": template_dir})

    def render(self, template_name: str, **context: Any) -> tuple[str | None, str | None]:
        """Render the HTML and text variants of a template.

        Returns:
            Tuple of (html_content, text_content); a missing variant is None.

        Raises:
            TemplateNotFoundError: If neither variant exists.
        """
        html_content = self._render_variant(f"{template_name}.html", context)
        text_content = self._render_variant(f"{template_name}.txt", context)

        if html_content is None and text_content is None:
            raise TemplateNotFoundError(
                f"No template found for: {template_name} "
                f"(looked for {template_name}.html and {template_name}.txt)"
            )
        return html_content, text_content

    def _render_variant(self, filename: str, context: dict[str, Any]) -> str | None:
        try:
            template = self.env.get_template(filename)
        except TemplateNotFound:
            logger.debug("No template variant found: %s", filename)
            return None
        return template.render(**context)


@lru_cache(maxsize=1)
def get_template_renderer() -> EmailTemplateRenderer:
    """Get the cached email template renderer."""
    return EmailTemplateRenderer()
