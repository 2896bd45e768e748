"""Jinja2 rendering of outgoing mail."""

from pathlib import Path
from typing import Any

import jinja2

TEMPLATES_DIR = Path(__file__).parent / "templates"


class MailRenderer:
    """Renders ``<name>.html`` and ``<name>.txt`` template pairs.

    HTML templates are autoescaped; text templates are not.
    """

    def __init__(self, templates_dir: Path = TEMPLATES_DIR) -> None:
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(templates_dir)),
            autoescape=jinja2.select_autoescape(
                enabled_extensions=("html",), default_for_string=False
            ),
            undefined=jinja2.StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, name: str, context: dict[str, Any]) -> tuple[str, str]:
        """Render a template pair.

        Args:
            name: Template base name (e.g. "invitation")
            context: Template variables

        Returns:
            (html_body, text_body)
        """
        html = self.env.get_template(f"{name}.html").render(**context)
        text = self.env.get_template(f"{name}.txt").render(**context)
        return html, text
