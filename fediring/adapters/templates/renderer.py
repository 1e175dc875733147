"""Jinja2 templates for status text: implements TemplatePort."""

import random
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

TEMPLATE_SUFFIX = ".j2"


class JinjaTemplateRenderer:
    """Renders `<templates_path>/<name>.j2`.

    Templates can call `random_choice("a", "b", ...)` to vary their wording.
    """

    def __init__(self, templates_path: str, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()
        self._env = Environment(
            loader=FileSystemLoader(templates_path),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
            undefined=StrictUndefined,
        )
        self._env.globals["random_choice"] = self._random_choice

    def _random_choice(self, *options: Any) -> Any:
        if not options:
            return ""
        return self._rng.choice(options)

    def render(self, name: str, variables: Dict[str, Any]) -> str:
        template = self._env.get_template(f"{name}{TEMPLATE_SUFFIX}")
        return template.render(**variables).strip()
