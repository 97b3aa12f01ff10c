"""Stack template rendering.

Renders the controller and worker cloud-configs and the JSON stack template
from a resolved cluster configuration. Templates are Jinja2 and see the data
returned by ResolvedConfig.template_context().
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError

from kube_stack.assets import compress_data, read_asset_bundle
from kube_stack.exceptions import RenderError
from kube_stack.logging_config import get_logger
from kube_stack.models.cluster import ClusterDescription
from kube_stack.resolver import resolve

logger = get_logger(__name__)

CREDENTIALS_DIR = "credentials"
USERDATA_DIR = "userdata"
JSON_WHITESPACE = " \t\n\r"


@dataclass(frozen=True)
class StackTemplateOptions:
    """Locations of the inputs needed to render a stack template.

    Attributes:
        tls_assets_dir: Directory holding the TLS asset files
        controller_template: Controller cloud-config template
        worker_template: Worker cloud-config template
        stack_template: JSON stack template
    """

    tls_assets_dir: Path
    controller_template: Path
    worker_template: Path
    stack_template: Path

    @classmethod
    def from_dir(cls, root: str | Path) -> "StackTemplateOptions":
        """Build options for the conventional layout under a cluster directory."""
        root = Path(root)
        return cls(
            tls_assets_dir=root / CREDENTIALS_DIR,
            controller_template=root / USERDATA_DIR / "cloud-config-controller",
            worker_template=root / USERDATA_DIR / "cloud-config-worker",
            stack_template=root / "stack-template.json",
        )


class TemplateRenderer:
    """Renders template files with strict variable checking."""

    def __init__(self) -> None:
        self._environment = Environment(
            undefined=StrictUndefined, autoescape=False, keep_trailing_newline=True
        )

    def render_file(self, path: Path, values: dict[str, Any]) -> str:
        """Render a template file.

        Args:
            path: Template file
            values: Template variables

        Returns:
            Rendered text

        Raises:
            RenderError: If the file cannot be read or the template fails
        """
        try:
            source = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to read template {path}: {e}")
            raise RenderError(f"Failed to read template {path}: {e}")

        try:
            return self._environment.from_string(source).render(**values)
        except TemplateError as e:
            logger.error(f"Failed to render template {path}: {e}")
            raise RenderError(
                f"Failed to render template {path}: {e}",
                "Check the template syntax and the variable names it uses",
            ) from e


def _reject_constant(name: str) -> None:
    raise ValueError(f"{name} is not a JSON value")


def minify_json(rendered: str, source: str = "stack template") -> str:
    """Strip insignificant whitespace from a JSON document.

    Only whitespace outside string literals is removed. Every other token,
    including number spellings and repeated keys, is kept as written.

    Raises:
        RenderError: If the text is not valid JSON
    """
    try:
        json.loads(rendered, parse_constant=_reject_constant)
    except ValueError as e:
        raise RenderError(f"Rendered {source} is not valid JSON: {e}") from e

    compacted = []
    in_string = False
    escaped = False
    for char in rendered:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char in JSON_WHITESPACE:
            continue
        elif char == '"':
            in_string = True
        compacted.append(char)
    return "".join(compacted)


def render_stack_template(description: ClusterDescription, options: StackTemplateOptions) -> bytes:
    """Render the stack template for a validated cluster description.

    Args:
        description: A cluster description that already passed validation
        options: Template and asset locations

    Returns:
        The minified JSON stack template

    Raises:
        CompactionError: If the TLS assets cannot be read or compacted
        RenderError: If a template fails to render
    """
    assets = read_asset_bundle(options.tls_assets_dir)
    config = resolve(description, assets)
    context = config.template_context()
    renderer = TemplateRenderer()

    try:
        user_data_worker = compress_data(
            renderer.render_file(options.worker_template, context).encode("utf-8")
        )
    except RenderError as e:
        raise RenderError(f"failed to render worker cloud config: {e.message}", e.details) from e

    try:
        user_data_controller = compress_data(
            renderer.render_file(options.controller_template, context).encode("utf-8")
        )
    except RenderError as e:
        raise RenderError(
            f"failed to render controller cloud config: {e.message}", e.details
        ) from e

    rendered = renderer.render_file(
        options.stack_template,
        {
            **context,
            "user_data_worker": user_data_worker,
            "user_data_controller": user_data_controller,
        },
    )
    minified = minify_json(rendered, str(options.stack_template))
    logger.info(f"Rendered stack template for cluster '{description.cluster_name}'")
    return minified.encode("utf-8")
