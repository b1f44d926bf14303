"""Render templates and write generated output.

Takes the synthesized tool definitions and produces
generated/outline_tools.py, a module that rebuilds them without
re-running the compiler.
"""

from __future__ import annotations

import json
import logging
import os
import pprint
import tempfile
from pathlib import Path
from typing import Any, Iterable

import jinja2

from .loader import load_spec
from .models import ToolDefinition
from .synthesizer import synthesize

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "tools.py.j2"
OUTPUT_DIR = Path(__file__).parent.parent / "generated"
OUTPUT_PATH = OUTPUT_DIR / "outline_tools.py"


def _plain(value: Any) -> Any:
    """Normalize to JSON types so the rendered literals always import."""
    return json.loads(json.dumps(value, default=str))


def _pyrepr(value: Any) -> str:
    return pprint.pformat(value, width=100, sort_dicts=False)


def build_context(tools: Iterable[ToolDefinition], spec: dict[str, Any]) -> dict[str, Any]:
    """Build the template context from the synthesized tools."""
    tool_dicts = [_plain(tool.to_dict()) for tool in tools]
    return {
        "tools": tool_dicts,
        "tool_count": len(tool_dicts),
        "api_title": (spec.get("info") or {}).get("title", "Outline API"),
        "api_version": (spec.get("info") or {}).get("version", "unknown"),
    }


def render(context: dict[str, Any]) -> str:
    """Render the tools module template."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["pyrepr"] = _pyrepr
    template = env.get_template(TEMPLATE_NAME)
    return template.render(**context)


def generate(context: dict[str, Any], output_path: Path | str | None = None) -> Path:
    """Render the tools template and write it atomically."""
    output = render(context)
    output_path = Path(output_path) if output_path else OUTPUT_PATH
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=output_path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(output)
        os.replace(tmp_name, output_path)
    except BaseException:
        os.unlink(tmp_name)
        raise

    logger.info("Generated %s (%d tools)", output_path, context["tool_count"])
    return output_path


def write_tools(
    spec_path: Path | str | None = None,
    output_path: Path | str | None = None,
) -> Path:
    """Load the spec, compile every operation and write the tools module.

    Nothing is written when compilation fails.
    """
    spec = load_spec(spec_path)
    tools = synthesize(spec)
    return generate(build_context(tools, spec), output_path)
