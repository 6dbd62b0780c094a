"""Template loading and ``${name}`` placeholder substitution."""
from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Mapping

from .layout import GridLayout
from .utils import read_text

TEMPLATE_ROOT = Path(__file__).parent / "templates"

HEADER_IN = "header.htm.in"
FLASH_IN = "flash.htm.in"

PLACEHOLDER_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


@dataclass(frozen=True)
class TemplateResult:
    status: Literal["ok", "not_found"]
    path: Path
    text: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


def page_template_name(layout: GridLayout) -> str:
    return f"page{layout.name}.htm.in"


def load_template(path: str | Path) -> TemplateResult:
    """Load a template file, reporting a missing file instead of raising.

    Only a missing file is reported as ``not_found``; any other I/O error
    (permissions, decoding) propagates.
    """
    p = Path(path)
    if not p.is_file():
        return TemplateResult(status="not_found", path=p)
    return TemplateResult(status="ok", path=p, text=read_text(p))


def require_template(path: str | Path) -> str:
    """Load a template or terminate the process with exit status 1."""
    result = load_template(path)
    if result.text is None:
        print(f"Can't open flashcard template file {result.path}", file=sys.stderr)
        raise SystemExit(1)
    return result.text


def fill(template: str, values: Mapping[str, Any]) -> str:
    """Replace ``${name}`` tokens with ``str(values[name])``.

    Tokens with no entry in ``values`` are left as they are, and substituted
    text is never scanned again.
    """

    def _sub(m: re.Match[str]) -> str:
        name = m.group(1)
        if name not in values:
            return m.group(0)
        return str(values[name])

    return PLACEHOLDER_PATTERN.sub(_sub, template)


def placeholders(template: str) -> list[str]:
    """Names of the placeholders in ``template``, in order of first appearance."""
    seen: list[str] = []
    for m in PLACEHOLDER_PATTERN.finditer(template):
        if m.group(1) not in seen:
            seen.append(m.group(1))
    return seen
