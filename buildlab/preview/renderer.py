"""Live preview document assembly.

Generated code runs untrusted in the viewer's browser, so the document must
only ever be shown inside a sandbox limited to ``PREVIEW_SANDBOX``.
"""

from collections.abc import Mapping
from dataclasses import dataclass
import html
import json
import re

import structlog

from .templates import (
    COMMON_ICONS,
    DOCUMENT_HEAD,
    ERROR_HANDLER,
    ICONS_PLACEHOLDER,
    RUNTIME_CLOSE,
    RUNTIME_OPEN,
    STUB_MODULES,
    STYLES_PLACEHOLDER,
    TITLE_PLACEHOLDER,
)
from .transform import DEFAULT_EXPORT_ALIAS, clean_for_browser, exported_names

logger = structlog.get_logger()

PREVIEW_SANDBOX = "allow-scripts allow-same-origin"

ROOT_FILES = ("src/App.tsx", "src/App.jsx")
PAGES_DIR = "src/pages/"
COMPONENTS_DIR = "src/components/"
SCRIPT_EXTENSIONS = (".tsx", ".jsx")
STYLESHEET = "src/index.css"

_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")
_TAILWIND_DIRECTIVE = re.compile(r"@tailwind\s+[^;]+;")
_APPLY_DIRECTIVE = re.compile(r"@apply\s+[^;]+;")
_LAYER_BLOCK = re.compile(r"@layer\s+[\w\s,]*\{")


@dataclass(frozen=True)
class PreviewModule:
    """One page or component file, keyed by its path below the directory."""

    name: str
    path: str
    source: str

    @property
    def alias(self) -> str | None:
        """Global name the module is exposed under, if it is a valid identifier."""
        base = self.name.rsplit("/", 1)[-1]
        return base if _IDENTIFIER.match(base) else None


def content_security_policy() -> str:
    """Response header value that applies the preview sandbox when served directly."""
    return f"sandbox {PREVIEW_SANDBOX}"


def find_root_source(code_files: Mapping[str, str]) -> str:
    for path in ROOT_FILES:
        if code_files.get(path):
            return code_files[path]
    return ""


def collect_modules(code_files: Mapping[str, str], directory: str) -> list[PreviewModule]:
    modules = []
    for path in sorted(code_files):
        if not path.startswith(directory) or not path.endswith(SCRIPT_EXTENSIONS):
            continue
        name = path[len(directory) :].rsplit(".", 1)[0]
        modules.append(PreviewModule(name=name, path=path, source=code_files[path]))
    return modules


def _remove_blocks(css: str, pattern: re.Pattern) -> str:
    out = []
    pos = 0
    for m in pattern.finditer(css):
        if m.start() < pos:
            continue
        depth = 1
        j = m.end()
        while j < len(css) and depth:
            if css[j] == "{":
                depth += 1
            elif css[j] == "}":
                depth -= 1
            j += 1
        out.append(css[pos : m.start()])
        pos = j
    out.append(css[pos:])
    return "".join(out)


def process_stylesheet(css: str) -> str:
    """Drop Tailwind build-time directives; the CDN build supplies utilities."""
    css = _TAILWIND_DIRECTIVE.sub("", css)
    css = _remove_blocks(css, _LAYER_BLOCK)
    css = _APPLY_DIRECTIVE.sub("", css)
    return css.replace("</style", "<\\/style").strip()


def _clean(path: str, source: str) -> tuple[str, list[tuple[str, str]]]:
    """Browser-ready code and named exports of one module."""
    try:
        return clean_for_browser(source, STUB_MODULES), exported_names(source)
    except Exception as e:
        # The in-page error panel reports whatever the browser cannot run
        logger.warning("preview_transform_failed", path=path, error=str(e))
        return source, []


def _script_safe(code: str) -> str:
    return code.replace("</script", "<\\/script")


def _module_script(kind: str, namespace: str, module: PreviewModule) -> str:
    alias = module.alias
    fallback = f"typeof {alias} !== 'undefined' ? {alias} : undefined" if alias else "undefined"
    key = json.dumps(module.name)
    code, exports = _clean(module.path, module.source)

    lines = [f"    // {kind}: {module.name}", "    {", code]
    # Sibling modules refer to named exports as free identifiers
    for exported, local in exports:
        name = json.dumps(exported)
        lines.append(f"    window.{namespace}[{name}] = {local};")
        lines.append(f"    if (!({name} in window)) window[{name}] = {local};")
    lines += [
        f"    const __Registered__ = typeof {DEFAULT_EXPORT_ALIAS} !== 'undefined'"
        f" ? {DEFAULT_EXPORT_ALIAS} : {fallback};",
        f"    if (__Registered__) window.{namespace}[{key}] = __Registered__;",
    ]
    if alias:
        lines.append(
            f"    if (__Registered__ && !({json.dumps(alias)} in window))"
            f" window[{json.dumps(alias)}] = __Registered__;"
        )
    lines.append("    }")
    return "\n".join(lines)


def _root_script(source: str) -> str:
    if not source:
        return ""
    code, _ = _clean("App", source)
    return "\n".join(
        [
            "    // App",
            "    {",
            code,
            "    window.__PreviewApp__ = typeof App !== 'undefined' ? App :",
            f"      typeof {DEFAULT_EXPORT_ALIAS} !== 'undefined' ? {DEFAULT_EXPORT_ALIAS} : undefined;",
            "    }",
        ]
    )


def render_preview(code_files: Mapping[str, str], title: str) -> str:
    """Render generated React code into one self-contained HTML document.

    Never raises on odd input: a bundle without a root component still yields
    a document, showing a placeholder instead of the app.
    """
    components = collect_modules(code_files, COMPONENTS_DIR)
    pages = collect_modules(code_files, PAGES_DIR)
    root_source = find_root_source(code_files)
    styles = process_stylesheet(code_files.get(STYLESHEET, ""))

    head = DOCUMENT_HEAD.replace(TITLE_PLACEHOLDER, html.escape(title or "Untitled"))
    head = head.replace(STYLES_PLACEHOLDER, styles)
    runtime = RUNTIME_OPEN.replace(ICONS_PLACEHOLDER, json.dumps(list(COMMON_ICONS)))

    scripts = [_module_script("Component", "Components", m) for m in components]
    scripts += [_module_script("Page", "Pages", m) for m in pages]
    scripts.append(_root_script(root_source))

    return "".join(
        [
            head,
            ERROR_HANDLER,
            runtime,
            _script_safe("\n\n".join(s for s in scripts if s)),
            RUNTIME_CLOSE,
        ]
    )
