"""Best-effort TypeScript/JSX to browser-script transform.

This is a lexical pass, not a parser. String, template and comment regions
are masked first so that the rewrites below only ever see code. The rewrites
drop type-only syntax and module syntax and leave everything the browser
needs to run. Output that still fails to compile surfaces in the preview's
error panel.
"""

from collections.abc import Collection
import json
import re

# Masked literal: <index>
_OPEN = "\ue000"
_CLOSE = "\ue001"
_LITERAL = f"{_OPEN}(\\d+){_CLOSE}"
_LITERAL_RE = re.compile(_LITERAL)

_IDENT = r"[A-Za-z_$][\w$]*"
_IDENT_RE = re.compile(_IDENT)
_IDENTIFIER_ONLY = re.compile(rf"^{_IDENT}$")

_INTERESTING = re.compile(r"//|/\*|['\"`]")

DEFAULT_EXPORT_ALIAS = "__DefaultExport__"
MODULE_REGISTRY = "window.PreviewModules"


# === Literal masking ===


def _string_end(source: str, i: int, quote: str) -> int:
    j = i + 1
    n = len(source)
    while j < n:
        c = source[j]
        if c == "\\":
            j += 2
            continue
        if c == quote:
            return j + 1
        if c == "\n":
            return j
        j += 1
    return n


def _template_end(source: str, i: int) -> int:
    j = i + 1
    n = len(source)
    while j < n:
        c = source[j]
        if c == "\\":
            j += 2
        elif c == "`":
            return j + 1
        elif source.startswith("${", j):
            j = _expression_end(source, j + 2)
        else:
            j += 1
    return n


def _expression_end(source: str, j: int) -> int:
    """End of a ``${...}`` substitution starting after the ``${``."""
    depth = 1
    n = len(source)
    while j < n:
        c = source[j]
        if c in "'\"":
            j = _string_end(source, j, c)
            continue
        if c == "`":
            j = _template_end(source, j)
            continue
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
            if depth == 0:
                return j + 1
        j += 1
    return n


def mask_literals(source: str) -> tuple[str, list[str]]:
    """Replace strings, templates and comments with numbered placeholders."""
    out: list[str] = []
    literals: list[str] = []
    i = 0
    n = len(source)
    while i < n:
        m = _INTERESTING.search(source, i)
        if m is None:
            out.append(source[i:])
            break

        start = m.start()
        out.append(source[i:start])
        token = m.group()
        if token == "//":
            end = source.find("\n", start)
            end = n if end == -1 else end
        elif token == "/*":
            end = source.find("*/", start + 2)
            end = n if end == -1 else end + 2
        elif token == "`":
            end = _template_end(source, start)
        else:
            end = _string_end(source, start, token)

        literals.append(source[start:end])
        out.append(f"{_OPEN}{len(literals) - 1}{_CLOSE}")
        i = end
    return "".join(out), literals


def restore_literals(code: str, literals: list[str]) -> str:
    return _LITERAL_RE.sub(lambda m: literals[int(m.group(1))], code)


# === Scanning helpers (operate on masked code) ===

_PAIRS = {"(": ")", "[": "]", "{": "}", "<": ">"}


def _skip_ws(code: str, i: int) -> int:
    n = len(code)
    while i < n and code[i] in " \t\r\n":
        i += 1
    return i


def _match_close(code: str, i: int, limit: int | None = None) -> int:
    """Index just past the bracket closing the one at ``i``, or -1."""
    open_char = code[i]
    close_char = _PAIRS[open_char]
    depth = 0
    n = len(code) if limit is None else min(len(code), i + limit)
    j = i
    while j < n:
        c = code[j]
        if c == open_char:
            depth += 1
        elif c == close_char and not (open_char == "<" and j > 0 and code[j - 1] == "="):
            depth -= 1
            if depth == 0:
                return j + 1
        elif open_char == "<" and c == ";":
            return -1
        j += 1
    return -1


_TYPE_PARAM_BOUND = re.compile(r"(?:extends\b|=(?![=>]))")
_TYPE_PRIMARY = re.compile(
    rf"(?:(?:typeof|keyof|readonly|unique)\s+)*"
    rf"(?:{_IDENT}(?:\.{_IDENT})*|-?\d[\d.]*|{_LITERAL})"
)


def _scan_type(code: str, i: int, allow_object: bool = True) -> int:
    """Index just past a type expression starting at ``i``, or -1."""
    n = len(code)
    pos = _skip_ws(code, i)
    if pos < n and code[pos] in "|&":
        pos = _skip_ws(code, pos + 1)

    while True:
        if pos >= n:
            return -1
        c = code[pos]
        if c == "<":
            # Generic function type: <T>(arg: T) => T
            end = _match_close(code, pos, limit=500)
            if end < 0:
                return -1
            pos = _skip_ws(code, end)
            continue
        if c == "(":
            end = _match_close(code, pos)
            if end < 0:
                return -1
            after = _skip_ws(code, end)
            if code.startswith("=>", after):
                return _scan_type(code, after + 2, allow_object)
            pos = end
        elif c in "{[":
            if c == "{" and not allow_object:
                return -1
            end = _match_close(code, pos)
            if end < 0:
                return -1
            pos = end
        else:
            m = _TYPE_PRIMARY.match(code, pos)
            if m is None:
                return -1
            pos = m.end()

        while pos < n:
            if code[pos] == "<":
                end = _match_close(code, pos, limit=500)
                if end < 0:
                    return -1
                pos = end
            elif code.startswith("[]", pos):
                pos += 2
            else:
                break

        nxt = _skip_ws(code, pos)
        if nxt < n and code[nxt] in "|&" and code[nxt : nxt + 2] not in ("||", "&&"):
            pos = _skip_ws(code, nxt + 1)
            continue
        return pos


def _scan_type_list(code: str, start: int, end: int) -> bool:
    """True if ``code[start:end]`` is a comma-separated list of types or type params."""
    pos = start
    while True:
        t = _scan_type(code, pos)
        if t < 0 or t > end:
            return False
        pos = _skip_ws(code, t)
        # <T extends Base = Default>
        while m := _TYPE_PARAM_BOUND.match(code, pos):
            t = _scan_type(code, m.end())
            if t < 0 or t > end:
                return False
            pos = _skip_ws(code, t)
        if pos == end:
            return True
        if code[pos] != ",":
            return False
        pos = _skip_ws(code, pos + 1)
        if pos == end:
            return True


def _skip_expression(code: str, pos: int, end: int) -> int:
    depth = 0
    while pos < end:
        c = code[pos]
        if c in "([{":
            depth += 1
        elif c in ")]}":
            depth -= 1
        elif c == "," and depth == 0:
            return pos
        pos += 1
    return pos


def _statement_end(code: str, pos: int) -> int:
    """End of a type alias body, honouring brackets and line continuations."""
    depth = 0
    n = len(code)
    while pos < n:
        c = code[pos]
        if c in "([{":
            depth += 1
        elif c in ")]}":
            depth -= 1
        elif c == ";" and depth <= 0:
            return pos + 1
        elif c == "\n" and depth <= 0:
            before = code[:pos].rstrip()
            after = _skip_ws(code, pos)
            continued = (before and before[-1] in "=|&,<") or (
                after < n and code[after] in "|&"
            )
            if not continued:
                return pos
        pos += 1
    return n


def _delete_spans(code: str, spans: list[tuple[int, int]]) -> str:
    if not spans:
        return code
    merged: list[list[int]] = []
    for start, end in sorted(spans):
        if merged and start < merged[-1][1]:
            merged[-1][1] = max(merged[-1][1], end)
        else:
            merged.append([start, end])

    out: list[str] = []
    last = 0
    for start, end in merged:
        out.append(code[last:start])
        last = end
    out.append(code[last:])
    return "".join(out)


# === Module syntax ===

_SIDE_EFFECT_IMPORT = re.compile(rf"(?m)^[ \t]*import\s*{_LITERAL}[ \t]*;?")
_IMPORT = re.compile(rf"(?m)^[ \t]*import\s+(?P<clause>[^;]*?)\s*\bfrom\s*{_LITERAL}[ \t]*;?")
_REEXPORT = re.compile(
    rf"(?m)^[ \t]*export\s+(?:type\s+)?(?:\*(?:\s+as\s+{_IDENT})?|\{{[^}}]*\}})\s*from\s*{_LITERAL}[ \t]*;?"
)
_EXPORT_LIST = re.compile(r"(?m)^[ \t]*export\s+(type\s+)?\{([^}]*)\}[ \t]*;?")
_EXPORT_DECLARATION = re.compile(
    rf"(?m)^[ \t]*export\s+"
    rf"(?:(?:async\s+)?function\b\s*\*?\s*|(?:abstract\s+)?class\s+|(?:const|let|var)\s+)({_IDENT})"
)
_EXPORT_DEFAULT_NAMED = re.compile(
    rf"(?m)^([ \t]*)export\s+default\s+((?:async\s+)?function\b\s*\*?\s*|class\s+)({_IDENT})"
)
_EXPORT_DEFAULT = re.compile(r"(?m)^([ \t]*)export\s+default\s+")
_EXPORT = re.compile(r"(?m)^([ \t]*)export\s+")


def _import_bindings(clause: str) -> tuple[str | None, str | None, list[str]]:
    """Split an import clause into default, namespace and named bindings."""
    default = namespace = None
    named: list[str] = []

    brace = re.search(r"\{([^}]*)\}", clause)
    if brace:
        for spec in brace.group(1).split(","):
            spec = spec.strip()
            if not spec or spec.startswith("type "):
                continue
            parts = re.split(r"\s+as\s+", spec)
            named.append(f"{parts[0]}: {parts[1]}" if len(parts) == 2 else parts[0])
        clause = clause[: brace.start()] + clause[brace.end() :]

    star = re.search(rf"\*\s*as\s+({_IDENT})", clause)
    if star:
        namespace = star.group(1)
        clause = clause[: star.start()] + clause[star.end() :]

    rest = clause.strip().strip(",").strip()
    if _IDENTIFIER_ONLY.match(rest):
        default = rest
    return default, namespace, named


def _rewrite_imports(code: str, literals: list[str], stub_modules: Collection[str]) -> str:
    code = _SIDE_EFFECT_IMPORT.sub("", code)

    def replace(m: re.Match) -> str:
        clause = m.group("clause").strip()
        module = literals[int(m.group(2))][1:-1]
        if clause.startswith("type ") or module not in stub_modules:
            return ""

        literals.append(json.dumps(module))
        source = f"{MODULE_REGISTRY}[{_OPEN}{len(literals) - 1}{_CLOSE}]"
        default, namespace, named = _import_bindings(clause)
        statements = []
        if default:
            statements.append(f"const {default} = {source}.default;")
        if namespace:
            statements.append(f"const {namespace} = {source};")
        if named:
            statements.append(f"const {{ {', '.join(named)} }} = {source};")
        return " ".join(statements)

    return _IMPORT.sub(replace, code)


def _export_list_entries(body: str) -> list[tuple[str, str]]:
    """``(exported, local)`` pairs of an ``export { ... }`` list."""
    entries = []
    for entry in body.split(","):
        entry = entry.strip()
        if not entry or entry.startswith("type "):
            continue
        parts = re.split(r"\s+as\s+", entry)
        local, exported = parts[0], parts[-1]
        if _IDENTIFIER_ONLY.match(local) and _IDENTIFIER_ONLY.match(exported):
            entries.append((exported, local))
    return entries


def exported_names(source: str) -> list[tuple[str, str]]:
    """Named exports of a module as ``(exported, local)`` pairs.

    Re-exports, type-only exports and the default export are not included.
    """
    code, _ = mask_literals(source)
    code = _REEXPORT.sub("", code)

    names: dict[str, str] = {}
    for m in _EXPORT_DECLARATION.finditer(code):
        names.setdefault(m.group(1), m.group(1))
    for m in _EXPORT_LIST.finditer(code):
        if m.group(1):
            continue
        for exported, local in _export_list_entries(m.group(2)):
            if exported != "default":
                names.setdefault(exported, local)
    return list(names.items())


def _rewrite_exports(code: str) -> str:
    code = _REEXPORT.sub("", code)

    default_names: list[str] = []

    def export_list(m: re.Match) -> str:
        if not m.group(1):
            for exported, local in _export_list_entries(m.group(2)):
                if exported == "default":
                    default_names.append(local)
        return ""

    code = _EXPORT_LIST.sub(export_list, code)

    def named_default(m: re.Match) -> str:
        default_names.append(m.group(3))
        return f"{m.group(1)}{m.group(2)}{m.group(3)}"

    code = _EXPORT_DEFAULT_NAMED.sub(named_default, code)
    code = _EXPORT_DEFAULT.sub(rf"\1const {DEFAULT_EXPORT_ALIAS} = ", code)
    code = _EXPORT.sub(r"\1", code)
    if default_names:
        code += f"\nconst {DEFAULT_EXPORT_ALIAS} = {default_names[0]};\n"
    return code


# === Type-only declarations ===

_INTERFACE = re.compile(rf"(?m)^[ \t]*(?:export\s+)?(?:declare\s+)?interface\s+{_IDENT}")
_TYPE_ALIAS = re.compile(
    rf"(?m)^[ \t]*(?:export\s+)?(?:declare\s+)?type\s+{_IDENT}\s*(?:<[^=;]*>)?\s*=(?![=>])"
)


def _remove_declarations(code: str) -> str:
    spans = []
    for m in _INTERFACE.finditer(code):
        brace = code.find("{", m.end())
        if brace < 0:
            continue
        end = _match_close(code, brace)
        if end > 0:
            spans.append((m.start(), end))
    for m in _TYPE_ALIAS.finditer(code):
        spans.append((m.start(), _statement_end(code, m.end())))
    return _delete_spans(code, spans)


# === Annotations ===

_FUNCTION_PREFIX = re.compile(rf"\bfunction\b\s*\*?\s*(?:{_IDENT})?\s*(?:<[^()]*>)?\s*$")
_METHOD_PREFIX = re.compile(
    rf"(?:^|[\s;{{}},])(?!(?:if|for|while|switch|catch|with|return|function|typeof|await)\b)"
    rf"{_IDENT}\s*(?:<[^()]*>)?\s*$"
)
_DECLARATION = re.compile(r"\b(?:const|let|var)\s+")
_AS_CAST = re.compile(
    rf"(?<=[\w$)\]}}{_CLOSE}])\s+as\s+"
    r"(?=(?:const|string|number|boolean|any|unknown|never|object)\b|[A-Z{\[(])"
)
_CALL_GENERIC = re.compile(r"(?<=[\w$])<")
_ARROW_TYPE_PARAMS = re.compile(
    rf"(=\s*)(<\s*[A-Z][\w$]*(?:\s+extends\s+[^<>()=]+)?(?:\s*,\s*[A-Z][\w$]*)*\s*,?\s*>)(?=\s*\()"
)
_NON_NULL = re.compile(r"(?<=[\w$)\]])!(?=[.\[)\],;])")


def _parameter_spans(code: str, start: int, end: int) -> list[tuple[int, int]]:
    spans = []
    pos = start
    while pos < end:
        pos = _skip_ws(code, pos)
        if pos >= end:
            break
        if code.startswith("...", pos):
            pos += 3

        if code[pos] in "{[":
            pos = _match_close(code, pos)
            if pos < 0:
                break
        else:
            m = _IDENT_RE.match(code, pos)
            if m is None:
                break
            pos = m.end()

        binding_end = pos
        ws = _skip_ws(code, pos)
        if code.startswith("?:", ws) or code.startswith(":", ws):
            colon = ws + 1 if code[ws] == "?" else ws
            t = _scan_type(code, colon + 1)
            if t < 0 or t > end:
                break
            spans.append((binding_end, t))
            pos = t

        pos = _skip_ws(code, pos)
        if pos < end and code[pos] == "=":
            pos = _skip_expression(code, pos + 1, end)
        pos = _skip_ws(code, pos)
        if pos < end and code[pos] == ",":
            pos += 1
            continue
        break
    return spans


def _function_spans(code: str) -> list[tuple[int, int]]:
    spans = []
    for m in re.finditer(r"\(", code):
        open_pos = m.start()
        close = _match_close(code, open_pos)
        if close < 0:
            continue

        prefix = code[max(0, open_pos - 200) : open_pos]
        is_function = _FUNCTION_PREFIX.search(prefix) is not None
        is_method = not is_function and _METHOD_PREFIX.search(prefix) is not None

        after = _skip_ws(code, close)
        return_span = None
        body = after
        if code.startswith(":", after) and not code.startswith("::", after):
            t = _scan_type(code, after + 1, allow_object=False)
            if t > 0:
                return_span = (close, t)
                body = _skip_ws(code, t)

        is_arrow = code.startswith("=>", body)
        opens_block = code.startswith("{", body)
        if not (is_function or is_arrow or (is_method and opens_block)):
            continue

        spans.extend(_parameter_spans(code, open_pos + 1, close - 1))
        if return_span and (is_arrow or opens_block):
            spans.append(return_span)
    return spans


def _declaration_spans(code: str) -> list[tuple[int, int]]:
    spans = []
    for m in _DECLARATION.finditer(code):
        pos = m.end()
        if pos < len(code) and code[pos] in "{[":
            pos = _match_close(code, pos)
            if pos < 0:
                continue
        else:
            ident = _IDENT_RE.match(code, pos)
            if ident is None:
                continue
            pos = ident.end()

        ws = _skip_ws(code, pos)
        if not code.startswith(":", ws):
            continue
        t = _scan_type(code, ws + 1)
        if t < 0:
            continue
        nxt = _skip_ws(code, t)
        if nxt >= len(code) or code[nxt] in "=;,\n" or code[t : t + 1] == "\n":
            spans.append((pos, t))
    return spans


def _generic_spans(code: str) -> list[tuple[int, int]]:
    spans = []
    for m in _CALL_GENERIC.finditer(code):
        end = _match_close(code, m.start(), limit=500)
        if end < 0 or code[end : end + 1] != "(":
            continue
        if _scan_type_list(code, _skip_ws(code, m.start() + 1), end - 1):
            spans.append((m.start(), end))
    for m in _ARROW_TYPE_PARAMS.finditer(code):
        spans.append((m.start(2), m.end(2)))
    return spans


_JSX_TEXT_BOUNDARY = "<>{};=()"


def _in_jsx_text(code: str, start: int, end: int) -> bool:
    """True if ``code[start:end]`` sits in JSX text, between a tag or ``}`` and a ``<`` or ``{``."""
    i = start - 1
    while i >= 0 and code[i] not in _JSX_TEXT_BOUNDARY:
        i -= 1
    if i < 0 or not code[i + 1 : start].strip():
        return False
    # Arrow bodies: x => y as T
    if code[i] not in ">}" or (code[i] == ">" and i > 0 and code[i - 1] == "="):
        return False

    j = end
    while j < len(code) and code[j] not in _JSX_TEXT_BOUNDARY:
        j += 1
    return j < len(code) and code[j] in "<{"


def _cast_spans(code: str) -> list[tuple[int, int]]:
    spans = []
    for m in _AS_CAST.finditer(code):
        t = _scan_type(code, m.end())
        if t > 0 and not _in_jsx_text(code, m.start(), t):
            spans.append((m.start(), t))
    for m in _NON_NULL.finditer(code):
        spans.append((m.start(), m.end()))
    return spans


def _remove_annotations(code: str) -> str:
    spans = (
        _function_spans(code)
        + _declaration_spans(code)
        + _generic_spans(code)
        + _cast_spans(code)
    )
    return _delete_spans(code, spans)


def clean_for_browser(source: str, stub_modules: Collection[str] = ()) -> str:
    """Turn one TSX/JSX module into a script fragment runnable with the preview runtime.

    Imports from ``stub_modules`` become destructuring from the in-page
    module registry; every other import is dropped. ``export default`` is
    bound to ``__DefaultExport__``.
    """
    code, literals = mask_literals(source)
    code = _rewrite_imports(code, literals, stub_modules)
    code = _remove_declarations(code)
    code = _rewrite_exports(code)
    code = _remove_annotations(code)
    return restore_literals(code, literals)
