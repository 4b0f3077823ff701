"""
Logic-less template engine for literature note titles, paths and content.

Templates use a small Handlebars/Mustache subset: variable interpolation,
conditionals, loops and comments. There is no code execution and no helper
registry; anything outside the supported syntax is rejected when the template
is compiled, so a bad template is reported before any note is synthesized.

Supported syntax:
- ``{{name}}``, ``{{a.b}}``, ``{{[container-title]}}``, ``{{{name}}}``
- ``{{this}}`` / ``{{.}}``, ``{{../name}}``, ``{{@root.name}}``
- ``{{@index}}``, ``{{@first}}``, ``{{@last}}``, ``{{@key}}`` inside loops
- ``{{#if x}}...{{else}}...{{/if}}``, ``{{#unless x}}...{{/unless}}``
- ``{{#each xs}}...{{else}}...{{/each}}``, ``{{#with x}}...{{/with}}``
- Mustache sections ``{{#x}}...{{/x}}`` and inverted ``{{^x}}...{{/x}}``
- Comments ``{{! ... }}`` and ``{{!-- ... --}}``
- Whitespace control ``{{~x}}`` / ``{{x~}}`` and escaped ``\\{{`` literals

Undefined names render as empty text. Output is never HTML-escaped: the
rendered text is Markdown or a file path, not HTML. A block, ``else`` or
comment tag alone on its line is removed together with that line's
indentation and line break, so multi-line templates do not gain blank lines.

Example usage:
    >>> template = compile_template("{{authorString}} ({{year}})")
    >>> template.render({"authorString": "Smith, J.", "year": 2019})
    'Smith, J. (2019)'
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, is_dataclass
import re
from typing import Any

from literature_notes.domain.exceptions import TemplateSyntaxError

BLOCK_HELPERS = frozenset({"if", "unless", "each", "with"})

_SEGMENT_PATTERN = re.compile(r"\[([^\]]+)\]|([^.\[\]/]+)")
_MISSING = object()


@dataclass
class _Path:
    segments: tuple[str, ...]
    depth: int = 0
    scoped: bool = False
    """True for ``this.x`` / ``./x`` / ``../x``: no walk up the context stack."""


@dataclass
class _Text:
    text: str


@dataclass
class _Var:
    path: _Path


@dataclass
class _Block:
    kind: str
    """One of BLOCK_HELPERS, "section" or "inverted"."""

    name: str
    path: _Path
    position: int
    body: list = field(default_factory=list)
    else_body: list = field(default_factory=list)
    in_else: bool = False


@dataclass
class _Frame:
    value: Any
    data: dict[str, Any] = field(default_factory=dict)


def _syntax_error(message: str, source: str, position: int) -> TemplateSyntaxError:
    return TemplateSyntaxError(message, source=source, position=position)


def _parse_path(expression: str, source: str, position: int) -> _Path:
    if not expression:
        raise _syntax_error("Empty expression", source, position)
    if any(ch.isspace() for ch in expression):
        raise _syntax_error(
            f"Unsupported helper expression '{expression}'", source, position
        )

    depth = 0
    rest = expression
    while rest.startswith("../"):
        depth += 1
        rest = rest[3:]

    scoped = depth > 0
    if rest in ("this", "."):
        return _Path((), depth, True)
    if rest.startswith("this."):
        rest = rest[5:]
        scoped = True
    elif rest.startswith("./"):
        rest = rest[2:]
        scoped = True

    segments: list[str] = []
    cursor = 0
    while cursor < len(rest):
        match = _SEGMENT_PATTERN.match(rest, cursor)
        if match is None:
            raise _syntax_error(f"Invalid name '{expression}'", source, position)
        segments.append(match.group(1) if match.group(1) is not None else match.group(2))
        cursor = match.end()
        if cursor < len(rest):
            if rest[cursor] not in "./":
                raise _syntax_error(f"Invalid name '{expression}'", source, position)
            cursor += 1
            if cursor == len(rest):
                raise _syntax_error(f"Invalid name '{expression}'", source, position)

    if not segments:
        raise _syntax_error(f"Invalid name '{expression}'", source, position)
    return _Path(tuple(segments), depth, scoped)


def _tokenize(source: str) -> list[tuple[str, str, int]]:
    """Split a template into ("text", text, pos), ("tag", inner, pos) and
    ("comment", "", pos) tokens."""
    tokens: list[tuple[str, str, int]] = []
    pending_text: list[str] = []
    strip_next = False
    pos = 0

    def flush_text(strip_right: bool) -> None:
        text = "".join(pending_text)
        pending_text.clear()
        if strip_right:
            text = text.rstrip()
        if text:
            tokens.append(("text", text, pos))

    while True:
        start = source.find("{{", pos)
        chunk = source[pos:] if start == -1 else source[pos:start]
        if strip_next:
            chunk = chunk.lstrip()
            strip_next = False

        if start == -1:
            pending_text.append(chunk)
            flush_text(False)
            return tokens

        if start > 0 and source[start - 1] == "\\":
            pending_text.append(chunk[:-1] + "{{")
            pos = start + 2
            continue

        pending_text.append(chunk)

        if source.startswith("{{{", start):
            end = source.find("}}}", start + 3)
            if end == -1:
                raise _syntax_error("Unterminated '{{{' tag", source, start)
            inner = source[start + 3 : end]
            flush_text(False)
            tokens.append(("tag", "&" + inner.strip(), start))
            pos = end + 3
            continue

        body_start = start + 2
        strip_left = source.startswith("~", body_start)
        if strip_left:
            body_start += 1

        if source.startswith("!--", body_start):
            end = source.find("--", body_start + 3)
            while end != -1 and not re.match(r"--~?\}\}", source[end:]):
                end = source.find("--", end + 1)
            if end == -1:
                raise _syntax_error("Unterminated comment", source, start)
            close = source.find("}}", end)
            strip_next = source[close - 1] == "~"
            flush_text(strip_left)
            tokens.append(("comment", "", start))
            pos = close + 2
            continue

        end = source.find("}}", body_start)
        if end == -1:
            raise _syntax_error("Unterminated '{{' tag", source, start)
        inner = source[body_start:end]
        if inner.endswith("~"):
            inner = inner[:-1]
            strip_next = True

        flush_text(strip_left)
        if inner.startswith("!"):
            tokens.append(("comment", "", start))
        else:
            tokens.append(("tag", inner.strip(), start))
        pos = end + 2


def _is_standalone_kind(kind: str, value: str) -> bool:
    if kind == "comment":
        return True
    return kind == "tag" and (value == "else" or value[:1] in ("#", "^", "/"))


def _strip_standalone_lines(
    tokens: list[tuple[str, str, int]],
) -> list[tuple[str, str, int]]:
    """Drop the indentation and line break around block tags alone on a line.

    A block, ``else`` or comment tag whose line holds nothing but whitespace
    leaves no trace in the output, as in Handlebars and Mustache.
    """
    cut_head: dict[int, int] = {}
    cut_tail: dict[int, int] = {}
    last = len(tokens) - 1

    for i, (kind, value, _) in enumerate(tokens):
        if not _is_standalone_kind(kind, value):
            continue

        tail = ""
        if i > 0:
            before_kind, before_text, _ = tokens[i - 1]
            if before_kind != "text":
                continue
            _, newline, tail = before_text.rpartition("\n")
            # without a newline the text only reaches back to line start
            # when it is the first token
            if tail.strip() or (not newline and i > 1):
                continue

        head = 0
        if i < last:
            after_kind, after_text, _ = tokens[i + 1]
            if after_kind != "text":
                continue
            line, newline, _ = after_text.partition("\n")
            if line.strip() or (not newline and i + 1 < last):
                continue
            head = len(line) + len(newline)

        if i > 0:
            cut_tail[i - 1] = len(tail)
        if i < last:
            cut_head[i + 1] = head

    stripped = []
    for i, (kind, value, position) in enumerate(tokens):
        if kind == "text" and (i in cut_head or i in cut_tail):
            value = value[cut_head.get(i, 0) : len(value) - cut_tail.get(i, 0)]
            if not value:
                continue
        stripped.append((kind, value, position))
    return stripped


def _parse(source: str) -> list:
    root: list = []
    stack: list[_Block] = []

    def target() -> list:
        if not stack:
            return root
        block = stack[-1]
        return block.else_body if block.in_else else block.body

    for kind, value, position in _strip_standalone_lines(_tokenize(source)):
        if kind == "text":
            target().append(_Text(value))
            continue
        if kind == "comment":
            continue

        if not value:
            raise _syntax_error("Empty tag", source, position)

        sigil = value[0]
        if sigil == "#":
            words = value[1:].split(None, 1)
            if not words:
                raise _syntax_error("Block tag without a name", source, position)
            name = words[0]
            if name in BLOCK_HELPERS:
                if len(words) < 2:
                    raise _syntax_error(
                        f"Block helper '{name}' requires an argument", source, position
                    )
                block = _Block(name, name, _parse_path(words[1], source, position), position)
            elif len(words) > 1:
                raise _syntax_error(f"Unknown block helper '{name}'", source, position)
            else:
                block = _Block("section", name, _parse_path(name, source, position), position)
            target().append(block)
            stack.append(block)
        elif sigil == "^":
            name = value[1:].strip()
            if not name:
                raise _syntax_error("Inverted section without a name", source, position)
            block = _Block("inverted", name, _parse_path(name, source, position), position)
            target().append(block)
            stack.append(block)
        elif sigil == "/":
            name = value[1:].strip()
            if not stack:
                raise _syntax_error(f"Unexpected closing tag '{name}'", source, position)
            if stack[-1].name != name:
                raise _syntax_error(
                    f"Closing tag '{name}' does not match '{stack[-1].name}'",
                    source,
                    position,
                )
            stack.pop()
        elif value == "else":
            if not stack:
                raise _syntax_error("'else' outside of a block", source, position)
            if stack[-1].in_else:
                raise _syntax_error("Duplicate 'else' in block", source, position)
            stack[-1].in_else = True
        elif sigil == ">":
            raise _syntax_error("Partials are not supported", source, position)
        elif sigil == "&":
            target().append(_Var(_parse_path(value[1:].strip(), source, position)))
        else:
            target().append(_Var(_parse_path(value, source, position)))

    if stack:
        raise _syntax_error(
            f"Unclosed block '{stack[-1].name}'", source, stack[-1].position
        )
    return root


def _get(value: Any, key: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(key, _MISSING)
    if isinstance(value, Sequence) and not isinstance(value, str):
        if key.isdigit() and int(key) < len(value):
            return value[int(key)]
        if key == "length":
            return len(value)
        return _MISSING
    if key.startswith("_") or value is None:
        return _MISSING
    if is_dataclass(value) and not isinstance(value, type):
        return getattr(value, key, _MISSING)
    return _MISSING


def _resolve(path: _Path, stack: list[_Frame]) -> Any:
    frames = stack[: len(stack) - path.depth] if path.depth else stack
    if not frames:
        return None

    segments = path.segments
    if not segments:
        return frames[-1].value

    head = segments[0]
    if head.startswith("@"):
        name = head[1:]
        if name == "root":
            value = stack[0].value
        else:
            value = next(
                (frame.data[name] for frame in reversed(frames) if name in frame.data),
                _MISSING,
            )
    elif path.scoped:
        value = _get(frames[-1].value, head)
    else:
        value = next(
            (
                found
                for found in (_get(frame.value, head) for frame in reversed(frames))
                if found is not _MISSING
            ),
            _MISSING,
        )

    for segment in segments[1:]:
        if value is _MISSING:
            break
        value = _get(value, segment)

    return None if value is _MISSING else value


def _is_truthy(value: Any) -> bool:
    if value is None or value is False:
        return False
    if isinstance(value, (str, Sequence, Mapping)):
        return len(value) > 0
    if isinstance(value, (int, float)):
        return value != 0
    return True


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, str):
        return value
    if isinstance(value, Sequence):
        return ",".join(_to_text(item) for item in value)
    return str(value)


def _iterate(value: Any) -> list[tuple[Any, dict[str, Any]]]:
    if isinstance(value, Mapping):
        items = list(value.items())
        return [
            (item, {"key": key, "index": i, "first": i == 0, "last": i == len(items) - 1})
            for i, (key, item) in enumerate(items)
        ]
    items = list(value)
    return [
        (item, {"index": i, "first": i == 0, "last": i == len(items) - 1})
        for i, item in enumerate(items)
    ]


def _render_block(block: _Block, stack: list[_Frame], out: list[str]) -> None:
    value = _resolve(block.path, stack)

    if block.kind == "if":
        _render(block.body if _is_truthy(value) else block.else_body, stack, out)
    elif block.kind == "unless":
        _render(block.else_body if _is_truthy(value) else block.body, stack, out)
    elif block.kind == "inverted":
        _render(block.else_body if _is_truthy(value) else block.body, stack, out)
    elif block.kind == "with":
        if _is_truthy(value):
            _render(block.body, stack + [_Frame(value)], out)
        else:
            _render(block.else_body, stack, out)
    elif not _is_truthy(value):
        _render(block.else_body, stack, out)
    elif isinstance(value, (Sequence, Mapping)) and not isinstance(value, str):
        if block.kind == "section" and isinstance(value, Mapping):
            _render(block.body, stack + [_Frame(value)], out)
            return
        for item, data in _iterate(value):
            _render(block.body, stack + [_Frame(item, data)], out)
    elif block.kind == "each":
        _render(block.else_body, stack, out)
    else:
        _render(block.body, stack + [_Frame(value)], out)


def _render(nodes: list, stack: list[_Frame], out: list[str]) -> None:
    for node in nodes:
        if isinstance(node, _Text):
            out.append(node.text)
        elif isinstance(node, _Var):
            out.append(_to_text(_resolve(node.path, stack)))
        else:
            _render_block(node, stack, out)


class CompiledTemplate:
    """A template bound to its source string, renderable many times.

    Instances are produced by :func:`compile_template` and are immutable.
    """

    def __init__(self, source: str, nodes: list) -> None:
        self._source = source
        self._nodes = nodes

    @property
    def source(self) -> str:
        return self._source

    def render(self, context: Mapping[str, Any]) -> str:
        """Render the template against a named-field context.

        Args:
            context: Mapping of field names to values. Fields referenced by the
                template but absent from the context render as empty text.

        Returns:
            The rendered string.
        """
        out: list[str] = []
        _render(self._nodes, [_Frame(context)], out)
        return "".join(out)

    __call__ = render

    def __repr__(self) -> str:
        return f"CompiledTemplate({self._source!r})"


def compile_template(source: str) -> CompiledTemplate:
    """Compile a template source string.

    Compilation is a pure function of ``source``.

    Args:
        source: Template text.

    Returns:
        The compiled template.

    Raises:
        TemplateSyntaxError: If the template uses unsupported or malformed syntax.
    """
    if not isinstance(source, str):
        raise TemplateSyntaxError(
            f"Template source must be a string, got {type(source).__name__}"
        )
    return CompiledTemplate(source, _parse(source))


def render(template: CompiledTemplate, context: Mapping[str, Any]) -> str:
    """Render ``template`` with ``context``. See :meth:`CompiledTemplate.render`."""
    return template.render(context)


@dataclass(frozen=True)
class NoteTemplates:
    """The three compiled literature note templates."""

    title: CompiledTemplate
    path: CompiledTemplate
    content: CompiledTemplate


def compile_note_templates(title: str, path: str, content: str) -> NoteTemplates:
    """Compile the title, path and content templates together.

    Either all three compile or :class:`TemplateSyntaxError` is raised, naming
    the template that failed.
    """
    compiled = {}
    for name, source in (("title", title), ("path", path), ("content", content)):
        try:
            compiled[name] = compile_template(source)
        except TemplateSyntaxError as e:
            raise TemplateSyntaxError(
                f"Invalid {name} template: {e.message}",
                source=e.source,
                position=e.position,
            ) from e
    return NoteTemplates(**compiled)
