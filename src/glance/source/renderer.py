"""Markdown renderer — source text to an HTML body.

A pure function over Patitas with every built-in extension enabled
(tables, strikethrough, task lists, footnotes, math, autolinks).  The same
source always renders to byte-identical HTML, which is what lets the
watcher skip a refresh when a save did not change the text.

Two departures from Patitas' stock HTML:

- Math keeps its TeX delimiters (``$…$`` inline, ``$$…$$`` display) inside
  ``math`` spans, so MathJax in the page shell finds and typesets it.
- Soft line breaks become ``<br />``, so a line break in the source is a
  line break in the preview.
"""

from __future__ import annotations

from functools import cache
from typing import TYPE_CHECKING

from patitas import HtmlRenderer
from patitas.nodes import Math, MathBlock, SoftBreak
from patitas.renderers.html import html_escape

from glance._errors import SourceError

if TYPE_CHECKING:
    from patitas import DirectiveRegistry, Markdown, RoleRegistry
    from patitas.nodes import Inline
    from patitas.renderers.html import RenderContext
    from patitas.stringbuilder import StringBuilder


class PreviewRenderer(HtmlRenderer):
    """HtmlRenderer emitting MathJax-ready math and hard soft breaks."""

    __slots__ = ()

    def _render_inline(self, inline: Inline, sb: StringBuilder, ctx: RenderContext) -> None:
        match inline:
            case Math():
                sb.append('<span class="math math-inline">$')
                sb.append(html_escape(inline.content))
                sb.append("$</span>")
            case SoftBreak():
                sb.append("<br />\n")
            case _:
                super()._render_inline(inline, sb, ctx)

    def _render_math_block(self, math: MathBlock, sb: StringBuilder) -> None:
        sb.append('<div class="math math-display">$$\n')
        sb.append(html_escape(math.content))
        sb.append("\n$$</div>\n")


@cache
def _markdown() -> Markdown:
    # Patitas keeps per-call state in ContextVars, so one instance is safe
    # to share across threads.
    from patitas import Markdown

    return Markdown(plugins=["all"])


@cache
def _registries() -> tuple[DirectiveRegistry, RoleRegistry]:
    from patitas import create_default_registry, create_default_role_registry

    return create_default_registry(), create_default_role_registry()


def render_markdown(source: str) -> str:
    """Render Markdown *source* to an HTML fragment.

    Raises:
        SourceError: If Patitas rejects the document (e.g. nesting deeper
            than its safety limit).

    """
    from patitas.errors import PatitasError

    directives, roles = _registries()
    try:
        document = _markdown().parse(source)
        renderer = PreviewRenderer(
            source,
            directive_registry=directives,
            role_registry=roles,
        )
        return renderer.render(document)
    except PatitasError as exc:
        msg = f"Failed to render Markdown: {exc}"
        raise SourceError(msg) from exc
