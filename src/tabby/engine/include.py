"""``{% campaign_include %}`` — render a partial from the campaign's _includes.

Usage::

    {% campaign_include 'hero.html' title="Summer Sale" show_timer=true items=products %}

The first argument names a file under ``<slug>/_includes/``; a bare name gets
the environment's ``include_extension`` appended. Each ``key=value`` pair is
a Jinja expression: quoted values are strings, ``true``/``false`` are
booleans, and anything else is looked up in the calling template, so pages
can forward their own variables by name.

Inside the partial every pair is visible both as a top-level variable and as
``include.<key>``. The partial also sees everything the caller sees,
including loop variables and names set inside blocks. It is rendered in a
child context derived from the caller's, which is dropped once the partial
is done, so include arguments never leak back into the page.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any

from jinja2 import TemplateError, nodes
from jinja2.ext import Extension

from tabby import log
from tabby.engine.filters import campaign_slug

if TYPE_CHECKING:
    from jinja2 import Environment
    from jinja2.parser import Parser
    from jinja2.runtime import Context


class CampaignIncludeExtension(Extension):
    """Jinja2 extension providing the ``campaign_include`` tag."""

    tags = {"campaign_include"}

    def __init__(self, environment: Environment) -> None:
        super().__init__(environment)
        environment.extend(include_extension=".html")

    def parse(self, parser: Parser) -> nodes.Node:
        lineno = next(parser.stream).lineno
        filename = parser.parse_expression()

        pairs: list[nodes.Pair] = []
        while parser.stream.current.type != "block_end":
            if parser.stream.skip_if("comma"):
                continue
            key = parser.stream.expect("name")
            parser.stream.expect("assign")
            value = parser.parse_expression()
            pairs.append(
                nodes.Pair(
                    nodes.Const(key.value, lineno=key.lineno),
                    value,
                    lineno=key.lineno,
                )
            )

        call = self.call_method(
            "_render_include",
            [nodes.DerivedContextReference(), filename, nodes.Dict(pairs, lineno=lineno)],
            lineno=lineno,
        )
        return nodes.Output([call], lineno=lineno)

    def _render_include(
        self, context: Context, filename: Any, args: dict[str, Any]
    ) -> str:
        slug = campaign_slug(context)
        if slug is None:
            return ""

        if not isinstance(filename, str) or not filename:
            log.error(f"campaign_include: expected a file name, got {filename!r}")
            return ""

        name = filename
        if not PurePosixPath(name).suffix:
            name += self.environment.include_extension  # type: ignore[attr-defined]
        template_name = f"{slug}/_includes/{name}"

        try:
            template = self.environment.get_template(template_name)
            scope = {
                **context.get_all(),
                **args,
                "include": SimpleNamespace(**args),
            }
            return template.render(scope)
        except TemplateError as exc:
            log.error(f"campaign_include: {template_name} — {exc.message or type(exc).__name__}")
            return ""
        except Exception as exc:
            log.error(f"campaign_include: {template_name} — {type(exc).__name__}: {exc}")
            return ""
