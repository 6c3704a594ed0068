"""Live reload script injection for served HTML.

Every HTML page the dev server returns gets a small script that opens an
``EventSource`` on the reload path and reloads the page on any message.
"""

from __future__ import annotations

import re

_BODY_CLOSE = re.compile(r"</body\s*>", re.IGNORECASE)


def reload_script(reload_path: str = "/_lr") -> str:
    """Return the ``<script>`` tag that listens on *reload_path*."""
    return (
        "<script data-tabby-reload>\n"
        "(function() {\n"
        f"  var es = new EventSource('{reload_path}');\n"
        "  es.onmessage = function() { location.reload(); };\n"
        "  es.onerror = function() {\n"
        "    es.close();\n"
        "    setTimeout(function() { location.reload(); }, 1000);\n"
        "  };\n"
        "})();\n"
        "</script>"
    )


def inject_reload_script(html: str, reload_path: str = "/_lr") -> str:
    """Insert the reload script before the first ``</body>``, or append it."""
    script = reload_script(reload_path)
    match = _BODY_CLOSE.search(html)
    if match is None:
        return html + script
    return html[: match.start()] + script + html[match.start():]
