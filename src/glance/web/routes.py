"""HTTP surface — the three routes a live preview serves.

- ``GET /`` returns the current artifact wrapped in the page template.
- ``GET /events`` opens a viewer's server-sent event stream.
- ``GET /__glance/stats`` returns JSON diagnostics.

Handlers hold no per-viewer state beyond one request or connection.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from glance.web.page import EVENTS_ENDPOINT, render_page

if TYPE_CHECKING:
    from chirp import App, Request

    from glance.live.cache import RenderCache
    from glance.live.stream import LiveStream
    from glance.observability.collector import LiveCollector
    from glance.web.page import Assets

PAGE_ENDPOINT = "/"
STATS_ENDPOINT = "/__glance/stats"


def register_routes(
    app: App,
    cache: RenderCache,
    stream: LiveStream,
    assets: Assets,
    collector: LiveCollector | None = None,
) -> None:
    """Register the page, event stream, and stats routes on *app*."""
    from chirp import Response

    async def page_handler(request: Request) -> Any:
        # Lock-free read; never waits on a render in progress.
        artifact = cache.read()
        return Response(
            body=render_page(artifact, assets, live=True),
            status=200,
            content_type="text/html; charset=utf-8",
        )

    async def events_handler(request: Request) -> Any:
        return stream.open()

    async def stats_handler(request: Request) -> Any:
        artifact = cache.read()
        payload: dict[str, Any] = {
            "artifact": {
                "source": artifact.source_name,
                "version": artifact.version,
                "committed_at": artifact.committed_at,
            },
            "subscribers": cache.notifier.subscriber_count,
        }
        if collector is not None:
            payload["event_log"] = collector.log.stats()
        return Response(
            body=json.dumps(payload, indent=2),
            status=200,
            content_type="application/json",
        )

    page_handler.__name__ = "glance_page"
    events_handler.__name__ = "glance_events"
    stats_handler.__name__ = "glance_stats"

    app.route(PAGE_ENDPOINT, name="glance:page")(page_handler)
    app.route(EVENTS_ENDPOINT, name="glance:events")(events_handler)
    app.route(STATS_ENDPOINT, name="glance:stats")(stats_handler)
