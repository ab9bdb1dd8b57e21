"""Glance application — wires the live-sync engine into a Chirp app.

The two public functions (preview, render_static) are the primary entry
points.  Both render the document once up front: a preview never starts
without a first artifact, so ``GET /`` can always answer.
"""

import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

from glance.config import GlanceConfig
from glance.config_loader import load_config
from glance.live.cache import Artifact, RenderCache
from glance.live.notifier import ChangeNotifier
from glance.live.stream import LiveStream
from glance.observability import EventLog, LiveCollector
from glance.source.reader import WatchTarget, load_source
from glance.source.renderer import render_markdown
from glance.web.page import Assets

if TYPE_CHECKING:
    from collections.abc import Callable

    from chirp import App

    from glance.export.static import ExportResult
    from glance.source.watcher import SourceWatcher


def create_app(
    config: GlanceConfig,
    cache: RenderCache,
    *,
    assets: Assets | None = None,
    collector: LiveCollector | None = None,
    watcher: SourceWatcher | None = None,
) -> App:
    """Create the Chirp app serving *cache*.

    Registers the page, event stream and stats routes.  When a *watcher*
    is given, its task is started and stopped with the app lifecycle.

    """
    from chirp import App, AppConfig

    from glance.web.routes import register_routes

    app = App(
        config=AppConfig(
            debug=False,
            host=config.host,
            port=config.port,
        )
    )
    stream = LiveStream(
        cache.notifier,
        heartbeat_interval=config.heartbeat_interval,
        collector=collector,
    )
    register_routes(
        app,
        cache,
        stream,
        assets if assets is not None else Assets.bundled(),
        collector,
    )
    _wire_lifecycle(app, cache.notifier, watcher)
    return app


def _wire_lifecycle(app: App, notifier: ChangeNotifier, watcher: SourceWatcher | None) -> None:
    """Start the watcher on startup; stop it and end every stream on shutdown.

    Flow:
        on_startup  → spawn the watcher task (runs ``awatch`` internally)
        file change → refresh → cache.update → notifier.publish
        on_shutdown → stop the watcher, close every subscription

    """

    @app.on_startup
    async def _start_watcher() -> None:
        if watcher is not None:
            watcher.start()

    @app.on_shutdown
    async def _stop_watcher() -> None:
        if watcher is not None:
            await watcher.stop()
        notifier.close()


def _initial_artifact(
    target: WatchTarget, source: str, render: Callable[[str], str]
) -> tuple[Artifact, float]:
    t0 = time.perf_counter()
    html = render(source)
    return Artifact(html=html, source_name=target.display_name), (time.perf_counter() - t0) * 1000


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def preview(source: str | Path | None = None, **kwargs: object) -> None:
    """Serve a live preview of *source*, reloading viewers on every save.

    Args:
        source: Markdown file to preview.  May be omitted with
            ``clipboard=True``.
        **kwargs: Override GlanceConfig fields (``host``, ``port``,
            ``watch_mode``...).  Values from ``glance.toml`` /
            ``glance.yaml`` in the working directory apply underneath.

    Raises:
        ConfigError: If the configuration is invalid or no input is given.
        SourceError: If the initial document cannot be read or rendered.
        OSError: If the server cannot bind its address.

    """
    from glance.banner import print_banner
    from glance.browser import display_host, open_in_browser
    from glance.source.watcher import SourceWatcher, select_detectors

    config = load_config(Path.cwd(), source=source, static=False, **kwargs)
    target, text = load_source(config)
    artifact, render_ms = _initial_artifact(target, text, render_markdown)

    collector = LiveCollector(EventLog())
    notifier = ChangeNotifier(config.mailbox_capacity)
    cache = RenderCache(artifact, notifier)

    watcher: SourceWatcher | None = None
    detectors = select_detectors(config)
    if target.is_watchable:
        watcher = SourceWatcher(
            target,
            cache,
            detectors=detectors,
            render=render_markdown,
            collector=collector,
        )
        watcher.prime(text)

    app = create_app(config, cache, collector=collector, watcher=watcher)

    warnings: list[str] = []
    if watcher is not None and config.watch_mode == "auto" and detectors[0].name == "poll":
        warnings.append(
            f"Native file events are unreliable under WSL; polling every {config.poll_interval_ms} ms"
        )

    url = f"http://{display_host(config.host)}:{config.port}"
    print_banner(
        target.display_name,
        "live",
        url=url,
        watching=detectors[0].name if watcher is not None else None,
        render_ms=render_ms,
        warnings=warnings,
    )
    if config.open_browser:
        open_in_browser(url)

    # Watcher shutdown is handled by the on_shutdown hook registered above.
    app.run(host=config.host, port=config.port)


def render_static(
    source: str | Path | None = None,
    *,
    wait: Callable[[str], object] = input,
    **kwargs: object,
) -> ExportResult:
    """Render *source* once to a temporary HTML file and open it.

    Reads stdin when neither *source* nor ``clipboard=True`` is given.
    Blocks on *wait* (``input`` by default, i.e. until Enter is pressed),
    then deletes the file.

    Raises:
        ConfigError: If the configuration is invalid.
        SourceError: If the document cannot be read or rendered.
        ExportError: If the preview file cannot be written.

    """
    from glance.banner import print_banner
    from glance.browser import open_in_browser
    from glance.export.static import remove_preview, write_preview

    config = load_config(Path.cwd(), source=source, static=True, **kwargs)
    target, text = load_source(config)
    artifact, render_ms = _initial_artifact(target, text, render_markdown)

    result = write_preview(artifact, Assets.bundled())
    try:
        print_banner(
            target.display_name,
            "static",
            url=str(result.output_path),
            render_ms=render_ms,
        )
        if config.open_browser:
            open_in_browser(result.uri)
        wait("Press Enter to exit...")
    except (EOFError, KeyboardInterrupt):
        print(file=sys.stderr)
    finally:
        remove_preview(result)
    return result
