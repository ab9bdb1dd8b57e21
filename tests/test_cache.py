"""Tests for glance.live.cache — the single current artifact."""

from __future__ import annotations

import threading

import pytest

from glance.live.cache import Artifact, RenderCache
from glance.live.notifier import DEFAULT_MAILBOX_CAPACITY, SIGNAL, ChangeNotifier


def _artifact(n: int) -> Artifact:
    return Artifact(html=f"<p>{n}</p>", source_name=f"doc-{n}.md")


class _RecordingNotifier(ChangeNotifier):
    """Notifier that records what the cache held when each signal left."""

    def __init__(self) -> None:
        super().__init__()
        self.cache: RenderCache | None = None
        self.seen_versions: list[int] = []

    def publish(self) -> int:
        assert self.cache is not None
        self.seen_versions.append(self.cache.read().version)
        return super().publish()


class TestArtifact:
    """Artifact — frozen value, replaced never mutated."""

    def test_frozen(self) -> None:
        artifact = _artifact(1)
        with pytest.raises(AttributeError):
            artifact.html = "<p>x</p>"  # type: ignore[misc]

    def test_equality_ignores_commit_time(self) -> None:
        a = Artifact(html="x", source_name="a.md", version=2, committed_at=1.0)
        b = Artifact(html="x", source_name="a.md", version=2, committed_at=2.0)
        assert a == b


class TestRenderCache:
    """read / update semantics."""

    def test_initial_artifact_is_version_one(self, notifier: ChangeNotifier) -> None:
        cache = RenderCache(_artifact(0), notifier)
        current = cache.read()
        assert current.version == 1
        assert current.html == "<p>0</p>"
        assert current.committed_at > 0

    def test_update_replaces_and_stamps_next_version(self, cache: RenderCache) -> None:
        committed, _ = cache.update(_artifact(7))
        assert committed.version == 2
        assert cache.read() is committed
        assert cache.read().html == "<p>7</p>"

    def test_carried_version_is_ignored(self, cache: RenderCache) -> None:
        committed, _ = cache.update(Artifact(html="x", source_name="a.md", version=99))
        assert committed.version == 2

    def test_versions_strictly_increase(self, cache: RenderCache) -> None:
        versions = [cache.update(_artifact(i))[0].version for i in range(5)]
        assert versions == [2, 3, 4, 5, 6]

    def test_update_without_viewers_notifies_nobody(self, cache: RenderCache) -> None:
        _, notified = cache.update(_artifact(1))
        assert notified == 0

    def test_notifier_exposed(self, cache: RenderCache, notifier: ChangeNotifier) -> None:
        assert cache.notifier is notifier


class TestCausalDelivery:
    """A signal leaves only after the artifact it announces is committed."""

    def test_signal_sent_after_commit(self) -> None:
        notifier = _RecordingNotifier()
        cache = RenderCache(_artifact(0), notifier)
        notifier.cache = cache

        for i in range(1, 4):
            cache.update(_artifact(i))

        assert notifier.seen_versions == [2, 3, 4]

    @pytest.mark.asyncio
    async def test_viewer_fetch_after_signal_sees_new_content(
        self, cache: RenderCache, notifier: ChangeNotifier
    ) -> None:
        sub = notifier.subscribe()
        _, notified = cache.update(_artifact(42))

        assert notified == 1
        assert await sub.next() == SIGNAL
        assert cache.read().html == "<p>42</p>"

    @pytest.mark.asyncio
    async def test_one_signal_per_update(
        self, cache: RenderCache, notifier: ChangeNotifier
    ) -> None:
        sub = notifier.subscribe()
        for i in range(3):
            cache.update(_artifact(i))
        assert sub.pending == 3


    @pytest.mark.asyncio
    async def test_slow_viewer_fetch_sees_latest_after_burst(
        self, cache: RenderCache, notifier: ChangeNotifier
    ) -> None:
        slow = notifier.subscribe()
        for i in range(1, 51):
            cache.update(_artifact(i))

        assert slow.pending == DEFAULT_MAILBOX_CAPACITY
        assert await slow.next() == SIGNAL
        current = cache.read()
        assert current.html == "<p>50</p>"
        assert current.version == 51


class TestConcurrentAccess:
    """Readers never observe a torn artifact while writers race."""

    def test_reads_during_concurrent_updates(self, cache: RenderCache) -> None:
        writers = 4
        per_writer = 200
        stop = threading.Event()
        torn: list[Artifact] = []

        def write(offset: int) -> None:
            for i in range(per_writer):
                n = offset * per_writer + i
                cache.update(_artifact(n))

        def read() -> None:
            while not stop.is_set():
                current = cache.read()
                if current.version == 1:
                    continue
                # html and name were written together; they must agree.
                n = current.html.removeprefix("<p>").removesuffix("</p>")
                if current.source_name != f"doc-{n}.md":
                    torn.append(current)

        readers = [threading.Thread(target=read) for _ in range(4)]
        for t in readers:
            t.start()
        threads = [threading.Thread(target=write, args=(w,)) for w in range(writers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        stop.set()
        for t in readers:
            t.join()

        assert torn == []
        assert cache.read().version == 1 + writers * per_writer

    def test_update_order_matches_version_order(self) -> None:
        notifier = _RecordingNotifier()
        cache = RenderCache(_artifact(0), notifier)
        notifier.cache = cache

        threads = [
            threading.Thread(target=lambda: [cache.update(_artifact(i)) for i in range(50)])
            for _ in range(4)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert notifier.seen_versions == list(range(2, 2 + 200))
