"""Tests for glance._cli — argument parsing and dispatch."""

from __future__ import annotations

from pathlib import Path

import pytest

from glance._cli import _build_parser, main


class TestBuildParser:
    """_build_parser — CLI argument parsing."""

    def test_defaults(self) -> None:
        args = _build_parser().parse_args([])
        assert args.file is None
        assert args.host is None
        assert args.port is None
        assert args.static_mode is False
        assert args.clipboard is False
        assert args.watch is None
        assert args.poll_interval is None
        assert args.no_browser is False

    def test_file_positional(self) -> None:
        args = _build_parser().parse_args(["README.md"])
        assert args.file == "README.md"

    def test_short_flags(self) -> None:
        args = _build_parser().parse_args(["-H", "0.0.0.0", "-P", "8080", "-s", "-C"])
        assert args.host == "0.0.0.0"
        assert args.port == 8080
        assert args.static_mode is True
        assert args.clipboard is True

    def test_long_flags(self) -> None:
        args = _build_parser().parse_args([
            "doc.md",
            "--host", "localhost",
            "--port", "9000",
            "--watch", "poll",
            "--poll-interval", "250",
            "--no-browser",
        ])
        assert args.host == "localhost"
        assert args.port == 9000
        assert args.watch == "poll"
        assert args.poll_interval == 250
        assert args.no_browser is True

    def test_invalid_watch_mode(self) -> None:
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["--watch", "inotify"])

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            _build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "glance" in capsys.readouterr().out


class TestMain:
    """main — dispatch and exit codes."""

    def test_dispatches_preview(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[tuple[object, dict[str, object]]] = []
        monkeypatch.setattr(
            "glance.app.preview", lambda source, **kw: calls.append((source, kw))
        )

        main(["doc.md", "-P", "8080", "--no-browser"])

        source, options = calls[0]
        assert source == "doc.md"
        assert options["port"] == 8080
        assert options["open_browser"] is False
        assert options["host"] is None

    def test_dispatches_static(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[object] = []
        monkeypatch.setattr("glance.app.render_static", lambda source, **kw: calls.append(source))

        main(["-s", "doc.md"])

        assert calls == ["doc.md"]

    def test_file_and_clipboard_exit_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["doc.md", "--clipboard"])
        assert exc_info.value.code == 1
        assert "Error: Cannot use both a file and the clipboard" in capsys.readouterr().err

    def test_no_file_in_server_mode_exits_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1
        assert "No input file specified in server mode." in capsys.readouterr().err

    def test_unreadable_file_exits_one(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "missing.md"), "--no-browser"])
        assert exc_info.value.code == 1
        assert "Error opening file" in capsys.readouterr().err

    def test_bind_failure_exits_one(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        def _bind_fails(source: object, **kw: object) -> None:
            raise OSError(98, "Address already in use")

        monkeypatch.setattr("glance.app.preview", _bind_fails)
        with pytest.raises(SystemExit) as exc_info:
            main(["doc.md"])
        assert exc_info.value.code == 1
        assert "Address already in use" in capsys.readouterr().err

    def test_keyboard_interrupt_exits_zero(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _interrupted(source: object, **kw: object) -> None:
            raise KeyboardInterrupt

        monkeypatch.setattr("glance.app.preview", _interrupted)
        with pytest.raises(SystemExit) as exc_info:
            main(["doc.md"])
        assert exc_info.value.code == 0
