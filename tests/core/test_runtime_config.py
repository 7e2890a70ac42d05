from pathlib import Path

import pytest

from sketchbook.core.runtime_config import (
    data_root_dir,
    output_root_dir,
    runtime_config,
    set_config_path,
)


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


def _isolate_config_discovery(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def test_output_root_dir_uses_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    assert output_root_dir() == Path("data") / "output"
    assert data_root_dir() == Path("data") / "input"
    cfg = runtime_config()
    assert cfg.config_path is None
    assert cfg.window_pos == (25, 25)
    assert cfg.window_step == (40, 40)
    assert cfg.png_scale == 2.0
    assert cfg.sketch_options("countdown")["total_minutes"] == 25
    assert cfg.sketch_options("balance")["threshold"] == 150
    assert cfg.sketch_options("growth")["reset_leaves_on_rollover"] is False
    assert cfg.sketch_options("unknown") == {}


def test_discovered_config_overrides_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".sketchbook" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text(
        'paths:\n  output_dir: "./out_discovered"\n  data_dir: "./in_discovered"\n',
        encoding="utf-8",
    )

    assert output_root_dir() == Path("out_discovered")
    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.data_dir == Path("in_discovered")
    # paths 以外は同梱値のまま
    assert cfg.window_pos == (25, 25)


def test_sketch_options_are_merged_per_sketch(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".sketchbook" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text(
        "sketches:\n  countdown:\n    total_minutes: 10\n",
        encoding="utf-8",
    )

    cfg = runtime_config()
    countdown = cfg.sketch_options("countdown")
    assert countdown["total_minutes"] == 10
    assert countdown["warning_minutes"] == 5
    assert cfg.sketch_options("notebook")["fps"] == 30


def test_explicit_config_path_overrides_discovered(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".sketchbook" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text('paths:\n  output_dir: "./out_discovered"\n  data_dir: "./in"\n', encoding="utf-8")

    explicit = tmp_path / "explicit.yaml"
    explicit.write_text(
        'paths:\n  output_dir: "./out_explicit"\n  data_dir: "./in"\nexport:\n  png:\n    scale: 4\n',
        encoding="utf-8",
    )
    set_config_path(explicit)

    cfg = runtime_config()
    assert cfg.config_path == explicit
    assert cfg.output_dir == Path("out_explicit")
    assert cfg.png_scale == 4.0


def test_missing_explicit_config_path_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    set_config_path(tmp_path / "missing.yaml")
    with pytest.raises(FileNotFoundError):
        runtime_config()


def test_unsupported_version_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    explicit = tmp_path / "v2.yaml"
    explicit.write_text("version: 2\n", encoding="utf-8")
    set_config_path(explicit)
    with pytest.raises(RuntimeError):
        runtime_config()


def test_non_positive_png_scale_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    explicit = tmp_path / "bad.yaml"
    explicit.write_text("export:\n  png:\n    scale: 0\n", encoding="utf-8")
    set_config_path(explicit)
    with pytest.raises(ValueError):
        runtime_config()
