# どこで: `src/sketchbook/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: データセットや出力先、各スケッチの定数をコードを書き換えずに差し替えられるようにするため。

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """sketchbook の実行時設定。"""

    config_path: Path | None
    output_dir: Path
    data_dir: Path
    window_pos: tuple[int, int]
    window_step: tuple[int, int]
    png_scale: float
    sketches: dict[str, dict[str, Any]]

    def sketch_options(self, name: str) -> dict[str, Any]:
        """スケッチ名に対応する設定 mapping のコピーを返す（未設定なら空）。"""

        return dict(self.sketches.get(str(name), {}))


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    _EXPLICIT_CONFIG_PATH = Path(str(path)).expanduser()
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".sketchbook" / "config.yaml",
        home / ".config" / "sketchbook" / "config.yaml",
    )


def _expand_path_text(text: str) -> str:
    return os.path.expandvars(os.path.expanduser(str(text)))


def _as_optional_path(value: Any) -> Path | None:
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    return Path(_expand_path_text(s))


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_int_pair(value: Any, *, key: str) -> tuple[int, int] | None:
    if value is None:
        return None
    try:
        seq = list(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}") from exc
    if len(seq) != 2:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}")
    try:
        x = int(seq[0])
        y = int(seq[1])
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の整数配列である必要があります: got={value!r}") from exc
    return (x, y)


def _as_float(value: Any, *, key: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    import yaml  # type: ignore[import-untyped]

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")

    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    return _load_yaml_text(text, source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("sketchbook")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except OSError as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="sketchbook/resource/default_config.yaml")


def _merge_payload(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """トップレベルは後勝ちで上書きし、`sketches` だけはスケッチ単位でマージする。"""

    merged = dict(base)
    for key, value in override.items():
        if key == "sketches" and isinstance(value, dict):
            sketches = _as_mapping(merged.get("sketches"), key="sketches")
            for name, options in value.items():
                current = _as_mapping(sketches.get(name), key=f"sketches.{name}")
                current.update(_as_mapping(options, key=f"sketches.{name}"))
                sketches[str(name)] = current
            merged["sketches"] = sketches
            continue
        merged[key] = value
    return merged


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。"""

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        payload = _merge_payload(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge_payload(payload, _load_yaml_config(explicit_path))

    version = payload.get("version")
    if version is None:
        raise RuntimeError(
            "config.yaml の version が未設定です（同梱 default_config.yaml を確認してください）"
        )
    try:
        version_i = int(version)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    paths = _as_mapping(payload.get("paths"), key="paths")
    output_dir = _as_optional_path(paths.get("output_dir"))
    if output_dir is None:
        raise RuntimeError(
            "paths.output_dir が未設定です（同梱 default_config.yaml を確認してください）"
        )
    data_dir = _as_optional_path(paths.get("data_dir"))
    if data_dir is None:
        raise RuntimeError(
            "paths.data_dir が未設定です（同梱 default_config.yaml を確認してください）"
        )

    ui = _as_mapping(payload.get("ui"), key="ui")
    window_pos = _as_int_pair(ui.get("window_position"), key="ui.window_position")
    if window_pos is None:
        raise RuntimeError(
            "ui.window_position が未設定です（同梱 default_config.yaml を確認してください）"
        )
    window_step = _as_int_pair(ui.get("window_step"), key="ui.window_step") or (0, 0)

    export = _as_mapping(payload.get("export"), key="export")
    png = _as_mapping(export.get("png"), key="export.png")
    png_scale = _as_float(png.get("scale"), key="export.png.scale")
    if png_scale is None:
        raise RuntimeError(
            "export.png.scale が未設定です（同梱 default_config.yaml を確認してください）"
        )
    if png_scale <= 0:
        raise ValueError(f"export.png.scale は正の値である必要があります: got={png_scale}")

    sketches_raw = _as_mapping(payload.get("sketches"), key="sketches")
    sketches = {
        str(name): _as_mapping(options, key=f"sketches.{name}")
        for name, options in sketches_raw.items()
    }

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        output_dir=output_dir,
        data_dir=data_dir,
        window_pos=window_pos,
        window_step=window_step,
        png_scale=float(png_scale),
        sketches=sketches,
    )
    _CONFIG_CACHE = cfg
    return cfg


def output_root_dir() -> Path:
    """出力ファイルを保存する既定ルートディレクトリを返す。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.sketchbook/config.yaml` / `~/.config/sketchbook/config.yaml`
    3) `run(..., config_path=...)` の `config_path`
    """

    return Path(runtime_config().output_dir)


def data_root_dir() -> Path:
    """入力データ（データセット）を探すルートディレクトリを返す。"""

    return Path(runtime_config().data_dir)


__all__ = [
    "RuntimeConfig",
    "data_root_dir",
    "output_root_dir",
    "runtime_config",
    "set_config_path",
]
