"""依存境界（core/sketches/export/interactive）の破りを検出するテスト。"""

from __future__ import annotations

import ast
from importlib.util import resolve_name
from pathlib import Path


def _repo_root() -> Path:
    path = Path(__file__).resolve()
    for parent in path.parents:
        if (parent / "pyproject.toml").is_file() and (parent / "src").is_dir():
            return parent
    raise RuntimeError("repo root が見つからない")


def _module_name_for_path(*, path: Path, src_root: Path) -> tuple[str, bool]:
    parts = list(path.relative_to(src_root).with_suffix("").parts)
    is_package = parts[-1] == "__init__"
    if is_package:
        parts = parts[:-1]
    if not parts:
        raise ValueError(f"src 直下の __init__.py はモジュール名にできない: {path}")
    return ".".join(parts), is_package


def _resolve_importfrom_targets(
    *,
    current_module: str,
    is_package: bool,
    node: ast.ImportFrom,
) -> set[str]:
    level = int(node.level or 0)
    if level == 0:
        if node.module is None:
            return set()
        base = str(node.module)
    else:
        package = current_module if is_package else current_module.rsplit(".", 1)[0]
        try:
            base = resolve_name("." * level + (node.module or ""), package)
        except ImportError as exc:
            raise ValueError(
                f"相対 import の解決に失敗: current_module={current_module!r}, "
                f"level={level}, module={node.module!r}"
            ) from exc

    targets = {base}
    targets.update(f"{base}.{alias.name}" for alias in node.names if alias.name != "*")
    return targets


def _imported_modules(*, path: Path, src_root: Path) -> set[str]:
    current_module, is_package = _module_name_for_path(path=path, src_root=src_root)
    modules: set[str] = set()
    for node in ast.walk(ast.parse(path.read_text(encoding="utf-8"))):
        if isinstance(node, ast.Import):
            modules.update(str(alias.name) for alias in node.names)
        elif isinstance(node, ast.ImportFrom):
            modules.update(
                _resolve_importfrom_targets(
                    current_module=current_module,
                    is_package=is_package,
                    node=node,
                )
            )
    return modules


def _assert_no_forbidden_imports(
    *,
    root: Path,
    forbidden_prefixes: tuple[str, ...],
) -> None:
    repo_root = _repo_root()
    src_root = repo_root / "src"
    violations: list[str] = []
    for path in sorted(root.rglob("*.py")):
        rel = path.relative_to(repo_root)
        bad = sorted(
            m for m in _imported_modules(path=path, src_root=src_root) if m.startswith(forbidden_prefixes)
        )
        if bad:
            violations.append(f"{rel}: {', '.join(bad)}")

    assert not violations, "依存境界違反の import を検出:\n" + "\n".join(violations)


def test_core_does_not_depend_on_export_or_interactive() -> None:
    root = _repo_root()
    _assert_no_forbidden_imports(
        root=root / "src" / "sketchbook" / "core",
        forbidden_prefixes=(
            "sketchbook.export",
            "sketchbook.interactive",
            "sketchbook.sketches",
            "sketchbook.api",
            "pyglet",
            "moderngl",
        ),
    )


def test_sketches_draw_only_through_core() -> None:
    root = _repo_root()
    _assert_no_forbidden_imports(
        root=root / "src" / "sketchbook" / "sketches",
        forbidden_prefixes=("sketchbook.export", "sketchbook.interactive", "sketchbook.api", "pyglet", "moderngl"),
    )


def test_export_does_not_depend_on_interactive() -> None:
    root = _repo_root()
    _assert_no_forbidden_imports(
        root=root / "src" / "sketchbook" / "export",
        forbidden_prefixes=("sketchbook.interactive", "pyglet", "moderngl"),
    )


def _parse_single_stmt(source: str) -> ast.stmt:
    tree = ast.parse(source)
    assert len(tree.body) == 1
    assert isinstance(tree.body[0], ast.stmt)
    return tree.body[0]


def test__resolve_importfrom_targets_handles_relative_imports() -> None:
    node = _parse_single_stmt("from ..export import svg\n")
    assert isinstance(node, ast.ImportFrom)
    got = _resolve_importfrom_targets(
        current_module="sketchbook.core.canvas",
        is_package=False,
        node=node,
    )
    assert "sketchbook.export" in got
    assert "sketchbook.export.svg" in got

    node = _parse_single_stmt("from . import export\n")
    assert isinstance(node, ast.ImportFrom)
    got = _resolve_importfrom_targets(
        current_module="sketchbook.api",
        is_package=True,
        node=node,
    )
    assert "sketchbook.api.export" in got

    node = _parse_single_stmt("from ..export import *\n")
    assert isinstance(node, ast.ImportFrom)
    got = _resolve_importfrom_targets(
        current_module="sketchbook.core.canvas",
        is_package=False,
        node=node,
    )
    assert got == {"sketchbook.export"}
