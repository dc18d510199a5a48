from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import write_folder_mod, write_zip_mod

import cli


@pytest.fixture
def game_root(tmp_path: Path) -> Path:
    root = tmp_path / "Elegos"
    mods = root / "Mods"
    write_folder_mod(mods, "ModA", {"ID": "a1", "Name": "Alpha"})
    write_folder_mod(mods, "ModB", {"ID": "b1", "Name": "Beta"})
    write_zip_mod(mods, "ModC.zip", {"ID": "c1", "Name": "Gamma"})
    return root


def run(game_root: Path, *extra: str) -> None:
    cli.main(["--game", str(game_root), "--config-path", str(game_root / "missing.toml"), *extra])


def read_order(game_root: Path) -> list:
    return list(json.loads((game_root / "Mods" / "modorder.json").read_text(encoding="utf-8")).items())


def test_cli_prints_order_without_saving(game_root: Path, capsys) -> None:
    run(game_root)

    out = capsys.readouterr().out
    assert "Alpha (a1, folder)" in out
    assert "Gamma (c1, zip)" in out
    assert not (game_root / "Mods" / "modorder.json").exists()


def test_cli_edits_and_saves(game_root: Path) -> None:
    run(game_root, "--enable", "c1", "--move", "c1:0", "--disable", "a1", "--save")

    assert read_order(game_root) == [("c1", True), ("a1", False), ("b1", False)]


def test_cli_uses_registry_names(game_root: Path, capsys) -> None:
    registry = game_root / "registry.toml"
    registry.write_text(
        '[mods.alpha-7]\nloadOrderId = "a1"\nname = "Alpha (managed)"\nenabled = true\n',
        encoding="utf-8",
    )

    run(game_root, "--registry", str(registry))

    assert "Alpha (managed) (a1, folder) <alpha-7>" in capsys.readouterr().out


def test_cli_refuses_to_save_duplicates(game_root: Path) -> None:
    write_zip_mod(game_root / "Mods", "ModA.zip", {"ID": "a1", "Name": "Alpha zip"})

    with pytest.raises(SystemExit) as excinfo:
        run(game_root, "--save")

    assert "Alpha zip (a1) has the same identity as Alpha" in str(excinfo.value)
    assert not (game_root / "Mods" / "modorder.json").exists()


def test_cli_unknown_id_exits(game_root: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run(game_root, "--enable", "nope")

    assert "nope" in str(excinfo.value)


def test_cli_exports_report(game_root: Path, tmp_path: Path) -> None:
    run(game_root, "--export-path", str(tmp_path / "reports"))

    assert (tmp_path / "reports" / "load_order_report.xlsx").is_file()


def test_cli_missing_game_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        cli.main(["--game", str(tmp_path / "nowhere")])
