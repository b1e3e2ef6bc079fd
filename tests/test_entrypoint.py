from __future__ import annotations

import importlib.util
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def _load_root_main():
    spec = importlib.util.spec_from_file_location("catalog_localizer_dev_main", ROOT / "main.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_dev_entrypoint_puts_src_on_path_and_runs_cli(monkeypatch):
    calls: list[str] = []
    monkeypatch.setattr("cli.main.run", lambda: calls.append("run"))
    monkeypatch.setattr(sys, "path", [p for p in sys.path if p != str(ROOT / "src")])

    _load_root_main().main()

    assert calls == ["run"]
    assert str(ROOT / "src") in sys.path
