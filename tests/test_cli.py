from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from cli.doctor import _check_store
from cli.main import app

runner = CliRunner()


@pytest.fixture
def store_file(tmp_path, product_docs):
    path = tmp_path / "content.json"
    path.write_text(json.dumps(product_docs), encoding="utf-8")
    return path


def test_collections_lists_presets():
    result = runner.invoke(app, ["collections"])

    assert result.exit_code == 0
    assert "galleryImages" in result.stdout


def test_resolve_text_uses_requested_language(store_file):
    result = runner.invoke(
        app, ["resolve-text", "products", "calacatta", "description", "--lang", "en", "--store", str(store_file)]
    )

    assert result.exit_code == 0
    assert result.stdout.strip() == "White marble"


def test_resolve_text_falls_back_to_default_language(store_file):
    result = runner.invoke(
        app, ["resolve-text", "products", "calacatta", "description", "--lang", "it", "--store", str(store_file)]
    )

    assert result.exit_code == 0
    assert result.stdout.strip() == "Mármol blanco"


def test_price_json_for_premium_user(store_file):
    result = runner.invoke(
        app,
        ["price", "products", "saint-laurent", "--user", "u1", "--tier", "premium", "--json", "--store", str(store_file)],
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["price"] == 850
    assert payload["tier_label"] == "Premium"


def test_price_unknown_product_exits_1(store_file):
    result = runner.invoke(app, ["price", "products", "missing", "--store", str(store_file)])

    assert result.exit_code == 1


def test_migrate_unknown_entity_exits_1(store_file):
    result = runner.invoke(
        app, ["migrate", "products", "--id", "missing", "--json", "--delay", "0", "--store", str(store_file)]
    )

    assert result.exit_code == 1


def test_migrate_unknown_collection_without_fields_is_rejected(store_file):
    result = runner.invoke(app, ["migrate", "orders", "--json", "--store", str(store_file)])

    assert result.exit_code == 2


class _OfflineTranslator:
    def __init__(self, settings) -> None:
        self.settings = settings

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None

    async def translate(self, text: str, target_language: str) -> str:
        return f"{text} ({target_language})"


@pytest.fixture
def offline(monkeypatch):
    monkeypatch.setattr("cli.main.MyMemoryTranslator", _OfflineTranslator)


def test_migrate_json_stats(store_file, offline):
    result = runner.invoke(app, ["migrate", "products", "--json", "--delay", "0", "--store", str(store_file)])

    assert result.exit_code == 0
    stats = json.loads(result.stdout)
    assert (stats["success"], stats["failed"], stats["skipped"]) == (1, 0, 1)

    saved = json.loads(store_file.read_text(encoding="utf-8"))["products"]["saint-laurent"]
    assert saved["descriptionTranslations"]["fr"] == "Piedra sinterizada de gran formato (fr)"
    assert saved["seoTitleTranslations"]["es"] == "Saint Laurent 12mm"


def test_migrate_renders_summary_table(store_file, offline):
    result = runner.invoke(
        app, ["migrate", "products", "--force", "--lang", "en", "--delay", "0", "--store", str(store_file)]
    )

    assert result.exit_code == 0
    assert "Success" in result.stdout


def test_migrate_rejects_unsupported_language(store_file, offline):
    result = runner.invoke(app, ["migrate", "products", "--lang", "de", "--store", str(store_file)])

    assert result.exit_code == 2


def test_doctor_store_check(store_file, tmp_path):
    ok, detail = _check_store(store_file)
    missing_ok, _ = _check_store(tmp_path / "missing.json")

    assert ok is True
    assert detail == "products=2"
    assert missing_ok is False


def test_migrate_rejects_source_language_as_only_target(store_file, offline):
    result = runner.invoke(
        app, ["migrate", "products", "--lang", "es", "--json", "--delay", "0", "--store", str(store_file)]
    )

    assert result.exit_code == 2


def test_migrate_rejects_malformed_field_path(store_file, offline):
    result = runner.invoke(
        app, ["migrate", "products", "--field", "items[]", "--json", "--delay", "0", "--store", str(store_file)]
    )

    assert result.exit_code == 2


@pytest.fixture
def technical_store(tmp_path):
    path = tmp_path / "content.json"
    doc = {
        "mantenimiento": {"limpieza": "Agua y jabón"},
        "acabadosBordes": [{"alt": "Canto recto"}, {"alt": "Canto romo"}],
    }
    path.write_text(json.dumps({"content": {"datos-tecnicos": doc}}), encoding="utf-8")
    return path


def test_migrate_technical_document_with_preset(technical_store, offline):
    result = runner.invoke(
        app,
        [
            "migrate", "content", "--preset", "datosTecnicos", "--id", "datos-tecnicos",
            "--lang", "en", "--json", "--delay", "0", "--store", str(technical_store),
        ],
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout)["success"] == 1
    saved = json.loads(technical_store.read_text(encoding="utf-8"))["content"]["datos-tecnicos"]
    assert saved["mantenimiento"]["limpiezaTranslations"]["en"] == "Agua y jabón (en)"
    assert saved["acabadosBordes"][1]["altTranslations"]["en"] == "Canto romo (en)"


def test_resolve_text_lists_every_nested_occurrence(technical_store):
    result = runner.invoke(
        app,
        [
            "resolve-text", "content", "datos-tecnicos", "acabadosBordes[].alt",
            "--lang", "fr", "--store", str(technical_store),
        ],
    )

    assert result.exit_code == 0
    assert result.stdout.splitlines() == [
        "acabadosBordes[0].alt: Canto recto",
        "acabadosBordes[1].alt: Canto romo",
    ]
