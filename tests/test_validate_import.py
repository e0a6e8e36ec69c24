# tests/test_validate_import.py

"""
Tests for the import file validator.

These tests verify that `validate_import.py` reports importable documents,
skipped records and zero-source documents correctly.
"""

import json
from pathlib import Path

import pytest

from src.sharai_client.loaders import detect_format
from src.sharai_client.scripts.validate_import import (
    main as validate_main,
    validate_flat_document,
    validate_import,
)


FIXTURES = Path(__file__).parent / "fixtures"


def make_doc(**overrides):
    doc = {
        "title": "Wudu",
        "content": "The steps of ablution.",
        "type": "worship",
        "sources": [{"title": "Sahih Muslim", "text": "Book of Purification"}],
    }
    doc.update(overrides)
    return doc


# -------------------------------------------------------------------
# Unit tests for validate_flat_document
# -------------------------------------------------------------------


def test_valid_document_has_no_findings():
    errors, warnings, ok = validate_flat_document(make_doc(), idx=0, strict=False)

    assert ok is True
    assert errors == []
    assert warnings == []


def test_empty_sources_is_warning_by_default():
    errors, warnings, ok = validate_flat_document(make_doc(sources=[]), idx=2, strict=False)

    assert ok is True
    assert errors == []
    assert warnings == ["[idx=2] has an empty 'sources' array"]


def test_empty_sources_is_error_in_strict_mode():
    errors, _, ok = validate_flat_document(make_doc(sources=[]), idx=0, strict=True)

    assert ok is True
    assert errors == ["[idx=0] has an empty 'sources' array"]


def test_unknown_type_is_warning():
    _, warnings, ok = validate_flat_document(make_doc(type="tafsir"), idx=0, strict=True)

    assert ok is True
    assert warnings == ["[idx=0] unknown type 'tafsir'"]


def test_invalid_document_reported_as_skipped():
    errors, warnings, ok = validate_flat_document(make_doc(title=""), idx=1, strict=False)

    assert ok is False
    assert errors == []
    assert "will be skipped" in warnings[0]


def test_validate_import_topic_tree_reports_skips():
    tree = json.loads((FIXTURES / "topic_tree_small.json").read_text(encoding="utf-8"))

    errors, warnings, importable = validate_import(detect_format(tree))

    assert errors == []
    assert importable == 3
    assert len(warnings) == 2


def test_validate_import_nothing_importable_is_error():
    errors, _, importable = validate_import(detect_format({}))

    assert importable == 0
    assert errors == ["No valid documents found to import"]


# -------------------------------------------------------------------
# CLI tests for main()
# -------------------------------------------------------------------


def test_main_passes_on_fixture(capsys):
    with pytest.raises(SystemExit) as excinfo:
        validate_main(["--path", str(FIXTURES / "flat_small.json")])

    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert "VALIDATION PASSED" in out
    assert "Importable documents: 2" in out
    assert "[idx=2] has an empty 'sources' array" in out


def test_main_strict_fails_on_zero_source_document(capsys):
    with pytest.raises(SystemExit) as excinfo:
        validate_main(["--path", str(FIXTURES / "flat_small.json"), "--strict"])

    assert excinfo.value.code == 1
    assert "VALIDATION FAILED" in capsys.readouterr().out


def test_main_invalid_json_fails_to_load(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text("not json", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        validate_main(["--path", str(path)])

    assert excinfo.value.code == 1
    assert "FAILED TO LOAD FILE" in capsys.readouterr().out


def test_main_non_utf8_file_fails_to_load(tmp_path, capsys):
    path = tmp_path / "utf16.json"
    path.write_bytes(b"\xff\xfe[]")

    with pytest.raises(SystemExit) as excinfo:
        validate_main(["--path", str(path)])

    assert excinfo.value.code == 1
    assert "FAILED TO LOAD FILE" in capsys.readouterr().out


def test_main_missing_file_fails_to_load(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        validate_main(["--path", str(tmp_path / "missing.json")])

    assert excinfo.value.code == 1
    assert "FAILED TO LOAD FILE" in capsys.readouterr().out
