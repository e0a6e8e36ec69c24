import json

from src.sharai_client.errors import ApiError
from src.sharai_client.scripts import export_documents as export_mod


class FakeExportClient:
    def __init__(self, base_url=None, timeout=None, data=None, error=None):
        self.data = data if data is not None else []
        self.error = error

    def export_documents(self):
        if self.error is not None:
            raise self.error
        return self.data


def test_export_documents_writes_json(tmp_path):
    data = [{"id": 1, "title": "الصلاة", "type": "worship"}]
    output = tmp_path / "nested" / "export.json"

    path = export_mod.export_documents(FakeExportClient(data=data), output)

    assert path == output
    assert json.loads(output.read_text(encoding="utf-8")) == data
    assert "الصلاة" in output.read_text(encoding="utf-8")


def test_main_returns_error_on_backend_failure(tmp_path, monkeypatch):
    monkeypatch.setattr(
        export_mod,
        "SharaiClient",
        lambda base_url=None, timeout=None: FakeExportClient(error=ApiError(403, "Forbidden")),
    )
    output = tmp_path / "export.json"

    assert export_mod.main(["--output", str(output)]) == 1
    assert not output.exists()


def test_main_success(tmp_path, monkeypatch):
    monkeypatch.setattr(
        export_mod,
        "SharaiClient",
        lambda base_url=None, timeout=None: FakeExportClient(data=[{"id": 1}]),
    )
    output = tmp_path / "export.json"

    assert export_mod.main(["--output", str(output)]) == 0
    assert json.loads(output.read_text(encoding="utf-8")) == [{"id": 1}]
