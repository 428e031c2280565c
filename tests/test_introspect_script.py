import json

from models.schema import FieldDescriptor, ModelDescriptor
from scripts import introspect_models
from utils.exceptions import NotAuthenticated, RequestFailed
from utils.session_store import SessionStore


class _Client:
    def __init__(self, result=None, error=None):
        self.result = result or []
        self.error = error

    def introspect(self):
        if self.error is not None:
            raise self.error
        return self.result


MODELS = [
    ModelDescriptor(
        "User", (FieldDescriptor("id", "Int"), FieldDescriptor("email", "String"))
    )
]


def test_table_output(capsys):
    assert introspect_models.describe_models(_Client(MODELS)) == 0
    out = capsys.readouterr().out
    assert "Connected; 1 model(s):" in out
    assert "email  String" in out


def test_json_output(capsys):
    assert introspect_models.describe_models(_Client(MODELS), as_json=True) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["models"][0]["scalarFields"][1] == {"name": "email", "type": "String"}


def test_exit_codes(capsys):
    assert introspect_models.describe_models(_Client(error=NotAuthenticated())) == 2
    assert introspect_models.describe_models(_Client(error=RequestFailed("nope"))) == 1
    assert "Not connected: nope" in capsys.readouterr().out


def test_main_uses_saved_token(monkeypatch, capsys):
    SessionStore.load().set("from-disk")
    seen = {}

    def fake_describe(client, as_json=False):
        seen["token"] = client._token_provider()
        seen["base_url"] = client.base_url
        return 0

    monkeypatch.setattr(introspect_models, "describe_models", fake_describe)

    assert introspect_models.main(["--base-url", "http://admin.test/"]) == 0
    assert seen == {"token": "from-disk", "base_url": "http://admin.test"}
