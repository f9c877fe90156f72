import asyncio
from types import SimpleNamespace

import pytest

from outreach_planner import config
from outreach_planner.clients import sandbox
from outreach_planner.clients.sandbox import ModalSandboxProvider, SandboxSpec


class _Aio:
    """Callable exposed as `.aio`, recording its calls"""

    def __init__(self, result):
        self.result = result
        self.calls = []

    async def aio(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        return self.result


@pytest.fixture
def fake_modal(monkeypatch):
    fake = SimpleNamespace(
        App=SimpleNamespace(lookup=_Aio("app")),
        Sandbox=SimpleNamespace(create=_Aio(SimpleNamespace(object_id="sb-123"))),
        Secret=SimpleNamespace(
            from_name=lambda name: ("named", name),
            from_dict=lambda values: ("dict", values),
        ),
    )
    monkeypatch.setattr(sandbox, "modal", fake)
    return fake


def _create_kwargs(fake_modal):
    _, kwargs = fake_modal.Sandbox.create.calls[0]
    return kwargs


def test_create_forwards_explicit_secrets(fake_modal):
    provider = ModalSandboxProvider(app_name="planner-test", image="image", secrets=["provider-key"])

    handle = asyncio.run(provider.create(SandboxSpec()))

    assert handle.id == "sb-123"
    assert fake_modal.App.lookup.calls[0] == (("planner-test",), {"create_if_missing": True})
    kwargs = _create_kwargs(fake_modal)
    assert kwargs["secrets"] == ["provider-key"]
    assert kwargs["app"] == "app"
    assert kwargs["image"] == "image"
    assert kwargs["cpu"] == 2.0
    assert kwargs["memory"] == 2048
    assert kwargs["block_network"] is False


def test_create_uses_named_secret_from_config(fake_modal, monkeypatch):
    monkeypatch.setattr(config, "MODAL_SECRET_NAME", "opencode-keys")
    monkeypatch.setattr(config, "OPENAI_API_KEY", "sk-test")

    asyncio.run(ModalSandboxProvider(image="image").create(SandboxSpec()))

    assert _create_kwargs(fake_modal)["secrets"] == [("named", "opencode-keys")]


def test_create_forwards_openai_key_without_named_secret(fake_modal, monkeypatch):
    monkeypatch.setattr(config, "MODAL_SECRET_NAME", None)
    monkeypatch.setattr(config, "OPENAI_API_KEY", "sk-test")

    asyncio.run(ModalSandboxProvider(image="image").create(SandboxSpec()))

    assert _create_kwargs(fake_modal)["secrets"] == [("dict", {"OPENAI_API_KEY": "sk-test"})]


def test_no_credentials_configured(fake_modal, monkeypatch):
    monkeypatch.setattr(config, "MODAL_SECRET_NAME", None)
    monkeypatch.setattr(config, "OPENAI_API_KEY", None)

    assert sandbox.sandbox_secrets() == []
