"""Pytest fixtures and shared helpers."""

import json
import os

import httpx
import pytest

from demiurge_studio.config.schema import RpcClientConfig
from demiurge_studio.rpc.client import JsonRpcClient


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests away from the real ~/.demiurge-studio and DEMIURGE_* variables."""
    for key in list(os.environ):
        if key.startswith("DEMIURGE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


def rpc_reply(request: httpx.Request, **fields) -> httpx.Response:
    """A JSON-RPC response echoing the id of ``request``."""
    sent = json.loads(request.content)
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": sent["id"], **fields})


def make_rpc_client(handler, endpoint_url: str = "http://node.test/rpc") -> JsonRpcClient:
    return JsonRpcClient(
        RpcClientConfig(endpoint_url=endpoint_url),
        transport=httpx.MockTransport(handler),
    )
