from pathlib import Path

import pytest
from fastapi import FastAPI

import main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SXZ_OUTPUT", "SXZ_MAX_ITERATIONS", "SXZ_HEADLESS"):
        monkeypatch.delenv(name, raising=False)


def test_build_config_applies_cli_overrides():
    config = main.build_config(main.parse_args(["--output", "out/x.json", "--max-iterations", "5", "--excel"]))
    assert config.output_path == Path("out/x.json")
    assert config.scroll.max_iterations == 5
    assert config.excel is True


def test_serve_uses_cli_config(monkeypatch):
    calls = {}

    def fake_run(app, host, port):
        calls.update(app=app, host=host, port=port)

    monkeypatch.setattr(main.uvicorn, "run", fake_run)
    args = main.parse_args(["--serve", "--output", "served.json", "--max-iterations", "7", "--headed"])
    main.serve(main.build_config(args), 1234)

    assert isinstance(calls["app"], FastAPI)
    assert calls["port"] == 1234
    config = calls["app"].state.config
    assert config.output_path == Path("served.json")
    assert config.scroll.max_iterations == 7
    assert config.headless is False
