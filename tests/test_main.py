"""Tests for the command-line entrypoint."""

from nutrilens import main as main_module


def test_main_serves_asgi_app(monkeypatch) -> None:
    calls: list[tuple[str, dict[str, object]]] = []
    monkeypatch.setattr(
        main_module.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs))
    )
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.delenv("HOST", raising=False)

    main_module.main()

    assert calls == [("nutrilens.api.asgi:app", {"host": "127.0.0.1", "port": 9000})]
