import asyncio
import uvicorn
from unittest.mock import AsyncMock, MagicMock, patch
from status_service import main as main_module
from status_service.config import AppConfig


def _config(port):
    return AppConfig(
        version="20250621-1019",
        port=port,
        k_service="-unknown-",
        k_revision="-unknown-",
        hosted=False,
        service_account="-not available-",
    )


def test_main_resolves_identity_before_serving(monkeypatch):
    calls = []

    def fake_load_config():
        calls.append("load_config")
        return _config(9090)

    def fake_server(server_config):
        calls.append("server")
        return MagicMock()

    with patch.object(main_module, "setup_logging"), \
         patch.object(main_module, "load_config", side_effect=fake_load_config), \
         patch.object(main_module, "ListeningServer", side_effect=fake_server) as server_cls:
        main_module.main()

    assert calls == ["load_config", "server"]
    server_config = server_cls.call_args[0][0]
    assert server_config.port == 9090
    assert server_config.host == "0.0.0.0"
    assert server_config.access_log is False


def test_main_uses_port_from_environment(monkeypatch):
    monkeypatch.setenv("PORT", "9090")
    monkeypatch.delenv("K_SERVICE", raising=False)
    monkeypatch.delenv("K_REVISION", raising=False)

    with patch.object(main_module, "setup_logging"), \
         patch.object(main_module, "ListeningServer") as server_cls:
        main_module.main()

    server_config = server_cls.call_args[0][0]
    assert server_config.port == 9090
    server_cls.return_value.run.assert_called_once_with()


def test_listening_line_printed_after_startup(capsys):
    app = main_module.create_app(_config(9090))
    server = main_module.ListeningServer(uvicorn.Config(app, port=9090, log_config=None))
    server.started = True

    with patch.object(uvicorn.Server, "startup", new=AsyncMock()):
        asyncio.run(server.startup())

    assert "Server Listening on 9090" in capsys.readouterr().out


def test_no_listening_line_when_startup_fails(capsys):
    app = main_module.create_app(_config(9090))
    server = main_module.ListeningServer(uvicorn.Config(app, port=9090, log_config=None))
    server.started = False

    with patch.object(uvicorn.Server, "startup", new=AsyncMock()):
        asyncio.run(server.startup())

    assert "Server Listening" not in capsys.readouterr().out


def test_listening_line_reports_bound_port(capsys):
    app = main_module.create_app(_config(0))
    server = main_module.ListeningServer(uvicorn.Config(app, port=0, log_config=None))
    server.started = True
    sock = MagicMock()
    sock.getsockname.return_value = ("0.0.0.0", 54321)
    server.servers = [MagicMock(sockets=[sock])]

    with patch.object(uvicorn.Server, "startup", new=AsyncMock()):
        asyncio.run(server.startup())

    assert "Server Listening on 54321" in capsys.readouterr().out
