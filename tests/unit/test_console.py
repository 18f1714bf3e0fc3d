import json
from pathlib import Path

import pytest

from raygate.local.config import effective_settings
from raygate.local.console import execute_command, run_once
from raygate.local.console import handler
from raygate.webserver import process_utils


@pytest.fixture
def source(tmp_path: Path) -> Path:
    path = tmp_path / "raygate.yml"
    path.write_text(
        "clients:\n"
        "  - user_id: ''\n"
        "    alter_id: 0\n"
        "v2ray_port: 10086\n"
        "transport_type: 2\n"
        "web_socket:\n"
        "  path: /ray\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def isolated_settings(monkeypatch, tmp_path: Path, source: Path):
    monkeypatch.setattr(effective_settings, "OVERRIDES_JSON_PATH", tmp_path / "overrides.json")
    monkeypatch.setattr(effective_settings, "SIMPLIFIED_CONFIG_PATH", source)
    monkeypatch.setattr(effective_settings, "V2RAY_CONFIG_PATH", tmp_path / "v2ray" / "config.json")
    monkeypatch.setattr(effective_settings, "NGINX_EXECUTABLE_PATH", tmp_path / "nginx")
    monkeypatch.setattr(effective_settings, "NGINX_STATUS_COMMAND", "printf ''")
    monkeypatch.setattr(effective_settings, "LOG_BUFFER_BATCH_SIZE", 200)
    monkeypatch.setattr(effective_settings, "VERBOSE_LOGGING", False)
    return effective_settings


def test_apply_writes_configured_destination(isolated_settings) -> None:
    assert execute_command("apply", []) is False
    document = json.loads(isolated_settings.V2RAY_CONFIG_PATH.read_text())
    assert document["inbounds"][0]["streamSettings"]["wsSettings"] == {"path": "/ray"}


def test_apply_with_explicit_paths(isolated_settings, source: Path, tmp_path: Path) -> None:
    destination = tmp_path / "explicit.json"
    assert handler.handle_apply_command([str(source), str(destination)]) is True
    assert destination.exists()
    assert not isolated_settings.V2RAY_CONFIG_PATH.exists()


def test_apply_unsupported_transport_fails_without_writing(isolated_settings, source: Path) -> None:
    source.write_text("v2ray_port: 1\ntransport_type: 7\n")
    assert handler.handle_apply_command([]) is False
    assert not isolated_settings.V2RAY_CONFIG_PATH.exists()


def test_apply_missing_source(isolated_settings, tmp_path: Path) -> None:
    assert handler.handle_apply_command([str(tmp_path / "missing.yml")]) is False


def test_render_prints_document(isolated_settings, capsys) -> None:
    rendered = handler.handle_render_command([])
    assert json.loads(rendered)["inbounds"][0]["port"] == 10086
    assert '"network": "ws"' in capsys.readouterr().out
    assert not isolated_settings.V2RAY_CONFIG_PATH.exists()


def test_status_and_stop(isolated_settings, monkeypatch, capsys) -> None:
    assert handler.display_status() is False
    assert "Stopped" in capsys.readouterr().out

    monkeypatch.setattr(isolated_settings, "NGINX_STATUS_COMMAND", "echo 1234")
    assert handler.display_status() is True

    # The binary is missing so the stop command fails; the listing still shows a PID.
    assert handler.handle_stop_command() is False

    monkeypatch.setattr(isolated_settings, "NGINX_STATUS_COMMAND", "printf ''")
    assert handler.handle_stop_command() is True
    assert "Nginx stopped." in capsys.readouterr().out


def test_status_query_failure(isolated_settings, monkeypatch) -> None:
    def no_shell(command):
        raise OSError("cannot fork")

    monkeypatch.setattr(process_utils, "run_shell_command", no_shell)
    assert handler.display_status() is None
    assert handler.handle_stop_command() is False


def test_failing_listing_reports_stopped(isolated_settings, monkeypatch) -> None:
    monkeypatch.setattr(isolated_settings, "NGINX_STATUS_COMMAND", "exit 2")
    assert handler.display_status() is False


def test_check_configuration(isolated_settings, tmp_path: Path) -> None:
    assert handler.check_configuration() is False
    (tmp_path / "nginx").write_text("")
    assert handler.check_configuration() is True


def test_config_set_persists(isolated_settings, tmp_path: Path, capsys) -> None:
    execute_command("config", ["set", "log_buffer_batch_size", "25"])
    assert isolated_settings.LOG_BUFFER_BATCH_SIZE == 25
    saved = json.loads((tmp_path / "overrides.json").read_text())
    assert saved["LOG_BUFFER_BATCH_SIZE"] == 25
    assert "updated" in capsys.readouterr().out


def test_config_show_lists_modifiable_settings(isolated_settings, capsys) -> None:
    execute_command("config", [])
    out = capsys.readouterr().out
    assert "V2RAY_CONFIG_PATH" in out
    assert "LOKI_URL" not in out


def test_exit_and_unknown_commands(isolated_settings) -> None:
    assert execute_command("exit", []) is True
    assert execute_command("launch-rockets", []) is False
    assert execute_command("help", []) is False


def test_verbose_toggles(isolated_settings) -> None:
    execute_command("verbose", [])
    assert isolated_settings.VERBOSE_LOGGING is True
    execute_command("verbose", [])
    assert isolated_settings.VERBOSE_LOGGING is False


def test_run_once_exit_status(isolated_settings, source: Path) -> None:
    assert run_once("apply", []) == 0
    assert run_once("status", []) == 0
    assert run_once("help", []) == 0
    assert run_once("launch-rockets", []) == 1

    source.write_text("v2ray_port: 1\ntransport_type: 7\n")
    assert run_once("apply", []) == 1
    assert run_once("render", []) == 1


def test_main_one_shot_exits_non_zero_on_failure(isolated_settings, monkeypatch, tmp_path: Path) -> None:
    from raygate import main as main_module

    monkeypatch.setattr(main_module, "setup_logging", lambda level: None)
    monkeypatch.setattr("sys.argv", ["raygate", "apply", str(tmp_path / "missing.yml")])
    with pytest.raises(SystemExit) as excinfo:
        main_module.main()
    assert excinfo.value.code == 1

    monkeypatch.setattr("sys.argv", ["raygate", "apply"])
    with pytest.raises(SystemExit) as excinfo:
        main_module.main()
    assert excinfo.value.code == 0
