"""
Logger facade tests: level gate, override, backend and fallback routing.
"""

from __future__ import annotations

import os
import time
import typing as t
from pathlib import Path

import pytest

from hostlog import NOT_HANDLED, ConfigError, HookBus, Host, Level, Logger, MappingEnvironment
from hostlog.sinks import component_hash

from .fakes import SETUP_ACTION, install_backend

LEVELS = [lvl.value for lvl in Level]


def _log_files(uploads: Path, component: str = "test-plugin") -> list[Path]:
    log_dir = uploads / component / "logs"
    return sorted(log_dir.glob("*.dat")) if log_dir.exists() else []


class TestConstruction:
    def test_config_snapshot(self, make_logger) -> None:
        logger = make_logger("  my-plugin ", retention_days=60)
        config = logger.get_config()
        assert config.component_name == "my-plugin"
        assert config.retention_days == 60
        assert config.disabled_flag_name == "MY_PLUGIN_DISABLE_LOGGING"
        assert config.retention_flag_name == "MY_PLUGIN_LOG_RETENTION_DAYS"

    def test_missing_component_raises(self, host: Host) -> None:
        with pytest.raises(ConfigError):
            Logger({}, host=host)

    def test_keyword_options_merge_over_mapping(self, host: Host) -> None:
        logger = Logger({"component_name": "a", "min_level": "info"}, host=host, min_level="error")
        assert logger.get_config().min_level == "error"


class TestLevelGate:
    def test_rejected_level_fires_nothing(self, make_logger, recorder, uploads: Path) -> None:
        logger = make_logger(min_level="warning")
        logger.debug("quiet")
        logger.info("quiet")
        logger.notice("quiet")
        assert recorder.filters == []
        assert recorder.actions == []
        assert not (uploads / "test-plugin").exists()

    def test_min_level_from_environment(self, make_logger, recorder, environ) -> None:
        environ["LOGGER_MIN_LEVEL"] = "error"
        logger = make_logger("min-level-test")
        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")
        logger.error("Error message")
        logger.critical("Critical message")

        logged = [args[0] for args in recorder.actions_named("hostlog_logged")]
        assert logged == ["error", "critical"]


class TestOverride:
    def test_override_receives_sentinel_and_call(self, make_logger, recorder) -> None:
        logger = make_logger(min_level="warning")
        logger.alert("Test alert message", {"k": "v"})

        name, value, args = next(f for f in recorder.filters if f[0] == "hostlog_override_log")
        assert value is NOT_HANDLED
        assert args[0] == "alert"
        assert args[1] == "Test alert message"
        assert args[2] == {"k": "v"}
        assert args[3].min_level == "warning"

    @pytest.mark.parametrize("result", [True, False, 0, "handled"])
    def test_override_claims_call(self, make_logger, bus: HookBus, recorder, uploads: Path, result: object) -> None:
        bus.add_filter("hostlog_override_log", lambda value, *args: result)
        make_logger().error("taken over")
        assert recorder.actions == []
        assert _log_files(uploads) == []

    @pytest.mark.parametrize("result", [NOT_HANDLED, None])
    def test_unhandled_override_falls_through(self, make_logger, bus: HookBus, recorder, uploads: Path, result: object) -> None:
        bus.add_filter("hostlog_override_log", lambda value, *args: result)
        make_logger().error("not taken")
        assert "hostlog_logged" in recorder.action_names()
        assert len(_log_files(uploads)) == 1

    def test_failing_override_is_ignored(self, make_logger, bus: HookBus, recorder) -> None:
        bus.add_filter("hostlog_override_log", lambda value, *args: 1 / 0)
        make_logger().error("still logged")
        assert "hostlog_logged" in recorder.action_names()


class TestFallback:
    def test_every_level_fires_generic_and_specific_fallback(self, make_logger, recorder) -> None:
        logger = make_logger()
        for level in LEVELS:
            getattr(logger, level)(f"{level} message")

        fallback = [name for name in recorder.action_names() if name.startswith("hostlog_fallback")]
        assert len(fallback) == 16
        for level in LEVELS:
            assert f"hostlog_fallback_{level}" in fallback

    def test_fallback_arguments(self, make_logger, recorder) -> None:
        make_logger().critical("Critical error in production", {"code": 7})
        assert recorder.actions_named("hostlog_fallback") == [
            ("critical", "Critical error in production", {"code": 7}, "test-plugin")
        ]
        assert recorder.actions_named("hostlog_fallback_critical") == [
            ("Critical error in production", {"code": 7}, "test-plugin")
        ]

    def test_logged_notification(self, make_logger, recorder) -> None:
        make_logger().notice("hello", {"key": "value"})
        assert recorder.actions_named("hostlog_logged") == [("notice", "hello", {"key": "value"}, "test-plugin")]
        assert recorder.action_names()[-1] == "hostlog_logged"

    def test_writes_protected_file(self, make_logger, uploads: Path) -> None:
        make_logger().info("X", {"a": 1})

        files = _log_files(uploads)
        assert len(files) == 1
        assert files[0].name.endswith(f"_{component_hash('test-plugin')}.dat")
        content = files[0].read_text(encoding="utf-8")
        assert 'INFO: X\nContext: {"a":1}\n---\n' in content

        assert (uploads / "test-plugin" / "index.html").is_file()
        for name in (".htaccess", "web.config", "index.html", "README"):
            assert (uploads / "test-plugin" / "logs" / name).is_file()

    def test_entries_append(self, make_logger, uploads: Path) -> None:
        logger = make_logger()
        logger.info("first")
        logger.error(ValueError("second"))
        content = _log_files(uploads)[0].read_text(encoding="utf-8")
        assert content.count("---\n") == 2
        assert "ERROR: second in unknown:0" in content

    @pytest.mark.parametrize(
        "setup",
        [
            lambda env, consts: env.__setitem__("LOGGER_DISABLED", "true"),
            lambda env, consts: env.__setitem__("TEST_PLUGIN_LOGGER_DISABLED", "1"),
            lambda env, consts: consts.define("TEST_PLUGIN_DISABLE_LOGGING", True),
        ],
    )
    def test_disabled_logging_skips_file_but_notifies(self, make_logger, recorder, environ, constants, uploads: Path, setup) -> None:
        setup(environ, constants)
        logger = make_logger()
        assert logger.is_logging_disabled()

        logger.error("nobody hears this")

        assert not (uploads / "test-plugin" / "logs").exists()
        assert recorder.actions_named("hostlog_fallback")
        assert recorder.actions_named("hostlog_fallback_error")
        assert recorder.actions_named("hostlog_logged")

    def test_falsy_disable_values(self, make_logger, environ, constants) -> None:
        environ["TEST_PLUGIN_LOGGER_DISABLED"] = "false"
        constants.define("TEST_PLUGIN_DISABLE_LOGGING", False)
        assert not make_logger().is_logging_disabled()

    def test_debug_mode_writes_stderr_even_when_disabled(self, make_logger, host: Host, environ, uploads: Path, capsys) -> None:
        host.debug = True
        host.environment_type = "development"
        environ["LOGGER_DISABLED"] = "true"

        make_logger().warning("visible", {"a": 1})

        err = capsys.readouterr().err
        assert '[DEVELOPMENT] [test-plugin] WARNING: visible | Context: {"a":1}' in err
        assert not (uploads / "test-plugin").exists()

    def test_environment_tag_in_file(self, make_logger, host: Host, uploads: Path) -> None:
        host.environment_type = "staging"
        make_logger().info("tagged")
        assert "][STAGING] INFO: tagged" in _log_files(uploads)[0].read_text(encoding="utf-8")

    def test_no_uploads_root_is_noop(self, make_logger, host: Host, recorder) -> None:
        host.uploads_dir = None
        logger = make_logger()
        logger.error("nowhere to write")
        assert logger.get_log_directory() is None
        assert recorder.actions_named("hostlog_logged")

    def test_sweep_runs_on_lucky_roll(self, make_logger, host: Host, uploads: Path) -> None:
        log_dir = uploads / "test-plugin" / "logs"
        logger = make_logger(retention_days=5)
        logger.info("bootstrap")

        stale = log_dir / "2000-01-01_deadbeef.dat"
        stale.write_text("old\n", encoding="utf-8")
        old = time.time() - 6 * 86400
        os.utime(stale, (old, old))

        host.randint = lambda low, high: 1
        logger.info("sweep now")
        assert not stale.exists()
        assert len(_log_files(uploads)) == 1


class TestBackendRouting:
    def _active_logger(self, monkeypatch, host: Host, bus: HookBus, **kwargs: t.Any) -> Logger:
        install_backend(monkeypatch, **kwargs)
        bus.do_action(SETUP_ACTION)
        return Logger({"component_name": "test-plugin", "backend_namespace": "fake_backend"}, host=host)

    def test_dispatches_payload_to_backend_action(self, monkeypatch, host: Host, bus: HookBus, uploads: Path) -> None:
        received: list[dict] = []
        bus.add_action("fake.log.error", received.append)
        logger = self._active_logger(monkeypatch, host, bus)

        logger.error("to backend", {"a": 1})

        assert received == [{"message": "to backend", "context": {"a": 1}}]
        assert not (uploads / "test-plugin").exists()

    def test_prefix_and_action_filters(self, monkeypatch, host: Host, bus: HookBus, recorder) -> None:
        bus.add_filter("hostlog_backend_prefix", lambda prefix, *args: "custom")
        logger = self._active_logger(monkeypatch, host, bus)
        logger.info("Test message")

        prefix_call = next(f for f in recorder.filters if f[0] == "hostlog_backend_prefix")
        assert prefix_call[1] == "fake.log"
        assert prefix_call[2][0] == "info"
        action_call = next(f for f in recorder.filters if f[0] == "hostlog_backend_action")
        assert action_call[1] == "custom.info"
        assert "custom.info" in recorder.action_names()

    def test_action_name_override(self, monkeypatch, host: Host, bus: HookBus, recorder) -> None:
        bus.add_filter("hostlog_backend_action", lambda action, *args: "elsewhere")
        self._active_logger(monkeypatch, host, bus).warning("moved")
        assert "elsewhere" in recorder.action_names()

    def test_no_fallback_notifications(self, monkeypatch, host: Host, bus: HookBus, recorder) -> None:
        self._active_logger(monkeypatch, host, bus).error("backend only")
        names = recorder.action_names()
        assert not any(name.startswith("hostlog_fallback") for name in names)
        assert names[-1] == "hostlog_logged"

    def test_missing_log_marker_routes_nowhere(self, monkeypatch, host: Host, bus: HookBus, recorder, uploads: Path) -> None:
        logger = self._active_logger(monkeypatch, host, bus, log_prefix=None)
        logger.error("no marker")
        names = recorder.action_names()
        assert not any(name.startswith(("hostlog_fallback", "fake.log")) for name in names)
        assert "hostlog_logged" in names
        assert not (uploads / "test-plugin").exists()


class TestWithoutHooks:
    def test_degrades_to_file_logging(self, environ, constants, uploads: Path) -> None:
        host = Host(hooks=None, environment=MappingEnvironment(environ), constants=constants, uploads_dir=uploads, randint=None)
        logger = Logger({"component_name": "test-plugin"}, host=host)

        logger.info("still written")

        assert "INFO: still written" in _log_files(uploads)[0].read_text(encoding="utf-8")
        assert logger.get_debug_info()["backend_active"] is False

    def test_no_constants_or_random(self, uploads: Path) -> None:
        host = Host(hooks=None, environment=MappingEnvironment({}), constants=None, uploads_dir=uploads, randint=None)
        logger = Logger(component_name="bare", host=host)
        logger.emergency({"state": "down"})
        assert not logger.is_logging_disabled()
        assert 'EMERGENCY: Data: {"state":"down"}' in _log_files(uploads, "bare")[0].read_text(encoding="utf-8")


class TestDebugInfo:
    def test_keys_and_values(self, make_logger, environ, constants, uploads: Path) -> None:
        environ["DEBUG_TEST_LOG_RETENTION_DAYS"] = "45"
        constants.define("DEBUG_TEST_DISABLE_LOGGING", False)
        info = make_logger("debug-test").get_debug_info()

        assert info["component_name"] == "debug-test"
        assert info["retention_days"] == 45
        assert info["disable_flag"] == "DEBUG_TEST_DISABLE_LOGGING"
        assert info["retention_flag"] == "DEBUG_TEST_LOG_RETENTION_DAYS"
        assert info["backend_active"] is False
        assert info["backend_namespace"] == "wonolog"
        assert info["logging_disabled"] is False
        assert info["debug"] is False
        assert info["environment_type"] == "production"
        assert info["log_directory"] == str(uploads / "debug-test" / "logs")
        assert info["constants_defined"] == {
            "DEBUG_TEST_DISABLE_LOGGING": True,
            "DEBUG_TEST_LOG_RETENTION_DAYS": False,
        }
        assert info["config"]["component_name"] == "debug-test"

    def test_plugin_specific_environment(self, make_logger, environ, recorder) -> None:
        environ["MY_SPECIAL_PLUGIN_LOGGER_DISABLED"] = "false"
        environ["MY_SPECIAL_PLUGIN_LOG_RETENTION_DAYS"] = "14"
        logger = make_logger("my-special-plugin")
        logger.warning("Plugin-specific configuration test")

        info = logger.get_debug_info()
        assert info["retention_days"] == 14
        assert info["logging_disabled"] is False
        assert len(recorder.actions_named("hostlog_logged")) == 1


class TestNeverRaises:
    def test_failing_actions_are_swallowed(self, make_logger, bus: HookBus, uploads: Path) -> None:
        def explode(*args: t.Any) -> None:
            raise RuntimeError("listener broken")

        bus.add_action("hostlog_fallback", explode)
        bus.add_action("hostlog_logged", explode)
        make_logger().error("survives")
        assert len(_log_files(uploads)) == 1

    def test_unwritable_uploads_root(self, make_logger, uploads: Path) -> None:
        uploads.parent.mkdir(parents=True, exist_ok=True)
        uploads.write_text("a file, not a directory", encoding="utf-8")
        make_logger().critical("cannot be written")
        assert uploads.read_text(encoding="utf-8") == "a file, not a directory"

    def test_unknown_level_is_logged(self, make_logger, recorder, uploads: Path) -> None:
        make_logger().log("verbose", "odd level")
        assert recorder.actions_named("hostlog_fallback_verbose")
        assert "VERBOSE: odd level" in _log_files(uploads)[0].read_text(encoding="utf-8")

    @pytest.mark.parametrize(
        ("context", "rendered"),
        [
            (["not", "a", "mapping"], 'Context: {"context":["not","a","mapping"]}'),
            ("just text", 'Context: {"context":"just text"}'),
        ],
    )
    def test_non_mapping_context_is_wrapped(self, make_logger, recorder, uploads: Path, context, rendered: str) -> None:
        make_logger().error("boom", context)  # type: ignore[arg-type]

        assert f"ERROR: boom\n{rendered}\n---\n" in _log_files(uploads)[0].read_text(encoding="utf-8")
        assert recorder.actions_named("hostlog_logged")[0][2] == {"context": context}

    def test_failing_random_source_still_notifies(self, make_logger, host: Host, recorder, uploads: Path) -> None:
        def broken_randint(low: int, high: int) -> int:
            raise RuntimeError("no entropy")

        host.randint = broken_randint
        make_logger().warning("written anyway")

        assert "WARNING: written anyway" in _log_files(uploads)[0].read_text(encoding="utf-8")
        assert recorder.actions_named("hostlog_logged")
