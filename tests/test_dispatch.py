"""End-to-end tests for command routing through :func:`main`.

Collaborators are faked at the :class:`Services` boundary (see
conftest.py); output is inspected through ``capsys``.

Coverage:
* Help / version / unknown-command resolution.
* Schema parsing, reconciliation and handler hand-off.
* Exit-code policy for handler results and failures.
* ``cache`` sub-actions.
* Environment validation ahead of any command.
"""

from __future__ import annotations

import dataclasses
from unittest.mock import patch

import pytest

from conftest import FakeCache, FakeHandler, FakeVersions
from cypress_cli.cli import exit_codes
from cypress_cli.cli.app import main
from cypress_cli.cli.dispatch import Dispatcher
from cypress_cli.config import Settings
from cypress_cli.core.models import (
    CommandName,
    OpenOptions,
    Resolution,
    ResolutionAction,
    RunOptions,
    VerifyOptions,
)
from cypress_cli.core.protocols import Services
from cypress_cli.core.schema import CommandSchemaRegistry
from cypress_cli.exceptions import HandlerFailedError, InvalidEnvironmentError

WARNING = "space-separated list of arguments"


# ---------------------------------------------------------------------------
# Help and version
# ---------------------------------------------------------------------------

class TestHelp:
    def test_no_args_prints_help(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = main([], settings=settings, services=services)
        assert code == exit_codes.SUCCESS
        assert "Usage: cypress <command> [options]" in capsys.readouterr().out

    @pytest.mark.parametrize("token", ["help", "-h", "--help"])
    def test_help_tokens(
        self,
        token: str,
        settings: Settings,
        services: Services,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert main([token], settings=settings, services=services) == exit_codes.SUCCESS
        out = capsys.readouterr().out
        for command in ("run [options]", "open [options]", "cache [command]"):
            assert command in out

    def test_command_help_lists_every_flag(
        self,
        settings: Settings,
        services: Services,
        registry: CommandSchemaRegistry,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = main(["run", "--help"], settings=settings, services=services)
        out = capsys.readouterr().out
        assert code == exit_codes.SUCCESS
        assert "Usage: cypress run [options]" in out
        for option in registry.schema_for(CommandName.RUN):
            assert option.signature in out
            assert registry.help_for(option.description_key) in out
        assert services.run.calls == []  # type: ignore[attr-defined]

    def test_cache_help_lists_actions(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["cache", "-h"], settings=settings, services=services)
        out = capsys.readouterr().out
        assert "list cached binary versions" in out
        assert "print the path to the binary cache" in out
        assert "delete all cached binaries" in out


class TestVersion:
    @pytest.mark.parametrize("argv", [["version"], ["--version"], ["-v"], ["run", "-v"]])
    def test_prints_both_versions(
        self,
        argv: list[str],
        settings: Settings,
        services: Services,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert main(argv, settings=settings, services=services) == exit_codes.SUCCESS
        out = capsys.readouterr().out
        assert "Cypress package version: 4.2.0" in out
        assert "Cypress binary version: 4.2.1" in out
        assert services.run.calls == []  # type: ignore[attr-defined]

    def test_lookup_failure(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        broken = dataclasses.replace(services, versions=FakeVersions(error=OSError("disk on fire")))
        assert main(["version"], settings=settings, services=broken) == exit_codes.GENERAL_ERROR
        assert "disk on fire" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Unknown input
# ---------------------------------------------------------------------------

class TestUnknown:
    def test_unknown_command(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = main(["frobnicate"], settings=settings, services=services)
        err = capsys.readouterr().err
        assert code == exit_codes.GENERAL_ERROR
        assert 'Unknown command "frobnicate"' in err
        assert err.index("frobnicate") < err.index("Usage: cypress <command>")

    def test_exit_code_comes_from_resolution(
        self, registry: CommandSchemaRegistry, services: Services,
    ) -> None:
        resolution = Resolution(ResolutionAction.UNKNOWN, token="frobnicate", exit_code=7)
        with patch("cypress_cli.cli.dispatch.resolve", return_value=resolution):
            assert Dispatcher(registry, services).dispatch(["frobnicate"]) == 7

    def test_unknown_option(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = main(["run", "--bogus"], settings=settings, services=services)
        err = capsys.readouterr().err
        assert code == exit_codes.GENERAL_ERROR
        assert "error: unknown option: --bogus" in err
        assert "Usage: cypress run [options]" in err
        assert services.run.calls == []  # type: ignore[attr-defined]

    def test_option_from_another_command(self, settings: Settings, services: Services) -> None:
        assert main(["open", "--parallel"], settings=settings, services=services) == exit_codes.GENERAL_ERROR
        assert services.open.calls == []  # type: ignore[attr-defined]

    def test_invalid_value(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = main(["open", "--port", "eighty"], settings=settings, services=services)
        assert code == exit_codes.GENERAL_ERROR
        assert "invalid int value" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Handler hand-off
# ---------------------------------------------------------------------------

class TestRun:
    def test_space_separated_specs(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = main(["run", "--spec", "a.js", "b.js", "c.js"], settings=settings, services=services)
        assert code == exit_codes.SUCCESS
        assert services.run.calls == [RunOptions(spec="a.js,b.js,c.js")]  # type: ignore[attr-defined]
        err = capsys.readouterr().err
        assert err.count(WARNING) == 1
        assert '"a.js b.js c.js"' in err
        assert "unescaped glob pattern" in err

    def test_comma_separated_specs(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = main(["run", "--spec", "a.js,b.js"], settings=settings, services=services)
        assert code == exit_codes.SUCCESS
        assert services.run.calls == [RunOptions(spec="a.js,b.js")]  # type: ignore[attr-defined]
        assert WARNING not in capsys.readouterr().err

    def test_tag_warning_has_no_glob_tip(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["run", "--tag", "a", "b"], settings=settings, services=services)
        err = capsys.readouterr().err
        assert "--tag a space-separated" in err
        assert "unescaped glob pattern" not in err

    def test_short_flag_between_spec_values(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = main(["run", "--spec", "a.js", "-k", "key", "b.js"], settings=settings, services=services)
        assert code == exit_codes.SUCCESS
        assert services.run.calls == [RunOptions(spec="a.js,b.js", key="key")]  # type: ignore[attr-defined]
        assert capsys.readouterr().err.count(WARNING) == 1

    def test_end_of_options_marker(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = main(["run", "--spec", "a.js", "--", "b.js"], settings=settings, services=services)
        assert code == exit_codes.SUCCESS
        assert services.run.calls == [RunOptions(spec="a.js")]  # type: ignore[attr-defined]
        assert "unknown option" not in capsys.readouterr().err

    def test_options_are_typed(self, settings: Settings, services: Services) -> None:
        main(
            ["run", "--record", "false", "-p", "3000", "--no-exit", "--headed", "-b", "chrome"],
            settings=settings,
            services=services,
        )
        assert services.run.calls == [  # type: ignore[attr-defined]
            RunOptions(record=False, port=3000, exit=False, headed=True, browser="chrome"),
        ]

    def test_handler_exit_code_propagates(self, settings: Settings, services: Services) -> None:
        failing = dataclasses.replace(services, run=FakeHandler(result=3))
        assert main(["run"], settings=settings, services=failing) == 3

    def test_none_result_is_success(self, settings: Settings, services: Services) -> None:
        quiet = dataclasses.replace(services, run=FakeHandler(result=None))
        assert main(["run"], settings=settings, services=quiet) == exit_codes.SUCCESS

    def test_handler_failure(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        broken = dataclasses.replace(
            services, run=FakeHandler(error=HandlerFailedError("binary exploded", hint="reinstall")),
        )
        assert main(["run"], settings=settings, services=broken) == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "binary exploded" in err
        assert "reinstall" in err

    def test_unexpected_handler_exception(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        broken = dataclasses.replace(services, run=FakeHandler(error=RuntimeError("boom")))
        assert main(["run"], settings=settings, services=broken) == exit_codes.GENERAL_ERROR
        assert "boom" in capsys.readouterr().err


class TestOtherHandlers:
    def test_open(self, settings: Settings, services: Services) -> None:
        assert main(["open", "-d", "--global"], settings=settings, services=services) == exit_codes.SUCCESS
        assert services.open.calls == [OpenOptions(detached=True, global_mode=True)]  # type: ignore[attr-defined]

    def test_install(self, settings: Settings, services: Services) -> None:
        assert main(["install", "--force"], settings=settings, services=services) == exit_codes.SUCCESS
        assert services.install.calls[0].force is True  # type: ignore[attr-defined]

    def test_verify_defaults(self, settings: Settings, services: Services) -> None:
        assert main(["verify"], settings=settings, services=services) == exit_codes.SUCCESS
        assert services.verify.calls == [VerifyOptions(force=True, welcome_message=False)]  # type: ignore[attr-defined]


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------

class TestCache:
    def test_clear(self, settings: Settings, services: Services) -> None:
        assert main(["cache", "clear"], settings=settings, services=services) == exit_codes.SUCCESS
        assert services.cache.calls == ["clear"]  # type: ignore[attr-defined]

    def test_list(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert main(["cache", "list"], settings=settings, services=services) == exit_codes.SUCCESS
        out = capsys.readouterr().out
        assert "4.1.0" in out
        assert "4.2.0" in out

    def test_list_empty(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        empty = dataclasses.replace(services, cache=FakeCache())
        main(["cache", "list"], settings=settings, services=empty)
        assert "No cached binary versions" in capsys.readouterr().out

    def test_path(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert main(["cache", "path"], settings=settings, services=services) == exit_codes.SUCCESS
        assert "Cypress" in capsys.readouterr().out

    def test_missing_action(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert main(["cache"], settings=settings, services=services) == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "missing cache command" in err
        assert "Usage: cypress cache [command]" in err
        assert services.cache.calls == []  # type: ignore[attr-defined]

    def test_unknown_action(
        self, settings: Settings, services: Services, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert main(["cache", "purge"], settings=settings, services=services) == exit_codes.GENERAL_ERROR
        assert "error: unknown command: cache purge" in capsys.readouterr().err
        assert services.cache.calls == []  # type: ignore[attr-defined]

    def test_cache_failure(
        self, settings: Settings, capsys: pytest.CaptureFixture[str], services: Services,
    ) -> None:
        class BrokenCache(FakeCache):
            def clear(self) -> None:
                raise HandlerFailedError("permission denied")

        broken = dataclasses.replace(services, cache=BrokenCache())
        assert main(["cache", "clear"], settings=settings, services=broken) == exit_codes.GENERAL_ERROR
        assert "permission denied" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Environment validation
# ---------------------------------------------------------------------------

class TestEnvironment:
    @pytest.mark.parametrize("argv", [["help"], [], ["run"], ["cache", "clear"]])
    def test_invalid_env_aborts_before_any_command(self, argv: list[str], services: Services) -> None:
        settings = Settings.from_env({"CYPRESS_ENV": "bogus"})
        with pytest.raises(InvalidEnvironmentError, match="CYPRESS_ENV=bogus"):
            main(argv, settings=settings, services=services)
        assert services.run.calls == []  # type: ignore[attr-defined]
        assert services.cache.calls == []  # type: ignore[attr-defined]

    def test_valid_env_runs(self, services: Services) -> None:
        settings = Settings.from_env({"CYPRESS_ENV": "production"})
        assert main(["verify"], settings=settings, services=services) == exit_codes.SUCCESS
