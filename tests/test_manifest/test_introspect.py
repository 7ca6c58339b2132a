"""Tests for tabgen.manifest.introspect -- manifests from live click/Typer apps."""

from __future__ import annotations

import enum
import textwrap
from pathlib import Path
from types import SimpleNamespace
from typing import Any, List, Optional

import click
import pytest
import typer

from tabgen.completion import build_catalog, zsh_completion_script
from tabgen.exceptions import ManifestError
from tabgen.manifest.introspect import (
    flag_from_option,
    load_app,
    manifest_from_app,
    manifest_from_command,
)
from tabgen.models import CommandSpec, FlagType, Manifest


# ---------------------------------------------------------------------------
# Sample applications
# ---------------------------------------------------------------------------


class Env(str, enum.Enum):
    DEV = "dev"
    PROD = "prod"


def _typer_app() -> typer.Typer:
    app = typer.Typer()
    org_app = typer.Typer(help="Manage orgs.\n\nLonger explanation.")
    user_app = typer.Typer(help="Manage org users.")
    app.add_typer(org_app, name="org")
    org_app.add_typer(user_app, name="user")

    @org_app.command("list")
    def org_list(
        all_: bool = typer.Option(False, "--all", "-a", help="Include disabled orgs."),
        env: Env = typer.Option(Env.DEV, "--env", help="Target environment."),
    ) -> None:
        """List orgs."""

    @org_app.command("purge", hidden=True)
    def org_purge() -> None:
        """Delete everything."""

    @user_app.command("add")
    def user_add(
        email: List[str] = typer.Option([], "--email", "-e", help="Email to add."),
    ) -> None:
        """Add a user."""

    @app.command("deploy")
    def deploy(
        force: bool = typer.Option(False, "--force", "-f", help="Force the deploy."),
        secret: bool = typer.Option(False, "--secret", hidden=True),
    ) -> None:
        """Deploy the app."""

    return app


def _click_group() -> click.Group:
    @click.group()
    def cli() -> None:
        """Sample click CLI."""

    @cli.group(invoke_without_command=True, help="Manage orgs")
    @click.option("--verbose", "-v", count=True, help="Be chatty.")
    def org(verbose: int) -> None:
        pass

    @org.command("list", short_help="List orgs")
    @click.option("--format", "output_format", type=click.Choice(["json", "table"]))
    def org_list(output_format: str) -> None:
        pass

    return cli


class _ForeignContext:
    def __init__(self, command: Any, info_name: Optional[str] = None, parent: Any = None) -> None:
        self.command = command
        self.info_name = info_name
        self.parent = parent


class _ForeignCommand:
    """Command from a click copy that does not share the installed click's classes."""

    context_class = _ForeignContext
    hidden = False
    short_help = None
    invoke_without_command = False

    def __init__(self, name: str, help: str, params: Optional[list[Any]] = None) -> None:
        self.name = name
        self.help = help
        self.params = params or []


class _ForeignGroup(_ForeignCommand):
    def __init__(self, name: str, help: str, commands: dict[str, _ForeignCommand]) -> None:
        super().__init__(name, help)
        self.commands = commands

    def list_commands(self, ctx: _ForeignContext) -> list[str]:
        return list(self.commands)

    def get_command(self, ctx: _ForeignContext, name: str) -> Optional[_ForeignCommand]:
        return self.commands.get(name)


def _foreign_group() -> _ForeignGroup:
    force = SimpleNamespace(
        param_type_name="option",
        name="force",
        opts=["--force", "-f"],
        is_flag=True,
        count=False,
        multiple=False,
        hidden=False,
        type=None,
        help="Force the deploy.",
    )
    target = SimpleNamespace(param_type_name="argument", name="target")
    org = _ForeignGroup("org", "Manage orgs", {"list": _ForeignCommand("list", "List orgs")})
    return _ForeignGroup(
        "cli",
        "Sample CLI",
        {"deploy": _ForeignCommand("deploy", "Deploy", [force, target]), "org": org},
    )


def _spec(manifest: Manifest, command_id: str) -> CommandSpec:
    for command in manifest.plugins[0].commands:
        assert isinstance(command, CommandSpec)
        if command.id == command_id:
            return command
    raise AssertionError(f"{command_id} not in manifest")


# ---------------------------------------------------------------------------
# Typer introspection
# ---------------------------------------------------------------------------


class TestTyperApp:
    @pytest.fixture
    def manifest(self) -> Manifest:
        return manifest_from_command(_typer_app(), bin="mycli")

    def test_bin(self, manifest: Manifest) -> None:
        assert manifest.bin == "mycli"

    def test_colon_ids(self, manifest: Manifest) -> None:
        ids = [c.id for c in manifest.plugins[0].commands]
        assert sorted(ids) == ["deploy", "org:list", "org:user:add"]

    def test_hidden_command_skipped(self, manifest: Manifest) -> None:
        ids = [c.id for c in manifest.plugins[0].commands]
        assert "org:purge" not in ids

    def test_topics(self, manifest: Manifest) -> None:
        assert [(t.name, t.description) for t in manifest.topics] == [
            ("org", "Manage orgs."),
            ("org:user", "Manage org users."),
        ]

    def test_short_flag_and_boolean(self, manifest: Manifest) -> None:
        flag = _spec(manifest, "org:list").flags["all"]
        assert flag.char == "a"
        assert flag.type == FlagType.BOOLEAN
        assert flag.summary == "Include disabled orgs."

    def test_choices(self, manifest: Manifest) -> None:
        flag = _spec(manifest, "org:list").flags["env"]
        assert flag.type == FlagType.OPTION
        assert flag.options == ["dev", "prod"]

    def test_multiple(self, manifest: Manifest) -> None:
        flag = _spec(manifest, "org:user:add").flags["email"]
        assert flag.multiple is True
        assert flag.char == "e"
        assert flag.options is None

    def test_hidden_flag_kept_as_hidden(self, manifest: Manifest) -> None:
        assert _spec(manifest, "deploy").flags["secret"].hidden is True

    def test_help_option_skipped(self, manifest: Manifest) -> None:
        assert "help" not in _spec(manifest, "deploy").flags

    def test_command_description(self, manifest: Manifest) -> None:
        assert _spec(manifest, "deploy").description == "Deploy the app."

    def test_generates_zsh_script(self, manifest: Manifest) -> None:
        catalog = build_catalog(manifest.plugins, manifest.topics)
        script = zsh_completion_script(catalog, "mycli")
        assert "_mycli_org_user() {" in script
        assert '--env"[Target environment.]:env options:(dev prod)"' in script


# ---------------------------------------------------------------------------
# click introspection
# ---------------------------------------------------------------------------


class TestClickGroup:
    @pytest.fixture
    def manifest(self) -> Manifest:
        return manifest_from_command(_click_group())

    def test_bin_defaults_to_group_name(self, manifest: Manifest) -> None:
        assert manifest.bin == "cli"

    def test_invokable_group_is_also_command(self, manifest: Manifest) -> None:
        ids = [c.id for c in manifest.plugins[0].commands]
        assert ids == ["org", "org:list"]
        assert [t.name for t in manifest.topics] == ["org"]

    def test_count_option_is_repeatable_boolean(self, manifest: Manifest) -> None:
        flag = _spec(manifest, "org").flags["verbose"]
        assert flag.type == FlagType.BOOLEAN
        assert flag.multiple is True
        assert flag.char == "v"

    def test_choice_option(self, manifest: Manifest) -> None:
        flag = _spec(manifest, "org:list").flags["format"]
        assert flag.options == ["json", "table"]

    def test_short_help_used_as_summary(self, manifest: Manifest) -> None:
        assert _spec(manifest, "org:list").summary == "List orgs"

    def test_single_command_rejected(self) -> None:
        @click.command()
        def single() -> None:
            pass

        with pytest.raises(ManifestError, match="no subcommands"):
            manifest_from_command(single)

    def test_non_cli_object_rejected(self) -> None:
        with pytest.raises(ManifestError, match="Expected a typer.Typer"):
            manifest_from_command(object())


class TestCommandInterface:
    """Commands are recognised by interface, not by the installed click's classes."""

    def test_flat_typer_app(self) -> None:
        app = typer.Typer()

        @app.command("deploy")
        def deploy() -> None:
            """Deploy the app."""

        @app.command("status")
        def status() -> None:
            """Show status."""

        manifest = manifest_from_command(app, bin="mycli")
        assert [c.id for c in manifest.plugins[0].commands] == ["deploy", "status"]
        assert manifest.topics == []

    def test_group_from_another_click_copy(self) -> None:
        manifest = manifest_from_command(_foreign_group())
        assert manifest.bin == "cli"
        assert [c.id for c in manifest.plugins[0].commands] == ["deploy", "org:list"]
        assert [t.name for t in manifest.topics] == ["org"]

        force = _spec(manifest, "deploy").flags["force"]
        assert force.char == "f"
        assert force.type == FlagType.BOOLEAN
        assert list(_spec(manifest, "deploy").flags) == ["force"]

    def test_leaf_from_another_click_copy_rejected(self) -> None:
        with pytest.raises(ManifestError, match="no subcommands"):
            manifest_from_command(_ForeignCommand("single", "Single command"))


class TestFlagFromOption:
    def test_longest_long_name_wins(self) -> None:
        option = click.Option(["--dry", "--dry-run", "-n"], is_flag=True)
        flag = flag_from_option(option)
        assert flag is not None
        assert flag.name == "dry-run"
        assert flag.char == "n"

    def test_short_only_option_ignored(self) -> None:
        assert flag_from_option(click.Option(["-x"], is_flag=True)) is None


# ---------------------------------------------------------------------------
# Import targets
# ---------------------------------------------------------------------------


class TestLoadApp:
    def test_manifest_from_import_target(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        module = tmp_path / "tabgen_sample_cli.py"
        module.write_text(
            textwrap.dedent("""\
                import typer

                app = typer.Typer()
                org = typer.Typer(help="Manage orgs")
                app.add_typer(org, name="org")


                @org.command("list")
                def org_list(all_: bool = typer.Option(False, "--all", "-a")) -> None:
                    \"\"\"List orgs.\"\"\"


                @app.command("deploy")
                def deploy() -> None:
                    \"\"\"Deploy.\"\"\"
            """),
            encoding="utf-8",
        )
        monkeypatch.syspath_prepend(str(tmp_path))

        manifest = manifest_from_app("tabgen_sample_cli:app", bin="sample")
        assert manifest.bin == "sample"
        assert sorted(c.id for c in manifest.plugins[0].commands) == ["deploy", "org:list"]

    @pytest.mark.parametrize("target", ["no_colon", ":app", "module:"])
    def test_malformed_target(self, target: str) -> None:
        with pytest.raises(ManifestError, match="module:attribute"):
            load_app(target)

    def test_missing_module(self) -> None:
        with pytest.raises(ManifestError, match="Could not import"):
            load_app("tabgen_no_such_module_xyz:app")

    def test_missing_attribute(self) -> None:
        with pytest.raises(ManifestError, match="no attribute"):
            load_app("tabgen.app:does_not_exist")

    def test_dotted_attribute(self) -> None:
        assert load_app("tabgen.app:app.info").name == "tabgen"
