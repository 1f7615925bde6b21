"""Click CLI for inspecting d-tickets event accounts."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from dticketsinspect.account.source import FORMATS, load_account_bytes
from dticketsinspect.config import DecoderLimits
from dticketsinspect.profiles import (
    DEFAULT_RPC_URL,
    Config,
    Profile,
    load_config,
    resolve_profile,
    save_config,
    validate_limits,
    validate_profile,
    validate_profile_name,
)


class Context:
    """Holds the config path and profile selected on the command line."""

    def __init__(self, config_path: Path | None = None, profile: str | None = None):
        self.config_path = config_path
        self.profile_name = profile

    def profile(self) -> Profile:
        return resolve_profile(self.profile_name, self.config_path)

    def limits(self) -> DecoderLimits:
        """Decoder limits from --profile, else the default profile, else built-in defaults."""
        if self.profile_name is None and load_config(self.config_path).default_profile is None:
            return DecoderLimits()
        profile = self.profile()
        problems = validate_limits(profile)
        if problems:
            raise click.UsageError(
                f"Profile '{profile.name}' has invalid limits: " + "; ".join(problems)
            )
        return profile.limits()


pass_ctx = click.make_pass_decorator(Context)


@click.group()
@click.option(
    "--config", "config_path", default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to config.toml (default: per-user app dir)",
)
@click.option(
    "--profile", "-p", default=None, type=str,
    help="Named profile to use (from dtix init)",
)
@click.version_option(package_name="dticketsinspect")
@click.pass_context
def cli(ctx, config_path: Optional[Path], profile: Optional[str]):
    """dtix - d-tickets event account inspector.

    Decodes raw EventAccount data without the program IDL, flagging
    where the account layout may have drifted.
    """
    ctx.ensure_object(dict)
    ctx.obj = Context(config_path=config_path, profile=profile)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "fmt", type=click.Choice(FORMATS), default="auto",
              help="Input encoding of PATH")
@click.option("--output", "output_fmt", type=click.Choice(["text", "json"]), default="text")
@click.option("--max-string-len", type=click.IntRange(min=0), default=None,
              help="Largest plausible string length (default: 1024)")
@click.option("--max-vector-len", type=click.IntRange(min=0), default=None,
              help="Largest plausible ticket-area mapping count (default: 100)")
@pass_ctx
def decode(ctx: Context, path: Path, fmt: str, output_fmt: str,
           max_string_len: Optional[int], max_vector_len: Optional[int]):
    """Decode an event account's data from PATH."""
    from dticketsinspect.account.event import decode_event_account
    from dticketsinspect.export.json_export import export_json
    from dticketsinspect.export.report import format_report

    limits = ctx.limits()
    limits = DecoderLimits(
        max_string_len=max_string_len if max_string_len is not None else limits.max_string_len,
        max_vector_len=max_vector_len if max_vector_len is not None else limits.max_vector_len,
    )

    try:
        data = load_account_bytes(path, fmt)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="PATH") from None

    if output_fmt == "text":
        click.echo(f"Account data: {path} ({len(data):,} bytes)")
    result = decode_event_account(data, limits)

    if output_fmt == "json":
        click.echo(export_json(result))
    else:
        click.echo(format_report(result))

    if not result.success:
        if output_fmt == "text":
            click.secho(f"\nDecode failed: {result.error.kind} at offset {result.offset}",
                        fg="red", err=True)
        sys.exit(1)
    if result.diagnostics and output_fmt == "text":
        click.secho(f"\nDecoded with {len(result.diagnostics)} warning(s).", fg="yellow", err=True)


@cli.command("profiles")
@pass_ctx
def list_profiles(ctx: Context):
    """List configured profiles and whether they are complete."""
    config = load_config(ctx.config_path)
    if not config.profiles:
        click.echo("No profiles configured. Run 'dtix init' first.")
        return

    for name, profile in config.profiles.items():
        default_marker = " (default)" if name == config.default_profile else ""
        click.echo(f"{name}{default_marker}")
        click.echo(f"  rpc_url:    {profile.rpc_url}")
        if profile.event_pda:
            click.echo(f"  event_pda:  {profile.event_pda}")
        else:
            click.echo(f"  program_id: {profile.program_id or '(not set)'}")
            click.echo(f"  organizer:  {profile.organizer or '(not set)'}")
            click.echo(f"  event_name: {profile.event_name or '(not set)'}")
        if not validate_limits(profile):
            limits = profile.limits()
            click.echo(f"  limits:     strings <= {limits.max_string_len}, "
                       f"mappings <= {limits.max_vector_len}")
        problems = validate_profile(profile)
        if problems:
            for problem in problems:
                click.secho(f"  ! {problem}", fg="yellow")
        else:
            click.echo("  ok")


@cli.command()
@pass_ctx
def init(ctx: Context):
    """Set up a config profile for an event account (interactive)."""
    config = load_config(ctx.config_path)

    if config.profiles:
        click.echo("Current profiles: " + ", ".join(config.profiles))
        if not click.confirm("Overwrite existing configuration?", default=False):
            click.echo("Aborted.")
            return
        config = Config()

    while True:
        name = click.prompt("Profile name", default="default").strip()
        if validate_profile_name(name):
            break
        click.echo(f"Invalid profile name '{name}'. Use letters, digits, hyphens, underscores.")

    profile = Profile(name=name)
    profile.rpc_url = click.prompt("RPC URL", default=DEFAULT_RPC_URL).strip()

    if click.confirm("Do you know the event account address (PDA)?", default=True):
        profile.event_pda = click.prompt("Event PDA").strip()
    else:
        profile.program_id = click.prompt("Program ID").strip()
        profile.organizer = click.prompt("Organizer public key").strip()
        profile.event_name = click.prompt("Event name").strip()

    for problem in validate_profile(profile):
        click.secho(f"Warning: {problem}", fg="yellow")

    config.profiles[name] = profile
    config.default_profile = name
    saved_path = save_config(config, ctx.config_path)
    click.echo(f"\nConfig saved to {saved_path}")


def main():
    cli()


if __name__ == "__main__":
    main()
