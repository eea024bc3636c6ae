"""CLI commands for global configuration management."""

from typing import Optional

import typer
import yaml

from taskfoundry import global_config
from taskfoundry.config import LLMProvider, get_provider_spec
from taskfoundry.llm.credentials import CredentialResolver, mask_key, validate_api_key
from taskfoundry.settings import SettingsError, load_settings
from taskfoundry.cli.utils import get_repo_root_safe

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage taskfoundry configuration in ~/.taskfoundry/",
    add_completion=False,
)

KEYED_PROVIDERS = list(LLMProvider)


def _parse_provider(provider: str) -> LLMProvider:
    try:
        return LLMProvider(provider.strip().lower())
    except ValueError:
        typer.echo(f"Invalid provider: {provider}", err=True)
        typer.echo(f"Valid providers: {', '.join(p.value for p in KEYED_PROVIDERS)}")
        raise typer.Exit(1)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration and where each API key comes from."""
    repo_root = get_repo_root_safe()
    try:
        settings = load_settings(repo_root)
        resolver = CredentialResolver.from_sources(repo_root=repo_root)
    except (SettingsError, global_config.GlobalConfigError) as e:
        typer.echo(f"Error reading configuration: {e}", err=True)
        raise typer.Exit(1)

    typer.echo("Current taskfoundry configuration:")
    if not global_config.is_configured():
        typer.echo("(no ~/.taskfoundry/config.yaml yet, showing defaults)")
    typer.echo()
    typer.echo(f"  Engine: {settings.engine}")
    typer.echo(f"  Model: {settings.model or 'provider default'}")
    typer.echo(f"  Temperature: {settings.temperature if settings.temperature is not None else 'mode default'}")
    typer.echo(f"  Max Tokens: {settings.max_tokens or 'mode default'}")
    typer.echo(f"  Output: {settings.output}")
    typer.echo(f"  Detailed: {settings.detailed}")
    typer.echo(f"  Fallback: {settings.fallback}")
    typer.echo(f"  Timeout: {settings.timeout}s")
    if settings.local_endpoint:
        typer.echo(f"  Local Endpoint: {settings.local_endpoint}")

    if settings.exclude:
        typer.echo()
        typer.echo("  Exclude Patterns:")
        for pattern in settings.exclude:
            typer.echo(f"    - {pattern}")

    typer.echo()
    typer.echo("  API Keys:")
    for provider in KEYED_PROVIDERS:
        env_var = get_provider_spec(provider).api_key_env_var
        api_key = resolver.resolve(provider)
        if api_key:
            typer.echo(
                f"    {provider.value} ({env_var}): {mask_key(api_key)} "
                f"[{resolver.source_of(provider)}]"
            )
        else:
            typer.echo(f"    {provider.value} ({env_var}): not set")


@config_app.command("set-key")
def config_set_key(
    provider: str = typer.Argument(
        ...,
        help="Provider name (groq, openai, huggingface, freetier, local)",
    )
) -> None:
    """Set or update an API key for a provider."""
    llm_provider = _parse_provider(provider)
    env_var = get_provider_spec(llm_provider).api_key_env_var

    typer.echo(f"Setting API key for {llm_provider.value}")
    api_key = typer.prompt(f"Enter your {llm_provider.value} API key", hide_input=True)
    if not api_key.strip():
        typer.echo("API key cannot be empty.", err=True)
        raise typer.Exit(1)

    if not validate_api_key(llm_provider, api_key):
        typer.secho(
            f"Warning: this does not look like a valid {llm_provider.value} API key.",
            fg=typer.colors.YELLOW,
            err=True,
        )
        if not typer.confirm("Save it anyway?", default=False):
            typer.echo("API key not saved.")
            raise typer.Exit(1)

    try:
        global_config.save_credential(env_var, api_key.strip())
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ API key saved for {llm_provider.value}")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help=f"Setting name ({', '.join(global_config.CONFIG_KEYS)})"),
    value: Optional[str] = typer.Argument(None, help="New value (omit to clear the setting)"),
) -> None:
    """Set a preference in ~/.taskfoundry/config.yaml."""
    try:
        parsed = yaml.safe_load(value) if value is not None else None
    except yaml.YAMLError as e:
        typer.echo(f"Error: invalid value: {e}", err=True)
        raise typer.Exit(1)

    try:
        if key not in global_config.CONFIG_KEYS:
            raise global_config.GlobalConfigError(
                f"Unknown config key: {key}. "
                f"Must be one of: {', '.join(global_config.CONFIG_KEYS)}"
            )
        if parsed is not None:
            load_settings(overrides={key: parsed})
        global_config.set_config_value(key, parsed)
    except (SettingsError, global_config.GlobalConfigError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ {key} set to: {parsed}")


@config_app.command("reset")
def config_reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Restore the default preferences. API keys are kept."""
    if not yes and not typer.confirm("Reset ~/.taskfoundry/config.yaml to defaults?", default=False):
        raise typer.Exit(0)

    try:
        global_config.reset_global_config()
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo("✓ Configuration reset to defaults")
