"""CLI entry point for credmode"""

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text
from pathlib import Path
from typing import Optional
import logging

from credmode.config import OperatorConfig, load_config
from credmode.exceptions import CredModeError

app = typer.Typer(
    name="credmode",
    help="credmode - annotate the cluster cloud credential with its capability mode",
    add_completion=False
)
console = Console()


def configure_logging(level: str):
    """Route stdlib logging through Rich at the given level"""
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def handle_credmode_error(error: CredModeError, exit_code: int = 1):
    """Handle credmode errors with Rich formatting

    Args:
        error: credmode exception to handle
        exit_code: Exit code to use
    """
    if error.help_text:
        panel_content = f"{error.message}\n\n[bold cyan]Help:[/bold cyan]\n{error.help_text}"
    else:
        panel_content = error.message

    panel = Panel(
        panel_content,
        title="[bold red]Error[/bold red]",
        border_style="red",
        expand=False
    )

    console.print(panel)
    raise typer.Exit(exit_code)


def handle_unexpected_error(error: Exception, exit_code: int = 1):
    """Handle unexpected errors with Rich formatting

    Args:
        error: Exception to handle
        exit_code: Exit code to use
    """
    error_text = Text()
    error_text.append("✗ Unexpected Error: ", style="bold red")
    error_text.append(str(error))

    console.print(error_text)
    console.print("\n[yellow]This is an unexpected error. Please report this issue.[/yellow]")
    console.print(f"[dim]Error type: {type(error).__name__}[/dim]")

    raise typer.Exit(exit_code)


def _load(
    config_path: Optional[Path],
    kubeconfig: Optional[str],
    context: Optional[str],
    log_level: Optional[str]
) -> OperatorConfig:
    config = load_config(
        config_path,
        overrides={"kubeconfig": kubeconfig, "kube_context": context, "log_level": log_level},
    )
    configure_logging(config.log_level)
    return config


ConfigOption = typer.Option(None, "--config", "-c", help="Path to credmode.yaml")
KubeconfigOption = typer.Option(None, "--kubeconfig", help="kubeconfig path (in-cluster when unset)")
ContextOption = typer.Option(None, "--context", help="kubeconfig context")
LogLevelOption = typer.Option(None, "--log-level", help="Logging level (DEBUG, INFO, ...)")


@app.command()
def run(
    config_path: Optional[Path] = ConfigOption,
    kubeconfig: Optional[str] = KubeconfigOption,
    context: Optional[str] = ContextOption,
    log_level: Optional[str] = LogLevelOption,
):
    """Watch the credential secret and keep its capability annotation current"""
    from credmode.commands.run import RunCommand

    try:
        config = _load(config_path, kubeconfig, context, log_level)
        RunCommand(console, config).execute()

    except CredModeError as e:
        handle_credmode_error(e)
    except Exception as e:
        handle_unexpected_error(e)


@app.command()
def reconcile(
    config_path: Optional[Path] = ConfigOption,
    kubeconfig: Optional[str] = KubeconfigOption,
    context: Optional[str] = ContextOption,
    log_level: Optional[str] = LogLevelOption,
):
    """Determine and record the capability mode once, then exit"""
    from credmode.commands.reconcile import ReconcileCommand

    try:
        config = _load(config_path, kubeconfig, context, log_level)
        ReconcileCommand(console, config).execute()

    except CredModeError as e:
        handle_credmode_error(e)
    except Exception as e:
        handle_unexpected_error(e)


@app.command()
def version():
    """Display CLI version and registered cloud providers"""
    from rich.table import Table
    from credmode.providers.registry import ProviderRegistry
    import importlib.metadata

    console.print("[bold blue]credmode Version Information[/bold blue]\n")

    try:
        cli_version = importlib.metadata.version("credmode")
    except importlib.metadata.PackageNotFoundError:
        cli_version = "0.1.0-dev"

    console.print(f"CLI Version: [green]{cli_version}[/green]\n")

    registry = ProviderRegistry()

    table = Table(title="Cloud Providers")
    table.add_column("Provider", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Credential Fields", style="magenta")

    for provider_name in registry.list_providers():
        metadata = registry.get_metadata(provider_name)
        fields = metadata.get("credential_fields", {})
        table.add_row(
            metadata.get("display_name", provider_name),
            provider_name,
            ", ".join(fields.values()) or "none"
        )

    console.print(table)


def main():
    app()


if __name__ == "__main__":
    main()
