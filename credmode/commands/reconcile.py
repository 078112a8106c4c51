"""One-shot reconcile command implementation"""

from typing import Optional

from rich.console import Console

from credmode.cluster import KubeClusterClient
from credmode.config import OperatorConfig
from credmode.engine.reconciler import create_reconciler
from credmode.interfaces.capabilities import ReconcileRequest, ReconcileResult
from credmode.interfaces.cluster import ClusterClient


class ReconcileCommand:
    """Reconcile the credential secret once and report the persisted mode"""

    def __init__(
        self,
        console: Console,
        config: OperatorConfig,
        cluster: Optional[ClusterClient] = None
    ):
        """Initialize reconcile command

        Args:
            console: Rich console for output
            config: Validated operator configuration
            cluster: Cluster client (built from config when omitted)
        """
        self.console = console
        self.config = config
        self.cluster = cluster

    def execute(self) -> ReconcileResult:
        """Execute a single reconcile

        Raises:
            CredModeError: If the reconcile fails
        """
        cluster = self.cluster or KubeClusterClient.from_config(self.config)
        reconciler = create_reconciler(self.config, cluster)

        self.console.print(f"[bold blue]Reconciling secret {self.config.secret_ref}...[/bold blue]")
        result = reconciler.reconcile(ReconcileRequest(self.config.secret_ref))

        self.console.print(f"[green]✓[/green] Capability mode: [bold]{result.mode}[/bold]")
        self.console.print(f"[dim]Annotation: {self.config.annotation_key}={result.mode}[/dim]")
        return result
