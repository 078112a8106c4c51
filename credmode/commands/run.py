"""Controller run command implementation"""

from typing import Optional
import asyncio

from rich.console import Console

from credmode.cluster import KubeClusterClient
from credmode.config import OperatorConfig
from credmode.engine.controller import SecretAnnotatorController
from credmode.engine.reconciler import create_reconciler
from credmode.interfaces.cluster import ClusterClient


class RunCommand:
    """Run the secret annotator controller until interrupted"""

    def __init__(
        self,
        console: Console,
        config: OperatorConfig,
        cluster: Optional[ClusterClient] = None
    ):
        self.console = console
        self.config = config
        self.cluster = cluster

    def build_controller(self) -> SecretAnnotatorController:
        cluster = self.cluster or KubeClusterClient.from_config(self.config)
        reconciler = create_reconciler(self.config, cluster)

        # kopf reuses the reconciler's API credentials
        login = cluster.connection_info if isinstance(cluster, KubeClusterClient) else None
        return SecretAnnotatorController(reconciler, self.config, login=login)

    def execute(self):
        """Execute the controller loop

        kopf installs its own SIGINT/SIGTERM handling and returns once stopped.
        """
        controller = self.build_controller()

        self.console.print(
            f"[bold blue]Watching secret {self.config.secret_ref} "
            f"(provider: {self.config.provider})[/bold blue]"
        )
        asyncio.run(controller.run())
        self.console.print("[green]✓[/green] Controller stopped")
