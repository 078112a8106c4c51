"""kopf-driven controller for the secret annotator"""

from typing import Any, Callable, Optional
import asyncio
import logging

import kopf

from credmode.config import OperatorConfig
from credmode.engine.diffbase import CredentialDiffBaseStorage
from credmode.engine.filter import CredentialSecretFilter
from credmode.engine.reconciler import CapabilityReconciler
from credmode.exceptions import CredentialObjectNotFoundError
from credmode.interfaces.capabilities import (
    EventKind,
    NamespacedName,
    ReconcileRequest,
    ReconcileResult,
    WatchEvent,
)

logger = logging.getLogger(__name__)

CONTROLLER_NAME = "secretannotator"

# Core API secrets
SECRETS = ("v1", "secrets")


class SecretAnnotatorController:
    """Registers the secret annotator handlers with a kopf operator

    Responsibilities:
    - Admit create/update/resume/delete causes for the credential secret only
    - Re-check the secret every resync period
    - Turn reconcile failures into kopf retries with exponential backoff

    kopf owns the watch, relists, per-object serialization and the handler
    thread pool. Update handlers fire only when the secret's data changes
    (see CredentialDiffBaseStorage).
    """

    def __init__(
        self,
        reconciler: CapabilityReconciler,
        config: OperatorConfig,
        login: Optional[Callable[..., kopf.ConnectionInfo]] = None
    ):
        self.reconciler = reconciler
        self.config = config
        self.target = config.secret_ref
        self.event_filter = CredentialSecretFilter(self.target)
        self.login = login
        self.registry = kopf.OperatorRegistry()
        self._stop_flag: Optional[asyncio.Event] = None
        self._register()

    def _register(self):
        registry = self.registry

        kopf.on.startup(registry=registry)(self.configure)
        if self.login is not None:
            kopf.on.login(registry=registry)(self.login)

        for on_cause, kind in (
            (kopf.on.create, EventKind.CREATE),
            (kopf.on.update, EventKind.UPDATE),
            (kopf.on.resume, EventKind.CREATE),
        ):
            on_cause(*SECRETS, id=CONTROLLER_NAME, registry=registry, when=self.admits(kind))(
                self.reconcile_secret
            )

        # optional: no finalizer is put on the secret
        kopf.on.delete(
            *SECRETS,
            id=f"{CONTROLLER_NAME}-delete",
            registry=registry,
            optional=True,
            when=self.admits(EventKind.DELETE),
        )(self.reconcile_deleted)

        kopf.timer(
            *SECRETS,
            id=f"{CONTROLLER_NAME}-resync",
            registry=registry,
            interval=self.config.resync_period_seconds,
            initial_delay=self.config.resync_period_seconds,
            when=self.admits(EventKind.UPDATE),
        )(self.resync)

    def admits(self, kind: EventKind) -> Callable[..., bool]:
        """Build a kopf `when` filter for one cause kind"""
        def admitted(name: str, namespace: str, **_: Any) -> bool:
            return self.event_filter(WatchEvent(kind=kind, namespace=namespace, name=name))
        return admitted

    def configure(self, settings: kopf.OperatorSettings, **_: Any) -> None:
        """Apply operator settings (kopf startup handler)"""
        settings.persistence.progress_storage = kopf.AnnotationsProgressStorage()
        settings.persistence.diffbase_storage = CredentialDiffBaseStorage()

        # Handler logs go to the operator log only, not to k8s Events
        settings.posting.enabled = False

        settings.watching.server_timeout = self.config.watch_timeout_seconds
        settings.watching.reconnect_backoff = self.config.watch_retry_seconds
        settings.execution.max_workers = self.config.max_concurrent_reconciles

    def retry_delay(self, retry: int) -> float:
        """Exponential backoff for the given retry attempt, capped at the max delay"""
        base = self.config.backoff_base_seconds
        cap = self.config.backoff_max_seconds

        # 2**64 * base already exceeds any sane cap
        if retry > 64:
            return cap
        return min(base * (2 ** retry), cap)

    def reconcile_key(
        self,
        key: NamespacedName,
        retry: int = 0,
        missing_ok: bool = False
    ) -> Optional[ReconcileResult]:
        """Reconcile one secret and map failures to a kopf retry

        Returns:
            ReconcileResult, or None when the secret is gone and missing_ok is set

        Raises:
            kopf.TemporaryError: On any reconcile failure, delayed by retry_delay(retry)
        """
        try:
            result = self.reconciler.reconcile(ReconcileRequest(key))
        except CredentialObjectNotFoundError as e:
            if missing_ok:
                logger.debug(f"{CONTROLLER_NAME}: secret {key} not found")
                return None
            self._requeue(key, retry, e)
        except Exception as e:
            self._requeue(key, retry, e)

        logger.info(f"{CONTROLLER_NAME}: secret {key} annotated with mode '{result.mode}'")
        return result

    def _requeue(self, key: NamespacedName, retry: int, error: Exception):
        delay = self.retry_delay(retry)
        logger.error(f"{CONTROLLER_NAME}: error while validating cloud credentials: {error}")
        logger.debug(f"{CONTROLLER_NAME}: retrying {key} in {delay}s (attempt {retry + 1})")
        raise kopf.TemporaryError(f"reconcile of {key} failed: {error}", delay=delay) from error

    def reconcile_secret(self, name: str, namespace: str, retry: int = 0, **_: Any) -> None:
        """Create, update and resume handler"""
        self.reconcile_key(NamespacedName(namespace, name), retry)

    def reconcile_deleted(self, name: str, namespace: str, retry: int = 0, **_: Any) -> None:
        """Delete handler; a secret that is already gone needs no annotation"""
        self.reconcile_key(NamespacedName(namespace, name), retry, missing_ok=True)

    def resync(self, name: str, namespace: str, retry: int = 0, **_: Any) -> None:
        """Periodic re-check so cloud-side permission changes are picked up"""
        logger.debug(f"{CONTROLLER_NAME}: periodic resync of {namespace}/{name}")
        self.reconcile_key(NamespacedName(namespace, name), retry)

    async def run(self):
        """Run the operator until stop() is called or a termination signal arrives"""
        self._stop_flag = asyncio.Event()

        logger.info(f"{CONTROLLER_NAME}: starting, watching secret {self.target}")
        await kopf.operator(
            registry=self.registry,
            standalone=True,
            clusterwide=False,
            namespaces=[self.target.namespace],
            stop_flag=self._stop_flag,
        )
        logger.info(f"{CONTROLLER_NAME}: stopped")

    def stop(self):
        if self._stop_flag is not None:
            self._stop_flag.set()
