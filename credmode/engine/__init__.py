"""Reconciliation engine: event filter, reconciler and kopf controller"""

from credmode.engine.controller import SecretAnnotatorController
from credmode.engine.diffbase import CredentialDiffBaseStorage
from credmode.engine.filter import CredentialSecretFilter
from credmode.engine.reconciler import CapabilityReconciler

__all__ = [
    "CapabilityReconciler",
    "CredentialDiffBaseStorage",
    "CredentialSecretFilter",
    "SecretAnnotatorController",
]
