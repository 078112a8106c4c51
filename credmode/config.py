"""Operator configuration model and loader"""

from pathlib import Path
from typing import Any, Dict, Optional
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from credmode.exceptions import ConfigurationError
from credmode.interfaces.capabilities import ANNOTATION_KEY, NamespacedName

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("credmode.yaml")

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class SecretReference(BaseModel):
    """Location of the root cloud credential secret"""
    model_config = ConfigDict(extra="forbid")

    namespace: str = Field(default="kube-system", min_length=1)
    name: str = Field(default="aws-creds", min_length=1)

    @field_validator("namespace", "name")
    @classmethod
    def validate_dns_name(cls, v: str) -> str:
        """Validate name is DNS-compliant"""
        if not v.replace("-", "").replace(".", "").isalnum() or v != v.lower():
            raise ValueError("Must be lowercase alphanumeric with '-' or '.'")
        return v

    def to_namespaced_name(self) -> NamespacedName:
        return NamespacedName(self.namespace, self.name)


class OperatorConfig(BaseModel):
    """credmode operator configuration with validation"""
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "provider": "aws",
                "credentials_secret": {"namespace": "kube-system", "name": "aws-creds"},
                "aws_region": "us-east-1",
                "max_concurrent_reconciles": 1,
            }
        },
    )

    provider: str = Field(default="aws", description="Cloud provider implementation name")
    credentials_secret: SecretReference = Field(default_factory=SecretReference)
    annotation_key: str = Field(default=ANNOTATION_KEY, min_length=1)
    infrastructure_name: str = Field(
        default="cluster",
        min_length=1,
        description="Name of the cluster-scoped Infrastructure object"
    )
    aws_region: str = Field(default="us-east-1", pattern=r"^[a-z]{2}(-[a-z]+)+-\d+$")

    kubeconfig: Optional[str] = Field(None, description="Path to kubeconfig (in-cluster config when unset)")
    kube_context: Optional[str] = Field(None, description="kubeconfig context to use")

    watch_timeout_seconds: int = Field(default=300, gt=0)
    watch_retry_seconds: float = Field(default=5.0, ge=0)
    resync_period_seconds: float = Field(default=36000.0, gt=0)
    max_concurrent_reconciles: int = Field(default=1, ge=1)
    backoff_base_seconds: float = Field(default=0.005, gt=0)
    backoff_max_seconds: float = Field(default=1000.0, gt=0)

    log_level: str = Field(default="INFO")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate logging level name"""
        level = str(v).upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {sorted(_LOG_LEVELS)}")
        return level

    @property
    def secret_ref(self) -> NamespacedName:
        return self.credentials_secret.to_namespaced_name()


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> OperatorConfig:
    """Load operator configuration

    Args:
        config_path: YAML file to load. When None, credmode.yaml in the
            working directory is used if it exists, otherwise defaults apply.
        overrides: Values taking precedence over the file (None values ignored)

    Returns:
        Validated OperatorConfig

    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid
    """
    data: Dict[str, Any] = {}
    source = None

    if config_path is None and DEFAULT_CONFIG_FILE.exists():
        config_path = DEFAULT_CONFIG_FILE

    if config_path is not None:
        source = str(config_path)
        if not config_path.exists():
            raise ConfigurationError("file not found", source)
        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"YAML parse error: {e}", source) from e

        if not isinstance(data, dict):
            raise ConfigurationError("top-level value must be a mapping", source)
        logger.debug(f"Loaded configuration from {source}")

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return OperatorConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(str(e), source) from e
