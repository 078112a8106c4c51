"""Unit tests for operator configuration loading"""

import pytest

from credmode.config import OperatorConfig, load_config
from credmode.exceptions import ConfigurationError
from credmode.interfaces.capabilities import ANNOTATION_KEY, NamespacedName


class TestOperatorConfigDefaults:
    """Test defaults match the cluster conventions"""

    def test_defaults(self):
        """Test default secret location, annotation key and timings"""
        config = OperatorConfig()

        assert config.provider == "aws"
        assert config.secret_ref == NamespacedName("kube-system", "aws-creds")
        assert config.annotation_key == ANNOTATION_KEY
        assert config.infrastructure_name == "cluster"
        assert config.max_concurrent_reconciles == 1
        assert config.backoff_base_seconds == 0.005
        assert config.backoff_max_seconds == 1000.0
        assert config.log_level == "INFO"

    def test_log_level_is_normalized(self):
        """Test lowercase log levels are accepted"""
        assert OperatorConfig(log_level="debug").log_level == "DEBUG"

    @pytest.mark.parametrize("field,value", [
        ("log_level", "verbose"),
        ("max_concurrent_reconciles", 0),
        ("aws_region", "mars-1"),
        ("watch_timeout_seconds", 0),
    ])
    def test_invalid_values_rejected(self, field, value):
        """Test invalid values fail validation"""
        with pytest.raises(ValueError):
            OperatorConfig(**{field: value})

    def test_unknown_keys_rejected(self):
        """Test typos in configuration are reported"""
        with pytest.raises(ValueError):
            OperatorConfig(provder="aws")

    def test_secret_name_must_be_dns_compliant(self):
        """Test secret reference validation"""
        with pytest.raises(ValueError):
            OperatorConfig(credentials_secret={"namespace": "Kube_System", "name": "aws-creds"})


class TestLoadConfig:
    """Test YAML loading and overrides"""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        """Test defaults apply when no config file exists"""
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config == OperatorConfig()

    def test_loads_default_file_from_cwd(self, tmp_path, monkeypatch):
        """Test credmode.yaml in the working directory is picked up"""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "credmode.yaml").write_text(
            "credentials_secret:\n"
            "  namespace: openshift-config\n"
            "  name: cloud-creds\n"
            "aws_region: eu-west-1\n"
        )

        config = load_config()

        assert config.secret_ref == NamespacedName("openshift-config", "cloud-creds")
        assert config.aws_region == "eu-west-1"

    def test_overrides_take_precedence(self, tmp_path):
        """Test CLI overrides win over file values and None is ignored"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("log_level: WARNING\nkube_context: from-file\n")

        config = load_config(config_file, overrides={"log_level": "DEBUG", "kube_context": None})

        assert config.log_level == "DEBUG"
        assert config.kube_context == "from-file"

    def test_empty_file_uses_defaults(self, tmp_path):
        """Test an empty YAML document yields defaults"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        assert load_config(config_file) == OperatorConfig()

    def test_missing_explicit_file(self, tmp_path):
        """Test an explicit path that does not exist is an error"""
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(tmp_path / "missing.yaml")

        assert "file not found" in exc_info.value.message

    def test_invalid_yaml(self, tmp_path):
        """Test YAML syntax errors are reported as configuration errors"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("provider: [aws\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(config_file)

        assert "YAML parse error" in exc_info.value.message

    def test_non_mapping_rejected(self, tmp_path):
        """Test a top-level list is rejected"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- aws\n")

        with pytest.raises(ConfigurationError):
            load_config(config_file)

    def test_validation_error_wrapped(self, tmp_path):
        """Test pydantic validation failures become ConfigurationError"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("max_concurrent_reconciles: -1\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(config_file)

        assert str(config_file) in exc_info.value.message
