"""Configuration management for the FHIR REST reconciliation engine."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass
class ServerConfig:
    """
    FHIR server connection configuration.

    ``base_url`` and ``default_headers`` are interpreted by the engine.
    ``timeout`` and ``verify_ssl`` are handed to the HTTP client unchanged.
    """

    base_url: str
    default_headers: dict[str, str] = field(default_factory=dict)
    timeout: float = 30.0
    verify_ssl: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.default_headers, dict):
            raise ValueError(
                f"default_headers must be a mapping, got {type(self.default_headers).__name__}"
            )
        self.default_headers = {str(k): str(v) for k, v in self.default_headers.items()}


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "console"
    file: Path | None = None


@dataclass
class FhirRestConfig:
    """
    Complete configuration for the engine and its command line.

    This combines all configuration sections.
    """

    server: ServerConfig | None = None
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, config_path: Path) -> "FhirRestConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML config file

        Returns:
            FhirRestConfig instance

        Raises:
            ValueError: If the file is not valid YAML or not a mapping
        """
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(
                f"Invalid configuration file structure in {config_path}: "
                f"expected dictionary, got {type(data).__name__}"
            )

        server_data = data.get("server")
        server = ServerConfig(**server_data) if server_data else None

        logging_data = dict(data.get("logging") or {})
        if logging_data.get("file"):
            logging_data["file"] = Path(logging_data["file"])
        logging = LoggingConfig(**logging_data)

        return cls(server=server, logging=logging)

    def to_file(self, config_path: Path) -> None:
        """
        Save configuration to YAML file.

        Args:
            config_path: Path to save config file
        """
        data: dict[str, Any] = {
            "server": self.server.__dict__ if self.server else None,
            "logging": {
                k: str(v) if isinstance(v, Path) else v
                for k, v in self.logging.__dict__.items()
                if v is not None
            },
        }

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_env(cls) -> "FhirRestConfig":
        """
        Create configuration from environment variables.

        Environment variables:
            FHIR_BASE_URL: FHIR server base URL
            FHIR_DEFAULT_HEADERS: JSON object of headers sent with every request
            FHIR_TIMEOUT: Request timeout in seconds (default: 30)
            FHIR_VERIFY_SSL: Set to 'false' to disable certificate checks
            LOG_LEVEL: Logging level (default: INFO)
            LOG_FORMAT: console or json (default: console)

        Returns:
            FhirRestConfig instance

        Raises:
            ValueError: If FHIR_DEFAULT_HEADERS is not a JSON object
        """
        server_config = None
        base_url = os.getenv("FHIR_BASE_URL")
        if base_url:
            headers_raw = os.environ.get("FHIR_DEFAULT_HEADERS", "")
            headers: dict[str, str] = {}
            if headers_raw:
                try:
                    headers = json.loads(headers_raw)
                except json.JSONDecodeError as e:
                    raise ValueError(f"FHIR_DEFAULT_HEADERS is not valid JSON: {e}") from e
                if not isinstance(headers, dict):
                    raise ValueError("FHIR_DEFAULT_HEADERS must be a JSON object")

            verify_ssl_str = os.environ.get("FHIR_VERIFY_SSL", "true").lower()
            verify_ssl = verify_ssl_str not in ("false", "0", "no", "off")

            server_config = ServerConfig(
                base_url=base_url,
                default_headers=headers,
                timeout=float(os.environ.get("FHIR_TIMEOUT", "30")),
                verify_ssl=verify_ssl,
            )

        logging_config = LoggingConfig(
            level=os.environ.get("LOG_LEVEL", "INFO"),
            format=os.environ.get("LOG_FORMAT", "console"),
        )

        return cls(server=server_config, logging=logging_config)


def load_config(config_file: Path | None = None) -> FhirRestConfig:
    """
    Load configuration from file or environment variables.

    Args:
        config_file: Optional path to YAML config file

    Returns:
        FhirRestConfig instance

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist
    """
    if config_file:
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
        return FhirRestConfig.from_file(config_file)
    return FhirRestConfig.from_env()
