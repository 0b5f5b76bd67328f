"""
Pydantic Settings for etcd Backup Operations

This module provides strongly-typed configuration settings using Pydantic,
with support for environment variables and YAML configuration files.
"""

from typing import Optional, Union
from enum import Enum
from pathlib import Path
import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_yaml import to_yaml_str

from connection_management.etcd_connection import TLSConfig


ENV_PREFIX = "ETCD_BACKUP_"


class StorageType(str, Enum):
    """
    Storage backends a backup artifact can be persisted to.

    Both backends publish an artifact atomically, so a partially written
    snapshot is never visible as the latest backup.
    """
    LOCAL_FILE = "LOCAL_FILE"  # Directory on a local or mounted filesystem
    S3 = "S3"  # S3 compatible object storage bucket


class ConnectionSettings(BaseSettings):
    """
    Connection settings used when talking to etcd members.

    These settings control how the coordinator reaches every member:
    - Client port exposed by each member
    - Dial timeout for establishing a connection
    - Request timeout for lightweight revision probes
    - Snapshot timeout for the status query and opening the snapshot stream
    - Overall transfer ceiling so a stalled stream cannot hang forever
    """
    client_port: int = Field(2379, description="Client port exposed by every etcd member")
    dial_timeout: float = Field(5.0, gt=0,
                                description="Seconds allowed for establishing a connection to one member")
    request_timeout: float = Field(5.0, gt=0,
                                   description="Seconds allowed for one serializable revision probe")
    snapshot_timeout: float = Field(60.0, gt=0,
                                    description="Seconds allowed for the status query and for opening the snapshot stream")
    max_transfer_seconds: float = Field(3600.0, gt=0,
                                        description="Upper bound on the whole snapshot transfer")
    probe_workers: int = Field(1, ge=1,
                               description="Members probed concurrently (1 probes sequentially in list order)")

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, case_sensitive=False, extra="ignore")


class TLSSettings(BaseSettings):
    """
    Transport security for member connections.

    TLS is enabled when a CA certificate is configured; client certificate
    and key are optional and only used for mutual TLS.
    """
    ca_cert: Optional[str] = Field(None, description="Path to the CA bundle used to verify members")
    cert_cert: Optional[str] = Field(None, description="Path to the client certificate")
    cert_key: Optional[str] = Field(None, description="Path to the client private key")

    model_config = SettingsConfigDict(env_prefix=f"{ENV_PREFIX}TLS_", case_sensitive=False, extra="ignore")

    @property
    def enabled(self) -> bool:
        return bool(self.ca_cert)

    def to_tls_config(self) -> Optional[TLSConfig]:
        """Build the connection-level TLS configuration, or None for plaintext."""
        if not self.enabled:
            return None
        return TLSConfig(ca_cert=self.ca_cert, cert_cert=self.cert_cert, cert_key=self.cert_key)


class ClusterSettings(BaseSettings):
    """Identity of the etcd cluster being backed up."""
    cluster_name: str = Field("", description="Name of the etcd cluster")
    namespace: str = Field("default", description="Namespace the cluster members live in")

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, case_sensitive=False, extra="ignore")


class StorageSettings(BaseSettings):
    """
    Storage settings for persisting backup artifacts.

    These settings select the sink and where it writes:
    - LOCAL_FILE writes under local_root_path
    - S3 writes under s3_prefix in s3_bucket
    """
    storage_type: StorageType = Field(StorageType.LOCAL_FILE, description="Backend used to persist snapshots")
    local_root_path: str = Field("./etcd_backups", description="Root directory for LOCAL_FILE backups")
    s3_bucket: Optional[str] = Field(None, description="Bucket for S3 backups")
    s3_prefix: str = Field("", description="Key prefix under which S3 backups are stored")
    s3_region: Optional[str] = Field(None, description="Region of the S3 bucket")
    s3_endpoint_url: Optional[str] = Field(None, description="Custom endpoint for S3 compatible stores")

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, case_sensitive=False, extra="ignore")


class LedgerSettings(BaseSettings):
    """Retry policy used while reading the latest stored backup."""
    retry_attempts: int = Field(3, ge=1, description="Attempts made to list the sink before giving up")
    retry_wait_seconds: float = Field(1.0, ge=0, description="Seconds to wait between listing attempts")

    model_config = SettingsConfigDict(env_prefix=f"{ENV_PREFIX}LEDGER_", case_sensitive=False, extra="ignore")


class MonitoringSettings(BaseSettings):
    """Logging settings."""
    log_level: str = Field("INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    log_format: str = Field("%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                            description="Format string handed to logging.basicConfig")

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, case_sensitive=False, extra="ignore")


class EtcdBackupSettings(BaseSettings):
    """
    Main settings class that consolidates all configuration categories.

    Usage:
        # Load from environment variables and defaults
        settings = EtcdBackupSettings()

        # Load from YAML file
        settings = EtcdBackupSettings.from_yaml('config.yaml')

        # Access nested settings
        timeout = settings.connection.dial_timeout
        bucket = settings.storage.s3_bucket
    """
    connection: ConnectionSettings = Field(default_factory=ConnectionSettings,
                                           description="Member connection settings")
    tls: TLSSettings = Field(default_factory=TLSSettings,
                             description="Transport security settings")
    cluster: ClusterSettings = Field(default_factory=ClusterSettings,
                                     description="Cluster identity")
    storage: StorageSettings = Field(default_factory=StorageSettings,
                                     description="Backup sink settings")
    ledger: LedgerSettings = Field(default_factory=LedgerSettings,
                                   description="Latest-backup lookup settings")
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings,
                                           description="Logging settings")

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def from_yaml(cls, yaml_file: Union[str, Path]) -> "EtcdBackupSettings":
        """Load settings from YAML file"""
        import yaml
        with open(yaml_file, 'r') as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self) -> str:
        """Serialize the settings back to YAML."""
        return to_yaml_str(self)


def load_settings(config_path: Optional[str] = None) -> EtcdBackupSettings:
    """
    Load settings from file and/or environment variables.

    Args:
        config_path: Path to YAML configuration file. If None or file doesn't exist,
                    falls back to environment variables and default values.

    Returns:
        EtcdBackupSettings object with loaded configuration
    """
    if config_path and os.path.exists(config_path):
        return EtcdBackupSettings.from_yaml(config_path)
    return EtcdBackupSettings()
