"""
Vault Client Utility for the Daily Reward Exporter

Reads the PostgreSQL DSN from a HashiCorp Vault KV v2 secret, so the
connection string does not have to be passed on the command line.
"""

import os
from typing import Dict, Any, Optional
import hvac
from hvac.exceptions import VaultError, InvalidPath
import logging

logger = logging.getLogger(__name__)


class VaultClient:
    """Client for reading exporter secrets from HashiCorp Vault."""

    def __init__(
        self,
        vault_url: Optional[str] = None,
        vault_token: Optional[str] = None,
        verify_ssl: bool = True,
        mount_point: str = "secret"
    ):
        """
        Initialize Vault client.

        Args:
            vault_url: Vault server URL (defaults to VAULT_ADDR env var)
            vault_token: Vault authentication token (defaults to VAULT_TOKEN env var)
            verify_ssl: Whether to verify SSL certificates
            mount_point: KV secrets engine mount point

        Raises:
            ValueError: If required parameters are missing
            VaultError: If connection to Vault fails
        """
        self.vault_url = vault_url or os.getenv("VAULT_ADDR")
        self.vault_token = vault_token or os.getenv("VAULT_TOKEN")
        self.mount_point = mount_point

        if not self.vault_url:
            raise ValueError("Vault URL must be provided via parameter or VAULT_ADDR environment variable")

        if not self.vault_token:
            raise ValueError("Vault token must be provided via parameter or VAULT_TOKEN environment variable")

        try:
            self.client = hvac.Client(
                url=self.vault_url,
                token=self.vault_token,
                verify=verify_ssl
            )

            if not self.client.is_authenticated():
                raise VaultError("Failed to authenticate with Vault")

            logger.info(f"Successfully connected to Vault at {self.vault_url}")

        except Exception as e:
            logger.error(f"Failed to initialize Vault client: {e}")
            raise VaultError(f"Vault initialization failed: {e}")

    def get_secret(self, path: str) -> Dict[str, Any]:
        """
        Retrieve a secret from Vault.

        Args:
            path: Secret path relative to the mount point

        Returns:
            Dictionary containing secret data

        Raises:
            InvalidPath: If secret path does not exist
            VaultError: If retrieval fails
        """
        try:
            logger.debug(f"Retrieving secret from path: {self.mount_point}/data/{path}")
            response = self.client.secrets.kv.v2.read_secret_version(
                path=path,
                mount_point=self.mount_point
            )

            if not response or "data" not in response:
                raise InvalidPath(f"No data found at path: {path}")

            return response["data"].get("data", {})

        except InvalidPath:
            logger.error(f"Secret not found at path: {path}")
            raise
        except Exception as e:
            logger.error(f"Failed to retrieve secret from {path}: {e}")
            raise VaultError(f"Secret retrieval failed: {e}")

    def get_database_dsn(self, path: str, key: str = "dsn") -> str:
        """
        Retrieve the reward database DSN.

        Args:
            path: Secret path
            key: Key of the DSN inside the secret

        Returns:
            The DSN string

        Raises:
            KeyError: If the secret has no non-empty value under key
            VaultError: If retrieval fails
        """
        secret = self.get_secret(path)
        dsn = secret.get(key)

        if not dsn:
            raise KeyError(f"Secret {path} has no '{key}' entry")

        logger.info(f"Retrieved database DSN from {path}")
        return dsn

    def close(self):
        """Drop the underlying hvac client."""
        self.client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def resolve_dsn(vault_path: str, key: str = "dsn", client: Optional[VaultClient] = None) -> str:
    """
    Read the DSN from Vault, creating a client from the environment if needed.

    Args:
        vault_path: Secret path
        key: Key of the DSN inside the secret
        client: Existing client to use

    Returns:
        The DSN string
    """
    if client is not None:
        return client.get_database_dsn(vault_path, key)

    with VaultClient() as vault:
        return vault.get_database_dsn(vault_path, key)
