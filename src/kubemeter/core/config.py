# src/kubemeter/core/config.py

import logging
import os
import re

from dotenv import load_dotenv

from kubemeter.models.pricing import PriceInfo, load_price_info

# Load environment variables from a .env file located in the project root
dotenv_path = os.path.join(os.path.dirname(__file__), "..", "..", "..", ".env")
load_dotenv(dotenv_path=dotenv_path)

_TRUTHY = ("true", "1", "t", "y", "yes")


class Config:
    """
    Handles the application's configuration by loading values from environment variables.
    """

    # Mounted secret volume; one file per key.
    SECRETS_DIR = os.getenv("KUBEMETER_SECRETS_DIR", "/etc/kubemeter/secrets")

    def __init__(self):
        # Backend credentials may come from mounted secrets.
        self.PROMETHEUS_BEARER_TOKEN = self._get_secret("PROMETHEUS_BEARER_TOKEN")
        self.PROMETHEUS_USERNAME = self._get_secret("PROMETHEUS_USERNAME")
        self.PROMETHEUS_PASSWORD = self._get_secret("PROMETHEUS_PASSWORD")

    @classmethod
    def _get_secret(cls, key: str, default: str = None) -> str:
        """
        Reads ``key`` from the secrets directory, falling back to the
        environment when no such file is mounted.

        Raises:
            OSError: If the secret file exists but cannot be read.
        """
        path = os.path.join(cls.SECRETS_DIR, key)
        if not os.path.isfile(path):
            return os.getenv(key, default)
        try:
            with open(path, "r", encoding="utf-8") as f:
                secret = f.read().strip()
        except OSError as e:
            raise OSError(f"Secret file '{path}' is mounted but unreadable: {e}") from e
        logging.getLogger(__name__).debug("Loaded secret '%s' from %s", key, path)
        return secret

    # --- Logging variables ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # -- Prometheus variables ---
    PROMETHEUS_URL = os.getenv("PROMETHEUS_URL", "http://prometheus-k8s.kubesphere-monitoring-system.svc:9090")
    PROMETHEUS_VERIFY_CERTS = os.getenv("PROMETHEUS_VERIFY_CERTS", "True").lower() in _TRUTHY

    # --- HTTP client variables ---
    DEFAULT_TIMEOUT_CONNECT = float(os.getenv("DEFAULT_TIMEOUT_CONNECT", "5"))
    DEFAULT_TIMEOUT_READ = float(os.getenv("DEFAULT_TIMEOUT_READ", "30"))
    USER_AGENT = os.getenv("USER_AGENT", "kubemeter")

    # --- Query defaults ---
    DEFAULT_STEP = os.getenv("DEFAULT_STEP", "10m")
    DEFAULT_METER_STEP = os.getenv("DEFAULT_METER_STEP", "1h")
    DEFAULT_FILTER = os.getenv("DEFAULT_FILTER", ".*")
    DEFAULT_PAGE = int(os.getenv("DEFAULT_PAGE", "1"))
    DEFAULT_LIMIT = int(os.getenv("DEFAULT_LIMIT", "5"))

    # --- Metering variables ---
    METERING_CONFIG_PATH = os.getenv("METERING_CONFIG_PATH", "")

    # Prices are resolved at access time so tests and callers can change env
    # vars after import.
    @property
    def PRICE_INFO(self) -> PriceInfo:
        if self.METERING_CONFIG_PATH:
            return load_price_info(self.METERING_CONFIG_PATH)
        return PriceInfo(
            currency_unit=os.getenv("CURRENCY_UNIT", ""),
            cpu_per_core_per_hour=float(os.getenv("PRICE_CPU_PER_CORE_HOUR", "0")),
            mem_per_gigabytes_per_hour=float(os.getenv("PRICE_MEM_PER_GIB_HOUR", "0")),
            ingress_network_traffic_per_megabytes_per_hour=float(os.getenv("PRICE_INGRESS_PER_MB_HOUR", "0")),
            egress_network_traffic_per_megabytes_per_hour=float(os.getenv("PRICE_EGRESS_PER_MB_HOUR", "0")),
            pvc_per_gigabytes_per_hour=float(os.getenv("PRICE_PVC_PER_GIB_HOUR", "0")),
        )

    def validate_instance(self):
        for name in ("DEFAULT_STEP", "DEFAULT_METER_STEP"):
            value = getattr(self, name)
            if not re.match(r"^(\d+(ms|s|m|h))+$", value.lower()):
                raise ValueError(f"{name} format is invalid. Use durations like '90s', '10m' or '1h30m'.")
        if self.DEFAULT_PAGE < 1:
            raise ValueError("DEFAULT_PAGE must be a positive integer.")
        if self.DEFAULT_LIMIT < 1:
            raise ValueError("DEFAULT_LIMIT must be a positive integer.")
        if self.METERING_CONFIG_PATH and not os.path.exists(self.METERING_CONFIG_PATH):
            logging.warning("METERING_CONFIG_PATH '%s' does not exist.", self.METERING_CONFIG_PATH)


# Instantiate the config to be imported by other modules
config = Config()
config.validate_instance()
