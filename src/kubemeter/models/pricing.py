# src/kubemeter/models/pricing.py
"""
Unit prices used to turn summed meter usage into fees.
"""

import logging
from pathlib import Path
from typing import Union

from pydantic import AliasChoices, BaseModel, Field
from ruamel.yaml import YAML

logger = logging.getLogger(__name__)


class PriceInfo(BaseModel):
    """
    Unit prices per resource type. Accepts both the snake_case field names
    and the camelCase keys of a KubeSphere ``ks-metering.yaml`` file.
    """

    currency_unit: str = Field(
        "",
        validation_alias=AliasChoices("currency_unit", "currencyUnit", "currency"),
        description="Currency label attached to every fee, e.g. 'USD'.",
    )
    cpu_per_core_per_hour: float = Field(
        0.0,
        validation_alias=AliasChoices("cpu_per_core_per_hour", "cpuPerCorePerHour", "cpuCorePerHour"),
    )
    mem_per_gigabytes_per_hour: float = Field(
        0.0, validation_alias=AliasChoices("mem_per_gigabytes_per_hour", "memPerGigabytesPerHour")
    )
    ingress_network_traffic_per_megabytes_per_hour: float = Field(
        0.0,
        validation_alias=AliasChoices(
            "ingress_network_traffic_per_megabytes_per_hour",
            "ingressNetworkTrafficPerMegabytesPerHour",
            # Key spelling used by existing ks-metering.yaml files.
            "ingressNetworkTrafficPerGiagabytesPerHour",
        ),
    )
    egress_network_traffic_per_megabytes_per_hour: float = Field(
        0.0,
        validation_alias=AliasChoices(
            "egress_network_traffic_per_megabytes_per_hour",
            "egressNetworkTrafficPerMegabytesPerHour",
            "egressNetworkTrafficPerGigabytesPerHour",
        ),
    )
    pvc_per_gigabytes_per_hour: float = Field(
        0.0, validation_alias=AliasChoices("pvc_per_gigabytes_per_hour", "pvcPerGigabytesPerHour")
    )


def load_price_info(path: Union[str, Path]) -> PriceInfo:
    """
    Reads the ``billing.priceInfo`` section of a metering YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file has no price section.
    """
    yaml = YAML(typ="safe")
    with open(path, "r", encoding="utf-8") as f:
        doc = yaml.load(f) or {}

    billing = doc.get("billing") or {}
    section = billing.get("priceInfo") or billing.get("price_info")
    if section is None:
        raise ValueError(f"No billing.priceInfo section in metering config '{path}'.")

    logger.debug("Loaded price info from %s", path)
    return PriceInfo.model_validate(section)
