# tests/models/test_pricing.py

import pytest

from kubemeter.models.pricing import PriceInfo, load_price_info


def test_price_info_accepts_camel_case_keys():
    price = PriceInfo.model_validate(
        {
            "currencyUnit": "CNY",
            "cpuPerCorePerHour": 1,
            "memPerGigabytesPerHour": 2,
            "ingressNetworkTrafficPerGiagabytesPerHour": 3,
            "egressNetworkTrafficPerMegabytesPerHour": 4,
            "pvcPerGigabytesPerHour": 5,
        }
    )
    assert price.currency_unit == "CNY"
    assert price.ingress_network_traffic_per_megabytes_per_hour == 3
    assert price.egress_network_traffic_per_megabytes_per_hour == 4
    assert price.pvc_per_gigabytes_per_hour == 5


def test_load_price_info(tmp_path):
    path = tmp_path / "metering.yaml"
    path.write_text(
        "retention_day: 7d\nbilling:\n  price_info:\n    currency_unit: USD\n    cpu_per_core_per_hour: 0.5\n",
        encoding="utf-8",
    )
    price = load_price_info(path)
    assert price.currency_unit == "USD"
    assert price.cpu_per_core_per_hour == 0.5
    assert price.mem_per_gigabytes_per_hour == 0.0


def test_load_price_info_without_billing(tmp_path):
    path = tmp_path / "metering.yaml"
    path.write_text("retentionDay: 7d\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_price_info(path)


def test_load_price_info_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_price_info(tmp_path / "absent.yaml")
