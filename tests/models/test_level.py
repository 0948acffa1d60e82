# tests/models/test_level.py

import pytest

from kubemeter.models.level import Level


@pytest.mark.parametrize(
    "level, identifier",
    [
        (Level.NODE, "node"),
        (Level.NAMESPACE, "namespace"),
        (Level.PVC, "persistentvolumeclaim"),
        (Level.SERVICE, "service"),
        (Level.APPLICATION, "application"),
        (Level.OPENPITRIX, "application"),
        (Level.CLUSTER, None),
        (Level.COMPONENT, None),
    ],
)
def test_level_identifier(level, identifier):
    assert level.identifier == identifier


def test_level_from_value():
    assert Level("pvc") is Level.PVC
