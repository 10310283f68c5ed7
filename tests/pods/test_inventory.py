# tests/pods/test_inventory.py
import pytest

from thumed.kube.kubectl import KubectlError
from thumed.pods.inventory import PodInventory, parse_pod_table, release_name

TABLE = """\
NAME            READY   STATUS    RESTARTS   AGE
a-1             1/1     Running   0          3d
b-2             1/1     Running   0          1h
"""


class FakeKubectl:
    def __init__(self, tables):
        self.tables = list(tables)
        self.calls = 0

    def get_pods_table(self):
        self.calls += 1
        t = self.tables.pop(0)
        if isinstance(t, Exception):
            raise t
        return t


def test_parse_drops_header():
    assert parse_pod_table(TABLE) == ["a-1", "b-2"]
    assert parse_pod_table("") == []
    assert parse_pod_table("NAME READY\n\n") == []


def test_release_name():
    assert release_name("bio01-7f8c-x2") == "bio01"
    assert release_name("bio01") == "bio01"


def test_refresh_maps_websites():
    inv = PodInventory(FakeKubectl([TABLE]), "apps.med.thu")
    inv.refresh()

    assert inv.items() == [("a-1", "http://a.apps.med.thu/"), ("b-2", "http://b.apps.med.thu/")]
    assert "a-1" in inv
    assert inv.contains("b-2")
    assert not inv.contains("c-3")
    assert len(inv) == 2


def test_pod_id_without_separator():
    inv = PodInventory(FakeKubectl(["NAME\nsolo\n"]), "apps.med.thu")
    inv.refresh()
    assert inv.items() == [("solo", "http://solo.apps.med.thu/")]


def test_refresh_replaces_previous_entries():
    inv = PodInventory(FakeKubectl([TABLE, "NAME\nb-2\n"]), "apps.med.thu")
    inv.refresh()
    inv.refresh()
    assert inv.pods() == ["b-2"]


def test_failed_refresh_keeps_previous_inventory():
    err = KubectlError(["kubectl", "get", "pods"], 1, "connection refused")
    inv = PodInventory(FakeKubectl([TABLE, err]), "apps.med.thu")
    inv.refresh()

    with pytest.raises(KubectlError):
        inv.refresh()
    assert list(inv) == ["a-1", "b-2"]
