# tests/manifest/test_renderer.py
from pathlib import Path

import yaml

from thumed.config.credentials import UserInfo
from thumed.config.models import Settings, WorkloadConfig
from thumed.manifest import renderer

CREDS = UserInfo("alice", "s3cret")


def test_bio01_defaults():
    m = renderer.render(WorkloadConfig(name="bio01"), CREDS, Settings())
    data = yaml.safe_load(m.to_yaml())

    assert data["containerName"] == "bio01"
    assert data["resources"]["limits"] == {"cpu": "32", "memory": "50"}
    assert data["replicaCount"] == 1
    assert data["image"] == {
        "repository": "base.med.thu/public/rstudio",
        "pullPolicy": "Always",
        "tag": "v1",
    }
    assert data["service"] == {"type": "ClusterIP", "port": 8787}
    assert data["imageCredentials"] == {
        "registry": "base.med.thu",
        "username": "alice",
        "password": "s3cret",
    }
    assert data["loadDataPath"] == {"public": ["input", "lessonPublic"], "personal": ["alice"]}
    assert data["type"] == "centos"
    assert data["nfs"] == "Aries"
    assert data["transfer"] is False


def test_key_order_matches_chart_values():
    m = renderer.render(WorkloadConfig(name="bio01", cpu=4, memory=8), CREDS, Settings())
    assert list(yaml.safe_load(m.to_yaml())) == [
        "replicaCount",
        "image",
        "containerName",
        "service",
        "resources",
        "imageCredentials",
        "loadDataPath",
        "type",
        "nfs",
        "transfer",
    ]


def test_rendering_is_deterministic(tmp_path: Path):
    cfg = WorkloadConfig(name="bio01", cpu=4)
    a = renderer.render(cfg, CREDS, Settings())
    b = renderer.render(cfg, CREDS, Settings())
    assert a.to_yaml() == b.to_yaml()

    p1 = renderer.persist(a, tmp_path / "one")
    p2 = renderer.persist(b, tmp_path / "two")
    assert p1.read_bytes() == p2.read_bytes()


def test_persist_creates_dir_and_overwrites(tmp_path: Path):
    config_dir = tmp_path / "config"
    first = renderer.render(WorkloadConfig(name="bio01", cpu=4), CREDS, Settings())
    path = renderer.persist(first, config_dir)
    assert path == config_dir / "bio01.yaml"

    second = renderer.render(WorkloadConfig(name="bio01", cpu=16), CREDS, Settings())
    renderer.persist(second, config_dir)

    assert yaml.safe_load(path.read_text())["resources"]["limits"]["cpu"] == "16"
    assert [p.name for p in config_dir.iterdir()] == ["bio01.yaml"]
