# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/manifest/renderer.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, ConfigDict, Field

from ..config.credentials import UserInfo
from ..config.models import Settings, WorkloadConfig

log = logging.getLogger("thumed")


class _Camel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ImageSpec(_Camel):
    repository: str
    pull_policy: str = Field(alias="pullPolicy")
    tag: str


class ServiceSpec(_Camel):
    type: str = "ClusterIP"
    port: int


class ResourceLimits(_Camel):
    cpu: str
    memory: str


class Resources(_Camel):
    limits: ResourceLimits


class ImageCredentials(_Camel):
    registry: str
    username: str
    password: str


class DataPaths(_Camel):
    public: List[str]
    personal: List[str]


class RenderedManifest(_Camel):
    """Helm values for one pod of the med-helm chart."""

    replica_count: int = Field(default=1, alias="replicaCount")
    image: ImageSpec
    container_name: str = Field(alias="containerName")
    service: ServiceSpec
    resources: Resources
    image_credentials: ImageCredentials = Field(alias="imageCredentials")
    load_data_path: DataPaths = Field(alias="loadDataPath")
    type: str
    nfs: str
    transfer: bool

    def to_values(self) -> dict:
        return self.model_dump(by_alias=True)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_values(), sort_keys=False, default_flow_style=False)


def render(config: WorkloadConfig, credentials: UserInfo, settings: Settings) -> RenderedManifest:
    return RenderedManifest(
        replicaCount=1,
        image=ImageSpec(
            repository=settings.image_repository,
            pullPolicy=settings.image_pull_policy,
            tag=settings.image_tag,
        ),
        containerName=config.name,
        service=ServiceSpec(port=settings.service_port),
        resources=Resources(
            limits=ResourceLimits(
                cpu=str(config.resolved_cpu(settings)),
                memory=str(config.resolved_memory(settings)),
            )
        ),
        imageCredentials=ImageCredentials(
            registry=settings.registry,
            username=credentials.user,
            password=credentials.password,
        ),
        loadDataPath=DataPaths(
            public=list(settings.public_data_paths),
            personal=[credentials.user],
        ),
        type=settings.deploy_type,
        nfs=settings.nfs,
        transfer=settings.transfer,
    )


def manifest_path(config_dir: Path, name: str) -> Path:
    return Path(config_dir) / f"{name}.yaml"


def persist(manifest: RenderedManifest, config_dir: Path) -> Path:
    """
    Write <config_dir>/<containerName>.yaml, replacing any previous render.
    """
    config_dir = Path(config_dir)
    config_dir.mkdir(parents=True, exist_ok=True)
    path = manifest_path(config_dir, manifest.container_name)
    path.write_text(manifest.to_yaml(), encoding="utf-8")
    log.info("Configuration saved to %s", path)
    return path
