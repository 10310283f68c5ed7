# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/config/models.py

import os
import re
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..logging.log import default_log_dir

_POD_NAME = re.compile(r"[a-z0-9]+")


def default_workspace() -> Path:
    return Path(os.environ.get("THUMED_WORKSPACE") or Path.cwd())


class Settings(BaseModel):
    """Site constants for the shared cluster; every field can be overridden from settings.yaml."""

    # Cluster endpoints
    server_ip: str = "166.111.153.65"
    website_domain: str = "apps.med.thu"

    # Helm repository and chart
    helm_repo_name: str = "med-helm"
    helm_repo_url: str = "http://166.111.153.65:7001"
    chart: str = "med-helm/alpha"

    # Pod image
    registry: str = "base.med.thu"
    image_repository: str = "base.med.thu/public/rstudio"
    image_tag: str = "v1"
    image_pull_policy: str = "Always"
    service_port: int = 8787

    # Data mounts and deployment metadata
    public_data_paths: List[str] = Field(default_factory=lambda: ["input", "lessonPublic"])
    deploy_type: str = "centos"
    nfs: str = "Aries"
    transfer: bool = False

    # In-pod login script
    entry_script: str = "/cmd.sh"

    # Resource defaults
    default_cpu_cores: int = 32
    default_memory_gb: int = 50

    # Tool bootstrap
    kubectl_version: str = "v1.28.4"
    helm_version: str = "v3.12.3"

    # Local layout
    workspace: Path = Field(default_factory=default_workspace)
    log_dir: Path = Field(default_factory=default_log_dir)
    hosts_comment: str = "Added by thumed_login"
    # None = the OS hosts file
    hosts_path: Optional[Path] = None

    @property
    def config_dir(self) -> Path:
        return self.workspace / "config"

    @property
    def bin_dir(self) -> Path:
        return self.workspace / "bin"


class WorkloadConfig(BaseModel):
    """
    A single user-requested pod. cpu/memory stay None until render time,
    where they fall back to Settings defaults.
    """

    name: str
    cpu: Optional[int] = Field(default=None, gt=0)
    memory: Optional[int] = Field(default=None, gt=0)

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        if not v.isascii() or not _POD_NAME.fullmatch(v):
            raise ValueError("pod name must contain only lowercase letters and numbers")
        return v

    def resolved_cpu(self, settings: Settings) -> int:
        return self.cpu if self.cpu is not None else settings.default_cpu_cores

    def resolved_memory(self, settings: Settings) -> int:
        return self.memory if self.memory is not None else settings.default_memory_gb
