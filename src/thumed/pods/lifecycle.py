# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/pods/lifecycle.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .inventory import PodInventory, PodNotFoundError, release_name
from ..config.credentials import UserInfo
from ..config.models import Settings, WorkloadConfig
from ..helm.cli_runner import HelmCliRunner
from ..hosts.elevation import elevated_copy_for
from ..hosts.errors import HostsError
from ..hosts.hosts_file import HostsFile
from ..kube.kubectl import KubectlError, KubectlRunner
from ..manifest import renderer
from ..utils.process import SpawnError

log = logging.getLogger("thumed")


@dataclass
class InstallReport:
    name: str
    manifest_path: Path
    hostname: str
    website: str
    hosts_registered: bool = False
    warning: Optional[str] = None


class PodLifecycle:
    """
    install / login / uninstall flows for single-user pods.

    Helm and kubectl failures abort the flow. The hosts-file step after a
    successful install only warns: the release already exists on the cluster.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        helm: HelmCliRunner,
        kubectl: KubectlRunner,
        hosts_loader: Optional[Callable[[], HostsFile]] = None,
        dry_run: bool = False,
    ):
        self.settings = settings
        self.helm = helm
        self.kubectl = kubectl
        self.hosts_loader = hosts_loader or self._load_hosts
        self.dry_run = dry_run
        self.inventory = PodInventory(kubectl, settings.website_domain)

    def _load_hosts(self) -> HostsFile:
        # elevation goes through the same runner as helm/kubectl
        elevator = elevated_copy_for(runner=self.helm.runner)
        return HostsFile.load(self.settings.hosts_path, elevator=elevator)

    # ------------------------- listing -------------------------

    def list_pods(self) -> PodInventory:
        self.inventory.refresh()
        return self.inventory

    def _require_pod(self, pod_id: str) -> None:
        self.inventory.refresh()
        if not self.inventory.contains(pod_id):
            raise PodNotFoundError(pod_id)

    # ------------------------- install -------------------------

    def hostname_for(self, name: str) -> str:
        return f"{name}.{self.settings.website_domain}"

    def install(self, config: WorkloadConfig, credentials: UserInfo) -> InstallReport:
        manifest = renderer.render(config, credentials, self.settings)
        path = renderer.persist(manifest, self.settings.config_dir)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        log.info("Installing pod %s from %s", config.name, self.settings.chart)
        self.helm.install(config.name, self.settings.chart, path)
        log.info("Pod %s installed", config.name)

        hostname = self.hostname_for(config.name)
        report = InstallReport(
            name=config.name,
            manifest_path=path,
            hostname=hostname,
            website=f"http://{hostname}/",
        )

        line = f"{self.settings.server_ip} {hostname}"
        if self.dry_run:
            report.warning = f"[dry-run] hosts file not changed, would add: {line}"
            log.info(report.warning)
            return report

        try:
            hosts = self.hosts_loader()
            hosts.add_entry(self.settings.server_ip, [hostname], self.settings.hosts_comment)
        except (HostsError, OSError, SpawnError) as exc:
            report.warning = (
                f"Error adding hostname to hosts file: {exc}. "
                f"You may need to add this line manually:\n{line}"
            )
            log.warning(report.warning)
            return report

        report.hosts_registered = True
        log.info("Hostname %s added to hosts file", hostname)
        return report

    # ------------------------- login -------------------------

    def login(self, pod_id: str) -> int:
        self._require_pod(pod_id)
        log.info("Connecting to pod: %s...", pod_id)
        argv_tail = ["sh", self.settings.entry_script]
        rc = self.kubectl.exec_interactive(pod_id, argv_tail)
        if rc != 0:
            raise KubectlError(
                [self.kubectl.binary, "exec", "-it", pod_id, "--"] + argv_tail, rc
            )
        return rc

    # ------------------------- uninstall -------------------------

    def uninstall(self, pod_id: str) -> str:
        self._require_pod(pod_id)
        release = release_name(pod_id)
        log.info("Uninstalling release %s (pod %s)", release, pod_id)
        self.helm.uninstall(release)
        log.info("Pod uninstalled successfully")
        self.inventory.refresh()
        return release
