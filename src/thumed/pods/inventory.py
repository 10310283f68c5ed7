# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/pods/inventory.py
from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Tuple

from ..kube.kubectl import KubectlRunner

log = logging.getLogger("thumed")


class PodNotFoundError(LookupError):
    def __init__(self, pod_id: str):
        self.pod_id = pod_id
        super().__init__(f"Pod {pod_id} not found in the list")


def release_name(pod_id: str) -> str:
    """'bio01-7f8c-x2' -> 'bio01'; ids without '-' map to themselves."""
    return pod_id.split("-", 1)[0]


def parse_pod_table(text: str) -> List[str]:
    """
    First column of `kubectl get pods` output, header dropped.
    """
    pods: List[str] = []
    for line in text.splitlines()[1:]:
        parts = line.split()
        if parts:
            pods.append(parts[0])
    return pods


class PodInventory:
    """
    Pods currently running for this kube context, keyed by pod id.
    Rebuilt from scratch on every refresh().
    """

    def __init__(self, kubectl: KubectlRunner, domain: str):
        self.kubectl = kubectl
        self.domain = domain
        self._pods: Dict[str, str] = {}

    def refresh(self) -> None:
        # errors propagate before the old inventory is replaced
        table = self.kubectl.get_pods_table()
        self._pods = {p: self.website_for(p) for p in parse_pod_table(table)}
        log.debug("Inventory refreshed: %s", list(self._pods))

    def website_for(self, pod_id: str) -> str:
        return f"http://{release_name(pod_id)}.{self.domain}/"

    def contains(self, pod_id: str) -> bool:
        return pod_id in self._pods

    def pods(self) -> List[str]:
        return list(self._pods)

    def items(self) -> List[Tuple[str, str]]:
        return list(self._pods.items())

    def __contains__(self, pod_id: object) -> bool:
        return pod_id in self._pods

    def __iter__(self) -> Iterator[str]:
        return iter(self._pods)

    def __len__(self) -> int:
        return len(self._pods)
