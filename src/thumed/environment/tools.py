# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/environment/tools.py
from __future__ import annotations

import logging
import os
import platform as _platform
import shutil
import stat
import sys
import tarfile
from pathlib import Path
from typing import Optional, Tuple

import requests

log = logging.getLogger("thumed")

KUBECTL_URL = "https://dl.k8s.io/release/{version}/bin/{os}/{arch}/{exe}"
HELM_URL = "https://get.helm.sh/helm-{version}-{os}-{arch}.tar.gz"


class UnsupportedPlatformError(RuntimeError):
    pass


class ToolDownloadError(RuntimeError):
    pass


def exe_name(name: str, platform: Optional[str] = None) -> str:
    return f"{name}.exe" if (platform or sys.platform).startswith("win") else name


def tool_path(bin_dir: Path, name: str, platform: Optional[str] = None) -> Path:
    return Path(bin_dir) / exe_name(name, platform)


def os_and_arch(platform: Optional[str] = None, machine: Optional[str] = None) -> Tuple[str, str]:
    """
    Map the running interpreter to the (os, arch) pair used in
    kubectl and helm release URLs.
    """
    platform = platform or sys.platform
    machine = (machine or _platform.machine()).lower()

    if platform.startswith("win"):
        os_name = "windows"
    elif platform == "darwin":
        os_name = "darwin"
    elif platform.startswith("linux"):
        os_name = "linux"
    else:
        raise UnsupportedPlatformError(f"Unsupported operating system: {platform}")

    if machine in ("x86_64", "amd64"):
        arch = "amd64"
    elif machine in ("aarch64", "arm64"):
        arch = "arm64"
    else:
        raise UnsupportedPlatformError(f"Unsupported architecture: {machine}")

    return os_name, arch


def _download(url: str, dest: Path, timeout: int = 60) -> None:
    log.info("Downloading from: %s", url)
    try:
        with requests.get(url, stream=True, timeout=timeout) as r:
            r.raise_for_status()
            with open(dest, "wb") as f:
                for chunk in r.iter_content(chunk_size=1 << 16):
                    f.write(chunk)
    except requests.RequestException as exc:
        dest.unlink(missing_ok=True)
        raise ToolDownloadError(f"Failed to download file from {url}: {exc}") from exc
    log.info("Download complete: %s", dest)


def _make_executable(path: Path) -> None:
    if os.name != "nt":
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def download_kubectl(bin_dir: Path, version: str, platform: Optional[str] = None, machine: Optional[str] = None) -> Path:
    dest = tool_path(bin_dir, "kubectl", platform)
    if dest.exists():
        log.info("kubectl already exists, skipping download")
        return dest

    os_name, arch = os_and_arch(platform, machine)
    url = KUBECTL_URL.format(version=version, os=os_name, arch=arch, exe=exe_name("kubectl", platform))
    Path(bin_dir).mkdir(parents=True, exist_ok=True)
    _download(url, dest)
    _make_executable(dest)
    return dest


def download_helm(bin_dir: Path, version: str, platform: Optional[str] = None, machine: Optional[str] = None) -> Path:
    bin_dir = Path(bin_dir)
    dest = tool_path(bin_dir, "helm", platform)
    if dest.exists():
        log.info("helm already exists, skipping download")
        return dest

    os_name, arch = os_and_arch(platform, machine)
    url = HELM_URL.format(version=version, os=os_name, arch=arch)
    bin_dir.mkdir(parents=True, exist_ok=True)
    archive = bin_dir / f"helm-{version}-{os_name}-{arch}.tar.gz"
    _download(url, archive)

    # archive layout: <os>-<arch>/helm[.exe]
    member_name = f"{os_name}-{arch}/{exe_name('helm', platform)}"
    try:
        with tarfile.open(archive, "r:gz") as tar:
            try:
                member = tar.getmember(member_name)
            except KeyError as exc:
                raise ToolDownloadError(f"{member_name} missing from {archive.name}") from exc
            src = tar.extractfile(member)
            if src is None:
                raise ToolDownloadError(f"{member_name} in {archive.name} is not a file")
            with src, open(dest, "wb") as out:
                shutil.copyfileobj(src, out)
    finally:
        archive.unlink(missing_ok=True)

    _make_executable(dest)
    log.info("Extraction complete to: %s", dest)
    return dest
