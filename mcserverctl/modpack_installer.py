"""Installing mod loaders and modpacks into the server directory."""

from __future__ import annotations

import shutil
import subprocess
import urllib.error
import urllib.request
import zipfile
from pathlib import Path, PurePosixPath

from .app_state import AppState, EVENT_LOG
from .errors import ConfigError, ProcessError
from .models import LogEntry, ModpackConfig

LOG_SOURCE = "modpack_installer"


def _enclosed_name(name: str) -> PurePosixPath | None:
    """Return the member path if it stays inside the target directory, else None."""
    if "\0" in name:
        return None
    normalized = name.replace("\\", "/")
    if normalized.startswith("/"):
        return None
    parts: list[str] = []
    for part in normalized.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if not parts:
                return None
            parts.pop()
            continue
        if not parts and len(part) >= 2 and part[1] == ":":
            return None
        parts.append(part)
    if not parts:
        return None
    return PurePosixPath(*parts)


def extract_zip(zip_path, target_dir) -> None:
    """Extract a zip archive into ``target_dir``, skipping entries that would escape it."""
    target = Path(target_dir)
    try:
        archive = zipfile.ZipFile(zip_path)
    except zipfile.BadZipFile as exc:
        raise ProcessError(f"Invalid zip archive: {exc}") from exc
    with archive:
        for info in archive.infolist():
            relative = _enclosed_name(info.filename)
            if relative is None:
                continue
            out_path = target / relative
            if info.filename.endswith("/"):
                out_path.mkdir(parents=True, exist_ok=True)
                continue
            out_path.parent.mkdir(parents=True, exist_ok=True)
            with archive.open(info) as source, out_path.open("wb") as destination:
                shutil.copyfileobj(source, destination)


class ModpackInstaller:
    """Installs Forge or Fabric and an optional modpack archive for one server.

    ``forge_url_template`` (with a ``{version}`` field) and
    ``fabric_installer_url`` name the download locations of the loader
    installers and must be set before a loader can be installed.
    """

    forge_url_template: str | None = None
    fabric_installer_url: str | None = None

    def __init__(self, state: AppState) -> None:
        self.state = state

    @property
    def _server_dir(self) -> Path:
        return Path(self.state.server_directory)

    def install_modpack(self, config: ModpackConfig) -> None:
        """Install the loader named by ``config``, then its modpack archive if any."""
        self._log_info(f"Starting installation of modpack: {config.name}")

        if config.forge_version is not None:
            self._install_forge(config.forge_version)
        elif config.fabric_version is not None:
            self._install_fabric(config.fabric_version)

        if config.installer_url is not None:
            self._download_and_install_modpack(config.installer_url)

        self._log_info(f"Modpack {config.name} installed successfully")

    def _install_forge(self, forge_version: str) -> None:
        if self.forge_url_template is None:
            raise ConfigError("Forge installer location is not configured")
        installer_path = self._server_dir / f"forge-{forge_version}-installer.jar"

        self._log_info(f"Installing Forge version {forge_version}")
        self._download(self.forge_url_template.format(version=forge_version), installer_path)
        self._run_jar(installer_path, ["--installServer"], "Forge installation failed")

        self._log_info(
            "Forge installed successfully, server JAR should now point to "
            f"forge-{forge_version}-universal.jar"
        )
        installer_path.unlink()

    def _install_fabric(self, fabric_version: str) -> None:
        if self.fabric_installer_url is None:
            raise ConfigError("Fabric installer location is not configured")
        installer_path = self._server_dir / "fabric-installer.jar"

        self._log_info(f"Installing Fabric version {fabric_version}")
        self._download(self.fabric_installer_url, installer_path)
        self._run_jar(
            installer_path,
            ["server", "-mcversion", fabric_version],
            "Fabric installation failed",
        )

        self._log_info(
            "Fabric installed successfully, server JAR should now point to "
            "fabric-server-launch.jar"
        )
        installer_path.unlink()

    def _download_and_install_modpack(self, url: str) -> None:
        server_dir = self._server_dir
        filename = url.rsplit("/", 1)[-1] or "modpack.zip"
        download_path = server_dir / filename

        self._log_info(f"Downloading modpack from {url}")
        self._download(url, download_path)

        if filename.endswith(".zip"):
            extract_zip(download_path, server_dir)
        elif filename.endswith(".jar"):
            self._run_jar(download_path, [], "Modpack installation failed")

        download_path.unlink()
        self._log_info("Modpack files extracted successfully")

    def _run_jar(self, jar_path: Path, extra_args: list[str], failure: str) -> None:
        result = subprocess.run(
            [self.state.java_path, "-jar", str(jar_path), *extra_args],
            cwd=self._server_dir,
            capture_output=True,
        )
        if result.returncode != 0:
            error = result.stderr.decode("utf-8", errors="replace")
            message = f"{failure}: {error}"
            self._log_error(message)
            raise ProcessError(message)

    @staticmethod
    def _download(url: str, path: Path) -> None:
        try:
            with urllib.request.urlopen(url) as response:
                content = response.read()
        except urllib.error.HTTPError as exc:
            raise ProcessError(
                f"Failed to download, status code: {exc.code} {exc.reason}"
            ) from exc
        except (urllib.error.URLError, ValueError) as exc:
            raise ProcessError(f"Failed to download file: {exc}") from exc
        path.write_bytes(content)

    def _log_info(self, message: str) -> None:
        self.state.publish(EVENT_LOG, LogEntry.info(message, LOG_SOURCE))

    def _log_error(self, message: str) -> None:
        self.state.publish(EVENT_LOG, LogEntry.error(message, LOG_SOURCE))