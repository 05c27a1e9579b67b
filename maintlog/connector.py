"""Target connector — resolves a target's identity and log directory on disk."""

import logging
import os
import re
import socket

from maintlog.config import TargetSpec
from maintlog.models import Identity

logger = logging.getLogger(__name__)

_DRIVE_PATH_RE = re.compile(r"^(?P<drive>[A-Za-z]):[\\/]*(?P<rest>.*)$")
_UNC_ROOT_RE = re.compile(r"^(\\\\[^\\]+\\[^\\]+)")

LOCAL_NAMES = {".", "localhost", "127.0.0.1", "::1", "(local)"}


class TargetUnreachableError(ConnectionError):
    """The target's log location cannot be reached."""


def is_local_computer(computer: str) -> bool:
    name = computer.strip().lower()
    if name in LOCAL_NAMES:
        return True
    hostname = socket.gethostname().lower()
    return name in (hostname, hostname.split(".")[0])


def join_admin_unc(computer: str, path: str) -> str:
    """Turn a local drive path on *computer* into its admin-share UNC path.

    'C:\\Logs' on SQL01 → '\\\\SQL01\\C$\\Logs'. UNC and non-drive paths
    are returned unchanged, as is any path on the local computer.
    """
    if not path or path.startswith("\\\\") or is_local_computer(computer):
        return path
    m = _DRIVE_PATH_RE.match(path)
    if not m:
        return path
    rest = m.group("rest").replace("/", "\\")
    unc = f"\\\\{computer}\\{m.group('drive').upper()}$"
    return f"{unc}\\{rest}" if rest else unc


def unc_root(path: str) -> str | None:
    """'\\\\SQL01\\C$\\Logs' → '\\\\SQL01\\C$'. None for non-UNC paths."""
    m = _UNC_ROOT_RE.match(path)
    return m.group(1) if m else None


class FileSystemConnector:
    """Builds an Identity for a target and checks its log share is reachable."""

    def connect(self, target: TargetSpec) -> Identity:
        directory = target.log_directory
        if directory and target.admin_share:
            directory = join_admin_unc(target.computer_name, directory)

        root = unc_root(directory) if directory else None
        if root and not os.path.isdir(root):
            raise TargetUnreachableError(
                f"Cannot reach {root} for {target.name}"
            )

        logger.debug("Resolved %s log directory: %s", target.name, directory or "<none>")
        return Identity(
            computer_name=target.computer_name,
            instance_name=target.instance_name,
            sql_instance_name=target.name,
            log_directory=directory,
        )
