"""
Locating an Antigravity installation and its executable
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .errors import AgentError
from .path_store import PersistedPathStore
from .paths import PathResolver, SystemDirectories, companion_config_dir
from .platforms import DATABASE_FILENAME, PlatformSupport, current_platform
from .processes import ProcessController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallCandidate:
    path: Path
    exists: bool


class InstallationResolver:
    """Combines path computation, the persisted path cache and the process table"""

    def __init__(
        self,
        paths: PathResolver,
        store: PersistedPathStore,
        processes: ProcessController,
        environ: Mapping[str, str] | None = None,
    ):
        self.paths = paths
        self.store = store
        self.processes = processes
        self.environ = environ

    @classmethod
    def create(
        cls,
        platform: PlatformSupport | None = None,
        dirs: SystemDirectories | None = None,
        config_dir: Path | None = None,
    ) -> "InstallationResolver":
        """Resolver wired to the running OS and the real filesystem"""
        platform = platform or current_platform()
        dirs = dirs or SystemDirectories.detect()
        config_dir = config_dir or companion_config_dir(dirs)
        return cls(
            PathResolver(platform, dirs),
            PersistedPathStore.for_platform(platform, config_dir),
            ProcessController(platform),
        )

    @property
    def platform(self) -> PlatformSupport:
        return self.paths.platform

    def resolve_executable_path(self) -> Path | None:
        """Best known Antigravity executable

        Order: persisted path, then well-known install locations, then the
        executable of a running process. A hit from the last two is cached
        for next time. Returns None straight away on OSes without a cache.
        """
        if not self.platform.caches_executable_path:
            return None

        persisted = self.store.load_valid_path()
        if persisted is not None:
            return persisted

        for candidate in self.platform.executable_candidates(self.paths.dirs, self.environ):
            if self.store.validate(candidate):
                self._remember(candidate)
                return candidate

        for match in self.processes.find_running():
            self._remember(match.executable_path)
            return match.executable_path

        return None

    def _remember(self, path: Path) -> None:
        try:
            self.store.persist(path)
        except AgentError as e:
            logger.warning("Could not cache executable path %s: %s", path, e)

    def persist_executable_path(self, path: str | os.PathLike) -> None:
        self.store.persist(path)

    def is_available(self) -> bool:
        """True if the Antigravity state database exists"""
        db_path = self.paths.database_path()
        return db_path is not None and db_path.exists()

    def install_candidates(self) -> list[InstallCandidate]:
        return [InstallCandidate(path=p, exists=p.is_dir()) for p in self.paths.search_directories()]

    def find_installations(self) -> list[Path]:
        return self.paths.search_directories()

    def find_all_database_paths(self) -> list[Path]:
        """Primary database path followed by any state.vscdb inside an install root"""
        db_paths = []
        primary = self.paths.database_path()
        if primary is not None:
            db_paths.append(primary)
        for path in self.paths.stray_databases():
            if path not in db_paths:
                db_paths.append(path)
        return db_paths

    @staticmethod
    def validate_installation_path(path: str | os.PathLike) -> bool:
        """True iff path directly contains a state.vscdb file"""
        return (Path(path) / DATABASE_FILENAME).is_file()

    def is_running(self) -> bool:
        return self.processes.is_running()
