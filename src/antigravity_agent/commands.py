"""
Commands offered to the UI and the CLI

Each command returns a plain JSON-compatible value or raises CommandError
with a human-readable message. Blocking filesystem and process-table work
runs in a worker thread so the event loop is never stalled.
"""

import asyncio
import functools
import os

from .config import Settings
from .errors import AgentError
from .installation import InstallationResolver
from .platform_profile import PlatformProfile, detect


class CommandError(Exception):
    """Error message destined for the user"""


def command(func):
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except AgentError as e:
            raise CommandError(str(e)) from e

    return wrapper


class Commands:
    def __init__(
        self,
        resolver: InstallationResolver | None = None,
        profile: PlatformProfile | None = None,
        settings: Settings | None = None,
    ):
        self.resolver = resolver or InstallationResolver.create()
        self.profile = profile or detect()
        self._settings = settings

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = Settings()
        return self._settings

    @command
    async def get_platform_info(self) -> dict:
        available = await asyncio.to_thread(self.resolver.is_available)
        db_paths = await asyncio.to_thread(self.resolver.find_all_database_paths)
        info = self.profile.as_dict()
        info["target_available"] = available
        info["target_db_paths"] = [str(p) for p in db_paths]
        info.update(self.resolver.paths.dirs.as_dict())
        return info

    @command
    async def find_installations(self) -> list[str]:
        return [str(p) for p in self.resolver.find_installations()]

    @command
    async def validate_path(self, path: str) -> bool:
        return await asyncio.to_thread(self.resolver.validate_installation_path, path)

    @command
    async def resolve_executable_path(self) -> str | None:
        resolved = await asyncio.to_thread(self.resolver.resolve_executable_path)
        return None if resolved is None else str(resolved)

    @command
    async def persist_executable_path(self, path: str | os.PathLike) -> None:
        await asyncio.to_thread(self.resolver.persist_executable_path, path)

    @command
    async def is_process_running(self) -> bool:
        return await asyncio.to_thread(self.resolver.is_running)

    @command
    async def terminate_target(self) -> str:
        return await self.resolver.processes.terminate_by_names()

    @command
    async def is_tray_enabled(self) -> bool:
        return self.settings.tray_enabled

    @command
    async def set_tray_enabled(self, enabled: bool) -> bool:
        """Save whether closing the window hides it to the tray"""
        await asyncio.to_thread(self.settings.set, "tray.enabled", bool(enabled))
        return self.settings.tray_enabled
