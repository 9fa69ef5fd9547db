"""Engine host capability interface and subprocess implementation.

The engine host is the game-engine side collaborator: it regenerates IDE
project files, re-imports assets, and runs script compilation, announcing
compilation start and finish through listener hooks the beacon attaches to.
"""

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

CompilationListener = Callable[[], None]


class EngineHost(Protocol):
    """Capabilities the engine companion needs from the engine editor."""

    def add_compilation_started_listener(self, listener: CompilationListener) -> None: ...

    def add_compilation_finished_listener(self, listener: CompilationListener) -> None: ...

    async def regenerate_project_files(self) -> None: ...

    async def refresh_assets(self) -> None: ...

    async def request_compilation(self) -> None: ...

    async def stop(self) -> None: ...


class EngineCommandFailed(RuntimeError):
    """An engine step command exited with a non-zero status."""


class SubprocessEngineHost:
    """Engine host that runs configured commands as subprocesses.

    Compilation runs in the background: request_compilation() returns once
    the compile has been started, and the finished hook fires when the
    compile command exits (whatever its exit status).
    """

    def __init__(
        self,
        project_dir: Path,
        generate_command: list[str] | None = None,
        refresh_command: list[str] | None = None,
        compile_command: list[str] | None = None,
    ) -> None:
        """Initialize subprocess engine host.

        Args:
            project_dir: Working directory for every command
            generate_command: argv regenerating IDE project files (optional)
            refresh_command: argv re-importing assets (optional)
            compile_command: argv compiling scripts (optional)
        """
        self.project_dir = Path(project_dir)
        self.generate_command = list(generate_command or [])
        self.refresh_command = list(refresh_command or [])
        self.compile_command = list(compile_command or [])

        self._started_listeners: list[CompilationListener] = []
        self._finished_listeners: list[CompilationListener] = []
        self._compile_task: asyncio.Task[int] | None = None

    @property
    def is_compiling(self) -> bool:
        return self._compile_task is not None and not self._compile_task.done()

    def add_compilation_started_listener(self, listener: CompilationListener) -> None:
        self._started_listeners.append(listener)

    def add_compilation_finished_listener(self, listener: CompilationListener) -> None:
        self._finished_listeners.append(listener)

    async def regenerate_project_files(self) -> None:
        returncode = await self._run(self.generate_command, "project file generation")
        if returncode != 0:
            raise EngineCommandFailed(f"Project file generation failed (exit {returncode})")

    async def refresh_assets(self) -> None:
        returncode = await self._run(self.refresh_command, "asset refresh")
        if returncode != 0:
            raise EngineCommandFailed(f"Asset refresh failed (exit {returncode})")

    async def request_compilation(self) -> None:
        if self.is_compiling:
            logger.info("Compilation already in progress, not starting another")
            return
        self._compile_task = asyncio.create_task(self._compile())

    async def wait_for_compilation(self) -> int | None:
        """Wait for the in-flight compile, if any.

        Returns:
            The compile command's exit status, or None if nothing was compiling
        """
        if self._compile_task is None:
            return None
        return await self._compile_task

    async def stop(self) -> None:
        """Cancel an in-flight compile."""
        task = self._compile_task
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.info("Cancelled in-flight compilation")

    async def _compile(self) -> int:
        self._notify(self._started_listeners)
        try:
            returncode = await self._run(self.compile_command, "compilation")
            if returncode != 0:
                logger.warning(f"Compilation exited with {returncode}")
            return returncode
        finally:
            self._notify(self._finished_listeners)

    def _notify(self, listeners: list[CompilationListener]) -> None:
        for listener in list(listeners):
            try:
                listener()
            except Exception as e:
                logger.error(f"Compilation listener failed: {e}")

    async def _run(self, command: list[str], label: str) -> int:
        if not command:
            logger.debug(f"No command configured for {label}, skipping")
            return 0

        logger.info(f"Running {label}: {' '.join(command)}")
        process = await asyncio.create_subprocess_exec(
            *command,
            cwd=str(self.project_dir),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
        output, _ = await process.communicate()
        returncode = process.returncode if process.returncode is not None else -1
        if returncode != 0:
            tail = output.decode("utf-8", errors="replace").strip().splitlines()[-10:]
            logger.warning(f"{label} exited with {returncode}: " + " | ".join(tail))
        return returncode
