"""editorsync CLI for process management and one-off bridge calls.

Starts, stops and inspects the bridge daemon and the engine companion, and
sends bridge actions from the command line.
"""

import asyncio
import builtins
import contextlib
import subprocess
import sys
import time
from pathlib import Path

import click
import psutil

from editorsync_library.beacon import CompileStatusStore
from editorsync_library.client import BridgeClient
from editorsync_library.config import create_default_engine_config
from editorsync_library.config import get_engine_config_path
from editorsync_library.config import load_client_settings
from editorsync_library.engine.__main__ import main as run_engine
from editorsync_library.errors import EditorSyncError
from editorsync_library.storage.paths import get_log_dir

from .config.loader import get_config_path
from .config.loader import save_example_config

DAEMON_MODULE = "editorsyncd"
ENGINE_MODULE = "editorsync_library.engine"


def find_module_processes(module: str) -> list[psutil.Process]:
    """Find running 'python -m <module>' processes.

    Excludes the CLI itself and zombie processes.

    Args:
        module: Module name passed to -m

    Returns:
        List of matching Process objects
    """
    current_pid = psutil.Process().pid
    processes = []

    for proc in psutil.process_iter(["pid", "cmdline", "status"]):
        try:
            if proc.info["pid"] == current_pid:
                continue
            if proc.info["status"] in (psutil.STATUS_ZOMBIE, psutil.STATUS_DEAD):
                continue

            cmdline = proc.info["cmdline"]
            if not cmdline or len(cmdline) < 3:
                continue

            is_python = "python" in Path(cmdline[0]).name.lower()
            if is_python and "-m" in cmdline:
                module_index = cmdline.index("-m") + 1
                if module_index < len(cmdline) and cmdline[module_index] == module and proc.is_running():
                    processes.append(proc)

        except (psutil.NoSuchProcess, psutil.AccessDenied, ValueError, IndexError):
            continue

    return processes


def get_process_status(module: str) -> tuple[bool, int | None]:
    """Check if a module process is running.

    Returns:
        Tuple of (is_running, pid)
    """
    processes = find_module_processes(module)
    if processes:
        return True, processes[0].pid
    return False, None


def start_background(module: str, name: str, log_file: Path) -> None:
    """Launch 'python -m <module>' detached, appending output to a log file."""
    running, pid = get_process_status(module)
    if running:
        click.echo(f"{name} already running (PID {pid})")
        return

    click.echo(f"Starting {name}...")
    with builtins.open(str(log_file), "a") as log:
        subprocess.Popen(
            [sys.executable, "-m", module],
            stdout=log,
            stderr=log,
            start_new_session=True,
        )

    for _ in range(10):
        time.sleep(0.5)
        running, pid = get_process_status(module)
        if running:
            click.echo(f"{name} started (PID {pid}, logs: {log_file})")
            return
    click.echo(f"Warning: {name} may not have started successfully", err=True)


def stop_process(proc: psutil.Process, name: str, timeout: int = 5) -> bool:
    """Stop a process gracefully.

    Args:
        proc: Process to stop
        name: Process name for output
        timeout: Seconds to wait before force kill

    Returns:
        True if stopped successfully
    """
    try:
        click.echo(f"Stopping {name} (PID {proc.pid})...")
        proc.terminate()

        try:
            proc.wait(timeout=timeout)
            click.echo(f"{name} stopped successfully")
            return True
        except psutil.TimeoutExpired:
            click.echo(f"{name} did not stop gracefully, force killing...")
            proc.kill()
            proc.wait(timeout=2)
            click.echo(f"{name} force killed")
            return True

    except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
        click.echo(f"Failed to stop {name}: {e}", err=True)
        return False


@click.group()
def cli():
    """editorsync - keep the code editor in sync with agent file changes."""
    pass


@cli.command()
@click.option("--with-engine", is_flag=True, help="Also start the engine companion")
def start(with_engine: bool):
    """Start the bridge daemon in the background."""
    log_dir = get_log_dir()
    start_background(DAEMON_MODULE, "Daemon", log_dir / "daemon.log")
    if with_engine:
        start_background(ENGINE_MODULE, "Engine companion", log_dir / "engine.log")


@cli.command()
def stop():
    """Stop the bridge daemon and the engine companion."""
    stopped_any = False
    for module, name in ((DAEMON_MODULE, "daemon"), (ENGINE_MODULE, "engine companion")):
        for proc in find_module_processes(module):
            if stop_process(proc, name):
                stopped_any = True

    if not stopped_any:
        click.echo("No services running")


@cli.command()
@click.option("--with-engine", is_flag=True, help="Also restart the engine companion")
@click.pass_context
def restart(ctx, with_engine: bool):
    """Restart the bridge daemon."""
    click.echo("Restarting services...")
    ctx.invoke(stop)
    time.sleep(1)
    ctx.invoke(start, with_engine=with_engine)


@cli.command()
def status():
    """Show running status of services and the engine compile state."""
    daemon_running, daemon_pid = get_process_status(DAEMON_MODULE)
    engine_running, engine_pid = get_process_status(ENGINE_MODULE)

    click.echo("editorsync Status:")
    click.echo("-" * 40)
    click.echo(f"Daemon:  ✓ Running (PID {daemon_pid})" if daemon_running else "Daemon:  ✗ Not running")
    click.echo(f"Engine:  ✓ Running (PID {engine_pid})" if engine_running else "Engine:  ✗ Not running")

    store = CompileStatusStore()
    click.echo(f"Compile: {'compiling' if store.is_compiling() else 'idle'} ({store.path})")


@cli.command()
@click.option("--engine", is_flag=True, help="Show engine companion logs instead of daemon logs")
@click.option("-f", "--follow", is_flag=True, help="Follow log output (like tail -f)")
@click.option("-n", "--lines", default=50, help="Number of lines to show")
def logs(engine: bool, follow: bool, lines: int):
    """View daemon or engine companion logs."""
    log_file = get_log_dir() / ("engine.log" if engine else "daemon.log")
    if not log_file.exists():
        click.echo(f"No logs found at {log_file}")
        return

    if follow:
        with contextlib.suppress(KeyboardInterrupt):
            subprocess.run(["tail", "-f", str(log_file)])
    else:
        with builtins.open(log_file) as f:
            for line in f.readlines()[-lines:]:
                click.echo(line.rstrip())


@cli.command()
def engine():
    """Run the engine companion in the foreground."""
    run_engine()


@cli.command("init-config")
@click.option("--force", is_flag=True, help="Overwrite existing configuration files")
def init_config(force: bool):
    """Write example daemon.yaml and engine.yaml files."""
    daemon_path = get_config_path()
    if daemon_path.exists() and not force:
        click.echo(f"Daemon config already exists: {daemon_path}")
    else:
        save_example_config(daemon_path)
        click.echo(f"Wrote {daemon_path}")

    engine_path = get_engine_config_path()
    if engine_path.exists() and not force:
        click.echo(f"Engine config already exists: {engine_path}")
    else:
        engine_path.unlink(missing_ok=True)
        create_default_engine_config()
        click.echo(f"Wrote {engine_path}")


def _bridge_client(port: int | None) -> BridgeClient:
    settings = load_client_settings(bridge_port=port)
    return BridgeClient(settings.bridge_url, timeout=settings.bridge_timeout)


@cli.command()
@click.argument("files", nargs=-1)
@click.option("--add", "is_add", is_flag=True, help="Files were newly created (restarts the analyzer)")
@click.option("--port", type=int, default=None, help="Bridge daemon port")
def refresh(files: tuple[str, ...], is_add: bool, port: int | None):
    """Refresh FILES (default: every open file) and print diagnostics."""
    from editorsync_mcp.formatting import format_refresh

    targets = [str(Path(f).resolve()) for f in files] or None
    try:
        response = asyncio.run(_bridge_client(port).refresh_project(targets, is_add))
    except EditorSyncError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(format_refresh(response, targets))
    if not response.success:
        sys.exit(1)


@cli.command()
@click.argument("file_path")
@click.argument("line", type=click.IntRange(min=1))
@click.argument("character", type=click.IntRange(min=0))
@click.option("--port", type=int, default=None, help="Bridge daemon port")
def goto(file_path: str, line: int, character: int, port: int | None):
    """Find the definition of the symbol at FILE_PATH:LINE:CHARACTER."""
    from editorsync_mcp.formatting import format_definitions

    try:
        response = asyncio.run(
            _bridge_client(port).goto_symbol_definition(str(Path(file_path).resolve()), line, character)
        )
    except EditorSyncError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(format_definitions(response))
    if not response.success:
        sys.exit(1)


def main():
    """Entry point for the editorsync command."""
    cli()


if __name__ == "__main__":
    main()
