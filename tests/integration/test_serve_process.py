"""Exit codes of a real server process stopped by a signal."""

import os
import signal
import subprocess
import sys
import textwrap
from pathlib import Path
from typing import List

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="needs POSIX signals")

# Server whose only dependent resource never finishes closing
HANGING_TEARDOWN_SERVER = textwrap.dedent("""
    import asyncio
    import threading

    from drainstop.modules.config import ServerConfig
    from drainstop.modules.lifecycle import ShutdownController
    from drainstop.modules.logging import create_logger
    from drainstop.modules.server.runner import serve

    logger = create_logger("plain", "INFO")
    controller = ShutdownController(logger, shutdown_timeout=0.5)
    controller.resources.register("queue", lambda: threading.Event().wait())
    config = ServerConfig(host="127.0.0.1", port=0, shutdown_timeout=0.5)
    asyncio.run(serve(config, logger, controller))
""")


def start_server(args: List[str]) -> subprocess.Popen:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT), env.get("PYTHONPATH")]))
    env["PYTHONUNBUFFERED"] = "1"
    process = subprocess.Popen(
        [sys.executable] + args,
        cwd=PROJECT_ROOT,
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
    )
    for line in process.stdout:
        if "Serving on" in line:
            return process
    process.wait(timeout=10)
    pytest.fail(f"server exited with {process.returncode} before serving")


def stop_server(process: subprocess.Popen, sig: signal.Signals) -> str:
    process.send_signal(sig)
    try:
        output, _ = process.communicate(timeout=10)
    except subprocess.TimeoutExpired:
        process.kill()
        process.communicate()
        pytest.fail("server did not exit after signal")
    return output


def test_sigint_exits_zero():
    process = start_server([
        "-m", "drainstop.main", "--output", "plain",
        "serve", "--host", "127.0.0.1", "--port", "0", "--shutdown-timeout", "5",
    ])

    output = stop_server(process, signal.SIGINT)

    assert process.returncode == 0
    assert "SIGINT received. Starting graceful shutdown..." in output
    assert "Graceful shutdown complete" in output


def test_hanging_teardown_exits_one():
    process = start_server(["-c", HANGING_TEARDOWN_SERVER])

    output = stop_server(process, signal.SIGTERM)

    assert process.returncode == 1
    assert "SIGTERM received. Starting graceful shutdown..." in output
    assert "Forced shutdown after 0.5 seconds timeout" in output
