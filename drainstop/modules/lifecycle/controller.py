"""Shutdown controller bringing a serving process to a bounded-time halt."""

import asyncio
from asyncio import AbstractEventLoop, Task
import os
import signal
import sys
import threading
import traceback
from enum import IntEnum
from typing import Any, Callable, Dict, Optional, Set, Union
import types

from ..logging import BaseLogger
from .listener import Listener
from .resources import ResourceRegistry
from .state import LifecycleState, LifecycleStateCell

DEFAULT_SHUTDOWN_TIMEOUT = 30.0

TERMINATION_SIGNALS = (signal.SIGINT, signal.SIGTERM)

UNCAUGHT_EXCEPTION = "uncaught_exception"
UNHANDLED_REJECTION = "unhandled_rejection"

# Type for signal handlers
SignalHandlerType = Union[Callable[[int, Optional[types.FrameType]], Any], int, None]


class ExitCode(IntEnum):
    CLEAN = 0
    FAILURE = 1


def terminate_process(code: int) -> None:
    """Flush stdio and end the process immediately, abandoning pending work."""
    for stream in (sys.stdout, sys.stderr):
        if stream is not None and not stream.closed:
            stream.flush()
    os._exit(code)


class ShutdownController:
    """Moves a serving process from accepting, through draining, to terminated."""

    def __init__(
        self,
        logger: BaseLogger,
        shutdown_timeout: float = DEFAULT_SHUTDOWN_TIMEOUT,
        resources: Optional[ResourceRegistry] = None,
        exit_process: Optional[Callable[[int], None]] = None
    ):
        """
        Initialize the shutdown controller.

        Args:
            logger: Logger instance for lifecycle events
            shutdown_timeout: Hard ceiling in seconds for the whole drain
            resources: Registry of dependent resources to close after the listener
            exit_process: Called exactly once with the exit code; ends the
                process by default
        """
        self.logger = logger
        self.shutdown_timeout = shutdown_timeout
        self.resources = resources if resources is not None else ResourceRegistry(logger)
        self._exit_process = exit_process or terminate_process
        self._state = LifecycleStateCell()
        self._exit_code: Optional[ExitCode] = None
        self._terminated = asyncio.Event()
        self._listener: Optional[Listener] = None
        self._loop: Optional[AbstractEventLoop] = None
        self._tasks: Set[Task] = set()
        self._handlers_installed = False
        self._original_signal_handlers: Dict[signal.Signals, SignalHandlerType] = {}
        self._original_exception_handler: Optional[Callable] = None
        self._original_thread_excepthook: Optional[Callable] = None

    @property
    def state(self) -> LifecycleState:
        return self._state.current

    @property
    def is_shutting_down(self) -> bool:
        """Check if shutdown is in progress or finished."""
        return self._state.current is not LifecycleState.ACCEPTING

    @property
    def exit_code(self) -> Optional[ExitCode]:
        return self._exit_code

    async def wait_terminated(self) -> None:
        await self._terminated.wait()

    def register_shutdown_handlers(self, listener: Listener, loop: Optional[AbstractEventLoop] = None) -> None:
        """
        Route termination signals, uncaught exceptions and unhandled
        rejections to :meth:`graceful_shutdown`.

        Calling this again only swaps the listener; handlers are installed once.
        Registration never raises.

        Args:
            listener: Listener to drain on shutdown
            loop: Event loop to run the shutdown on; defaults to the running loop
        """
        self._listener = listener
        if self._handlers_installed:
            self.logger.log_debug("Shutdown handlers already registered")
            return

        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                self.logger.log_warning("No running event loop, shutdown handlers not registered")
                return
        self._loop = loop
        self._handlers_installed = True

        for sig in TERMINATION_SIGNALS:
            try:
                self._original_signal_handlers[sig] = signal.getsignal(sig)
                signal.signal(sig, self._handle_signal)
            except (ValueError, OSError) as e:
                self._original_signal_handlers.pop(sig, None)
                self.logger.log_warning(f"Could not install handler for {sig.name}: {str(e)}")

        self._original_exception_handler = loop.get_exception_handler()
        loop.set_exception_handler(self._handle_loop_exception)

        self._original_thread_excepthook = threading.excepthook
        threading.excepthook = self._handle_thread_exception

        self.logger.log_debug(
            f"Shutdown handlers registered (timeout {self.shutdown_timeout} seconds)"
        )

    def restore_handlers(self) -> None:
        """Put back the handlers that were in place before registration."""
        if not self._handlers_installed:
            return
        self._handlers_installed = False

        for sig, original in self._original_signal_handlers.items():
            try:
                signal.signal(sig, original if original is not None else signal.SIG_DFL)
            except (ValueError, OSError) as e:
                self.logger.log_warning(f"Could not restore handler for {sig.name}: {str(e)}")
        self._original_signal_handlers.clear()

        if self._loop is not None and not self._loop.is_closed():
            self._loop.set_exception_handler(self._original_exception_handler)

        if self._original_thread_excepthook is not None:
            threading.excepthook = self._original_thread_excepthook
            self._original_thread_excepthook = None

    def _handle_signal(self, sig_num: int, frame: Optional[types.FrameType]) -> None:
        """
        Handle termination signals. Runs between bytecodes of the main
        thread, so it only hands the work over to the event loop.
        """
        self.begin_shutdown(signal.Signals(sig_num).name)

    def _handle_loop_exception(self, loop: AbstractEventLoop, context: Dict[str, Any]) -> None:
        exception = context.get("exception")
        if exception is None:
            loop.default_exception_handler(context)
            return

        if "future" in context or "task" in context:
            reason = UNHANDLED_REJECTION
            self.logger.log_error(f"Unhandled rejection: {exception!r} ({context.get('message')})")
        elif "handle" in context:
            reason = UNCAUGHT_EXCEPTION
            self.logger.log_error(f"Uncaught exception: {exception!r} ({context.get('message')})")
        else:
            loop.default_exception_handler(context)
            return

        self.begin_shutdown(reason)

    def _handle_thread_exception(self, args: threading.ExceptHookArgs) -> None:
        # sys.exit() is how a thread ends itself
        if issubclass(args.exc_type, SystemExit):
            return
        thread_name = args.thread.name if args.thread is not None else "unknown"
        details = "".join(traceback.format_exception(args.exc_type, args.exc_value, args.exc_traceback))
        self.logger.log_error(
            f"Uncaught exception in thread {thread_name}: {args.exc_value!r}\n{details.rstrip()}"
        )
        self.begin_shutdown(UNCAUGHT_EXCEPTION)

    def begin_shutdown(self, reason: str) -> None:
        """
        Schedule :meth:`graceful_shutdown` on the controller's loop.
        Safe to call from signal handlers and other threads.
        """
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self._start_shutdown_task, reason)

    def _start_shutdown_task(self, reason: str) -> None:
        if self.is_shutting_down:
            self.logger.log_debug(f"Shutdown already in progress, ignoring {reason}")
            return
        task = asyncio.ensure_future(self.graceful_shutdown(self._listener, reason))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def graceful_shutdown(self, listener: Optional[Listener], reason: str) -> None:
        """
        Drain the listener and dependent resources, then exit.

        Exit code 0 when everything closed within the timeout, 1 when the
        timeout elapsed or anything failed to close. Only the first call does
        anything; later calls return immediately.

        Args:
            listener: Listener to drain
            reason: Human-readable trigger, only used for logging
        """
        if not self._state.begin_draining():
            self.logger.log_debug(f"Shutdown already in progress, ignoring {reason}")
            return

        self.logger.log_lifecycle(
            LifecycleState.DRAINING.value,
            f"{reason} received. Starting graceful shutdown..."
        )

        drain_task = asyncio.ensure_future(self._drain(listener))
        done, _ = await asyncio.wait({drain_task}, timeout=self.shutdown_timeout)

        if not done:
            self.logger.log_warning(
                f"Forced shutdown after {self.shutdown_timeout} seconds timeout"
            )
            drain_task.cancel()
            self._terminate(ExitCode.FAILURE)
            return

        if drain_task.cancelled():
            self.logger.log_error("Error during shutdown: drain was cancelled")
            self._terminate(ExitCode.FAILURE)
            return

        error = drain_task.exception()
        if error is not None:
            self.logger.log_error(f"Error during shutdown: {str(error)}")
            self._terminate(ExitCode.FAILURE)
            return

        self.logger.log_lifecycle(LifecycleState.TERMINATED.value, "Graceful shutdown complete")
        self._terminate(ExitCode.CLEAN)

    async def _drain(self, listener: Optional[Listener]) -> None:
        if listener is not None:
            await listener.close()
            self.logger.log_lifecycle(
                LifecycleState.DRAINING.value,
                f"{getattr(listener, 'name', 'listener')} closed"
            )

        await self.resources.close_all()
        self.logger.log_lifecycle(LifecycleState.DRAINING.value, "Dependent resources closed")

    def _terminate(self, code: ExitCode) -> None:
        if not self._state.terminate():
            return
        self._exit_code = code
        self.restore_handlers()
        self._terminated.set()
        self.logger.log_debug(f"Exiting with status {int(code)}")
        self._exit_process(int(code))
