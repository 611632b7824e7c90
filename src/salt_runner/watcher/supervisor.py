"""Watch supervisor: restart a command whenever its project changes.

States are Running (a child is alive) and a momentary Restarting window
between kill and respawn. Each change batch from the event source kills the
current child and spawns a fresh one with the same spec. Events are consumed
serially, so restarts never overlap.
"""

import logging
import subprocess
from pathlib import Path

from salt_runner.invocation import PopenFactory, ProcessSpec, spawn
from salt_runner.watcher.events import ChangeBatch, EventSource, WatchError

logger = logging.getLogger(__name__)


class WatchSupervisor:
    """Runs one command under a file-change event source.

    Attributes:
        spec: Command to run.
        cwd: Working directory of every child.
        source: Event source; ending its iteration ends supervision.
        restarts: Number of kill+respawn cycles performed.

    """

    def __init__(
        self,
        spec: ProcessSpec,
        cwd: Path,
        source: EventSource,
        popen: PopenFactory = subprocess.Popen,
    ) -> None:
        self.spec = spec
        self.cwd = cwd
        self.source = source
        self.restarts = 0
        self._popen = popen
        self._child: "subprocess.Popen[bytes] | None" = None

    @property
    def child(self) -> "subprocess.Popen[bytes] | None":
        return self._child

    def run(self) -> None:
        """Spawn the command and restart it on every change batch.

        Blocks until the event source is exhausted or :meth:`stop` is called.
        Any child still running at that point is killed.

        Raises:
            SpawnError: If the command cannot be (re)started.

        """
        self._child = spawn(self.spec, self.cwd, self._popen)
        try:
            for event in self.source:
                if isinstance(event, WatchError):
                    logger.warning("Watch error: %s", event.error)
                    continue
                if isinstance(event, ChangeBatch):
                    logger.info("Detected %d change(s), restarting %s", len(event), self.spec.program)
                    self._restart()
        finally:
            self._kill_child()

    def stop(self) -> None:
        """End supervision from another thread."""
        self.source.close()

    def _restart(self) -> None:
        self._kill_child()
        self._child = spawn(self.spec, self.cwd, self._popen)
        self.restarts += 1

    def _kill_child(self) -> None:
        child = self._child
        if child is None:
            return
        self._child = None
        logger.info("Killing PID %d", child.pid)
        try:
            child.kill()
        except ProcessLookupError:
            logger.debug("PID %d already exited", child.pid)
        child.wait()
