"""
Action orchestration.

Connects to the compositor, fetches the live layout and then saves it, lists
it, or restores the stored geometry for the current set of monitors.
"""

import logging
from enum import Enum
from typing import Callable, List, Optional

from .config import Config
from .exceptions import CommandFailedError, LayoutNotFoundError
from .ipc import SwayTransport
from .layout import Layout, merge, render_commands
from .repository import LayoutRepository


class Action(Enum):
    """All the possible actions."""
    AUTO = "auto"  # Restore the stored layout for the connected monitors
    SAVE = "save"  # Record the current layout for future detection
    LIST = "list"  # List outputs of the current layout


class Orchestrator:
    """
    Runs one action against the compositor.

    Usage:
        orchestrator = Orchestrator(config)
        output = orchestrator.run(Action.AUTO)
    """

    def __init__(
        self,
        config: Config,
        repository: Optional[LayoutRepository] = None,
        connect: Callable[[str], SwayTransport] = SwayTransport.connect,
    ) -> None:
        self.config = config
        self.repository = repository or LayoutRepository(config.layouts_dir)
        self._connect = connect
        self.logger = logging.getLogger(__name__)

    def run(self, action: Action) -> str:
        """
        Execute the requested action.

        Args:
            action: Action to run

        Returns:
            Text for stdout; empty unless the action is LIST

        Raises:
            AutoswayError: Any failure; nothing is retried and commands
                applied before a failure are not rolled back
        """
        with self._connect(self.config.socket_path) as transport:
            layout = self.fetch_layout(transport)

            if action is Action.SAVE:
                key = layout.fingerprint()
                if self.repository.exists(key):
                    self.logger.info(f"Replacing stored layout {key}")
                self.repository.save(key, layout.outputs)
                return ""
            if action is Action.LIST:
                return str(layout)

            self.apply(transport, self.resolve_layout(layout))
            return ""

    def fetch_layout(self, transport: SwayTransport) -> Layout:
        """Ask the compositor what the current layout is."""
        layout = Layout.from_json(transport.get_outputs())
        self.logger.info(
            f"Current layout: {[o.name for o in layout]} (fingerprint {layout.fingerprint()})"
        )
        return layout

    def resolve_layout(self, live: Layout) -> Layout:
        """
        Merge the stored layout for this set of monitors into the live one.

        Falls back to the live layout when nothing was stored yet.
        """
        key = live.fingerprint()
        try:
            stored = Layout(outputs=self.repository.load(key))
        except LayoutNotFoundError:
            self.logger.warning(f"No stored layout for {key}, applying current layout as is")
            return live

        self.logger.info(f"Restoring stored layout {key}")
        return merge(live, stored)

    def apply(self, transport: SwayTransport, layout: Layout) -> List[str]:
        """
        Translate the layout to commands and run them one by one.

        Returns:
            The commands that were applied

        Raises:
            CommandFailedError: On the first command the compositor rejects
        """
        commands = render_commands(layout)
        for command in commands:
            self.logger.info(f"Running: {command}")
            for result in transport.run_command(command):
                if not result.success:
                    raise CommandFailedError(command, result.error or "")
        self.logger.info(f"Applied {len(commands)} output command(s)")
        return commands
