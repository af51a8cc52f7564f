"""
Component installation — batch first, then one by one.

Strategy:
    1. One batched call with every component and the full budget.
    2. If that fails for any reason, install each component on its
       own, sequentially, under whatever budget is left.

The fallback loop never lets a single component take more than
``per_item_cap`` seconds, and stops attempting once the remaining
budget drops to ``reserve`` or below. Components not attempted are
reported as failed (and listed in ``budget_exhausted``).
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from scaffolder.adapters.base import CommandRunner, LaunchError, format_duration
from scaffolder.core.models.config import ScaffolderConfig
from scaffolder.core.services.commands import component_add_command

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Outcome of one install attempt over a component list."""

    installed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    budget_exhausted: list[str] = field(default_factory=list)
    used_batch: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict:
        return {
            "succeeded": self.succeeded,
            "installed": self.installed,
            "failed": self.failed,
            "budget_exhausted": self.budget_exhausted,
            "used_batch": self.used_batch,
        }


class ComponentInstaller:
    """Installs registry components into a project through a CommandRunner."""

    def __init__(
        self,
        runner: CommandRunner,
        project_path: Path,
        config: ScaffolderConfig,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._runner = runner
        self._project_path = project_path
        self._config = config
        self._clock = clock

    def install(self, components: Sequence[str], total_timeout: float) -> InstallResult:
        """Install ``components`` within ``total_timeout`` seconds overall."""
        result = InstallResult()
        items = list(components)
        if not items:
            return result

        logger.info("Installing %d component(s) from registry...", len(items))
        logger.info("  Components: %s", ", ".join(items))

        start = self._clock()

        # ── Batch attempt ────────────────────────────────────────
        if self._attempt(items, total_timeout, what="Batch install"):
            result.installed.extend(items)
            result.used_batch = True
            logger.info("All %d component(s) installed via batch.", len(items))
            return result

        logger.warning("Batch install failed. Falling back to individual installs...")

        # ── Individual fallback ──────────────────────────────────
        timeouts = self._config.timeouts
        for index, name in enumerate(items):
            remaining = total_timeout - (self._clock() - start)
            if remaining <= timeouts.budget_reserve:
                skipped = items[index:]
                logger.warning(
                    "Timeout budget exhausted (%s left). Skipping %d component(s): %s",
                    format_duration(max(remaining, 0)),
                    len(skipped),
                    ", ".join(skipped),
                )
                result.failed.extend(skipped)
                result.budget_exhausted.extend(skipped)
                break

            per_item_timeout = min(timeouts.per_component_cap, remaining)
            logger.info('  Installing "%s" individually...', name)
            if self._attempt([name], per_item_timeout, what=f'"{name}"'):
                result.installed.append(name)
                logger.info('  "%s" installed.', name)
            else:
                result.failed.append(name)

        return result

    def _attempt(self, names: list[str], timeout: float, what: str) -> bool:
        """Run one add command; True on a clean exit."""
        cmd = component_add_command(self._config, self._project_path, names)
        try:
            outcome = self._runner.run(cmd.command, cmd.args, cmd.cwd, timeout)
        except LaunchError as e:
            logger.warning("  %s error: %s", what, e)
            return False

        if outcome.ok:
            return True
        logger.warning("  %s: %s", what, outcome.describe(cmd.label, timeout))
        return False
