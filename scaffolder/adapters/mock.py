"""
Scripted runner — test double for the CommandRunner contract.

Returns configured outcomes without touching the process table.
By default every command succeeds. Rules match a call either by a
substring of the joined command line or by a predicate.

A FakeClock can be attached so that each call "consumes" time,
which is how time-budget behaviour is exercised deterministically.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence, Union

from scaffolder.adapters.base import CommandOutcome, CommandRunner, LaunchError


@dataclass
class RunnerCall:
    """One recorded invocation."""

    command: str
    args: list[str]
    cwd: Path
    timeout: float

    @property
    def command_line(self) -> str:
        return " ".join([self.command, *self.args])


Matcher = Union[str, Callable[[RunnerCall], bool]]


@dataclass
class _Rule:
    match: Matcher
    outcome: CommandOutcome | None = None
    launch_error: str | None = None
    cost: float | None = None
    side_effect: Callable[[RunnerCall], None] | None = None
    remaining: int | None = None

    def matches(self, call: RunnerCall) -> bool:
        if self.remaining is not None and self.remaining <= 0:
            return False
        if callable(self.match):
            return bool(self.match(call))
        return self.match in call.command_line


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedRunner(CommandRunner):
    """CommandRunner that replays scripted outcomes.

    Args:
        clock: Optional FakeClock advanced by each call's cost.
        default_cost: Seconds consumed by calls with no cost rule.
    """

    def __init__(self, clock: FakeClock | None = None, default_cost: float = 0.0):
        self.clock = clock
        self.default_cost = default_cost
        self._rules: list[_Rule] = []
        self._effects: list[_Rule] = []
        self._call_log: list[RunnerCall] = []

    @property
    def call_log(self) -> list[RunnerCall]:
        """All calls this runner has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def calls_matching(self, match: Matcher) -> list[RunnerCall]:
        rule = _Rule(match=match)
        return [c for c in self._call_log if rule.matches(c)]

    # ── Scripting ───────────────────────────────────────────────

    def set_outcome(
        self,
        match: Matcher,
        outcome: CommandOutcome,
        *,
        cost: float | None = None,
        times: int | None = None,
    ) -> None:
        """Return ``outcome`` for matching calls (optionally only ``times`` times)."""
        self._rules.append(_Rule(match=match, outcome=outcome, cost=cost, remaining=times))

    def set_failure(
        self,
        match: Matcher,
        exit_code: int = 1,
        *,
        cost: float | None = None,
        times: int | None = None,
    ) -> None:
        """Make matching calls exit with ``exit_code``."""
        self.set_outcome(match, CommandOutcome(exit_code=exit_code), cost=cost, times=times)

    def set_timeout(self, match: Matcher) -> None:
        """Make matching calls time out (consuming their whole allowance)."""
        self._rules.append(_Rule(match=match, cost=float("inf")))

    def set_launch_error(self, match: Matcher, reason: str = "No such file or directory") -> None:
        """Make matching calls fail to spawn."""
        self._rules.append(_Rule(match=match, launch_error=reason))

    def set_cost(self, match: Matcher, seconds: float) -> None:
        """Matching calls advance the attached clock by ``seconds``."""
        self._rules.append(_Rule(match=match, cost=seconds))

    def on_call(self, match: Matcher, side_effect: Callable[[RunnerCall], None]) -> None:
        """Run ``side_effect`` before answering matching calls."""
        self._effects.append(_Rule(match=match, side_effect=side_effect))

    def reset(self) -> None:
        """Clear call log and all scripted rules."""
        self._rules.clear()
        self._effects.clear()
        self._call_log.clear()

    # ── CommandRunner ───────────────────────────────────────────

    def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: Path,
        timeout: float,
    ) -> CommandOutcome:
        call = RunnerCall(command=command, args=list(args), cwd=Path(cwd), timeout=timeout)
        self._call_log.append(call)

        for effect in self._effects:
            if effect.matches(call) and effect.side_effect is not None:
                effect.side_effect(call)

        outcome = CommandOutcome(exit_code=0)
        cost = self.default_cost
        for rule in self._rules:
            if not rule.matches(call):
                continue
            if rule.remaining is not None:
                rule.remaining -= 1
            if rule.launch_error is not None:
                raise LaunchError(command, rule.launch_error)
            if rule.outcome is not None:
                outcome = rule.outcome
            if rule.cost is not None:
                cost = rule.cost
            break

        if cost > timeout:
            if self.clock is not None:
                self.clock.advance(timeout)
            return CommandOutcome(
                exit_code=None,
                signal="SIGTERM",
                timed_out=True,
                duration_ms=int(timeout * 1000),
            )
        if self.clock is not None:
            self.clock.advance(cost)
        return outcome
