"""
Run a list of marketplace calls one after another.
"""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

from .client import CallDriver
from .exceptions import ConfigurationError, ExecutionReverted, JaguarPlaceError
from .models import CallResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Step:
    """
    One call in a sequence.

    Attributes:
        operation: Contract function name
        args: Positional arguments
        value: Ether amount to attach, for payable functions
    """
    operation: str
    args: Sequence[Any] = field(default_factory=tuple)
    value: Any = None


@dataclass
class StepOutcome:
    """What happened to a step: a result, an error, or neither if it was skipped."""
    step: Step
    result: Optional[CallResult] = None
    error: Optional[JaguarPlaceError] = None

    @property
    def ok(self) -> bool:
        return self.result is not None

    @property
    def skipped(self) -> bool:
        return self.result is None and self.error is None

    @property
    def reason(self) -> Optional[str]:
        """Raw failure reason: the remote revert reason when there is one, else the error text"""
        if self.error is None:
            return None
        if isinstance(self.error, ExecutionReverted) and self.error.reason:
            return self.error.reason
        return str(self.error)


def example_sequence(new_owner: str, user: str) -> List[Step]:
    """
    The walkthrough sequence: every marketplace function once, in order.

    ``changeOwner`` runs last so the remaining owner-only calls are
    still sent by the current owner.
    """
    return [
        Step("changeFee", [10]),
        Step("markItemAsSold", [1]),
        Step("markItemAsUnsold", [2]),
        Step("blacklistUser", [user]),
        Step("whitelistUser", [user]),
        Step("createItem", [1, 1, 1, "URI", True, 0]),
        Step("buyWithEth", [1], value=1),
        Step("buyWithToken", [2, 100]),
        Step("changeOwner", [new_owner]),
    ]


def load_steps(path: Union[str, Path]) -> List[Step]:
    """
    Load steps from a JSON file.

    The file holds a list of objects with ``operation`` and optional
    ``args`` and ``value`` keys.

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Plan file not found: {path}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Plan file {path} is not valid JSON: {e}")

    if not isinstance(data, list):
        raise ConfigurationError(f"Plan file {path} must contain a list of steps")

    steps = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict) or "operation" not in entry:
            raise ConfigurationError(f"Step {index} must be an object with an 'operation' key")
        args = entry.get("args", [])
        if not isinstance(args, list):
            raise ConfigurationError(f"Step {index}: 'args' must be a list")
        steps.append(Step(entry["operation"], tuple(args), entry.get("value")))
    return steps


def run_sequence(
    driver: CallDriver,
    steps: Sequence[Step],
    stop_on_error: bool = False
) -> List[StepOutcome]:
    """
    Execute steps strictly in order, each awaited to finality before the next.

    A failing step is logged with its operation and reason. Later steps
    still run unless ``stop_on_error`` is set, in which case they are
    reported as skipped.

    Returns:
        One StepOutcome per step, in the same order
    """
    outcomes: List[StepOutcome] = []
    stopped = False

    for index, step in enumerate(steps):
        if stopped:
            outcomes.append(StepOutcome(step))
            continue

        logger.info(f"[{index + 1}/{len(steps)}] {step.operation}")
        try:
            result = driver.execute(step.operation, step.args, step.value)
        except JaguarPlaceError as e:
            outcome = StepOutcome(step, error=e)
            logger.error(f"{step.operation} failed ({type(e).__name__}): {outcome.reason}")
            outcomes.append(outcome)
            stopped = stop_on_error
            continue

        outcomes.append(StepOutcome(step, result=result))

    return outcomes
