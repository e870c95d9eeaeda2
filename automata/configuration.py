import logging
from typing import Any, Callable, List, NamedTuple, Optional

logger = logging.getLogger(__name__)


class RunResult(NamedTuple):
    """
    Outcome of running an engine to completion.

    history holds every configuration from reset up to and including
    final_config, so len(history) - 1 is the number of steps taken.
    """
    accepted: bool
    final_config: Any
    history: List[Any]


def run_until_halted(step: Callable, automaton, config, max_steps: Optional[int] = None) -> RunResult:
    """
    Fold step over a configuration until it halts.

    Args:
        step: The engine's step function, step(automaton, config) -> config
        automaton: The automaton being simulated
        config: The configuration to start from (usually from reset)
        max_steps: Optional safety bound; engines that always terminate pass None

    Returns:
        RunResult with the verdict, the halted configuration and the history
    """
    history = [config]
    steps = 0

    while not config.halted:
        if max_steps is not None and steps >= max_steps:
            break
        config = step(automaton, config)
        history.append(config)
        steps += 1

    logger.debug('%s run finished after %d steps (accepted=%s)',
                 automaton.kind.name, steps, config.accepted)

    return RunResult(config.accepted, config, history)
