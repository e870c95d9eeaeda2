from typing import Any, Callable, Dict, Iterable, NamedTuple

from . import fsa_simulation, fsm_simulation, pda_simulation, tm_simulation
from .configuration import RunResult
from .graph import Automaton, MachineKind


class Engine(NamedTuple):
    """The simulation operations of one machine class."""
    reset: Callable[[Automaton, str], Any]
    step: Callable[[Automaton, Any], Any]
    run: Callable[[Automaton, str], RunResult]
    configuration_from_dict: Callable[[Dict], Any]


DFA_ENGINE = Engine(
    fsa_simulation.dfa_reset,
    fsa_simulation.dfa_step,
    fsa_simulation.dfa_run,
    fsa_simulation.dfa_configuration_from_dict,
)

NFA_ENGINE = Engine(
    fsa_simulation.nfa_reset,
    fsa_simulation.nfa_step,
    fsa_simulation.nfa_run,
    fsa_simulation.nfa_configuration_from_dict,
)

PDA_ENGINE = Engine(
    pda_simulation.pda_reset,
    pda_simulation.pda_step,
    pda_simulation.pda_run,
    pda_simulation.pda_configuration_from_dict,
)

FSM_ENGINE = Engine(
    fsm_simulation.fsm_reset,
    fsm_simulation.fsm_step,
    fsm_simulation.fsm_run,
    fsm_simulation.fsm_configuration_from_dict,
)

TM_ENGINE = Engine(
    tm_simulation.tm_reset,
    tm_simulation.tm_step,
    tm_simulation.tm_run,
    tm_simulation.tm_configuration_from_dict,
)

ENGINES: Dict[MachineKind, Engine] = {
    MachineKind.DFA: DFA_ENGINE,
    MachineKind.NFA: NFA_ENGINE,
    MachineKind.PDA: PDA_ENGINE,
    MachineKind.MOORE: FSM_ENGINE,
    MachineKind.MEALY: FSM_ENGINE,
    MachineKind.TM: TM_ENGINE,
}


def get_engine(kind: MachineKind) -> Engine:
    kind = MachineKind.from_name(kind)
    return ENGINES[kind]


def reset(automaton: Automaton, input_string: str = ''):
    return get_engine(automaton.kind).reset(automaton, input_string)


def step(automaton: Automaton, configuration):
    return get_engine(automaton.kind).step(automaton, configuration)


def run(automaton: Automaton, input_string: str) -> RunResult:
    return get_engine(automaton.kind).run(automaton, input_string)


def accepts(automaton: Automaton, input_string: str) -> bool:
    """Verdict only. PDAs use the breadth-first search directly instead of a stepwise fold."""
    if automaton.kind == MachineKind.PDA:
        return pda_simulation.simulate(automaton, input_string).accepted
    return run(automaton, input_string).accepted


def batch_test(automaton: Automaton, accept_strings: Iterable[str], reject_strings: Iterable[str]):
    # Imported here because batch depends on this module
    from .batch import batch_test as run_batch
    return run_batch(automaton, accept_strings, reject_strings)
