from dataclasses import dataclass, replace
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from .configuration import RunResult, run_until_halted
from .graph import Automaton
from .labels import EPSILON


@dataclass(frozen=True)
class DFAConfiguration:
    """
    Snapshot of a DFA run: the current state and the input cursor.

    path records every (current_state, symbol, next_state) move taken so far.
    """
    state: str
    position: int
    input_string: str
    path: Tuple[Tuple[str, str, str], ...] = ()
    halted: bool = False
    accepted: bool = False
    rejection_reason: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            'state': self.state,
            'position': self.position,
            'input': self.input_string,
            'path': [list(move) for move in self.path],
            'halted': self.halted,
            'accepted': self.accepted,
            'rejection_reason': self.rejection_reason,
        }


@dataclass(frozen=True)
class NFAConfiguration:
    """
    Snapshot of an NFA run: every state the machine could be in (already
    closed under epsilon moves) and the input cursor.
    """
    states: FrozenSet[str]
    position: int
    input_string: str
    history: Tuple[FrozenSet[str], ...] = ()
    halted: bool = False
    accepted: bool = False
    rejection_reason: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            'states': sorted(self.states),
            'position': self.position,
            'input': self.input_string,
            'history': [sorted(states) for states in self.history],
            'halted': self.halted,
            'accepted': self.accepted,
            'rejection_reason': self.rejection_reason,
        }


def _get_transitions(automaton: Automaton, state: str, symbol: str) -> List[str]:
    """
    Get all states reachable from given state on given symbol.

    Args:
        automaton: The automaton
        state: Current state
        symbol: Input symbol (or EPSILON)

    Returns:
        List of next states, in definition order
    """
    targets = []
    for transition in automaton.transitions_from(state):
        if transition.parsed is not None and transition.parsed.symbol == symbol:
            targets.append(transition.target_id)
    return targets


# ---------------------------------------------------------------------------
# DFA
# ---------------------------------------------------------------------------

def dfa_reset(automaton: Automaton, input_string: str = '') -> DFAConfiguration:
    return DFAConfiguration(state=automaton.start_state, position=0, input_string=input_string)


def dfa_step(automaton: Automaton, config: DFAConfiguration) -> DFAConfiguration:
    """
    Advance a DFA configuration by one step.

    At the end of the input the configuration halts and accepts iff the
    current state is final. A missing transition halts rejecting at once;
    there is no implicit dead state.

    Args:
        automaton: A validated DFA
        config: The configuration to advance

    Returns:
        A new configuration; a halted configuration is returned unchanged
    """
    if config.halted:
        return config

    # End of input: decide acceptance
    if config.position >= len(config.input_string):
        if config.state in automaton.final_states:
            return replace(config, halted=True, accepted=True)
        return replace(
            config,
            halted=True,
            rejection_reason=f"Final state '{config.state}' is not an accepting state",
        )

    symbol = config.input_string[config.position]
    next_states = _get_transitions(automaton, config.state, symbol)

    if not next_states:
        return replace(
            config,
            halted=True,
            rejection_reason=f"No transition defined for symbol '{symbol}' from state '{config.state}'",
        )

    # Validation guarantees at most one transition per symbol
    next_state = next_states[0]
    return replace(
        config,
        state=next_state,
        position=config.position + 1,
        path=config.path + ((config.state, symbol, next_state),),
    )


def dfa_run(automaton: Automaton, input_string: str) -> RunResult:
    """
    Run a DFA over the whole input.

    The cursor advances on every non-final step, so a run that is not cut
    short by a missing transition takes exactly len(input_string) + 1 steps.
    """
    return run_until_halted(dfa_step, automaton, dfa_reset(automaton, input_string))


def dfa_configuration_from_dict(data: Dict) -> DFAConfiguration:
    return DFAConfiguration(
        state=data['state'],
        position=int(data['position']),
        input_string=data.get('input', ''),
        path=tuple(tuple(move) for move in data.get('path', [])),
        halted=bool(data.get('halted', False)),
        accepted=bool(data.get('accepted', False)),
        rejection_reason=data.get('rejection_reason'),
    )


# ---------------------------------------------------------------------------
# NFA / epsilon-NFA
# ---------------------------------------------------------------------------

def epsilon_closure(automaton: Automaton, states: Union[str, Iterable[str]]) -> FrozenSet[str]:
    """
    Compute epsilon closure of a state or a set of states.

    Epsilon transitions may form cycles, so each state is expanded at most once.

    Args:
        automaton: The automaton
        states: A single state id or an iterable of state ids

    Returns:
        Set of states reachable via zero or more epsilon transitions
    """
    if isinstance(states, str):
        states = [states]

    closure = set(states)
    stack = list(closure)

    while stack:
        current = stack.pop()
        for next_state in _get_transitions(automaton, current, EPSILON):
            if next_state not in closure:
                closure.add(next_state)
                stack.append(next_state)

    return frozenset(closure)


def nfa_reset(automaton: Automaton, input_string: str = '') -> NFAConfiguration:
    start = epsilon_closure(automaton, automaton.start_state)
    return NFAConfiguration(states=start, position=0, input_string=input_string, history=(start,))


def nfa_move(automaton: Automaton, states: Iterable[str], symbol: str) -> FrozenSet[str]:
    """Follow transitions labelled exactly symbol from every state, then close under epsilon."""
    targets = set()
    for state in states:
        targets.update(_get_transitions(automaton, state, symbol))
    return epsilon_closure(automaton, targets)


def nfa_step(automaton: Automaton, config: NFAConfiguration) -> NFAConfiguration:
    """
    Advance an NFA configuration by one input symbol, simulating all
    branches in parallel.

    Args:
        automaton: A validated NFA
        config: The configuration to advance

    Returns:
        A new configuration; a halted configuration is returned unchanged
    """
    if config.halted:
        return config

    # End of input: accept iff any active state is final
    if config.position >= len(config.input_string):
        if config.states & automaton.final_states:
            return replace(config, halted=True, accepted=True)
        return replace(config, halted=True, rejection_reason='No accepting paths found')

    symbol = config.input_string[config.position]
    next_states = nfa_move(automaton, config.states, symbol)

    if not next_states:
        # Every branch has died; no later symbol can revive one
        return replace(
            config,
            states=next_states,
            position=config.position + 1,
            history=config.history + (next_states,),
            halted=True,
            rejection_reason=f"No transition for symbol '{symbol}' from any active state",
        )

    return replace(
        config,
        states=next_states,
        position=config.position + 1,
        history=config.history + (next_states,),
    )


def nfa_run(automaton: Automaton, input_string: str) -> RunResult:
    return run_until_halted(nfa_step, automaton, nfa_reset(automaton, input_string))


def nfa_configuration_from_dict(data: Dict) -> NFAConfiguration:
    return NFAConfiguration(
        states=frozenset(data['states']),
        position=int(data['position']),
        input_string=data.get('input', ''),
        history=tuple(frozenset(states) for states in data.get('history', [])),
        halted=bool(data.get('halted', False)),
        accepted=bool(data.get('accepted', False)),
        rejection_reason=data.get('rejection_reason'),
    )
