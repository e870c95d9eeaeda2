from collections import deque
from typing import Dict, List, Set

from .graph import Automaton, MachineKind
from .labels import EPSILON


def reachable_states(automaton: Automaton) -> Set[str]:
    """
    Find every state reachable from the start state over any transition.

    Transition labels are ignored: epsilon moves, stack operations and tape
    operations all count as edges.

    Args:
        automaton: The automaton

    Returns:
        Set of reachable state ids (empty if q0 does not exist)
    """
    start = automaton.start_state
    if not automaton.has_state(start):
        return set()

    reachable = {start}
    queue = deque([start])

    while queue:
        current_state = queue.popleft()
        for transition in automaton.transitions_from(current_state):
            next_state = transition.target_id
            if automaton.has_state(next_state) and next_state not in reachable:
                reachable.add(next_state)
                queue.append(next_state)

    return reachable


def unreachable_states(automaton: Automaton) -> List[str]:
    reachable = reachable_states(automaton)
    return [state.id for state in automaton.states if state.id not in reachable]


def is_connected(automaton: Automaton) -> bool:
    """
    Checks if the automaton is connected.

    An automaton is connected if all states are reachable from the starting state.
    """
    # Trivially connected if no states
    if not automaton.states:
        return True

    return not unreachable_states(automaton)


def _transition_key(automaton: Automaton, transition):
    """The part of a label that determinism is judged on, or None for epsilon moves."""
    parsed = transition.parsed
    if automaton.kind in (MachineKind.DFA, MachineKind.NFA):
        return None if parsed.is_epsilon else parsed.symbol
    if automaton.kind == MachineKind.PDA:
        return (parsed.input_symbol, parsed.pop_symbol)
    if automaton.kind.is_transducer:
        return parsed.input_symbol
    return parsed.read_symbols


def _compatible(first: str, second: str) -> bool:
    return first == second or EPSILON in (first, second)


def _has_overlapping_pda_moves(keys: List) -> bool:
    for index, (input_a, pop_a) in enumerate(keys):
        for input_b, pop_b in keys[index + 1:]:
            if _compatible(input_a, input_b) and _compatible(pop_a, pop_b):
                return True
    return False


def is_deterministic(automaton: Automaton) -> bool:
    """
    Checks if the automaton is deterministic.

    An automaton is deterministic if:
    1. It has no epsilon transitions (DFA/NFA), and
    2. No state has two transitions on the same key. For PDAs the key is
       (input, pop) and an epsilon component overlaps any symbol.
    """
    for state in automaton.states:
        keys = set()
        for transition in state.transitions:
            if transition.parsed is None:
                continue

            key = _transition_key(automaton, transition)
            if key is None:
                return False
            if key in keys:
                return False
            keys.add(key)

        if automaton.kind == MachineKind.PDA and _has_overlapping_pda_moves(sorted(keys)):
            return False

    return True


def is_complete(automaton: Automaton) -> bool:
    """
    Checks if the automaton is complete.

    An automaton is complete if for each state and each symbol of its input
    alphabet, there is at least one transition. Epsilon transitions are
    ignored. Only meaningful for DFA, NFA, Moore and Mealy machines; other
    classes report False.
    """
    if automaton.kind not in (MachineKind.DFA, MachineKind.NFA, MachineKind.MOORE, MachineKind.MEALY):
        return False

    # Handle empty cases
    alphabet = automaton.input_alphabet()
    if not automaton.states or not alphabet:
        return True

    for state in automaton.states:
        symbols = set()
        for transition in state.transitions:
            if transition.parsed is not None:
                key = _transition_key(automaton, transition)
                if key is not None:
                    symbols.add(key)

        for symbol in alphabet:
            if symbol not in symbols:
                return False

    return True


def check_all_properties(automaton: Automaton) -> Dict:
    """
    Check all properties at once.

    Returns:
        Dict: Dictionary containing all property check results:
        {
            'deterministic': bool,
            'complete': bool,
            'connected': bool,
            'unreachable_states': [state ids],
            'alphabet': [symbols]
        }
    """
    return {
        'deterministic': is_deterministic(automaton),
        'complete': is_complete(automaton),
        'connected': is_connected(automaton),
        'unreachable_states': unreachable_states(automaton),
        'alphabet': automaton.input_alphabet(),
    }
