from typing import Callable, Dict, List, NamedTuple

from .exceptions import ValidationError
from .graph import Automaton, MachineKind, START_STATE
from .labels import EPSILON

MACHINE_NAMES = {
    MachineKind.DFA: 'DFA',
    MachineKind.NFA: 'NFA',
    MachineKind.PDA: 'PDA',
    MachineKind.MOORE: 'Moore Machine',
    MachineKind.MEALY: 'Mealy Machine',
    MachineKind.TM: 'Turing Machine',
}


class ValidResult(NamedTuple):
    """Outcome of validating an automaton."""
    ok: bool
    first_error: str
    all_errors: List[str]

    @property
    def message(self) -> str:
        return self.first_error if not self.ok else 'Valid'


def validate(automaton: Automaton) -> ValidResult:
    """
    Check the structural rules an automaton must satisfy before simulation.

    Rules are evaluated in a fixed order so that the first error is
    reproducible:
    1. States exist and have unique ids
    2. Final (and reject) states refer to existing states
    3. The start state q0 exists
    4. Every transition target exists
    5. Class-specific rules (label format, determinism, outputs)

    Validation never raises; every violation is listed in all_errors.

    Args:
        automaton: The automaton to check

    Returns:
        ValidResult with ok, the first error message and all error messages
    """
    errors: List[str] = []
    name = MACHINE_NAMES[automaton.kind]

    # 1. States
    if not automaton.states:
        errors.append(f'{name} must have at least one state')

    seen = set()
    for state in automaton.states:
        if state.id in seen:
            errors.append(f"Duplicate state id '{state.id}'")
        seen.add(state.id)

    # 2. Final and reject states
    for state_id in sorted(automaton.final_states):
        if not automaton.has_state(state_id):
            errors.append(f"Final state '{state_id}' is not defined in the set of states")

    for state_id in sorted(automaton.reject_states):
        if not automaton.has_state(state_id):
            errors.append(f"Reject state '{state_id}' is not defined in the set of states")

    # 3. Start state
    if automaton.states and not automaton.has_state(START_STATE):
        errors.append(f"{name} must have a start state ({START_STATE})")

    # 4. Transition targets
    for state, transition in automaton.iter_transitions():
        if not automaton.has_state(transition.target_id):
            errors.append(
                f"Transition from '{state.id}' points to non-existent state '{transition.target_id}'"
            )

    # 5. Class-specific rules
    errors.extend(_CLASS_RULES[automaton.kind](automaton))

    if errors:
        return ValidResult(False, errors[0], errors)
    return ValidResult(True, '', [])


def validate_or_raise(automaton: Automaton) -> ValidResult:
    """Validate, raising ValidationError if any rule is broken."""
    result = validate(automaton)
    if not result.ok:
        raise ValidationError(result)
    return result


def _label_errors(automaton: Automaton) -> List[str]:
    errors = []
    for state, transition in automaton.iter_transitions():
        if transition.label_error:
            errors.append(f"Invalid transition label from '{state.id}': {transition.label_error}")
    return errors


def _dfa_rules(automaton: Automaton) -> List[str]:
    errors = _label_errors(automaton)

    for state in automaton.states:
        symbols = set()
        for transition in state.transitions:
            if transition.parsed is None:
                continue

            symbol = transition.parsed.symbol
            if transition.parsed.is_epsilon:
                errors.append(f"State '{state.id}' has an {EPSILON}-transition, which a DFA cannot have")
                continue

            # Determinism: at most one transition per (state, symbol)
            if symbol in symbols:
                errors.append(f"State '{state.id}' has multiple transitions on symbol '{symbol}'")
            symbols.add(symbol)

    return errors


def _nfa_rules(automaton: Automaton) -> List[str]:
    errors = _label_errors(automaton)

    if not automaton.allow_epsilon:
        for state, transition in automaton.iter_transitions():
            if transition.parsed is not None and transition.parsed.is_epsilon:
                errors.append(
                    f"Transition from '{state.id}' to '{transition.target_id}' is an "
                    f"{EPSILON}-transition but epsilon transitions are not allowed"
                )

    return errors


def _pda_rules(automaton: Automaton) -> List[str]:
    return _label_errors(automaton)


def _fsm_determinism(automaton: Automaton) -> List[str]:
    errors = []
    for state in automaton.states:
        inputs = set()
        for transition in state.transitions:
            symbol = transition.input_symbol
            if not isinstance(symbol, str) or symbol == '':
                errors.append(f"Transition from '{state.id}' is missing an input symbol")
                continue

            if symbol in inputs:
                errors.append(f"Non-deterministic transition in state '{state.id}' for input '{symbol}'")
            inputs.add(symbol)
    return errors


def _moore_rules(automaton: Automaton) -> List[str]:
    errors = _fsm_determinism(automaton)

    for state in automaton.states:
        if state.output is None or state.output == '':
            errors.append(f"State '{state.id}' is missing an output (required for Moore machines)")

    return errors


def _mealy_rules(automaton: Automaton) -> List[str]:
    errors = _fsm_determinism(automaton)

    for state, transition in automaton.iter_transitions():
        if transition.output_symbol is None or transition.output_symbol == '':
            errors.append(
                f"Transition from '{state.id}' with input '{transition.input_symbol}' "
                f"is missing an output (required for Mealy machines)"
            )

    return errors


def _tm_rules(automaton: Automaton) -> List[str]:
    errors = []

    if not isinstance(automaton.tape_count, int) or automaton.tape_count < 1:
        errors.append(f'Tape count must be a positive integer, got {automaton.tape_count!r}')
        return errors + _label_errors(automaton)

    errors.extend(_label_errors(automaton))

    for state in automaton.states:
        read_combinations = set()
        for transition in state.transitions:
            if transition.parsed is None:
                continue

            operations = transition.parsed.operations
            if len(operations) != automaton.tape_count:
                errors.append(
                    f"Transition from '{state.id}' has {len(operations)} tape operations, "
                    f"but the machine has {automaton.tape_count} tape(s)"
                )
                continue

            read_symbols = transition.parsed.read_symbols
            if read_symbols in read_combinations:
                errors.append(
                    f"Non-deterministic transition in state '{state.id}' "
                    f"for symbols '{';'.join(read_symbols)}'"
                )
            read_combinations.add(read_symbols)

    return errors


_CLASS_RULES: Dict[MachineKind, Callable[[Automaton], List[str]]] = {
    MachineKind.DFA: _dfa_rules,
    MachineKind.NFA: _nfa_rules,
    MachineKind.PDA: _pda_rules,
    MachineKind.MOORE: _moore_rules,
    MachineKind.MEALY: _mealy_rules,
    MachineKind.TM: _tm_rules,
}
