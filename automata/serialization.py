"""
Conversion between Automaton objects and their persisted JSON shape.

Field names follow the format used by saved machines, shared links and
problem sets:

- DFA/NFA/PDA: {nodes: [{id, x, y, transitions: [{targetid, label}]}],
  finalStates, allowEpsilon?}
- Moore/Mealy: {nodes: [{id, x, y, output, transitions: [{targetid,
  inputSymbol, outputSymbol?}]}], finalStates, machineType}
- TM: {nodes: [...], finalStates | acceptStates, rejectStates?, tapeCount}
"""
import json
import logging
from typing import Any, Dict, List, Optional, Union

from .exceptions import StructuralError
from .graph import Automaton, MachineKind, State, Transition

logger = logging.getLogger(__name__)

TAPE_MODES = {'1-tape': 1, '2-tape': 2, '3-tape': 3}


def serialize(automaton: Automaton, indent: Optional[int] = None) -> str:
    """
    Serialize an automaton to JSON text.

    Args:
        automaton: The automaton to serialize
        indent: Optional indentation passed to json.dumps

    Returns:
        JSON text in the wire shape of the automaton's machine class
    """
    return json.dumps(automaton_to_dict(automaton), ensure_ascii=False, indent=indent)


def deserialize(text: Union[str, bytes], kind: Union[str, MachineKind]) -> Automaton:
    """
    Parse JSON text into an automaton.

    Args:
        text: JSON text
        kind: Machine class of the text; 'fsm' reads Moore or Mealy from machineType

    Returns:
        The automaton

    Raises:
        StructuralError: If the text is not valid JSON or does not have the expected shape
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise StructuralError(f'Invalid JSON: {e}') from e

    return automaton_from_dict(data, kind)


def _ordered_ids(automaton: Automaton, ids) -> List[str]:
    # Node order first, then any ids that do not name a state
    ordered = [state.id for state in automaton.states if state.id in ids]
    ordered.extend(sorted(state_id for state_id in ids if state_id not in ordered))
    return ordered


def automaton_to_dict(automaton: Automaton) -> Dict[str, Any]:
    """Build the JSON-ready dict for an automaton."""
    nodes = []
    for state in automaton.states:
        node = {'id': state.id, 'x': state.x, 'y': state.y}

        if automaton.kind.is_transducer:
            if state.output is not None:
                node['output'] = state.output
            transitions = []
            for transition in state.transitions:
                item = {'targetid': transition.target_id, 'inputSymbol': transition.input_symbol}
                if transition.output_symbol is not None:
                    item['outputSymbol'] = transition.output_symbol
                transitions.append(item)
            node['transitions'] = transitions
        else:
            node['transitions'] = [
                {'targetid': transition.target_id, 'label': transition.label}
                for transition in state.transitions
            ]

        nodes.append(node)

    data: Dict[str, Any] = {
        'nodes': nodes,
        'finalStates': _ordered_ids(automaton, automaton.final_states),
    }

    if automaton.kind == MachineKind.NFA:
        data['allowEpsilon'] = automaton.allow_epsilon
    elif automaton.kind == MachineKind.MOORE:
        data['machineType'] = 'Moore'
    elif automaton.kind == MachineKind.MEALY:
        data['machineType'] = 'Mealy'
    elif automaton.kind == MachineKind.TM:
        data['tapeCount'] = automaton.tape_count
        if automaton.reject_states:
            data['rejectStates'] = _ordered_ids(automaton, automaton.reject_states)

    return data


def _require(data: Dict, key: str, expected_type, path: str):
    if key not in data:
        raise StructuralError(f"Missing required field '{key}'", path)

    value = data[key]
    if not _is_type(value, expected_type):
        raise StructuralError(f"Field '{key}' must be {_type_name(expected_type)}", path)

    return value


def _optional(data: Dict, key: str, expected_type, path: str, default=None):
    value = data.get(key)
    if value is None:
        return default

    if not _is_type(value, expected_type):
        raise StructuralError(f"Field '{key}' must be {_type_name(expected_type)}", path)

    return value


def _is_type(value, expected_type) -> bool:
    # bool is a subclass of int but never a valid coordinate or count
    if isinstance(value, bool) and expected_type is not bool:
        return False
    return isinstance(value, expected_type)


def _type_name(expected_type) -> str:
    names = {str: 'a string', list: 'a list', dict: 'an object', bool: 'a boolean', int: 'an integer'}
    if isinstance(expected_type, tuple):
        return 'a number'
    return names.get(expected_type, expected_type.__name__)


def _string_list(data: Dict, key: str, path: str) -> List[str]:
    values = _optional(data, key, list, path, default=[])
    for index, value in enumerate(values):
        if not isinstance(value, str):
            raise StructuralError(f"'{key}' entries must be strings", f'{path}{key}[{index}]')
    return values


def _resolve_kind(data: Dict, kind: Union[str, MachineKind]) -> MachineKind:
    name = kind.value if isinstance(kind, MachineKind) else str(kind).strip().lower()

    if name in ('fsm', 'moore', 'mealy'):
        machine_type = data.get('machineType')
        if machine_type is None:
            return MachineKind.MEALY if name == 'mealy' else MachineKind.MOORE
        if machine_type not in ('Moore', 'Mealy'):
            raise StructuralError(f"Invalid machineType '{machine_type}' (expected 'Moore' or 'Mealy')")
        return MachineKind.from_name(machine_type)

    try:
        return MachineKind.from_name(name)
    except ValueError as e:
        raise StructuralError(str(e)) from e


def _tape_count(data: Dict) -> int:
    if 'tapeCount' in data:
        return _require(data, 'tapeCount', int, '')

    tape_mode = data.get('tapeMode')
    if tape_mode is None:
        return 1
    if tape_mode not in TAPE_MODES:
        raise StructuralError(f"Invalid tapeMode '{tape_mode}'")
    return TAPE_MODES[tape_mode]


def automaton_from_dict(data: Any, kind: Union[str, MachineKind]) -> Automaton:
    """
    Build an automaton from already-parsed JSON data.

    Args:
        data: Parsed JSON (a dict in the wire shape)
        kind: Machine class, see deserialize

    Returns:
        The automaton, with every transition label parsed

    Raises:
        StructuralError: If a required field is missing or has the wrong type
    """
    if not isinstance(data, dict):
        raise StructuralError('Automaton must be a JSON object')

    machine_kind = _resolve_kind(data, kind)
    raw_nodes = _require(data, 'nodes', list, '')

    states = []
    for index, raw_node in enumerate(raw_nodes):
        path = f'nodes[{index}]'
        if not isinstance(raw_node, dict):
            raise StructuralError('Node must be an object', path)

        state = State(
            id=_require(raw_node, 'id', str, path),
            x=_optional(raw_node, 'x', (int, float), path, default=0),
            y=_optional(raw_node, 'y', (int, float), path, default=0),
        )

        if machine_kind.is_transducer:
            state.output = _optional(raw_node, 'output', str, path)

        raw_transitions = _optional(raw_node, 'transitions', list, path, default=[])
        for t_index, raw_transition in enumerate(raw_transitions):
            t_path = f'{path}.transitions[{t_index}]'
            if not isinstance(raw_transition, dict):
                raise StructuralError('Transition must be an object', t_path)

            target_id = _require(raw_transition, 'targetid', str, t_path)
            if machine_kind.is_transducer:
                transition = Transition(
                    target_id=target_id,
                    input_symbol=_require(raw_transition, 'inputSymbol', str, t_path),
                    output_symbol=_optional(raw_transition, 'outputSymbol', str, t_path),
                )
            else:
                transition = Transition(
                    target_id=target_id,
                    label=_require(raw_transition, 'label', str, t_path),
                )
            state.transitions.append(transition)

        states.append(state)

    if machine_kind == MachineKind.TM and 'finalStates' not in data:
        final_states = _string_list(data, 'acceptStates', '')
    else:
        final_states = _string_list(data, 'finalStates', '')

    automaton = Automaton(
        kind=machine_kind,
        states=states,
        final_states=set(final_states),
        # Saved NFAs without the flag may use epsilon moves
        allow_epsilon=(
            _optional(data, 'allowEpsilon', bool, '', default=True) if machine_kind == MachineKind.NFA else False
        ),
        tape_count=_tape_count(data) if machine_kind == MachineKind.TM else 1,
        reject_states=set(_string_list(data, 'rejectStates', '')) if machine_kind == MachineKind.TM else set(),
    )

    logger.debug('Loaded %s with %d states', machine_kind.name, len(states))
    return automaton
