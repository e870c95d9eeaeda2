from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Set

from .labels import (
    BLANK,
    FSMLabel,
    LabelError,
    parse_pda_label,
    parse_symbol_label,
    parse_tm_label,
)

START_STATE = 'q0'


class MachineKind(Enum):
    """Tag identifying which machine class an Automaton belongs to."""
    DFA = 'dfa'
    NFA = 'nfa'
    PDA = 'pda'
    MOORE = 'moore'
    MEALY = 'mealy'
    TM = 'tm'

    @classmethod
    def from_name(cls, name: str) -> 'MachineKind':
        """
        Resolve a machine kind from its name, case-insensitively.

        'Moore' and 'Mealy' (the wire values of machineType) are accepted.
        """
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            raise ValueError(f'Unknown machine type: {name!r}')

        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(f'Unknown machine type: {name!r}') from None

    @property
    def is_transducer(self) -> bool:
        return self in (MachineKind.MOORE, MachineKind.MEALY)


@dataclass
class Transition:
    """
    A directed edge owned by its source state.

    label holds the raw label text for DFA/NFA/PDA/TM machines; Moore/Mealy
    transitions use input_symbol and output_symbol instead. The parsed label
    is filled in once when the owning Automaton is built.
    """
    target_id: str
    label: Optional[str] = None
    input_symbol: Optional[str] = None
    output_symbol: Optional[str] = None
    parsed: Any = field(default=None, compare=False, repr=False)
    label_error: Optional[str] = field(default=None, compare=False, repr=False)


@dataclass
class State:
    id: str
    x: float = 0
    y: float = 0
    output: Optional[str] = None
    transitions: List[Transition] = field(default_factory=list)


@dataclass
class Automaton:
    """
    States, their transitions and the class-specific metadata.

    States live in a flat list; state_index maps each id to its position so
    cyclic graphs are plain id references. Engines never mutate an Automaton.
    """
    kind: MachineKind
    states: List[State] = field(default_factory=list)
    final_states: Set[str] = field(default_factory=set)
    allow_epsilon: bool = False
    tape_count: int = 1
    reject_states: Set[str] = field(default_factory=set)
    state_index: Dict[str, int] = field(default_factory=dict, init=False, compare=False, repr=False)

    def __post_init__(self):
        self.kind = MachineKind.from_name(self.kind)
        self.final_states = set(self.final_states)
        self.reject_states = set(self.reject_states)
        self.reindex()

    def reindex(self) -> None:
        """Rebuild the id index and parse every transition label."""
        self.state_index = {}
        for position, state in enumerate(self.states):
            # The first occurrence wins; duplicates are reported by validation
            self.state_index.setdefault(state.id, position)
            for transition in state.transitions:
                self._parse_transition(transition)

    def _parse_transition(self, transition: Transition) -> None:
        transition.parsed = None
        transition.label_error = None

        if self.kind.is_transducer:
            transition.parsed = FSMLabel(transition.input_symbol, transition.output_symbol)
            return

        try:
            if self.kind in (MachineKind.DFA, MachineKind.NFA):
                transition.parsed = parse_symbol_label(transition.label)
            elif self.kind == MachineKind.PDA:
                transition.parsed = parse_pda_label(transition.label)
            else:
                transition.parsed = parse_tm_label(transition.label)
        except LabelError as e:
            transition.label_error = str(e)

    @property
    def start_state(self) -> str:
        return START_STATE

    @property
    def state_ids(self) -> List[str]:
        return [state.id for state in self.states]

    def has_state(self, state_id: str) -> bool:
        return state_id in self.state_index

    def get_state(self, state_id: str) -> Optional[State]:
        position = self.state_index.get(state_id)
        return self.states[position] if position is not None else None

    def transitions_from(self, state_id: str) -> List[Transition]:
        state = self.get_state(state_id)
        return state.transitions if state is not None else []

    def iter_transitions(self) -> Iterator:
        """Yield (source_state, transition) pairs in definition order."""
        for state in self.states:
            for transition in state.transitions:
                yield state, transition

    def input_alphabet(self) -> List[str]:
        """Input symbols used by any transition, in first-seen order. Epsilon excluded."""
        alphabet = []
        for _, transition in self.iter_transitions():
            parsed = transition.parsed
            if parsed is None:
                continue

            if self.kind in (MachineKind.DFA, MachineKind.NFA):
                symbol = None if parsed.is_epsilon else parsed.symbol
            elif self.kind == MachineKind.PDA:
                symbol = parsed.input_symbol if parsed.consumes_input else None
            elif self.kind.is_transducer:
                symbol = parsed.input_symbol
            else:
                read = parsed.operations[0].read
                symbol = None if read == BLANK else read

            if symbol is not None and symbol not in alphabet:
                alphabet.append(symbol)

        return alphabet
