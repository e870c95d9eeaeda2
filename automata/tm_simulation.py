import logging
from dataclasses import dataclass, replace
from typing import Dict, NamedTuple, Optional, Tuple

from .conf import get_setting
from .configuration import RunResult, run_until_halted
from .graph import Automaton, Transition
from .labels import BLANK, TapeOperation, normalise_blank

logger = logging.getLogger(__name__)


class Tape(NamedTuple):
    """
    A tape that is unbounded in both directions.

    Only non-blank cells are stored; cells maps position to symbol. Tapes
    are never modified in place, write_and_move returns a new Tape.
    """
    cells: Dict[int, str]
    head: int = 0

    @classmethod
    def from_input(cls, input_string: str) -> 'Tape':
        cells = {}
        for position, symbol in enumerate(input_string):
            symbol = normalise_blank(symbol)
            if symbol != BLANK:
                cells[position] = symbol
        return cls(cells, 0)

    def read(self) -> str:
        return self.cells.get(self.head, BLANK)

    def write_and_move(self, operation: TapeOperation) -> 'Tape':
        cells = dict(self.cells)
        if operation.write == BLANK:
            cells.pop(self.head, None)
        else:
            cells[self.head] = operation.write

        head = self.head
        if operation.move == 'L':
            head -= 1
        elif operation.move == 'R':
            head += 1

        return Tape(cells, head)

    def bounds(self) -> Tuple[int, int]:
        positions = list(self.cells) + [self.head]
        return min(positions), max(positions)

    def contents(self) -> str:
        """Tape contents with leading and trailing blanks removed."""
        if not self.cells:
            return ''
        start, end = min(self.cells), max(self.cells)
        return ''.join(self.cells.get(position, BLANK) for position in range(start, end + 1))

    def to_dict(self) -> Dict:
        start, end = self.bounds()
        return {
            'cells': {str(position): symbol for position, symbol in sorted(self.cells.items())},
            'head': self.head,
            'start': start,
            'window': ''.join(self.cells.get(position, BLANK) for position in range(start, end + 1)),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Tape':
        cells = {int(position): symbol for position, symbol in data.get('cells', {}).items()}
        return cls(cells, int(data.get('head', 0)))


@dataclass(frozen=True)
class TMConfiguration:
    """Snapshot of a TM run: current state plus every tape and its head."""
    state: str
    tapes: Tuple[Tape, ...]
    input_string: str = ''
    step_count: int = 0
    path: Tuple[str, ...] = ()
    halted: bool = False
    accepted: bool = False
    rejection_reason: Optional[str] = None

    def read_symbols(self) -> Tuple[str, ...]:
        return tuple(tape.read() for tape in self.tapes)

    def to_dict(self) -> Dict:
        return {
            'state': self.state,
            'tapes': [tape.to_dict() for tape in self.tapes],
            'input': self.input_string,
            'step_count': self.step_count,
            'path': list(self.path),
            'halted': self.halted,
            'accepted': self.accepted,
            'rejection_reason': self.rejection_reason,
        }


def _halt_if_decided(automaton: Automaton, config: TMConfiguration) -> TMConfiguration:
    """Halt when the current state is a designated accept or reject state."""
    if config.state in automaton.final_states:
        return replace(config, halted=True, accepted=True)
    if config.state in automaton.reject_states:
        return replace(config, halted=True, rejection_reason=f"Reached reject state '{config.state}'")
    return config


def find_transition(automaton: Automaton, config: TMConfiguration) -> Optional[Transition]:
    """Find the transition whose read symbols match the symbols under every head."""
    read_symbols = config.read_symbols()
    for transition in automaton.transitions_from(config.state):
        if transition.parsed is not None and transition.parsed.read_symbols == read_symbols:
            return transition
    return None


def tm_reset(automaton: Automaton, input_string: str = '') -> TMConfiguration:
    """The input goes on the first tape, starting under the head; other tapes start blank."""
    tape_count = max(1, automaton.tape_count)
    tapes = (Tape.from_input(input_string),) + tuple(Tape({}, 0) for _ in range(tape_count - 1))
    config = TMConfiguration(
        state=automaton.start_state,
        tapes=tapes,
        input_string=input_string,
        path=(automaton.start_state,),
    )
    return _halt_if_decided(automaton, config)


def tm_step(automaton: Automaton, config: TMConfiguration) -> TMConfiguration:
    """
    Apply one transition to every tape in lock-step.

    The machine halts when it reaches an accept or reject state, when no
    transition matches the symbols under the heads, or when TM_MAX_STEPS
    transitions have been taken.

    Args:
        automaton: A validated Turing machine
        config: The configuration to advance

    Returns:
        A new configuration; a halted configuration is returned unchanged
    """
    if config.halted:
        return config

    max_steps = get_setting('TM_MAX_STEPS')
    if config.step_count >= max_steps:
        logger.info('TM run on %r hit the step limit of %d', config.input_string, max_steps)
        return replace(config, halted=True, rejection_reason='Reached maximum step count')

    transition = find_transition(automaton, config)
    if transition is None:
        return replace(
            config,
            halted=True,
            rejection_reason=(
                f"No transition from state '{config.state}' "
                f"reading '{';'.join(config.read_symbols())}'"
            ),
        )

    tapes = tuple(
        tape.write_and_move(operation)
        for tape, operation in zip(config.tapes, transition.parsed.operations)
    )
    config = replace(
        config,
        state=transition.target_id,
        tapes=tapes,
        step_count=config.step_count + 1,
        path=config.path + (transition.target_id,),
    )
    return _halt_if_decided(automaton, config)


def tm_run(automaton: Automaton, input_string: str) -> RunResult:
    return run_until_halted(tm_step, automaton, tm_reset(automaton, input_string))


def tm_configuration_from_dict(data: Dict) -> TMConfiguration:
    return TMConfiguration(
        state=data['state'],
        tapes=tuple(Tape.from_dict(tape) for tape in data['tapes']),
        input_string=data.get('input', ''),
        step_count=int(data.get('step_count', 0)),
        path=tuple(data.get('path', [])),
        halted=bool(data.get('halted', False)),
        accepted=bool(data.get('accepted', False)),
        rejection_reason=data.get('rejection_reason'),
    )
