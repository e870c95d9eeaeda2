from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from .configuration import RunResult, run_until_halted
from .graph import Automaton, MachineKind, Transition


@dataclass(frozen=True)
class FSMConfiguration:
    """
    Snapshot of a Moore/Mealy run: current state, input cursor and the
    outputs emitted so far (one per consumed input symbol).
    """
    state: str
    position: int
    input_string: str
    outputs: Tuple[str, ...] = ()
    path: Tuple[str, ...] = ()
    halted: bool = False
    accepted: bool = False
    rejection_reason: Optional[str] = None

    @property
    def output(self) -> str:
        return ''.join(self.outputs)

    def to_dict(self) -> Dict:
        return {
            'state': self.state,
            'position': self.position,
            'input': self.input_string,
            'outputs': list(self.outputs),
            'output': self.output,
            'path': list(self.path),
            'halted': self.halted,
            'accepted': self.accepted,
            'rejection_reason': self.rejection_reason,
        }


def _find_transition(automaton: Automaton, state: str, symbol: str) -> Optional[Transition]:
    for transition in automaton.transitions_from(state):
        if transition.input_symbol == symbol:
            return transition
    return None


def fsm_reset(automaton: Automaton, input_string: str = '') -> FSMConfiguration:
    # The start state's own output is never emitted
    start = automaton.start_state
    return FSMConfiguration(state=start, position=0, input_string=input_string, path=(start,))


def fsm_step(automaton: Automaton, config: FSMConfiguration) -> FSMConfiguration:
    """
    Consume one input symbol and emit one output symbol.

    Moore machines emit the output of the state they arrive in; Mealy
    machines emit the output of the transition they take.

    Args:
        automaton: A validated Moore or Mealy machine
        config: The configuration to advance

    Returns:
        A new configuration; a halted configuration is returned unchanged
    """
    if config.halted:
        return config

    if config.position >= len(config.input_string):
        if config.state in automaton.final_states:
            return replace(config, halted=True, accepted=True)
        return replace(
            config,
            halted=True,
            rejection_reason=f"Final state '{config.state}' is not an accepting state",
        )

    symbol = config.input_string[config.position]
    transition = _find_transition(automaton, config.state, symbol)

    if transition is None:
        return replace(
            config,
            halted=True,
            rejection_reason=f"No transition for input '{symbol}' from state '{config.state}'",
        )

    if automaton.kind == MachineKind.MOORE:
        target = automaton.get_state(transition.target_id)
        emitted = target.output or ''
    else:
        emitted = transition.output_symbol or ''

    return replace(
        config,
        state=transition.target_id,
        position=config.position + 1,
        outputs=config.outputs + (emitted,),
        path=config.path + (transition.target_id,),
    )


def fsm_run(automaton: Automaton, input_string: str) -> RunResult:
    return run_until_halted(fsm_step, automaton, fsm_reset(automaton, input_string))


def translate(automaton: Automaton, input_string: str) -> str:
    """
    Run a Moore/Mealy machine and return the produced output string.

    If the machine gets stuck the output produced up to that point is returned.
    """
    return fsm_run(automaton, input_string).final_config.output


def fsm_configuration_from_dict(data: Dict) -> FSMConfiguration:
    return FSMConfiguration(
        state=data['state'],
        position=int(data['position']),
        input_string=data.get('input', ''),
        outputs=tuple(data.get('outputs', [])),
        path=tuple(data.get('path', [])),
        halted=bool(data.get('halted', False)),
        accepted=bool(data.get('accepted', False)),
        rejection_reason=data.get('rejection_reason'),
    )
