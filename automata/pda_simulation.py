import logging
from collections import deque
from dataclasses import dataclass, replace
from typing import Dict, FrozenSet, List, NamedTuple, Optional, Tuple

from .conf import get_setting
from .configuration import RunResult, run_until_halted
from .graph import Automaton, Transition

logger = logging.getLogger(__name__)


class PDANode(NamedTuple):
    """
    One point of the PDA configuration space.

    stack runs bottom to top, so stack[-1] is the top symbol.
    """
    state: str
    position: int
    stack: Tuple[str, ...]

    def to_dict(self) -> Dict:
        return {'state': self.state, 'position': self.position, 'stack': list(self.stack)}


class PDAResult(NamedTuple):
    accepted: bool
    final_state: Optional[str]
    explored: int
    path: List[PDANode]
    limit_reached: bool = False


@dataclass(frozen=True)
class PDAConfiguration:
    """
    Stepwise PDA snapshot: one breadth-first layer of the configuration space.

    frontier holds the nodes reached by the latest step; visited holds every
    node explored so far and prunes revisits.
    """
    input_string: str
    frontier: Tuple[PDANode, ...]
    visited: FrozenSet[PDANode]
    step_count: int = 0
    halted: bool = False
    accepted: bool = False
    final_state: Optional[str] = None
    rejection_reason: Optional[str] = None

    @property
    def states(self) -> List[str]:
        states = []
        for node in self.frontier:
            if node.state not in states:
                states.append(node.state)
        return states

    def to_dict(self) -> Dict:
        return {
            'input': self.input_string,
            'frontier': [node.to_dict() for node in self.frontier],
            'visited': [node.to_dict() for node in sorted(self.visited)],
            'step_count': self.step_count,
            'halted': self.halted,
            'accepted': self.accepted,
            'final_state': self.final_state,
            'rejection_reason': self.rejection_reason,
        }


def initial_node(automaton: Automaton) -> PDANode:
    return PDANode(automaton.start_state, 0, (get_setting('STACK_BOTTOM'),))


def can_take_transition(transition: Transition, node: PDANode, input_string: str) -> bool:
    """
    Check whether a transition is enabled from a node.

    The input symbol must be epsilon or equal the symbol under the cursor, and
    the pop symbol must be epsilon or equal the top of the stack. An empty
    stack reads as the bottom marker.
    """
    label = transition.parsed
    if label is None:
        return False

    if label.consumes_input:
        if node.position >= len(input_string) or input_string[node.position] != label.input_symbol:
            return False

    if label.pops:
        stack_top = node.stack[-1] if node.stack else get_setting('STACK_BOTTOM')
        if stack_top != label.pop_symbol:
            return False

    return True


def apply_transition(transition: Transition, node: PDANode) -> PDANode:
    """
    Apply an enabled transition to a node.

    push_symbols is pushed right to left, so its leftmost symbol ends up on
    top of the stack and is the first to be popped later.
    """
    label = transition.parsed
    stack = list(node.stack)

    if label.pops and stack:
        stack.pop()

    if label.pushes:
        for symbol in reversed(label.push_symbols):
            stack.append(symbol)

    position = node.position + 1 if label.consumes_input else node.position
    return PDANode(transition.target_id, position, tuple(stack))


def successors(automaton: Automaton, node: PDANode, input_string: str) -> List[PDANode]:
    """All nodes reachable from node by one transition, epsilon moves included."""
    return [
        apply_transition(transition, node)
        for transition in automaton.transitions_from(node.state)
        if can_take_transition(transition, node, input_string)
    ]


def is_accepting(automaton: Automaton, node: PDANode, input_string: str) -> bool:
    """Acceptance by final state: the whole input consumed in a final state."""
    return node.position == len(input_string) and node.state in automaton.final_states


def simulate(automaton: Automaton, input_string: str) -> PDAResult:
    """
    Decide whether a PDA accepts an input by breadth-first search over
    (state, position, stack) configurations.

    Any configuration already visited is pruned, so epsilon cycles that do
    not grow the stack cannot loop forever. Cycles that keep pushing are
    stopped by the PDA_MAX_CONFIGURATIONS setting.

    Args:
        automaton: A validated PDA
        input_string: The input string to simulate

    Returns:
        PDAResult with the verdict, the accepting state (if any), the number
        of configurations explored and the path to the accepting configuration
    """
    max_configurations = get_setting('PDA_MAX_CONFIGURATIONS')

    start = initial_node(automaton)
    queue = deque([start])
    visited = {start}
    parents: Dict[PDANode, Optional[PDANode]] = {start: None}
    explored = 0

    while queue:
        node = queue.popleft()
        explored += 1

        if is_accepting(automaton, node, input_string):
            logger.debug('PDA accepted %r in state %s after %d configurations',
                         input_string, node.state, explored)
            return PDAResult(True, node.state, explored, _trace_path(parents, node))

        for next_node in successors(automaton, node, input_string):
            if next_node in visited:
                continue

            if len(visited) >= max_configurations:
                logger.warning('PDA search for %r stopped after %d configurations',
                               input_string, len(visited))
                return PDAResult(False, None, explored, [], limit_reached=True)

            visited.add(next_node)
            parents[next_node] = node
            queue.append(next_node)

    return PDAResult(False, None, explored, [])


def _trace_path(parents: Dict[PDANode, Optional[PDANode]], node: PDANode) -> List[PDANode]:
    path = []
    current = node
    while current is not None:
        path.append(current)
        current = parents[current]
    path.reverse()
    return path


def pda_reset(automaton: Automaton, input_string: str = '') -> PDAConfiguration:
    start = initial_node(automaton)
    return PDAConfiguration(input_string=input_string, frontier=(start,), visited=frozenset([start]))


def pda_step(automaton: Automaton, config: PDAConfiguration) -> PDAConfiguration:
    """
    Advance the breadth-first search by one layer.

    The configuration halts accepting as soon as any frontier node has
    consumed the whole input in a final state, and halts rejecting when the
    frontier has no unvisited successors.
    """
    if config.halted:
        return config

    for node in config.frontier:
        if is_accepting(automaton, node, config.input_string):
            return replace(config, halted=True, accepted=True, final_state=node.state)

    max_configurations = get_setting('PDA_MAX_CONFIGURATIONS')
    visited = set(config.visited)
    frontier = []

    for node in config.frontier:
        for next_node in successors(automaton, node, config.input_string):
            if next_node in visited:
                continue
            if len(visited) >= max_configurations:
                return replace(
                    config,
                    halted=True,
                    rejection_reason=f'Search stopped after {max_configurations} configurations',
                )
            visited.add(next_node)
            frontier.append(next_node)

    if not frontier:
        return replace(config, halted=True, rejection_reason='No accepting configuration reachable')

    return replace(
        config,
        frontier=tuple(frontier),
        visited=frozenset(visited),
        step_count=config.step_count + 1,
    )


def pda_run(automaton: Automaton, input_string: str) -> RunResult:
    return run_until_halted(pda_step, automaton, pda_reset(automaton, input_string))


def _node_from_dict(data: Dict) -> PDANode:
    return PDANode(data['state'], int(data['position']), tuple(data['stack']))


def pda_configuration_from_dict(data: Dict) -> PDAConfiguration:
    return PDAConfiguration(
        input_string=data.get('input', ''),
        frontier=tuple(_node_from_dict(node) for node in data['frontier']),
        visited=frozenset(_node_from_dict(node) for node in data.get('visited', data['frontier'])),
        step_count=int(data.get('step_count', 0)),
        halted=bool(data.get('halted', False)),
        accepted=bool(data.get('accepted', False)),
        final_state=data.get('final_state'),
        rejection_reason=data.get('rejection_reason'),
    )
