"""Machines in their saved JSON shape, shared by the test modules."""
import copy

from automata.serialization import automaton_from_dict


def node(state_id, transitions=(), x=0, y=0, **extra):
    data = {'id': state_id, 'x': x, 'y': y, 'transitions': list(transitions)}
    data.update(extra)
    return data


def edge(target, label):
    return {'targetid': target, 'label': label}


def fsm_edge(target, input_symbol, output_symbol=None):
    data = {'targetid': target, 'inputSymbol': input_symbol}
    if output_symbol is not None:
        data['outputSymbol'] = output_symbol
    return data


# Even number of 0s and even number of 1s
EVEN_ZEROS_AND_ONES_DFA = {
    'nodes': [
        node('q0', [edge('q1', '0'), edge('q2', '1')]),
        node('q1', [edge('q0', '0'), edge('q3', '1')]),
        node('q2', [edge('q3', '0'), edge('q0', '1')]),
        node('q3', [edge('q2', '0'), edge('q1', '1')]),
    ],
    'finalStates': ['q0'],
}

# Strings over {a,b} ending in 'ab', with epsilon moves back to q0
ENDS_WITH_AB_NFA = {
    'nodes': [
        node('q0', [edge('q0', 'a'), edge('q0', 'b'), edge('q1', 'a')]),
        node('q1', [edge('q2', 'b'), edge('q0', 'ε')]),
        node('q2', [edge('q0', 'ε')]),
    ],
    'finalStates': ['q2'],
    'allowEpsilon': True,
}

# a^n b^n for n >= 0, accepting by final state
A_N_B_N_PDA = {
    'nodes': [
        node('q0', [
            edge('q0', 'a,Z,AZ'),
            edge('q0', 'a,A,AA'),
            edge('q1', 'b,A,ε'),
            edge('q2', 'ε,Z,Z'),
        ]),
        node('q1', [
            edge('q1', 'b,A,ε'),
            edge('q2', 'ε,Z,Z'),
        ]),
        node('q2'),
    ],
    'finalStates': ['q2'],
}

# a^n b^n with a separate counting state, as shipped in the example gallery
EXAMPLE1_PDA = {
    'nodes': [
        node('q0', [
            edge('q1', 'a,Z,AZ'),
            edge('q1', 'a,A,AA'),
            edge('q3', 'ε,Z,Z'),
        ]),
        node('q1', [
            edge('q1', 'a,A,AA'),
            edge('q2', 'b,A,ε'),
        ]),
        node('q2', [
            edge('q2', 'b,A,ε'),
            edge('q3', 'ε,Z,Z'),
        ]),
        node('q3'),
    ],
    'finalStates': ['q3'],
}

# Remainder of the binary number read so far, divided by 3
REMAINDER_MOORE = {
    'nodes': [
        node('q0', [fsm_edge('q0', '0'), fsm_edge('q1', '1')], output='0'),
        node('q1', [fsm_edge('q2', '0'), fsm_edge('q0', '1')], output='1'),
        node('q2', [fsm_edge('q1', '0'), fsm_edge('q2', '1')], output='2'),
    ],
    'finalStates': ['q0'],
    'machineType': 'Moore',
}

# Zero detector: outputs 1 on a 0 that directly follows a 1
ZERO_DETECTOR_MEALY = {
    'nodes': [
        node('q0', [fsm_edge('q0', '0', '0'), fsm_edge('q1', '1', '0')]),
        node('q1', [fsm_edge('q0', '0', '1'), fsm_edge('q1', '1', '0')]),
    ],
    'finalStates': [],
    'machineType': 'Mealy',
}

# Outputs 1 when the current and the previous symbol are both 0
DOUBLE_ZERO_MEALY = {
    'nodes': [
        node('q0', [fsm_edge('q1', '0', '0'), fsm_edge('q0', '1', '0')]),
        node('q1', [fsm_edge('q1', '0', '1'), fsm_edge('q0', '1', '0')]),
    ],
    'finalStates': [],
    'machineType': 'Mealy',
}

# Accepts a*, rejects as soon as a 'b' is read
ONLY_AS_TM = {
    'nodes': [
        node('q0', [edge('q0', 'a,a,R'), edge('qa', '_,_,S'), edge('qr', 'b,b,S')]),
        node('qa'),
        node('qr'),
    ],
    'acceptStates': ['qa'],
    'rejectStates': ['qr'],
    'tapeCount': 1,
}

# Copies the input from tape 1 onto tape 2
COPY_TM = {
    'nodes': [
        node('q0', [
            edge('q0', 'a,a,R;_,a,R'),
            edge('q0', 'b,b,R;_,b,R'),
            edge('q1', '_,_,S;_,_,S'),
        ]),
        node('q1'),
    ],
    'finalStates': ['q1'],
    'tapeCount': 2,
}

# Walks right over blanks forever
RUNAWAY_TM = {
    'nodes': [node('q0', [edge('q0', '_,_,R')]), node('q1')],
    'finalStates': ['q1'],
    'tapeCount': 1,
}


def load(data, kind):
    """Build an Automaton from a copy of a fixture, so tests can edit fixtures freely."""
    return automaton_from_dict(copy.deepcopy(data), kind)
