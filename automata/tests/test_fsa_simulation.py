from django.test import TestCase

from automata import engines
from automata.fsa_simulation import (
    dfa_configuration_from_dict,
    dfa_reset,
    dfa_run,
    dfa_step,
    epsilon_closure,
    nfa_configuration_from_dict,
    nfa_move,
    nfa_reset,
    nfa_run,
    nfa_step,
)
from automata.tests.fixtures import ENDS_WITH_AB_NFA, EVEN_ZEROS_AND_ONES_DFA, edge, load, node


class TestDfaSimulation(TestCase):
    def setUp(self):
        self.dfa = load(EVEN_ZEROS_AND_ONES_DFA, 'dfa')

    def test_even_zeros_and_ones(self):
        self.assertTrue(dfa_run(self.dfa, '0011').accepted)
        self.assertTrue(dfa_run(self.dfa, '').accepted)
        self.assertTrue(dfa_run(self.dfa, '0101').accepted)
        self.assertFalse(dfa_run(self.dfa, '0').accepted)
        self.assertFalse(dfa_run(self.dfa, '011').accepted)

    def test_execution_path(self):
        result = dfa_run(self.dfa, '0011')
        expected_path = (
            ('q0', '0', 'q1'),
            ('q1', '0', 'q0'),
            ('q0', '1', 'q2'),
            ('q2', '1', 'q0'),
        )
        self.assertEqual(result.final_config.path, expected_path)

    def test_run_takes_length_plus_one_steps(self):
        for input_string in ['', '0', '0011', '10101']:
            result = dfa_run(self.dfa, input_string)
            self.assertEqual(len(result.history), len(input_string) + 2)
            self.assertEqual(result.history[0], dfa_reset(self.dfa, input_string))

    def test_rejection_in_non_final_state(self):
        config = dfa_run(self.dfa, '0').final_config
        self.assertTrue(config.halted)
        self.assertFalse(config.accepted)
        self.assertEqual(config.rejection_reason, "Final state 'q1' is not an accepting state")

    def test_missing_transition_rejects(self):
        config = dfa_run(self.dfa, '02').final_config
        self.assertTrue(config.halted)
        self.assertFalse(config.accepted)
        self.assertEqual(config.position, 1)
        self.assertEqual(config.rejection_reason, "No transition defined for symbol '2' from state 'q1'")

    def test_step_by_step(self):
        config = dfa_reset(self.dfa, '01')
        self.assertEqual(config.state, 'q0')
        self.assertEqual(config.position, 0)

        config = dfa_step(self.dfa, config)
        self.assertEqual((config.state, config.position), ('q1', 1))

        config = dfa_step(self.dfa, config)
        self.assertEqual((config.state, config.position), ('q3', 2))
        self.assertFalse(config.halted)

        config = dfa_step(self.dfa, config)
        self.assertTrue(config.halted)
        self.assertFalse(config.accepted)

        # Halted configurations are fixed points
        self.assertEqual(dfa_step(self.dfa, config), config)

    def test_repeated_runs_agree(self):
        for input_string in ['', '1', '0110', '111000', '0101011']:
            self.assertEqual(dfa_run(self.dfa, input_string), dfa_run(self.dfa, input_string))

    def test_configuration_dict_round_trip(self):
        config = dfa_step(self.dfa, dfa_step(self.dfa, dfa_reset(self.dfa, '011')))
        self.assertEqual(dfa_configuration_from_dict(config.to_dict()), config)

    def test_engine_dispatch(self):
        self.assertTrue(engines.run(self.dfa, '1100').accepted)
        self.assertTrue(engines.accepts(self.dfa, '1111'))
        self.assertFalse(engines.accepts(self.dfa, '1'))


class TestNfaSimulation(TestCase):
    def setUp(self):
        self.nfa = load(ENDS_WITH_AB_NFA, 'nfa')

    def test_ends_with_ab(self):
        self.assertTrue(nfa_run(self.nfa, 'aab').accepted)
        self.assertTrue(nfa_run(self.nfa, 'ab').accepted)
        self.assertTrue(nfa_run(self.nfa, 'babab').accepted)
        self.assertFalse(nfa_run(self.nfa, 'aba').accepted)
        self.assertFalse(nfa_run(self.nfa, '').accepted)
        self.assertFalse(nfa_run(self.nfa, 'b').accepted)

    def test_epsilon_closure(self):
        self.assertEqual(epsilon_closure(self.nfa, 'q0'), frozenset({'q0'}))
        self.assertEqual(epsilon_closure(self.nfa, 'q1'), frozenset({'q0', 'q1'}))
        self.assertEqual(epsilon_closure(self.nfa, ['q2']), frozenset({'q0', 'q2'}))

    def test_epsilon_closure_is_idempotent(self):
        for states in [{'q0'}, {'q1'}, {'q2'}, {'q1', 'q2'}, set()]:
            closure = epsilon_closure(self.nfa, states)
            self.assertEqual(epsilon_closure(self.nfa, closure), closure)

    def test_epsilon_cycle(self):
        nfa = load({
            'nodes': [
                node('q0', [edge('q1', 'ε')]),
                node('q1', [edge('q2', 'ε')]),
                node('q2', [edge('q0', 'ε'), edge('q3', 'a')]),
                node('q3'),
            ],
            'finalStates': ['q3'],
            'allowEpsilon': True,
        }, 'nfa')
        self.assertEqual(epsilon_closure(nfa, 'q0'), frozenset({'q0', 'q1', 'q2'}))
        self.assertTrue(nfa_run(nfa, 'a').accepted)
        self.assertFalse(nfa_run(nfa, 'aa').accepted)

    def test_move(self):
        self.assertEqual(nfa_move(self.nfa, {'q0'}, 'a'), frozenset({'q0', 'q1'}))
        self.assertEqual(nfa_move(self.nfa, {'q0', 'q1'}, 'b'), frozenset({'q0', 'q2'}))

    def test_stepwise_state_sets(self):
        config = nfa_reset(self.nfa, 'ab')
        self.assertEqual(config.states, frozenset({'q0'}))

        config = nfa_step(self.nfa, config)
        self.assertEqual(config.states, frozenset({'q0', 'q1'}))

        config = nfa_step(self.nfa, config)
        self.assertEqual(config.states, frozenset({'q0', 'q2'}))

        config = nfa_step(self.nfa, config)
        self.assertTrue(config.halted)
        self.assertTrue(config.accepted)
        self.assertEqual(len(config.history), 3)

    def test_dead_branches_halt_early(self):
        nfa = load({'nodes': [node('q0', [edge('q1', 'a')]), node('q1')], 'finalStates': ['q1']}, 'nfa')
        config = nfa_run(nfa, 'bab').final_config
        self.assertTrue(config.halted)
        self.assertFalse(config.accepted)
        self.assertEqual(config.states, frozenset())
        self.assertEqual(config.position, 1)

    def test_empty_label_is_epsilon(self):
        nfa = load({
            'nodes': [node('q0', [edge('q1', '')]), node('q1')],
            'finalStates': ['q1'],
            'allowEpsilon': True,
        }, 'nfa')
        self.assertTrue(nfa_run(nfa, '').accepted)

    def test_configuration_dict_round_trip(self):
        config = nfa_step(self.nfa, nfa_reset(self.nfa, 'aab'))
        data = config.to_dict()
        self.assertEqual(data['states'], ['q0', 'q1'])
        self.assertEqual(nfa_configuration_from_dict(data), config)
