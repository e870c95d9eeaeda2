from django.test import TestCase, override_settings

from automata import engines
from automata.labels import BLANK, TapeOperation
from automata.tests.fixtures import COPY_TM, ONLY_AS_TM, RUNAWAY_TM, edge, load, node
from automata.tm_simulation import (
    Tape,
    tm_configuration_from_dict,
    tm_reset,
    tm_run,
    tm_step,
)


class TestTape(TestCase):
    def test_read_blank_outside_input(self):
        tape = Tape.from_input('ab')
        self.assertEqual(tape.read(), 'a')
        self.assertEqual(Tape(tape.cells, 2).read(), BLANK)
        self.assertEqual(Tape(tape.cells, -3).read(), BLANK)

    def test_write_and_move(self):
        tape = Tape.from_input('ab')
        moved = tape.write_and_move(TapeOperation('a', 'x', 'L'))
        self.assertEqual(moved.head, -1)
        self.assertEqual(moved.contents(), 'xb')
        # write_and_move returns a new tape
        self.assertEqual(tape.contents(), 'ab')

    def test_writing_blank_clears_cell(self):
        tape = Tape.from_input('ab').write_and_move(TapeOperation('a', BLANK, 'R'))
        self.assertEqual(tape.cells, {1: 'b'})
        self.assertEqual(tape.contents(), 'b')

    def test_grows_to_the_left(self):
        tape = Tape({}, 0)
        for _ in range(3):
            tape = tape.write_and_move(TapeOperation(BLANK, '1', 'L'))
        self.assertEqual(tape.head, -3)
        self.assertEqual(tape.contents(), '111')
        self.assertEqual(tape.bounds(), (-3, 0))

    def test_dict_round_trip(self):
        tape = Tape.from_input('abc').write_and_move(TapeOperation('a', 'a', 'R'))
        data = tape.to_dict()
        self.assertEqual(data['window'], 'abc')
        self.assertEqual(Tape.from_dict(data), tape)


class TestTmSimulation(TestCase):
    def setUp(self):
        self.tm = load(ONLY_AS_TM, 'tm')

    def test_accepts_only_as(self):
        self.assertTrue(tm_run(self.tm, '').accepted)
        self.assertTrue(tm_run(self.tm, 'aaa').accepted)
        self.assertFalse(tm_run(self.tm, 'aab').accepted)
        self.assertFalse(tm_run(self.tm, 'c').accepted)

    def test_halts_on_reject_state(self):
        config = tm_run(self.tm, 'ab').final_config
        self.assertTrue(config.halted)
        self.assertFalse(config.accepted)
        self.assertEqual(config.state, 'qr')
        self.assertEqual(config.rejection_reason, "Reached reject state 'qr'")

    def test_halts_when_no_transition_matches(self):
        config = tm_run(self.tm, 'ac').final_config
        self.assertTrue(config.halted)
        self.assertFalse(config.accepted)
        self.assertEqual(config.rejection_reason, "No transition from state 'q0' reading 'c'")

    def test_start_state_can_be_final(self):
        tm = load({'nodes': [node('q0')], 'finalStates': ['q0']}, 'tm')
        config = tm_reset(tm, 'abc')
        self.assertTrue(config.halted)
        self.assertTrue(config.accepted)

    def test_stepwise(self):
        config = tm_reset(self.tm, 'a')
        self.assertEqual(config.read_symbols(), ('a',))

        config = tm_step(self.tm, config)
        self.assertEqual(config.state, 'q0')
        self.assertEqual(config.tapes[0].head, 1)
        self.assertEqual(config.read_symbols(), (BLANK,))
        self.assertEqual(config.step_count, 1)

        config = tm_step(self.tm, config)
        self.assertTrue(config.accepted)
        self.assertEqual(config.path, ('q0', 'q0', 'qa'))
        self.assertEqual(tm_step(self.tm, config), config)

    def test_two_tape_copy(self):
        tm = load(COPY_TM, 'tm')
        result = tm_run(tm, 'abba')
        self.assertTrue(result.accepted)
        self.assertEqual([tape.contents() for tape in result.final_config.tapes], ['abba', 'abba'])
        self.assertEqual(result.final_config.step_count, 5)

    def test_blank_aliases(self):
        tm = load({
            'nodes': [node('q0', [edge('q1', '□,1,S')]), node('q1')],
            'finalStates': ['q1'],
        }, 'tm')
        config = tm_run(tm, '').final_config
        self.assertTrue(config.accepted)
        self.assertEqual(config.tapes[0].contents(), '1')

    @override_settings(AUTOMATA_SIMULATOR={'TM_MAX_STEPS': 10})
    def test_step_limit(self):
        tm = load(RUNAWAY_TM, 'tm')
        result = tm_run(tm, '')
        self.assertFalse(result.accepted)
        self.assertEqual(result.final_config.step_count, 10)
        self.assertEqual(result.final_config.rejection_reason, 'Reached maximum step count')
        self.assertEqual(len(result.history), 12)

    def test_default_step_limit(self):
        result = tm_run(load(RUNAWAY_TM, 'tm'), '')
        self.assertTrue(result.final_config.halted)
        self.assertEqual(result.final_config.step_count, 1000)

    def test_configuration_dict_round_trip(self):
        tm = load(COPY_TM, 'tm')
        config = tm_step(tm, tm_step(tm, tm_reset(tm, 'ab')))
        self.assertEqual(tm_configuration_from_dict(config.to_dict()), config)

    def test_engine_dispatch(self):
        self.assertTrue(engines.accepts(self.tm, 'aa'))
        self.assertFalse(engines.accepts(self.tm, 'ba'))
