from django.test import TestCase, override_settings

from automata.conf import DEFAULTS, get_setting


class TestConf(TestCase):
    @override_settings(AUTOMATA_SIMULATOR={})
    def test_defaults(self):
        self.assertEqual(get_setting('TM_MAX_STEPS'), 1000)
        self.assertEqual(get_setting('PDA_MAX_CONFIGURATIONS'), DEFAULTS['PDA_MAX_CONFIGURATIONS'])
        self.assertEqual(get_setting('STACK_BOTTOM'), 'Z')

    @override_settings(AUTOMATA_SIMULATOR={'TM_MAX_STEPS': 25})
    def test_override(self):
        self.assertEqual(get_setting('TM_MAX_STEPS'), 25)
        self.assertEqual(get_setting('STACK_BOTTOM'), 'Z')

    def test_unknown_setting(self):
        with self.assertRaises(KeyError):
            get_setting('TAPE_LENGTH')
