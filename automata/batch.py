import logging
from typing import Dict, Iterable, List, NamedTuple

from .engines import accepts
from .fsm_simulation import translate
from .graph import Automaton

logger = logging.getLogger(__name__)


class BatchResult(NamedTuple):
    """
    Result of running a machine over lists of strings.

    accept_results and reject_results hold one dict per string:
    {'string': str, 'accepted': bool, 'expected': bool}
    """
    passed: bool
    accept_results: List[Dict]
    reject_results: List[Dict]
    summary: str

    def to_dict(self) -> Dict:
        return {
            'passed': self.passed,
            'accept_results': self.accept_results,
            'reject_results': self.reject_results,
            'summary': self.summary,
        }


class OutputBatchResult(NamedTuple):
    """Result of comparing a Moore/Mealy machine's output against expected outputs."""
    passed: bool
    results: List[Dict]
    summary: str

    def to_dict(self) -> Dict:
        return {'passed': self.passed, 'results': self.results, 'summary': self.summary}


def batch_test(automaton: Automaton, accept_strings: Iterable[str], reject_strings: Iterable[str]) -> BatchResult:
    """
    Run the automaton once per string and compare against the expected verdicts.

    The batch passes iff every string in accept_strings is accepted and every
    string in reject_strings is rejected. Every mismatch is listed in summary.

    Args:
        automaton: A validated automaton of any class
        accept_strings: Strings that should be accepted
        reject_strings: Strings that should be rejected

    Returns:
        BatchResult
    """
    accept_results = [
        {'string': string, 'accepted': accepts(automaton, string), 'expected': True}
        for string in accept_strings
    ]
    reject_results = [
        {'string': string, 'accepted': accepts(automaton, string), 'expected': False}
        for string in reject_strings
    ]

    failures = []
    for result in accept_results:
        if not result['accepted']:
            failures.append(f"'{result['string']}' should be accepted but was rejected")
    for result in reject_results:
        if result['accepted']:
            failures.append(f"'{result['string']}' should be rejected but was accepted")

    total = len(accept_results) + len(reject_results)
    summary = '\n'.join([f'{total - len(failures)}/{total} tests passed'] + failures)

    logger.debug('Batch test on %s: %d/%d passed', automaton.kind.name, total - len(failures), total)

    return BatchResult(not failures, accept_results, reject_results, summary)


def output_batch_test(automaton: Automaton, cases: Iterable[Dict]) -> OutputBatchResult:
    """
    Compare the output of a Moore/Mealy machine against expected outputs.

    Args:
        automaton: A validated Moore or Mealy machine
        cases: Dicts with 'input' and 'expectedOutput'

    Returns:
        OutputBatchResult with one entry per case
    """
    results = []
    for case in cases:
        actual = translate(automaton, case['input'])
        results.append({
            'input': case['input'],
            'expectedOutput': case['expectedOutput'],
            'actualOutput': actual,
            'passed': actual == case['expectedOutput'],
        })

    failures = [
        f"'{result['input']}' produced '{result['actualOutput']}', expected '{result['expectedOutput']}'"
        for result in results if not result['passed']
    ]
    summary = '\n'.join([f'{len(results) - len(failures)}/{len(results)} test cases passed'] + failures)

    return OutputBatchResult(not failures, results, summary)
