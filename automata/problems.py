"""
Bundled practice problems.

Acceptor problems (DFA, NFA, PDA, TM) list strings that a correct machine
must accept and reject. Moore/Mealy problems list input strings with the
output a correct machine produces for them.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from .batch import BatchResult, OutputBatchResult, batch_test, output_batch_test
from .graph import Automaton, MachineKind

logger = logging.getLogger(__name__)

PROBLEM_SET_NAMES = ('dfa', 'nfa', 'pda', 'fsm', 'tm')


@dataclass(frozen=True)
class Problem:
    id: str
    title: str
    description: str
    difficulty: str
    kind: MachineKind
    accept: Tuple[str, ...] = ()
    reject: Tuple[str, ...] = ()
    test_strings: Tuple[Tuple[str, str], ...] = ()
    tape_count: int = 1

    def to_dict(self, include_answers: bool = False) -> Dict:
        """
        JSON-ready description of the problem.

        The test strings are left out unless include_answers is set, so a
        problem can be shown without giving away the expected verdicts.
        """
        data = {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'difficulty': self.difficulty,
            'type': self.kind.value,
        }
        if self.kind == MachineKind.TM:
            data['tapeCount'] = self.tape_count
        if include_answers:
            if self.kind.is_transducer:
                data['testStrings'] = [
                    {'input': string, 'expectedOutput': output} for string, output in self.test_strings
                ]
            else:
                data['accept'] = list(self.accept)
                data['reject'] = list(self.reject)
        return data


_PROBLEMS: Dict[str, List[Problem]] = {
    'dfa': [
        Problem(
            'dfa-endswith-ab', 'Strings ending with "ab"',
            'Construct a DFA that accepts all strings over {a,b} that end with "ab".',
            'Easy', MachineKind.DFA,
            accept=('ab', 'aab', 'bab', 'ababab', 'bbab'),
            reject=('a', 'b', 'ba', 'aba', 'abb', 'bba'),
        ),
        Problem(
            'dfa-startswith-aa', 'Strings starting with "aa"',
            'Construct a DFA that accepts all strings over {a,b} that start with "aa".',
            'Easy', MachineKind.DFA,
            accept=('aa', 'aaa', 'aab', 'aaba', 'aabb', 'aabbb'),
            reject=('a', 'ab', 'ba', 'baa', 'bab', 'bba'),
        ),
        Problem(
            'dfa-contains-aab', 'Strings containing "aab"',
            'Construct a DFA that accepts all strings over {a,b} that contain the substring "aab".',
            'Medium', MachineKind.DFA,
            accept=('aab', 'aaab', 'aabb', 'baab', 'aabaab'),
            reject=('a', 'b', 'aa', 'ab', 'aba', 'baa', 'bba'),
        ),
        Problem(
            'dfa-even-as-odd-bs', "Strings with even a's and odd b's",
            "Construct a DFA that accepts strings over {a,b} with an even number of a's "
            "and an odd number of b's.",
            'Medium', MachineKind.DFA,
            accept=('b', 'bbb', 'aab', 'aabbb', 'ababbbb', 'aaaabbb'),
            reject=('', 'a', 'aa', 'bb', 'aabb', 'ba', 'abab', 'aaa'),
        ),
        Problem(
            'dfa-divisible-by-3', 'Binary numbers divisible by 3',
            'Construct a DFA that accepts binary strings whose value is divisible by 3. '
            'The leftmost bit is the most significant.',
            'Hard', MachineKind.DFA,
            accept=('0', '11', '110', '1001', '1100'),
            reject=('1', '10', '100', '101', '111', '1000'),
        ),
    ],
    'nfa': [
        Problem(
            'nfa-contains-ab', 'Strings containing "ab"',
            'Construct an NFA that accepts all strings over {a,b} that contain the substring "ab".',
            'Easy', MachineKind.NFA,
            accept=('ab', 'aab', 'abb', 'abab', 'baab', 'bab'),
            reject=('a', 'b', 'aa', 'bb', 'ba', 'bba'),
        ),
        Problem(
            'nfa-starts-a-ends-b', 'Strings starting with "a" and ending with "b"',
            'Construct an NFA that accepts all strings over {a,b} that start with "a" and end with "b".',
            'Easy', MachineKind.NFA,
            accept=('ab', 'aab', 'abb', 'abab', 'aabbb', 'aaabbb'),
            reject=('a', 'b', 'ba', 'bba', 'aba', 'aaba'),
        ),
        Problem(
            'nfa-even-as-or-even-bs', 'Strings with an even number of "a"s or an even number of "b"s',
            'Construct an NFA that accepts strings over {a,b} with an even number of "a"s '
            'or an even number of "b"s.',
            'Medium', MachineKind.NFA,
            accept=('', 'a', 'b', 'aa', 'bb', 'aab', 'aabb', 'abab', 'aabbaa', 'bbaba'),
            reject=('ab', 'ba', 'aaab', 'abbb', 'aaabbb'),
        ),
        Problem(
            'nfa-end-with-aab', 'Strings ending with "aab"',
            'Construct an NFA that accepts all strings over {a,b} that end with "aab".',
            'Easy', MachineKind.NFA,
            accept=('aab', 'aaab', 'baab', 'aaaab', 'bbaab'),
            reject=('a', 'b', 'aa', 'ab', 'ba', 'bb', 'aba', 'abb'),
        ),
        Problem(
            'nfa-divisible-by-3', 'Binary numbers divisible by 3',
            'Construct an NFA that accepts binary strings whose value is divisible by 3. '
            'The empty string counts as 0.',
            'Hard', MachineKind.NFA,
            accept=('', '11', '110', '1001', '1100', '1111'),
            reject=('1', '10', '100', '101', '111', '1000'),
        ),
    ],
    'pda': [
        Problem(
            'pda-palindromes', 'Palindromes',
            'Construct a PDA that accepts palindromes over {a,b}.',
            'Medium', MachineKind.PDA,
            accept=('', 'a', 'b', 'aa', 'bb', 'aba', 'bab', 'abba', 'baab', 'ababa'),
            reject=('ab', 'ba', 'aab', 'abb', 'baa', 'bba', 'aabba'),
        ),
        Problem(
            'pda-equal-as-bs', "Equal number of a's and b's",
            "Construct a PDA that accepts strings over {a,b} with as many a's as b's.",
            'Easy', MachineKind.PDA,
            accept=('', 'ab', 'ba', 'aabb', 'abab', 'baba', 'baab', 'aaabbb'),
            reject=('a', 'b', 'aa', 'bb', 'aab', 'abb', 'aaabb'),
        ),
        Problem(
            'pda-a-power-n-b-power-n', 'a^n b^n',
            "Construct a PDA that accepts a^n b^n for n >= 0: n a's followed by exactly n b's.",
            'Easy', MachineKind.PDA,
            accept=('', 'ab', 'aabb', 'aaabbb', 'aaaabbbb'),
            reject=('a', 'b', 'ba', 'aab', 'abb', 'abab', 'baba'),
        ),
        Problem(
            'pda-a-power-n-b-power-2n', 'a^n b^2n',
            "Construct a PDA that accepts a^n b^2n for n >= 0: n a's followed by exactly 2n b's.",
            'Medium', MachineKind.PDA,
            accept=('', 'abb', 'aabbbb', 'aaabbbbbb'),
            reject=('a', 'b', 'ab', 'ba', 'aab', 'abbb', 'aabbb'),
        ),
        Problem(
            'pda-not-palindromes', 'Non-palindromes',
            'Construct a PDA that accepts strings over {a,b} that are not palindromes.',
            'Hard', MachineKind.PDA,
            accept=('ab', 'ba', 'aab', 'abb', 'baa', 'bba', 'aabba'),
            reject=('', 'a', 'b', 'aa', 'bb', 'aba', 'bab', 'abba', 'baab'),
        ),
        Problem(
            'pda-a-power-i-b-power-j-i-greater-j', 'a^i b^j where i > j',
            "Construct a PDA that accepts a^i b^j with i > j >= 0.",
            'Medium', MachineKind.PDA,
            accept=('a', 'aa', 'aaa', 'aab', 'aaab', 'aaaabb'),
            reject=('', 'b', 'ab', 'abb', 'aabb', 'aaabbb'),
        ),
    ],
    'fsm': [
        Problem(
            'moore-binary-divisible-by-3', 'Binary remainder (Moore machine)',
            'Design a Moore machine that reads a binary number from left to right and, after each '
            'digit, outputs the remainder (0, 1 or 2) of the number read so far divided by 3.',
            'Medium', MachineKind.MOORE,
            test_strings=(
                ('0', '0'),
                ('1', '1'),
                ('10', '12'),
                ('11', '10'),
                ('100', '121'),
                ('101', '122'),
                ('110', '100'),
                ('111', '101'),
                ('1000', '1212'),
                ('1001', '1210'),
                ('1010', '1221'),
            ),
        ),
        Problem(
            'mealy-double-zero', 'Double zero (Mealy machine)',
            'Design a Mealy machine that outputs 1 when the current input symbol and the one '
            'before it are both 0, and outputs 0 otherwise.',
            'Easy', MachineKind.MEALY,
            test_strings=(
                ('1010', '0000'),
                ('1100', '0001'),
                ('0101', '0000'),
                ('0011', '0100'),
                ('00000', '01111'),
                ('10001', '00110'),
                ('00100', '01001'),
                ('11001100', '00010001'),
            ),
        ),
    ],
    'tm': [
        Problem(
            'tm-binary-palindrome', 'Binary palindrome',
            'Create a Turing machine that accepts binary palindromes.',
            'Medium', MachineKind.TM,
            accept=('', '0', '1', '00', '11', '101', '010', '1001', '1111', '10101', '11011'),
            reject=('10', '01', '100', '001', '1010', '0101', '10011'),
        ),
        Problem(
            'tm-equal-ones-zeros', 'Equal 0s and 1s',
            'Build a Turing machine that accepts binary strings with as many 0s as 1s.',
            'Medium', MachineKind.TM,
            accept=('', '01', '10', '0011', '0101', '1010', '1100', '001011', '010101'),
            reject=('0', '1', '00', '11', '001', '100', '0001', '1110'),
        ),
        Problem(
            'tm-copy-language', 'Copy language',
            'Create a Turing machine that accepts strings of the form ww, where w is any string over {a,b}.',
            'Hard', MachineKind.TM,
            accept=('', 'aa', 'bb', 'abab', 'baba', 'abbaabba'),
            reject=('a', 'b', 'ab', 'ba', 'aab', 'abb', 'aaba', 'abaa'),
        ),
        Problem(
            'tm-divisible-by-three', 'Binary divisible by 3',
            'Build a Turing machine that accepts binary strings whose value is divisible by 3.',
            'Medium', MachineKind.TM,
            accept=('0', '11', '110', '1001', '1100', '1111'),
            reject=('1', '10', '100', '101', '111', '1000', '1010'),
        ),
        Problem(
            'tm-copy-to-second-tape', 'Copy to a second tape',
            'Build a two-tape Turing machine that accepts strings over {a,b} after copying '
            'them onto the second tape. Every string over {a,b} is accepted.',
            'Easy', MachineKind.TM,
            accept=('', 'a', 'b', 'ab', 'abba'),
            reject=('c', 'abc'),
            tape_count=2,
        ),
    ],
}


def _problem_set_name(kind: Union[str, MachineKind]) -> str:
    name = kind.value if isinstance(kind, MachineKind) else str(kind).strip().lower()
    if name in ('moore', 'mealy'):
        return 'fsm'
    if name not in PROBLEM_SET_NAMES:
        raise ValueError(f'Unknown problem set: {kind!r}')
    return name


def list_problems(kind: Union[str, MachineKind]) -> List[Dict]:
    """
    Problems for a machine class, without their test strings.

    'fsm' lists both Moore and Mealy problems; 'moore' or 'mealy' list only
    that class.
    """
    problems = _PROBLEMS[_problem_set_name(kind)]
    if isinstance(kind, MachineKind) or str(kind).strip().lower() in ('moore', 'mealy'):
        wanted = MachineKind.from_name(kind)
        problems = [problem for problem in problems if problem.kind == wanted]
    return [problem.to_dict() for problem in problems]


def get_problem(kind: Union[str, MachineKind], problem_id: str) -> Optional[Problem]:
    for problem in _PROBLEMS[_problem_set_name(kind)]:
        if problem.id == problem_id:
            return problem
    return None


def check_solution(automaton: Automaton, problem: Problem) -> Union[BatchResult, OutputBatchResult]:
    """
    Run a candidate machine against a problem's test strings.

    Args:
        automaton: A validated automaton of the problem's machine class
        problem: The problem being solved

    Returns:
        BatchResult for acceptor problems, OutputBatchResult for Moore/Mealy problems

    Raises:
        ValueError: If the automaton is of a different machine class or tape count
    """
    if automaton.kind != problem.kind:
        raise ValueError(
            f"Problem '{problem.id}' needs a {problem.kind.name} machine, got {automaton.kind.name}"
        )
    if problem.kind == MachineKind.TM and automaton.tape_count != problem.tape_count:
        raise ValueError(
            f"Problem '{problem.id}' needs a {problem.tape_count}-tape machine, "
            f"got {automaton.tape_count} tapes"
        )

    logger.debug('Checking solution for problem %s', problem.id)

    if problem.kind.is_transducer:
        cases = [{'input': string, 'expectedOutput': output} for string, output in problem.test_strings]
        return output_batch_test(automaton, cases)

    return batch_test(automaton, problem.accept, problem.reject)
