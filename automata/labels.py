from typing import NamedTuple, Optional, Tuple

EPSILON = 'ε'
BLANK = '□'
BLANK_ALIASES = ('□', '_')
HEAD_MOVES = ('L', 'R', 'S')


class LabelError(ValueError):
    """Raised when a transition label does not follow its machine's grammar."""


class SymbolLabel(NamedTuple):
    """DFA/NFA label: a single input symbol, or epsilon."""
    symbol: str

    @property
    def is_epsilon(self) -> bool:
        return self.symbol == EPSILON


class PDALabel(NamedTuple):
    """PDA label 'input,pop,push'. Any component may be epsilon."""
    input_symbol: str
    pop_symbol: str
    push_symbols: str

    @property
    def consumes_input(self) -> bool:
        return self.input_symbol != EPSILON

    @property
    def pops(self) -> bool:
        return self.pop_symbol != EPSILON

    @property
    def pushes(self) -> bool:
        return self.push_symbols != EPSILON


class FSMLabel(NamedTuple):
    """Moore/Mealy label. output_symbol is None for Moore transitions."""
    input_symbol: str
    output_symbol: Optional[str] = None


class TapeOperation(NamedTuple):
    read: str
    write: str
    move: str


class TMLabel(NamedTuple):
    """Multi-tape TM label 'r,w,m;r,w,m', one operation per tape."""
    operations: Tuple[TapeOperation, ...]

    @property
    def read_symbols(self) -> Tuple[str, ...]:
        return tuple(op.read for op in self.operations)


def is_epsilon(symbol: str) -> bool:
    # Older saved machines use the empty string for epsilon
    return symbol == EPSILON or symbol == ''


def normalise_blank(symbol: str) -> str:
    return BLANK if symbol in BLANK_ALIASES else symbol


def parse_symbol_label(label: str) -> SymbolLabel:
    """
    Parse a DFA/NFA label.

    Args:
        label: The raw label text

    Returns:
        SymbolLabel with the empty string normalised to epsilon
    """
    if not isinstance(label, str):
        raise LabelError('Label must be a string')

    symbol = label.strip()
    if is_epsilon(symbol):
        return SymbolLabel(EPSILON)

    if len(symbol) != 1:
        raise LabelError(f"Label '{label}' must be a single symbol")

    return SymbolLabel(symbol)


def parse_pda_label(label: str) -> PDALabel:
    """
    Parse a PDA label of the form 'inputSymbol,popSymbol,pushSymbols'.

    Each of the three fields must be non-empty or the literal epsilon.
    """
    if not isinstance(label, str):
        raise LabelError('Label must be a string')

    parts = [part.strip() for part in label.split(',')]
    if len(parts) != 3:
        raise LabelError(
            f"Invalid transition format '{label}'. "
            f"Format should be 'inputSymbol,popSymbol,pushSymbol'"
        )

    for part in parts:
        if part == '':
            raise LabelError(f"Invalid transition format '{label}': empty field (use {EPSILON})")

    input_symbol, pop_symbol, push_symbols = parts
    if input_symbol != EPSILON and len(input_symbol) != 1:
        raise LabelError(f"Invalid input symbol '{input_symbol}' in '{label}'")
    if pop_symbol != EPSILON and len(pop_symbol) != 1:
        raise LabelError(f"Invalid pop symbol '{pop_symbol}' in '{label}'")

    return PDALabel(input_symbol, pop_symbol, push_symbols)


def parse_tm_label(label: str) -> TMLabel:
    """
    Parse a TM label. Operations for each tape are separated by ';' and
    each operation is 'read,write,move'.

    Args:
        label: The raw label text, e.g. 'a,x,R' or '1,1,R;_,1,L'

    Returns:
        TMLabel with blank aliases ('_', '□') normalised
    """
    if not isinstance(label, str):
        raise LabelError('Label must be a string')

    operations = []
    for tape_part in label.split(';'):
        parts = [part.strip() for part in tape_part.split(',')]
        if len(parts) != 3:
            raise LabelError(
                f"Invalid transition format '{tape_part}'. "
                f"Format should be 'read,write,direction'"
            )

        read, write, move = parts
        if read == '' or write == '':
            raise LabelError(f"Invalid transition format '{tape_part}': empty symbol")

        move = move.upper()
        if move not in HEAD_MOVES:
            raise LabelError(f"Invalid direction '{parts[2]}'. Must be 'L', 'R', or 'S'")

        operations.append(TapeOperation(normalise_blank(read), normalise_blank(write), move))

    return TMLabel(tuple(operations))
