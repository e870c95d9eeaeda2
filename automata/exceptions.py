class AutomatonError(Exception):
    """Base class for all errors raised by the automata core."""


class StructuralError(AutomatonError):
    """
    Raised when automaton JSON is malformed: invalid JSON text, a missing
    required field or a field of the wrong type.
    """

    def __init__(self, message: str, path: str = ''):
        self.message = message
        self.path = path
        super().__init__(f'{path}: {message}' if path else message)


# Name used by the serialization API
FormatError = StructuralError


class ValidationError(AutomatonError):
    """
    Raised by validate_or_raise when an automaton breaks a structural rule
    (dangling target, missing q0, non-determinism, missing output, ...).
    """

    def __init__(self, result):
        self.result = result
        super().__init__(result.first_error)
