"""Exception types raised by the transposition engine."""


class TransposerError(Exception):
    """Base class for every error raised by transchord."""


class NotAChordError(TransposerError, ValueError):
    """A token presented for parsing does not match the chord grammar."""

    def __init__(self, token: str, grammar: str = "chord") -> None:
        self.token = token
        super().__init__(f"{token!r} is not a valid {grammar}")


class NoChordsFoundError(TransposerError):
    """The text holds no recognisable chord to transpose or guess a key from."""

    def __init__(self, message: str = "text has no chords") -> None:
        super().__init__(message)


class InvalidKeyError(TransposerError, ValueError):
    """A key name does not resolve to any known key signature."""

    def __init__(self, name: str, reason: str = "") -> None:
        self.name = name
        message = f"{name!r} is not a valid key signature"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidSourceKeyError(InvalidKeyError):
    """The key to transpose from cannot be resolved."""


class InvalidTargetKeyError(InvalidKeyError):
    """The key to transpose to cannot be resolved."""


class UnmappableChordError(TransposerError, LookupError):
    """A chord root or bass has no entry in the transposition map."""

    def __init__(self, chord: str, identifier: str) -> None:
        self.chord = chord
        self.identifier = identifier
        super().__init__(f"cannot transpose {chord!r}: no mapping for {identifier!r}")
