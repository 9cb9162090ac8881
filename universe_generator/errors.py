# universe_generator/errors.py

"""
Exception taxonomy for the universe generator.

All validation happens synchronously at the call site. Both concrete errors
also derive from ValueError so callers that only care about "bad argument"
can catch the builtin.
"""


class UniverseGeneratorError(Exception):
    """Base class for every error raised by this package."""


class InvalidRuleError(UniverseGeneratorError, ValueError):
    """An automaton rule outside [0, 255] or not an integer."""

    def __init__(self, rule):
        self.rule = rule
        super().__init__(f"Automaton rule must be an integer in [0, 255], got {rule!r}")

    def __reduce__(self):
        return (type(self), (self.rule,))


class InvalidDimensionError(UniverseGeneratorError, ValueError):
    """A zero, negative or otherwise unusable size argument."""

    def __init__(self, name: str, value, minimum=1):
        self.name = name
        self.value = value
        self.minimum = minimum
        super().__init__(f"'{name}' must be an integer >= {minimum}, got {value!r}")

    def __reduce__(self):
        # Worker processes send errors back pickled.
        return (type(self), (self.name, self.value, self.minimum))
