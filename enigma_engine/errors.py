class EnigmaError(ValueError):
    """Base class of every error raised while configuring or building a machine."""


class InvalidConfig(EnigmaError):
    """The configuration payload does not have the expected shape."""


class InvalidPermutation(EnigmaError):
    pass


class UnknownRotor(EnigmaError):
    pass


class UnknownReflector(EnigmaError):
    pass


class DuplicateRotor(EnigmaError):
    pass


class InvalidSetting(EnigmaError):
    """A rotor position or ring setting is not a single letter A-Z."""


class InvalidPlugboard(EnigmaError):
    pass
