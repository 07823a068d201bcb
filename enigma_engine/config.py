"""
Validation of the configuration payload sent with every encryption request:

    {
        "rotors": [{"name": "I", "position": "A", "ring": "A"}, ... three entries, left to right],
        "reflector": "B",
        "plugboard_pairs": "AV BS CG",
    }
"""
import collections.abc
import dataclasses
import logging
import re

from enigma_engine import catalog
from enigma_engine.enigma import N_LETTERS, Plugboard, letter_to_number, number_to_letter
from enigma_engine.errors import DuplicateRotor, InvalidConfig, InvalidPlugboard, InvalidSetting

logger = logging.getLogger(__name__)

N_ROTORS = 3
_PLUG_SEPARATORS = re.compile(r'[\s,]+')


@dataclasses.dataclass(frozen=True)
class RotorSetting:
    name: str
    position: int = 0
    ring: int = 0

    def __post_init__(self):
        # store the catalog spelling, e.g. 'iii' -> 'III'
        object.__setattr__(self, 'name', catalog.get_rotor(self.name).name)
        for what, value in (('position', self.position), ('ring setting', self.ring)):
            if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value < N_LETTERS:
                raise InvalidSetting(f'{what} of rotor {self.name} must be in 0..{N_LETTERS - 1}, got {value!r}')

    def __str__(self):
        return f'{self.name}:{number_to_letter(self.position)}/{number_to_letter(self.ring)}'


@dataclasses.dataclass(frozen=True)
class MachineConfig:
    """Checks itself on construction, so a hand-built config is as safe as one from validate_config."""
    rotors: tuple  # RotorSettings, left to right
    reflector: str
    plugboard_pairs: tuple = ()

    def __post_init__(self):
        try:
            rotors = tuple(self.rotors)
        except TypeError:
            raise InvalidConfig(f'a machine needs {N_ROTORS} RotorSettings, got {self.rotors!r}') from None
        if len(rotors) != N_ROTORS or not all(isinstance(r, RotorSetting) for r in rotors):
            raise InvalidConfig(f'a machine needs {N_ROTORS} RotorSettings, got {self.rotors!r}')
        names = [r.name for r in rotors]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise DuplicateRotor(f'rotor {", ".join(duplicates)} can only be mounted once')

        object.__setattr__(self, 'rotors', rotors)
        object.__setattr__(self, 'reflector', catalog.get_reflector(self.reflector).name)
        object.__setattr__(self, 'plugboard_pairs', Plugboard(self.plugboard_pairs or ()).pairs)


def parse_plugboard_pairs(text) -> tuple:
    """
    'AB CD,EF' -> (('A', 'B'), ('C', 'D'), ('E', 'F'))
    An empty string or None means no plugs.
    """
    if text is None:
        return ()
    if not isinstance(text, str):
        raise InvalidPlugboard(f'plugboard pairs must be given as a string, got {text!r}')

    tokens = [token for token in _PLUG_SEPARATORS.split(text.strip()) if token]
    for token in tokens:
        if len(token) != 2:
            raise InvalidPlugboard(f'plug {token!r} must be exactly two letters')
    # the board itself rejects reused letters, self connections and too many plugs
    return Plugboard(tokens).pairs


def _parse_letter(value, what: str) -> int:
    if not isinstance(value, str) or len(value) != 1:
        raise InvalidSetting(f'{what} must be a single letter A-Z, got {value!r}')
    try:
        return letter_to_number(value)
    except InvalidSetting:
        raise InvalidSetting(f'{what} must be a single letter A-Z, got {value!r}') from None


def _validate_rotor(raw) -> RotorSetting:
    if not isinstance(raw, collections.abc.Mapping):
        raise InvalidConfig(f'rotor settings must be a mapping with name, position and ring, got {raw!r}')
    for key in ('name', 'position'):
        if key not in raw:
            raise InvalidConfig(f'rotor setting {dict(raw)!r} lacks {key!r}')

    rotor = catalog.get_rotor(raw['name'])
    position = _parse_letter(raw['position'], f'position of rotor {rotor.name}')
    # the ring setting is rarely changed and defaults to A
    ring = _parse_letter(raw.get('ring', 'A'), f'ring setting of rotor {rotor.name}')
    return RotorSetting(rotor.name, position, ring)


def validate_config(raw) -> MachineConfig:
    if isinstance(raw, MachineConfig):
        return raw
    if not isinstance(raw, collections.abc.Mapping):
        raise InvalidConfig(f'configuration must be a mapping, got {type(raw).__name__}')

    raw_rotors = raw.get('rotors')
    if not isinstance(raw_rotors, collections.abc.Sequence) or isinstance(raw_rotors, str) \
            or len(raw_rotors) != N_ROTORS:
        raise InvalidConfig(f'configuration needs a list of {N_ROTORS} rotors, got {raw_rotors!r}')
    rotors = tuple(_validate_rotor(r) for r in raw_rotors)

    if 'reflector' not in raw:
        raise InvalidConfig('configuration lacks a reflector')
    reflector = catalog.get_reflector(raw['reflector'])

    config = MachineConfig(rotors, reflector.name, parse_plugboard_pairs(raw.get('plugboard_pairs', '')))
    logger.debug('valid configuration: rotors %s, reflector %s, %d plugs',
                 ' '.join(str(r) for r in rotors), config.reflector, len(config.plugboard_pairs))
    return config
