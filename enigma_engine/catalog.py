"""
Rotors and reflectors of the Enigma I / M3 as issued to the German army and navy.
Both tables are read-only and built once at import.
"""
import types

from enigma_engine.enigma import Reflector, Rotor
from enigma_engine.errors import UnknownReflector, UnknownRotor

# name: (wiring, notches)
_ROTOR_DATA = {
    'I': ('EKMFLGDQVZNTOWYHXUSPAIBRCJ', 'Q'),
    'II': ('AJDKSIRUXBLHWTMCQGZNPYFVOE', 'E'),
    'III': ('BDFHJLCPRTXVZNYEIWGAKMUSQO', 'V'),
    'IV': ('ESOVPZJAYQUIRHXLNFTGKDCMWB', 'J'),
    'V': ('VZBRGITYUPSDNHLXAWMJQOFECK', 'Z'),
    'VI': ('JPGVOUMFYQBENHZRDKASXLICTW', 'ZM'),
    'VII': ('NZJHGRCXMYSWBOUFAIVLPEKQDT', 'ZM'),
    'VIII': ('FKQHTLXOCBJSPDZRAMEWNIUYGV', 'ZM'),
}

_REFLECTOR_DATA = {
    'A': 'EJMZALYXVBWFCRQUONTSPIKHGD',
    'B': 'YRUHQSLDPXNGOKMIEBFZCWVJAT',
    'C': 'FVPJIAOYEDRZXWGCTKUQSBNMHL',
}

ROTORS = types.MappingProxyType(
    {name: Rotor.from_wiring(name, wiring, notches) for name, (wiring, notches) in _ROTOR_DATA.items()})
REFLECTORS = types.MappingProxyType(
    {name: Reflector.from_wiring(name, wiring) for name, wiring in _REFLECTOR_DATA.items()})


def get_rotor(name: str) -> Rotor:
    try:
        return ROTORS[name.strip().upper()]
    except (KeyError, AttributeError):
        raise UnknownRotor(f'unknown rotor {name!r}, choose one of {", ".join(ROTORS)}') from None


def get_reflector(name: str) -> Reflector:
    try:
        return REFLECTORS[name.strip().upper()]
    except (KeyError, AttributeError):
        raise UnknownReflector(f'unknown reflector {name!r}, choose one of {", ".join(REFLECTORS)}') from None
