import dataclasses
import logging
import string

import numpy as np

from enigma_engine.errors import InvalidConfig, InvalidPermutation, InvalidPlugboard, InvalidSetting

logger = logging.getLogger(__name__)

CHARSET = string.ascii_uppercase
N_LETTERS = len(CHARSET)
MAX_PLUG_PAIRS = N_LETTERS // 2

# lower case input is accepted and encoded like its upper case counterpart
_CHAR_TO_NUMBER = {char: i for i, char in enumerate(CHARSET)}
_CHAR_TO_NUMBER.update({char: i for i, char in enumerate(string.ascii_lowercase)})


def letter_to_number(char: str) -> int:
    try:
        return _CHAR_TO_NUMBER[char]
    except (KeyError, TypeError):
        raise InvalidSetting(f'{char!r} is not a letter A-Z') from None


def number_to_letter(number: int) -> str:
    return CHARSET[number]


class Permutation:
    """
    A bijection of the 26 letters, stored as two read-only lookup tables.
    """

    def __init__(self, targets):
        try:
            forward = np.array(targets)
        except ValueError as err:
            raise InvalidPermutation(f'cannot build a permutation from {targets!r}') from err
        if forward.shape != (N_LETTERS,) or not np.issubdtype(forward.dtype, np.integer):
            raise InvalidPermutation(f'a permutation needs exactly {N_LETTERS} integer targets, got {targets!r}')
        if not np.array_equal(np.sort(forward), np.arange(N_LETTERS)):
            raise InvalidPermutation(f'targets {forward.tolist()} are not a bijection of 0..{N_LETTERS - 1}')

        self._forward = forward.astype(np.int64)
        self._backward = np.argsort(self._forward)
        self._forward.flags.writeable = False
        self._backward.flags.writeable = False

    @classmethod
    def from_wiring(cls, wiring: str):
        """build from the letters that A, B, C, ... are wired to, e.g. 'EKMFLGDQVZNTOWYHXUSPAIBRCJ'"""
        if not isinstance(wiring, str) or any(char not in CHARSET for char in wiring):
            raise InvalidPermutation(f'wiring {wiring!r} must consist of upper case letters A-Z')
        return cls([_CHAR_TO_NUMBER[char] for char in wiring])

    @classmethod
    def identity(cls):
        return cls(range(N_LETTERS))

    def apply(self, input_: int) -> int:
        return int(self._forward[input_])

    def apply_inverse(self, input_: int) -> int:
        return int(self._backward[input_])

    def inverse(self) -> 'Permutation':
        return Permutation(self._backward)

    def compose(self, other: 'Permutation') -> 'Permutation':
        """the permutation that applies self first and other second"""
        return Permutation(other._forward[self._forward])

    @property
    def wiring(self) -> str:
        return ''.join(CHARSET[i] for i in self._forward)

    def __eq__(self, other):
        if not isinstance(other, Permutation):
            return NotImplemented
        return np.array_equal(self._forward, other._forward)

    def __hash__(self):
        return hash(self.wiring)

    def __repr__(self):
        return f'{type(self).__name__}({self.wiring!r})'


class InvolutivePermutation(Permutation):
    """
    A permutation that is its own inverse. Plugboard and reflector are wired this way,
    so the signal can take the same table in both directions.
    """

    def __init__(self, targets):
        super().__init__(targets)
        if not np.array_equal(self._forward, self._backward):
            raise InvalidPermutation(f'wiring {self.wiring} is not its own inverse')

    def apply_inverse(self, input_: int) -> int:
        return self.apply(input_)

    def fixed_points(self) -> list:
        return np.flatnonzero(self._forward == np.arange(N_LETTERS)).tolist()


@dataclasses.dataclass(frozen=True)
class Rotor:
    """
    The static part of a rotor: its wiring and the letters at which it carries the next rotor.
    Position and ring setting are passed in, so one Rotor can be shared by any number of machines.
    """
    name: str
    wiring: Permutation
    notches: frozenset

    @classmethod
    def from_wiring(cls, name: str, wiring: str, notches: str) -> 'Rotor':
        if any(char not in CHARSET for char in notches):
            raise InvalidSetting(f'notches {notches!r} of rotor {name} must be letters A-Z')
        return cls(name, Permutation.from_wiring(wiring), frozenset(_CHAR_TO_NUMBER[n] for n in notches))

    def forward(self, input_: int, position: int, ring: int) -> int:
        inner = (input_ + position - ring) % N_LETTERS
        return (self.wiring.apply(inner) - position + ring) % N_LETTERS

    def backward(self, input_: int, position: int, ring: int) -> int:
        inner = (input_ + position - ring) % N_LETTERS
        return (self.wiring.apply_inverse(inner) - position + ring) % N_LETTERS

    def is_at_notch(self, position: int) -> bool:
        return position in self.notches

    @staticmethod
    def step(position: int) -> int:
        return (position + 1) % N_LETTERS


class RotorState:
    """A rotor mounted in a machine: shared wiring plus its own position and ring setting."""

    def __init__(self, rotor: Rotor, position: int = 0, ring: int = 0):
        self.rotor = rotor
        self.position = position % N_LETTERS
        self._ring = ring % N_LETTERS

    @property
    def ring(self) -> int:
        return self._ring

    @property
    def letter(self) -> str:
        return CHARSET[self.position]

    def forward(self, input_: int) -> int:
        return self.rotor.forward(input_, self.position, self._ring)

    def backward(self, input_: int) -> int:
        return self.rotor.backward(input_, self.position, self._ring)

    def is_at_notch(self) -> bool:
        return self.rotor.is_at_notch(self.position)

    def step(self):
        self.position = self.rotor.step(self.position)

    def __repr__(self):
        return f'<RotorState {self.rotor.name} pos={self.letter} ring={CHARSET[self._ring]}>'


class Plugboard:
    def __init__(self, pairs=()):
        try:
            pairs = list(pairs)
        except TypeError:
            raise InvalidPlugboard(f'plugs must be given as a sequence of letter pairs, got {pairs!r}') from None
        if len(pairs) > MAX_PLUG_PAIRS:
            raise InvalidPlugboard(f'at most {MAX_PLUG_PAIRS} plugs fit the board, got {len(pairs)}')

        targets = list(range(N_LETTERS))
        used = set()
        normalised = []
        for pair in pairs:
            if isinstance(pair, str):
                pair = tuple(pair)
            if not isinstance(pair, (tuple, list)) or len(pair) != 2:
                raise InvalidPlugboard(f'plug {pair!r} must connect exactly two letters')
            first, second = (str(char).upper() for char in pair)
            for char in (first, second):
                if char not in _CHAR_TO_NUMBER:
                    raise InvalidPlugboard(f'{char!r} in plug {first}{second} is not a letter A-Z')
            if first == second:
                raise InvalidPlugboard(f'plug {first}{second} connects a letter to itself')
            for char in (first, second):
                if char in used:
                    raise InvalidPlugboard(f'letter {char} is plugged more than once')
            used.update((first, second))

            i, j = _CHAR_TO_NUMBER[first], _CHAR_TO_NUMBER[second]
            targets[i], targets[j] = j, i
            normalised.append((first, second))

        self.pairs = tuple(normalised)
        self._permutation = InvolutivePermutation(targets)

    def swap(self, input_: int) -> int:
        # the same on the way in and on the way out
        return self._permutation.apply(input_)

    def __repr__(self):
        return f"<Plugboard {' '.join(a + b for a, b in self.pairs)}>"


@dataclasses.dataclass(frozen=True)
class Reflector:
    name: str
    wiring: InvolutivePermutation

    def __post_init__(self):
        if not isinstance(self.wiring, InvolutivePermutation):
            raise InvalidPermutation(f'reflector {self.name} needs an involutive wiring')
        fixed = self.wiring.fixed_points()
        if fixed:
            letters = ''.join(CHARSET[i] for i in fixed)
            raise InvalidPermutation(f'reflector {self.name} maps {letters} to itself')

    @classmethod
    def from_wiring(cls, name: str, wiring: str) -> 'Reflector':
        return cls(name, InvolutivePermutation.from_wiring(wiring))

    def reflect(self, input_: int) -> int:
        return self.wiring.apply(input_)


@dataclasses.dataclass(frozen=True)
class PathEntry:
    component: str
    input_char: str
    output_char: str
    direction: str  # 'forward', 'reflect' or 'backward'


@dataclasses.dataclass(frozen=True)
class EncryptionStep:
    input_char: str
    output_char: str
    # (left, middle, right) rotor letters
    positions_before_step: tuple
    positions_after_step: tuple
    path: tuple


class Enigma:
    def __init__(self, rotors, plugboard: Plugboard, reflector: Reflector):
        """
        :param rotors: three RotorStates ordered left, middle, right. The right one is the fast rotor
        and is the first one the signal passes through.
        """
        rotors = list(rotors)
        if len(rotors) != 3:
            raise InvalidConfig(f'the machine takes exactly 3 rotors, got {len(rotors)}')
        self.rotors = rotors
        self.left, self.middle, self.right = rotors
        self.plug_board = plugboard
        self.reflector = reflector
        logger.debug('built machine %s %s %s', self.rotors, self.plug_board, self.reflector.name)

    @property
    def positions(self) -> tuple:
        return tuple(rot.letter for rot in self.rotors)

    def step_rotors(self):
        # both notches are read before anything turns. A middle rotor sitting on its own
        # notch takes the left rotor with it and moves again itself (double step)
        middle_at_notch = self.middle.is_at_notch()
        right_at_notch = self.right.is_at_notch()

        if middle_at_notch:
            self.middle.step()
            self.left.step()
        elif right_at_notch:
            self.middle.step()
        self.right.step()

    def encode_letter(self, number: int) -> int:
        self.step_rotors()

        number = self.plug_board.swap(number)
        number = self.right.forward(number)
        number = self.middle.forward(number)
        number = self.left.forward(number)
        number = self.reflector.reflect(number)
        number = self.left.backward(number)
        number = self.middle.backward(number)
        number = self.right.backward(number)
        return self.plug_board.swap(number)

    def encode_message(self, input_: str) -> str:
        output = []
        for char in input_:
            number = _CHAR_TO_NUMBER.get(char)
            if number is None:
                # not part of the cipher alphabet, no key press
                output.append(char)
            else:
                output.append(CHARSET[self.encode_letter(number)])
        return ''.join(output)

    def _signal_path(self) -> list:
        return [
            ('Plugboard', self.plug_board.swap, 'forward'),
            (f'Rotor {self.right.rotor.name}', self.right.forward, 'forward'),
            (f'Rotor {self.middle.rotor.name}', self.middle.forward, 'forward'),
            (f'Rotor {self.left.rotor.name}', self.left.forward, 'forward'),
            (f'Reflector {self.reflector.name}', self.reflector.reflect, 'reflect'),
            (f'Rotor {self.left.rotor.name}', self.left.backward, 'backward'),
            (f'Rotor {self.middle.rotor.name}', self.middle.backward, 'backward'),
            (f'Rotor {self.right.rotor.name}', self.right.backward, 'backward'),
            ('Plugboard', self.plug_board.swap, 'backward'),
        ]

    def encode_letter_detailed(self, char: str) -> EncryptionStep:
        number = letter_to_number(char)
        positions_before = self.positions
        self.step_rotors()
        positions_after = self.positions

        path = []
        for component, transform, direction in self._signal_path():
            output = transform(number)
            path.append(PathEntry(component, CHARSET[number], CHARSET[output], direction))
            number = output

        return EncryptionStep(char.upper(), CHARSET[number], positions_before, positions_after, tuple(path))

    def encode_message_detailed(self, input_: str) -> list:
        return [self.encode_letter_detailed(char) for char in input_ if char in _CHAR_TO_NUMBER]
