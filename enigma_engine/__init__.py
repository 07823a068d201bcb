from enigma_engine.api import build_machine, encrypt_detailed, encrypt_string
from enigma_engine.config import MachineConfig, RotorSetting, parse_plugboard_pairs, validate_config
from enigma_engine.errors import (DuplicateRotor, EnigmaError, InvalidConfig, InvalidPermutation, InvalidPlugboard,
                                  InvalidSetting, UnknownReflector, UnknownRotor)

__version__ = '0.1.0'
