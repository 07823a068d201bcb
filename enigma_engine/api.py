"""
The request boundary. Each call builds its own machine from the initial configuration, so
sending the whole text again after every key press always gives the same, growing ciphertext.
"""
import logging

from enigma_engine import catalog
from enigma_engine.config import MachineConfig, validate_config
from enigma_engine.enigma import Enigma, Plugboard, RotorState
from enigma_engine.errors import EnigmaError

logger = logging.getLogger(__name__)


def build_machine(config: MachineConfig) -> Enigma:
    rotors = [RotorState(catalog.get_rotor(setting.name), setting.position, setting.ring)
              for setting in config.rotors]
    return Enigma(rotors, Plugboard(config.plugboard_pairs), catalog.get_reflector(config.reflector))


def _machine_for_request(config) -> Enigma:
    try:
        return build_machine(validate_config(config))
    except EnigmaError as err:
        logger.info('rejected configuration: %s', err)
        raise


def encrypt_string(config, text: str) -> str:
    """
    :param config: raw configuration mapping or a validated MachineConfig
    :param text: letters are encrypted (lower case comes out upper case), everything else is copied as is
    """
    return _machine_for_request(config).encode_message(text)


def encrypt_detailed(config, text: str) -> list:
    """like encrypt_string, but returns one EncryptionStep per letter with the full signal path"""
    return _machine_for_request(config).encode_message_detailed(text)
