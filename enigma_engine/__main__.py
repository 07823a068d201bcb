"""
Encrypt (or, the machine being its own inverse, decrypt) text from the command line.

    python -m enigma_engine --rotors I II III --positions AAA "HELLO WORLD"
    python -m enigma_engine --config settings.json --detailed < message.txt
"""
import argparse
import dataclasses
import json
import logging
import pathlib
import sys

from enigma_engine.api import encrypt_detailed, encrypt_string
from enigma_engine.errors import EnigmaError

DEFAULT_CONFIG = {
    'rotors': [{'name': 'I', 'position': 'A', 'ring': 'A'},
               {'name': 'II', 'position': 'A', 'ring': 'A'},
               {'name': 'III', 'position': 'A', 'ring': 'A'}],
    'reflector': 'B',
    'plugboard_pairs': '',
}


def load_config(path) -> dict:
    return json.loads(pathlib.Path(path).read_text(encoding='utf-8'))


def config_from_args(args) -> dict:
    """start from the config file (or the default machine) and let single flags override it"""
    config = load_config(args.config) if args.config else json.loads(json.dumps(DEFAULT_CONFIG))
    if not isinstance(config, dict):
        raise SystemExit(f'configuration must be a JSON object, got {config!r}')
    rotors = config.get('rotors')

    if args.rotors is not None:
        old_rotors = rotors if isinstance(rotors, list) else []
        rotors = [{'name': name, 'position': 'A', 'ring': 'A'} for name in args.rotors]
        for new, old in zip(rotors, old_rotors):
            if isinstance(old, dict):
                new['position'] = old.get('position', 'A')
                new['ring'] = old.get('ring', 'A')
    for key, letters in (('position', args.positions), ('ring', args.rings)):
        if letters is None:
            continue
        if not isinstance(rotors, list) or len(letters) != len(rotors) \
                or not all(isinstance(rotor, dict) for rotor in rotors):
            raise SystemExit(f'--{key}s needs one letter per rotor, got {letters!r}')
        for rotor, letter in zip(rotors, letters):
            rotor[key] = letter
    config['rotors'] = rotors

    if args.reflector is not None:
        config['reflector'] = args.reflector
    if args.plugs is not None:
        config['plugboard_pairs'] = args.plugs
    return config


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog='enigma_engine', description=__doc__,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument('text', nargs='?', help='text to encrypt, read from stdin if omitted')
    parser.add_argument('--config', help='JSON file holding rotors, reflector and plugboard_pairs')
    parser.add_argument('--rotors', nargs=3, metavar='NAME', help='rotor names, left to right')
    parser.add_argument('--positions', help='start positions, e.g. AAA')
    parser.add_argument('--rings', help='ring settings, e.g. AAA')
    parser.add_argument('--reflector', help='A, B or C')
    parser.add_argument('--plugs', help='plugboard pairs, e.g. "AB CD EF"')
    parser.add_argument('--detailed', action='store_true', help='print the signal path of every letter as JSON')
    parser.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )

    try:
        config = config_from_args(args)
    except (OSError, json.JSONDecodeError) as err:
        sys.exit(f'Failed to load configuration: {err}')
    text = args.text if args.text is not None else sys.stdin.read().rstrip('\n')

    try:
        if args.detailed:
            steps = encrypt_detailed(config, text)
            print(json.dumps([dataclasses.asdict(step) for step in steps], indent=2))
        else:
            print(encrypt_string(config, text))
    except EnigmaError as err:
        sys.exit(f'Invalid configuration: {err}')


if __name__ == '__main__':
    main()
