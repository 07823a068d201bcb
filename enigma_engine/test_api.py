import contextlib
import io
import json
import os
import tempfile
import unittest as ut

from enigma_engine import __main__ as cli
from enigma_engine import api
from enigma_engine.errors import DuplicateRotor, InvalidPlugboard, UnknownReflector


class EncryptStringTest(ut.TestCase):
    config = {
        'rotors': [{'name': 'III', 'position': 'X', 'ring': 'V'},
                   {'name': 'II', 'position': 'O', 'ring': 'M'},
                   {'name': 'I', 'position': 'G', 'ring': 'B'}],
        'reflector': 'B',
        'plugboard_pairs': 'AV BS CG DL FU HZ IN KM OW RX',
    }
    default_config = {
        'rotors': [{'name': 'I', 'position': 'A', 'ring': 'A'},
                   {'name': 'II', 'position': 'A', 'ring': 'A'},
                   {'name': 'III', 'position': 'A', 'ring': 'A'}],
        'reflector': 'B',
        'plugboard_pairs': '',
    }
    message = 'THEENIGMAMACHINEISACIPHERDEVICEDEVELOPEDANDUSEDINTHEEARLYTOMIDTWENTIETHCENTURY'

    def test_reference_output(self):
        self.assertEqual(api.encrypt_string(self.default_config, 'AAAAA'), 'BDZGO')
        self.assertEqual(api.encrypt_string(self.default_config, 'A'), 'B')

    def test_deterministic(self):
        first = api.encrypt_string(self.config, self.message)
        second = api.encrypt_string(self.config, self.message)
        self.assertEqual(first, second)

    def test_prefix_consistency(self):
        # the caller sends the whole text again after every key press
        full = api.encrypt_string(self.config, self.message)
        for i in range(len(self.message) + 1):
            self.assertEqual(api.encrypt_string(self.config, self.message[:i]), full[:i])

    def test_self_reciprocal(self):
        encrypted = api.encrypt_string(self.config, self.message)
        self.assertNotEqual(encrypted, self.message)
        self.assertEqual(api.encrypt_string(self.config, encrypted), self.message)

    def test_passthrough(self):
        with_space = api.encrypt_string(self.config, 'HELLO WORLD')
        without_space = api.encrypt_string(self.config, 'HELLOWORLD')
        self.assertEqual(len(with_space), len('HELLO WORLD'))
        self.assertEqual(with_space[5], ' ')
        self.assertEqual(with_space.replace(' ', ''), without_space)

    def test_output_length(self):
        text = 'Hello, World! 123 ÄÖÜ\n'
        encrypted = api.encrypt_string(self.config, text)
        self.assertEqual(len(encrypted), len(text))
        self.assertEqual(encrypted[5:7], ', ')
        self.assertEqual(encrypted[-9:], ' 123 ÄÖÜ\n')

    def test_validated_config_accepted(self):
        machine_config = api.validate_config(self.config)
        self.assertEqual(api.encrypt_string(machine_config, self.message), api.encrypt_string(self.config, self.message))

    def test_config_not_mutated(self):
        config = json.loads(json.dumps(self.config))
        api.encrypt_string(config, self.message)
        self.assertEqual(config, self.config)

    def test_validation_boundary(self):
        config = json.loads(json.dumps(self.default_config))
        config['rotors'][1]['name'] = 'I'
        with self.assertRaises(DuplicateRotor):
            api.encrypt_string(config, 'A')

        config = dict(self.default_config, plugboard_pairs='AB AC')
        with self.assertRaises(InvalidPlugboard):
            api.encrypt_string(config, 'A')

        config = dict(self.default_config, reflector='Z')
        with self.assertRaises(UnknownReflector):
            api.encrypt_string(config, 'A')

    def test_detailed(self):
        steps = api.encrypt_detailed(self.config, 'HELLO WORLD')
        self.assertEqual(len(steps), 10)
        self.assertEqual(''.join(step.output_char for step in steps), api.encrypt_string(self.config, 'HELLOWORLD'))
        self.assertEqual(steps[0].positions_before_step, ('X', 'O', 'G'))
        self.assertEqual(steps[0].positions_after_step, ('X', 'O', 'H'))


class CommandLineTest(ut.TestCase):
    def run_cli(self, argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            cli.main(argv)
        return out.getvalue()

    def test_default_machine(self):
        self.assertEqual(self.run_cli(['AAAAA']), 'BDZGO\n')

    def test_flags(self):
        out = self.run_cli(['--rotors', 'I', 'II', 'III', '--positions', 'AAA', '--rings', 'BBB', 'AAAAA'])
        self.assertEqual(out, 'EWTYX\n')

    def test_config_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'settings.json')
            with open(path, 'w') as file_:
                json.dump(EncryptStringTest.config, file_)
            out = self.run_cli(['--config', path, 'HELLO WORLD'])
        self.assertEqual(out, api.encrypt_string(EncryptStringTest.config, 'HELLO WORLD') + '\n')

    def test_detailed(self):
        out = json.loads(self.run_cli(['--detailed', 'A']))
        self.assertEqual(len(out), 1)
        self.assertEqual(out[0]['output_char'], 'B')
        self.assertEqual(len(out[0]['path']), 9)

    def test_invalid_configuration_exits(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_cli(['--rotors', 'I', 'I', 'III', 'A'])
        self.assertIn('can only be mounted once', str(ctx.exception.code))


if __name__ == '__main__':
    ut.main()
