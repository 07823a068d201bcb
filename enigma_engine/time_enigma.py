import random
import time

import tqdm

from enigma_engine import encrypt_string
from enigma_engine.enigma import CHARSET

n_messages = 3000
chars_per_message = 256

config = {
    'rotors': [{'name': 'III', 'position': 'X', 'ring': 'V'},
               {'name': 'II', 'position': 'O', 'ring': 'M'},
               {'name': 'I', 'position': 'G', 'ring': 'B'}],
    'reflector': 'B',
    'plugboard_pairs': 'AV BS CG DL FU HZ IN KM OW RX',
}

if __name__ == '__main__':
    messages = [''.join(random.choices(CHARSET, k=chars_per_message)) for _ in range(n_messages)]
    tick = time.time()
    for message in tqdm.tqdm(messages):
        # a fresh machine per message, as every request gets
        encoded_message = encrypt_string(config, message)
    tock = time.time()

    avg_time = (tock - tick) / n_messages

    print(f'Average encoding time for message with {chars_per_message} characters: {avg_time:.2e} seconds')
