from .probe import find_block_size, is_ecb_mode, probe_block_cipher, require_mode
from .prefix import find_ecb_prefix_len, find_prefix_len, ecb_guess_block_layout
from .known_prefix import find_ecb_suffix, find_ecb_suffix_with_prefix
from .cut_and_paste import craft_ecb_admin_token
from .bitflip import cbc_flip, craft_cbc_admin_token

__all__ = [
    'find_block_size', 'is_ecb_mode', 'probe_block_cipher', 'require_mode',
    'find_ecb_prefix_len', 'find_prefix_len', 'ecb_guess_block_layout',
    'find_ecb_suffix', 'find_ecb_suffix_with_prefix',
    'craft_ecb_admin_token', 'cbc_flip', 'craft_cbc_admin_token'
]
