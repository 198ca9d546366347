"""AES-128 from first principles with avalanche-effect instrumentation."""

__version__ = "0.1.0"

from .errors import (
    AESError,
    InvalidBitPosition,
    InvalidBlockLength,
    InvalidKeyLength,
    KeyFileError,
)
from .gf_tables import inverse_substitute, mul_by, substitute
from .key_schedule import expand_key
from .cipher import decrypt_block, encrypt_block
from .avalanche import (
    AvalancheRecord,
    AvalancheTarget,
    count_changed_bits,
    flip_bit,
    run_avalanche_experiment,
)

__all__ = [
    "AESError",
    "InvalidBitPosition",
    "InvalidBlockLength",
    "InvalidKeyLength",
    "KeyFileError",
    "substitute",
    "inverse_substitute",
    "mul_by",
    "expand_key",
    "encrypt_block",
    "decrypt_block",
    "AvalancheRecord",
    "AvalancheTarget",
    "count_changed_bits",
    "flip_bit",
    "run_avalanche_experiment",
]
