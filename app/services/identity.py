from __future__ import annotations

import random
from typing import Optional

ID_ALPHABET = "0123456789abcdef"
ID_LENGTH = 16

_system_random = random.SystemRandom()


def new_id(rng: Optional[random.Random] = None) -> str:
    """Return an opaque 16-symbol hex token.

    Used for participant ids, record ids and secret keys. Not a security
    boundary: the default source is the OS generator, but any
    ``random.Random`` can be passed in to make tokens reproducible.
    """
    source = rng or _system_random
    return "".join(source.choice(ID_ALPHABET) for _ in range(ID_LENGTH))
