from __future__ import annotations

"""
Random Password Generator.

Draws every character from the operating system CSPRNG and guarantees that
each enabled character class is represented at least once.
"""

import logging
import secrets
import string
from typing import List

logger = logging.getLogger(__name__)

DEFAULT_LENGTH = 16
DEFAULT_SPECIAL = "!@#$%^&*()-_=+[]{};:,.?"
AMBIGUOUS_CHARS = "Il1O0o|`'\""


def generate_password(
        length: int = DEFAULT_LENGTH,
        *,
        use_upper: bool = True,
        use_lower: bool = True,
        use_digits: bool = True,
        use_special: bool = True,
        special_chars: str = DEFAULT_SPECIAL,
        exclude_ambiguous: bool = False,
) -> str:
    """
    Generate a random password.

    Args:
        length: Total number of characters.
        use_upper: Include A-Z.
        use_lower: Include a-z.
        use_digits: Include 0-9.
        use_special: Include characters from special_chars.
        special_chars: Alphabet used for the special class.
        exclude_ambiguous: Drop look-alike characters (I, l, 1, O, 0...).

    Returns:
        str: The generated password.

    Raises:
        ValueError: If no class is enabled, a class ends up empty, or the
                    length cannot hold one character of every class.
    """
    classes = _build_classes(
        use_upper, use_lower, use_digits, use_special, special_chars, exclude_ambiguous
    )
    if not classes:
        raise ValueError("At least one character class must be enabled.")
    if length < len(classes):
        raise ValueError(
            f"Password length {length} is too short for {len(classes)} required character classes."
        )

    # One guaranteed pick per class, the rest from the union
    chars: List[str] = [secrets.choice(alphabet) for alphabet in classes]
    pool = "".join(classes)
    chars.extend(secrets.choice(pool) for _ in range(length - len(classes)))

    secrets.SystemRandom().shuffle(chars)
    logger.debug(f"Generated password of length {length} from {len(classes)} classes.")
    return "".join(chars)


def _build_classes(
        use_upper: bool,
        use_lower: bool,
        use_digits: bool,
        use_special: bool,
        special_chars: str,
        exclude_ambiguous: bool,
) -> List[str]:
    """Assemble the enabled alphabets, deduplicated and optionally filtered."""
    selected = []
    if use_upper:
        selected.append(("upper", string.ascii_uppercase))
    if use_lower:
        selected.append(("lower", string.ascii_lowercase))
    if use_digits:
        selected.append(("digits", string.digits))
    if use_special:
        selected.append(("special", special_chars))

    classes: List[str] = []
    for name, alphabet in selected:
        unique = "".join(dict.fromkeys(alphabet))
        if exclude_ambiguous:
            unique = "".join(c for c in unique if c not in AMBIGUOUS_CHARS)
        if not unique:
            raise ValueError(f"Character class '{name}' is empty.")
        classes.append(unique)
    return classes
