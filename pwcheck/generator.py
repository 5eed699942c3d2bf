import secrets
import string

MIN_GENERATED_LENGTH = 4
MAX_GENERATED_LENGTH = 100

CHARACTER_SETS = {
    "lowercase": string.ascii_lowercase,
    "uppercase": string.ascii_uppercase,
    "numbers": string.digits,
    "symbols": "!@#$%^&*()_+-=[]{}|;:,.<>?~`",
}


def generate_secure_password(
    length=16,
    include_lowercase=True,
    include_uppercase=True,
    include_numbers=True,
    include_symbols=True,
):
    """Random password drawn with the ``secrets`` CSPRNG.

    Every selected class is guaranteed at least one character.
    """
    if isinstance(length, bool) or not isinstance(length, int):
        raise ValueError("length must be an integer")
    if not MIN_GENERATED_LENGTH <= length <= MAX_GENERATED_LENGTH:
        raise ValueError(
            f"length must be between {MIN_GENERATED_LENGTH} and {MAX_GENERATED_LENGTH}"
        )

    selected = [
        chars
        for chars, wanted in (
            (CHARACTER_SETS["lowercase"], include_lowercase),
            (CHARACTER_SETS["uppercase"], include_uppercase),
            (CHARACTER_SETS["numbers"], include_numbers),
            (CHARACTER_SETS["symbols"], include_symbols),
        )
        if wanted
    ]
    if not selected:
        raise ValueError("at least one character type must be included")

    alphabet = "".join(selected)
    chars = [secrets.choice(group) for group in selected]
    chars += [secrets.choice(alphabet) for _ in range(length - len(chars))]
    # shuffle so the guaranteed characters do not sit at the front
    for i in range(len(chars) - 1, 0, -1):
        j = secrets.randbelow(i + 1)
        chars[i], chars[j] = chars[j], chars[i]
    return "".join(chars)
