import random
from typing import Optional

MIN_LENGTH = 1
MAX_LENGTH = 2000
DEFAULT_LENGTH = 200

KEYSMASH_KEYS = "asdfghjkl;"
CAT_NOISES = ("nya", "mrrp", "mrow", "meow", "purr", "mew", "nyaa~")
ACTIONS = (
    "*tilts head*",
    "*nuzzles*",
    "*blushes*",
    "*pounces on you*",
    "*boops your nose*",
    "*sits on keyboard*",
    "*stares*",
)
FACES = (":3", "uwu", "owo", ">w<", "^w^", "OwO", "UwU", "x3", ">///<")


def keysmash(rng: random.Random) -> str:
    return "".join(rng.choice(KEYSMASH_KEYS) for _ in range(rng.randint(6, 15)))


def cat_noise(rng: random.Random) -> str:
    noise = rng.choice(CAT_NOISES)
    # Stretch the last vowel now and then, "nyaaaa"
    if noise[-1] in "aw" and rng.random() < 0.5:
        noise += noise[-1] * rng.randint(1, 4)
    return noise


def uwurandom(length: int = DEFAULT_LENGTH, rng: Optional[random.Random] = None) -> str:
    """Generates uwu nonsense no longer than `length` characters."""
    length = max(MIN_LENGTH, min(MAX_LENGTH, length))
    rng = rng or random.Random()
    generators = (
        keysmash,
        cat_noise,
        lambda r: r.choice(ACTIONS),
        lambda r: r.choice(FACES),
    )
    parts = []
    total = 0
    while total < length:
        part = rng.choice(generators)(rng)
        parts.append(part)
        total += len(part) + 1
    return " ".join(parts)[:length].rstrip()
