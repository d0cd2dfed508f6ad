"""Bottom encoding: every byte becomes a run of heart and hug emoji.

Each UTF-8 byte is written greedily with the largest symbols first and the
group is closed with a separator. A zero byte is written as a lone heart.
"""

SEPARATOR = "👉👈"

# Largest value first, the encoder relies on this order
CHARACTER_VALUES = (
    (200, "🫂"),
    (50, "💖"),
    (10, "✨"),
    (5, "🥺"),
    (1, ","),
)
ZERO = "❤️"

_VALUES_BY_SYMBOL = {symbol: value for value, symbol in CHARACTER_VALUES}


def encode_byte(value: int) -> str:
    if value == 0:
        return ZERO + SEPARATOR
    out = []
    for amount, symbol in CHARACTER_VALUES:
        while value >= amount:
            out.append(symbol)
            value -= amount
    return "".join(out) + SEPARATOR


def encode(text: str) -> str:
    return "".join(encode_byte(b) for b in text.encode("utf-8"))


def decode_group(group: str) -> int:
    if group == ZERO:
        return 0
    if not group:
        raise ValueError("Empty bottom group")
    value = 0
    for char in group:
        try:
            value += _VALUES_BY_SYMBOL[char]
        except KeyError:
            raise ValueError(f"Invalid bottom symbol: {char!r}") from None
    if value > 255:
        raise ValueError(f"Bottom group is out of byte range: {value}")
    return value


def decode(text: str) -> str:
    text = text.strip()
    if not text:
        return ""
    # The encoder always ends with a separator, tolerate input that dropped it
    groups = text.removesuffix(SEPARATOR).split(SEPARATOR)
    data = bytes(decode_group(group) for group in groups)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ValueError("Decoded bytes are not valid UTF-8") from e
