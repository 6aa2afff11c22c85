"""
Short Key Codec

Converts the store's sequence numbers into short keys and back.

Design Decisions:
- Base58, Flickr alphabet: digits 1-9, then lowercase, then uppercase,
  leaving out 0, O, I and l so keys can be read back and typed by hand
- No padding: key length grows with the counter (1 char up to 57,
  2 chars up to 3363, ...)
- Pure functions, no state; the store owns the counter

Example:
    encode_key(0)    -> "1"
    encode_key(1000) -> "if"
    decode_key("if") -> 1000
"""

from urlcutter.core.exceptions import EncodeError

BASE58_CHARS = "123456789abcdefghijkmnopqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ"
BASE58_LENGTH = len(BASE58_CHARS)
BASE58_INDEX = {char: index for index, char in enumerate(BASE58_CHARS)}

# Reserved stride for the counter before encoding (58 ** 2). Not applied:
# issued keys encode the raw sequence number.
KEY_SHIFT_AMOUNT = 3364


def encode_key(number: int) -> str:
    """
    Encode a non-negative integer as a base58 short key.

    Args:
        number: Sequence number handed out by the store

    Returns:
        Base58 encoded key

    Raises:
        EncodeError: If number is negative or not an integer
    """
    if isinstance(number, bool) or not isinstance(number, int):
        raise EncodeError(number, reason="Short keys encode integers only")
    if number < 0:
        raise EncodeError(number, reason="Short keys encode non-negative integers only")

    if number == 0:
        return BASE58_CHARS[0]

    digits = []
    while number > 0:
        number, remainder = divmod(number, BASE58_LENGTH)
        digits.append(BASE58_CHARS[remainder])

    return ''.join(reversed(digits))


def decode_key(key: str) -> int:
    """
    Decode a base58 short key back to its sequence number.

    Raises:
        EncodeError: If key is empty or contains characters outside the alphabet
    """
    if not key:
        raise EncodeError(key, reason="Empty short key")

    number = 0
    for char in key:
        try:
            number = number * BASE58_LENGTH + BASE58_INDEX[char]
        except KeyError:
            raise EncodeError(key, reason=f"Invalid base58 character {char!r}") from None
    return number
