"""Hash functions over raw byte keys."""

_MASK64 = (1 << 64) - 1


def djb2(key) -> int:
    """Return the 64-bit djb2 (xor variant) hash of ``key``.

    ``key`` may be a ``str`` (hashed as UTF-8) or any bytes-like object.
    Bytes are treated as signed chars, so values of 0x80 and above are
    sign-extended before being mixed in. An empty key hashes to 0.
    """
    if isinstance(key, str):
        data = key.encode("utf-8")
    else:
        data = bytes(memoryview(key))
    if not data:
        return 0

    value = 5381
    for byte in data:
        signed = byte - 256 if byte >= 0x80 else byte
        value = (((value << 5) + value) ^ (signed & _MASK64)) & _MASK64
    return value