# coding: utf-8
#
# Misc. utility functions for mimecodec.
#


def split_every(n, data):
    """
    Split a sequence (bytes or str) into chunks of at most n items.

    >>> split_every(3, b'abcdefgh')
    [b'abc', b'def', b'gh']
    >>> split_every(76, '')
    []
    """
    return [data[i:i + n] for i in range(0, len(data), n)]


def split_utf8_every(n, data):
    """
    Split UTF-8 encoded bytes into chunks of at most n bytes, never
    cutting a multi-byte sequence in half.

    >>> split_utf8_every(3, 'aõõ'.encode('utf-8'))
    [b'a\\xc3\\xb5', b'\\xc3\\xb5']
    """
    chunks = []
    pos = 0
    while pos < len(data):
        end = min(pos + n, len(data))
        # Back off while the next chunk would start with a continuation byte
        while end > pos and end < len(data) and 0x80 <= data[end] < 0xC0:
            end -= 1
        if end == pos:
            # Not UTF-8 after all, split where we were told to
            end = min(pos + n, len(data))
        chunks.append(bytes(data[pos:end]))
        pos = end
    return chunks


def string_to_bytes(text):
    """
    Convert a "binary string" (one character per byte) into bytes.
    Characters above 0xFF are truncated to their lowest 8 bits.

    >>> string_to_bytes('Tere\\xf5')
    b'Tere\\xf5'
    """
    return bytes(bytearray(ord(c) & 0xFF for c in text))


def bytes_to_string(data):
    """
    Map every byte to the character with the same code point.

    >>> bytes_to_string(b'a1\\xa6\\xff')
    'a1¦ÿ'
    """
    return bytes(data).decode('latin-1')


if __name__ == '__main__':
    import doctest
    import sys
    results = doctest.testmod(optionflags=doctest.ELLIPSIS)
    print('%s' % (results, ))
    if results.failed:
        sys.exit(1)
