# vim: set fileencoding=utf-8 :
#
# Quoted-printable content transfer encoding, RFC 2045 6.7
#
import re

from mimecodec.charset import convert, decode
from mimecodec.defaults import DEFAULT_CHARSET
from mimecodec.mailutils.linebreaks import add_soft_linebreaks
from mimecodec.util import string_to_bytes


# Bytes which may appear literally in quoted-printable text: TAB, LF,
# CR and printable ASCII except '='.
QP_SAFE_RANGES = [(0x09, 0x09), (0x0A, 0x0A), (0x0D, 0x0D),
                  (0x20, 0x3C), (0x3E, 0x7E)]

_QUOPRI_ESCAPES = ['=%02X' % c for c in range(256)]
_QUOPRI_MAP = list(_QUOPRI_ESCAPES)
for _lo, _hi in QP_SAFE_RANGES:
    for _c in range(_lo, _hi + 1):
        _QUOPRI_MAP[_c] = chr(_c)

ESCAPE_RE = re.compile(r'=[0-9a-fA-F]{2}')
HEX_PAIR_RE = re.compile(r'[0-9a-fA-F]{2}\Z')
LINEBREAK_RE = re.compile(r'\r?\n|\r')
TRAILING_WS_RE = re.compile(r'[\t ]+(?=\r\n|\Z)')
SOFT_TRAILING_WS_RE = re.compile(r'[\t ]+(?=\r?\n|\r|\Z)')
SOFT_BREAK_RE = re.compile(r'=(?:\r?\n|\Z)')


def mime_encode(data='', charset=DEFAULT_CHARSET):
    """
    Escape every byte outside the quoted-printable safe ranges as =XX.
    White space at the end of the data or before a line break is
    always escaped.

    >>> mime_encode('tere ÕÄÖÕ')
    'tere =C3=95=C3=84=C3=96=C3=95'
    >>> mime_encode(b'\\xbd\\xc5', 'ks_c_5601-1987')
    '=EC=8B=A0'
    >>> mime_encode('a = b \\n')
    'a =3D b=20\\n'
    """
    buf = convert(data or '', charset)
    last = len(buf) - 1
    encoded = []
    for i, ordinal in enumerate(buf):
        if (ordinal in (0x09, 0x20)
                and (i == last or buf[i + 1] in (0x0A, 0x0D))):
            encoded.append(_QUOPRI_ESCAPES[ordinal])
        else:
            encoded.append(_QUOPRI_MAP[ordinal])
    return ''.join(encoded)


def mime_decode_bytes(text=''):
    """
    Turn =XX escapes back into bytes. Anything else is copied as-is,
    one byte per character.

    >>> mime_decode_bytes('J=F5ge=zz')
    b'J\\xf5ge=zz'
    """
    text = text or ''
    buf = bytearray(len(text) - 2 * len(ESCAPE_RE.findall(text)))
    pos = i = 0
    while i < len(text):
        hex_pair = text[i + 1:i + 3]
        if text[i] == '=' and HEX_PAIR_RE.match(hex_pair):
            buf[pos] = int(hex_pair, 16)
            i += 3
        else:
            buf[pos] = ord(text[i]) & 0xFF
            i += 1
        pos += 1
    return bytes(buf)


def mime_decode(text='', charset=DEFAULT_CHARSET):
    """
    >>> mime_decode('tere =C3=95=C3=84=C3=96=C3=95')
    'tere ÕÄÖÕ'
    >>> mime_decode('=BD=C5', 'ks_c_5601-1987')
    '신'
    """
    return decode(mime_decode_bytes(text), charset)


def quoted_printable_encode(data='', charset=DEFAULT_CHARSET):
    """
    Encode text or bytes as quoted-printable, with CRLF line breaks and
    soft line breaks keeping lines within 76 characters.

    >>> quoted_printable_encode('tere ÕÄ \\t\\nÕÄ \\t\\nÖÕ')
    'tere =C3=95=C3=84 =09\\r\\n=C3=95=C3=84 =09\\r\\n=C3=96=C3=95'
    """
    encoded = mime_encode(data, charset)
    encoded = LINEBREAK_RE.sub('\r\n', encoded)
    encoded = TRAILING_WS_RE.sub(
        lambda m: m.group(0).replace(' ', '=20').replace('\t', '=09'),
        encoded)
    return add_soft_linebreaks(encoded, 'qp')


def quoted_printable_decode(text='', charset=DEFAULT_CHARSET):
    """
    >>> quoted_printable_decode('Tere =\\r\\nvana kere=')
    'Tere vana kere'
    """
    raw = SOFT_TRAILING_WS_RE.sub('', text or '')
    raw = SOFT_BREAK_RE.sub('', raw)
    return mime_decode(raw, charset)


if __name__ == '__main__':
    import doctest
    import sys
    results = doctest.testmod(optionflags=doctest.ELLIPSIS)
    print('%s' % (results, ))
    if results.failed:
        sys.exit(1)
