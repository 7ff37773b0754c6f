# vim: set fileencoding=utf-8 :
#
# Conversions between unicode strings and bytes in arbitrary charsets.
#
# Decoding never fails: when the requested charset is unknown or does not
# fit the data we walk a fixed chain of fallbacks, ending with a plain
# byte-to-character mapping.
#
import codecs
import collections
import logging
import re

from mimecodec.defaults import DEFAULT_CHARSET, CHARSET_FALLBACKS
from mimecodec.util import bytes_to_string


logger = logging.getLogger(__name__)

CHARSET_ALIASES = [
    (re.compile(r'utf[-_]?(\d+)\Z', re.I), 'UTF-%s'),
    (re.compile(r'win[-_]?(\d+)\Z', re.I), 'WINDOWS-%s'),
    (re.compile(r'latin[-_]?(\d+)\Z', re.I), 'ISO-8859-%s'),
]

DecodeResult = collections.namedtuple('DecodeResult',
                                      ['result', 'decoder', 'lossy'])


def normalize_charset(charset=None):
    """
    Convert common charset aliases into their canonical names.

    >>> normalize_charset('utf8')
    'UTF-8'
    >>> normalize_charset('win-1257')
    'WINDOWS-1257'
    >>> normalize_charset('Latin_1')
    'ISO-8859-1'
    >>> normalize_charset('ks_c_5601-1987')
    'ks_c_5601-1987'
    >>> normalize_charset()
    'utf-8'
    """
    charset = charset or 'utf-8'
    for regexp, canonical in CHARSET_ALIASES:
        match = regexp.match(charset)
        if match:
            return canonical % match.group(1)
    return charset


def encode(text):
    """
    Encode a unicode string as UTF-8.

    Surrogate pairs that snuck into the string are recombined, lone
    surrogates become U+FFFD.

    >>> encode('tere ÕÄÖÕ')
    b'tere \\xc3\\x95\\xc3\\x84\\xc3\\x96\\xc3\\x95'
    >>> encode('\\ud83d\\udca9')
    b'\\xf0\\x9f\\x92\\xa9'
    """
    try:
        return (text or '').encode('utf-8')
    except UnicodeEncodeError:
        text = text.encode('utf-16-le', 'surrogatepass')
        return text.decode('utf-16-le', 'replace').encode('utf-8')


def _incremental_decoder(charset, errors):
    info = codecs.lookup(charset)
    if not getattr(info, '_is_text_encoding', True) \
            or info.incrementaldecoder is None:
        # bytes-to-bytes codecs such as base64 or rot13
        raise LookupError(charset)
    return info.incrementaldecoder(errors)


def decode_stream(buf, charset=DEFAULT_CHARSET, decoder=None, stream=False):
    """
    Decode bytes into a unicode string, returning a DecodeResult.

    The decoder in the result can be passed back in to continue decoding
    a stream; when `stream` is set, incomplete multi-byte sequences at
    the end of `buf` are held back until the next call.

    >>> res = decode_stream(b'a\\xc3', 'utf-8', stream=True)
    >>> res.result
    'a'
    >>> decode_stream(b'\\xb5b', decoder=res.decoder).result
    'õb'
    >>> decode_stream(b'\\xec\\x8b\\xa0', 'x-illegal')
    DecodeResult(result='신', decoder=<...>, lossy=False)
    """
    buf = bytes(buf or b'')
    final = not stream

    attempts = []
    if decoder is not None:
        attempts.append((decoder, None, None))
    attempts.append((None, normalize_charset(charset), 'replace'))
    attempts.extend((None, cs, errors) for cs, errors in CHARSET_FALLBACKS)

    for carried, cs, errors in attempts:
        try:
            dec = carried or _incremental_decoder(cs, errors)
            return DecodeResult(dec.decode(buf, final), dec, False)
        except LookupError:
            logger.debug('Unknown charset %s, falling back' % cs)
        except ValueError as e:
            logger.debug('Failed to decode as %s (%s), falling back'
                         % (cs or 'carried decoder', e))

    logger.debug('Decoding %d bytes as raw binary data' % len(buf))
    return DecodeResult(bytes_to_string(buf), None, True)


def decode(buf, charset=DEFAULT_CHARSET):
    """
    Decode a complete byte sequence; this never fails.

    >>> decode(b'\\xbd\\xc5', 'ks_c_5601-1987')
    '신'
    >>> decode(b'a1\\xa6\\xff', 'x-illegal')
    'a1Šÿ'
    """
    return decode_stream(buf, charset).result


def convert(data, charset=DEFAULT_CHARSET):
    """
    Convert a string, or bytes in the given charset, to UTF-8 bytes.

    >>> convert(b'Tere \\xd0\\xde!', 'WINDOWS-1257')
    b'Tere \\xc5\\xa0\\xc5\\xbd!'
    >>> convert('õ')
    b'\\xc3\\xb5'
    """
    if isinstance(data, str):
        return encode(data)
    return encode(decode(data, charset))


if __name__ == '__main__':
    import doctest
    import sys
    results = doctest.testmod(optionflags=doctest.ELLIPSIS)
    print('%s' % (results, ))
    if results.failed:
        sys.exit(1)
