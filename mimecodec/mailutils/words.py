# vim: set fileencoding=utf-8 :
""" RFC 2047 encoded-words: =?charset?Q?...?= and =?charset?B?...?=

Encoding always produces UTF-8 words. Decoding accepts any charset
the charset adapter can handle, and joins adjacent words that share a
charset before decoding them, so multi-byte characters which were split
over two words come out whole.

"""
import re

from mimecodec.charset import convert, decode, encode
from mimecodec.defaults import (DEFAULT_CHARSET, MAX_MIME_WORD_LENGTH,
                                MIN_MIME_WORD_LENGTH,
                                MAX_B64_MIME_WORD_BYTE_LENGTH)
from mimecodec.mailutils.base64mime import b64encode, b64decode
from mimecodec.mailutils.base64mime import base64_decode
from mimecodec.mailutils.quoprimime import mime_encode, mime_decode
from mimecodec.mailutils.quoprimime import mime_decode_bytes
from mimecodec.util import split_utf8_every


# Characters allowed as-is in the payload of a Q encoded-word
Q_FORBIDDEN_RE = re.compile(r'[^a-z0-9!*+\-/=]', re.I)

# A run of words containing non-ASCII characters, ending at white space
# or at the end of the input.
_NA = '\u0080-\U0010FFFF'
NON_ASCII_RUN_RE = re.compile(
    r'([^\s%(na)s]*[%(na)s]+[^\s%(na)s]*'
    r'(?:\s+[^\s%(na)s]*[%(na)s]+[^\s%(na)s]*\s*)?)+'
    r'(?=\s|\Z)' % {'na': _NA})

# A single, complete encoded-word
MIME_WORD_RE = re.compile(r'''
  =\?                       # literal =?
  (?P<charset>[\w\-*]+)     # charset, optionally with an RFC 2231 *language
  \?                        # literal ?
  (?P<encoding>[QqBb])      # either a "q" or a "b", case insensitive
  \?                        # literal ?
  (?P<encoded>[^?]*)        # the payload
  \?=                       # literal ?=
  ''', re.VERBOSE | re.ASCII)

PARTIAL_ESCAPE_RE = re.compile(r'=[\da-f]?\Z', re.I)
LEADING_ESCAPE_RE = re.compile(r'=([\da-f]{2})', re.I)
WHITESPACE_RE = re.compile(r'\s+')


def _q_encode_forbidden_header_chars(text):
    return Q_FORBIDDEN_RE.sub(
        lambda m: '_' if m.group(0) == ' ' else '=%02X' % ord(m.group(0)),
        text)


def split_mime_encoded_string(text, max_length=MIN_MIME_WORD_LENGTH):
    """
    Split a Q-encoded string into chunks of at most max_length (but
    never less than 12) characters, without breaking escapes or UTF-8
    sequences.

    >>> split_mime_encoded_string('=C3=B5=C3=A4=C3=B6=C3=BC', 12)
    ['=C3=B5=C3=A4', '=C3=B6=C3=BC']
    >>> split_mime_encoded_string('abcdefghij=C3=B5')
    ['abcdefghij', '=C3=B5']
    """
    max_length = max(max_length or 0, MIN_MIME_WORD_LENGTH)
    lines = []
    while text:
        line = text[:max_length]

        # Push incomplete escapes to the next chunk
        match = PARTIAL_ESCAPE_RE.search(line)
        if match:
            line = line[:match.start()]
        # A dangling escape with nothing before it is kept as-is
        line = line or text[:max_length]

        # ... and UTF-8 continuation bytes along with their lead byte
        cut = line
        while cut:
            match = LEADING_ESCAPE_RE.match(text, len(cut))
            if not match or not (0x80 <= int(match.group(1), 16) < 0xC0):
                break
            cut = cut[:-3]
        line = cut or line

        lines.append(line)
        text = text[len(line):]
    return lines


def mime_word_encode(data, encoding='Q', charset=DEFAULT_CHARSET,
                     max_length=MAX_MIME_WORD_LENGTH):
    """
    Encode a string (or bytes in the given charset) as one or more
    UTF-8 encoded-words, separated by spaces.

    >>> mime_word_encode(b'J\\xf5ge-va\\xde', 'Q', 'iso-8859-13')
    '=?UTF-8?Q?J=C3=B5ge-va=C5=BD?='
    >>> mime_word_encode('Jõgeva', 'B')
    '=?UTF-8?B?SsO1Z2V2YQ==?='
    """
    encoding = (encoding or 'Q').strip().upper()[:1]
    if isinstance(data, str):
        text = data
    else:
        text = decode(data or b'', charset)

    if encoding == 'Q':
        encoded = _q_encode_forbidden_header_chars(mime_encode(text))
        if len(encoded) < max_length:
            parts = [encoded]
        else:
            parts = split_mime_encoded_string(encoded, max_length)
    else:
        encoding = 'B'
        parts = [b64encode(chunk) for chunk in
                 split_utf8_every(MAX_B64_MIME_WORD_BYTE_LENGTH, encode(text))]

    return ' '.join('=?UTF-8?%s?%s?=' % (encoding, part) for part in parts)


def mime_words_encode(data='', encoding='Q', charset=DEFAULT_CHARSET,
                      max_length=MAX_MIME_WORD_LENGTH):
    """
    Encode only the parts of a string which contain non-ASCII text.

    >>> mime_words_encode('Hello: See on õhin test', 'Q')
    'Hello: See on =?UTF-8?Q?=C3=B5hin?= test'
    >>> mime_words_encode('Just ASCII')
    'Just ASCII'
    """
    text = decode(convert(data or '', charset))
    return NON_ASCII_RUN_RE.sub(
        lambda m: mime_word_encode(m.group(0), encoding,
                                   max_length=max_length),
        text)


def mime_word_decode(text=''):
    """
    Decode a single encoded-word; anything else is returned unchanged.

    >>> mime_word_decode('=?ISO-8859-13?Q?J=F5ge-va=DE?=')
    'Jõge-vaŽ'
    >>> mime_word_decode('=?UTF-8*et?Q?J=C3=B5ge_va?=')
    'Jõge va'
    >>> mime_word_decode('Jõgeva')
    'Jõgeva'
    """
    text = text or ''
    match = MIME_WORD_RE.fullmatch(text)
    if not match:
        return text

    charset = match.group('charset').split('*')[0]
    encoded = match.group('encoded').replace('_', ' ')
    if match.group('encoding').upper() == 'B':
        return base64_decode(encoded, charset)
    return mime_decode(encoded, charset)


def _word_to_bytes(encoding, encoded):
    encoded = WHITESPACE_RE.sub('', encoded)
    if encoding.upper() == 'B':
        return b64decode(encoded)
    return mime_decode_bytes(encoded.replace('_', ' '))


def mime_words_decode(text=''):
    """
    Decode every encoded-word in a string. White space between two
    encoded-words is dropped.

    >>> mime_words_decode('Hello: =?UTF-8?q?See_on_=C3=B5hin_test?=')
    'Hello: See on õhin test'
    >>> mime_words_decode('=?UTF-8?Q?J=C3?= =?UTF-8?Q?=B5geva?=')
    'Jõgeva'
    """
    # Like re.split, yields text, charset, encoding, payload, text, ...
    parts = MIME_WORD_RE.split(text or '')
    result = []
    pending = []
    pending_charset = None

    def flush():
        if pending:
            result.append(decode(b''.join(pending), pending_charset))
            del pending[:]

    for i in range(0, len(parts), 4):
        unencoded = parts[i]
        # Drop white space between encoded-words
        if unencoded and not (pending and unencoded.isspace()
                              and i + 1 < len(parts)):
            flush()
            result.append(unencoded)
        if i + 1 < len(parts):
            charset = parts[i + 1].split('*')[0]
            if pending and charset.lower() != pending_charset.lower():
                flush()
            pending_charset = charset
            pending.append(_word_to_bytes(parts[i + 2], parts[i + 3]))
    flush()

    return ''.join(result)


if __name__ == '__main__':
    import doctest
    import sys
    results = doctest.testmod(optionflags=doctest.ELLIPSIS)
    print('%s' % (results, ))
    if results.failed:
        sys.exit(1)
