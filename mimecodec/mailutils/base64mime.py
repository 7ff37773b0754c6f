# vim: set fileencoding=utf-8 :
#
# Base64 content transfer encoding, RFC 2045 6.8
#
import base64
import binascii
import logging
import re

from mimecodec.charset import convert, decode, encode
from mimecodec.defaults import DEFAULT_CHARSET
from mimecodec.i18n import gettext as _
from mimecodec.mailutils import MimeDecodeError
from mimecodec.mailutils.linebreaks import add_soft_linebreaks
from mimecodec.util import bytes_to_string


logger = logging.getLogger(__name__)

WHITESPACE_RE = re.compile(r'\s+')


def b64encode(data):
    """
    Plain base64, no line breaks. Strings are encoded as UTF-8.

    >>> b64encode('tere ÕÄÖÕ')
    'dGVyZSDDlcOEw5bDlQ=='
    >>> b64encode(b'')
    ''
    """
    if not data:
        return ''
    if isinstance(data, str):
        data = encode(data)
    return base64.b64encode(bytes(data)).decode('ascii')


def b64decode(data, output='bytes'):
    """
    Decode base64, ignoring white space and missing padding. Returns
    bytes, or a string if output is 'string'.

    >>> b64decode('dGVy\\r\\nZSA')
    b'tere '
    >>> b64decode('w5U', 'string')
    'Õ'
    >>> b64decode('*')
    Traceback (most recent call last):
        ...
    mimecodec.mailutils.MimeDecodeError: Invalid base64 data: ...
    """
    data = WHITESPACE_RE.sub('', data or '')

    # Postel's law: add missing padding
    paderr = len(data) % 4
    if paderr:
        data += '==='[:4 - paderr]

    try:
        buf = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.debug('Invalid base64 data (%s): %.40s' % (e, data))
        raise MimeDecodeError(_('Invalid base64 data: %s') % e, data=data)

    if output == 'string':
        return decode(buf)
    return buf


def base64_encode(data, charset=DEFAULT_CHARSET):
    """
    Base64 encode a string or bytes, folded into 76 character lines.
    Bytes are converted from their charset to UTF-8 first, unless the
    charset is 'binary'.

    >>> base64_encode(b'\\xbd\\xc5', 'ks_c_5601-1987')
    '7Iug'
    >>> base64_encode(b'\\xbd\\xc5', 'binary')
    'vcU='
    """
    if charset == 'binary' and not isinstance(data, str):
        buf = bytes(data or b'')
    else:
        buf = convert(data or '', charset)
    return add_soft_linebreaks(b64encode(buf), 'base64')


def base64_decode(text, charset=DEFAULT_CHARSET):
    """
    Decode base64 data, then decode the bytes from the given charset.
    The 'binary' charset maps every byte to one character.

    >>> base64_decode('vcU=', 'ks_c_5601-1987')
    '신'
    >>> base64_decode('vcU=', 'binary')
    '½Å'
    """
    buf = b64decode(text, 'bytes')
    if charset == 'binary':
        return bytes_to_string(buf)
    return decode(buf, charset)


if __name__ == '__main__':
    import doctest
    import sys
    results = doctest.testmod(optionflags=doctest.ELLIPSIS)
    print('%s' % (results, ))
    if results.failed:
        sys.exit(1)
