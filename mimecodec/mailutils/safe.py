# vim: set fileencoding=utf-8 :
import logging

from mimecodec.charset import decode
from mimecodec.defaults import DEFAULT_CHARSET
from mimecodec.mailutils import MimeDecodeError
from mimecodec.mailutils.words import mime_words_decode


logger = logging.getLogger(__name__)


def safe_decode_hdr(hdr=None, charset=DEFAULT_CHARSET):
    """
    This method stubbornly tries to decode header data and convert
    to Pythonic unicode strings. The strings are guaranteed not to
    contain tab, newline or carriage return characters.

    The =?...?= MIME header encoding is recognized and processed.

    >>> safe_decode_hdr('=?iso-8859-1?Q?G=EDsli_R_=D3la?=\\r\\n<f@b.is>')
    'Gísli R Óla  <f@b.is>'

    Raw binary data is decoded using the charset, or a guess.

    >>> safe_decode_hdr(b'"G\\xc3\\xadsli R \\xc3\\x93la"\\t<f@b.is>')
    '"Gísli R Óla" <f@b.is>'

    Broken encoded-words are left alone.

    >>> safe_decode_hdr('=?utf-8?B?*?=')
    '=?utf-8?B?*?='
    """
    if hdr is None:
        return ''

    value = hdr
    if not isinstance(value, str):
        value = decode(value, charset)

    if '=?' in value and '?=' in value:
        try:
            value = mime_words_decode(value)
        except MimeDecodeError as e:
            logger.debug('Failed to decode header: %s' % e)

    # Finally, return the unicode data, with white-space normalized
    return value.replace('\r', ' ').replace('\t', ' ').replace('\n', ' ')


if __name__ == '__main__':
    import doctest
    import sys
    results = doctest.testmod(optionflags=doctest.ELLIPSIS)
    print('%s' % (results, ))
    if results.failed:
        sys.exit(1)
