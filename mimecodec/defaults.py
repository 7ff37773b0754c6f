APPVER = "1.0.0"
ABOUT = """\
mimecodec                  MIME text-transfer encodings for Python
 v%8.0008s       quoted-printable, base64, RFC 2047 encoded-words
                 and RFC 2231 parameter continuations
""" % APPVER
#############################################################################

DEFAULT_CHARSET = 'UTF-8'

# Lines can't be longer than 76 + <CR><LF> = 78 bytes, RFC 2045 6.7
MAX_LINE_LENGTH = 76

# Upper and lower bounds for the payload of a single Q encoded-word
MAX_MIME_WORD_LENGTH = 52
MIN_MIME_WORD_LENGTH = 12

# 39 source bytes become 52 characters of base64
MAX_B64_MIME_WORD_BYTE_LENGTH = 39

# Default chunk size for RFC 2231 parameter continuations
CONTINUATION_MAX_LENGTH = 50

# Charset assumed for RFC 2231 values that name none
RFC2231_DEFAULT_CHARSET = 'iso-8859-1'

# Decoding falls back to these (codec, errors) pairs, in order, after
# the requested charset has failed.
CHARSET_FALLBACKS = [
    ('utf-8', 'strict'),
    ('iso-8859-15', 'replace'),
]
