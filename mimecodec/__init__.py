from mimecodec.defaults import APPVER as __version__
from mimecodec.charset import (normalize_charset, encode, decode,
                               decode_stream, convert, DecodeResult)
from mimecodec.mailutils import MimeDecodeError
from mimecodec.mailutils.linebreaks import add_soft_linebreaks
from mimecodec.mailutils.quoprimime import (mime_encode, mime_decode,
                                            quoted_printable_encode,
                                            quoted_printable_decode)
from mimecodec.mailutils.base64mime import base64_encode, base64_decode
from mimecodec.mailutils.words import (mime_word_encode, mime_words_encode,
                                       mime_word_decode, mime_words_decode,
                                       split_mime_encoded_string)
from mimecodec.mailutils.header import (fold_lines, header_line_encode,
                                        header_line_decode,
                                        header_lines_decode,
                                        parse_header_value,
                                        continuation_encode)
from mimecodec.mailutils.safe import safe_decode_hdr


__all__ = ['normalize_charset', 'encode', 'decode', 'decode_stream',
           'convert', 'DecodeResult', 'MimeDecodeError',
           'mime_encode', 'mime_decode',
           'base64_encode', 'base64_decode',
           'quoted_printable_encode', 'quoted_printable_decode',
           'mime_word_encode', 'mime_words_encode',
           'mime_word_decode', 'mime_words_decode',
           'split_mime_encoded_string', 'add_soft_linebreaks',
           'fold_lines', 'header_line_encode', 'header_line_decode',
           'header_lines_decode', 'parse_header_value',
           'continuation_encode', 'safe_decode_hdr',
           "charset", "defaults", "mailutils", "util"]
