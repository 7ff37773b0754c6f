# vim: set fileencoding=utf-8 :
#
# Soft line breaks for quoted-printable and base64 bodies, RFC 2045.
#
import re

from mimecodec.defaults import MAX_LINE_LENGTH
from mimecodec.util import split_every


# A dangling escape, '=' or '=X', at the end of a line
PARTIAL_ESCAPE_RE = re.compile(r'=[\da-f]{0,2}\Z', re.I)
DANGLING_ESCAPE_RE = re.compile(r'=[\da-f]?\Z', re.I)
TRAILING_ESCAPE_RE = re.compile(r'=([\da-f]{2})\Z', re.I)
ONLY_ESCAPES_RE = re.compile(r'(?:=[\da-f]{2}){1,4}\Z', re.I)
WORD_BREAK_RE = re.compile(r'[ \t.,!?][^ \t.,!?]*\Z')


def add_base64_soft_linebreaks(encoded='', line_length=MAX_LINE_LENGTH):
    """
    >>> add_base64_soft_linebreaks('QUJD' * 20)[76:]
    '\\r\\nQUJD'
    """
    return '\r\n'.join(split_every(line_length, (encoded or '').strip()))


def _retreat_over_utf8(line, remaining):
    # Never leave half of a UTF-8 sequence at the end of a line: drop
    # trailing continuation bytes, and the lead byte they belong to.
    while (len(line) > 3 and len(line) < remaining
            and not ONLY_ESCAPES_RE.match(line)):
        match = TRAILING_ESCAPE_RE.search(line)
        if not match:
            break
        code = int(match.group(1), 16)
        if code < 0x80:
            break
        line = line[:-3]
        if code >= 0xC0:
            break
    return line


def add_qp_soft_linebreaks(encoded='', line_length=MAX_LINE_LENGTH):
    """
    Insert `=\\r\\n` soft line breaks into quoted-printable data, so
    that no line exceeds line_length characters. Breaks go after white
    space or punctuation where possible, and never split an escape or
    a multi-byte UTF-8 sequence.

    >>> add_qp_soft_linebreaks('ABCDEFGHIJ' * 8)
    'ABCDEFGHIJABCDEFGHIJABCDEFGHIJABCDEFGHIJABCDEFGHIJABCDEFGHIJABCDEFGHIJABCDE=\\r\\nFGHIJ'
    """
    encoded = encoded or ''
    length = len(encoded)
    margin = line_length // 3
    result = []
    pos = 0

    while pos < length:
        line = encoded[pos:pos + line_length]

        crlf = line.find('\r\n')
        if crlf >= 0:
            line = line[:crlf + 2]
            result.append(line)
            pos += len(line)
            continue

        if line.endswith('\n'):
            result.append(line)
            pos += len(line)
            continue

        tail = line[-margin:]
        newline = tail.rfind('\n')
        if newline >= 0:
            line = line[:len(line) - len(tail) + newline + 1]
            result.append(line)
            pos += len(line)
            continue

        word_break = WORD_BREAK_RE.search(tail)
        if len(line) > line_length - margin and word_break:
            # Break right after the white space or punctuation
            line = line[:len(line) - len(word_break.group(0)) + 1]
        elif line.endswith('\r'):
            line = line[:-1]
        elif PARTIAL_ESCAPE_RE.search(line):
            dangling = DANGLING_ESCAPE_RE.search(line)
            if dangling:
                line = line[:dangling.start()]
            line = _retreat_over_utf8(line, length - pos)

        if pos + len(line) < length and not line.endswith('\n'):
            if len(line) == line_length and TRAILING_ESCAPE_RE.search(line):
                line = line[:-3]
            elif len(line) == line_length:
                line = line[:-1]
            pos += len(line)
            line += '=\r\n'
        else:
            pos += len(line)

        result.append(line)

    return ''.join(result)


def add_soft_linebreaks(encoded='', encoding='base64',
                        line_length=MAX_LINE_LENGTH):
    """
    Fold quoted-printable ('qp') or base64 data into lines.

    >>> add_soft_linebreaks('abc def', 'qp')
    'abc def'
    """
    if (encoding or '').lower() == 'qp':
        return add_qp_soft_linebreaks(encoded, line_length)
    return add_base64_soft_linebreaks(encoded, line_length)


if __name__ == '__main__':
    import doctest
    import sys
    results = doctest.testmod(optionflags=doctest.ELLIPSIS)
    print('%s' % (results, ))
    if results.failed:
        sys.exit(1)
