# vim: set fileencoding=utf-8 :
""" Header lines: folding, unfolding, parsing structured values, and
RFC 2231 parameter continuations.

"""
import logging
import re
from urllib.parse import quote

from mimecodec.charset import decode, encode
from mimecodec.defaults import (DEFAULT_CHARSET, MAX_LINE_LENGTH,
                                CONTINUATION_MAX_LENGTH,
                                RFC2231_DEFAULT_CHARSET)
from mimecodec.mailutils.words import mime_words_encode
from mimecodec.util import split_every


logger = logging.getLogger(__name__)

HARD_BREAK_RE = re.compile(r'[^\n\r]*(?:\r?\n|\r)')
LAST_WHITESPACE_RE = re.compile(r'(\s+)[^\s]*\Z')
NEXT_WORD_RE = re.compile(r'[^\s]+(\s*)')
LINEBREAK_RE = re.compile(r'\r?\n|\r')
UNFOLD_RE = re.compile(r'(?:\r?\n|\r)[ \t]*')
HEADER_LINE_RE = re.compile(r'\s*([^:]+):(.*)\Z', re.DOTALL)

# name*, name*N and name*N* parameter keys
CONTINUATION_KEY_RE = re.compile(r'(\*(\d+)|\*(\d+)\*|\*)\Z')
RFC2231_CHARSET_RE = re.compile(r"([^']*)'[^']*'(.*)\Z", re.DOTALL)
RFC2231_UNSAFE_RE = re.compile(r'[=?_\s]')

PLAIN_PARAM_RE = re.compile(r'[\w.\- ]*\Z', re.ASCII)
QUOTE_PARAM_RE = re.compile(r'[\s";=]')

# RFC 5987 attr-char, minus what urllib.parse.quote never escapes
RFC2231_SAFE = "!#$&+^`|"


def fold_lines(text='', after_space=False, line_length=MAX_LINE_LENGTH):
    """
    Fold a long line at white space, so that lines stay within
    line_length characters where possible. Existing line breaks are
    kept. With after_space the white space stays at the end of the
    broken line, otherwise it starts the next one.

    >>> fold_lines('Subject: ' + 'abcdefghij ' * 8)
    'Subject: abcdefghij abcdefghij abcdefghij abcdefghij abcdefghij abcdefghij\\r\\n abcdefghij abcdefghij '
    """
    text = text or ''
    pos = 0
    length = len(text)
    result = []

    while pos < length:
        line = text[pos:pos + line_length]
        if len(line) < line_length:
            result.append(line)
            break

        match = HARD_BREAK_RE.match(line)
        if match:
            line = match.group(0)
            result.append(line)
            pos += len(line)
            continue

        match = LAST_WHITESPACE_RE.search(line)
        keep = len(match.group(1)) if (match and after_space) else 0
        if match and len(match.group(0)) - keep < len(line):
            line = line[:len(line) - (len(match.group(0)) - keep)]
        else:
            # No usable white space, run on to the end of the word
            match = NEXT_WORD_RE.match(text, pos + len(line))
            if match:
                word = match.group(0)
                if not after_space:
                    word = word[:len(word) - len(match.group(1))]
                line += word

        result.append(line)
        pos += len(line)
        if pos < length:
            result.append('\r\n')

    return ''.join(result)


def header_line_encode(key, value, charset=DEFAULT_CHARSET):
    """
    Encode and fold a header line.

    >>> header_line_encode('Subject', 'Tere õhtust')
    'Subject: Tere =?UTF-8?Q?=C3=B5htust?='
    """
    value = mime_words_encode(value, 'Q', charset)
    return fold_lines('%s: %s' % (key, value))


def header_line_decode(line=''):
    """
    Unfold a header line and split it into key and value.

    >>> sorted(header_line_decode('Subject: Tere\\r\\n  vana kere').items())
    [('key', 'Subject'), ('value', 'Tere vana kere')]
    """
    line = UNFOLD_RE.sub(' ', line or '').strip()
    match = HEADER_LINE_RE.match(line)
    if not match:
        if line:
            logger.debug('Header line without a key: %.40s' % line)
        return {'key': '', 'value': line}
    return {'key': match.group(1).strip(), 'value': match.group(2).strip()}


def header_lines_decode(headers=''):
    """
    Parse a block of header lines into a dict of lower-cased keys.
    Repeated headers become lists, in the order they appeared.

    >>> h = header_lines_decode('X-A: 1\\r\\nSubject: Tere\\r\\n vana\\r\\nX-A: 2')
    >>> h['subject'], h['x-a']
    ('Tere vana', ['1', '2'])
    """
    lines = LINEBREAK_RE.split(headers or '')

    # Join folded lines with the ones they belong to
    for i in range(len(lines) - 1, 0, -1):
        if lines[i][:1].isspace():
            lines[i - 1] += '\r\n' + lines[i]
            del lines[i]

    parsed = {}
    for line in lines:
        header = header_line_decode(line)
        key = header['key'].lower()
        value = header['value']
        if not parsed.get(key):
            parsed[key] = value
        elif isinstance(parsed[key], list):
            parsed[key].append(value)
        else:
            parsed[key] = [parsed[key], value]
    return parsed


def _store(response, key, value):
    if key is None:
        response['value'] = value
    else:
        response['params'][key] = value


def _rfc2231_join(params):
    # Pass 1: group name*, name*N and name*N* fragments by name
    fragments = {}
    for key in list(params.keys()):
        match = CONTINUATION_KEY_RE.search(key)
        if not match:
            continue
        name = key[:match.start()]
        nr = int(match.group(2) or match.group(3) or 0)
        value = params.pop(key)

        group = fragments.setdefault(name, {'charset': None, 'values': {}})
        if nr == 0 and match.group(0).endswith('*'):
            match = RFC2231_CHARSET_RE.match(value)
            if match:
                group['charset'] = match.group(1) or RFC2231_DEFAULT_CHARSET
                value = match.group(2)
        group['values'][nr] = value

    # Pass 2: join the fragments, turning percent encoding into an
    # encoded-word where a charset was given.
    for name, group in fragments.items():
        values = group['values']
        value = ''.join(values[nr] for nr in sorted(values))
        if group['charset']:
            value = RFC2231_UNSAFE_RE.sub(
                lambda m: '_' if m.group(0) == ' '
                          else '%%%02x' % ord(m.group(0)),
                value)
            value = '=?%s?Q?%s?=' % (group['charset'],
                                     value.replace('%', '='))
        params[name] = value
    return params


def parse_header_value(text=''):
    """
    Parse a structured header value such as a Content-Type into the
    bare value and a dict of parameters with lower-cased names. RFC
    2231 continuations are joined, and charset-tagged values come back
    as encoded-words.

    >>> parse_header_value('text/plain; CHARSET= UTF-8; format=flowed;')
    {'value': 'text/plain', 'params': {'charset': 'UTF-8', 'format': 'flowed'}}
    >>> parse_header_value('attachment; filename*0*=utf-8\\'\\'J%C3%B5; '
    ...                    'filename*1=geva.txt')['params']
    {'filename': '=?utf-8?Q?J=C3=B5geva.txt?='}
    """
    response = {'value': None, 'params': {}}
    key = None
    value = ''
    in_value = True
    quote_char = ''
    escaped = False

    for char in (text or ''):
        if not in_value:
            if char == '=':
                key = value.strip().lower()
                in_value = True
                value = ''
            else:
                value += char
        elif escaped:
            value += char
            escaped = False
        elif char == '\\':
            escaped = True
        elif quote_char and char == quote_char:
            quote_char = ''
        elif not quote_char and char == '"':
            quote_char = char
        elif not quote_char and char == ';':
            _store(response, key, value.strip())
            in_value = False
            value = ''
        else:
            value += char

    if in_value:
        _store(response, key, value.strip())
    elif value.strip():
        response['params'][value.strip().lower()] = ''

    _rfc2231_join(response['params'])
    return response


def _percent_encode(text):
    return quote(text, safe=RFC2231_SAFE)


def _needs_escape(char):
    return char != ' ' and _percent_encode(char) != char


def _continuation_chunks(text, max_length):
    chunks = []
    line = "utf-8''"
    encoded = True
    start = 0

    for i, char in enumerate(text):
        if encoded:
            piece = _percent_encode(char)
        elif _needs_escape(char):
            piece = _percent_encode(char)
            reencoded = _percent_encode(text[start:i]) + piece
            if len(reencoded) <= max_length:
                line = reencoded
                encoded = True
                continue
            chunks.append((line, False))
            line, encoded, start = piece, True, i
            continue
        else:
            piece = char

        if len(line) + len(piece) > max_length:
            chunks.append((line, encoded))
            encoded = _needs_escape(char)
            line = _percent_encode(char) if encoded else char
            start = i
        else:
            line += piece

    if line:
        chunks.append((line, encoded))
    return chunks


def _quote_param(value):
    if QUOTE_PARAM_RE.search(value):
        return '"%s"' % value
    return value


def continuation_encode(key, data, max_length=CONTINUATION_MAX_LENGTH,
                        charset=DEFAULT_CHARSET):
    """
    Encode a parameter value as RFC 2231 continuations, a list of
    {'key': ..., 'value': ...} dicts.

    >>> continuation_encode('filename', 'my file.txt')
    [{'key': 'filename', 'value': '"my file.txt"'}]
    >>> continuation_encode('filename', 'Jõgeva.txt')
    [{'key': 'filename*0*', 'value': "utf-8''J%C3%B5geva.txt"}]
    """
    if isinstance(data, str):
        text = data
    else:
        text = decode(data or b'', charset)
    # Repair surrogate pairs before percent encoding
    text = decode(encode(text))
    max_length = max_length or CONTINUATION_MAX_LENGTH

    if PLAIN_PARAM_RE.match(text):
        if len(text) <= max_length:
            return [{'key': key, 'value': _quote_param(text)}]
        chunks = [(chunk, False) for chunk in split_every(max_length, text)]
    else:
        chunks = _continuation_chunks(text, max_length)

    return [{'key': '%s*%d%s' % (key, i, '*' if encoded else ''),
             'value': _quote_param(chunk)}
            for i, (chunk, encoded) in enumerate(chunks)]


if __name__ == '__main__':
    import doctest
    import sys
    results = doctest.testmod(optionflags=doctest.ELLIPSIS)
    print('%s' % (results, ))
    if results.failed:
        sys.exit(1)
