import unittest

from mimecodec.defaults import MAX_LINE_LENGTH


def sample_text(length, alphabet='abcdefghij õäöü ÕÄÖÜ šž 신 💩 .,!?'):
    """Deterministic mixed ASCII/non-ASCII text of a given length."""
    return ''.join(alphabet[(i * 7) % len(alphabet)] for i in range(length))


class MimeCodecUnittest(unittest.TestCase):
    def assertLinesWithin(self, text, limit=MAX_LINE_LENGTH):
        for line in text.split('\r\n'):
            self.assertLessEqual(len(line), limit, repr(line))

    def assertQPLinesWithin(self, text, limit=MAX_LINE_LENGTH):
        # The soft break '=' counts towards the limit
        self.assertLinesWithin(text, limit)

    def assertNoSplitUTF8(self, encoded):
        # No line may end with a lead or continuation byte escape whose
        # sequence continues on the next line.
        lines = encoded.split('=\r\n')
        for line, following in zip(lines, lines[1:]):
            if following[:1] == '=' and len(following) >= 3:
                code = int(following[1:3], 16)
                self.assertFalse(0x80 <= code < 0xC0, repr(line))
