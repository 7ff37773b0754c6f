import logging

from mock import patch

import mimecodec.charset
from mimecodec.charset import (normalize_charset, encode, decode,
                               decode_stream, convert)
from mimecodec.tests import MimeCodecUnittest


class TestNormalizeCharset(MimeCodecUnittest):
    def test_aliases(self):
        self.assertEqual(normalize_charset('utf8'), 'UTF-8')
        self.assertEqual(normalize_charset('UTF_16'), 'UTF-16')
        self.assertEqual(normalize_charset('win1257'), 'WINDOWS-1257')
        self.assertEqual(normalize_charset('Win_1252'), 'WINDOWS-1252')
        self.assertEqual(normalize_charset('latin-1'), 'ISO-8859-1')
        self.assertEqual(normalize_charset('LATIN13'), 'ISO-8859-13')

    def test_passthrough(self):
        self.assertEqual(normalize_charset('ks_c_5601-1987'),
                         'ks_c_5601-1987')
        self.assertEqual(normalize_charset('x-illegal'), 'x-illegal')
        self.assertEqual(normalize_charset('utf-8-sig'), 'utf-8-sig')

    def test_default(self):
        self.assertEqual(normalize_charset(), 'utf-8')
        self.assertEqual(normalize_charset(''), 'utf-8')

    def test_idempotent(self):
        for cs in ('utf8', 'win-1257', 'latin_9', 'iso-8859-2', 'x-foo'):
            once = normalize_charset(cs)
            self.assertEqual(normalize_charset(once), once)


class TestEncode(MimeCodecUnittest):
    def test_encode_utf8(self):
        self.assertEqual(encode('신'), b'\xec\x8b\xa0')
        self.assertEqual(encode(''), b'')

    def test_surrogate_pairs(self):
        self.assertEqual(encode('\ud83d\udca9'), b'\xf0\x9f\x92\xa9')
        self.assertEqual(encode('\U0001f4a9'), b'\xf0\x9f\x92\xa9')

    def test_lone_surrogate(self):
        self.assertEqual(encode('a\ud83db'), b'a\xef\xbf\xbdb')


class TestDecode(MimeCodecUnittest):
    def test_decode_utf8(self):
        self.assertEqual(decode(b'\xec\x8b\xa0'), '신')

    def test_decode_charset(self):
        self.assertEqual(decode(b'\xbd\xc5', 'ks_c_5601-1987'), '신')
        self.assertEqual(decode(b'J\xf5ge-va\xde', 'iso-8859-13'),
                         'Jõge-vaŽ')
        self.assertEqual(decode(b'Tere \xd0\xde!', 'win-1257'), 'Tere ŠŽ!')

    def test_illegal_charset_falls_back_to_utf8(self):
        self.assertEqual(decode(b'\xec\x8b\xa0', 'x-illegal'), '신')

    def test_illegal_charset_falls_back_to_latin9(self):
        self.assertEqual(decode(b'a1\xa6\xff', 'x-illegal'), 'a1Šÿ')

    def test_requested_charset_replaces_bad_bytes(self):
        self.assertEqual(decode(b'a\xffb', 'utf-8'), 'a\ufffdb')

    def test_non_text_codec_is_ignored(self):
        self.assertEqual(decode(b'abc', 'base64'), 'abc')
        self.assertEqual(decode(b'abc', 'rot13'), 'abc')

    def test_fallback_is_logged(self):
        with self.assertLogs('mimecodec.charset', level=logging.DEBUG) as cm:
            decode(b'abc', 'x-illegal')
        self.assertIn('x-illegal', cm.output[0])

    def test_decode_nothing(self):
        self.assertEqual(decode(b''), '')
        self.assertEqual(decode(None), '')
        self.assertEqual(decode(bytearray(b'abc')), 'abc')
        self.assertEqual(decode([0x61, 0x62]), 'ab')


class TestDecodeStream(MimeCodecUnittest):
    def test_multibyte_across_chunks(self):
        data = 'Tere õhtust, 신 💩'.encode('utf-8')
        for cut in range(len(data) + 1):
            first = decode_stream(data[:cut], 'utf-8', stream=True)
            second = decode_stream(data[cut:], 'utf-8', first.decoder)
            self.assertEqual(first.result + second.result,
                             'Tere õhtust, 신 💩')

    def test_stream_in_legacy_charset(self):
        first = decode_stream(b'\xbd', 'ks_c_5601-1987', stream=True)
        self.assertEqual(first.result, '')
        second = decode_stream(b'\xc5', decoder=first.decoder)
        self.assertEqual(second.result, '신')

    def test_not_lossy(self):
        res = decode_stream(b'abc', 'x-illegal')
        self.assertEqual(res.result, 'abc')
        self.assertFalse(res.lossy)
        self.assertTrue(res.decoder is not None)

    def test_raw_fallback_is_lossy(self):
        with patch.object(mimecodec.charset, 'CHARSET_FALLBACKS',
                          [('utf-8', 'strict')]):
            res = decode_stream(b'a1\xa6\xff', 'x-illegal')
        self.assertEqual(res.result, 'a1\xa6\xff')
        self.assertTrue(res.lossy)
        self.assertTrue(res.decoder is None)

    def test_flush_incomplete_sequence(self):
        res = decode_stream(b'a\xc3', 'utf-8', stream=False)
        self.assertEqual(res.result, 'a\ufffd')


class TestConvert(MimeCodecUnittest):
    def test_convert_text(self):
        self.assertEqual(convert('tere ÕÄÖÕ'),
                         b'tere \xc3\x95\xc3\x84\xc3\x96\xc3\x95')

    def test_convert_bytes(self):
        self.assertEqual(convert(b'\xbd\xc5', 'ks_c_5601-1987'),
                         b'\xec\x8b\xa0')
        self.assertEqual(convert(b'Tere \xd5\xc4\xd6\xdc!', 'Latin_1'),
                         b'Tere \xc3\x95\xc3\x84\xc3\x96\xc3\x9c!')
