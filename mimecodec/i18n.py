import os
import threading
from gettext import translation, NullTranslations


ACTIVE_TRANSLATION = None

FORMAT_CHECKED = {}
FORMAT_CHECKED_LOCK = threading.Lock()


# Check on the fly whether a translator broke one of our format strings,
# and fall back to the original if the translation is obviously unusable.
def _fmt_safe(translation, original):
    with FORMAT_CHECKED_LOCK:
        if translation in FORMAT_CHECKED:
            return FORMAT_CHECKED[translation]
        if '%' in original:
            if translation.count('%') != original.count('%'):
                FORMAT_CHECKED[translation] = original
            else:
                try:
                    translation % 1
                    FORMAT_CHECKED[translation] = translation
                except TypeError:
                    # Wrong number or type of arguments, which means the
                    # format string itself parsed fine.
                    FORMAT_CHECKED[translation] = translation
                except ValueError:
                    FORMAT_CHECKED[translation] = original
        else:
            FORMAT_CHECKED[translation] = translation
        return FORMAT_CHECKED[translation]


def gettext(string):
    """
    Translate a message using the active catalogue, if any.

    >>> gettext('Invalid base64 data: %s') % 'oops'
    'Invalid base64 data: oops'
    """
    if not ACTIVE_TRANSLATION:
        return string
    return _fmt_safe(ACTIVE_TRANSLATION.gettext(string), string)


def ngettext(string1, string2, n):
    """
    >>> ngettext('%d byte', '%d bytes', 1) % 1
    '1 byte'
    >>> ngettext('%d byte', '%d bytes', 3) % 3
    '3 bytes'
    """
    default = string1 if (n == 1) else string2
    if not ACTIVE_TRANSLATION:
        return default
    return _fmt_safe(ACTIVE_TRANSLATION.ngettext(string1, string2, n),
                     default)


class i18n_disabler:
    def __init__(self):
        self.stack = []

    def __enter__(self):
        global ACTIVE_TRANSLATION
        self.stack.append(ACTIVE_TRANSLATION)
        ACTIVE_TRANSLATION = None

    def __exit__(self, *args, **kwargs):
        global ACTIVE_TRANSLATION
        ACTIVE_TRANSLATION = self.stack.pop(-1)


i18n_disabled = i18n_disabler()


def ActivateTranslation(language=None, localedir=None):
    """
    Install the `mimecodec` message catalogue for the given language.
    Missing catalogues silently fall back to the untranslated messages.
    """
    global ACTIVE_TRANSLATION

    if not language:
        language = os.getenv('LANG', None)
    if not localedir:
        localedir = os.path.join(os.path.dirname(__file__), 'locale')

    trans = None
    if language:
        try:
            trans = translation('mimecodec', localedir, [language])
        except (IOError, OSError):
            trans = None
    if not trans:
        trans = translation('mimecodec', localedir, fallback=True)

    if type(trans) is NullTranslations:
        ACTIVE_TRANSLATION = None
    else:
        ACTIVE_TRANSLATION = trans
    return trans


if __name__ == '__main__':
    import doctest
    import sys
    results = doctest.testmod(optionflags=doctest.ELLIPSIS)
    print('%s' % (results, ))
    if results.failed:
        sys.exit(1)
