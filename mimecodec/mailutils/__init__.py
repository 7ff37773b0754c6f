# vim: set fileencoding=utf-8 :
#


class MimeDecodeError(ValueError):
    """Raised when encoded data (base64) is beyond repair."""
    def __init__(self, msg, data=None):
        ValueError.__init__(self, msg)
        self.data = data
