#!/usr/bin/env python3
import os
import re


ROOT = os.path.normpath(os.path.join(os.path.dirname(__file__), '..'))


APPVER = next(
    line.strip() for line in open('%s/mimecodec/defaults.py' % ROOT, 'r')
    if re.match(r'^APPVER\s*=', line)
).split('"')[1]


if __name__ == "__main__":
    print('%s' % APPVER)
