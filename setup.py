#!/usr/bin/env python3
from setuptools import setup, find_packages

from scripts.version import APPVER


## "Main" ####################################################################

setup(
    name='mimecodec',
    version=APPVER,
    description='Encode and decode MIME transfer encodings and headers',
    packages=find_packages(exclude=['scripts', 'scripts.*']),
    python_requires='>=3.6',
    install_requires=[],
    extras_require={
        'test': ['pytest', 'mock'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Topic :: Communications :: Email',
    ],
)
