#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import sys

from setuptools import setup
from setuptools import find_packages

INSTALL_REQUIRES = []

TESTS_REQUIRE = [
    'pytest',
    'deepdiff'
]

DATA_FILES = [
    ('/etc/network/vplslink/', ['etc/network/vplslink/vplslink.conf']),
]

SCRIPTS = []

ENTRY_POINTS = {}


def build_deb_package():
    try:
        return sys.argv[sys.argv.index('--root') + 1].endswith('/debian/vplslink')
    except Exception:
        pass
    return False


if not build_deb_package():
    ENTRY_POINTS = {
        'console_scripts': [
            'vplslink = vplslink.__main__:main',
        ],
    }

setup(
    author='Julien Fortin',
    author_email='jfortin@nvidia.com',
    maintainer='Julien Fortin',
    maintainer_email='jfortin@nvidia.com',
    classifiers=[
        'Development Status :: 5 - Production/Stable',
        'Environment :: Console',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: GNU General Public License v2 (GPLv2)',
        'Natural Language :: English',
        'Operating System :: POSIX :: Linux',
        'Programming Language :: Python :: 3',
        'Topic :: System :: Networking',
        'Topic :: System :: Systems Administration'
    ],
    description='vpls pseudowire netlink attributes encoder/decoder',
    install_requires=INSTALL_REQUIRES,
    extras_require={
        'test': TESTS_REQUIRE
    },
    license='GNU General Public License v2',
    keywords='vpls netlink iproute2',
    name='vplslink',
    packages=find_packages(include=['vplslink', 'vplslink.*']),
    version='1.0.0',
    data_files=DATA_FILES,
    setup_requires=['setuptools'],
    scripts=SCRIPTS,
    entry_points=ENTRY_POINTS
)
