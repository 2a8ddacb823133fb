#!/usr/bin/env python
# -*- coding: utf-8 -*-

import sys

from setuptools import find_packages, setup


# Load the __version__ variable
exec(open('themesync/__version__.py').read())


with open('README.rst') as readme_file:
    long_description = readme_file.read()


setup_kwargs = {
    'name': "themesync",
    'version': __version__,  # noqa
    'description': "Rate-limited theme assets uploader",
    'long_description': long_description,
    'license': "MIT",
    'classifiers': [
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Build Tools"
    ],
    'keywords': "theme assets upload sync rate-limit",
    'packages': find_packages(exclude=['tests', 'tests.*']),
    'python_requires': '>=3.6',
    'install_requires': [
        'appdirs>=1.4',
        'requests>=2.6.0',
        'urllib3',
        'watchdog>=0.8.3',
    ],
    'extras_require': {
        'tests': ['pytest', 'tox']
    },
    'entry_points': {
        "console_scripts": [
            "themesync=themesync:main"
        ]
    },
    'zip_safe': False,
}

# ############################################################################
# ### UNIX/LINUX #############################################################
# ############################################################################

if sys.platform not in ['win32', 'win64', 'darwin']:
    # Desktop notifications, through D-Bus.
    setup_kwargs['install_requires'] += [
        'notify2>=0.3'
    ]


setup(**setup_kwargs)
