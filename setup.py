"""apr1crypt setup script"""
#=========================================================
#init script env - ensure cwd = root of source dir
#=========================================================
import os
root_dir = os.path.abspath(os.path.join(__file__,".."))
os.chdir(root_dir)

#=========================================================
#imports
#=========================================================
import re

from setuptools import setup

#=========================================================
#version string
#=========================================================
with open(os.path.join(root_dir, "apr1crypt", "__init__.py")) as vh:
    VERSION = re.search(r'^__version__\s*=\s*"(.*?)"\s*$', vh.read(), re.M).group(1)

#=========================================================
#static text
#=========================================================
SUMMARY = "Apache $apr1$ MD5-Crypt password hashing"

DESCRIPTION = """\
apr1crypt is a pure-python implementation of the Apache variant of
Poul-Henning Kamp's MD5-Crypt password hash, as written by
``htpasswd -m``. It generates salts, hashes passwords into the
``$apr1$salt$digest`` format, and verifies passwords against
existing hashes.
"""

KEYWORDS = "password secret hash security crypt md5-crypt apr1 apache htpasswd"

#=========================================================
#config setup
#=========================================================
config = dict(
    #package info
    packages = [
        "apr1crypt",
            "apr1crypt.handlers",
            "apr1crypt.tests",
            "apr1crypt.utils",
        ],
    zip_safe=True,
    python_requires=">=3.7",

    #metadata
    name = "apr1crypt",
    version = VERSION,
    license = "BSD",

    description = SUMMARY,
    long_description = DESCRIPTION,
    keywords = KEYWORDS,
    classifiers = [
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: BSD License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Security :: Cryptography",
        "Topic :: Software Development :: Libraries",
    ],

    extras_require = {
        "test": ["pytest"],
    },
    entry_points = {
        "console_scripts": [
            "apr1crypt = apr1crypt.__main__:main",
        ],
    },
)
#=========================================================
#build
#=========================================================
setup(**config)

#=========================================================
#EOF
#=========================================================
