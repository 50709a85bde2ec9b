"""apr1crypt - Apache ``$apr1$`` MD5-Crypt password hashing"""

__version__ = "1.0"

#=========================================================
#quickstart interface
#=========================================================
from apr1crypt.handlers.md5_crypt import MAGIC, apr_md5_crypt, \
    generate_salt, crypt, verify, identify

__all__ = [
    "MAGIC",
    "apr_md5_crypt",
    "generate_salt",
    "crypt",
    "verify",
    "identify",
]

#=========================================================
#eof
#=========================================================
