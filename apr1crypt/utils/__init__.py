"""apr1crypt utility functions"""
#=================================================================================
#imports
#=================================================================================
#core
from hmac import compare_digest
import logging; log = logging.getLogger(__name__)
import random
#site
#pkg
from apr1crypt.exc import ExpectedStringError, RandomSourceError
#local
__all__ = [
    #decorators
    "classproperty",

    #bytes<->str
    'to_bytes',
    'to_native_str',

    # string manipulation
    'consteq',

    # base64 helpers
    "HASH64_CHARS",

    #random
    'rng',
    'getrandbytes',
]

#=================================================================================
#constants
#=================================================================================

#: the 64 characters used by hash64 encoding, in order of their 6-bit value
HASH64_CHARS = "./0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"

#=================================================================================
#decorators and meta helpers
#=================================================================================
class classproperty(object):
    """Function decorator which acts like a combination of classmethod+property (limited to read-only properties)"""

    def __init__(self, func):
        self.im_func = func

    def __get__(self, obj, cls):
        return self.im_func(cls)

    @property
    def __func__(self):
        return self.im_func

#==========================================================
#bytes <-> str conversion helpers
#==========================================================
def to_bytes(source, encoding="utf-8", errname="value"):
    """helper to encode str -> bytes

    this function takes in a ``source`` string.
    if str, encodes it using the specified ``encoding``.
    if bytes, returns unchanged.
    all other types result in a :exc:`TypeError`.

    :arg source: source bytes/str to process
    :arg encoding: target character encoding
    :param errname: optional name of variable/noun to reference when raising errors

    :raises TypeError: if source is not str or bytes.

    :returns: bytes object
    """
    if isinstance(source, bytes):
        return source
    elif isinstance(source, str):
        return source.encode(encoding)
    else:
        raise ExpectedStringError(source, errname)

def to_native_str(source, encoding="utf-8", errname="value"):
    """take in str or bytes, return str

    :raises TypeError: if source is not str or bytes.
    :raises UnicodeDecodeError: if bytes can't be decoded using ``encoding``.
    """
    if isinstance(source, bytes):
        return source.decode(encoding)
    elif isinstance(source, str):
        return source
    else:
        raise ExpectedStringError(source, errname)

#=================================================================================
#string helpers
#=================================================================================

#: check two strings/bytes for equality, taking constant time relative
#: to the size of the righthand input.
consteq = compare_digest

#=================================================================================
#randomness
#=================================================================================

# salts for stored hashes come straight from the os entropy source;
# SystemRandom has no state to seed, so it's safe to share between threads.
rng = random.SystemRandom()

def getrandbytes(rng, count):
    """return byte-string containing *count* number of randomly generated bytes, using specified rng

    :raises RandomSourceError: if the rng's entropy source is unavailable.
    """
    if not count:
        return b""
    try:
        value = rng.getrandbits(count<<3)
    except (NotImplementedError, OSError) as err:
        log.debug("random source failed while reading %d bytes: %r", count, err)
        raise RandomSourceError("random source unavailable: %s" % (err,))
    def helper(value):
        i = 0
        while i < count:
            yield value & 0xff
            value >>= 8
            i += 1
    return bytes(helper(value))

#=================================================================================
#eof
#=================================================================================
