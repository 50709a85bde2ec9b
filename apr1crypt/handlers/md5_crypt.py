"""apr1crypt.handlers.md5_crypt - apache variant of the md5-crypt algorithm"""
#=========================================================
#imports
#=========================================================
#core
from hashlib import md5
import logging; log = logging.getLogger(__name__)
#site
#libs
from apr1crypt.utils import h64, to_bytes
import apr1crypt.utils.handlers as uh
#pkg
#local
__all__ = [
    "MAGIC",
    "SALT_LEN_MIN",
    "SALT_LEN_MAX",
    "ROUNDS",
    "raw_apr_md5_crypt",
    "apr_md5_crypt",
    "generate_salt",
    "crypt",
    "verify",
    "identify",
]

#=========================================================
#constants
#=========================================================
MAGIC = "$apr1$"

#: bounds used by generate_salt(); parsing still accepts an empty salt
SALT_LEN_MIN = 1
SALT_LEN_MAX = 8

ROUNDS = 1000

B_NULL = b"\x00"
B_APR_MAGIC = MAGIC.encode("ascii")

#=========================================================
#pure-python backend
#=========================================================
def _round_variant(i):
    "index into the even/odd round inputs: bit 0 = mix in salt, bit 1 = mix in secret"
    return (1 if i % 3 else 0) + (2 if i % 7 else 0)

# round inputs repeat every 42 rounds (lcm of 2, 3 & 7)
_OFFSETS = [(_round_variant(i), _round_variant(i+1)) for i in range(0, 42, 2)]

_chk_offsets = (
    12,6,0,
    13,7,1,
    14,8,2,
    15,9,3,
    5,10,4,
    11,
)

def extend(source, size_ref):
    "helper which repeats <source> so it's the same length as <size_ref>"
    m,d = divmod(len(size_ref), len(source))
    if d:
        return source*m + source[:d]
    else:
        return source*m

def raw_apr_md5_crypt(secret, salt):
    """perform raw apr-md5-crypt calculation

    :arg secret:
        password, bytes or str (encoded to utf-8)

    :arg salt:
        salt portion of hash, bytes or str (encoded to ascii),
        clipped to max 8 bytes.

    :returns:
        encoded checksum as str (22 hash64 chars)
    """
    secret = to_bytes(secret, "utf-8", "secret")
    salt = to_bytes(salt, "ascii", "salt")
    if len(salt) > SALT_LEN_MAX:
        salt = salt[:SALT_LEN_MAX]

    #primary hash = secret+magic+salt+...
    a_hash = md5(secret + B_APR_MAGIC + salt)

    # primary hash - add len(secret) chars of tmp hash,
    # where temp hash is md5(secret+salt+secret)
    b = md5(secret + salt + secret).digest()
    a_hash.update(extend(b, secret))

    # primary hash - add null chars & first char of secret.
    # historical quirk of the original C code (it memclear'ed the buffer
    # it meant to read from), every implementation has to follow it.
    idx = len(secret)
    evenchar = secret[:1]
    while idx > 0:
        a_hash.update(B_NULL if idx & 1 else evenchar)
        idx >>= 1
    a = a_hash.digest()

    # next: 1000 rounds of md5, each round digesting a concatenation of:
    #   secret if round % 2 else result
    #   salt if round % 3
    #   secret if round % 7
    #   result if round % 2 else secret
    #
    # the round-dependant pieces are built ahead of time, so each
    # (even, odd) pair of rounds becomes md5(odd + md5(c + even)).
    p = secret
    s = salt
    p_p = p*2
    s_p = s+p
    evens = [p, s_p, p_p, s_p+p]
    odds =  [p, p+s, p_p, p+s_p]
    data = [(evens[e], odds[o]) for e,o in _OFFSETS]

    # 23 blocks of 42 rounds each
    c = a
    blocks, tail = divmod(ROUNDS, 42)
    i = 0
    while i < blocks:
        for even, odd in data:
            c = md5(odd + md5(c + even).digest()).digest()
        i += 1

    # remaining 34 rounds, 2 at a time
    for even, odd in data[:tail//2]:
        c = md5(odd + md5(c + even).digest()).digest()

    #encode resulting hash
    return h64.encode_transposed_bytes(c, _chk_offsets).decode("ascii")

def decode_digest(checksum):
    "decode 22-char checksum back into the raw 16 byte md5 digest; inverse of the last step of :func:`raw_apr_md5_crypt`"
    return h64.decode_transposed_bytes(checksum, _chk_offsets)

#=========================================================
#handler
#=========================================================
class apr_md5_crypt(uh.HasSalt, uh.GenericHandler):
    """This class implements the Apr-MD5-Crypt password hash.

    It supports a variable-length salt.

    The :meth:`encrypt()` and :meth:`genconfig` methods accept the following optional keywords:

    :param salt:
        Optional salt string.
        If not specified, one will be autogenerated (this is recommended).
        If specified, it must be 0-8 characters, drawn from the regexp range ``[./0-9A-Za-z]``.

    :param salt_size:
        Optional size of the autogenerated salt, 0-8 characters; defaults to 8.

    :param relaxed:
        If ``True``, a salt longer than 8 characters is truncated
        (issuing a :exc:`~apr1crypt.exc.Apr1HashWarning`) instead of rejected.
    """
    #=========================================================
    #algorithm information
    #=========================================================
    name = "apr_md5_crypt"
    ident = MAGIC
    setting_kwds = ("salt", "salt_size")

    checksum_size = 22
    checksum_chars = uh.HASH64_CHARS

    min_salt_size = 0
    max_salt_size = SALT_LEN_MAX
    salt_chars = uh.HASH64_CHARS

    #=========================================================
    #parsing & formatting
    #=========================================================
    @classmethod
    def from_string(cls, hash):
        salt, chk = uh.parse_mc2(hash, cls.ident, cls)
        return cls(salt=cls._truncate_salt(salt, cls.max_salt_size),
                   checksum=chk)

    @classmethod
    def from_config(cls, config):
        salt, _ = uh.parse_mc2(config, cls.ident, cls, checksum=False)
        return cls(salt=cls._truncate_salt(salt, cls.max_salt_size))

    def to_string(self):
        return uh.render_mc2(self.ident, self.salt, self.checksum)

    #=========================================================
    #primary interface
    #=========================================================
    def calc_checksum(self, secret):
        return raw_apr_md5_crypt(secret, self.salt)

    #=========================================================
    #eoc
    #=========================================================

#=========================================================
#crypt-style interface
#=========================================================
def generate_salt(length=SALT_LEN_MAX):
    """generate a random salt parameter string (``$apr1$`` + salt).

    *length* is clamped into ``[SALT_LEN_MIN, SALT_LEN_MAX]``.

    :raises RandomSourceError: if the os random source is unavailable.
    """
    if length > SALT_LEN_MAX:
        length = SALT_LEN_MAX
    elif length < SALT_LEN_MIN:
        length = SALT_LEN_MIN
    return apr_md5_crypt.genconfig(salt_size=length)

def crypt(key, salt_param=""):
    """hash *key* using the salt from *salt_param*, returning the full hash string.

    :arg key: secret as bytes or str (str is encoded to utf-8)
    :param salt_param:
        ``$apr1$``-prefixed salt string, optionally followed by ``$``
        and a digest (which is ignored); a full hash string works too.
        If empty, a fresh 8-char salt is generated.

    :raises InvalidMagicPrefixError: if *salt_param* lacks the ``$apr1$`` prefix.
    :raises InvalidSaltFormatError: if *salt_param* has no usable salt.
    """
    if not salt_param:
        return apr_md5_crypt.encrypt(key, salt_size=SALT_LEN_MAX)
    return apr_md5_crypt.genhash(key, salt_param)

def verify(key, hash):
    """check *key* against a stored hash string, in constant time.

    :raises ValueError: if *hash* is malformed, or is only a salt parameter.
    """
    return apr_md5_crypt.verify(key, hash)

def identify(hash):
    "check if *hash* looks like an apr-md5-crypt hash (prefix only)"
    return apr_md5_crypt.identify(hash)

#=========================================================
#eof
#=========================================================
