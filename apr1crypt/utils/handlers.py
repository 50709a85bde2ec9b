"""apr1crypt.utils.handlers - framework for implementing modular-crypt hash handlers"""
#=========================================================
#imports
#=========================================================
#core
import logging; log = logging.getLogger(__name__)
from warnings import warn
#site
#libs
import apr1crypt.exc as exc
from apr1crypt.exc import Apr1HashWarning, ExpectedStringError
from apr1crypt.utils import classproperty, consteq, getrandbytes, rng, \
                            to_bytes, HASH64_CHARS
from apr1crypt.utils import h64
#pkg
#local
__all__ = [
    #parsing / formatting helpers
    'identify_prefix',
    'parse_mc2',
    'render_mc2',

    #framework for implementing handlers
    'GenericHandler',
        'HasSalt',
]

#=========================================================
#identify helpers
#=========================================================
def identify_prefix(hash, prefix):
    "identify() helper for matching against prefixes"
    if not hash:
        return False
    if isinstance(hash, bytes):
        try:
            hash = hash.decode("ascii")
        except UnicodeDecodeError:
            return False
    elif not isinstance(hash, str):
        raise ExpectedStringError(hash, "hash")
    return hash.startswith(prefix)

#=========================================================
#parsing helpers
#=========================================================
def parse_mc2(hash, prefix, handler=None, sep="$", checksum=True):
    """parse hash using 2-part modular crypt format

    eg: APR-MD5-Crypt: ``$apr1$salt[$checksum]``

    :arg hash: hash or configuration string (str or bytes)
    :arg prefix: identifying prefix, including trailing separator
    :param handler: handler class, used for error messages
    :param checksum:
        if ``False``, everything after the salt field is ignored
        instead of being parsed as the checksum.

    :raises InvalidMagicPrefixError: if hash doesn't start with prefix
    :raises InvalidSaltFormatError: if there's no salt field after the prefix
    :raises InvalidChecksumError: if hash has more than 2 fields

    :returns: ``(salt, checksum)`` tuple; checksum is ``None`` if absent.
    """
    if isinstance(hash, bytes):
        # latin-1 keeps bytes & chars 1:1, so salt truncation stays byte-based;
        # any non-ascii char that survives gets rejected by the charset checks.
        hash = hash.decode("latin-1")
    elif not isinstance(hash, str):
        raise ExpectedStringError(hash, "hash")
    if not hash.startswith(prefix):
        raise exc.InvalidMagicPrefix(handler)
    rest = hash[len(prefix):]
    if not rest:
        raise exc.InvalidSaltFormat(handler, "no salt field")
    if not checksum:
        return rest.split(sep, 1)[0], None
    parts = rest.split(sep)
    if len(parts) == 2:
        salt, chk = parts
        return salt, chk or None
    elif len(parts) == 1:
        return parts[0], None
    else:
        raise exc.InvalidChecksum(handler, "too many '%s' separators" % (sep,))

#=====================================================
#formatting helpers
#=====================================================
def render_mc2(ident, salt, checksum, sep="$"):
    "format hash using 2-part modular crypt format; inverse of parse_mc2"
    if checksum:
        return "%s%s%s%s" % (ident, salt, sep, checksum)
    elif salt:
        return "%s%s" % (ident, salt)
    else:
        # bare ident has no salt field; keep the separator so parse_mc2
        # reads it back as an empty salt.
        return "%s%s" % (ident, sep)

#=========================================================
#base handler
#=========================================================
class GenericHandler(object):
    """helper class for implementing hash handlers.

    :param checksum:
        this should contain the digest portion of a
        parsed hash (mainly provided when the constructor is called
        by :meth:`from_string()`).
        defaults to ``None``.

    :param use_defaults:
        If ``False`` (the default), a :exc:`TypeError` should be thrown
        if any settings required by the handler were not explicitly provided.

        If ``True``, the handler should attempt to provide a default for any
        missing values, e.g. generate a missing salt.
        This is typically only set to ``True`` when the constructor
        is called by :meth:`encrypt` or :meth:`genconfig`.

    :param relaxed:
        If ``False`` (the default), a :exc:`ValueError` should be thrown
        if any settings are out of bounds or otherwise invalid.

        If ``True``, they should be corrected if possible, and a warning
        issued. If not possible, only then should an error be raised.

    Class Attributes
    ================

    .. attribute:: name

        name of the hash scheme, used in error messages.

    .. attribute:: ident

        identifying prefix used by :meth:`identify` and the parsers.

    .. attribute:: checksum_size

        number of characters expected in the checksum string.

    .. attribute:: checksum_chars

        string listing all the characters allowed in the checksum string.

    Required Methods
    ================
    The following methods must be provided by handler subclass:

    .. automethod:: from_string
    .. automethod:: to_string
    .. automethod:: calc_checksum
    """

    #=====================================================
    #class attr
    #=====================================================
    name = None
    setting_kwds = ()
    context_kwds = ()

    ident = None #identifier prefix

    checksum_size = None #if specified, _norm_checksum will require this length
    checksum_chars = None #if specified, _norm_checksum() will validate this

    #=====================================================
    #instance attrs
    #=====================================================
    checksum = None # stores checksum

    #=====================================================
    #init
    #=====================================================
    def __init__(self, checksum=None, use_defaults=False, relaxed=False,
                 **kwds):
        self.use_defaults = use_defaults
        self.relaxed = relaxed
        super(GenericHandler, self).__init__(**kwds)
        self.checksum = self._norm_checksum(checksum)

    def _norm_checksum(self, checksum):
        """validates checksum keyword against class requirements,
        returns normalized version of checksum.
        """
        if checksum is None:
            return None

        if isinstance(checksum, bytes):
            checksum = checksum.decode('latin-1')

        # check size
        cc = self.checksum_size
        if cc and len(checksum) != cc:
            raise exc.InvalidChecksum(self, "checksum must be exactly "
                                      "%d characters" % (cc,))

        # check charset
        cs = self.checksum_chars
        if cs:
            bad = set(checksum)
            bad.difference_update(cs)
            if bad:
                raise exc.InvalidChecksum(self, "invalid characters in "
                                          "checksum: %r" % ("".join(sorted(bad)),))

        return checksum

    #=====================================================
    #formatting interface
    #=====================================================
    @classmethod
    def identify(cls, hash):
        return identify_prefix(hash, cls.ident)

    @classmethod
    def from_string(cls, hash): #pragma: no cover
        """return parsed instance from hash string

        :raises ValueError: if hash is incorrectly formatted

        :returns:
            hash parsed into components,
            for formatting / calculating checksum.
        """
        raise NotImplementedError("%s must implement from_string()" % (cls,))

    @classmethod
    def from_config(cls, config): #pragma: no cover
        """return parsed instance from configuration string,
        ignoring any checksum already present.
        """
        raise NotImplementedError("%s must implement from_config()" % (cls,))

    def to_string(self): #pragma: no cover
        """render instance to hash or configuration string

        :returns:
            if :attr:`checksum` is set, should return full hash string.
            if not, should return abbreviated configuration string.
        """
        raise NotImplementedError("%s must implement to_string()" % (type(self),))

    #=========================================================
    #'crypt-style' interface
    #=========================================================
    @classmethod
    def genconfig(cls, **settings):
        return cls(use_defaults=True, **settings).to_string()

    @classmethod
    def genhash(cls, secret, config):
        self = cls.from_config(config)
        self.checksum = self.calc_checksum(secret)
        return self.to_string()

    def calc_checksum(self, secret): #pragma: no cover
        "given secret; calcuate and return encoded checksum portion of hash string, taking config from object state"
        raise NotImplementedError("%s must implement calc_checksum()" % (self.__class__,))

    #=========================================================
    #'application' interface
    #=========================================================
    @classmethod
    def encrypt(cls, secret, **settings):
        self = cls(use_defaults=True, **settings)
        self.checksum = self.calc_checksum(secret)
        return self.to_string()

    @classmethod
    def verify(cls, secret, hash):
        self = cls.from_string(hash)
        if self.checksum is None:
            raise exc.MissingDigest(cls)
        # compare whole strings, so a stored salt that had to be
        # truncated never matches.
        self.checksum = self.calc_checksum(secret)
        return consteq(self.to_string().encode("utf-8"),
                       to_bytes(hash, "utf-8", "hash"))

    #=========================================================
    #eoc
    #=========================================================

#=====================================================
#GenericHandler mixin classes
#=====================================================
class HasSalt(GenericHandler):
    """mixin for validating salts.

    This :class:`GenericHandler` mixin adds a ``salt`` keyword to the class constuctor;
    any value provided is passed through the :meth:`_norm_salt` method,
    which takes care of validating salt length and content,
    as well as generating new salts if one it not provided.

    :param salt: optional salt string
    :param salt_size: optional size of salt (only used if no salt provided); defaults to :attr:`default_salt_size`.

    Class Attributes
    ================

    .. attribute:: min_salt_size

        The minimum number of characters allowed in a salt string.

    .. attribute:: max_salt_size

        The maximum number of characters allowed in a salt string.
        Larger salts are rejected, unless ``relaxed=True``,
        in which case they're truncated & a warning is issued.

    .. attribute:: default_salt_size

        size of generated salts; defaults to :attr:`max_salt_size`.

    .. attribute:: salt_chars

        A string containing all the characters which are allowed in the salt string.
    """
    #=========================================================
    #class attrs
    #=========================================================
    min_salt_size = 0
    max_salt_size = None
    salt_chars = HASH64_CHARS

    @classproperty
    def default_salt_size(cls):
        "size of generated salts (defaults to max_salt_size if not specified by subclass)"
        return cls.max_salt_size

    #=========================================================
    #instance attrs
    #=========================================================
    salt = None

    #=========================================================
    #init
    #=========================================================
    def __init__(self, salt=None, salt_size=None, **kwds):
        super(HasSalt, self).__init__(**kwds)
        self.salt = self._norm_salt(salt, salt_size=salt_size)

    def _norm_salt(self, salt, salt_size=None):
        """helper to normalize & validate user-provided salt string

        If no salt provided, a random salt is generated
        using :attr:`default_salt_size`.

        :arg salt: salt string or ``None``
        :param salt_size: optionally specified size of autogenerated salt

        :raises TypeError:
            If salt not provided and ``use_defaults=False``.

        :raises ValueError:

            * if salt_size is outside of the allowed range.
            * if salt contains chars that aren't in :attr:`salt_chars`.
            * if salt contains less than :attr:`min_salt_size` characters.
            * if ``relaxed=False`` and salt has more than :attr:`max_salt_size`
              characters (if ``relaxed=True``, the salt is truncated
              and a warning is issued instead).

        :returns:
            normalized or generated salt
        """
        # generate new salt if none provided
        if salt is None:
            if not self.use_defaults:
                raise TypeError("no salt specified")
            if salt_size is None:
                salt_size = self.default_salt_size
            mn, mx = self.min_salt_size, self.max_salt_size
            if salt_size < mn or (mx is not None and salt_size > mx):
                raise ValueError("salt_size out of range for %s: %r" %
                                 (self.name, salt_size))
            salt = self._generate_salt(salt_size)

        # check type
        if isinstance(salt, bytes):
            salt = salt.decode("latin-1")
        elif not isinstance(salt, str):
            raise ExpectedStringError(salt, "salt")

        # check max size
        mx = self.max_salt_size
        if mx and len(salt) > mx:
            msg = "salt too large (%s requires <= %d chars)" % (self.name, mx)
            if self.relaxed:
                warn(msg, Apr1HashWarning)
                salt = self._truncate_salt(salt, mx)
            else:
                raise exc.InvalidSaltFormat(self, msg)

        # check charset
        sc = self.salt_chars
        if sc is not None:
            bad = set(salt)
            bad.difference_update(sc)
            if bad:
                raise exc.InvalidSaltFormat(self, "invalid characters in "
                                            "salt: %r" % ("".join(sorted(bad)),))

        # check min size
        mn = self.min_salt_size
        if mn and len(salt) < mn:
            raise exc.InvalidSaltFormat(self, "salt too small (%s requires "
                                        ">= %d chars)" % (self.name, mn))

        return salt

    @staticmethod
    def _truncate_salt(salt, mx):
        return salt[:mx]

    def _generate_salt(self, salt_size):
        """helper method for _norm_salt(); generates a new random salt string.

        reads just enough random bytes to fill *salt_size* hash64 chars
        (6 bits per char), then encodes & clips them.
        """
        count = (salt_size * 6 + 7) // 8
        salt = h64.encode_bytes(getrandbytes(rng, count))[:salt_size]
        log.debug("generated %d-char salt for %s", salt_size, self.name)
        return salt.decode("ascii")

    #=========================================================
    #eoc
    #=========================================================

#=========================================================
#eof
#=========================================================
