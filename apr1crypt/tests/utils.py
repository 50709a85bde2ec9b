"""helpers for apr1crypt unittests"""
#=========================================================
#imports
#=========================================================
#core
import logging; log = logging.getLogger(__name__)
import unittest
import warnings
#site
#pkg
from apr1crypt.utils import classproperty, rng
#local
__all__ = [
    #util funcs
    'tonn',

    #unit testing
    'TestCase',
    'HandlerCase',
]

#=========================================================
#misc utility funcs
#=========================================================
def tonn(source):
    "convert native string to non-native string"
    if isinstance(source, str):
        return source.encode("utf-8")
    return source.decode("utf-8")

#=========================================================
#custom test base
#=========================================================
class TestCase(unittest.TestCase):
    """apr1crypt-specific test case class

    this class adds a number of features to the standard TestCase...
    * common prefix for all test descriptions
    * skips subclasses whose names start with "_", and base classes
      which set the private ``__unittest_skip`` flag
    * __msg__ kwd added to assertRaises()
    """
    #----------------------------------------------------------------
    # make it easy for test cases to add common prefix to shortDescription
    #----------------------------------------------------------------

    # string prepended to all tests in TestCase
    descriptionPrefix = None

    def shortDescription(self):
        "wrap shortDescription() method to prepend descriptionPrefix"
        desc = super(TestCase, self).shortDescription()
        prefix = self.descriptionPrefix
        if prefix:
            desc = "%s: %s" % (prefix, desc or str(self))
        return desc

    #----------------------------------------------------------------
    # hack things so the runner skips base classes who have
    # "__unittest_skip=True" set, or whose names start with "_"
    #----------------------------------------------------------------
    @classproperty
    def __unittest_skip__(cls):
        name = cls.__name__
        return name.startswith("_") or \
               getattr(cls, "_%s__unittest_skip" % name, False)

    @classproperty
    def __test__(cls):
        return not cls.__unittest_skip__

    # flag to skip *this* class
    __unittest_skip = True

    #----------------------------------------------------------------
    # override assertRaises() to support '__msg__' keyword
    #----------------------------------------------------------------
    def assertRaises(self, _exc_type, _callable=None, *args, **kwds):
        msg = kwds.pop("__msg__", None)
        if _callable is None:
            return super(TestCase, self).assertRaises(_exc_type, *args, **kwds)
        try:
            result = _callable(*args, **kwds)
        except _exc_type:
            return
        std = "function returned %r, expected it to raise %r" % (result,
                                                                 _exc_type)
        raise self.failureException(msg or std)

#=========================================================
#other unittest helpers
#=========================================================
class HandlerCase(TestCase):
    """base class for testing password hash handlers (esp apr1crypt.utils.handlers subclasses)

    In order to use this to test a handler,
    create a subclass with the appropriate attributes filled in,
    and run the subclass via the test runner.
    """
    #=========================================================
    # attrs to be filled in by subclass for testing specific handler
    #=========================================================

    # specify handler object here (required)
    handler = None

    # list of (secret, hash) tuples which are known to be correct
    known_correct_hashes = []

    # list of (config, secret, hash) tuples which are known to be correct
    known_correct_configs = []

    # hashes so malformed they aren't even identified properly
    known_unidentified_hashes = []

    # hashes which are identifiable but malformed - they should identify()
    # as True, but cause an error when passed to verify.
    known_malformed_hashes = []

    # list of (handler name, hash) pairs for other algorithm's hashes that
    # handler shouldn't identify as belonging to it
    known_other_hashes = [
        ('des_crypt', '6f8c114b58f2c'),
        ('md5_crypt', '$1$dOHYPKoP$tnxS1T8Q6VVn3kpV8cN6o.'),
        ('sha512_crypt', "$6$rounds=123456$asaltof16chars..$BtCwjqMJGx5hrJhZywW"
         "vt0RLE8uZ4oPwcelCjmw2kSYu.Ec6ycULevoBK25fs2xXgMNrCzIMVcgEJAstJeonj1"),
    ]

    # passwords used to test basic encrypt behavior - generally
    # don't need to be overidden.
    stock_passwords = [
        "test",
        "€¥$",
        b'\xe2\x82\xac\xc2\xa5$',
    ]

    #=========================================================
    # alg interface helpers - allows subclass to overide how
    # default tests invoke the handler
    #=========================================================
    def do_encrypt(self, secret, **kwds):
        "call handler's encrypt method with specified options"
        return self.handler.encrypt(secret, **kwds)

    def do_verify(self, secret, hash):
        "call handler's verify method"
        return self.handler.verify(secret, hash)

    def do_identify(self, hash):
        "call handler's identify method"
        return self.handler.identify(hash)

    def do_genconfig(self, **kwds):
        "call handler's genconfig method with specified options"
        return self.handler.genconfig(**kwds)

    def do_genhash(self, secret, config):
        "call handler's genhash method with specified options"
        return self.handler.genhash(secret, config)

    #=========================================================
    # support
    #=========================================================
    @classmethod
    def iter_known_hashes(cls):
        "iterate through known (secret, hash) pairs"
        for secret, hash in cls.known_correct_hashes:
            yield secret, hash
        for config, secret, hash in cls.known_correct_configs:
            yield secret, hash

    def get_sample_hash(self):
        "test random sample secret/hash pair"
        known = list(self.iter_known_hashes())
        return rng.choice(known)

    def check_verify(self, secret, hash, msg=None, negate=False):
        "helper to check verify() outcome"
        result = self.do_verify(secret, hash)
        self.assertTrue(result is True or result is False,
                        "verify() returned non-boolean value: %r" % (result,))
        if negate:
            if not result:
                return
            if not msg:
                msg = ("verify incorrectly returned True: secret=%r, hash=%r" %
                       (secret, hash))
            raise self.failureException(msg)
        else:
            if result:
                return
            if not msg:
                msg = "verify failed: secret=%r, hash=%r" % (secret, hash)
            raise self.failureException(msg)

    def check_returned_native_str(self, result, func_name):
        self.assertIsInstance(result, str,
            "%s() failed to return native string: %r" % (func_name, result,))

    #=========================================================
    # internal class attrs
    #=========================================================
    __unittest_skip = True

    @property
    def descriptionPrefix(self):
        return self.handler.name

    #=========================================================
    # basic tests
    #=========================================================
    def test_02_config_workflow(self):
        """test basic config-string workflow

        this tests that genconfig() returns the expected types,
        and that identify() and genhash() handle the result correctly.
        """
        config = self.do_genconfig()
        self.check_returned_native_str(config, "genconfig")

        #
        # genhash() should always accept genconfig()'s output
        #
        result = self.do_genhash('stub', config)
        self.check_returned_native_str(result, "genhash")

        #
        # verify() should never accept config strings
        #
        self.assertRaises(ValueError, self.do_verify, 'stub', config,
            __msg__="verify() failed to reject genconfig() output: %r" %
            (config,))

        #
        # identify() should positively identify config strings
        #
        self.assertTrue(self.do_identify(config),
            "identify() failed to identify genconfig() output: %r" %
            (config,))

    def test_03_hash_workflow(self):
        """test basic hash-string workflow.

        this tests that encrypt()'s hashes are accepted
        by verify() and identify(), and regenerated correctly by genhash().
        the test is run against a couple of different stock passwords.
        """
        wrong_secret = 'stub'
        for secret in self.stock_passwords:

            #
            # encrypt() should generate native str hash
            #
            result = self.do_encrypt(secret)
            self.check_returned_native_str(result, "encrypt")

            #
            # verify() should work only against secret
            #
            self.check_verify(secret, result)
            self.check_verify(wrong_secret, result, negate=True)

            #
            # genhash() should reproduce original hash
            #
            other = self.do_genhash(secret, result)
            self.check_returned_native_str(other, "genhash")
            self.assertEqual(other, result, "genhash() failed to reproduce "
                             "hash: secret=%r hash=%r: result=%r" %
                             (secret, result, other))

            #
            # genhash() should NOT reproduce original hash for wrong password
            #
            other = self.do_genhash(wrong_secret, result)
            self.assertNotEqual(other, result, "genhash() duplicated "
                             "hash: secret=%r hash=%r wrong_secret=%r: result=%r" %
                             (secret, result, wrong_secret, other))

            #
            # identify() should positively identify hash
            #
            self.assertTrue(self.do_identify(result))

    def test_04_hash_types(self):
        "test hashes can be str or bytes"
        # encrypt using non-native secret
        result = self.do_encrypt(tonn('stub'))
        self.check_returned_native_str(result, "encrypt")

        # verify using non-native hash
        self.check_verify('stub', tonn(result))

        # verify using non-native hash AND secret
        self.check_verify(tonn('stub'), tonn(result))

        # genhash using non-native hash
        other = self.do_genhash('stub', tonn(result))
        self.check_returned_native_str(other, "genhash")
        self.assertEqual(other, result)

        # identify using non-native hash
        self.assertTrue(self.do_identify(tonn(result)))

    def test_05_wrong_types(self):
        "test non-string secrets & hashes are rejected"
        sample = self.do_encrypt('stub')
        self.assertRaises(TypeError, self.do_encrypt, None)
        self.assertRaises(TypeError, self.do_encrypt, 1)
        self.assertRaises(TypeError, self.do_verify, None, sample)
        self.assertRaises(TypeError, self.do_verify, 'stub', None)
        self.assertRaises(TypeError, self.do_genhash, 'stub', 1)
        self.assertRaises(TypeError, self.do_identify, 1)

    #==============================================================
    # salts
    #==============================================================
    def test_11_unique_salt(self):
        "test encrypt() / genconfig() creates new salt each time"
        # 48 bits of salt; odds of a collision are negligible
        self.assertNotEqual(self.do_genconfig(), self.do_genconfig())
        self.assertNotEqual(self.do_encrypt("stub"), self.do_encrypt("stub"))

    def test_12_min_salt_size(self):
        "test encrypt() / genconfig() honors min_salt_size"
        handler = self.handler
        salt_char = handler.salt_chars[0:1]
        min_size = handler.min_salt_size

        #
        # check min is accepted
        #
        s1 = salt_char * min_size
        c1 = self.do_genconfig(salt=s1)

        # config must be accepted back by genhash()
        h1 = self.do_genhash('stub', c1)
        self.check_verify('stub', h1)
        self.assertEqual(self.handler.from_string(h1).salt, s1)

        c2 = self.do_genconfig(salt_size=min_size)
        self.check_returned_native_str(self.do_genhash('stub', c2), "genhash")

        self.do_encrypt('stub', salt_size=min_size)

        #
        # check min-1 is rejected
        #
        if min_size > 0:
            self.assertRaises(ValueError, self.do_genconfig,
                              salt=s1[:-1])

        self.assertRaises(ValueError, self.do_encrypt, 'stub',
                          salt_size=min_size-1)

    def test_13_max_salt_size(self):
        "test encrypt() / genconfig() honors max_salt_size"
        handler = self.handler
        max_size = handler.max_salt_size
        salt_char = handler.salt_chars[0:1]

        #
        # check max size is accepted
        #
        s1 = salt_char * max_size
        c1 = self.do_genconfig(salt=s1)

        self.do_encrypt('stub', salt_size=max_size)

        #
        # check max size + 1 is rejected
        #
        s2 = s1 + salt_char
        self.assertRaises(ValueError, self.do_genconfig, salt=s2)

        self.assertRaises(ValueError, self.do_encrypt, 'stub',
                          salt_size=max_size+1)

        #
        # should accept too-large salt in relaxed mode
        #
        with warnings.catch_warnings(record=True) as wlog:
            warnings.simplefilter("always")
            c2 = self.do_genconfig(salt=s2, relaxed=True)
        self.assertEqual(c2, c1)
        self.assertEqual(len(wlog), 1)

        #
        # check smaller than mx is NOT truncated
        #
        if handler.min_salt_size < max_size:
            c3 = self.do_genconfig(salt=s1[:-1])
            self.assertNotEqual(c3, c1)

    def test_14_salt_chars(self):
        "test genconfig() honors salt_chars"
        handler = self.handler
        mx = handler.max_salt_size
        mn = handler.min_salt_size
        cs = handler.salt_chars

        # make sure all listed chars are accepted
        chunk = mx or 32
        for i in range(0,len(cs),chunk):
            salt = cs[i:i+chunk]
            if len(salt) < mn:
                salt = (salt*(mn//len(salt)+1))[:chunk]
            self.do_genconfig(salt=salt)

        # check some invalid salt chars, make sure they're rejected
        chunk = max(mn, 1)
        for c in '\x00\xff$:':
            if c not in cs:
                self.assertRaises(ValueError, self.do_genconfig, salt=c*chunk,
                                  __msg__="invalid salt char %r:" % (c,))

    def test_15_generated_salt_chars(self):
        "test generated salts use only salt_chars, and honor salt_size"
        handler = self.handler
        cs = handler.salt_chars
        for size in range(handler.min_salt_size, handler.max_salt_size+1):
            hash = self.do_encrypt('stub', salt_size=size)
            salt = handler.from_string(hash).salt
            self.assertEqual(len(salt), size, "hash=%r:" % (hash,))
            self.assertTrue(all(c in cs for c in salt),
                            "invalid salt char in %r" % (hash,))

    #==============================================================
    # reference hashes
    #==============================================================
    def test_70_hashes(self):
        "test known hashes"
        self.assertTrue(self.known_correct_hashes or self.known_correct_configs,
                        "test must set at least one of 'known_correct_hashes' "
                        "or 'known_correct_configs'")
        for secret, hash in self.iter_known_hashes():
            # hash should be positively identified by handler
            self.assertTrue(self.do_identify(hash),
                "identify() failed to identify hash: %r" % (hash,))

            # secret should verify successfully against hash
            self.check_verify(secret, hash, "verify() of known hash failed: "
                              "secret=%r, hash=%r" % (secret, hash))

            # genhash() should reproduce same hash
            result = self.do_genhash(secret, hash)
            self.assertEqual(result, hash, "genhash() failed to reproduce "
                             "known hash: secret=%r, hash=%r: result=%r" %
                             (secret, hash, result))

            # wrong secret should fail
            wrong = secret + (b"x" if isinstance(secret, bytes) else "x")
            self.check_verify(wrong, hash, negate=True)

    def test_72_configs(self):
        "test known config strings"
        for config, secret, hash in self.known_correct_configs:
            self.assertTrue(self.do_identify(config),
                "identify() failed to identify known config string: %r" %
                (config,))
            self.assertRaises(ValueError, self.do_verify, secret, config,
                __msg__="verify() failed to reject config string: %r" %
                (config,))
            result = self.do_genhash(secret, config)
            self.assertEqual(result, hash, "genhash() failed to reproduce "
                "known hash from config: secret=%r, config=%r, hash=%r: "
                "result=%r" % (secret, config, hash, result))

    def test_73_unidentified(self):
        "test known unidentifiably-mangled strings"
        for hash in self.known_unidentified_hashes:
            self.assertFalse(self.do_identify(hash),
                    "identify() incorrectly identified known unidentifiable "
                    "hash: %r" % (hash,))
            self.assertRaises(ValueError, self.do_verify, 'stub', hash,
                    __msg__= "verify() failed to throw error for unidentifiable "
                    "hash: %r" % (hash,))
            self.assertRaises(ValueError, self.do_genhash, 'stub', hash,
                    __msg__= "genhash() failed to throw error for unidentifiable "
                    "hash: %r" % (hash,))

    def test_74_malformed(self):
        "test known identifiable-but-malformed strings"
        for hash in self.known_malformed_hashes:
            self.assertTrue(self.do_identify(hash),
                    "identify() failed to identify known malformed "
                    "hash: %r" % (hash,))
            self.assertRaises(ValueError, self.do_verify, 'stub', hash,
                    __msg__= "verify() failed to throw error for malformed "
                    "hash: %r" % (hash,))

    def test_75_foreign(self):
        "test known foreign hashes"
        for name, hash in self.known_other_hashes:
            if name == self.handler.name:
                continue
            self.assertFalse(self.do_identify(hash),
                    "identify() incorrectly identified hash belonging to "
                    "%s: %r" % (name, hash))

    #=========================================================
    #eoc
    #=========================================================

#=========================================================
#EOF
#=========================================================
