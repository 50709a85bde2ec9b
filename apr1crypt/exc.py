"""apr1crypt.exc -- exceptions & warnings raised by apr1crypt"""
#==========================================================================
# exceptions
#==========================================================================
class MalformedHashError(ValueError):
    """Error raised if a hash or salt string carries the ``$apr1$`` format,
    but one of its components is invalid.

    :exc:`!MalformedHashError` derives from :exc:`ValueError`,
    so callers which only care that the input was bad can catch that instead.
    """

class InvalidMagicPrefixError(MalformedHashError):
    """Error raised if a salt parameter or hash string does not begin
    with the ``$apr1$`` prefix.
    """

class InvalidSaltFormatError(MalformedHashError):
    """Error raised if a salt parameter has no salt field,
    or the salt contains characters outside of the hash64 alphabet.
    """

class InvalidChecksumError(MalformedHashError):
    """Error raised if the digest portion of a stored hash
    is not exactly 22 hash64 characters.
    """

class MissingDigestError(ValueError):
    """Error raised when :meth:`verify` is passed a configuration string
    (``$apr1$salt``) instead of a full hash.
    """

class RandomSourceError(RuntimeError):
    """Error raised if the operating system's random source
    could not supply bytes for a new salt.

    :exc:`!RandomSourceError` derives from :exc:`RuntimeError`,
    since this indicates a broken host rather than bad input;
    there is nothing useful the caller can retry.
    """

#==========================================================================
# warnings
#==========================================================================
class Apr1Warning(UserWarning):
    """base class for apr1crypt's user warnings"""

class Apr1HashWarning(Apr1Warning):
    """Warning issued when a setting passed to the hash handler
    was out of range, but could be corrected.

    This occurs when ``relaxed=True`` is passed along with a salt
    longer than 8 characters; the salt is truncated instead of rejected.
    """

#==========================================================================
# error constructors
#==========================================================================
def _get_name(handler):
    return handler.name if handler else "<unnamed>"

def type_name(value):
    "return pretty-printed string containing name of value's type"
    cls = value.__class__
    if cls.__module__ and cls.__module__ not in ["builtins"]:
        return "%s.%s" % (cls.__module__, cls.__name__)
    elif value is None:
        return 'None'
    else:
        return cls.__name__

def ExpectedTypeError(value, expected, param):
    "error message when param was supposed to be one type, but found another"
    # NOTE: value is never displayed, since it may sometimes be a password.
    name = type_name(value)
    return TypeError("%s must be %s, not %s" % (param, expected, name))

def ExpectedStringError(value, param):
    "error message when param was supposed to be str or bytes"
    return ExpectedTypeError(value, "str or bytes", param)

def MissingDigest(handler=None):
    "raised when verify() method gets passed config string instead of hash"
    name = _get_name(handler)
    return MissingDigestError("expected %s hash, got %s config string instead" %
                              (name, name))

def InvalidMagicPrefix(handler=None):
    "error raised if salt parameter / hash has the wrong prefix"
    return InvalidMagicPrefixError("not a valid %s hash (wrong prefix)" %
                                   _get_name(handler))

def InvalidSaltFormat(handler=None, reason=None):
    "error raised if salt parameter / hash has no usable salt field"
    text = "malformed %s salt" % _get_name(handler)
    if reason:
        text = "%s (%s)" % (text, reason)
    return InvalidSaltFormatError(text)

def InvalidChecksum(handler=None, reason=None):
    "error raised if hash was recognized, but the digest portion is malformed"
    text = "malformed %s hash" % _get_name(handler)
    if reason:
        text = "%s (%s)" % (text, reason)
    return InvalidChecksumError(text)

#==========================================================================
# eof
#==========================================================================
