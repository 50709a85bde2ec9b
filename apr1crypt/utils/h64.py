"""apr1crypt.utils.h64 - hash64 encoding helpers"""
#=================================================================================
#imports
#=================================================================================
#core
from io import BytesIO
import logging; log = logging.getLogger(__name__)
#site
#pkg
from apr1crypt.utils import HASH64_CHARS
#local
__all__ = [
    "CHARS",

    "decode_bytes",                "encode_bytes",
    "decode_transposed_bytes",     "encode_transposed_bytes",

    "decode_int12", "encode_int12",
    "decode_int18", "encode_int18",
    "decode_int24", "encode_int24",
]

#=================================================================================
#6 bit value <-> char mapping, and other internal helpers
#=================================================================================
CHARS = HASH64_CHARS

_BCHARS = CHARS.encode("ascii")

#inverse map (char->value); accepts both str chars and byte values
_CHARIDX = dict((c,i) for i,c in enumerate(CHARS))
_CHARIDX.update((c,i) for i,c in enumerate(_BCHARS))

def _encode_6bit(value):
    "int -> single hash64 byte"
    return _BCHARS[value:value+1]

def _decode_6bit(value):
    "str char or byte value -> int"
    try:
        return _CHARIDX[value]
    except KeyError:
        raise ValueError("invalid character: %r" % (value,))

#=================================================================================
#encode offsets from buffer - used by apr_md5_crypt
#=================================================================================

def encode_bytes(source):
    "encode byte string to h64 format"
    # can't quite just use base64 and then translate chars,
    # since this scheme is little-endian.
    out = BytesIO()
    write = out.write
    end = len(source)
    tail = end % 3
    end -= tail
    idx = 0
    while idx < end:
        v1 = source[idx]
        v2 = source[idx+1]
        v3 = source[idx+2]
        write(encode_int24(v1 + (v2<<8) + (v3<<16)))
        idx += 3
    if tail:
        v1 = source[idx]
        if tail == 1:
            #NOTE: 4 msb of int are always 0
            write(encode_int12(v1))
        else:
            #NOTE: 2 msb of int are always 0
            v2 = source[idx+1]
            write(encode_int18(v1 + (v2<<8)))
    return out.getvalue()

def decode_bytes(source):
    "decode h64 format (str or bytes) into byte string"
    out = BytesIO()
    write = out.write
    end = len(source)
    tail = end % 4
    if tail == 1:
        #only 6 bits left, can't encode a whole byte!
        raise ValueError("input string length cannot be == 1 mod 4")
    end -= tail
    idx = 0
    while idx < end:
        v = decode_int24(source[idx:idx+4])
        write(bytes((v&0xff, (v>>8)&0xff, v>>16)))
        idx += 4
    if tail:
        if tail == 2:
            #NOTE: 4 msb of int are ignored (should be 0)
            v = decode_int12(source[idx:idx+2])
            write(bytes((v&0xff,)))
        else:
            #NOTE: 2 msb of int are ignored (should be 0)
            v = decode_int18(source[idx:idx+3])
            write(bytes((v&0xff, (v>>8)&0xff)))
    return out.getvalue()

def encode_transposed_bytes(source, offsets):
    "encode byte string to h64 format, using offset list to transpose elements"
    tmp = bytes(source[off] for off in offsets)
    return encode_bytes(tmp)

def decode_transposed_bytes(source, offsets):
    "decode h64 format into byte string, then undoing specified transposition; inverse of :func:`encode_transposed_bytes`"
    #NOTE: if transposition does not use all bytes of source, original can't be recovered
    tmp = decode_bytes(source)
    buf = [None] * len(offsets)
    for off, char in zip(offsets, tmp):
        buf[off] = char
    if None in buf:
        raise TypeError("offsets must map every byte of the source")
    return bytes(buf)

#=================================================================================
# int <-> h64 string, little-endian; each char carries 6 bits
#=================================================================================

def decode_int12(value):
    "decodes 2 char hash64 string -> 12-bit integer (little-endian order)"
    return (_decode_6bit(value[1])<<6)+_decode_6bit(value[0])

def encode_int12(value):
    "encodes 12-bit integer -> 2 char hash64 string (little-endian order)"
    return _encode_6bit(value & 0x3f) + _encode_6bit((value>>6) & 0x3f)

#---------------------------------------------------------------------

def decode_int18(value):
    "decodes 3 char hash64 string -> 18-bit integer (little-endian order)"
    return (
        _decode_6bit(value[0]) +
        (_decode_6bit(value[1])<<6) +
        (_decode_6bit(value[2])<<12)
        )

def encode_int18(value):
    "encodes 18-bit integer -> 3 char hash64 string (little-endian order)"
    return (
        _encode_6bit(value & 0x3f) +
        _encode_6bit((value>>6) & 0x3f) +
        _encode_6bit((value>>12) & 0x3f)
        )

#---------------------------------------------------------------------

def decode_int24(value):
    "decodes 4 char hash64 string -> 24-bit integer (little-endian order)"
    return  _decode_6bit(value[0]) +\
            (_decode_6bit(value[1])<<6)+\
            (_decode_6bit(value[2])<<12)+\
            (_decode_6bit(value[3])<<18)

def encode_int24(value):
    "encodes 24-bit integer -> 4 char hash64 string (little-endian order)"
    return  _encode_6bit(value & 0x3f) + \
            _encode_6bit((value>>6) & 0x3f) + \
            _encode_6bit((value>>12) & 0x3f) + \
            _encode_6bit((value>>18) & 0x3f)

#=================================================================================
#eof
#=================================================================================
