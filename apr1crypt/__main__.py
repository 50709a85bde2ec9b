"""apr1crypt.__main__ -- command line helper tool

usage::

    python -m apr1crypt encrypt [--salt SALT | --salt-size NUM] [<password>]
    python -m apr1crypt verify <hash> [<password>]
    python -m apr1crypt identify <hash>
    python -m apr1crypt gensalt [--size NUM]
"""
#=========================================================
#imports
#=========================================================
# core
import getpass
import logging; log = logging.getLogger(__name__)
from optparse import OptionParser
import sys
# package
from apr1crypt import __version__
from apr1crypt.exc import RandomSourceError
from apr1crypt.handlers.md5_crypt import apr_md5_crypt, generate_salt, \
    SALT_LEN_MAX

vstr = "apr1crypt " + __version__

#=========================================================
# general support funcs
#=========================================================
def _make_parser(prog, usage, description=None):
    p = OptionParser(prog="apr1crypt " + prog, version=vstr, usage=usage,
                     description=description)
    p.add_option("-v", "--verbose", action="store_true", dest="verbose",
                 default=False, help="log debugging output to stderr")
    return p

def _setup_logging(verbose):
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
    )

def _error(msg):
    print("error: %s" % (msg,), file=sys.stderr)
    return 2

#=========================================================
# encrypt & verify commands
#=========================================================
def encrypt_cmd(args):
    """hash a password, printing the resulting $apr1$ hash"""
    #
    # parse args
    #
    p = _make_parser("encrypt", usage="%prog [options] [<password>]",
                     description="This subcommand will hash the specified password, "
                                 "and output a single line containing the result.")
    p.add_option("-s", "--salt", dest="salt", default=None,
                 help="specify fixed salt string (0-8 chars of ./0-9A-Za-z)",
                 )
    p.add_option("-z", "--salt-size", dest="salt_size", default=None, type="int",
                 metavar="NUM",
                 help="specify size of generated salt",
                 )
    opts, args = p.parse_args(args)
    if args:
        password = args.pop(0)
    else:
        password = None
    if args:
        p.error("Unexpected positional arguments")
    if opts.salt is not None and opts.salt_size is not None:
        p.error("--salt and --salt-size are mutually exclusive")
    _setup_logging(opts.verbose)

    kwds = {}
    if opts.salt is not None:
        kwds['salt'] = opts.salt
    if opts.salt_size is not None:
        kwds['salt_size'] = opts.salt_size

    #
    # read password
    #
    if password is None:
        password = getpass.getpass("Password: ")

    #
    # create hash, and done
    #
    try:
        result = apr_md5_crypt.encrypt(password, **kwds)
    except ValueError as err:
        return _error(err)
    print(result)
    return 0

def verify_cmd(args):
    """verify a password against an $apr1$ hash"""
    #
    # parse args
    #
    p = _make_parser("verify", usage="%prog [options] <hash> [<password>]",
                     description="This subcommand will attempt to verify the hash "
                                 "against the specified password, and output success or failure.")
    opts, args = p.parse_args(args)
    if not args:
        p.error("no hash specified")
    hash = args.pop(0)
    if args:
        password = args.pop(0)
    else:
        password = None
    if args:
        p.error("Unexpected positional arguments")
    _setup_logging(opts.verbose)

    #
    # read password
    #
    if password is None:
        password = getpass.getpass("Password: ")

    try:
        result = apr_md5_crypt.verify(password, hash)
    except ValueError as err:
        return _error(err)
    if result:
        print("password VERIFIED successfully.")
        return 0
    else:
        print("password FAILED to verify.")
        return 1

#=========================================================
# identify & gensalt commands
#=========================================================
def identify_cmd(args):
    """check whether a string looks like an $apr1$ hash"""
    p = _make_parser("identify", usage="%prog [options] <hash>")
    opts, args = p.parse_args(args)
    if len(args) != 1:
        p.error("expected exactly one hash")
    _setup_logging(opts.verbose)
    if apr_md5_crypt.identify(args[0]):
        print(apr_md5_crypt.name)
        return 0
    else:
        print("hash not recognized")
        return 1

def gensalt_cmd(args):
    """generate a random $apr1$ salt parameter string"""
    p = _make_parser("gensalt", usage="%prog [options]")
    p.add_option("-n", "--size", dest="size", default=SALT_LEN_MAX, type="int",
                 metavar="NUM",
                 help="number of salt characters, clamped to 1-8 (default 8)",
                 )
    opts, args = p.parse_args(args)
    if args:
        p.error("Unexpected positional arguments")
    _setup_logging(opts.verbose)
    print(generate_salt(opts.size))
    return 0

#=========================================================
# main
#=========================================================
commands = {
    "encrypt": encrypt_cmd,
    "verify": verify_cmd,
    "identify": identify_cmd,
    "gensalt": gensalt_cmd,
}

def _print_avail():
    print("Available commands:")
    for name, func in sorted(commands.items()):
        doc = getattr(func, "__doc__", None)
        doc = doc.splitlines()[0] if doc else ""
        print(" %-10s %s" % (name, doc))

def _print_usage():
    print("%s Command Line Helper\n"
          "Usage: python -m apr1crypt <command> [options|--help]\n" % (vstr,))
    _print_avail()

def main(args=None):
    if args is None:
        args = sys.argv[1:]
    if not args:
        _print_usage()
        return 1
    cmd = args[0]
    if cmd in ["help", "-h", "--help"]:
        _print_usage()
        return 0
    elif cmd in ["version", "--version"]:
        print(vstr)
        return 0
    func = commands.get(cmd)
    if not func:
        print("Unknown command: %s\n" % (cmd,))
        _print_avail()
        return 1
    try:
        return func(args[1:])
    except RandomSourceError as err:
        print("fatal: %s" % (err,), file=sys.stderr)
        return 1

if __name__ == "__main__":
    sys.exit(main())

#=========================================================
# eof
#=========================================================
