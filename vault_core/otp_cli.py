#!/usr/bin/env python3
"""
otp_cli.py — CLI wrapper for the vault and the TOTP engine.

Subcommands:
- save   : encrypt and store a secret under a name
- new    : generate a random secret, store it, print it once
- load   : print a stored secret
- otp    : print the current TOTP code for a stored secret
- verify : check a code against the current window
- list   : print stored secret names
- serve  : run the HTTP API

eg..:
    otp-vault save github --secret JBSWY3DPEHPK3PXP
    otp-vault otp github
    otp-vault otp github --length 8 --window 60
    otp-vault otp github --watch
    otp-vault verify github 492039
"""

import argparse
import getpass
import logging
import math
import sys
import time
from typing import List, Optional

from . import otp_core
from .config import DEFAULT_DIGITS, DEFAULT_TIME_STEP
from .errors import OtpVaultError
from .log import get_logger
from .vault import generate_otp, list_secrets, load_secret, save_secret, verify_otp

logger = get_logger("cli")


# --- CLI command handlers ---
def cmd_save(args) -> int:
    secret = args.secret
    if secret is None:
        secret = getpass.getpass(f"Secret for '{args.name}': ").strip()
    save_secret(args.name, secret)
    print(f"[+] Saved secret '{args.name}'")
    return 0


def cmd_new(args) -> int:
    secret = otp_core.generate_base32_secret()
    save_secret(args.name, secret)
    print(secret)
    return 0


def cmd_load(args) -> int:
    print(load_secret(args.name))
    return 0


def cmd_otp(args) -> int:
    if not args.watch:
        print(generate_otp(args.name, args.length, args.window, args.time))
        return 0

    secret = load_secret(args.name)
    print(f"[{args.name}] Press Ctrl+C to quit. {args.length}-digit TOTP every {args.window}s...\n")
    last_code = None
    try:
        while True:
            code, remaining = otp_core.totp(secret, time.time(), args.window, args.length)
            if code != last_code:
                print(f"TOTP: {code}  (valid ~{remaining:2d}s)")
                last_code = code
            else:
                print(f".. {remaining:2d}s left", end="\r", flush=True)
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nBye.")
    return 0


def cmd_verify(args) -> int:
    if verify_otp(args.name, args.code, args.length, args.window, args.time):
        print(f"[{args.name}] [+] TOTP code is VALID")
        return 0
    print(f"[{args.name}] [-] TOTP code is INVALID")
    return 1


def cmd_list(args) -> int:
    for name in list_secrets():
        print(name)
    return 0


def cmd_serve(args) -> int:
    # flask is only needed for this subcommand
    from vault_api import create_app

    app = create_app()
    logger.info("serving on http://%s:%d", args.host, args.port)
    app.run(host=args.host, port=args.port)
    return 0


def cmd_help(args) -> int:
    print("'otp-vault -h' for help.")
    return 2


def _unix_time(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a Unix timestamp: {raw!r}") from None
    if not math.isfinite(value):
        raise argparse.ArgumentTypeError(f"not a finite Unix timestamp: {raw!r}")
    if value < 0:
        raise argparse.ArgumentTypeError("timestamp must not be negative")
    return value


# --- Argparse builder ---
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="otp-vault", description="TOTP generator with an encrypted, user-bound secret store")
    p.add_argument("--verbose", "-v", action="store_true", help="Debug logging to stderr")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_help)

    # save
    ps = sub.add_parser("save", help="Encrypt and store a secret")
    ps.add_argument("name", help="Secret name")
    ps.add_argument("--secret", help="Secret value (prompted when omitted)")
    ps.set_defaults(func=cmd_save)

    # new
    pn = sub.add_parser("new", help="Generate a random Base32 secret and store it")
    pn.add_argument("name", help="Secret name")
    pn.set_defaults(func=cmd_new)

    # load
    pl = sub.add_parser("load", help="Print a stored secret")
    pl.add_argument("name", help="Secret name")
    pl.set_defaults(func=cmd_load)

    # otp
    po = sub.add_parser("otp", help="Print the current TOTP code")
    po.add_argument("name", help="Secret name")
    po.add_argument("--length", type=int, default=DEFAULT_DIGITS, help="Number of OTP digits")
    po.add_argument("--window", type=int, default=DEFAULT_TIME_STEP, help="TOTP time step (seconds)")
    po.add_argument("--time", type=_unix_time, help="Unix time to use instead of the clock")
    po.add_argument("--watch", action="store_true", help="Keep printing codes in real time")
    po.set_defaults(func=cmd_otp)

    # verify
    pv = sub.add_parser("verify", help="Verify a TOTP code against the current window")
    pv.add_argument("name", help="Secret name")
    pv.add_argument("code", help="OTP code to verify")
    pv.add_argument("--length", type=int, default=DEFAULT_DIGITS)
    pv.add_argument("--window", type=int, default=DEFAULT_TIME_STEP)
    pv.add_argument("--time", type=_unix_time, help="Unix time to use instead of the clock")
    pv.set_defaults(func=cmd_verify)

    # list
    pls = sub.add_parser("list", help="List stored secret names")
    pls.set_defaults(func=cmd_list)

    # serve
    psv = sub.add_parser("serve", help="Run the HTTP API")
    psv.add_argument("--host", default="127.0.0.1")
    psv.add_argument("--port", type=int, default=5000)
    psv.set_defaults(func=cmd_serve)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        get_logger(level=logging.DEBUG)
    try:
        return args.func(args)
    except OtpVaultError as e:
        logger.debug("%s failed: %s %s", args.cmd, type(e).__name__, e.context)
        print(f"error: {e.message}", file=sys.stderr)
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
