"""The Command Line Interface for the toy cryptosystem, including Interactive elements.

A hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface): any argument missing from the command
line is prompted for, unless non-interactive mode is on, in which case it falls back to its default or fails.

Typical usage example:

    toyrsa keygen
    toyrsa encrypt --modulus 9223372093219651053 --message 42
    python -m toyrsa demo -n
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import sys
import typing

import toyrsa


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    choices: list[str] | None = None
    default: typing.Any = None
    advanced: bool = False


help_dict: dict[str, HelpData] = {
    "subcommand":
        HelpData(
            description="The available subcommands in toyrsa.",
            choices=["keygen", "encrypt", "decrypt", "modexp", "demo"],
        ),
    "keygen":
        HelpData("Generate a prime pair and print the key material."),
    "encrypt":
        HelpData("Encrypt a 32-bit message under a public modulus."),
    "decrypt":
        HelpData("Decrypt a ciphertext with the prime pair."),
    "modexp":
        HelpData("Compute base^exponent mod modulus."),
    "demo":
        HelpData("Generate a key and round-trip a message through it."),
    "modulus":
        HelpData(description="Public modulus n = p * q (or any non-zero u64 for modexp).", format=int),
    "message":
        HelpData(description="Plaintext, an unsigned 32-bit integer.", format=int),
    "sample":
        HelpData(description="Plaintext for the demo round trip.", format=int, default=42, advanced=True),
    "p":
        HelpData(description="First prime of the private key.", format=int),
    "q":
        HelpData(description="Second prime of the private key.", format=int),
    "ciphertext":
        HelpData(description="Ciphertext, an unsigned 64-bit integer.", format=int),
    "base":
        HelpData(description="Base, an unsigned 64-bit integer.", format=int),
    "exponent":
        HelpData(description="Exponent, an unsigned 64-bit integer.", format=int),
}

needs = {
    "keygen": (),
    "encrypt": ("modulus", "message"),
    "decrypt": ("p", "q", "ciphertext"),
    "modexp": ("base", "exponent", "modulus"),
    "demo": ("sample",),
}

modulus = argparse.ArgumentParser(add_help=False)
modulus.add_argument("--modulus", "-m", type=help_dict["modulus"].format, help=help_dict["modulus"].description)
corep = argparse.ArgumentParser(prog="toyrsa")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {toyrsa.__version__}")
corep.add_argument("--non-interactive", "-n", action="store_true", help="Enable non-interactive mode")
corep.add_argument("--advanced", "-a", action="store_true", help="Enable advanced mode, for interactive mode")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands")

keygen = commands.add_parser("keygen", help=help_dict["keygen"].description)

encrypt = commands.add_parser("encrypt", parents=[modulus], help=help_dict["encrypt"].description)
encrypt.add_argument("--message", "-M", type=help_dict["message"].format, help=help_dict["message"].description)

decrypt = commands.add_parser("decrypt", help=help_dict["decrypt"].description)
decrypt.add_argument("--p", "-p", type=help_dict["p"].format, help=help_dict["p"].description)
decrypt.add_argument("--q", "-q", type=help_dict["q"].format, help=help_dict["q"].description)
decrypt.add_argument("--ciphertext",
                     "-c",
                     type=help_dict["ciphertext"].format,
                     help=help_dict["ciphertext"].description)

modexp = commands.add_parser("modexp", parents=[modulus], help=help_dict["modexp"].description)
modexp.add_argument("--base", "-b", type=help_dict["base"].format, help=help_dict["base"].description)
modexp.add_argument("--exponent", "-e", type=help_dict["exponent"].format, help=help_dict["exponent"].description)

demo = commands.add_parser("demo", help=help_dict["demo"].description)
demo.add_argument("--message",
                  "-M",
                  dest="sample",
                  type=help_dict["sample"].format,
                  help=help_dict["sample"].description)


def checkmodes(arg: str, mode: tuple[bool, bool]):
    helper_data = help_dict[arg]
    if (mode[0] or (helper_data.advanced and not mode[1])) and helper_data.default is not None:
        return helper_data.default
    if mode[0]:
        raise IOError(f"Argument {arg} is missing and non-interactive mode is active.")
    return helper_data


def choice_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    helper_data = checkmodes(arg, mode)
    if not isinstance(helper_data, HelpData):
        return helper_data
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    for choice in helper_data.choices:
        defstring = " (Default)" if choice == helper_data.default else ""
        if help_dict.get(choice, None):
            prntr(f"{choice} - {help_dict[choice].description}" + defstring)
        else:
            prntr(f"{choice}" + defstring)
    if helper_data.default is not None:
        prntr("To accept default just click enter. Otherwise specify value.")
    vald = set(helper_data.choices)
    while True:
        ch = input(f"{arg}: ")
        if ch in vald:
            return ch
        if not ch and helper_data.default is not None:
            return helper_data.default
        prntr("Please select an option from the list.")


def input_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    helper_data = checkmodes(arg, mode)
    if not isinstance(helper_data, HelpData):
        return helper_data
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    if helper_data.default is not None:
        prntr(f"Default value: {helper_data.default}")
        prntr("To accept default just click enter. Otherwise specify value.")
    cls = helper_data.format
    while True:
        ch = input(f"{arg}: ")
        if not ch and helper_data.default is not None:
            return helper_data.default
        if ch == "":
            prntr("Please provide a value.")
            continue
        try:
            return cls(ch)
        except ValueError:
            prntr(f"We could not convert your value to {cls.__name__}.")


def run(args: argparse.Namespace, pspr: typing.Callable) -> int:
    """Execute a fully populated subcommand, returning the exit status."""
    match args.subcommand:
        case "keygen":
            p, q = toyrsa.genkey()
            pspr("Key material:")
            print(f"p = {p}")
            print(f"q = {q}")
            print(f"n = {p * q}")
            print(f"e = {toyrsa.EXP}")
            print(f"d = {toyrsa.private_exponent((p, q))}")
        case "encrypt":
            ciph = toyrsa.encrypt(args.modulus, args.message)
            pspr("Ciphertext:")
            print(ciph)
        case "decrypt":
            clear = toyrsa.decrypt((args.p, args.q), args.ciphertext)
            pspr("Cleartext:")
            print(clear)
        case "modexp":
            res = toyrsa.modexp(args.base, args.exponent, args.modulus)
            pspr("Result:")
            print(res)
        case "demo":
            key = toyrsa.genkey()
            ciph = toyrsa.encrypt(key[0] * key[1], args.sample)
            clear = toyrsa.decrypt(key, ciph)
            print(f"Original: {args.sample}")
            print(f"Encrypted: {ciph}")
            print(f"Decrypted: {clear}")
            if clear != args.sample:
                print("Round trip failed!", file=sys.stderr)
                return 1
    return 0


def main():
    """Core Hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface)"""
    args = corep.parse_args()
    pstatus = (args.non_interactive, args.advanced)

    def pspr(text: str):
        """Print only if not in non-interactive mode."""
        if not pstatus[0]:
            print(text)

    pspr("Welcome to toyrsa!\n")
    if not args.subcommand:
        args.subcommand = choice_handler("subcommand", pstatus)
    for reqs in needs[args.subcommand]:
        if getattr(args, reqs, None) is None:
            if help_dict[reqs].choices is not None:
                res = choice_handler(reqs, pstatus)
            else:
                res = input_handler(reqs, pstatus)
            setattr(args, reqs, res)
        else:
            pspr(f"{reqs}: {getattr(args, reqs)}")
    pspr("\nInput Complete! Executing...")
    try:
        status = run(args, pspr)
    except (ValueError, OverflowError, RuntimeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    if status:
        sys.exit(status)
    pspr("Thank you for using toyrsa!")
    pspr("Goodbye!")


if __name__ == "__main__":
    main()
