#!/usr/bin/env python3
"""
fhevmsdk CLI
Command-line interface for encrypting and decrypting confidential values
"""

import argparse
import asyncio
import json
import sys
import time

from fhevmsdk.client import ClientOptions, LocalAccountSigner, Keypair, SUPPORTED_WIDTHS, get_factory
from fhevmsdk.common import FhevmError, format_token_amount, parse_token_amount
from fhevmsdk.common.logging_config import configure_logging
from fhevmsdk.config import get_settings
from fhevmsdk.runtime.loader import maybe_await


def _preview(value, length: int = 50) -> str:
    text = value.hex() if isinstance(value, (bytes, bytearray)) else str(value)
    return text[:length] + ("..." if len(text) > length else "")


async def _create_client(args):
    options = ClientOptions(network=args.network, provider=args.rpc_url)
    return await get_factory().create(options)


async def _encrypt(args):
    client = await _create_client(args)
    print(f"Client ready: {client.is_ready}")
    print(f"Encrypting uint{args.width} value: {args.value}")

    encrypted = await client.encrypt[args.width](
        value=args.value,
        contract_address=args.contract,
        user_address=args.user,
    )

    print("\nSuccess!")
    print(f"Handle: {encrypted.handle_hex}")
    print(f"Proof: {_preview(encrypted.proof_hex, 66)}")
    print(f"Proof length: {len(encrypted.proof)} bytes")


async def _decrypt(args):
    if not args.private_key:
        raise ValueError("Private key not provided. Use --private-key or set FHEVM_PRIVATE_KEY.")

    signer = LocalAccountSigner.from_key(args.private_key)
    client = await _create_client(args)

    print(f"Decrypting handle {_preview(args.handle, 18)} for {signer.address}")
    value = await client.decrypt(
        ciphertext_handle=args.handle,
        contract_address=args.contract,
        signer=signer,
    )

    print("\nSuccess!")
    print(f"Value: {value}")
    if args.decimals is not None:
        print(f"Formatted: {format_token_amount(value, args.decimals)}")


async def _keypair(args):
    client = await _create_client(args)
    instance = client.instance

    keypair = Keypair.from_engine(await maybe_await(instance.generate_keypair()))
    print("Keypair generated")
    print(f"  Public key: {_preview(keypair.public_key)}")
    print(f"  Private key: {_preview(keypair.private_key, 8)}")

    if args.contract:
        eip712 = await maybe_await(instance.create_eip712(
            keypair.public_key,
            [args.contract],
            int(time.time()),
            client.duration_days,
        ))
        print("\nEIP-712 structure:")
        print(f"  Domain: {json.dumps(eip712['domain'], indent=2, default=str)}")
        print(f"  Primary type: {eip712.get('primaryType', 'n/a')}")

    get_public_key = getattr(instance, "get_public_key", None)
    if get_public_key is not None:
        info = await maybe_await(get_public_key())
        if info:
            print("\nNetwork public key:")
            print(f"  Key ID: {info['publicKeyId']}")
            print(f"  Key size: {len(info['publicKey'])} bytes")
        else:
            print("\nNo network public key available")


def _run(coro_fn, args):
    try:
        asyncio.run(coro_fn(args))
    except (FhevmError, ValueError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)


def cmd_encrypt(args):
    """Encrypt a value for a contract"""
    _run(_encrypt, args)


def cmd_decrypt(args):
    """Decrypt a handle with a local signing key"""
    _run(_decrypt, args)


def cmd_keypair(args):
    """Generate a decryption keypair and its EIP-712 authorization"""
    _run(_keypair, args)


def cmd_parse_amount(args):
    """Convert a decimal amount to smallest units"""
    try:
        print(parse_token_amount(args.amount, args.decimals))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def cmd_format_amount(args):
    """Convert smallest units to a decimal amount"""
    print(format_token_amount(args.amount, args.decimals))


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog='fhevmsdk',
        description='FHEVM client CLI',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Encrypt a uint64
  %(prog)s encrypt -w 64 -v 1000000 -c 0xContract... -u 0xUser...

  # Decrypt a handle
  %(prog)s decrypt --handle 0xabc... -c 0xContract... -k 0xKey...

  # Token amounts
  %(prog)s parse-amount 10.5 --decimals 6
  %(prog)s format-amount 10500000 --decimals 6
        """
    )

    # Global arguments
    parser.add_argument('--rpc-url', '-r',
                        default=settings.rpc_url,
                        help='RPC endpoint URL (FHEVM_RPC_URL)')
    parser.add_argument('--network', '-n',
                        default=settings.network,
                        help='Network name (FHEVM_NETWORK)')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    encrypt_parser = subparsers.add_parser('encrypt', help='Encrypt an unsigned integer')
    encrypt_parser.add_argument('-w', '--width', type=int, default=64,
                                choices=SUPPORTED_WIDTHS, help='Bit width')
    encrypt_parser.add_argument('-v', '--value', type=int, required=True,
                                help='Value to encrypt')
    encrypt_parser.add_argument('-c', '--contract', required=True,
                                help='Contract address')
    encrypt_parser.add_argument('-u', '--user', required=True,
                                help='User address')
    encrypt_parser.set_defaults(func=cmd_encrypt)

    decrypt_parser = subparsers.add_parser('decrypt', help='Decrypt a ciphertext handle')
    decrypt_parser.add_argument('--handle', required=True,
                                help='Ciphertext handle')
    decrypt_parser.add_argument('-c', '--contract', required=True,
                                help='Contract address')
    decrypt_parser.add_argument('-k', '--private-key',
                                default=settings.private_key,
                                help='Signing key (FHEVM_PRIVATE_KEY)')
    decrypt_parser.add_argument('-d', '--decimals', type=int, default=None,
                                help='Also print the value as a token amount')
    decrypt_parser.set_defaults(func=cmd_decrypt)

    keypair_parser = subparsers.add_parser('keypair', help='Generate a decryption keypair')
    keypair_parser.add_argument('-c', '--contract',
                                help='Build the EIP-712 authorization for this contract')
    keypair_parser.set_defaults(func=cmd_keypair)

    parse_parser = subparsers.add_parser('parse-amount', help='Decimal amount to smallest units')
    parse_parser.add_argument('amount', help='Decimal amount, e.g. 10.5')
    parse_parser.add_argument('-d', '--decimals', type=int, default=settings.token_decimals)
    parse_parser.set_defaults(func=cmd_parse_amount)

    format_parser = subparsers.add_parser('format-amount', help='Smallest units to decimal amount')
    format_parser.add_argument('amount', type=int, help='Amount in smallest units')
    format_parser.add_argument('-d', '--decimals', type=int, default=settings.token_decimals)
    format_parser.set_defaults(func=cmd_format_amount)

    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Command output owns stdout
    if args.func not in (cmd_parse_amount, cmd_format_amount):
        configure_logging(stream=sys.stderr)

    args.func(args)


if __name__ == '__main__':
    main()
