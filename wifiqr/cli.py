"""
wifi-qr - Wi-Fi network QR code generator.

Usage:
    wifi-qr MyNet wpa -p secret
    wifi-qr Guest no-pass --hidden
    wifi-qr Corp wpa2-enterprise --eap peap --ph2 ms-chap-v2 -i alice -p secret
    wifi-qr Home wpa3 -p secret --image-format qoi

Prints the payload string and writes ./wifi-<ssid>[-<identity>].<ext>.
"""

import argparse
import base64
import binascii
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .payload import Credential, EapMethod, Phase2, WifiMethod, build
from .qr import GenerationError, ImageFormat, make_qr_file
from .settings import settings

logger = logging.getLogger(__name__)


def default_file_name(credential: Credential, image_format: ImageFormat) -> str:
    name = f"wifi-{credential.ssid}"
    if credential.identity is not None:
        name += f"-{credential.identity}"
    return f"{name}.{image_format.extension}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wifi-qr",
        description="Generate a Wi-Fi QR code for a network",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("ssid", help="Network name")
    parser.add_argument("kind", nargs="?", choices=[m.value for m in WifiMethod],
                        help="Authentication method")
    parser.add_argument("--hidden", action="store_true", help="Network does not broadcast its SSID")
    parser.add_argument("-p", "--password")
    parser.add_argument("--eap", dest="eap_method", choices=[m.value for m in EapMethod],
                        help="EAP method (WPA2-Enterprise)")
    parser.add_argument("--ph2", dest="phase2", choices=[m.value for m in Phase2],
                        help="Phase 2 method (WPA2-Enterprise)")
    parser.add_argument("-i", "--identity")
    parser.add_argument("-a", "--anonymous_identity")
    parser.add_argument("-k", "--public-key", help="Base64 encoded public key (WPA3)")
    parser.add_argument("--image-format", choices=[f.value for f in ImageFormat],
                        help=f"Output format (default: guessed from --output, else {settings.image_format})")
    parser.add_argument("-o", "--output", help="Output file (default: ./wifi-<ssid>[-<identity>].<ext>)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def credential_from_args(args: argparse.Namespace) -> Credential:
    public_key = None
    if args.public_key is not None:
        try:
            public_key = base64.b64decode(args.public_key, validate=True)
        except binascii.Error as e:
            raise ValueError(f"public key is not valid base64: {e}") from e

    return (
        Credential(ssid=args.ssid)
        .with_method(WifiMethod(args.kind) if args.kind else None)
        .with_hidden(args.hidden)
        .with_eap_method(EapMethod(args.eap_method) if args.eap_method else None)
        .with_phase2(Phase2(args.phase2) if args.phase2 else None)
        .with_anonymous_identity(args.anonymous_identity)
        .with_identity(args.identity)
        .with_password(args.password)
        .with_public_key(public_key)
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, settings.log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        credential = credential_from_args(args)
    except (ValidationError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.image_format:
        image_format = ImageFormat(args.image_format)
    elif args.output:
        image_format = None
    else:
        image_format = ImageFormat(settings.image_format)

    if args.output:
        out_path = Path(args.output)
    else:
        out_path = Path(settings.output_dir) / default_file_name(credential, image_format)

    text = build(credential)
    print(text)

    try:
        written = make_qr_file(text, out_path, image_format)
    except GenerationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    logger.info("Saved %s QR code to %s", written.value, out_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
