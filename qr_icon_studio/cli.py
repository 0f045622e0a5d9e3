"""CLI entry point for QR Icon Studio."""

import argparse
import logging
import os
import sys

from qr_icon_studio import DEFAULT_EXPORT_SIZES, __version__


def _positive_int(value: str) -> int:
    try:
        size = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid size: {value!r}")
    if size <= 0:
        raise argparse.ArgumentTypeError(f"size must be positive, got {size}")
    return size


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qr-icon-studio",
        description="Render text as a QR code with an optional round logo and export PNGs.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Preview plus the default export sizes
  python -m qr_icon_studio --text "https://example.com"

  # Logo in the middle: use a high error correction level
  python -m qr_icon_studio --text "https://example.com" --icon logo.png --level H

  # Only a 2000px export into ./out
  python -m qr_icon_studio --text "Hello" --size 2000 --output-dir out
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    # Required
    parser.add_argument(
        "--text",
        required=True,
        help="Text or URL to encode. Surrounding whitespace is trimmed",
    )

    # Optional — symbol
    parser.add_argument(
        "--level",
        default="M",
        choices=["L", "M", "Q", "H"],
        help="Error correction level. Default: M",
    )
    parser.add_argument(
        "--icon",
        default=None,
        help="Path to an image stamped in the center, clipped to a circle",
    )
    parser.add_argument(
        "--encoder",
        default="qrcode",
        choices=["qrcode", "segno"],
        help="QR encoding library. Default: qrcode",
    )

    # Optional — output
    parser.add_argument(
        "--size",
        type=_positive_int,
        action="append",
        dest="sizes",
        help="Export size in pixels; repeat for several. "
             f"Default: {', '.join(str(s) for s in DEFAULT_EXPORT_SIZES)}",
    )
    parser.add_argument(
        "--output-dir", "-o",
        default=".",
        help="Directory for exported PNGs (default: current directory)",
    )
    parser.add_argument(
        "--preview",
        default=None,
        help="Also save the preview image to this path",
    )

    # Flags
    parser.add_argument(
        "--strict-capacity",
        action="store_true",
        help="Fail when the text exceeds the capacity table instead of trying the largest version",
    )
    parser.add_argument(
        "--no-verify",
        action="store_true",
        help="Skip QR code scannability verification of the exports",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Overwrite existing files without prompting",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log sizing diagnostics (byte lengths, chosen version)",
    )

    return parser


def _confirm_overwrite(path: str, overwrite: bool) -> bool:
    if overwrite or not os.path.exists(path):
        return True
    response = input(f"  Output file '{path}' already exists. Overwrite? [y/N] ")
    return response.lower() in ("y", "yes")


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="  %(name)s: %(message)s")

    # Lazy imports for faster --help
    from qr_icon_studio.encoder import get_encoder
    from qr_icon_studio.image_utils import VerifyResult, encode_png, save_png, verify_qr_scannable
    from qr_icon_studio.studio import QRStudio

    sizes = args.sizes or list(DEFAULT_EXPORT_SIZES)

    print(f"QR Icon Studio v{__version__}")
    print("=" * 50)

    try:
        encoder = get_encoder(args.encoder)
    except (ValueError, ImportError) as e:
        print(f"\n  ERROR: {e}", file=sys.stderr)
        return 1

    studio = QRStudio(encoder=encoder, strict_capacity=args.strict_capacity)

    try:
        # Step 1: Icon
        if args.icon:
            print(f"\n[1/3] Loading icon: {args.icon}")
            studio.state.upload_icon(args.icon).result()
            width, height = studio.state.icon.size
            print(f"  ✓ Icon loaded ({width}x{height})")
        else:
            print(f"\n[1/3] No icon — plain QR code")

        # Step 2: Preview
        print(f"\n[2/3] Generating QR code (level {args.level}, {encoder.name()})")
        preview = studio.generate(args.text, args.level)
        print(f"  ✓ Preview ready ({preview.width}x{preview.height})")
        if args.preview and _confirm_overwrite(args.preview, args.overwrite):
            save_png(encode_png(preview), args.preview)
            print(f"  ✓ Saved preview: {args.preview}")

        # Step 3: Exports
        print(f"\n[3/3] Exporting {len(sizes)} size(s) to: {args.output_dir}")
        for size in sizes:
            result = studio.export(size)
            path = os.path.join(args.output_dir, result.filename)
            if not _confirm_overwrite(path, args.overwrite):
                print(f"  ⊘ Skipped: {path}")
                continue
            result.save(args.output_dir)
            print(f"  ✓ Saved: {path}")

            if not args.no_verify:
                verdict, decoded = verify_qr_scannable(path)
                if verdict == VerifyResult.SCANNABLE:
                    print(f"    SCANNABLE — decoded {len(decoded)} characters")
                elif verdict == VerifyResult.SKIPPED:
                    print(f"    ⊘ Verification skipped (pyzbar not installed)")
                else:
                    print(f"    ⚠️  WARNING: could not decode {path}.")
                    print(f"       Try a higher --level or a larger --size.")

        print(f"\n✅ Done!")
        return 0

    except (ValueError, FileNotFoundError) as e:
        print(f"\n  ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
