"""
واجهة سطر الأوامر: ضغط صورة واحدة عبر خدمة الضغط البعيدة.

أمثلة:
  image-compressor photo.png                     # الحجم الافتراضي 200 كيلوبايت في ./public/downloads
  image-compressor photo.png -t 80 -o ~/Pictures # 80 كيلوبايت في مجلد مخصص
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

import httpx

from image_compressor.core.config import get_settings
from image_compressor.services.compression_client import CompressionClient
from image_compressor.services.workflow import CompressionWorkflow
from image_compressor.storage.download import DownloadFolderSaver
from image_compressor.utils.file_utils import load_image_file


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="image-compressor",
        description="Compress an image to an approximate size using the remote compression service",
    )
    parser.add_argument("path", type=Path, help="Image file to compress")
    parser.add_argument(
        "-t", "--target-size", default=str(settings.default_target_size_kb),
        help=f"Target size in kilobytes (default: {settings.default_target_size_kb})",
    )
    parser.add_argument("-b", "--backend-url", default=None, help="Compression service base URL")
    parser.add_argument("-o", "--output-dir", type=Path, default=None, help="Folder for the compressed image")
    parser.add_argument("-q", "--quiet", action="store_true", help="Do not print upload progress")
    return parser.parse_args(argv)


def _print_progress(percent: int) -> None:
    # القيمة 0 تعني إعادة الضبط في بداية الطلب ونهايته
    if percent == 0:
        return
    filled = percent // 5
    sys.stderr.write(f"\rUploading [{'#' * filled}{'.' * (20 - filled)}] {percent:3d}%")
    sys.stderr.flush()


async def run(args: argparse.Namespace, transport: Optional[httpx.AsyncBaseTransport] = None) -> int:
    """تشغيل عملية ضغط واحدة وإرجاع رمز الخروج (0 نجاح، 1 فشل)."""
    try:
        image = load_image_file(args.path)
    except OSError as exc:
        print(f"Cannot read {args.path}: {exc.strerror or exc}", file=sys.stderr)
        return 1

    workflow = CompressionWorkflow(
        CompressionClient(base_url=args.backend_url, transport=transport),
        DownloadFolderSaver(target_dir=args.output_dir),
        target_size=args.target_size,
        on_progress=None if args.quiet else _print_progress,
    )
    workflow.select_file(image)

    result = await workflow.submit()
    if not args.quiet:
        sys.stderr.write("\n")

    if result is None:
        print(workflow.error, file=sys.stderr)
        return 1

    print(result.saved_to)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    return asyncio.run(run(parse_arguments(argv)))


if __name__ == "__main__":
    sys.exit(main())
