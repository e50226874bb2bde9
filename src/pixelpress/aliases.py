from pixelpress.core.models import DigestAlgorithm, MIN_JPEG_QUALITY, DEFAULT_JPEG_QUALITY

DIGEST_ALIASES = {
    "xxh128": DigestAlgorithm.XXH128,
    "md5": DigestAlgorithm.MD5,
}

DIGEST_CHOICES = list(DIGEST_ALIASES.keys())

DIGEST_HELP_TEXT = (
    "Content digest stored in the ledger:\n"
    "  xxh128 : xxHash3 128-bit (default, fastest)\n"
    "  md5    : MD5, reads ledgers written by older releases\n"
)

EXCLUDE_HELP_TEXT = (
    "Glob pattern of directories/images to exclude.\n"
    "Matched against the whole path with '/' separators;\n"
    "a matched directory is not descended into.\n"
    "Use braces for several patterns: '{.git,*.jpg}'"
)

QUALITY_HELP_TEXT = (
    f"Visual quality to aim for, expressed as a JPEG quality value.\n"
    f"Minimum {MIN_JPEG_QUALITY}. Default: {DEFAULT_JPEG_QUALITY}"
)

EPILOG_TEXT = """
Examples:
  Compress every JPEG and PNG under images/
  %(prog)s -input-dir images

  Show what would be compressed without touching anything
  %(prog)s -input-dir images -dryrun

  Skip a directory
  %(prog)s -input-dir . -exclude .git

  Skip several paths at once
  %(prog)s -input-dir . -exclude '{.git,*.jpg}'

Already compressed images are remembered by content digest in a ledger
file (<program name>.txt in the working directory), so running the same
command again only processes new or changed images.

External tools required in PATH: guetzli (JPEG), zopflipng (PNG).
"""
