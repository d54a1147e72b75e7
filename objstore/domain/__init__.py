"""
Domain layer: part splitting, completion ordering and listing streams.
"""

from typing import Final

# Smallest part S3 accepts for every part but the last
MIN_PART_SIZE: Final[int] = 5 * 1024 * 1024
