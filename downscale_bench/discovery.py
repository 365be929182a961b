"""Source image discovery.

The data directory is laid out as ``<root>/<category>/<image>``. Category
names carry no meaning beyond grouping.
"""

from pathlib import Path


def discover_images(root: Path) -> list[Path]:
    """List every file found one level below the category directories.

    Every entry directly under *root* is treated as a category and listed,
    in sorted name order, as are the entries inside each category. A stray
    file under *root* therefore fails the run like any other unreadable
    category. No file-type filtering is done: anything inside a category is
    a candidate source image.

    Args:
        root: Data directory containing category subdirectories

    Returns:
        Absolute paths of all candidate source images

    Raises:
        OSError: If *root* or a category cannot be listed
            (``NotADirectoryError`` for a file directly under *root*)
    """
    root = root.resolve()

    images: list[Path] = []
    for category in sorted(root.iterdir(), key=lambda p: p.name):
        images.extend(sorted(category.iterdir(), key=lambda p: p.name))
    return images
