"""
Initialize .dockerignore files with sensible defaults
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .constants import DEFAULT_EXCLUSIONS, IGNORE_FILE_EXTENSION, MINIMAL_EXCLUSIONS


def generate_ignore_content(custom_patterns: Optional[List[str]] = None,
                            minimal: bool = False) -> str:
    """
    Generate content for a .dockerignore file

    Args:
        custom_patterns: Additional patterns appended after the defaults
        minimal: Generate minimal file with just essential patterns

    Returns:
        Content for the ignore file
    """
    lines = [
        f"# {IGNORE_FILE_EXTENSION} - files left out of the build context",
        f"# Generated on {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "#",
        "# Patterns are matched relative to the build context directory.",
        "# A pattern without '/' matches at any depth, a leading '/' anchors it.",
        "# Use ! to re-include files excluded by an earlier line; the last",
        "# matching line wins.",
        "",
    ]

    defaults = MINIMAL_EXCLUSIONS if minimal else DEFAULT_EXCLUSIONS
    lines.append("# Minimal exclusions" if minimal else "# Default exclusions")
    lines.extend(defaults)
    lines.append("")

    if custom_patterns:
        lines.append("# Custom patterns")
        lines.extend(custom_patterns)
        lines.append("")

    lines.extend([
        "# Examples:",
        "# data/raw/             # Large data files",
        "# **/*.pkl              # Model files anywhere",
        "# !important.log        # Exception - don't ignore this",
        "#",
        "# The Dockerfile and this file are always sent to the daemon.",
        "",
    ])

    return '\n'.join(lines)


def init_ignore_file(path: Path,
                     force: bool = False,
                     minimal: bool = False,
                     custom_patterns: Optional[List[str]] = None) -> bool:
    """
    Initialize a .dockerignore file at the specified path

    Args:
        path: Directory where to create the ignore file
        force: Overwrite existing file
        minimal: Create minimal file instead of comprehensive
        custom_patterns: Additional patterns to include

    Returns:
        True if file was created, False if already exists and not forced
    """
    ignore_path = Path(path) / IGNORE_FILE_EXTENSION

    if ignore_path.exists() and not force:
        return False

    content = generate_ignore_content(
        custom_patterns=custom_patterns,
        minimal=minimal
    )

    ignore_path.write_text(content, encoding='utf-8')
    return True
