"""Path sanitizing and safe file reading."""

import os
from typing import Optional

from .logger import get_logger

_JAVA_GIT_SUFFIX = ".java.git"


def sanitize_file_path(file_path: str) -> str:
    """
    Remove a ``.git`` suffix erroneously appended to a Java source path.

    ``Foo.java.git`` becomes ``Foo.java``; any other path is returned unchanged.
    Applying the function twice gives the same result as applying it once.
    """
    if file_path.endswith(_JAVA_GIT_SUFFIX):
        return file_path[:-len(".git")]
    return file_path


def is_file_accessible(file_path: str) -> bool:
    """Return True if the sanitized path names an existing regular file."""
    sanitized_path = sanitize_file_path(file_path)
    try:
        return os.path.isfile(sanitized_path) and os.access(sanitized_path, os.R_OK)
    except (OSError, ValueError) as e:
        get_logger().error(f"Error checking file accessibility for {file_path}: {e}")
        return False


def read_file_safely(file_path: str) -> Optional[str]:
    """
    Read a source file after sanitizing its path.

    Returns:
        The file content, or None if the file is missing or unreadable
    """
    sanitized_path = sanitize_file_path(file_path)

    if not is_file_accessible(sanitized_path):
        get_logger().warning(f"File not accessible: {sanitized_path}")
        return None

    try:
        with open(sanitized_path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        get_logger().warning(f"Error reading file {sanitized_path}: {e}")
        return None
