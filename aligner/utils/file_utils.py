"""
File helpers for the optional export archive
"""
import os
import tempfile
from pathlib import Path


def get_unique_output_path(output_path):
    """
    Generate a unique output path by adding a number suffix if the file already exists.

    Args:
        output_path (str): Desired output path

    Returns:
        str: Unique output path (original or with numeric suffix)

    Examples:
        Title (Arabic + English).docx -> unchanged (if it doesn't exist)
        Title (Arabic + English).docx -> Title (Arabic + English) (1).docx (if it exists)
    """
    path = Path(output_path)

    if not path.exists():
        return output_path

    parent = path.parent
    stem = path.stem
    suffix = path.suffix

    counter = 1
    while True:
        new_path = parent / f"{stem} ({counter}){suffix}"
        if not new_path.exists():
            return str(new_path)
        counter += 1


def write_bytes_atomically(output_path, content: bytes) -> str:
    """
    Write ``content`` to ``output_path`` without ever exposing a partial file.

    The bytes go to a temporary file in the destination directory which is
    renamed into place once fully written. On failure the temporary file
    is removed and the exception propagates.

    Returns:
        str: The path written
    """
    directory = os.path.dirname(os.path.abspath(output_path))
    os.makedirs(directory, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(suffix='.part', dir=directory)
    try:
        with os.fdopen(fd, 'wb') as tmp_file:
            tmp_file.write(content)
        os.replace(tmp_path, output_path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    return str(output_path)
