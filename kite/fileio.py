"""Load/store of documents as byte streams.

Row text is held as str with one character per byte (latin-1), so reading
and writing pass bytes through without any charset transform.
"""

import errno
import logging
import os
import stat
import tempfile

logger = logging.getLogger(__name__)

ENCODING = 'latin-1'
DEFAULT_FILE_MODE = 0o644


class FileError(OSError):
    """A load or save failed; the document in memory is left untouched."""


def load_file(filename: str) -> list[str]:
    """Read filename and split it into rows.

    One trailing newline per row is consumed, and a carriage return before
    it is dropped.

    Raises:
        FileError: if the file cannot be read (errno ENOENT when missing)
    """
    try:
        with open(filename, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise FileError(e.errno, e.strerror, filename) from e

    lines = data.split(b'\n')
    if lines and lines[-1] == b'':
        lines.pop()
    rows = []
    for line in lines:
        if line.endswith(b'\r'):
            line = line[:-1]
        rows.append(line.decode(ENCODING))
    logger.info("Loaded %d rows from %s", len(rows), filename)
    return rows


def save_file(filename: str, text: str) -> int:
    """Write text to filename atomically and return the number of bytes written.

    The data goes to a temporary file in the same directory, its size is
    checked, and only then is it renamed over the target.

    Raises:
        FileError: if anything goes wrong; the target is left as it was
    """
    data = text.encode(ENCODING)
    dir_name = os.path.dirname(filename) or '.'
    suffix = os.path.splitext(filename)[1]
    temp_filename = None
    try:
        try:
            mode = stat.S_IMODE(os.stat(filename).st_mode)
        except FileNotFoundError:
            mode = DEFAULT_FILE_MODE
        with tempfile.NamedTemporaryFile(mode='wb', dir=dir_name, suffix=suffix,
                                         prefix='.', delete=False) as temp_file:
            temp_filename = temp_file.name
            temp_file.write(data)
            temp_file.flush()
            written = os.fstat(temp_file.fileno()).st_size
            if written != len(data):
                raise FileError(errno.EIO, f"short write ({written} of {len(data)} bytes)", filename)
            os.fsync(temp_file.fileno())
        os.chmod(temp_filename, mode)
        os.replace(temp_filename, filename)
    except OSError as e:
        if temp_filename is not None and os.path.exists(temp_filename):
            try:
                os.remove(temp_filename)
            except OSError:
                logger.warning("Could not remove temporary file %s", temp_filename)
        if isinstance(e, FileError):
            raise
        raise FileError(e.errno, e.strerror, filename) from e
    logger.info("Wrote %d bytes to %s", len(data), filename)
    return len(data)
