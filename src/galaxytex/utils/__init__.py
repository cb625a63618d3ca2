from .io import DEFAULT_MAX_FILE_SIZE, read_binary, read_data_file
from .paths import safe_file_path

__all__ = [
    "DEFAULT_MAX_FILE_SIZE",
    "read_binary",
    "read_data_file",
    "safe_file_path",
]
