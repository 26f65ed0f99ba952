"""Environment driven defaults for the command line scripts.

Values are read from the process environment after loading a `.env`
file (if present) from the working directory:

- CERTNOW_CA_DIR: directory holding ca.crt / ca.key (default certs/ca)
- CERTNOW_CERT_FILE_MODE: octal permission bits for certificates (644)
- CERTNOW_KEY_FILE_MODE: octal permission bits for private keys (600)
- CERTNOW_LOG_LEVEL: logging level name for the scripts (WARNING)
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _octal(name: str, default: str) -> int:
    value = os.getenv(name, default)
    try:
        return int(value, 8)
    except ValueError:
        raise ValueError(f"{name} must be an octal permission mode, got {value!r}") from None


def ca_dir() -> str:
    return os.getenv("CERTNOW_CA_DIR", "certs/ca")


def cert_file_mode() -> int:
    return _octal("CERTNOW_CERT_FILE_MODE", "644")


def key_file_mode() -> int:
    return _octal("CERTNOW_KEY_FILE_MODE", "600")


def log_level() -> str:
    return os.getenv("CERTNOW_LOG_LEVEL", "WARNING").upper()
