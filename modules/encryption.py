"""
This module handles the encryption and decryption of the application's record files.

It uses the `cryptography` library (specifically Fernet symmetric encryption) so that
the users, the session marker and the assessment results stored on disk are never
kept in plain text. The module is responsible for:
- Generating a secret key if one does not already exist.
- Storing and loading the secret key from `KEY_FILE`.
- Providing a shared encryptor through `get_encryptor()`, created on first use.

Security Note: the key file must be kept private and out of version control.
Losing it makes every stored record unreadable (the store then starts empty).
"""
# pcosguard/modules/encryption.py

from pathlib import Path
from cryptography.fernet import Fernet

KEY_FILE = "secret.key"

_encryptor = None


def write_key(path=None) -> bytes:
    """Generates a new Fernet key and saves it to the key file.

    Args:
        path (str, optional): Where to write the key. Defaults to `KEY_FILE`.

    Returns:
        bytes: The key that was written.
    """
    key = Fernet.generate_key()
    key_path = Path(path or KEY_FILE)
    key_path.parent.mkdir(parents=True, exist_ok=True)
    key_path.write_bytes(key)
    return key


def load_key(path=None) -> bytes:
    """Loads the Fernet key from the key file.

    Raises:
        FileNotFoundError: If no key has been written yet.
    """
    return Path(path or KEY_FILE).read_bytes()


def get_encryptor() -> Fernet:
    """Returns the shared Fernet instance, creating the key file on first run."""
    global _encryptor
    if _encryptor is None:
        try:
            key = load_key()
        except FileNotFoundError:
            print(f"Encryption key not found. Generating a new one at '{KEY_FILE}'...")
            key = write_key()
        _encryptor = Fernet(key)
    return _encryptor
