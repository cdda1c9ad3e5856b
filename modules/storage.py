"""
This module provides the local persistence layer for the PCOS Guard application.

It defines the `RecordStore` class, which keeps three independent records on disk:
- the list of users who signed up on this machine,
- the current session user (absent when logged out),
- the list of assessment results, most recent first.

Each record is a JSON document encrypted with Fernet and written to its own file.
Writes always replace the whole record. Reads never raise: a missing, empty,
undecryptable or malformed record is treated as empty so the app can always start.
"""
# pcosguard/modules/storage.py

import json
import os
from pathlib import Path
from cryptography.fernet import InvalidToken
from modules.encryption import get_encryptor
from modules.models import User, AssessmentResult

DATA_DIR = "pcos_data"

USERS_KEY = "pcos_app_users"
CURRENT_USER_KEY = "pcos_app_current_user"
RESULTS_KEY = "pcos_app_results"


class RecordStore:
    """Key-value store for users, the session user and assessment results."""
    def __init__(self, data_dir=None, encryptor=None):
        """Initializes the store.

        Args:
            data_dir (str, optional): Directory holding the record files. Defaults to `DATA_DIR`.
            encryptor (optional): Object with `encrypt`/`decrypt`. Defaults to the shared Fernet.
        """
        self.data_dir = Path(data_dir or DATA_DIR)
        self._encryptor = encryptor or get_encryptor()

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def _read(self, key: str):
        """Loads and decrypts one record.

        Returns:
            The decoded JSON value, or None if the record is missing or unreadable.
        """
        try:
            with open(self._path(key), 'r') as f:
                encrypted_data = f.read()
            if not encrypted_data:
                return None
            decrypted_data = self._encryptor.decrypt(encrypted_data.encode()).decode()
            return json.loads(decrypted_data)
        except FileNotFoundError:
            return None
        except (InvalidToken, UnicodeDecodeError, json.JSONDecodeError) as e:
            print(f"Warning: Could not read record '{key}' ({e!r}). Treating it as empty.")
            return None

    def _write(self, key: str, value):
        """Encrypts and overwrites one record."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        data_to_encrypt = json.dumps(value, indent=4)
        encrypted_data = self._encryptor.encrypt(data_to_encrypt.encode())
        with open(self._path(key), 'w') as f:
            f.write(encrypted_data.decode())

    def _remove(self, key: str):
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass

    def _read_list(self, key: str) -> list:
        data = self._read(key)
        if data is None:
            return []
        if not isinstance(data, list):
            print(f"Warning: Record '{key}' is not a list. Treating it as empty.")
            return []
        return data

    # Users

    def get_users(self) -> list:
        """Returns every stored user in signup order.

        Returns:
            list: A list of `User` objects, empty if none are stored.
        """
        users = []
        for entry in self._read_list(USERS_KEY):
            try:
                users.append(User.from_dict(entry))
            except (KeyError, TypeError, AttributeError) as e:
                print(f"Warning: Skipping malformed user record ({e!r}).")
        return users

    def save_user(self, user: User):
        """Appends a user to the stored list. No uniqueness check is made."""
        users = self._read_list(USERS_KEY)
        users.append(user.to_dict())
        self._write(USERS_KEY, users)

    # Session

    def set_current_user(self, user):
        """Stores the session user, or removes the session record when `user` is None."""
        if user:
            self._write(CURRENT_USER_KEY, user.to_dict())
        else:
            self._remove(CURRENT_USER_KEY)

    def get_current_user(self):
        """Returns the session `User`, or None when nobody is signed in."""
        data = self._read(CURRENT_USER_KEY)
        if not data:
            return None
        try:
            return User.from_dict(data)
        except (KeyError, TypeError, AttributeError) as e:
            print(f"Warning: Discarding malformed session record ({e!r}).")
            return None

    # Assessments

    def save_assessment(self, result: AssessmentResult):
        """Inserts a result at the front of the stored list (most recent first)."""
        results = self._read_list(RESULTS_KEY)
        results.insert(0, result.to_dict())
        self._write(RESULTS_KEY, results)

    def get_assessments(self) -> list:
        """Returns all stored results, most recent first."""
        results = []
        for entry in self._read_list(RESULTS_KEY):
            try:
                results.append(AssessmentResult.from_dict(entry))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                print(f"Warning: Skipping malformed assessment record ({e!r}).")
        return results

    def get_user_assessments(self, user_id: str) -> list:
        """Returns the results owned by `user_id`, most recent first."""
        return [r for r in self.get_assessments() if r.user_id == user_id]
