"""Local identity provider: bcrypt-hashed accounts in a JSON file."""
import json
import logging
import os
import uuid
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

import bcrypt

from src.application.ports import IdentityPort


logger = logging.getLogger(__name__)


class UserManager(IdentityPort):
    """Registers and authenticates users, yielding a stable uid and profile claims."""

    def __init__(self, storage_path: str):
        """
        Args:
            storage_path: Path to the JSON file holding accounts keyed by email.
        """
        self.storage_path = storage_path
        self._ensure_storage_exists()

    def _ensure_storage_exists(self) -> None:
        storage_dir = os.path.dirname(self.storage_path)
        if storage_dir and not os.path.exists(storage_dir):
            os.makedirs(storage_dir, exist_ok=True)

        if not os.path.exists(self.storage_path) or os.path.getsize(self.storage_path) == 0:
            self._save_users({})

    def _load_users(self) -> Dict[str, Any]:
        try:
            with open(self.storage_path, 'r') as f:
                return json.load(f)
        except (FileNotFoundError, json.JSONDecodeError):
            return {}

    def _save_users(self, users: Dict[str, Any]) -> None:
        with open(self.storage_path, 'w') as f:
            json.dump(users, f, indent=2)

    @staticmethod
    def _hash_password(password: str) -> str:
        hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt())
        return hashed.decode('utf-8')

    @staticmethod
    def _verify_password(password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode('utf-8'), hashed_password.encode('utf-8'))
        except ValueError:
            # malformed hash in the users file
            return False

    @staticmethod
    def _claims(user: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "uid": user["uid"],
            "full_name": user.get("full_name", ""),
            "email": user["email"],
            "phone": user.get("phone", ""),
        }

    def email_exists(self, email: str) -> bool:
        return email.strip().lower() in self._load_users()

    def register_user(self, full_name: str, email: str, phone: str, password: str) -> Tuple[bool, str]:
        """
        Register a new account.

        Returns:
            Tuple of (success, message)
        """
        email = email.strip().lower()
        if self.email_exists(email):
            return False, "Email already registered"

        users = self._load_users()
        users[email] = {
            "uid": uuid.uuid4().hex,
            "full_name": full_name.strip(),
            "email": email,
            "phone": phone.strip(),
            "password": self._hash_password(password),
            "created_at": datetime.now().isoformat(),
            "last_login": None,
        }

        try:
            self._save_users(users)
        except OSError as e:
            logger.exception("Failed to save user %s", email)
            return False, f"Failed to save user: {str(e)}"
        logger.info("Registered user %s", users[email]["uid"])
        return True, "Registration successful"

    def authenticate_user(self, email: str, password: str) -> Tuple[bool, Optional[Dict[str, Any]]]:
        """
        Check credentials.

        Returns:
            Tuple of (success, claims or None). Claims hold uid, full_name,
            email and phone, never the password hash.
        """
        email = email.strip().lower()
        users = self._load_users()
        user = users.get(email)
        if user is None or not self._verify_password(password, user["password"]):
            return False, None

        user["last_login"] = datetime.now().isoformat()
        self._save_users(users)
        return True, self._claims(user)

    def get_user(self, email: str) -> Optional[Dict[str, Any]]:
        user = self._load_users().get(email.strip().lower())
        return self._claims(user) if user is not None else None
