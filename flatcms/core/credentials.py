from pathlib import Path
from typing import Dict, Union
import json
import logging

from werkzeug.security import check_password_hash, generate_password_hash

from flatcms.core.errors import AuthError, ConflictError, ValidationError
from flatcms.core.filenames import invalid_string

logger = logging.getLogger(__name__)


class CredentialStore:
    """Username -> password hash mapping persisted as a small JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, 'r', encoding='utf-8') as f:
            return json.load(f) or {}

    def save(self, credentials: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(credentials, f, indent=2, sort_keys=True)
        logger.debug(f"Credentials saved: {len(credentials)} users")

    def verify(self, username: str, password: str) -> bool:
        if invalid_string(username) or invalid_string(password):
            return False
        stored_hash = self.load().get(username)
        if stored_hash is None:
            return False
        return check_password_hash(stored_hash, password)

    def authenticate(self, username: str, password: str) -> str:
        """Return the username, or raise AuthError on bad credentials."""
        if not self.verify(username, password):
            raise AuthError('Invalid Credentials')
        return username

    def create(self, username: str, password: str) -> None:
        """Add a user, raising ValidationError or ConflictError when refused."""
        reason = invalid_string(username, 'username') or invalid_string(password, 'password')
        if reason:
            raise ValidationError(reason)

        credentials = self.load()
        if username in credentials:
            raise ConflictError('Username taken')

        credentials[username] = generate_password_hash(password)
        self.save(credentials)
        logger.info(f"User created: {username}")
