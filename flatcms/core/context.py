"""
Per-request state, read from and written back to the signed session cookie.

Handlers receive a ``RequestContext`` as their first argument instead of
reaching into ``flask.session`` directly.
"""

from functools import wraps
from typing import Optional, Union
import hashlib
import logging

from flask import current_app, flash, redirect, session, url_for

logger = logging.getLogger(__name__)

USER_KEY = 'username'
EDIT_SNAPSHOT_KEY = 'edit_snapshot'
RENAME_EXT_KEY = 'rename_ext'


def content_digest(content: Union[bytes, str]) -> str:
    if isinstance(content, str):
        content = content.encode('utf-8')
    return hashlib.sha256(content).hexdigest()


class RequestContext:
    def __init__(self, store, credentials, session_data):
        self.store = store
        self.credentials = credentials
        self._session = session_data

    @property
    def user(self) -> Optional[str]:
        return self._session.get(USER_KEY)

    @property
    def signed_in(self) -> bool:
        return bool(self.user)

    def sign_in(self, username: str) -> None:
        self._session[USER_KEY] = username
        logger.info(f"User signed in: {username}")

    def sign_out(self) -> None:
        user = self._session.pop(USER_KEY, None)
        self._session.pop(EDIT_SNAPSHOT_KEY, None)
        self._session.pop(RENAME_EXT_KEY, None)
        logger.info(f"User signed out: {user}")

    # Flash messages
    def success(self, message: str) -> None:
        flash(message, 'success')

    def error(self, message: str) -> None:
        flash(message, 'error')

    # Per-file session slots, keyed by the folded filename
    def _pop_keyed(self, key: str, filename: str) -> Optional[str]:
        entries = dict(self._session.get(key) or {})
        value = entries.pop(filename.casefold(), None)
        self._session[key] = entries
        return value

    def _put_keyed(self, key: str, filename: str, value: str) -> None:
        entries = dict(self._session.get(key) or {})
        entries[filename.casefold()] = value
        self._session[key] = entries

    # Edit comparison: only a digest is kept, the cookie has a size limit
    def remember_edit(self, filename: str, content: Union[bytes, str]) -> None:
        self._put_keyed(EDIT_SNAPSHOT_KEY, filename, content_digest(content))

    def edit_unchanged(self, filename: str, content: Union[bytes, str]) -> bool:
        snapshot = self._pop_keyed(EDIT_SNAPSHOT_KEY, filename)
        return snapshot is not None and snapshot == content_digest(content)

    # Rename form keeps the extension out of the editable title
    def remember_rename_extension(self, filename: str, ext: str) -> None:
        self._put_keyed(RENAME_EXT_KEY, filename, ext)

    def take_rename_extension(self, filename: str) -> Optional[str]:
        return self._pop_keyed(RENAME_EXT_KEY, filename)


def current_context() -> RequestContext:
    ext = current_app.extensions['flatcms']
    return RequestContext(ext['store'], ext['credentials'], session)


def with_context(view):
    """Pass the RequestContext as the first positional argument."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        return view(current_context(), *args, **kwargs)
    return wrapper


def login_required(view):
    """Like ``with_context`` but bounce signed-out users to the landing page."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        ctx = current_context()
        if not ctx.signed_in:
            logger.warning(f"Signed-out request rejected: {view.__name__}")
            ctx.error('You must be signed in to do that')
            return redirect(url_for('auth.landing'))
        return view(ctx, *args, **kwargs)
    return wrapper
