"""
Filename policy: character and extension whitelists, extension
normalisation and the numeric suffix used to keep uploads unique.
"""

from enum import Enum, auto
from typing import Iterable, Optional, Tuple
import re
import logging

logger = logging.getLogger(__name__)

IMAGE_TYPES = ('.jpg', '.jpeg', '.png')
TEXT_TYPES = ('.txt', '.md')
ALL_TYPES = IMAGE_TYPES + TEXT_TYPES

# Anything outside A-Z a-z 0-9 ! . ? , _ and space
DISALLOWED_CHARS = re.compile(r'[^A-Za-z0-9!.?,_ ]')
TRAILING_DIGITS = re.compile(r'[0-9]*$')


class DocumentKind(Enum):
    TEXT = auto()
    MARKDOWN = auto()
    IMAGE = auto()

    @classmethod
    def from_filename(cls, filename: str) -> Optional['DocumentKind']:
        ext = ext_name(filename)
        if ext == '.md':
            return cls.MARKDOWN
        if ext == '.txt':
            return cls.TEXT
        if ext in IMAGE_TYPES:
            return cls.IMAGE
        return None

    @property
    def editable(self) -> bool:
        return self in (DocumentKind.TEXT, DocumentKind.MARKDOWN)


class Purpose(Enum):
    """What a submitted filename is about to be used for."""
    CREATE = auto()
    RENAME = auto()
    UPLOAD = auto()


def split_base_ext(filename: str) -> Tuple[str, str]:
    """
    Split on the last dot. The extension keeps its dot; '' when absent.
    Leading dots belong to the basename, so '.txt' has no extension.
    """
    base, dot, ext = filename.rpartition('.')
    if not dot or not base.strip('.'):
        return filename, ''
    return base, dot + ext


def ext_name(filename: str) -> str:
    return split_base_ext(filename)[1].lower()


def downcase_ext(filename: str) -> str:
    base, ext = split_base_ext(filename)
    return base + ext.lower()


def is_text_file(filename: str) -> bool:
    return ext_name(filename) in TEXT_TYPES


def name_in_use(filename: str, existing: Iterable[str]) -> bool:
    folded = filename.casefold()
    return any(name.casefold() == folded for name in existing)


def invalid_string(value: Optional[str], label: str = 'name') -> Optional[str]:
    """Return a reason string when ``value`` is empty or has special characters."""
    if not value:
        return f"A {label} is required"
    if DISALLOWED_CHARS.search(value):
        return f"The {label} may not include special characters."
    return None


def validate(filename: Optional[str], purpose: Purpose, existing: Iterable[str] = ()) -> Optional[str]:
    """
    Check a submitted filename. Returns None when it is acceptable,
    otherwise the reason to show the user.
    """
    reason = invalid_string(filename)
    if reason:
        return reason

    if purpose is Purpose.CREATE and not is_text_file(filename):
        return 'Your file name must have a proper text file extension'

    if purpose in (Purpose.UPLOAD, Purpose.RENAME) and ext_name(filename) not in ALL_TYPES:
        return 'Only .txt, .md, .jpg, .jpeg and .png files are supported'

    if purpose is Purpose.CREATE and name_in_use(filename, existing):
        return 'File name in use'

    return None


def append_next_num(filename: str) -> str:
    """
    Increment the number at the end of the basename, starting at 1 when
    there is none: image.jpg -> image1.jpg, 9image10.jpg -> 9image11.jpg.
    """
    base, ext = split_base_ext(filename)
    digits = TRAILING_DIGITS.search(base).group()
    prefix = base[:len(base) - len(digits)]
    return f"{prefix}{int(digits or 0) + 1}{ext}"


def next_available_name(filename: str, existing: Iterable[str]) -> str:
    existing = list(existing)
    candidate = filename
    while name_in_use(candidate, existing):
        candidate = append_next_num(candidate)
    if candidate != filename:
        logger.debug(f"Filename '{filename}' taken, using '{candidate}'")
    return candidate
