"""FlatCMS: a flat-file content manager."""

from flatcms.version_info import __version__
