"""
lib/Exceptions.py

Purpose:
Defines the closed set of errors raised by the namespace layer.

Place in Architecture:
Every component raises these instead of bare IOErrors. Each one is still an IOError with an errno code, so callers that only know about `err.errno` keep working.

Interface:

	NamespaceError(message, upath=None): Base class. Carries `errno`, `strerror` and `upath`.
	InvalidPath, DirectoryNotFound, FileNotFound, DirectoryNotEmpty, RootProtected, PathCollision, AccessDenied: Structural and validation errors.
	StoreFault: Opaque failure coming out of the record store. The original exception is chained as __cause__.
	WrongPassword: StoreFault raised when a volume cannot be unlocked with the given password.

TODOs/FIXMEs:
None.
"""

import errno


class NamespaceError(IOError):
	code = errno.EIO

	def __init__(this, message, upath=None):
		if (upath is None):
			super().__init__(this.code, message)
		else:
			super().__init__(this.code, message, upath)
		this.upath = upath


# Malformed, empty or otherwise unusable path input. Raised before the store is touched.
class InvalidPath(NamespaceError):
	code = errno.EINVAL


class DirectoryNotFound(NamespaceError):
	code = errno.ENOENT


class FileNotFound(NamespaceError):
	code = errno.ENOENT


class DirectoryNotEmpty(NamespaceError):
	code = errno.ENOTEMPTY


# Attempted delete or move of the root directory.
class RootProtected(NamespaceError):
	code = errno.EACCES


# Destination already occupied by a file or a directory.
class PathCollision(NamespaceError):
	code = errno.EEXIST


# Write attempted where a directory occupies the target path, or the record is already leased to a writer.
class AccessDenied(NamespaceError):
	code = errno.EACCES


class StoreFault(NamespaceError):
	code = errno.EIO


class WrongPassword(StoreFault):
	pass
