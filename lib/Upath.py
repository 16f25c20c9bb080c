"""
lib/Upath.py

Purpose:
Implements the path codec: turns user supplied paths into the canonical "universal paths" (upaths) used as namespace keys, and derives parent/child relationships from them.

Place in Architecture:
The leaf of the namespace layer. The Namespace index, the entry handles and the static fsops all canonicalize through here before touching the record store.

Interface:

	SEPARATOR, ALT_SEPARATOR: The canonical separator and the alternate one that gets rewritten.
	ROOT: The root upath.
	canonical_directory(path): Directory form, e.g. "/a/b/".
	canonical_file(path): File form, e.g. "/a/b.txt". Rejects paths ending with a separator.
	is_directory_path(upath): Whether the upath is in directory form.
	udirname(upath): Parent directory, in directory form.
	ubasename(upath): Last segment.
	uextension(upath): Extension of the last segment, including the dot.
	udepth(upath): Separator count of the upath in directory form.
	ujoin(dir_upath, relpath): Join a directory and a relative path.
	uancestors(dir_upath): Every prefix directory from the root down to dir_upath.
	glob_to_regex(pattern): Compile a search pattern into a regex matched against full upaths.

TODOs/FIXMEs:
None.
"""

import re
import posixpath

from .Exceptions import InvalidPath

SEPARATOR = "/"
ALT_SEPARATOR = "\\"
ROOT = SEPARATOR

_RUNS = re.compile(r"/{2,}")


def _normalize(path):
	if (path is None or not isinstance(path, str)):
		raise InvalidPath(f"path must be a string, not {type(path).__name__}")
	if (not path.strip()):
		raise InvalidPath("path cannot be empty")

	path = path.replace(ALT_SEPARATOR, SEPARATOR)
	if (not path.startswith(SEPARATOR)):
		path = SEPARATOR + path
	path = _RUNS.sub(SEPARATOR, path)

	# normpath keeps "//" at the start on posix; the runs are already collapsed.
	return posixpath.normpath(path)


def canonical_directory(path):
	ret = _normalize(path)
	if (not ret.endswith(SEPARATOR)):
		ret += SEPARATOR
	return ret


def canonical_file(path):
	if (isinstance(path, str) and path.replace(ALT_SEPARATOR, SEPARATOR).endswith(SEPARATOR)):
		raise InvalidPath("file name cannot end with a separator", path)

	ret = _normalize(path)
	if (ret == ROOT):
		raise InvalidPath("the root is not a file", path)
	return ret


def is_directory_path(upath):
	return upath.endswith(SEPARATOR)


def udirname(upath):
	if (upath == ROOT):
		raise InvalidPath("the root directory has no parent", upath)
	return upath.rstrip(SEPARATOR).rsplit(SEPARATOR, 1)[0] + SEPARATOR


def ubasename(upath):
	if (upath == ROOT):
		return ROOT
	return upath.rstrip(SEPARATOR).rsplit(SEPARATOR, 1)[-1]


def uextension(upath):
	name = ubasename(upath)
	if (is_directory_path(upath) or '.' not in name.lstrip('.')):
		return ""
	return name[name.rindex('.'):]


# Depth of an entry as if it were in directory form.
# "/" is 1, "/a/" and "/a" are both 2, "/a/b/" and "/a/b" are 3.
# The immediate children of a directory at depth n are exactly the entries at depth n + 1.
def udepth(upath):
	ret = upath.count(SEPARATOR)
	if (not is_directory_path(upath)):
		ret += 1
	return ret


# relpath is always taken relative to dir_upath, even if it starts with a separator.
def ujoin(dir_upath, relpath):
	if (relpath is None or not relpath.strip()):
		raise InvalidPath("path cannot be empty")
	relpath = relpath.replace(ALT_SEPARATOR, SEPARATOR).lstrip(SEPARATOR)
	return canonical_directory(dir_upath) + relpath


def uancestors(dir_upath):
	segments = [s for s in dir_upath.split(SEPARATOR) if s]
	current = ROOT
	yield current
	for segment in segments:
		current += segment + SEPARATOR
		yield current


def glob_to_regex(pattern):
	"""
	Translate a search pattern into a compiled regex matched against full upaths.

	'*' matches any run of characters, '?' exactly one character; everything else is literal.
	A pattern without a leading separator may be preceded by any directory, so "*.txt" and "f.txt" both match "/data/f.txt".
	"""
	if (pattern is None or not pattern.strip()):
		raise InvalidPath("search pattern cannot be empty")

	pattern = pattern.replace(ALT_SEPARATOR, SEPARATOR)
	translated = []
	for char in pattern:
		if (char == '*'):
			translated.append('.*')
		elif (char == '?'):
			translated.append('.')
		else:
			translated.append(re.escape(char))

	prefix = '' if pattern.startswith(SEPARATOR) else '(?:.*/)?'
	return re.compile(f"^{prefix}{''.join(translated)}$", re.DOTALL)
