"""
lib/fs/Directory.py

Purpose:
Implements the Directory handle (subclass of Entry) specialized for directories.

Place in Architecture:
User-facing handle for creating, listing, deleting and moving directories. Listings and structural changes are delegated to the Namespace.

Interface:

	__init__(volume, path, record=None): Canonicalizes `path` to directory form and resolves it.
	Create(): Create the directory and any missing ancestors. No-op if it exists.
	CreateSubdirectory(relpath): Create a directory below this one. RETURNS its handle.
	GetFiles(pattern=None) / GetDirectories(pattern=None): Immediate children, optionally filtered by a search pattern.
	EnumerateFiles(pattern=None) / EnumerateDirectories(pattern=None): Generator versions.
	Delete(): Delete this (empty, non-root) directory.
	MoveTo(path): Move this directory and everything below it.
	Properties: parent, root, name.

TODOs/FIXMEs:
None.
"""

import stat

from ..Upath import ROOT, canonical_directory, ujoin, udirname, is_directory_path, glob_to_regex, SEPARATOR
from ..Exceptions import DirectoryNotFound, RootProtected
from .common.Entry import Entry


class Directory(Entry):
	NotFound = DirectoryNotFound

	def __init__(this, volume, path, record=None):
		super().__init__(volume, canonical_directory(path), record)

	@property
	def is_root(this):
		return this.upath == ROOT

	@property
	def attributes(this):
		return stat.S_IFDIR

	def GetSize(this):
		return 0

	@property
	def parent(this):
		if (this.is_root):
			return None
		return Directory(this.volume, udirname(this.upath))

	@property
	def root(this):
		return this.volume.root


	def Create(this):
		if (this.exists):
			return
		this.namespace.CreateDirectory(this.upath)
		this.Resolve()

	def CreateSubdirectory(this, relpath):
		ret = Directory(this.volume, ujoin(this.upath, relpath))
		ret.Create()
		return ret

	def _Children(this, wantDirectories, pattern):
		this.Require()
		regex = glob_to_regex(pattern) if pattern is not None else None

		for record in this.namespace.ListChildren(this.upath):
			if (is_directory_path(record.path) != wantDirectories):
				continue
			# Directories are matched without their trailing separator, so "sub" finds "/a/sub/".
			if (regex is not None and not regex.match(record.path.rstrip(SEPARATOR))):
				continue
			yield record

	def EnumerateFiles(this, pattern=None):
		from .File import File
		for record in this._Children(False, pattern):
			yield File(this.volume, record.path, record)

	def EnumerateDirectories(this, pattern=None):
		for record in this._Children(True, pattern):
			yield Directory(this.volume, record.path, record)

	def GetFiles(this, pattern=None):
		return list(this.EnumerateFiles(pattern))

	def GetDirectories(this, pattern=None):
		return list(this.EnumerateDirectories(pattern))


	def Delete(this):
		this.Require()
		this.namespace.DeleteDirectory(this.upath)
		this.MarkDeleted()

	def MoveTo(this, path):
		this.Require()
		if (this.is_root):
			raise RootProtected("cannot move root directory", this.upath)

		destination = canonical_directory(path)
		this.namespace.MoveSubtree(this.upath, destination)
		this.Rebind(destination)
