"""
lib/Namespace.py

Purpose:
Realizes directory semantics over the flat record store. Each record's `path` is its namespace identity; directories, parents and children exist only as prefix and depth relationships between those paths.

Place in Architecture:
Sits between the entry handles (Directory, File) and the RecordStore. All structural rules (root protection, emptiness, collisions, subtree moves) are enforced here.

Interface:

	Initialize(): Create the root directory if it is missing.
	GetRecord(upath) / Exists(upath): Equality lookups on the unique path index.
	ListChildren(dir_upath): Immediate children only (prefix scan + exact depth filter).
	ListAll(): Every record.
	CreateDirectory(dir_upath): Idempotent; creates every missing ancestor.
	DeleteDirectory(dir_upath): Refuses the root and non-empty directories.
	MoveSubtree(old, new): Re-point a directory and every descendant, in one transaction.
	CreateFile(file_upath) / DeleteFile(file_upath) / MoveFile(old, new) / CopyFile(src, dst, overwrite): Single record file operations.
	SetTimes(upath, creation=None, access=None, write=None): Timestamp updates.

TODOs/FIXMEs:
None.
"""

import logging

from .Upath import ROOT, SEPARATOR, udirname, udepth, uancestors, is_directory_path
from .Exceptions import (
	InvalidPath,
	DirectoryNotFound,
	FileNotFound,
	DirectoryNotEmpty,
	RootProtected,
	PathCollision,
)
from .Utils import now, format_time

CREATION_TIME = 'creationTime'
ACCESS_TIME = 'lastAccessTime'


class Namespace(object):
	def __init__(this, store):
		this.store = store

	def Initialize(this):
		if (not this.Exists(ROOT)):
			this._PutEntry(ROOT)
			logging.info(f"Created root directory in {this.store.name}.")

	def _PutEntry(this, upath, payload=b""):
		stamp = format_time(now())
		return this.store.Put(None, payload, {CREATION_TIME: stamp, ACCESS_TIME: stamp}, upath)


	def GetRecord(this, upath):
		return this.store.GetByPath(upath)

	def Exists(this, upath):
		return this.GetRecord(upath) is not None

	# A naive prefix scan also returns grandchildren and deeper descendants.
	# Only records exactly one level below dir_upath are children.
	def ListChildren(this, dir_upath):
		depth = udepth(dir_upath) + 1
		return [
			record for record in this.store.FindPrefix(dir_upath)
			if udepth(record.path) == depth
		]

	def ListAll(this):
		return this.store.FindAll()


	def CreateDirectory(this, dir_upath):
		created = []
		with this.store.Batch():
			for ancestor in uancestors(dir_upath):
				if (this.Exists(ancestor)):
					continue
				if (this.Exists(ancestor.rstrip(SEPARATOR))):
					raise PathCollision(f"a file already exists at {ancestor.rstrip(SEPARATOR)}", ancestor)
				this._PutEntry(ancestor)
				created.append(ancestor)

		if (created):
			logging.info(f"Created directories {created}.")
		return this.GetRecord(dir_upath)

	# RETURNS False if there was nothing to delete.
	def DeleteDirectory(this, dir_upath):
		if (dir_upath == ROOT):
			raise RootProtected("root directory cannot be deleted", dir_upath)

		record = this.GetRecord(dir_upath)
		if (record is None):
			return False

		if (this.ListChildren(dir_upath)):
			raise DirectoryNotEmpty(f"directory {dir_upath} is not empty", dir_upath)

		this.store.Delete(record.id)
		logging.info(f"Deleted directory {dir_upath}.")
		return True

	def MoveSubtree(this, old, new):
		if (old == ROOT):
			raise RootProtected("cannot move root directory", old)
		if (new == ROOT or new == old):
			raise PathCollision(f"cannot move {old} onto {new}", new)
		if (new.startswith(old)):
			raise InvalidPath(f"cannot move {old} beneath itself", new)

		if (not this.Exists(old)):
			raise DirectoryNotFound(f"directory {old} does not exist", old)
		if (this.Exists(new) or this.Exists(new.rstrip(SEPARATOR))):
			raise PathCollision(f"cannot create {new} because it already exists", new)

		moved = 0
		with this.store.Batch():
			# Ancestors of the destination, not the destination itself; that is the rewritten `old`.
			this.CreateDirectory(udirname(new))

			for record in this.store.FindPrefix(old):
				this.store.SetPath(record.id, new + record.path[len(old):])
				moved += 1

		logging.info(f"Moved {old} to {new} ({moved} entries).")


	def CreateFile(this, file_upath):
		parent = udirname(file_upath)
		if (not this.Exists(parent)):
			raise DirectoryNotFound(f"could not find a part of the path {file_upath}", file_upath)
		if (this.Exists(file_upath + SEPARATOR)):
			raise PathCollision(f"a directory already exists at {file_upath}", file_upath)

		this._PutEntry(file_upath)
		logging.debug(f"Created file {file_upath}.")
		return this.GetRecord(file_upath)

	def DeleteFile(this, file_upath):
		record = this.GetRecord(file_upath)
		if (record is None):
			raise FileNotFound(f"could not find file {file_upath}", file_upath)

		this.store.Delete(record.id)
		logging.info(f"Deleted file {file_upath}.")

	# A single record update; the store applies it atomically.
	def MoveFile(this, old, new):
		record = this.GetRecord(old)
		if (record is None):
			raise FileNotFound(f"could not find file {old}", old)
		if (not this.Exists(udirname(new))):
			raise DirectoryNotFound(f"could not find a part of the path {new}", new)
		if (old == new):
			return record
		if (this.Exists(new) or this.Exists(new + SEPARATOR)):
			raise PathCollision(f"cannot create {new} because it already exists", new)

		this.store.SetPath(record.id, new)
		logging.info(f"Moved file {old} to {new}.")
		return this.GetRecord(new)

	def CopyFile(this, source, destination, overwrite=False):
		record = this.GetRecord(source)
		if (record is None):
			raise FileNotFound(f"could not find file {source}", source)
		if (source == destination):
			raise PathCollision(f"cannot copy {source} onto itself", destination)

		payload = this.store.Read(record.id)
		with this.store.Batch():
			existing = this.GetRecord(destination)
			if (existing is not None):
				if (not overwrite):
					raise PathCollision(f"file {destination} exists", destination)
				this.store.Write(existing.id, payload)
				this.SetTimes(destination, access=now())
			else:
				this.CreateFile(destination)
				this.store.Write(this.GetRecord(destination).id, payload)

		logging.info(f"Copied {source} to {destination} ({len(payload)} bytes).")
		return this.GetRecord(destination)


	def SetTimes(this, upath, creation=None, access=None, write=None):
		record = this.GetRecord(upath)
		if (record is None):
			if (is_directory_path(upath)):
				raise DirectoryNotFound(f"directory {upath} does not exist", upath)
			raise FileNotFound(f"could not find file {upath}", upath)

		meta = {}
		if (creation is not None):
			meta[CREATION_TIME] = format_time(creation)
		if (access is not None):
			meta[ACCESS_TIME] = format_time(access)

		with this.store.Batch():
			if (meta):
				this.store.UpdateMeta(record.id, **meta)
			if (write is not None):
				this.store.Touch(record.id, write)
