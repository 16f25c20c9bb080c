"""
lib/fs/File.py

Purpose:
Implements the File handle (subclass of Entry) specialized for files and their payloads.

Place in Architecture:
User-facing handle for reading, writing, copying, moving and deleting files. Stream access goes through lib/fs/Handle.py; structural work through the Namespace.

Interface:

	__init__(volume, path, record=None): Canonicalizes `path` to file form and resolves it.
	OpenRead(): Readable binary stream.
	OpenWrite() / Create(): Writable binary stream at offset 0. Creates the file if needed.
	OpenAppend(): Writable binary stream at the end of the payload. Creates the file if needed.
	OpenText(encoding) / CreateText(encoding) / AppendText(encoding): Text versions of the above.
	CopyTo(path, overwrite=False): RETURNS a handle to the copy.
	MoveTo(path): Rename this file.
	Delete(): Remove this file.
	Properties: length, directory, directory_name.

TODOs/FIXMEs:
None.
"""

import io
import logging

from ..Upath import canonical_file, udirname, SEPARATOR
from ..Exceptions import FileNotFound, DirectoryNotFound, AccessDenied
from ..Utils import now
from .common.Entry import Entry
from .Directory import Directory
from .Handle import RecordReader, RecordWriter


class File(Entry):
	NotFound = FileNotFound

	def __init__(this, volume, path, record=None):
		super().__init__(volume, canonical_file(path), record)

	@property
	def length(this):
		return this.Require().length

	@property
	def directory_name(this):
		return udirname(this.upath)

	@property
	def directory(this):
		return Directory(this.volume, this.directory_name)


	def _Touch(this, write=False):
		if (this.volume.read_only):
			return
		stamp = now()
		this.namespace.SetTimes(this.upath, access=stamp, write=stamp if write else None)

	def OpenRead(this):
		record = this.Require()
		payload = this.namespace.store.Read(record.id)
		this._Touch()
		this.Resolve()
		return RecordReader(payload)

	# Checks shared by OpenWrite and OpenAppend.
	# RETURNS the record to write to, creating it if needed.
	def _PrepareWrite(this):
		if (not this.namespace.Exists(this.directory_name)):
			raise DirectoryNotFound(f"could not find a part of the path {this.upath}", this.upath)
		if (this.namespace.Exists(this.upath + SEPARATOR)):
			raise AccessDenied(f"access to the path {this.upath} is denied", this.upath)

		record = this.Resolve()
		if (record is None):
			record = this.namespace.CreateFile(this.upath)
			this.Resolve()
		return record

	def _Open(this, append):
		record = this._PrepareWrite()
		payload = this.namespace.store.Read(record.id)
		ret = RecordWriter(this, record.id, payload, append=append)
		try:
			this._Touch(write=True)
			this.Resolve()
		except BaseException:
			ret.close()
			raise
		return ret

	def OpenWrite(this):
		return this._Open(append=False)

	def OpenAppend(this):
		return this._Open(append=True)

	def Create(this):
		return this.OpenWrite()

	def OpenText(this, encoding=None):
		return io.TextIOWrapper(this.OpenRead(), encoding=encoding or this.volume.encoding)

	def CreateText(this, encoding=None):
		return io.TextIOWrapper(this.OpenWrite(), encoding=encoding or this.volume.encoding)

	def AppendText(this, encoding=None):
		return io.TextIOWrapper(this.OpenAppend(), encoding=encoding or this.volume.encoding)


	def CopyTo(this, path, overwrite=False):
		this.Require()
		destination = canonical_file(path)
		this.namespace.CopyFile(this.upath, destination, overwrite=overwrite)
		return File(this.volume, destination)

	def MoveTo(this, path):
		this.Require()
		destination = canonical_file(path)
		this.namespace.MoveFile(this.upath, destination)
		this.Rebind(destination)

	# Deleting twice raises FileNotFound.
	def Delete(this):
		if (this.record is not None and this.volume.IsLeased(this.record.id)):
			logging.warning(f"Deleting {this.upath} while a writer is still open.")
		this.namespace.DeleteFile(this.upath)
		this.MarkDeleted()
