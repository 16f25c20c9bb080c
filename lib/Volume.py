"""
lib/Volume.py

Purpose:
Implements the Volume: one record store, the namespace layered on it, and the root directory handle.

Place in Architecture:
The top of the stack and the only owner of the store connection. Every Directory and File handle is bound to one Volume and reaches the store through `volume.namespace`. The Volume also tracks open writers so that each record has at most one.

Interface:

	Volume(filename=None, password=None, read_only=False, timeout=30, kdf_iterations=None, encoding="utf-8"): A Volume in memory, or backed by `filename`.
	Open(filename, password=None, read_only=False, **kwargs): Same as the constructor, with a filename.
	Load(source, password=None, **kwargs): In-memory Volume initialized from a saved one (a stream or a filename).
	LoadFrom(source): Replace the contents of this Volume with a saved one.
	SaveTo(target): Write this Volume to a stream or a filename.
	Close(): Commit open writers and release the store, even if a writer fails. Also used by `with`.
	ListAll(): Every entry as a handle.
	Lease(record_id, writer) / Release(record_id, writer) / IsLeased(record_id): Writer tracking.
	RebuildWithPassword(password): Re-encrypt this Volume under a new password (None for plain).
	CheckPassword / IsPasswordProtected / SetPassword / ChangePassword: Static helpers on saved Volumes.
	Properties: root, name, in_memory, drive_format, encrypted, closed.

TODOs/FIXMEs:
None.
"""

import os
import codecs
import logging
import sqlite3
import threading

from .RecordStore import RecordStore
from .Namespace import Namespace
from .Upath import ROOT, is_directory_path
from .Exceptions import NamespaceError, AccessDenied, StoreFault, WrongPassword
from .Utils import parse_timeout, parse_iterations
from .fs.Directory import Directory
from .fs.File import File


# A Volume is a self-contained file system stored in one SQLite database.
# NOTE: A Volume assumes one logical thread of control. The lock only guards the writer table.
class Volume(object):
	MEMORY = "MEMORY"
	FILE = "FILE"

	# timeout: SQLite busy timeout (seconds).
	# kdf_iterations: None means calibrate on first use.
	# encoding: default encoding of the text helpers.
	def __init__(this, filename=None, password=None, read_only=False, timeout=30, kdf_iterations=None, encoding="utf-8"):
		this.timeout = timeout
		this.kdf_iterations = kdf_iterations
		this.encoding = encoding

		this.filename = os.fspath(filename) if filename is not None else None
		this.password = password
		this.read_only = read_only

		# Open writers by record id
		this.lock = threading.RLock()
		this.open_items = {}

		this.store = None
		this.namespace = None
		this.root = None

		this.ValidateArgs()
		this._Attach(this._OpenStore())

	def ValidateArgs(this):
		try:
			this.timeout = parse_timeout(this.timeout)
		except ValueError:
			raise ValueError(f"error: timeout {this.timeout} is not a valid timeout")

		try:
			this.kdf_iterations = parse_iterations(this.kdf_iterations)
		except ValueError:
			raise ValueError(f"error: kdf_iterations {this.kdf_iterations} is not a valid iteration count")

		try:
			codecs.lookup(this.encoding)
		except (LookupError, TypeError):
			raise ValueError(f"error: encoding {this.encoding} is not a known encoding")

		if (this.read_only and this.filename is None):
			raise ValueError("error: an in-memory Volume cannot be read only")

	def _OpenStore(this):
		if (this.filename is None):
			return RecordStore.InMemory(password=this.password, iterations=this.kdf_iterations)
		return RecordStore.FromFile(
			this.filename,
			password=this.password,
			read_only=this.read_only,
			timeout=this.timeout,
			iterations=this.kdf_iterations
		)

	# Point this Volume at `store`. The root is created unless the store is read only.
	def _Attach(this, store):
		this.store = store
		this.namespace = Namespace(store)
		if (not this.read_only):
			this.namespace.Initialize()
		this.root = Directory(this, ROOT)
		logging.info(f"Opened volume {this.name} ({this.drive_format}{', read only' if this.read_only else ''}{', encrypted' if store.encrypted else ''}).")

	@classmethod
	def Open(cls, filename, password=None, read_only=False, **kwargs):
		return cls(filename, password=password, read_only=read_only, **kwargs)

	@classmethod
	def Load(cls, source, password=None, **kwargs):
		# Start plain; the loaded store brings its own keyring.
		ret = cls(**kwargs)
		ret.password = password
		try:
			ret.LoadFrom(source)
		except BaseException:
			ret.Close()
			raise
		return ret

	def __enter__(this):
		return this

	def __exit__(this, type, value, traceback):
		this.Close()


	@property
	def name(this):
		return this.filename if this.filename is not None else this.MEMORY

	@property
	def in_memory(this):
		return this.filename is None

	@property
	def drive_format(this):
		return this.MEMORY if this.in_memory else this.FILE

	@property
	def encrypted(this):
		return this.store.encrypted

	@property
	def closed(this):
		return this.store is None or this.store.closed


	# Replace this Volume's contents with those of a saved Volume.
	# Only in-memory Volumes can be reloaded.
	def LoadFrom(this, source):
		if (not this.in_memory):
			raise StoreFault(f"cannot load into file volume {this.name}", this.name)
		if (this.open_items):
			raise AccessDenied(f"cannot load into volume {this.name} while writers are open")

		store = RecordStore.Load(source, password=this.password, iterations=this.kdf_iterations)
		previous = this.store
		this._Attach(store)
		previous.Close()

	# `target` is either a binary stream or a filename. An existing file is overwritten.
	def SaveTo(this, target):
		this.FlushWriters()
		if (isinstance(target, (str, os.PathLike))):
			filename = os.fspath(target)
			try:
				connection = sqlite3.connect(filename)
			except sqlite3.Error as err:
				raise StoreFault(f"could not save volume to {filename}: {err}", filename) from err
			try:
				this.store.Backup(connection)
			finally:
				connection.close()
			logging.info(f"Saved volume {this.name} to {filename}.")
		else:
			size = this.store.Dump(target)
			logging.info(f"Saved volume {this.name} to a stream ({size} bytes).")

	def Close(this):
		if (this.closed):
			return
		with this.lock:
			writers = list(this.open_items.values())

		# Every writer gets its chance to commit and the store is released regardless.
		failure = None
		try:
			for writer in writers:
				try:
					writer.close()
				except NamespaceError as err:
					logging.error(f"Could not commit {writer.upath} while closing volume {this.name}: {err}")
					if (failure is None):
						failure = err
		finally:
			this.store.Close()
			logging.info(f"Closed volume {this.name}.")

		if (failure is not None):
			raise failure

	# Alias kept for callers used to Dispose().
	def Dispose(this):
		this.Close()


	# Thread safe means of registering the only writer of a record.
	def Lease(this, record_id, writer):
		with this.lock:
			if (record_id in this.open_items):
				raise AccessDenied(f"{writer.upath} is already open for writing", writer.upath)
			this.open_items[record_id] = writer

	def Release(this, record_id, writer):
		with this.lock:
			if (this.open_items.get(record_id) is writer):
				del this.open_items[record_id]

	def IsLeased(this, record_id):
		with this.lock:
			return record_id in this.open_items

	def FlushWriters(this):
		with this.lock:
			writers = list(this.open_items.values())
		for writer in writers:
			writer.flush()


	def ListAll(this):
		return [
			Directory(this, record.path, record) if is_directory_path(record.path) else File(this, record.path, record)
			for record in this.namespace.ListAll()
		]

	def RebuildWithPassword(this, password):
		this.FlushWriters()
		this.store.Rebuild(password)
		this.password = password


	# RETURNS True if `password` opens the Volume saved at `filename`.
	@staticmethod
	def CheckPassword(filename, password):
		try:
			with Volume(filename, password=password, read_only=True):
				return True
		except WrongPassword:
			return False

	@staticmethod
	def IsPasswordProtected(filename):
		try:
			with Volume(filename, read_only=True):
				return False
		except WrongPassword:
			return True

	# Encrypt a plain Volume.
	@staticmethod
	def SetPassword(filename, password, **kwargs):
		with Volume(filename, **kwargs) as volume:
			volume.RebuildWithPassword(password)

	# A `new` password of None removes the encryption.
	@staticmethod
	def ChangePassword(filename, old, new, **kwargs):
		with Volume(filename, password=old, **kwargs) as volume:
			volume.RebuildWithPassword(new)
