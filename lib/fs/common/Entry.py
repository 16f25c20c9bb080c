"""
lib/fs/common/Entry.py

Purpose:
Provides the base class for all entry handles (files and directories). It binds one canonical path, caches the backing record, and tracks whether that record is resolved.

Place in Architecture:
A core part of the FS layer. Directory and File inherit from it; both delegate structural work to the Volume's Namespace.

Interface:

	__init__(volume, upath, record=None): Binds a canonical upath and resolves it, unless the record is already known.
	Resolve() / Refresh(): (Re)look up the backing record.
	Rebind(upath): Point the handle at a new path after a move.
	Properties: exists, state, full_name, name, extension, creation_time, last_access_time, last_write_time (all settable, with *_utc variants), attributes.
	GetAttributes(): getattr-style dict of type, size and epoch timestamps.

TODOs/FIXMEs:
None.
"""

import stat
import logging

from ...Upath import ubasename, uextension
from ...Exceptions import NamespaceError
from ...Namespace import CREATION_TIME, ACCESS_TIME
from ...Utils import parse_time, to_utc, from_utc
from .EntryStates import EntryState


class Entry(object):
	# Raised when an operation needs a record and there is none. Set by child classes.
	NotFound = NamespaceError

	# `record` may be passed in when the caller already looked it up, e.g. while listing.
	def __init__(this, volume, upath, record=None):
		this.volume = volume
		this.upath = upath

		this.record = None
		this.state = EntryState.UNRESOLVED

		if (record is not None):
			this.record = record
			this.state = EntryState.RESOLVED
		else:
			this.Resolve()

	def __repr__(this):
		return f"<{this.__class__.__name__} {this.upath} ({this.state})>"

	def __str__(this):
		return this.upath

	def __eq__(this, other):
		return isinstance(other, Entry) and other.__class__ is this.__class__ and other.upath == this.upath and other.volume is this.volume

	def __hash__(this):
		return hash((this.__class__.__name__, this.upath))

	# Looked up each time; the Volume swaps its Namespace when it loads new contents.
	@property
	def namespace(this):
		return this.volume.namespace


	# Look up the record behind this.upath.
	# A handle that deleted its record stays DELETED until something else recreates the path.
	# RETURNS the record or None.
	def Resolve(this):
		this.record = this.namespace.GetRecord(this.upath)
		if (this.record is not None):
			this.state = EntryState.RESOLVED
		elif (this.state is EntryState.RESOLVED):
			this.state = EntryState.UNRESOLVED
		return this.record

	def Refresh(this):
		this.Resolve()

	def Rebind(this, upath):
		logging.debug(f"Rebinding {this.upath} to {upath}.")
		this.upath = upath
		this.Resolve()

	def MarkDeleted(this):
		this.record = None
		this.state = EntryState.DELETED

	# RETURNS the backing record.
	# Always looked up again: another handle or a writer may have moved, deleted or rewritten it.
	def Require(this):
		if (this.Resolve() is None):
			raise this.NotFound(f"could not find {this.upath}", this.upath)
		return this.record

	@property
	def exists(this):
		return this.Resolve() is not None

	@property
	def full_name(this):
		return this.upath

	@property
	def name(this):
		return ubasename(this.upath)

	@property
	def extension(this):
		return uextension(this.upath)


	@property
	def last_write_time(this):
		return this.Require().uploaded

	@last_write_time.setter
	def last_write_time(this, value):
		this.SetTimes(write=value)

	@property
	def last_access_time(this):
		record = this.Require()
		return parse_time(record.meta.get(ACCESS_TIME)) or record.uploaded

	@last_access_time.setter
	def last_access_time(this, value):
		this.SetTimes(access=value)

	@property
	def creation_time(this):
		record = this.Require()
		return parse_time(record.meta.get(CREATION_TIME)) or record.uploaded

	@creation_time.setter
	def creation_time(this, value):
		this.SetTimes(creation=value)

	@property
	def last_write_time_utc(this):
		return to_utc(this.last_write_time)

	@last_write_time_utc.setter
	def last_write_time_utc(this, value):
		this.last_write_time = from_utc(value)

	@property
	def last_access_time_utc(this):
		return to_utc(this.last_access_time)

	@last_access_time_utc.setter
	def last_access_time_utc(this, value):
		this.last_access_time = from_utc(value)

	@property
	def creation_time_utc(this):
		return to_utc(this.creation_time)

	@creation_time_utc.setter
	def creation_time_utc(this, value):
		this.creation_time = from_utc(value)

	def SetTimes(this, creation=None, access=None, write=None):
		this.Require()
		this.namespace.SetTimes(this.upath, creation=creation, access=access, write=write)
		this.Resolve()


	# Overridden by Directory.
	@property
	def attributes(this):
		return stat.S_IFREG

	def GetSize(this):
		return this.Require().length

	def GetAttributes(this):
		return {
			'type': 'dir' if stat.S_ISDIR(this.attributes) else 'file',
			'mode': this.attributes,
			'size': this.GetSize(),
			'ctime': this.creation_time.timestamp(),
			'atime': this.last_access_time.timestamp(),
			'mtime': this.last_write_time.timestamp(),
		}
