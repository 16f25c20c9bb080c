"""
lib/RecordStore.py

Purpose:
The flat record store the namespace is layered upon: id-addressed payload + metadata records in SQLite, reached through SQLAlchemy, with optional password based payload encryption.

Place in Architecture:
Owned by exactly one Volume. Only the Namespace index talks to it. It has no notion of directories, parents or children; the only structure it offers is the unique index on the `path` column.

Interface:

	InMemory(password=None, connection=None, ...): Store backed by a private in-memory SQLite connection.
	FromFile(filename, password=None, read_only=False, timeout=30, ...): Store backed by a SQLite file.
	Load(source, password=None, ...): In-memory store initialized from a serialized store (a stream or a filename).
	Put(id, payload, meta, path): Create a record.
	Get(id) / GetByPath(path): Single record lookups. RETURN None when absent.
	Find(predicate): Linear scan over every record with a predicate on its metadata map.
	FindPrefix(prefix) / FindAll(): Scans by path prefix / of everything.
	Read(id) / Write(id, payload): Payload access.
	UpdateMeta(id, **meta) / SetPath(id, path) / Touch(id, when): Metadata updates.
	Delete(id): Remove a record.
	Batch(): Context manager; every operation inside it runs in one transaction.
	Rebuild(password): Re-encrypt every payload under a new password, or remove the password.
	Backup(target) / Dump(fp): Copy the whole store into another SQLite connection / a byte stream.
	Close(): Dispose of the engine.

TODOs/FIXMEs:
None.
"""

import os
import uuid
import logging
import sqlite3
import tempfile
from contextlib import contextmanager

import sqlalchemy as sql
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .db.RecordModel import Base, RecordModel, KeyringModel, Record
from .Crypto import Keyring
from .Exceptions import StoreFault, WrongPassword, PathCollision, FileNotFound
from .Utils import now, pipe_all


class RecordStore(object):
	def __init__(this, engine, password=None, read_only=False, iterations=None, name="MEMORY"):
		this.engine = engine
		this.name = name
		this.read_only = read_only
		this.iterations = iterations
		this.keyring = None
		this.closed = False

		this.sessionmaker = sessionmaker(bind=engine, expire_on_commit=False)

		# Session of the outermost open Batch, if any.
		this._batch = None

		try:
			if (not read_only):
				Base.metadata.create_all(engine)
		except SQLAlchemyError as err:
			raise StoreFault(f"could not open record store {name}: {err}") from err

		this._Unlock(password)

	@classmethod
	def InMemory(cls, password=None, connection=None, iterations=None, read_only=False):
		if (connection is None):
			connection = sqlite3.connect(":memory:", check_same_thread=False)
		engine = sql.create_engine(
			"sqlite://",
			creator=lambda: connection,
			poolclass=StaticPool
		)
		return cls(engine, password=password, read_only=read_only, iterations=iterations, name="MEMORY")

	@classmethod
	def FromFile(cls, filename, password=None, read_only=False, timeout=30, iterations=None):
		filename = os.path.abspath(filename)
		if (read_only):
			if (not os.path.isfile(filename)):
				raise StoreFault(f"record store {filename} does not exist", filename)
			url = f"sqlite:///file:{filename}?mode=ro&uri=true"
		else:
			url = f"sqlite:///{filename}"

		engine = sql.create_engine(url, connect_args={'timeout': timeout, 'check_same_thread': False})
		try:
			return cls(engine, password=password, read_only=read_only, iterations=iterations, name=filename)
		except Exception:
			engine.dispose()
			raise

	# Initialize a private in-memory store from a serialized one.
	# `source` is either a binary stream or the name of a store file.
	@classmethod
	def Load(cls, source, password=None, iterations=None):
		connection = sqlite3.connect(":memory:", check_same_thread=False)

		if (isinstance(source, (str, os.PathLike))):
			cls._RestoreInto(os.fspath(source), connection)
		else:
			fd, tmp = tempfile.mkstemp(suffix=".strata")
			try:
				with os.fdopen(fd, 'wb') as out:
					pipe_all(source, out)
				cls._RestoreInto(tmp, connection)
			finally:
				os.unlink(tmp)

		try:
			return cls.InMemory(password=password, connection=connection, iterations=iterations)
		except Exception:
			connection.close()
			raise

	@staticmethod
	def _RestoreInto(filename, connection):
		try:
			source = sqlite3.connect(filename)
			try:
				source.backup(connection)
			finally:
				source.close()
		except sqlite3.Error as err:
			raise StoreFault(f"could not load record store from {filename}: {err}") from err


	def _Unlock(this, password):
		with this.Session() as session:
			keyring = session.query(KeyringModel).first()
			empty = session.query(RecordModel.id).first() is None

		# A password given for a brand new store protects it. Existing plain stores are only encrypted through Rebuild.
		if (keyring is None):
			if (password is not None):
				if (this.read_only or not empty):
					raise WrongPassword("this data file is not encrypted")
				this._SetKeyring(password)
			return

		if (password is None):
			raise WrongPassword("this data file is encrypted")

		candidate = Keyring(password, keyring.iterations, keyring.salt, keyring.salt_hkdf)
		if (not candidate.Verify(keyring.verifier)):
			logging.error(f"Wrong password for record store {this.name}.")
			raise WrongPassword("invalid password")
		this.keyring = candidate

	# Only ever called on an empty keyring table.
	def _SetKeyring(this, password):
		try:
			with this.Batch():
				this._ReplaceKeyring(password)
		except BaseException:
			this.keyring = None
			raise

	def _ReplaceKeyring(this, password):
		with this.Session() as session:
			session.query(KeyringModel).delete()
			if (password is None):
				this.keyring = None
				return

			keyring = Keyring.Generate(password, this.iterations)
			session.add(KeyringModel(
				id=1,
				iterations=keyring.iterations,
				salt=keyring.salt,
				salt_hkdf=keyring.salt_hkdf,
				verifier=keyring.Verifier()
			))
			this.keyring = keyring

	@property
	def encrypted(this):
		return this.keyring is not None


	# Scope a unit of work.
	# Outside a Batch every Session commits on its own. Inside a Batch the batch's session is reused and only the Batch commits.
	# Unique index violations surface as PathCollision; every other database failure as StoreFault.
	@contextmanager
	def Session(this):
		if (this.closed):
			raise StoreFault(f"record store {this.name} is closed")

		if (this._batch is not None):
			yield this._batch
			return

		session = this.sessionmaker()
		try:
			yield session
			session.commit()
		except IntegrityError as err:
			session.rollback()
			raise PathCollision(f"path already exists: {err.orig}") from err
		except SQLAlchemyError as err:
			session.rollback()
			logging.error(f"Record store {this.name} failed: {err}")
			raise StoreFault(f"record store operation failed: {err}") from err
		except BaseException:
			session.rollback()
			raise
		finally:
			session.close()

	@contextmanager
	def Batch(this):
		if (this._batch is not None):
			yield this
			return

		with this.Session() as session:
			this._batch = session
			try:
				yield this
				session.flush()
			finally:
				this._batch = None

	def _Seal(this, id, payload):
		payload = bytes(payload)
		if (this.keyring is None):
			return payload
		return this.keyring.Encrypt(id, payload)

	def _Unseal(this, id, blob, length):
		if (this.keyring is None):
			return bytes(blob or b"")
		try:
			return this.keyring.Decrypt(id, blob, length)
		except ValueError as err:
			raise StoreFault(f"could not decrypt record {id}: {err}") from err

	def _Model(this, session, id):
		ret = session.get(RecordModel, id)
		if (ret is None):
			raise FileNotFound(f"no record with id {id}")
		return ret


	def Put(this, id, payload, meta, path):
		if (id is None):
			id = str(uuid.uuid4())
		payload = payload or b""
		meta = {k: v for k, v in (meta or {}).items() if k != 'path'}

		with this.Session() as session:
			session.add(RecordModel(
				id=id,
				path=path,
				meta=meta,
				data=this._Seal(id, payload),
				length=len(payload),
				uploaded=now()
			))
			session.flush()

		logging.debug(f"Put record {id} @ {path} ({len(payload)} bytes).")
		return id

	def Get(this, id):
		with this.Session() as session:
			model = session.get(RecordModel, id)
			return Record.FromModel(model) if model is not None else None

	def GetByPath(this, path):
		with this.Session() as session:
			model = session.query(RecordModel).filter_by(path=path).one_or_none()
			return Record.FromModel(model) if model is not None else None

	def Find(this, predicate):
		for record in this.FindAll():
			if (predicate(record.meta)):
				yield record

	# substr instead of LIKE: SQLite's LIKE folds ASCII case and paths are case sensitive.
	def FindPrefix(this, prefix):
		with this.Session() as session:
			models = session.query(RecordModel).filter(
				sql.func.substr(RecordModel.path, 1, len(prefix)) == prefix
			).order_by(RecordModel.path).all()
			return [Record.FromModel(model) for model in models]

	def FindAll(this):
		with this.Session() as session:
			models = session.query(RecordModel).order_by(RecordModel.path).all()
			return [Record.FromModel(model) for model in models]

	def Read(this, id):
		with this.Session() as session:
			model = this._Model(session, id)
			return this._Unseal(model.id, model.data, model.length)

	def Write(this, id, payload):
		payload = bytes(payload)
		with this.Session() as session:
			model = this._Model(session, id)
			model.data = this._Seal(id, payload)
			model.length = len(payload)
			model.uploaded = now()

		logging.debug(f"Wrote {len(payload)} bytes to record {id}.")

	def UpdateMeta(this, id, **meta):
		meta.pop('path', None)
		with this.Session() as session:
			model = this._Model(session, id)
			updated = dict(model.meta or {})
			updated.update(meta)
			model.meta = updated

	def SetPath(this, id, path):
		with this.Session() as session:
			model = this._Model(session, id)
			model.path = path
			session.flush()

	def Touch(this, id, when):
		with this.Session() as session:
			this._Model(session, id).uploaded = when

	def Delete(this, id):
		with this.Session() as session:
			session.delete(this._Model(session, id))

		logging.debug(f"Deleted record {id}.")


	# Re-encrypt every payload under `password`. A password of None removes the encryption.
	def Rebuild(this, password):
		if (this.read_only):
			raise StoreFault(f"record store {this.name} is read only")

		previous = this.keyring
		try:
			with this.Batch():
				with this.Session() as session:
					payloads = [
						(model, this._Unseal(model.id, model.data, model.length))
						for model in session.query(RecordModel).all()
					]
					this._ReplaceKeyring(password)
					for model, payload in payloads:
						model.data = this._Seal(model.id, payload)
		except BaseException:
			this.keyring = previous
			raise

		logging.info(f"Rebuilt record store {this.name} ({len(payloads)} records, {'encrypted' if this.encrypted else 'plain'}).")

	def _RawConnection(this):
		return this.engine.raw_connection()

	# Copy the whole store into another sqlite3 connection.
	def Backup(this, target):
		raw = this._RawConnection()
		try:
			raw.driver_connection.backup(target)
		except sqlite3.Error as err:
			raise StoreFault(f"could not back up record store {this.name}: {err}") from err
		finally:
			raw.close()

	def Dump(this, fp):
		fd, tmp = tempfile.mkstemp(suffix=".strata")
		os.close(fd)
		try:
			target = sqlite3.connect(tmp)
			try:
				this.Backup(target)
			finally:
				target.close()
			with open(tmp, 'rb') as source:
				return pipe_all(source, fp)
		finally:
			os.unlink(tmp)

	def Close(this):
		if (this.closed):
			return
		this.closed = True
		this.engine.dispose()
		logging.debug(f"Closed record store {this.name}.")
