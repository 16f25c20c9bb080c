"""
lib/db/RecordModel.py

Purpose:
Defines the SQLAlchemy ORM models behind the record store. A record is a flat, id-addressed blob with a small metadata map; the store knows nothing about directories.

Place in Architecture:
Persistent layout for RecordStore. The `path` metadata field is promoted to its own column so it can carry the unique index the namespace layer relies on.

Interface:

	RecordModel: columns id, path, meta, data, length, uploaded.
	KeyringModel: single row holding the key derivation parameters and password verifier of an encrypted store.
	Record: detached, immutable snapshot of a RecordModel row handed out to the namespace layer.

TODOs/FIXMEs:
None.
"""

from dataclasses import dataclass, field
from datetime import datetime

import sqlalchemy as sql
import sqlalchemy.orm as orm

Base = orm.declarative_base()

# Records store the payload and the metadata of every file and directory.
# The id is the path-independent means of access; renaming only ever touches the path column.
class RecordModel(Base):
	__tablename__ = 'records'

	# Lookup info.
	id = sql.Column(sql.String(36), primary_key=True)
	path = sql.Column(sql.String, nullable=False, unique=True, index=True) # Namespace identity. Unique across all live records.

	# Record data.
	meta = sql.Column(sql.JSON, nullable=False, default=dict) # creationTime, lastAccessTime and anything else callers attach.
	data = sql.Column(sql.LargeBinary, nullable=False, default=b"") # Possibly encrypted payload.
	length = sql.Column(sql.Integer, nullable=False, default=0) # Plaintext payload length.
	uploaded = sql.Column(sql.DateTime, nullable=False, default=datetime.now) # Built-in revision timestamp. Stands in for the last write time.

	def __repr__(this):
		return f"<Record ({this.id}) @ {this.path}>"


# Present only in password protected stores.
class KeyringModel(Base):
	__tablename__ = 'keyring'

	id = sql.Column(sql.Integer, primary_key=True)
	iterations = sql.Column(sql.Integer, nullable=False)
	salt = sql.Column(sql.LargeBinary, nullable=False)
	salt_hkdf = sql.Column(sql.LargeBinary, nullable=False)
	verifier = sql.Column(sql.LargeBinary, nullable=False)


@dataclass(frozen=True)
class Record:
	id: str
	path: str
	meta: dict = field(default_factory=dict)
	length: int = 0
	uploaded: datetime = None

	@classmethod
	def FromModel(cls, model):
		meta = dict(model.meta or {})
		meta['path'] = model.path
		return cls(
			id=model.id,
			path=model.path,
			meta=meta,
			length=model.length,
			uploaded=model.uploaded
		)
