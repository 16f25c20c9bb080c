"""
lib/Crypto.py

Purpose:
Password based encryption of record payloads.

Place in Architecture:
Used by RecordStore when a volume is opened with a password. The namespace layer never sees it.

Interface:

	Keyring(password, iterations, salt, salt_hkdf): Derives the master key from a password.
	Keyring.Generate(password, iterations=None): New keyring with fresh salts and, unless given, a calibrated iteration count.
	Keyring.Verifier() / Keyring.Verify(verifier): Password check without decrypting any payload.
	Keyring.Encrypt(record_id, data) / Keyring.Decrypt(record_id, blob, length): Per-record AES-CBC.

TODOs/FIXMEs:
None.
"""

import os
import time

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

backend = default_backend()

IV_SIZE = 16
KEY_SIZE = 32
SALT_SIZE = 32
MIN_ITERATIONS = 10000

_VERIFIER_INFO = b"stratafs keyring"


# Master key is derived from the password and salt via PBKDF2.
# The master key, combined with a second different salt, is used to generate per-record keys via HKDF-SHA256.
class Keyring(object):
	def __init__(this, password, iterations, salt, salt_hkdf):
		if (not isinstance(password, str) or not password):
			raise ValueError("password must be a non-empty string")

		this.iterations = iterations
		this.salt = salt
		this.salt_hkdf = salt_hkdf

		kdf = PBKDF2HMAC(
			algorithm=hashes.SHA256(),
			length=KEY_SIZE,
			salt=salt,
			iterations=iterations,
			backend=backend
		)
		this.key = kdf.derive(password.encode('utf-8'))

	@classmethod
	def Generate(cls, password, iterations=None):
		rnd = os.urandom(2 * SALT_SIZE)
		if (iterations is None):
			iterations = cls.CalibrateIterations(password)
		return cls(password, max(MIN_ITERATIONS, iterations), rnd[:SALT_SIZE], rnd[SALT_SIZE:])

	# Determine how many iterations take about a second on this machine.
	@staticmethod
	def CalibrateIterations(password):
		start = time.time()
		count = 0
		while True:
			kdf = PBKDF2HMAC(
				algorithm=hashes.SHA256(),
				length=KEY_SIZE,
				salt=b"b"*SALT_SIZE,
				iterations=MIN_ITERATIONS,
				backend=backend
			)
			kdf.derive(b"a"*len(password.encode('utf-8')))
			count += MIN_ITERATIONS
			if time.time() > start + 0.05:
				break
		return max(MIN_ITERATIONS, int(count * 1.0 / (time.time() - start)))

	def _Hmac(this):
		h = hmac.HMAC(key=this.key, algorithm=hashes.SHA512(), backend=backend)
		h.update(_VERIFIER_INFO)
		return h

	def Verifier(this):
		return this._Hmac().finalize()

	def Verify(this, verifier):
		try:
			this._Hmac().verify(verifier)
		except InvalidSignature:
			return False
		return True

	def RecordKey(this, record_id):
		hkdf = HKDF(
			algorithm=hashes.SHA256(),
			length=KEY_SIZE,
			salt=this.salt_hkdf,
			info=record_id.encode('utf-8'),
			backend=backend
		)
		return hkdf.derive(this.key)

	# RETURNS iv + ciphertext. The plaintext length is tracked by the caller; padding is random.
	def Encrypt(this, record_id, data):
		iv = os.urandom(IV_SIZE)
		cipher = Cipher(algorithms.AES(this.RecordKey(record_id)), modes.CBC(iv), backend=backend)
		encryptor = cipher.encryptor()

		off = len(data) % 16
		if off != 0:
			data = bytes(data) + os.urandom(16 - off)
		return iv + encryptor.update(bytes(data)) + encryptor.finalize()

	def Decrypt(this, record_id, blob, length):
		if (not blob):
			return b""
		if (len(blob) < IV_SIZE or (len(blob) - IV_SIZE) % 16 != 0):
			raise ValueError("invalid encrypted payload")

		iv = blob[:IV_SIZE]
		cipher = Cipher(algorithms.AES(this.RecordKey(record_id)), modes.CBC(iv), backend=backend)
		decryptor = cipher.decryptor()
		data = decryptor.update(blob[IV_SIZE:]) + decryptor.finalize()
		return data[:length]
