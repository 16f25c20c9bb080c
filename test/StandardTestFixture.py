import logging
import pytest
import tempfile
import shutil
import os

from libstratafs import Volume

class StandardTestFixture(object):

	@staticmethod
	def assert_equal(a, b, msg=""):
		assert a == b, msg


	@staticmethod
	def assert_raises(exc, func, *a, **kw):
		with pytest.raises(exc):
			func(*a, **kw)


	# Pytest skips classes with __init__ methods.
	# It seems like the best we can do atm is add our members as class members which should be re-instantiated before every test.
	@classmethod
	def setup_class(cls):
		cls.Constructor()

	
	# Also supply destructor.
	@classmethod
	def teardown_class(cls):
		cls.Destructor()


	@classmethod # this is a lie.
	def Constructor(this):
		logging.debug(f"Constructing {this.__name__}")
		this.tempdir = tempfile.mkdtemp()
		this.file_name = os.path.join(this.tempdir, 'test.strata')

	
	@classmethod # this is a lie.
	def Destructor(this):
		logging.debug(f"Destructing {this.__name__}")
		shutil.rmtree(this.tempdir)


	# Every test gets a fresh in-memory Volume and a fresh file name.
	def setup_method(this, method):
		this.volume = Volume()
		this.file_name = os.path.join(this.tempdir, f"{method.__name__}.strata")


	def teardown_method(this, method):
		this.volume.Close()
		if (os.path.exists(this.file_name)):
			os.unlink(this.file_name)
