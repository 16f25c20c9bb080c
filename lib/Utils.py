from datetime import datetime, timezone

# Copy everything left in `source` into `destination`, 128 KiB at a time.
# RETURNS the number of bytes copied.
def pipe_all(source, destination, block_size=131072):
	ret = 0
	while True:
		block = source.read(block_size)
		if not block:
			break
		destination.write(block)
		ret += len(block)
	return ret


# Timestamps are stored as naive local time, like the rest of the namespace metadata.
def now():
	return datetime.now()


def to_utc(value):
	return value.astimezone(timezone.utc)


def from_utc(value):
	if value.tzinfo is None:
		value = value.replace(tzinfo=timezone.utc)
	return value.astimezone().replace(tzinfo=None)


def format_time(value):
	return value.isoformat()


def parse_time(value):
	if value is None:
		return None
	if isinstance(value, datetime):
		return value
	return datetime.fromisoformat(value)


def parse_timeout(timeout):
	try:
		timeout = float(timeout)
		if not 0 < timeout < float('inf'):
			raise ValueError()
	except (TypeError, ValueError):
		raise ValueError(f"{timeout!r} is not a valid timeout")
	return timeout


def parse_iterations(iterations):
	if iterations is None:
		return None
	try:
		iterations = int(iterations)
		if iterations < 1:
			raise ValueError()
	except (TypeError, ValueError):
		raise ValueError(f"{iterations!r} is not a valid iteration count")
	return iterations
