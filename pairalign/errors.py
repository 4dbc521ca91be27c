class AlignmentError(Exception):
	"""
	Base class of all errors raised by pairalign.
	"""


class UnsetParameterError(AlignmentError, ValueError):
	"""
	A substitution matrix parameter (gap penalties, score bounds) was read
	before it was ever supplied.
	"""


class MissingScoreError(AlignmentError, ValueError):
	"""
	A strict substitution matrix has no score for a pair of characters.
	"""


class InvalidSequenceError(AlignmentError, ValueError):
	"""
	A sequence cannot take part in an alignment problem (e.g. it is empty).
	"""


class BuilderLengthMismatchError(AlignmentError, ValueError):
	"""
	The characters queued on one side of an alignment builder do not form
	columns, i.e. the database and query counts differ.
	"""


class InvariantViolation(AlignmentError, RuntimeError):
	"""
	The traceback met a state the fill pass can never produce. This is
	a defect in the engine, never a problem with the input.
	"""
