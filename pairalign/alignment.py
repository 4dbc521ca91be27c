import collections

from cached_property import cached_property

from .errors import BuilderLengthMismatchError
from .substitution import GAP


__all__ = [
	'PairwiseAlignment', 'PairwiseAlignmentBuilder', 'reverse_alignment',
	'SimilarityFormatter', 'WaterFormatter', 'BlastFormatter']


AMBIGUOUS = frozenset("NnXx")


class SimilarityFormatter:
	"""
	Derives the similarity line that is shown between the two sequences
	of an alignment.
	"""

	identity = '|'
	mismatch = '.'
	blank = ' '

	def symbol(self, a, b):
		if a == GAP or b == GAP or a in AMBIGUOUS or b in AMBIGUOUS:
			return self.blank
		elif a == b:
			return self.identity
		else:
			return self.mismatch

	def format(self, database, query):
		return "".join(self.symbol(a, b) for a, b in zip(database, query))


class WaterFormatter(SimilarityFormatter):
	"""
	EMBOSS water style: "|" for identities, "." for mismatches, blank for
	gaps and ambiguous characters.
	"""

	mismatch = '.'


class BlastFormatter(SimilarityFormatter):
	"""
	BLAST style: like `WaterFormatter`, but mismatches are left blank.
	"""

	mismatch = ' '


class PairwiseAlignment:
	"""
	An immutable alignment of a database sequence and a query sequence, both
	given with gap symbols, such that both have the same length.
	"""

	def __init__(self, database, query, formatter=None):
		"""

		Parameters
		----------
		database : str
			aligned database sequence, gaps written as "-"
		query : str
			aligned query sequence, gaps written as "-"
		formatter : SimilarityFormatter, optional
			formatter for the similarity line, `WaterFormatter` by default
		"""

		database = "".join(database)
		query = "".join(query)

		if len(database) != len(query):
			raise ValueError(
				f"aligned sequences must be of equal length, got {len(database)} and {len(query)}")

		self._database = database
		self._query = query
		self._formatter = formatter or WaterFormatter()

	@property
	def database(self):
		return self._database

	@property
	def query(self):
		return self._query

	@property
	def formatter(self):
		return self._formatter

	@formatter.setter
	def formatter(self, formatter):
		self._formatter = formatter
		self.__dict__.pop('similarity', None)

	@cached_property
	def similarity(self):
		return self._formatter.format(self._database, self._query)

	@property
	def database_without_gaps(self):
		return self._database.replace(GAP, "")

	@property
	def query_without_gaps(self):
		return self._query.replace(GAP, "")

	def __len__(self):
		return len(self._database)

	def __getitem__(self, i):
		return self._database[i], self.similarity[i], self._query[i]

	def __iter__(self):
		return zip(self._database, self.similarity, self._query)

	def sub_alignment(self, start, length):
		"""
		The columns start, ..., start + length - 1 as a new alignment.
		"""

		if start < 0 or length < 0 or start + length > len(self):
			raise IndexError(
				f"sub alignment [{start}, {start + length}) out of range for length {len(self)}")
		return PairwiseAlignment(
			self._database[start:start + length],
			self._query[start:start + length],
			self._formatter)

	def __eq__(self, other):
		if not isinstance(other, PairwiseAlignment):
			return NotImplemented
		return self._database == other._database and self._query == other._query

	def __hash__(self):
		return hash((self._database, self._query))

	def __str__(self):
		return "\n".join([self._database, self.similarity, self._query])

	def __repr__(self):
		return f"PairwiseAlignment('{self._database}', '{self._query}')"

	def print(self):
		import pairalign.io.alignment
		print(pairalign.io.alignment.Formatter(self).text)

	def _repr_html_(self):
		import pairalign.io.alignment
		return pairalign.io.alignment.Formatter(self).html


def reverse_alignment(alignment):
	"""
	The alignment read from its end to its start.
	"""

	if alignment is None:
		return None
	return PairwiseAlignment(
		alignment.database[::-1],
		alignment.query[::-1],
		alignment.formatter)


class PairwiseAlignmentBuilder:
	"""
	Assembles an alignment column by column. Columns can be added at both
	ends: the 5' side (in front) and the 3' side (at the back).
	"""

	def __init__(self, alignment=None, formatter=None):
		if alignment is None:
			alignment = PairwiseAlignment("", "", formatter)
		self._core = alignment
		self._formatter = formatter or alignment.formatter

		self._front_database = []
		self._front_query = []
		self._back_database = collections.deque()
		self._back_query = collections.deque()

	def push_front(self, database_chars, query_chars):
		"""
		Queue characters on the 5' side. Strings are queued such that they
		read unchanged in front of the current content.
		"""

		self._front_database.extend(reversed(database_chars))
		self._front_query.extend(reversed(query_chars))

	def push_back(self, database_chars, query_chars):
		self._back_database.extend(database_chars)
		self._back_query.extend(query_chars)

	def push_front_alignment(self, alignment):
		self.push_front(alignment.database, alignment.query)

	def push_back_alignment(self, alignment):
		self.push_back(alignment.database, alignment.query)

	def drop_front(self, n):
		alignment = self.materialize()
		self._core = alignment.sub_alignment(n, len(alignment) - n)

	def drop_back(self, n):
		alignment = self.materialize()
		self._core = alignment.sub_alignment(0, len(alignment) - n)

	def materialize(self):
		"""
		Join front, core and back into a new alignment, which then becomes
		the core for subsequent calls.

		Returns
		-------
		PairwiseAlignment
		"""

		if len(self._front_database) != len(self._front_query):
			raise BuilderLengthMismatchError(
				f"5' side holds {len(self._front_database)} database and "
				f"{len(self._front_query)} query characters")
		if len(self._back_database) != len(self._back_query):
			raise BuilderLengthMismatchError(
				f"3' side holds {len(self._back_database)} database and "
				f"{len(self._back_query)} query characters")

		if not self._front_database and not self._back_database:
			return self._core

		database = "".join(reversed(self._front_database)) + \
			self._core.database + "".join(self._back_database)
		query = "".join(reversed(self._front_query)) + \
			self._core.query + "".join(self._back_query)

		self._core = PairwiseAlignment(database, query, self._formatter)

		self._front_database.clear()
		self._front_query.clear()
		self._back_database.clear()
		self._back_query.clear()

		return self._core
