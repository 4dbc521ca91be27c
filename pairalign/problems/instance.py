import numpy as np

from ..errors import InvalidSequenceError


__all__ = ['Problem', 'IndexedMatrixProblem']


def _as_sequence(x, name):
	if x is None:
		raise InvalidSequenceError(f"{name} sequence must not be None")
	s = "".join(x)
	if not s:
		raise InvalidSequenceError(f"{name} sequence must not be empty")
	return s


class Problem:
	"""
	A problem of finding an optimal alignment between a database sequence
	\\( s \\) and a query sequence \\( t \\) under some substitution matrix.
	"""

	def __init__(self, substitution_matrix, database, query):
		"""

		Parameters
		----------
		substitution_matrix : SubstitutionMatrix
			scores for aligning characters and the gap penalties
		database : str
			the database sequence \\( s \\)
		query : str
			the query sequence \\( t \\)
		"""

		self._substitution_matrix = substitution_matrix
		self._database = _as_sequence(database, "database")
		self._query = _as_sequence(query, "query")

	@property
	def shape(self):
		"""problem's shape as \\( |s|, |t| \\)"""

		return len(self._database), len(self._query)

	@property
	def substitution_matrix(self):
		return self._substitution_matrix

	@property
	def database(self):
		"""elements in the database sequence \\( s \\)"""

		return self._database

	@property
	def query(self):
		"""elements in the query sequence \\( t \\)"""

		return self._query

	def build_matrix(self, out):
		"""
		Build a matrix M that describes an alignment problem for the two sequences
		\\( s \\) and \\( t \\), i.e. \\( M_{i, j} \\) is the score of aligning
		\\( s_i \\) with \\( t_j \\).

		Parameters
		----------
		out : array_like
			A suitably shaped matrix that receives \\( M \\).
		"""

		raise NotImplementedError()

	@property
	def matrix(self):
		"""
		Returns
		-------
		The matrix \\( M \\) built by `self.build_matrix`.
		"""

		m = np.empty(self.shape, dtype=np.float64)
		self.build_matrix(m)
		return m

	def __str__(self):
		return str(self.matrix)


class IndexedMatrixProblem(Problem):
	"""
	A Problem that is posed as a lookup table \\( L \\) and two index vectors
	\\( A, B \\) such that \\( L_{A_i, B_j} \\) is the score of aligning
	\\( s_i \\) with \\( t_j \\).
	"""

	def build_matrix(self, out):
		table = self.similarity_lookup_table()
		a = np.empty((self.shape[0],), dtype=np.uint32)
		b = np.empty((self.shape[1],), dtype=np.uint32)
		self.build_index_sequences(a, b)
		out[:, :] = table[np.ix_(a, b)]

	def similarity_lookup_table(self):
		raise NotImplementedError()

	def build_index_sequences(self, a, b):
		raise NotImplementedError()
