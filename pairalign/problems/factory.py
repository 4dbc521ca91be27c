import numpy as np

from .instance import IndexedMatrixProblem
from ..substitution import SubstitutionMatrix


__all__ = ['AlphabetEncoder', 'SubstitutionProblem', 'ProblemFactory', 'general']


class AlphabetEncoder:
	"""
	Maps the characters of a fixed alphabet to consecutive indices.
	"""

	def __init__(self, alphabet):
		self._alphabet = tuple(sorted(set(alphabet)))
		self._ids = dict((k, i) for i, k in enumerate(self._alphabet))

	def encode(self, s, out=None):
		ids = self._ids
		try:
			if out is None:
				return np.array([ids[x] for x in s], dtype=np.uint32)
			else:
				if out.shape[0] != len(s) or len(out.shape) != 1:
					raise ValueError(f"expected shape ({len(s)},), got {out.shape}")
				for i, x in enumerate(s):
					out[i] = ids[x]
		except KeyError as e:
			raise ValueError(f"'{e.args[0]}' is not in alphabet")

	@property
	def alphabet(self):
		return self._alphabet


class SubstitutionProblem(IndexedMatrixProblem):
	"""
	A problem whose scores come from a `SubstitutionMatrix`. The score lookup
	table is built when the problem is created, so that characters unknown to
	a strict matrix are reported before any alignment is computed.
	"""

	def __init__(self, substitution_matrix: SubstitutionMatrix, database, query):
		super().__init__(substitution_matrix, database, query)

		self._encoder_database = AlphabetEncoder(self.database)
		self._encoder_query = AlphabetEncoder(self.query)

		self._table = substitution_matrix.lookup_table(
			self._encoder_database.alphabet,
			self._encoder_query.alphabet)

	def similarity_lookup_table(self):
		return self._table

	def build_index_sequences(self, a, b):
		self._encoder_database.encode(self.database, out=a)
		self._encoder_query.encode(self.query, out=b)


class ProblemFactory:
	"""
	A factory for alignment problems that are scored by one fixed
	substitution matrix.
	"""

	def __init__(self, substitution_matrix: SubstitutionMatrix):
		"""

		Parameters
		----------
		substitution_matrix : SubstitutionMatrix
			scores and gap penalties for all problems created by this factory
		"""

		self._substitution_matrix = substitution_matrix

	@property
	def substitution_matrix(self):
		return self._substitution_matrix

	def new_problem(self, database, query):
		"""
		Creates a new alignment problem for the sequences \\( s \\) and \\( t \\)

		Parameters
		----------
		database : str
			database sequence \\( s \\)
		query : str
			query sequence \\( t \\)

		Returns
		-------
		Problem modelling optimal alignment between \\( s \\) and \\( t \\)
		"""

		return SubstitutionProblem(
			self._substitution_matrix, database, query)


general = ProblemFactory
