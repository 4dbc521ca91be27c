import numpy as np

from .errors import UnsetParameterError, MissingScoreError


GAP = '-'

SCORE_NX = 0.0
"""score of any pair involving the ambiguous base N in the nucleotide factories"""

NUCLEOTIDES = "ACGT"

TRANSITIONS = frozenset([('A', 'G'), ('G', 'A'), ('C', 'T'), ('T', 'C')])


def _key(pair):
	if isinstance(pair, str):
		if len(pair) != 2:
			raise ValueError(f"expected a pair of characters, got '{pair}'")
		return pair[0], pair[1]
	a, b = pair
	return a, b


class SubstitutionMatrix:
	"""
	Scores for substituting one character by another, together with the
	affine gap penalties used when aligning with these scores.

	Scores are looked up by the ordered pair (database character, query
	character), so asymmetric matrices are possible.
	"""

	def __init__(
		self, scores, gap_open=None, gap_extend=None,
		highest_score=None, lowest_score=None, error_when_missing=True):

		"""
		Parameters
		----------
		scores : dict
			maps pairs of characters, given either as 2-tuples ``('A', 'G')``
			or as strings ``'AG'``, to a score
		gap_open : float, optional
			penalty (positive) for opening a gap, i.e. the cost of a gap of length 1
		gap_extend : float, optional
			penalty (positive) for each further position of a gap
		highest_score : float, optional
			highest score in the matrix
		lowest_score : float, optional
			lowest score in the matrix, also used for pairs that are not in the
			matrix if ``error_when_missing`` is False
		error_when_missing : bool
			whether looking up a pair that is not in the matrix is an error
		"""

		self._scores = dict((_key(k), float(v)) for k, v in scores.items())
		self._gap_open = None if gap_open is None else float(gap_open)
		self._gap_extend = None if gap_extend is None else float(gap_extend)
		self._highest_score = None if highest_score is None else float(highest_score)
		self._lowest_score = None if lowest_score is None else float(lowest_score)
		self._error_when_missing = bool(error_when_missing)

	def _parameter(self, name):
		value = getattr(self, f"_{name}")
		if value is None:
			raise UnsetParameterError(f"substitution matrix has no {name.replace('_', ' ')}")
		return value

	@property
	def gap_open(self):
		"""penalty for opening a gap (gap existence penalty)"""
		return self._parameter("gap_open")

	@property
	def gap_extend(self):
		"""penalty for extending a gap by one position"""
		return self._parameter("gap_extend")

	@property
	def highest_score(self):
		return self._parameter("highest_score")

	@property
	def lowest_score(self):
		return self._parameter("lowest_score")

	@property
	def error_when_missing(self):
		return self._error_when_missing

	@property
	def alphabet(self):
		"""all characters occurring in the matrix"""
		chars = dict()
		for a, b in self._scores.keys():
			chars[a] = True
			chars[b] = True
		return tuple(chars.keys())

	@property
	def scores(self):
		return dict(self._scores)

	def similarity(self, a, b):
		"""
		Score for aligning the database character ``a`` with the query
		character ``b``.
		"""

		score = self._scores.get((a, b))
		if score is not None:
			return score
		if not self._error_when_missing:
			return self.lowest_score
		raise MissingScoreError(f"substitution matrix has no score for ('{a}', '{b}')")

	def __getitem__(self, pair):
		return self.similarity(*_key(pair))

	def __contains__(self, pair):
		return _key(pair) in self._scores

	def __len__(self):
		return len(self._scores)

	def __eq__(self, other):
		if not isinstance(other, SubstitutionMatrix):
			return NotImplemented
		return (
			self._scores == other._scores and
			self._gap_open == other._gap_open and
			self._gap_extend == other._gap_extend and
			self._highest_score == other._highest_score and
			self._lowest_score == other._lowest_score and
			self._error_when_missing == other._error_when_missing)

	__hash__ = None

	def __repr__(self):
		return (
			f"SubstitutionMatrix({len(self)} pairs, gap_open={self._gap_open}, "
			f"gap_extend={self._gap_extend})")

	def with_gaps(self, gap_open, gap_extend):
		"""
		A copy of this matrix that uses other gap penalties.
		"""

		return SubstitutionMatrix(
			self._scores,
			gap_open=gap_open,
			gap_extend=gap_extend,
			highest_score=self._highest_score,
			lowest_score=self._lowest_score,
			error_when_missing=self._error_when_missing)

	def lookup_table(self, rows, cols):
		"""
		Build a table T with T[i, j] = similarity(rows[i], cols[j]).

		Parameters
		----------
		rows : Sequence
			characters of the database alphabet
		cols : Sequence
			characters of the query alphabet

		Returns
		-------
		numpy.ndarray of shape (len(rows), len(cols))
		"""

		table = np.empty((len(rows), len(cols)), dtype=np.float64)
		for i, a in enumerate(rows):
			for j, b in enumerate(cols):
				table[i, j] = self.similarity(a, b)
		return table

	def gap_penalty(self, length):
		"""
		Affine penalty for a gap run of the given length.
		"""

		return self.gap_open + (length - 1) * self.gap_extend

	def score_alignment(self, alignment):
		"""
		Recompute the score of an alignment under this matrix. Every maximal
		run of gap symbols costs ``gap_open + (run - 1) * gap_extend``.

		Alignments computed with position specific gap penalties (see
		`pairalign.solve.HomopolymerSolver`) will in general score
		differently.
		"""

		database = alignment.database
		query = alignment.query
		n = len(alignment)
		score = 0.0
		i = 0

		while i < n:
			run = 0
			while i + run < n and database[i + run] == GAP:
				run += 1
			if run == 0:
				while i + run < n and query[i + run] == GAP:
					run += 1

			if run > 0:
				score -= self.gap_penalty(run)
				i += run
			else:
				score += self.similarity(database[i], query[i])
				i += 1

		return score


def _nucleotide_scores(hit, transition, transversion, score_nx):
	scores = dict()
	for a in NUCLEOTIDES:
		for b in NUCLEOTIDES:
			if a == b:
				scores[(a, b)] = hit
			elif (a, b) in TRANSITIONS:
				scores[(a, b)] = transition
			else:
				scores[(a, b)] = transversion
		scores[(a, 'N')] = score_nx
		scores[('N', a)] = score_nx
	scores[('N', 'N')] = score_nx
	return scores


def nucleotide(hit, mismatch, gap_open=None, gap_extend=None, score_nx=SCORE_NX):
	"""
	A nucleotide matrix over ACGTN that scores identities with ``hit`` and
	all other substitutions with ``-mismatch``. Pairs involving N score
	``score_nx``. Unknown characters (e.g. X) get the lowest score.

	Parameters
	----------
	hit : float
		positive score for an identity
	mismatch : float
		positive penalty for a substitution
	gap_open : float, optional
		gap open penalty
	gap_extend : float, optional
		gap extend penalty
	score_nx : float
		score for pairs involving N
	"""

	if hit <= 0 or mismatch <= 0:
		raise ValueError(
			f"hit score and mismatch penalty must be positive, got {hit} and {mismatch}")

	return SubstitutionMatrix(
		_nucleotide_scores(hit, -mismatch, -mismatch, score_nx),
		gap_open=gap_open,
		gap_extend=gap_extend,
		highest_score=hit,
		lowest_score=-mismatch,
		error_when_missing=False)


def pam25(gap_open=11, gap_extend=1, score_nx=SCORE_NX):
	"""
	PAM25 nucleotide matrix, i.e. 25% divergence, in which transitions
	(A/G, C/T) are three times as frequent as transversions.
	"""

	hit, ts, tv = 1.66, -1.06, -2.46
	return SubstitutionMatrix(
		_nucleotide_scores(hit, ts, tv, score_nx),
		gap_open=gap_open,
		gap_extend=gap_extend,
		highest_score=hit,
		lowest_score=tv,
		error_when_missing=False)


def pam10(gap_open=11, gap_extend=2, score_nx=SCORE_NX):
	"""
	PAM10 nucleotide matrix scoring transitions and transversions equally.
	"""

	hit, ts, tv = 1.86, -3.0, -3.0
	return SubstitutionMatrix(
		_nucleotide_scores(hit, ts, tv, score_nx),
		gap_open=gap_open,
		gap_extend=gap_extend,
		highest_score=hit,
		lowest_score=tv,
		error_when_missing=False)
