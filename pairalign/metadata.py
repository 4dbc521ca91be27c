"""
Statistics and bookkeeping for nucleotide alignments that are placed on
their parent sequences.

Positions are 1-based and inclusive, as in `pairalign.solve.Solution`.
"""

from cached_property import cached_property

from .alignment import PairwiseAlignmentBuilder
from .errors import UnsetParameterError
from .substitution import GAP, TRANSITIONS


MAX_FILLER = 10
"""maximum number of filler columns between two parts of a `CompositeAlignment`"""

FILLER = 'N'


def _is_transition(a, b):
	return (a.upper(), b.upper()) in TRANSITIONS


class AlignmentGap:
	"""
	A gap of at least ``min_length`` columns in an alignment. The gap is
	described by the positions that flank it on both parent sequences, so
	that a gap in the database sequence of length k has
	``end_query - start_query - 1 == k`` and ``end_database == start_database + 1``.
	"""

	def __init__(self, min_length, start_database, end_database, start_query, end_query, parent):
		self._min_length = min_length
		self._start_database = start_database
		self._end_database = end_database
		self._start_query = start_query
		self._end_query = end_query
		self._parent = parent

	@property
	def min_length(self):
		return self._min_length

	@property
	def start_database(self):
		return self._start_database

	@property
	def end_database(self):
		return self._end_database

	@property
	def start_query(self):
		return self._start_query

	@property
	def end_query(self):
		return self._end_query

	@property
	def parent(self):
		"""the alignment the gap was found in"""
		return self._parent

	@property
	def gap_length_database(self):
		"""number of query characters facing gap symbols in the database sequence"""
		return self._end_query - self._start_query - 1

	@property
	def gap_length_query(self):
		"""number of database characters facing gap symbols in the query sequence"""
		return self._end_database - self._start_database - 1

	@property
	def is_database_gap(self):
		return self.gap_length_database >= self._min_length

	@property
	def is_query_gap(self):
		return self.gap_length_query >= self._min_length

	def __repr__(self):
		return (
			f"AlignmentGap(database={self._start_database}..{self._end_database}, "
			f"query={self._start_query}..{self._end_query})")


class NucleotideAlignment:
	"""
	A `PairwiseAlignment` of two nucleotide sequences together with the
	coordinates of the aligned regions on their parent sequences.
	"""

	def __init__(
		self, alignment, database_parent, query_parent,
		start_database, start_query, end_database, end_query,
		plus_plus_strand=None, score=None, substitution_matrix=None, significator=None,
		length_database_parent=None, length_query_parent=None):

		"""
		Parameters
		----------
		alignment : PairwiseAlignment
			the aligned sequences
		database_parent : str
			name of the database sequence the alignment is placed on
		query_parent : str
			name of the query sequence the alignment is placed on
		start_database, start_query, end_database, end_query : int
			1-based inclusive coordinates of the aligned regions
		plus_plus_strand : bool, optional
			whether both sequences are aligned on their plus strand
		score : float, optional
			score of the alignment
		substitution_matrix : SubstitutionMatrix, optional
			matrix the alignment was computed with; needed to rescore
			sub alignments
		significator : callable, optional
			decides whether an alignment is significant, see `is_significant`
		"""

		self._alignment = alignment
		self._database_parent = database_parent
		self._query_parent = query_parent
		self._start_database = start_database
		self._start_query = start_query
		self._end_database = end_database
		self._end_query = end_query
		self.plus_plus_strand = plus_plus_strand
		self.score = score
		self.substitution_matrix = substitution_matrix
		self.significator = significator
		self.length_database_parent = length_database_parent
		self.length_query_parent = length_query_parent

	@staticmethod
	def from_solution(
		solution, database_parent, query_parent,
		plus_plus_strand=None, significator=None):

		"""
		Wrap the alignment of a `pairalign.solve.Solution`. Returns None if the
		solution has no alignment.
		"""

		if solution.alignment is None:
			return None

		n, m = solution.problem.shape
		return NucleotideAlignment(
			solution.alignment, database_parent, query_parent,
			solution.start_database, solution.start_query,
			solution.end_database, solution.end_query,
			plus_plus_strand=plus_plus_strand,
			score=solution.score,
			substitution_matrix=solution.substitution_matrix,
			significator=significator,
			length_database_parent=n,
			length_query_parent=m)

	@property
	def alignment(self):
		return self._alignment

	@property
	def database_parent(self):
		return self._database_parent

	@property
	def query_parent(self):
		return self._query_parent

	@property
	def start_database(self):
		return self._start_database

	@property
	def start_query(self):
		return self._start_query

	@property
	def end_database(self):
		return self._end_database

	@property
	def end_query(self):
		return self._end_query

	@property
	def length_aligned_database(self):
		return self._end_database - self._start_database + 1

	@property
	def length_aligned_query(self):
		return self._end_query - self._start_query + 1

	@property
	def length_alignment_with_gaps(self):
		return len(self._alignment)

	@cached_property
	def length_alignment_without_gaps(self):
		return sum(
			1 for a, b in zip(self._alignment.database, self._alignment.query)
			if a != GAP and b != GAP)

	@cached_property
	def gaps(self):
		"""number of columns that hold a gap symbol on either side"""
		return sum(
			1 for a, b in zip(self._alignment.database, self._alignment.query)
			if a == GAP or b == GAP)

	@cached_property
	def hits(self):
		return self._alignment.similarity.count(self._alignment.formatter.identity)

	@cached_property
	def identities(self):
		return sum(
			1 for a, b in zip(self._alignment.database, self._alignment.query)
			if a != GAP and b != GAP and a == b)

	@property
	def similarity_with_gaps(self):
		"""percentage of hits among all columns"""
		if self.length_alignment_with_gaps == 0:
			return 0.0
		return 100 * self.hits / self.length_alignment_with_gaps

	@property
	def similarity_without_gaps(self):
		"""percentage of identities among the columns without gap symbols"""
		if self.length_alignment_without_gaps == 0:
			return 0.0
		return 100 * self.identities / self.length_alignment_without_gaps

	@cached_property
	def transitions(self):
		return sum(
			1 for a, b in zip(self._alignment.database, self._alignment.query)
			if _is_transition(a, b))

	@cached_property
	def transversions(self):
		count = 0
		for a, b in zip(self._alignment.database, self._alignment.query):
			if a == GAP or b == GAP or a == b:
				continue
			if a.upper() in "ACGT" and not _is_transition(a, b):
				count += 1
		return count

	def _gap_runs(self, row):
		# yields (column, run length) for each maximal run of gap symbols in row
		n = len(row)
		i = 0
		while i < n:
			if row[i] == GAP:
				k = 0
				while i + k < n and row[i + k] == GAP:
					k += 1
				yield i, k
				i += k
			else:
				i += 1

	def count_long_gaps_database(self, min_length):
		return sum(1 for _, k in self._gap_runs(self._alignment.database) if k >= min_length)

	def count_long_gaps_query(self, min_length):
		return sum(1 for _, k in self._gap_runs(self._alignment.query) if k >= min_length)

	def count_long_gaps(self, min_length):
		return self.count_long_gaps_database(min_length) + self.count_long_gaps_query(min_length)

	def _flank(self, column):
		# parent positions of the last database and query characters before column
		database = self._alignment.database[:column]
		query = self._alignment.query[:column]
		return (
			self._start_database + len(database) - database.count(GAP) - 1,
			self._start_query + len(query) - query.count(GAP) - 1)

	def long_gaps_database(self, min_length):
		"""
		All gaps in the database sequence that span at least ``min_length``
		columns.

		Returns
		-------
		list of AlignmentGap
		"""

		gaps = []
		for column, k in self._gap_runs(self._alignment.database):
			if k >= min_length:
				d, q = self._flank(column)
				gaps.append(AlignmentGap(min_length, d, d + 1, q, q + k + 1, self))
		return gaps

	def long_gaps_query(self, min_length):
		gaps = []
		for column, k in self._gap_runs(self._alignment.query):
			if k >= min_length:
				d, q = self._flank(column)
				gaps.append(AlignmentGap(min_length, d, d + k + 1, q, q + 1, self))
		return gaps

	def long_gaps(self, min_length):
		return self.long_gaps_database(min_length) + self.long_gaps_query(min_length)

	def sub_alignment_relative_to_query(self, start, length=None):
		"""
		The part of this alignment that begins at the first column at or
		after the query position ``start`` in which both sequences have a
		character, and that covers ``length`` query characters (or extends
		to the end of the alignment).

		If a substitution matrix is set, the score of the sub alignment is
		this alignment's score minus the scores of the cut off parts.

		Parameters
		----------
		start : int
			1-based position on the query parent
		length : int, optional
			number of query characters to cover

		Returns
		-------
		NucleotideAlignment
		"""

		database = self._alignment.database
		query = self._alignment.query

		target = start - self._start_query
		count_database = -1
		count_query = -1
		first = None
		last = len(self._alignment)
		first_database = first_query = None

		for i in range(len(self._alignment)):
			if query[i] != GAP:
				count_query += 1
			if database[i] != GAP:
				count_database += 1

			if first is None:
				if count_query >= target and database[i] != GAP and query[i] != GAP:
					first = i
					first_database = count_database
					first_query = count_query
			elif length is not None and count_query == first_query + length:
				last = i
				break

		if first is None:
			raise IndexError(
				f"query position {start} is not covered by alignment "
				f"{self._start_query}..{self._end_query}")

		sub = self._alignment.sub_alignment(first, last - first)
		if length is None:
			end_database = self._end_database
			end_query = self._end_query
		else:
			end_database = self._start_database + first_database + \
				len(sub.database_without_gaps) - 1
			end_query = self._start_query + first_query + \
				len(sub.query_without_gaps) - 1

		score = self.score
		if score is not None and self.substitution_matrix is not None:
			for a, n in ((0, first), (last, len(self._alignment) - last)):
				if n > 0:
					score -= self.substitution_matrix.score_alignment(
						self._alignment.sub_alignment(a, n))

		return NucleotideAlignment(
			sub, self._database_parent, self._query_parent,
			self._start_database + first_database,
			self._start_query + first_query,
			end_database, end_query,
			plus_plus_strand=self.plus_plus_strand,
			score=score,
			substitution_matrix=self.substitution_matrix,
			significator=self.significator,
			length_database_parent=self.length_database_parent,
			length_query_parent=self.length_query_parent)

	def covering_database_position(self, position):
		"""this alignment if it covers the database position, else None"""
		if self._start_database <= position <= self._end_database:
			return self
		return None

	def covering_query_position(self, position):
		if self._start_query <= position <= self._end_query:
			return self
		return None

	def is_significant(self):
		if self.significator is None:
			raise UnsetParameterError("alignment has no significator")
		return bool(self.significator(self))

	def __repr__(self):
		return (
			f"NucleotideAlignment({self._database_parent}:{self._start_database}..{self._end_database}, "
			f"{self._query_parent}:{self._start_query}..{self._end_query})")


class CompositeAlignment:
	"""
	Several alignments of the same pair of parent sequences, joined into one
	alignment in database order.
	"""

	def __init__(self, parts, significator=None):
		parts = list(parts)
		if not parts:
			raise ValueError("composite alignment needs at least one part")

		first = parts[0]
		for part in parts[1:]:
			if part.database_parent != first.database_parent or \
				part.query_parent != first.query_parent:
				raise ValueError("all parts must share their database and query parents")
			if part.plus_plus_strand != first.plus_plus_strand:
				raise ValueError("all parts must be on the same strand")

		self._parts = sorted(parts, key=lambda p: p.start_database)
		self.significator = significator

	@property
	def parts(self):
		return tuple(self._parts)

	def __len__(self):
		return len(self._parts)

	def __getitem__(self, i):
		return self._parts[i]

	@property
	def database_parent(self):
		return self._parts[0].database_parent

	@property
	def query_parent(self):
		return self._parts[0].query_parent

	@property
	def plus_plus_strand(self):
		return self._parts[0].plus_plus_strand

	@property
	def start_database(self):
		return self._parts[0].start_database

	@property
	def start_query(self):
		return self._parts[0].start_query

	@property
	def end_database(self):
		return self._parts[-1].end_database

	@property
	def end_query(self):
		return self._parts[-1].end_query

	@property
	def length_database_parent(self):
		return self._parts[0].length_database_parent

	@property
	def length_query_parent(self):
		return self._parts[0].length_query_parent

	@cached_property
	def alignment(self):
		"""
		The parts joined by filler columns: up to `MAX_FILLER` columns per
		side stand in for the unaligned characters between two parts.
		"""

		builder = PairwiseAlignmentBuilder()
		for prev, part in zip(self._parts, self._parts[1:]):
			builder.push_back_alignment(prev.alignment)

			n_database = min(part.start_database - prev.end_database - 1, MAX_FILLER)
			n_query = min(part.start_query - prev.end_query - 1, MAX_FILLER)
			while n_database > 0 and n_query > 0:
				builder.push_back(FILLER, FILLER)
				n_database -= 1
				n_query -= 1
			while n_database > 0:
				builder.push_back(FILLER, GAP)
				n_database -= 1
			while n_query > 0:
				builder.push_back(GAP, FILLER)
				n_query -= 1

		builder.push_back_alignment(self._parts[-1].alignment)
		return builder.materialize()

	def _sum(self, name):
		return sum(getattr(p, name) for p in self._parts)

	@property
	def score(self):
		scores = [p.score for p in self._parts]
		if any(s is None for s in scores):
			return None
		return sum(scores)

	@property
	def gaps(self):
		return self._sum("gaps")

	@property
	def hits(self):
		return self._sum("hits")

	@property
	def transitions(self):
		return self._sum("transitions")

	@property
	def transversions(self):
		return self._sum("transversions")

	@property
	def length_aligned_database(self):
		return self._sum("length_aligned_database")

	@property
	def length_aligned_query(self):
		return self._sum("length_aligned_query")

	@property
	def length_alignment_with_gaps(self):
		return self._sum("length_alignment_with_gaps")

	@property
	def length_alignment_without_gaps(self):
		return self._sum("length_alignment_without_gaps")

	@property
	def similarity_with_gaps(self):
		n = self.length_alignment_with_gaps
		if n == 0:
			return 0.0
		return sum(
			p.similarity_with_gaps * p.length_alignment_with_gaps
			for p in self._parts) / n

	@property
	def similarity_without_gaps(self):
		n = self.length_alignment_without_gaps
		if n == 0:
			return 0.0
		return sum(
			p.similarity_without_gaps * p.length_alignment_without_gaps
			for p in self._parts) / n

	def _between(self):
		return zip(self._parts, self._parts[1:])

	def count_long_gaps_database(self, min_length):
		return self._sum_gaps("count_long_gaps_database", min_length) + sum(
			1 for a, b in self._between() if b.start_query - a.end_query - 1 >= min_length)

	def count_long_gaps_query(self, min_length):
		return self._sum_gaps("count_long_gaps_query", min_length) + sum(
			1 for a, b in self._between() if b.start_database - a.end_database - 1 >= min_length)

	def count_long_gaps(self, min_length):
		return self.count_long_gaps_database(min_length) + self.count_long_gaps_query(min_length)

	def _sum_gaps(self, name, min_length):
		return sum(getattr(p, name)(min_length) for p in self._parts)

	def _gap_between(self, a, b, min_length):
		return AlignmentGap(
			min_length, a.end_database, b.start_database, a.end_query, b.start_query, self)

	def long_gaps_database(self, min_length):
		gaps = []
		for p in self._parts:
			gaps.extend(p.long_gaps_database(min_length))
		for a, b in self._between():
			if b.start_query - a.end_query - 1 >= min_length:
				gaps.append(self._gap_between(a, b, min_length))
		return gaps

	def long_gaps_query(self, min_length):
		gaps = []
		for p in self._parts:
			gaps.extend(p.long_gaps_query(min_length))
		for a, b in self._between():
			if b.start_database - a.end_database - 1 >= min_length:
				gaps.append(self._gap_between(a, b, min_length))
		return gaps

	def long_gaps(self, min_length):
		return self.long_gaps_database(min_length) + self.long_gaps_query(min_length)

	def covering_database_position(self, position):
		"""the first part that covers the database position, or None"""
		for p in self._parts:
			if p.covering_database_position(position) is not None:
				return p
		return None

	def covering_query_position(self, position):
		for p in self._parts:
			if p.covering_query_position(position) is not None:
				return p
		return None

	def is_significant(self):
		if self.significator is None:
			raise UnsetParameterError("alignment has no significator")
		return bool(self.significator(self))
