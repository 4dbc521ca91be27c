"""
Gotoh's affine gap dynamic programming.

A single engine computes Smith-Waterman-Gotoh (local) and
Needleman-Wunsch-Gotoh (global) alignments, scanning either forward (the
optimum is traced back towards the sequence starts) or in reverse (the optimum
is traced forward towards the sequence ends), with either constant or
homopolymer aware, position specific gap open penalties. A `Policy` selects
the variant.
"""

import enum
import logging
import typing
import numpy as np

from .alignment import PairwiseAlignmentBuilder
from .errors import InvariantViolation, InvalidSequenceError
from .gaps import GapCost
from .substitution import GAP


TRACEBACK_TOLERANCE = 1e-4
"""
Gap run lengths are not stored during the fill. The traceback recovers them by
searching for the cell whose score explains the gap's affine penalty. Scores
are compared within this tolerance to absorb rounding; the comparison is
inherently fragile under heavy floating point cancellation.
"""


class Move(enum.IntEnum):
	NONE = 0
	DIAGONAL = 1
	INSERTION = 2  # gap in the database, consumes a query character
	DELETION = 3  # gap in the query, consumes a database character


class Boundary(enum.Enum):
	LOCAL_ZERO = "local"
	GLOBAL_CUMULATIVE = "global"


class Scan(enum.Enum):
	FORWARD = "forward"
	REVERSE = "reverse"


class Policy(typing.NamedTuple):
	"""
	Selects one variant of the engine.

	Parameters
	----------
	boundary : Boundary
		zero boundary (local alignment) or cumulative gap penalties
		(global alignment)
	clamp_at_zero : bool
		whether cell scores are clamped at 0, i.e. alignments may start
		anywhere
	scan : Scan
		forward fills from the sequence starts, reverse from the sequence
		ends
	gap_cost : GapCost
		source of gap penalties, either constant or position specific
	"""

	boundary: Boundary
	clamp_at_zero: bool
	scan: Scan
	gap_cost: GapCost

	@staticmethod
	def local(gap_cost, scan=Scan.FORWARD):
		return Policy(Boundary.LOCAL_ZERO, True, scan, gap_cost)

	@staticmethod
	def global_(gap_cost, scan=Scan.FORWARD):
		return Policy(Boundary.GLOBAL_CUMULATIVE, False, scan, gap_cost)


class RawSolution:
	"""
	Result of one run of the engine.
	"""

	def __init__(self, score, values, moves, path, alignment, start, end):
		self.score = score
		self.values = values
		self.moves = moves
		self.path = path
		self.alignment = alignment
		self.start = start
		self.end = end

	@property
	def complexity(self):
		return self.values.size


def _choose(diagonal, insertion, deletion):
	if diagonal >= insertion and diagonal >= deletion:
		return diagonal, Move.DIAGONAL
	elif insertion > deletion:
		return insertion, Move.INSERTION
	else:
		return deletion, Move.DELETION


class Engine:
	"""
	Fills the dynamic programming matrix for one `Policy` and traces back
	the optimal alignment.
	"""

	def __init__(self, policy: Policy, formatter=None):
		self._policy = policy
		self._formatter = formatter
		self._step = -1 if policy.scan == Scan.FORWARD else 1
		self._local = policy.boundary == Boundary.LOCAL_ZERO

	@property
	def policy(self):
		return self._policy

	def _origin(self, n, m):
		if self._step < 0:
			return 0, 0
		else:
			return n, m

	def _tables(self, database, query):
		gap_cost = self._policy.gap_cost
		if not gap_cost.position_specific:
			return None, None
		reverse = self._step > 0
		return gap_cost.tables(database, reverse), gap_cost.tables(query, reverse)

	def _init_boundary(self, n, m):
		gap_open = self._policy.gap_cost.gap_open
		gap_extend = self._policy.gap_cost.gap_extend
		oi, ok = self._origin(n, m)

		S = [[0.0] * (m + 1) for _ in range(n + 1)]
		T = [[Move.NONE] * (m + 1) for _ in range(n + 1)]

		if not self._local:
			T[oi][ok] = Move.DIAGONAL
			for i in range(n + 1):
				d = abs(i - oi)
				if d > 0:
					S[i][ok] = -gap_open - gap_extend * (d - 1)
					T[i][ok] = Move.DELETION
			for k in range(m + 1):
				d = abs(k - ok)
				if d > 0:
					S[oi][k] = -gap_open - gap_extend * (d - 1)
					T[oi][k] = Move.INSERTION

		return S, T

	def fill(self, sim, database, query):
		"""
		Fill the matrix for the similarity matrix ``sim`` (with
		``sim[i, k]`` the score of aligning ``database[i]`` with
		``query[k]``).

		Returns
		-------
		tuple of score matrix, move matrix and the anchor cell, i.e. the cell
		the traceback starts at
		"""

		n, m = sim.shape
		if n == 0 or m == 0 or (n, m) != (len(database), len(query)):
			raise InvalidSequenceError(
				f"cannot align sequences of lengths {len(database)} and {len(query)} "
				f"with a {n}x{m} similarity matrix")

		logging.debug(
			f"filling {n + 1}x{m + 1} matrix ({self._policy.boundary.value}, "
			f"{self._policy.scan.value}, {self._policy.gap_cost.to_tuple()[0]} gaps).")

		step = self._step
		local = self._local
		clamp = self._policy.clamp_at_zero
		gap_open = self._policy.gap_cost.gap_open
		gap_extend = self._policy.gap_cost.gap_extend

		S, T = self._init_boundary(n, m)
		oi, ok = self._origin(n, m)

		tables_d, tables_q = self._tables(database, query)
		variable = tables_d is not None
		if variable:
			ge_d = tables_d.gap_open.tolist()
			ge_q = tables_q.gap_open.tolist()
			bd_d = tables_d.boundary.tolist()
			bd_q = tables_q.boundary.tolist()
			bcp = self._policy.gap_cost.boundary_cross_penalty

		# best open insertion (per row) and deletion (per column) runs
		D = [S[i][ok] - gap_open for i in range(n + 1)]
		Q = [S[oi][k] - gap_open for k in range(m + 1)]
		Dv = [S[i][ok] for i in range(n + 1)]
		Qv = [S[oi][k] for k in range(m + 1)]

		if step < 0:
			rows = range(1, n + 1)
			cols = range(1, m + 1)
		else:
			rows = range(n - 1, -1, -1)
			cols = range(m - 1, -1, -1)

		sim_rows = sim.tolist()
		char_offset = min(step, 0)

		high_score = 0.0
		anchor = (oi, ok)

		for k in cols:
			pk = k + step
			ck = k + char_offset
			for i in rows:
				pi = i + step
				ci = i + char_offset

				diagonal = S[pi][pk] + sim_rows[ci][ck]

				left = S[i][pk]
				insertion = max(left - gap_open, D[i] - gap_extend)
				D[i] = insertion

				up = S[pi][k]
				deletion = max(up - gap_open, Q[k] - gap_extend)
				Q[k] = deletion

				if variable:
					gp = min(ge_d[i], ge_q[k])

					v = max(left - gap_extend, Dv[i] - gap_extend)
					if bd_q[pk]:
						v -= bcp
					Dv[i] = v
					insertion = max(insertion, v + gap_extend - gp)

					v = max(up - gap_extend, Qv[k] - gap_extend)
					if bd_d[pi]:
						v -= bcp
					Qv[k] = v
					deletion = max(deletion, v + gap_extend - gp)

				score, move = _choose(diagonal, insertion, deletion)
				if clamp and score <= 0:
					score, move = 0.0, Move.NONE

				S[i][k] = score
				T[i][k] = move

				if local and score > high_score:
					high_score = score
					anchor = (i, k)

		if not local:
			anchor = (n, m) if step < 0 else (0, 0)

		return S, T, anchor

	def _gap_run(self, S, i, k, di, dk, gp, boundary, emit, edge):
		"""
		Walk a gap run from cell (i, k) in direction (di, dk) until the
		score of the run's first cell explains the gap's penalty.
		"""

		gap_open = self._policy.gap_cost.gap_open
		gap_extend = self._policy.gap_cost.gap_extend
		start = S[i][k]
		offset = min(self._step, 0)
		steps = 0

		while True:
			emit(i + offset, k + offset)
			if boundary is not None and gp != gap_open and boundary[(i if di else k) + self._step]:
				gp = min(gp + self._policy.gap_cost.boundary_cross_penalty, gap_open)
			i += di
			k += dk
			steps += 1

			if abs(S[i][k] - (start + gp + gap_extend * (steps - 1))) <= TRACEBACK_TOLERANCE:
				return i, k
			if (i if di else k) == edge:
				raise InvariantViolation(
					f"gap run starting at ({i - di * steps}, {k - dk * steps}) "
					f"has no matching origin")

	def traceback(self, S, T, anchor, database, query):
		"""
		Trace the optimal alignment back from the anchor cell.

		Returns
		-------
		tuple of alignment, the cell the trace ended at and the path of cells
		"""

		step = self._step
		n, m = len(database), len(query)
		oi, ok = self._origin(n, m)
		offset = min(step, 0)
		gap_open = self._policy.gap_cost.gap_open

		builder = PairwiseAlignmentBuilder(formatter=self._formatter)
		emit = builder.push_front if step < 0 else builder.push_back

		tables_d, tables_q = self._tables(database, query)

		def emit_deletion(ci, ck):
			emit(database[ci], GAP)

		def emit_insertion(ci, ck):
			emit(GAP, query[ck])

		i, k = anchor
		path = [(i, k)]

		def done():
			if self._local:
				return T[i][k] == Move.NONE
			else:
				return i == oi and k == ok

		while not done():
			move = T[i][k]

			if move == Move.DIAGONAL:
				emit(database[i + offset], query[k + offset])
				i += step
				k += step
			elif move == Move.DELETION:
				if tables_d is not None:
					gp = min(tables_d.gap_open[i], tables_q.gap_open[k])
					boundary = tables_d.boundary
				else:
					gp, boundary = gap_open, None
				i, k = self._gap_run(S, i, k, step, 0, gp, boundary, emit_deletion, oi)
			elif move == Move.INSERTION:
				if tables_d is not None:
					gp = min(tables_d.gap_open[i], tables_q.gap_open[k])
					boundary = tables_q.boundary
				else:
					gp, boundary = gap_open, None
				i, k = self._gap_run(S, i, k, 0, step, gp, boundary, emit_insertion, ok)
			else:
				raise InvariantViolation(f"illegal move {move} at ({i}, {k})")

			path.append((i, k))

		return builder.materialize(), (i, k), path

	def solve(self, sim, database, query):
		"""
		Run fill and traceback.

		Parameters
		----------
		sim : numpy.ndarray
			similarity of database and query characters, shape (n, m)
		database : str
			database sequence of length n
		query : str
			query sequence of length m

		Returns
		-------
		RawSolution
		"""

		S, T, anchor = self.fill(sim, database, query)
		return self.finish(S, T, anchor, database, query)

	def finish(self, S, T, anchor, database, query):
		"""
		Trace back from the anchor cell found by `fill` and collect the result.
		"""

		score = float(S[anchor[0]][anchor[1]])
		values = np.array(S, dtype=np.float64)
		moves = np.array(T, dtype=np.uint8)

		if self._local and score <= 0:
			return RawSolution(
				0.0, values, moves, np.zeros((0, 2), dtype=np.int64), None, (0, 0), (0, 0))

		alignment, last, path = self.traceback(S, T, anchor, database, query)
		path = np.array(path, dtype=np.int64)

		if self._step < 0:
			start = (last[0] + 1, last[1] + 1)
			end = anchor
		else:
			start = (anchor[0] + 1, anchor[1] + 1)
			end = last

		return RawSolution(score, values, moves, path, alignment, start, end)
