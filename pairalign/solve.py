import numpy as np
import time
import contextlib
import logging

from cached_property import cached_property
from functools import lru_cache
from pathlib import Path
from collections.abc import Sequence

from .alignment import PairwiseAlignment
from .algorithm import Engine, Policy, Scan
from .gaps import GapCost, AffineGapCost, HomopolymerGapCost


__all__ = [
	'Solution', 'Alignment', 'Score', 'Codomain', 'Timings',
	'Solver', 'LocalSolver', 'GlobalSolver', 'HomopolymerSolver']


Alignment = PairwiseAlignment


class Solution:
	"""
	The optimal alignment of a problem, together with its score, its
	coordinates and the dynamic programming matrix it was traced back from.

	Coordinates are 1-based and inclusive. If a local problem has no
	alignment with a positive score, `alignment` is None and the score and
	all coordinates are 0.
	"""

	def __init__(self, problem, solver, solution):
		self._problem = problem
		self._solver = solver
		self._solution = solution

	@property
	def problem(self):
		return self._problem

	@property
	def solver(self):
		return self._solver

	@property
	def substitution_matrix(self):
		return self._problem.substitution_matrix

	@property
	def score(self):
		return self._solution.score

	@property
	def alignment(self):
		return self._solution.alignment

	@property
	def start_database(self):
		return self._solution.start[0]

	@property
	def start_query(self):
		return self._solution.start[1]

	@property
	def end_database(self):
		return self._solution.end[0]

	@property
	def end_query(self):
		return self._solution.end[1]

	@property
	def shape(self):
		return self._solution.values.shape

	@property
	def values(self):
		return self._solution.values

	@property
	def moves(self):
		return self._solution.moves

	@lru_cache(maxsize=2)
	def traceback(self, form="matrix"):
		"""
		The cells visited by the traceback.

		Parameters
		----------
		form : {'matrix', 'edges'}
			"matrix" gives a boolean mask over the dynamic programming matrix,
			"edges" an array of (from cell, to cell) pairs
		"""

		path = self._solution.path
		if form == "matrix":
			mask = np.zeros(self.shape, dtype=bool)
			mask[path[:, 0], path[:, 1]] = True
			return mask
		elif form == "edges":
			return np.stack([path[:-1], path[1:]], axis=1)
		else:
			raise ValueError(form)

	@cached_property
	def path(self):
		return self._solution.path

	@property
	def complexity(self):
		return self._solution.complexity

	def display(self):
		import bokeh.io
		from pairalign.io.plot import TracebackPlotFactory
		f = TracebackPlotFactory(self, self._problem)
		bokeh.io.show(f.create())

	def _ipython_display_(self):
		self.display()

	def export_image(self, path):
		import bokeh.io
		from pairalign.io.plot import TracebackPlotFactory
		f = TracebackPlotFactory(self, self._problem)
		path = Path(path)
		if path.suffix == ".svg":
			bokeh.io.export_svg(f.create(), filename=path)
		else:
			bokeh.io.export_png(f.create(), filename=path)

	def __repr__(self):
		return (
			f"Solution(score={self.score:.2f}, "
			f"database={self.start_database}..{self.end_database}, "
			f"query={self.start_query}..{self.end_query})")


class Score:
	pass


class Codomain:
	_types = (Score, Alignment, Solution)

	def __init__(self, type):
		if type not in Codomain._types:
			raise ValueError(f"illegal codomain type '{type}'")
		self._type = type

	@property
	def type(self):
		return self._type

	def __str__(self):
		return self._type.__name__

	def make(self, problem, solver, solution):
		if self._type is Score:
			return solution.score
		elif self._type is Alignment:
			return solution.alignment
		else:
			return Solution(problem, solver, solution)


class NoTimings:
	@contextlib.contextmanager
	def measure(self, name):
		yield


class Timings:
	def __init__(self, solver):
		self._solver = solver
		self._timings = dict()

	def __enter__(self):
		self._solver._timings = self
		return self

	def __exit__(self, type, value, traceback):
		self._solver._timings = NoTimings()

	@contextlib.contextmanager
	def measure(self, name):
		t0 = time.perf_counter_ns()
		yield
		t1 = time.perf_counter_ns()
		self._timings[name] = self._timings.get(name, 0) + (t1 - t0)

	def get(self):
		return self._timings

	def _ipython_display_(self):
		for k, t in self._timings.items():
			print(f"{k}: {t / 1000:.1f} µs")


def _parse_scan(scan):
	if isinstance(scan, Scan):
		return scan
	try:
		return Scan(scan)
	except ValueError:
		raise ValueError(f"scan must be 'forward' or 'reverse', got '{scan}'")


class Solver:
	"""
	A solver that obtains solutions to alignment problems.
	"""

	_localities = ("local", "global")

	def __init__(
		self, locality="local", gap_cost: GapCost = None, codomain=Solution,
		formatter=None, scan="forward", **kwargs):

		if locality not in Solver._localities:
			raise ValueError(f"illegal locality '{locality}'")

		if codomain is None:
			codomain = Solution
		self._codomain = Codomain(codomain)

		self._options = dict(
			locality=locality,
			gap_cost=gap_cost,
			codomain=codomain,
			formatter=formatter,
			scan=_parse_scan(scan),
			**kwargs)

		self._timings = NoTimings()

	@property
	def options(self):
		return self._options

	@property
	def gap_cost(self):
		"""the solver's gap cost, or None if taken from each problem's matrix"""
		return self._options["gap_cost"]

	@property
	def scan(self):
		return self._options["scan"]

	@property
	def codomain(self):
		"""the solver's codomain"""
		return self._codomain.type

	def to_codomain(self, codomain):
		"""
		A solver with the same options that produces another codomain, i.e.
		`Score`, `Alignment` or `Solution`.
		"""

		kwargs = self._options.copy()
		kwargs['codomain'] = codomain
		return type(self)._from_options(kwargs)

	@classmethod
	def _from_options(cls, options):
		return Solver(**options)

	def timings(self):
		return Timings(self)

	def _gap_cost(self, problem):
		gap_cost = self._options["gap_cost"]
		if gap_cost is None:
			gap_cost = AffineGapCost.from_matrix(problem.substitution_matrix)
		return gap_cost

	def _policy(self, problem):
		gap_cost = self._gap_cost(problem)
		if self._options["locality"] == "local":
			return Policy.local(gap_cost, self.scan)
		else:
			return Policy.global_(gap_cost, self.scan)

	def _solve_problem(self, problem):
		with self._timings.measure("prepare"):
			policy = self._policy(problem)
			engine = Engine(policy, self._options["formatter"])
			sim = problem.matrix

		with self._timings.measure("fill"):
			values, moves, anchor = engine.fill(sim, problem.database, problem.query)

		with self._timings.measure("traceback"):
			solution = engine.finish(values, moves, anchor, problem.database, problem.query)

		logging.debug(
			f"aligned {problem.shape[0]}x{problem.shape[1]} problem with score "
			f"{solution.score:.2f} at database {solution.start[0]}..{solution.end[0]}, "
			f"query {solution.start[1]}..{solution.end[1]}.")

		return self._codomain.make(problem, self, solution)

	def solve(self, x):
		"""
		Solve a problem, or each problem in a list of problems.
		"""

		if isinstance(x, Sequence):
			return [self._solve_problem(p) for p in x]
		else:
			return self._solve_problem(x)


class LocalSolver(Solver):
	"""
	A solver that obtains optimal local alignments, i.e. Smith-Waterman with
	Gotoh's affine gap costs. Unless a gap cost is given, each problem's
	substitution matrix supplies the gap penalties.
	"""

	def __init__(self, gap_cost: GapCost = None, **kwargs):
		super().__init__(locality="local", gap_cost=gap_cost, **kwargs)

	@classmethod
	def _from_options(cls, options):
		options = dict(options)
		del options["locality"]
		return cls(**options)


class GlobalSolver(Solver):
	"""
	A solver that obtains optimal global alignments, i.e. Needleman-Wunsch
	with Gotoh's affine gap costs.
	"""

	def __init__(self, gap_cost: GapCost = None, **kwargs):
		super().__init__(locality="global", gap_cost=gap_cost, **kwargs)

	@classmethod
	def _from_options(cls, options):
		options = dict(options)
		del options["locality"]
		return cls(**options)


class HomopolymerSolver(Solver):
	"""
	A solver for local alignments of pyrosequencing (454) reads, in which
	gaps inside homopolymer runs are cheaper than elsewhere.

	Parameters
	----------
	scan : {'forward', 'reverse'}
		"forward" places gaps towards the 3' end of a run, "reverse" towards
		its 5' end
	boundary_cross_penalty : float, optional
		penalty for each run boundary a gap crosses, twice the gap extend
		penalty by default
	"""

	def __init__(self, scan="forward", boundary_cross_penalty=None, **kwargs):
		super().__init__(
			locality="local", scan=scan,
			boundary_cross_penalty=boundary_cross_penalty, **kwargs)

	@property
	def boundary_cross_penalty(self):
		return self._options["boundary_cross_penalty"]

	@classmethod
	def _from_options(cls, options):
		options = dict(options)
		del options["locality"]
		return cls(**options)

	def _gap_cost(self, problem):
		gap_cost = self._options["gap_cost"]
		if gap_cost is None:
			gap_cost = HomopolymerGapCost.from_matrix(
				problem.substitution_matrix,
				self._options["boundary_cross_penalty"])
		return gap_cost
