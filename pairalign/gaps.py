import logging
import numpy as np

from .homopolymer import HomopolymerTable, ramp_floor


__all__ = ['GapCost', 'AffineGapCost', 'HomopolymerGapCost']


class GapCost:
	"""
	A gap cost \\( w_k \\) that depends on the gap length \\( k \\) and,
	for position specific costs, on where the gap opens.
	"""

	position_specific = False

	@property
	def gap_open(self):
		raise NotImplementedError()

	@property
	def gap_extend(self):
		raise NotImplementedError()

	def to_tuple(self):
		raise NotImplementedError()

	def costs(self, n):
		raise NotImplementedError()

	@property
	def title(self):
		raise NotImplementedError()

	def plot(self, n=None):
		"""
		Plot the costs of gaps of length 0, ..., n - 1.

		Returns
		-------
		bokeh figure
		"""

		import bokeh.plotting

		if n is None:
			n = 5

		p = bokeh.plotting.figure(width=600, height=200)
		c = self.costs(n)
		p.line(np.arange(n), c, line_width=2)

		p.title.text = self.title
		p.xaxis.axis_label = 'gap length'
		p.yaxis.axis_label = 'cost'
		p.xaxis.ticker = list(range(n))
		p.toolbar_location = None

		return p

	def _ipython_display_(self):
		import bokeh.io
		bokeh.io.show(self.plot(5))


class AffineGapCost(GapCost):
	"""
	An affine gap cost \\( w_k = u + v k \\) with \\( u = open - extend \\)
	and \\( v = extend \\), i.e. a gap of length \\( k \\) costs
	\\( open + (k - 1) \\cdot extend \\).

	Notes
	-----
	   [1] Gotoh, O. (1982). An improved algorithm for matching biological sequences.
	       Journal of Molecular Biology, 162(3), 705–708.
	"""

	def __init__(self, open, extend=0):
		if open < 0 or extend < 0:
			raise ValueError(f"gap penalties must not be negative, got {open} and {extend}")
		self._open = float(open)
		self._extend = float(extend)

	@staticmethod
	def from_matrix(matrix):
		return AffineGapCost(matrix.gap_open, matrix.gap_extend)

	@property
	def gap_open(self):
		return self._open

	@property
	def gap_extend(self):
		return self._extend

	def to_tuple(self):
		return 'affine', self._open, self._extend

	def costs(self, n):
		w = self._open - self._extend + np.linspace(
			0., (n - 1) * self._extend, n, dtype=np.float64)
		w[0] = 0
		return w

	@property
	def title(self):
		return f"w(k) = {self._open:.1f} + {self._extend:.1f} * (k - 1), w(0) = 0"


class HomopolymerGapCost(GapCost):
	"""
	An affine gap cost whose open penalty drops inside homopolymer runs. Gaps
	that leave the run they opened in pay a boundary cross penalty for each
	run boundary they cross, up to the full open penalty.

	Parameters
	----------
	open : float
		default gap open penalty
	extend : float
		gap extend penalty
	floor : float
		lowest gap open penalty, reached at the far end of a run
	boundary_cross_penalty : float, optional
		penalty for each run boundary a gap crosses, ``2 * extend`` by default
	"""

	position_specific = True

	def __init__(self, open, extend, floor, boundary_cross_penalty=None):
		if open < 0 or extend < 0:
			raise ValueError(f"gap penalties must not be negative, got {open} and {extend}")
		self._open = float(open)
		self._extend = float(extend)
		self._floor = float(floor)
		if boundary_cross_penalty is None:
			boundary_cross_penalty = 2 * self._extend
		self._boundary_cross_penalty = float(boundary_cross_penalty)

	@staticmethod
	def from_matrix(matrix, boundary_cross_penalty=None):
		floor = ramp_floor(
			matrix.gap_open, matrix.gap_extend,
			matrix.highest_score, matrix.lowest_score)
		logging.debug(f"homopolymer gap open floor is {floor:.2f}.")
		return HomopolymerGapCost(
			matrix.gap_open, matrix.gap_extend, floor,
			boundary_cross_penalty=boundary_cross_penalty)

	@property
	def gap_open(self):
		return self._open

	@property
	def gap_extend(self):
		return self._extend

	@property
	def floor(self):
		return self._floor

	@property
	def boundary_cross_penalty(self):
		return self._boundary_cross_penalty

	def tables(self, s, reverse=False):
		"""
		Position specific gap open penalties and run boundaries for the
		sequence s.

		Returns
		-------
		HomopolymerTable
		"""

		if reverse:
			return HomopolymerTable.reverse(s, self._open, self._floor)
		else:
			return HomopolymerTable.forward(s, self._open, self._floor)

	def to_tuple(self):
		return 'homopolymer', self._open, self._extend, self._floor, self._boundary_cross_penalty

	def costs(self, n):
		# costs outside of homopolymer runs
		return AffineGapCost(self._open, self._extend).costs(n)

	@property
	def title(self):
		return f"w(k) = {self._floor:.1f}..{self._open:.1f} + {self._extend:.1f} * (k - 1), w(0) = 0"
