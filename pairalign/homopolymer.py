"""
Position specific gap open penalties for pyrosequencing (454) reads.

Pyrosequencing reads often get the length of homopolymer runs (e.g. AAAA)
wrong, so a gap inside a run is much more likely than a gap elsewhere. The
tables computed here ramp the gap open penalty down across each run and mark
the positions where one run ends and the next begins.
"""

import itertools
import numpy as np


def ramp_floor(gap_open, gap_extend, highest_score, lowest_score):
	"""
	Lowest gap open penalty a homopolymer run ramps down to. This is an
	empirical rule; it is kept as is for compatibility of results.
	"""

	floor = gap_open - (abs(highest_score) + abs(lowest_score) - 0.1)
	if floor < gap_extend:
		floor = gap_extend + 0.1
	return floor


def _runs(s):
	start = 0
	for _, run in itertools.groupby(s):
		length = sum(1 for _ in run)
		yield start, length
		start += length


class HomopolymerTable:
	"""
	Gap open penalties and run boundaries for one sequence \\( s \\).

	Both arrays have ``len(s) + 1`` entries, i.e. they are indexed like the
	rows (or columns) of the dynamic programming matrix. ``boundary[j]`` is
	True iff \\( s_{j - 1} \\neq s_j \\).
	"""

	def __init__(self, gap_open, boundary):
		self._gap_open = gap_open
		self._boundary = boundary

	@staticmethod
	def _boundaries(s):
		boundary = np.zeros((len(s) + 1,), dtype=bool)
		for start, _ in _runs(s):
			if start > 0:
				boundary[start] = True
		return boundary

	@staticmethod
	def forward(s, gap_open, floor):
		"""
		Tables for gaps that are traced from the end of s towards its start.
		Each run of length \\( L \\geq 2 \\) starting at \\( s_a \\) ramps
		``gap_open[a + 1], ..., gap_open[a + L]`` from ``gap_open`` down
		to ``floor``.
		"""

		ge = np.full((len(s) + 1,), gap_open, dtype=np.float64)
		for start, length in _runs(s):
			if length > 1:
				ge[start + 1:start + 1 + length] = np.linspace(gap_open, floor, length)
		return HomopolymerTable(ge, HomopolymerTable._boundaries(s))

	@staticmethod
	def reverse(s, gap_open, floor):
		"""
		Tables for gaps that are traced from the start of s towards its end.
		Each run \\( s_a, ..., s_b \\) ramps ``gap_open[a], ..., gap_open[b]``
		from ``floor`` up to ``gap_open``.
		"""

		ge = np.full((len(s) + 1,), gap_open, dtype=np.float64)
		for start, length in _runs(s):
			if length > 1:
				ge[start:start + length] = np.linspace(floor, gap_open, length)
		return HomopolymerTable(ge, HomopolymerTable._boundaries(s))

	@property
	def gap_open(self):
		return self._gap_open

	@property
	def boundary(self):
		return self._boundary

	def __len__(self):
		return self._gap_open.shape[0]

	def format_gap_open(self):
		"""
		One digit per position, i.e. each penalty truncated to an integer.
		"""

		return "".join(str(int(x)) for x in self._gap_open)

	def format_boundaries(self):
		return "".join("T" if x else "F" for x in self._boundary)
