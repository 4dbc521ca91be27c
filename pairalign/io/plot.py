import bokeh.plotting
import bokeh.models
import numpy as np

from ..algorithm import Move, Scan


def inset_arrows(data, d0=0.1):
	dx = data['x_end'] - data['x_start']
	dy = data['y_end'] - data['y_start']

	mx = (data['x_start'] + data['x_end']) / 2
	my = (data['y_start'] + data['y_end']) / 2
	length = np.sqrt(np.power(dx, 2) + np.power(dy, 2))

	with np.errstate(divide='ignore', invalid='ignore'):
		d = d0 / length

	data_short = dict(
		x_start=mx - dx * d,
		y_start=my - dy * d,
		x_end=mx + dx * d,
		y_end=my + dy * d
	)

	cond = np.logical_and(np.logical_and(np.abs(dx) <= 1, np.abs(dy) <= 1), length > 0)
	return dict((k, np.where(cond, data_short[k], data[k])) for k in data.keys())


def flat_ix(a):
	return np.flip(np.dstack(np.meshgrid(
		np.arange(a.shape[1]),
		np.arange(a.shape[0]))).reshape(-1, 2), axis=-1)


class TracebackPlotFactory:
	"""
	Plots the dynamic programming matrix of a `Solution`: the cell values,
	the move stored in each cell and the optimal path.
	"""

	def __init__(self, solution, problem, cell_size=40):
		self._solution = solution
		self._problem = problem
		self._p = None
		self._shape = None
		self._cell_size = cell_size

		if solution.solver.scan == Scan.FORWARD:
			self._step = -1
		else:
			self._step = 1

	def _create_plot(self):
		n, m = self._solution.values.shape
		cell_size = self._cell_size
		base_size = 50

		self._p = bokeh.plotting.figure(
			width=base_size + m * cell_size,
			height=base_size + n * cell_size,
			x_axis_location='above',
			title=None, toolbar_location=None)

		self._shape = (n, m)

	def _plot_grid(self):
		n, m = self._shape
		grid_line_width = 2
		grid_color = 'lightgray'

		self._p.multi_line(
			xs=[[-0.5, m - 0.5]] * (n + 1),
			ys=[[y - 0.5, y - 0.5] for y in range(n + 1)],
			color=grid_color, line_width=grid_line_width)

		self._p.multi_line(
			xs=[[x - 0.5, x - 0.5] for x in range(m + 1)],
			ys=[[-0.5, n - 0.5]] * (m + 1),
			color=grid_color, line_width=grid_line_width)

	def _shade_optimal_path_cells(self):
		path = self._solution.path

		source = bokeh.models.ColumnDataSource(dict(
			x=path[:, 1],
			y=path[:, 0],
			width=[1] * path.shape[0],
			height=[1] * path.shape[0]))

		glyph = bokeh.models.Rect(
			x="x", y="y", width="width", height="height",
			fill_color="orange",
			fill_alpha=0.25,
			line_color=None)
		self._p.add_glyph(source, glyph)

	def _predecessors(self, src, moves):
		step = self._step
		dst = src.copy()
		dst[moves == Move.DIAGONAL] += step
		dst[moves == Move.INSERTION, 1] += step
		dst[moves == Move.DELETION, 0] += step
		return dst

	def _plot_move_arrows(self):
		moves_matrix = self._solution.moves
		src = flat_ix(moves_matrix)
		moves = moves_matrix.reshape(-1)

		path_set = set(tuple(x) for x in self._solution.path.tolist())
		mask = np.array([
			tuple(x) not in path_set for x in src.tolist()], dtype=bool)
		mask = np.logical_and(mask, moves != Move.NONE)
		src = src[mask]
		dst = self._predecessors(src, moves[mask])

		n, m = self._shape
		mask = np.logical_and.reduce([
			dst[:, 0] >= 0, dst[:, 0] < n, dst[:, 1] >= 0, dst[:, 1] < m])
		src = src[mask]
		dst = dst[mask]

		arrow_color = 'blue'
		arrow_alpha = 0.5

		source = bokeh.models.ColumnDataSource(data=inset_arrows(dict(
			x_start=src[:, 1],
			y_start=src[:, 0],
			x_end=dst[:, 1],
			y_end=dst[:, 0])))
		self._p.add_layout(bokeh.models.Arrow(
			end=bokeh.models.OpenHead(
				line_color=arrow_color, line_alpha=arrow_alpha, line_width=1, size=5),
			source=source, x_start='x_start', y_start='y_start', x_end='x_end', y_end='y_end',
			line_color=arrow_color))

	def _plot_optimal_path_arrows(self):
		path = self._solution.path
		arrow_color = 'orange'
		source = bokeh.models.ColumnDataSource(data=inset_arrows(dict(
			x_start=path[:-1, 1],
			y_start=path[:-1, 0],
			x_end=path[1:, 1],
			y_end=path[1:, 0])))
		self._p.add_layout(bokeh.models.Arrow(
			end=bokeh.models.OpenHead(line_color=arrow_color, line_width=1, size=5),
			source=source, x_start='x_start', y_start='y_start', x_end='x_end', y_end='y_end',
			line_color=arrow_color, line_width=2))

	def _plot_value_magnitudes(self):
		n, m = self._shape
		values = self._solution.values

		source = bokeh.models.ColumnDataSource(
			data=dict(
				x=np.tile(np.arange(0, m), n),
				y=np.repeat(np.arange(0, n), m),
				value=[f'{x:.1f}' for x in values.flatten()],
				color=['gray' if x <= 0 else 'black' for x in values.flatten()]))

		labels = bokeh.models.LabelSet(
			x='x', y='y', text='value', text_color='color',
			x_offset=0, y_offset=0, source=source,
			text_font_size='9pt', text_align='center', text_baseline='middle')

		self._p.add_layout(labels)

	def _configure(self):
		p = self._p
		n, m = self._shape

		# in a forward scan, row i follows the character i - 1
		offset = 1 if self._step < 0 else 0

		if self._problem is not None:
			p.yaxis.major_label_overrides = dict(
				(i + offset, x) for i, x in enumerate(self._problem.database))
			p.xaxis.major_label_overrides = dict(
				(i + offset, x) for i, x in enumerate(self._problem.query))

		p.xaxis.ticker = bokeh.models.FixedTicker(ticks=(np.arange(0, m - 1) + offset).tolist())
		p.yaxis.ticker = bokeh.models.FixedTicker(ticks=(np.arange(0, n - 1) + offset).tolist())

		p.y_range.flipped = True

		p.grid.grid_line_color = None

	def create(self):
		self._create_plot()
		self._plot_grid()
		if self._solution.path.shape[0] > 0:
			self._shade_optimal_path_cells()
			self._plot_optimal_path_arrows()
		self._plot_move_arrows()
		self._plot_value_magnitudes()
		self._configure()
		return self._p
