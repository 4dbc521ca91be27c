import html
import string


class Formatter:
	"""
	Renders a `PairwiseAlignment` as plain text or as an HTML table with the
	database sequence on top, the similarity line in the middle and the
	query sequence at the bottom.
	"""

	_html_template = string.Template("""
		<table style="border-collapse: collapse; border-spacing:0;">
		<tr>$upper</tr>
		<tr style="background-color: #F0F0F0; padding:0;">$edges</tr>
		<tr>$lower</tr>
		</table>
		""")

	def __init__(self, alignment, width=None):
		self._alignment = alignment
		self._width = width

	def _rows(self):
		a = self._alignment
		return a.database, a.similarity, a.query

	def _blocks(self):
		upper, edges, lower = self._rows()
		width = self._width or max(len(upper), 1)
		for i in range(0, max(len(upper), 1), width):
			yield upper[i:i + width], edges[i:i + width], lower[i:i + width]

	@property
	def html(self):
		upper, edges, lower = self._rows()

		return Formatter._html_template.substitute(
			upper="".join([f"<td>{html.escape(x)}</td>" for x in upper]),
			edges="".join([f'<td style="text-align: center;">{x}</td>' for x in edges]),
			lower="".join([f"<td>{html.escape(x)}</td>" for x in lower]))

	@property
	def text(self):
		"""
		The three rows, wrapped into blocks of ``width`` columns (if given),
		with an empty line between blocks.
		"""

		return "\n\n".join([
			"\n".join([upper, edges, lower])
			for upper, edges, lower in self._blocks()])
