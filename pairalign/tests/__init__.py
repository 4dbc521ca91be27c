import unittest

from pairalign.problems import general


class TestCase(unittest.TestCase):
	def _problem(self, matrix, database, query):
		return general(matrix).new_problem(database, query)

	def _check_alignment(self, solution, text, score=None, coordinates=None, places=2):
		"""
		Check the three line rendering of a solution's alignment, and
		optionally its score and (start_database, start_query, end_database,
		end_query).
		"""

		if text is None:
			self.assertIsNone(solution.alignment)
		else:
			self.assertEqual(str(solution.alignment), text)

		if score is not None:
			self.assertAlmostEqual(solution.score, score, places=places)

		if coordinates is not None:
			self.assertEqual((
				solution.start_database,
				solution.start_query,
				solution.end_database,
				solution.end_query), tuple(coordinates))
