from pairalign.tests import TestCase

import pairalign.errors
import pairalign.solve
import pairalign.substitution

from pairalign.alignment import PairwiseAlignment
from pairalign.metadata import NucleotideAlignment, CompositeAlignment, MAX_FILLER


def _first():
	return NucleotideAlignment(
		PairwiseAlignment("AAAAACCCCCTTTTT-GGGG", "AAAA-CCCC-TTTGTGGGGG"),
		"ferdinand", "query1", 200, 10, 300, 110,
		plus_plus_strand=True, score=10, significator=lambda a: a.score >= 10)


def _second():
	return NucleotideAlignment(
		PairwiseAlignment("AAAAAAGGGGGGGCCC---AAA", "AAA---AAATTTTCCCAAAAAA"),
		"ferdinand", "query1", 400, 210, 500, 310,
		plus_plus_strand=True)


class TestNucleotideAlignment(TestCase):
	def test_statistics(self):
		pw1 = _first()
		self.assertEqual(pw1.database_parent, "ferdinand")
		self.assertEqual(pw1.query_parent, "query1")
		self.assertEqual(pw1.start_database, 200)
		self.assertEqual(pw1.end_database, 300)
		self.assertEqual(pw1.end_query, 110)
		self.assertEqual(pw1.length_alignment_with_gaps, 20)
		self.assertEqual(pw1.length_alignment_without_gaps, 17)
		self.assertEqual(pw1.length_aligned_database, 101)
		self.assertEqual(pw1.length_aligned_query, 101)
		self.assertTrue(pw1.plus_plus_strand)
		self.assertTrue(pw1.is_significant())
		self.assertEqual(pw1.gaps, 3)
		self.assertEqual(pw1.hits, 16)
		self.assertEqual(pw1.score, 10)
		self.assertEqual(pw1.transitions, 0)
		self.assertEqual(pw1.transversions, 1)

	def test_long_gaps(self):
		pw1 = _first()
		self.assertEqual(pw1.count_long_gaps_database(2), 0)
		self.assertEqual(pw1.count_long_gaps_database(1), 1)
		self.assertEqual(pw1.count_long_gaps_query(2), 0)
		self.assertEqual(pw1.count_long_gaps_query(1), 2)
		self.assertEqual(pw1.count_long_gaps(2), 0)
		self.assertEqual(pw1.count_long_gaps(1), 3)

		pw2 = _second()
		self.assertEqual(pw2.count_long_gaps(3), 2)
		self.assertEqual(pw2.count_long_gaps(4), 0)
		self.assertEqual(pw2.transversions, 4)
		self.assertEqual(pw2.transitions, 3)

		gap, = pw2.long_gaps_query(3)
		self.assertEqual((gap.start_database, gap.end_database), (402, 406))
		self.assertEqual((gap.start_query, gap.end_query), (212, 213))
		self.assertEqual(gap.gap_length_query, 3)
		self.assertTrue(gap.is_query_gap)
		self.assertFalse(gap.is_database_gap)

		gap, = pw2.long_gaps_database(3)
		self.assertEqual((gap.start_database, gap.end_database), (415, 416))
		self.assertEqual((gap.start_query, gap.end_query), (222, 226))
		self.assertEqual(gap.gap_length_database, 3)
		self.assertIs(gap.parent, pw2)

	def test_similarity(self):
		pw = NucleotideAlignment(
			PairwiseAlignment("AATA-", "AAAAA"), "ferdinand", "query1", 200, 10, 300, 110)
		self.assertAlmostEqual(pw.similarity_with_gaps, 60.0)
		self.assertAlmostEqual(pw.similarity_without_gaps, 75.0)

		with self.assertRaises(pairalign.errors.UnsetParameterError):
			pw.is_significant()

	def test_sub_alignment(self):
		pw3 = NucleotideAlignment(
			PairwiseAlignment("AAA---AAAGGGGGGGCCC---AAA", "AAAAAA---AAATTTTCCCAAAAAA"),
			"ferdinand", "query1", 400, 210, 500, 310, plus_plus_strand=True)

		pw4 = pw3.sub_alignment_relative_to_query(212)
		self.assertEqual((pw4.start_query, pw4.start_database), (212, 402))
		self.assertEqual((pw4.end_query, pw4.end_database), (310, 500))
		self.assertEqual(pw4.alignment.database, "A---AAAGGGGGGGCCC---AAA")
		self.assertEqual(pw4.alignment.query, "AAAA---AAATTTTCCCAAAAAA")
		self.assertTrue(pw4.plus_plus_strand)

		pw4 = pw3.sub_alignment_relative_to_query(213)
		self.assertEqual((pw4.start_query, pw4.start_database), (216, 406))
		self.assertEqual((pw4.end_query, pw4.end_database), (310, 500))
		self.assertEqual(pw4.alignment.database, "GGGGGGGCCC---AAA")
		self.assertEqual(pw4.alignment.query, "AAATTTTCCCAAAAAA")

		pw4 = pw3.sub_alignment_relative_to_query(216, 4)
		self.assertEqual(pw4.alignment.database, "GGGG")
		self.assertEqual((pw4.end_query, pw4.end_database), (219, 409))

		with self.assertRaises(IndexError):
			pw3.sub_alignment_relative_to_query(400)

	def test_sub_alignment_score(self):
		m = pairalign.substitution.nucleotide(1, 1, 5, 1)
		a = PairwiseAlignment("AAA---AAAGGGGGGGCCC---AAA", "AAAAAA---AAATTTTCCCAAAAAA")
		pw = NucleotideAlignment(
			a, "ferdinand", "query1", 400, 210, 500, 310,
			score=m.score_alignment(a), substitution_matrix=m)

		sub = pw.sub_alignment_relative_to_query(212)
		self.assertAlmostEqual(sub.score, m.score_alignment(sub.alignment))

	def test_covering(self):
		pw1 = _first()
		self.assertIs(pw1.covering_database_position(250), pw1)
		self.assertIsNone(pw1.covering_database_position(301))
		self.assertIs(pw1.covering_query_position(10), pw1)
		self.assertIsNone(pw1.covering_query_position(9))

	def test_from_solution(self):
		m = pairalign.substitution.nucleotide(1, 1, 5, 1)
		solution = pairalign.solve.LocalSolver().solve(
			self._problem(m, "ATTTT", "ACCTT"))
		pw = NucleotideAlignment.from_solution(solution, "db", "q", plus_plus_strand=True)
		self.assertEqual((pw.start_database, pw.start_query), (2, 4))
		self.assertEqual((pw.end_database, pw.end_query), (3, 5))
		self.assertEqual(pw.score, 2)
		self.assertEqual(pw.length_database_parent, 5)

		solution = pairalign.solve.LocalSolver().solve(
			self._problem(m, "TTTTTT", "AAAAAA"))
		self.assertIsNone(NucleotideAlignment.from_solution(solution, "db", "q"))


class TestCompositeAlignment(TestCase):
	def test_composite(self):
		pw1 = _first()
		pw2 = _second()
		cpa = CompositeAlignment([pw2, pw1])

		self.assertEqual(cpa.database_parent, "ferdinand")
		self.assertEqual(cpa.query_parent, "query1")
		self.assertEqual(cpa.start_database, 200)
		self.assertEqual(cpa.start_query, 10)
		self.assertEqual(cpa.end_database, 500)
		self.assertEqual(cpa.end_query, 310)
		self.assertEqual(cpa.count_long_gaps(99), 2)
		self.assertEqual(cpa.count_long_gaps(100), 0)
		self.assertEqual(cpa.count_long_gaps_database(1), 3)
		self.assertEqual(cpa.count_long_gaps_query(1), 4)
		self.assertEqual(cpa.transitions, 3)
		self.assertEqual(cpa.transversions, 5)
		self.assertEqual(len(cpa), 2)
		self.assertIs(cpa[0], pw1)
		self.assertIs(cpa[1], pw2)
		self.assertEqual(cpa.gaps, 9)
		self.assertEqual(len(cpa.long_gaps(99)), 2)

	def test_alignment(self):
		cpa = CompositeAlignment([_first(), _second()])
		a = cpa.alignment
		self.assertEqual(len(a), 20 + MAX_FILLER + 22)
		self.assertEqual(a.database[20:20 + MAX_FILLER], "N" * MAX_FILLER)
		self.assertEqual(a.query[20:20 + MAX_FILLER], "N" * MAX_FILLER)

	def test_uneven_filler(self):
		pw1 = NucleotideAlignment(PairwiseAlignment("AC", "AC"), "d", "q", 1, 1, 2, 2)
		pw2 = NucleotideAlignment(PairwiseAlignment("GT", "GT"), "d", "q", 5, 4, 6, 5)
		a = CompositeAlignment([pw1, pw2]).alignment
		self.assertEqual(a.database, "ACNNGT")
		self.assertEqual(a.query, "ACN-GT")

	def test_parents_must_match(self):
		pw1 = _first()
		pw2 = NucleotideAlignment(
			PairwiseAlignment("AC", "AC"), "other", "query1", 1, 1, 2, 2, plus_plus_strand=True)
		with self.assertRaises(ValueError):
			CompositeAlignment([pw1, pw2])
		with self.assertRaises(ValueError):
			CompositeAlignment([])

	def test_covering(self):
		pw1 = _first()
		pw2 = _second()
		cpa = CompositeAlignment([pw1, pw2], significator=lambda a: a.score >= 15)
		self.assertIs(cpa.covering_database_position(450), pw2)
		self.assertIsNone(cpa.covering_database_position(350))
		self.assertIs(cpa.covering_query_position(10), pw1)
		self.assertIsNone(cpa.score)
