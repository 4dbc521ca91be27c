from pairalign.tests import TestCase

import pairalign.gaps
import pairalign.solve
import pairalign.substitution


class TestHomopolymerTables(TestCase):
	def _tables(self, matrix, s, reverse):
		gap_cost = pairalign.gaps.HomopolymerGapCost.from_matrix(matrix)
		return gap_cost.tables(s, reverse)

	def test_floor(self):
		gap_cost = pairalign.gaps.HomopolymerGapCost.from_matrix(
			pairalign.substitution.nucleotide(2.5, 5, 9, 1))
		self.assertAlmostEqual(gap_cost.floor, 1.6)
		self.assertAlmostEqual(gap_cost.boundary_cross_penalty, 2)

		gap_cost = pairalign.gaps.HomopolymerGapCost.from_matrix(
			pairalign.substitution.nucleotide(4, 6, 11, 1.5))
		self.assertAlmostEqual(gap_cost.floor, 1.6)

	def test_forward(self):
		m = pairalign.substitution.nucleotide(2.5, 5, 9, 1)
		cases = [
			("T", "99", "FF"),
			("TTT", "9951", "FFFF"),
			("TTTATATAT", "9951999999", "FFFTTTTTTF"),
			("TTTTTTTTTT", "99876544321", "FFFFFFFFFFF"),
			("TTTTTTTTTTT", "998766543321", "FFFFFFFFFFFF")]
		for s, gap_open, boundaries in cases:
			t = self._tables(m, s, False)
			self.assertEqual(len(t), len(s) + 1)
			self.assertEqual(t.format_gap_open(), gap_open)
			self.assertEqual(t.format_boundaries(), boundaries)

		m = pairalign.substitution.nucleotide(2, 2, 9, 1)
		self.assertEqual(self._tables(m, "CGTTTT", False).format_gap_open(), "9999765")
		self.assertEqual(self._tables(m, "CGTTTT", False).format_boundaries(), "FTTFFFF")
		self.assertEqual(self._tables(m, "AAATTT", False).format_gap_open(), "9975975")
		self.assertEqual(self._tables(m, "AAATTT", False).format_boundaries(), "FFFTFFF")

	def test_reverse(self):
		m = pairalign.substitution.nucleotide(2.5, 5, 9, 1)
		self.assertEqual(self._tables(m, "TTT", True).format_gap_open(), "1599")
		self.assertEqual(self._tables(m, "TTTATATAT", True).format_gap_open(), "1599999999")
		self.assertEqual(self._tables(m, "CGTTTT", True).format_gap_open(), "9914699")
		self.assertEqual(self._tables(m, "AAATTT", True).format_gap_open(), "1591599")
		self.assertEqual(self._tables(m, "TTTATATAT", True).format_boundaries(), "FFFTTTTTTF")


class HomopolymerTestCase(TestCase):
	scan = None

	def _solve(self, matrix, database, query, **kwargs):
		solver = pairalign.solve.HomopolymerSolver(scan=self.scan, **kwargs)
		return solver.solve(self._problem(matrix, database, query))

	def _check(self, matrix, database, query, text):
		self._check_alignment(self._solve(matrix, database, query), text)


class TestHomopolymerForward(HomopolymerTestCase):
	scan = "forward"

	def test_simple(self):
		m = pairalign.substitution.nucleotide(2, 2, 9, 2)
		self._check_alignment(self._solve(m, "T", "T"), "T\n|\nT", 2, (1, 1, 1, 1))

		m = pairalign.substitution.nucleotide(2.5, 5, 9, 1)
		self._check_alignment(
			self._solve(m, "TTT", "TTTATATAT"), "TTT\n|||\nTTT", 7.5, (1, 1, 3, 3))
		self._check_alignment(
			self._solve(m, "TTTTTTTTTT", "TTTTTTTTTTT"),
			"TTTTTTTTTT\n||||||||||\nTTTTTTTTTT", 25, (1, 1, 10, 10))

		m = pairalign.substitution.nucleotide(2, 2, 9, 1)
		self._check(m, "CGTTTT", "AAATTT", "TTT\n|||\nTTT")
		self._check_alignment(self._solve(m, "A", "T"), None, 0, (0, 0, 0, 0))

	def test_gap_at_run_end(self):
		m = pairalign.substitution.nucleotide(3, 5, 11, 1.5)
		self._check(
			m, "CGATTTCGTCGT", "CGATTTACGTCGT",
			"CGATTT-CGTCGT\n|||||| ||||||\nCGATTTACGTCGT")
		self._check(
			m, "CGATTTTCGTCGT", "CGATTTACGTCGT",
			"CGATTTTCGTCGT\n||||||.||||||\nCGATTTACGTCGT")
		self._check(
			m, "CGATTTTTCGTCGT", "CGATTTACGTCGT",
			"CGATTTTTCGTCGT\n|||||| .||||||\nCGATTT-ACGTCGT")
		self._check(
			m, "CGTCGATTTCGTCGT", "CGTCGAATTTCGTCGT",
			"CGTCGA-TTTCGTCGT\n|||||| |||||||||\nCGTCGAATTTCGTCGT")

	def test_boundary_cross_penalty(self):
		m = pairalign.substitution.nucleotide(3, 5, 11, 1.5)
		self._check(
			m, "TATATTAAGTGAAATTTTATATTTAAATTA", "TATATTAAGTGAAATTTTAATATTTAAATTA",
			"TATATTAAGTGAAATTTTA-TATTTAAATTA\n||||||||||||||||||| |||||||||||\nTATATTAAGTGAAATTTTAATATTTAAATTA")

	def test_gap_outside_runs(self):
		for m in (
			pairalign.substitution.nucleotide(4, 6, 11, 1.5),
			pairalign.substitution.nucleotide(2, 2, 11, 1.5),
			pairalign.substitution.nucleotide(4, 6, 20, 1.5)):

			self._check(
				m, "CAAAACAACAGAAACAAAACAAAAACACA", "CAAAACAACAGTAAACAAAACAAAAACACA",
				"CAAAACAACAG-AAACAAAACAAAAACACA\n||||||||||| ||||||||||||||||||\nCAAAACAACAGTAAACAAAACAAAAACACA")

	def test_runs(self):
		m = pairalign.substitution.nucleotide(3, 5, 11, 1.5)
		self._check_alignment(
			self._solve(m, "CGTCGTAAAATTTTTCCCCCCGGGGGGGAAAAAAACGTCGT", "CGTCGTAAAAAATTTTTTCCCCCCCGGGGGGGGAAAAAAAACGTCGT"),
			"CGTCGTAAAA--TTTTT-CCCCCC-GGGGGGG-AAAAAAA-CGTCGT\n"
			"||||||||||  ||||| |||||| ||||||| ||||||| ||||||\n"
			"CGTCGTAAAAAATTTTTTCCCCCCCGGGGGGGGAAAAAAAACGTCGT",
			106, (1, 1, 41, 47))

	def test_pam25(self):
		solution = self._solve(
			pairalign.substitution.pam25(9, 1),
			"ACGTACGTTTTTTTACGTACGTACGAAAAAAATCGTCGTGTA",
			"ACGAACGTTTTTTACGTACGCACGAAAAAAAATCGTCGAGTA")
		self.assertAlmostEqual(solution.score, 47.14, places=2)
		self.assertEqual(
			(solution.start_database, solution.start_query, solution.end_database, solution.end_query),
			(1, 1, 42, 42))

	def test_gap_inside_run_is_cheaper(self):
		m = pairalign.substitution.nucleotide(3, 5, 11, 1.5)
		database = "ACGTCAAAAGTCA"
		inside = self._solve(m, database, "ACGTCAAAAAGTCA")
		crossing = self._solve(m, database, "ACGTCAAAATGTCA")
		self.assertAlmostEqual(inside.score, 13 * 3 - 3.1)
		self.assertGreater(inside.score, crossing.score)

		affine = pairalign.solve.LocalSolver().solve(
			self._problem(m, database, "ACGTCAAAAAGTCA"))
		self.assertGreater(inside.score, affine.score)

	def test_explicit_gap_cost(self):
		m = pairalign.substitution.nucleotide(3, 5, 11, 1.5)
		gap_cost = pairalign.gaps.HomopolymerGapCost(11, 1.5, 3.1)
		solver = pairalign.solve.HomopolymerSolver(gap_cost=gap_cost)
		solution = solver.solve(self._problem(m, "CGATTTCGTCGT", "CGATTTACGTCGT"))
		self.assertEqual(str(solution.alignment), "CGATTT-CGTCGT\n|||||| ||||||\nCGATTTACGTCGT")
		self.assertIsInstance(solver.to_codomain(pairalign.solve.Score), pairalign.solve.HomopolymerSolver)


class TestHomopolymerReverse(HomopolymerTestCase):
	scan = "reverse"

	def test_simple(self):
		m = pairalign.substitution.nucleotide(2, 2, 9, 2)
		self._check_alignment(self._solve(m, "T", "T"), "T\n|\nT", 2, (1, 1, 1, 1))

		m = pairalign.substitution.nucleotide(2.5, 5, 9, 1)
		self._check_alignment(
			self._solve(m, "TTT", "TTTATATAT"), "TTT\n|||\nTTT", 7.5, (1, 1, 3, 3))
		self._check(m, "TTTTTT", "TTTTTT", "TTTTTT\n||||||\nTTTTTT")
		self._check(m, "CGTTTT", "AAATTT", "TTT\n|||\nTTT")

		m = pairalign.substitution.nucleotide(2, 2, 9, 1)
		self._check_alignment(self._solve(m, "A", "T"), None, 0, (0, 0, 0, 0))

	def test_gap_at_run_start(self):
		m = pairalign.substitution.nucleotide(3, 5, 11, 2)
		self._check(
			m, "CGATTTCGTCGT", "CGATTTACGTCGT",
			"CGATTT-CGTCGT\n|||||| ||||||\nCGATTTACGTCGT")

		m = pairalign.substitution.nucleotide(3, 5, 11, 1.5)
		self._check(
			m, "CGATTTTCGTCGT", "CGATTTACGTCGT",
			"CGATTTTCGTCGT\n||||||.||||||\nCGATTTACGTCGT")

		for m in (
			pairalign.substitution.nucleotide(3, 5, 11, 1.5),
			pairalign.substitution.nucleotide(4, 6, 11, 1.5)):

			self._check(
				m, "CGATTTTTCGTCGT", "CGATTTACGTCGT",
				"CGATTTTTCGTCGT\n||| |||.||||||\nCGA-TTTACGTCGT")

		self._check(
			pairalign.substitution.nucleotide(3, 5, 11, 1.5),
			"TAATTTAAATATAAAATTTCACTTAATATA", "TAATTTAAATATTAAAATTTCACTTAATATA",
			"TAATTTAAATA-TAAAATTTCACTTAATATA\n||||||||||| |||||||||||||||||||\nTAATTTAAATATTAAAATTTCACTTAATATA")

	def test_gap_outside_runs(self):
		for m in (
			pairalign.substitution.nucleotide(4, 6, 11, 1.5),
			pairalign.substitution.nucleotide(2, 2, 11, 1.5),
			pairalign.substitution.nucleotide(4, 6, 20, 1.5)):

			self._check(
				m, "ACACAAAAACAAAACAAAGACAACAAAAC", "ACACAAAAACAAAACAAATGACAACAAAAC",
				"ACACAAAAACAAAACAAA-GACAACAAAAC\n|||||||||||||||||| |||||||||||\nACACAAAAACAAAACAAATGACAACAAAAC")

	def test_runs(self):
		m = pairalign.substitution.nucleotide(3, 5, 11, 1.5)
		self._check_alignment(
			self._solve(m, "CGTCGTAAAATTTTTCCCCCCGGGGGGGAAAAAAACGTCGT", "CGTCGTAAAAAATTTTTTCCCCCCCGGGGGGGGAAAAAAAACGTCGT"),
			"CGTCGT--AAAA-TTTTT-CCCCCC-GGGGGGG-AAAAAAACGTCGT\n"
			"||||||  |||| ||||| |||||| ||||||| |||||||||||||\n"
			"CGTCGTAAAAAATTTTTTCCCCCCCGGGGGGGGAAAAAAAACGTCGT",
			106, (1, 1, 41, 47))

	def test_pam25(self):
		solution = self._solve(
			pairalign.substitution.pam25(9, 1),
			"ACGTACGTTTTTTTACGTACGTACGAAAAAAATCGTCGTGTA",
			"ACGAACGTTTTTTACGTACGCACGAAAAAAAATCGTCGAGTA")
		self.assertAlmostEqual(solution.score, 47.14, places=2)
		self.assertEqual(
			(solution.start_database, solution.start_query, solution.end_database, solution.end_query),
			(1, 1, 42, 42))
