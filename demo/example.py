import logging

import pairalign
import pairalign.solve

logging.basicConfig(level=logging.INFO)

m = pairalign.nucleotide(3, 5, 11, 1.5)
pf = pairalign.problems.general(m)

solver = pairalign.solve.LocalSolver()
solution = solver.solve(pf.new_problem("CGATTTTTCGTCGT", "CGATTTACGTCGT"))
print(solution.score)
solution.alignment.print()

solver = pairalign.solve.HomopolymerSolver(scan="reverse")
solution = solver.solve(pf.new_problem("CGATTTTTCGTCGT", "CGATTTACGTCGT"))
print(solution.score)
solution.alignment.print()

hit = pairalign.NucleotideAlignment.from_solution(solution, "read", "reference")
print(f"{hit.similarity_without_gaps:.1f}% identity, {hit.gaps} gap columns")
