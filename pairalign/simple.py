"""
A simple high level API, which should be sufficient for many simple use cases.
"""


from pairalign.solve import Solution, GlobalSolver, LocalSolver, HomopolymerSolver
from pairalign.problems import general
from functools import lru_cache


@lru_cache(maxsize=8)
def _make_solver(solver_class, codomain=Solution, **kwargs):
    return solver_class(codomain=codomain, **kwargs)


def _alignment(solver_class, database, query, substitution_matrix, codomain=Solution, **kwargs):
    solver = _make_solver(solver_class, codomain=codomain, **kwargs)
    return solver.solve(general(substitution_matrix).new_problem(database, query))


def global_alignment(database, query, substitution_matrix, **kwargs):
    return _alignment(GlobalSolver, database, query, substitution_matrix, **kwargs)


def local_alignment(database, query, substitution_matrix, **kwargs):
    return _alignment(LocalSolver, database, query, substitution_matrix, **kwargs)


def homopolymer_alignment(database, query, substitution_matrix, scan="forward", **kwargs):
    return _alignment(
        HomopolymerSolver, database, query, substitution_matrix, scan=scan, **kwargs)
