import numpy as np


class RandomSequenceGenerator:
    def __init__(self, alphabet, seed=1234):
        self._alphabet = tuple(sorted(set(alphabet)))
        self._rng = np.random.default_rng(seed)

    def __call__(self, n):
        a = self._alphabet
        return ''.join([a[i] for i in self._rng.integers(0, len(a), n)])

    def homopolymers(self, n, max_run=6):
        """
        A sequence of n characters that consists of runs of equal characters
        of length 1, ..., max_run.
        """

        a = self._alphabet
        parts = []
        size = 0
        last = None
        while size < n:
            x = a[self._rng.integers(0, len(a))]
            if x == last:
                continue
            run = int(self._rng.integers(1, max_run + 1))
            parts.append(x * run)
            size += run
            last = x
        return ''.join(parts)[:n]
