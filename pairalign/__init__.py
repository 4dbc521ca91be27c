"""
Optimal pairwise alignments of nucleotide sequences with affine gap costs:
local (Smith-Waterman-Gotoh), global (Needleman-Wunsch-Gotoh) and a
homopolymer aware local variant for pyrosequencing (454) reads.
"""

__pdoc__ = {
	'tests': False
}

from pairalign._version import __version__

from .errors import *
from .substitution import SubstitutionMatrix, nucleotide, pam10, pam25
from .alignment import *
from .gaps import *
from .solve import *
from .problems import *
from .metadata import NucleotideAlignment, CompositeAlignment, AlignmentGap
from .simple import global_alignment, local_alignment, homopolymer_alignment
