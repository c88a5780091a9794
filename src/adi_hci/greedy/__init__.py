"""
Subpackage ``greedy`` contains iterative versions of the low-rank
post-processing algorithms:
- *GreeDS* [PAI18]_ / [PAI21]_, with a PCA or NMF kernel.
"""

from .greeds import *
