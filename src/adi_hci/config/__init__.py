"""
Subpackage ``config`` contains configuration and helper utilities:

- progress bars and multiprocessing helpers,
- timing of the reductions,
- parameter enums for the algorithms,
- exceptions and warnings raised by the algorithms.
"""

from .errors import *
from .paramenum import *
from .timing import *
from .utils_conf import *
