"""
Subpackage ``var`` has helping functions such as:

- frame center and distances,
- annulus extraction and vectorization of cubes into matrices,
- annular views of cubes (single annulus and concentric annuli).
"""

from .coords import *
from .shapes import *
from .views import *
