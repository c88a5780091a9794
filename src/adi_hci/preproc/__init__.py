"""
The subpackage ``preproc`` contains the frame operations used around the
post-processing algorithms:

- rotating frames and cubes (de-rotation of ADI sequences),
- parallactic angle threshold and selection of the reference frames,
- temporal combination of cubes (mean, median, trimmed mean).
"""


from .derotation import *
from .subsampling import *
