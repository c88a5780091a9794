"""
Subpackage ``psfsub`` contains the stellar PSF modelling + subtraction
algorithms and the generic interface through which they are used:
- *classic/median ADI* [MAR06]_
- a simplified version of *LOCI* [LAF07]_
- *PCA* [AMA12]_ / [SOU12]_, with automatic selection of the number of
principal components
- *NMF* [LEE99]_ / [REN18]_
- frame by frame reduction of any of the above (``Framewise``).
All of them work in full-frame or annular mode (``AnnulusView``,
``MultiAnnulusView``), with ADI or RDI datasets.
"""
from .design import *
from .interface import *
from .svd import *
from .pca import *
from .nmf import *
from .medsub import *
from .loci import *
from .framewise import *
