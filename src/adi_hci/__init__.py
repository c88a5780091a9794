from . import config
from . import var
from . import preproc
from . import psfsub
from . import greedy
from . import fits


def __getattr__(name: str):
    if name == '__version__':
        from importlib.metadata import version
        return version('adi_hci')
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
