"""
Subpackage ``fits`` includes fits handling functions:
    - fits opening
    - fits info
    - fits writing
    - ADI cube opening (cube with PA attached as HDU extension)
"""


from .fits import *
