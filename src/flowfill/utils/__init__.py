"""
Utilities for all kinds of needs (funcs, async, pygame)
"""

from .aio import *
from .func import *
from .pg import *
