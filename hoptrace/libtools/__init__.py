# Import files explicitly in new code.

from .network import *
from .packets import *
from .validation import *
