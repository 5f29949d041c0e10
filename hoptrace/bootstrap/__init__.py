from .run import run
from .wiring import Wiring
