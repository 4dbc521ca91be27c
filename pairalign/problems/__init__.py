from .instance import *
from .factory import *
