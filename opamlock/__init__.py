from opamlock.config import VERSION

__version__ = VERSION
