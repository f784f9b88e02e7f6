__version__ = '0.1.0'

from .cookie import *  # noqa
from .cookiejar import *  # noqa
from .headers import *  # noqa
from .sources import *  # noqa


__all__ = (cookie.__all__ +  # noqa
           cookiejar.__all__ +  # noqa
           headers.__all__ +  # noqa
           sources.__all__)  # noqa
