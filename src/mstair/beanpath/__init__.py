"""
package: mstair.beanpath
"""

# <AUTOGEN_INIT>
from mstair.beanpath import (
    access,
    base,
    xlogging,
)


__all__ = [
    "access",
    "base",
    "xlogging",
]
# </AUTOGEN_INIT>

__version__ = "0.1.0"
