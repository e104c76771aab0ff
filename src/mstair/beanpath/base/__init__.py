"""
package: mstair.beanpath.base
"""

# <AUTOGEN_INIT>
from mstair.beanpath.base import (
    config,
    fs_helpers,
    string_helpers,
    types,
)


__all__ = [
    "config",
    "fs_helpers",
    "string_helpers",
    "types",
]
# </AUTOGEN_INIT>
