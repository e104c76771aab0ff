"""
package: mstair.beanpath.access
"""

# <AUTOGEN_INIT>
from mstair.beanpath.access import (
    accessor_chain,
    builder,
    container_dispatcher,
    failure,
    member_resolver,
    path_parser,
    property_path,
    reflect,
    type_coercer,
)


__all__ = [
    "accessor_chain",
    "builder",
    "container_dispatcher",
    "failure",
    "member_resolver",
    "path_parser",
    "property_path",
    "reflect",
    "type_coercer",
]
# </AUTOGEN_INIT>
