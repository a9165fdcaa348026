"""
Spatial kernel - 3D computational geometry package initialization
"""
import logging

# Stay silent until the embedding application calls utils.logging_config.configure_logging()
logging.getLogger(__name__).addHandler(logging.NullHandler())

from spatial.api import OperationOutcome, available_operations, execute
from spatial.constants import DEFAULT_TOLERANCES, EPSILON, Tolerances
from spatial.errors import ErrorKind, GeometryError

# Make them available when someone does 'import spatial'
__all__ = [
    'OperationOutcome',
    'available_operations',
    'execute',
    'DEFAULT_TOLERANCES',
    'EPSILON',
    'Tolerances',
    'ErrorKind',
    'GeometryError',
]
