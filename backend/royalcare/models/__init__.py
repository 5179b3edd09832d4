from .auth import User, ROLE_ADMIN, ROLE_USER, ROLES
from .devices import Device
from .faults import FaultReport, FAULT_OPEN, FAULT_CLOSED, FAULT_STATUSES

__all__ = [
    'User', 'ROLE_ADMIN', 'ROLE_USER', 'ROLES',
    'Device',
    'FaultReport', 'FAULT_OPEN', 'FAULT_CLOSED', 'FAULT_STATUSES',
]
