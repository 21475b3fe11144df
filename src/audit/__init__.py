"""Store audit subsystem."""
from .config import AuditConfig
from .engine import AuditEngine, AuditContext
from .exceptions import StoreSetupError
from .localstore import LocalStore
from .models import AuditReport, CheckResult
from .registry import register_checker, create_checker, list_checkers
