from check_apt.checks.update import check_update
from check_apt.checks.upgrade import check_upgrade, count_pending

__all__ = ["check_update", "check_upgrade", "count_pending"]
