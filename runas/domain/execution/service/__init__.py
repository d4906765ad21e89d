from runas.domain.execution.service.description import DescriptionTree
from runas.domain.execution.service.installer import IdentityInstaller
from runas.domain.execution.service.plan import ExecutionPlanBuilder
from runas.domain.execution.service.tracker import ExpectedIdentityTracker

__all__ = [
    "DescriptionTree",
    "ExecutionPlanBuilder",
    "ExpectedIdentityTracker",
    "IdentityInstaller",
]
