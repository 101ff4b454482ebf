"""Domain model exports."""

from .goal import Goal, GoalForest, GoalStatus, attach_goal, dump_forest, find_goal, load_forest
from .agent_stat import AgentStat
from .role_config import AgentRoleConfig, Provider

__all__ = [
    "Goal",
    "GoalForest",
    "GoalStatus",
    "find_goal",
    "attach_goal",
    "dump_forest",
    "load_forest",
    "AgentStat",
    "AgentRoleConfig",
    "Provider",
]
