"""Aircraft lifecycle tasks and the circular task list.

Typical usage:
    from towersim.tasks import Task, TaskList, TaskType

    tasks = TaskList([Task(TaskType.WAIT), Task(TaskType.LOAD, 75),
                      Task(TaskType.TAKEOFF), Task(TaskType.AWAY), Task(TaskType.LAND)])
"""

from towersim.tasks.task import LEGAL_SUCCESSORS, Task, TaskType, can_follow
from towersim.tasks.task_list import InvalidTaskSequenceError, TaskList

__all__ = [
    "LEGAL_SUCCESSORS",
    "InvalidTaskSequenceError",
    "Task",
    "TaskList",
    "TaskType",
    "can_follow",
]
