"""Circular task list describing an aircraft's repeating schedule.

Typical usage:
    from towersim.tasks.task import Task, TaskType
    from towersim.tasks.task_list import TaskList

    tasks = TaskList([
        Task(TaskType.AWAY),
        Task(TaskType.LAND),
        Task(TaskType.LOAD, 50),
        Task(TaskType.TAKEOFF),
    ])
    tasks.advance()
    print(tasks.current_task)  # LAND
"""

from collections.abc import Iterable

from towersim.tasks.task import Task, can_follow


class InvalidTaskSequenceError(ValueError):
    """Raised when a task sequence breaks the task ordering rules."""


class TaskList:
    """Ordered, circular list of tasks with a cursor on the current task.

    The sequence is validated once on construction, including the wrap-around
    from the last task back to the first. Afterwards only the cursor moves.

    Examples:
        >>> tasks = TaskList([Task(TaskType.AWAY), Task(TaskType.LAND),
        ...                   Task(TaskType.LOAD, 20), Task(TaskType.TAKEOFF)])
        >>> str(tasks)
        'TaskList currently on AWAY [1/4]'
        >>> tasks.encode()
        'AWAY,LAND,LOAD@20,TAKEOFF'
    """

    def __init__(self, tasks: Iterable[Task]) -> None:
        """Initialize the task list.

        Args:
            tasks: Tasks in schedule order; the first becomes the current task

        Raises:
            InvalidTaskSequenceError: If the sequence is empty or any adjacent
                pair (including last -> first) is not a legal transition
        """
        self._tasks: tuple[Task, ...] = tuple(tasks)
        if not self._tasks:
            raise InvalidTaskSequenceError("Invalid task sequence: task list is empty")

        for index, task in enumerate(self._tasks):
            following = self._tasks[(index + 1) % len(self._tasks)]
            if not can_follow(task.type, following.type):
                raise InvalidTaskSequenceError(
                    f"Invalid task sequence: {following.type} cannot follow {task.type} "
                    f"(position {index + 1})"
                )

        self._current_index = 0

    @property
    def current_task(self) -> Task:
        """Task the aircraft is currently performing."""
        return self._tasks[self._current_index]

    @property
    def next_task(self) -> Task:
        """Task that follows the current one, without moving the cursor."""
        return self._tasks[(self._current_index + 1) % len(self._tasks)]

    @property
    def current_index(self) -> int:
        """Zero-based position of the current task."""
        return self._current_index

    def advance(self) -> None:
        """Move the cursor to the next task, wrapping around at the end."""
        self._current_index = (self._current_index + 1) % len(self._tasks)

    def tasks_from_current(self) -> list[Task]:
        """Return every task in schedule order, starting with the current one."""
        start = self._current_index
        return list(self._tasks[start:] + self._tasks[:start])

    def encode(self) -> str:
        """Return the comma-joined encoded tasks, current task first."""
        return ",".join(task.encode() for task in self.tasks_from_current())

    def __len__(self) -> int:
        return len(self._tasks)

    def __str__(self) -> str:
        return (
            f"TaskList currently on {self.current_task} "
            f"[{self._current_index + 1}/{len(self._tasks)}]"
        )

    def __repr__(self) -> str:
        return f"TaskList({self.encode()!r})"
