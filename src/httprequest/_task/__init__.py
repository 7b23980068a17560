from ._callbacks import CallbackQueue, CallbackSet, CallbackSink, EventLoopQueue, main_queue
from ._runner import RunnerVariant, TaskRunner, TaskState, fraction

__all__ = [
    "CallbackQueue",
    "CallbackSet",
    "CallbackSink",
    "EventLoopQueue",
    "RunnerVariant",
    "TaskRunner",
    "TaskState",
    "fraction",
    "main_queue",
]
