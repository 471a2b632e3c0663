# cli/ui - console and progress components (rich)
from .console import (
    console,
    get_console,
    print_error,
    print_error_tree,
    print_info,
    print_success,
    print_warning,
    setup_logging,
)
from .progress import ParallelTracker, parallel_progress

__all__: list[str] = [
    "console",
    "get_console",
    "setup_logging",
    "print_success",
    "print_error",
    "print_warning",
    "print_info",
    "print_error_tree",
    "ParallelTracker",
    "parallel_progress",
]
