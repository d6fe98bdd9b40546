# catalog/concurrency.py
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Mapping, Optional

DEFAULT_WORKERS = 5

def fan_out(branches: Mapping[str, Callable[[], Any]], max_workers: Optional[int] = None) -> Dict[str, Any]:
    """Run independent reads concurrently and join on all of them.

    The join waits for every branch to finish. If any branch raised, the
    exception of the first failing branch (in mapping order) is re-raised
    and no results are returned.

    Args:
        branches: Mapping of result name to a zero-argument callable
        max_workers: Thread count cap, defaults to FANOUT_WORKERS or 5

    Returns:
        Mapping of result name to the branch's return value
    """
    if not branches:
        return {}
    workers = max_workers or int(os.getenv("FANOUT_WORKERS", DEFAULT_WORKERS))
    with ThreadPoolExecutor(max_workers=max(1, min(workers, len(branches)))) as executor:
        futures = {name: executor.submit(branch) for name, branch in branches.items()}
    return {name: future.result() for name, future in futures.items()}
