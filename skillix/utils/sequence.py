"""helpers for rescaling weights and sorting teams while remembering where they came from"""
from typing import List, Sequence, Tuple
import numpy as np
from skillix.core.errors import LengthMismatchError
from skillix.utils.constants import ZERO_RANGE


def normalize(values: Sequence[float], new_min: float, new_max: float) -> List[float]:
    """linearly rescale values into [new_min, new_max], a lone value maps to new_max"""
    if len(values) == 1:
        return [float(new_max)]
    values = np.asarray(values, dtype=np.float64)
    src_min = values.min()
    src_range = values.max() - src_min
    if src_range == 0.0:
        src_range = ZERO_RANGE
    return (((values - src_min) / src_range) * (new_max - new_min) + new_min).tolist()


def unwind(tenet: Sequence[float], target: Sequence) -> Tuple[list, List[int]]:
    """
    Sort target by tenet while keeping what is needed to undo the sort.

    The sort is stable so entries with equal tenets keep the order they were given in.
    Calling unwind again with the returned permutation as the tenet restores the original order.

    Parameters:
        tenet (Sequence[float]): sort key for each entry of target
        target (Sequence): objects to sort

    Returns:
        Tuple[list, List[int]]: the sorted objects and, for each of them, its original index
    """
    if len(tenet) != len(target):
        raise LengthMismatchError(f'Cannot unwind {len(target)} objects with {len(tenet)} tenets.')
    if len(target) == 0:
        return [], []
    order = np.argsort(np.asarray(tenet, dtype=np.float64), kind='stable')
    return [target[idx] for idx in order], order.tolist()
