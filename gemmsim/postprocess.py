"""Post-processing of network outputs: averaging, predictions and cycle tallies."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import astuple, dataclass, fields

from .options import Network

_EXPECTED = {
    Network.ALEXNET: (824, 725, 135, 646),
    Network.MOBILENET: (75, 900, 125, 897),
}


def _wrap_elem(value: int) -> int:
    return ((value + 128) & 0xFF) - 128


def _trunc_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator < 0) == (denominator < 0) else -quotient


@dataclass
class CycleCounters:
    """Cycles spent in each category of work during one inference run."""

    im2col: int = 0
    matmul: int = 0
    conv: int = 0
    pool: int = 0
    conv_dw: int = 0
    res_add: int = 0
    other: int = 0

    def total(self) -> int:
        """Sum of the cycles in every category."""
        return sum(astuple(self))

    def percentages(self) -> dict[str, int]:
        """Share of the total per category, in whole percent rounded down.

        Categories appear in the order the summary reports them.
        """
        total = self.total()
        if total == 0:
            raise ZeroDivisionError("no cycles were counted")
        order = ("matmul", "im2col", "conv", "pool", "conv_dw", "res_add", "other")
        known = {f.name for f in fields(self)}
        return {name: getattr(self, name) * 100 // total for name in order if name in known}


def flatten_channels(feature_map: Sequence[Sequence[Sequence[Sequence[int]]]]) -> list[list[int]]:
    """Lay out a ``[batch][row][col][channel]`` map as ``[feature][batch]``.

    The feature index is ``col + row * dim + channel * dim * dim``.
    """
    batch_size = len(feature_map)
    if batch_size == 0:
        return []
    dim = len(feature_map[0])
    channels = len(feature_map[0][0][0]) if dim else 0
    flat = [[0] * batch_size for _ in range(channels * dim * dim)]
    for batch, image in enumerate(feature_map):
        if len(image) != dim or any(len(row) != dim for row in image):
            raise ValueError("feature maps must be square and of equal size")
        for row_index, row in enumerate(image):
            for col_index, pixel in enumerate(row):
                if len(pixel) != channels:
                    raise ValueError("every pixel must have the same channel count")
                for channel, value in enumerate(pixel):
                    flat[col_index + row_index * dim + channel * dim * dim][batch] = value
    return flat


def global_average(rows: Sequence[Sequence[int]], batch_size: int,
                   out_dim: int, channels: int) -> list[list[int]]:
    """Average each channel over the spatial positions of each image.

    ``rows`` holds one row per ``(batch, row, col)`` position, with one
    column per channel. The result is ``[channel][batch]``, rounded half
    up and stored as 8-bit elements.
    """
    count = out_dim * out_dim
    if count == 0:
        raise ValueError("out_dim must be positive")
    if len(rows) < batch_size * count:
        raise ValueError("not enough rows for the given batch size and dimension")
    averages = [[0] * batch_size for _ in range(channels)]
    for batch in range(batch_size):
        block = rows[batch * count:(batch + 1) * count]
        for channel in range(channels):
            total = sum(position[channel] for position in block)
            averages[channel][batch] = _wrap_elem(_trunc_div(total + count // 2, count))
    return averages


def predictions(scores: Sequence[Sequence[int]]) -> list[tuple[int, int]]:
    """Pick the highest-scoring class for each batch entry.

    ``scores`` is indexed ``[class][batch]``. Returns ``(class, score)``
    pairs; on a tie the lowest class index wins.
    """
    if not scores:
        raise ValueError("no class scores given")
    batch_size = len(scores[0])
    if any(len(row) != batch_size for row in scores):
        raise ValueError("every class must have a score for each batch entry")
    result = []
    for batch in range(batch_size):
        best_index, best_score = 0, scores[0][batch]
        for index, row in enumerate(scores[1:], start=1):
            if row[batch] > best_score:
                best_index, best_score = index, row[batch]
        result.append((best_index, best_score))
    return result


def first_mismatch(scores: Sequence[Sequence[int]], preds: Sequence[int],
                   correct: Sequence[int]) -> int | None:
    """Position of the first prediction that is wrong, or None if all pass.

    A prediction differing from the expected class still passes when the
    expected class scored exactly as high.
    """
    if len(correct) < len(preds):
        raise ValueError("fewer expected classes than predictions")
    for position, (pred, expected) in enumerate(zip(preds, correct)):
        if pred != expected and scores[pred][position] != scores[expected][position]:
            return position
    return None


def expected_classes(network: Network) -> tuple[int, ...]:
    """Classes the reference images belong to, in batch order."""
    return _EXPECTED[network]