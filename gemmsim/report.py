"""Text reports printed while running image-classification networks."""

from __future__ import annotations

import re

from .options import Network
from .postprocess import CycleCounters

PASS_MESSAGE = "PASS\n"

_SUMMARY_LABELS = {
    "matmul": "Matmul cycles",
    "im2col": "Im2col cycles",
    "conv": "Conv cycles",
    "pool": "Pooling cycles",
    "conv_dw": "Depthwise convolution cycles",
    "res_add": "Res add cycles",
    "other": "Other cycles",
}

_LAYER_NAME = re.compile(r"(conv_dw|conv|fc)_(\d+)")


def _mobilenet_stage(name: str, cycles: int) -> str:
    match = _LAYER_NAME.fullmatch(name)
    if match is None:
        raise ValueError(f"unknown layer name: {name!r}")
    prefix, number = match.groups()
    if prefix == "conv_dw":
        return f"{name}: {cycles} \n"
    if prefix == "conv" and int(number) == 1:
        return f"{name}: {cycles}\n"
    return f"matmul_{number}: {cycles}\n"


def format_stage(network: Network, name: str, cycles: int) -> str:
    """Line reporting the cycles one layer of ``network`` took."""
    if cycles < 0:
        raise ValueError("cycle counts cannot be negative")
    if network is Network.ALEXNET:
        if _LAYER_NAME.fullmatch(name) is None:
            raise ValueError(f"unknown layer name: {name!r}")
        return f"{name} cycles: {cycles} \n"
    if network is Network.MOBILENET:
        return _mobilenet_stage(name, cycles)
    raise ValueError(f"unknown network: {network!r}")


def format_prediction(index: int, score: int) -> str:
    """Line announcing the predicted class and its score."""
    return f"Prediction: {index} (score: {score})\n"


def format_summary(counters: CycleCounters) -> str:
    """Cycle breakdown per category, with its share of the total."""
    total = counters.total()
    shares = counters.percentages()
    lines = [f"\nTotal cycles: {total} (100%)\n"]
    lines.extend(
        f"{_SUMMARY_LABELS[category]}: {getattr(counters, category)} ({share}%)\n"
        for category, share in shares.items()
    )
    return "".join(lines)


def format_failure(network: Network, position: int, actual_score: int | None = None) -> str:
    """Message for a wrong prediction at zero-based batch ``position``."""
    if position < 0:
        raise ValueError("position cannot be negative")
    if network is Network.ALEXNET:
        return f"Prediction {position + 1} is incorrect!\nFAIL\n"
    if network is Network.MOBILENET:
        if actual_score is None:
            raise ValueError("the expected class's score is required")
        return (f"Prediction {position + 1} is incorrect! "
                f"Actual class has score of {actual_score}\nFAIL\n")
    raise ValueError(f"unknown network: {network!r}")