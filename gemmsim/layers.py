"""Layer schedules of the image-classification networks."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .options import Network


class LayerKind(enum.Enum):
    """How a layer is computed on the accelerator."""

    CONV = "conv"
    CONV_LARGE_C = "conv_large_c"
    DEPTHWISE = "depthwise"
    POINTWISE = "pointwise"
    FULLY_CONNECTED = "fully_connected"


class Activation(enum.Enum):
    """Activation applied to a layer's output."""

    NONE = "no_activation"
    RELU = "relu"


@dataclass(frozen=True)
class Layer:
    """One layer of a network and the buffers it reads and writes.

    ``im2col`` names the lowering used to feed a convolution to a plain
    matrix multiplication (``"im2col"`` or ``"im2col_with_col2im"``); it is
    None when the layer needs no lowering in the chosen mode.
    """

    name: str
    kind: LayerKind
    activation: Activation
    source: str
    output: str
    pooled: bool = False
    im2col: str | None = None

    @property
    def repeating_bias(self) -> bool:
        """Whether one bias row is shared by every output row."""
        return self.kind is not LayerKind.FULLY_CONNECTED

    def cycle_category(self, conv: bool) -> tuple[str, ...]:
        """Cycle counters charged for this layer, in the order they are spent."""
        if self.kind is LayerKind.DEPTHWISE:
            return ("conv_dw",)
        if self.kind in (LayerKind.POINTWISE, LayerKind.FULLY_CONNECTED):
            return ("matmul",)
        if conv:
            return ("conv",)
        return ("im2col", "matmul", "pool") if self.pooled else ("im2col", "matmul")


def _conv_layer(name: str, kind: LayerKind, activation: Activation, source: str,
                pooled: bool, lowering: str, conv: bool) -> Layer:
    output = f"{name}_out_pooled" if pooled else f"{name}_out"
    return Layer(
        name=name,
        kind=kind,
        activation=activation,
        source=source,
        output=output,
        pooled=pooled,
        im2col=None if conv else lowering,
    )


def _alexnet(conv: bool) -> list[Layer]:
    layers = [
        _conv_layer("conv_1", LayerKind.CONV, Activation.RELU, "images", True, "im2col", conv),
        _conv_layer("conv_2", LayerKind.CONV, Activation.RELU, "conv_1_out_pooled", True,
                    "im2col", conv),
        _conv_layer("conv_3", LayerKind.CONV_LARGE_C, Activation.RELU, "conv_2_out_pooled",
                    False, "im2col", conv),
        _conv_layer("conv_4", LayerKind.CONV_LARGE_C, Activation.RELU, "conv_3_out",
                    False, "im2col_with_col2im", conv),
        _conv_layer("conv_5", LayerKind.CONV_LARGE_C, Activation.RELU, "conv_4_out",
                    True, "im2col_with_col2im", conv),
    ]
    source = "average"
    for number, activation in ((6, Activation.RELU), (7, Activation.RELU), (8, Activation.NONE)):
        name = f"fc_{number}"
        layers.append(Layer(name, LayerKind.FULLY_CONNECTED, activation, source, f"{name}_out"))
        source = f"{name}_out"
    return layers


def _mobilenet(conv: bool) -> list[Layer]:
    layers = [
        _conv_layer("conv_1", LayerKind.CONV, Activation.RELU, "images", False, "im2col", conv),
    ]
    source = layers[0].output
    for n in range(2, 51, 3):
        block = (
            (f"conv_dw_{n}", LayerKind.DEPTHWISE, Activation.RELU),
            (f"conv_{n + 1}", LayerKind.POINTWISE, Activation.NONE),
            (f"conv_{n + 2}", LayerKind.POINTWISE, Activation.RELU),
        )
        for name, kind, activation in block:
            layers.append(Layer(name, kind, activation, source, f"{name}_out"))
            source = f"{name}_out"
    layers.append(Layer("fc_53", LayerKind.FULLY_CONNECTED, Activation.NONE,
                        "average", "fc_53_out"))
    return layers


def schedule(network: Network, conv: bool) -> list[Layer]:
    """Layers of ``network`` in execution order for the chosen mode."""
    if network is Network.ALEXNET:
        return _alexnet(conv)
    if network is Network.MOBILENET:
        return _mobilenet(conv)
    raise ValueError(f"unknown network: {network!r}")


_MOBILENET_RESIDUALS = (
    (9, 6), (15, 12), (18, 15), (24, 21), (27, 24),
    (30, 27), (36, 33), (39, 36), (45, 42), (48, 45),
)


def residual_additions(network: Network) -> list[tuple[str, str]]:
    """Residual additions as ``(layer, residual)`` pairs.

    The residual layer's output is added in place into the output of
    ``layer`` right after ``layer`` runs.
    """
    if network is Network.ALEXNET:
        return []
    if network is Network.MOBILENET:
        return [(f"conv_{target}", f"conv_{residual}")
                for target, residual in _MOBILENET_RESIDUALS]
    raise ValueError(f"unknown network: {network!r}")