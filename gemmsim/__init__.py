"""Fixed-point reference arithmetic, option parsing, layer schedules and reporting for a quantized matrix accelerator."""

__version__ = "0.1.0"