"""
Print the TensorFlow configuration seen by tfbridge.

Run from the repository root:
    python examples/tensorflow_report.py
"""

import warnings

import tfbridge
from tfbridge.logging import setup_logging


def main() -> None:
    setup_logging()
    config = tfbridge.tf_config()
    print(config)
    if not config.available:
        return

    print(f"Modern logging API: {tfbridge.is_modern_api()}")
    with warnings.catch_warnings():
        warnings.simplefilter("always")
        gpu = tfbridge.gpu_configured(verbose=True)
    print(f"\nGPU configured: {'unknown' if gpu is None else gpu}")

    x = tfbridge.tf.constant([[1.0, 2.0], [3.0, 4.0]])
    print(f"Tensor-like: {tfbridge.is_tensor(x)}")


if __name__ == "__main__":
    main()
