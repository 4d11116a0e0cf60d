from tfbridge.logging.logging import (
    RotatingFileHandlerWithDir,
    TfBridgeJSONFormatter,
    setup_logging,
)

__all__ = ["RotatingFileHandlerWithDir", "TfBridgeJSONFormatter", "setup_logging"]
