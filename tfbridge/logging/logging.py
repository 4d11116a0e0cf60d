import atexit
import json
import logging
import logging.config
from logging.handlers import RotatingFileHandler
import os
import pathlib
import datetime as dt
from typing import override, Any

DEFAULT_CONFIG_FILE = pathlib.Path(__file__).parent.resolve() / "config.json"
USER_CONFIG_FILE = pathlib.Path("logging_config.json")

# Attributes every LogRecord has; anything else came in through `extra=`
LOG_RECORD_BUILTIN_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


def setup_logging(config_file: str | os.PathLike | None = None) -> None:
    """
    Configures logging
    An explicit `config_file` wins. Otherwise, if the user defines
    'logging_config.json' in the working directory it is loaded as
    logging config, and the bundled tfbridge config is used if not.
    """
    if config_file is not None:
        config_path = pathlib.Path(config_file)
    elif USER_CONFIG_FILE.is_file():
        config_path = USER_CONFIG_FILE
    else:
        config_path = DEFAULT_CONFIG_FILE
    with open(config_path) as f_in:
        config = json.load(f_in)
    logging.config.dictConfig(config)

    queue_handler = logging.getHandlerByName("queue_handler")
    if queue_handler is not None:
        queue_handler.listener.start()
        atexit.register(queue_handler.listener.stop)


class TfBridgeJSONFormatter(logging.Formatter):
    """
    JSON formatter for tfbridge log records
    Attributes:
        fmt_keys (dict): output key -> LogRecord attribute

    Fields passed through `extra=`, such as the `hook` name logged by
    tfbridge.runtime.result.attempt, are copied into the output as well.

    Methods:
        format: Formats the record as a JSON object
        _prepare_log_dict: Prepares the dict that gets serialized
    """

    def __init__(
        self,
        *,
        fmt_keys: dict[str, str] | None = None,
    ) -> None:
        super().__init__()
        self.fmt_keys = fmt_keys if fmt_keys is not None else {}

    @override
    def format(self, record: logging.LogRecord) -> str:
        message = self._prepare_log_dict(record)
        return json.dumps(message, default=str)

    def _prepare_log_dict(self, record: logging.LogRecord) -> dict:
        always_fields = {
            "message": record.getMessage(),
            "timestamp": dt.datetime.fromtimestamp(
                record.created, tz=dt.timezone.utc
            ).isoformat(),
        }

        if record.exc_info is not None:
            always_fields["exc_info"] = self.formatException(record.exc_info)

        if record.stack_info is not None:
            always_fields["stack_info"] = self.formatStack(record.stack_info)

        message = {
            key: msg_val
            if (msg_val := always_fields.pop(val, None)) is not None
            else getattr(record, val)
            for key, val in self.fmt_keys.items()
        }
        message.update(always_fields)
        for key, value in record.__dict__.items():
            if key not in LOG_RECORD_BUILTIN_ATTRS and key not in message:
                message[key] = value
        return message


class RotatingFileHandlerWithDir(RotatingFileHandler):
    """
    RotatingFileHandler that creates the log directory
    if it does not exist yet
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        log_file_path = kwargs.get("filename")
        if log_file_path:
            log_dir = os.path.dirname(log_file_path)
            if log_dir and not os.path.exists(log_dir):
                os.makedirs(log_dir)

        super().__init__(*args, **kwargs)
