import logging
import sys
import json
import os
import gzip
import shutil
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from typing import Optional
from app_config import LoggingConfig
from .context import get_current_run

# Attributes every LogRecord carries; anything else came in through `extra`
_RESERVED_ATTRS = frozenset([
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName', 'taskName',
    'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'message', 'asctime',
])

class CompressingTimedRotatingFileHandler(TimedRotatingFileHandler):
    """TimedRotatingFileHandler that compresses rotated files"""

    def doRollover(self):
        """Override to add compression after rotation"""
        super().doRollover()

        # The rotated file has a timestamp suffix
        dir_name, base_name = os.path.split(self.baseFilename)

        try:
            for file_name in os.listdir(dir_name):
                if file_name.startswith(base_name) and not file_name.endswith('.gz') and file_name != base_name:
                    full_path = os.path.join(dir_name, file_name)
                    with open(full_path, 'rb') as f_in:
                        with gzip.open(f'{full_path}.gz', 'wb') as f_out:
                            shutil.copyfileobj(f_in, f_out)
                    os.remove(full_path)
        except Exception as e:
            # Compression errors must not fail the rollover
            print(f"Error during log compression: {e}", file=sys.stderr)

class StructuredFormatter(logging.Formatter):
    """Formatter for structured logging with rebalance run context"""

    def __init__(self, fmt: str = 'text'):
        super().__init__()
        self.output_format = fmt

    def format(self, record):
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage()
        }

        run = get_current_run()
        if run is not None:
            log_data['run_id'] = run.run_id
            log_data['wallet_address'] = run.wallet_address

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in log_data:
                continue
            if isinstance(value, datetime):
                log_data[key] = value.strftime('%Y-%m-%d %H:%M:%S %Z').strip()
            else:
                log_data[key] = value

        if record.exc_info:
            log_data['exc_info'] = self.formatException(record.exc_info)

        if self.output_format == 'json':
            return json.dumps(log_data, default=str)

        base_msg = f"{log_data['timestamp']} - {log_data['logger']} - {log_data['level']} - {log_data['message']}"
        if 'event' in log_data:
            base_msg += f" [event={log_data['event']}]"
        if 'run_id' in log_data:
            base_msg += f" [run_id={log_data['run_id']}]"
        if 'exc_info' in log_data:
            base_msg += f"\n{log_data['exc_info']}"
        return base_msg

def configure_root_logger(logging_config: Optional[LoggingConfig] = None, log_dir: Optional[str] = None):
    """Configure the root logger to use structured formatting for all logs"""
    logging_config = logging_config or LoggingConfig()
    root_logger = logging.getLogger()

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, logging_config.level))

    formatter = StructuredFormatter(logging_config.format)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

        file_handler = CompressingTimedRotatingFileHandler(
            filename=os.path.join(log_dir, 'rebalancer.log'),
            when='midnight',
            interval=1,
            backupCount=30,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    _configure_third_party_loggers()

def _configure_third_party_loggers():
    """Configure specific third-party library loggers with appropriate levels"""
    # aiohttp: Set to WARNING to reduce HTTP request/response noise
    aiohttp_logger = logging.getLogger('aiohttp')
    aiohttp_logger.setLevel(logging.WARNING)

    aiohttp_access_logger = logging.getLogger('aiohttp.access')
    aiohttp_access_logger.setLevel(logging.WARNING)
