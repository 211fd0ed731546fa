# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging configuration for pybrdc.

Every module logs through ``logging.getLogger(__name__)``, so all loggers are
children of the ``pybrdc`` package logger and inherit its handlers. Orbit
propagation traces go out at the extra TRACE level, below DEBUG.
"""

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

ROOT_LOGGER = "pybrdc"

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class LogLevel(Enum):
    """Log levels, TRACE carries per-step propagation values"""
    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


logging.addLevelName(LogLevel.TRACE.value, "TRACE")


def level_value(level: Union[str, int, LogLevel]) -> int:
    """Numeric logging level from a name, a LogLevel or a number"""
    if isinstance(level, LogLevel):
        return level.value
    if isinstance(level, int):
        return level
    return LogLevel[level.upper()].value


class ColoredFormatter(logging.Formatter):
    """Console formatter coloring the level name"""

    COLORS = {
        'TRACE': '\033[36m',     # Cyan
        'DEBUG': '\033[34m',     # Blue
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        # color a copy, other handlers see the plain record
        colored = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(colored.levelname, self.RESET)
        colored.levelname = f"{color}{colored.levelname}{self.RESET}"
        return super().format(colored)


def setup_logger(name: str = ROOT_LOGGER,
                 level: Union[str, LogLevel] = "INFO",
                 log_file: Optional[str] = None,
                 console: bool = True) -> logging.Logger:
    """
    Configure a logger with console and/or file output.

    Existing handlers of the logger are replaced, so calling this twice
    does not duplicate output.

    Parameters
    ----------
    name : str
        Logger name, the package logger by default
    level : str or LogLevel
        TRACE, DEBUG, INFO, WARNING, ERROR or CRITICAL
    log_file : str, optional
        Also write plain-text records to this file
    console : bool
        Write colored records to stdout

    Returns
    -------
    logging.Logger
        The configured logger
    """
    value = level_value(level)
    logger = logging.getLogger(name)
    logger.setLevel(value)
    logger.handlers = []

    if console:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(value)
        handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
        logger.addHandler(handler)

    if log_file:
        handler = logging.FileHandler(log_file)
        handler.setLevel(value)
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get logger by name"""
    return logging.getLogger(name)


class LogContext:
    """Context manager for a temporary log level, e.g. tracing one propagation"""

    def __init__(self, logger: logging.Logger, level: Union[str, LogLevel]):
        self.logger = logger
        self.new_level = level_value(level)
        self.old_level = None

    def __enter__(self):
        self.old_level = self.logger.level
        self.logger.setLevel(self.new_level)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.setLevel(self.old_level)


@dataclass
class LoggerConfig:
    """Package logging settings.

    Attributes
    ----------
    default_level : str
        Level of the package logger and its handlers
    log_file : str, optional
        File receiving plain-text records
    console : bool
        Colored stdout output
    module_levels : dict
        Per-module overrides, e.g. ``{'pybrdc.satellite.ephemeris': 'DEBUG'}``
    """
    default_level: str = "INFO"
    log_file: Optional[str] = None
    console: bool = True
    module_levels: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, config: dict) -> 'LoggerConfig':
        """Build from a dictionary, ignoring unknown keys"""
        return cls(
            default_level=config.get('default_level', "INFO"),
            log_file=config.get('log_file'),
            console=config.get('console', True),
            module_levels=dict(config.get('module_levels', {})),
        )

    def level_for(self, module_name: str) -> str:
        """Level applying to a module, falling back to the default"""
        return self.module_levels.get(module_name, self.default_level)

    def apply(self) -> logging.Logger:
        """Configure the package logger, then the per-module overrides"""
        logger = setup_logger(ROOT_LOGGER, self.default_level, self.log_file, self.console)
        for module, level in self.module_levels.items():
            logging.getLogger(module).setLevel(level_value(level))
        # handlers sit on the package logger; let overrides below its level through
        lowest = min([level_value(self.default_level)]
                     + [level_value(level) for level in self.module_levels.values()])
        for handler in logger.handlers:
            handler.setLevel(lowest)
        return logger


def setup_logger_from_config(config: dict) -> logging.Logger:
    """Setup loggers from configuration dictionary

    Example config:
    {
        'default_level': 'INFO',
        'log_file': 'brdc.log',
        'console': True,
        'module_levels': {
            'pybrdc.satellite.satellite_position': 'TRACE',
            'pybrdc.satellite.ephemeris': 'DEBUG',
        }
    }
    """
    return LoggerConfig.from_dict(config).apply()
