"""
Centralized logging configuration for the update status tools.

Provides structured logging with loguru. Console output always goes to stderr so
that stdout stays reserved for machine-readable results (status bar JSON).
"""

import os
import sys
from pathlib import Path
from typing import Any

from loguru import logger


class LoggingManager:
    """Manages centralized logging configuration across the tools."""

    def __init__(self, service_name: str = "nixos-update-status"):
        """
        Initialize logging manager.

        Args:
            service_name: Name of the service for logging identification
        """
        self.service_name = service_name
        self._configured = False

    def configure_logging(
        self,
        level: str = "WARNING",
        enable_file_logging: bool = False,
        log_file_path: Path | None = None,
        structured_format: bool = True,
    ) -> None:
        """
        Configure structured logging for the entire application.

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR)
            enable_file_logging: Whether to enable file logging
            log_file_path: Path for log file (auto-generated if None)
            structured_format: Whether to use structured JSON format
        """
        if self._configured:
            return

        # Remove default loguru handler
        logger.remove()

        logger.add(
            sys.stderr,
            format=self._get_console_format(structured_format),
            level=level,
            colorize=None,
            backtrace=True,
            diagnose=False,
        )

        if enable_file_logging:
            if log_file_path is None:
                state_home = os.getenv(
                    "XDG_STATE_HOME", str(Path.home() / ".local" / "state")
                )
                log_file_path = (
                    Path(state_home) / self.service_name / f"{self.service_name}.log"
                )

            log_file_path.parent.mkdir(parents=True, exist_ok=True)

            logger.add(
                str(log_file_path),
                format=self._get_file_format(structured_format),
                level=level,
                rotation="10 MB",
                retention="30 days",
                compression="gz",
                backtrace=True,
                diagnose=False,
                serialize=structured_format,
            )

        logger.configure(extra={"service_name": self.service_name})

        self._configured = True
        logger.debug(
            "Logging configured",
            service=self.service_name,
            level=level,
            file_logging=enable_file_logging,
            structured=structured_format,
        )

    def _get_console_format(self, structured: bool) -> str:
        """Get console logging format."""
        if structured:
            return (
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<level>{message}</level> | "
                "{extra}"
            )
        else:
            return (
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<level>{message}</level>"
            )

    def _get_file_format(self, structured: bool) -> str:
        """Get file logging format."""
        if structured:
            # JSON format handled by serialize=True
            return "{time} | {level} | {name}:{function}:{line} | {message} | {extra}"
        else:
            return (
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
                "{name}:{function}:{line} | {message}"
            )

    def get_logger(self, name: str) -> Any:
        """
        Get a logger instance with the given name.

        Args:
            name: Logger name (usually __name__)

        Returns:
            Configured logger instance
        """
        return logger.bind(component=name)


# Global logging manager instance
_logging_manager: LoggingManager | None = None


def get_logging_manager() -> LoggingManager:
    """Get or create the global logging manager instance."""
    global _logging_manager
    if _logging_manager is None:
        _logging_manager = LoggingManager()
    return _logging_manager


def configure_logging(
    level: str | None = None,
    structured: bool = True,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure application logging with environment-based defaults.

    Args:
        level: Logging level, falls back to LOG_LEVEL or WARNING
        structured: Enable structured logging with bound extras
        enable_file_logging: Enable file logging, falls back to ENABLE_FILE_LOGGING
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "WARNING").upper()

    if enable_file_logging is None:
        enable_file_logging = (
            os.getenv("ENABLE_FILE_LOGGING", "false").lower() == "true"
        )

    manager = get_logging_manager()
    manager.configure_logging(
        level=level,
        structured_format=structured,
        enable_file_logging=enable_file_logging,
    )


def get_logger(name: str) -> Any:
    """
    Get a logger instance for the given component.

    Args:
        name: Component name (usually __name__)

    Returns:
        Configured logger instance
    """
    manager = get_logging_manager()
    return manager.get_logger(name)
